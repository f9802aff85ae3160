class RestLMError(Exception):
    """Base class for restlm failures that are raised rather than returned."""

class ConfigurationError(RestLMError):
    """
    Fatal: missing credential, endpoint or invalid setting detected while
    building a client. The fix is change env/config, not retry.
    """

class MissingEnvironmentVariable(ConfigurationError):
    def __init__(self, name: str):
        super().__init__(f"Missing environment variable: {name}")
        self.name = name

class MalformedResponseError(RestLMError):
    """
    A 200 response whose body lacks the structure the provider shape promises
    (no choices/generations, empty list, missing message).
    """
