# src/restlm/providers/factories.py
from __future__ import annotations
from typing import Mapping, Optional

import httpx

from restlm.core.errors import ConfigurationError, MissingEnvironmentVariable
from restlm.providers.adapters import ProviderKind
from restlm.providers.registry import ProviderRegistry
from restlm.resilience.policy import RetryPolicy
from restlm.resilience.retrying_client import ProviderConfig, RetryingCompletionClient

OPENAI_ENDPOINT = "https://api.openai.com/v1/chat/completions"
COHERE_ENDPOINT = "https://api.cohere.ai/v1/generate"
COHERE_MODEL = "command"
DEFAULT_MAX_TOKENS = "500"

Env = Mapping[str, Optional[str]]


def _require_key(provider: str, api_key: str) -> str:
    if not api_key:
        raise ConfigurationError(f"No API key for '{provider}'")
    return api_key


def _require_env(env: Env, name: str) -> str:
    val = env.get(name)
    if not val:
        raise MissingEnvironmentVariable(name)
    return val


def create_openai_language_model(
    api_key: str,
    model: str,
    endpoint: str = OPENAI_ENDPOINT,
    org: str = "",
    *,
    policy: Optional[RetryPolicy] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RetryingCompletionClient:
    config = ProviderConfig(
        url=endpoint,
        headers={
            "Authorization": f"Bearer {_require_key('openai', api_key)}",
            "OpenAI-Organization": org,
        },
        default_params={"model": model},
        kind=ProviderKind.OPENAI_STYLE,
        name="openai",
    )
    return RetryingCompletionClient(config, policy=policy, transport=transport)


def create_azure_openai_language_model(
    api_key: str,
    endpoint: str,
    *,
    policy: Optional[RetryPolicy] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RetryingCompletionClient:
    """
    endpoint must be the full deployment URL, e.g.
    https://{resource}.openai.azure.com/openai/deployments/{deployment}/chat/completions?api-version=2023-05-15
    The deployment picks the model, so no default params are sent.
    """
    if not endpoint:
        raise ConfigurationError("No endpoint for 'azure'")
    config = ProviderConfig(
        url=endpoint,
        headers={"api-key": _require_key("azure", api_key)},
        default_params={},
        kind=ProviderKind.OPENAI_STYLE,
        name="azure",
    )
    return RetryingCompletionClient(config, policy=policy, transport=transport)


def create_cohere_language_model(
    api_key: str,
    model: str = COHERE_MODEL,
    endpoint: str = COHERE_ENDPOINT,
    max_tokens: str = DEFAULT_MAX_TOKENS,
    *,
    policy: Optional[RetryPolicy] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RetryingCompletionClient:
    try:
        max_tokens_int = int(max_tokens)
    except (TypeError, ValueError):
        raise ConfigurationError(f"max_tokens must be an integer, got {max_tokens!r}")
    config = ProviderConfig(
        url=endpoint,
        # Upper-case BEARER is the scheme existing Cohere callers send; do not normalise.
        headers={"Authorization": f"BEARER {_require_key('cohere', api_key)}"},
        default_params={"model": model, "max_tokens": max_tokens_int},
        kind=ProviderKind.GENERATE_STYLE,
        name="cohere",
    )
    return RetryingCompletionClient(config, policy=policy, transport=transport)


# ----- env-driven constructors (used by bootstrap selection) -----

@ProviderRegistry.register("openai", key_var="OPENAI_API_KEY")
def openai_from_env(env: Env, **kwargs) -> RetryingCompletionClient:
    return create_openai_language_model(
        _require_env(env, "OPENAI_API_KEY"),
        _require_env(env, "OPENAI_MODEL"),
        env.get("OPENAI_ENDPOINT") or OPENAI_ENDPOINT,
        env.get("OPENAI_ORGANIZATION") or "",
        **kwargs,
    )


@ProviderRegistry.register("azure", key_var="AZURE_OPENAI_API_KEY")
def azure_from_env(env: Env, **kwargs) -> RetryingCompletionClient:
    return create_azure_openai_language_model(
        _require_env(env, "AZURE_OPENAI_API_KEY"),
        _require_env(env, "AZURE_OPENAI_ENDPOINT"),
        **kwargs,
    )


@ProviderRegistry.register("cohere", key_var="COHERE_API_KEY")
def cohere_from_env(env: Env, **kwargs) -> RetryingCompletionClient:
    return create_cohere_language_model(
        _require_env(env, "COHERE_API_KEY"),
        COHERE_MODEL,
        env.get("COHERE_ENDPOINT") or COHERE_ENDPOINT,
        env.get("MAX_TOKENS") or DEFAULT_MAX_TOKENS,
        **kwargs,
    )
