from __future__ import annotations
from typing import Protocol

from restlm.core.result import Result


class CompletionClient(Protocol):
    """
    Interface callers use to talk to any completion backend.
    """

    retry_max_attempts: int
    retry_pause_ms: int

    async def complete(self, prompt: str) -> Result[str]:
        """
        Returns success(<completion text>) or error(<message>) for HTTP-level
        failures. Configuration and malformed-response faults are raised.
        """
        ...

    async def aclose(self) -> None:
        """
        Release the underlying HTTP transport.
        """
        ...
