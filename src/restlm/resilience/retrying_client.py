from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional

import httpx

from restlm.core.errors import MalformedResponseError
from restlm.core.result import Result, error, success
from restlm.providers.adapters import ProviderKind, build_request, extract_text
from restlm.resilience.policy import RetryPolicy, is_transient_http_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderConfig:
    url: str
    headers: Mapping[str, str]
    default_params: Mapping[str, Any]
    kind: ProviderKind = ProviderKind.OPENAI_STYLE
    name: str = "custom"

    def __post_init__(self):
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        object.__setattr__(self, "default_params", MappingProxyType(dict(self.default_params)))


class RetryingCompletionClient:
    """
    One provider endpoint behind complete(prompt) -> Result[str].

    - non-200 statuses come back as error(...) values; only transient ones
      (see is_transient_http_error) are retried, with the policy's delay
    - the policy is snapshotted per call, so setting retry_max_attempts /
      retry_pause_ms never disturbs a call already in flight
    - owns a single httpx.AsyncClient for its lifetime
    """

    def __init__(
        self,
        config: ProviderConfig,
        *,
        policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.policy = policy or RetryPolicy()
        # Non-2xx responses are inspected, never raised (no raise_for_status).
        self._http = httpx.AsyncClient(headers=dict(config.headers), transport=transport)

    # ---- tunables (copy-on-write over the frozen policy) ----

    @property
    def retry_max_attempts(self) -> int:
        return self.policy.max_attempts

    @retry_max_attempts.setter
    def retry_max_attempts(self, value: int) -> None:
        self.policy = self.policy.with_overrides(max_attempts=int(value))

    @property
    def retry_pause_ms(self) -> int:
        return self.policy.pause_ms

    @retry_pause_ms.setter
    def retry_pause_ms(self, value: int) -> None:
        self.policy = self.policy.with_overrides(pause_ms=int(value))

    # ---- core ----

    async def complete(self, prompt: str) -> Result[str]:
        policy = self.policy
        retry_count = 0
        while True:
            params = build_request(prompt, self.config.kind, self.config.default_params)
            logger.debug("[%s] POST %s params=%s", self.config.name, self.config.url, params)

            resp = await self._http.post(self.config.url, json=params, timeout=policy.timeout_s)
            if resp.status_code == 200:
                try:
                    payload = resp.json()
                except ValueError as e:
                    raise MalformedResponseError(f"Response body is not JSON: {resp.text[:200]!r}") from e
                return success(extract_text(payload, self.config.kind))

            if not is_transient_http_error(resp.status_code) or retry_count >= policy.max_attempts:
                logger.warning(
                    "[%s] giving up after %d attempt(s): HTTP %d",
                    self.config.name, retry_count + 1, resp.status_code,
                )
                return error(f"REST API error {resp.status_code}: {resp.reason_phrase}")

            delay = policy.compute_backoff(retry_count)
            logger.info(
                "[%s] HTTP %d, retry %d/%d in %.2fs",
                self.config.name, resp.status_code, retry_count + 1, policy.max_attempts, delay,
            )
            await asyncio.sleep(delay)
            retry_count += 1

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "RetryingCompletionClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
