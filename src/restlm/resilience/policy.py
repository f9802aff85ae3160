from __future__ import annotations
import random
from dataclasses import dataclass, replace
from typing import Optional

# 429 TooManyRequests, 500 InternalServerError, 502 BadGateway,
# 503 ServiceUnavailable, 504 GatewayTimeout
TRANSIENT_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

_STRATEGIES = ("fixed", "exponential")


def is_transient_http_error(code: int) -> bool:
    """
    True when the status likely resolves on its own (overload, gateway hiccup).
    Everything else, 4xx caller errors included, is permanent.
    """
    return code in TRANSIENT_STATUS_CODES


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    pause_ms: int = 1000
    timeout_s: Optional[float] = None  # None: no client-side timeout
    strategy: str = "fixed"            # "fixed" | "exponential"
    max_pause_ms: int = 8000           # cap for "exponential"

    def __post_init__(self):
        if self.max_attempts < 0:
            raise ValueError("max_attempts must be >= 0")
        if self.pause_ms < 0:
            raise ValueError("pause_ms must be >= 0")
        if self.strategy not in _STRATEGIES:
            raise ValueError(f"Unknown retry strategy '{self.strategy}'. Allowed: {list(_STRATEGIES)}")

    def compute_backoff(self, retry_count: int) -> float:
        """Seconds to wait before retry number ``retry_count + 1``."""
        if self.strategy == "exponential":
            delay_ms = min(self.max_pause_ms, self.pause_ms * (2 ** retry_count)) + random.random() * 100
            return delay_ms / 1000.0
        return self.pause_ms / 1000.0

    def with_overrides(self, **changes) -> "RetryPolicy":
        return replace(self, **changes)
