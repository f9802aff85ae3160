# src/restlm/config_loader.py

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict
import yaml

from restlm.core.errors import ConfigurationError

_PROVIDERS = ("auto", "openai", "azure", "cohere")
_STRATEGIES = ("fixed", "exponential")
_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ConfigurationError, ValueError):
    pass


def _require(d: Dict[str, Any], dotted: str, typ: type) -> Any:
    cur: Any = d
    for k in dotted.split("."):
        if not isinstance(cur, dict) or k not in cur:
            raise ConfigError(f"Missing config key: {dotted}")
        cur = cur[k]
    # bool is an int subclass; reject it where a number is expected
    if typ is int and (isinstance(cur, bool) or not isinstance(cur, int)):
        raise ConfigError(f"'{dotted}' must be an integer")
    if typ is str and not isinstance(cur, str):
        raise ConfigError(f"'{dotted}' must be a string")
    return cur


def load_config(path: Path) -> Dict[str, Any]:
    if not path or not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    raw = yaml.safe_load(path.read_text())
    if not isinstance(raw, dict) or not raw:
        raise ConfigError(f"Config is empty or invalid YAML: {path}")

    # Validate required keys (no defaults here)
    _require(raw, "provider", str)
    _require(raw, "retry.max_attempts", int)
    _require(raw, "retry.pause_ms", int)
    _require(raw, "retry.strategy", str)
    _require(raw, "logging.level", str)

    if raw["retry"]["max_attempts"] < 0 or raw["retry"]["pause_ms"] < 0:
        raise ConfigError("'retry.max_attempts' and 'retry.pause_ms' must be >= 0")

    # Optional sections must be mappings when present
    for section in ("http", "secrets"):
        if raw.get(section) is not None and not isinstance(raw[section], dict):
            raise ConfigError(f"'{section}' must be a mapping")

    timeout = (raw.get("http") or {}).get("timeout_s")
    if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0):
        raise ConfigError("'http.timeout_s' must be a positive number or null")

    # Normalise enumerations
    provider = str(raw["provider"]).lower()
    strategy = str(raw["retry"]["strategy"]).lower()
    level = str(raw["logging"]["level"]).upper()
    if provider not in _PROVIDERS:
        raise ConfigError(f"Unknown provider '{provider}' (expected one of {', '.join(_PROVIDERS)}).")
    if strategy not in _STRATEGIES:
        raise ConfigError(f"Unknown retry.strategy '{strategy}' (expected 'fixed' or 'exponential').")
    if level not in _LEVELS:
        raise ConfigError(f"Unknown logging.level '{level}'.")
    raw["provider"] = provider
    raw["retry"]["strategy"] = strategy
    raw["logging"]["level"] = level

    return raw
