from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import httpx
from dotenv import load_dotenv

from .config_loader import load_config
from .core.errors import MissingEnvironmentVariable
from .logging_config import configure_logging
from .providers.registry import ProviderRegistry
from .resilience.policy import RetryPolicy
from .resilience.retrying_client import RetryingCompletionClient
from .secrets.sources import SecretsResolver

logger = logging.getLogger(__name__)

# Presence of the first key variable found decides the provider.
SELECTION_ORDER = ("openai", "azure", "cohere")


def create_language_model(
    env: Mapping[str, Optional[str]],
    *,
    policy: Optional[RetryPolicy] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RetryingCompletionClient:
    """
    Pick a provider from an environment mapping:
      OPENAI_API_KEY (+ OPENAI_MODEL, OPENAI_ENDPOINT?, OPENAI_ORGANIZATION?)
      AZURE_OPENAI_API_KEY (+ AZURE_OPENAI_ENDPOINT)
      COHERE_API_KEY (+ COHERE_ENDPOINT?, MAX_TOKENS?)
    Raises MissingEnvironmentVariable when no key, or a required companion, is set.
    """
    ProviderRegistry.ensure_imports()
    entries = [ProviderRegistry.get(name) for name in SELECTION_ORDER]
    for entry in entries:
        if env.get(entry.key_var):
            logger.debug("selected provider %r via %s", entry.name, entry.key_var)
            return entry.from_env(env, policy=policy, transport=transport)
    raise MissingEnvironmentVariable(" or ".join(e.key_var for e in entries))


def build_policy(cfg: Dict[str, Any]) -> RetryPolicy:
    retry = cfg["retry"]
    return RetryPolicy(
        max_attempts=retry["max_attempts"],
        pause_ms=retry["pause_ms"],
        strategy=retry["strategy"],
        timeout_s=(cfg.get("http") or {}).get("timeout_s"),
    )


def build_app(
    config_path: Path,
    env: Optional[Mapping[str, Optional[str]]] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """
    Composition root: load .env + YAML, resolve secrets, configure logging and
    build the retrying client.
    Returns: dict with cfg, policy, provider name, client.
    """
    if env is None:
        load_dotenv()
        env = dict(os.environ)
    cfg = load_config(config_path)
    configure_logging(cfg["logging"]["level"])

    secrets_cfg = cfg.get("secrets") or {}
    resolver = SecretsResolver(
        method=secrets_cfg.get("method", "env"),
        mapping=secrets_cfg.get("mapping") or {},
        env=env,
    )
    ProviderRegistry.ensure_imports()
    key_vars = [ProviderRegistry.get(name).key_var for name in SELECTION_ORDER]
    env = resolver.fill_env(env, key_vars)

    policy = build_policy(cfg)
    provider_name = cfg["provider"]
    if provider_name == "auto":
        client = create_language_model(env, policy=policy, transport=transport)
    else:
        client = ProviderRegistry.get(provider_name).from_env(env, policy=policy, transport=transport)

    return {
        "cfg": cfg,
        "policy": policy,
        "provider": client.config.name,
        "client": client,
    }
