# src/restlm/secrets/sources.py

from __future__ import annotations
from typing import Protocol, Optional, Dict, Iterable, List, Mapping, Union
import getpass
import logging
import os

import keyring
from keyring.errors import KeyringError

logger = logging.getLogger(__name__)


class SecretSource(Protocol):
    def get(self, name: str, service: str) -> Optional[str]: ...


class EnvSource:
    def __init__(self, env: Optional[Mapping[str, Optional[str]]] = None):
        self._env = os.environ if env is None else env

    def get(self, name: str, service: str) -> Optional[str]:
        # service names only mean something to the keyring
        val = self._env.get(name)
        return val.strip() if val else None


class SystemKeyringSource:
    def get(self, name: str, service: str) -> Optional[str]:
        try:
            cred = keyring.get_credential(service, None)
            if cred and getattr(cred, "password", None):
                return cred.password.strip()
            for account in (name, "API_KEY", "default", getpass.getuser()):
                val = keyring.get_password(service, account)
                if val:
                    return val.strip()
        except KeyringError as e:
            logger.debug("keyring lookup for %r failed: %s", service, e)
        return None


_ALLOWED_METHODS = {"env", "keyring"}

def _normalise_methods(method: Union[str, Iterable[str]]) -> List[str]:
    if isinstance(method, str):
        methods = [method]
    else:
        methods = list(method)
    norm = []
    for m in methods:
        key = str(m).strip().lower()
        if key not in _ALLOWED_METHODS:
            raise ValueError(f"Unknown secrets method '{m}'. Allowed: {sorted(_ALLOWED_METHODS)}")
        if key not in norm:
            norm.append(key)
    return norm

def build_secret_sources(method: Union[str, Iterable[str]],
                         env: Optional[Mapping[str, Optional[str]]] = None) -> List[SecretSource]:
    sources: List[SecretSource] = []
    for name in _normalise_methods(method):
        if name == "env":
            sources.append(EnvSource(env))
        elif name == "keyring":
            sources.append(SystemKeyringSource())
    return sources


# Keyring service used when the config has no mapping for a variable.
_DEFAULT_SERVICES = {
    "OPENAI_API_KEY": "openai",
    "AZURE_OPENAI_API_KEY": "azure-openai",
    "COHERE_API_KEY": "cohere",
}


class SecretsResolver:
    """
    Resolve API-key variables using one or more methods in order.
    mapping: env var name -> keyring service
      e.g. { "OPENAI_API_KEY": "openai-work" }
    """
    def __init__(self, method: Union[str, Iterable[str]], mapping: Dict[str, str] | None = None,
                 env: Optional[Mapping[str, Optional[str]]] = None):
        self._sources = build_secret_sources(method, env)
        self._map = mapping or {}

    def secret(self, name: str) -> Optional[str]:
        service = self._map.get(name) or _DEFAULT_SERVICES.get(name) or name.lower()
        for src in self._sources:
            val = src.get(name, service)
            if val:
                return val
        return None

    def fill_env(self, env: Mapping[str, Optional[str]], names: Iterable[str]) -> Dict[str, Optional[str]]:
        """Copy of env with absent names filled from the configured sources."""
        filled = dict(env)
        for name in names:
            if not filled.get(name):
                val = self.secret(name)
                if val:
                    filled[name] = val
        return filled
