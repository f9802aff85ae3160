from __future__ import annotations
from typing import Callable, Dict, NamedTuple
from importlib import import_module


class ProviderEntry(NamedTuple):
    name: str
    key_var: str               # env var whose presence selects this provider
    from_env: Callable         # (env, *, policy=None, transport=None) -> client


class ProviderRegistry:
    _entries: Dict[str, ProviderEntry] = {}

    @classmethod
    def register(cls, name: str, *, key_var: str) -> Callable[[Callable], Callable]:
        name = name.lower()
        def deco(fn: Callable) -> Callable:
            cls._entries[name] = ProviderEntry(name=name, key_var=key_var, from_env=fn)
            return fn
        return deco

    @classmethod
    def get(cls, name: str) -> ProviderEntry:
        key = name.lower()
        if key not in cls._entries:
            raise KeyError(f"Provider '{name}' not registered. Known: {', '.join(cls.names())}")
        return cls._entries[key]

    @classmethod
    def names(cls) -> list[str]:
        return list(cls._entries)

    @classmethod
    def ensure_imports(cls) -> None:
        """
        Import built-in factories so their @register decorators run.
        Call once at bootstrap before get().
        """
        import_module("restlm.providers.factories")
