# src/restlm/providers/adapters.py
from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Mapping

from restlm.core.errors import MalformedResponseError

TEMPERATURE = 0.2


class ProviderKind(str, Enum):
    OPENAI_STYLE = "openai_style"      # chat/completions: OpenAI, Azure OpenAI
    GENERATE_STYLE = "generate_style"  # v1/generate: Cohere


def build_request(prompt: str, kind: ProviderKind, default_params: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Map a prompt onto the provider's request body. default_params go first so
    the per-call fields always win.
    """
    if kind is ProviderKind.OPENAI_STYLE:
        return {
            **default_params,
            "messages": [{"role": "user", "content": prompt}],
            "n": 1,
            "temperature": TEMPERATURE,
        }
    if kind is ProviderKind.GENERATE_STYLE:
        return {
            **default_params,
            "prompt": prompt,
            "k": 0,
            "stop_sequences": [],
            "return_likelihoods": "NONE",
            "temperature": TEMPERATURE,
        }
    raise ValueError(f"Unsupported provider kind: {kind!r}")


def _first(payload: Any, key: str) -> Dict[str, Any]:
    items = payload.get(key) if isinstance(payload, dict) else None
    if not isinstance(items, list) or not items or not isinstance(items[0], dict):
        raise MalformedResponseError(f"Response has no '{key}[0]' entry")
    return items[0]


def extract_text(payload: Any, kind: ProviderKind) -> str:
    """
    Pull the completion text out of a 200 response body.

    Both shapes share one policy: a missing structural path raises
    MalformedResponseError, an explicit null text becomes "".
    """
    if kind is ProviderKind.OPENAI_STYLE:
        choice = _first(payload, "choices")
        message = choice.get("message")
        if not isinstance(message, dict):
            raise MalformedResponseError("Response has no 'choices[0].message' entry")
        return message.get("content") or ""
    if kind is ProviderKind.GENERATE_STYLE:
        generation = _first(payload, "generations")
        if "text" not in generation:
            raise MalformedResponseError("Response has no 'generations[0].text' entry")
        return generation["text"] or ""
    raise ValueError(f"Unsupported provider kind: {kind!r}")
