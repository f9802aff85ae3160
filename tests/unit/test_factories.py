# tests/unit/test_factories.py

from __future__ import annotations
import pytest

from fakes import ScriptedTransport, cohere_body, openai_body
from restlm.core.errors import ConfigurationError
from restlm.providers.adapters import ProviderKind
from restlm.providers.factories import (
    COHERE_ENDPOINT,
    OPENAI_ENDPOINT,
    create_azure_openai_language_model,
    create_cohere_language_model,
    create_openai_language_model,
)

AZURE_URL = "https://res.openai.azure.com/openai/deployments/gpt-4/chat/completions?api-version=2023-05-15"


@pytest.mark.asyncio
async def test_openai_wire_contract():
    transport = ScriptedTransport([(200, openai_body("hi"))])
    client = create_openai_language_model("sk-1", "gpt-4o-mini", org="org-9", transport=transport)
    assert (await client.complete("hello")).data == "hi"

    req = transport.requests[0]
    assert str(req.url) == OPENAI_ENDPOINT
    assert req.headers["Authorization"] == "Bearer sk-1"
    assert req.headers["OpenAI-Organization"] == "org-9"
    assert transport.bodies[0] == {
        "model": "gpt-4o-mini",
        "messages": [{"role": "user", "content": "hello"}],
        "n": 1,
        "temperature": 0.2,
    }


@pytest.mark.asyncio
async def test_azure_wire_contract():
    transport = ScriptedTransport([(200, openai_body("hi"))])
    client = create_azure_openai_language_model("az-key", AZURE_URL, transport=transport)
    assert (await client.complete("hello")).data == "hi"

    req = transport.requests[0]
    assert str(req.url) == AZURE_URL
    assert req.headers["api-key"] == "az-key"
    assert "Authorization" not in req.headers
    assert "model" not in transport.bodies[0]


@pytest.mark.asyncio
async def test_cohere_wire_contract():
    transport = ScriptedTransport([(200, cohere_body("gen"))])
    client = create_cohere_language_model("co-key", max_tokens="123", transport=transport)
    assert client.config.kind is ProviderKind.GENERATE_STYLE
    assert (await client.complete("hello")).data == "gen"

    req = transport.requests[0]
    assert str(req.url) == COHERE_ENDPOINT
    # wire format sent to Cohere is upper-case BEARER, kept as-is
    assert req.headers["Authorization"] == "BEARER co-key"
    body = transport.bodies[0]
    assert body["model"] == "command"
    assert body["max_tokens"] == 123
    assert body["prompt"] == "hello"


def test_empty_key_is_configuration_error():
    with pytest.raises(ConfigurationError):
        create_openai_language_model("", "gpt-4o-mini")
    with pytest.raises(ConfigurationError):
        create_azure_openai_language_model("k", "")


def test_bad_max_tokens():
    with pytest.raises(ConfigurationError):
        create_cohere_language_model("k", max_tokens="lots")


def test_provider_config_is_read_only():
    client = create_openai_language_model("sk-1", "m")
    with pytest.raises(TypeError):
        client.config.default_params["model"] = "other"  # type: ignore[index]
