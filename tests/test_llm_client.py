import asyncio
import json

import httpx
import pytest

from travelbook.config import Settings
from travelbook.exceptions import AIGenerationError
from travelbook.llm.llm_client import OllamaClient, create_llm_client


def run(coro):
    return asyncio.run(coro)


def ollama(handler) -> OllamaClient:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OllamaClient(client, "http://ollama.test", "llama3.2", timeout=5)


def test_ollama_requests_json_output():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return httpx.Response(200, json={"response": '{"title": "Róma"}'})

    text = run(ollama(handler).complete_json("Készíts útitervet"))
    assert json.loads(text) == {"title": "Róma"}
    assert seen["format"] == "json" and seen["stream"] is False
    assert seen["options"]["temperature"] == 0.7
    assert seen["options"]["top_k"] == 64
    assert seen["options"]["num_predict"] == 8192


def test_ollama_http_error():
    client = ollama(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(AIGenerationError):
        run(client.complete_json("x"))


def test_ollama_unreachable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(AIGenerationError) as exc:
        run(ollama(handler).complete_json("x"))
    assert "connection refused" in exc.value.detail


def test_provider_selection():
    settings = Settings()
    settings.LLM_PROVIDER = ""
    settings.GEMINI_API_KEY = ""
    settings.OPENAI_API_KEY = ""
    assert settings.llm_provider == "ollama"
    settings.OPENAI_API_KEY = "sk-test"
    assert settings.llm_provider == "openai"
    settings.GEMINI_API_KEY = "g-test"
    assert settings.llm_provider == "gemini"
    settings.LLM_PROVIDER = "Ollama"
    assert settings.llm_provider == "ollama"

    client = create_llm_client(settings, httpx.AsyncClient())
    assert (client.provider, client.model) == ("ollama", settings.OLLAMA_MODEL)


def test_unknown_provider():
    settings = Settings()
    settings.LLM_PROVIDER = "huggingface"
    with pytest.raises(ValueError):
        create_llm_client(settings)
