# llm/llm_client.py
"""
LLM Client
Single-shot JSON completions from one of three providers:
- gemini: Google Gemini through google-genai
- openai: OpenAI chat completions in JSON mode
- ollama: local Ollama over its HTTP API

All clients share one generation config and raise AIGenerationError when
the provider call itself fails.
"""

from dataclasses import dataclass
from typing import Optional

import httpx
from loguru import logger

from travelbook.exceptions import AIGenerationError


@dataclass(frozen=True)
class GenerationConfig:
    temperature: float = 0.7
    top_p: float = 0.95
    top_k: int = 64
    max_output_tokens: int = 8192


DEFAULT_CONFIG = GenerationConfig()


class LLMClient:
    """Base class: `complete_json` returns the raw model text"""

    provider = "none"
    model = ""

    async def complete_json(self, prompt: str) -> str:
        raise NotImplementedError

    async def aclose(self):
        pass


class GeminiClient(LLMClient):
    provider = "gemini"

    def __init__(self, api_key: str, model: str = "gemini-flash-latest",
                 timeout: float = 120.0, config: GenerationConfig = DEFAULT_CONFIG):
        from google import genai
        from google.genai import types

        self._types = types
        self._client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )
        self.model = model
        self.config = config

    async def complete_json(self, prompt: str) -> str:
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=self._types.GenerateContentConfig(
                    temperature=self.config.temperature,
                    top_p=self.config.top_p,
                    top_k=self.config.top_k,
                    max_output_tokens=self.config.max_output_tokens,
                    response_mime_type="application/json",
                ),
            )
        except Exception as e:
            logger.error(f"Gemini API error: {e}")
            raise AIGenerationError(detail=str(e)) from e
        return response.text or ""


class OpenAIClient(LLMClient):
    provider = "openai"

    def __init__(self, api_key: str, model: str = "gpt-4o-mini",
                 timeout: float = 120.0, config: GenerationConfig = DEFAULT_CONFIG):
        from openai import AsyncOpenAI

        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout)
        self.model = model
        self.config = config

    async def complete_json(self, prompt: str) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.config.temperature,
                top_p=self.config.top_p,
                max_tokens=self.config.max_output_tokens,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise AIGenerationError(detail=str(e)) from e
        return response.choices[0].message.content or ""

    async def aclose(self):
        await self._client.close()


class OllamaClient(LLMClient):
    provider = "ollama"

    def __init__(self, client: httpx.AsyncClient, base_url: str = "http://localhost:11434",
                 model: str = "llama3.2", timeout: float = 120.0,
                 config: GenerationConfig = DEFAULT_CONFIG):
        self._client = client
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.config = config

    async def complete_json(self, prompt: str) -> str:
        try:
            response = await self._client.post(
                f"{self.base_url}/api/generate",
                json={
                    "model": self.model,
                    "prompt": prompt,
                    "stream": False,
                    "format": "json",
                    "options": {
                        "temperature": self.config.temperature,
                        "top_p": self.config.top_p,
                        "top_k": self.config.top_k,
                        "num_predict": self.config.max_output_tokens,
                    },
                },
                timeout=self.timeout,
            )
        except httpx.ConnectError as e:
            logger.error("Cannot connect to Ollama. Make sure Ollama is running.")
            raise AIGenerationError(detail=str(e)) from e
        except httpx.HTTPError as e:
            logger.error(f"Ollama API error: {e}")
            raise AIGenerationError(detail=str(e)) from e

        if response.status_code != 200:
            logger.error(f"Ollama error: {response.status_code}")
            raise AIGenerationError(detail=f"Ollama HTTP {response.status_code}")
        return response.json().get("response", "")


def create_llm_client(settings, http_client: Optional[httpx.AsyncClient] = None) -> LLMClient:
    """Build the client for the configured provider"""
    provider = settings.llm_provider
    if provider == "gemini":
        client = GeminiClient(settings.GEMINI_API_KEY, settings.GEMINI_MODEL, settings.LLM_TIMEOUT)
    elif provider == "openai":
        client = OpenAIClient(settings.OPENAI_API_KEY, settings.OPENAI_MODEL, settings.LLM_TIMEOUT)
    elif provider == "ollama":
        client = OllamaClient(http_client or httpx.AsyncClient(), settings.OLLAMA_BASE_URL,
                              settings.OLLAMA_MODEL, settings.LLM_TIMEOUT)
    else:
        raise ValueError(f"Unknown LLM provider: {provider}")
    logger.info(f"LLM Provider: {client.provider} ({client.model})")
    return client
