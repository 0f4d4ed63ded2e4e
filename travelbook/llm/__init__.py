# llm/__init__.py
"""
LLM Components Package

Contains LLM-powered components:
- prompts: itinerary prompt template and parameter lookups
- llm_client: Gemini / OpenAI / Ollama JSON completion clients
- itinerary_generator: model output -> validated itinerary
- ai_planner: generation attempt plus photo enrichment
"""

from .prompts import ITINERARY_PROMPT, build_prompt
from .llm_client import (
    LLMClient, GeminiClient, OpenAIClient, OllamaClient, GenerationConfig, create_llm_client,
)
from .itinerary_generator import ItineraryGenerator
from .ai_planner import AIPlanner, collect_activities, apply_images

__all__ = [
    "ITINERARY_PROMPT",
    "build_prompt",
    "LLMClient",
    "GeminiClient",
    "OpenAIClient",
    "OllamaClient",
    "GenerationConfig",
    "create_llm_client",
    "ItineraryGenerator",
    "AIPlanner",
    "collect_activities",
    "apply_images",
]
