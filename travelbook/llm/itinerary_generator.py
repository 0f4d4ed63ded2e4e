# llm/itinerary_generator.py
"""
Itinerary Generator
Prompt -> model -> JSON parse -> strict shape check -> AIItinerary.

A response that is not JSON, or JSON that does not match the generation
shape, fails the attempt. Nothing is retried or patched up.
"""

import json
import uuid
from datetime import datetime, timezone

from loguru import logger
from pydantic import ValidationError

from travelbook.exceptions import AIInvalidJSONError, AIResponseShapeError
from travelbook.llm.llm_client import LLMClient
from travelbook.llm.prompts import build_prompt
from travelbook.schemas.travel_schemas import AIItinerary, AIItineraryRequest, GeneratedItinerary


class ItineraryGenerator:

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def generate(self, request: AIItineraryRequest) -> AIItinerary:
        logger.info(f"Generating {request.duration}-day itinerary for {request.destination} via {self.llm.provider}")
        text = await self.llm.complete_json(build_prompt(request))
        return self.parse_response(text, request)

    @staticmethod
    def parse_response(text: str, request: AIItineraryRequest) -> AIItinerary:
        """
        Turn raw model text into an unsaved itinerary.

        Raises:
            AIInvalidJSONError: text is not valid JSON
            AIResponseShapeError: JSON does not match the itinerary shape
        """
        try:
            raw = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            logger.error(f"Model returned invalid JSON: {e}; text starts with {text[:200]!r}")
            raise AIInvalidJSONError(detail=str(e)) from e

        try:
            validated = GeneratedItinerary.model_validate(raw)
        except ValidationError as e:
            for error in e.errors()[:10]:
                logger.error(f"Itinerary shape error at {'.'.join(map(str, error['loc']))}: {error['msg']}")
            raise AIResponseShapeError(detail=f"{e.error_count()} validation errors") from e

        now = datetime.now(timezone.utc)
        return AIItinerary.model_validate({
            **validated.model_dump(by_alias=True),
            "id": str(uuid.uuid4()),
            "userId": "",
            "request": request,
            "createdAt": now,
            "updatedAt": now,
            "isSaved": False,
        })
