# llm/ai_planner.py
"""
AI Planner
Runs one generation attempt end to end: generate the itinerary, then
decorate its days with photos.

Attempt states: idle -> generating -> success | error. There is no
cancellation and no partial result; a failed attempt carries only the
user-facing error message.
"""

from typing import Dict, List, Optional

from loguru import logger

from travelbook.exceptions import AIGenerationError
from travelbook.llm.itinerary_generator import ItineraryGenerator
from travelbook.schemas.travel_schemas import AIItinerary, AIItineraryRequest, GenerationResult, GenerationStatus
from travelbook.services.image_service import MAX_ACTIVITY_LOOKUPS, ImageService


def collect_activities(itinerary: AIItinerary, limit: int = MAX_ACTIVITY_LOOKUPS) -> List[str]:
    """Distinct morning and afternoon activities in day order"""
    activities: List[str] = []
    for day in itinerary.days:
        for block in (day.morning, day.afternoon):
            if block.activity and block.activity not in activities:
                activities.append(block.activity)
    return activities[:limit]


def apply_images(itinerary: AIItinerary, main: Optional[str], images: Dict[str, str]) -> AIItinerary:
    """
    Set each day's image from its first matching activity
    (morning, afternoon, evening), else the destination's main image.
    """
    days = []
    for day in itinerary.days:
        image = next(
            (images[block.activity] for block in (day.morning, day.afternoon, day.evening)
             if block.activity in images),
            main,
        )
        days.append(day.model_copy(update={"image": image}) if image else day)

    cover = main or next((d.image for d in days if d.image), None)
    return itinerary.model_copy(update={"days": days, "cover_image": cover})


class AIPlanner:

    def __init__(self, generator: ItineraryGenerator, images: ImageService):
        self.generator = generator
        self.images = images

    async def enrich(self, itinerary: AIItinerary) -> AIItinerary:
        activities = collect_activities(itinerary)
        main, images = await self.images.get_itinerary_images(itinerary.request.destination, activities)
        return apply_images(itinerary, main, images)

    async def plan(self, request: AIItineraryRequest) -> GenerationResult:
        """One generation attempt; AI failures come back as an error result"""
        logger.info(f"Itinerary attempt for {request.destination}: {GenerationStatus.GENERATING.value}")
        try:
            itinerary = await self.generator.generate(request)
        except AIGenerationError as e:
            logger.warning(f"Itinerary attempt for {request.destination}: {GenerationStatus.ERROR.value} "
                           f"({type(e).__name__})")
            return GenerationResult(status=GenerationStatus.ERROR, error=e.message)

        itinerary = await self.enrich(itinerary)
        logger.info(f"Itinerary attempt for {request.destination}: {GenerationStatus.SUCCESS.value}")
        return GenerationResult(status=GenerationStatus.SUCCESS, itinerary=itinerary)
