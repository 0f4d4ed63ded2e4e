# services/itinerary_editor.py
"""
Structural edits on a saved itinerary.

Every function returns a new AIItinerary and leaves its input untouched.
Day numbers always stay contiguous starting at 1.
"""

from typing import List

from travelbook.exceptions import BusinessRuleError, ValidationError
from travelbook.schemas.travel_schemas import (
    Accommodation,
    ActivityBlock,
    AIItinerary,
    AIItineraryDay,
    ItineraryUpdate,
    MealRecommendation,
    MealType,
)


def _check_index(items: list, index: int, what: str):
    if not 0 <= index < len(items):
        raise ValidationError(f"Nincs ilyen {what}: {index + 1}.")


def blank_day(number: int) -> AIItineraryDay:
    """Placeholder day with empty blocks and the three meal slots"""
    return AIItineraryDay(
        day=number,
        title=f"{number}. nap",
        description="",
        morning=ActivityBlock(duration="3-4 óra"),
        afternoon=ActivityBlock(duration="3-4 óra"),
        evening=ActivityBlock(duration="2-3 óra"),
        accommodation=Accommodation(),
        meals=[MealRecommendation(type=meal) for meal in MealType],
    )


def renumber(days: List[AIItineraryDay]) -> List[AIItineraryDay]:
    return [day.model_copy(update={"day": i}) for i, day in enumerate(days, start=1)]


def add_day(itinerary: AIItinerary) -> AIItinerary:
    days = [*itinerary.days, blank_day(len(itinerary.days) + 1)]
    return itinerary.model_copy(update={"days": days})


def delete_day(itinerary: AIItinerary, index: int) -> AIItinerary:
    """Remove the day at `index` and renumber the rest"""
    _check_index(itinerary.days, index, "nap")
    if len(itinerary.days) <= 1:
        raise BusinessRuleError("Legalább egy napnak maradnia kell.")
    remaining = [day for i, day in enumerate(itinerary.days) if i != index]
    return itinerary.model_copy(update={"days": renumber(remaining)})


def update_day(itinerary: AIItinerary, index: int, day: AIItineraryDay) -> AIItinerary:
    """Replace one day's content; its number is kept"""
    _check_index(itinerary.days, index, "nap")
    days = list(itinerary.days)
    days[index] = day.model_copy(update={"day": index + 1})
    return itinerary.model_copy(update={"days": days})


def add_tip(itinerary: AIItinerary, text: str = "") -> AIItinerary:
    return itinerary.model_copy(update={"tips": [*itinerary.tips, text]})


def update_tip(itinerary: AIItinerary, index: int, text: str) -> AIItinerary:
    _check_index(itinerary.tips, index, "tipp")
    tips = list(itinerary.tips)
    tips[index] = text
    return itinerary.model_copy(update={"tips": tips})


def delete_tip(itinerary: AIItinerary, index: int) -> AIItinerary:
    _check_index(itinerary.tips, index, "tipp")
    return itinerary.model_copy(update={"tips": [t for i, t in enumerate(itinerary.tips) if i != index]})


def prepare_for_save(itinerary: AIItinerary) -> ItineraryUpdate:
    """Wholesale update payload; blank tips are dropped"""
    return ItineraryUpdate(
        title=itinerary.title,
        summary=itinerary.summary,
        days=itinerary.days,
        tips=[tip for tip in itinerary.tips if tip.strip()],
        best_time_to_visit=itinerary.best_time_to_visit,
        estimated_budget=itinerary.estimated_budget,
    )
