# api/itineraries.py
"""
Itineraries API
AI generation, saving and editing of day-by-day travel plans.

Saved itineraries can be read by anyone holding the id (share links);
changes are limited to the owner.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from travelbook.api.deps import get_ctx, require_user
from travelbook.context import AppContext
from travelbook.exceptions import NotFoundError, PermissionDeniedError
from travelbook.schemas.travel_schemas import (
    AIItinerary,
    AIItineraryRequest,
    GenerationResult,
    GenerationStatus,
    ItineraryUpdate,
    ShareLink,
    User,
)
from travelbook.services import itinerary_editor

router = APIRouter(prefix="/api/itineraries", tags=["itineraries"])

ITINERARY_NOT_FOUND = "Az útiterv nem található."


async def _owned_itinerary(ctx: AppContext, itinerary_id: str, user: User) -> AIItinerary:
    itinerary = await ctx.itineraries.get_by_id(itinerary_id)
    if itinerary is None:
        raise NotFoundError(ITINERARY_NOT_FOUND)
    if itinerary.user_id != user.id and not user.is_admin:
        raise PermissionDeniedError()
    return itinerary


async def _store_edit(ctx: AppContext, itinerary: AIItinerary) -> AIItinerary:
    return await ctx.itineraries.update(itinerary.id, itinerary_editor.prepare_for_save(itinerary))


@router.post("/generate", response_model=GenerationResult)
async def generate_itinerary(body: AIItineraryRequest, user: User = Depends(require_user),
                             ctx: AppContext = Depends(get_ctx)):
    """Generate a new, unsaved itinerary"""
    result = await ctx.planner.plan(body)
    if result.status == GenerationStatus.ERROR:
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY,
                            content=result.model_dump(mode="json", by_alias=True))
    return result


@router.post("", response_model=AIItinerary, status_code=status.HTTP_201_CREATED)
async def save_itinerary(body: AIItinerary, user: User = Depends(require_user), ctx: AppContext = Depends(get_ctx)):
    return await ctx.itineraries.save(user.id, body)


@router.get("/mine", response_model=List[AIItinerary])
async def my_itineraries(user: User = Depends(require_user), ctx: AppContext = Depends(get_ctx)):
    return await ctx.itineraries.get_by_user_id(user.id)


@router.get("/{itinerary_id}", response_model=AIItinerary)
async def get_itinerary(itinerary_id: str, ctx: AppContext = Depends(get_ctx)):
    itinerary = await ctx.itineraries.get_by_id(itinerary_id)
    if itinerary is None:
        raise NotFoundError(ITINERARY_NOT_FOUND)
    return itinerary


@router.put("/{itinerary_id}", response_model=AIItinerary)
async def update_itinerary(itinerary_id: str, body: ItineraryUpdate, user: User = Depends(require_user),
                           ctx: AppContext = Depends(get_ctx)):
    await _owned_itinerary(ctx, itinerary_id, user)
    if body.tips is not None:
        body = body.model_copy(update={"tips": [tip for tip in body.tips if tip.strip()]})
    return await ctx.itineraries.update(itinerary_id, body)


@router.delete("/{itinerary_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_itinerary(itinerary_id: str, user: User = Depends(require_user), ctx: AppContext = Depends(get_ctx)):
    await _owned_itinerary(ctx, itinerary_id, user)
    await ctx.itineraries.delete(itinerary_id)


@router.get("/{itinerary_id}/share", response_model=ShareLink)
async def share_itinerary(itinerary_id: str, user: User = Depends(require_user), ctx: AppContext = Depends(get_ctx)):
    await _owned_itinerary(ctx, itinerary_id, user)
    return ctx.itineraries.generate_share_link(itinerary_id)


@router.post("/{itinerary_id}/days", response_model=AIItinerary)
async def add_day(itinerary_id: str, user: User = Depends(require_user), ctx: AppContext = Depends(get_ctx)):
    itinerary = await _owned_itinerary(ctx, itinerary_id, user)
    return await _store_edit(ctx, itinerary_editor.add_day(itinerary))


@router.delete("/{itinerary_id}/days/{day_number}", response_model=AIItinerary)
async def delete_day(itinerary_id: str, day_number: int, user: User = Depends(require_user),
                     ctx: AppContext = Depends(get_ctx)):
    itinerary = await _owned_itinerary(ctx, itinerary_id, user)
    return await _store_edit(ctx, itinerary_editor.delete_day(itinerary, day_number - 1))
