# api/packages.py
"""
Packages API
Public browsing of active travel packages.
"""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from travelbook.api.deps import get_ctx
from travelbook.context import AppContext
from travelbook.exceptions import NotFoundError
from travelbook.schemas.travel_schemas import Difficulty, DurationRange, TravelCategory, TravelFilters, TravelPackage

router = APIRouter(prefix="/api/packages", tags=["packages"])

PACKAGE_NOT_FOUND = "A csomag nem található."


@router.get("", response_model=List[TravelPackage])
async def list_packages(
    search: Optional[str] = None,
    category: Optional[TravelCategory] = None,
    continent: Optional[str] = None,
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    min_duration: Optional[int] = Query(None, alias="minDuration", ge=1),
    max_duration: Optional[int] = Query(None, alias="maxDuration", ge=1),
    difficulty: Optional[Difficulty] = None,
    departure_month: Optional[int] = Query(None, alias="departureMonth", ge=1, le=12),
    sort_by: Optional[Literal["price", "rating", "duration", "departure"]] = Query(None, alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("asc", alias="sortOrder"),
    ctx: AppContext = Depends(get_ctx),
):
    filters = TravelFilters(
        search=search,
        category=category,
        continent=continent,
        min_price=min_price,
        max_price=max_price,
        duration=DurationRange(min=min_duration, max=max_duration) if min_duration or max_duration else None,
        difficulty=difficulty,
        departure_month=departure_month,
        only_active=True,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return await ctx.packages.get_all(filters)


@router.get("/featured", response_model=List[TravelPackage])
async def featured_packages(limit: int = Query(6, ge=1, le=50), ctx: AppContext = Depends(get_ctx)):
    return await ctx.packages.get_featured(limit)


@router.get("/slug/{slug}", response_model=TravelPackage)
async def package_by_slug(slug: str, ctx: AppContext = Depends(get_ctx)):
    package = await ctx.packages.get_by_slug(slug)
    if package is None or not package.is_active:
        raise NotFoundError(PACKAGE_NOT_FOUND)
    return package


@router.get("/{package_id}", response_model=TravelPackage)
async def package_by_id(package_id: str, ctx: AppContext = Depends(get_ctx)):
    package = await ctx.packages.get_by_id(package_id)
    if package is None or not package.is_active:
        raise NotFoundError(PACKAGE_NOT_FOUND)
    return package


@router.get("/{package_id}/images", response_model=List[str])
async def package_images(package_id: str, ctx: AppContext = Depends(get_ctx)):
    """Extra destination photos for the package page"""
    package = await ctx.packages.get_by_id(package_id)
    if package is None:
        raise NotFoundError(PACKAGE_NOT_FOUND)
    return await ctx.images.get_destination_images(package.destination, package.country)
