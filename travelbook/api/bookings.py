# api/bookings.py
"""
Bookings API
A signed-in user's own bookings: place, quote, list, edit, cancel.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from travelbook.api.deps import get_ctx, require_user, with_details
from travelbook.context import AppContext
from travelbook.exceptions import NotFoundError, PermissionDeniedError
from travelbook.schemas.travel_schemas import (
    Booking,
    BookingCreate,
    BookingEdit,
    BookingEditResult,
    BookingQuote,
    BookingQuoteRequest,
    BookingWithDetails,
    User,
)

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.post("", response_model=Booking, status_code=status.HTTP_201_CREATED)
async def create_booking(body: BookingCreate, user: User = Depends(require_user),
                         ctx: AppContext = Depends(get_ctx)):
    return await ctx.workflow.place_booking(
        user, body.package_id, body.travelers, body.special_requests, body.accept_terms
    )


@router.post("/quote", response_model=BookingQuote)
async def quote_booking(body: BookingQuoteRequest, ctx: AppContext = Depends(get_ctx)):
    return await ctx.workflow.quote(body.package_id, body.traveler_count)


@router.get("/mine", response_model=List[BookingWithDetails])
async def my_bookings(user: User = Depends(require_user), ctx: AppContext = Depends(get_ctx)):
    return await with_details(ctx, await ctx.bookings.get_by_user_id(user.id))


@router.get("/{booking_id}", response_model=BookingWithDetails)
async def get_booking(booking_id: str, user: User = Depends(require_user), ctx: AppContext = Depends(get_ctx)):
    booking = await ctx.bookings.get_by_id(booking_id)
    if booking is None:
        raise NotFoundError("Foglalás nem található")
    if booking.user_id != user.id and not user.is_admin:
        raise PermissionDeniedError()
    return (await with_details(ctx, [booking]))[0]


@router.patch("/{booking_id}", response_model=BookingEditResult)
async def edit_booking(booking_id: str, body: BookingEdit, user: User = Depends(require_user),
                       ctx: AppContext = Depends(get_ctx)):
    return await ctx.workflow.edit_booking(booking_id, user, body.travelers, body.special_requests)


@router.post("/{booking_id}/cancel", response_model=Booking)
async def cancel_booking(booking_id: str, user: User = Depends(require_user), ctx: AppContext = Depends(get_ctx)):
    return await ctx.workflow.cancel_booking(booking_id, user)
