# api/deps.py
"""
Shared FastAPI dependencies: application context and the acting user.

The session id is read from the session cookie, or from the
`X-Session-Id` header for non-browser clients.
"""

from typing import Dict, List, Optional

from fastapi import Depends, Request

from travelbook.context import AppContext
from travelbook.exceptions import AuthenticationError, PermissionDeniedError
from travelbook.schemas.travel_schemas import Booking, BookingWithDetails, User


def get_ctx(request: Request) -> AppContext:
    return request.app.state.ctx


def get_session_id(request: Request) -> Optional[str]:
    ctx: AppContext = request.app.state.ctx
    return request.cookies.get(ctx.settings.SESSION_COOKIE_NAME) or request.headers.get("X-Session-Id")


async def get_optional_user(
    ctx: AppContext = Depends(get_ctx),
    session_id: Optional[str] = Depends(get_session_id),
) -> Optional[User]:
    return await ctx.auth.get_current_user(session_id)


async def require_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise AuthenticationError("Bejelentkezés szükséges.")
    return user


async def require_admin(user: User = Depends(require_user)) -> User:
    if not user.is_admin:
        raise PermissionDeniedError()
    return user


async def with_details(ctx: AppContext, bookings: List[Booking]) -> List[BookingWithDetails]:
    """Attach package title and user name; dangling references get placeholders"""
    titles: Dict[str, Optional[str]] = {}
    names: Dict[str, Optional[str]] = {}
    result = []
    for booking in bookings:
        if booking.package_id not in titles:
            package = await ctx.packages.get_by_id(booking.package_id)
            titles[booking.package_id] = package.title if package else None
        if booking.user_id not in names:
            user = await ctx.users.get_by_id(booking.user_id)
            names[booking.user_id] = user.name if user else None

        extra = {}
        if titles[booking.package_id]:
            extra["package_title"] = titles[booking.package_id]
        if names[booking.user_id]:
            extra["user_name"] = names[booking.user_id]
        result.append(BookingWithDetails(**booking.model_dump(), **extra))
    return result
