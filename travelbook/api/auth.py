# api/auth.py
"""
Auth API
Registration, login/logout, profile and password management.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from loguru import logger

from travelbook.api.deps import get_ctx, get_session_id, require_user
from travelbook.context import AppContext
from travelbook.schemas.travel_schemas import (
    LoginRequest,
    PasswordChange,
    ProfileUpdate,
    RecoveryConfirm,
    RecoveryRequest,
    RegisterRequest,
    SessionInfo,
    User,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])

RECOVERY_SENT_MESSAGE = "Ha az email cím regisztrálva van, elküldtük a jelszó-visszaállító linket."


def _set_session_cookie(response: Response, ctx: AppContext, session: SessionInfo):
    response.set_cookie(
        ctx.settings.SESSION_COOKIE_NAME,
        session.session_id,
        max_age=ctx.settings.SESSION_TTL_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=ctx.settings.API_ENV == "production",
    )


@router.post("/register", response_model=SessionInfo, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, response: Response, ctx: AppContext = Depends(get_ctx)):
    session = await ctx.auth.register(body.email, body.password, body.name)
    _set_session_cookie(response, ctx, session)
    return session


@router.post("/login", response_model=SessionInfo)
async def login(
    body: LoginRequest,
    response: Response,
    ctx: AppContext = Depends(get_ctx),
    session_id: Optional[str] = Depends(get_session_id),
):
    session = await ctx.auth.login(body.email, body.password, session_id)
    _set_session_cookie(response, ctx, session)
    return session


@router.post("/logout")
async def logout(
    response: Response,
    ctx: AppContext = Depends(get_ctx),
    session_id: Optional[str] = Depends(get_session_id),
):
    await ctx.auth.logout(session_id)
    response.delete_cookie(ctx.settings.SESSION_COOKIE_NAME)
    return {"message": "Sikeres kijelentkezés."}


@router.get("/me", response_model=User)
async def me(user: User = Depends(require_user)):
    return user


@router.patch("/profile", response_model=User)
async def update_profile(body: ProfileUpdate, user: User = Depends(require_user),
                         ctx: AppContext = Depends(get_ctx)):
    return await ctx.auth.update_user(user.id, body)


@router.post("/password")
async def change_password(body: PasswordChange, user: User = Depends(require_user),
                          ctx: AppContext = Depends(get_ctx)):
    await ctx.auth.update_password(user.id, body.old_password, body.new_password)
    return {"message": "A jelszó sikeresen megváltozott."}


@router.post("/recovery", status_code=status.HTTP_202_ACCEPTED)
async def request_recovery(body: RecoveryRequest, ctx: AppContext = Depends(get_ctx)):
    """Same answer whether or not the address is registered"""
    link = await ctx.auth.send_password_recovery(body.email)
    if link and ctx.settings.API_ENV == "development":
        logger.debug(f"Recovery link: {link}")
    return {"message": RECOVERY_SENT_MESSAGE}


@router.post("/recovery/confirm")
async def confirm_recovery(body: RecoveryConfirm, ctx: AppContext = Depends(get_ctx)):
    await ctx.auth.confirm_password_recovery(body.user_id, body.secret, body.new_password)
    return {"message": "A jelszó sikeresen visszaállítva."}
