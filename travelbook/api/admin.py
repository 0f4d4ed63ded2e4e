# api/admin.py
"""
Admin API
Dashboard, package management, booking handling, user management and
site settings. Every route requires the admin role.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from travelbook.api.deps import get_ctx, require_admin, with_details
from travelbook.context import AppContext
from travelbook.exceptions import BusinessRuleError
from travelbook.schemas.travel_schemas import (
    AdminUserUpdate,
    Booking,
    BookingStats,
    BookingStatus,
    BookingWithDetails,
    CamelModel,
    DashboardStats,
    PackageCreate,
    PackageUpdate,
    PaymentStatus,
    PaymentStatusUpdate,
    RoleUpdate,
    SiteSettings,
    StatusUpdate,
    TravelFilters,
    TravelPackage,
    User,
    UserRole,
    UserStats,
)

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


class BookingPage(CamelModel):
    bookings: List[BookingWithDetails]
    total: int


class UserPage(CamelModel):
    users: List[User]
    total: int


class ToggleRequest(BaseModel):
    value: bool


# ============================================
# Dashboard
# ============================================

@router.get("/dashboard", response_model=DashboardStats)
async def dashboard(ctx: AppContext = Depends(get_ctx)):
    booking_stats = await ctx.bookings.get_stats()
    user_stats = await ctx.users.get_stats()
    packages = await ctx.packages.get_all()
    recent, _ = await ctx.bookings.get_all(limit=5)
    return DashboardStats(
        total_users=user_stats.total,
        total_bookings=booking_stats.total,
        total_revenue=booking_stats.total_revenue,
        active_packages=sum(1 for p in packages if p.is_active),
        pending_bookings=booking_stats.pending,
        recent_bookings=await with_details(ctx, recent),
        popular_packages=await ctx.packages.get_featured(4),
    )


# ============================================
# Packages
# ============================================

@router.get("/packages", response_model=List[TravelPackage])
async def list_packages(search: Optional[str] = None, ctx: AppContext = Depends(get_ctx)):
    """All packages, active or not"""
    return await ctx.packages.get_all(TravelFilters(search=search))


@router.post("/packages", response_model=TravelPackage, status_code=status.HTTP_201_CREATED)
async def create_package(body: PackageCreate, ctx: AppContext = Depends(get_ctx)):
    return await ctx.packages.create(body)


@router.patch("/packages/{package_id}", response_model=TravelPackage)
async def update_package(package_id: str, body: PackageUpdate, ctx: AppContext = Depends(get_ctx)):
    return await ctx.packages.update(package_id, body)


@router.delete("/packages/{package_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_package(package_id: str, ctx: AppContext = Depends(get_ctx)):
    await ctx.packages.delete(package_id)


@router.post("/packages/{package_id}/active", response_model=TravelPackage)
async def toggle_active(package_id: str, body: ToggleRequest, ctx: AppContext = Depends(get_ctx)):
    return await ctx.packages.toggle_active(package_id, body.value)


@router.post("/packages/{package_id}/featured", response_model=TravelPackage)
async def toggle_featured(package_id: str, body: ToggleRequest, ctx: AppContext = Depends(get_ctx)):
    return await ctx.packages.toggle_featured(package_id, body.value)


@router.get("/packages/{package_id}/bookings", response_model=List[BookingWithDetails])
async def package_bookings(package_id: str, ctx: AppContext = Depends(get_ctx)):
    return await with_details(ctx, await ctx.bookings.get_by_package_id(package_id))


# ============================================
# Bookings
# ============================================

@router.get("/bookings", response_model=BookingPage)
async def list_bookings(
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    payment_status: Optional[PaymentStatus] = Query(None, alias="paymentStatus"),
    limit: Optional[int] = Query(None, ge=1, le=500),
    offset: Optional[int] = Query(None, ge=0),
    ctx: AppContext = Depends(get_ctx),
):
    bookings, total = await ctx.bookings.get_all(booking_status, payment_status, limit, offset)
    return BookingPage(bookings=await with_details(ctx, bookings), total=total)


@router.get("/bookings/stats", response_model=BookingStats)
async def booking_stats(ctx: AppContext = Depends(get_ctx)):
    return await ctx.bookings.get_stats()


@router.put("/bookings/{booking_id}/status", response_model=Booking)
async def change_booking_status(booking_id: str, body: StatusUpdate, admin: User = Depends(require_admin),
                                ctx: AppContext = Depends(get_ctx)):
    return await ctx.workflow.change_status(booking_id, body.status, admin)


@router.put("/bookings/{booking_id}/payment", response_model=Booking)
async def change_payment_status(booking_id: str, body: PaymentStatusUpdate, admin: User = Depends(require_admin),
                                ctx: AppContext = Depends(get_ctx)):
    return await ctx.workflow.change_payment_status(booking_id, body.payment_status, admin)


@router.delete("/bookings/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(booking_id: str, admin: User = Depends(require_admin), ctx: AppContext = Depends(get_ctx)):
    await ctx.workflow.delete_booking(booking_id, admin)


# ============================================
# Users
# ============================================

@router.get("/users", response_model=UserPage)
async def list_users(
    role: Optional[UserRole] = None,
    search: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1, le=500),
    offset: Optional[int] = Query(None, ge=0),
    ctx: AppContext = Depends(get_ctx),
):
    users, total = await ctx.users.get_all(role, search, limit, offset)
    return UserPage(users=users, total=total)


@router.get("/users/stats", response_model=UserStats)
async def user_stats(ctx: AppContext = Depends(get_ctx)):
    return await ctx.users.get_stats()


@router.put("/users/{user_id}/role", response_model=User)
async def change_role(user_id: str, body: RoleUpdate, admin: User = Depends(require_admin),
                      ctx: AppContext = Depends(get_ctx)):
    if user_id == admin.id and body.role != UserRole.ADMIN:
        raise BusinessRuleError("Saját admin jogosultságodat nem veheted el.")
    return await ctx.users.update_role(user_id, body.role)


@router.patch("/users/{user_id}", response_model=User)
async def update_user(user_id: str, body: AdminUserUpdate, admin: User = Depends(require_admin),
                      ctx: AppContext = Depends(get_ctx)):
    if user_id == admin.id and body.role is not None and body.role != UserRole.ADMIN:
        raise BusinessRuleError("Saját admin jogosultságodat nem veheted el.")
    return await ctx.users.update(user_id, body)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str, admin: User = Depends(require_admin), ctx: AppContext = Depends(get_ctx)):
    if user_id == admin.id:
        raise BusinessRuleError("Saját fiókodat nem törölheted.")
    await ctx.users.delete(user_id)


# ============================================
# Site settings
# ============================================

@router.get("/settings", response_model=SiteSettings)
async def get_settings(ctx: AppContext = Depends(get_ctx)):
    return await ctx.site_settings.get()


@router.put("/settings", response_model=SiteSettings)
async def save_settings(body: SiteSettings, ctx: AppContext = Depends(get_ctx)):
    return await ctx.site_settings.save(body)
