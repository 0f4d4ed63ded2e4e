# api/__init__.py
"""
API Package

FastAPI routers:
- auth: /api/auth
- packages: /api/packages
- bookings: /api/bookings
- itineraries: /api/itineraries
- admin: /api/admin
"""

from .auth import router as auth_router
from .packages import router as packages_router
from .bookings import router as bookings_router
from .itineraries import router as itineraries_router
from .admin import router as admin_router

__all__ = [
    "auth_router",
    "packages_router",
    "bookings_router",
    "itineraries_router",
    "admin_router",
]
