# services/__init__.py
"""
Services Package

Domain services over the backend adapter:
- package_service: travel packages and spot accounting
- booking_service: raw booking documents
- booking_workflow: create/cancel/edit keeping spots consistent
- user_service / auth_service: profiles, accounts, sessions
- itinerary_service / itinerary_editor: saved AI itineraries
- image_service: photo search
- site_settings_service: admin site settings
"""

from .package_service import PackageService
from .booking_service import BookingService
from .booking_workflow import (
    BookingWorkflow, ALLOWED_TRANSITIONS, reprice, validate_travelers, add_traveler, remove_traveler,
)
from .user_service import UserService
from .auth_service import AuthService
from .itinerary_service import ItineraryService
from .image_service import ImageService
from .site_settings_service import SiteSettingsService
from . import itinerary_editor

__all__ = [
    "PackageService",
    "BookingService",
    "BookingWorkflow",
    "ALLOWED_TRANSITIONS",
    "reprice",
    "validate_travelers",
    "add_traveler",
    "remove_traveler",
    "UserService",
    "AuthService",
    "ItineraryService",
    "ImageService",
    "SiteSettingsService",
    "itinerary_editor",
]
