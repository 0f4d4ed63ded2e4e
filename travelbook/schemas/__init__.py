# schemas/__init__.py
"""
Pydantic Schemas Package

Contains all Pydantic v2 models for:
- Stored entities (packages, bookings, users, itineraries)
- The strict AI generation contract
- API requests/responses
"""

from .travel_schemas import (
    # Enums
    UserRole, TravelCategory, Difficulty, BookingStatus, PaymentStatus,
    TravelStyle, GroupType, BudgetLevel, MealType, GenerationStatus,
    EDITABLE_BOOKING_STATUSES,
    # Users
    User, UserStats,
    # Packages
    PackageItineraryDay, TravelPackage, PackageCreate, PackageUpdate,
    DurationRange, TravelFilters,
    # Bookings
    Traveler, Booking, BookingStats, PriceChange, BookingCreate, BookingEdit,
    BookingUpdate, BookingQuoteRequest, BookingQuote, BookingEditResult,
    BookingWithDetails, StatusUpdate, PaymentStatusUpdate,
    # AI itineraries
    ActivityBlock, Accommodation, MealRecommendation, AIItineraryDay,
    EstimatedBudget, AIItineraryRequest, AIItinerary, ItineraryUpdate,
    GenerationResult, ShareLink, GeneratedItinerary, GeneratedDay,
    # Auth & admin
    RegisterRequest, LoginRequest, SessionInfo, ProfileUpdate, PasswordChange,
    RecoveryRequest, RecoveryConfirm, RoleUpdate, AdminUserUpdate,
    DashboardStats, SiteSettings,
)

__all__ = [
    # Enums
    "UserRole", "TravelCategory", "Difficulty", "BookingStatus", "PaymentStatus",
    "TravelStyle", "GroupType", "BudgetLevel", "MealType", "GenerationStatus",
    "EDITABLE_BOOKING_STATUSES",
    # Users
    "User", "UserStats",
    # Packages
    "PackageItineraryDay", "TravelPackage", "PackageCreate", "PackageUpdate",
    "DurationRange", "TravelFilters",
    # Bookings
    "Traveler", "Booking", "BookingStats", "PriceChange", "BookingCreate", "BookingEdit",
    "BookingUpdate", "BookingQuoteRequest", "BookingQuote", "BookingEditResult",
    "BookingWithDetails", "StatusUpdate", "PaymentStatusUpdate",
    # AI itineraries
    "ActivityBlock", "Accommodation", "MealRecommendation", "AIItineraryDay",
    "EstimatedBudget", "AIItineraryRequest", "AIItinerary", "ItineraryUpdate",
    "GenerationResult", "ShareLink", "GeneratedItinerary", "GeneratedDay",
    # Auth & admin
    "RegisterRequest", "LoginRequest", "SessionInfo", "ProfileUpdate", "PasswordChange",
    "RecoveryRequest", "RecoveryConfirm", "RoleUpdate", "AdminUserUpdate",
    "DashboardStats", "SiteSettings",
]
