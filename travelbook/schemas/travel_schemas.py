# schemas/travel_schemas.py
"""
Pydantic v2 schemas for the travelbook service
Entities, value types, closed enumerations and API payloads.

All models serialize with camelCase aliases so the wire format matches the
stored document shape; Python code uses the snake_case field names.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, List, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================
# Enums
# ============================================

class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class TravelCategory(str, Enum):
    BEACH = "beach"
    ADVENTURE = "adventure"
    CULTURAL = "cultural"
    CITY = "city"
    NATURE = "nature"
    CRUISE = "cruise"
    SAFARI = "safari"
    SKI = "ski"
    WELLNESS = "wellness"


class Difficulty(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    CHALLENGING = "challenging"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"
    FAILED = "failed"


class TravelStyle(str, Enum):
    RELAXED = "relaxed"
    BALANCED = "balanced"
    ADVENTUROUS = "adventurous"
    LUXURY = "luxury"


class GroupType(str, Enum):
    SOLO = "solo"
    COUPLE = "couple"
    FAMILY = "family"
    FRIENDS = "friends"
    BUSINESS = "business"


class BudgetLevel(str, Enum):
    BUDGET = "budget"
    MODERATE = "moderate"
    PREMIUM = "premium"
    LUXURY = "luxury"


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class GenerationStatus(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    SUCCESS = "success"
    ERROR = "error"


EDITABLE_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


# ============================================
# Users
# ============================================

class User(CamelModel):
    id: str
    email: str
    name: str
    role: UserRole = UserRole.USER
    avatar: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserStats(CamelModel):
    total: int
    users: int
    admins: int
    new_this_month: int


# ============================================
# Travel Packages
# ============================================

class PackageItineraryDay(CamelModel):
    """Day plan embedded in a package (distinct from the AI itinerary day)"""
    day: int
    title: str
    description: str = ""
    activities: List[str] = Field(default_factory=list)
    meals: List[MealType] = Field(default_factory=list)
    accommodation: Optional[str] = None
    image: Optional[str] = None


class TravelPackage(CamelModel):
    id: str
    title: str
    slug: str
    description: str = ""
    short_description: str = ""
    destination: str = ""
    country: str = ""
    continent: str = ""
    price: float
    original_price: Optional[float] = None
    currency: str = "HUF"
    duration: int
    max_group_size: int
    difficulty: Difficulty = Difficulty.MODERATE
    category: TravelCategory
    images: List[str] = Field(default_factory=list)
    cover_image: str = ""
    included: List[str] = Field(default_factory=list)
    not_included: List[str] = Field(default_factory=list)
    highlights: List[str] = Field(default_factory=list)
    itinerary: List[PackageItineraryDay] = Field(default_factory=list)
    departure_date: datetime
    return_date: datetime
    available_spots: int
    rating: float = 0
    review_count: int = 0
    is_active: bool = True
    is_featured: bool = False
    created_at: datetime
    updated_at: datetime


class PackageCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    short_description: str = ""
    destination: str
    country: str
    continent: str = ""
    price: float = Field(..., ge=0)
    original_price: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = None
    duration: int = Field(..., ge=1)
    max_group_size: int = Field(..., ge=1)
    available_spots: Optional[int] = Field(None, ge=0)
    difficulty: Difficulty = Difficulty.MODERATE
    category: TravelCategory
    images: List[str] = Field(default_factory=list)
    cover_image: str = ""
    included: List[str] = Field(default_factory=list)
    not_included: List[str] = Field(default_factory=list)
    highlights: List[str] = Field(default_factory=list)
    itinerary: List[PackageItineraryDay] = Field(default_factory=list)
    departure_date: datetime
    return_date: datetime
    is_active: bool = True
    is_featured: bool = False


class PackageUpdate(CamelModel):
    """Partial package update, unset fields are left untouched"""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    short_description: Optional[str] = None
    destination: Optional[str] = None
    country: Optional[str] = None
    continent: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    original_price: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = None
    duration: Optional[int] = Field(None, ge=1)
    max_group_size: Optional[int] = Field(None, ge=1)
    available_spots: Optional[int] = Field(None, ge=0)
    difficulty: Optional[Difficulty] = None
    category: Optional[TravelCategory] = None
    images: Optional[List[str]] = None
    cover_image: Optional[str] = None
    included: Optional[List[str]] = None
    not_included: Optional[List[str]] = None
    highlights: Optional[List[str]] = None
    itinerary: Optional[List[PackageItineraryDay]] = None
    departure_date: Optional[datetime] = None
    return_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None


class DurationRange(CamelModel):
    min: Optional[int] = None
    max: Optional[int] = None


class TravelFilters(CamelModel):
    search: Optional[str] = None
    category: Optional[TravelCategory] = None
    continent: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    duration: Optional[DurationRange] = None
    difficulty: Optional[Difficulty] = None
    departure_month: Optional[int] = Field(None, ge=1, le=12)
    only_active: bool = False
    sort_by: Optional[Literal["price", "rating", "duration", "departure"]] = None
    sort_order: Literal["asc", "desc"] = "asc"


# ============================================
# Bookings
# ============================================

class Traveler(CamelModel):
    """Participant on a booking, identified only by position in the list"""
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    passport_number: Optional[str] = None
    special_needs: Optional[str] = None


class Booking(CamelModel):
    id: str
    user_id: str
    package_id: str
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    travelers: List[Traveler] = Field(default_factory=list)
    total_price: float
    currency: str = "HUF"
    special_requests: Optional[str] = None
    payment_method: Optional[str] = None
    booked_at: datetime
    updated_at: datetime

    @property
    def is_editable(self) -> bool:
        return self.status in EDITABLE_BOOKING_STATUSES


class BookingStats(CamelModel):
    total: int = 0
    pending: int = 0
    confirmed: int = 0
    cancelled: int = 0
    completed: int = 0
    total_revenue: float = 0


class PriceChange(CamelModel):
    """Outcome of repricing a booking after a traveler-count edit"""
    previous_total: float
    new_total: float
    difference: float
    traveler_delta: int


class BookingCreate(CamelModel):
    package_id: str
    travelers: List[Traveler]
    special_requests: Optional[str] = None
    accept_terms: bool = False


class BookingEdit(CamelModel):
    travelers: Optional[List[Traveler]] = None
    special_requests: Optional[str] = None


class BookingUpdate(CamelModel):
    """Raw service-level update, the caller owns price consistency"""
    travelers: Optional[List[Traveler]] = None
    special_requests: Optional[str] = None
    total_price: Optional[float] = None


class BookingQuoteRequest(CamelModel):
    package_id: str
    traveler_count: int = Field(..., ge=1)


class BookingQuote(CamelModel):
    package_id: str
    traveler_count: int
    unit_price: float
    total_price: float
    currency: str
    available_spots: int
    max_group_size: int


class BookingEditResult(CamelModel):
    booking: Booking
    price_change: PriceChange


class BookingWithDetails(Booking):
    package_title: str = "Törölt csomag"
    user_name: str = "Ismeretlen felhasználó"


class StatusUpdate(CamelModel):
    status: BookingStatus


class PaymentStatusUpdate(CamelModel):
    payment_status: PaymentStatus


# ============================================
# AI Itineraries (stored / editable shape)
# ============================================

class ActivityBlock(CamelModel):
    activity: str = ""
    description: str = ""
    duration: str = ""
    location: Optional[str] = None
    cost: Optional[str] = None
    tips: Optional[str] = None


class Accommodation(CamelModel):
    name: str = ""
    type: str = ""
    price_range: str = ""


class MealRecommendation(CamelModel):
    type: MealType
    recommendation: str = ""
    cuisine: str = ""
    price_range: str = ""


class AIItineraryDay(CamelModel):
    day: int
    date: Optional[str] = None
    title: str = ""
    description: str = ""
    morning: ActivityBlock = Field(default_factory=ActivityBlock)
    afternoon: ActivityBlock = Field(default_factory=ActivityBlock)
    evening: ActivityBlock = Field(default_factory=ActivityBlock)
    accommodation: Accommodation = Field(default_factory=Accommodation)
    meals: List[MealRecommendation] = Field(default_factory=list)
    transport_notes: Optional[str] = None
    image: Optional[str] = None


class EstimatedBudget(CamelModel):
    min: float = 0
    max: float = 0
    currency: str = "HUF"


class AIItineraryRequest(CamelModel):
    destination: str = Field(..., min_length=1)
    country: str = ""
    duration: int = Field(..., ge=1, le=30)
    travel_style: TravelStyle = TravelStyle.BALANCED
    interests: List[str] = Field(default_factory=list)
    group_type: GroupType = GroupType.COUPLE
    budget: BudgetLevel = BudgetLevel.MODERATE
    start_date: Optional[str] = None
    special_requirements: Optional[str] = None


class AIItinerary(CamelModel):
    id: str
    user_id: str = ""
    request: AIItineraryRequest
    title: str
    summary: str = ""
    days: List[AIItineraryDay] = Field(default_factory=list)
    estimated_budget: EstimatedBudget = Field(default_factory=EstimatedBudget)
    tips: List[str] = Field(default_factory=list)
    best_time_to_visit: str = ""
    cover_image: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    is_saved: bool = False


class ItineraryUpdate(CamelModel):
    """Wholesale edit of a saved itinerary, no generation-shape checks"""
    title: Optional[str] = None
    summary: Optional[str] = None
    days: Optional[List[AIItineraryDay]] = None
    tips: Optional[List[str]] = None
    best_time_to_visit: Optional[str] = None
    estimated_budget: Optional[EstimatedBudget] = None


class GenerationResult(CamelModel):
    status: GenerationStatus
    itinerary: Optional[AIItinerary] = None
    error: Optional[str] = None


class ShareLink(CamelModel):
    itinerary_id: str
    url: str


# ============================================
# AI Itineraries (generation contract, strict)
# ============================================

class _StrictCamel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, strict=True)


class GeneratedMorning(_StrictCamel):
    activity: str
    description: str
    duration: str
    location: str
    tips: Optional[str] = None


class GeneratedAfternoon(_StrictCamel):
    activity: str
    description: str
    duration: str
    location: str
    cost: Optional[str] = None


class GeneratedEvening(_StrictCamel):
    activity: str
    description: str
    duration: str
    location: str


class GeneratedAccommodation(_StrictCamel):
    name: str
    type: str
    price_range: str


class GeneratedMeal(_StrictCamel):
    type: Literal["breakfast", "lunch", "dinner"]
    recommendation: str
    cuisine: str
    price_range: str


class GeneratedDay(_StrictCamel):
    day: int
    title: str
    description: str
    morning: GeneratedMorning
    afternoon: GeneratedAfternoon
    evening: GeneratedEvening
    accommodation: GeneratedAccommodation
    meals: List[GeneratedMeal]

    @model_validator(mode="after")
    def check_meals(self):
        # one breakfast, one lunch, one dinner
        types = sorted(meal.type for meal in self.meals)
        if types != ["breakfast", "dinner", "lunch"]:
            raise ValueError(f"day {self.day}: meals must be exactly breakfast, lunch and dinner, got {types}")
        return self


class GeneratedBudget(_StrictCamel):
    min: float
    max: float
    currency: str


class GeneratedItinerary(_StrictCamel):
    title: str
    summary: str
    days: List[GeneratedDay] = Field(..., min_length=1)
    estimated_budget: GeneratedBudget
    tips: List[str]
    best_time_to_visit: str


# ============================================
# Auth & Admin
# ============================================

class RegisterRequest(CamelModel):
    email: str
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1)


class LoginRequest(CamelModel):
    email: str
    password: str


class SessionInfo(CamelModel):
    session_id: str
    user: User
    expires_at: datetime


class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None


class PasswordChange(CamelModel):
    old_password: str
    new_password: str = Field(..., min_length=8)


class RecoveryRequest(CamelModel):
    email: str


class RecoveryConfirm(CamelModel):
    user_id: str
    secret: str
    new_password: str = Field(..., min_length=8)


class RoleUpdate(CamelModel):
    role: UserRole


class AdminUserUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    role: Optional[UserRole] = None


class DashboardStats(CamelModel):
    total_users: int
    total_bookings: int
    total_revenue: float
    active_packages: int
    pending_bookings: int
    recent_bookings: List[BookingWithDetails] = Field(default_factory=list)
    popular_packages: List[TravelPackage] = Field(default_factory=list)


class SiteSettings(CamelModel):
    site_name: str = "UtazzVelünk"
    site_description: str = "Személyre szabott utazási élmények"
    contact_email: str = "info@utazzvelunk.hu"
    contact_phone: str = "+36 1 234 5678"
    address: str = ""
    currency: str = "HUF"
    timezone: str = "Europe/Budapest"
    email_new_booking: bool = True
    email_booking_cancelled: bool = True
    email_new_user: bool = True
    enable_online_payment: bool = True
    enable_bank_transfer: bool = True
    deposit_percentage: int = Field(30, ge=0, le=100)
