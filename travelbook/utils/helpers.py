"""
Formatting & Utility Helpers
Currency/date formatting, label lookups, slugs and small validators
"""

import random
import re
import threading
import unicodedata
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

from travelbook.schemas.travel_schemas import BookingStatus, PaymentStatus, TravelCategory

T = TypeVar("T")

NBSP = "\u00a0"

CURRENCY_SYMBOLS = {
    "HUF": "Ft",
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
}

HUNGARIAN_MONTHS = [
    "január", "február", "március", "április", "május", "június",
    "július", "augusztus", "szeptember", "október", "november", "december",
]

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


# ============================================
# Formatting
# ============================================

def format_currency(amount: float, currency: str = "HUF") -> str:
    """
    Format an amount the way hu-HU locale shows money

    Args:
        amount: Amount to format, rounded to whole units
        currency: ISO currency code

    Returns:
        str: e.g. "100 000 Ft" (non-breaking spaces)

    Example:
        >>> format_currency(1234567)
        '1\\xa0234\\xa0567\\xa0Ft'
    """
    rounded = int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    grouped = f"{abs(rounded):,}".replace(",", NBSP)
    sign = "-" if rounded < 0 else ""
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())
    return f"{sign}{grouped}{NBSP}{symbol}"


def _to_date(value: Union[date, datetime, str]) -> date:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        return value.date()
    return value


def format_date(value: Union[date, datetime, str]) -> str:
    """Long Hungarian date, e.g. "2025. március 15." """
    d = _to_date(value)
    return f"{d.year}. {HUNGARIAN_MONTHS[d.month - 1]} {d.day}."


def format_short_date(value: Union[date, datetime, str]) -> str:
    """Numeric Hungarian date, e.g. "2025. 03. 15." """
    d = _to_date(value)
    return f"{d.year}. {d.month:02d}. {d.day:02d}."


def format_duration(days: int) -> str:
    return f"{days} nap"


# ============================================
# Label lookups (exhaustive over closed enums)
# ============================================

CATEGORY_LABELS: Dict[TravelCategory, str] = {
    TravelCategory.BEACH: "Tengerparti",
    TravelCategory.ADVENTURE: "Kaland",
    TravelCategory.CULTURAL: "Kulturális",
    TravelCategory.CITY: "Városnézés",
    TravelCategory.NATURE: "Természet",
    TravelCategory.CRUISE: "Hajóút",
    TravelCategory.SAFARI: "Szafari",
    TravelCategory.SKI: "Síelés",
    TravelCategory.WELLNESS: "Wellness",
}

CATEGORY_ICONS: Dict[TravelCategory, str] = {
    TravelCategory.BEACH: "umbrella-beach",
    TravelCategory.ADVENTURE: "mountain",
    TravelCategory.CULTURAL: "landmark",
    TravelCategory.CITY: "building-2",
    TravelCategory.NATURE: "trees",
    TravelCategory.CRUISE: "ship",
    TravelCategory.SAFARI: "binoculars",
    TravelCategory.SKI: "snowflake",
    TravelCategory.WELLNESS: "spa",
}

BOOKING_STATUS_INFO: Dict[BookingStatus, Dict[str, str]] = {
    BookingStatus.PENDING: {"label": "Függőben", "color": "warning"},
    BookingStatus.CONFIRMED: {"label": "Megerősítve", "color": "success"},
    BookingStatus.CANCELLED: {"label": "Lemondva", "color": "danger"},
    BookingStatus.COMPLETED: {"label": "Teljesítve", "color": "secondary"},
}

PAYMENT_STATUS_INFO: Dict[PaymentStatus, Dict[str, str]] = {
    PaymentStatus.PENDING: {"label": "Fizetésre vár", "color": "warning"},
    PaymentStatus.PAID: {"label": "Kifizetve", "color": "success"},
    PaymentStatus.REFUNDED: {"label": "Visszatérítve", "color": "secondary"},
    PaymentStatus.FAILED: {"label": "Sikertelen", "color": "danger"},
}

CONTINENT_COLORS = {
    "Európa": "bg-blue-100 text-blue-700",
    "Ázsia": "bg-red-100 text-red-700",
    "Afrika": "bg-amber-100 text-amber-700",
    "Észak-Amerika": "bg-green-100 text-green-700",
    "Dél-Amerika": "bg-purple-100 text-purple-700",
    "Óceánia": "bg-cyan-100 text-cyan-700",
}

# Adding an enum member without a label must fail at import time
for _enum, _table in ((TravelCategory, CATEGORY_LABELS), (TravelCategory, CATEGORY_ICONS),
                      (BookingStatus, BOOKING_STATUS_INFO), (PaymentStatus, PAYMENT_STATUS_INFO)):
    _missing = set(_enum) - set(_table)
    if _missing:
        raise RuntimeError(f"Missing labels for {_enum.__name__}: {_missing}")


def get_category_label(category: Union[TravelCategory, str]) -> str:
    return CATEGORY_LABELS[TravelCategory(category)]


def get_category_icon(category: Union[TravelCategory, str]) -> str:
    return CATEGORY_ICONS[TravelCategory(category)]


def get_booking_status_info(status: Union[BookingStatus, str]) -> Dict[str, str]:
    """Label and badge color for a booking status"""
    return dict(BOOKING_STATUS_INFO[BookingStatus(status)])


def get_payment_status_info(status: Union[PaymentStatus, str]) -> Dict[str, str]:
    """Label and badge color for a payment status"""
    return dict(PAYMENT_STATUS_INFO[PaymentStatus(status)])


def get_continent_color(continent: str) -> str:
    return CONTINENT_COLORS.get(continent, "bg-gray-100 text-gray-700")


# ============================================
# Misc
# ============================================

def calculate_discount(original_price: Optional[float], current_price: float) -> int:
    """
    Calculate discount percentage

    Args:
        original_price: List price before discount
        current_price: Current price

    Returns:
        int: Rounded percentage, 0 if there is no discount
    """
    if not original_price or original_price <= current_price:
        return 0
    percent = Decimal(str((original_price - current_price) / original_price * 100))
    return int(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def generate_slug(title: str) -> str:
    """
    Lowercase ASCII slug of a title

    Example:
        >>> generate_slug("Csodás Görögország!")
        'csodas-gorogorszag'
    """
    normalized = unicodedata.normalize("NFD", title.lower())
    ascii_only = "".join(ch for ch in normalized if unicodedata.category(ch) != "Mn")
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_only)
    return slug.strip("-")


def truncate_text(text: str, max_length: int) -> str:
    """Cut text at `max_length` characters and append an ellipsis"""
    if len(text) <= max_length:
        return text
    return text[:max_length].strip() + "..."


def get_initials(name: str) -> str:
    return "".join(part[0] for part in name.split() if part).upper()[:2]


def cn(*classes: Any) -> str:
    """Join the truthy class names with spaces"""
    return " ".join(str(c) for c in classes if c)


def is_valid_email(email: str) -> bool:
    """local@domain.tld with no whitespace"""
    return bool(email) and bool(EMAIL_PATTERN.match(email))


def get_random_items(items: List[T], count: int) -> List[T]:
    return random.sample(items, min(count, len(items)))


def debounce(wait: float) -> Callable:
    """
    Delay calls to the wrapped function until `wait` seconds have passed
    without another call. Only the last call's arguments are used.
    """
    def decorator(func: Callable) -> Callable:
        timer: Dict[str, Optional[threading.Timer]] = {"current": None}
        lock = threading.Lock()

        @wraps(func)
        def debounced(*args, **kwargs):
            with lock:
                if timer["current"] is not None:
                    timer["current"].cancel()
                timer["current"] = threading.Timer(wait, func, args=args, kwargs=kwargs)
                timer["current"].daemon = True
                timer["current"].start()

        def cancel():
            with lock:
                if timer["current"] is not None:
                    timer["current"].cancel()
                    timer["current"] = None

        debounced.cancel = cancel
        return debounced

    return decorator
