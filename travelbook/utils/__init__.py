"""
Utilities Module
Formatting and validation helpers shared by services and API
"""

from .helpers import (
    format_currency,
    format_date,
    format_short_date,
    format_duration,
    get_category_label,
    get_category_icon,
    get_booking_status_info,
    get_payment_status_info,
    get_continent_color,
    calculate_discount,
    generate_slug,
    truncate_text,
    get_initials,
    cn,
    is_valid_email,
    get_random_items,
    debounce,
)

__all__ = [
    "format_currency",
    "format_date",
    "format_short_date",
    "format_duration",
    "get_category_label",
    "get_category_icon",
    "get_booking_status_info",
    "get_payment_status_info",
    "get_continent_color",
    "calculate_discount",
    "generate_slug",
    "truncate_text",
    "get_initials",
    "cn",
    "is_valid_email",
    "get_random_items",
    "debounce",
]
