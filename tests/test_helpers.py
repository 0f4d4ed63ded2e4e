import time
from datetime import datetime

import pytest

from travelbook.schemas.travel_schemas import BookingStatus, PaymentStatus, TravelCategory
from travelbook.utils.helpers import (
    NBSP,
    calculate_discount,
    cn,
    debounce,
    format_currency,
    format_date,
    format_duration,
    format_short_date,
    generate_slug,
    get_booking_status_info,
    get_category_icon,
    get_category_label,
    get_continent_color,
    get_initials,
    get_payment_status_info,
    get_random_items,
    is_valid_email,
    truncate_text,
)


class TestFormatting:

    def test_currency_uses_hungarian_grouping(self):
        assert format_currency(100000) == f"100{NBSP}000{NBSP}Ft"
        assert format_currency(999) == f"999{NBSP}Ft"

    def test_currency_rounds_to_whole_units(self):
        assert format_currency(1234.5, "EUR") == f"1{NBSP}235{NBSP}€"
        assert format_currency(-2500.4) == f"-2{NBSP}500{NBSP}Ft"

    def test_unknown_currency_shows_code(self):
        assert format_currency(10, "chf") == f"10{NBSP}CHF"

    def test_dates(self):
        assert format_date("2025-03-15") == "2025. március 15."
        assert format_date(datetime(2024, 12, 1, 10, 30)) == "2024. december 1."
        assert format_short_date("2025-03-05T10:00:00Z") == "2025. 03. 05."

    def test_duration(self):
        assert format_duration(7) == "7 nap"


class TestLabels:

    @pytest.mark.parametrize("category", list(TravelCategory))
    def test_every_category_has_label_and_icon(self, category):
        assert get_category_label(category)
        assert get_category_icon(category.value)

    def test_booking_status_info(self):
        assert get_booking_status_info("pending") == {"label": "Függőben", "color": "warning"}
        assert all(get_booking_status_info(s)["label"] for s in BookingStatus)

    def test_payment_status_info(self):
        assert get_payment_status_info(PaymentStatus.PAID)["label"] == "Kifizetve"
        assert all(get_payment_status_info(s)["color"] for s in PaymentStatus)

    def test_status_info_is_a_copy(self):
        info = get_booking_status_info(BookingStatus.CANCELLED)
        info["label"] = "x"
        assert get_booking_status_info(BookingStatus.CANCELLED)["label"] == "Lemondva"

    def test_unknown_category_is_rejected(self):
        with pytest.raises(ValueError):
            get_category_label("space")

    def test_continent_color_fallback(self):
        assert get_continent_color("Európa") != get_continent_color("Antarktisz")
        assert get_continent_color("Antarktisz") == "bg-gray-100 text-gray-700"


class TestMisc:

    def test_discount(self):
        assert calculate_discount(429000, 389000) == 9
        assert calculate_discount(200, 150) == 25
        assert calculate_discount(None, 100) == 0
        assert calculate_discount(100, 120) == 0

    def test_slug_strips_accents(self):
        assert generate_slug("Csodás Görögország!") == "csodas-gorogorszag"
        assert generate_slug("  Tűzföld -- Kaland  ") == "tuzfold-kaland"

    def test_truncate(self):
        assert truncate_text("rövid", 10) == "rövid"
        assert truncate_text("abcdef", 3) == "abc..."

    def test_initials(self):
        assert get_initials("Kiss Anna Mária") == "KA"
        assert get_initials("béla") == "B"

    def test_cn_skips_falsy(self):
        assert cn("btn", None, False, "", "btn-primary") == "btn btn-primary"

    @pytest.mark.parametrize("email,valid", [
        ("anna@example.hu", True),
        ("a.b+c@sub.domain.com", True),
        ("nincs-kukac.hu", False),
        ("szóköz van@example.hu", False),
        ("anna@example", False),
        ("", False),
    ])
    def test_email_validation(self, email, valid):
        assert is_valid_email(email) is valid

    def test_random_items(self):
        items = [1, 2, 3, 4]
        picked = get_random_items(items, 2)
        assert len(picked) == 2 and set(picked) <= set(items)
        assert sorted(get_random_items(items, 10)) == items

    def test_debounce_runs_last_call_once(self):
        calls = []

        @debounce(0.05)
        def record(value):
            calls.append(value)

        for value in range(3):
            record(value)
        time.sleep(0.3)
        assert calls == [2]

    def test_debounce_cancel(self):
        calls = []

        @debounce(0.05)
        def record(value):
            calls.append(value)

        record(1)
        record.cancel()
        time.sleep(0.2)
        assert calls == []
