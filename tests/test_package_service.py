import asyncio
from datetime import datetime, timezone

import pytest

from travelbook.exceptions import NotFoundError
from travelbook.schemas.travel_schemas import (
    Difficulty,
    DurationRange,
    PackageItineraryDay,
    PackageUpdate,
    TravelCategory,
    TravelFilters,
)

from tests.factories import make_package


def run(coro):
    return asyncio.run(coro)


class TestCreate:

    def test_defaults(self, ctx):
        package = run(ctx.packages.create(make_package(title="Csodás Görögország")))
        assert package.slug.startswith("csodas-gorogorszag-")
        assert len(package.slug) == len("csodas-gorogorszag-") + 6
        assert package.rating == 0 and package.review_count == 0
        assert package.currency == "HUF"
        assert package.available_spots == package.max_group_size == 10

    def test_spots_clamped_to_group_size(self, ctx):
        package = run(ctx.packages.create(make_package(max_group_size=4, available_spots=9)))
        assert package.available_spots == 4

    def test_itinerary_round_trip(self, ctx):
        days = [PackageItineraryDay(day=1, title="Érkezés", activities=["Séta"], meals=["dinner"])]
        package = run(ctx.packages.create(make_package(itinerary=days)))
        stored = ctx.store.get_document("packages", package.id)
        assert isinstance(stored["itinerary"], str)
        assert run(ctx.packages.get_by_id(package.id)).itinerary == days

    def test_slugs_are_unique(self, ctx):
        first = run(ctx.packages.create(make_package()))
        second = run(ctx.packages.create(make_package()))
        assert first.slug != second.slug


class TestReads:

    @pytest.fixture
    def catalogue(self, ctx):
        return [
            run(ctx.packages.create(make_package(title="Tengerpart", price=300000, duration=7,
                                                 category=TravelCategory.BEACH, is_featured=True))),
            run(ctx.packages.create(make_package(title="Városnézés", price=100000, duration=3,
                                                 difficulty=Difficulty.EASY,
                                                 departure_date=datetime(2030, 9, 1, tzinfo=timezone.utc),
                                                 return_date=datetime(2030, 9, 3, tzinfo=timezone.utc)))),
            run(ctx.packages.create(make_package(title="Rejtett túra", price=200000, duration=5,
                                                 is_active=False, is_featured=True))),
        ]

    def test_filters(self, ctx, catalogue):
        titles = lambda filters: sorted(p.title for p in run(ctx.packages.get_all(filters)))  # noqa: E731

        assert titles(TravelFilters(category=TravelCategory.BEACH)) == ["Tengerpart"]
        assert titles(TravelFilters(min_price=150000, max_price=300000)) == ["Rejtett túra", "Tengerpart"]
        assert titles(TravelFilters(duration=DurationRange(min=4))) == ["Rejtett túra", "Tengerpart"]
        assert titles(TravelFilters(difficulty=Difficulty.EASY)) == ["Városnézés"]
        assert titles(TravelFilters(departure_month=9)) == ["Városnézés"]
        assert titles(TravelFilters(only_active=True)) == ["Tengerpart", "Városnézés"]
        assert titles(TravelFilters(search="túra")) == ["Rejtett túra"]

    def test_sorting(self, ctx, catalogue):
        by_price = run(ctx.packages.get_all(TravelFilters(sort_by="price")))
        assert [p.price for p in by_price] == [100000, 200000, 300000]
        by_duration = run(ctx.packages.get_all(TravelFilters(sort_by="duration", sort_order="desc")))
        assert [p.duration for p in by_duration] == [7, 5, 3]

    def test_featured_only_active(self, ctx, catalogue):
        assert [p.title for p in run(ctx.packages.get_featured())] == ["Tengerpart"]

    def test_lookup(self, ctx, catalogue):
        beach = catalogue[0]
        assert run(ctx.packages.get_by_slug(beach.slug)).id == beach.id
        assert run(ctx.packages.get_by_slug("nincs-ilyen")) is None
        assert run(ctx.packages.get_by_id("nincs")) is None

    def test_malformed_list_field(self, ctx, catalogue):
        ctx.store.update_document("packages", catalogue[0].id, {"itinerary": "{rossz", "images": "nem lista"})
        package = run(ctx.packages.get_by_id(catalogue[0].id))
        assert package.itinerary == [] and package.images == []


class TestWrites:

    def test_update_reslugs_on_title_change(self, ctx, package):
        updated = run(ctx.packages.update(package.id, PackageUpdate(title="Új cím")))
        assert updated.slug.startswith("uj-cim-")
        assert updated.price == package.price

    def test_update_clamps_spots(self, ctx, package):
        updated = run(ctx.packages.update(package.id, PackageUpdate(max_group_size=6)))
        assert updated.available_spots == 6

    def test_explicit_nulls_leave_required_fields(self, ctx, package):
        updated = run(ctx.packages.update(package.id, PackageUpdate.model_validate(
            {"price": None, "title": None, "availableSpots": None, "departureDate": None, "duration": 7}
        )))
        assert updated.price == package.price
        assert updated.slug == package.slug
        assert updated.available_spots == package.available_spots
        assert updated.duration == 7
        assert [p.id for p in run(ctx.packages.get_all())] == [package.id]

    def test_original_price_can_be_cleared(self, ctx):
        package = run(ctx.packages.create(make_package(original_price=65000)))
        cleared = run(ctx.packages.update(package.id, PackageUpdate.model_validate({"originalPrice": None})))
        assert cleared.original_price is None

    def test_toggles(self, ctx, package):
        assert run(ctx.packages.toggle_active(package.id, False)).is_active is False
        assert run(ctx.packages.toggle_featured(package.id, True)).is_featured is True

    def test_delete(self, ctx, package):
        run(ctx.packages.delete(package.id))
        assert run(ctx.packages.get_by_id(package.id)) is None
        with pytest.raises(NotFoundError):
            run(ctx.packages.delete(package.id))


class TestSpots:

    def test_reserve_is_all_or_nothing(self, ctx, package):
        assert run(ctx.packages.reserve_spots(package.id, 11)) is None
        assert run(ctx.packages.reserve_spots(package.id, 4)).available_spots == 6

    def test_decrease_stops_at_zero(self, ctx):
        package = run(ctx.packages.create(make_package(available_spots=2)))
        assert run(ctx.packages.decrease_available_spots(package.id, 5)).available_spots == 0
        assert run(ctx.packages.decrease_available_spots(package.id)).available_spots == 0

    def test_increase_stops_at_group_size(self, ctx):
        package = run(ctx.packages.create(make_package(available_spots=8)))
        assert run(ctx.packages.increase_available_spots(package.id, 5)).available_spots == 10

    def test_missing_package(self, ctx):
        with pytest.raises(NotFoundError):
            run(ctx.packages.increase_available_spots("nincs"))
        with pytest.raises(NotFoundError):
            run(ctx.packages.decrease_available_spots("nincs"))
