import asyncio

import pytest

from travelbook.exceptions import (
    BookingNotEditableError,
    CapacityError,
    InvalidTransitionError,
    LastTravelerError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from travelbook.schemas.travel_schemas import (
    BookingStatus,
    BookingUpdate,
    PackageUpdate,
    PaymentStatus,
    Traveler,
)
from travelbook.services.booking_workflow import add_traveler, remove_traveler, reprice, validate_travelers

from tests.factories import make_package, make_travelers


def run(coro):
    return asyncio.run(coro)


def spots(ctx, package_id):
    return run(ctx.packages.get_by_id(package_id)).available_spots


class TestPureHelpers:

    def test_reprice_two_to_three_travelers(self):
        change = reprice(100000, 200000, 3, previous_count=2)
        assert change.new_total == 300000
        assert change.difference == 100000
        assert change.traveler_delta == 1

    def test_reprice_down(self):
        change = reprice(100000, 300000, 1, previous_count=3)
        assert change.difference == -200000 and change.traveler_delta == -2

    def test_validate_travelers(self):
        validate_travelers(make_travelers(2), 4)
        with pytest.raises(ValidationError):
            validate_travelers([], 4)
        with pytest.raises(ValidationError):
            validate_travelers([Traveler(name="  ", email="a@b.hu")], 4)
        with pytest.raises(ValidationError):
            validate_travelers(make_travelers(1, email="not-an-email"), 4)
        with pytest.raises(CapacityError):
            validate_travelers(make_travelers(5), 4)

    def test_add_and_remove_traveler(self):
        travelers = add_traveler(make_travelers(1), 2)
        assert len(travelers) == 2 and travelers[1] == Traveler()
        with pytest.raises(CapacityError):
            add_traveler(travelers, 2)

        assert [t.name for t in remove_traveler(travelers, 0)] == [""]
        with pytest.raises(LastTravelerError):
            remove_traveler(make_travelers(1), 0)
        with pytest.raises(ValidationError):
            remove_traveler(travelers, 5)


class TestBookingService:

    def test_create_is_pending(self, ctx, package, user):
        booking = run(ctx.bookings.create(user.id, package.id, make_travelers(2), 100000))
        assert booking.status == BookingStatus.PENDING
        assert booking.payment_status == PaymentStatus.PENDING
        assert booking.currency == "HUF"
        assert run(ctx.bookings.get_by_id(booking.id)) == booking

    def test_update_after_cancel_fails_and_leaves_booking(self, ctx, package, user):
        booking = run(ctx.bookings.create(user.id, package.id, make_travelers(2), 100000))
        run(ctx.bookings.cancel(booking.id))
        with pytest.raises(BookingNotEditableError):
            run(ctx.bookings.update(booking.id, BookingUpdate(special_requests="Ablak mellé")))
        stored = run(ctx.bookings.get_by_id(booking.id))
        assert stored.status == BookingStatus.CANCELLED
        assert stored.special_requests == ""

    def test_update_missing(self, ctx):
        with pytest.raises(NotFoundError):
            run(ctx.bookings.update("nincs", BookingUpdate(special_requests="x")))

    def test_paid_confirms(self, ctx, package, user):
        booking = run(ctx.bookings.create(user.id, package.id, make_travelers(1), 50000))
        paid = run(ctx.bookings.update_payment_status(booking.id, PaymentStatus.PAID))
        assert paid.status == BookingStatus.CONFIRMED
        refunded = run(ctx.bookings.update_payment_status(booking.id, PaymentStatus.REFUNDED))
        assert refunded.status == BookingStatus.CONFIRMED

    def test_listing_and_stats(self, ctx, package, user, other_user):
        first = run(ctx.bookings.create(user.id, package.id, make_travelers(2), 100000))
        run(ctx.bookings.create(other_user.id, package.id, make_travelers(1), 50000))
        run(ctx.bookings.update_payment_status(first.id, PaymentStatus.PAID))

        assert [b.id for b in run(ctx.bookings.get_by_user_id(user.id))] == [first.id]
        assert len(run(ctx.bookings.get_by_package_id(package.id))) == 2

        confirmed, total = run(ctx.bookings.get_all(status=BookingStatus.CONFIRMED))
        assert total == 1 and confirmed[0].id == first.id
        page, total = run(ctx.bookings.get_all(limit=1))
        assert len(page) == 1 and total == 2

        stats = run(ctx.bookings.get_stats())
        assert (stats.total, stats.pending, stats.confirmed, stats.cancelled) == (2, 1, 1, 0)
        assert stats.total_revenue == 100000

    def test_mapping_is_idempotent(self, ctx, package, user):
        booking = run(ctx.bookings.create(user.id, package.id, make_travelers(2), 100000))
        doc = ctx.store.get_document("bookings", booking.id)
        assert ctx.bookings.map_document_to_booking(doc) == ctx.bookings.map_document_to_booking(doc)


class TestPlaceBooking:

    def test_two_travelers_at_50000(self, ctx, package, user):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(2), accept_terms=True))
        assert booking.total_price == 100000
        assert booking.status == BookingStatus.PENDING
        assert booking.payment_status == PaymentStatus.PENDING
        assert spots(ctx, package.id) == 8

    def test_invalid_email_rejected_before_any_write(self, ctx, package, user, monkeypatch):
        def no_backend(*args, **kwargs):
            raise AssertionError("backend must not be called")

        monkeypatch.setattr(ctx.store, "get_document", no_backend)
        monkeypatch.setattr(ctx.store, "create_document", no_backend)
        monkeypatch.setattr(ctx.store, "adjust_counter", no_backend)
        with pytest.raises(ValidationError):
            run(ctx.workflow.place_booking(user, package.id, make_travelers(1, email="not-an-email"),
                                           accept_terms=True))

    def test_terms_required(self, ctx, package, user):
        with pytest.raises(ValidationError):
            run(ctx.workflow.place_booking(user, package.id, make_travelers(1)))

    def test_inactive_package(self, ctx, package, user):
        run(ctx.packages.toggle_active(package.id, False))
        with pytest.raises(NotFoundError):
            run(ctx.workflow.place_booking(user, package.id, make_travelers(1), accept_terms=True))

    def test_not_enough_spots(self, ctx, user):
        package = run(ctx.packages.create(make_package(available_spots=1)))
        with pytest.raises(CapacityError):
            run(ctx.workflow.place_booking(user, package.id, make_travelers(2), accept_terms=True))
        assert run(ctx.bookings.get_by_package_id(package.id)) == []

    def test_failed_reservation_removes_booking(self, ctx, package, user, monkeypatch):
        async def sold_out(package_id, count):
            return None

        monkeypatch.setattr(ctx.packages, "reserve_spots", sold_out)
        with pytest.raises(CapacityError):
            run(ctx.workflow.place_booking(user, package.id, make_travelers(2), accept_terms=True))
        assert run(ctx.bookings.get_by_user_id(user.id)) == []

    def test_quote(self, ctx, package):
        quote = run(ctx.workflow.quote(package.id, 3))
        assert quote.total_price == 150000 and quote.available_spots == 10


class TestCancelBooking:

    def test_cancel_restores_spots(self, ctx, package, user):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(3), accept_terms=True))
        cancelled = run(ctx.workflow.cancel_booking(booking.id, user))
        assert cancelled.status == BookingStatus.CANCELLED
        assert spots(ctx, package.id) == 10

        with pytest.raises(BookingNotEditableError):
            run(ctx.bookings.update(booking.id, BookingUpdate(special_requests="x")))
        with pytest.raises(InvalidTransitionError):
            run(ctx.workflow.cancel_booking(booking.id, user))

    def test_only_owner_or_admin(self, ctx, package, user, other_user, admin):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(1), accept_terms=True))
        with pytest.raises(PermissionDeniedError):
            run(ctx.workflow.cancel_booking(booking.id, other_user))
        assert run(ctx.workflow.cancel_booking(booking.id, admin)).status == BookingStatus.CANCELLED

    def test_restore_never_exceeds_group_size(self, ctx, package, user):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(2), accept_terms=True))
        run(ctx.packages.update(package.id, PackageUpdate(available_spots=10)))
        run(ctx.workflow.cancel_booking(booking.id, user))
        assert spots(ctx, package.id) == 10

    def test_cancel_with_deleted_package(self, ctx, package, user):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(1), accept_terms=True))
        run(ctx.packages.delete(package.id))
        assert run(ctx.workflow.cancel_booking(booking.id, user)).status == BookingStatus.CANCELLED

    def test_paid_does_not_revive_cancelled_booking(self, ctx, package, user, admin):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(2), accept_terms=True))
        run(ctx.workflow.cancel_booking(booking.id, user))
        with pytest.raises(InvalidTransitionError):
            run(ctx.workflow.change_payment_status(booking.id, PaymentStatus.PAID, admin))

        stored = run(ctx.bookings.get_by_id(booking.id))
        assert stored.status == BookingStatus.CANCELLED
        assert stored.payment_status == PaymentStatus.PENDING
        assert spots(ctx, package.id) == 10

        refunded = run(ctx.workflow.change_payment_status(booking.id, PaymentStatus.REFUNDED, admin))
        assert refunded.status == BookingStatus.CANCELLED
        assert refunded.payment_status == PaymentStatus.REFUNDED

    def test_paid_keeps_completed_booking_completed(self, ctx, package, user):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(1), accept_terms=True))
        run(ctx.workflow.change_status(booking.id, BookingStatus.CONFIRMED))
        run(ctx.workflow.change_status(booking.id, BookingStatus.COMPLETED))
        with pytest.raises(InvalidTransitionError):
            run(ctx.workflow.change_payment_status(booking.id, PaymentStatus.PAID))
        paid = run(ctx.bookings.update_payment_status(booking.id, PaymentStatus.PAID))
        assert paid.status == BookingStatus.COMPLETED

    def test_paid_confirms_pending_booking(self, ctx, package, user, admin):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(1), accept_terms=True))
        paid = run(ctx.workflow.change_payment_status(booking.id, PaymentStatus.PAID, admin))
        assert paid.status == BookingStatus.CONFIRMED


class TestDeleteBooking:

    def test_delete_live_booking_releases_spots(self, ctx, package, user, admin):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(3), accept_terms=True))
        assert spots(ctx, package.id) == 7
        run(ctx.workflow.delete_booking(booking.id, admin))
        assert run(ctx.bookings.get_by_id(booking.id)) is None
        assert spots(ctx, package.id) == 10

    def test_delete_cancelled_booking_keeps_spots(self, ctx, package, user, other_user, admin):
        run(ctx.workflow.place_booking(other_user, package.id, make_travelers(4), accept_terms=True))
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(3), accept_terms=True))
        run(ctx.workflow.cancel_booking(booking.id, user))
        assert spots(ctx, package.id) == 6
        run(ctx.workflow.delete_booking(booking.id, admin))
        assert spots(ctx, package.id) == 6

    def test_delete_with_deleted_package(self, ctx, package, user, admin):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(1), accept_terms=True))
        run(ctx.packages.delete(package.id))
        run(ctx.workflow.delete_booking(booking.id, admin))
        assert run(ctx.bookings.get_by_id(booking.id)) is None

    def test_delete_missing(self, ctx, admin):
        with pytest.raises(NotFoundError):
            run(ctx.workflow.delete_booking("nincs", admin))

    def test_spots_stay_in_bounds(self, ctx, user):
        package = run(ctx.packages.create(make_package(max_group_size=5)))
        placed = []
        for count in (2, 2, 2, 1):
            try:
                placed.append(run(ctx.workflow.place_booking(user, package.id, make_travelers(count),
                                                             accept_terms=True)))
            except CapacityError:
                pass
            assert 0 <= spots(ctx, package.id) <= 5
        assert spots(ctx, package.id) == 0
        for booking in placed:
            run(ctx.workflow.cancel_booking(booking.id))
            assert 0 <= spots(ctx, package.id) <= 5
        assert spots(ctx, package.id) == 5


class TestEditBooking:

    @pytest.fixture
    def package(self, ctx):
        return run(ctx.packages.create(make_package(price=100000, max_group_size=4)))

    def test_two_to_three_travelers(self, ctx, package, user):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(2), accept_terms=True))
        result = run(ctx.workflow.edit_booking(booking.id, user, travelers=make_travelers(3)))
        assert result.booking.total_price == 300000
        assert result.price_change.previous_total == 200000
        assert result.price_change.difference == 100000
        assert spots(ctx, package.id) == 1

    def test_fewer_travelers_release_spots(self, ctx, package, user):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(3), accept_terms=True))
        result = run(ctx.workflow.edit_booking(booking.id, user, travelers=make_travelers(1)))
        assert result.booking.total_price == 100000
        assert spots(ctx, package.id) == 3

    def test_special_requests_only(self, ctx, package, user):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(2), accept_terms=True))
        result = run(ctx.workflow.edit_booking(booking.id, user, special_requests="Vegetáriánus menü"))
        assert result.booking.special_requests == "Vegetáriánus menü"
        assert result.booking.total_price == 200000
        assert result.price_change.difference == 0

    def test_not_enough_spots_for_more_travelers(self, ctx, package, user, other_user):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(2), accept_terms=True))
        run(ctx.workflow.place_booking(other_user, package.id, make_travelers(2), accept_terms=True))
        with pytest.raises(CapacityError):
            run(ctx.workflow.edit_booking(booking.id, user, travelers=make_travelers(3)))
        assert run(ctx.bookings.get_by_id(booking.id)).total_price == 200000
        assert spots(ctx, package.id) == 0

    def test_cancelled_booking_not_editable(self, ctx, package, user):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(2), accept_terms=True))
        run(ctx.workflow.cancel_booking(booking.id, user))
        with pytest.raises(BookingNotEditableError):
            run(ctx.workflow.edit_booking(booking.id, user, travelers=make_travelers(1)))

    def test_other_user_cannot_edit(self, ctx, package, user, other_user):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(1), accept_terms=True))
        with pytest.raises(PermissionDeniedError):
            run(ctx.workflow.edit_booking(booking.id, other_user, special_requests="x"))


class TestChangeStatus:

    def test_allowed_transitions(self, ctx, package, user):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(2), accept_terms=True))
        assert run(ctx.workflow.change_status(booking.id, BookingStatus.CONFIRMED)).status == BookingStatus.CONFIRMED
        assert run(ctx.workflow.change_status(booking.id, BookingStatus.COMPLETED)).status == BookingStatus.COMPLETED
        with pytest.raises(InvalidTransitionError):
            run(ctx.workflow.change_status(booking.id, BookingStatus.PENDING))

    def test_pending_cannot_complete(self, ctx, package, user):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(1), accept_terms=True))
        with pytest.raises(InvalidTransitionError):
            run(ctx.workflow.change_status(booking.id, BookingStatus.COMPLETED))

    def test_cancel_through_status_restores_spots(self, ctx, package, user):
        booking = run(ctx.workflow.place_booking(user, package.id, make_travelers(2), accept_terms=True))
        run(ctx.workflow.change_status(booking.id, "cancelled"))
        assert spots(ctx, package.id) == 10
