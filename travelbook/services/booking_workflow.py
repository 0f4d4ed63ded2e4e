# services/booking_workflow.py
"""
Booking Workflow
Multi-step booking operations that keep a package's spot count in step with
the traveler counts of its bookings.

- place_booking: create + reserve spots, booking removed again if the
  reservation fails
- cancel_booking: cancel + give the spots back
- edit_booking: traveler edit with server-side repricing and spot delta
- change_status: admin status changes along the allowed transitions
- change_payment_status / delete_booking: admin payment and removal paths
  that keep terminal bookings terminal and live spots accounted for
"""

from typing import Dict, List, Optional, Tuple

from loguru import logger

from travelbook.exceptions import (
    BookingNotEditableError,
    CapacityError,
    InvalidTransitionError,
    LastTravelerError,
    NotFoundError,
    PermissionDeniedError,
    TravelbookError,
    ValidationError,
)
from travelbook.schemas.travel_schemas import (
    Booking,
    BookingEditResult,
    BookingQuote,
    BookingStatus,
    BookingUpdate,
    PaymentStatus,
    PriceChange,
    Traveler,
    TravelPackage,
    User,
)
from travelbook.services.booking_service import BookingService
from travelbook.services.package_service import PackageService
from travelbook.utils.helpers import is_valid_email

ALLOWED_TRANSITIONS: Dict[BookingStatus, Tuple[BookingStatus, ...]] = {
    BookingStatus.PENDING: (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
    BookingStatus.CONFIRMED: (BookingStatus.COMPLETED, BookingStatus.CANCELLED),
    BookingStatus.CANCELLED: (),
    BookingStatus.COMPLETED: (),
}

TERMINAL_STATUSES = (BookingStatus.CANCELLED, BookingStatus.COMPLETED)


# ============================================
# Pure helpers
# ============================================

def reprice(price: float, old_total: float, count: int, previous_count: Optional[int] = None) -> PriceChange:
    """
    New total for `count` travelers at the package unit price.

    Example:
        >>> reprice(100000, 200000, 3, previous_count=2).difference
        100000
    """
    new_total = price * count
    return PriceChange(
        previous_total=old_total,
        new_total=new_total,
        difference=new_total - old_total,
        traveler_delta=count - previous_count if previous_count is not None else 0,
    )


def validate_travelers(travelers: List[Traveler], max_group_size: Optional[int] = None):
    """
    Check a traveler list before anything is written.

    Without `max_group_size` only the traveler fields are checked.

    Raises:
        ValidationError: empty list, missing name or malformed email
        CapacityError: more travelers than the group size allows
    """
    if not travelers:
        raise ValidationError("Legalább egy utast meg kell adni.")
    if max_group_size is not None and len(travelers) > max_group_size:
        raise CapacityError(f"Legfeljebb {max_group_size} utas foglalható erre az útra.")
    for index, traveler in enumerate(travelers, start=1):
        if not traveler.name.strip():
            raise ValidationError(f"A(z) {index}. utas neve kötelező.")
        if not is_valid_email(traveler.email):
            raise ValidationError(f"A(z) {index}. utas email címe érvénytelen.")


def add_traveler(travelers: List[Traveler], max_group_size: int) -> List[Traveler]:
    """Append an empty traveler row, refusing to go past the group size"""
    if len(travelers) >= max_group_size:
        raise CapacityError(f"Legfeljebb {max_group_size} utas foglalható erre az útra.")
    return [*travelers, Traveler()]


def remove_traveler(travelers: List[Traveler], index: int) -> List[Traveler]:
    """Drop the traveler at `index`; the last one cannot be removed"""
    if len(travelers) <= 1:
        raise LastTravelerError()
    if not 0 <= index < len(travelers):
        raise ValidationError(f"Nincs {index + 1}. utas.")
    return [t for i, t in enumerate(travelers) if i != index]


# ============================================
# Workflow
# ============================================

class BookingWorkflow:
    """Booking operations that span the bookings and packages collections"""

    def __init__(self, bookings: BookingService, packages: PackageService):
        self.bookings = bookings
        self.packages = packages

    async def _bookable_package(self, package_id: str) -> TravelPackage:
        package = await self.packages.get_by_id(package_id)
        if package is None or not package.is_active:
            raise NotFoundError("A csomag nem található vagy már nem foglalható.")
        return package

    async def _owned_booking(self, booking_id: str, actor: Optional[User]) -> Booking:
        booking = await self.bookings.get_by_id(booking_id)
        if booking is None:
            raise NotFoundError("Foglalás nem található")
        if actor is not None and not actor.is_admin and booking.user_id != actor.id:
            raise PermissionDeniedError()
        return booking

    async def quote(self, package_id: str, traveler_count: int) -> BookingQuote:
        """Price a prospective booking without writing anything"""
        package = await self._bookable_package(package_id)
        return BookingQuote(
            package_id=package.id,
            traveler_count=traveler_count,
            unit_price=package.price,
            total_price=package.price * traveler_count,
            currency=package.currency,
            available_spots=package.available_spots,
            max_group_size=package.max_group_size,
        )

    async def place_booking(self, user: User, package_id: str, travelers: List[Traveler],
                            special_requests: Optional[str] = None,
                            accept_terms: bool = False) -> Booking:
        """
        Create a pending booking and take its spots in one step.

        The total is computed here from the package price. If the spots
        cannot be taken the freshly created booking is deleted again.

        Raises:
            ValidationError: terms not accepted or invalid travelers
            NotFoundError: package missing or inactive
            CapacityError: not enough spots left
        """
        if not accept_terms:
            raise ValidationError("A foglaláshoz el kell fogadnod az utazási feltételeket.")
        validate_travelers(travelers)

        package = await self._bookable_package(package_id)
        validate_travelers(travelers, package.max_group_size)
        count = len(travelers)
        if count > package.available_spots:
            raise CapacityError(f"Csak {package.available_spots} szabad hely maradt erre az útra.")

        booking = await self.bookings.create(
            user_id=user.id,
            package_id=package.id,
            travelers=travelers,
            total_price=package.price * count,
            special_requests=special_requests,
            currency=package.currency,
        )

        try:
            reserved = await self.packages.reserve_spots(package.id, count)
        except TravelbookError:
            await self._discard_booking(booking.id)
            raise
        if reserved is None:
            await self._discard_booking(booking.id)
            raise CapacityError("Időközben elfogytak a szabad helyek ehhez a foglaláshoz.")

        logger.info(f"Booking {booking.id}: {count} spots taken on {package.id}, {reserved.available_spots} left")
        return booking

    async def _discard_booking(self, booking_id: str):
        logger.warning(f"Rolling back booking {booking_id}, spots could not be reserved")
        try:
            await self.bookings.delete(booking_id)
        except TravelbookError as e:
            logger.error(f"Rollback of booking {booking_id} failed: {e.detail or e.message}")

    async def cancel_booking(self, booking_id: str, actor: Optional[User] = None) -> Booking:
        """
        Cancel a pending or confirmed booking and give its spots back.

        `actor` must own the booking unless they are an admin; None means a
        trusted internal caller.
        """
        booking = await self._owned_booking(booking_id, actor)
        if booking.status not in (BookingStatus.PENDING, BookingStatus.CONFIRMED):
            raise InvalidTransitionError("Ez a foglalás már nem mondható le.")

        cancelled = await self.bookings.cancel(booking_id)
        try:
            await self.packages.increase_available_spots(booking.package_id, len(booking.travelers))
        except NotFoundError:
            logger.warning(f"Package {booking.package_id} of cancelled booking {booking_id} no longer exists")
        logger.info(f"Cancelled booking {booking_id}, released {len(booking.travelers)} spots")
        return cancelled

    async def edit_booking(self, booking_id: str, actor: Optional[User],
                           travelers: Optional[List[Traveler]] = None,
                           special_requests: Optional[str] = None) -> BookingEditResult:
        """
        Change the travelers and/or special requests of a booking.

        A new traveler list is validated against the package, repriced at
        the current package price and the spot difference is taken or
        released before the booking is written.
        """
        booking = await self._owned_booking(booking_id, actor)
        if not booking.is_editable:
            raise BookingNotEditableError()

        if travelers is None:
            updated = await self.bookings.update(booking_id, BookingUpdate(special_requests=special_requests))
            unchanged = reprice(booking.total_price, booking.total_price, 1)
            return BookingEditResult(booking=updated, price_change=unchanged)

        package = await self.packages.get_by_id(booking.package_id)
        if package is None:
            raise NotFoundError("A foglaláshoz tartozó csomag már nem elérhető.")
        validate_travelers(travelers, package.max_group_size)

        previous_count = len(booking.travelers)
        change = reprice(package.price, booking.total_price, len(travelers), previous_count)
        delta = change.traveler_delta

        if delta > 0:
            reserved = await self.packages.reserve_spots(package.id, delta)
            if reserved is None:
                raise CapacityError(f"Csak {package.available_spots} további szabad hely van erre az útra.")
        elif delta < 0:
            await self.packages.increase_available_spots(package.id, -delta)

        try:
            updated = await self.bookings.update(booking_id, BookingUpdate(
                travelers=travelers,
                special_requests=special_requests,
                total_price=change.new_total,
            ))
        except TravelbookError:
            await self._undo_spot_delta(package.id, delta)
            raise

        logger.info(f"Edited booking {booking_id}: {previous_count} -> {len(travelers)} travelers, "
                    f"total {change.previous_total} -> {change.new_total}")
        return BookingEditResult(booking=updated, price_change=change)

    async def _undo_spot_delta(self, package_id: str, delta: int):
        try:
            if delta > 0:
                await self.packages.increase_available_spots(package_id, delta)
            elif delta < 0:
                await self.packages.reserve_spots(package_id, -delta)
        except TravelbookError as e:
            logger.error(f"Could not restore spots on {package_id}: {e.detail or e.message}")

    async def change_status(self, booking_id: str, status: BookingStatus, actor: Optional[User] = None) -> Booking:
        """Admin status change restricted to the allowed transitions"""
        status = BookingStatus(status)
        booking = await self._owned_booking(booking_id, actor)
        if status not in ALLOWED_TRANSITIONS[booking.status]:
            raise InvalidTransitionError(
                f"A foglalás nem állítható '{booking.status.value}' állapotból '{status.value}' állapotba."
            )
        if status == BookingStatus.CANCELLED:
            return await self.cancel_booking(booking_id, actor)
        return await self.bookings.update_status(booking_id, status)

    async def change_payment_status(self, booking_id: str, payment_status: PaymentStatus,
                                    actor: Optional[User] = None) -> Booking:
        """
        Admin payment change.

        A cancelled or completed booking can only be refunded; marking it
        paid would revive it without its spots.
        """
        payment_status = PaymentStatus(payment_status)
        booking = await self._owned_booking(booking_id, actor)
        if booking.status in TERMINAL_STATUSES and payment_status != PaymentStatus.REFUNDED:
            raise InvalidTransitionError("Lezárt foglalás fizetési státusza csak visszatérítettre állítható.")
        return await self.bookings.update_payment_status(booking_id, payment_status)

    async def delete_booking(self, booking_id: str, actor: Optional[User] = None):
        """Remove a booking; a live one gives its spots back first"""
        booking = await self._owned_booking(booking_id, actor)
        if booking.status not in TERMINAL_STATUSES:
            try:
                await self.packages.increase_available_spots(booking.package_id, len(booking.travelers))
            except NotFoundError:
                logger.warning(f"Package {booking.package_id} of deleted booking {booking_id} no longer exists")
        await self.bookings.delete(booking_id)
        logger.info(f"Deleted booking {booking_id} ({booking.status.value})")
