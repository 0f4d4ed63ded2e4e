# services/booking_service.py
"""
Booking Service
Raw booking persistence: create, read, status writes and editability-checked
updates. Spot accounting and repricing live in the booking workflow.
"""

from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from travelbook.exceptions import BookingNotEditableError, NotFoundError
from travelbook.interfaces.codec import decode_model_list, encode_model_list
from travelbook.interfaces.document_store import DocumentNotFound, DocumentStore, Query, StoreError, unique_id
from travelbook.schemas.travel_schemas import (
    Booking,
    BookingStats,
    BookingStatus,
    BookingUpdate,
    EDITABLE_BOOKING_STATUSES,
    PaymentStatus,
    Traveler,
)
from travelbook.services.base import BOOKINGS_COLLECTION, backend_call


class BookingService:
    """Booking documents over the document store"""

    def __init__(self, store: DocumentStore, default_currency: str = "HUF"):
        self.store = store
        self.default_currency = default_currency

    async def create(self, user_id: str, package_id: str, travelers: List[Traveler],
                     total_price: float, special_requests: Optional[str] = None,
                     currency: Optional[str] = None) -> Booking:
        """New booking, always pending / payment pending"""
        with backend_call("creating booking"):
            doc = self.store.create_document(BOOKINGS_COLLECTION, unique_id(), {
                "userId": user_id,
                "packageId": package_id,
                "travelers": encode_model_list(travelers),
                "totalPrice": total_price,
                "currency": currency or self.default_currency,
                "specialRequests": special_requests or "",
                "status": BookingStatus.PENDING.value,
                "paymentStatus": PaymentStatus.PENDING.value,
            })
        logger.info(f"Created booking {doc['$id']} for user {user_id} on package {package_id}")
        return self.map_document_to_booking(doc)

    async def get_by_id(self, booking_id: str) -> Optional[Booking]:
        try:
            doc = self.store.get_document(BOOKINGS_COLLECTION, booking_id)
        except DocumentNotFound:
            return None
        except StoreError as e:
            logger.error(f"Error fetching booking {booking_id}: {e}")
            return None
        return self.map_document_to_booking(doc)

    async def get_by_user_id(self, user_id: str) -> List[Booking]:
        with backend_call(f"fetching bookings of user {user_id}"):
            docs, _ = self.store.list_documents(BOOKINGS_COLLECTION, [
                Query.equal("userId", user_id),
                Query.order_desc("$createdAt"),
            ])
        return [self.map_document_to_booking(doc) for doc in docs]

    async def get_all(self, status: Optional[BookingStatus] = None,
                      payment_status: Optional[PaymentStatus] = None,
                      limit: Optional[int] = None,
                      offset: Optional[int] = None) -> Tuple[List[Booking], int]:
        """Admin listing, newest first; total ignores limit/offset"""
        queries = [Query.order_desc("$createdAt")]
        if status:
            queries.append(Query.equal("status", BookingStatus(status).value))
        if payment_status:
            queries.append(Query.equal("paymentStatus", PaymentStatus(payment_status).value))
        if limit:
            queries.append(Query.limit(limit))
        if offset:
            queries.append(Query.offset(offset))

        with backend_call("fetching all bookings"):
            docs, total = self.store.list_documents(BOOKINGS_COLLECTION, queries)
        return [self.map_document_to_booking(doc) for doc in docs], total

    async def get_by_package_id(self, package_id: str) -> List[Booking]:
        with backend_call(f"fetching bookings of package {package_id}"):
            docs, _ = self.store.list_documents(BOOKINGS_COLLECTION, [
                Query.equal("packageId", package_id),
                Query.order_desc("$createdAt"),
            ])
        return [self.map_document_to_booking(doc) for doc in docs]

    async def update_status(self, booking_id: str, status: BookingStatus) -> Booking:
        """Unconditional status write; transition rules belong to the workflow"""
        with backend_call(f"updating status of booking {booking_id}"):
            doc = self.store.update_document(BOOKINGS_COLLECTION, booking_id, {"status": BookingStatus(status).value})
        return self.map_document_to_booking(doc)

    async def update_payment_status(self, booking_id: str, payment_status: PaymentStatus) -> Booking:
        """A pending booking that gets paid is confirmed as well"""
        payment_status = PaymentStatus(payment_status)
        current = await self.get_by_id(booking_id)
        if current is None:
            raise NotFoundError("Foglalás nem található")

        updates = {"paymentStatus": payment_status.value}
        if payment_status == PaymentStatus.PAID and current.status == BookingStatus.PENDING:
            updates["status"] = BookingStatus.CONFIRMED.value

        with backend_call(f"updating payment status of booking {booking_id}"):
            doc = self.store.update_document(BOOKINGS_COLLECTION, booking_id, updates)
        return self.map_document_to_booking(doc)

    async def cancel(self, booking_id: str) -> Booking:
        return await self.update_status(booking_id, BookingStatus.CANCELLED)

    async def update(self, booking_id: str, data: BookingUpdate) -> Booking:
        """
        Update travelers, special requests or total price.

        Only pending or confirmed bookings can be changed. The submitted
        total is stored as given.

        Raises:
            NotFoundError: booking does not exist
            BookingNotEditableError: booking is cancelled or completed
        """
        current = await self.get_by_id(booking_id)
        if current is None:
            raise NotFoundError("Foglalás nem található")
        if current.status not in EDITABLE_BOOKING_STATUSES:
            raise BookingNotEditableError()

        updates: Dict[str, Any] = {}
        if data.travelers is not None:
            updates["travelers"] = encode_model_list(data.travelers)
        if data.special_requests is not None:
            updates["specialRequests"] = data.special_requests
        if data.total_price is not None:
            updates["totalPrice"] = data.total_price

        with backend_call(f"updating booking {booking_id}"):
            doc = self.store.update_document(BOOKINGS_COLLECTION, booking_id, updates)
        return self.map_document_to_booking(doc)

    async def delete(self, booking_id: str):
        with backend_call(f"deleting booking {booking_id}"):
            self.store.delete_document(BOOKINGS_COLLECTION, booking_id)
        logger.info(f"Deleted booking {booking_id}")

    async def get_stats(self) -> BookingStats:
        """Counts per status and revenue over paid bookings"""
        with backend_call("fetching booking stats"):
            _, total = self.store.list_documents(BOOKINGS_COLLECTION, [Query.limit(0)])
            counts = {}
            for status in BookingStatus:
                _, counts[status.value] = self.store.list_documents(
                    BOOKINGS_COLLECTION, [Query.equal("status", status.value), Query.limit(0)]
                )
            paid, _ = self.store.list_documents(
                BOOKINGS_COLLECTION, [Query.equal("paymentStatus", PaymentStatus.PAID.value)]
            )

        revenue = sum(doc.get("totalPrice") or 0 for doc in paid)
        return BookingStats(total=total, total_revenue=revenue, **counts)

    def map_document_to_booking(self, doc: Dict[str, Any]) -> Booking:
        return Booking(
            id=doc["$id"],
            user_id=doc.get("userId", ""),
            package_id=doc.get("packageId", ""),
            status=doc.get("status") or BookingStatus.PENDING,
            payment_status=doc.get("paymentStatus") or PaymentStatus.PENDING,
            travelers=decode_model_list(doc.get("travelers"), Traveler, f"booking {doc['$id']}.travelers"),
            total_price=doc.get("totalPrice") or 0,
            currency=doc.get("currency") or self.default_currency,
            special_requests=doc.get("specialRequests"),
            payment_method=doc.get("paymentMethod"),
            booked_at=doc["$createdAt"],
            updated_at=doc["$updatedAt"],
        )
