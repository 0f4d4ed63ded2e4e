# services/package_service.py
"""
Package Service
CRUD, filtering and spot accounting for travel packages.

The embedded day plans are stored as a JSON string on the package document;
everything else is stored natively.
"""

from typing import Any, Dict, List, Optional

from loguru import logger

from travelbook.exceptions import BackendError, NotFoundError
from travelbook.interfaces.codec import decode_json_field, decode_model_list, encode_model_list
from travelbook.interfaces.document_store import DocumentNotFound, DocumentStore, Query, StoreError, unique_id
from travelbook.schemas.travel_schemas import (
    PackageCreate,
    PackageItineraryDay,
    PackageUpdate,
    TravelFilters,
    TravelPackage,
)
from travelbook.services.base import PACKAGES_COLLECTION, backend_call
from travelbook.utils.helpers import generate_slug as slugify

# API sort keys -> stored attribute
SORT_ATTRIBUTES = {
    "price": "price",
    "rating": "rating",
    "duration": "duration",
    "departure": "departureDate",
}

LIST_FIELDS = ("images", "included", "notIncluded", "highlights")

# the only package attribute a partial update may clear
NULLABLE_FIELDS = ("originalPrice",)


class PackageService:
    """Travel package operations over the document store"""

    def __init__(self, store: DocumentStore, default_currency: str = "HUF"):
        self.store = store
        self.default_currency = default_currency

    # ---------- reads ----------

    async def get_all(self, filters: Optional[TravelFilters] = None) -> List[TravelPackage]:
        """List packages matching the filters, newest first unless a sort is given"""
        filters = filters or TravelFilters()
        queries = []

        if filters.category:
            queries.append(Query.equal("category", filters.category.value))
        if filters.continent:
            queries.append(Query.equal("continent", filters.continent))
        if filters.min_price:
            queries.append(Query.greater_than_equal("price", filters.min_price))
        if filters.max_price:
            queries.append(Query.less_than_equal("price", filters.max_price))
        if filters.duration and filters.duration.min:
            queries.append(Query.greater_than_equal("duration", filters.duration.min))
        if filters.duration and filters.duration.max:
            queries.append(Query.less_than_equal("duration", filters.duration.max))
        if filters.difficulty:
            queries.append(Query.equal("difficulty", filters.difficulty.value))
        if filters.only_active:
            queries.append(Query.equal("isActive", True))
        if filters.search:
            queries.append(Query.search("title", filters.search))

        if filters.sort_by:
            attribute = SORT_ATTRIBUTES[filters.sort_by]
            queries.append(Query.order_desc(attribute) if filters.sort_order == "desc" else Query.order_asc(attribute))
        else:
            queries.append(Query.order_desc("$createdAt"))

        with backend_call("fetching packages"):
            docs, _ = self.store.list_documents(PACKAGES_COLLECTION, queries)

        packages = [self.map_document_to_package(doc) for doc in docs]
        if filters.departure_month:
            packages = [p for p in packages if p.departure_date.month == filters.departure_month]
        return packages

    async def get_by_id(self, package_id: str) -> Optional[TravelPackage]:
        try:
            doc = self.store.get_document(PACKAGES_COLLECTION, package_id)
        except DocumentNotFound:
            return None
        except StoreError as e:
            logger.error(f"Error fetching package {package_id}: {e}")
            return None
        return self.map_document_to_package(doc)

    async def get_by_slug(self, slug: str) -> Optional[TravelPackage]:
        try:
            docs, _ = self.store.list_documents(
                PACKAGES_COLLECTION, [Query.equal("slug", slug), Query.limit(1)]
            )
        except StoreError as e:
            logger.error(f"Error fetching package by slug {slug}: {e}")
            return None
        if not docs:
            return None
        return self.map_document_to_package(docs[0])

    async def get_featured(self, limit: int = 6) -> List[TravelPackage]:
        with backend_call("fetching featured packages"):
            docs, _ = self.store.list_documents(PACKAGES_COLLECTION, [
                Query.equal("isActive", True),
                Query.equal("isFeatured", True),
                Query.limit(limit),
            ])
        return [self.map_document_to_package(doc) for doc in docs]

    # ---------- writes ----------

    async def create(self, data: PackageCreate) -> TravelPackage:
        """
        Create a package.

        Rating and review count start at zero; available spots default to
        the group size and are clamped into [0, max_group_size].
        """
        doc = data.model_dump(by_alias=True, mode="json", exclude={"itinerary", "available_spots", "currency"})
        spots = data.available_spots if data.available_spots is not None else data.max_group_size
        doc.update({
            "slug": self.generate_slug(data.title),
            "rating": 0,
            "reviewCount": 0,
            "itinerary": encode_model_list(data.itinerary),
            "currency": data.currency or self.default_currency,
            "availableSpots": max(0, min(spots, data.max_group_size)),
        })

        with backend_call("creating package"):
            created = self.store.create_document(PACKAGES_COLLECTION, unique_id(), doc)
        logger.info(f"Created package {created['$id']} ({created['slug']})")
        return self.map_document_to_package(created)

    async def update(self, package_id: str, data: PackageUpdate) -> TravelPackage:
        """
        Apply a partial update; a new title also gets a new slug.

        Explicit nulls are ignored except for the fields a package may
        leave empty, so a stored package always maps back to a valid model.
        """
        updates = {
            name: value
            for name, value in data.model_dump(by_alias=True, mode="json", exclude_unset=True,
                                               exclude={"itinerary"}).items()
            if value is not None or name in NULLABLE_FIELDS
        }
        if data.itinerary is not None:
            updates["itinerary"] = encode_model_list(data.itinerary)
        if data.title:
            updates["slug"] = self.generate_slug(data.title)

        if "availableSpots" in updates or "maxGroupSize" in updates:
            current = await self.get_by_id(package_id)
            if current is None:
                raise NotFoundError("A csomag nem található.")
            max_size = updates.get("maxGroupSize", current.max_group_size)
            spots = updates.get("availableSpots", current.available_spots)
            updates["availableSpots"] = max(0, min(spots, max_size))

        with backend_call(f"updating package {package_id}"):
            doc = self.store.update_document(PACKAGES_COLLECTION, package_id, updates)
        return self.map_document_to_package(doc)

    async def delete(self, package_id: str):
        with backend_call(f"deleting package {package_id}"):
            self.store.delete_document(PACKAGES_COLLECTION, package_id)
        logger.info(f"Deleted package {package_id}")

    async def toggle_active(self, package_id: str, is_active: bool) -> TravelPackage:
        return await self.update(package_id, PackageUpdate(is_active=is_active))

    async def toggle_featured(self, package_id: str, is_featured: bool) -> TravelPackage:
        return await self.update(package_id, PackageUpdate(is_featured=is_featured))

    # ---------- spot accounting ----------

    async def reserve_spots(self, package_id: str, count: int) -> Optional[TravelPackage]:
        """
        Atomically take `count` spots.

        Returns None, leaving the package untouched, when fewer than
        `count` spots remain or the package is gone.
        """
        with backend_call(f"reserving spots on {package_id}"):
            doc = self.store.adjust_counter(PACKAGES_COLLECTION, package_id, "availableSpots", -count)
        return self.map_document_to_package(doc) if doc else None

    async def decrease_available_spots(self, package_id: str, count: int = 1) -> TravelPackage:
        """Take up to `count` spots, stopping at zero"""
        current = await self.get_by_id(package_id)
        if current is None:
            raise NotFoundError("A csomag nem található.")
        take = min(count, current.available_spots)
        if take <= 0:
            return current
        updated = await self.reserve_spots(package_id, take)
        if updated is None:
            raise BackendError(detail=f"spot count of {package_id} changed concurrently")
        return updated

    async def increase_available_spots(self, package_id: str, count: int = 1) -> TravelPackage:
        """Give back `count` spots, never exceeding the group size"""
        with backend_call(f"releasing spots on {package_id}"):
            doc = self.store.adjust_counter(
                PACKAGES_COLLECTION, package_id, "availableSpots", count,
                ceiling_attribute="maxGroupSize"
            )
        if doc is None:
            raise NotFoundError("A csomag nem található.")
        return self.map_document_to_package(doc)

    # ---------- mapping ----------

    @staticmethod
    def generate_slug(title: str) -> str:
        """Slugified title plus a short random suffix so slugs stay unique"""
        return f"{slugify(title)}-{unique_id()[:6]}"

    def map_document_to_package(self, doc: Dict[str, Any]) -> TravelPackage:
        data = {k: v for k, v in doc.items() if not k.startswith("$")}
        context = f"package {doc['$id']}"
        for name in LIST_FIELDS:
            value = decode_json_field(doc.get(name), [], f"{context}.{name}")
            data[name] = value if isinstance(value, list) else []
        data.update({
            "id": doc["$id"],
            "itinerary": decode_model_list(doc.get("itinerary"), PackageItineraryDay, f"{context}.itinerary"),
            "currency": doc.get("currency") or self.default_currency,
            "difficulty": doc.get("difficulty") or "moderate",
            "rating": doc.get("rating") or 0,
            "reviewCount": doc.get("reviewCount") or 0,
            "createdAt": doc["$createdAt"],
            "updatedAt": doc["$updatedAt"],
        })
        return TravelPackage.model_validate(data)
