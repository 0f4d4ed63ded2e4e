# services/itinerary_service.py
"""
Itinerary Service
Persistence of AI itineraries once a user decides to keep one.

The request echo, the day list and the budget are stored as JSON strings;
destination/country/duration are also kept flat so older documents without
`requestData` can still be read.
"""

from typing import Any, Dict, List, Optional

from loguru import logger

from travelbook.interfaces.codec import decode_model, decode_model_list, encode_json_field, encode_model_list
from travelbook.interfaces.document_store import DocumentNotFound, DocumentStore, Query, StoreError, unique_id
from travelbook.schemas.travel_schemas import (
    AIItinerary,
    AIItineraryDay,
    AIItineraryRequest,
    BudgetLevel,
    EstimatedBudget,
    GroupType,
    ItineraryUpdate,
    ShareLink,
    TravelStyle,
)
from travelbook.services.base import ITINERARIES_COLLECTION, backend_call


class ItineraryService:

    def __init__(self, store: DocumentStore, public_base_url: str = "http://localhost:5173",
                 default_currency: str = "HUF"):
        self.store = store
        self.public_base_url = public_base_url.rstrip("/")
        self.default_currency = default_currency

    async def save(self, user_id: str, itinerary: AIItinerary) -> AIItinerary:
        """Store a generated itinerary for `user_id`; it gets a new id"""
        cover_image = itinerary.days[0].image if itinerary.days and itinerary.days[0].image else ""
        with backend_call("saving itinerary"):
            doc = self.store.create_document(ITINERARIES_COLLECTION, unique_id(), {
                "userId": user_id,
                "title": itinerary.title,
                "summary": itinerary.summary,
                "destination": itinerary.request.destination,
                "country": itinerary.request.country,
                "duration": itinerary.request.duration,
                "requestData": encode_json_field(itinerary.request),
                "daysData": encode_model_list(itinerary.days),
                "estimatedBudget": encode_json_field(itinerary.estimated_budget),
                "tips": list(itinerary.tips),
                "bestTimeToVisit": itinerary.best_time_to_visit,
                "isSaved": True,
                "coverImage": cover_image,
            })
        logger.info(f"Saved itinerary {doc['$id']} for user {user_id}")
        return self.map_document_to_itinerary(doc)

    async def get_by_user_id(self, user_id: str) -> List[AIItinerary]:
        with backend_call(f"fetching itineraries of user {user_id}"):
            docs, _ = self.store.list_documents(ITINERARIES_COLLECTION, [
                Query.equal("userId", user_id),
                Query.order_desc("$createdAt"),
            ])
        return [self.map_document_to_itinerary(doc) for doc in docs]

    async def get_by_id(self, itinerary_id: str) -> Optional[AIItinerary]:
        try:
            doc = self.store.get_document(ITINERARIES_COLLECTION, itinerary_id)
        except DocumentNotFound:
            return None
        except StoreError as e:
            logger.error(f"Error fetching itinerary {itinerary_id}: {e}")
            return None
        return self.map_document_to_itinerary(doc)

    async def update(self, itinerary_id: str, data: ItineraryUpdate) -> AIItinerary:
        """Replace the given parts wholesale; edited days are stored as they are"""
        updates: Dict[str, Any] = {}
        if data.title is not None:
            updates["title"] = data.title
        if data.summary is not None:
            updates["summary"] = data.summary
        if data.days is not None:
            updates["daysData"] = encode_model_list(data.days)
            updates["coverImage"] = (data.days[0].image or "") if data.days else ""
        if data.tips is not None:
            updates["tips"] = list(data.tips)
        if data.best_time_to_visit is not None:
            updates["bestTimeToVisit"] = data.best_time_to_visit
        if data.estimated_budget is not None:
            updates["estimatedBudget"] = encode_json_field(data.estimated_budget)

        with backend_call(f"updating itinerary {itinerary_id}"):
            doc = self.store.update_document(ITINERARIES_COLLECTION, itinerary_id, updates)
        return self.map_document_to_itinerary(doc)

    async def delete(self, itinerary_id: str):
        with backend_call(f"deleting itinerary {itinerary_id}"):
            self.store.delete_document(ITINERARIES_COLLECTION, itinerary_id)
        logger.info(f"Deleted itinerary {itinerary_id}")

    def generate_share_link(self, itinerary_id: str) -> ShareLink:
        return ShareLink(itinerary_id=itinerary_id, url=f"{self.public_base_url}/itinerary/{itinerary_id}")

    def map_document_to_itinerary(self, doc: Dict[str, Any]) -> AIItinerary:
        context = f"itinerary {doc['$id']}"
        fallback_request = AIItineraryRequest(
            destination=doc.get("destination") or "?",
            country=doc.get("country") or "",
            duration=min(max(doc.get("duration") or 1, 1), 30),
            travel_style=TravelStyle.BALANCED,
            interests=[],
            group_type=GroupType.COUPLE,
            budget=BudgetLevel.MODERATE,
        )
        tips = doc.get("tips")

        return AIItinerary(
            id=doc["$id"],
            user_id=doc.get("userId") or "",
            request=decode_model(doc.get("requestData"), AIItineraryRequest, fallback_request, f"{context}.requestData"),
            title=doc.get("title") or "",
            summary=doc.get("summary") or "",
            days=decode_model_list(doc.get("daysData"), AIItineraryDay, f"{context}.daysData"),
            estimated_budget=decode_model(
                doc.get("estimatedBudget"), EstimatedBudget,
                EstimatedBudget(min=0, max=0, currency=self.default_currency), f"{context}.estimatedBudget"
            ),
            tips=tips if isinstance(tips, list) else [],
            best_time_to_visit=doc.get("bestTimeToVisit") or "",
            cover_image=doc.get("coverImage") or None,
            created_at=doc["$createdAt"],
            updated_at=doc["$updatedAt"],
            is_saved=bool(doc.get("isSaved")),
        )
