"""
Application Context
Owns every backend client and service for one running app. Built once at
startup, handed to request handlers through FastAPI dependencies, closed
at shutdown. Nothing here is a module-level singleton.
"""

from dataclasses import dataclass
from typing import Optional

import httpx
from loguru import logger

from travelbook.config import Settings
from travelbook.interfaces.document_store import DocumentStore
from travelbook.interfaces.session_store import SessionStore
from travelbook.llm.ai_planner import AIPlanner
from travelbook.llm.itinerary_generator import ItineraryGenerator
from travelbook.llm.llm_client import LLMClient, create_llm_client
from travelbook.services.auth_service import AuthService
from travelbook.services.booking_service import BookingService
from travelbook.services.booking_workflow import BookingWorkflow
from travelbook.services.image_service import ImageService
from travelbook.services.itinerary_service import ItineraryService
from travelbook.services.package_service import PackageService
from travelbook.services.site_settings_service import SiteSettingsService
from travelbook.services.user_service import UserService


@dataclass
class AppContext:
    settings: Settings
    store: DocumentStore
    sessions: SessionStore
    http_client: httpx.AsyncClient
    llm: LLMClient
    packages: PackageService
    bookings: BookingService
    workflow: BookingWorkflow
    users: UserService
    auth: AuthService
    itineraries: ItineraryService
    images: ImageService
    planner: AIPlanner
    site_settings: SiteSettingsService

    async def close(self):
        await self.llm.aclose()
        await self.http_client.aclose()
        self.sessions.close()
        self.store.close()
        logger.info("Application context closed")


def build_context(settings: Settings,
                  store: Optional[DocumentStore] = None,
                  sessions: Optional[SessionStore] = None,
                  llm: Optional[LLMClient] = None,
                  http_client: Optional[httpx.AsyncClient] = None) -> AppContext:
    """
    Wire up stores, clients and services.

    Any of the backends can be passed in ready-made; the rest are built
    from `settings`.
    """
    store = store or DocumentStore(settings.MONGO_URI, settings.MONGO_DB, settings.USE_MEMORY_STORE)
    sessions = sessions or SessionStore(
        None if settings.USE_MEMORY_STORE else settings.redis_url,
        ttl_hours=settings.SESSION_TTL_HOURS,
        recovery_ttl_minutes=settings.RECOVERY_TTL_MINUTES,
    )
    http_client = http_client or httpx.AsyncClient()
    llm = llm or create_llm_client(settings, http_client)
    currency = settings.DEFAULT_CURRENCY

    packages = PackageService(store, currency)
    bookings = BookingService(store, currency)
    users = UserService(store)
    images = ImageService(http_client, settings.UNSPLASH_ACCESS_KEY, settings.UNSPLASH_API_URL, settings.IMAGE_TIMEOUT)

    ctx = AppContext(
        settings=settings,
        store=store,
        sessions=sessions,
        http_client=http_client,
        llm=llm,
        packages=packages,
        bookings=bookings,
        workflow=BookingWorkflow(bookings, packages),
        users=users,
        auth=AuthService(store, sessions, users, settings.PUBLIC_BASE_URL),
        itineraries=ItineraryService(store, settings.PUBLIC_BASE_URL, currency),
        images=images,
        planner=AIPlanner(ItineraryGenerator(llm), images),
        site_settings=SiteSettingsService(store),
    )
    logger.info(f"Application context ready (store={store.backend}, sessions={sessions.backend}, "
                f"llm={llm.provider})")
    return ctx
