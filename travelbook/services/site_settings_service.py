# services/site_settings_service.py
"""Admin-editable site settings, kept as a single document"""

from loguru import logger

from travelbook.exceptions import NotFoundError
from travelbook.interfaces.document_store import DocumentStore
from travelbook.schemas.travel_schemas import SiteSettings
from travelbook.services.base import SETTINGS_COLLECTION, backend_call

SITE_SETTINGS_ID = "site"


class SiteSettingsService:

    def __init__(self, store: DocumentStore):
        self.store = store

    async def get(self) -> SiteSettings:
        """Stored settings, or the defaults if none were saved yet"""
        try:
            with backend_call("fetching site settings"):
                doc = self.store.get_document(SETTINGS_COLLECTION, SITE_SETTINGS_ID)
        except NotFoundError:
            return SiteSettings()
        return SiteSettings.model_validate({k: v for k, v in doc.items() if not k.startswith("$")})

    async def save(self, settings: SiteSettings) -> SiteSettings:
        data = settings.model_dump(by_alias=True, mode="json")
        try:
            with backend_call("saving site settings"):
                self.store.update_document(SETTINGS_COLLECTION, SITE_SETTINGS_ID, data)
        except NotFoundError:
            with backend_call("creating site settings"):
                self.store.create_document(SETTINGS_COLLECTION, SITE_SETTINGS_ID, data)
        logger.info("Site settings saved")
        return settings
