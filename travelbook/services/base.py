# services/base.py
"""
Shared plumbing for the domain services: collection names and the
store-error translation every backend call goes through.
"""

from contextlib import contextmanager
from loguru import logger

from travelbook.exceptions import BackendError, NotFoundError
from travelbook.interfaces.document_store import DocumentNotFound, StoreError

USERS_COLLECTION = "users"
PACKAGES_COLLECTION = "packages"
BOOKINGS_COLLECTION = "bookings"
ITINERARIES_COLLECTION = "itineraries"
ACCOUNTS_COLLECTION = "accounts"
SETTINGS_COLLECTION = "settings"


@contextmanager
def backend_call(action: str):
    """
    Log a failed store operation and re-raise it as a domain error.

    Missing documents become NotFoundError, anything else BackendError.
    """
    try:
        yield
    except DocumentNotFound as e:
        logger.error(f"Error {action}: {e}")
        raise NotFoundError(detail=str(e)) from e
    except StoreError as e:
        logger.error(f"Error {action}: {e}")
        raise BackendError(detail=str(e)) from e
