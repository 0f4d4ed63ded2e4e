# services/auth_service.py
"""
Auth Service
Accounts, login sessions and password recovery.

Accounts (email + password hash) are kept in the `accounts` collection under
the same id as the user's profile document; sessions and recovery secrets
live in the session store.
"""

import hashlib
import hmac
import secrets
from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from loguru import logger

from travelbook.exceptions import (
    AuthenticationError, DuplicateEmailError, NotFoundError, TravelbookError, ValidationError,
)
from travelbook.interfaces.document_store import DocumentStore, Query, unique_id
from travelbook.interfaces.session_store import SessionStore
from travelbook.schemas.travel_schemas import ProfileUpdate, SessionInfo, User, UserRole
from travelbook.services.base import ACCOUNTS_COLLECTION, backend_call
from travelbook.services.user_service import UserService
from travelbook.utils.helpers import is_valid_email

PBKDF2_ITERATIONS = 120_000


def hash_password(password: str, salt: Optional[str] = None) -> Dict[str, str]:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), PBKDF2_ITERATIONS)
    return {"passwordHash": digest.hex(), "passwordSalt": salt}


def verify_password(password: str, account: Dict[str, Any]) -> bool:
    salt = account.get("passwordSalt")
    if not salt or not account.get("passwordHash"):
        return False
    expected = hash_password(password, salt)["passwordHash"]
    return hmac.compare_digest(expected, account["passwordHash"])


class AuthService:

    def __init__(self, store: DocumentStore, sessions: SessionStore, users: UserService,
                 public_base_url: str = "http://localhost:5173"):
        self.store = store
        self.sessions = sessions
        self.users = users
        self.public_base_url = public_base_url.rstrip("/")

    def _find_account(self, email: str) -> Optional[Dict[str, Any]]:
        with backend_call("looking up account"):
            docs, _ = self.store.list_documents(
                ACCOUNTS_COLLECTION, [Query.equal("email", email.strip().lower()), Query.limit(1)]
            )
        return docs[0] if docs else None

    def _session_info(self, session: Dict[str, Any], user: User) -> SessionInfo:
        return SessionInfo(
            session_id=session["session_id"],
            user=user,
            expires_at=datetime.fromisoformat(session["expires_at"]),
        )

    async def register(self, email: str, password: str, name: str) -> SessionInfo:
        """
        Create account + profile and log the new user in.

        Raises:
            ValidationError: malformed email
            DuplicateEmailError: email already registered
        """
        email = email.strip().lower()
        if not is_valid_email(email):
            raise ValidationError("Érvénytelen email cím.")
        if self._find_account(email):
            raise DuplicateEmailError()

        user_id = unique_id()
        with backend_call("creating account"):
            self.store.create_document(ACCOUNTS_COLLECTION, user_id, {
                "email": email,
                "name": name,
                **hash_password(password),
            })
        user = await self.users.create_profile(user_id, email, name, UserRole.USER)
        session = self.sessions.create_session(user_id)
        logger.info(f"Registered user {user_id}")
        return self._session_info(session, user)

    async def login(self, email: str, password: str, session_id: Optional[str] = None) -> SessionInfo:
        """
        Log in with email and password.

        A still-valid session belonging to the same account is reused.
        """
        account = self._find_account(email)
        if account is None or not verify_password(password, account):
            logger.info("Failed login attempt")
            raise AuthenticationError()

        user = await self.users.get_by_id(account["$id"])
        if user is None:
            raise AuthenticationError()

        existing = self.sessions.get_session(session_id)
        if existing and existing.get("user_id") == user.id:
            return self._session_info(existing, user)

        session = self.sessions.create_session(user.id)
        return self._session_info(session, user)

    async def logout(self, session_id: Optional[str]):
        """End a session; an already expired one is not an error"""
        if not session_id or not self.sessions.delete_session(session_id):
            logger.warning("Logout for a session that is already gone")

    async def get_current_user(self, session_id: Optional[str]) -> Optional[User]:
        """
        Resolve the user behind a session.

        A session whose profile document no longer exists is ended.
        """
        session = self.sessions.get_session(session_id)
        if not session:
            return None
        user = await self.users.get_by_id(session["user_id"])
        if user is None:
            logger.warning("User authenticated but no profile found, ending session")
            await self.logout(session_id)
            return None
        return user

    async def update_user(self, user_id: str, data: ProfileUpdate) -> User:
        try:
            if data.name:
                with backend_call(f"renaming account {user_id}"):
                    self.store.update_document(ACCOUNTS_COLLECTION, user_id, {"name": data.name})
            return await self.users.update(user_id, data)
        except TravelbookError as e:
            raise TravelbookError("Nem sikerült frissíteni az adatokat.", detail=e.detail) from e

    def _get_account(self, user_id: str) -> Optional[Dict[str, Any]]:
        try:
            with backend_call(f"fetching account {user_id}"):
                return self.store.get_document(ACCOUNTS_COLLECTION, user_id)
        except NotFoundError:
            return None

    async def update_password(self, user_id: str, old_password: str, new_password: str):
        account = self._get_account(user_id)
        if account is None or not verify_password(old_password, account):
            raise AuthenticationError("A régi jelszó helytelen, vagy az új jelszó túl gyenge.")
        with backend_call(f"updating password of {user_id}"):
            self.store.update_document(ACCOUNTS_COLLECTION, user_id, hash_password(new_password))
        logger.info(f"Password changed for user {user_id}")

    async def send_password_recovery(self, email: str) -> Optional[str]:
        """
        Issue a recovery link for the account, if there is one.

        Callers must answer the same way either way so that registered
        addresses cannot be probed. Returns the link for delivery.
        """
        account = self._find_account(email)
        if account is None:
            logger.info("Password recovery requested for an unknown address")
            return None
        secret = self.sessions.create_recovery(account["$id"])
        url = f"{self.public_base_url}/reset-password?{urlencode({'userId': account['$id'], 'secret': secret})}"
        logger.info(f"Password recovery link issued for user {account['$id']}")
        return url

    async def confirm_password_recovery(self, user_id: str, secret: str, new_password: str):
        if not self.sessions.consume_recovery(user_id, secret) or self._get_account(user_id) is None:
            raise AuthenticationError("A helyreállító link érvénytelen vagy lejárt.")
        with backend_call(f"resetting password of {user_id}"):
            self.store.update_document(ACCOUNTS_COLLECTION, user_id, hash_password(new_password))
        logger.info(f"Password reset for user {user_id}")
