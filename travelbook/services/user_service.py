# services/user_service.py
"""
User Service
Profile documents in the `users` collection (role, name, phone).
Credentials live separately, see auth_service.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple, Union

from loguru import logger

from travelbook.interfaces.document_store import DocumentNotFound, DocumentStore, Query, StoreError
from travelbook.schemas.travel_schemas import AdminUserUpdate, ProfileUpdate, User, UserRole, UserStats
from travelbook.services.base import USERS_COLLECTION, backend_call


class UserService:

    def __init__(self, store: DocumentStore):
        self.store = store

    async def get_all(self, role: Optional[UserRole] = None, search: Optional[str] = None,
                      limit: Optional[int] = None, offset: Optional[int] = None) -> Tuple[List[User], int]:
        queries = [Query.order_desc("$createdAt")]
        if role:
            queries.append(Query.equal("role", UserRole(role).value))
        if search:
            queries.append(Query.search("name", search))
        if limit:
            queries.append(Query.limit(limit))
        if offset:
            queries.append(Query.offset(offset))

        with backend_call("fetching users"):
            docs, total = self.store.list_documents(USERS_COLLECTION, queries)
        return [self.map_document_to_user(doc) for doc in docs], total

    async def get_by_id(self, user_id: str) -> Optional[User]:
        try:
            doc = self.store.get_document(USERS_COLLECTION, user_id)
        except DocumentNotFound:
            return None
        except StoreError as e:
            logger.error(f"Error fetching user {user_id}: {e}")
            return None
        return self.map_document_to_user(doc)

    async def create_profile(self, user_id: str, email: str, name: str,
                             role: UserRole = UserRole.USER) -> User:
        """Profile document sharing its id with the account"""
        with backend_call(f"creating profile {user_id}"):
            doc = self.store.create_document(USERS_COLLECTION, user_id, {
                "email": email,
                "name": name,
                "role": UserRole(role).value,
            })
        return self.map_document_to_user(doc)

    async def update_role(self, user_id: str, role: UserRole) -> User:
        with backend_call(f"updating role of user {user_id}"):
            doc = self.store.update_document(USERS_COLLECTION, user_id, {"role": UserRole(role).value})
        logger.info(f"User {user_id} role set to {UserRole(role).value}")
        return self.map_document_to_user(doc)

    async def update(self, user_id: str, data: Union[ProfileUpdate, AdminUserUpdate]) -> User:
        updates = data.model_dump(by_alias=True, mode="json", exclude_unset=True)
        with backend_call(f"updating user {user_id}"):
            doc = self.store.update_document(USERS_COLLECTION, user_id, updates)
        return self.map_document_to_user(doc)

    async def delete(self, user_id: str):
        with backend_call(f"deleting user {user_id}"):
            self.store.delete_document(USERS_COLLECTION, user_id)
        logger.info(f"Deleted user {user_id}")

    async def get_stats(self) -> UserStats:
        """Totals per role and sign-ups over the last 30 days"""
        thirty_days_ago = datetime.now(timezone.utc) - timedelta(days=30)
        with backend_call("fetching user stats"):
            _, total = self.store.list_documents(USERS_COLLECTION, [Query.limit(0)])
            _, admins = self.store.list_documents(
                USERS_COLLECTION, [Query.equal("role", UserRole.ADMIN.value), Query.limit(0)]
            )
            _, new_users = self.store.list_documents(
                USERS_COLLECTION, [Query.greater_than("$createdAt", thirty_days_ago), Query.limit(0)]
            )
        return UserStats(total=total, users=total - admins, admins=admins, new_this_month=new_users)

    @staticmethod
    def map_document_to_user(doc: Dict[str, Any]) -> User:
        return User(
            id=doc["$id"],
            email=doc.get("email", ""),
            name=doc.get("name", ""),
            role=doc.get("role") or UserRole.USER,
            avatar=doc.get("avatar"),
            phone=doc.get("phone"),
            created_at=doc["$createdAt"],
            updated_at=doc["$updatedAt"],
        )
