# interfaces/document_store.py
"""
Document Store - backend client adapter
Generic CRUD + query over named collections (users, packages, bookings,
itineraries, accounts, settings).

Uses MongoDB when reachable, falls back to an in-memory store otherwise.
Documents are returned as plain dicts carrying the system attributes
`$id`, `$createdAt` and `$updatedAt` next to their own fields.
"""

import copy
import re
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from loguru import logger

try:
    from pymongo import MongoClient, ReturnDocument, ASCENDING, DESCENDING
    from pymongo.errors import DuplicateKeyError, PyMongoError
    MONGO_AVAILABLE = True
except ImportError:
    MONGO_AVAILABLE = False


# ============================================
# Errors
# ============================================

class StoreError(Exception):
    """Any failure of the underlying store"""


class DocumentNotFound(StoreError):
    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"Document {doc_id} not found in {collection}")


class DuplicateDocument(StoreError):
    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"Document {doc_id} already exists in {collection}")


# ============================================
# Query Builder
# ============================================

# System attributes as exposed to callers -> as stored
SYSTEM_FIELDS = {
    "$id": "_id",
    "$createdAt": "_created_at",
    "$updatedAt": "_updated_at",
}


@dataclass(frozen=True)
class QueryClause:
    method: str
    attribute: Optional[str] = None
    values: Tuple[Any, ...] = field(default_factory=tuple)


class Query:
    """Builds query clauses for `DocumentStore.list_documents`"""

    @staticmethod
    def equal(attribute: str, value: Any) -> QueryClause:
        values = tuple(value) if isinstance(value, (list, tuple)) else (value,)
        return QueryClause("equal", attribute, values)

    @staticmethod
    def not_equal(attribute: str, value: Any) -> QueryClause:
        return QueryClause("notEqual", attribute, (value,))

    @staticmethod
    def greater_than(attribute: str, value: Any) -> QueryClause:
        return QueryClause("greaterThan", attribute, (value,))

    @staticmethod
    def greater_than_equal(attribute: str, value: Any) -> QueryClause:
        return QueryClause("greaterThanEqual", attribute, (value,))

    @staticmethod
    def less_than(attribute: str, value: Any) -> QueryClause:
        return QueryClause("lessThan", attribute, (value,))

    @staticmethod
    def less_than_equal(attribute: str, value: Any) -> QueryClause:
        return QueryClause("lessThanEqual", attribute, (value,))

    @staticmethod
    def search(attribute: str, text: str) -> QueryClause:
        return QueryClause("search", attribute, (text,))

    @staticmethod
    def order_asc(attribute: str) -> QueryClause:
        return QueryClause("orderAsc", attribute)

    @staticmethod
    def order_desc(attribute: str) -> QueryClause:
        return QueryClause("orderDesc", attribute)

    @staticmethod
    def limit(count: int) -> QueryClause:
        return QueryClause("limit", None, (count,))

    @staticmethod
    def offset(count: int) -> QueryClause:
        return QueryClause("offset", None, (count,))


def unique_id() -> str:
    """Generate a new document id"""
    return uuid.uuid4().hex[:20]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _stored_name(attribute: str) -> str:
    return SYSTEM_FIELDS.get(attribute, attribute)


def _search_terms(text: str) -> List[str]:
    return [term for term in text.lower().split() if term]


_RANGE_OPS = {
    "greaterThan": ("$gt", lambda a, b: a > b),
    "greaterThanEqual": ("$gte", lambda a, b: a >= b),
    "lessThan": ("$lt", lambda a, b: a < b),
    "lessThanEqual": ("$lte", lambda a, b: a <= b),
}


# ============================================
# Document Store
# ============================================

class DocumentStore:
    """
    Document CRUD + query over named collections.
    Supports MongoDB for persistence, falls back to in-memory.
    """

    def __init__(self, mongo_uri: Optional[str] = "mongodb://localhost:27017",
                 mongo_db: str = "travelbook", use_memory: bool = False):
        self.mongo_client = None
        self.db = None
        self._memory_store: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.RLock()

        if use_memory or not mongo_uri:
            logger.info("DocumentStore using in-memory store")
            return

        if MONGO_AVAILABLE:
            try:
                self.mongo_client = MongoClient(mongo_uri, serverSelectionTimeoutMS=3000, tz_aware=True)
                self.mongo_client.admin.command("ping")
                self.db = self.mongo_client[mongo_db]
                logger.info(f"DocumentStore connected to MongoDB at {mongo_uri}/{mongo_db}")
            except Exception as e:
                logger.warning(f"MongoDB connection failed, using in-memory store: {e}")
                self.mongo_client = None
                self.db = None
        else:
            logger.warning("pymongo not available, using in-memory store")

    @property
    def backend(self) -> str:
        return "mongodb" if self.db is not None else "memory"

    def close(self):
        if self.mongo_client is not None:
            self.mongo_client.close()
            logger.info("DocumentStore closed MongoDB connection")

    # ---------- representation ----------

    @staticmethod
    def _to_public(stored: Dict[str, Any]) -> Dict[str, Any]:
        doc = {k: v for k, v in stored.items() if k not in SYSTEM_FIELDS.values()}
        doc["$id"] = stored["_id"]
        doc["$createdAt"] = stored.get("_created_at")
        doc["$updatedAt"] = stored.get("_updated_at")
        return doc

    @staticmethod
    def _strip_system(data: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in data.items() if k not in SYSTEM_FIELDS and k not in SYSTEM_FIELDS.values()}

    def _collection(self, collection: str) -> Dict[str, Dict[str, Any]]:
        return self._memory_store.setdefault(collection, {})

    # ---------- CRUD ----------

    def create_document(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a document, `doc_id` must be unique within the collection"""
        now = _utcnow()
        stored = self._strip_system(data)
        stored.update({"_id": doc_id, "_created_at": now, "_updated_at": now})

        if self.db is not None:
            try:
                self.db[collection].insert_one(stored)
            except DuplicateKeyError:
                raise DuplicateDocument(collection, doc_id)
            except PyMongoError as e:
                raise StoreError(str(e)) from e
            return self._to_public(stored)

        with self._lock:
            docs = self._collection(collection)
            if doc_id in docs:
                raise DuplicateDocument(collection, doc_id)
            docs[doc_id] = copy.deepcopy(stored)
            return self._to_public(copy.deepcopy(stored))

    def get_document(self, collection: str, doc_id: str) -> Dict[str, Any]:
        """Get a document by id, raises DocumentNotFound"""
        if self.db is not None:
            try:
                stored = self.db[collection].find_one({"_id": doc_id})
            except PyMongoError as e:
                raise StoreError(str(e)) from e
        else:
            with self._lock:
                stored = copy.deepcopy(self._collection(collection).get(doc_id))

        if stored is None:
            raise DocumentNotFound(collection, doc_id)
        return self._to_public(stored)

    def update_document(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Merge `data` into an existing document and return the result"""
        updates = self._strip_system(data)
        updates["_updated_at"] = _utcnow()

        if self.db is not None:
            try:
                stored = self.db[collection].find_one_and_update(
                    {"_id": doc_id},
                    {"$set": updates},
                    return_document=ReturnDocument.AFTER
                )
            except PyMongoError as e:
                raise StoreError(str(e)) from e
            if stored is None:
                raise DocumentNotFound(collection, doc_id)
            return self._to_public(stored)

        with self._lock:
            docs = self._collection(collection)
            if doc_id not in docs:
                raise DocumentNotFound(collection, doc_id)
            docs[doc_id].update(copy.deepcopy(updates))
            return self._to_public(copy.deepcopy(docs[doc_id]))

    def delete_document(self, collection: str, doc_id: str):
        if self.db is not None:
            try:
                result = self.db[collection].delete_one({"_id": doc_id})
            except PyMongoError as e:
                raise StoreError(str(e)) from e
            if result.deleted_count == 0:
                raise DocumentNotFound(collection, doc_id)
            return

        with self._lock:
            docs = self._collection(collection)
            if doc_id not in docs:
                raise DocumentNotFound(collection, doc_id)
            del docs[doc_id]

    # ---------- Atomic counters ----------

    def adjust_counter(self, collection: str, doc_id: str, attribute: str, delta: int,
                       floor: int = 0, ceiling_attribute: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Atomically add `delta` to a numeric attribute.

        A decrement is refused (returns None) when it would take the value
        below `floor`. An increment is clamped to the value of
        `ceiling_attribute` when one is given.
        """
        now = _utcnow()

        if self.db is not None:
            try:
                if delta < 0:
                    stored = self.db[collection].find_one_and_update(
                        {"_id": doc_id, attribute: {"$gte": floor - delta}},
                        {"$inc": {attribute: delta}, "$set": {"_updated_at": now}},
                        return_document=ReturnDocument.AFTER
                    )
                else:
                    new_value: Any = {"$add": [f"${attribute}", delta]}
                    if ceiling_attribute:
                        new_value = {"$min": [f"${ceiling_attribute}", new_value]}
                    stored = self.db[collection].find_one_and_update(
                        {"_id": doc_id},
                        [{"$set": {attribute: new_value, "_updated_at": now}}],
                        return_document=ReturnDocument.AFTER
                    )
            except PyMongoError as e:
                raise StoreError(str(e)) from e
            return self._to_public(stored) if stored else None

        with self._lock:
            stored = self._collection(collection).get(doc_id)
            if stored is None:
                return None
            current = stored.get(attribute) or 0
            if delta < 0:
                if current + delta < floor:
                    return None
                new_value = current + delta
            else:
                new_value = current + delta
                if ceiling_attribute and stored.get(ceiling_attribute) is not None:
                    new_value = min(stored[ceiling_attribute], new_value)
            stored[attribute] = new_value
            stored["_updated_at"] = now
            return self._to_public(copy.deepcopy(stored))

    # ---------- Listing ----------

    def list_documents(self, collection: str,
                       queries: Optional[List[QueryClause]] = None) -> Tuple[List[Dict[str, Any]], int]:
        """
        List documents matching the filter clauses.

        Returns (documents, total) where total counts every match before
        limit/offset are applied, so `Query.limit(0)` yields a bare count.
        """
        queries = queries or []
        filters = [q for q in queries if q.method not in ("orderAsc", "orderDesc", "limit", "offset")]
        orders = [q for q in queries if q.method in ("orderAsc", "orderDesc")]
        limit = next((q.values[0] for q in reversed(queries) if q.method == "limit"), None)
        offset = next((q.values[0] for q in reversed(queries) if q.method == "offset"), 0)

        if self.db is not None:
            return self._list_mongo(collection, filters, orders, limit, offset)
        return self._list_memory(collection, filters, orders, limit, offset)

    def _list_mongo(self, collection, filters, orders, limit, offset):
        mongo_filter = self._mongo_filter(filters)
        try:
            total = self.db[collection].count_documents(mongo_filter)
            if limit == 0:
                return [], total
            cursor = self.db[collection].find(mongo_filter)
            if orders:
                cursor = cursor.sort([
                    (_stored_name(q.attribute), ASCENDING if q.method == "orderAsc" else DESCENDING)
                    for q in orders
                ])
            if offset:
                cursor = cursor.skip(offset)
            if limit:
                cursor = cursor.limit(limit)
            return [self._to_public(doc) for doc in cursor], total
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    @staticmethod
    def _mongo_filter(filters: List[QueryClause]) -> Dict[str, Any]:
        conditions = []
        for q in filters:
            name = _stored_name(q.attribute)
            if q.method == "equal":
                if len(q.values) == 1:
                    conditions.append({name: q.values[0]})
                else:
                    conditions.append({name: {"$in": list(q.values)}})
            elif q.method == "notEqual":
                conditions.append({name: {"$ne": q.values[0]}})
            elif q.method in _RANGE_OPS:
                conditions.append({name: {_RANGE_OPS[q.method][0]: q.values[0]}})
            elif q.method == "search":
                for term in _search_terms(q.values[0]):
                    conditions.append({name: {"$regex": re.escape(term), "$options": "i"}})
            else:
                raise StoreError(f"Unsupported query method: {q.method}")
        if not conditions:
            return {}
        if len(conditions) == 1:
            return conditions[0]
        return {"$and": conditions}

    def _list_memory(self, collection, filters, orders, limit, offset):
        with self._lock:
            docs = [copy.deepcopy(d) for d in self._collection(collection).values()]

        matches = [d for d in docs if all(self._matches(d, q) for q in filters)]

        # stable multi-key sort: apply the least significant key first
        for q in reversed(orders):
            name = _stored_name(q.attribute)
            present = [d for d in matches if d.get(name) is not None]
            missing = [d for d in matches if d.get(name) is None]
            present.sort(key=lambda d: d[name], reverse=q.method == "orderDesc")
            matches = present + missing

        total = len(matches)
        if limit == 0:
            return [], total
        end = offset + limit if limit else None
        return [self._to_public(d) for d in matches[offset:end]], total

    @staticmethod
    def _matches(doc: Dict[str, Any], q: QueryClause) -> bool:
        value = doc.get(_stored_name(q.attribute))
        if q.method == "equal":
            return value in q.values
        if q.method == "notEqual":
            return value != q.values[0]
        if q.method in _RANGE_OPS:
            if value is None:
                return False
            return _RANGE_OPS[q.method][1](value, q.values[0])
        if q.method == "search":
            haystack = str(value or "").lower()
            return all(term in haystack for term in _search_terms(q.values[0]))
        raise StoreError(f"Unsupported query method: {q.method}")

    def ping(self) -> bool:
        if self.db is None:
            return True
        try:
            self.mongo_client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning(f"MongoDB health check failed: {e}")
            return False
