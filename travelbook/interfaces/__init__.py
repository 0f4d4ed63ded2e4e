# interfaces/__init__.py
"""
Interfaces Package

Backend client adapter used by every service:
- document_store: document CRUD, query builder, unique ids
- session_store: login sessions and recovery secrets
- codec: JSON-in-a-string field encoding
"""

from .document_store import (
    DocumentStore, Query, QueryClause, unique_id,
    StoreError, DocumentNotFound, DuplicateDocument,
)
from .session_store import SessionStore
from .codec import (
    encode_json_field, decode_json_field, decode_model_list, decode_model, encode_model_list,
)

__all__ = [
    "DocumentStore",
    "Query",
    "QueryClause",
    "unique_id",
    "StoreError",
    "DocumentNotFound",
    "DuplicateDocument",
    "SessionStore",
    "encode_json_field",
    "decode_json_field",
    "decode_model_list",
    "decode_model",
    "encode_model_list",
]
