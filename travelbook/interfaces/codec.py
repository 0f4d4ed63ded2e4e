# interfaces/codec.py
"""
Field codec for structured values stored as JSON strings.

Booking.travelers, TravelPackage.itinerary and the itinerary
requestData / daysData / estimatedBudget fields live as JSON text inside
otherwise flat documents. The store enforces no schema on string fields, so
every read goes through `decode_json_field` with a fallback.
"""

import json
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Sequence, Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)


def _default(value: Any):
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_json_field(value: Any) -> str:
    """Serialize a model, list of models or plain structure to JSON text"""
    return json.dumps(value, default=_default, ensure_ascii=False)


def decode_json_field(raw: Any, fallback: Any, context: str = "") -> Any:
    """
    Parse a JSON-encoded field.

    Already-native lists/dicts pass through unchanged; empty, missing or
    malformed input yields `fallback`.
    """
    if isinstance(raw, (list, dict)):
        return raw
    if not isinstance(raw, str) or not raw:
        return fallback
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Malformed JSON field {context}: {e}")
        return fallback


def decode_model_list(raw: Any, model: Type[T], context: str = "") -> List[T]:
    """Decode a JSON list field into models, skipping entries that do not fit"""
    items = decode_json_field(raw, [], context)
    if not isinstance(items, list):
        logger.warning(f"Expected a JSON list for {context}, got {type(items).__name__}")
        return []

    result = []
    for index, item in enumerate(items):
        try:
            result.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Dropping malformed entry {index} of {context}: {e.error_count()} errors")
    return result


def decode_model(raw: Any, model: Type[T], fallback: T, context: str = "") -> T:
    """Decode a JSON object field into a model or return `fallback`"""
    data = decode_json_field(raw, None, context)
    if not isinstance(data, dict):
        return fallback
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Malformed object in {context}: {e.error_count()} errors")
        return fallback


def encode_model_list(items: Sequence[BaseModel]) -> str:
    return encode_json_field(list(items))
