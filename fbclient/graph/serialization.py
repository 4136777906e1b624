from __future__ import annotations

import dataclasses
import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Optional

from pydantic import BaseModel, TypeAdapter

from fbclient.core.exceptions import InvalidOperation
from fbclient.graph.media import MediaObject, MediaStream
from fbclient.graph.parameters import NESTED_ATTACHMENT_ERROR, format_datetime

Serializer = Callable[[Any], str]
Deserializer = Callable[[str, Optional[Any]], Any]


def _json_default(value: Any) -> Any:
    if isinstance(value, (MediaObject, MediaStream)):
        raise InvalidOperation(NESTED_ATTACHMENT_ERROR)
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {item.name: getattr(value, item.name) for item in dataclasses.fields(value)}
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), default=_json_default)


def deserialize_json(text: str, shape: Optional[Any] = None) -> Any:
    if shape is None:
        return json.loads(text)
    if isinstance(shape, type) and issubclass(shape, BaseModel):
        return shape.model_validate_json(text)
    return TypeAdapter(shape).validate_json(text)


__all__ = ["Deserializer", "Serializer", "deserialize_json", "serialize_json"]
