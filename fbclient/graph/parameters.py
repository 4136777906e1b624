from __future__ import annotations

import dataclasses
import inspect
import numbers
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Tuple
from urllib.parse import quote_plus, unquote_plus

from pydantic import BaseModel

from fbclient.core.exceptions import InvalidOperation
from fbclient.graph.media import MediaObject, MediaStream

Encoder = Callable[[str], str]

NESTED_ATTACHMENT_ERROR = "Parameter can contain attachments (MediaObject/MediaStream) only in the top most level."


def url_encode(value: str) -> str:
    return quote_plus(value, safe="")


def url_decode(value: str) -> str:
    return unquote_plus(value)


def _record_fields(record: Any) -> Dict[str, Any]:
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return {item.name: getattr(record, item.name) for item in dataclasses.fields(record)}
    if isinstance(record, BaseModel):
        return {name: getattr(record, name) for name in type(record).model_fields}
    as_dict = getattr(record, "_asdict", None)
    if callable(as_dict):
        return dict(as_dict())
    fields = {key: value for key, value in getattr(record, "__dict__", {}).items() if not key.startswith("_")}
    for cls in type(record).__mro__:
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if not name.startswith("_") and hasattr(record, name):
                fields.setdefault(name, getattr(record, name))
    for name, member in inspect.getmembers(type(record)):
        if isinstance(member, property) and not name.startswith("_"):
            fields[name] = getattr(record, name)
    return fields


def to_parameters(
    value: Any,
) -> Tuple[Dict[str, Any], Dict[str, MediaObject], Dict[str, MediaStream]]:
    """Flatten call parameters into a plain dict and pull out attachments.

    Mappings are copied shallowly; any other object is read as a record
    (dataclass fields, pydantic fields, named tuple fields, or public
    attributes, slots and properties). ``MediaObject`` and ``MediaStream`` values are
    moved into the returned side maps.
    """
    media_objects: Dict[str, MediaObject] = {}
    media_streams: Dict[str, MediaStream] = {}
    if value is None:
        return {}, media_objects, media_streams

    if isinstance(value, Mapping):
        parameters = {str(key): item for key, item in value.items()}
    else:
        parameters = _record_fields(value)

    for key, item in parameters.items():
        if isinstance(item, MediaObject):
            media_objects[key] = item
        elif isinstance(item, MediaStream):
            media_streams[key] = item

    for key in list(media_objects) + list(media_streams):
        del parameters[key]

    return parameters, media_objects, media_streams


def reject_nested_attachments(value: Any) -> None:
    """Raise ``InvalidOperation`` if an attachment hides inside ``value``."""
    if isinstance(value, (MediaObject, MediaStream)):
        raise InvalidOperation(NESTED_ATTACHMENT_ERROR)
    if isinstance(value, Mapping):
        items: Iterable[Any] = value.values()
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = value
    elif isinstance(value, BaseModel) or (dataclasses.is_dataclass(value) and not isinstance(value, type)):
        items = _record_fields(value).values()
    else:
        return
    for item in items:
        reject_nested_attachments(item)


def format_datetime(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def build_http_query(value: Any, encode: Encoder = url_encode) -> str:
    """Render a parameter value in its wire form.

    The result is not url encoded at the top level; callers encode it once.
    Mapping entries are encoded here so nested ``&`` and ``=`` survive.
    """
    if value is None:
        return "null"
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, numbers.Number):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (MediaObject, MediaStream)):
        raise InvalidOperation(NESTED_ATTACHMENT_ERROR)

    if isinstance(value, Mapping):
        return "&".join(
            f"{encode(build_http_query(key, encode))}={encode(build_http_query(item, encode))}"
            for key, item in value.items()
        )
    if isinstance(value, Iterable) and not isinstance(value, BaseModel):
        return ",".join(build_http_query(item, encode) for item in value)

    parameters, media_objects, media_streams = to_parameters(value)
    if media_objects or media_streams:
        raise InvalidOperation(NESTED_ATTACHMENT_ERROR)
    return build_http_query(parameters, encode)


def encode_pairs(parameters: Mapping[str, Any]) -> str:
    return "&".join(
        f"{url_encode(key)}={url_encode(build_http_query(value, url_encode))}" for key, value in parameters.items()
    )


__all__ = [
    "NESTED_ATTACHMENT_ERROR",
    "build_http_query",
    "encode_pairs",
    "format_datetime",
    "reject_nested_attachments",
    "to_parameters",
    "url_decode",
    "url_encode",
]
