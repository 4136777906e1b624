from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, Dict, Optional

from pydantic import ValidationError

from fbclient.core.envelope import ResponseEnvelope
from fbclient.core.exceptions import (
    FacebookApiError,
    FacebookOAuthError,
    FacebookRateLimitError,
    ProtocolError,
)
from fbclient.graph.hosts import LEGACY_REST_HOSTS
from fbclient.graph.parameters import url_decode
from fbclient.graph.serialization import Deserializer, Serializer, deserialize_json, serialize_json

logger = logging.getLogger(__name__)

OAUTH_ERROR_TYPE = "OAuthException"
TOO_MANY_CALLS = "API_EC_TOO_MANY_CALLS"
PARAM_ACCESS_TOKEN = "API_EC_PARAM_ACCESS_TOKEN"
REQUEST_LIMIT_REACHED = "request limit reached"

_OAUTH_TOKEN_PATH = re.compile(r"^(/v\d+(\.\d+)?)?/oauth/access_token$")


def _is_rate_limited(code: Optional[str], message: Optional[str]) -> bool:
    if code in {"4", TOO_MANY_CALLS}:
        return True
    return message is not None and REQUEST_LIMIT_REACHED in message


def _classify_legacy_rest(result: Mapping[str, Any]) -> Optional[FacebookApiError]:
    if "error_code" not in result:
        return None
    code = str(result["error_code"])
    message = result.get("error_msg")
    if not isinstance(message, str):
        message = None
    if code == "190":
        return FacebookOAuthError(message, code)
    if _is_rate_limited(code, message):
        return FacebookRateLimitError(message, code)
    return FacebookApiError(message, code)


def _classify_graph(result: Mapping[str, Any]) -> Optional[FacebookApiError]:
    if "error" not in result:
        return None
    error = result["error"]
    if isinstance(error, Mapping):
        error_type = error.get("type")
        message = error.get("message")
        if not isinstance(error_type, str) or not isinstance(message, str) or not error_type or not message:
            return None
        if error_type == OAUTH_ERROR_TYPE:
            return FacebookOAuthError(message, error_type)
        if error_type == TOO_MANY_CALLS or REQUEST_LIMIT_REACHED in message:
            return FacebookRateLimitError(message, error_type)
        return FacebookApiError(message, error_type)

    if isinstance(error, bool) or not isinstance(error, int):
        return None
    description = result.get("error_description")
    if not isinstance(description, str) or not description:
        return None
    if error == 190:
        return FacebookOAuthError(description, PARAM_ACCESS_TOKEN)
    return FacebookApiError(description, str(error))


def classify_error(response_host: str, result: Any) -> Optional[FacebookApiError]:
    """Map an API error payload to a typed error, or ``None`` when there is none.

    Legacy REST hosts report ``error_code``/``error_msg``; every other host is
    read with the Graph API ``error`` shapes.
    """
    if not isinstance(result, Mapping):
        return None
    if response_host.lower() in LEGACY_REST_HOSTS:
        return _classify_legacy_rest(result)
    return _classify_graph(result)


def is_json_content(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type in {"text/javascript", "application/json"} or media_type.endswith("+json")


def is_plain_text(content_type: str) -> bool:
    return content_type.split(";", 1)[0].strip().lower() == "text/plain"


def parse_oauth_body(body: str) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for item in body.split("&"):
        pieces = item.split("=")
        if len(pieces) == 2:
            result[url_decode(pieces[0])] = url_decode(pieces[1])
    if "expires" in result:
        result["expires"] = int(result["expires"])
    return result


def _headers_wrapped(envelope: ResponseEnvelope, body: Any) -> Dict[str, Any]:
    return {"headers": dict(envelope.headers), "body": body}


def interpret_response(
    envelope: Optional[ResponseEnvelope],
    result_shape: Optional[Any] = None,
    contains_etag: bool = False,
    deserializer: Deserializer = deserialize_json,
    serializer: Serializer = serialize_json,
) -> Any:
    if envelope is None:
        raise ProtocolError()

    content_type = envelope.content_type or ""
    logger.debug("Response %s %s from %s", envelope.status_code, content_type, envelope.host)

    if contains_etag and envelope.status_code == 304:
        return _headers_wrapped(envelope, None)

    try:
        if is_json_content(content_type):
            tree = deserializer(envelope.body, None)
        elif envelope.status_code == 200 and is_plain_text(content_type):
            if not _OAUTH_TOKEN_PATH.match(envelope.uri_path):
                raise ProtocolError()
            tree = parse_oauth_body(envelope.body)
        else:
            raise ProtocolError()

        error = classify_error(envelope.host, tree)
        if error is None and result_shape is not None:
            if is_json_content(content_type):
                result = deserializer(envelope.body, result_shape)
            else:
                result = deserializer(serializer(tree), result_shape)
        else:
            result = tree
    except (ValidationError, ValueError) as exc:
        raise ProtocolError(f"Invalid facebook response: {exc}") from exc

    if error is not None:
        error.status_code = envelope.status_code
        raise error

    if contains_etag:
        return _headers_wrapped(envelope, result)
    return result


__all__ = [
    "PARAM_ACCESS_TOKEN",
    "classify_error",
    "interpret_response",
    "is_json_content",
    "parse_oauth_body",
]
