from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from fbclient.core.exceptions import ArgumentInvalid, InvalidOperation
from fbclient.core.request_spec import Body, RequestSpec
from fbclient.graph.hosts import graph_host, legacy_rest_host
from fbclient.graph.multipart import build_multipart_body, new_boundary
from fbclient.graph.parameters import build_http_query, encode_pairs, reject_nested_attachments, to_parameters
from fbclient.graph.paths import parse_url_query_string, quote_path
from fbclient.graph.serialization import Serializer, serialize_json

logger = logging.getLogger(__name__)

ETAG_KEY = "_etag_"
JSON_STRINGS_FORMAT = "json-strings"
FORM_URLENCODED = "application/x-www-form-urlencoded"

METHOD_DELETE_NOT_ALLOWED = (
    "Parameter cannot contain method=delete. Use the delete call instead."
)
MISSING_REST_METHOD = "Parameters should contain rest 'method' name"
EMPTY_REST_METHOD = "Legacy rest api 'method' in parameters is null or empty."
ATTACHMENTS_POST_ONLY = "Attachments (MediaObject/MediaStream) are valid only in POST requests."


class GraphRequestFactory:
    def __init__(
        self,
        access_token: str = "",
        use_beta: bool = False,
        secure_connection: bool = False,
        serializer: Optional[Serializer] = None,
        boundary: Optional[Callable[[], str]] = None,
    ) -> None:
        self.access_token = (access_token or "").strip()
        self.use_beta = use_beta
        self.secure_connection = secure_connection
        self.serializer = serializer or serialize_json
        self.boundary = boundary or new_boundary

    def build_request(self, http_method: str, path: str, parameters: Any = None) -> Tuple[RequestSpec, bool]:
        """Assemble the outbound request for one API call.

        Returns the request and whether the caller asked for conditional
        caching through the ``_etag_`` pseudo-parameter, in which case the
        response is wrapped with its headers.
        """
        if not http_method:
            raise ArgumentInvalid("http_method is required")
        if not path:
            raise ArgumentInvalid("path is required")
        http_method = http_method.upper()

        params, media_objects, media_streams = to_parameters(parameters)
        if "access_token" not in params and self.access_token:
            params["access_token"] = self.access_token
        if "return_ssl_resources" not in params and self.secure_connection:
            params["return_ssl_resources"] = True

        etag: Optional[str] = None
        contains_etag = False
        if ETAG_KEY in params:
            etag_value = params.pop(ETAG_KEY)
            etag = None if etag_value is None else str(etag_value)
            contains_etag = True

        resolved = parse_url_query_string(path, params)

        if "format" in params:
            params["format"] = JSON_STRINGS_FORMAT

        rest_method: Optional[str] = None
        is_legacy_rest = resolved.is_legacy_rest
        if "method" in params:
            rest_method = "" if params["method"] is None else str(params["method"])
            if rest_method.lower() == "delete":
                raise ArgumentInvalid(METHOD_DELETE_NOT_ALLOWED)
            is_legacy_rest = True
        elif is_legacy_rest:
            raise InvalidOperation(MISSING_REST_METHOD)

        if resolved.uri is None:
            scheme = "https"
            if is_legacy_rest:
                if not rest_method:
                    raise InvalidOperation(EMPTY_REST_METHOD)
                host = legacy_rest_host(rest_method, self.use_beta)
            else:
                host = graph_host(http_method, resolved.path, self.use_beta)
        else:
            scheme = resolved.uri.scheme
            host = resolved.uri.netloc

        for key, value in list(params.items()):
            if not isinstance(value, str):
                reject_nested_attachments(value)
                params[key] = self.serializer(value)

        query: List[Tuple[str, str]] = []
        if "access_token" in params:
            access_token = params.pop("access_token")
            if access_token:
                query.append(("access_token", access_token))

        body: Optional[Body] = None
        content_type: Optional[str] = None
        if http_method != "POST":
            if media_objects or media_streams:
                raise InvalidOperation(ATTACHMENTS_POST_ONLY)
            query.extend((key, build_http_query(value)) for key, value in params.items())
        elif not media_objects and not media_streams:
            content_type = FORM_URLENCODED
            encoded = encode_pairs(params)
            body = encoded.encode("utf-8") if encoded else None
        else:
            multipart = build_multipart_body(params, media_objects, media_streams, self.boundary())
            content_type = multipart.content_type
            body = multipart

        headers: Dict[str, str] = {}
        if etag:
            headers["If-None-Match"] = f'"{etag}"'

        spec = RequestSpec(
            method=http_method,
            scheme=scheme,
            host=host,
            path=quote_path(resolved.path),
            query=query,
            headers=headers,
            body=body,
            content_type=content_type,
            content_length=len(body) if isinstance(body, bytes) else None,
        )
        logger.debug("Prepared request %s", spec.fingerprint())
        return spec, contains_etag


__all__ = [
    "ETAG_KEY",
    "FORM_URLENCODED",
    "GraphRequestFactory",
    "JSON_STRINGS_FORMAT",
]
