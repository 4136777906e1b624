from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import SplitResult, quote, urlsplit

from fbclient.core.exceptions import ArgumentInvalid
from fbclient.graph.hosts import GRAPH_HOSTS, LEGACY_REST_HOSTS
from fbclient.graph.parameters import url_decode

INVALID_PATH = "Invalid path"

_PATH_SAFE = "/%:@!$&'()*+,;=~"


@dataclass(frozen=True)
class ResolvedPath:
    path: str
    is_legacy_rest: bool = False
    uri: Optional[SplitResult] = None


def quote_path(path: str) -> str:
    return quote(path, safe=_PATH_SAFE)


def _split_absolute(path: str) -> Optional[SplitResult]:
    try:
        parts = urlsplit(path)
    except ValueError:
        return None
    if parts.scheme and parts.netloc:
        return parts
    return None


def _path_and_query(parts: SplitResult) -> str:
    if parts.query:
        return f"{parts.path}?{parts.query}"
    return parts.path


def merge_query_string(query: str, parameters: Dict[str, Any]) -> None:
    for item in query.split("&"):
        if not item:
            continue
        pieces = item.split("=")
        if len(pieces) != 2 or not pieces[0]:
            raise ArgumentInvalid(INVALID_PATH)
        key = url_decode(pieces[0])
        if key not in parameters:
            parameters[key] = url_decode(pieces[1])


def parse_url_query_string(
    path: str,
    parameters: Dict[str, Any],
    force_parse_all_urls: bool = False,
) -> ResolvedPath:
    """Split a caller path into a relative path and merge its query string.

    Absolute urls on graph or legacy hosts are reduced to their path; with
    ``force_parse_all_urls`` every absolute url is. Any other absolute url is
    an object id and is returned as one escaped path segment. Query values
    never replace parameters the caller passed explicitly.
    """
    if parameters is None:
        raise ArgumentInvalid("parameters is required")

    is_legacy_rest = False
    uri = _split_absolute(path)
    if uri is not None:
        host = (uri.hostname or "").lower()
        if force_parse_all_urls or host in GRAPH_HOSTS:
            path = _path_and_query(uri)
        elif host in LEGACY_REST_HOSTS:
            is_legacy_rest = True
            path = _path_and_query(uri)
        else:
            return ResolvedPath(path=quote(path, safe=":/"))

    if not path:
        return ResolvedPath(path="", is_legacy_rest=is_legacy_rest, uri=uri)

    if path.startswith("/"):
        path = path[1:]

    pieces = path.split("?")
    if len(pieces) > 2:
        raise ArgumentInvalid(INVALID_PATH)
    if len(pieces) == 2:
        merge_query_string(pieces[1], parameters)

    return ResolvedPath(path=pieces[0], is_legacy_rest=is_legacy_rest, uri=uri)


__all__ = [
    "INVALID_PATH",
    "ResolvedPath",
    "merge_query_string",
    "parse_url_query_string",
    "quote_path",
]
