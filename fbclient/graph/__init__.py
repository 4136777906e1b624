from fbclient.graph.client import FacebookClient, FacebookHttpClient, FacebookSettings, get_facebook_client
from fbclient.graph.media import MediaObject, MediaStream
from fbclient.graph.multipart import MultipartBody, build_multipart_body
from fbclient.graph.parameters import build_http_query, to_parameters
from fbclient.graph.paths import ResolvedPath, parse_url_query_string
from fbclient.graph.request_factory import ETAG_KEY, GraphRequestFactory
from fbclient.graph.response import classify_error, interpret_response
from fbclient.graph.schemas import GraphCollection, GraphObject, GraphPaging, OAuthAccessToken
from fbclient.graph.serialization import deserialize_json, serialize_json

__all__ = [
    "ETAG_KEY",
    "FacebookClient",
    "FacebookHttpClient",
    "FacebookSettings",
    "GraphCollection",
    "GraphObject",
    "GraphPaging",
    "GraphRequestFactory",
    "MediaObject",
    "MediaStream",
    "MultipartBody",
    "OAuthAccessToken",
    "ResolvedPath",
    "build_http_query",
    "build_multipart_body",
    "classify_error",
    "deserialize_json",
    "get_facebook_client",
    "interpret_response",
    "parse_url_query_string",
    "serialize_json",
    "to_parameters",
]
