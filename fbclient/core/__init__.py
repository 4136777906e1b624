from fbclient.core.envelope import HttpExchange, ResponseEnvelope
from fbclient.core.exceptions import (
    ArgumentInvalid,
    ClientMisconfigured,
    FacebookApiError,
    FacebookOAuthError,
    FacebookRateLimitError,
    InvalidOperation,
    ProtocolError,
)
from fbclient.core.fixtures import envelope_from_fixture, load_json_fixture, load_response_fixture
from fbclient.core.request_spec import RequestSpec, canonicalize_headers

__all__ = [
    "ArgumentInvalid",
    "ClientMisconfigured",
    "FacebookApiError",
    "FacebookOAuthError",
    "FacebookRateLimitError",
    "HttpExchange",
    "InvalidOperation",
    "ProtocolError",
    "RequestSpec",
    "ResponseEnvelope",
    "canonicalize_headers",
    "envelope_from_fixture",
    "load_json_fixture",
    "load_response_fixture",
]
