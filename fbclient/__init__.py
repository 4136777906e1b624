from fbclient.core.exceptions import (
    ArgumentInvalid,
    ClientMisconfigured,
    FacebookApiError,
    FacebookOAuthError,
    FacebookRateLimitError,
    InvalidOperation,
    ProtocolError,
)
from fbclient.graph import (
    FacebookClient,
    FacebookSettings,
    GraphRequestFactory,
    MediaObject,
    MediaStream,
    get_facebook_client,
)

__all__ = [
    "ArgumentInvalid",
    "ClientMisconfigured",
    "FacebookApiError",
    "FacebookClient",
    "FacebookOAuthError",
    "FacebookRateLimitError",
    "FacebookSettings",
    "GraphRequestFactory",
    "InvalidOperation",
    "MediaObject",
    "MediaStream",
    "ProtocolError",
    "get_facebook_client",
]
