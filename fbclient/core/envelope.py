from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional
from urllib.parse import urlsplit


@dataclass(frozen=True)
class ResponseEnvelope:
    status_code: int
    content_type: str
    response_uri: str
    body: str = ""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def host(self) -> str:
        return (urlsplit(self.response_uri).hostname or "").lower()

    @property
    def uri_path(self) -> str:
        return urlsplit(self.response_uri).path


@dataclass(frozen=True)
class HttpExchange:
    envelope: Optional[ResponseEnvelope]
    transport_error: Optional[BaseException] = None


__all__ = ["HttpExchange", "ResponseEnvelope"]
