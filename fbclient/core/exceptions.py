from __future__ import annotations

from typing import Optional


class ClientMisconfigured(RuntimeError):
    pass


class ArgumentInvalid(ValueError):
    pass


class InvalidOperation(RuntimeError):
    pass


class ProtocolError(RuntimeError):
    def __init__(self, message: str = "Unknown facebook response.") -> None:
        super().__init__(message)


class FacebookApiError(RuntimeError):
    def __init__(self, message: Optional[str], code: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message or "")
        self.message = message
        self.code = code
        self.status_code = status_code

    def __str__(self) -> str:
        if self.code:
            return f"({self.code}) {self.message or ''}".rstrip()
        return self.message or ""


class FacebookOAuthError(FacebookApiError):
    pass


class FacebookRateLimitError(FacebookApiError):
    pass


__all__ = [
    "ArgumentInvalid",
    "ClientMisconfigured",
    "FacebookApiError",
    "FacebookOAuthError",
    "FacebookRateLimitError",
    "InvalidOperation",
    "ProtocolError",
]
