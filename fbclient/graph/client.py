from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

import httpx

from fbclient.config import get_config
from fbclient.core.envelope import HttpExchange, ResponseEnvelope
from fbclient.core.exceptions import ArgumentInvalid, ClientMisconfigured, FacebookApiError
from fbclient.core.request_spec import RequestSpec, canonicalize_headers
from fbclient.graph.multipart import MultipartBody
from fbclient.graph.request_factory import GraphRequestFactory
from fbclient.graph.response import interpret_response
from fbclient.graph.serialization import Deserializer, Serializer, deserialize_json, serialize_json

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return bool(default)
    return value.strip().lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class FacebookSettings:
    access_token: str = ""
    use_beta: bool = False
    secure_connection: bool = False
    timeout: float = 30.0
    serializer: Serializer = serialize_json
    deserializer: Deserializer = deserialize_json

    @classmethod
    def from_app(cls, app_id: str, app_secret: str, **kwargs: Any) -> "FacebookSettings":
        if not app_id:
            raise ArgumentInvalid("app_id is required")
        if not app_secret:
            raise ArgumentInvalid("app_secret is required")
        return cls(access_token=f"{app_id}|{app_secret}", **kwargs)

    @classmethod
    def from_env(cls) -> "FacebookSettings":
        defaults = get_config().get("facebook") or {}
        access_token = os.getenv("FACEBOOK_ACCESS_TOKEN", "").strip()
        app_id = os.getenv("FACEBOOK_APP_ID", "").strip()
        app_secret = os.getenv("FACEBOOK_APP_SECRET", "").strip()
        if bool(app_id) != bool(app_secret):
            raise ClientMisconfigured("FACEBOOK_APP_ID and FACEBOOK_APP_SECRET must be set together")
        if not access_token and app_id:
            access_token = f"{app_id}|{app_secret}"
        timeout = os.getenv("FACEBOOK_TIMEOUT", "").strip() or defaults.get("timeout", 30.0)
        try:
            timeout_value = float(timeout)
        except ValueError as exc:
            raise ClientMisconfigured(f"FACEBOOK_TIMEOUT is not a number: {timeout}") from exc
        return cls(
            access_token=access_token,
            use_beta=_env_flag("FACEBOOK_USE_BETA", defaults.get("use_beta", False)),
            secure_connection=_env_flag("FACEBOOK_SECURE_CONNECTION", defaults.get("secure_connection", False)),
            timeout=timeout_value,
        )


class FacebookHttpClient:
    def __init__(self, timeout: float = 30.0, async_client: Optional[httpx.AsyncClient] = None) -> None:
        self.timeout = timeout
        self._client = async_client
        self._owns_client = async_client is None

    async def __aenter__(self) -> "FacebookHttpClient":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def execute(self, spec: RequestSpec) -> HttpExchange:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)

        content: Any = spec.body
        if isinstance(spec.body, MultipartBody):
            content = spec.body.aiter_chunks()

        try:
            resp = await self._client.request(
                spec.method,
                spec.build_url(),
                headers=spec.request_headers(),
                content=content,
            )
        except httpx.HTTPError as exc:
            logger.warning("Facebook request %s failed: %s", spec.fingerprint(), exc)
            return HttpExchange(envelope=None, transport_error=exc)
        finally:
            if isinstance(spec.body, MultipartBody):
                spec.body.close()

        envelope = ResponseEnvelope(
            status_code=resp.status_code,
            content_type=resp.headers.get("content-type", ""),
            response_uri=str(resp.url),
            body=resp.text,
            headers=canonicalize_headers(dict(resp.headers.items())),
        )
        transport_error: Optional[BaseException] = None
        if resp.is_error:
            try:
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                transport_error = exc
        return HttpExchange(envelope=envelope, transport_error=transport_error)


class FacebookClient:
    def __init__(
        self,
        settings: Optional[FacebookSettings] = None,
        http_client: Optional[FacebookHttpClient] = None,
        boundary: Optional[Callable[[], str]] = None,
    ) -> None:
        self.settings = settings or FacebookSettings()
        self.request_factory = GraphRequestFactory(
            access_token=self.settings.access_token,
            use_beta=self.settings.use_beta,
            secure_connection=self.settings.secure_connection,
            serializer=self.settings.serializer,
            boundary=boundary,
        )
        self._client = http_client or FacebookHttpClient(timeout=self.settings.timeout)
        self._owns_client = http_client is None

    @classmethod
    def from_access_token(cls, access_token: str, **kwargs: Any) -> "FacebookClient":
        if not access_token:
            raise ArgumentInvalid("access_token is required")
        return cls(FacebookSettings(access_token=access_token), **kwargs)

    async def __aenter__(self) -> "FacebookClient":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_client:
            await self._client.__aexit__(exc_type, exc, tb)

    def with_settings(self, **changes: Any) -> "FacebookClient":
        return FacebookClient(
            replace(self.settings, **changes),
            http_client=self._client,
            boundary=self.request_factory.boundary,
        )

    async def request(
        self,
        http_method: str,
        path: str,
        parameters: Any = None,
        result_shape: Optional[Any] = None,
    ) -> Any:
        spec, contains_etag = self.request_factory.build_request(http_method, path, parameters)
        exchange = await self._client.execute(spec)
        return self._process(exchange, result_shape, contains_etag)

    async def get(self, path: str, parameters: Any = None, result_shape: Optional[Any] = None) -> Any:
        return await self.request("GET", path, parameters, result_shape)

    async def post(self, path: str, parameters: Any = None, result_shape: Optional[Any] = None) -> Any:
        return await self.request("POST", path, parameters, result_shape)

    async def delete(self, path: str, parameters: Any = None, result_shape: Optional[Any] = None) -> Any:
        return await self.request("DELETE", path, parameters, result_shape)

    def _process(self, exchange: HttpExchange, result_shape: Optional[Any], contains_etag: bool) -> Any:
        try:
            return interpret_response(
                exchange.envelope,
                result_shape,
                contains_etag,
                deserializer=self.settings.deserializer,
                serializer=self.settings.serializer,
            )
        except FacebookApiError:
            raise
        except Exception as exc:
            if exchange.transport_error is not None:
                raise exchange.transport_error from exc
            raise


def get_facebook_client(
    settings: Optional[FacebookSettings] = None, http_client: Optional[FacebookHttpClient] = None
) -> FacebookClient:
    return FacebookClient(settings or FacebookSettings.from_env(), http_client=http_client)


__all__ = [
    "FacebookClient",
    "FacebookHttpClient",
    "FacebookSettings",
    "get_facebook_client",
]
