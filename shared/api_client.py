"""
HTTP client for the platform REST API.

Wraps an httpx.AsyncClient with the conventions every endpoint shares:
- the stored access token is sent as a bearer token on each request
- a 401 triggers one access-token refresh, then the request is retried once
- concurrent 401s wait on the same refresh instead of starting their own
- non-success responses raise ApiError with the server's message

The client reads tokens from the store but does not own them. The session
manager installs hooks (``set_session_hooks``) through which refreshed
tokens and expired sessions are reported back to it.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import httpx

from .config import get_settings
from .exceptions import ApiError, SessionExpiredError
from .storage import IKeyValueStore, REFRESH_TOKEN_KEY, TOKEN_KEY

logger = logging.getLogger(__name__)

TokenRefreshedHook = Callable[[str, Optional[str]], Awaitable[None]]
SessionExpiredHook = Callable[[], Awaitable[None]]


class ApiClient:
    """Async JSON client for the platform backend."""

    REFRESH_PATH = "/auth/refresh"

    def __init__(
        self,
        store: IKeyValueStore,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the API client.

        Args:
            store: Key-value store holding the access and refresh tokens.
            base_url: API root. Defaults to HIVE_API_BASE_URL.
            timeout: Request timeout in seconds. Defaults to HIVE_REQUEST_TIMEOUT.
            transport: Optional httpx transport (tests pass a MockTransport).
        """
        settings = get_settings()
        self._store = store
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout if timeout is not None else settings.request_timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )
        self._refreshing: Optional[asyncio.Task] = None
        self._on_token_refreshed: Optional[TokenRefreshedHook] = None
        self._on_session_expired: Optional[SessionExpiredHook] = None

    def set_session_hooks(
        self,
        on_token_refreshed: Optional[TokenRefreshedHook] = None,
        on_session_expired: Optional[SessionExpiredHook] = None,
    ) -> None:
        """
        Hand token changes to the session owner.

        Args:
            on_token_refreshed: Awaited with ``(access_token, refresh_token)``
                after a successful refresh; it must persist the tokens.
                Without it the client writes them to the store itself.
            on_session_expired: Awaited when a refresh is rejected, before
                SessionExpiredError is raised.
        """
        self._on_token_refreshed = on_token_refreshed
        self._on_session_expired = on_session_expired

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _auth_headers(self, token: Optional[str] = None) -> dict[str, str]:
        token = token or self._store.get(TOKEN_KEY)
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    async def _send(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
        token: Optional[str] = None,
    ) -> httpx.Response:
        try:
            return await self._client.request(
                method,
                path,
                json=json,
                params=params,
                headers=self._auth_headers(token),
            )
        except httpx.HTTPError as e:
            raise ApiError(f"Request to {path} failed: {e}") from e

    @staticmethod
    def _parse(response: httpx.Response) -> dict[str, Any]:
        """Decode a response body, raising ApiError for non-2xx statuses."""
        try:
            body = response.json() if response.content else {}
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        if response.is_success:
            return body

        message = body.get("message") or response.reason_phrase or "Request failed"
        raise ApiError(str(message), status_code=response.status_code, payload=body)

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
        retry_on_401: bool = True,
    ) -> dict[str, Any]:
        """
        Send a request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to the API root (e.g. "/users/me")
            json: Optional JSON body
            params: Optional query parameters
            retry_on_401: Refresh the access token and retry once on a 401.
                Credential endpoints pass False so a bad password is reported
                as-is.

        Returns:
            Decoded response body

        Raises:
            ApiError: Non-success response or transport failure
            SessionExpiredError: 401 and the token refresh failed
        """
        response = await self._send(method, path, json=json, params=params)

        if (
            response.status_code == 401
            and retry_on_401
            and path != self.REFRESH_PATH
            and self._store.get(REFRESH_TOKEN_KEY)
        ):
            token = await self._refresh_shared()
            response = await self._send(method, path, json=json, params=params, token=token)

        return self._parse(response)

    async def get(self, path: str, params: Optional[dict[str, Any]] = None, **kwargs) -> dict[str, Any]:
        return await self.request("GET", path, params=params, **kwargs)

    async def post(self, path: str, json: Optional[dict[str, Any]] = None, **kwargs) -> dict[str, Any]:
        return await self.request("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: Optional[dict[str, Any]] = None, **kwargs) -> dict[str, Any]:
        return await self.request("PUT", path, json=json, **kwargs)

    async def patch(self, path: str, json: Optional[dict[str, Any]] = None, **kwargs) -> dict[str, Any]:
        return await self.request("PATCH", path, json=json, **kwargs)

    async def delete(self, path: str, **kwargs) -> dict[str, Any]:
        return await self.request("DELETE", path, **kwargs)

    async def _refresh_shared(self) -> str:
        """Refresh the access token, joining a refresh already in flight."""
        if self._refreshing is None:
            self._refreshing = asyncio.ensure_future(self._refresh_or_expire())
        try:
            return await self._refreshing
        finally:
            self._refreshing = None

    async def _refresh_or_expire(self) -> str:
        try:
            return await self.refresh_access_token()
        except ApiError as e:
            logger.warning(f"Access token refresh failed: {e.message}")
            if self._on_session_expired is not None:
                await self._on_session_expired()
            raise SessionExpiredError() from e

    async def refresh_access_token(self) -> str:
        """
        Exchange the stored refresh token for a new access token.

        The new access token (and the refresh token, if the server rotated
        it) is passed to the token-refreshed hook, or written to the store
        when no hook is installed.

        Returns:
            The new access token

        Raises:
            ApiError: No refresh token is stored or the server rejected it
        """
        refresh_token = self._store.get(REFRESH_TOKEN_KEY)
        if not refresh_token:
            raise ApiError("No refresh token available")

        try:
            response = await self._client.post(
                self.REFRESH_PATH,
                json={"refreshToken": refresh_token},
            )
        except httpx.HTTPError as e:
            raise ApiError(f"Token refresh request failed: {e}") from e
        body = self._parse(response)

        # Older endpoints nest the token under "data"
        data = body.get("data") if isinstance(body.get("data"), dict) else {}
        token = body.get("token") or data.get("token")
        if not token:
            raise ApiError("Refresh response did not include a token", payload=body)

        new_refresh_token = body.get("refreshToken") or data.get("refreshToken")
        if self._on_token_refreshed is not None:
            await self._on_token_refreshed(token, new_refresh_token)
        else:
            self._store.set(TOKEN_KEY, token)
            if new_refresh_token:
                self._store.set(REFRESH_TOKEN_KEY, new_refresh_token)

        logger.debug("Access token refreshed")
        return token
