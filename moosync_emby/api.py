"""Emby/Jellyfin API client."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Self, cast
from urllib.parse import quote

import aiohttp

from .const import (
    CONTENT_TYPE_JSON,
    EMBY_TICKS_PER_SECOND,
    ENDPOINT_AUTHENTICATE,
    ENDPOINT_LOGOUT,
    HEADER_AUTHORIZATION,
    HEADER_EMBY_AUTHORIZATION,
    HEADER_TOKEN,
    HTTP_GET,
    HTTP_POST,
    PLAYBACK_AUDIO_CODEC,
    PLAYBACK_CONTAINERS,
    PLAYBACK_MAX_STREAMING_BITRATE,
    PLAYBACK_TRANSCODING_CONTAINER,
    PLAYBACK_TRANSCODING_PROTOCOL,
    sanitize_api_key,
)
from .exceptions import (
    EmbyAuthenticationError,
    EmbyConnectionError,
    EmbyError,
    EmbyInvalidResponseError,
    EmbyNotFoundError,
    EmbyServerError,
    EmbySSLError,
    EmbyTimeoutError,
)
from .models import EmbyAuthState

if TYPE_CHECKING:
    from .const import EmbyAuthenticationResult, EmbyItemsResponse

_LOGGER = logging.getLogger(__name__)

# A run of slashes not directly after the scheme's colon
_DUPLICATE_SLASHES = re.compile(r"([^:]/)/+")


class EmbyClient:
    """Async client for the Emby/Jellyfin API.

    This client handles all HTTP communication with the media server:
    URL assembly, header construction, authentication and response
    parsing. The authenticated state is held as a single immutable
    `EmbyAuthState` that is swapped on login.

    Example:
        ```python
        async with EmbyClient("http://192.168.1.100:8096") as client:
            result = await client.async_authenticate_by_name("user", "pw", auth_header)
            client.auth = EmbyAuthState(
                access_token=result["AccessToken"],
                user_id=result["User"]["Id"],
            )
            items = await client.async_get_user_items(client.auth.user_id)
        ```
    """

    def __init__(
        self,
        base_url: str,
        session: aiohttp.ClientSession | None = None,
        timeout: aiohttp.ClientTimeout | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Server base URL, e.g. ``http://localhost:8096``.
            session: Optional aiohttp session to reuse. If not provided,
                     a new session will be created.
            timeout: Optional timeout for a session created by the client.
                     The aiohttp default applies when omitted.
        """
        self._base_url = base_url
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout
        self._auth = EmbyAuthState()

    async def __aenter__(self) -> Self:
        """Enter async context manager."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit async context manager."""
        await self.close()

    @property
    def base_url(self) -> str:
        """Return the base URL for API requests."""
        return self._base_url

    @base_url.setter
    def base_url(self, value: str) -> None:
        """Point the client at another server."""
        self._base_url = value

    @property
    def auth(self) -> EmbyAuthState:
        """Return the current authenticated state."""
        return self._auth

    @auth.setter
    def auth(self, value: EmbyAuthState) -> None:
        """Replace the authenticated state."""
        self._auth = value

    def _get_headers(self) -> dict[str, str]:
        """Build headers for API requests.

        Returns:
            Dictionary of HTTP headers. Token headers are only present
            once an access token is held.
        """
        headers = {"Content-Type": CONTENT_TYPE_JSON}
        if token := self._auth.access_token:
            headers[HEADER_TOKEN] = token
            headers[HEADER_EMBY_AUTHORIZATION] = token
        return headers

    def build_url(
        self,
        user_id: str | None = None,
        item_id: str | None = None,
        custom_path: str | None = None,
        params: str | None = None,
    ) -> str:
        """Build a URL in the user items namespace.

        The user segment is only added when both a user ID and an access
        token are present. Repeated slashes are collapsed, except for the
        ``://`` after the scheme.

        Args:
            user_id: Optional user ID.
            item_id: Optional item ID.
            custom_path: Optional path below the item.
            params: Optional raw query string, including the leading ``?``.

        Returns:
            Full request URL.

        Examples:
            >>> EmbyClient("http://host:8096").build_url(item_id="track1")
            'http://host:8096/Items/track1/'
        """
        url = self._base_url
        if user_id and self._auth.access_token:
            url += f"/Users/{user_id}/"
        else:
            url += "/"
        url += f"Items/{item_id or ''}/{custom_path or ''}"
        url = _DUPLICATE_SLASHES.sub(r"\1", url)
        return f"{url}{params or ''}"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session.

        Returns:
            Active aiohttp client session.
        """
        if self._session is None or self._session.closed:
            if self._timeout is None:
                self._session = aiohttp.ClientSession()
            else:
                self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def _request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        data: dict[str, object] | None = None,
    ) -> object:
        """Make an HTTP request to the media server.

        Args:
            method: HTTP method (GET, POST).
            url: Full request URL.
            headers: Request headers.
            data: Optional JSON body.

        Returns:
            Parsed JSON response, or None for an empty response.

        Raises:
            EmbyConnectionError: Connection failed.
            EmbyAuthenticationError: Authentication failed (401/403).
            EmbyNotFoundError: Resource not found (404).
            EmbyServerError: Server error (5xx).
            EmbyInvalidResponseError: Body is not valid JSON.
            EmbyTimeoutError: Request timed out.
            EmbySSLError: SSL certificate error.
        """
        _LOGGER.debug(
            "Emby API request: %s %s (token=%s)",
            method,
            url,
            sanitize_api_key(self._auth.access_token) if self._auth.access_token else "N/A",
        )

        session = await self._get_session()

        try:
            async with session.request(
                method,
                url,
                headers=headers,
                json=data,
            ) as response:
                _LOGGER.debug(
                    "Emby API response: %s %s for %s %s",
                    response.status,
                    response.reason,
                    method,
                    url,
                )

                if response.status in (401, 403):
                    raise EmbyAuthenticationError(
                        f"Authentication failed: {response.status} {response.reason}"
                    )

                if response.status == 404:
                    raise EmbyNotFoundError(f"Resource not found: {url}")

                if response.status >= 500:
                    raise EmbyServerError(f"Server error: {response.status} {response.reason}")

                response.raise_for_status()

                # 204 No Content is success
                if response.status == 204:
                    return None

                try:
                    return await response.json()
                except (aiohttp.ContentTypeError, ValueError) as err:
                    raise EmbyInvalidResponseError(f"Server returned invalid JSON: {err}") from err

        except aiohttp.ClientSSLError as err:
            raise EmbySSLError(f"SSL certificate error: {err}") from err

        except TimeoutError as err:
            raise EmbyTimeoutError(f"Request to {url} timed out") from err

        except aiohttp.ClientConnectorError as err:
            raise EmbyConnectionError(f"Failed to connect to {self._base_url}: {err}") from err

        except aiohttp.ClientResponseError as err:
            if err.status in (401, 403):
                raise EmbyAuthenticationError(f"Authentication failed: {err.status}") from err
            if err.status == 404:
                raise EmbyNotFoundError(f"Resource not found: {url}") from err
            if err.status >= 500:
                raise EmbyServerError(f"Server error: {err.status}") from err
            raise EmbyConnectionError(f"HTTP error: {err.status}") from err

        except aiohttp.ClientError as err:
            raise EmbyConnectionError(f"Client error: {err}") from err

    async def async_get_user_items(
        self,
        user_id: str | None = None,
        item_id: str | None = None,
        custom_path: str | None = None,
        params: str | None = None,
    ) -> EmbyItemsResponse | None:
        """Fetch from the user items namespace.

        Failures are logged and reported as None, so callers cannot tell
        an unreachable server from an empty answer.

        Args:
            user_id: Optional user ID.
            item_id: Optional item ID.
            custom_path: Optional path below the item.
            params: Optional raw query string.

        Returns:
            Decoded response body, or None on any failure.
        """
        url = self.build_url(user_id, item_id, custom_path, params)
        try:
            response = await self._request(HTTP_GET, url, self._get_headers())
        except EmbyError as err:
            _LOGGER.error("Emby API request to %s failed: %s", url, err)
            return None

        if not isinstance(response, dict):
            _LOGGER.error("Emby API returned unexpected body for %s: %r", url, response)
            return None
        return cast("EmbyItemsResponse", response)

    async def async_authenticate_by_name(
        self,
        username: str,
        password: str,
        authorization: str,
    ) -> EmbyAuthenticationResult:
        """Authenticate a user with username and password.

        Args:
            username: Login name.
            password: Login password.
            authorization: Value of the client ``Authorization`` header.

        Returns:
            Authentication result with user and access token.

        Raises:
            EmbyError: Request failed or the body is malformed.
        """
        response = await self._request(
            HTTP_POST,
            f"{self._base_url}{ENDPOINT_AUTHENTICATE}",
            {HEADER_AUTHORIZATION: authorization, "Content-Type": CONTENT_TYPE_JSON},
            data={"Username": username, "Pw": password},
        )

        try:
            user = response["User"]  # type: ignore[index]
            required = (
                user["Id"],
                user["Policy"]["AuthenticationProviderId"],
                response["AccessToken"],  # type: ignore[index]
            )
        except (KeyError, TypeError) as err:
            raise EmbyInvalidResponseError(f"Malformed authentication response: missing {err}") from err

        if not all(isinstance(value, str) for value in required):
            raise EmbyInvalidResponseError("Malformed authentication response: non-string field")

        return cast("EmbyAuthenticationResult", response)

    async def async_logout(self) -> None:
        """End the current server session.

        Raises:
            EmbyError: Request failed.
        """
        await self._request(HTTP_POST, f"{self._base_url}{ENDPOINT_LOGOUT}", self._get_headers())

    def get_image_url(self, item_id: str) -> str:
        """Generate URL for the primary image of an item.

        Args:
            item_id: The item ID.

        Returns:
            Full URL to the image.
        """
        return f"{self._base_url}/Items/{item_id}/Images/Primary"

    def get_universal_audio_url(self, item_id: str) -> str:
        """Generate URL for universal audio streaming.

        The server picks direct play or HLS transcoding based on the fixed
        container and codec list.

        Args:
            item_id: Audio item ID.

        Returns:
            Full streaming URL with authentication.
        """
        auth = self._auth
        url = f"{self._base_url}/Audio/{item_id}/universal"
        params: list[str] = [
            f"UserId={auth.user_id}",
            f"DeviceId={auth.device_id}",
            f"api_key={auth.access_token}",
            f"MaxStreamingBitrate={PLAYBACK_MAX_STREAMING_BITRATE}",
            f"Container={quote(PLAYBACK_CONTAINERS, safe='')}",
            f"TranscodingContainer={PLAYBACK_TRANSCODING_CONTAINER}",
            f"TranscodingProtocol={PLAYBACK_TRANSCODING_PROTOCOL}",
            f"AudioCodec={PLAYBACK_AUDIO_CODEC}",
            "StartTimeTicks=0",
            "EnableRedirection=true",
        ]
        return f"{url}?{'&'.join(params)}"

    async def close(self) -> None:
        """Close the client session.

        Only closes the session if it was created by this client.
        Sessions provided externally are not closed.
        """
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()


# =============================================================================
# Utility Functions
# =============================================================================


def ticks_to_seconds(ticks: int) -> float:
    """Convert server ticks to seconds.

    Emby and Jellyfin use "ticks" where 10,000,000 ticks = 1 second.

    Args:
        ticks: Time value in ticks.

    Returns:
        Time value in seconds.

    Examples:
        >>> ticks_to_seconds(2_160_000_000)
        216.0
        >>> ticks_to_seconds(0)
        0.0
    """
    return ticks / EMBY_TICKS_PER_SECOND


def response_items(response: EmbyItemsResponse | None) -> list[dict[str, Any]]:
    """Return the usable entries of an items response.

    A missing or non-list ``Items`` counts as empty. Entries that are not
    objects or have no string ``Id`` are logged and skipped.

    Args:
        response: Decoded items response, or None after a failed request.

    Returns:
        Item dictionaries in server order.

    Examples:
        >>> response_items({"Items": [{"Id": "a"}, {"Name": "no id"}]})
        [{'Id': 'a'}]
        >>> response_items({"Items": None})
        []
    """
    if response is None:
        return []
    items = response.get("Items")
    if not isinstance(items, list):
        if items is not None:
            _LOGGER.warning("Ignoring non-list Items in response: %r", items)
        return []

    valid: list[dict[str, Any]] = []
    for item in items:
        if not isinstance(item, dict) or not isinstance(item.get("Id"), str):
            _LOGGER.warning("Skipping malformed item in response: %r", item)
            continue
        valid.append(item)
    return valid
