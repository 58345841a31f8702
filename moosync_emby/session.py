"""Session and authentication lifecycle for the Emby/Jellyfin extension."""

from __future__ import annotations

import logging
import sys

from .api import EmbyClient
from .const import (
    AUTHORIZATION_TEMPLATE,
    CONF_PASSWORD,
    CONF_URL,
    CONF_USERNAME,
    DEFAULT_PASSWORD,
    DEFAULT_URL,
    DEFAULT_USERNAME,
    HOST_CLIENT_NAME,
    JELLYFIN_PROVIDER_MARKER,
    normalize_url,
)
from .device import DeviceIdentity
from .exceptions import EmbyError
from .models import Credentials, EmbyAuthState, ServerType

_LOGGER = logging.getLogger(__name__)


def detect_server_type(provider_id: str) -> ServerType:
    """Detect the server flavor from an authentication provider ID.

    Args:
        provider_id: ``Policy.AuthenticationProviderId`` of the logged-in user.

    Returns:
        ServerType.JELLYFIN if the ID mentions jellyfin in any case,
        otherwise ServerType.EMBY.

    Examples:
        >>> detect_server_type("Jellyfin.Server.Implementations.Users.DefaultAuthenticationProvider")
        <ServerType.JELLYFIN: 'jellyfin'>
        >>> detect_server_type("Emby.Server.Implementations.Library.DefaultAuthenticationProvider")
        <ServerType.EMBY: 'emby'>
    """
    if JELLYFIN_PROVIDER_MARKER in provider_id.casefold():
        return ServerType.JELLYFIN
    return ServerType.EMBY


class SessionManager:
    """Own credentials and the authenticated session.

    Login failures never raise: they are logged and the previous session
    is kept. A successful login swaps the client's `EmbyAuthState` in a
    single assignment.
    """

    def __init__(
        self,
        client: EmbyClient,
        credentials: Credentials,
        device_identity: DeviceIdentity,
        host_version: str,
    ) -> None:
        """Initialize the session manager.

        Args:
            client: API client whose auth state is managed.
            credentials: Server URL, username and password.
            device_identity: Source of the device ID.
            host_version: Host application version, sent to the server.
        """
        self._client = client
        self._credentials = credentials
        self._device_identity = device_identity
        self._host_version = host_version
        self._client.base_url = credentials.url

    @property
    def credentials(self) -> Credentials:
        """Return the stored credentials."""
        return self._credentials

    @property
    def state(self) -> EmbyAuthState:
        """Return the current session snapshot."""
        return self._client.auth

    @property
    def server_type(self) -> ServerType:
        """Return the detected server flavor."""
        return self._client.auth.server_type

    def _build_authorization(self, device_id: str) -> str:
        """Build the client Authorization header value."""
        return AUTHORIZATION_TEMPLATE.format(
            client=HOST_CLIENT_NAME,
            device=sys.platform,
            device_id=device_id,
            version=self._host_version,
        )

    async def async_login(self) -> None:
        """Log in with the stored credentials.

        An existing session is logged out first; logout failures are
        ignored. Authentication failures leave the session unchanged.
        """
        _LOGGER.info("Logging in to %s as %s", self._credentials.url, self._credentials.username)

        device_id = await self._device_identity.async_get_device_id()
        authorization = self._build_authorization(device_id)

        if self._client.auth.access_token:
            try:
                await self._client.async_logout()
            except EmbyError as err:
                _LOGGER.warning("Failed to logout: %s", err)

        try:
            result = await self._client.async_authenticate_by_name(
                self._credentials.username,
                self._credentials.password,
                authorization,
            )
        except EmbyError as err:
            _LOGGER.error("Error while authenticating: %s", err)
            return

        user = result["User"]
        server_type = detect_server_type(user["Policy"]["AuthenticationProviderId"])
        self._client.auth = EmbyAuthState(
            access_token=result["AccessToken"],
            user_id=user["Id"],
            device_id=device_id,
            server_type=server_type,
        )
        _LOGGER.info("Logged in as user %s on %s server", user["Id"], server_type)

    def apply_preference(self, key: str, value: object) -> bool:
        """Store a preference value in the matching credential field.

        Args:
            key: Preference key.
            value: New preference value.

        A cleared (None) value falls back to the preference default.

        Returns:
            True if the key is a credential preference.
        """
        if key == CONF_URL:
            url = DEFAULT_URL if value is None else str(value)
            self._credentials.url = normalize_url(url)
            self._client.base_url = self._credentials.url
        elif key == CONF_USERNAME:
            self._credentials.username = DEFAULT_USERNAME if value is None else str(value)
        elif key == CONF_PASSWORD:
            self._credentials.password = DEFAULT_PASSWORD if value is None else str(value)
        else:
            return False
        return True

    async def async_on_credentials_changed(self, key: str, value: object) -> None:
        """Apply a preference change and log in again.

        Any credential change triggers a full login with the current
        values of all three fields.

        Args:
            key: Preference key.
            value: New preference value.
        """
        if not self.apply_preference(key, value):
            _LOGGER.warning("Ignoring change of unknown preference %s", key)
            return

        await self.async_login()
