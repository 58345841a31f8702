"""Host integration for the Emby/Jellyfin extension.

Registers preferences, wires host events to the catalogs and feeds
preference changes back into the session manager.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

import aiohttp
import voluptuous as vol
from packaging.specifiers import SpecifierSet
from packaging.version import InvalidVersion, Version

from .api import EmbyClient
from .const import (
    CONF_PASSWORD,
    CONF_URL,
    CONF_USERNAME,
    DEFAULT_PASSWORD,
    DEFAULT_URL,
    DEFAULT_USERNAME,
    EVENT_GET_PLAYLIST_SONGS,
    EVENT_GET_PLAYLISTS,
    HOST_VERSION_ENV,
    MIN_HOST_VERSION,
    HostPreference,
    normalize_url,
)
from .device import DeviceIdentity
from .library import LibraryCatalog
from .models import Credentials
from .session import SessionManager
from .tracks import TrackCatalog

_LOGGER = logging.getLogger(__name__)

EventHandler = Callable[..., Awaitable[dict[str, Any]]]

PREFERENCES: list[HostPreference] = [
    {
        "type": "EditText",
        "key": CONF_URL,
        "title": "URL of Emby server",
        "description": "Location at which your Emby/Jellyfin instance is hosted",
        "default": DEFAULT_URL,
    },
    {
        "type": "EditText",
        "key": CONF_USERNAME,
        "title": "Username",
        "description": "Username for your Emby/Jellyfin instance",
        "default": DEFAULT_USERNAME,
    },
    {
        "type": "EditText",
        "key": CONF_PASSWORD,
        "inputType": "password",
        "title": "Password",
        "description": "Password for your Emby/Jellyfin instance",
        "default": DEFAULT_PASSWORD,
    },
]

PREFERENCE_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_URL, default=DEFAULT_URL): vol.All(vol.Coerce(str), normalize_url),
        vol.Optional(CONF_USERNAME, default=DEFAULT_USERNAME): vol.Coerce(str),
        vol.Optional(CONF_PASSWORD, default=DEFAULT_PASSWORD): vol.Coerce(str),
    }
)


class MoosyncHost(Protocol):
    """Subset of the host extension API used by this extension."""

    async def get_preferences(self, key: str, default: Any = None) -> Any:
        """Return a stored preference value."""

    async def get_secure(self, key: str, default: Any = None) -> Any:
        """Return a preference value from the secure store."""

    def on(self, event: str, handler: EventHandler) -> None:
        """Register a handler for a host event."""


def host_version_supported(version: str | None) -> bool:
    """Check the host version against the minimum supported version.

    Args:
        version: Host version string, e.g. ``1.3.0``.

    Returns:
        True if the version satisfies the minimum. Missing or unparsable
        versions are not supported, and neither are pre-releases.
    """
    if not version:
        return False
    try:
        return SpecifierSet(MIN_HOST_VERSION).contains(Version(version))
    except InvalidVersion:
        return False


async def async_register_preferences() -> list[HostPreference]:
    """Return the preference descriptors shown by the host."""
    return [preference.copy() for preference in PREFERENCES]


class EmbyExtension:
    """Emby/Jellyfin playlist provider for the host application.

    Attributes:
        handlers: Host event name to coroutine handler.
    """

    def __init__(
        self,
        host: MoosyncHost,
        host_version: str | None = None,
        session: aiohttp.ClientSession | None = None,
        device_identity: DeviceIdentity | None = None,
    ) -> None:
        """Initialize the extension.

        Args:
            host: Host extension API.
            host_version: Host version. Defaults to the MOOSYNC_VERSION
                          environment variable.
            session: Optional aiohttp session to reuse.
            device_identity: Optional device identity store.
        """
        self._host = host
        self._host_version = (
            host_version if host_version is not None else os.environ.get(HOST_VERSION_ENV, "")
        )
        self._client = EmbyClient(DEFAULT_URL, session=session)
        self._session_manager = SessionManager(
            self._client,
            Credentials(url=DEFAULT_URL),
            device_identity or DeviceIdentity(),
            self._host_version,
        )
        self._libraries = LibraryCatalog(self._client)
        self._tracks = TrackCatalog(self._client)
        self.handlers: dict[str, EventHandler] = {
            EVENT_GET_PLAYLISTS: self.async_handle_get_playlists,
            EVENT_GET_PLAYLIST_SONGS: self.async_handle_get_playlist_songs,
        }

    @property
    def host_version(self) -> str:
        """Return the host version string."""
        return self._host_version

    @property
    def is_supported(self) -> bool:
        """Return True if the host version is supported."""
        return host_version_supported(self._host_version)

    @property
    def session_manager(self) -> SessionManager:
        """Return the session manager."""
        return self._session_manager

    async def async_on_started(self) -> None:
        """Load preferences, register listeners and log in."""
        _LOGGER.info("Emby extension started")

        stored = {
            CONF_URL: await self._host.get_preferences(CONF_URL, DEFAULT_URL),
            CONF_USERNAME: await self._host.get_preferences(CONF_USERNAME, DEFAULT_USERNAME),
            CONF_PASSWORD: await self._host.get_secure(CONF_PASSWORD, DEFAULT_PASSWORD),
        }
        preferences = PREFERENCE_SCHEMA({k: v for k, v in stored.items() if v is not None})
        for key, value in preferences.items():
            self._session_manager.apply_preference(key, value)

        self.register_playlist_listeners()

        if self.is_supported:
            await self._session_manager.async_login()

    def register_playlist_listeners(self) -> None:
        """Register the playlist handlers with the host."""
        if not self.is_supported:
            return
        for event, handler in self.handlers.items():
            self._host.on(event, handler)

    async def async_handle_get_playlists(self) -> dict[str, Any]:
        """Handle the host request for playlists."""
        playlists = await self._libraries.async_get_libraries()
        return {"playlists": [playlist.as_dict() for playlist in playlists]}

    async def async_handle_get_playlist_songs(self, playlist_id: str) -> dict[str, Any]:
        """Handle the host request for the songs of a playlist."""
        songs = await self._tracks.async_get_library_content(playlist_id)
        return {"songs": [song.as_dict() for song in songs]}

    async def async_on_preference_changed(self, key: str, value: Any) -> None:
        """Handle a preference change reported by the host."""
        if not self.is_supported:
            return
        await self._session_manager.async_on_credentials_changed(key, value)

    async def async_close(self) -> None:
        """Release the HTTP session."""
        await self._client.close()


def create_extension(host: MoosyncHost, host_version: str | None = None) -> EmbyExtension:
    """Create the extension, warning when the host is too old.

    Args:
        host: Host extension API.
        host_version: Host version. Defaults to the MOOSYNC_VERSION
                      environment variable.

    Returns:
        The extension. It stays inert on unsupported hosts.
    """
    extension = EmbyExtension(host, host_version=host_version)
    if not extension.is_supported:
        _LOGGER.warning(
            "This extension was made for Moosync version 1.3.0 or above. Current version is %s",
            extension.host_version or "unknown",
        )
    return extension
