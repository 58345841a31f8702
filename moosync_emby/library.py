"""Music library and playlist discovery."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .api import response_items
from .const import COLLECTION_TYPE_MUSIC, QUERY_PLAYLISTS, get_icon_path
from .models import HostPlaylist

if TYPE_CHECKING:
    from .api import EmbyClient

_LOGGER = logging.getLogger(__name__)


class LibraryCatalog:
    """Build the host playlist list from music libraries and playlists."""

    def __init__(self, client: EmbyClient) -> None:
        """Initialize the catalog.

        Args:
            client: API client used for item queries.
        """
        self._client = client
        self._scanned_libraries: list[HostPlaylist] = []

    @property
    def scanned_libraries(self) -> list[HostPlaylist]:
        """Return the playlists from the last scan."""
        return self._scanned_libraries

    async def _async_get_music_libraries(self) -> list[dict[str, Any]]:
        """Return top-level collections of type music."""
        response = await self._client.async_get_user_items(self._client.auth.user_id)
        return [
            item
            for item in response_items(response)
            if item.get("CollectionType") == COLLECTION_TYPE_MUSIC
        ]

    async def _async_get_playlists(self) -> list[dict[str, Any]]:
        """Return all playlist items of the user."""
        response = await self._client.async_get_user_items(
            self._client.auth.user_id,
            params=QUERY_PLAYLISTS,
        )
        return response_items(response)

    async def async_get_libraries(self) -> list[HostPlaylist]:
        """Scan music libraries and playlists.

        Libraries come first, then playlists, each in server order. The
        result replaces the previous scan.

        Returns:
            List of host playlists, empty when nothing could be fetched.
        """
        items = [*await self._async_get_music_libraries(), *await self._async_get_playlists()]
        icon = get_icon_path(self._client.auth.server_type)

        self._scanned_libraries = [
            HostPlaylist(
                playlist_id=item["Id"],
                name=str(item.get("Name") or ""),
                cover_path=self._client.get_image_url(item["Id"]),
                icon=icon,
            )
            for item in items
        ]
        _LOGGER.debug("Scanned %d libraries and playlists", len(self._scanned_libraries))
        return self._scanned_libraries
