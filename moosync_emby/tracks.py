"""Audio track enumeration."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from .api import response_items, ticks_to_seconds
from .const import QUERY_AUDIO_TEMPLATE, get_icon_path
from .models import HostAlbum, HostSong

if TYPE_CHECKING:
    from .api import EmbyClient


def _optional_str(value: object) -> str | None:
    return value if isinstance(value, str) else None


class TrackCatalog:
    """Translate the audio items below a library or playlist into songs."""

    def __init__(self, client: EmbyClient) -> None:
        """Initialize the catalog.

        Args:
            client: API client used for item queries.
        """
        self._client = client

    def _build_song(self, item: dict[str, Any], icon: str, date_added: int) -> HostSong:
        """Translate one audio item.

        Missing or mistyped optional fields fall back to empty values.
        """
        album_tag = _optional_str(item.get("AlbumPrimaryImageTag"))
        artists = item.get("Artists")
        ticks = item.get("RunTimeTicks")
        return HostSong(
            song_id=item["Id"],
            title=str(item.get("Name") or ""),
            artists=tuple(a for a in artists if isinstance(a, str)) if isinstance(artists, list) else (),
            cover_path=self._client.get_image_url(item["Id"]),
            album=HostAlbum(
                name=_optional_str(item.get("Album")),
                artist=_optional_str(item.get("AlbumArtist")),
                # The album cover is looked up by its image tag
                cover_path=self._client.get_image_url(album_tag) if album_tag else None,
            ),
            # bool is an int subclass
            duration_seconds=ticks_to_seconds(
                ticks if isinstance(ticks, int) and not isinstance(ticks, bool) else 0
            ),
            playback_url=self._client.get_universal_audio_url(item["Id"]),
            date_added=date_added,
            icon=icon,
        )

    async def async_get_library_content(self, item_id: str) -> list[HostSong]:
        """Return all songs below a library or playlist.

        Args:
            item_id: Parent item ID.

        Returns:
            List of songs, empty when nothing could be fetched.
        """
        response = await self._client.async_get_user_items(
            self._client.auth.user_id,
            params=QUERY_AUDIO_TEMPLATE.format(parent_id=item_id),
        )
        items = response_items(response)
        if not items:
            return []

        icon = get_icon_path(self._client.auth.server_type)
        # Translation time stands in for the server's date added
        date_added = int(time.time() * 1000)
        return [self._build_song(item, icon, date_added) for item in items]
