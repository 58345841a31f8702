"""Data models for the Emby/Jellyfin extension."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class ServerType(StrEnum):
    """Media server flavor.

    Both servers share the same API shape; the flavor only selects
    which icon is shown next to playlists and songs.
    """

    EMBY = "emby"
    JELLYFIN = "jellyfin"


@dataclass(slots=True)
class Credentials:
    """Server credentials supplied by host preferences.

    Mutable: fields are updated in place when the host reports a
    preference change.

    Attributes:
        url: Base URL of the media server.
        username: Login name.
        password: Login password.
    """

    url: str
    username: str = ""
    password: str = ""


@dataclass(frozen=True, slots=True)
class EmbyAuthState:
    """Authenticated session snapshot.

    Replaced as a whole on every successful login so readers never
    observe a token from one login paired with a user or server type
    from another.

    Attributes:
        access_token: Token returned by AuthenticateByName, empty until login.
        user_id: Authenticated user ID, empty until login.
        device_id: Device identifier presented to the server.
        server_type: Detected server flavor.
    """

    access_token: str = ""
    user_id: str = ""
    device_id: str = ""
    server_type: ServerType = ServerType.EMBY

    @property
    def is_authenticated(self) -> bool:
        """Return True if an access token is held."""
        return bool(self.access_token)


@dataclass(frozen=True, slots=True)
class HostPlaylist:
    """Playlist record handed to the host."""

    playlist_id: str
    name: str
    cover_path: str
    icon: str

    def as_dict(self) -> dict[str, object]:
        """Return the host representation of this playlist."""
        return {
            "playlist_id": self.playlist_id,
            "playlist_name": self.name,
            "playlist_coverPath": self.cover_path,
            "icon": self.icon,
        }


@dataclass(frozen=True, slots=True)
class HostAlbum:
    """Album block of a host song."""

    name: str | None = None
    artist: str | None = None
    cover_path: str | None = None

    def as_dict(self) -> dict[str, object]:
        """Return the host representation of this album."""
        return {
            "album_name": self.name,
            "album_artist": self.artist,
            "album_coverPath_high": self.cover_path,
        }


@dataclass(frozen=True, slots=True)
class HostSong:
    """Song record handed to the host.

    Attributes:
        song_id: Server item ID.
        title: Track title.
        artists: Tuple of artist names.
        cover_path: Cover image URL of the track.
        album: Album details.
        duration_seconds: Track length in seconds.
        playback_url: Universal audio stream URL.
        date_added: Milliseconds since the epoch at translation time.
        icon: Local icon path for the detected server flavor.
        type: Playback type understood by the host player.
    """

    song_id: str
    title: str
    cover_path: str
    duration_seconds: float
    playback_url: str
    date_added: int
    icon: str
    artists: tuple[str, ...] = field(default_factory=tuple)
    album: HostAlbum = field(default_factory=HostAlbum)
    type: str = "URL"

    def as_dict(self) -> dict[str, object]:
        """Return the host representation of this song."""
        return {
            "_id": self.song_id,
            "title": self.title,
            "artists": list(self.artists),
            "song_coverPath_high": self.cover_path,
            "album": self.album.as_dict(),
            "duration": self.duration_seconds,
            "playbackUrl": self.playback_url,
            "type": self.type,
            "date_added": self.date_added,
            "icon": self.icon,
        }


__all__ = [
    "Credentials",
    "EmbyAuthState",
    "HostAlbum",
    "HostPlaylist",
    "HostSong",
    "ServerType",
]
