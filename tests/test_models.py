"""Tests for Emby/Jellyfin extension data models."""

from __future__ import annotations

import dataclasses

import pytest

from moosync_emby.models import (
    Credentials,
    EmbyAuthState,
    HostAlbum,
    HostPlaylist,
    HostSong,
    ServerType,
)


class TestServerType:
    """Test ServerType enumeration."""

    def test_values(self) -> None:
        """Test ServerType values."""
        assert ServerType.EMBY == "emby"
        assert ServerType.JELLYFIN == "jellyfin"

    def test_from_string(self) -> None:
        """Test ServerType can be created from string."""
        assert ServerType("jellyfin") is ServerType.JELLYFIN


class TestCredentials:
    """Test Credentials dataclass."""

    def test_defaults(self) -> None:
        """Test username and password default to empty."""
        credentials = Credentials(url="http://emby.local:8096")
        assert credentials.username == ""
        assert credentials.password == ""

    def test_mutable(self) -> None:
        """Test credentials can be updated in place."""
        credentials = Credentials(url="http://emby.local:8096")
        credentials.username = "someone"
        assert credentials.username == "someone"


class TestEmbyAuthState:
    """Test EmbyAuthState dataclass."""

    def test_defaults_unauthenticated(self) -> None:
        """Test the default state holds no session."""
        state = EmbyAuthState()
        assert state.access_token == ""
        assert state.user_id == ""
        assert state.server_type is ServerType.EMBY
        assert state.is_authenticated is False

    def test_is_authenticated(self) -> None:
        """Test a token marks the state as authenticated."""
        assert EmbyAuthState(access_token="token").is_authenticated is True

    def test_immutable(self) -> None:
        """Test EmbyAuthState is frozen."""
        state = EmbyAuthState(access_token="token")
        with pytest.raises(dataclasses.FrozenInstanceError):
            state.access_token = "other"  # type: ignore[misc]


class TestHostPlaylist:
    """Test HostPlaylist dataclass."""

    def test_as_dict(self) -> None:
        """Test host representation keys."""
        playlist = HostPlaylist(
            playlist_id="lib-1",
            name="Music",
            cover_path="http://emby.local:8096/Items/lib-1/Images/Primary",
            icon="/icons/emby_icon.svg",
        )
        assert playlist.as_dict() == {
            "playlist_id": "lib-1",
            "playlist_name": "Music",
            "playlist_coverPath": "http://emby.local:8096/Items/lib-1/Images/Primary",
            "icon": "/icons/emby_icon.svg",
        }


class TestHostSong:
    """Test HostSong dataclass."""

    def test_defaults(self) -> None:
        """Test optional fields."""
        song = HostSong(
            song_id="track-1",
            title="Song",
            cover_path="cover",
            duration_seconds=1.5,
            playback_url="url",
            date_added=0,
            icon="icon",
        )
        assert song.type == "URL"
        assert song.artists == ()
        assert song.album == HostAlbum()

    def test_as_dict(self) -> None:
        """Test host representation keys."""
        song = HostSong(
            song_id="track-1",
            title="Bohemian Rhapsody",
            artists=("Queen",),
            cover_path="cover",
            album=HostAlbum(name="A Night at the Opera", artist="Queen", cover_path="album"),
            duration_seconds=216.0,
            playback_url="stream",
            date_added=1_700_000_000_000,
            icon="icon",
        )
        assert song.as_dict() == {
            "_id": "track-1",
            "title": "Bohemian Rhapsody",
            "artists": ["Queen"],
            "song_coverPath_high": "cover",
            "album": {
                "album_name": "A Night at the Opera",
                "album_artist": "Queen",
                "album_coverPath_high": "album",
            },
            "duration": 216.0,
            "playbackUrl": "stream",
            "type": "URL",
            "date_added": 1_700_000_000_000,
            "icon": "icon",
        }
