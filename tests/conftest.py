"""Fixtures for Emby/Jellyfin extension tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from moosync_emby.api import EmbyClient
from moosync_emby.models import EmbyAuthState, ServerType

BASE_URL = "http://emby.local:8096"


def create_mock_response(
    status: int = 200,
    json_data: Any = None,
    reason: str = "OK",
) -> MagicMock:
    """Create a mock aiohttp response usable as an async context manager.

    Args:
        status: HTTP status code.
        json_data: Value returned by ``response.json()``.
        reason: HTTP reason phrase.

    Returns:
        The configured mock response.
    """
    mock_response = MagicMock()
    mock_response.status = status
    mock_response.reason = reason
    mock_response.json = AsyncMock(return_value=json_data)
    mock_response.raise_for_status = MagicMock()
    mock_response.__aenter__ = AsyncMock(return_value=mock_response)
    mock_response.__aexit__ = AsyncMock(return_value=None)
    return mock_response


def create_mock_session(response: MagicMock | None = None) -> MagicMock:
    """Create a mock aiohttp ClientSession.

    Args:
        response: Optional response returned by ``session.request()``.

    Returns:
        The configured mock session.
    """
    mock_session = MagicMock()
    mock_session.request = MagicMock(return_value=response)
    mock_session.closed = False
    mock_session.close = AsyncMock()
    return mock_session


@pytest.fixture
def mock_auth_state() -> EmbyAuthState:
    """Return an authenticated session snapshot."""
    return EmbyAuthState(
        access_token="test-token-12345",
        user_id="user-1",
        device_id="device-1",
        server_type=ServerType.EMBY,
    )


@pytest.fixture
def authenticated_client(mock_auth_state: EmbyAuthState) -> EmbyClient:
    """Return a client holding an authenticated session."""
    client = EmbyClient(BASE_URL)
    client.auth = mock_auth_state
    return client


@pytest.fixture
def mock_auth_result() -> dict[str, Any]:
    """Return mock /Users/AuthenticateByName response."""
    return {
        "User": {
            "Id": "user-1",
            "Name": "TestUser",
            "Policy": {
                "AuthenticationProviderId": (
                    "Emby.Server.Implementations.Library.DefaultAuthenticationProvider"
                ),
            },
        },
        "AccessToken": "test-token-12345",
        "ServerId": "test-server-id-12345",
    }


@pytest.fixture
def mock_collections() -> dict[str, Any]:
    """Return mock top-level collections response."""
    return {
        "Items": [
            {"Id": "lib-music-1", "Name": "Music", "CollectionType": "music"},
            {"Id": "lib-movies", "Name": "Movies", "CollectionType": "movies"},
            {"Id": "lib-music-2", "Name": "Vinyl Rips", "CollectionType": "music"},
            {"Id": "lib-tv", "Name": "TV Shows", "CollectionType": "tvshows"},
            {"Id": "lib-folder", "Name": "Mixed"},
        ],
        "TotalRecordCount": 5,
    }


@pytest.fixture
def mock_playlists() -> dict[str, Any]:
    """Return mock playlist items response."""
    return {
        "Items": [
            {"Id": "playlist-1", "Name": "Favourites", "Type": "Playlist"},
            {"Id": "playlist-2", "Name": "Road Trip", "Type": "Playlist"},
        ],
        "TotalRecordCount": 2,
    }


@pytest.fixture
def mock_audio_items() -> dict[str, Any]:
    """Return mock audio items response."""
    return {
        "Items": [
            {
                "Id": "track-1",
                "Name": "Bohemian Rhapsody",
                "RunTimeTicks": 2160000000,
                "Artists": ["Queen"],
                "Album": "A Night at the Opera",
                "AlbumId": "album-1",
                "AlbumArtist": "Queen",
                "AlbumPrimaryImageTag": "album-tag-1",
                "Type": "Audio",
                "MediaType": "Audio",
            },
            {
                "Id": "track-2",
                "Name": "Untagged Demo",
                "RunTimeTicks": 5_000_000,
                "Artists": [],
                "Type": "Audio",
                "MediaType": "Audio",
            },
        ],
        "TotalRecordCount": 2,
    }
