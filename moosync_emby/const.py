"""Constants for the Emby/Jellyfin extension."""

from __future__ import annotations

from pathlib import Path
from typing import Final, NotRequired, TypedDict

# Preference keys (as registered with the host)
CONF_URL: Final = "emby_url"
CONF_USERNAME: Final = "emby_username"
CONF_PASSWORD: Final = "emby_password"

# Default values
DEFAULT_URL: Final = "http://localhost:8096"
DEFAULT_USERNAME: Final = ""
DEFAULT_PASSWORD: Final = ""

# Host application
HOST_CLIENT_NAME: Final = "Moosync"
HOST_VERSION_ENV: Final = "MOOSYNC_VERSION"
MIN_HOST_VERSION: Final = ">=1.3.0"

# Host events
EVENT_GET_PLAYLISTS: Final = "get-playlists"
EVENT_GET_PLAYLIST_SONGS: Final = "get-playlist-songs"

# Device identity file, relative to the package directory
DEVICE_ID_FILENAME: Final = "device"

# Icon assets, relative to the package directory
ICON_DIR: Final = "public"
ICON_EMBY: Final = "emby_icon.svg"
ICON_JELLYFIN: Final = "jellyfin_icon.svg"

# API constants
EMBY_TICKS_PER_SECOND: Final = 10_000_000
COLLECTION_TYPE_MUSIC: Final = "music"
JELLYFIN_PROVIDER_MARKER: Final = "jellyfin"

# HTTP constants
HEADER_TOKEN: Final = "X-Emby-Token"
HEADER_EMBY_AUTHORIZATION: Final = "X-Emby-Authorization"
HEADER_AUTHORIZATION: Final = "Authorization"
CONTENT_TYPE_JSON: Final = "application/json"
AUTHORIZATION_TEMPLATE: Final = (
    'Emby Client="{client}", Device="{device}", DeviceId="{device_id}", Version="{version}"'
)

# HTTP methods
HTTP_GET: Final = "GET"
HTTP_POST: Final = "POST"

# API Endpoints
ENDPOINT_AUTHENTICATE: Final = "/Users/AuthenticateByName"
ENDPOINT_LOGOUT: Final = "/Sessions/Logout"

# Item queries
QUERY_PLAYLISTS: Final = "?Recursive=true&IncludeItemTypes=playlist"
QUERY_AUDIO_TEMPLATE: Final = "?ParentId={parent_id}&Recursive=true&IncludeItemTypes=Audio"

# Universal audio streaming parameters
PLAYBACK_MAX_STREAMING_BITRATE: Final = 140_000_000
PLAYBACK_CONTAINERS: Final = "opus,webm|opus,mp3,aac,m4a|aac,m4b|aac,flac,webma,webm|webma,wav,ogg"
PLAYBACK_TRANSCODING_CONTAINER: Final = "ts"
PLAYBACK_TRANSCODING_PROTOCOL: Final = "hls"
PLAYBACK_AUDIO_CODEC: Final = "aac"


# =============================================================================
# TypedDicts for API Responses
# =============================================================================
# Note: TypedDicts are for API responses (external data)
# Dataclasses are for internal models (see models.py)


class EmbyUserPolicy(TypedDict, total=False):
    """Type definition for the Policy block of a user."""

    AuthenticationProviderId: str
    IsAdministrator: bool


class EmbyAuthenticatedUser(TypedDict):
    """Type definition for the User block of an authentication result."""

    Id: str
    Name: NotRequired[str]
    Policy: EmbyUserPolicy


class EmbyAuthenticationResult(TypedDict):
    """Type definition for /Users/AuthenticateByName response."""

    User: EmbyAuthenticatedUser
    AccessToken: str
    ServerId: NotRequired[str]


class EmbyCollectionItem(TypedDict):
    """Type definition for a collection folder or playlist item."""

    Id: str
    Name: str
    CollectionType: NotRequired[str]
    Type: NotRequired[str]
    ServerId: NotRequired[str]
    IsFolder: NotRequired[bool]
    ImageTags: NotRequired[dict[str, str]]


class EmbyAudioItem(TypedDict):
    """Type definition for an audio item."""

    Id: str
    Name: str
    RunTimeTicks: NotRequired[int]
    Artists: NotRequired[list[str]]
    Album: NotRequired[str]
    AlbumId: NotRequired[str]
    AlbumArtist: NotRequired[str]
    AlbumArtists: NotRequired[list[dict[str, str]]]
    AlbumPrimaryImageTag: NotRequired[str]
    IndexNumber: NotRequired[int]
    ParentIndexNumber: NotRequired[int]
    ImageTags: NotRequired[dict[str, str]]
    MediaType: NotRequired[str]


class EmbyItemsResponse(TypedDict):
    """Type definition for /Users/{id}/Items responses."""

    Items: list[EmbyCollectionItem] | list[EmbyAudioItem]
    TotalRecordCount: NotRequired[int]


class HostPreference(TypedDict):
    """Type definition for a preference descriptor handed to the host."""

    type: str
    key: str
    title: str
    description: str
    default: str
    inputType: NotRequired[str]


# =============================================================================
# Helpers
# =============================================================================


def sanitize_api_key(api_key: str) -> str:
    """Sanitize an access token for safe logging.

    Args:
        api_key: The full token

    Returns:
        Truncated token safe for logging (first 4 + last 2 chars)
    """
    if len(api_key) <= 6:
        return "***"
    return f"{api_key[:4]}...{api_key[-2:]}"


def normalize_url(url: str) -> str:
    """Normalize a server URL entered by the user.

    Strips surrounding whitespace and trailing slashes.

    Args:
        url: Raw URL from preferences

    Returns:
        URL without trailing slashes
    """
    return url.strip().rstrip("/")


def get_icon_path(server_type: str) -> str:
    """Return the local icon path for a server flavor.

    Args:
        server_type: ``emby`` or ``jellyfin``

    Returns:
        Absolute path of the bundled SVG icon
    """
    name = ICON_JELLYFIN if server_type == "jellyfin" else ICON_EMBY
    return str(Path(__file__).parent / ICON_DIR / name)
