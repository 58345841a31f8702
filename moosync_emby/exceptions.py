"""Exceptions for the Emby/Jellyfin extension.

These are raised by the HTTP layer of `EmbyClient` and caught at the
host-facing boundary, where they are logged and turned into empty
results.
"""

from __future__ import annotations


class EmbyError(Exception):
    """Base exception for the Emby/Jellyfin extension."""


class EmbyConnectionError(EmbyError):
    """The media server could not be reached.

    Covers refused connections, DNS failures and HTTP statuses that do not
    map onto a more specific error.
    """


class EmbyTimeoutError(EmbyConnectionError):
    """A request ran past the HTTP client's timeout."""


class EmbySSLError(EmbyConnectionError):
    """The server's TLS certificate was rejected."""


class EmbyAuthenticationError(EmbyError):
    """The server refused the credentials or access token (HTTP 401/403).

    During login this is indistinguishable, for the host, from an
    unreachable server: both leave the previous session in place.
    """


class EmbyNotFoundError(EmbyError):
    """The requested item or endpoint does not exist (HTTP 404)."""


class EmbyServerError(EmbyError):
    """The server answered with HTTP 5xx."""


class EmbyInvalidResponseError(EmbyServerError):
    """The server answered with success but the body is unusable.

    Raised for bodies that are not JSON and for authentication results
    missing the user ID, provider ID or access token.
    """
