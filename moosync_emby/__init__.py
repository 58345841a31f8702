"""Emby and Jellyfin music libraries for Moosync."""

from __future__ import annotations

from .extension import EmbyExtension, async_register_preferences, create_extension

__version__ = "0.1.0"

__all__ = [
    "EmbyExtension",
    "async_register_preferences",
    "create_extension",
]
