"""Persistent device identity for the Emby/Jellyfin extension."""

from __future__ import annotations

import asyncio
import logging
import uuid
from pathlib import Path

from .const import DEVICE_ID_FILENAME

_LOGGER = logging.getLogger(__name__)


class DeviceIdentity:
    """Load or create the device ID presented to the media server.

    The ID is a random UUID kept as UTF-8 text in a single file next to
    the package. It is read once per process and cached afterwards.

    Example:
        ```python
        identity = DeviceIdentity()
        device_id = await identity.async_get_device_id()
        ```
    """

    def __init__(self, path: Path | None = None) -> None:
        """Initialize the device identity.

        Args:
            path: File holding the device ID. Defaults to a file named
                  ``device`` inside the package directory.
        """
        self._path = path or Path(__file__).parent / DEVICE_ID_FILENAME
        self._device_id: str | None = None
        self._lock = asyncio.Lock()
        self._write_task: asyncio.Task[int] | None = None

    @property
    def path(self) -> Path:
        """Return the path of the device ID file."""
        return self._path

    async def async_get_device_id(self) -> str:
        """Return the device ID, creating and persisting one if needed.

        Read failures are logged and treated as a missing ID. The write of
        a freshly generated ID is scheduled in the background and is not
        awaited.

        Returns:
            The device ID string.
        """
        if self._device_id:
            return self._device_id

        async with self._lock:
            if self._device_id:
                return self._device_id

            device_id = ""
            try:
                device_id = (await asyncio.to_thread(self._path.read_text, encoding="utf-8")).strip()
            except (OSError, UnicodeDecodeError) as err:
                _LOGGER.warning("Failed to open %s: %s", self._path, err)

            if not device_id:
                device_id = str(uuid.uuid4())
                _LOGGER.debug("Generated new device ID %s", device_id)
                self._write_task = asyncio.create_task(
                    asyncio.to_thread(self._path.write_text, device_id, encoding="utf-8")
                )
                self._write_task.add_done_callback(self._on_write_done)

            self._device_id = device_id
            return device_id

    def _on_write_done(self, task: asyncio.Task[int]) -> None:
        """Log the outcome of the background write."""
        if task.cancelled():
            return
        if (err := task.exception()) is not None:
            _LOGGER.warning("Failed to persist device ID to %s: %s", self._path, err)
