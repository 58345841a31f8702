"""Tests for the persistent device identity."""

from __future__ import annotations

import asyncio
import logging
import uuid
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from moosync_emby.device import DeviceIdentity


class TestDeviceIdentity:
    """Tests for DeviceIdentity.async_get_device_id."""

    @pytest.mark.asyncio
    async def test_reads_existing_id(self, tmp_path: Path) -> None:
        """Test an existing ID file is used as-is."""
        path = tmp_path / "device"
        path.write_text("existing-device-id", encoding="utf-8")
        identity = DeviceIdentity(path)

        assert await identity.async_get_device_id() == "existing-device-id"
        assert identity._write_task is None

    @pytest.mark.asyncio
    async def test_generates_and_persists_uuid(self, tmp_path: Path) -> None:
        """Test a missing file yields a new UUID that is written out."""
        path = tmp_path / "device"
        identity = DeviceIdentity(path)

        device_id = await identity.async_get_device_id()

        assert uuid.UUID(device_id).version == 4
        assert identity._write_task is not None
        await identity._write_task
        assert path.read_text(encoding="utf-8") == device_id

    @pytest.mark.asyncio
    async def test_missing_file_logs_warning(
        self,
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test read failures are logged as warnings."""
        identity = DeviceIdentity(tmp_path / "device")

        with caplog.at_level(logging.WARNING):
            await identity.async_get_device_id()

        assert "Failed to open" in caplog.text

    @pytest.mark.asyncio
    async def test_empty_file_regenerates(self, tmp_path: Path) -> None:
        """Test an empty file is treated as a missing ID."""
        path = tmp_path / "device"
        path.write_text("", encoding="utf-8")
        identity = DeviceIdentity(path)

        device_id = await identity.async_get_device_id()

        assert device_id
        assert identity._write_task is not None
        await identity._write_task
        assert path.read_text(encoding="utf-8") == device_id

    @pytest.mark.asyncio
    async def test_undecodable_file_regenerates(self, tmp_path: Path) -> None:
        """Test a file that is not UTF-8 is treated as a missing ID."""
        path = tmp_path / "device"
        path.write_bytes(b"\xff\xfe\xfa")
        identity = DeviceIdentity(path)

        device_id = await identity.async_get_device_id()

        assert uuid.UUID(device_id)

    @pytest.mark.asyncio
    async def test_write_failure_not_raised(
        self,
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test a failed write is logged and the ID is still returned."""
        path = tmp_path / "missing-dir" / "device"
        identity = DeviceIdentity(path)

        with caplog.at_level(logging.WARNING):
            device_id = await identity.async_get_device_id()
            assert identity._write_task is not None
            with pytest.raises(OSError):
                await identity._write_task

        assert uuid.UUID(device_id)
        assert "Failed to persist device ID" in caplog.text

    @pytest.mark.asyncio
    async def test_cached_within_process(self, tmp_path: Path) -> None:
        """Test repeated calls hit the disk at most once each way."""
        identity = DeviceIdentity(tmp_path / "device")
        read_text = MagicMock(side_effect=FileNotFoundError("missing"))
        write_text = MagicMock(return_value=36)

        with (
            patch.object(Path, "read_text", read_text),
            patch.object(Path, "write_text", write_text),
        ):
            first = await identity.async_get_device_id()
            assert identity._write_task is not None
            await identity._write_task
            second = await identity.async_get_device_id()

        assert first == second
        assert read_text.call_count == 1
        assert write_text.call_count == 1

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_share_one_id(self, tmp_path: Path) -> None:
        """Test concurrent first calls read and write the file once and agree on the ID."""
        identity = DeviceIdentity(tmp_path / "device")
        read_text = MagicMock(side_effect=FileNotFoundError("missing"))
        write_text = MagicMock(return_value=36)

        with (
            patch.object(Path, "read_text", read_text),
            patch.object(Path, "write_text", write_text),
        ):
            results = await asyncio.gather(
                identity.async_get_device_id(),
                identity.async_get_device_id(),
                identity.async_get_device_id(),
            )
            assert identity._write_task is not None
            await identity._write_task

        assert len(set(results)) == 1
        assert uuid.UUID(results[0]).version == 4
        assert read_text.call_count == 1
        assert write_text.call_count == 1
        assert write_text.call_args.args == (results[0],)

    def test_default_path_in_package(self) -> None:
        """Test the default file lives next to the package."""
        identity = DeviceIdentity()
        assert identity.path.name == "device"
        assert identity.path.parent.name == "moosync_emby"
