"""Tests for mounts module."""

from __future__ import annotations

from unittest.mock import MagicMock

from shellfs.mounts import MOUNTS_COMMAND, ShellMountTable, parse_mounts
from shellfs.types import CommandOutcome

PROC_MOUNTS = """\
rootfs / rootfs ro,relatime 0 0
tmpfs /dev tmpfs rw,nosuid,relatime,mode=755 0 0
/dev/block/platform/msm_sdcc.1/by-name/system /system ext4 ro,seclabel,relatime,data=ordered 0 0
/dev/block/platform/msm_sdcc.1/by-name/userdata /data ext4 rw,seclabel,nosuid,nodev,noatime 0 0
/dev/fuse /mnt/shell/emulated fuse rw,nosuid,nodev,relatime,user_id=1023,group_id=1023 0 0
"""


class TestParseMounts:
    """Tests for parse_mounts()."""

    def test_keys_by_directory(self) -> None:
        mount_points = parse_mounts(PROC_MOUNTS)
        assert list(mount_points) == ["/", "/dev", "/system", "/data", "/mnt/shell/emulated"]

    def test_fields(self) -> None:
        system = parse_mounts(PROC_MOUNTS)["/system"]
        assert system.block == "/dev/block/platform/msm_sdcc.1/by-name/system"
        assert system.filesystem == "ext4"
        assert system.read_only is True

    def test_read_write(self) -> None:
        assert parse_mounts(PROC_MOUNTS)["/data"].read_only is False

    def test_ro_must_be_a_whole_option(self) -> None:
        """Test options merely containing 'ro' are not read-only."""
        text = "none /mnt tmpfs rw,errors=remount-ro 0 0\n"
        assert parse_mounts(text)["/mnt"].read_only is False

    def test_last_mount_wins(self) -> None:
        text = "/dev/a /system ext4 ro 0 0\n/dev/b /system ext4 rw 0 0\n"
        mount_point = parse_mounts(text)["/system"]
        assert mount_point.block == "/dev/b"
        assert mount_point.read_only is False

    def test_skips_malformed_lines(self) -> None:
        text = "garbage\n\n/dev/a /system ext4 ro 0 0\n"
        assert list(parse_mounts(text)) == ["/system"]

    def test_empty(self) -> None:
        assert parse_mounts("") == {}


class TestShellMountTable:
    """Tests for ShellMountTable."""

    def test_loads_lazily(self, mock_transport: MagicMock) -> None:
        mock_transport.execute.return_value = CommandOutcome(text=PROC_MOUNTS)
        table = ShellMountTable(mock_transport)

        mock_transport.execute.assert_not_called()
        assert "/system" in table.mount_points()
        mock_transport.execute.assert_called_once_with(MOUNTS_COMMAND)

    def test_cached(self, mock_transport: MagicMock) -> None:
        mock_transport.execute.return_value = CommandOutcome(text=PROC_MOUNTS)
        table = ShellMountTable(mock_transport)

        table.mount_points()
        table.mount_points()

        assert mock_transport.execute.call_count == 1

    def test_refresh(self, mock_transport: MagicMock) -> None:
        """Test refresh picks up remounts."""
        mock_transport.execute.return_value = CommandOutcome(text="/dev/a /system ext4 ro 0 0")
        table = ShellMountTable(mock_transport)
        assert table.mount_points()["/system"].read_only is True

        mock_transport.execute.return_value = CommandOutcome(text="/dev/a /system ext4 rw 0 0")
        table.refresh()

        assert table.mount_points()["/system"].read_only is False

    def test_returns_copy(self, mock_transport: MagicMock) -> None:
        mock_transport.execute.return_value = CommandOutcome(text=PROC_MOUNTS)
        table = ShellMountTable(mock_transport)

        table.mount_points().clear()

        assert table.mount_points()
