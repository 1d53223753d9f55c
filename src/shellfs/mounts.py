"""Mount inventory read from the target's ``/proc/mounts``."""

from __future__ import annotations

import logging

from shellfs.protocols import ShellTransport
from shellfs.types import MountPoint

logger = logging.getLogger(__name__)

MOUNTS_COMMAND = "cat /proc/mounts"


def parse_mounts(text: str) -> dict[str, MountPoint]:
    """Parse ``/proc/mounts`` content.

    Each line reads ``device directory fstype options dump pass``. A mount is
    read-only when ``ro`` appears among its options. Later lines win when a
    directory is mounted more than once, matching what the kernel exposes.

    Args:
        text: Content of ``/proc/mounts``.

    Returns:
        Mount points keyed by mount directory.
    """
    mount_points: dict[str, MountPoint] = {}
    for line in text.splitlines():
        fields = line.split()
        if len(fields) < 4:
            continue
        device, directory, filesystem, options = fields[:4]
        mount_points[directory] = MountPoint(
            block=device,
            name=directory,
            filesystem=filesystem,
            read_only="ro" in options.split(","),
        )
    return mount_points


class ShellMountTable:
    """Mount table loaded once from the target and cached until refreshed."""

    def __init__(self, transport: ShellTransport) -> None:
        self.transport = transport
        self._mount_points: dict[str, MountPoint] | None = None

    def mount_points(self) -> dict[str, MountPoint]:
        """Get mount points keyed by mount directory."""
        if self._mount_points is None:
            self.refresh()
        return dict(self._mount_points or {})

    def refresh(self) -> None:
        """Reload the mount table from the target."""
        outcome = self.transport.execute(MOUNTS_COMMAND)
        self._mount_points = parse_mounts(outcome.text)
        logger.debug("Loaded %d mount points", len(self._mount_points))
