"""Command line builders for remote filesystem operations.

Every builder is a pure function. Path arguments must already be escaped
with ``shellfs.paths.escape``; builders never escape again.

The enhanced-tool duality is expressed as a ``Toolset`` chosen once per
session by ``select_toolset`` and passed explicitly to the builders that
care about it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shellfs.types import MountPoint

DEFAULT_TOOL = "busybox"


@dataclass(frozen=True)
class Toolset:
    """Tool variant used to build command lines for one session.

    Attributes:
        enhanced: True when the enhanced multi-call tool is present.
        prefix: Name of the enhanced tool, prepended to commands that need it.
    """

    enhanced: bool = False
    prefix: str = DEFAULT_TOOL

    def tool(self, name: str) -> str:
        """Get the command name, routed through the enhanced tool when present."""
        if self.enhanced:
            return f"{self.prefix} {name}"
        return name


PLAIN = Toolset(enhanced=False)


def select_toolset(available: bool, tool_name: str = DEFAULT_TOOL) -> Toolset:
    """Choose the tool variant from the capability flag."""
    return Toolset(enhanced=available, prefix=tool_name)


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part)


def _options_flag(options: str | None) -> str:
    return f"-o {options}" if options else ""


def build_probe(tool_name: str = DEFAULT_TOOL) -> str:
    """Command whose output reveals whether the enhanced tool exists."""
    return tool_name


def build_create_file(escaped_path: str, toolset: Toolset) -> str:
    """Create an empty file.

    Uses ``touch`` when the enhanced tool is present, otherwise an empty
    redirect, which every POSIX shell supports.
    """
    if toolset.enhanced:
        return _join("touch", escaped_path)
    return _join(">", escaped_path)


def build_make_directory(escaped_path: str, toolset: Toolset) -> str:
    """Create a directory and its missing parents with the enhanced tool."""
    return _join(toolset.tool("mkdir"), "-p", escaped_path)


def build_make_directory_segment(escaped_path: str) -> str:
    """Create a single directory whose parent already exists."""
    return _join("mkdir", escaped_path)


def build_copy(escaped_source: str, escaped_destination: str) -> str:
    """Copy file content by concatenation.

    Permissions and metadata are not preserved.
    """
    return _join("cat", escaped_source, ">", escaped_destination)


def build_move(escaped_source: str, escaped_destination: str) -> str:
    return _join("mv", escaped_source, escaped_destination)


def build_chmod(mode: str, escaped_path: str) -> str:
    return _join("chmod", mode, escaped_path)


def build_delete(escaped_path: str, recursive: bool) -> str:
    """Force-remove a path, recursively for directories."""
    return _join("rm", "-f", "-r" if recursive else "", escaped_path)


def build_mount(mount_point: MountPoint, options: str | None, toolset: Toolset) -> str:
    """Mount a block device.

    Argument order is fixed because the target parses positionally:
    read-only/read-write flag, filesystem type, block device, mount
    directory, then the options flag when options are given.
    """
    return _join(
        toolset.tool("mount"),
        "-r" if mount_point.read_only else "-w",
        f"-t {mount_point.filesystem}" if mount_point.filesystem else "",
        mount_point.block,
        mount_point.name,
        _options_flag(options),
    )


def build_mount_by_name(directory: str, toolset: Toolset) -> str:
    """Mount a directory listed in the target's fstab."""
    return _join(toolset.tool("mount"), directory)


def build_unmount(directory: str, options: str | None, toolset: Toolset) -> str:
    return _join(toolset.tool("umount"), directory, _options_flag(options))
