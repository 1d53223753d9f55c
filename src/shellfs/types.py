"""Shared data types for shellfs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from shellfs import paths
from shellfs.exceptions import InvalidArgumentError

__all__ = [
    "Classification",
    "CommandOutcome",
    "EntryKind",
    "MountPoint",
    "RemoteEntry",
]


class EntryKind(Enum):
    """Kind of node on the target, as reported by a long listing."""

    FILE = "file"
    DIRECTORY = "directory"
    DIRECTORY_LINK = "directory_link"
    LINK = "link"
    BLOCK = "block"
    CHARACTER = "character"
    SOCKET = "socket"
    FIFO = "fifo"
    OTHER = "other"


@dataclass(eq=True)
class RemoteEntry:
    """One filesystem node on the target.

    Entries are owned by the tree collaborator. The translator reads them
    and asks for placeholders but never removes them.

    Attributes:
        full_path: Absolute POSIX path on the target.
        name: Last path segment (empty for the root).
        kind: Node kind.
        parent: Containing entry, None for the root.
    """

    full_path: str
    name: str
    kind: EntryKind = EntryKind.OTHER
    parent: RemoteEntry | None = field(default=None, repr=False, compare=False)

    @property
    def is_directory(self) -> bool:
        """True for directories and links that point at directories."""
        return self.kind in (EntryKind.DIRECTORY, EntryKind.DIRECTORY_LINK)

    @property
    def is_block_device(self) -> bool:
        return self.kind is EntryKind.BLOCK

    @property
    def is_root(self) -> bool:
        return self.full_path == paths.ROOT

    @property
    def escaped_path(self) -> str:
        """Shell-safe form of ``full_path``, recomputed on every access."""
        return paths.escape(self.full_path)


@dataclass(frozen=True)
class MountPoint:
    """A block device mounted (or to be mounted) on a directory.

    Attributes:
        block: Block device, e.g. ``/dev/block/mmcblk0p9``.
        name: Mount directory, e.g. ``/system``.
        filesystem: Filesystem type label, e.g. ``ext4``.
        read_only: True when mounted read-only.
    """

    block: str
    name: str
    filesystem: str
    read_only: bool = False

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.block:
            raise InvalidArgumentError("Mount point block device cannot be empty")
        if not self.name:
            raise InvalidArgumentError("Mount point directory cannot be empty")


@dataclass(frozen=True)
class CommandOutcome:
    """Captured result of one remote command.

    The captured text is the only success signal: empty means the command
    succeeded, anything else is the diagnostic message. ``exit_code`` is kept
    for logging only and never consulted.
    """

    text: str = ""
    exit_code: int | None = None

    @property
    def succeeded(self) -> bool:
        return not self.text


@dataclass(frozen=True)
class Classification:
    """Success or failure of a command, derived from its captured text.

    Attributes:
        success: True if the command succeeded.
        message: Verbatim diagnostic text (None on success).
    """

    success: bool
    message: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.success and self.message is not None:
            raise ValueError("success=True but message is set")
        if not self.success and not self.message:
            raise ValueError("success=False requires a message")

    @classmethod
    def ok(cls) -> Classification:
        return cls(success=True)

    @classmethod
    def failed(cls, message: str) -> Classification:
        return cls(success=False, message=message)
