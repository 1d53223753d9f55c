"""Protocol definitions for the collaborators of the filesystem facade.

The facade never talks to a device directly. It depends on three
interfaces:
- a shell transport that runs one command line and captures its text
- an entry tree that resolves and lists remote paths
- a mount table that knows the target's current mount points

All concrete implementations satisfy these protocols structurally (duck typing),
so tests can substitute in-memory doubles.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from shellfs.types import CommandOutcome, MountPoint, RemoteEntry


@runtime_checkable
class ShellTransport(Protocol):
    """Protocol for running command lines on the target.

    Implementations own the connection, its timeouts and its lifecycle.
    Calls are synchronous and at most one command is in flight per target.
    """

    @property
    def is_online(self) -> bool:
        """Whether the target is currently reachable."""
        ...

    def execute(self, command: str) -> CommandOutcome:
        """Run a command line as the default shell user.

        Args:
            command: Complete, already escaped command line.

        Returns:
            Captured text of the command.

        Raises:
            NotReadyError: If the target cannot be reached.
        """
        ...

    def execute_as_root(self, command: str) -> CommandOutcome:
        """Run a command line with elevated privileges.

        Args:
            command: Complete, already escaped command line.

        Returns:
            Captured text of the command.

        Raises:
            NotReadyError: If the target cannot be reached.
        """
        ...


@runtime_checkable
class EntryTree(Protocol):
    """Protocol for the remote directory tree.

    Implementations resolve paths to entries and may cache listings.
    """

    @property
    def root(self) -> RemoteEntry:
        """The entry for ``/``."""
        ...

    def find_entry(self, path: str) -> RemoteEntry:
        """Resolve a path to an entry.

        Args:
            path: Absolute remote path.

        Returns:
            The matching entry.

        Raises:
            NotFoundError: If the path does not exist.
        """
        ...

    def list_children(self, parent: RemoteEntry, force_refresh: bool = False) -> list[RemoteEntry]:
        """List the children of a directory entry.

        Args:
            parent: Directory to list.
            force_refresh: Bypass any cached listing.

        Returns:
            Child entries.

        Raises:
            NotFoundError: If the directory does not exist.
        """
        ...

    def register_placeholder(self, path: str) -> RemoteEntry:
        """Register an entry for a path that may not exist yet.

        Registering a known path returns the existing entry.

        Args:
            path: Absolute remote path.

        Returns:
            The existing or newly registered entry.
        """
        ...

    def invalidate(self, path: str | None = None) -> None:
        """Forget cached state for a directory and everything below it.

        Args:
            path: Absolute remote directory, or None for the whole tree.
        """
        ...


@runtime_checkable
class MountTable(Protocol):
    """Protocol for the target's mount inventory."""

    def mount_points(self) -> dict[str, MountPoint]:
        """Get the known mount points keyed by mount directory.

        Returns:
            Mapping of mount directory to mount point.
        """
        ...
