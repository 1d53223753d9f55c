"""Filesystem operations on a shell-only target.

``RemoteFileSystem`` is the public face of shellfs. It validates arguments,
picks the tool variant for the session, builds each command line, runs it
through the transport and turns captured text into results or exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from shellfs import paths
from shellfs.capabilities import CapabilityResolver
from shellfs.commands import (
    build_chmod,
    build_copy,
    build_create_file,
    build_delete,
    build_make_directory,
    build_mount,
    build_mount_by_name,
    build_move,
    build_unmount,
)
from shellfs.exceptions import (
    AlreadyExistsError,
    InvalidArgumentError,
    MountPointNotFoundError,
    NotFoundError,
    NotReadyError,
    RemoteCommandFailedError,
)
from shellfs.fallback import make_directory_fallback
from shellfs.outcome import classify, raise_for_outcome
from shellfs.permissions import FilePermissions
from shellfs.protocols import EntryTree, MountTable, ShellTransport
from shellfs.types import CommandOutcome, MountPoint, RemoteEntry

logger = logging.getLogger(__name__)

BLOCK_DEVICE_DIR = "/dev/block/"


class RemoteFileSystem:
    """POSIX-like filesystem operations over a shell transport.

    Operations run one remote command at a time and never retry. Concurrent
    callers sharing a target must be serialized by the transport.

    Note:
        Prefer the factory method `from_transport()` for construction.
    """

    def __init__(
        self,
        transport: ShellTransport,
        tree: EntryTree,
        mounts: MountTable,
        capabilities: CapabilityResolver,
        block_device_dir: str = BLOCK_DEVICE_DIR,
    ) -> None:
        """Initialize the filesystem with its collaborators.

        Args:
            transport: Runs command lines on the target.
            tree: Resolves and lists remote entries.
            mounts: Mount inventory of the target.
            capabilities: Session capability cache.
            block_device_dir: Directory holding block device nodes.
        """
        self.transport = transport
        self.tree = tree
        self.mounts = mounts
        self.capabilities = capabilities
        self.block_device_dir = block_device_dir

    @classmethod
    def from_transport(
        cls,
        transport: ShellTransport,
        tree: EntryTree,
        mounts: MountTable,
        capabilities: CapabilityResolver | None = None,
        block_device_dir: str = BLOCK_DEVICE_DIR,
    ) -> RemoteFileSystem:
        """Create a filesystem, building the capability resolver if needed.

        Args:
            transport: Runs command lines on the target.
            tree: Resolves and lists remote entries.
            mounts: Mount inventory of the target.
            capabilities: Optional shared capability cache for the session.
            block_device_dir: Directory holding block device nodes.

        Returns:
            Configured RemoteFileSystem.
        """
        return cls(
            transport=transport,
            tree=tree,
            mounts=mounts,
            capabilities=capabilities or CapabilityResolver(transport),
            block_device_dir=block_device_dir,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_path(self, path: str | None, name: str = "path") -> str:
        if not path:
            raise InvalidArgumentError(f"{name} cannot be empty")
        return path

    def _require_online(self) -> None:
        if not self.transport.is_online:
            raise NotReadyError("Target is not online")

    def _run(self, command: str) -> CommandOutcome:
        logger.debug("Running: %s", command)
        return self.transport.execute(command)

    def _run_checked(self, command: str) -> None:
        raise_for_outcome(self._run(command))

    def _forget(self, *changed: str) -> None:
        for path in changed:
            self.tree.invalidate(path)

    # ------------------------------------------------------------------
    # Creation and lookup
    # ------------------------------------------------------------------

    def create(self, path: str) -> RemoteEntry:
        """Create an empty file.

        Args:
            path: Absolute remote path of the new file.

        Returns:
            Entry for the created file.

        Raises:
            InvalidArgumentError: If path is empty.
            NotReadyError: If the target is offline.
            AlreadyExistsError: If the path already exists.
            RemoteCommandFailedError: If the target reported an error.
        """
        self._require_path(path)
        self._require_online()
        if self.exists(path):
            raise AlreadyExistsError(f"The specified path already exists: {path}")

        command = build_create_file(paths.escape(path), self.capabilities.toolset())
        logger.debug("Running: %s", command)
        if self.capabilities.can_elevate():
            outcome = self.transport.execute_as_root(command)
        else:
            outcome = self.transport.execute(command)
        raise_for_outcome(outcome)
        self._forget(paths.dirname(path))
        return self.tree.find_entry(path)

    def create_entry(self, entry: RemoteEntry) -> RemoteEntry:
        """Create the file or directory an entry describes."""
        if entry.is_directory:
            self.make_directory(entry.full_path)
            return self.tree.find_entry(entry.full_path)
        return self.create(entry.full_path)

    def exists(self, path: str) -> bool:
        """Check whether a path exists on the target.

        Args:
            path: Absolute remote path.

        Returns:
            True if the path resolves to an entry, False if it does not.

        Raises:
            InvalidArgumentError: If path is empty.
            NotReadyError: If the target is offline.
        """
        self._require_path(path)
        self._require_online()
        try:
            self.tree.find_entry(path)
        except NotFoundError:
            return False
        return True

    def make_directory(self, path: str) -> RemoteEntry:
        """Create a directory and any missing parents.

        Uses ``mkdir -p`` from the enhanced tool when present and falls back
        to creating one segment at a time. Failures along the way are only
        reported if the directory cannot be found afterwards.

        Args:
            path: Absolute remote path of the directory.

        Returns:
            Entry for the directory.

        Raises:
            InvalidArgumentError: If path is empty.
            NotReadyError: If the target is offline.
            RemoteCommandFailedError: If the directory does not exist afterwards.
        """
        self._require_path(path)
        self._require_online()
        path = paths.normalize(path)
        entry = self.tree.register_placeholder(path)
        last_error: str | None = None

        created = False
        if self.capabilities.is_enhanced_tool_available():
            command = build_make_directory(entry.escaped_path, self.capabilities.toolset())
            result = classify(self._run(command))
            created = result.success
            if not created:
                last_error = result.message
                logger.debug("mkdir -p failed for '%s', falling back: %s", path, last_error)

        if not created:
            fallback = make_directory_fallback(path, self.tree, self.transport)
            if fallback.failures:
                last_error = fallback.failures[0]

        self._forget(paths.dirname(path))
        directory = self._find_directory(path)
        if directory is None:
            raise RemoteCommandFailedError(last_error or f"Unable to create directory: {path}")
        return directory

    def _find_directory(self, path: str) -> RemoteEntry | None:
        """Look a directory up in a fresh listing of its parent."""
        if path == paths.ROOT:
            return self.tree.root
        try:
            parent = self.tree.find_entry(paths.dirname(path))
            children = self.tree.list_children(parent, force_refresh=True)
        except NotFoundError:
            return None
        name = paths.basename(path)
        for child in children:
            if child.name == name and child.is_directory:
                return child
        return None

    # ------------------------------------------------------------------
    # Modification
    # ------------------------------------------------------------------

    def copy(self, source: str, destination: str) -> None:
        """Copy a file's content to a destination path.

        The destination is written through a shell redirect, so permissions
        and metadata are not preserved and a partial write is not rolled back.

        Raises:
            InvalidArgumentError: If either path is empty.
            NotReadyError: If the target is offline.
            NotFoundError: If the source does not exist.
            RemoteCommandFailedError: If the target reported an error.
        """
        self._require_path(source, "source")
        self._require_path(destination, "destination")
        self._require_online()
        entry = self.tree.find_entry(source)
        self._run_checked(build_copy(entry.escaped_path, paths.escape(destination)))
        self._forget(paths.dirname(destination))

    def move(self, source: str, destination: str) -> None:
        """Move or rename a path.

        Raises:
            InvalidArgumentError: If either path is empty.
            NotReadyError: If the target is offline.
            NotFoundError: If the source does not exist.
            RemoteCommandFailedError: If the target reported an error.
        """
        self._require_path(source, "source")
        self._require_path(destination, "destination")
        self._require_online()
        entry = self.tree.find_entry(source)
        self._run_checked(build_move(entry.escaped_path, paths.escape(destination)))
        self._forget(paths.dirname(entry.full_path), paths.dirname(destination))

    def chmod(self, path: str, permissions: str | FilePermissions) -> None:
        """Change the permissions of a path.

        A literal mode string is sent as-is and the command's output is not
        inspected. A ``FilePermissions`` value is rendered in octal and any
        output raises. Both forms produce the same command line for the same
        mode.

        Raises:
            InvalidArgumentError: If path or mode is empty.
            NotReadyError: If the target is offline.
            NotFoundError: If the path does not exist.
            RemoteCommandFailedError: If a ``FilePermissions`` chmod reported
                an error.
        """
        self._require_path(path)
        self._require_online()
        entry = self.tree.find_entry(path)
        if isinstance(permissions, FilePermissions):
            self._run_checked(build_chmod(permissions.to_chmod(), entry.escaped_path))
            return
        self._require_path(permissions, "permissions")
        self._run(build_chmod(permissions, entry.escaped_path))

    def delete(self, path: str) -> None:
        """Delete a path, recursively for directories.

        A path that does not exist is ignored and no command is run.

        Raises:
            InvalidArgumentError: If path is empty.
            NotReadyError: If the target is offline.
            RemoteCommandFailedError: If the target reported an error.
        """
        self._require_path(path)
        self._require_online()
        try:
            entry = self.tree.find_entry(path)
        except NotFoundError:
            logger.debug("Nothing to delete at '%s'", path)
            return
        self._run_checked(build_delete(entry.escaped_path, recursive=entry.is_directory))
        self._forget(paths.dirname(entry.full_path))

    # ------------------------------------------------------------------
    # Mounts
    # ------------------------------------------------------------------

    def mount(self, mount_point: MountPoint | str, options: str = "") -> None:
        """Mount a mount point.

        Args:
            mount_point: Full mount point, or a bare mount directory that the
                target resolves from its fstab (not supported everywhere).
            options: Value for ``-o``, ignored for a bare directory.

        Raises:
            InvalidArgumentError: If the mount directory is empty.
            NotReadyError: If the target is offline.
            RemoteCommandFailedError: If the target reported an error.
        """
        if isinstance(mount_point, MountPoint):
            self._require_online()
            escaped = replace(
                mount_point,
                block=paths.escape(mount_point.block),
                name=paths.escape(mount_point.name),
            )
            self._run_checked(build_mount(escaped, options, self.capabilities.toolset()))
            self._forget(mount_point.name)
            return
        self._require_path(mount_point, "mount_point")
        self._require_online()
        self._run_checked(build_mount_by_name(paths.escape(mount_point), self.capabilities.toolset()))
        self._forget(mount_point)

    def mount_device(
        self,
        directory: str,
        device: str,
        filesystem: str,
        read_only: bool = False,
        options: str = "",
    ) -> None:
        """Mount a block device on a directory.

        Raises:
            InvalidArgumentError: If directory or device is empty.
            NotReadyError: If the target is offline.
            RemoteCommandFailedError: If the target reported an error.
        """
        self._require_path(directory, "directory")
        self._require_path(device, "device")
        mount_point = MountPoint(
            block=device,
            name=directory,
            filesystem=filesystem,
            read_only=read_only,
        )
        self.mount(mount_point, options)

    def unmount(self, mount_point: MountPoint | str, options: str = "") -> None:
        """Unmount a mount point or mount directory.

        Raises:
            InvalidArgumentError: If the mount directory is empty.
            NotReadyError: If the target is offline.
            RemoteCommandFailedError: If the target reported an error.
        """
        name = mount_point.name if isinstance(mount_point, MountPoint) else mount_point
        self._require_path(name, "mount_point")
        self._require_online()
        self._run_checked(build_unmount(paths.escape(name), options, self.capabilities.toolset()))
        self._forget(name)

    def is_mount_point_read_only(self, mount: str) -> bool:
        """Check whether a mount point is mounted read-only.

        Args:
            mount: Mount directory, e.g. ``/system``.

        Raises:
            NotReadyError: If the target is offline.
            MountPointNotFoundError: If the mount point is unknown.
        """
        self._require_online()
        mount_points = self.mounts.mount_points()
        if mount not in mount_points:
            raise MountPointNotFoundError(f"Invalid mount point: {mount}")
        return mount_points[mount].read_only

    def device_blocks(self) -> list[str]:
        """List the names of block devices on the target.

        Raises:
            NotReadyError: If the target is offline.
            NotFoundError: If the block device directory does not exist.
        """
        self._require_online()
        blocks = self.tree.find_entry(self.block_device_dir)
        children = self.tree.list_children(blocks, force_refresh=True)
        return [child.name for child in children if child.is_block_device]
