"""Shared test fixtures."""

from __future__ import annotations

import shlex
from unittest.mock import MagicMock

import pytest

from shellfs import paths
from shellfs.capabilities import CapabilityResolver
from shellfs.exceptions import NotFoundError
from shellfs.filesystem import RemoteFileSystem
from shellfs.types import CommandOutcome, EntryKind, MountPoint, RemoteEntry

BUSYBOX_BANNER = "BusyBox v1.36.1 (2023-05-01) multi-call binary."


class FakeDevice:
    """In-memory device acting as shell transport, entry tree and mount table.

    Commands are interpreted against a dictionary of paths so tests can
    assert both the command lines issued and the resulting tree.
    """

    def __init__(self, enhanced: bool = False, root_access: bool = False) -> None:
        self.enhanced = enhanced
        self.root_access = root_access
        self.online = True
        self.nodes: dict[str, EntryKind] = {paths.ROOT: EntryKind.DIRECTORY}
        self.modes: dict[str, str] = {}
        self.mount_table: dict[str, MountPoint] = {}
        self.fail_on: dict[str, str] = {}
        self.commands: list[str] = []
        self.root_commands: list[str] = []
        self.listings: list[tuple[str, bool]] = []
        self.placeholders: dict[str, RemoteEntry] = {}
        self.invalidated: list[str | None] = []

    # ------------------------------------------------------------------
    # Setup helpers
    # ------------------------------------------------------------------

    def add_dir(self, path: str) -> None:
        current = paths.ROOT
        for segment in paths.segments(path):
            current = paths.combine(current, segment)
            self.nodes.setdefault(current, EntryKind.DIRECTORY)

    def add_file(self, path: str, kind: EntryKind = EntryKind.FILE) -> None:
        self.add_dir(paths.dirname(path))
        self.nodes[path] = kind

    @property
    def mkdir_commands(self) -> list[str]:
        return [c for c in self.commands if c.startswith(("mkdir", "busybox mkdir"))]

    # ------------------------------------------------------------------
    # ShellTransport
    # ------------------------------------------------------------------

    @property
    def is_online(self) -> bool:
        return self.online

    def execute(self, command: str) -> CommandOutcome:
        self.commands.append(command)
        if command in self.fail_on:
            return CommandOutcome(text=self.fail_on[command])
        return CommandOutcome(text=self._interpret(shlex.split(command)))

    def execute_as_root(self, command: str) -> CommandOutcome:
        self.root_commands.append(command)
        return self.execute(command)

    def _interpret(self, args: list[str]) -> str:
        if args == ["busybox"]:
            return BUSYBOX_BANNER if self.enhanced else "/system/bin/sh: busybox: not found"
        if args == ["su", "-c", "id"]:
            return "uid=0(root) gid=0(root)" if self.root_access else "/system/bin/sh: su: not found"
        if args[0] == "busybox":
            if not self.enhanced:
                return "/system/bin/sh: busybox: not found"
            args = args[1:]

        handler = getattr(self, f"_cmd_{args[0]}", None)
        if args[0] == ">":
            handler = self._cmd_touch
        if handler is None:
            return f"/system/bin/sh: {args[0]}: not found"
        return handler(args[1:])

    def _parent_missing(self, path: str) -> bool:
        return self.nodes.get(paths.dirname(path)) is not EntryKind.DIRECTORY

    def _cmd_touch(self, args: list[str]) -> str:
        path = args[0]
        if self._parent_missing(path):
            return f"touch: '{path}': No such file or directory"
        self.nodes.setdefault(path, EntryKind.FILE)
        return ""

    def _cmd_mkdir(self, args: list[str]) -> str:
        if args[0] == "-p":
            current = paths.ROOT
            for segment in paths.segments(args[1]):
                current = paths.combine(current, segment)
                if self.nodes.setdefault(current, EntryKind.DIRECTORY) is not EntryKind.DIRECTORY:
                    return f"mkdir: '{current}': Not a directory"
            return ""
        path = args[0]
        if path in self.nodes:
            return f"mkdir: '{path}': File exists"
        if self._parent_missing(path):
            return f"mkdir: '{path}': No such file or directory"
        self.nodes[path] = EntryKind.DIRECTORY
        return ""

    def _cmd_cat(self, args: list[str]) -> str:
        source, _, destination = args
        if source not in self.nodes:
            return f"{source}: No such file or directory"
        if self._parent_missing(destination):
            return f"/system/bin/sh: can't create {destination}: No such file or directory"
        self.nodes[destination] = EntryKind.FILE
        return ""

    def _cmd_mv(self, args: list[str]) -> str:
        source, destination = args
        if source not in self.nodes:
            return f"mv: '{source}': No such file or directory"
        for path in sorted(self.nodes):
            if path == source or path.startswith(source + "/"):
                self.nodes[destination + path[len(source):]] = self.nodes.pop(path)
        return ""

    def _cmd_chmod(self, args: list[str]) -> str:
        mode, path = args
        if path not in self.nodes:
            return f"chmod: '{path}': No such file or directory"
        self.modes[path] = mode
        return ""

    def _cmd_rm(self, args: list[str]) -> str:
        path = args[-1]
        recursive = "-r" in args
        if self.nodes.get(path) is EntryKind.DIRECTORY and not recursive:
            return f"rm: '{path}': Is a directory"
        for known in list(self.nodes):
            if known == path or known.startswith(path + "/"):
                del self.nodes[known]
        return ""

    def _cmd_mount(self, args: list[str]) -> str:
        return ""

    def _cmd_umount(self, args: list[str]) -> str:
        return ""

    # ------------------------------------------------------------------
    # EntryTree
    # ------------------------------------------------------------------

    def _entry(self, path: str) -> RemoteEntry:
        return RemoteEntry(
            full_path=path,
            name=paths.basename(path),
            kind=self.nodes[path],
        )

    @property
    def root(self) -> RemoteEntry:
        return self._entry(paths.ROOT)

    def find_entry(self, path: str) -> RemoteEntry:
        path = paths.normalize(path)
        if path not in self.nodes:
            raise NotFoundError(f"Path not found: {path}")
        return self._entry(path)

    def list_children(self, parent: RemoteEntry, force_refresh: bool = False) -> list[RemoteEntry]:
        self.listings.append((parent.full_path, force_refresh))
        if self.nodes.get(parent.full_path) is not EntryKind.DIRECTORY:
            raise NotFoundError(f"Directory not found: {parent.full_path}")
        return [
            self._entry(path)
            for path in sorted(self.nodes)
            if path != paths.ROOT and paths.dirname(path) == parent.full_path
        ]

    def register_placeholder(self, path: str) -> RemoteEntry:
        path = paths.normalize(path)
        if path in self.nodes:
            return self._entry(path)
        return self.placeholders.setdefault(
            path,
            RemoteEntry(full_path=path, name=paths.basename(path), kind=EntryKind.DIRECTORY),
        )

    def invalidate(self, path: str | None = None) -> None:
        self.invalidated.append(path)

    # ------------------------------------------------------------------
    # MountTable
    # ------------------------------------------------------------------

    def mount_points(self) -> dict[str, MountPoint]:
        return dict(self.mount_table)


@pytest.fixture
def device() -> FakeDevice:
    """Device without the enhanced tool or root access."""
    return FakeDevice()


@pytest.fixture
def enhanced_device() -> FakeDevice:
    """Device with busybox installed."""
    return FakeDevice(enhanced=True)


def make_filesystem(device: FakeDevice) -> RemoteFileSystem:
    """Build a RemoteFileSystem whose collaborators are all the fake device."""
    return RemoteFileSystem.from_transport(
        transport=device,
        tree=device,
        mounts=device,
        capabilities=CapabilityResolver(device),
    )


@pytest.fixture
def filesystem(device: FakeDevice) -> RemoteFileSystem:
    """Filesystem over a plain device."""
    return make_filesystem(device)


@pytest.fixture
def enhanced_filesystem(enhanced_device: FakeDevice) -> RemoteFileSystem:
    """Filesystem over a device with busybox."""
    return make_filesystem(enhanced_device)


@pytest.fixture
def mock_transport() -> MagicMock:
    """Create a mock ShellTransport that succeeds silently."""
    transport = MagicMock()
    transport.is_online = True
    transport.execute.return_value = CommandOutcome()
    transport.execute_as_root.return_value = CommandOutcome()
    return transport


@pytest.fixture
def device_factory():
    """Factory for (device, filesystem) pairs with custom capabilities."""

    def _factory(enhanced: bool = False, root_access: bool = False):
        device = FakeDevice(enhanced=enhanced, root_access=root_access)
        return device, make_filesystem(device)

    return _factory
