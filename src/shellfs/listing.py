"""Remote directory tree built from ``ls -l`` output."""

from __future__ import annotations

import logging
import re

from shellfs import paths
from shellfs.exceptions import NotFoundError
from shellfs.protocols import ShellTransport
from shellfs.types import EntryKind, RemoteEntry

logger = logging.getLogger(__name__)

# toolbox:  drwxr-xr-x root     root              2012-01-01 00:00 acct
# busybox:  drwxr-xr-x    2 root     root          4096 Jan  1 00:00 acct
# toybox:   drwxr-xr-x  2 root root 4096 2012-01-01 00:00 acct
_LISTING_LINE = re.compile(
    r"^(?P<mode>[-dlbcps][-rwxsStT]{9})[+.@]?\s+"
    r".*?"
    r"(?P<date>\d{4}-\d{2}-\d{2}\s+\d{1,2}:\d{2}|[A-Z][a-z]{2}\s+\d{1,2}\s+(?:\d{1,2}:\d{2}|\d{4}))\s"
    r"(?P<name>.+)$"
)
_NOT_FOUND_MARKERS = ("No such file or directory", "not found")
_NOT_A_DIRECTORY = "Not a directory"

_KIND_BY_TYPE_CHAR = {
    "-": EntryKind.FILE,
    "d": EntryKind.DIRECTORY,
    "l": EntryKind.LINK,
    "b": EntryKind.BLOCK,
    "c": EntryKind.CHARACTER,
    "s": EntryKind.SOCKET,
    "p": EntryKind.FIFO,
}


def parse_listing_line(line: str) -> tuple[str, EntryKind] | None:
    """Parse one line of ``ls -l`` output.

    Args:
        line: A single output line.

    Returns:
        Tuple of (name, kind), or None for headers, ``.``/``..`` and
        unparseable lines. Links are reported with their own name; links
        whose target ends with ``/`` are treated as directory links.
    """
    match = _LISTING_LINE.match(line.rstrip("\r"))
    if not match:
        return None

    kind = _KIND_BY_TYPE_CHAR.get(match.group("mode")[0], EntryKind.OTHER)
    name = match.group("name")
    if kind is EntryKind.LINK and " -> " in name:
        name, target = name.split(" -> ", 1)
        if target.endswith(paths.SEPARATOR):
            kind = EntryKind.DIRECTORY_LINK
    if name in (".", ".."):
        return None
    return name, kind


class ShellListingService:
    """Entry tree backed by ``ls -l -a`` on the target.

    Listings are cached per directory until refreshed or invalidated.
    Placeholders are kept apart from listings so they never make a path
    look like it exists.
    """

    def __init__(self, transport: ShellTransport) -> None:
        """Initialize the listing service.

        Args:
            transport: Transport used to run ``ls``.
        """
        self.transport = transport
        self._root = RemoteEntry(full_path=paths.ROOT, name="", kind=EntryKind.DIRECTORY)
        self._children: dict[str, list[RemoteEntry]] = {}
        self._placeholders: dict[str, RemoteEntry] = {}

    @property
    def root(self) -> RemoteEntry:
        return self._root

    def list_children(self, parent: RemoteEntry, force_refresh: bool = False) -> list[RemoteEntry]:
        """List a directory, from cache unless ``force_refresh`` is set.

        Raises:
            NotFoundError: If the directory does not exist.
        """
        if not force_refresh and parent.full_path in self._children:
            return list(self._children[parent.full_path])

        directory = parent.full_path.rstrip(paths.SEPARATOR) + paths.SEPARATOR
        outcome = self.transport.execute(f"ls -l -a {paths.escape(directory)}")
        children: list[RemoteEntry] = []
        unparsed: list[str] = []
        for line in outcome.text.splitlines():
            parsed = parse_listing_line(line)
            if parsed is None:
                if line.strip() and not line.startswith("total"):
                    unparsed.append(line.strip())
                continue
            name, kind = parsed
            full_path = paths.combine(parent.full_path, name)
            children.append(RemoteEntry(full_path=full_path, name=name, kind=kind, parent=parent))
            self._placeholders.pop(full_path, None)

        if not children and any(
            marker in line for line in unparsed for marker in (*_NOT_FOUND_MARKERS, _NOT_A_DIRECTORY)
        ):
            raise NotFoundError(f"Directory not found: {parent.full_path}")

        self._children[parent.full_path] = children
        return list(children)

    def find_entry(self, path: str) -> RemoteEntry:
        """Resolve a path by walking listings from the root.

        Raises:
            NotFoundError: If any segment does not exist.
        """
        current = self._root
        for segment in paths.segments(path):
            children = self.list_children(current)
            match = next((child for child in children if child.name == segment), None)
            if match is None:
                # A cached listing may predate the entry; look once more.
                children = self.list_children(current, force_refresh=True)
                match = next((child for child in children if child.name == segment), None)
            if match is None:
                raise NotFoundError(f"Path not found: {path}")
            current = match
        return current

    def register_placeholder(self, path: str) -> RemoteEntry:
        """Get the known entry for a path or register a placeholder for it."""
        path = paths.normalize(path)
        if path == paths.ROOT:
            return self._root
        parent_path = paths.dirname(path)
        for child in self._children.get(parent_path, []):
            if child.full_path == path:
                return child
        if path not in self._placeholders:
            parent = self._lookup_cached(parent_path)
            self._placeholders[path] = RemoteEntry(
                full_path=path,
                name=paths.basename(path),
                kind=EntryKind.DIRECTORY,
                parent=parent,
            )
            logger.debug("Registered placeholder for '%s'", path)
        return self._placeholders[path]

    def invalidate(self, path: str | None = None) -> None:
        """Drop cached listings for a directory and its subtree, or all of them."""
        if path is None:
            self._children.clear()
            return
        path = paths.normalize(path)
        if path == paths.ROOT:
            self._children.clear()
            return
        prefix = path + paths.SEPARATOR
        for cached in [key for key in self._children if key == path or key.startswith(prefix)]:
            del self._children[cached]

    def _lookup_cached(self, path: str) -> RemoteEntry | None:
        if path == paths.ROOT:
            return self._root
        for child in self._children.get(paths.dirname(path), []):
            if child.full_path == path:
                return child
        return self._placeholders.get(path)
