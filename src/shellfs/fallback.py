"""Segment-walk emulation of recursive directory creation.

Used when the target has no ``mkdir -p``. The path is created one segment at
a time, starting from the root, and each segment is looked up in a fresh
listing so that a directory created for segment N is visible to segment N+1.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from shellfs import paths
from shellfs.commands import build_make_directory_segment
from shellfs.exceptions import NotFoundError
from shellfs.outcome import classify
from shellfs.protocols import EntryTree, ShellTransport
from shellfs.types import RemoteEntry

logger = logging.getLogger(__name__)


@dataclass
class FallbackResult:
    """Result of a segment walk.

    Attributes:
        entry: Entry reached for the last segment.
        created: Paths a ``mkdir`` was issued for, in order.
        failures: Diagnostic text of segments whose ``mkdir`` failed.
    """

    entry: RemoteEntry
    created: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures


def _find_child(children: list[RemoteEntry], name: str) -> RemoteEntry | None:
    for child in children:
        if child.name == name:
            return child
    return None


def make_directory_fallback(
    path: str,
    tree: EntryTree,
    transport: ShellTransport,
) -> FallbackResult:
    """Create a directory and its missing parents one segment at a time.

    Existing segments are walked through without issuing any command, so
    running this twice on the same path is harmless. A failing segment is
    recorded and the walk continues; callers decide whether the end state
    is acceptable.

    Args:
        path: Absolute remote path of the directory.
        tree: Entry tree used for lookups and placeholders.
        transport: Transport that runs the per-segment ``mkdir``.

    Returns:
        FallbackResult with the leaf entry and any absorbed failures.

    Raises:
        NotReadyError: If the target cannot be reached.
    """
    current = tree.root
    result = FallbackResult(entry=current)

    for segment in paths.segments(path):
        try:
            children = tree.list_children(current, force_refresh=True)
        except NotFoundError:
            # The previous segment failed to materialize; keep going so
            # every failure is recorded.
            logger.debug("Cannot list '%s'", current.full_path)
            children = []
        match = _find_child(children, segment)
        if match is not None:
            current = match
            continue

        current = tree.register_placeholder(paths.combine(current.full_path, segment))
        command = build_make_directory_segment(current.escaped_path)
        logger.debug("Running: %s", command)
        outcome = classify(transport.execute(command))
        result.created.append(current.full_path)
        if not outcome.success:
            logger.warning("Could not create '%s': %s", current.full_path, outcome.message)
            result.failures.append(outcome.message)

    result.entry = current
    return result
