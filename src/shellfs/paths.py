"""POSIX path helpers for building remote command lines."""

from __future__ import annotations

import posixpath
import re
import shlex

SEPARATOR = "/"
ROOT = "/"

_DUPLICATE_SEPARATORS = re.compile(r"/{2,}")


def normalize(path: str) -> str:
    """Normalize a path to the target's separator convention.

    Backslashes become ``/``, repeated separators collapse and trailing
    separators are dropped (except for the root itself).

    Args:
        path: Path as given by the caller.

    Returns:
        Normalized path. Relative paths stay relative.
    """
    normalized = _DUPLICATE_SEPARATORS.sub(SEPARATOR, path.replace("\\", SEPARATOR))
    if len(normalized) > 1:
        normalized = normalized.rstrip(SEPARATOR) or ROOT
    return normalized


def segments(path: str) -> list[str]:
    """Split a path into its non-empty segments, in order."""
    return [segment for segment in normalize(path).split(SEPARATOR) if segment]


def combine(parent: str, segment: str) -> str:
    """Join a parent directory and a single segment."""
    parent = normalize(parent) if parent else ROOT
    segment = segment.strip(SEPARATOR)
    if not segment:
        return parent
    if parent.endswith(SEPARATOR):
        return parent + segment
    return parent + SEPARATOR + segment


def basename(path: str) -> str:
    """Return the last segment of a path (empty for the root)."""
    return posixpath.basename(normalize(path))


def dirname(path: str) -> str:
    """Return the parent directory of a path (the root for top-level paths)."""
    return posixpath.dirname(normalize(path)) or ROOT


def escape(path: str) -> str:
    """Quote a path for safe inclusion in a POSIX shell command line."""
    return shlex.quote(path)
