"""Exception hierarchy for shell-backed filesystem operations."""

from __future__ import annotations


class ShellFsError(Exception):
    """Base exception for all shellfs errors."""


class InvalidArgumentError(ShellFsError, ValueError):
    """Raised when a path, device or mount reference is empty or malformed."""


class NotReadyError(ShellFsError, OSError):
    """Raised when the target cannot be reached."""


class NotFoundError(ShellFsError, FileNotFoundError):
    """Raised when a path does not resolve to a remote entry."""


class MountPointNotFoundError(NotFoundError):
    """Raised when a mount label is not present in the mount table."""


class AlreadyExistsError(ShellFsError, FileExistsError):
    """Raised when a creation target is already present."""


class RemoteCommandFailedError(ShellFsError, OSError):
    """Raised when a remote command produced diagnostic text.

    The message is the captured text, verbatim.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message
