"""Permission sets rendered as chmod arguments."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntFlag

from shellfs.exceptions import InvalidArgumentError

_OCTAL = re.compile(r"^[0-7]{3}$")
_SYMBOLIC = re.compile(r"^[-r][-w][-xsStT][-r][-w][-xsStT][-r][-w][-xtT]$")


class Permission(IntFlag):
    """Access bits for one class of user."""

    NONE = 0
    EXECUTE = 1
    WRITE = 2
    READ = 4

    @classmethod
    def from_symbolic(cls, triplet: str) -> Permission:
        """Parse an ``rwx`` triplet. Setuid/sticky markers imply execute only
        when lowercase, as in ``ls -l`` output."""
        value = cls.NONE
        if triplet[0] == "r":
            value |= cls.READ
        if triplet[1] == "w":
            value |= cls.WRITE
        if triplet[2] in "xst":
            value |= cls.EXECUTE
        return value


@dataclass(frozen=True)
class FilePermissions:
    """Owner, group and other permissions of a remote entry."""

    owner: Permission = Permission.NONE
    group: Permission = Permission.NONE
    other: Permission = Permission.NONE

    @classmethod
    def from_octal(cls, mode: str) -> FilePermissions:
        """Create from a three digit octal string such as ``"755"``.

        Raises:
            InvalidArgumentError: If mode is not three octal digits.
        """
        if not _OCTAL.match(mode):
            raise InvalidArgumentError(f"Invalid octal permissions: {mode!r}")
        owner, group, other = (Permission(int(digit)) for digit in mode)
        return cls(owner=owner, group=group, other=other)

    @classmethod
    def from_symbolic(cls, mode: str) -> FilePermissions:
        """Create from an ``ls -l`` style string.

        Accepts nine characters (``rwxr-xr-x``) or ten with a leading type
        character (``drwxr-xr-x``).

        Raises:
            InvalidArgumentError: If mode is not a valid symbolic string.
        """
        if len(mode) == 10:
            mode = mode[1:]
        if not _SYMBOLIC.match(mode):
            raise InvalidArgumentError(f"Invalid symbolic permissions: {mode!r}")
        return cls(
            owner=Permission.from_symbolic(mode[0:3]),
            group=Permission.from_symbolic(mode[3:6]),
            other=Permission.from_symbolic(mode[6:9]),
        )

    def to_chmod(self) -> str:
        """Render as the octal chmod argument, e.g. ``"755"``."""
        return f"{int(self.owner)}{int(self.group)}{int(self.other)}"
