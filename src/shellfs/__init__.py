"""POSIX-like filesystem operations for targets that only expose a shell."""

__version__ = "0.1.0"

# Export protocol interfaces for type hints and dependency injection
from shellfs.protocols import (
    EntryTree,
    MountTable,
    ShellTransport,
)

__all__ = [
    "__version__",
    "EntryTree",
    "MountTable",
    "ShellTransport",
]
