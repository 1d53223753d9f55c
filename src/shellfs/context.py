"""Application context for dependency injection.

This module separates object creation from object use, so CLI commands can
be exercised with test doubles instead of a real device.
"""

from __future__ import annotations

from dataclasses import dataclass

from shellfs.capabilities import CapabilityResolver
from shellfs.config import TargetConfig
from shellfs.filesystem import RemoteFileSystem
from shellfs.protocols import EntryTree, MountTable, ShellTransport


@dataclass
class AppContext:
    """Container for the services used by CLI commands.

    Collaborators are typed with Protocols, not concrete classes.
    """

    config: TargetConfig
    transport: ShellTransport
    tree: EntryTree
    mounts: MountTable
    filesystem: RemoteFileSystem


def create_context(config: TargetConfig | None = None) -> AppContext:
    """Factory for application dependencies.

    Creates all services with proper wiring. Use this in production code.
    For tests, construct AppContext directly with test doubles.

    Args:
        config: Target configuration. Defaults to ~/.shellfs/config.yaml.

    Returns:
        Configured AppContext.
    """
    from shellfs.listing import ShellListingService
    from shellfs.mounts import ShellMountTable
    from shellfs.transport import AdbTransport

    config = config or TargetConfig.load_default()
    transport = AdbTransport(
        serial=config.serial,
        adb_path=config.adb_path,
        timeout=config.timeout_seconds,
    )
    tree = ShellListingService(transport)
    mounts = ShellMountTable(transport)
    capabilities = CapabilityResolver(transport, tool_name=config.enhanced_tool)
    filesystem = RemoteFileSystem.from_transport(
        transport=transport,
        tree=tree,
        mounts=mounts,
        capabilities=capabilities,
        block_device_dir=config.block_device_dir,
    )

    return AppContext(
        config=config,
        transport=transport,
        tree=tree,
        mounts=mounts,
        filesystem=filesystem,
    )
