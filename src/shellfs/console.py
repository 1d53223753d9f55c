"""Console output and logging setup for the shellfs CLI."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from shellfs.config import TargetConfig
    from shellfs.types import MountPoint


def setup_logging(verbose: bool = False) -> None:
    """Route log records through rich.

    Args:
        verbose: Log every command line at DEBUG level instead of warnings only.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=verbose,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)


class Output:
    """Non-interactive CLI output."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def show_success(self, message: str) -> None:
        """Display success message.

        Args:
            message: Message to display.
        """
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def show_error(self, message: str) -> None:
        """Display error message.

        Args:
            message: Message to display.
        """
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def show_warning(self, message: str) -> None:
        """Display warning message.

        Args:
            message: Message to display.
        """
        self.console.print(f"[yellow]![/yellow] {escape(message)}")

    def show_info(self, message: str) -> None:
        """Display informational message.

        Args:
            message: Message to display.
        """
        self.console.print(f"[blue]i[/blue] {escape(message)}")

    def show_blocks(self, blocks: list[str]) -> None:
        """Display block device names.

        Args:
            blocks: Names of block devices.
        """
        if not blocks:
            self.console.print("[yellow]No block devices found[/yellow]")
            return

        table = Table(title="Block Devices")
        table.add_column("Name", style="cyan")
        for block in blocks:
            table.add_row(block)
        self.console.print(table)

    def show_mount_points(self, mount_points: list[MountPoint]) -> None:
        """Display mount points.

        Args:
            mount_points: Mount points to list.
        """
        if not mount_points:
            self.console.print("[yellow]No mount points found[/yellow]")
            return

        table = Table(title="Mount Points")
        table.add_column("Directory", style="cyan")
        table.add_column("Device")
        table.add_column("Type")
        table.add_column("Mode")
        for mount_point in mount_points:
            table.add_row(
                mount_point.name,
                mount_point.block,
                mount_point.filesystem,
                "ro" if mount_point.read_only else "rw",
            )
        self.console.print(table)

    def show_config(self, config: TargetConfig) -> None:
        """Display the active configuration."""
        self.console.print("\n[bold]Configuration[/bold]")
        self.console.print(f"  Serial: {config.serial or '(default device)'}")
        self.console.print(f"  adb: {config.adb_path}")
        self.console.print(f"  Enhanced tool: {config.enhanced_tool}")
        self.console.print(f"  Block device directory: {config.block_device_dir}")
        self.console.print(f"  Timeout: {config.timeout_seconds}s")
