"""CLI commands using Typer."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

if TYPE_CHECKING:
    from shellfs.context import AppContext

import typer
from pydantic import ValidationError

from shellfs import __version__
from shellfs.config import CONFIG_FILE, TargetConfig
from shellfs.console import Output, setup_logging
from shellfs.context import create_context
from shellfs.exceptions import InvalidArgumentError, ShellFsError
from shellfs.permissions import FilePermissions

app = typer.Typer(
    name="shellfs",
    help="Filesystem operations on devices reachable only through a shell",
    no_args_is_help=True,
)

config_app = typer.Typer(help="Configuration commands")
app.add_typer(config_app, name="config")

output = Output()

# Global options captured by the callback
_state: dict[str, object] = {"serial": None, "config_path": CONFIG_FILE}


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        output.console.print(f"shellfs v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    serial: Annotated[
        str | None, typer.Option("--serial", "-s", help="Device serial (overrides config)")
    ] = None,
    config_path: Annotated[
        Path, typer.Option("--config", "-c", help="Path to the configuration file")
    ] = CONFIG_FILE,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Log every remote command")
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Filesystem operations on devices reachable only through a shell."""
    setup_logging(verbose)
    _state["serial"] = serial
    _state["config_path"] = config_path


def _load_config() -> TargetConfig:
    """Load configuration and apply command line overrides.

    Raises:
        typer.Exit: If the configuration file is invalid.
    """
    try:
        config = TargetConfig.from_file(Path(_state["config_path"]))
    except ValidationError as e:
        output.show_error(f"Invalid configuration: {e}")
        raise typer.Exit(1) from e
    if _state["serial"]:
        config = config.model_copy(update={"serial": _state["serial"]})
    return config


def _get_context(context: AppContext | None) -> AppContext:
    return context or create_context(_load_config())


def _fail(error: ShellFsError) -> typer.Exit:
    """Report an error and build the exit to raise."""
    output.show_error(str(error))
    return typer.Exit(1)


# ============================================================================
# File Commands
# ============================================================================


@app.command()
def touch(
    path: Annotated[str, typer.Argument(help="Remote file path")],
    _context=None,
) -> None:
    """Create an empty file."""
    ctx = _get_context(_context)
    try:
        entry = ctx.filesystem.create(path)
    except ShellFsError as e:
        raise _fail(e) from e
    output.show_success(f"Created {entry.full_path}")


@app.command()
def exists(
    path: Annotated[str, typer.Argument(help="Remote path")],
    _context=None,
) -> None:
    """Check whether a path exists (exit code 1 if it does not)."""
    ctx = _get_context(_context)
    try:
        found = ctx.filesystem.exists(path)
    except ShellFsError as e:
        raise _fail(e) from e
    if not found:
        output.show_warning(f"{path} does not exist")
        raise typer.Exit(1)
    output.show_success(f"{path} exists")


@app.command()
def mkdir(
    path: Annotated[str, typer.Argument(help="Remote directory path")],
    _context=None,
) -> None:
    """Create a directory and any missing parents."""
    ctx = _get_context(_context)
    try:
        entry = ctx.filesystem.make_directory(path)
    except ShellFsError as e:
        raise _fail(e) from e
    output.show_success(f"Created directory {entry.full_path}")


@app.command()
def cp(
    source: Annotated[str, typer.Argument(help="Remote source file")],
    destination: Annotated[str, typer.Argument(help="Remote destination path")],
    _context=None,
) -> None:
    """Copy a file's content on the device."""
    ctx = _get_context(_context)
    try:
        ctx.filesystem.copy(source, destination)
    except ShellFsError as e:
        raise _fail(e) from e
    output.show_success(f"Copied {source} to {destination}")


@app.command()
def mv(
    source: Annotated[str, typer.Argument(help="Remote source path")],
    destination: Annotated[str, typer.Argument(help="Remote destination path")],
    _context=None,
) -> None:
    """Move or rename a path on the device."""
    ctx = _get_context(_context)
    try:
        ctx.filesystem.move(source, destination)
    except ShellFsError as e:
        raise _fail(e) from e
    output.show_success(f"Moved {source} to {destination}")


@app.command()
def chmod(
    mode: Annotated[str, typer.Argument(help="Mode, e.g. 755 or rwxr-xr-x")],
    path: Annotated[str, typer.Argument(help="Remote path")],
    _context=None,
) -> None:
    """Change permissions of a path.

    Octal and symbolic modes are validated and checked for errors; anything
    else is passed to chmod verbatim.
    """
    ctx = _get_context(_context)
    permissions: str | FilePermissions = mode
    try:
        permissions = FilePermissions.from_octal(mode)
    except InvalidArgumentError:
        try:
            permissions = FilePermissions.from_symbolic(mode)
        except InvalidArgumentError:
            permissions = mode

    try:
        ctx.filesystem.chmod(path, permissions)
    except ShellFsError as e:
        raise _fail(e) from e
    output.show_success(f"Changed mode of {path}")


@app.command()
def rm(
    path: Annotated[str, typer.Argument(help="Remote path")],
    _context=None,
) -> None:
    """Delete a file or directory tree (no-op if missing)."""
    ctx = _get_context(_context)
    try:
        ctx.filesystem.delete(path)
    except ShellFsError as e:
        raise _fail(e) from e
    output.show_success(f"Deleted {path}")


# ============================================================================
# Mount Commands
# ============================================================================


@app.command()
def mount(
    directory: Annotated[str, typer.Argument(help="Mount directory")],
    device: Annotated[
        str | None, typer.Argument(help="Block device (omit to mount from fstab)")
    ] = None,
    filesystem_type: Annotated[
        str, typer.Option("--type", "-t", help="Filesystem type")
    ] = "",
    read_only: Annotated[
        bool, typer.Option("--read-only/--read-write", help="Mount mode")
    ] = False,
    options: Annotated[str, typer.Option("--options", "-o", help="Mount options")] = "",
    _context=None,
) -> None:
    """Mount a block device, or a directory known to the device's fstab."""
    ctx = _get_context(_context)
    try:
        if device is None:
            ctx.filesystem.mount(directory)
        else:
            ctx.filesystem.mount_device(directory, device, filesystem_type, read_only, options)
    except ShellFsError as e:
        raise _fail(e) from e
    output.show_success(f"Mounted {directory}")


@app.command()
def umount(
    directory: Annotated[str, typer.Argument(help="Mount directory")],
    options: Annotated[str, typer.Option("--options", "-o", help="Unmount options")] = "",
    _context=None,
) -> None:
    """Unmount a mount directory."""
    ctx = _get_context(_context)
    try:
        ctx.filesystem.unmount(directory, options)
    except ShellFsError as e:
        raise _fail(e) from e
    output.show_success(f"Unmounted {directory}")


@app.command()
def readonly(
    directory: Annotated[str, typer.Argument(help="Mount directory")],
    _context=None,
) -> None:
    """Report whether a mount point is read-only."""
    ctx = _get_context(_context)
    try:
        read_only = ctx.filesystem.is_mount_point_read_only(directory)
    except ShellFsError as e:
        raise _fail(e) from e
    output.show_info(f"{directory} is {'read-only' if read_only else 'read-write'}")


@app.command()
def mounts(
    _context=None,
) -> None:
    """List the device's mount points."""
    ctx = _get_context(_context)
    try:
        mount_points = list(ctx.mounts.mount_points().values())
    except ShellFsError as e:
        raise _fail(e) from e
    output.show_mount_points(mount_points)


@app.command()
def blocks(
    _context=None,
) -> None:
    """List block devices."""
    ctx = _get_context(_context)
    try:
        names = ctx.filesystem.device_blocks()
    except ShellFsError as e:
        raise _fail(e) from e
    output.show_blocks(names)


# ============================================================================
# Config Commands
# ============================================================================

_CONFIG_KEYS = {
    "serial": "serial",
    "adb-path": "adb_path",
    "enhanced-tool": "enhanced_tool",
    "block-device-dir": "block_device_dir",
    "timeout": "timeout_seconds",
}


@config_app.command("show")
def config_show() -> None:
    """Show current configuration."""
    output.show_config(_load_config())


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Configuration key")],
    value: Annotated[str, typer.Argument(help="Configuration value")],
) -> None:
    """Set a configuration value."""
    if key not in _CONFIG_KEYS:
        output.show_error(f"Unknown configuration key: {key}. Supported: {list(_CONFIG_KEYS)}")
        raise typer.Exit(1)

    config_path = Path(_state["config_path"])
    config = TargetConfig.from_file(config_path)
    data = config.model_dump()
    data[_CONFIG_KEYS[key]] = value
    try:
        updated = TargetConfig.model_validate(data)
    except ValidationError as e:
        output.show_error(f"Invalid value for {key}: {value}")
        raise typer.Exit(1) from e
    updated.save(config_path)
    output.show_success(f"Set {key} to {value}")


if __name__ == "__main__":
    app()
