"""Shell transport over the Android Debug Bridge command line tool."""

from __future__ import annotations

import logging
import shlex
import subprocess

from shellfs.exceptions import NotReadyError
from shellfs.types import CommandOutcome

logger = logging.getLogger(__name__)

DEFAULT_ADB = "adb"
DEFAULT_TIMEOUT = 30.0


class AdbTransport:
    """Runs command lines through ``adb shell``.

    Standard output and standard error are merged into the captured text,
    which is all the filesystem layer looks at.

    Satisfies the ShellTransport protocol structurally.
    """

    def __init__(
        self,
        serial: str | None = None,
        adb_path: str = DEFAULT_ADB,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the transport.

        Args:
            serial: Device serial passed as ``-s``. None uses the only device.
            adb_path: Path to the adb executable.
            timeout: Seconds to wait for each command.
        """
        self.serial = serial
        self.adb_path = adb_path
        self.timeout = timeout

    def _base_args(self) -> list[str]:
        args = [self.adb_path]
        if self.serial:
            args += ["-s", self.serial]
        return args

    def _run(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        try:
            return subprocess.run(
                args,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise NotReadyError(f"adb executable not found: {self.adb_path}") from e
        except subprocess.TimeoutExpired as e:
            raise NotReadyError(f"Command timed out after {self.timeout}s: {' '.join(args)}") from e

    @property
    def is_online(self) -> bool:
        """Whether adb reports the device in the ``device`` state."""
        try:
            result = self._run([*self._base_args(), "get-state"])
        except NotReadyError as e:
            logger.debug("Device state unavailable: %s", e)
            return False
        return result.stdout.strip() == "device"

    def execute(self, command: str) -> CommandOutcome:
        """Run a command line in the device shell.

        Raises:
            NotReadyError: If adb is missing, the command times out or adb
                itself fails to reach the device.
        """
        logger.debug("adb shell: %s", command)
        result = self._run([*self._base_args(), "shell", command])
        text = result.stdout.strip()
        if result.returncode != 0 and text.startswith(("error:", "adb: error")):
            raise NotReadyError(text)
        return CommandOutcome(text=text, exit_code=result.returncode)

    def execute_as_root(self, command: str) -> CommandOutcome:
        """Run a command line through ``su -c``."""
        return self.execute(f"su -c {shlex.quote(command)}")
