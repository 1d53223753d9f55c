"""Target configuration for shellfs."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

from shellfs.commands import DEFAULT_TOOL
from shellfs.filesystem import BLOCK_DEVICE_DIR
from shellfs.transport import DEFAULT_ADB, DEFAULT_TIMEOUT

# Default configuration location
CONFIG_DIR = Path.home() / ".shellfs"
CONFIG_FILE = CONFIG_DIR / "config.yaml"


class TargetConfig(BaseModel):
    """Connection and tooling settings for one target."""

    model_config = ConfigDict(populate_by_name=True)

    serial: str | None = None
    adb_path: str = Field(default=DEFAULT_ADB, alias="adbPath")
    enhanced_tool: str = Field(default=DEFAULT_TOOL, alias="enhancedTool")
    block_device_dir: str = Field(default=BLOCK_DEVICE_DIR, alias="blockDeviceDir")
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT, alias="timeoutSeconds", gt=0)

    @classmethod
    def from_file(cls, path: Path) -> TargetConfig:
        """Load configuration from a YAML file.

        A missing file yields the defaults.

        Args:
            path: Path to the YAML file.

        Returns:
            Parsed TargetConfig.

        Raises:
            pydantic.ValidationError: If the content is invalid.
        """
        if not path.exists():
            return cls()
        data = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(data)

    @classmethod
    def load_default(cls) -> TargetConfig:
        """Load configuration from ~/.shellfs/config.yaml."""
        return cls.from_file(CONFIG_FILE)

    def save(self, path: Path) -> None:
        """Write configuration as YAML, creating the directory if needed."""
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump(by_alias=True, exclude_none=True)
        path.write_text(yaml.safe_dump(data, sort_keys=True))
