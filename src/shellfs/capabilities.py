"""Detection of optional tooling on the target."""

from __future__ import annotations

import logging
import re

from shellfs.commands import DEFAULT_TOOL, Toolset, build_probe, select_toolset
from shellfs.protocols import ShellTransport

logger = logging.getLogger(__name__)

ELEVATION_PROBE = "su -c id"
_ROOT_UID = re.compile(r"\buid=0\b")


class CapabilityResolver:
    """Resolves and caches what the target can do for one session.

    Each probe costs a remote round trip, so answers are computed on first
    use and kept until ``reset()``. Calling ``reset()`` on reconnect is the
    session owner's job.
    """

    def __init__(self, transport: ShellTransport, tool_name: str = DEFAULT_TOOL) -> None:
        """Initialize the resolver.

        Args:
            transport: Transport used for probing.
            tool_name: Name of the enhanced multi-call tool.
        """
        self.transport = transport
        self.tool_name = tool_name
        self._banner = re.compile(rf"\b{re.escape(tool_name)} v", re.IGNORECASE)
        self._enhanced: bool | None = None
        self._elevated: bool | None = None

    def is_enhanced_tool_available(self) -> bool:
        """Check whether the enhanced tool is installed on the target.

        Returns:
            True if running the bare tool name prints its version banner.

        Raises:
            NotReadyError: If the target cannot be reached.
        """
        if self._enhanced is None:
            outcome = self.transport.execute(build_probe(self.tool_name))
            self._enhanced = bool(self._banner.search(outcome.text))
            logger.debug("Enhanced tool '%s' available: %s", self.tool_name, self._enhanced)
        return self._enhanced

    def can_elevate(self) -> bool:
        """Check whether commands can run as root on the target.

        Raises:
            NotReadyError: If the target cannot be reached.
        """
        if self._elevated is None:
            outcome = self.transport.execute(ELEVATION_PROBE)
            self._elevated = bool(_ROOT_UID.search(outcome.text))
            logger.debug("Root elevation available: %s", self._elevated)
        return self._elevated

    def toolset(self) -> Toolset:
        """Get the tool variant for this session."""
        return select_toolset(self.is_enhanced_tool_available(), self.tool_name)

    def reset(self) -> None:
        """Forget cached answers."""
        self._enhanced = None
        self._elevated = None
