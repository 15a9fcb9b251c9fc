"""Decide which tealsp executable to run.

Resolution order:
1. A custom path from configuration (never installed or upgraded)
2. tealsp on the search path, in development contexts only
3. The managed install, installing it first when it is not usable and
   probing the fresh binary
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from tealup.bootstrap.context import InstallMode, ProvisioningContext, is_development_context
from tealup.bootstrap.coordinator import LifecycleCoordinator
from tealup.bootstrap.platform import EXECUTABLE_BASE_NAME
from tealup.bootstrap.validation import ProbeResult, probe_executable
from tealup.core.errors import ProvisioningError, TealupError
from tealup.core.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class Resolution:
    """The executable chosen at startup.

    Attributes:
        mode: Where the executable comes from; None when nothing usable
            was found and nothing was installed.
        executable_path: What to hand to the language server process.
        probes: Liveness probes run while resolving, in order.
    """

    mode: Optional[InstallMode]
    executable_path: Optional[Union[str, Path]]
    probes: Tuple[ProbeResult, ...] = ()

    @property
    def resolved(self) -> bool:
        return self.mode is not None


class PathResolver:
    """Runs the startup resolution and records the install mode."""

    def __init__(self, context: ProvisioningContext, coordinator: LifecycleCoordinator) -> None:
        self._context = context
        self._coordinator = coordinator

    def _probe(self, command: str) -> ProbeResult:
        return probe_executable(command, timeout=self._context.config.probe.timeout)

    def detect(self) -> Resolution:
        """Probe the candidates without installing anything.

        Records the install mode when a candidate is selected. An unusable
        managed install yields an unresolved Resolution.
        """
        context = self._context
        probes: List[ProbeResult] = []

        custom_path = context.config.server.path
        if custom_path:
            probe = self._probe(custom_path)
            probes.append(probe)
            if not probe.usable:
                LOGGER.warning(f"Configured tealsp may not work: {probe.describe()}")
            return self._resolved(InstallMode.CUSTOM, custom_path, probes)

        if is_development_context(context.config):
            probe = self._probe(EXECUTABLE_BASE_NAME)
            probes.append(probe)
            if probe.usable:
                return self._resolved(InstallMode.DEVELOPER, EXECUTABLE_BASE_NAME, probes)
            LOGGER.info(f"No usable tealsp on the search path: {probe.describe()}")

        managed_path = context.installation.executable_path
        probe = self._probe(str(managed_path))
        probes.append(probe)
        if probe.usable:
            return self._resolved(InstallMode.MANAGED, managed_path, probes)

        LOGGER.info(f"Managed tealsp not usable: {probe.describe()}")
        return Resolution(mode=None, executable_path=None, probes=tuple(probes))

    def resolve(self) -> Resolution:
        """Resolve the executable, installing tealsp if needed.

        Raises:
            ProvisioningError: If no usable executable exists and the
                managed install failed. The install mode stays unresolved.
        """
        resolution = self.detect()
        if resolution.resolved:
            return resolution

        LOGGER.info("Installing tealsp")
        try:
            self._coordinator.ensure_installed()
        except TealupError as e:
            LOGGER.error(f"Could not install tealsp: {e}")
            raise ProvisioningError(
                f"No usable tealsp executable: {e}. "
                "Install tealsp manually (go install github.com/dragmz/teal/cmd/tealsp@latest) "
                "and set server.path in the tealup config.",
                cause=e,
            ) from e

        managed_path = self._context.installation.executable_path
        probes = list(resolution.probes)
        probe = self._probe(str(managed_path))
        probes.append(probe)
        if probe.usable:
            LOGGER.info(f"Installed tealsp responds: {probe.describe()}")
        else:
            LOGGER.warning(f"Installed tealsp may not work: {probe.describe()}")

        return self._resolved(InstallMode.MANAGED, managed_path, probes)

    def _resolved(
        self,
        mode: InstallMode,
        executable_path: Union[str, Path],
        probes: List[ProbeResult],
    ) -> Resolution:
        self._context.set_mode(mode)
        LOGGER.info(f"Using tealsp at {executable_path} ({mode.value})")
        return Resolution(mode=mode, executable_path=executable_path, probes=tuple(probes))
