"""Install and upgrade orchestration for the managed tealsp binary.

Handles:
- First install (fetch binary and stamp, stage-then-rename both)
- Freshness checks against the remote channel
- Upgrades that stop the language server, swap the binary and restart it
- Serialising all of the above so that two installs never race
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from tealup.bootstrap.context import InstallMode, ProvisioningContext
from tealup.core.concurrency import SingleFlight
from tealup.core.errors import (
    InstallIOError,
    InstallModeError,
    ProcessLifecycleError,
    ReleaseFetchError,
    TealupError,
)
from tealup.core.logging import get_logger

LOGGER = get_logger(__name__)

_INSTALL = "install"
_UPGRADE = "upgrade"


class UpgradeOutcome(str, Enum):
    """Final state of an upgrade."""

    UPGRADED = "upgraded"
    KEPT_PREVIOUS = "kept_previous"


@dataclass
class UpgradeReport:
    """What happened during :meth:`LifecycleCoordinator.upgrade`.

    ``install_error`` set means the previous binary is still in place and
    the server was restarted with it.
    """

    outcome: UpgradeOutcome
    executable_path: Path
    stop_error: Optional[Exception] = None
    install_error: Optional[Exception] = None
    start_error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome == UpgradeOutcome.UPGRADED

    @property
    def message(self) -> str:
        lines: List[str] = []
        if self.succeeded:
            lines.append(f"tealsp upgraded at {self.executable_path}.")
        else:
            lines.append(f"tealsp upgrade failed: {self.install_error}")
            lines.append(f"The previous tealsp at {self.executable_path} was kept.")
        if self.stop_error is not None:
            lines.append(f"Warning: could not stop the language server: {self.stop_error}")
        if self.start_error is not None:
            lines.append(f"Warning: could not restart the language server: {self.start_error}")
        return "\n".join(lines)


@dataclass(frozen=True)
class CommandResult:
    """User-facing result of the check/install tools command."""

    ok: bool
    message: str
    report: Optional[UpgradeReport] = None
    rejected: bool = False


class LifecycleCoordinator:
    """Owns the install/upgrade sequence for the managed tealsp binary."""

    def __init__(self, context: ProvisioningContext) -> None:
        self._context = context
        self._flight = SingleFlight()
        self._disk_lock = threading.Lock()

    @property
    def context(self) -> ProvisioningContext:
        return self._context

    @property
    def executable_path(self) -> Path:
        return self._context.installation.executable_path

    @property
    def upgrade_in_progress(self) -> bool:
        return self._flight.in_flight(_UPGRADE)

    def ensure_installed(self) -> None:
        """Download and install tealsp into the managed directory.

        Concurrent callers share one execution.

        Raises:
            ReleaseFetchError: If either artifact could not be downloaded;
                nothing on disk has changed.
            InstallIOError: If writing failed; the previous binary, if any,
                is untouched.
        """
        self._flight.do(_INSTALL, self._install)
        if self._context.mode is None:
            self._context.set_mode(InstallMode.MANAGED)

    def _install(self) -> None:
        context = self._context
        installation = context.installation

        release = context.client.fetch_release(installation.channel)

        with self._disk_lock:
            store = context.store
            store.ensure_directory()
            store.discard_partials()
            # Binary first: an interruption before the stamp is written
            # leaves the old stamp, which reads as "upgrade available".
            store.atomic_replace(installation.executable_path, release.binary, executable=True)
            store.atomic_replace(installation.version_stamp_path, release.version_stamp)

        LOGGER.info(
            f"Installed tealsp from the '{release.channel}' channel to "
            f"{installation.executable_path}"
        )

    def check_upgradable(self) -> bool:
        """Return True when the remote stamp differs from the local one.

        A missing local stamp counts as upgradable. A failed remote fetch
        counts as not upgradable and is only logged.
        """
        context = self._context
        try:
            local = context.store.read_version_stamp()
        except InstallIOError as e:
            LOGGER.warning(f"Could not read local version stamp: {e}")
            local = None

        if local is None:
            LOGGER.info("No local version stamp; an upgrade is available")
            return True

        try:
            remote = context.client.fetch_version_stamp(context.channel)
        except ReleaseFetchError as e:
            LOGGER.warning(f"Freshness check failed: {e}")
            return False

        upgradable = local != remote
        LOGGER.info(
            "A newer tealsp is available" if upgradable else "tealsp is up to date"
        )
        return upgradable

    def require_managed(self) -> None:
        """Raise InstallModeError unless tealsp is managed by tealup."""
        mode = self._context.mode
        if mode != InstallMode.MANAGED:
            raise InstallModeError(_rejection_message(mode))

    def upgrade(self) -> UpgradeReport:
        """Stop the server, install the latest tealsp and start it again.

        Raises:
            InstallModeError: If tealsp is not managed by tealup.
        """
        self.require_managed()
        return self._flight.do(_UPGRADE, self._upgrade)

    def _upgrade(self) -> UpgradeReport:
        stop_error: Optional[Exception] = None
        install_error: Optional[Exception] = None
        start_error: Optional[Exception] = None

        try:
            self.stop_server()
        except ProcessLifecycleError as e:
            LOGGER.warning(f"Continuing upgrade although the server did not stop: {e}")
            stop_error = e

        try:
            self._flight.do(_INSTALL, self._install)
        except TealupError as e:
            LOGGER.error(f"Upgrade failed, keeping the previous tealsp: {e}")
            install_error = e

        try:
            self.start_server()
        except ProcessLifecycleError as e:
            LOGGER.error(f"Could not restart the language server: {e}")
            start_error = e

        report = UpgradeReport(
            outcome=UpgradeOutcome.KEPT_PREVIOUS if install_error else UpgradeOutcome.UPGRADED,
            executable_path=self.executable_path,
            stop_error=stop_error,
            install_error=install_error,
            start_error=start_error,
        )
        LOGGER.info(f"Upgrade finished: {report.outcome.value}")
        return report

    def upgrade_if_available(self) -> Optional[UpgradeReport]:
        """Upgrade only when the freshness check reports a newer build."""
        if self._context.mode != InstallMode.MANAGED:
            LOGGER.debug("Skipping freshness check: tealsp is not managed")
            return None
        if not self.check_upgradable():
            return None
        return self.upgrade()

    def check_and_install_tools(self) -> CommandResult:
        """Run the user-facing "check/install tools" command.

        Installs when nothing is resolved yet, upgrades a managed install,
        and refuses in custom and developer modes without touching anything.
        """
        mode = self._context.mode
        if mode in (InstallMode.CUSTOM, InstallMode.DEVELOPER):
            return CommandResult(ok=False, message=_rejection_message(mode), rejected=True)

        if mode is None:
            try:
                self.ensure_installed()
            except TealupError as e:
                return CommandResult(
                    ok=False,
                    message=(
                        f"Could not install tealsp: {e}\n"
                        "Install tealsp manually and set server.path in the tealup config."
                    ),
                )
            return CommandResult(ok=True, message=f"tealsp installed at {self.executable_path}.")

        report = self.upgrade()
        return CommandResult(ok=report.succeeded, message=report.message, report=report)

    def start_server(self, executable_path: Optional[Union[str, Path]] = None) -> None:
        """Start (or restart) the language server.

        Args:
            executable_path: What to run; defaults to the managed binary.

        Raises:
            ProcessLifecycleError: If the server cannot be started.
        """
        path = executable_path if executable_path is not None else self.executable_path
        debug_args = self._context.config.server.debug_args
        self._context.process.start(path, debug_args or None)

    def stop_server(self) -> None:
        """Stop the language server.

        Raises:
            ProcessLifecycleError: If the server cannot be stopped.
        """
        self._context.process.stop()


def _rejection_message(mode: Optional[InstallMode]) -> str:
    if mode == InstallMode.CUSTOM:
        return (
            "tealsp is configured with a custom path (server.path); "
            "tealup does not install or upgrade custom binaries."
        )
    if mode == InstallMode.DEVELOPER:
        return (
            "tealsp is running from the search path in development mode; "
            "tealup does not install or upgrade it."
        )
    return "tealsp has not been installed yet; run 'tealup install' first."
