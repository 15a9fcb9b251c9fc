"""Run command implementation.

Starts tealsp with stdin/stdout inherited from tealup so an editor can
use ``tealup run`` as its language server command. All user-facing
messages go to stderr.
"""

from __future__ import annotations

import sys
import threading
import time
from argparse import Namespace
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from tealup.config.models import TealupConfig

from tealup.bootstrap.context import InstallMode
from tealup.bootstrap.coordinator import LifecycleCoordinator
from tealup.cli.commands import Command, ProvisioningFactory, create_provisioning
from tealup.cli.exit_codes import EXIT_BOOTSTRAP_FAILURE, EXIT_SUCCESS
from tealup.core.errors import ProcessLifecycleError, ProvisioningError
from tealup.core.logging import get_logger
from tealup.server.process import LanguageServerProcess

LOGGER = get_logger(__name__)

# Poll interval while an upgrade has the server stopped
_RESTART_POLL_INTERVAL = 0.1


def _notify(message: str) -> None:
    print(message, file=sys.stderr, flush=True)


class RunCommand(Command):
    """Resolves tealsp, starts it and waits for it to exit."""

    def __init__(self, provisioning_factory: ProvisioningFactory = create_provisioning):
        self._provisioning_factory = provisioning_factory

    @property
    def name(self) -> str:
        """Command identifier."""
        return "run"

    def execute(self, args: Namespace, config: "TealupConfig") -> int:
        """Execute the run command.

        Returns:
            The language server's exit code, or EXIT_BOOTSTRAP_FAILURE when
            no usable tealsp could be found or started.
        """
        process = LanguageServerProcess(
            features=config.server.features,
            stop_timeout=config.server.stop_timeout,
            attach_stdio=True,
            cwd=Path(getattr(args, "project", ".")).resolve(),
        )
        provisioning = self._provisioning_factory(config, process)
        coordinator = provisioning.coordinator

        try:
            resolution = provisioning.resolver.resolve()
        except ProvisioningError as e:
            _notify(str(e))
            return EXIT_BOOTSTRAP_FAILURE

        try:
            coordinator.start_server(resolution.executable_path)
        except ProcessLifecycleError as e:
            _notify(f"Could not start tealsp: {e}")
            return EXIT_BOOTSTRAP_FAILURE

        if config.updates.check_on_start and resolution.mode == InstallMode.MANAGED:
            self._start_update_check(coordinator, auto_upgrade=config.updates.auto_upgrade)

        try:
            returncode = self._wait(process, coordinator)
        except KeyboardInterrupt:
            LOGGER.info("Interrupted, stopping tealsp")
            try:
                coordinator.stop_server()
            except ProcessLifecycleError as e:
                LOGGER.error(str(e))
            return EXIT_SUCCESS

        LOGGER.info(f"tealsp exited with {returncode}")
        return returncode if returncode is not None else EXIT_SUCCESS

    @staticmethod
    def _wait(process: LanguageServerProcess, coordinator: LifecycleCoordinator) -> Optional[int]:
        """Wait for the server, following restarts made by upgrades."""
        while True:
            returncode = process.wait()
            if process.is_running:
                continue
            if coordinator.upgrade_in_progress:
                time.sleep(_RESTART_POLL_INTERVAL)
                continue
            return returncode

    @staticmethod
    def _start_update_check(coordinator: LifecycleCoordinator, auto_upgrade: bool) -> threading.Thread:
        def check() -> None:
            if auto_upgrade:
                report = coordinator.upgrade_if_available()
                if report is not None:
                    _notify(report.message)
            elif coordinator.check_upgradable():
                _notify("A newer tealsp is available. Run 'tealup upgrade' to install it.")

        thread = threading.Thread(target=check, name="tealup-update-check", daemon=True)
        thread.start()
        return thread
