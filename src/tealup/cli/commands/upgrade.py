"""Upgrade command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tealup.config.models import TealupConfig

from tealup.cli.commands import Command, ProvisioningFactory, create_provisioning
from tealup.cli.exit_codes import EXIT_INSTALL_FAILURE, EXIT_INVALID_USAGE, EXIT_SUCCESS
from tealup.core.errors import InstallModeError


class UpgradeCommand(Command):
    """Upgrades the managed tealsp."""

    def __init__(self, provisioning_factory: ProvisioningFactory = create_provisioning):
        self._provisioning_factory = provisioning_factory

    @property
    def name(self) -> str:
        """Command identifier."""
        return "upgrade"

    def execute(self, args: Namespace, config: "TealupConfig") -> int:
        provisioning = self._provisioning_factory(config, None)
        provisioning.resolver.detect()
        coordinator = provisioning.coordinator

        try:
            coordinator.require_managed()
            if getattr(args, "if_needed", False):
                report = coordinator.upgrade_if_available()
                if report is None:
                    print("tealsp is up to date.")
                    return EXIT_SUCCESS
            else:
                report = coordinator.upgrade()
        except InstallModeError as e:
            print(str(e))
            return EXIT_INVALID_USAGE

        print(report.message)
        return EXIT_SUCCESS if report.succeeded else EXIT_INSTALL_FAILURE
