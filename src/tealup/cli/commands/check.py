"""Check command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tealup.config.models import TealupConfig

from tealup.bootstrap.context import InstallMode
from tealup.cli.commands import Command, ProvisioningFactory, create_provisioning
from tealup.cli.exit_codes import EXIT_SUCCESS, EXIT_UPGRADE_AVAILABLE


class CheckCommand(Command):
    """Reports whether the release channel has a newer tealsp."""

    def __init__(self, provisioning_factory: ProvisioningFactory = create_provisioning):
        self._provisioning_factory = provisioning_factory

    @property
    def name(self) -> str:
        """Command identifier."""
        return "check"

    def execute(self, args: Namespace, config: "TealupConfig") -> int:
        """Execute the check command.

        Returns:
            EXIT_UPGRADE_AVAILABLE when an install or upgrade would change
            the managed tealsp, EXIT_SUCCESS otherwise.
        """
        provisioning = self._provisioning_factory(config, None)
        resolution = provisioning.resolver.detect()
        channel = provisioning.context.channel

        if resolution.mode in (InstallMode.CUSTOM, InstallMode.DEVELOPER):
            print(
                f"tealsp at {resolution.executable_path} is not managed by tealup "
                f"({resolution.mode.value}); nothing to check."
            )
            return EXIT_SUCCESS

        if not resolution.resolved:
            print("tealsp is not installed. Run 'tealup install'.")
            return EXIT_UPGRADE_AVAILABLE

        if provisioning.coordinator.check_upgradable():
            print(f"A newer tealsp is available on the '{channel}' channel. Run 'tealup upgrade'.")
            return EXIT_UPGRADE_AVAILABLE

        print(f"tealsp is up to date with the '{channel}' channel.")
        return EXIT_SUCCESS
