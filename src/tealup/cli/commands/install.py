"""Install command implementation.

The single "check/install tools" trigger: installs tealsp when nothing
usable is found, upgrades a managed install, and refuses for custom and
developer binaries.
"""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tealup.config.models import TealupConfig

from tealup.cli.commands import Command, ProvisioningFactory, create_provisioning
from tealup.cli.exit_codes import EXIT_INSTALL_FAILURE, EXIT_INVALID_USAGE, EXIT_SUCCESS


class InstallCommand(Command):
    """Installs or upgrades the managed tealsp."""

    def __init__(self, provisioning_factory: ProvisioningFactory = create_provisioning):
        self._provisioning_factory = provisioning_factory

    @property
    def name(self) -> str:
        """Command identifier."""
        return "install"

    def execute(self, args: Namespace, config: "TealupConfig") -> int:
        provisioning = self._provisioning_factory(config, None)
        provisioning.resolver.detect()

        result = provisioning.coordinator.check_and_install_tools()
        print(result.message)

        if result.rejected:
            return EXIT_INVALID_USAGE
        return EXIT_SUCCESS if result.ok else EXIT_INSTALL_FAILURE
