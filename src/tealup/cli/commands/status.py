"""Status command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING, Optional

import yaml

if TYPE_CHECKING:
    from tealup.config.models import TealupConfig

from tealup.cli.commands import Command, ProvisioningFactory, create_provisioning
from tealup.cli.exit_codes import EXIT_SUCCESS

# Longest version stamp shown before truncating
_STAMP_PREVIEW = 40


def format_stamp(stamp: Optional[bytes]) -> str:
    """Render an opaque version stamp for display."""
    if stamp is None:
        return "none"
    text = stamp.decode("utf-8", errors="replace").strip()
    if not text:
        return f"<{len(stamp)} bytes>"
    if len(text) > _STAMP_PREVIEW:
        return text[:_STAMP_PREVIEW] + "..."
    return text


class StatusCommand(Command):
    """Shows install mode, managed install and probe results."""

    def __init__(self, version: str, provisioning_factory: ProvisioningFactory = create_provisioning):
        """Initialize StatusCommand.

        Args:
            version: Current tealup version string.
            provisioning_factory: Builds the provisioning components.
        """
        self._version = version
        self._provisioning_factory = provisioning_factory

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace, config: "TealupConfig") -> int:
        """Execute the status command.

        Probes the candidates without installing or upgrading anything.

        Returns:
            Exit code (always 0 for status).
        """
        provisioning = self._provisioning_factory(config, None)
        context = provisioning.context
        installation = context.installation

        print(f"tealup version: {self._version}")
        print(f"Platform: {context.platform.bundle_name}")
        print(f"Channel: {installation.channel}")
        print(f"Release URL: {context.client.binary_url(installation.channel)}")
        print()

        installed = context.store.exists(installation.executable_path)
        print("Managed install:")
        print(f"  binary:  {installation.executable_path} "
              f"({'installed' if installed else 'not installed'})")
        print(f"  stamp:   {format_stamp(context.store.read_version_stamp())}")
        print()

        resolution = provisioning.resolver.detect()
        mode = resolution.mode.value if resolution.mode is not None else "not installed"
        print(f"Install mode: {mode}")
        if resolution.executable_path is not None:
            print(f"Executable: {resolution.executable_path}")

        print("Probes:")
        for probe in resolution.probes:
            icon = "[OK]" if probe.usable else "[!!]"
            print(f"  {icon} {probe.describe()}")

        if not resolution.resolved:
            print()
            print("Run 'tealup install' to download tealsp.")

        if getattr(args, "show_config", False):
            print()
            print(f"Config sources: {', '.join(config.sources) or 'defaults'}")
            print(yaml.safe_dump(config.to_dict(), sort_keys=False).rstrip())

        return EXIT_SUCCESS
