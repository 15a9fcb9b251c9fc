"""CLI commands package.

This module provides the base Command class, the provisioning factory the
commands share, and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from tealup.bootstrap.context import ProvisioningContext, build_context
from tealup.bootstrap.coordinator import LifecycleCoordinator
from tealup.bootstrap.resolver import PathResolver
from tealup.server.base import NullProcessHandle, ProcessHandle

if TYPE_CHECKING:
    from tealup.config.models import TealupConfig


@dataclass
class Provisioning:
    """The provisioning components wired around one context."""

    context: ProvisioningContext
    coordinator: LifecycleCoordinator
    resolver: PathResolver


def create_provisioning(
    config: "TealupConfig",
    process: Optional[ProcessHandle] = None,
) -> Provisioning:
    """Build context, coordinator and resolver from configuration.

    Args:
        config: Effective tealup configuration.
        process: Language server handle; one-shot commands use a no-op one.
    """
    context = build_context(config, process or NullProcessHandle())
    coordinator = LifecycleCoordinator(context)
    return Provisioning(
        context=context,
        coordinator=coordinator,
        resolver=PathResolver(context, coordinator),
    )


ProvisioningFactory = Callable[["TealupConfig", Optional[ProcessHandle]], Provisioning]


class Command(ABC):
    """Base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier.

        Returns:
            String name of the command.
        """

    @abstractmethod
    def execute(self, args: Namespace, config: "TealupConfig") -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.
            config: Effective tealup configuration.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# Import command implementations for convenience
# ruff: noqa: E402
from tealup.cli.commands.status import StatusCommand
from tealup.cli.commands.install import InstallCommand
from tealup.cli.commands.check import CheckCommand
from tealup.cli.commands.upgrade import UpgradeCommand
from tealup.cli.commands.run import RunCommand

__all__ = [
    "Command",
    "Provisioning",
    "create_provisioning",
    "StatusCommand",
    "InstallCommand",
    "CheckCommand",
    "UpgradeCommand",
    "RunCommand",
]
