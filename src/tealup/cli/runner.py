"""CLI runner orchestration.

This module handles command dispatch and execution for the tealup CLI.
"""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import Dict, Iterable, Optional

from importlib.metadata import version, PackageNotFoundError

from tealup.bootstrap.paths import TealupPaths
from tealup.cli.arguments import build_parser
from tealup.cli.config_bridge import ConfigBridge
from tealup.cli.exit_codes import (
    EXIT_BOOTSTRAP_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SUCCESS,
)
from tealup.cli.commands import (
    CheckCommand,
    Command,
    InstallCommand,
    RunCommand,
    StatusCommand,
    UpgradeCommand,
)
from tealup.config import load_config
from tealup.core.errors import ConfigError, UnsupportedPlatformError
from tealup.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def get_version() -> str:
    """Get tealup version.

    Returns:
        Version string from package metadata or fallback.
    """
    try:
        return version("tealup")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from tealup import __version__
        return __version__


class CLIRunner:
    """Orchestrates CLI execution with subcommand dispatch."""

    def __init__(self, commands: Optional[Dict[str, Command]] = None) -> None:
        """Initialize CLIRunner with parser and commands.

        Args:
            commands: Command implementations by name; defaults to the
                built-in commands.
        """
        self.parser = build_parser()
        self._version = get_version()
        if commands is None:
            commands = {
                cmd.name: cmd
                for cmd in (
                    StatusCommand(version=self._version),
                    InstallCommand(),
                    CheckCommand(),
                    UpgradeCommand(),
                    RunCommand(),
                )
            }
        self.commands = commands

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        # Handle --help specially to return 0
        if argv is not None:
            argv_list = list(argv)
            if "--help" in argv_list or "-h" in argv_list:
                self.parser.print_help()
                return EXIT_SUCCESS
        else:
            argv_list = None

        args = self.parser.parse_args(argv_list)

        # Configure logging as early as possible
        configure_logging(
            debug=args.debug,
            verbose=args.verbose,
            quiet=args.quiet,
            log_file=TealupPaths.default().log_file if args.log_file else None,
        )

        # Handle --version
        if args.version:
            print(self._version)
            return EXIT_SUCCESS

        command = self.commands.get(getattr(args, "command", None) or "")
        if command is None:
            # No command specified - show help
            self.parser.print_help()
            return EXIT_SUCCESS

        return self._dispatch(command, args)

    def _dispatch(self, command: Command, args: Namespace) -> int:
        """Load configuration and execute a command.

        Args:
            command: Command to execute.
            args: Parsed command-line arguments.

        Returns:
            Exit code.
        """
        project_root = Path(args.project).resolve()
        cli_overrides = ConfigBridge.args_to_overrides(args)

        try:
            config = load_config(
                project_root=project_root,
                cli_config_path=getattr(args, "config", None),
                cli_overrides=cli_overrides,
            )
        except ConfigError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE

        try:
            return command.execute(args, config)
        except UnsupportedPlatformError as e:
            LOGGER.error(str(e))
            return EXIT_BOOTSTRAP_FAILURE
        except ConfigError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE
