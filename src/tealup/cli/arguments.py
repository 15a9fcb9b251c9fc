"""Argument parser construction for tealup CLI.

This module builds the argument parser with subcommands:
- tealup status  - Show install mode, paths and probe results
- tealup install - Install tealsp, or upgrade a managed install
- tealup check   - Check the release channel for a newer tealsp
- tealup upgrade - Upgrade the managed tealsp
- tealup run     - Start tealsp attached to this process's stdio
"""

from __future__ import annotations

import argparse
from pathlib import Path


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    """Add global options available to all commands."""
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show tealup version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging output to errors only.",
    )
    parser.add_argument(
        "--log-file",
        action="store_true",
        help="Also write logs to ~/.tealup/logs/tealup.log.",
    )


def _add_config_options(parser: argparse.ArgumentParser) -> None:
    """Add configuration options shared by every subcommand."""
    config_group = parser.add_argument_group("configuration")
    config_group.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: .tealup.yml in the project directory).",
    )
    config_group.add_argument(
        "--project",
        metavar="DIR",
        default=".",
        help="Project directory to read .tealup.yml from (default: current directory).",
    )
    config_group.add_argument(
        "--channel",
        metavar="NAME",
        help="Release channel to follow (overrides the channel derived from the tealup version).",
    )
    config_group.add_argument(
        "--server-path",
        metavar="PATH",
        help="Use this tealsp binary instead of a managed install.",
    )
    config_group.add_argument(
        "--dev",
        action="store_true",
        help="Development mode: prefer tealsp from the search path.",
    )


def _build_status_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'status' subcommand parser."""
    status_parser = subparsers.add_parser(
        "status",
        help="Show install mode, paths and probe results.",
        description=(
            "Display tealup version, platform info, release channel, "
            "the managed install and the result of probing each candidate."
        ),
    )
    _add_config_options(status_parser)
    status_parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show effective configuration.",
    )


def _build_install_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'install' subcommand parser."""
    install_parser = subparsers.add_parser(
        "install",
        help="Install tealsp, or upgrade a managed install.",
        description=(
            "Download tealsp into ~/.tealup/bin when no usable binary exists, "
            "or re-install the latest build from the release channel."
        ),
    )
    _add_config_options(install_parser)


def _build_check_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'check' subcommand parser."""
    check_parser = subparsers.add_parser(
        "check",
        help="Check the release channel for a newer tealsp.",
        description="Exit with code 1 when a newer tealsp is available.",
    )
    _add_config_options(check_parser)


def _build_upgrade_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'upgrade' subcommand parser."""
    upgrade_parser = subparsers.add_parser(
        "upgrade",
        help="Upgrade the managed tealsp.",
        description="Download and install the latest tealsp from the release channel.",
    )
    _add_config_options(upgrade_parser)
    upgrade_parser.add_argument(
        "--if-needed",
        action="store_true",
        help="Only upgrade when the release channel has a newer build.",
    )


def _build_run_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'run' subcommand parser."""
    run_parser = subparsers.add_parser(
        "run",
        help="Start tealsp attached to this process's stdio.",
        description=(
            "Resolve tealsp (installing it if needed), start it with stdin/stdout "
            "inherited from tealup and wait for it to exit."
        ),
    )
    _add_config_options(run_parser)
    run_parser.add_argument(
        "--debug-server",
        action="store_true",
        help="Start tealsp with its debug log enabled.",
    )
    run_parser.add_argument(
        "--check-updates",
        dest="check_updates",
        action="store_true",
        default=None,
        help="Check for a newer tealsp in the background after starting.",
    )
    run_parser.add_argument(
        "--no-check-updates",
        dest="check_updates",
        action="store_false",
        help="Skip the background freshness check.",
    )
    run_parser.add_argument(
        "--auto-upgrade",
        action="store_true",
        help="Upgrade and restart tealsp when the freshness check finds a newer build.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for tealup CLI.

    Returns:
        Configured ArgumentParser instance with subcommands.
    """
    parser = argparse.ArgumentParser(
        prog="tealup",
        description="tealup - install, upgrade and run the TEAL language server.",
        epilog=(
            "Examples:\n"
            "  tealup install                    # Install or upgrade tealsp\n"
            "  tealup check                      # Is a newer tealsp available?\n"
            "  tealup upgrade --if-needed        # Upgrade only when outdated\n"
            "  tealup run --check-updates        # Start tealsp for an editor\n"
            "  tealup status                     # Show install mode and paths\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    _add_global_options(parser)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands:",
        metavar="COMMAND",
    )

    _build_status_parser(subparsers)
    _build_install_parser(subparsers)
    _build_check_parser(subparsers)
    _build_upgrade_parser(subparsers)
    _build_run_parser(subparsers)

    return parser
