"""Bridge between CLI arguments and configuration models."""

from __future__ import annotations

import argparse
from typing import Any, Dict


class ConfigBridge:
    """Translates CLI arguments to configuration overrides."""

    @staticmethod
    def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
        """Convert CLI arguments to config override dict.

        CLI arguments take precedence over config file values. Only flags
        that were given on the command line produce overrides.

        Args:
            args: Parsed CLI arguments.

        Returns:
            Dictionary of config overrides.
        """
        overrides: Dict[str, Any] = {}
        server: Dict[str, Any] = {}
        updates: Dict[str, Any] = {}

        channel = getattr(args, "channel", None)
        if channel:
            overrides["channel"] = channel

        if getattr(args, "dev", False):
            overrides["development"] = True

        server_path = getattr(args, "server_path", None)
        if server_path:
            server["path"] = str(server_path)

        if getattr(args, "debug_server", False):
            server["debug"] = True

        check_updates = getattr(args, "check_updates", None)
        if check_updates is not None:
            updates["check_on_start"] = check_updates

        if getattr(args, "auto_upgrade", False):
            updates["auto_upgrade"] = True

        if server:
            overrides["server"] = server
        if updates:
            overrides["updates"] = updates

        return overrides
