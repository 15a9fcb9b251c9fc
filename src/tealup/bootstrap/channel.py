"""Release channel selection.

tealup builds with an odd minor version are pre-releases and follow the
pre-release channel; even minor versions follow stable. A user override
always takes precedence.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from tealup.core.errors import ConfigError
from tealup.core.logging import get_logger

LOGGER = get_logger(__name__)

STABLE_CHANNEL = "stable"
PRERELEASE_CHANNEL = "prerelease"

_VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


def parse_version(version: str) -> Tuple[int, int, int]:
    """Parse a ``<major>.<minor>.<patch>`` version string.

    Raises:
        ConfigError: If the string is not exactly three dot-separated integers.
    """
    match = _VERSION_PATTERN.match(version.strip())
    if match is None:
        raise ConfigError(
            f"Cannot parse version '{version}': expected <major>.<minor>.<patch>"
        )
    major, minor, patch = match.groups()
    return int(major), int(minor), int(patch)


def resolve_channel(version: str, override: Optional[str] = None) -> str:
    """Return the release channel for ``version``.

    Args:
        version: The running tealup version.
        override: User-configured channel; wins when non-empty.

    Returns:
        Channel name.

    Raises:
        ConfigError: If no override is set and ``version`` cannot be parsed.
    """
    if override and override.strip():
        return override.strip()

    _major, minor, _patch = parse_version(version)
    return PRERELEASE_CHANNEL if minor % 2 == 1 else STABLE_CHANNEL


def resolve_channel_or_default(version: str, override: Optional[str] = None) -> str:
    """Like :func:`resolve_channel`, falling back to stable on a bad version."""
    try:
        return resolve_channel(version, override)
    except ConfigError as e:
        LOGGER.warning(f"{e}; using the {STABLE_CHANNEL} channel")
        return STABLE_CHANNEL
