"""Typed configuration for tealup."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_RELEASE_BASE_URL = "https://github.com/dragmz/teal/releases/download"
DEFAULT_RELEASE_TIMEOUT = 30.0
DEFAULT_PROBE_TIMEOUT = 10.0
DEFAULT_STOP_TIMEOUT = 5.0
DEFAULT_DEBUG_LOG = "tealsp_debug.log"


@dataclass
class ServerConfig:
    """How the language server is located and started.

    ``features`` are passed through to the server untouched.
    """

    path: Optional[str] = None
    debug: bool = False
    debug_log: str = DEFAULT_DEBUG_LOG
    stop_timeout: float = DEFAULT_STOP_TIMEOUT
    features: Dict[str, Any] = field(default_factory=dict)

    @property
    def debug_args(self) -> List[str]:
        """Arguments enabling tealsp's debug log, empty unless ``debug``."""
        if not self.debug:
            return []
        return ["-debug", self.debug_log]


@dataclass
class ReleaseConfig:
    """Where releases are downloaded from."""

    base_url: str = DEFAULT_RELEASE_BASE_URL
    timeout: float = DEFAULT_RELEASE_TIMEOUT


@dataclass
class ProbeConfig:
    timeout: float = DEFAULT_PROBE_TIMEOUT


@dataclass
class UpdatesConfig:
    """Background freshness check behaviour for ``tealup run``."""

    check_on_start: bool = True
    auto_upgrade: bool = False


@dataclass
class TealupConfig:
    """Complete tealup configuration.

    Attributes:
        channel: Release channel override; None derives it from the tealup
            version.
        development: Allow tealsp from the search path.
    """

    channel: Optional[str] = None
    development: bool = False
    server: ServerConfig = field(default_factory=ServerConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    probe: ProbeConfig = field(default_factory=ProbeConfig)
    updates: UpdatesConfig = field(default_factory=UpdatesConfig)

    # Where the effective values came from (global, project, cli)
    _config_sources: List[str] = field(default_factory=list, repr=False)

    @property
    def sources(self) -> List[str]:
        return list(self._config_sources)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for display or YAML serialization."""
        return {
            "channel": self.channel,
            "development": self.development,
            "server": {
                "path": self.server.path,
                "debug": self.server.debug,
                "debug_log": self.server.debug_log,
                "stop_timeout": self.server.stop_timeout,
                "features": dict(self.server.features),
            },
            "release": {
                "base_url": self.release.base_url,
                "timeout": self.release.timeout,
            },
            "probe": {
                "timeout": self.probe.timeout,
            },
            "updates": {
                "check_on_start": self.updates.check_on_start,
                "auto_upgrade": self.updates.auto_upgrade,
            },
        }
