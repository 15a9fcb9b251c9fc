"""Path management for the tealup home directory.

Handles the ~/.tealup directory structure and the managed installation
layout.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from tealup.bootstrap.platform import PlatformInfo

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".tealup"

# Environment variable to override home directory
TEALUP_HOME_ENV = "TEALUP_HOME"


def get_tealup_home() -> Path:
    """Get the tealup home directory path.

    Resolution order:
    1. TEALUP_HOME environment variable (if set)
    2. ~/.tealup (default)

    Returns:
        Path to the tealup home directory.
    """
    env_home = os.environ.get(TEALUP_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / DEFAULT_HOME_DIR_NAME


@dataclass(frozen=True)
class ManagedInstallation:
    """Location of the coordinator-managed tealsp install.

    At steady state ``install_dir`` holds exactly two files: the executable
    and its version stamp.
    """

    install_dir: Path
    executable_path: Path
    version_stamp_path: Path
    channel: str


@dataclass
class TealupPaths:
    """Manages paths within the tealup home directory.

    Directory structure:
        ~/.tealup/
            bin/
                tealsp[.exe]               - Managed language server binary
                tealsp-{os}-{arch}.version - Version stamp of that binary
            config/
                config.yml                 - Global configuration
            logs/                          - Log files
    """

    home: Path

    # Subdirectory names
    _BIN_DIR: ClassVar[str] = "bin"
    _CONFIG_DIR: ClassVar[str] = "config"
    _LOGS_DIR: ClassVar[str] = "logs"

    @classmethod
    def default(cls) -> "TealupPaths":
        """Create paths from the default tealup home."""
        return cls(get_tealup_home())

    @property
    def bin_dir(self) -> Path:
        """Directory containing the managed binary."""
        return self.home / self._BIN_DIR

    @property
    def config_dir(self) -> Path:
        """Directory for configuration files."""
        return self.home / self._CONFIG_DIR

    @property
    def global_config_file(self) -> Path:
        return self.config_dir / "config.yml"

    @property
    def logs_dir(self) -> Path:
        """Directory for log files."""
        return self.home / self._LOGS_DIR

    @property
    def log_file(self) -> Path:
        return self.logs_dir / "tealup.log"

    def managed_installation(
        self, platform_info: PlatformInfo, channel: str
    ) -> ManagedInstallation:
        """Describe the managed install for a platform and channel.

        Args:
            platform_info: Platform the binary is built for.
            channel: Release channel the install follows.

        Returns:
            ManagedInstallation rooted at ``bin_dir``.
        """
        return ManagedInstallation(
            install_dir=self.bin_dir,
            executable_path=self.bin_dir / platform_info.executable_name,
            version_stamp_path=self.bin_dir / platform_info.version_stamp_name,
            channel=channel,
        )
