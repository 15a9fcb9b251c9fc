"""Shared provisioning state.

A single :class:`ProvisioningContext` owns the install layout, the store,
the release client, the language server handle and the install mode. It is
built once per coordinator lifetime and passed to every component.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from tealup import __version__ as TEALUP_VERSION
from tealup.bootstrap.channel import resolve_channel_or_default
from tealup.bootstrap.download import ReleaseClient
from tealup.bootstrap.paths import ManagedInstallation, TealupPaths
from tealup.bootstrap.platform import PlatformInfo, get_platform_info
from tealup.bootstrap.store import LocalInstallStore
from tealup.config.models import TealupConfig
from tealup.core.errors import InstallModeError
from tealup.core.logging import get_logger
from tealup.server.base import ProcessHandle

LOGGER = get_logger(__name__)

# Set to a truthy value to allow the developer probe of tealsp on PATH
DEVELOPMENT_ENV = "TEALUP_DEVELOPMENT"


class InstallMode(str, Enum):
    """Where the tealsp executable comes from."""

    DEVELOPER = "developer"  # ambient binary on the search path
    CUSTOM = "custom"  # user-supplied path, never managed
    MANAGED = "managed"  # downloaded and upgraded by tealup


def is_development_context(config: TealupConfig) -> bool:
    """Return True when the developer probe is allowed."""
    if config.development:
        return True
    return os.environ.get(DEVELOPMENT_ENV, "").strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class ProvisioningContext:
    """Everything the provisioning components share."""

    config: TealupConfig
    paths: TealupPaths
    platform: PlatformInfo
    installation: ManagedInstallation
    store: LocalInstallStore
    client: ReleaseClient
    process: ProcessHandle
    _mode: Optional[InstallMode] = field(default=None, repr=False)
    _mode_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def channel(self) -> str:
        return self.installation.channel

    @property
    def mode(self) -> Optional[InstallMode]:
        """Install mode, or None while unresolved."""
        return self._mode

    def set_mode(self, mode: InstallMode) -> None:
        """Record the install mode.

        The mode is decided once; re-recording the same mode is a no-op.

        Raises:
            InstallModeError: If a different mode was already recorded.
        """
        with self._mode_lock:
            if self._mode is None:
                LOGGER.info(f"Install mode: {mode.value}")
                self._mode = mode
            elif self._mode != mode:
                raise InstallModeError(
                    f"Install mode already resolved as '{self._mode.value}', "
                    f"cannot switch to '{mode.value}'"
                )


def build_context(
    config: TealupConfig,
    process: ProcessHandle,
    paths: Optional[TealupPaths] = None,
    platform_info: Optional[PlatformInfo] = None,
    version: str = TEALUP_VERSION,
) -> ProvisioningContext:
    """Assemble a ProvisioningContext from configuration.

    Raises:
        UnsupportedPlatformError: If the host platform has no tealsp build.
        ConfigError: If the release URL is not HTTPS.
    """
    paths = paths or TealupPaths.default()
    platform_info = platform_info or get_platform_info()
    channel = resolve_channel_or_default(version, config.channel)
    installation = paths.managed_installation(platform_info, channel)

    LOGGER.debug(
        f"Context: platform={platform_info.bundle_name} channel={channel} "
        f"install_dir={installation.install_dir}"
    )

    return ProvisioningContext(
        config=config,
        paths=paths,
        platform=platform_info,
        installation=installation,
        store=LocalInstallStore(installation, posix_permissions=not platform_info.is_windows),
        client=ReleaseClient(
            platform_info,
            base_url=config.release.base_url,
            timeout=config.release.timeout,
        ),
        process=process,
    )
