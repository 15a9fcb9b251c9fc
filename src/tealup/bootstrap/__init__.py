"""
Bootstrap module for tealsp provisioning.

This module handles:
- Platform detection and artifact naming (OS + architecture)
- Release channel selection
- Downloading release artifacts
- The managed install directory (~/.tealup/bin/)
- Choosing between custom, developer and managed executables
- Install, freshness check and upgrade of the managed executable
"""

from tealup.bootstrap.platform import get_platform_info, PlatformInfo
from tealup.bootstrap.paths import get_tealup_home, ManagedInstallation, TealupPaths
from tealup.bootstrap.context import InstallMode, ProvisioningContext, build_context
from tealup.bootstrap.coordinator import LifecycleCoordinator, UpgradeReport
from tealup.bootstrap.resolver import PathResolver, Resolution

__all__ = [
    "get_platform_info",
    "PlatformInfo",
    "get_tealup_home",
    "ManagedInstallation",
    "TealupPaths",
    "InstallMode",
    "ProvisioningContext",
    "build_context",
    "LifecycleCoordinator",
    "UpgradeReport",
    "PathResolver",
    "Resolution",
]
