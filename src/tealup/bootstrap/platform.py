"""Platform detection and artifact naming for tealsp builds.

Detects OS and architecture to determine which tealsp binary to download,
and maps them to the local and remote file names.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import Optional

from tealup.core.errors import UnsupportedPlatformError

# Supported operating systems (lowercase)
SUPPORTED_OS = frozenset({"darwin", "linux", "windows"})

# Supported architectures (normalized)
SUPPORTED_ARCH = frozenset({"amd64", "arm64"})

# Base name of the language server executable
EXECUTABLE_BASE_NAME = "tealsp"

# Architecture normalization map
_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
}


def normalize_arch(machine: str) -> Optional[str]:
    """Normalize architecture string to standard form.

    Args:
        machine: Raw architecture string from platform.machine()

    Returns:
        Normalized architecture string or None if unknown.
    """
    return _ARCH_MAP.get(machine.lower())


def detect_os() -> str:
    """Detect the current operating system.

    Returns:
        Lowercase OS name (darwin, linux, windows).

    Raises:
        UnsupportedPlatformError: If the OS is not supported.
    """
    system = platform.system().lower()
    if system not in SUPPORTED_OS:
        raise UnsupportedPlatformError(
            f"Unsupported operating system: {platform.system()}. "
            f"Supported: {', '.join(sorted(SUPPORTED_OS))}"
        )
    return system


def detect_arch() -> str:
    """Detect the current CPU architecture.

    Returns:
        Normalized architecture string (amd64 or arm64).

    Raises:
        UnsupportedPlatformError: If the architecture is not supported.
    """
    machine = platform.machine()
    normalized = normalize_arch(machine)
    if normalized is None:
        raise UnsupportedPlatformError(
            f"Unsupported architecture: {machine}. "
            f"Supported: {', '.join(sorted(SUPPORTED_ARCH))}"
        )
    return normalized


def _check_os(os_name: str) -> None:
    if os_name not in SUPPORTED_OS:
        raise UnsupportedPlatformError(f"Unsupported operating system: {os_name}")


def _check_arch(arch: str) -> None:
    if arch not in SUPPORTED_ARCH:
        raise UnsupportedPlatformError(f"Unsupported architecture: {arch}")


def executable_suffix(os_name: str) -> str:
    """Return the executable file suffix for ``os_name`` (".exe" or "")."""
    _check_os(os_name)
    return ".exe" if os_name == "windows" else ""


def executable_file_name(os_name: str) -> str:
    """Return the local file name of the tealsp executable.

    Example: "tealsp" on linux/darwin, "tealsp.exe" on windows.
    """
    return EXECUTABLE_BASE_NAME + executable_suffix(os_name)


def version_stamp_file_name(os_name: str, arch: str) -> str:
    """Return the version stamp file name for a platform.

    Used both for the remote artifact and the local copy, so it must stay
    stable across releases.

    Example: "tealsp-linux-amd64.version"
    """
    _check_os(os_name)
    _check_arch(arch)
    return f"{EXECUTABLE_BASE_NAME}-{os_name}-{arch}.version"


def release_binary_name(os_name: str, arch: str) -> str:
    """Return the remote binary artifact name for a platform.

    Example: "tealsp-darwin-arm64", "tealsp-windows-amd64.exe"
    """
    _check_arch(arch)
    return f"{EXECUTABLE_BASE_NAME}-{os_name}-{arch}{executable_suffix(os_name)}"


@dataclass(frozen=True)
class PlatformInfo:
    """Information about the current platform.

    Attributes:
        os: Operating system (darwin, linux, windows).
        arch: CPU architecture (amd64, arm64).
    """

    os: str
    arch: str

    @property
    def bundle_name(self) -> str:
        """Return the platform suffix used in artifact names.

        Example: "darwin-arm64", "linux-amd64"
        """
        return f"{self.os}-{self.arch}"

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def executable_name(self) -> str:
        return executable_file_name(self.os)

    @property
    def version_stamp_name(self) -> str:
        return version_stamp_file_name(self.os, self.arch)

    @property
    def release_binary_name(self) -> str:
        return release_binary_name(self.os, self.arch)


def get_platform_info() -> PlatformInfo:
    """Detect and return current platform information.

    Returns:
        PlatformInfo with detected OS and architecture.

    Raises:
        UnsupportedPlatformError: If the platform is not supported.
    """
    return PlatformInfo(os=detect_os(), arch=detect_arch())
