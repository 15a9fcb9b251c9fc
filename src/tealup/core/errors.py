"""Error taxonomy for tealup.

Every failure that reaches the user carries enough context (URL, path,
underlying cause) to recover manually.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class TealupError(Exception):
    """Base class for all tealup errors."""

    pass


class ConfigError(TealupError):
    """Configuration loading, parsing or interpretation error."""

    pass


class UnsupportedPlatformError(TealupError, ValueError):
    """The host OS or architecture has no published tealsp build."""

    pass


class ReleaseFetchError(TealupError):
    """A release artifact could not be obtained from the remote channel."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"{reason} ({url})")


class TransportError(ReleaseFetchError):
    """The remote channel could not be reached (DNS, TLS, timeout, ...)."""

    pass


class RemoteNotFoundError(ReleaseFetchError):
    """The remote channel answered with a non-2xx status."""

    def __init__(self, url: str, status: int, reason: str = "") -> None:
        self.status = status
        detail = f"HTTP {status}" + (f" - {reason}" if reason else "")
        super().__init__(url, detail)


class InstallIOError(TealupError):
    """A filesystem step of an install failed."""

    def __init__(self, path: Union[str, Path], cause: BaseException) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Install failed at {self.path}: {cause}")


class ProcessLifecycleError(TealupError):
    """Stopping or starting the language server failed."""

    pass


class InstallModeError(TealupError):
    """The requested operation is not permitted in the current install mode."""

    pass


class ProvisioningError(TealupError):
    """No usable tealsp executable could be found or installed."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        super().__init__(message)
