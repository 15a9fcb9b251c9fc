"""Tests for the tealup error taxonomy."""

from __future__ import annotations

from pathlib import Path

from tealup.core.errors import (
    ConfigError,
    InstallIOError,
    ProvisioningError,
    ReleaseFetchError,
    RemoteNotFoundError,
    TealupError,
    TransportError,
    UnsupportedPlatformError,
)


class TestErrors:
    def test_hierarchy(self) -> None:
        assert issubclass(ConfigError, TealupError)
        assert issubclass(TransportError, ReleaseFetchError)
        assert issubclass(RemoteNotFoundError, ReleaseFetchError)
        assert issubclass(UnsupportedPlatformError, ValueError)

    def test_remote_not_found_message(self) -> None:
        error = RemoteNotFoundError("https://host/stable/tealsp", 404, "Not Found")
        assert error.status == 404
        assert error.url == "https://host/stable/tealsp"
        assert str(error) == "HTTP 404 - Not Found (https://host/stable/tealsp)"

    def test_transport_message(self) -> None:
        error = TransportError("https://host/x", "timed out")
        assert error.reason == "timed out"
        assert "https://host/x" in str(error)

    def test_install_io_error_carries_path_and_cause(self) -> None:
        cause = PermissionError(13, "Permission denied")
        error = InstallIOError("/home/u/.tealup/bin/tealsp", cause)
        assert error.path == Path("/home/u/.tealup/bin/tealsp")
        assert error.cause is cause
        assert "Permission denied" in str(error)
        assert str(Path("/home/u/.tealup/bin/tealsp")) in str(error)

    def test_provisioning_error_cause(self) -> None:
        cause = TransportError("https://host", "down")
        error = ProvisioningError("no tealsp", cause=cause)
        assert error.cause is cause
        assert str(error) == "no tealsp"
