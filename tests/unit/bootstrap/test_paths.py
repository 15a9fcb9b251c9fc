"""Tests for tealup home directory paths."""

from __future__ import annotations

from pathlib import Path

import pytest

from tealup.bootstrap.paths import (
    DEFAULT_HOME_DIR_NAME,
    TEALUP_HOME_ENV,
    TealupPaths,
    get_tealup_home,
)
from tealup.bootstrap.platform import PlatformInfo


class TestGetTealupHome:
    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(TEALUP_HOME_ENV, str(tmp_path / "custom"))
        assert get_tealup_home() == tmp_path / "custom"

    def test_default_under_user_home(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(TEALUP_HOME_ENV, raising=False)
        assert get_tealup_home() == Path.home() / DEFAULT_HOME_DIR_NAME


class TestTealupPaths:
    def test_subdirectories(self, tmp_path: Path) -> None:
        paths = TealupPaths(tmp_path)
        assert paths.bin_dir == tmp_path / "bin"
        assert paths.config_dir == tmp_path / "config"
        assert paths.logs_dir == tmp_path / "logs"
        assert paths.log_file == tmp_path / "logs" / "tealup.log"
        assert paths.global_config_file == tmp_path / "config" / "config.yml"

    def test_default_uses_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(TEALUP_HOME_ENV, str(tmp_path))
        assert TealupPaths.default().home == tmp_path


class TestManagedInstallation:
    def test_linux_layout(self, tmp_path: Path) -> None:
        installation = TealupPaths(tmp_path).managed_installation(
            PlatformInfo(os="linux", arch="amd64"), "stable"
        )
        assert installation.install_dir == tmp_path / "bin"
        assert installation.executable_path == tmp_path / "bin" / "tealsp"
        assert installation.version_stamp_path == tmp_path / "bin" / "tealsp-linux-amd64.version"
        assert installation.channel == "stable"

    def test_windows_layout(self, tmp_path: Path) -> None:
        installation = TealupPaths(tmp_path).managed_installation(
            PlatformInfo(os="windows", arch="arm64"), "prerelease"
        )
        assert installation.executable_path.name == "tealsp.exe"
        assert installation.version_stamp_path.name == "tealsp-windows-arm64.version"
