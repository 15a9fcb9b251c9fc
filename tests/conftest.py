"""Shared fixtures for tealup tests."""

from __future__ import annotations

import logging
import stat
import sys
import threading
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

import pytest

from tealup.bootstrap.context import ProvisioningContext, build_context
from tealup.bootstrap.download import RemoteRelease
from tealup.bootstrap.paths import TealupPaths
from tealup.bootstrap.platform import PlatformInfo
from tealup.config.models import TealupConfig
from tealup.server.base import ProcessHandle


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point TEALUP_HOME at a temp dir so no test touches ~/.tealup."""
    home = tmp_path / "tealup-home"
    monkeypatch.setenv("TEALUP_HOME", str(home))
    monkeypatch.delenv("TEALUP_DEVELOPMENT", raising=False)
    return home


class FakeReleaseClient:
    """In-memory stand-in for ReleaseClient.

    ``gate`` (when set) blocks fetch_release until released, so tests can
    hold an install in flight.
    """

    def __init__(self, binary: bytes = b"tealsp-v2", version_stamp: bytes = b"v2") -> None:
        self.binary = binary
        self.version_stamp = version_stamp
        self.error: Optional[Exception] = None
        self.stamp_error: Optional[Exception] = None
        self.gate: Optional[threading.Event] = None
        self.started = threading.Event()
        self.release_calls = 0
        self.stamp_calls = 0
        self._lock = threading.Lock()

    def binary_url(self, channel: str) -> str:
        return f"https://example.invalid/{channel}/tealsp"

    def fetch_release(self, channel: str) -> RemoteRelease:
        with self._lock:
            self.release_calls += 1
        self.started.set()
        if self.gate is not None:
            self.gate.wait(timeout=10)
        if self.error is not None:
            raise self.error
        return RemoteRelease(
            channel=channel,
            platform=PlatformInfo(os="linux", arch="amd64"),
            binary=self.binary,
            version_stamp=self.version_stamp,
        )

    def fetch_version_stamp(self, channel: str) -> bytes:
        with self._lock:
            self.stamp_calls += 1
        if self.stamp_error is not None:
            raise self.stamp_error
        return self.version_stamp


class RecordingProcess(ProcessHandle):
    """ProcessHandle that records calls instead of spawning anything."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, ...]] = []
        self.stop_error: Optional[Exception] = None
        self.start_error: Optional[Exception] = None
        self.on_stop: Optional[Callable[[], None]] = None

    def start(
        self,
        executable_path: Union[str, Path],
        debug_args: Optional[Sequence[str]] = None,
    ) -> None:
        self.calls.append(("start", str(executable_path), *(debug_args or ())))
        if self.start_error is not None:
            raise self.start_error

    def stop(self) -> None:
        self.calls.append(("stop",))
        if self.on_stop is not None:
            self.on_stop()
        if self.stop_error is not None:
            raise self.stop_error

    @property
    def actions(self) -> List[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def linux_platform() -> PlatformInfo:
    return PlatformInfo(os="linux", arch="amd64")


@pytest.fixture
def fake_client() -> FakeReleaseClient:
    return FakeReleaseClient()


@pytest.fixture
def recording_process() -> RecordingProcess:
    return RecordingProcess()


@pytest.fixture
def make_context(
    tmp_path: Path,
    linux_platform: PlatformInfo,
    fake_client: FakeReleaseClient,
    recording_process: RecordingProcess,
) -> Callable[..., ProvisioningContext]:
    """Build a ProvisioningContext wired to the fakes."""

    def factory(config: Optional[TealupConfig] = None, **overrides: object) -> ProvisioningContext:
        context = build_context(
            config or TealupConfig(channel="stable"),
            recording_process,
            paths=TealupPaths(tmp_path / "home"),
            platform_info=linux_platform,
        )
        context.client = fake_client  # type: ignore[assignment]
        for name, value in overrides.items():
            setattr(context, name, value)
        return context

    return factory


def write_script(path: Path, body: str) -> Path:
    """Write an executable Python script that runs with this interpreter."""
    path.write_text(f"#!{sys.executable}\n{body}\n", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


@pytest.fixture
def script_factory(tmp_path: Path) -> Callable[[str, str], Path]:
    def factory(name: str, body: str) -> Path:
        return write_script(tmp_path / name, body)

    return factory


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo configure_logging() calls made by the code under test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
