"""Tests for subprocess helpers."""

from __future__ import annotations

import io
import logging
import subprocess
import sys

import pytest

from tealup.core.subprocess_runner import forward_stream, run_command


class TestRunCommand:
    def test_captures_output(self) -> None:
        result = run_command(
            [sys.executable, "-c", "import sys; print('out'); sys.stderr.write('err'); sys.exit(2)"],
            timeout=30,
        )
        assert result.returncode == 2
        assert result.stdout.strip() == "out"
        assert result.stderr == "err"

    def test_timeout_raises(self) -> None:
        with pytest.raises(subprocess.TimeoutExpired):
            run_command([sys.executable, "-c", "import time; time.sleep(30)"], timeout=0.5)

    def test_missing_command_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            run_command(["tealup-no-such-command-xyz"], timeout=5)


class TestForwardStream:
    def test_logs_each_line(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = logging.getLogger("tealup.tests.forward")
        stream = io.BytesIO(b"first\n\nsecond\r\n")

        with caplog.at_level(logging.INFO, logger="tealup.tests.forward"):
            thread = forward_stream(stream, logger, "tealsp")
            thread.join(timeout=5)

        messages = [r.getMessage() for r in caplog.records if r.name == "tealup.tests.forward"]
        assert messages == ["[tealsp] first", "[tealsp] second"]
        assert stream.closed

    def test_thread_is_daemon(self) -> None:
        thread = forward_stream(io.BytesIO(b""), logging.getLogger("x"), "tealsp")
        thread.join(timeout=5)
        assert thread.daemon
