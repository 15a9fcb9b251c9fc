"""Tests for logging configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tealup.core.logging import configure_logging, get_logger


class TestConfigureLogging:
    @pytest.mark.parametrize(
        "flags,expected",
        [
            ({}, logging.WARNING),
            ({"verbose": True}, logging.INFO),
            ({"debug": True}, logging.DEBUG),
            ({"debug": True, "quiet": True}, logging.ERROR),
        ],
    )
    def test_levels(self, flags, expected: int) -> None:
        configure_logging(**flags)
        assert logging.getLogger().level == expected

    def test_log_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "tealup.log"
        configure_logging(verbose=True, log_file=log_file)

        get_logger("tealup.tests").info("hello file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "hello file" in log_file.read_text(encoding="utf-8")


class TestGetLogger:
    def test_named(self) -> None:
        assert get_logger("tealup.x").name == "tealup.x"
