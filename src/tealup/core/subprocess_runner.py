"""Subprocess helpers.

Runs short-lived commands with captured output, and pumps the output of
long-lived processes into the logging system line by line.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from pathlib import Path
from typing import IO, List, Optional, Union


def run_command(
    cmd: List[str],
    timeout: float,
    cwd: Optional[Union[str, Path]] = None,
) -> subprocess.CompletedProcess:
    """Run a command to completion and capture its output.

    Args:
        cmd: Command and arguments to run.
        timeout: Timeout in seconds.
        cwd: Optional working directory.

    Returns:
        CompletedProcess with stdout/stderr captured as text.

    Raises:
        subprocess.TimeoutExpired: If the command times out.
        OSError: If the command cannot be spawned.
    """
    return subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        cwd=str(cwd) if cwd is not None else None,
        timeout=timeout,
        stdin=subprocess.DEVNULL,
    )


def forward_stream(
    stream: IO[bytes],
    logger: logging.Logger,
    tool_name: str,
    level: int = logging.INFO,
) -> threading.Thread:
    """Log every line of ``stream`` from a daemon thread.

    The thread ends when the stream reaches EOF, which happens when the
    process owning it exits.

    Args:
        stream: Binary stream to read (e.g. ``Popen.stderr``).
        logger: Logger receiving the lines.
        tool_name: Prefix identifying the process in log records.
        level: Logging level for the forwarded lines.

    Returns:
        The started reader thread.
    """

    def read_stream() -> None:
        try:
            for raw in iter(stream.readline, b""):
                line = raw.decode("utf-8", errors="replace").rstrip("\n\r")
                if line:
                    logger.log(level, f"[{tool_name}] {line}")
        except (OSError, ValueError) as e:
            logger.debug(f"[{tool_name}] output stream closed: {e}")
        finally:
            try:
                stream.close()
            except OSError:
                pass

    thread = threading.Thread(
        target=read_stream,
        name=f"{tool_name}-output",
        daemon=True,
    )
    thread.start()
    return thread
