"""Subprocess-backed tealsp language server."""

from __future__ import annotations

import subprocess
import threading
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from tealup.core.errors import ProcessLifecycleError
from tealup.core.logging import get_logger
from tealup.core.subprocess_runner import forward_stream
from tealup.server.base import ProcessHandle

LOGGER = get_logger(__name__)

DEFAULT_STOP_TIMEOUT = 5.0


class LanguageServerProcess(ProcessHandle):
    """Runs tealsp as a child process.

    With ``attach_stdio`` the child inherits this process's stdin and
    stdout, which is how an editor talks to the server through
    ``tealup run``. The child's stderr is always forwarded to the log.
    """

    def __init__(
        self,
        features: Optional[Mapping[str, Any]] = None,
        stop_timeout: float = DEFAULT_STOP_TIMEOUT,
        attach_stdio: bool = True,
        cwd: Optional[Path] = None,
    ) -> None:
        self._features = dict(features or {})
        self._stop_timeout = stop_timeout
        self._attach_stdio = attach_stdio
        self._cwd = cwd
        self._lock = threading.RLock()
        self._process: Optional[subprocess.Popen] = None
        self._returncode: Optional[int] = None

    @property
    def initialization_options(self) -> Dict[str, Any]:
        """Feature toggles to hand to the protocol client, passed through as-is."""
        return dict(self._features)

    @property
    def pid(self) -> Optional[int]:
        with self._lock:
            return self._process.pid if self._process is not None else None

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._process is not None and self._process.poll() is None

    def start(
        self,
        executable_path: Union[str, Path],
        debug_args: Optional[Sequence[str]] = None,
    ) -> None:
        cmd = [str(executable_path), *(debug_args or ())]
        with self._lock:
            if self._process is not None:
                LOGGER.info("Restarting tealsp")
                self._stop_locked()

            stdio = None if self._attach_stdio else subprocess.DEVNULL
            try:
                process = subprocess.Popen(
                    cmd,
                    stdin=stdio,
                    stdout=stdio,
                    stderr=subprocess.PIPE,
                    cwd=str(self._cwd) if self._cwd is not None else None,
                )
            except OSError as e:
                raise ProcessLifecycleError(
                    f"Failed to start {' '.join(cmd)}: {e}"
                ) from e

            self._process = process
            self._returncode = None

        if process.stderr is not None:
            forward_stream(process.stderr, LOGGER, "tealsp")
        LOGGER.info(f"Started tealsp (pid {process.pid}): {' '.join(cmd)}")

    def stop(self) -> None:
        with self._lock:
            self._stop_locked()

    def _stop_locked(self) -> None:
        process = self._process
        if process is None:
            return
        self._process = None

        if process.poll() is not None:
            self._returncode = process.returncode
            LOGGER.debug(f"tealsp (pid {process.pid}) already exited with {process.returncode}")
            return

        try:
            process.terminate()
            try:
                self._returncode = process.wait(timeout=self._stop_timeout)
            except subprocess.TimeoutExpired:
                LOGGER.warning(
                    f"tealsp (pid {process.pid}) did not exit within "
                    f"{self._stop_timeout}s, killing it"
                )
                process.kill()
                self._returncode = process.wait(timeout=self._stop_timeout)
        except (OSError, subprocess.SubprocessError) as e:
            raise ProcessLifecycleError(
                f"Failed to stop tealsp (pid {process.pid}): {e}"
            ) from e

        LOGGER.info(f"Stopped tealsp (pid {process.pid})")

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        """Block until the current child exits and return its exit code.

        Returns the last known exit code immediately when nothing is
        running. A restart replaces the child, so callers that want to
        follow restarts should call this again while :attr:`is_running`.

        Raises:
            subprocess.TimeoutExpired: If ``timeout`` elapses first.
        """
        with self._lock:
            process = self._process
            if process is None:
                return self._returncode
        return process.wait(timeout=timeout)
