"""Liveness probing of tealsp candidates.

A probe runs a candidate executable with a cheap flag and classifies the
outcome. Only ``ProbeStatus.OK`` counts as usable; the other statuses exist
so that diagnostics can tell a missing binary from a broken one.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence

from tealup.core.logging import get_logger
from tealup.core.subprocess_runner import run_command

LOGGER = get_logger(__name__)

# Flag that makes tealsp print its usage and exit without serving
LIVENESS_ARGS = ("-help",)

DEFAULT_PROBE_TIMEOUT = 10.0


class ProbeStatus(str, Enum):
    """Outcome of a liveness probe."""

    OK = "ok"
    NOT_FOUND = "not_found"
    NOT_EXECUTABLE = "not_executable"
    SPAWN_ERROR = "spawn_error"
    NONZERO_EXIT = "nonzero_exit"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class ProbeResult:
    """Result of probing one candidate command.

    Attributes:
        command: The executable that was probed (path or bare name).
        status: Classified outcome.
        returncode: Exit code when the process ran to completion.
        detail: Human-readable detail for diagnostics.
    """

    command: str
    status: ProbeStatus
    returncode: Optional[int] = None
    detail: str = ""

    @property
    def usable(self) -> bool:
        return self.status == ProbeStatus.OK

    def describe(self) -> str:
        """Return a one-line description for logs and status output."""
        if self.usable:
            return f"{self.command}: ok"
        text = f"{self.command}: {self.status.value}"
        if self.returncode is not None:
            text += f" (exit code {self.returncode})"
        if self.detail:
            text += f" - {self.detail}"
        return text

    def to_dict(self) -> Dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "command": self.command,
            "status": self.status.value,
            "returncode": self.returncode,
            "detail": self.detail,
        }


def probe_executable(
    command: str,
    args: Sequence[str] = LIVENESS_ARGS,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> ProbeResult:
    """Run ``command`` with ``args`` and classify the outcome.

    Args:
        command: Executable path, or bare name to look up on the search path.
        args: Arguments that make the executable exit quickly.
        timeout: Seconds to wait before giving up.

    Returns:
        ProbeResult describing the outcome. Never raises for spawn failures.
    """
    cmd = [command, *args]
    try:
        completed = run_command(cmd, timeout=timeout)
    except FileNotFoundError as e:
        result = ProbeResult(command, ProbeStatus.NOT_FOUND, detail=str(e))
    except PermissionError as e:
        result = ProbeResult(command, ProbeStatus.NOT_EXECUTABLE, detail=str(e))
    except subprocess.TimeoutExpired:
        result = ProbeResult(
            command, ProbeStatus.TIMEOUT, detail=f"no exit after {timeout}s"
        )
    except OSError as e:
        result = ProbeResult(command, ProbeStatus.SPAWN_ERROR, detail=str(e))
    else:
        if completed.returncode == 0:
            result = ProbeResult(command, ProbeStatus.OK, returncode=0)
        else:
            stderr = (completed.stderr or "").strip().splitlines()
            result = ProbeResult(
                command,
                ProbeStatus.NONZERO_EXIT,
                returncode=completed.returncode,
                detail=stderr[-1] if stderr else "",
            )

    LOGGER.debug(f"Probe {result.describe()}")
    return result
