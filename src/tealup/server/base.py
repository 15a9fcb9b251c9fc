from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence, Union


class ProcessHandle(ABC):
    """Base class for the long-lived process wrapping the tealsp executable.

    The lifecycle coordinator only ever calls :meth:`start` and
    :meth:`stop`; it never inspects the process state.
    """

    @abstractmethod
    def start(
        self,
        executable_path: Union[str, Path],
        debug_args: Optional[Sequence[str]] = None,
    ) -> None:
        """Start the process, restarting it if it is already running.

        Args:
            executable_path: Path or bare command name of tealsp.
            debug_args: Extra arguments enabling server-side debugging.
        """

    @abstractmethod
    def stop(self) -> None:
        """Stop the process.

        Must be safe to call on an already-stopped or never-started process.
        """


class NullProcessHandle(ProcessHandle):
    """No-op handle for one-shot commands that have no server attached.

    Use this when installing or upgrading outside ``tealup run`` - the next
    server start simply picks up whatever binary is on disk.
    """

    def start(
        self,
        executable_path: Union[str, Path],
        debug_args: Optional[Sequence[str]] = None,
    ) -> None:
        """No-op start."""
        pass

    def stop(self) -> None:
        """No-op stop."""
        pass
