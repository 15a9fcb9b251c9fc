"""Local storage for the managed tealsp installation.

Writes are staged into a temporary file inside the install directory and
moved onto the final path with a single ``os.replace``, so readers (and a
language server launched concurrently) only ever see the previous file or
the complete new one.
"""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import List, Optional

from tealup.bootstrap.paths import ManagedInstallation
from tealup.core.errors import InstallIOError
from tealup.core.logging import get_logger

LOGGER = get_logger(__name__)

# Suffix of staged files awaiting their rename
PARTIAL_SUFFIX = ".partial"

_EXECUTE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class LocalInstallStore:
    """Owns the managed install directory and the files inside it."""

    def __init__(self, installation: ManagedInstallation, posix_permissions: bool = True) -> None:
        """Initialize the store.

        Args:
            installation: Layout of the managed install.
            posix_permissions: Whether the host uses POSIX mode bits
                (False on windows, where execute permission does not apply).
        """
        self._installation = installation
        self._posix_permissions = posix_permissions

    @property
    def installation(self) -> ManagedInstallation:
        return self._installation

    def ensure_directory(self) -> None:
        """Create the install directory if it does not exist."""
        install_dir = self._installation.install_dir
        try:
            install_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InstallIOError(install_dir, e) from e

    @staticmethod
    def exists(path: Path) -> bool:
        """Return True if ``path`` is an existing file; never raises."""
        try:
            return path.is_file()
        except OSError:
            return False

    def is_installed(self) -> bool:
        return self.exists(self._installation.executable_path)

    def _read(self, path: Path) -> Optional[bytes]:
        if not self.exists(path):
            return None
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise InstallIOError(path, e) from e

    def read_version_stamp(self) -> Optional[bytes]:
        """Return the local version stamp, or None when there is none."""
        return self._read(self._installation.version_stamp_path)

    def read_executable(self) -> Optional[bytes]:
        """Return the installed binary's bytes, or None when not installed."""
        return self._read(self._installation.executable_path)

    def atomic_replace(self, path: Path, data: bytes, executable: bool = False) -> None:
        """Replace ``path`` with ``data`` in a single rename.

        The bytes are written and synced to a staged file next to ``path``
        that takes the mode of the file it replaces (or the umask default);
        with ``executable`` the execute bits are set on the staged file
        before it becomes visible. On failure the staged file is removed and
        ``path`` keeps its previous contents.

        Raises:
            InstallIOError: If any step fails.
        """
        self.ensure_directory()

        try:
            fd, staged_name = tempfile.mkstemp(
                prefix=f".{path.name}.",
                suffix=PARTIAL_SUFFIX,
                dir=path.parent,
            )
        except OSError as e:
            raise InstallIOError(path, e) from e

        staged = Path(staged_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            if self._posix_permissions:
                staged.chmod(_initial_mode(path))
            if executable:
                self.mark_executable(staged)
            os.replace(staged, path)
        except BaseException as e:
            try:
                staged.unlink()
            except FileNotFoundError:
                pass
            except OSError as cleanup_error:
                LOGGER.warning(f"Could not remove staged file {staged}: {cleanup_error}")
            if isinstance(e, InstallIOError):
                raise
            if isinstance(e, OSError):
                raise InstallIOError(path, e) from e
            raise

        LOGGER.debug(f"Wrote {len(data)} bytes to {path}")

    def mark_executable(self, path: Path) -> None:
        """Add execute permission for owner, group and other.

        All other mode bits are preserved. Does nothing on hosts without
        POSIX permissions.

        Raises:
            InstallIOError: If the mode cannot be read or changed.
        """
        if not self._posix_permissions:
            return
        try:
            mode = stat.S_IMODE(path.stat().st_mode)
            path.chmod(mode | _EXECUTE_BITS)
        except OSError as e:
            raise InstallIOError(path, e) from e

    def discard_partials(self) -> List[Path]:
        """Remove staged files left behind by an interrupted install.

        Returns:
            The paths that were removed.
        """
        install_dir = self._installation.install_dir
        removed: List[Path] = []
        try:
            candidates = list(install_dir.glob(f".*{PARTIAL_SUFFIX}"))
        except OSError:
            return removed
        for candidate in candidates:
            try:
                candidate.unlink()
                removed.append(candidate)
            except OSError as e:
                LOGGER.warning(f"Could not remove leftover staged file {candidate}: {e}")
        if removed:
            LOGGER.info(f"Removed {len(removed)} leftover staged file(s) from {install_dir}")
        return removed


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def _initial_mode(path: Path) -> int:
    """Mode for a staged file: the replaced file's, else what open() would give."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return 0o666 & ~_current_umask()
