"""Language server process management."""

from tealup.server.base import NullProcessHandle, ProcessHandle
from tealup.server.process import LanguageServerProcess

__all__ = [
    "ProcessHandle",
    "NullProcessHandle",
    "LanguageServerProcess",
]
