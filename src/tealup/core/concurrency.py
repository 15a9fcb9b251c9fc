"""Single-flight execution for operations that must never overlap."""

from __future__ import annotations

import threading
from concurrent.futures import Future
from typing import Callable, Dict, TypeVar

from tealup.core.logging import get_logger

LOGGER = get_logger(__name__)

T = TypeVar("T")


class SingleFlight:
    """Collapse concurrent calls for the same key into one execution.

    The first caller for a key runs the operation. Callers arriving while it
    is in flight block until it finishes and receive the same result, or the
    same exception. Once finished, the next call for the key runs again.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._inflight: Dict[str, Future] = {}

    def in_flight(self, key: str) -> bool:
        """Return True while an operation for ``key`` is running."""
        with self._lock:
            return key in self._inflight

    def do(self, key: str, fn: Callable[[], T]) -> T:
        with self._lock:
            future = self._inflight.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._inflight[key] = future

        if not owner:
            LOGGER.info(f"'{key}' already in progress, waiting for it to finish")
            return future.result()

        try:
            result = fn()
        except BaseException as e:
            future.set_exception(e)
            raise
        else:
            future.set_result(result)
            return result
        finally:
            with self._lock:
                del self._inflight[key]
