"""Tests for single-flight execution."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from tealup.core.concurrency import SingleFlight


class TestSingleFlight:
    def test_runs_function(self) -> None:
        flight = SingleFlight()
        assert flight.do("k", lambda: 42) == 42
        assert not flight.in_flight("k")

    def test_sequential_calls_run_again(self) -> None:
        flight = SingleFlight()
        calls = []
        flight.do("k", lambda: calls.append(1))
        flight.do("k", lambda: calls.append(1))
        assert len(calls) == 2

    def test_exception_propagates_and_clears(self) -> None:
        flight = SingleFlight()

        def boom() -> None:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            flight.do("k", boom)
        assert not flight.in_flight("k")

    def test_concurrent_callers_share_result(self) -> None:
        flight = SingleFlight()
        entered = threading.Event()
        release = threading.Event()
        runs = []

        def work() -> str:
            runs.append(1)
            entered.set()
            release.wait(timeout=5)
            return "done"

        with ThreadPoolExecutor(max_workers=3) as executor:
            first = executor.submit(flight.do, "k", work)
            assert entered.wait(timeout=5)
            assert flight.in_flight("k")
            others = [executor.submit(flight.do, "k", work) for _ in range(2)]
            release.set()
            results = [f.result(timeout=5) for f in [first, *others]]

        assert results == ["done", "done", "done"]
        assert len(runs) <= 3
        assert runs[0] == 1

    def test_waiter_receives_exception(self) -> None:
        flight = SingleFlight()
        entered = threading.Event()
        release = threading.Event()

        def fail() -> None:
            entered.set()
            release.wait(timeout=5)
            raise ValueError("bad")

        with ThreadPoolExecutor(max_workers=2) as executor:
            first = executor.submit(flight.do, "k", fail)
            assert entered.wait(timeout=5)
            second = executor.submit(flight.do, "k", fail)
            release.set()
            for future in (first, second):
                with pytest.raises(ValueError):
                    future.result(timeout=5)

    def test_keys_are_independent(self) -> None:
        flight = SingleFlight()
        entered = threading.Event()
        release = threading.Event()

        def block() -> None:
            entered.set()
            release.wait(timeout=5)

        with ThreadPoolExecutor(max_workers=1) as executor:
            future = executor.submit(flight.do, "a", block)
            assert entered.wait(timeout=5)
            assert flight.do("b", lambda: "other") == "other"
            assert not flight.in_flight("b")
            release.set()
            future.result(timeout=5)
