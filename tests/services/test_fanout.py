"""Tests for the concurrent fetch helper."""

from __future__ import annotations

import threading
import time

import pytest

from fx_intel.services.fanout import gather


def test_gather_returns_results_in_call_order():
    def slow():
        time.sleep(0.05)
        return "slow"

    assert gather(slow, lambda: "fast") == ["slow", "fast"]


def test_gather_runs_calls_concurrently():
    barrier = threading.Barrier(2, timeout=2)

    def wait():
        barrier.wait()
        return True

    assert gather(wait, wait) == [True, True]


def test_gather_waits_for_all_calls_before_raising():
    finished = []

    def fail():
        raise RuntimeError("first")

    def slow():
        time.sleep(0.05)
        finished.append("slow")
        return 1

    with pytest.raises(RuntimeError, match="first"):
        gather(fail, slow)

    assert finished == ["slow"]


def test_gather_reraises_earliest_failure_in_argument_order():
    def late_failure():
        time.sleep(0.05)
        raise ValueError("earliest argument")

    def early_failure():
        raise KeyError("later argument")

    with pytest.raises(ValueError, match="earliest argument"):
        gather(late_failure, early_failure)


def test_gather_handles_trivial_inputs():
    assert gather() == []
    assert gather(lambda: 3) == [3]
