import io
import threading

import numpy as np
import pytest

from core.exceptions import AnvilError, ComputationCancelledError
from core.parallel import ParallelAxisScan
from core.runtime import ProgressUpdate, RuntimeContext
from utils.progress import ProgressBar


def test_cancel_stops_at_next_checkpoint():
    runtime = RuntimeContext()
    runtime.checkpoint("before")

    runtime.cancel()
    assert runtime.is_cancelled
    with pytest.raises(ComputationCancelledError):
        runtime.checkpoint("after")


def test_cancellation_is_not_a_failure():
    assert not issubclass(ComputationCancelledError, AnvilError)


def test_progress_is_rate_limited():
    updates = []
    runtime = RuntimeContext(updates.append, update_interval=3600.0)

    for i in range(10):
        runtime.checkpoint("scan", i, 10)
    runtime.checkpoint("scan", 10, 10)

    # first update plus the final one
    assert [(u.current, u.total) for u in updates] == [(0, 10), (10, 10)]


def test_every_update_without_interval():
    updates = []
    runtime = RuntimeContext(updates.append, update_interval=0.0)
    for i in range(5):
        runtime.checkpoint("scan", i, 5)

    assert [u.current for u in updates] == [0, 1, 2, 3, 4]
    assert updates[2].fraction == pytest.approx(0.4)
    assert ProgressUpdate("phase", 0, 0).fraction == 1.0


def scan_index(point, index):
    return index, float(point[0])


@pytest.mark.parametrize("workers", [1, 3, 8])
def test_results_are_returned_in_axis_order(workers):
    points = np.arange(60, dtype=float).reshape(20, 3)
    results = ParallelAxisScan(workers).map(scan_index, points)

    assert results == [(i, float(3 * i)) for i in range(20)]


def test_parallel_scan_reports_progress():
    updates = []
    runtime = RuntimeContext(updates.append, update_interval=0.0)
    points = np.zeros((12, 3))

    ParallelAxisScan(4).map(scan_index, points, runtime=runtime, message="axes")

    assert all(u.message == "axes" for u in updates)
    assert (updates[-1].current, updates[-1].total) == (12, 12)
    assert len(updates) == 13


def test_parallel_scan_propagates_errors():
    def explode(point, index):
        if index == 5:
            raise ValueError("bad axis")
        return index

    with pytest.raises(ValueError):
        ParallelAxisScan(4).map(explode, np.zeros((10, 3)))


def test_parallel_scan_honours_cancellation():
    runtime = RuntimeContext()
    calls = []
    lock = threading.Lock()

    def cancel_after_first(point, index):
        with lock:
            calls.append(index)
        runtime.cancel()
        return index

    with pytest.raises(ComputationCancelledError):
        ParallelAxisScan(2).map(cancel_after_first, np.zeros((40, 3)), runtime=runtime)
    assert len(calls) < 40


def test_progress_bar_as_callback():
    stream = io.StringIO()
    bar = ProgressBar(stream=stream)

    bar(ProgressUpdate("Computing surface area", 0, 0))
    for i in range(5):
        bar(ProgressUpdate("Initial axis scan", i, 4))

    output = stream.getvalue()
    assert output.startswith("Computing surface area\n")
    assert "Initial axis scan |" in output
    assert "100.0% (4/4)" in output
    assert output.endswith("\n")
