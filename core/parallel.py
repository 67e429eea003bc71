"""
Parallel computation components
Evaluates independent axis candidates on a thread pool
"""

import concurrent.futures
import threading
from collections.abc import Callable

import numpy as np

from .runtime import RuntimeContext


class ParallelAxisScan:
    """
    Parallel axis evaluation

    Each axis only reads the shared residue arrays and returns its own result,
    so axes can be evaluated in any order. Results are stored by axis index and
    returned in axis order once all workers have finished.
    """

    def __init__(self, num_workers: int = 1):
        """
        Args:
            num_workers: Number of parallel worker threads, default 1 (serial)
        """
        self.num_workers = num_workers

    def map(
        self,
        scan_axis: Callable[[np.ndarray, int], object],
        axis_points: np.ndarray,
        runtime: RuntimeContext | None = None,
        message: str = "Scanning axes",
    ) -> list:
        """
        Apply `scan_axis(point, index)` to every axis point

        Args:
            scan_axis: Per-axis evaluation
            axis_points: Axis points, shape (n_axes, 3)
            runtime: Checked for cancellation before every axis
            message: Progress message

        Returns:
            Per-axis results in axis order
        """
        n_axes = len(axis_points)

        if self.num_workers <= 1 or n_axes < 2:
            # Serial version
            results = []
            for i in range(n_axes):
                if runtime is not None:
                    runtime.checkpoint(message, i, n_axes)
                results.append(scan_axis(axis_points[i], i))
            if runtime is not None:
                runtime.checkpoint(message, n_axes, n_axes)
            return results

        results: list = [None] * n_axes
        done = 0
        done_lock = threading.Lock()

        def process_chunk(start: int, end: int):
            """Process a block of consecutive axes"""
            nonlocal done
            chunk = []
            for i in range(start, end):
                if runtime is not None:
                    with done_lock:
                        current = done
                    runtime.checkpoint(message, current, n_axes)
                chunk.append(scan_axis(axis_points[i], i))
                with done_lock:
                    done += 1
            return start, end, chunk

        # Chunked parallel processing
        chunk_size = max(1, n_axes // self.num_workers)

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.num_workers, thread_name_prefix="axis_worker"
        ) as executor:
            futures = [
                executor.submit(process_chunk, start, min(start + chunk_size, n_axes))
                for start in range(0, n_axes, chunk_size)
            ]

            # Collect results
            for future in concurrent.futures.as_completed(futures):
                start, end, chunk = future.result()
                results[start:end] = chunk

        if runtime is not None:
            runtime.checkpoint(message, n_axes, n_axes)
        return results
