"""
Runtime context for cancellable, progress-reporting computations
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from .exceptions import ComputationCancelledError


@dataclass(frozen=True)
class ProgressUpdate:
    """Progress of the current phase"""

    message: str
    current: int
    total: int

    @property
    def fraction(self) -> float:
        return self.current / self.total if self.total > 0 else 1.0


ProgressCallback = Callable[[ProgressUpdate], None]


class RuntimeContext:
    """
    Cancellation flag and rate-limited progress reporting.

    The computation calls `checkpoint` at axis boundaries. A checkpoint raises
    ComputationCancelledError once `cancel` has been requested (from any
    thread) and forwards progress to the callback at most once per
    `update_interval` seconds. The last update of a phase is always delivered.
    """

    def __init__(
        self,
        progress_callback: ProgressCallback | None = None,
        update_interval: float = 0.25,
    ):
        self.progress_callback = progress_callback
        self.update_interval = update_interval
        self._cancel_event = threading.Event()
        self._lock = threading.Lock()
        self._last_update = float("-inf")

    def cancel(self):
        """Request cancellation"""
        self._cancel_event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def check_cancelled(self):
        if self._cancel_event.is_set():
            raise ComputationCancelledError("Membrane topology computation was cancelled")

    def checkpoint(self, message: str, current: int = 0, total: int = 0):
        """Cancellation check plus progress report"""
        self.check_cancelled()
        if self.progress_callback is None:
            return

        now = time.monotonic()
        with self._lock:
            final = total > 0 and current >= total
            if not final and now - self._last_update < self.update_interval:
                return
            self._last_update = now
        self.progress_callback(ProgressUpdate(message, current, total))
