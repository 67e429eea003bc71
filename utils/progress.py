"""
Progress Bar Utility
"""

import sys
import time

from core.runtime import ProgressUpdate


class ProgressBar:
    """A simple text progress bar for the phases of a computation."""

    def __init__(
        self,
        total: int = 0,
        prefix: str = "",
        length: int = 40,
        fill: str = "#",
        stream=None,
    ):
        """
        Args:
            total: Total number of iterations of the current phase.
            prefix: Text to display before the progress bar.
            length: Character length of the progress bar.
            fill: Character used to fill the completed portion.
            stream: Output stream (default: stderr).
        """
        self.total = total
        self.prefix = prefix
        self.length = length
        self.fill = fill
        self.stream = stream if stream is not None else sys.stderr
        self.start_time = time.time()
        self.current = 0

    def render(self, iteration: int) -> str:
        """Text of the bar for the given iteration."""
        fraction = iteration / float(self.total) if self.total > 0 else 1.0
        filled_length = int(self.length * fraction)
        bar = self.fill * filled_length + "-" * (self.length - filled_length)

        elapsed = time.time() - self.start_time
        if 0 < iteration < self.total:
            eta = (elapsed / iteration) * (self.total - iteration)
            eta_str = f"ETA: {eta:.1f}s"
        else:
            eta_str = f"{elapsed:.1f}s"

        return f"{self.prefix} |{bar}| {100 * fraction:5.1f}% ({iteration}/{self.total}) {eta_str}"

    def update(self, iteration: int):
        """Updates the progress bar display for the given iteration."""
        self.current = iteration
        self.stream.write("\r" + self.render(iteration))
        self.stream.flush()

    def finish(self):
        """Ends the current line."""
        self.stream.write("\n")
        self.stream.flush()

    def __call__(self, update: ProgressUpdate):
        """
        Progress callback for RuntimeContext.

        A new message starts a new bar; phases without a total are printed
        as a single line.
        """
        if update.message != self.prefix:
            if self.prefix and self.total > 0 and self.current < self.total:
                self.finish()
            self.prefix = update.message
            self.total = update.total
            self.current = 0
            self.start_time = time.time()
            if update.total <= 0:
                self.stream.write(f"{update.message}\n")
                self.stream.flush()
                return

        if update.total > 0:
            self.update(update.current)
            if update.current >= update.total:
                self.finish()
