"""
Progress accounting for one extraction session.

Multi-page, multi-stage work is folded into a single integer between 0 and
100. Page i of n finishing maps to round(i / n * 100); a recognition step on
page i reporting fraction p maps to round((p + i - 1) / n * 100).
"""

from typing import Callable, List, Optional

from .utils import setup_logger, round_half_up


logger = setup_logger(__name__)


ProgressSink = Callable[[int], None]


class ProgressAggregator:
    """Non-decreasing 0-100 progress value forwarded to an optional sink."""
    
    def __init__(self, sink: Optional[ProgressSink] = None):
        self.sink = sink
        self.value = 0
        self.history: List[int] = []
        self.failed = False
    
    def reset(self):
        """Start a new session at 0."""
        self.value = 0
        self.history = []
        self.failed = False
        self._emit(0)
    
    def report(self, value: int):
        """Report a new value; lower or repeated values are ignored."""
        if self.failed:
            return
        value = max(0, min(100, value))
        if value <= self.value and self.history:
            return
        self.value = value
        self._emit(value)
    
    def page_done(self, page_number: int, page_count: int):
        """Page ``page_number`` (1-based) of ``page_count`` has finished."""
        self.report(round_half_up(page_number / page_count * 100))
    
    def recognition_progress(self, fraction: float, page_number: int, page_count: int):
        """Fractional recognition progress on page ``page_number`` (1-based)."""
        fraction = max(0.0, min(1.0, fraction))
        self.report(round_half_up((fraction + (page_number - 1)) / page_count * 100))
    
    def page_callback(self, page_number: int, page_count: int) -> Callable[[float], None]:
        """Bind recognition progress for one page into a fraction callback."""
        def callback(fraction: float):
            self.recognition_progress(fraction, page_number, page_count)
        return callback
    
    def complete(self):
        self.report(100)
    
    def fail(self):
        """Stop reporting; the last value stays where it was."""
        logger.debug(f"Progress frozen at {self.value}%")
        self.failed = True
    
    def _emit(self, value: int):
        self.history.append(value)
        if self.sink:
            self.sink(value)
