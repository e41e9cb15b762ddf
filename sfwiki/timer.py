"""High-resolution timing of events with optional logging."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from .logfile import SYSTEM_LOG, LogFile

_NANOSECONDS_PER_SECOND = 1_000_000_000


def timer_frequency() -> int:
    """Number of timer ticks per second."""
    return _NANOSECONDS_PER_SECOND


@dataclass
class Timer:
    """Measures the time between :meth:`start` and :meth:`stop`."""

    start_time: int = 0
    end_time: int = 0
    log: LogFile | None = field(default=None, repr=False, compare=False)

    def start(self) -> None:
        self.start_time = time.perf_counter_ns()

    def stop(self, message: str | None = None) -> float:
        """Stop timing, log ``message`` with the duration if given, and return seconds."""
        self.end_time = time.perf_counter_ns()
        if message is not None:
            self._output_log(message)
        return self.delta()

    def delta(self) -> float:
        """Seconds between start and stop; 0.0 if either has not happened."""
        if self.start_time <= 1 or self.end_time <= 1:
            return 0.0
        return (self.end_time - self.start_time) / timer_frequency()

    def _output_log(self, message: str | None) -> None:
        log = self.log if self.log is not None else SYSTEM_LOG
        log.printf("%s %g seconds", message or "Timer =", self.delta())

    def __enter__(self) -> Timer:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()