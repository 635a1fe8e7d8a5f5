"""Named stopwatches for timing parts of the indexer."""

from __future__ import annotations

import logging
import threading
import time

logger = logging.getLogger(__name__)


class PerfTimeWatch:
    """A stopwatch measuring the span between start and end."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end = 0.0

    def start(self) -> None:
        """Record the start time."""
        self._start = time.monotonic()

    def end(self) -> None:
        """Record the end time."""
        self._end = time.monotonic()

    def elapsed(self) -> int:
        """Milliseconds between the recorded start and end."""
        return int((self._end - self._start) * 1000)


class PerfChecker:
    """A set of named stopwatches, safe to use from several threads."""

    def __init__(self) -> None:
        self._watches: dict[str, PerfTimeWatch] = {}
        self._lock = threading.Lock()

    def add(self, name: str) -> bool:
        """Create a stopwatch for name unless one exists."""
        with self._lock:
            self._watches.setdefault(name, PerfTimeWatch())
        return True

    def start(self, name: str) -> bool:
        """Start the named stopwatch; False if there is none."""
        with self._lock:
            watch = self._watches.get(name)
            if watch is None:
                logger.info("No Performance checker for %s", name)
                return False
            watch.start()
        return True

    def end(self, name: str) -> int:
        """Stop the named stopwatch and return elapsed milliseconds, 0 if there is none."""
        with self._lock:
            watch = self._watches.get(name)
            if watch is None:
                logger.info("No Performance checker for %s", name)
                return 0
            watch.end()
            return watch.elapsed()