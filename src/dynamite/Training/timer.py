import logging
import time
from typing import Optional


class ScopeTimer:
    """
    Context manager timing the wall clock duration of a block.
    Logs "<label>: <seconds> sec" on exit when given a logger;
    the duration stays available as .elapsed.
    """
    def __init__(self, label: str, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self.label = label
        self.logger = logger
        self.level = level
        self.elapsed = 0.0
        self._start = None

    def __enter__(self) -> "ScopeTimer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.elapsed = time.perf_counter() - self._start
        if self.logger is not None:
            self.logger.log(self.level, "%s: %.6f sec", self.label, self.elapsed)
        return False
