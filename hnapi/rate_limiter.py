import logging
import time

log = logging.getLogger(__name__)


class RateLimiter:
    """Keeps a minimum interval between two requests sent to the site."""

    def __init__(
        self,
        min_interval_ms: float = 1000.0,
        start: bool = False,
        clock=time.perf_counter,
        sleep=time.sleep,
    ) -> None:
        self.min_interval = float(min_interval_ms) / 1000.0
        self._clock = clock
        self._sleep = sleep
        self._start = None
        if start:
            self.start()

    def start(self):
        self._start = self._clock()

    def wait_if_needed(self, reset: bool = True) -> float:
        """
        Sleep until the interval since the last start() has passed.

        The first call only starts the clock. Returns the number of seconds
        slept.
        """
        if self._start is None:
            if reset:
                self.start()
            return 0.0

        elapsed = self._clock() - self._start
        remaining = self.min_interval - elapsed
        slept = 0.0
        if remaining > 0:
            log.debug("Waiting %.3fs before the next request", remaining)
            self._sleep(remaining)
            slept = remaining

        if reset:
            self.start()
        else:
            self._start = None
        return slept
