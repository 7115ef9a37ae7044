import time
from abc import ABC, abstractmethod

import psutil


class Clock(ABC):
    """Source of wall-clock and monotonic readings, in milliseconds."""

    @abstractmethod
    def wall_ms(self) -> int:
        pass

    @abstractmethod
    def monotonic_ms(self) -> int:
        pass

    def boot_time_ms(self) -> int:
        return self.wall_ms() - self.monotonic_ms()


class SystemClock(Clock):

    def __init__(self):
        # CLOCK_BOOTTIME keeps counting through suspend; not every platform has it
        self._clock_id = getattr(time, "CLOCK_BOOTTIME", None)

    def wall_ms(self) -> int:
        return time.time_ns() // 1_000_000

    def monotonic_ms(self) -> int:
        if self._clock_id is not None:
            return time.clock_gettime_ns(self._clock_id) // 1_000_000
        return time.monotonic_ns() // 1_000_000

    def boot_time_ms(self) -> int:
        return int(psutil.boot_time() * 1000)
