import threading
from dataclasses import dataclass
from typing import Optional

from truetime.utils.exceptions import CacheNotInitializedError


@dataclass(frozen=True)
class CachedTrueTime:
    true_time_ms: int
    monotonic_ms: int

    def reconstruct(self, now_monotonic_ms: int) -> int:
        return self.true_time_ms + (now_monotonic_ms - self.monotonic_ms)


class ResultCache:
    """Most recent true time paired with the monotonic reading taken at receipt.

    The pair lives in one immutable snapshot that is swapped whole, so a
    reader never sees a new true time with a stale monotonic reading.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot: Optional[CachedTrueTime] = None

    def record(self, true_time_ms: int, monotonic_ms: int) -> CachedTrueTime:
        snapshot = CachedTrueTime(true_time_ms, monotonic_ms)
        with self._lock:
            self._snapshot = snapshot
        return snapshot

    def restore(self, snapshot: CachedTrueTime) -> None:
        with self._lock:
            self._snapshot = snapshot

    def snapshot(self) -> Optional[CachedTrueTime]:
        with self._lock:
            return self._snapshot

    @property
    def initialized(self) -> bool:
        return self.snapshot() is not None

    def reconstruct(self, now_monotonic_ms: int) -> int:
        snapshot = self.snapshot()
        if snapshot is None:
            raise CacheNotInitializedError("No SNTP result has been cached yet")
        return snapshot.reconstruct(now_monotonic_ms)

    def clear(self) -> None:
        with self._lock:
            self._snapshot = None
