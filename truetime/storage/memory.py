import threading
from typing import Dict

from .base import CacheInterface


class MemoryCache(CacheInterface):

    def __init__(self):
        self._lock = threading.Lock()
        self._values: Dict[str, int] = {}

    def put(self, key: str, value: int) -> None:
        with self._lock:
            self._values[key] = int(value)

    def get(self, key: str, default: int) -> int:
        with self._lock:
            return self._values.get(key, default)

    def clear(self) -> None:
        with self._lock:
            self._values.clear()
