import os
import json
import logging
import threading
from pathlib import Path
from typing import Dict

from truetime.utils.exceptions import CacheError
from .base import CacheInterface

logger = logging.getLogger(__name__)


class FileCache(CacheInterface):
    """JSON-backed cache file.

    Every ``put`` rewrites the whole file through a temporary file and
    ``os.replace`` so a crash never leaves a half-written cache behind.
    """

    FILE_NAME = ".truetime_cache.json"

    def __init__(self, path: str = None):
        self.path = str(path) if path else FileCache.default_path()
        self._lock = threading.Lock()

    @staticmethod
    def default_path() -> str:
        # Sits beside, not inside, a ~/.truetime settings file
        return str(Path.home() / FileCache.FILE_NAME)

    def _load(self) -> Dict[str, int]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.debug("Ignoring unreadable cache file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, int)}

    def _save(self, values: Dict[str, int]):
        tmp = self.path + ".tmp"
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(values, f, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except OSError as e:
            raise CacheError(f"Cannot write cache file {self.path}: {e}") from e

    def put(self, key: str, value: int) -> None:
        with self._lock:
            values = self._load()
            values[key] = int(value)
            self._save(values)

    def put_many(self, values: Dict[str, int]) -> None:
        """Write several keys in one file replacement."""
        with self._lock:
            current = self._load()
            current.update({k: int(v) for k, v in values.items()})
            self._save(current)

    def get(self, key: str, default: int) -> int:
        with self._lock:
            return self._load().get(key, default)

    def clear(self) -> None:
        with self._lock:
            if not os.path.exists(self.path):
                return
            try:
                os.remove(self.path)
            except OSError as e:
                raise CacheError(f"Cannot remove cache file {self.path}: {e}") from e
