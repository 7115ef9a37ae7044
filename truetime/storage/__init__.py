"""Storage Layer - persistent key/value cache for true time."""

from .base import CacheInterface
from .memory import MemoryCache
from .file import FileCache
from .disk_cache import DiskCacheClient

__all__ = [
    "CacheInterface",
    "MemoryCache",
    "FileCache",
    "DiskCacheClient",
]
