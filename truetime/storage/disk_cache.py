import logging
from typing import Optional

from truetime.protocol.cache import CachedTrueTime
from truetime.utils.constants import BOOT_TIME_TOLERANCE_MS
from .base import CacheInterface

logger = logging.getLogger(__name__)

_MISSING = -1


class DiskCacheClient:
    """Writes the result cache through a :class:`CacheInterface`.

    A monotonic reading only means something within one boot, so the boot
    time is stored alongside it and checked again on load.
    """

    def __init__(self, cache: CacheInterface = None):
        self.cache = cache

    @property
    def enabled(self) -> bool:
        return self.cache is not None

    def cache_true_time_info(self, snapshot: CachedTrueTime, boot_time_ms: int) -> None:
        if not self.enabled:
            logger.debug("No cache interface configured, skipping persistence")
            return

        logger.debug("Caching true time info to disk sntp [%s] device [%s] boot [%s]",
                     snapshot.true_time_ms, snapshot.monotonic_ms, boot_time_ms)
        values = {
            CacheInterface.KEY_CACHED_BOOT_TIME: boot_time_ms,
            CacheInterface.KEY_CACHED_DEVICE_UPTIME: snapshot.monotonic_ms,
            CacheInterface.KEY_CACHED_SNTP_TIME: snapshot.true_time_ms,
        }
        put_many = getattr(self.cache, "put_many", None)
        if put_many is not None:
            put_many(values)
        else:
            for key, value in values.items():
                self.cache.put(key, value)

    def is_cached_from_previous_boot(self, boot_time_ms: int) -> bool:
        if not self.enabled:
            return False

        cached_boot_time = self.cache.get(CacheInterface.KEY_CACHED_BOOT_TIME, 0)
        if cached_boot_time == 0:
            return False

        boot_diff = abs(boot_time_ms - cached_boot_time)
        logger.debug("Boot time difference [%s] ms", boot_diff)
        return boot_diff > BOOT_TIME_TOLERANCE_MS

    def load(self, boot_time_ms: int) -> Optional[CachedTrueTime]:
        """Cached pair for the current boot, or None."""
        if not self.enabled:
            return None
        if self.cache.get(CacheInterface.KEY_CACHED_BOOT_TIME, 0) == 0:
            return None
        if self.is_cached_from_previous_boot(boot_time_ms):
            logger.debug("Cached true time belongs to a previous boot, ignoring")
            return None

        sntp_time = self.cache.get(CacheInterface.KEY_CACHED_SNTP_TIME, _MISSING)
        uptime = self.cache.get(CacheInterface.KEY_CACHED_DEVICE_UPTIME, _MISSING)
        if sntp_time == _MISSING or uptime == _MISSING:
            return None
        return CachedTrueTime(sntp_time, uptime)

    def clear_cached_info(self) -> None:
        if self.enabled:
            self.cache.clear()
