from abc import ABC, abstractmethod


class CacheInterface(ABC):
    """Key/value store for integer values, used to persist true time across restarts."""

    KEY_CACHED_BOOT_TIME = "truetime.cached_boot_time"
    KEY_CACHED_DEVICE_UPTIME = "truetime.cached_device_uptime"
    KEY_CACHED_SNTP_TIME = "truetime.cached_sntp_time"

    @abstractmethod
    def put(self, key: str, value: int) -> None:
        pass

    @abstractmethod
    def get(self, key: str, default: int) -> int:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass
