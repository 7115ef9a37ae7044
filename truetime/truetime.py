"""
Calling layer around :class:`SntpClient`.

Handles:
- Builder-style configuration of host and trust thresholds
- Retrying a failed exchange
- Writing results through a persistent cache and reading them back
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from truetime.protocol.sntp import SntpClient
from truetime.protocol.response import SntpResponse
from truetime.protocol.validator import ValidationThresholds
from truetime.storage import CacheInterface, DiskCacheClient
from truetime.utils.clock import Clock
from truetime.utils.constants import (
    NTP_PORT, DEFAULT_NTP_HOST, DEFAULT_ROOT_DELAY_MAX, DEFAULT_ROOT_DISPERSION_MAX,
    DEFAULT_SERVER_RESPONSE_DELAY_MAX, DEFAULT_TIMEOUT_MS, DEFAULT_RETRY_COUNT,
)
from truetime.utils.exceptions import (
    TransportError, ProtocolError, TrueTimeNotInitializedError, ValidationError,
)

logger = logging.getLogger(__name__)


class TrueTime:
    """
    Network-corrected clock.

    Usage:
        tt = (TrueTime()
              .with_ntp_host("time.google.com")
              .with_connection_timeout(5000)
              .with_shared_preferences_cache(FileCache()))
        tt.initialize()
        tt.now()
    """

    def __init__(self, client: SntpClient = None, clock: Clock = None):
        self.client = client or SntpClient(clock=clock)
        self.ntp_host = DEFAULT_NTP_HOST
        self.port = NTP_PORT
        self.timeout_ms = DEFAULT_TIMEOUT_MS
        self.root_delay_max = DEFAULT_ROOT_DELAY_MAX
        self.root_dispersion_max = DEFAULT_ROOT_DISPERSION_MAX
        self.server_response_delay_max = DEFAULT_SERVER_RESPONSE_DELAY_MAX
        self.retry_count = DEFAULT_RETRY_COUNT
        self.disk_cache = DiskCacheClient()

    @property
    def clock(self) -> Clock:
        return self.client.clock

    # ------------------------------------------------------------------
    # Configuration

    def with_ntp_host(self, ntp_host: str, port: int = NTP_PORT) -> "TrueTime":
        self.ntp_host = ntp_host
        self.port = port
        return self

    def with_connection_timeout(self, timeout_ms: int) -> "TrueTime":
        self.timeout_ms = timeout_ms
        return self

    def with_root_delay_max(self, root_delay_max: float) -> "TrueTime":
        self.root_delay_max = root_delay_max
        return self

    def with_root_dispersion_max(self, root_dispersion_max: float) -> "TrueTime":
        self.root_dispersion_max = root_dispersion_max
        return self

    def with_server_response_delay_max(self, server_response_delay_max: float) -> "TrueTime":
        self.server_response_delay_max = server_response_delay_max
        return self

    def with_retry_count(self, retry_count: int) -> "TrueTime":
        if retry_count < 0:
            raise ValidationError(f"retry_count must not be negative: {retry_count}")
        self.retry_count = retry_count
        return self

    def with_shared_preferences_cache(self, cache: CacheInterface) -> "TrueTime":
        self.disk_cache = DiskCacheClient(cache)
        return self

    def with_logging(self, enabled: bool = True) -> "TrueTime":
        logging.getLogger("truetime").setLevel(logging.DEBUG if enabled else logging.WARNING)
        return self

    def thresholds(self) -> ValidationThresholds:
        return ValidationThresholds(
            root_delay_max=self.root_delay_max,
            root_dispersion_max=self.root_dispersion_max,
            server_response_delay_max=self.server_response_delay_max,
            timeout_ms=self.timeout_ms,
        )

    # ------------------------------------------------------------------
    # Synchronization

    def initialize(self) -> SntpResponse:
        """Run the exchange, retrying up to ``retry_count`` times.

        Raises:
            TransportError | ProtocolError: the error of the last attempt.
        """
        thresholds = self.thresholds()
        attempts = self.retry_count + 1
        last_error: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            try:
                response = self.client.request(self.ntp_host, thresholds, self.port)
            except (TransportError, ProtocolError) as e:
                last_error = e
                logger.debug("SNTP attempt %d/%d against %s failed: %s",
                             attempt, attempts, self.ntp_host, e)
                continue

            self.disk_cache.cache_true_time_info(
                self.client.cache.snapshot(), self.clock.boot_time_ms()
            )
            return response

        raise last_error

    def is_initialized(self) -> bool:
        return self.client.was_initialized() or self._load_from_disk() is not None

    def now_ms(self) -> int:
        if self.client.was_initialized():
            return self.client.now()

        if self._load_from_disk() is None:
            raise TrueTimeNotInitializedError(
                "You need to call initialize() on TrueTime at least once."
            )
        return self.client.now()

    def now(self) -> datetime:
        return datetime.fromtimestamp(self.now_ms() / 1000.0, tz=timezone.utc)

    def clear_cached_info(self) -> None:
        self.client.cache.clear()
        self.disk_cache.clear_cached_info()

    def _load_from_disk(self):
        snapshot = self.disk_cache.load(self.clock.boot_time_ms())
        if snapshot is not None:
            self.client.cache.restore(snapshot)
        return snapshot
