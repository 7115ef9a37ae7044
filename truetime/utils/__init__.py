from .constants import (
    NTP_PORT, NTP_PACKET_SIZE, OFFSET_1900_TO_1970,
    DEFAULT_NTP_HOST, DEFAULT_ROOT_DELAY_MAX, DEFAULT_ROOT_DISPERSION_MAX,
    DEFAULT_SERVER_RESPONSE_DELAY_MAX, DEFAULT_TIMEOUT_MS, DEFAULT_RETRY_COUNT,
)
from .clock import Clock, SystemClock

__all__ = [
    'NTP_PORT', 'NTP_PACKET_SIZE', 'OFFSET_1900_TO_1970',
    'DEFAULT_NTP_HOST', 'DEFAULT_ROOT_DELAY_MAX', 'DEFAULT_ROOT_DISPERSION_MAX',
    'DEFAULT_SERVER_RESPONSE_DELAY_MAX', 'DEFAULT_TIMEOUT_MS', 'DEFAULT_RETRY_COUNT',
    'Clock', 'SystemClock',
]
