NTP_PORT = 123
NTP_PACKET_SIZE = 48

NTP_MODE_CLIENT = 3
NTP_MODE_SERVER = 4
NTP_MODE_BROADCAST = 5
NTP_VERSION = 3

# Byte offsets inside a 48-byte NTP packet
INDEX_VERSION = 0
INDEX_STRATUM = 1
INDEX_ROOT_DELAY = 4
INDEX_ROOT_DISPERSION = 8
INDEX_ORIGINATE_TIME = 24
INDEX_RECEIVE_TIME = 32
INDEX_TRANSMIT_TIME = 40

# 70 years plus 17 leap days
OFFSET_1900_TO_1970 = ((365 * 70) + 17) * 24 * 60 * 60

STRATUM_MIN = 1
STRATUM_MAX = 15
LEAP_NOT_IN_SYNC = 3
MAX_REQUEST_AGE_MS = 10_000

DEFAULT_NTP_HOST = "1.us.pool.ntp.org"
DEFAULT_ROOT_DELAY_MAX = 100.0
DEFAULT_ROOT_DISPERSION_MAX = 100.0
DEFAULT_SERVER_RESPONSE_DELAY_MAX = 750.0
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_RETRY_COUNT = 0

# Boot anchors closer than this are treated as the same boot
BOOT_TIME_TOLERANCE_MS = 1000

CONFIG_FILE_NAME = ".truetime"
ENV_PREFIX = "TRUETIME_"
