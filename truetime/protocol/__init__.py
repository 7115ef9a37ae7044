"""Protocol Layer - SNTP request/response exchange."""

from .codec import (
    encode_timestamp, decode_timestamp, decode_fixed16_16,
    zero_filler, random_filler,
)
from .packet import NtpRequest, ResponseHeader, build_request, parse_header
from .response import SntpResponse
from .offset import round_trip_delay, clock_offset, true_time, sntp_time
from .validator import ValidationThresholds, validate_response
from .cache import CachedTrueTime, ResultCache
from .sntp import SntpClient, ExchangeResult, ExchangeFailure, FailureKind

__all__ = [
    # Codec
    "encode_timestamp",
    "decode_timestamp",
    "decode_fixed16_16",
    "zero_filler",
    "random_filler",
    # Packets
    "NtpRequest",
    "ResponseHeader",
    "build_request",
    "parse_header",
    "SntpResponse",
    # Clock offset
    "round_trip_delay",
    "clock_offset",
    "true_time",
    "sntp_time",
    # Validation
    "ValidationThresholds",
    "validate_response",
    # Cache
    "CachedTrueTime",
    "ResultCache",
    # Client
    "SntpClient",
    "ExchangeResult",
    "ExchangeFailure",
    "FailureKind",
]
