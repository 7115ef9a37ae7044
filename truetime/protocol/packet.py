from typing import NamedTuple

from truetime.utils.clock import Clock
from truetime.utils.constants import (
    NTP_PACKET_SIZE, NTP_MODE_CLIENT, NTP_VERSION,
    INDEX_VERSION, INDEX_STRATUM, INDEX_ROOT_DELAY, INDEX_ROOT_DISPERSION,
    INDEX_ORIGINATE_TIME, INDEX_RECEIVE_TIME, INDEX_TRANSMIT_TIME,
)
from truetime.utils.exceptions import ProtocolError
from .codec import Filler, zero_filler, write_timestamp, decode_timestamp, read_uint32


class NtpRequest(NamedTuple):
    buffer: bytes
    request_time: int
    request_ticks: int


class ResponseHeader(NamedTuple):
    leap_indicator: int
    version: int
    mode: int
    stratum: int
    root_delay: int
    root_dispersion: int
    originate_time: int
    receive_time: int
    transmit_time: int


def build_request(clock: Clock, filler: Filler = zero_filler) -> NtpRequest:
    """Build a client-mode request stamped with the current wall clock.

    The wall-clock and monotonic readings are taken back to back so the
    response time can later be derived from elapsed monotonic time.
    """
    buffer = bytearray(NTP_PACKET_SIZE)
    # mode in the low 3 bits, version in bits 3-5
    buffer[INDEX_VERSION] = NTP_MODE_CLIENT | (NTP_VERSION << 3)

    request_time = clock.wall_ms()
    request_ticks = clock.monotonic_ms()

    write_timestamp(buffer, INDEX_TRANSMIT_TIME, request_time, filler)
    return NtpRequest(bytes(buffer), request_time, request_ticks)


def parse_header(data: bytes) -> ResponseHeader:
    if len(data) < NTP_PACKET_SIZE:
        raise ProtocolError(f"Expected {NTP_PACKET_SIZE}-byte NTP packet, got {len(data)} bytes")

    first = data[INDEX_VERSION]
    return ResponseHeader(
        leap_indicator=(first >> 6) & 0x3,
        version=(first >> 3) & 0x7,
        mode=first & 0x7,
        stratum=data[INDEX_STRATUM],
        root_delay=read_uint32(data, INDEX_ROOT_DELAY),
        root_dispersion=read_uint32(data, INDEX_ROOT_DISPERSION),
        originate_time=decode_timestamp(data, INDEX_ORIGINATE_TIME),
        receive_time=decode_timestamp(data, INDEX_RECEIVE_TIME),
        transmit_time=decode_timestamp(data, INDEX_TRANSMIT_TIME),
    )
