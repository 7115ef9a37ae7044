"""NTP timestamp and fixed-point codecs.

Wire timestamps are 64-bit: unsigned seconds since 1900-01-01 followed by an
unsigned 32-bit binary fraction of a second. Locally everything is an integer
count of milliseconds since 1970-01-01.
"""
import random
import struct
from typing import Callable

from truetime.utils.constants import OFFSET_1900_TO_1970
from truetime.utils.exceptions import ProtocolError

_FRACTION_SCALE = 0x100000000
_U32 = struct.Struct('!I')

Filler = Callable[[], int]


def zero_filler() -> int:
    return 0


def random_filler() -> int:
    # Low-order fraction bits carry no time information
    return random.randint(0, 255)


def read_uint32(data: bytes, offset: int = 0) -> int:
    if len(data) < offset + 4:
        raise ProtocolError(f"Need 4 bytes at offset {offset}, buffer has {len(data)}")
    return _U32.unpack_from(data, offset)[0]


def encode_timestamp(local_epoch_ms: int, filler: Filler = zero_filler) -> bytes:
    seconds = local_epoch_ms // 1000
    milliseconds = local_epoch_ms - seconds * 1000
    seconds += OFFSET_1900_TO_1970

    fraction = milliseconds * _FRACTION_SCALE // 1000

    return (
        _U32.pack(seconds & 0xFFFFFFFF) +
        bytes(((fraction >> 24) & 0xFF, (fraction >> 16) & 0xFF, (fraction >> 8) & 0xFF)) +
        bytes((filler() & 0xFF,))
    )


def write_timestamp(buffer: bytearray, offset: int, local_epoch_ms: int, filler: Filler = zero_filler) -> None:
    buffer[offset:offset + 8] = encode_timestamp(local_epoch_ms, filler)


def decode_timestamp(data: bytes, offset: int = 0) -> int:
    seconds = read_uint32(data, offset)
    fraction = read_uint32(data, offset + 4)
    return (seconds - OFFSET_1900_TO_1970) * 1000 + (fraction * 1000) // _FRACTION_SCALE


def fixed16_16_to_ms(raw: int) -> float:
    return raw / 65.536


def decode_fixed16_16(data: bytes, offset: int = 0) -> float:
    """Decode an NTP short (16.16 fixed point seconds) into milliseconds."""
    return fixed16_16_to_ms(read_uint32(data, offset))
