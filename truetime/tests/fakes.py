"""Deterministic stand-ins for the clock and the network used by the tests."""
import struct

from truetime.transport import Transport
from truetime.utils.clock import Clock
from truetime.utils.constants import OFFSET_1900_TO_1970, INDEX_TRANSMIT_TIME
from truetime.protocol.codec import decode_timestamp

# Whole second, so the request timestamp encodes without loss
WALL_MS = 1_700_000_000_000
MONOTONIC_MS = 5_000


class FakeClock(Clock):
    def __init__(self, wall_ms: int = WALL_MS, monotonic_ms: int = MONOTONIC_MS, boot_time_ms: int = None):
        self._wall = wall_ms
        self._monotonic = monotonic_ms
        self._boot_time = boot_time_ms

    def wall_ms(self) -> int:
        return self._wall

    def monotonic_ms(self) -> int:
        return self._monotonic

    def boot_time_ms(self) -> int:
        if self._boot_time is not None:
            return self._boot_time
        return super().boot_time_ms()

    def advance(self, ms: int):
        self._wall += ms
        self._monotonic += ms


def ntp_timestamp(local_epoch_ms: int) -> bytes:
    """Full-precision wire timestamp, fraction rounded up like a server clock would tick past it."""
    seconds, ms = divmod(local_epoch_ms, 1000)
    fraction = -(-ms * 0x100000000 // 1000)
    return struct.pack('!II', seconds + OFFSET_1900_TO_1970, fraction)


def craft_reply(originate: bytes, receive_ms: int, transmit_ms: int,
                mode: int = 4, stratum: int = 1, leap: int = 0, version: int = 3,
                root_delay: int = 0, root_dispersion: int = 0) -> bytes:
    first = (leap << 6) | (version << 3) | mode
    header = struct.pack('!BBbbII', first, stratum, 6, -20, root_delay, root_dispersion)
    reference_id = b'GPS\x00'
    reference_time = ntp_timestamp(receive_ms)
    reply = (header + reference_id + reference_time + originate +
             ntp_timestamp(receive_ms) + ntp_timestamp(transmit_ms))
    assert len(reply) == 48
    return reply


class FakeTransport(Transport):
    def __init__(self, server, host, port, timeout):
        self.server = server
        self.host = host
        self.port = port
        self.timeout = timeout
        self.sent = []
        self._open = True

    def send(self, data: bytes) -> int:
        self.sent.append(bytes(data))
        return len(data)

    def receive(self, size: int) -> bytes:
        if self.server.error is not None:
            raise self.server.error
        return self.server.reply_to(self.sent[-1])[:size]

    def close(self) -> None:
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open


class FakeServer:
    """Transport factory whose server runs ``offset_ms`` ahead of the local clock.

    ``latency_ms`` of round trip is split evenly between the two legs and
    the local clock is advanced by it while the reply is "in flight".
    Header fields (mode, stratum, leap, root_delay, root_dispersion) can be
    overridden through keyword arguments.
    """

    def __init__(self, clock: FakeClock, offset_ms: int = 50, latency_ms: int = 0,
                 error: Exception = None, **header):
        self.clock = clock
        self.offset_ms = offset_ms
        self.latency_ms = latency_ms
        self.error = error
        self.header = header
        self.transports = []

    def __call__(self, host, port=123, timeout=30.0):
        transport = FakeTransport(self, host, port, timeout)
        self.transports.append(transport)
        return transport

    def reply_to(self, request: bytes) -> bytes:
        originate = request[INDEX_TRANSMIT_TIME:INDEX_TRANSMIT_TIME + 8]
        t0 = decode_timestamp(originate)
        server_time = t0 + self.offset_ms + self.latency_ms // 2
        self.clock.advance(self.latency_ms)
        return craft_reply(originate, server_time, server_time, **self.header)
