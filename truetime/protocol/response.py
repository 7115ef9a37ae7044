from dataclasses import dataclass, astuple

from .codec import fixed16_16_to_ms
from . import offset as _offset

RESPONSE_INDEX_ORIGINATE_TIME = 0
RESPONSE_INDEX_RECEIVE_TIME = 1
RESPONSE_INDEX_TRANSMIT_TIME = 2
RESPONSE_INDEX_RESPONSE_TIME = 3
RESPONSE_INDEX_ROOT_DELAY = 4
RESPONSE_INDEX_DISPERSION = 5
RESPONSE_INDEX_STRATUM = 6
RESPONSE_INDEX_RESPONSE_TICKS = 7
RESPONSE_INDEX_SIZE = 8


@dataclass(frozen=True)
class SntpResponse:
    """Outcome of one validated exchange.

    Times are local-epoch milliseconds. ``root_delay`` and ``dispersion`` keep
    the raw 16.16 wire values. ``response_ticks`` is the monotonic reading
    taken when the reply arrived.
    """
    originate_time: int
    receive_time: int
    transmit_time: int
    response_time: int
    root_delay: int
    dispersion: int
    stratum: int
    response_ticks: int

    def __getitem__(self, index: int) -> int:
        return astuple(self)[index]

    def __len__(self) -> int:
        return RESPONSE_INDEX_SIZE

    def __iter__(self):
        return iter(astuple(self))

    @property
    def root_delay_ms(self) -> float:
        return fixed16_16_to_ms(self.root_delay)

    @property
    def root_dispersion_ms(self) -> float:
        return fixed16_16_to_ms(self.dispersion)

    @property
    def round_trip_delay(self) -> int:
        return _offset.round_trip_delay(
            self.originate_time, self.receive_time, self.transmit_time, self.response_time
        )

    @property
    def clock_offset(self) -> int:
        return _offset.clock_offset(
            self.originate_time, self.receive_time, self.transmit_time, self.response_time
        )

    @property
    def true_time(self) -> int:
        return _offset.sntp_time(self)
