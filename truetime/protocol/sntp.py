"""SNTP client: one request/validate/compute cycle per call."""
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from truetime.transport import Transport, create_transport
from truetime.utils.clock import Clock, SystemClock
from truetime.utils.constants import NTP_PORT
from truetime.utils.exceptions import (
    TransportError, ProtocolError, InvalidNtpServerResponseError,
)
from .cache import ResultCache
from .codec import Filler, random_filler
from .packet import build_request, parse_header
from .response import SntpResponse
from .validator import ValidationThresholds, validate_response

logger = logging.getLogger(__name__)

# Room for extension fields or a MAC after the 48-byte header
_RECEIVE_BUFFER_SIZE = 1024

TransportFactory = Callable[..., Transport]


class FailureKind(Enum):
    NETWORK = "network"
    VALIDATION = "validation"


@dataclass(frozen=True)
class ExchangeFailure:
    kind: FailureKind
    message: str
    check: Optional[str] = None
    actual: Any = None
    expected: Any = None
    error: Optional[Exception] = None


@dataclass(frozen=True)
class ExchangeResult:
    response: Optional[SntpResponse] = None
    failure: Optional[ExchangeFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class SntpClient:
    """Simple SNTP client for retrieving network time.

    At most one exchange runs per instance at a time. The result cache is
    written only after a reply passes every check, and can be read from any
    thread without waiting for an exchange in flight.
    """

    def __init__(self, clock: Clock = None, transport_factory: TransportFactory = create_transport,
                 filler: Filler = random_filler):
        self.clock = clock or SystemClock()
        self._transport_factory = transport_factory
        self._filler = filler
        self._exchange_lock = threading.Lock()
        self._cache = ResultCache()

    @property
    def cache(self) -> ResultCache:
        return self._cache

    def request_time(self, ntp_host: str,
                     root_delay_max: float,
                     root_dispersion_max: float,
                     server_response_delay_max: float,
                     timeout_ms: int,
                     port: int = NTP_PORT) -> SntpResponse:
        """Sends an NTP request to the given host and processes the response.

        Raises:
            TransportError: resolution, send, receive or timeout failure.
            InvalidNtpServerResponseError: the reply failed a trust check.
            ProtocolError: the reply was not a well-formed NTP packet.
        """
        thresholds = ValidationThresholds(
            root_delay_max=root_delay_max,
            root_dispersion_max=root_dispersion_max,
            server_response_delay_max=server_response_delay_max,
            timeout_ms=timeout_ms,
        )
        return self.request(ntp_host, thresholds, port)

    def request(self, ntp_host: str, thresholds: ValidationThresholds, port: int = NTP_PORT) -> SntpResponse:
        with self._exchange_lock:
            try:
                response = self._exchange(ntp_host, thresholds, port)
            except Exception:
                logger.debug("SNTP request failed for %s", ntp_host)
                raise

            self._cache.record(response.true_time, response.response_ticks)
            logger.info("SNTP successful response from %s", ntp_host)
            return response

    def exchange(self, ntp_host: str, thresholds: ValidationThresholds = None,
                 port: int = NTP_PORT) -> ExchangeResult:
        """Like :meth:`request`, but reports failures as a value."""
        thresholds = thresholds or ValidationThresholds()
        try:
            return ExchangeResult(response=self.request(ntp_host, thresholds, port))
        except InvalidNtpServerResponseError as e:
            return ExchangeResult(failure=ExchangeFailure(
                FailureKind.VALIDATION, e.message, e.check, e.actual, e.expected, e
            ))
        except ProtocolError as e:
            return ExchangeResult(failure=ExchangeFailure(
                FailureKind.VALIDATION, e.message, "packet", error=e
            ))
        except TransportError as e:
            return ExchangeResult(failure=ExchangeFailure(FailureKind.NETWORK, e.message, error=e))

    def _exchange(self, ntp_host: str, thresholds: ValidationThresholds, port: int) -> SntpResponse:
        request = build_request(self.clock, self._filler)

        with self._transport_factory(ntp_host, port=port, timeout=thresholds.timeout_seconds) as transport:
            transport.send(request.buffer)
            data = transport.receive(_RECEIVE_BUFFER_SIZE)
            response_ticks = self.clock.monotonic_ms()

        header = parse_header(data)
        # T3 is the request wall time plus elapsed monotonic time
        response_time = request.request_time + (response_ticks - request.request_ticks)
        response = SntpResponse(
            originate_time=header.originate_time,
            receive_time=header.receive_time,
            transmit_time=header.transmit_time,
            response_time=response_time,
            root_delay=header.root_delay,
            dispersion=header.root_dispersion,
            stratum=header.stratum,
            response_ticks=response_ticks,
        )
        validate_response(header, response, thresholds, self.clock.wall_ms())
        return response

    def was_initialized(self) -> bool:
        return self._cache.initialized

    def cached_sntp_time(self) -> int:
        """Time value computed from the last NTP server response."""
        snapshot = self._cache.snapshot()
        return snapshot.true_time_ms if snapshot else 0

    def cached_device_uptime(self) -> int:
        """Monotonic reading taken when the last response arrived."""
        snapshot = self._cache.snapshot()
        return snapshot.monotonic_ms if snapshot else 0

    def now(self) -> int:
        return self._cache.reconstruct(self.clock.monotonic_ms())
