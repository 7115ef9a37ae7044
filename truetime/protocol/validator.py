from dataclasses import dataclass

from truetime.utils.constants import (
    NTP_MODE_SERVER, NTP_MODE_BROADCAST, STRATUM_MIN, STRATUM_MAX,
    LEAP_NOT_IN_SYNC, MAX_REQUEST_AGE_MS,
    DEFAULT_ROOT_DELAY_MAX, DEFAULT_ROOT_DISPERSION_MAX,
    DEFAULT_SERVER_RESPONSE_DELAY_MAX, DEFAULT_TIMEOUT_MS,
)
from truetime.utils.exceptions import InvalidNtpServerResponseError, ValidationError
from .codec import fixed16_16_to_ms
from .packet import ResponseHeader
from .response import SntpResponse


@dataclass(frozen=True)
class ValidationThresholds:
    """Trust limits for a server reply, in milliseconds."""
    root_delay_max: float = DEFAULT_ROOT_DELAY_MAX
    root_dispersion_max: float = DEFAULT_ROOT_DISPERSION_MAX
    server_response_delay_max: float = DEFAULT_SERVER_RESPONSE_DELAY_MAX
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    def __post_init__(self):
        for name in ('root_delay_max', 'root_dispersion_max', 'server_response_delay_max'):
            if getattr(self, name) < 0:
                raise ValidationError(f"{name} must not be negative: {getattr(self, name)}")
        if self.timeout_ms <= 0:
            raise ValidationError(f"timeout_ms must be positive: {self.timeout_ms}")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


def validate_response(header: ResponseHeader, response: SntpResponse,
                      thresholds: ValidationThresholds, now_ms: int) -> None:
    """Reject a reply that fails any trust check, stopping at the first failure.

    Raises:
        InvalidNtpServerResponseError: ``check`` names the failed check.
    """
    root_delay = fixed16_16_to_ms(header.root_delay)
    if root_delay > thresholds.root_delay_max:
        raise InvalidNtpServerResponseError(
            "root_delay", root_delay, thresholds.root_delay_max,
            f"Invalid response from NTP server. root_delay violation. "
            f"{root_delay:f} [actual] > {thresholds.root_delay_max:f} [expected]"
        )

    root_dispersion = fixed16_16_to_ms(header.root_dispersion)
    if root_dispersion > thresholds.root_dispersion_max:
        raise InvalidNtpServerResponseError(
            "root_dispersion", root_dispersion, thresholds.root_dispersion_max,
            f"Invalid response from NTP server. root_dispersion violation. "
            f"{root_dispersion:f} [actual] > {thresholds.root_dispersion_max:f} [expected]"
        )

    if header.mode not in (NTP_MODE_SERVER, NTP_MODE_BROADCAST):
        raise InvalidNtpServerResponseError(
            "mode", header.mode, (NTP_MODE_SERVER, NTP_MODE_BROADCAST),
            f"untrusted mode value for TrueTime: {header.mode}"
        )

    if not STRATUM_MIN <= header.stratum <= STRATUM_MAX:
        raise InvalidNtpServerResponseError(
            "stratum", header.stratum, (STRATUM_MIN, STRATUM_MAX),
            f"untrusted stratum value for TrueTime: {header.stratum}"
        )

    if header.leap_indicator == LEAP_NOT_IN_SYNC:
        raise InvalidNtpServerResponseError(
            "leap_indicator", header.leap_indicator, f"!= {LEAP_NOT_IN_SYNC}",
            "unsynchronized server responded for TrueTime"
        )

    delay = abs(
        (response.response_time - response.originate_time) -
        (response.transmit_time - response.receive_time)
    )
    if delay >= thresholds.server_response_delay_max:
        raise InvalidNtpServerResponseError(
            "server_response_delay", delay, thresholds.server_response_delay_max,
            f"server_response_delay too large for comfort "
            f"{delay:f} [actual] >= {thresholds.server_response_delay_max:f} [expected]"
        )

    # Compares the echoed originate time, not the locally recorded request time
    elapsed = abs(response.originate_time - now_ms)
    if elapsed >= MAX_REQUEST_AGE_MS:
        raise InvalidNtpServerResponseError(
            "request_age", elapsed, MAX_REQUEST_AGE_MS,
            f"Request was sent more than 10 seconds back {elapsed}"
        )
