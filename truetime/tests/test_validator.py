import unittest

from truetime.protocol.packet import parse_header
from truetime.protocol.response import SntpResponse
from truetime.protocol.validator import ValidationThresholds, validate_response
from truetime.utils.exceptions import InvalidNtpServerResponseError, ValidationError
from truetime.tests.fakes import craft_reply, ntp_timestamp, WALL_MS

# One second as a 16.16 fixed point value
ONE_SECOND = 0x00010000


def _check(response_time=WALL_MS, now_ms=WALL_MS, thresholds=None, receive=WALL_MS + 50,
           transmit=WALL_MS + 50, **header_fields):
    reply = craft_reply(ntp_timestamp(WALL_MS), receive, transmit, **header_fields)
    header = parse_header(reply)
    response = SntpResponse(
        header.originate_time, header.receive_time, header.transmit_time, response_time,
        header.root_delay, header.root_dispersion, header.stratum, 0,
    )
    validate_response(header, response, thresholds or ValidationThresholds(), now_ms)


class TestValidateResponse(unittest.TestCase):
    def assertRejected(self, check, **kwargs):
        with self.assertRaises(InvalidNtpServerResponseError) as cm:
            _check(**kwargs)
        self.assertEqual(cm.exception.check, check)
        return cm.exception

    def test_valid_reply_passes(self):
        _check()

    def test_root_delay_reported_before_stratum(self):
        error = self.assertRejected("root_delay", root_delay=ONE_SECOND, stratum=0)
        self.assertAlmostEqual(error.actual, 1000.0)
        self.assertEqual(error.expected, 100.0)

    def test_root_dispersion(self):
        self.assertRejected("root_dispersion", root_dispersion=ONE_SECOND)

    def test_root_delay_at_limit_is_accepted(self):
        thresholds = ValidationThresholds(root_delay_max=1000.0)
        _check(thresholds=thresholds, root_delay=ONE_SECOND)

    def test_untrusted_modes(self):
        for mode in (0, 1, 2, 3, 6, 7):
            self.assertRejected("mode", mode=mode)

    def test_broadcast_mode_accepted(self):
        _check(mode=5)

    def test_stratum_boundaries(self):
        self.assertRejected("stratum", stratum=0)
        self.assertRejected("stratum", stratum=16)
        _check(stratum=1)
        _check(stratum=15)

    def test_unsynchronized_leap_indicator(self):
        self.assertRejected("leap_indicator", leap=3)
        for leap in (0, 1, 2):
            _check(leap=leap)

    def test_server_response_delay(self):
        # (T3 - T0) - (T2 - T1) = 900 - 100
        error = self.assertRejected(
            "server_response_delay", response_time=WALL_MS + 900,
            receive=WALL_MS + 100, transmit=WALL_MS + 200,
        )
        self.assertEqual(error.actual, 800)

    def test_server_response_delay_equal_to_max_rejected(self):
        thresholds = ValidationThresholds(server_response_delay_max=750)
        self.assertRejected("server_response_delay", thresholds=thresholds, response_time=WALL_MS + 750)
        _check(thresholds=thresholds, response_time=WALL_MS + 749)

    def test_stale_originate_time(self):
        error = self.assertRejected("request_age", now_ms=WALL_MS + 10_000)
        self.assertEqual(error.actual, 10_000)
        _check(now_ms=WALL_MS - 9_999)


class TestValidationThresholds(unittest.TestCase):
    def test_defaults(self):
        thresholds = ValidationThresholds()
        self.assertEqual(thresholds.root_delay_max, 100.0)
        self.assertEqual(thresholds.root_dispersion_max, 100.0)
        self.assertEqual(thresholds.server_response_delay_max, 750.0)
        self.assertEqual(thresholds.timeout_seconds, 30.0)

    def test_rejects_bad_values(self):
        with self.assertRaises(ValidationError):
            ValidationThresholds(root_delay_max=-1)
        with self.assertRaises(ValidationError):
            ValidationThresholds(timeout_ms=0)


if __name__ == "__main__":
    unittest.main()
