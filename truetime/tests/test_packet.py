import unittest

from truetime.protocol.codec import decode_timestamp
from truetime.protocol.packet import build_request, parse_header
from truetime.utils.exceptions import ProtocolError
from truetime.tests.fakes import FakeClock, craft_reply, ntp_timestamp, WALL_MS, MONOTONIC_MS


class TestBuildRequest(unittest.TestCase):
    def test_header_and_transmit_timestamp(self):
        request = build_request(FakeClock())

        self.assertEqual(len(request.buffer), 48)
        # mode 3, version 3
        self.assertEqual(request.buffer[0], 0x1B)
        self.assertEqual(request.buffer[1:40], b'\x00' * 39)
        self.assertEqual(decode_timestamp(request.buffer, 40), WALL_MS)

    def test_captures_wall_and_monotonic_readings(self):
        request = build_request(FakeClock())
        self.assertEqual(request.request_time, WALL_MS)
        self.assertEqual(request.request_ticks, MONOTONIC_MS)


class TestParseHeader(unittest.TestCase):
    def test_fields(self):
        reply = craft_reply(ntp_timestamp(WALL_MS), WALL_MS + 10, WALL_MS + 12,
                            mode=4, stratum=2, leap=1, root_delay=0x00000100, root_dispersion=0x00020000)
        header = parse_header(reply)

        self.assertEqual(header.leap_indicator, 1)
        self.assertEqual(header.version, 3)
        self.assertEqual(header.mode, 4)
        self.assertEqual(header.stratum, 2)
        self.assertEqual(header.root_delay, 0x100)
        self.assertEqual(header.root_dispersion, 0x20000)
        self.assertEqual(header.originate_time, WALL_MS)
        self.assertEqual(header.receive_time, WALL_MS + 10)
        self.assertEqual(header.transmit_time, WALL_MS + 12)

    def test_stratum_is_unsigned(self):
        reply = craft_reply(ntp_timestamp(WALL_MS), WALL_MS, WALL_MS, stratum=200)
        self.assertEqual(parse_header(reply).stratum, 200)

    def test_short_packet_rejected(self):
        with self.assertRaises(ProtocolError):
            parse_header(b'\x24' * 47)

    def test_trailing_extension_bytes_ignored(self):
        reply = craft_reply(ntp_timestamp(WALL_MS), WALL_MS + 10, WALL_MS + 12, stratum=2)
        header = parse_header(reply + b"\x00" * 20)
        self.assertEqual(header, parse_header(reply))


if __name__ == "__main__":
    unittest.main()
