import socket
import threading
import unittest

from truetime.transport import UdpTransport, create_transport, parse_connection_string
from truetime.transport import udp as udp_module
from truetime.utils.exceptions import ResolutionError, TransportTimeoutError


class TestParseConnectionString(unittest.TestCase):
    def test_forms(self):
        self.assertEqual(parse_connection_string("pool.ntp.org"), ("pool.ntp.org", 123))
        self.assertEqual(parse_connection_string("udp:pool.ntp.org"), ("pool.ntp.org", 123))
        self.assertEqual(parse_connection_string("10.0.0.1:1123"), ("10.0.0.1", 1123))
        self.assertEqual(parse_connection_string("[::1]:1123"), ("::1", 1123))
        self.assertEqual(parse_connection_string("[::1]"), ("::1", 123))
        self.assertEqual(parse_connection_string("fe80::1"), ("fe80::1", 123))
        self.assertEqual(parse_connection_string("localhost", port=9999), ("localhost", 9999))

    def test_bad_port_is_a_resolution_error(self):
        for target in ("time.example.org:abc", "time.example.org:70000", "[::1]:x", "[::1"):
            with self.assertRaises(ResolutionError, msg=target):
                parse_connection_string(target)


class TestUdpTransport(unittest.TestCase):
    def setUp(self):
        self.server = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.server.bind(("127.0.0.1", 0))
        self.server.settimeout(2.0)
        self.port = self.server.getsockname()[1]

    def tearDown(self):
        self.server.close()

    def test_send_and_receive_over_loopback(self):
        def echo():
            data, addr = self.server.recvfrom(1024)
            self.server.sendto(data[::-1], addr)

        thread = threading.Thread(target=echo)
        thread.start()
        with create_transport(f"127.0.0.1:{self.port}", timeout=2.0) as transport:
            self.assertTrue(transport.is_open)
            transport.send(b"\x1b" + b"\x00" * 46 + b"\x01")
            reply = transport.receive(1024)
        thread.join()

        self.assertEqual(reply, b"\x01" + b"\x00" * 46 + b"\x1b")
        self.assertFalse(transport.is_open)

    def test_receive_timeout(self):
        transport = UdpTransport("127.0.0.1", self.port, timeout=0.05)
        try:
            transport.send(b"\x00" * 48)
            with self.assertRaises(TransportTimeoutError):
                transport.receive(48)
        finally:
            transport.close()
        self.assertFalse(transport.is_open)

    def test_resolution_failure(self):
        old_getaddrinfo = udp_module.socket.getaddrinfo

        def _boom(*_args, **_kwargs):
            raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

        udp_module.socket.getaddrinfo = _boom
        try:
            with self.assertRaises(ResolutionError):
                UdpTransport("no-such-host.invalid")
        finally:
            udp_module.socket.getaddrinfo = old_getaddrinfo


if __name__ == "__main__":
    unittest.main()
