import socket

from .base import Transport
from truetime.utils.constants import NTP_PORT
from truetime.utils.exceptions import TransportError, ResolutionError, TransportTimeoutError


class UdpTransport(Transport):
    """Connectionless datagram transport bound to a single remote address.

    The host is resolved once at construction; ``timeout`` is in seconds and
    applies to every blocking send and receive.
    """

    def __init__(self, host: str, port: int = NTP_PORT, timeout: float = 30.0):
        self.host = host
        self.port = port
        self.timeout = timeout
        self._sock = None

        try:
            infos = socket.getaddrinfo(host, port, 0, socket.SOCK_DGRAM)
        except socket.gaierror as e:
            raise ResolutionError(f"Failed to resolve {host}: {e}") from e
        if not infos:
            raise ResolutionError(f"No address found for {host}")

        family, socktype, proto, _canonname, sockaddr = infos[0]
        self.address = sockaddr

        try:
            self._sock = socket.socket(family, socktype, proto)
            self._sock.settimeout(timeout)
        except OSError as e:
            self.close()
            raise TransportError(f"Failed to open UDP socket for {host}:{port}: {e}") from e

    def send(self, data: bytes) -> int:
        try:
            return self._sock.sendto(data, self.address)
        except socket.timeout as e:
            raise TransportTimeoutError(f"Send to {self.host}:{self.port} timed out") from e
        except OSError as e:
            raise TransportError(f"UDP send error: {e}") from e

    def receive(self, size: int) -> bytes:
        try:
            data, _addr = self._sock.recvfrom(size)
            return data
        except socket.timeout as e:
            raise TransportTimeoutError(
                f"No response from {self.host}:{self.port} within {self.timeout:.3f}s"
            ) from e
        except OSError as e:
            raise TransportError(f"UDP receive error: {e}") from e

    def close(self) -> None:
        if self._sock:
            try:
                self._sock.close()
            finally:
                self._sock = None

    @property
    def is_open(self) -> bool:
        return self._sock is not None
