from .base import Transport
from .udp import UdpTransport

from truetime.utils.constants import NTP_PORT
from truetime.utils.exceptions import ResolutionError


def _parse_port(value: str, connection_string: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise ResolutionError(f"Invalid port in {connection_string!r}: {value!r}") from None
    if not 0 <= port <= 65535:
        raise ResolutionError(f"Port out of range in {connection_string!r}: {port}")
    return port


def parse_connection_string(connection_string: str, port: int = NTP_PORT):
    """Split a connection string into ``(host, port)``.

    Accepts ``host``, ``host:port``, ``[v6addr]:port``, a bare IPv6 address,
    and an optional ``udp:`` prefix.
    """
    target = connection_string.strip()
    if target.startswith("udp:"):
        target = target[4:]

    if target.startswith("["):
        host, sep, rest = target[1:].partition("]")
        if not sep:
            raise ResolutionError(f"Unterminated IPv6 literal: {connection_string}")
        if rest.startswith(":"):
            port = _parse_port(rest[1:], connection_string)
        return host, port

    # A bare IPv6 address has more than one colon
    if target.count(":") == 1:
        host, port_str = target.split(":", 1)
        return host, _parse_port(port_str, connection_string)

    return target, port


def create_transport(connection_string: str, port: int = NTP_PORT, timeout: float = 30.0) -> Transport:
    """Create a UDP transport for the given connection string.

    Args:
        connection_string: Server name or address (e.g., 'pool.ntp.org', '10.0.0.1:1123', 'udp:time.google.com')
        port: UDP port used when the connection string carries none (default: 123)
        timeout: Send/receive timeout in seconds (default: 30.0)

    Returns:
        UdpTransport instance
    """
    host, port = parse_connection_string(connection_string, port)
    return UdpTransport(host=host, port=port, timeout=timeout)


__all__ = [
    'Transport',
    'UdpTransport',
    'create_transport',
    'parse_connection_string',
]
