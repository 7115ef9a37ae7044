"""NTP clock synchronization formulas.

T0 is the originate time, T1 the server receive time, T2 the server transmit
time and T3 the local response time, all in local-epoch milliseconds. See
https://en.wikipedia.org/wiki/Network_Time_Protocol#Clock_synchronization_algorithm
"""


def _div_trunc(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def round_trip_delay(t0: int, t1: int, t2: int, t3: int) -> int:
    """delta = (T3 - T0) - (T2 - T1)"""
    return (t3 - t0) - (t2 - t1)


def clock_offset(t0: int, t1: int, t2: int, t3: int) -> int:
    """theta = ((T1 - T0) + (T2 - T3)) / 2, truncated toward zero"""
    return _div_trunc((t1 - t0) + (t2 - t3), 2)


def true_time(t3: int, offset: int) -> int:
    return t3 + offset


def sntp_time(response) -> int:
    offset = clock_offset(
        response.originate_time, response.receive_time,
        response.transmit_time, response.response_time,
    )
    return true_time(response.response_time, offset)
