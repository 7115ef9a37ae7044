class TrueTimeException(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return f"{self.__class__.__name__}: {self.message}"


class TransportError(TrueTimeException):
    pass


class ResolutionError(TransportError):
    pass


class TransportTimeoutError(TransportError):
    pass


class ProtocolError(TrueTimeException):
    pass


class InvalidNtpServerResponseError(ProtocolError):
    """A reply that failed one of the trust checks.

    ``check`` names the failed check (``root_delay``, ``stratum``, ...);
    ``actual`` and ``expected`` hold the offending and the allowed value.
    """

    def __init__(self, check: str, actual=None, expected=None, message: str = None):
        if message is None:
            message = f"Invalid response from NTP server. {check} violation. {actual} [actual] > {expected} [expected]"
        super().__init__(message)
        self.check = check
        self.actual = actual
        self.expected = expected


class CacheError(TrueTimeException):
    pass


class CacheNotInitializedError(CacheError):
    pass


class TrueTimeNotInitializedError(CacheError):
    pass


class CLIError(TrueTimeException):
    pass


class ValidationError(CLIError):
    pass
