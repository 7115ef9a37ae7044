import logging

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .protocol import SntpClient, SntpResponse, ValidationThresholds, ExchangeResult, FailureKind
from .storage import CacheInterface, MemoryCache, FileCache
from .truetime import TrueTime

__all__ = [
    '__version__',
    'SntpClient', 'SntpResponse', 'ValidationThresholds', 'ExchangeResult', 'FailureKind',
    'CacheInterface', 'MemoryCache', 'FileCache',
    'TrueTime',
]
