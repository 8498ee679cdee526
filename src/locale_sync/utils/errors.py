"""
Exception hierarchy for locale synchronization
"""

from typing import Optional


class LocaleSyncError(Exception):
    """Base class for all locale-sync errors"""


class ConfigError(LocaleSyncError):
    """Invalid or unreadable configuration"""


class TransportError(LocaleSyncError):
    """A single call to the translation service failed"""

    kind = "other"

    def __init__(self, message: str, original: Optional[BaseException] = None):
        super().__init__(message)
        self.original = original


class RateLimited(TransportError):
    kind = "rate_limited"


class ServerError(TransportError):
    kind = "server_error"


class RequestTimeout(TransportError):
    kind = "timeout"


class OtherTransportError(TransportError):
    kind = "other"


class BatchParseError(LocaleSyncError):
    """Batch response could not be turned into a list of the expected length"""


class EmptyResultError(LocaleSyncError):
    """The service answered with an empty translation"""


class TranslationExhausted(LocaleSyncError):
    """Every attempt for one logical request failed"""

    def __init__(self, message: str, last_error: Optional[BaseException] = None):
        super().__init__(message)
        self.last_error = last_error


class DocumentIOError(LocaleSyncError):
    """A locale file could not be read, parsed or written"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class SourceLoadError(DocumentIOError):
    """The source document of a pair could not be loaded"""


class DirectoryScanError(LocaleSyncError):
    """The locale root or the source language directory is missing"""
