# clusterwatch/core/exceptions.py

from .enums import HostErrorKind


class ClusterwatchError(Exception):
    """Base exception for all application errors"""
    pass

class ConfigurationError(ClusterwatchError):
    """Base exception for configuration errors"""
    pass

class HostFetchError(ClusterwatchError):
    """Base exception for a failed observation of a single host"""
    kind: HostErrorKind = HostErrorKind.UNREACHABLE

class HostTimeout(HostFetchError):
    """Host did not answer within the request timeout"""
    kind = HostErrorKind.TIMEOUT

class HostUnreachable(HostFetchError):
    """Transport-level failure (DNS, connection refused, TLS)"""
    kind = HostErrorKind.UNREACHABLE

class BadResponse(HostFetchError):
    """Host answered with a non-success HTTP status"""
    kind = HostErrorKind.BAD_RESPONSE

    def __init__(self, status: int, message: str | None = None):
        self.status = status
        super().__init__(message or f"HTTP {status}")

class MalformedPayload(HostFetchError):
    """Body was not JSON or did not match the metrics schema"""
    kind = HostErrorKind.MALFORMED_PAYLOAD
