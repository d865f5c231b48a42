"""
Exception hierarchy for version mapping.

Every failure raised while building a scenario map derives from
VersionMappingError, so callers can treat any of them as
"no scenario map available this run".
"""

from typing import List, Optional


class VersionMappingError(Exception):
    """Base class for all resolution failures."""
    pass


class FetchFailure(VersionMappingError):
    """Raised when a manifest or release document cannot be downloaded."""

    def __init__(self, message: str, url: str, status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class ParseFailure(VersionMappingError):
    """Raised when a downloaded document is not valid JSON or has the wrong shape."""

    def __init__(self, message: str, errors: Optional[List[str]] = None, url: Optional[str] = None):
        super().__init__(message)
        self.errors = errors or []
        self.url = url


class MalformedProtocolVersion(VersionMappingError):
    """Raised when a protocol version key is not an integer or repeats another."""

    def __init__(self, key: str, reason: str = "is not an integer"):
        super().__init__(f"Protocol version {key!r} {reason}")
        self.key = key


class InsufficientVersions(VersionMappingError):
    """Raised when fewer than two usable plugin versions remain."""

    def __init__(self, count: int):
        super().__init__(
            f"Need at least 2 released plugin versions, found {count}"
        )
        self.count = count


class NoSoloPairFound(VersionMappingError):
    """Raised when no two consecutive plugin releases share a protocol version."""
    pass


class NoHostVersionFound(VersionMappingError):
    """Raised when no host release is available for a protocol version."""

    def __init__(self, protocol: int, reason: str = ""):
        message = f"No host version found for protocol {protocol}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.protocol = protocol
