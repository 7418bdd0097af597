"""Error taxonomy for the resource finder.

``EndOfSequence`` terminates a traversal normally and is deliberately not a
``ScanError`` so callers can tell the two apart.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ResourceFinderError(Exception):
    """Base class for every error raised by the resource finder."""


class InvalidUriError(ResourceFinderError, ValueError):
    """The URI is malformed or its scheme has no registered factory."""

    def __init__(self, uri: object, reason: str) -> None:
        super().__init__(f'Invalid resource URI {uri!r}: {reason}')
        self.uri = uri
        self.reason = reason


class EndOfSequence(ResourceFinderError):
    """``next`` was called with no further resources."""


class ScanErrorKind(Enum):
    NOT_FOUND = 'not_found'
    IO = 'io'


class ScanError(ResourceFinderError):
    def __init__(self, kind: ScanErrorKind, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.path = path


class UnsupportedOperationError(ResourceFinderError, NotImplementedError):
    """Raised by finders for operations they do not offer, such as ``reset``."""
