"""
Persistence errors.

Validation problems never show up here; they are reported through
ValidationResult. These exceptions cover malformed stored data and
backend failures, and are always propagated to the caller.
"""

from __future__ import annotations

from typing import Optional


class PersistenceError(Exception):
    """Base exception for save/load/transfer failures."""


class MalformedEnvelope(PersistenceError):
    """Raised when a stored record cannot be read as an envelope."""


class MalformedStore(PersistenceError):
    """Raised when an on-device store file cannot be read.

    The file is left untouched so its records can still be recovered.
    """


class MalformedToken(PersistenceError):
    """Raised when an export token cannot be decoded into a snapshot."""


class TransportError(PersistenceError):
    """Raised when a remote request fails or is answered with an error status.

    Attributes:
        status_code: HTTP status, or None when no response was received.
        url: The request target.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url
