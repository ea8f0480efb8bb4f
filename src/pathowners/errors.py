"""Error types for path-owners.

Every failure the tool can report derives from ``OwnersError`` so that
the CLI can catch one type, print it, and exit non-zero.  There is no
retryable error class: all errors abort the run.
"""
from __future__ import annotations


class OwnersError(Exception):
    """Base class for all path-owners errors."""


class TransportError(OwnersError):
    """The remote query could not complete (network, HTTP or auth failure).

    Parameters
    ----------
    message:
        Human-readable description of the failure.
    method:
        The Conduit method being called, when known.
    error_code:
        The Conduit ``error_code`` returned by the server, if any.
    """

    def __init__(
        self,
        message: str,
        method: str | None = None,
        error_code: str | None = None,
    ) -> None:
        self.method = method
        self.error_code = error_code
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.method is None:
            return message
        if self.error_code:
            return f"{self.method}: {message} ({self.error_code})"
        return f"{self.method}: {message}"


class DataContractError(OwnersError):
    """A package record returned by the server is malformed.

    Parameters
    ----------
    message:
        What was wrong with the record.
    record_id:
        The ``id`` (or ``phid``) of the offending record, when present.
    """

    def __init__(self, message: str, record_id: object = None) -> None:
        self.record_id = record_id
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.record_id is None:
            return f"Invalid package record: {message}"
        return f"Invalid package record {self.record_id!r}: {message}"


class ConfigurationError(OwnersError):
    """Configuration or invocation is invalid (unknown format, missing URI)."""


class WorkingCopyError(ConfigurationError):
    """The working copy could not be inspected."""


__all__ = [
    "OwnersError",
    "TransportError",
    "DataContractError",
    "ConfigurationError",
    "WorkingCopyError",
]
