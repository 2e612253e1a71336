"""Scan error taxonomy.

Every failure the scan core can report carries an ErrorKind so callers
can tell a retryable dependency outage apart from a requisition that
must not be scanned again.

Only DEPENDENCY_FAILURE is retryable: nothing is committed before the
final conditional update, so re-invoking the scan is the remediation.
"""

from __future__ import annotations

import enum
from typing import Any


class ErrorKind(str, enum.Enum):
    """Classification of scan failures."""
    NOT_FOUND = "NotFound"
    INVALID_TRANSITION = "InvalidTransition"
    INVALID_INPUT = "InvalidInput"
    DEPENDENCY_FAILURE = "DependencyFailure"


class ScanError(Exception):
    """Base class for all errors raised by the scan core."""

    kind: ErrorKind = ErrorKind.DEPENDENCY_FAILURE

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def retryable(self) -> bool:
        return self.kind == ErrorKind.DEPENDENCY_FAILURE

    def to_payload(self) -> dict[str, Any]:
        """Render the error payload returned to trigger callers."""
        return {
            "error": self.kind.value,
            "message": self.message,
            "retryable": self.retryable,
        }


class RequisitionNotFound(ScanError):
    """Raised when the data layer has no requisition with the given id."""
    kind = ErrorKind.NOT_FOUND


class TransitionError(ScanError):
    """Raised when a requisition is not in the state a transition requires.

    Also raised when a concurrent scan committed first.
    """
    kind = ErrorKind.INVALID_TRANSITION


class InvalidInputError(ScanError):
    """Raised for malformed upstream data, e.g. an unknown skill id."""
    kind = ErrorKind.INVALID_INPUT


class DependencyFailure(ScanError):
    """Raised when the external data layer could not be read or written."""
    kind = ErrorKind.DEPENDENCY_FAILURE
