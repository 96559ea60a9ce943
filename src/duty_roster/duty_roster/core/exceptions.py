from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConfirmationRequiredError(ValidationError):
    """Raised when a destructive action is dispatched without confirmation."""


class ApprovalRequiredError(ValidationError):
    """Raised when a report export is attempted before it was approved."""


class NotFoundError(DomainError):
    """Raised when a requested record does not exist."""


class CapabilityUnavailable(NotFoundError):
    """Raised when the schedule tables are missing from the database."""


class PersistenceError(DomainError):
    """Raised when the durable store rejects a create/update/delete.

    Carries enough context for the caller to retry the same operation.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        key: Optional[object] = None,
        cells: Sequence[object] = (),
    ):
        super().__init__(message)
        self.operation = operation
        self.key = key
        self.cells = tuple(cells)
