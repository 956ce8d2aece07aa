"""Domain error taxonomy.

Every error carries a stable ``code`` that the service layer copies into
:class:`~cardball.services.result.ServiceError`. Errors are raised at the
point of violation and are never retried or replaced with defaults.
"""

from __future__ import annotations

from typing import Any


class CardballError(Exception):
    """Base class for all domain errors."""

    code: str = "ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail


class NotFoundError(CardballError):
    """A referenced game, team, player, or action does not exist."""

    code = "NOT_FOUND"


class InvalidArgumentError(CardballError):
    """Malformed construction input."""

    code = "INVALID_ARGUMENT"


class InvalidEnumError(CardballError):
    """An unrecognized side or role token."""

    code = "INVALID_ENUM"


class ValidationError(CardballError):
    """A lineup slot or fielding position is out of range or duplicated."""

    code = "VALIDATION"


class ReferentialError(CardballError):
    """A result action references a parent that is not in the chain."""

    code = "REFERENTIAL"


class ConflictError(CardballError):
    """The stored game changed since it was loaded (optimistic lock)."""

    code = "CONFLICT"
