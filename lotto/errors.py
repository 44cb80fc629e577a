"""Error taxonomy shared by every round, ticket and draw operation.

Each error carries a stable :class:`Reason` code so callers (HTTP handlers,
admin scripts) can map failures without parsing messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Reason(str, Enum):
    """Stable, machine readable failure codes."""

    # ticket intake
    MISSING_OR_INVALID_IDENTITY = "missing-or-invalid-identity"
    NUMBERS_REQUIRED = "numbers-required"
    MALFORMED_TOKEN = "malformed-token"
    DUPLICATE_IN_INPUT = "duplicate-in-input"
    OUT_OF_RANGE = "out-of-range"
    INVALID_CARDINALITY = "invalid-cardinality"
    INVALID_DRAW_NUMBERS = "invalid-draw-numbers"

    # round state
    NO_ACTIVE_ROUND = "no-active-round"
    ROUND_CLOSED = "round-closed"
    ROUND_STILL_ACTIVE = "round-still-active"
    ALREADY_DRAWN = "already-drawn"

    # lookups
    ROUND_NOT_FOUND = "round-not-found"
    TICKET_NOT_FOUND = "ticket-not-found"

    # storage
    PERSISTENCE_FAILURE = "persistence-failure"
    CONSTRAINT_VIOLATION = "constraint-violation"

    def __str__(self) -> str:
        return self.value


class LottoError(Exception):
    """Base class for every failure surfaced by the core."""

    def __init__(self, reason: Reason, message: Optional[str] = None) -> None:
        self.reason = reason
        self.message = message or reason.value
        super().__init__(self.message)

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return f"<{type(self).__name__}(reason={self.reason.value!r}, message={self.message!r})>"


class ValidationError(LottoError, ValueError):
    """Caller supplied input that breaks a ticket or draw rule."""


class StateConflictError(LottoError):
    """The round is not in the state the operation requires."""


class NotFoundError(LottoError, LookupError):
    """A referenced round or ticket does not exist."""


class PersistenceError(LottoError, RuntimeError):
    """The store failed mid-operation; the unit of work was rolled back."""

    def __init__(
        self,
        message: Optional[str] = None,
        reason: Reason = Reason.PERSISTENCE_FAILURE,
    ) -> None:
        super().__init__(reason, message)


class ConstraintViolationError(PersistenceError):
    """A database constraint rejected the write (e.g. a second active round)."""

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message, reason=Reason.CONSTRAINT_VIOLATION)


class ConfigError(ValueError):
    """Startup configuration is missing or inconsistent."""


__all__ = [
    "Reason",
    "LottoError",
    "ValidationError",
    "StateConflictError",
    "NotFoundError",
    "PersistenceError",
    "ConstraintViolationError",
    "ConfigError",
]
