"""Round/ticket lifecycle and draw recording for a numbered lottery."""

from .db.gateway import PersistenceGateway
from .draws import DrawResultRecorder
from .errors import (
    ConfigError,
    ConstraintViolationError,
    LottoError,
    NotFoundError,
    PersistenceError,
    Reason,
    StateConflictError,
    ValidationError,
)
from .intake import TicketIntakeValidator, TicketSelection, validate_selection
from .rounds import RoundLifecycleManager, RoundOpening, RoundSummary
from .rules import DEFAULT_RULES, GameRules
from .tickets import TicketIssuer, TicketView

__all__ = [
    "ConfigError",
    "ConstraintViolationError",
    "DEFAULT_RULES",
    "DrawResultRecorder",
    "GameRules",
    "LottoError",
    "NotFoundError",
    "PersistenceError",
    "PersistenceGateway",
    "Reason",
    "RoundLifecycleManager",
    "RoundOpening",
    "RoundSummary",
    "StateConflictError",
    "TicketIntakeValidator",
    "TicketIssuer",
    "TicketSelection",
    "TicketView",
    "ValidationError",
    "validate_selection",
]
