from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .round import Round, RoundState  # noqa: F401
from .ticket import Ticket  # noqa: F401

__all__ = [
    "Base",
    "Round",
    "RoundState",
    "Ticket",
]
