"""Database model for issued tickets."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Iterable, Optional, Union

from sqlalchemy import (
    DateTime,
    ForeignKey,
    String,
    Uuid,
    event,
    func,
    select,
)
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship, validates

from ..db.utils import dt_iso
from .base import Base
from .column_types import ID_TYPE, INT_LIST_TYPE

if TYPE_CHECKING:
    from .round import Round


class Ticket(Base):
    """A validated number selection bound to the round active at its creation.

    Tickets are write-once: any attempt to flush a modification raises.
    """

    __tablename__ = "tickets"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    """Opaque identifier handed out to the player (and encoded in the locator)."""

    round_id: Mapped[int] = mapped_column(
        ID_TYPE,
        ForeignKey("rounds.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    """Round that was active when the ticket was admitted."""

    national_id: Mapped[str] = mapped_column(String(20), nullable=False)
    """Player's national identifier as supplied at submission."""

    numbers: Mapped[list[int]] = mapped_column(INT_LIST_TYPE, nullable=False)
    """Selected numbers, stored ascending."""

    user_sub: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, index=True
    )
    """Identity key of the authenticated submitter, if any. Lookup only."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    """Admission timestamp."""

    round: Mapped["Round"] = relationship(back_populates="tickets")

    def __init__(
        self,
        *,
        national_id: str,
        numbers: Iterable[int],
        round: Optional["Round"] = None,
        round_id: Optional[int] = None,
        user_sub: Optional[str] = None,
        id: Optional[uuid.UUID] = None,
        created_at: Optional[datetime] = None,
    ) -> None:
        if round is not None:
            self.round = round
        if round_id is not None:
            self.round_id = round_id
        if id is not None:
            self.id = id
        self.national_id = national_id
        self.numbers = list(numbers)
        self.user_sub = user_sub
        if created_at is not None:
            self.created_at = created_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<Ticket(id={id}, round_id={round_id}, numbers={numbers})>".format(
            id=self.id,
            round_id=self.round_id,
            numbers=self.numbers,
        )

    @validates("numbers")
    def _sort_numbers(self, _key: str, value: Iterable[int]) -> list[int]:
        return sorted(int(n) for n in value)

    def to_json(self) -> dict:
        return {
            "id": str(self.id),
            "round_id": self.round_id,
            "national_id": self.national_id,
            "numbers": list(self.numbers),
            "user_sub": self.user_sub,
            "created_at": dt_iso(self.created_at),
        }

    @classmethod
    def get(
        cls, session: Session, ticket_id: Union[uuid.UUID, str]
    ) -> Optional["Ticket"]:
        """Return the ticket for ``ticket_id``; malformed ids simply match nothing."""

        if not isinstance(ticket_id, uuid.UUID):
            try:
                ticket_id = uuid.UUID(str(ticket_id))
            except ValueError:
                return None
        return session.get(cls, ticket_id)

    @classmethod
    def count_for_round(cls, session: Session, round_id: int) -> int:
        stmt = select(func.count(cls.id)).where(cls.round_id == round_id)
        return int(session.scalar(stmt) or 0)


@event.listens_for(Ticket, "before_update")
def _reject_ticket_update(mapper, connection, target: Ticket) -> None:
    raise ValueError(f"Ticket {target.id} is immutable once created")


__all__ = ["Ticket"]
