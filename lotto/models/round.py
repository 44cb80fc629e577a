"""Database model for lottery rounds."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, Index, select, text
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from ..db.utils import dt_iso
from .base import Base
from .column_types import ID_TYPE, INT_LIST_TYPE

if TYPE_CHECKING:
    from .ticket import Ticket


class RoundState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    DRAWN = "drawn"


class Round(Base):
    """One lottery cycle: open for tickets, then closed, then drawn once."""

    __tablename__ = "rounds"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    """Primary key, monotonically increasing."""

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    """``True`` while the round accepts tickets. At most one row may hold it."""

    drawn_numbers: Mapped[Optional[list[int]]] = mapped_column(
        INT_LIST_TYPE, nullable=True
    )
    """Winning numbers in the order supplied; written once after closure."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    """Timestamp when the round was opened."""

    closed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    """Timestamp when the round stopped accepting tickets."""

    tickets: Mapped[list["Ticket"]] = relationship(back_populates="round")
    """Tickets admitted while this round was active."""

    __table_args__ = (
        # Partial unique index: only rows with is_active = true participate,
        # so a second active round cannot be committed by any writer.
        Index(
            "uq_rounds_single_active",
            "is_active",
            unique=True,
            sqlite_where=text("is_active"),
            postgresql_where=text("is_active"),
        ),
    )

    def __init__(
        self,
        *,
        is_active: bool = True,
        drawn_numbers: Optional[list[int]] = None,
        created_at: Optional[datetime] = None,
        closed_at: Optional[datetime] = None,
    ) -> None:
        self.is_active = is_active
        if drawn_numbers is not None:
            self.drawn_numbers = list(drawn_numbers)
        if created_at is not None:
            self.created_at = created_at
        self.closed_at = closed_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<Round(id={id}, state={state}, drawn_numbers={drawn})>".format(
            id=self.id,
            state=self.state.value,
            drawn=self.drawn_numbers,
        )

    @property
    def is_drawn(self) -> bool:
        return self.drawn_numbers is not None

    @property
    def state(self) -> RoundState:
        if self.is_active:
            return RoundState.OPEN
        if self.is_drawn:
            return RoundState.DRAWN
        return RoundState.CLOSED

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "state": self.state.value,
            "is_active": self.is_active,
            "drawn_numbers": list(self.drawn_numbers) if self.drawn_numbers is not None else None,
            "created_at": dt_iso(self.created_at),
            "closed_at": dt_iso(self.closed_at),
        }

    @classmethod
    def get(
        cls, session: Session, round_id: int, *, for_update: bool = False
    ) -> Optional["Round"]:
        """Return the round with ``round_id``, optionally row-locked."""

        stmt = select(cls).where(cls.id == round_id)
        if for_update:
            stmt = stmt.with_for_update()
        return session.scalar(stmt.execution_options(populate_existing=True))

    @classmethod
    def get_active(
        cls,
        session: Session,
        *,
        for_update: bool = False,
        shared: bool = False,
    ) -> Optional["Round"]:
        """Return the round currently accepting tickets, if any.

        ``for_update`` takes an exclusive row lock (closing, drawing);
        ``shared`` takes a share lock so a concurrent close waits for the
        caller's transaction (ticket admission).
        """

        stmt = select(cls).where(cls.is_active.is_(True)).order_by(cls.id.desc())
        if for_update:
            stmt = stmt.with_for_update()
        elif shared:
            stmt = stmt.with_for_update(read=True)
        return session.scalars(stmt.execution_options(populate_existing=True)).first()

    @classmethod
    def latest(
        cls, session: Session, *, for_update: bool = False
    ) -> Optional["Round"]:
        """Return the most recently created round regardless of its state.

        Ids are assigned by the database in insert order, so the highest id is
        the newest round whatever the clocks of the writing processes say.
        """

        stmt = select(cls).order_by(cls.id.desc()).limit(1)
        if for_update:
            stmt = stmt.with_for_update()
        return session.scalars(stmt.execution_options(populate_existing=True)).first()

    @classmethod
    def is_open(cls, session: Session, round_id: int) -> bool:
        """Re-read ``is_active`` straight from the store, bypassing the identity map."""

        return bool(session.scalar(select(cls.is_active).where(cls.id == round_id)))


__all__ = ["Round", "RoundState"]
