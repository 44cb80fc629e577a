"""Ticket admission into the active round, and ticket lookup."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from .db.gateway import PersistenceGateway
from .errors import NotFoundError, Reason, StateConflictError
from .intake import RawSelection, TicketIntakeValidator
from .models import Round, Ticket

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TicketView:
    """A ticket together with the draw result of its round (if any)."""

    id: uuid.UUID
    round_id: int
    national_id: str
    numbers: list[int]
    drawn_numbers: Optional[list[int]]
    created_at: datetime

    @property
    def matched_numbers(self) -> Optional[list[int]]:
        if self.drawn_numbers is None:
            return None
        drawn = set(self.drawn_numbers)
        return [n for n in self.numbers if n in drawn]


class TicketIssuer:
    """Validates submissions and admits them into the active round."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        validator: Optional[TicketIntakeValidator] = None,
    ) -> None:
        self._gateway = gateway
        self._validator = validator or TicketIntakeValidator()

    def issue(
        self,
        national_id: Optional[str],
        numbers: RawSelection,
        *,
        user_sub: Optional[str] = None,
    ) -> Ticket:
        """Create a ticket in the round active at admission time.

        The round is share-locked while the ticket is inserted and its
        ``is_active`` flag is read again before commit, so a ticket never
        lands in a round that closed underneath it.

        Parameters
        ----------
        national_id : Optional[str]
            Player identifier (1-20 characters).
        numbers : RawSelection
            Raw selection, e.g. ``"1,2,3,4,5,6"`` or ``[1, 2, 3, 4, 5, 6]``.
        user_sub : Optional[str]
            Identity key of the authenticated submitter, stored verbatim.

        Returns
        -------
        Ticket
            The persisted ticket.

        Raises
        ------
        ValidationError
            When the submission breaks an intake rule.
        StateConflictError
            ``no-active-round`` when sales are closed, ``round-closed`` when
            the round closed before this insert could commit.
        """

        selection = self._validator.validate(national_id, numbers)

        with self._gateway.transaction() as session:
            active = Round.get_active(session, shared=True)
            if active is None:
                logger.warning("Ticket rejected: no active round")
                raise StateConflictError(Reason.NO_ACTIVE_ROUND, "No active round")

            ticket = Ticket(
                round_id=active.id,
                national_id=selection.national_id,
                numbers=selection.numbers,
                user_sub=user_sub,
            )
            session.add(ticket)
            session.flush()

            if not Round.is_open(session, active.id):
                logger.warning(f"Ticket rejected: round {active.id} closed during submission")
                raise StateConflictError(
                    Reason.ROUND_CLOSED, f"Round {active.id} closed before the ticket was stored"
                )

        logger.info(f"Issued ticket {ticket.id} in round {ticket.round_id}")
        return ticket

    def get(self, ticket_id: Union[uuid.UUID, str]) -> TicketView:
        with self._gateway.transaction() as session:
            ticket = Ticket.get(session, ticket_id)
            if ticket is None:
                raise NotFoundError(Reason.TICKET_NOT_FOUND, f"Ticket {ticket_id} not found")
            drawn = ticket.round.drawn_numbers
            return TicketView(
                id=ticket.id,
                round_id=ticket.round_id,
                national_id=ticket.national_id,
                numbers=list(ticket.numbers),
                drawn_numbers=list(drawn) if drawn is not None else None,
                created_at=ticket.created_at,
            )

    def count_in_round(self, round_id: int) -> int:
        with self._gateway.transaction() as session:
            return Ticket.count_for_round(session, round_id)


__all__ = ["TicketIssuer", "TicketView"]
