"""Opening, closing and inspecting lottery rounds."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import update

from .db.gateway import PersistenceGateway
from .errors import ConstraintViolationError
from .models import Round, RoundState, Ticket

logger = logging.getLogger(__name__)


@dataclass
class RoundOpening:
    """Outcome of :meth:`RoundLifecycleManager.open_round`.

    Attributes
    ----------
    round : Round
        The active round after the call, new or pre-existing.
    created : bool
        ``True`` only for the caller whose insert created ``round``.
    """

    round: Round
    created: bool


@dataclass(frozen=True)
class RoundSummary:
    """Snapshot of the most recent round for display."""

    round_id: int
    state: RoundState
    is_active: bool
    drawn_numbers: Optional[list[int]]
    ticket_count: int


class RoundLifecycleManager:
    """Keeps at most one round open and moves rounds from open to closed."""

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway

    def open_round(self) -> RoundOpening:
        """Open a new round unless one is already active.

        Repeated or concurrent calls converge on a single active round: the
        partial unique index on ``rounds.is_active`` lets exactly one insert
        commit, and a caller that loses that race reports the winner's round.

        Returns
        -------
        RoundOpening
            The active round and whether this call created it.
        """

        try:
            with self._gateway.transaction() as session:
                active = Round.get_active(session, for_update=True)
                if active is not None:
                    logger.debug(f"Round {active.id} already active, nothing to open")
                    return RoundOpening(round=active, created=False)

                new_round = Round()
                session.add(new_round)
                session.flush()
                opening = RoundOpening(round=new_round, created=True)
        except ConstraintViolationError:
            # Another caller committed its round between our check and insert.
            with self._gateway.transaction() as session:
                winner = Round.get_active(session)
            if winner is None:
                raise
            logger.warning(f"Lost open race; round {winner.id} is already active")
            return RoundOpening(round=winner, created=False)

        logger.info(f"Opened round {opening.round.id}")
        return opening

    def close_round(self) -> Optional[Round]:
        """Close the active round and stamp ``closed_at``.

        Returns
        -------
        Optional[Round]
            The round that was closed, or ``None`` when no round was active.
        """

        with self._gateway.transaction() as session:
            active = Round.get_active(session, for_update=True)
            if active is None:
                logger.debug("No active round to close")
                return None

            result = session.execute(
                update(Round)
                .where(Round.id == active.id, Round.is_active.is_(True))
                .values(is_active=False, closed_at=datetime.now(timezone.utc))
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                logger.debug(f"Round {active.id} was closed concurrently")
                return None
            session.refresh(active)

        logger.info(f"Closed round {active.id}")
        return active

    def get_current_round(self) -> Optional[Round]:
        """Return the most recently created round, whatever its state."""

        with self._gateway.transaction() as session:
            return Round.latest(session)

    def get_active_round(self) -> Optional[Round]:
        """Return the round currently accepting tickets, if any."""

        with self._gateway.transaction() as session:
            return Round.get_active(session)

    def current_round_summary(self) -> Optional[RoundSummary]:
        with self._gateway.transaction() as session:
            current = Round.latest(session)
            if current is None:
                return None
            return RoundSummary(
                round_id=current.id,
                state=current.state,
                is_active=current.is_active,
                drawn_numbers=(
                    list(current.drawn_numbers)
                    if current.drawn_numbers is not None
                    else None
                ),
                ticket_count=Ticket.count_for_round(session, current.id),
            )


__all__ = ["RoundLifecycleManager", "RoundOpening", "RoundSummary"]
