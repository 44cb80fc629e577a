"""Recording the one-time winning-number draw of a closed round."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from .db.gateway import PersistenceGateway
from .errors import NotFoundError, Reason, StateConflictError
from .intake import RawSelection, TicketIntakeValidator
from .models import Round

logger = logging.getLogger(__name__)


class DrawResultRecorder:
    """Attaches winning numbers to a closed round exactly once."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        validator: Optional[TicketIntakeValidator] = None,
    ) -> None:
        self._gateway = gateway
        self._validator = validator or TicketIntakeValidator()

    def record_draw(self, round_id: int, numbers: RawSelection) -> Round:
        """Store ``numbers`` as the draw result of round ``round_id``.

        Parameters
        ----------
        round_id : int
            Round receiving the draw.
        numbers : RawSelection
            Winning numbers, kept in the supplied order.

        Returns
        -------
        Round
            The round in its terminal ``drawn`` state.

        Raises
        ------
        ValidationError
            ``invalid-draw-numbers`` when the numbers break the game rules.
        NotFoundError
            ``round-not-found`` when no round has ``round_id``.
        StateConflictError
            ``round-still-active`` before closure, ``already-drawn`` when a
            result is already stored (including one committed concurrently).
        """

        drawn = self._validator.validate_draw(numbers)
        with self._gateway.transaction() as session:
            target = Round.get(session, round_id, for_update=True)
            self._store(session, target, round_id, drawn)

        logger.info(f"Recorded draw {drawn} for round {target.id}")
        return target

    def record_draw_for_latest(self, numbers: RawSelection) -> Round:
        """Record the draw for the most recently created round."""

        drawn = self._validator.validate_draw(numbers)
        with self._gateway.transaction() as session:
            target = Round.latest(session, for_update=True)
            if target is None:
                raise NotFoundError(Reason.ROUND_NOT_FOUND, "No round exists yet")
            # A round opened while we waited for the lock is now the latest one.
            newest = Round.latest(session)
            if newest.id != target.id:
                target = Round.get(session, newest.id, for_update=True)
            self._store(session, target, target.id, drawn)

        logger.info(f"Recorded draw {drawn} for round {target.id}")
        return target

    def _store(
        self,
        session: Session,
        target: Optional[Round],
        round_id: int,
        drawn: list[int],
    ) -> None:
        if target is None:
            raise NotFoundError(Reason.ROUND_NOT_FOUND, f"Round {round_id} does not exist")
        if target.is_active:
            logger.warning(f"Draw rejected: round {round_id} is still active")
            raise StateConflictError(
                Reason.ROUND_STILL_ACTIVE, f"Round {round_id} must be closed before the draw"
            )
        if target.is_drawn:
            logger.warning(f"Draw rejected: round {round_id} already drawn")
            raise StateConflictError(
                Reason.ALREADY_DRAWN, f"Round {round_id} already has a draw result"
            )

        # The guarded UPDATE is the final arbiter: a writer that slipped past
        # the checks above matches zero rows.
        result = session.execute(
            update(Round)
            .where(
                Round.id == round_id,
                Round.is_active.is_(False),
                Round.drawn_numbers.is_(None),
            )
            .values(drawn_numbers=drawn)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            logger.warning(f"Draw rejected: round {round_id} drawn concurrently")
            raise StateConflictError(
                Reason.ALREADY_DRAWN, f"Round {round_id} already has a draw result"
            )
        session.refresh(target)


__all__ = ["DrawResultRecorder"]
