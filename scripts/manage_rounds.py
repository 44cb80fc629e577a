"""Admin command line for round transitions and draw results.

Examples::

    python scripts/manage_rounds.py open
    python scripts/manage_rounds.py close
    python scripts/manage_rounds.py draw 7,14,21,28,35,42 --round 3
    python scripts/manage_rounds.py status
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Sequence

from lotto.config import Settings
from lotto.errors import LottoError
from lotto.services import LottoServices

logger = logging.getLogger("manage_rounds")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Open/close rounds and record draws")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("open", help="Open a round unless one is already active")
    sub.add_parser("close", help="Close the active round")
    draw = sub.add_parser("draw", help="Record the draw for a closed round")
    draw.add_argument("numbers", help="Comma-separated winning numbers")
    draw.add_argument(
        "--round",
        dest="round_id",
        type=int,
        default=None,
        help="Round id (defaults to the most recent round)",
    )
    sub.add_parser("status", help="Show the most recent round")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    with LottoServices.from_settings(settings) as services:
        try:
            if args.command == "open":
                opening = services.rounds.open_round()
                verb = "Opened" if opening.created else "Already active:"
                print(f"{verb} round {opening.round.id}")
            elif args.command == "close":
                closed = services.rounds.close_round()
                print(f"Closed round {closed.id}" if closed else "No active round")
            elif args.command == "draw":
                if args.round_id is None:
                    drawn = services.draws.record_draw_for_latest(args.numbers)
                else:
                    drawn = services.draws.record_draw(args.round_id, args.numbers)
                print(f"Round {drawn.id} drawn: {drawn.drawn_numbers}")
            else:
                summary = services.rounds.current_round_summary()
                if summary is None:
                    print("No rounds yet")
                else:
                    print(
                        json.dumps(
                            {
                                "round_id": summary.round_id,
                                "state": summary.state.value,
                                "drawn_numbers": summary.drawn_numbers,
                                "ticket_count": summary.ticket_count,
                            }
                        )
                    )
        except LottoError as exc:
            logger.error(f"{args.command} failed: [{exc.reason.value}] {exc.message}")
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
