import logging

from lotto.config import Settings
from lotto.models import Base
from lotto.services import LottoServices


def main() -> None:
    """Reset the development database and fill it with a drawn and an open round."""
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    with LottoServices.from_settings(settings) as services:
        engine = services.gateway.engine
        Base.metadata.drop_all(engine)
        Base.metadata.create_all(engine)

        # A finished round with a few tickets and its draw.
        first = services.rounds.open_round().round
        services.tickets.issue("900101-1234567", "3,11,19,27,35,43", user_sub="auth0|alice")
        services.tickets.issue("851212-7654321", [7, 14, 21, 28, 35, 42, 44])
        services.tickets.issue("770707-1111111", "1,2,3,4,5,6,7,8,9,10")
        services.rounds.close_round()
        services.draws.record_draw(first.id, [7, 14, 21, 28, 35, 42])

        # The round currently on sale.
        services.rounds.open_round()
        ticket = services.tickets.issue("900101-1234567", "5,10,15,20,25,30", user_sub="auth0|alice")

        summary = services.rounds.current_round_summary()
        print(f"Seeded rounds; current round {summary.round_id} has {summary.ticket_count} ticket(s)")
        print(f"Sample ticket: {services.locator_for(ticket.id)}")


if __name__ == "__main__":
    main()
