from __future__ import annotations

import unittest

from lotto.config import Settings
from lotto.db.gateway import PersistenceGateway
from lotto.errors import Reason, StateConflictError, ValidationError
from lotto.services import LottoServices


class LottoServicesTests(unittest.TestCase):
    def setUp(self) -> None:
        self.gateway = PersistenceGateway.from_url("sqlite+pysqlite:///:memory:")
        self.gateway.create_schema()

    def tearDown(self) -> None:
        self.gateway.dispose()

    def test_full_round_lifecycle(self) -> None:
        services = LottoServices.from_gateway(self.gateway)

        round_id = services.rounds.open_round().round.id
        ticket = services.tickets.issue("900101-1234567", "3,9,12,27,33,41")
        self.assertEqual(
            services.locator_for(ticket.id), f"http://localhost:4080/ticket/{ticket.id}"
        )

        services.rounds.close_round()
        with self.assertRaises(StateConflictError) as ctx:
            services.tickets.issue("900101-1234567", "1,2,3,4,5,6")
        self.assertEqual(ctx.exception.reason, Reason.NO_ACTIVE_ROUND)

        services.draws.record_draw(round_id, "41,3,8,19,27,44")
        view = services.tickets.get(ticket.id)
        self.assertEqual(view.matched_numbers, [3, 27, 41])

        summary = services.rounds.current_round_summary()
        self.assertEqual(summary.ticket_count, 1)
        self.assertEqual(summary.drawn_numbers, [41, 3, 8, 19, 27, 44])

    def test_settings_rules_and_base_url_are_shared(self) -> None:
        settings = Settings.from_env(
            {
                "RENDER_EXTERNAL_URL": "https://lotto.example",
                "LOTTO_MIN_PICKS": "5",
                "LOTTO_MAX_PICKS": "5",
                "LOTTO_HIGHEST_NUMBER": "50",
            }
        )
        services = LottoServices.from_gateway(self.gateway, settings=settings)
        self.assertIs(services.tickets._validator, services.validator)
        self.assertIs(services.draws._validator, services.validator)

        services.rounds.open_round()
        ticket = services.tickets.issue("id-1", "50,1,2,3,4")
        self.assertEqual(ticket.numbers, [1, 2, 3, 4, 50])
        self.assertTrue(services.locator_for(ticket.id).startswith("https://lotto.example/ticket/"))

        with self.assertRaises(ValidationError) as ctx:
            services.tickets.issue("id-1", "1,2,3,4,5,6")
        self.assertEqual(ctx.exception.reason, Reason.INVALID_CARDINALITY)


if __name__ == "__main__":
    unittest.main()
