from __future__ import annotations

import os
import tempfile
import unittest
from unittest.mock import patch

from alembic.config import Config
from sqlalchemy import inspect

from lotto.config import Settings
from lotto.db.gateway import PersistenceGateway
from lotto.db.migrations import (
    alembic_config,
    current_revision,
    migration_target,
    schema_drift,
    upgrade_db,
)
from lotto.errors import ConstraintViolationError
from lotto.models import Round


class MigrationTests(unittest.TestCase):
    def setUp(self) -> None:
        fd, self.db_path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        self.url = f"sqlite+pysqlite:///{self.db_path}"
        self.gateway = PersistenceGateway.from_url(self.url)

    def tearDown(self) -> None:
        self.gateway.dispose()
        os.remove(self.db_path)

    def test_upgrade_creates_schema_and_records_revision(self) -> None:
        self.assertIsNone(current_revision(self.gateway.engine))

        upgrade_db(self.url)

        tables = set(inspect(self.gateway.engine).get_table_names())
        self.assertTrue({"rounds", "tickets", "alembic_version"} <= tables)
        self.assertEqual(current_revision(self.gateway.engine), "0001")

    def test_upgrade_is_repeatable(self) -> None:
        upgrade_db(self.url)
        upgrade_db(self.url)
        self.assertEqual(current_revision(self.gateway.engine), "0001")

    def test_migrated_schema_allows_one_active_round(self) -> None:
        upgrade_db(self.url)
        with self.gateway.transaction() as session:
            session.add(Round())
        with self.assertRaises(ConstraintViolationError):
            with self.gateway.transaction() as session:
                session.add(Round())

    def test_migrated_indexes(self) -> None:
        upgrade_db(self.url)
        inspector = inspect(self.gateway.engine)
        round_indexes = {ix["name"] for ix in inspector.get_indexes("rounds")}
        ticket_indexes = {ix["name"] for ix in inspector.get_indexes("tickets")}
        self.assertIn("uq_rounds_single_active", round_indexes)
        self.assertIn("ix_tickets_round_id", ticket_indexes)

    def test_drift_reports_missing_tables_on_empty_database(self) -> None:
        drift = schema_drift(self.gateway.engine)
        missing = {getattr(op, "table_name", None) for op in drift}
        self.assertIn("rounds", missing)
        self.assertIn("tickets", missing)


class MigrationTargetTests(unittest.TestCase):
    PARTS_ENV = {
        "DB_USER": "lotto",
        "DB_PASSWORD": "pw",
        "DB_HOST": "db.internal",
        "DB_NAME": "lottery",
    }

    def test_database_parts_reach_migrations(self) -> None:
        settings = Settings.from_env(self.PARTS_ENV)
        url, connect_args = migration_target(alembic_config(environ=self.PARTS_ENV))
        self.assertEqual(url, settings.database.url)
        self.assertEqual(url, "postgresql+psycopg://lotto:pw@db.internal:5432/lottery")
        self.assertEqual(connect_args, {"sslmode": "require"})

    def test_ssl_flag_reaches_migrations(self) -> None:
        env = dict(self.PARTS_ENV, DB_SSL="false")
        _, connect_args = migration_target(alembic_config(environ=env))
        self.assertEqual(connect_args, {"sslmode": "disable"})

    def test_explicit_url_wins_over_environment(self) -> None:
        cfg = alembic_config("sqlite:///./other.db", environ=self.PARTS_ENV)
        url, connect_args = migration_target(cfg)
        self.assertTrue(url.startswith("sqlite:///"))
        self.assertTrue(url.endswith("other.db"))
        self.assertEqual(connect_args, {})

    def test_plain_alembic_cli_reads_environment(self) -> None:
        with patch("lotto.config.load_dotenv"), patch.dict(
            "os.environ", self.PARTS_ENV, clear=True
        ):
            url, connect_args = migration_target(Config())
        self.assertEqual(url, Settings.from_env(self.PARTS_ENV).database.url)
        self.assertEqual(connect_args, {"sslmode": "require"})


if __name__ == "__main__":
    unittest.main()
