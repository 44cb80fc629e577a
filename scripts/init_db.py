from __future__ import annotations

import logging
import os

from sqlalchemy import inspect

from lotto.config import DatabaseSettings
from lotto.db.engine import make_engine
from lotto.db.migrations import current_revision, upgrade_db


def print_tables(database: DatabaseSettings) -> None:
    """Inspect the configured database and print all table names."""
    engine = make_engine(database.url, connect_args=database.connect_args)
    try:
        insp = inspect(engine)
        print("Current tables:", ", ".join(sorted(insp.get_table_names())))
        print("Schema revision:", current_revision(engine))
    finally:
        engine.dispose()


def main() -> None:
    """Apply migrations (default to head) and report the resulting schema."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    database = DatabaseSettings.from_env()
    upgrade_db(database.url, connect_args=database.connect_args)
    print_tables(database)


if __name__ == "__main__":
    main()
