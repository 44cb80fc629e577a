"""Exit non-zero when the database schema differs from the ORM models.

Exit codes: 0 in sync, 1 drift found, 2 the check itself failed.
"""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError

from lotto.config import DatabaseSettings
from lotto.db.engine import make_engine
from lotto.db.migrations import schema_drift

logger = logging.getLogger("check_schema_drift")


def _describe(operations, depth: int = 0) -> list[str]:
    lines = []
    for operation in operations:
        lines.append(f"{'  ' * depth}- {operation}")
        lines.extend(_describe(getattr(operation, "ops", None) or [], depth + 1))
    return lines


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compare the live schema with lotto.models")
    parser.add_argument(
        "--database-url", default=None, help="Defaults to the DB_* environment settings"
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")

    if args.database_url:
        engine = make_engine(args.database_url)
    else:
        database = DatabaseSettings.from_env()
        engine = make_engine(database.url, connect_args=database.connect_args)
    target = engine.url.render_as_string(hide_password=True)
    try:
        drift = schema_drift(engine)
    except SQLAlchemyError as exc:
        logger.error(f"Could not inspect {target}: {exc}")
        return 2
    finally:
        engine.dispose()

    if not drift:
        logger.info(f"{target} matches the models")
        return 0
    logger.warning(f"{target} differs from the models:")
    for line in _describe(drift):
        print(line)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
