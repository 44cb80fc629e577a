"""Applying the Alembic revisions shipped with the repository."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from alembic import command
from alembic.config import Config
from alembic.autogenerate import produce_migrations
from alembic.operations.ops import MigrateOperation
from alembic.runtime.migration import MigrationContext
from sqlalchemy.engine import Engine

from ..config import DatabaseSettings
from .engine import ROOT_DIR
from .utils import resolve_sqlite_url

logger = logging.getLogger(__name__)


def alembic_config(
    database_url: Optional[str] = None,
    *,
    connect_args: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """Return an Alembic config bound to the repo's ``alembic/`` directory.

    Parameters
    ----------
    database_url : Optional[str]
        Database to migrate. When omitted, the URL and driver options come
        from :meth:`DatabaseSettings.from_env`, the same source the
        application uses (``DB_URL`` or the ``DB_HOST``/``DB_USER``/... parts
        plus ``DB_SSL``).
    connect_args : Optional[Mapping[str, Any]]
        Driver options for an explicit ``database_url``.
    environ : Optional[Mapping[str, str]]
        Environment to read instead of ``os.environ`` and ``.env``.
    """

    if database_url is None:
        database = DatabaseSettings.from_env(environ)
        database_url, connect_args = database.url, database.connect_args

    cfg = Config(str(ROOT_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT_DIR / "alembic"))
    cfg.attributes["database_url"] = database_url
    cfg.attributes["connect_args"] = dict(connect_args or {})
    # Callers own logging configuration; env.py must not reset it.
    cfg.attributes["configure_logger"] = False
    return cfg


def migration_target(cfg: Config) -> tuple[str, dict[str, Any]]:
    """Return the URL and driver options ``alembic/env.py`` migrates.

    A config from :func:`alembic_config` carries them as attributes; the plain
    ``alembic`` command line falls back to the environment settings.
    """

    url = cfg.attributes.get("database_url")
    if not url:
        database = DatabaseSettings.from_env()
        return database.url, database.connect_args
    return resolve_sqlite_url(url, ROOT_DIR), dict(cfg.attributes.get("connect_args") or {})


def upgrade_db(
    database_url: Optional[str] = None,
    target_revision: str = "head",
    *,
    connect_args: Optional[Mapping[str, Any]] = None,
) -> None:
    """Apply pending revisions up to ``target_revision``.

    Already applied revisions are skipped, so running this repeatedly is safe.
    """
    logger.info(f"Upgrading schema to {target_revision}")
    command.upgrade(alembic_config(database_url, connect_args=connect_args), target_revision)


def current_revision(engine: Engine) -> Optional[str]:
    """Return the revision recorded in ``alembic_version``, or ``None`` if unmanaged."""
    with engine.connect() as connection:
        return MigrationContext.configure(connection).get_current_revision()


def schema_drift(engine: Engine) -> list[MigrateOperation]:
    """Return the operations needed to bring the live schema in line with the models.

    An empty list means the database matches ``Base.metadata``.
    """
    from ..models import Base

    with engine.connect() as connection:
        context = MigrationContext.configure(
            connection=connection,
            opts={
                "compare_type": True,
                "render_as_batch": connection.dialect.name == "sqlite",
            },
        )
        upgrade_ops = produce_migrations(context, Base.metadata).upgrade_ops
    if upgrade_ops is None:
        return []
    return list(upgrade_ops.ops)


__all__ = [
    "alembic_config",
    "current_revision",
    "migration_target",
    "schema_drift",
    "upgrade_db",
]
