"""Alembic environment for the lotto schema.

The target database and driver options come from
``lotto.db.migrations.migration_target``: the values ``alembic_config`` put
on the config, or the same environment settings the application reads.
"""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context

from lotto.db.engine import make_engine
from lotto.db.migrations import migration_target
from lotto.models import Base

config = context.config

if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata

DATABASE_URL, CONNECT_ARGS = migration_target(config)
# ConfigParser interpolation treats "%" specially.
config.set_main_option("sqlalchemy.url", DATABASE_URL.replace("%", "%%"))

_CONFIGURE_OPTIONS = {
    "target_metadata": target_metadata,
    "compare_type": True,
    # One transaction per revision: a failing revision leaves earlier ones
    # applied and recorded in alembic_version.
    "transaction_per_migration": True,
}


def run_migrations_offline() -> None:
    context.configure(
        url=DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_CONFIGURE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = make_engine(DATABASE_URL, connect_args=CONNECT_ARGS)
    try:
        with engine.connect() as connection:
            context.configure(
                connection=connection,
                render_as_batch=connection.dialect.name == "sqlite",
                **_CONFIGURE_OPTIONS,
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
