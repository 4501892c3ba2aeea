from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool
from sqlalchemy.engine import make_url

from splitit.config import get_settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Schema lives in hand-written revisions; there is no ORM metadata to diff against.
target_metadata = None


def _migration_url() -> str:
    url = make_url(get_settings().database_url)
    # Alembic runs on the sync psycopg driver even when the bot uses asyncpg.
    if url.drivername.endswith("+asyncpg"):
        url = url.set(drivername="postgresql")
    return url.render_as_string(hide_password=False)


def run_migrations_offline() -> None:
    context.configure(url=_migration_url(), literal_binds=True, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(_migration_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
