"""Alembic environment for riskquiz_db.

Migrations are applied against a live database with the psycopg2 URL from
``get_sync_url()``; the asyncpg URL is for the application only.  Offline
(``--sql``) generation is not supported.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

import riskquiz_db.models  # noqa: F401  registers questions, risk_assessments, user_responses
from riskquiz_db.config import get_sync_url
from riskquiz_db.models.base import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def run_migrations() -> None:
    if context.is_offline_mode():
        raise RuntimeError("riskquiz migrations need a database connection; drop --sql")

    connectable = create_engine(get_sync_url(), poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=Base.metadata,
            compare_type=True,
        )
        with context.begin_transaction():
            context.run_migrations()


run_migrations()
