"""Alembic environment for the time_profiles schema.

The URL always comes from ``Settings.DATABASE_URL`` so migrations hit the
same database as the service. SQLite cannot ALTER most constraints in place,
so migrations there run in batch (copy-and-move) mode.
"""
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from time_profiles.config import settings
from time_profiles.database import Base
from time_profiles.models.queued_job import QueuedJob      # noqa: F401
from time_profiles.models.time_profile import TimeProfile  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _configure_options(url: str) -> dict:
    return {
        "target_metadata": Base.metadata,
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_offline(url: str) -> None:
    """Emit SQL to stdout instead of connecting."""
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online(url: str) -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_options(url))
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_offline(settings.DATABASE_URL)
else:
    run_online(settings.DATABASE_URL)
