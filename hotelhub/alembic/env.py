from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

# Metadata of the application models, for autogenerate
from hotelhub.db import DATABASE_URL, Base
from hotelhub import models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _configure_kwargs() -> dict:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        # SQLite needs batch mode for ALTER TABLE
        "render_as_batch": DATABASE_URL.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit SQL for DATABASE_URL without connecting."""
    context.configure(
        url=DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs(),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations against DATABASE_URL (the same URL the application uses)."""
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = DATABASE_URL
    connectable = engine_from_config(configuration, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_kwargs())
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
