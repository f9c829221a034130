"""Alembic environment - migration runner for the Student Registry.

Imports all models so Base.metadata is populated before autogenerate.
The database URL comes from DATABASE_URL, the same variable the app reads.
"""

from logging.config import fileConfig

from sqlalchemy import create_engine, pool

from alembic import context

from student_registry.database import Base, DATABASE_URL
from student_registry.models.student import Student  # noqa: F401
from student_registry.models.asset_cleanup import AssetCleanupTask  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = create_engine(DATABASE_URL, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
