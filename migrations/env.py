import os
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

config = context.config

# Flask-Migrate runs with migrations/alembic.ini; plain `alembic -c` may pass a
# path relative to the project root instead.
if config.config_file_name is not None:
    cfg_path = config.config_file_name
    if not os.path.isabs(cfg_path) and not os.path.exists(cfg_path):
        candidate = os.path.join(os.path.dirname(__file__), "alembic.ini")
        if os.path.exists(candidate):
            cfg_path = candidate
    fileConfig(cfg_path)

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from tsmwa_admin.extensions import db  # noqa: E402
import tsmwa_admin.models  # noqa: F401,E402  (register all models)

target_metadata = db.metadata


def _get_migration_db_url() -> str:
    """DATABASE_URL first, then whatever alembic.ini / Flask-Migrate set."""
    url = os.environ.get("DATABASE_URL") or config.get_main_option("sqlalchemy.url")
    if not url:
        raise RuntimeError("DATABASE_URL (or sqlalchemy.url) is not set for Alembic migrations")
    # Heroku-style URLs still use the removed "postgres" dialect name.
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


def run_migrations_offline() -> None:
    context.configure(
        url=_get_migration_db_url(),
        target_metadata=target_metadata,
        compare_type=True,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section, {}) or {}
    section["sqlalchemy.url"] = _get_migration_db_url()

    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
