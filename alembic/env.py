from __future__ import annotations

import sys
from pathlib import Path

from alembic import context
from sqlalchemy import create_engine, pool


# Ensure project root is on sys.path so we can import blog_shared
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from blog_shared.config import SharedSettings  # noqa: E402
from blog_shared.db.models import Base  # noqa: E402
from blog_shared.errors import ConfigurationError  # noqa: E402


config = context.config
target_metadata = Base.metadata


def get_url() -> str:
    url = SharedSettings().sqlalchemy_url() or config.get_main_option("sqlalchemy.url")
    if not url:
        raise ConfigurationError("DATABASE_URL")
    return url


def run_migrations_offline() -> None:
    url = get_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(get_url(), poolclass=pool.NullPool, future=True)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
