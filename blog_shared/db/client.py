"""
Relational client for blog microservices.

``PostgresClient`` owns one pooled SQLAlchemy engine and the session factory
bound to it. Services either construct their own client in their composition
root (``client.open()`` at startup, ``client.close()`` at shutdown) or use the
process-wide default through ``get_client()`` / ``disconnect_client()``.

Configuration is read when the engine is first created; a missing
``DATABASE_URL`` raises ``ConfigurationError`` and leaves nothing cached.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, ExceptionContext, make_url
from sqlalchemy.orm import Session as OrmSession, sessionmaker

from blog_shared.config import SharedSettings
from blog_shared.db.models import Base
from blog_shared.errors import ConfigurationError

logger = logging.getLogger(__name__)


def _log_driver_error(context: ExceptionContext) -> None:
    """Log driver-level errors; the exception still propagates to the caller."""
    logger.error(
        f"Database error: {context.original_exception}",
        extra={"extra": {"statement": context.statement}},
    )


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite ignores ON DELETE rules unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class PostgresClient:
    """Lazily opened, pooled connection to the relational store.

    Args:
        settings: Settings to use; when omitted they are read from the
            environment at ``open()`` time.
        **engine_options: Extra keyword arguments for ``create_engine``.
    """

    def __init__(self, settings: Optional[SharedSettings] = None, **engine_options: Any):
        self._settings = settings
        self._engine_options = engine_options
        self._engine: Optional[Engine] = None
        self._sessionmaker: Optional[sessionmaker[OrmSession]] = None
        # Single-flight: concurrent first callers build one engine
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        """The pooled engine, opening it on first access."""
        return self.open()

    def open(self) -> Engine:
        """Create the engine if needed and return it.

        Raises:
            ConfigurationError: DATABASE_URL is not set.
        """
        engine = self._engine
        if engine is not None:
            return engine

        with self._lock:
            if self._engine is None:
                self._engine = self._create_engine()
            return self._engine

    def _create_engine(self) -> Engine:
        settings = self._settings or SharedSettings()
        url = settings.sqlalchemy_url()
        if not url:
            raise ConfigurationError("DATABASE_URL")

        parsed = make_url(url)
        is_sqlite = parsed.get_backend_name() == "sqlite"

        options: dict[str, Any] = {"pool_pre_ping": True, "future": True}
        if not is_sqlite:
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_timeout=settings.db_pool_timeout,
            )
        options.update(self._engine_options)

        engine = create_engine(url, **options)

        if settings.is_development:
            # Verbose query logging (statements + parameters at INFO)
            logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
        event.listen(engine, "handle_error", _log_driver_error)
        if is_sqlite:
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)

        logger.info(f"Relational client created for {parsed.render_as_string(hide_password=True)}")
        return engine

    @property
    def session_factory(self) -> sessionmaker[OrmSession]:
        """Session factory bound to the engine."""
        factory = self._sessionmaker
        if factory is None:
            factory = sessionmaker(
                bind=self.open(),
                autoflush=False,
                autocommit=False,
                expire_on_commit=False,
                future=True,
            )
            self._sessionmaker = factory
        return factory

    @contextmanager
    def session(self) -> Iterator[OrmSession]:
        """Get a database session with automatic commit/rollback.

        Yields:
            SQLAlchemy Session instance

        Usage:
            with client.session() as session:
                session.add(post)
        """
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        """Dispose of the pool. Safe to call repeatedly or before ``open()``."""
        with self._lock:
            engine, self._engine = self._engine, None
            self._sessionmaker = None

        if engine is None:
            return

        engine.dispose()
        logger.info("Relational client disposed")


# ==================== Process-wide default ====================

_default_client = PostgresClient()


def get_client() -> PostgresClient:
    """Return the process-wide client, opening it on first use.

    Every call returns the same object; after ``disconnect_client()`` the
    next call opens a fresh engine on it.
    """
    _default_client.open()
    return _default_client


def get_default_client() -> PostgresClient:
    """The process-wide client without opening it."""
    return _default_client


def get_engine() -> Engine:
    """Engine of the process-wide client."""
    return get_client().engine


@contextmanager
def get_session() -> Iterator[OrmSession]:
    """Transactional session from the process-wide client.

    Usage:
        with get_session() as session:
            session.add(model)
    """
    with get_client().session() as session:
        yield session


def disconnect_client() -> None:
    """Close the process-wide client; no-op if it was never opened."""
    _default_client.close()


def init_db(client: Optional[PostgresClient] = None) -> None:
    """Initialize database tables.

    Creates all tables defined in the Base metadata.
    Should only be used for development/testing.
    Production should use Alembic migrations.
    """
    client = client or get_client()
    Base.metadata.create_all(bind=client.engine)


def check_connection(client: Optional[PostgresClient] = None) -> bool:
    """Check if database connection is working.

    Returns:
        True if connection is successful
    """
    client = client or get_client()
    try:
        with client.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"Database connection check failed: {e}")
        return False
