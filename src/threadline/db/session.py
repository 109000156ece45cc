"""Store connection and session configuration."""

from __future__ import annotations

import logging
import threading
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from threadline.core.errors import StoreUnavailable
from threadline.core.settings import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import threadline.models  # noqa: E402,F401


class StoreConnection:
    """Lazily established, process-wide handle on the store.

    The engine is created on the first ``ensure_connected`` call and reused
    afterwards; a lock keeps concurrent first callers from dialing twice.
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        auto_create_schema: bool = True,
        engine_options: dict[str, Any] | None = None,
    ) -> None:
        self.url = url
        self.echo = echo
        self.auto_create_schema = auto_create_schema
        self._engine_options = engine_options or {}
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_engine(cls, engine: Engine, *, auto_create_schema: bool = False) -> StoreConnection:
        """Wrap an already configured engine (used by tests and tooling)."""
        store = cls(str(engine.url), auto_create_schema=auto_create_schema)
        store._engine = engine
        store._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        if auto_create_schema:
            Base.metadata.create_all(bind=engine)
        return store

    @property
    def connected(self) -> bool:
        """Return True once an engine has been established."""
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        """Return the live engine, connecting first if needed."""
        self.ensure_connected()
        assert self._engine is not None
        return self._engine

    def ensure_connected(self) -> None:
        """Establish the connection if none is active; a no-op otherwise.

        Raises:
            StoreUnavailable: If the store cannot be reached.
        """
        if self._engine is not None:
            return

        with self._lock:
            if self._engine is not None:
                return

            logger.info("Connecting to store at %s", _redact(self.url))
            engine = create_engine(
                self.url,
                pool_pre_ping=True,
                echo=self.echo,
                **self._engine_options,
            )
            try:
                with engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
                if self.auto_create_schema:
                    Base.metadata.create_all(bind=engine)
            except SQLAlchemyError as exc:
                engine.dispose()
                logger.error("Store unavailable: %s", exc)
                raise StoreUnavailable(f"Could not connect to store: {exc}") from exc

            self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
            self._engine = engine

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session on a live connection, rolling back on failure."""
        self.ensure_connected()
        assert self._session_factory is not None
        db = self._session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def dispose(self) -> None:
        """Close pooled connections and forget the engine."""
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._engine = None
            self._session_factory = None


def _redact(url: str) -> str:
    if "@" not in url:
        return url
    scheme, _, rest = url.partition("://")
    return f"{scheme}://***@{rest.split('@', 1)[1]}"


class _StoreSingleton:
    """Singleton wrapper for StoreConnection."""

    _instance: StoreConnection | None = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> StoreConnection:
        """Get or create the singleton StoreConnection instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = StoreConnection(
                    settings.effective_database_url,
                    echo=settings.sql_debug,
                    auto_create_schema=settings.auto_create_schema,
                )
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        with cls._lock:
            if cls._instance is not None:
                cls._instance.dispose()
            cls._instance = None


def get_store() -> StoreConnection:
    """Return the process-wide store handle."""
    return _StoreSingleton.get_instance()


def reset_store() -> None:
    """Dispose the process-wide store handle."""
    _StoreSingleton.reset()


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    with get_store().session() as db:
        yield db


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=get_store().engine)


def drop_tables() -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=get_store().engine)
