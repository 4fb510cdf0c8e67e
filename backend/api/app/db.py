# backend/api/app/db.py
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable, Dict, Optional

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from app.config import Settings
from app.errors import ConfigurationError, StoreError

logger = logging.getLogger(__name__)

EngineFactory = Callable[..., Engine]


def db_ping(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def engine_options(settings: Settings, db_url: str) -> Dict[str, Any]:
    """
    Pool/timeouts for server databases. SQLite gets the bare defaults
    because its pool and driver reject these arguments.
    """
    opts: Dict[str, Any] = {"pool_pre_ping": True, "future": True}
    url = make_url(db_url)
    if url.get_backend_name() == "sqlite":
        return opts

    opts["pool_size"] = settings.db_pool_size
    if url.get_backend_name() == "postgresql":
        opts["connect_args"] = {
            "connect_timeout": settings.db_connect_timeout,
            "options": f"-c statement_timeout={settings.db_statement_timeout_ms}",
        }
    return opts


class ConnectionCache:
    """
    Process-wide engine handle with single-flight initialization.

    The first caller owns the connection attempt; callers arriving while it
    runs wait on the same Future. A failed attempt is forgotten so the next
    acquire() tries again. A successful engine lives for the process.
    """

    def __init__(self, settings: Settings, engine_factory: Optional[EngineFactory] = None) -> None:
        self.settings = settings
        self._engine_factory: EngineFactory = engine_factory or create_engine
        self._engine: Engine | None = None
        self._pending: Future | None = None
        self._lock = threading.Lock()

    @property
    def engine(self) -> Engine | None:
        return self._engine

    def acquire(self) -> Engine:
        if self._engine is not None:
            logger.debug("Using cached database engine")
            return self._engine

        db_url = self.settings.database_url
        if not db_url:
            raise ConfigurationError(
                "DATABASE_URL is not set. Ensure it exists in backend/api/.env or set ENV_PATH."
            )

        with self._lock:
            if self._engine is not None:
                return self._engine
            pending = self._pending
            owner = pending is None
            if owner:
                pending = Future()
                self._pending = pending

        if not owner:
            return pending.result()

        try:
            engine = self._connect(db_url)
        except BaseException as e:
            with self._lock:
                self._pending = None
            pending.set_exception(e)
            raise

        with self._lock:
            self._engine = engine
            self._pending = None
        pending.set_result(engine)
        return engine

    def _connect(self, db_url: str) -> Engine:
        logger.info("Creating new database engine")
        engine = self._engine_factory(db_url, **engine_options(self.settings, db_url))
        try:
            db_ping(engine)
        except SQLAlchemyError as e:
            engine.dispose()
            logger.error("Database connection failed: %s", e)
            raise StoreError("Database connection failed", details=str(e)) from e
        logger.info("Database connected successfully")
        return engine

    def dispose(self) -> None:
        with self._lock:
            engine, self._engine = self._engine, None
        if engine is not None:
            engine.dispose()


def get_engine(request: Request) -> Engine:
    """FastAPI dependency: the store must be reachable before any data access."""
    cache: ConnectionCache = request.app.state.connections
    return cache.acquire()
