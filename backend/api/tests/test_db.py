"""Connection cache: configuration errors, single-flight initialization, retry after failure."""
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.db import ConnectionCache, engine_options
from app.errors import ConfigurationError, StoreError
from app.main import create_app

from conftest import TEST_DATABASE_URL, sqlite_factory


class CountingFactory:
    def __init__(self, fail_times: int = 0, gate: threading.Event = None) -> None:
        self.calls = 0
        self.fail_times = fail_times
        self.gate = gate
        self._lock = threading.Lock()

    def __call__(self, url, **kwargs):
        with self._lock:
            self.calls += 1
            attempt = self.calls
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if attempt <= self.fail_times:
            raise RuntimeError("connection refused")
        return sqlite_factory(url, **kwargs)


def test_missing_url_raises_configuration_error():
    cache = ConnectionCache(Settings(database_url=None))

    with pytest.raises(ConfigurationError):
        cache.acquire()


def test_engine_is_cached_after_first_success():
    factory = CountingFactory()
    cache = ConnectionCache(Settings(database_url=TEST_DATABASE_URL), engine_factory=factory)

    first = cache.acquire()
    second = cache.acquire()

    assert first is second
    assert factory.calls == 1


def test_concurrent_first_calls_make_one_attempt():
    gate = threading.Event()
    factory = CountingFactory(gate=gate)
    cache = ConnectionCache(Settings(database_url=TEST_DATABASE_URL), engine_factory=factory)

    with ThreadPoolExecutor(max_workers=8) as pool:
        futures = [pool.submit(cache.acquire) for _ in range(8)]
        time.sleep(0.2)  # let every caller reach acquire() first
        gate.set()
        engines = [f.result(timeout=5) for f in futures]

    assert factory.calls == 1
    assert all(e is engines[0] for e in engines)


def test_concurrent_waiters_share_a_failed_attempt():
    gate = threading.Event()
    factory = CountingFactory(fail_times=1, gate=gate)
    cache = ConnectionCache(Settings(database_url=TEST_DATABASE_URL), engine_factory=factory)

    with ThreadPoolExecutor(max_workers=4) as pool:
        futures = [pool.submit(cache.acquire) for _ in range(4)]
        time.sleep(0.2)  # let every caller reach acquire() first
        gate.set()
        errors = [f.exception(timeout=5) for f in futures]

    assert factory.calls == 1
    assert all(isinstance(e, RuntimeError) for e in errors)


def test_failed_attempt_is_not_cached():
    factory = CountingFactory(fail_times=1)
    cache = ConnectionCache(Settings(database_url=TEST_DATABASE_URL), engine_factory=factory)

    with pytest.raises(RuntimeError):
        cache.acquire()
    engine = cache.acquire()

    assert engine is not None
    assert factory.calls == 2


def test_unreachable_store_raises_store_error(tmp_path):
    url = f"sqlite:///{tmp_path / 'missing-dir' / 'content.db'}"
    cache = ConnectionCache(Settings(database_url=url))

    with pytest.raises(StoreError):
        cache.acquire()
    assert cache.engine is None


def test_engine_options_only_pool_settings_for_server_databases():
    settings = Settings(db_pool_size=7, db_connect_timeout=3)

    sqlite_opts = engine_options(settings, "sqlite://")
    pg_opts = engine_options(settings, "postgresql+psycopg://u:p@db/content")

    assert "pool_size" not in sqlite_opts
    assert pg_opts["pool_size"] == 7
    assert pg_opts["connect_args"]["connect_timeout"] == 3


# -----------------------------
# Through the HTTP layer
# -----------------------------
def test_missing_url_is_a_generic_500_envelope():
    app = create_app(Settings(database_url=None))

    with TestClient(app) as client:
        resp = client.get("/api/events/anything")

    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert "details" not in body


def test_store_failure_is_a_500_without_internals():
    def no_tables(url, **kwargs):
        from sqlalchemy import create_engine
        from sqlalchemy.pool import StaticPool

        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)

    app = create_app(Settings(database_url=TEST_DATABASE_URL), engine_factory=no_tables)

    with TestClient(app) as client:
        resp = client.get("/api/events")

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Failed to fetch events"}


def test_store_failure_details_when_enabled():
    def no_tables(url, **kwargs):
        from sqlalchemy import create_engine
        from sqlalchemy.pool import StaticPool

        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)

    settings = Settings(database_url=TEST_DATABASE_URL, expose_error_details=True)
    app = create_app(settings, engine_factory=no_tables)

    with TestClient(app) as client:
        resp = client.get("/api/news/some-slug")

    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to fetch news"
    assert "no such table" in resp.json()["details"]


def test_health_endpoints(client):
    assert client.get("/healthz").json()["status"] == "ok"
    assert client.get("/readyz").json() == {"status": "ready", "db": "ok"}
