"""Tests for the lazily connected store handle."""

import threading
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine, text

from threadline.core.errors import StoreUnavailable
from threadline.db import session as session_module
from threadline.db.session import StoreConnection


def test_ensure_connected_is_lazy_and_idempotent() -> None:
    """The engine is only created on the first call and reused afterwards."""
    store = StoreConnection("sqlite://")
    assert store.connected is False

    with patch.object(session_module, "create_engine", wraps=create_engine) as factory:
        store.ensure_connected()
        store.ensure_connected()
        store.ensure_connected()

    assert store.connected is True
    assert factory.call_count == 1
    store.dispose()


def test_concurrent_callers_share_one_engine() -> None:
    """Many threads racing on the first call still dial the store once."""
    store = StoreConnection("sqlite://")
    barrier = threading.Barrier(8)

    def _connect() -> None:
        barrier.wait()
        store.ensure_connected()

    with patch.object(session_module, "create_engine", wraps=create_engine) as factory:
        workers = [threading.Thread(target=_connect) for _ in range(8)]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

    assert factory.call_count == 1
    store.dispose()


def test_unreachable_store_raises_store_unavailable(tmp_path) -> None:
    """A store that cannot be opened fails fast instead of hanging."""
    missing = tmp_path / "no" / "such" / "dir" / "threads.db"
    store = StoreConnection(f"sqlite:///{missing}")

    with pytest.raises(StoreUnavailable):
        store.ensure_connected()
    assert store.connected is False

    with pytest.raises(StoreUnavailable):
        with store.session():
            pass


def test_session_creates_schema_on_first_connect() -> None:
    store = StoreConnection("sqlite://", auto_create_schema=True)
    with store.session() as db:
        count = db.execute(text("SELECT COUNT(*) FROM threads")).scalar_one()
    assert count == 0
    store.dispose()


def test_session_rolls_back_on_error(store) -> None:
    """Uncommitted work is discarded when the block raises."""
    with pytest.raises(RuntimeError):
        with store.session() as db:
            db.execute(text("INSERT INTO user_threads (user_id, thread_id) VALUES (1, 1)"))
            raise RuntimeError("boom")

    with store.session() as db:
        assert db.execute(text("SELECT COUNT(*) FROM user_threads")).scalar_one() == 0


def test_dispose_allows_reconnect() -> None:
    store = StoreConnection("sqlite://")
    store.ensure_connected()
    store.dispose()
    assert store.connected is False
    store.ensure_connected()
    assert store.connected is True
    store.dispose()
