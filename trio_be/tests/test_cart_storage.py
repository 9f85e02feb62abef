from datetime import datetime, timedelta

import pytest

from app.models.cart import CartSession
from app.services.cart_storage import (
    DatabaseStorage,
    KeyValueStorage,
    MemoryStorage,
    prune_cart_sessions,
)


def test_incomplete_backend_cannot_be_instantiated():
    class ReadOnly(KeyValueStorage):
        def get(self, key):
            return None

    with pytest.raises(TypeError):
        ReadOnly()
    assert isinstance(MemoryStorage(), KeyValueStorage)


def test_database_slots_are_namespaced_by_session(db):
    mine = DatabaseStorage(db, "a" * 32)
    theirs = DatabaseStorage(db, "b" * 32)

    mine.set("trio_cart", "[1]")
    mine.set("trio_cart", "[2]")
    assert mine.get("trio_cart") == "[2]"
    assert theirs.get("trio_cart") is None

    mine.remove("trio_cart")
    assert mine.get("trio_cart") is None
    assert db.query(CartSession).count() == 0


def test_prune_removes_only_stale_sessions(db):
    DatabaseStorage(db, "stale").set("trio_cart", "[]")
    DatabaseStorage(db, "fresh").set("trio_cart", "[]")
    stale = db.query(CartSession).filter(CartSession.session_id == "stale").one()
    stale.updated_at = datetime.utcnow() - timedelta(days=31)
    db.commit()

    assert prune_cart_sessions(db, timedelta(days=30)) == 1
    assert [row.session_id for row in db.query(CartSession).all()] == ["fresh"]
    assert prune_cart_sessions(db, timedelta(days=30)) == 0


def test_rewriting_same_value_keeps_session_alive(db):
    storage = DatabaseStorage(db, "regular")
    storage.set("trio_cart", "[]")
    row = db.query(CartSession).one()
    row.updated_at = datetime.utcnow() - timedelta(days=31)
    db.commit()

    storage.set("trio_cart", "[]")
    assert prune_cart_sessions(db, timedelta(days=30)) == 0
    assert storage.get("trio_cart") == "[]"
