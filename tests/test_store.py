"""Tests for the server-side session store."""

from datetime import timedelta

import pytest

from flask_paypal_checkout.store import MemorySessionStore, SessionStore


def test_get_missing_returns_default():
    store = MemorySessionStore()
    assert store.get("sid", "cart") is None
    assert store.get("sid", "cart", []) == []


def test_set_then_get():
    store = MemorySessionStore()
    store.set("sid", "cart", [{"name": "Rose", "price": "12.50"}])
    assert store.get("sid", "cart") == [{"name": "Rose", "price": "12.50"}]


def test_sessions_are_isolated():
    store = MemorySessionStore()
    store.set("a", "cart", ["a"])
    store.set("b", "cart", ["b"])
    assert store.get("a", "cart") == ["a"]
    assert store.get("b", "cart") == ["b"]


def test_delete_drops_empty_sessions():
    store = MemorySessionStore()
    store.set("sid", "cart", [])
    store.delete("sid", "cart")
    assert store.get("sid", "cart") is None
    assert len(store) == 0


def test_delete_unknown_is_noop():
    store = MemorySessionStore()
    store.delete("nope", "cart")
    assert len(store) == 0


def test_base_store_is_abstract():
    store = SessionStore()
    with pytest.raises(NotImplementedError):
        store.get("sid", "cart")


# ---------------------------------------------------------------------------
# Expiry
# ---------------------------------------------------------------------------

class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_sessions_expire_after_lifetime():
    clock = FakeClock()
    store = MemorySessionStore(lifetime=60, clock=clock)
    store.set("sid", "cart", ["Rose"])

    clock.now = 59
    assert store.get("sid", "cart") == ["Rose"]

    clock.now = 60
    assert store.get("sid", "cart") is None
    assert len(store) == 0


def test_write_extends_lifetime():
    clock = FakeClock()
    store = MemorySessionStore(lifetime=60, clock=clock)
    store.set("sid", "cart", ["Rose"])

    clock.now = 50
    store.set("sid", "processed_payment_id", "PAY1")

    clock.now = 100
    assert store.get("sid", "cart") == ["Rose"]
    assert store.get("sid", "processed_payment_id") == "PAY1"


def test_expired_sessions_are_purged_on_write():
    clock = FakeClock()
    store = MemorySessionStore(lifetime=60, clock=clock)
    for n in range(10):
        store.set(f"sid-{n}", "cart", [])

    clock.now = 61
    store.set("fresh", "cart", [])
    assert len(store) == 1
    assert store.get("sid-0", "cart") is None


def test_lifetime_accepts_timedelta():
    store = MemorySessionStore(lifetime=timedelta(minutes=2))
    assert store.lifetime == 120.0
