"""Tests for surveydisco.core.cache.BoundedCache."""

from __future__ import annotations

import pytest

from surveydisco.core.cache import BoundedCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_evicts_oldest_entry():
    cache = BoundedCache(capacity=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("c", 3)

    assert cache.get("a") is None
    assert cache.get("b") == 2
    assert cache.get("c") == 3
    assert len(cache) == 2


def test_get_refreshes_recency():
    cache = BoundedCache(capacity=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)

    assert "a" in cache
    assert "b" not in cache


def test_ttl_expiry():
    clock = FakeClock()
    cache = BoundedCache(capacity=10, ttl_seconds=60, clock=clock)
    cache.set("a", 1)

    clock.now = 59
    assert cache.get("a") == 1

    clock.now = 121
    assert cache.get("a") is None
    assert len(cache) == 0


def test_pop_and_clear():
    cache = BoundedCache()
    cache.set("a", 1)
    cache.set("b", 2)

    cache.pop("a")
    cache.pop("missing")
    assert "a" not in cache

    cache.clear()
    assert len(cache) == 0


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        BoundedCache(capacity=0)
