"""
Tests for the in-memory response cache.
"""

import random

import pytest

from chat_cache.entities import ResponsePayload
from chat_cache.repositories import InMemoryResponseCache, score_quality


def payload(text: str = "cached answer") -> ResponsePayload:
    return ResponsePayload(text=text, model_label="test-model")


@pytest.fixture
def cache(clock):
    """A small cache driven by the fake clock."""
    return InMemoryResponseCache(max_entries=3, default_ttl=60, clock=clock)


def test_score_quality_baseline():
    """Short plain text keeps the base score."""
    assert score_quality(payload("ok")) == 0.5


def test_score_quality_rewards_length_band():
    assert score_quality(payload("x" * 100)) == pytest.approx(0.7)
    assert score_quality(payload("x" * 2500)) == 0.5


def test_score_quality_rewards_code_and_lists():
    text = "Steps:\n- install\n- run\n```python\nprint('hi')\n```\n" + "detail " * 10
    assert score_quality(payload(text)) == 1.0


def test_score_quality_list_only():
    assert score_quality(payload("1. one\n2. two")) == pytest.approx(0.6)


def test_get_missing_returns_none(cache):
    assert cache.get("nope") is None


def test_set_then_get(cache):
    cache.set("k", payload())
    assert cache.get("k") == payload()
    assert "k" in cache
    assert len(cache) == 1


def test_hit_bumps_popularity_by_quality(cache):
    cache.set("k", payload(), quality=0.5)
    assert cache.popularity("k") == pytest.approx(5.0)

    cache.get("k")
    cache.get("k")
    assert cache.popularity("k") == pytest.approx(8.0)


def test_zero_quality_entry_expires_after_base_ttl(cache, clock):
    """Expiration with quality 0 is exactly the base TTL."""
    cache.set("k", payload(), base_ttl=60, quality=0.0)

    clock.advance(59.9)
    assert cache.get("k") is not None

    clock.advance(0.2)
    assert cache.get("k") is None
    assert "k" not in cache


def test_full_quality_entry_lives_longer(cache, clock):
    """Quality 1 extends the TTL by half, but never doubles it."""
    cache.set("k", payload(), base_ttl=60, quality=1.0)

    clock.advance(60.1)
    assert cache.get("k") is not None

    clock.advance(60.0)
    assert cache.get("k") is None


def test_expired_entry_purged_with_popularity(cache, clock):
    cache.set("k", payload(), base_ttl=10, quality=0.0)
    clock.advance(11)

    assert cache.get("k") is None
    assert cache.popularity("k") == 0.0


def test_eviction_prefers_old_unpopular_low_quality(cache, clock):
    cache.set("old", payload(), quality=0.2)
    clock.advance(30)
    cache.set("fresh", payload(), quality=0.9)
    cache.set("popular", payload(), quality=0.5)
    for _ in range(3):
        cache.get("popular")
    clock.advance(1)

    cache.set("new", payload())

    assert "old" not in cache
    assert "fresh" in cache
    assert "popular" in cache
    assert "new" in cache


def test_eviction_ties_go_to_oldest_insertion(clock):
    cache = InMemoryResponseCache(max_entries=2, default_ttl=60, clock=clock)
    cache.set("a", payload(), quality=0.5)
    cache.set("b", payload(), quality=0.5)
    cache.set("c", payload(), quality=0.5)

    assert "a" not in cache
    assert "b" in cache
    assert "c" in cache


def test_replacing_existing_key_does_not_evict(cache):
    for key in ("a", "b", "c"):
        cache.set(key, payload())

    cache.set("b", payload("updated"))

    assert len(cache) == 3
    assert cache.get("b").text == "updated"
    assert cache.get_stats()["evictions"] == 0


def test_expired_entries_are_purged_before_evicting(clock):
    cache = InMemoryResponseCache(max_entries=2, default_ttl=60, clock=clock)
    cache.set("short", payload(), base_ttl=10, quality=0.0)
    cache.set("long", payload(), base_ttl=1000, quality=0.0)
    clock.advance(20)

    cache.set("new", payload())

    assert "short" not in cache
    assert "long" in cache
    assert "new" in cache
    assert cache.get_stats()["evictions"] == 0


def test_capacity_never_exceeded(clock):
    """Any sequence of sets keeps the entry count within capacity."""
    rng = random.Random(7)
    cache = InMemoryResponseCache(max_entries=50, default_ttl=30, clock=clock)

    for i in range(400):
        key = f"k{rng.randrange(120)}"
        text = "```\ncode\n```" if i % 5 == 0 else "plain " * rng.randrange(1, 40)
        cache.set(key, payload(text))
        if rng.random() < 0.3:
            cache.get(f"k{rng.randrange(120)}")
        clock.advance(rng.random() * 2)
        assert len(cache) <= 50


def test_clear_returns_count(cache):
    cache.set("a", payload())
    cache.set("b", payload())

    assert cache.clear() == 2
    assert len(cache) == 0
    assert cache.get("a") is None


def test_delete(cache):
    cache.set("a", payload())

    assert cache.delete("a") is True
    assert cache.delete("a") is False


def test_stats(cache):
    cache.set("a", payload(), quality=0.5)
    stats = cache.get_stats()

    assert stats["total_entries"] == 1
    assert stats["max_entries"] == 3
    assert stats["ttl"] == 60
    assert stats["avg_popularity"] == pytest.approx(5.0)


def test_invalid_capacity_rejected():
    with pytest.raises(ValueError):
        InMemoryResponseCache(max_entries=-1)


def test_zero_capacity_rejected_not_defaulted():
    with pytest.raises(ValueError):
        InMemoryResponseCache(max_entries=0)


def test_explicit_zero_ttl_is_honored(clock):
    cache = InMemoryResponseCache(max_entries=3, default_ttl=0, clock=clock)
    cache.set("k", payload("ok"), quality=0.0)

    clock.advance(0.001)

    assert cache.get("k") is None


def test_explicit_zero_base_ttl_overrides_default(cache, clock):
    cache.set("short", payload("ok"), base_ttl=0, quality=0.0)
    cache.set("long", payload("ok"), quality=0.0)

    clock.advance(1)

    assert cache.get("short") is None
    assert cache.get("long") is not None
