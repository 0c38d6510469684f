"""Tests for the TTL result cache."""

from statusio.core.cache import ResultCache
from statusio.core.models import PremiumState, Provider, ProviderStatus

STATUSES = (
    ProviderStatus(name=Provider.REALDEBRID, premium_state=PremiumState.ACTIVE, days_remaining=5),
    ProviderStatus(name=Provider.TORBOX, premium_state=PremiumState.INACTIVE, days_remaining=0),
)


class TestResultCache:
    """Test put/get and lazy expiry."""

    def test_get_after_put_returns_value(self, clock):
        cache = ResultCache(clock=clock)
        cache.put("key", STATUSES, ttl_ms=60_000)
        assert cache.get("key") == STATUSES

    def test_missing_key(self, clock):
        assert ResultCache(clock=clock).get("nope") is None

    def test_entry_timestamps(self, clock):
        cache = ResultCache(clock=clock)
        entry = cache.put("key", STATUSES, ttl_ms=90_000)
        assert entry.created_at == clock.now
        assert (entry.expires_at - entry.created_at).total_seconds() == 90

    def test_visible_until_just_before_expiry(self, clock):
        cache = ResultCache(clock=clock)
        cache.put("key", STATUSES, ttl_ms=60_000)
        clock.advance(seconds=59, milliseconds=999)
        assert cache.get("key") == STATUSES

    def test_absent_at_expiry_instant(self, clock):
        cache = ResultCache(clock=clock)
        cache.put("key", STATUSES, ttl_ms=60_000)
        clock.advance(seconds=60)
        assert cache.get("key") is None

    def test_expired_entry_is_evicted_and_not_resurrected(self, clock):
        cache = ResultCache(clock=clock)
        cache.put("key", STATUSES, ttl_ms=60_000)
        clock.advance(minutes=5)
        assert "key" in cache
        assert cache.get("key") is None
        assert "key" not in cache
        assert cache.get("key") is None
        assert len(cache) == 0

    def test_expired_entries_of_other_keys_stay_until_read(self, clock):
        cache = ResultCache(clock=clock)
        cache.put("a", STATUSES, ttl_ms=1_000)
        cache.put("b", STATUSES, ttl_ms=1_000)
        clock.advance(seconds=2)
        cache.get("a")
        assert "a" not in cache
        assert "b" in cache

    def test_put_overwrites(self, clock):
        cache = ResultCache(clock=clock)
        cache.put("key", STATUSES, ttl_ms=1_000)
        cache.put("key", STATUSES[:1], ttl_ms=60_000)
        clock.advance(seconds=30)
        assert cache.get("key") == STATUSES[:1]
        assert len(cache) == 1

    def test_value_is_stored_as_tuple(self, clock):
        cache = ResultCache(clock=clock)
        cache.put("key", list(STATUSES), ttl_ms=1_000)
        assert isinstance(cache.get("key"), tuple)

    def test_clear(self, clock):
        cache = ResultCache(clock=clock)
        cache.put("key", STATUSES, ttl_ms=1_000)
        cache.clear()
        assert len(cache) == 0
