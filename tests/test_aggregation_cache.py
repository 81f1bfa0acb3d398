"""Tests for per-source cache precedence and the snapshot store."""

import pytest

from tests.fakes import FakeProvider
from travel_safety.aggregation_cache import AggregationCache, MemoryStore, SnapshotStore
from travel_safety.models import AdvisoryRecord, ConflictRecord, SentimentRecord, Unavailable
from travel_safety.providers.common import ALL_SOURCES, SOURCE_ACLED, SOURCE_GDELT, SOURCE_STATE_DEPT, SOURCE_UK
from travel_safety.resolver import LocationResolver


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def resolver():
    return LocationResolver()


def live_conflict(country):
    return ConflictRecord(country=country, total_events=7, trend='stable')


def test_fallback_wins_over_live_when_preferring_cache(resolver):
    japan = resolver.resolve('japan')
    provider = FakeProvider(SOURCE_ACLED, live_conflict('Japan'))
    cache = AggregationCache({SOURCE_ACLED: provider}, store=MemoryStore())

    record, origin = cache.resolve_source(SOURCE_ACLED, japan)

    assert origin == 'fallback'
    assert record.total_events == 34
    assert provider.calls == []


def test_stored_live_record_beats_fallback(resolver):
    japan = resolver.resolve('japan')
    store = MemoryStore()
    store.put(AggregationCache.cache_key(SOURCE_ACLED, japan), live_conflict('Japan'))
    cache = AggregationCache({SOURCE_ACLED: FakeProvider(SOURCE_ACLED)}, store=store)

    record, origin = cache.resolve_source(SOURCE_ACLED, japan)

    assert origin == 'cache'
    assert record.total_events == 7


def test_live_fetch_when_no_fallback_exists(resolver):
    peru = resolver.resolve('peru')
    provider = FakeProvider(SOURCE_ACLED, live_conflict('Peru'))
    cache = AggregationCache({SOURCE_ACLED: provider}, store=MemoryStore())

    record, origin = cache.resolve_source(SOURCE_ACLED, peru)
    assert origin == 'live'
    assert record.country == 'Peru'

    record, origin = cache.resolve_source(SOURCE_ACLED, peru)
    assert origin == 'cache'
    assert provider.calls == ['peru']


def test_unavailable_result_is_stored_and_reused(resolver):
    peru = resolver.resolve('peru')
    provider = FakeProvider(SOURCE_GDELT)
    cache = AggregationCache({SOURCE_GDELT: provider}, store=MemoryStore())

    first, _ = cache.resolve_source(SOURCE_GDELT, peru)
    second, origin = cache.resolve_source(SOURCE_GDELT, peru)

    assert isinstance(first, Unavailable)
    assert isinstance(second, Unavailable)
    assert origin == 'cache'
    assert len(provider.calls) == 1


def test_live_first_policy_prefers_live_record(resolver):
    japan = resolver.resolve('japan')
    provider = FakeProvider(SOURCE_ACLED, live_conflict('Japan'))
    cache = AggregationCache({SOURCE_ACLED: provider}, store=MemoryStore(), prefer_cache_over_live=False)

    record, origin = cache.resolve_source(SOURCE_ACLED, japan)

    assert origin == 'live'
    assert record.total_events == 7


def test_live_first_policy_falls_back_when_live_fails(resolver):
    japan = resolver.resolve('japan')
    provider = FakeProvider(SOURCE_STATE_DEPT)
    cache = AggregationCache({SOURCE_STATE_DEPT: provider}, store=MemoryStore(), prefer_cache_over_live=False)

    record, origin = cache.resolve_source(SOURCE_STATE_DEPT, japan)

    assert origin == 'fallback'
    assert isinstance(record, AdvisoryRecord)
    assert record.level == 1
    assert provider.calls == ['japan']


def test_uk_source_has_no_fallback(resolver):
    japan = resolver.resolve('japan')
    cache = AggregationCache({SOURCE_UK: FakeProvider(SOURCE_UK)}, store=MemoryStore())

    record, origin = cache.resolve_source(SOURCE_UK, japan)

    assert isinstance(record, Unavailable)
    assert origin == 'live'


def test_city_uses_country_fallback_and_keeps_city_name(resolver):
    tokyo = resolver.resolve('tokyo')
    cache = AggregationCache({}, store=MemoryStore())

    record, origin = cache.resolve_source(SOURCE_GDELT, tokyo)

    assert origin == 'fallback'
    assert isinstance(record, SentimentRecord)
    assert record.location == 'Tokyo'
    assert record.country == 'Japan'


def test_advisory_cache_is_shared_by_cities_of_one_country(resolver):
    tokyo = resolver.resolve('tokyo')
    osaka = resolver.resolve('osaka')
    assert AggregationCache.cache_key(SOURCE_STATE_DEPT, tokyo) == AggregationCache.cache_key(SOURCE_STATE_DEPT, osaka)
    assert AggregationCache.cache_key(SOURCE_GDELT, tokyo) != AggregationCache.cache_key(SOURCE_GDELT, osaka)


def test_missing_provider_and_raising_provider_become_unavailable(resolver):
    peru = resolver.resolve('peru')
    cache = AggregationCache({SOURCE_GDELT: FakeProvider(SOURCE_GDELT, ValueError('bad payload'))},
                             store=MemoryStore())

    missing, _ = cache.resolve_source(SOURCE_ACLED, peru)
    raised, _ = cache.resolve_source(SOURCE_GDELT, peru)

    assert missing == Unavailable(source=SOURCE_ACLED, reason='no provider')
    assert raised.reason == 'bad payload'


def test_unexpected_adapter_exception_becomes_unavailable(resolver):
    peru = resolver.resolve('peru')
    providers = {source: FakeProvider(source) for source in ALL_SOURCES}
    providers[SOURCE_UK] = FakeProvider(SOURCE_UK, AttributeError("'str' object has no attribute 'get'"))
    providers[SOURCE_ACLED] = FakeProvider(SOURCE_ACLED, TypeError("unhashable type: 'list'"))
    cache = AggregationCache(providers, store=MemoryStore())

    result = cache.get(peru)

    assert isinstance(result.unavailable[SOURCE_UK], Unavailable)
    assert isinstance(result.unavailable[SOURCE_ACLED], Unavailable)
    assert len(providers[SOURCE_GDELT].calls) == 1


def test_get_collects_records_unavailable_and_provenance(resolver):
    peru = resolver.resolve('peru')
    providers = {source: FakeProvider(source) for source in ALL_SOURCES}
    providers[SOURCE_ACLED] = FakeProvider(SOURCE_ACLED, live_conflict('Peru'))
    cache = AggregationCache(providers, store=MemoryStore())

    result = cache.get(peru)

    assert set(result.records) == {SOURCE_ACLED}
    assert set(result.unavailable) == {SOURCE_STATE_DEPT, SOURCE_UK, SOURCE_GDELT}
    assert result.provenance == {source: 'live' for source in ALL_SOURCES}


def test_memory_store_expires_entries():
    clock = FakeClock()
    store = MemoryStore(ttl_seconds=60, clock=clock)
    store.put('gdelt:paris', Unavailable(source='gdelt'))

    clock.now += 59
    assert store.get('gdelt:paris') is not None
    clock.now += 1
    assert store.get('gdelt:paris') is None
    assert len(store) == 0


def test_snapshot_store_restores_unexpired_entries(tmp_path):
    db_path = str(tmp_path / 'cache.db')
    clock = FakeClock()
    store = SnapshotStore(db_path, ttl_seconds=3600, snapshot_interval=300, clock=clock)
    store.put('acled:peru', live_conflict('Peru'))
    store.put('uk_fcdo:peru', Unavailable(source='uk_fcdo', reason='timeout'))
    assert store.snapshot() == 2

    restored = SnapshotStore(db_path, ttl_seconds=3600, clock=clock)

    assert restored.get('acled:peru') == live_conflict('Peru')
    assert restored.get('uk_fcdo:peru') == Unavailable(source='uk_fcdo', reason='timeout')


def test_snapshot_store_skips_expired_entries(tmp_path):
    db_path = str(tmp_path / 'cache.db')
    clock = FakeClock()
    store = SnapshotStore(db_path, ttl_seconds=60, clock=clock)
    store.put('acled:peru', live_conflict('Peru'))
    store.snapshot()

    clock.now += 120
    restored = SnapshotStore(db_path, ttl_seconds=60, clock=clock)

    assert len(restored) == 0


def test_snapshot_store_writes_on_put_after_interval(tmp_path):
    db_path = str(tmp_path / 'cache.db')
    clock = FakeClock()
    store = SnapshotStore(db_path, ttl_seconds=3600, snapshot_interval=300, clock=clock)

    store.put('acled:peru', live_conflict('Peru'))
    assert len(SnapshotStore(db_path, clock=clock)) == 0

    clock.now += 301
    store.put('acled:lima', live_conflict('Peru'))
    assert len(SnapshotStore(db_path, clock=clock)) == 2
