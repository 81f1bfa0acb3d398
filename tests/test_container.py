import random

from travel_safety.aggregation_cache import SnapshotStore
from travel_safety.config import Settings
from travel_safety.container import build_services
from travel_safety.providers.common import ALL_SOURCES


def test_build_services_shares_one_session(session):
    services = build_services(Settings(http_timeout=5), session=session, rng=random.Random(1))

    assert isinstance(services.cache.store, SnapshotStore)
    assert set(services.providers) == set(ALL_SOURCES)
    assert services.cache.providers == services.providers
    for provider in services.providers.values():
        assert provider.session is session
        assert provider.timeout == 5
    assert services.subscriptions.client.session is session


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv('ACLED_USERNAME', ' user ')
    monkeypatch.setenv('PREFER_CACHE_OVER_LIVE', 'false')
    monkeypatch.setenv('CACHE_TTL_HOURS', 'soon')

    settings = Settings.from_env()

    assert settings.acled_username == 'user'
    assert settings.prefer_cache_over_live is False
    assert settings.cache_ttl_hours == 6
