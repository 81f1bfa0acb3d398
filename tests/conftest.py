import os
import random
import tempfile
from unittest.mock import MagicMock

# Point every data/log path at a scratch directory before anything creates files
os.environ['TRAVEL_SAFETY_DATA_DIR'] = tempfile.mkdtemp(prefix='travel-safety-tests-')
os.environ.pop('APP_ENV', None)

import pytest
import requests

from travel_safety.aggregation_cache import MemoryStore
from travel_safety.analytics import AnalyticsLog
from travel_safety.config import Settings
from travel_safety.container import build_services
from travel_safety.providers.common import ALL_SOURCES
from travel_safety.sentiment_store import SentimentStore
from tests.fakes import FakeProvider


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def fake_providers():
    return {source: FakeProvider(source) for source in ALL_SOURCES}


@pytest.fixture
def services(tmp_path, session, fake_providers):
    settings = Settings(buttondown_api_key='test-key', acled_username='user', acled_password='secret')
    built = build_services(settings=settings, store=MemoryStore(), session=session, rng=random.Random(7))

    built.cache.providers = fake_providers
    built.sentiment = SentimentStore(tmp_path / 'sentiment.json', rng=random.Random(7))
    built.analytics = AnalyticsLog(tmp_path / 'logs')
    built.subscriptions.analytics = built.analytics
    return built


@pytest.fixture
def app(services):
    from app import create_app

    flask_app = create_app(services)
    flask_app.config['TESTING'] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
