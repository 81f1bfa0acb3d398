"""
Service wiring.

build_services() constructs every long-lived object once; the Flask app and
the MCP server both receive the same SafetyServices instance.
"""

import logging
import random
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from travel_safety.aggregation_cache import AggregationCache, CacheStore, SnapshotStore
from travel_safety.analytics import AnalyticsLog
from travel_safety.assessment import AssessmentService
from travel_safety.config import Settings
from travel_safety.paths import (
    get_aggregation_cache_db,
    get_logs_dir,
    get_sentiment_backup_file,
    get_sentiment_file,
)
from travel_safety.providers import (
    ACLEDProvider,
    GDELTProvider,
    SOURCE_ACLED,
    SOURCE_GDELT,
    SOURCE_STATE_DEPT,
    SOURCE_UK,
    StateDeptProvider,
    UKAdvisoryProvider,
    build_session,
)
from travel_safety.resolver import LocationResolver
from travel_safety.scoring import SafetyScorer
from travel_safety.sentiment_store import SentimentStore
from travel_safety.subscriptions import ButtondownClient, SubscriptionService

logger = logging.getLogger(__name__)


@dataclass
class SafetyServices:
    settings: Settings
    resolver: LocationResolver
    state_dept: StateDeptProvider
    uk: UKAdvisoryProvider
    acled: ACLEDProvider
    gdelt: GDELTProvider
    cache: AggregationCache
    scorer: SafetyScorer
    assessment: AssessmentService
    sentiment: SentimentStore
    analytics: AnalyticsLog
    subscriptions: SubscriptionService

    @property
    def providers(self) -> Dict[str, object]:
        return {
            SOURCE_STATE_DEPT: self.state_dept,
            SOURCE_UK: self.uk,
            SOURCE_ACLED: self.acled,
            SOURCE_GDELT: self.gdelt,
        }


def build_services(settings: Optional[Settings] = None,
                   store: Optional[CacheStore] = None,
                   session: Optional[requests.Session] = None,
                   rng: Optional[random.Random] = None) -> SafetyServices:
    """
    Build the full service graph.

    Tests pass a MemoryStore and a mocked session; production gets a
    SnapshotStore under the cache directory and a shared requests session.
    """
    settings = settings or Settings.from_env()
    session = session or build_session(settings.user_agent)
    timeout = settings.http_timeout

    state_dept = StateDeptProvider(timeout=timeout, session=session)
    uk = UKAdvisoryProvider(timeout=timeout, session=session)
    acled = ACLEDProvider(
        username=settings.acled_username,
        password=settings.acled_password,
        timeout=timeout,
        session=session,
    )
    gdelt = GDELTProvider(timeout=timeout, session=session)

    ttl_seconds = settings.cache_ttl_hours * 3600
    if store is None:
        db_path = get_aggregation_cache_db()
        db_path.parent.mkdir(parents=True, exist_ok=True)
        store = SnapshotStore(
            str(db_path),
            ttl_seconds=ttl_seconds,
            snapshot_interval=settings.cache_snapshot_seconds,
        )

    cache = AggregationCache(
        providers={
            SOURCE_STATE_DEPT: state_dept,
            SOURCE_UK: uk,
            SOURCE_ACLED: acled,
            SOURCE_GDELT: gdelt,
        },
        store=store,
        prefer_cache_over_live=settings.prefer_cache_over_live,
    )

    resolver = LocationResolver()
    scorer = SafetyScorer()
    analytics = AnalyticsLog(get_logs_dir())

    if not acled.is_configured():
        logger.warning("ACLED credentials not set; conflict data will come from fallback only")
    if not settings.buttondown_api_key:
        logger.warning("BUTTONDOWN_API_KEY not set; /api/subscribe will fail")

    return SafetyServices(
        settings=settings,
        resolver=resolver,
        state_dept=state_dept,
        uk=uk,
        acled=acled,
        gdelt=gdelt,
        cache=cache,
        scorer=scorer,
        assessment=AssessmentService(resolver, cache, scorer),
        sentiment=SentimentStore(get_sentiment_file(), get_sentiment_backup_file(), rng=rng),
        analytics=analytics,
        subscriptions=SubscriptionService(
            ButtondownClient(settings.buttondown_api_key, timeout=timeout, session=session),
            analytics=analytics,
        ),
    )
