"""
Assessment service: resolve -> aggregate -> score.

Builds a fresh CompositeAssessment on every call. Only the per-source inputs
are cached; the score is always recomputed from them.
"""

import logging
from typing import Optional

from travel_safety.aggregation_cache import AggregationCache
from travel_safety.errors import LocationNotFound
from travel_safety.models import AdvisoryRecord, CompositeAssessment, Location
from travel_safety.providers.common import (
    ALL_SOURCES,
    SOURCE_ACLED,
    SOURCE_GDELT,
    SOURCE_STATE_DEPT,
    SOURCE_UK,
)
from travel_safety.resolver import LocationResolver
from travel_safety.scoring import SafetyScorer

logger = logging.getLogger(__name__)

PLACEHOLDER_ADVISORY_TEXT = 'No advisory data available.'


class AssessmentService:

    def __init__(self, resolver: LocationResolver, cache: AggregationCache, scorer: SafetyScorer):
        self.resolver = resolver
        self.cache = cache
        self.scorer = scorer

    def assess_query(self, query: str, include_news: bool = True,
                     include_conflict: bool = True) -> CompositeAssessment:
        """Resolve a free-form query and assess it. Raises LocationNotFound."""
        location = self.resolver.resolve(query)
        if location is None:
            raise LocationNotFound(query)
        return self.assess(location, include_news=include_news, include_conflict=include_conflict)

    def assess(self, location: Location, include_news: bool = True,
               include_conflict: bool = True) -> CompositeAssessment:
        sources = [SOURCE_STATE_DEPT, SOURCE_UK]
        skipped = []
        if include_conflict:
            sources.append(SOURCE_ACLED)
        else:
            skipped.append(SOURCE_ACLED)
        if include_news:
            sources.append(SOURCE_GDELT)
        else:
            skipped.append(SOURCE_GDELT)

        aggregated = self.cache.get(location, sources)
        provenance = dict(aggregated.provenance)

        advisory: Optional[AdvisoryRecord] = aggregated.get(SOURCE_STATE_DEPT)
        if advisory is None:
            advisory = AdvisoryRecord(
                country=location.country,
                country_code=location.country_code or '',
                level=1,
                advisory_text=PLACEHOLDER_ADVISORY_TEXT,
            )
            provenance[SOURCE_STATE_DEPT] = 'placeholder'

        conflict = aggregated.get(SOURCE_ACLED)
        sentiment = aggregated.get(SOURCE_GDELT)

        breakdown = self.scorer.breakdown(advisory, conflict, sentiment)
        score = self.scorer.score(advisory, conflict, sentiment)
        missing = [source for source in ALL_SOURCES if source in aggregated.unavailable]

        if missing:
            logger.info(f"Assessment for {location.key} missing sources: {', '.join(missing)}")

        return CompositeAssessment(
            location=location,
            advisory=advisory,
            secondary_advisory=aggregated.get(SOURCE_UK),
            conflict=conflict,
            sentiment=sentiment,
            score=score,
            label=self.scorer.label_for(score),
            score_breakdown=breakdown,
            missing_sources=missing,
            skipped_sources=skipped,
            provenance=provenance,
            nearby=self.resolver.nearby(location),
        )
