"""
Composite safety scoring.

Combines the advisory level, conflict statistics and news tone into a single
1-100 score using fixed penalty tiers. Pure functions only: no I/O, no state.
The UK advisory is presentation-only and never enters the score.
"""
from typing import Dict, Optional

from travel_safety.models import AdvisoryRecord, ConflictRecord, RiskLabel, SentimentRecord

BASE_SCORE = 100
MIN_SCORE = 1
MAX_SCORE = 100
ADVISORY_LEVEL_PENALTY = 15

# (threshold, penalty) pairs, evaluated highest-first; first strict match wins.
CONFLICT_EVENT_TIERS = ((1000, 15), (500, 10), (100, 5))
CONFLICT_FATALITY_TIERS = ((500, 10), (100, 5))

CONFLICT_TREND_ADJUSTMENTS = {
    'increasing': -5,
    'decreasing': 3,
    'stable': 0,
}

VOLUME_ADJUSTMENTS = {
    'spike': -8,
    'elevated': -3,
    'normal': 0,
}

NEWS_TREND_ADJUSTMENTS = {
    'worsening': -5,
    'improving': 3,
    'stable': 0,
}

LABEL_BREAKPOINTS = (
    (75, 'Low Risk'),
    (50, 'Moderate Risk'),
    (25, 'Elevated Risk'),
)


def _tier_penalty(value: int, tiers) -> int:
    for threshold, penalty in tiers:
        if value > threshold:
            return penalty
    return 0


def _tone_adjustment(tone: float) -> int:
    if tone < -5:
        return -10
    elif tone < -2:
        return -5
    elif tone > 2:
        return 3
    return 0


def clamp_score(raw: float) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, int(round(raw))))


class SafetyScorer:
    """Deterministic weighted-penalty scorer."""

    def breakdown(self, advisory: AdvisoryRecord,
                  conflict: Optional[ConflictRecord] = None,
                  sentiment: Optional[SentimentRecord] = None) -> Dict[str, int]:
        """
        Per-step adjustments, in evaluation order.

        Sources that are absent contribute no entries at all.
        """
        steps = {
            'base': BASE_SCORE,
            'advisory_level': -(advisory.level - 1) * ADVISORY_LEVEL_PENALTY,
        }

        if conflict is not None:
            steps['conflict_events'] = -_tier_penalty(conflict.total_events, CONFLICT_EVENT_TIERS)
            steps['conflict_fatalities'] = -_tier_penalty(conflict.fatalities, CONFLICT_FATALITY_TIERS)
            steps['conflict_trend'] = CONFLICT_TREND_ADJUSTMENTS.get(conflict.trend, 0)

        if sentiment is not None:
            steps['news_tone'] = _tone_adjustment(sentiment.tone_score)
            steps['news_volume'] = VOLUME_ADJUSTMENTS.get(sentiment.volume_level, 0)
            steps['news_trend'] = NEWS_TREND_ADJUSTMENTS.get(sentiment.trend_7day, 0)

        return steps

    def score(self, advisory: AdvisoryRecord,
              conflict: Optional[ConflictRecord] = None,
              sentiment: Optional[SentimentRecord] = None) -> int:
        """Composite score clamped to [1, 100]."""
        return clamp_score(sum(self.breakdown(advisory, conflict, sentiment).values()))

    @staticmethod
    def label_for(score: int) -> RiskLabel:
        for lower_bound, label in LABEL_BREAKPOINTS:
            if score >= lower_bound:
                return label
        return 'High Risk'


_scorer: Optional[SafetyScorer] = None


def get_scorer() -> SafetyScorer:
    global _scorer
    if _scorer is None:
        _scorer = SafetyScorer()
    return _scorer
