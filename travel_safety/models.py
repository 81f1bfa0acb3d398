"""
Typed records for the travel safety aggregation layer.

Every upstream adapter parses its payload into one of these models; scoring
and rendering code only ever sees validated records. All records are frozen
so the aggregation cache can hand out the same instances to every caller.
"""

from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_HEADLINES = 5

ConflictTrend = Literal['increasing', 'decreasing', 'stable']
VolumeLevel = Literal['normal', 'elevated', 'spike']
SentimentTrend = Literal['improving', 'worsening', 'stable']
RiskLabel = Literal['Low Risk', 'Moderate Risk', 'Elevated Risk', 'High Risk']


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class Location(Record):
    """A gazetteer entry: either a city (with coordinates) or a whole country."""

    key: str
    name: str
    country: str
    country_code: Optional[str] = None
    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator('country')
    @classmethod
    def _country_required(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError('country must not be empty')
        return value

    @property
    def is_city(self) -> bool:
        return self.city is not None

    @property
    def country_key(self) -> str:
        return self.country.lower().strip()

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class AdvisoryRecord(Record):
    """US State Department travel advisory for one country."""

    country: str
    country_code: str = ''
    level: int = 1
    advisory_text: str = ''
    date_updated: str = ''
    url: str = ''

    @field_validator('level', mode='before')
    @classmethod
    def _clamp_level(cls, value) -> int:
        try:
            level = int(value)
        except (TypeError, ValueError):
            level = 1
        return max(1, min(4, level))


class SecondaryAdvisoryRecord(Record):
    """UK FCDO foreign travel advice. An empty alert list means no special alerts."""

    country: str
    alert_status: List[str] = Field(default_factory=list)
    change_description: str = ''
    last_updated: str = ''
    url: str = ''


class ConflictRecord(Record):
    """ACLED event statistics over the trailing year."""

    country: str
    location: Optional[str] = None
    total_events: int = 0
    fatalities: int = 0
    events_last_30_days: int = 0
    event_types: Dict[str, int] = Field(default_factory=dict)
    last_updated: str = Field(default_factory=utc_now_iso)
    trend: ConflictTrend = 'stable'


class Headline(Record):
    title: str
    source: str
    url: str
    date: str
    tone: float = 0.0


class SentimentRecord(Record):
    """GDELT news tone for a location."""

    location: str
    country: str = ''
    tone_score: float = 0.0
    volume_level: VolumeLevel = 'normal'
    article_count_24h: int = 0
    themes: Dict[str, int] = Field(default_factory=dict)
    headlines: List[Headline] = Field(default_factory=list)
    trend_7day: SentimentTrend = 'stable'
    last_updated: str = Field(default_factory=utc_now_iso)

    @field_validator('headlines')
    @classmethod
    def _limit_headlines(cls, value: List[Headline]) -> List[Headline]:
        if len(value) > MAX_HEADLINES:
            raise ValueError(f'at most {MAX_HEADLINES} headlines allowed')
        return value


class Unavailable(Record):
    """A source could not be fetched. Distinct from a valid empty result."""

    source: str
    reason: str = ''


class CompositeAssessment(Record):
    """Scored view of one location. Rebuilt on every query, never cached."""

    location: Location
    advisory: Optional[AdvisoryRecord] = None
    secondary_advisory: Optional[SecondaryAdvisoryRecord] = None
    conflict: Optional[ConflictRecord] = None
    sentiment: Optional[SentimentRecord] = None
    score: int = Field(ge=1, le=100)
    label: RiskLabel
    score_breakdown: Dict[str, int] = Field(default_factory=dict)
    missing_sources: List[str] = Field(default_factory=list)
    skipped_sources: List[str] = Field(default_factory=list)
    provenance: Dict[str, str] = Field(default_factory=dict)
    nearby: List[str] = Field(default_factory=list)
    generated_at: str = Field(default_factory=utc_now_iso)


class VotePair(BaseModel):
    safe: int = Field(default=0, ge=0)
    unsafe: int = Field(default=0, ge=0)


class SentimentCounts(BaseModel):
    """Community vote counters for one location."""

    seeded: VotePair = Field(default_factory=VotePair)
    real: VotePair = Field(default_factory=VotePair)

    @property
    def safe(self) -> int:
        return self.seeded.safe + self.real.safe

    @property
    def unsafe(self) -> int:
        return self.seeded.unsafe + self.real.unsafe
