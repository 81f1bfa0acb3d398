"""
GDELT Provider - news tone from the GDELT 2.1 DOC API.

GDELT (Global Database of Events, Language, and Tone) provides free access
to global news articles. No API key required.

The location is sent as a quoted phrase; punctuation is stripped first
because the DOC query grammar rejects or reinterprets it.
"""

import logging
import math
import re
from typing import Any, Dict, List, Optional, Union

import requests

from travel_safety.errors import ParseError, UpstreamError
from travel_safety.models import MAX_HEADLINES, Headline, Location, SentimentRecord, Unavailable, utc_now_iso
from .common import SOURCE_GDELT, build_session

logger = logging.getLogger(__name__)

GDELT_DOC_URL = "https://api.gdeltproject.org/api/v2/doc/doc"
MAX_RECORDS = 250
TIMESPAN = '7d'

SPIKE_THRESHOLD = 50
ELEVATED_THRESHOLD = 20
IMPROVING_TONE = 0
WORSENING_TONE = -5

_DISALLOWED = re.compile(r'[^\w\s-]|_', re.UNICODE)


def sanitize_query(location: str) -> str:
    """Strip punctuation, collapse whitespace and wrap as a quoted phrase."""
    cleaned = (location or '').replace('|', ' ')
    cleaned = _DISALLOWED.sub(' ', cleaned)
    cleaned = re.sub(r'\s+', ' ', cleaned).strip()
    return f'"{cleaned}"' if cleaned else ''


def _tone(article: Dict[str, Any]) -> Optional[float]:
    try:
        value = float(article.get('tone') or 0)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def classify_volume(article_count: int) -> str:
    if article_count > SPIKE_THRESHOLD:
        return 'spike'
    elif article_count > ELEVATED_THRESHOLD:
        return 'elevated'
    return 'normal'


def classify_trend(average_tone: float) -> str:
    if average_tone > IMPROVING_TONE:
        return 'improving'
    elif average_tone < WORSENING_TONE:
        return 'worsening'
    return 'stable'


def parse_gdelt(payload: Any, location: str, country: str = '') -> SentimentRecord:
    """Summarize a DOC API artlist payload. Headlines keep upstream order."""
    if not isinstance(payload, dict):
        raise ParseError(SOURCE_GDELT, 'expected a JSON object')

    articles = payload.get('articles') or []
    if not isinstance(articles, list):
        raise ParseError(SOURCE_GDELT, "'articles' is not a list")
    articles = [a for a in articles if isinstance(a, dict)]

    tones: List[float] = [t for t in (_tone(a) for a in articles) if t is not None]
    average = sum(tones) / len(tones) if tones else 0.0
    now = utc_now_iso()

    headlines = [
        Headline(
            title=article.get('title') or 'Untitled',
            url=article.get('url') or '',
            source=article.get('domain') or 'Unknown',
            date=article.get('seendate') or now,
            tone=_tone(article) or 0.0,
        )
        for article in articles[:MAX_HEADLINES]
    ]

    return SentimentRecord(
        location=location,
        country=country,
        tone_score=round(average, 1),
        volume_level=classify_volume(len(articles)),
        article_count_24h=len(articles),
        themes={},
        headlines=headlines,
        trend_7day=classify_trend(average),
        last_updated=now,
    )


class GDELTProvider:
    """
    GDELT 2.1 API Provider for news tone.

    Endpoints used:
    - DOC 2.0 API: https://api.gdeltproject.org/api/v2/doc/doc
    """

    source = SOURCE_GDELT

    def __init__(self, timeout: int = 30, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or build_session()

    def get_sentiment(self, location: str, country: str = '') -> SentimentRecord:
        """Query GDELT for a location. Raises UpstreamError / ParseError."""
        query = sanitize_query(location)
        if not query:
            raise ParseError(self.source, 'location is empty after sanitizing')

        params = {
            'query': query,
            'mode': 'artlist',
            'maxrecords': MAX_RECORDS,
            'format': 'json',
            'timespan': TIMESPAN,
        }
        response = self.session.get(GDELT_DOC_URL, params=params, timeout=self.timeout)
        if not response.ok:
            raise UpstreamError(self.source, response.status_code, response.text[:500])

        try:
            payload = response.json()
        except ValueError as e:
            raise ParseError(
                self.source,
                'Non-JSON response from GDELT',
                response.text[:500] if response.text else None,
            ) from e

        return parse_gdelt(payload, location, country)

    def fetch(self, location: Location) -> Union[SentimentRecord, Unavailable]:
        try:
            return self.get_sentiment(location.name, location.country)
        except requests.Timeout:
            logger.warning(f"GDELT timeout for {location.name}")
            return Unavailable(source=self.source, reason='timeout')
        except requests.RequestException as e:
            logger.error(f"GDELT request error: {e}")
            return Unavailable(source=self.source, reason=str(e))
        except (UpstreamError, ParseError, ValueError) as e:
            logger.warning(f"GDELT unavailable for {location.name}: {e}")
            return Unavailable(source=self.source, reason=str(e))
