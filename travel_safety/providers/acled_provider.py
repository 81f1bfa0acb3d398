"""
ACLED API Provider - conflict event statistics.

ACLED (Armed Conflict Location & Event Data) provides:
- Violent events (battles, explosions, violence against civilians)
- Fatalities count
- Demonstrations and protests

Access uses an OAuth password grant. Set ACLED_USERNAME and ACLED_PASSWORD.
The bearer token is held in memory and refreshed 60 seconds before its
stated expiry. A 401 on the data call is not retried.

One read call returns at most MAX_EVENTS rows and is not paginated, so
`total_events` never exceeds 500 for live data. The higher conflict
penalty tiers are only reached through fallback or cached records.
"""

import logging
import time
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Union

import requests

from travel_safety.errors import ConfigurationError, ParseError, UpstreamError
from travel_safety.models import ConflictRecord, Location, Unavailable, utc_now_iso
from .common import SOURCE_ACLED, build_session

logger = logging.getLogger(__name__)

ACLED_TOKEN_URL = "https://acleddata.com/oauth/token"
ACLED_READ_URL = "https://acleddata.com/api/acled/read"
ACLED_CLIENT_ID = "acled"

TOKEN_REFRESH_MARGIN_SECONDS = 60
WINDOW_DAYS = 365
RECENT_DAYS = 30
MAX_EVENTS = 500
EVENT_FIELDS = 'event_type|fatalities|event_date|location|admin1|admin2'


class TokenCache:
    """In-memory bearer token with proactive expiry."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._token: Optional[str] = None
        self._expires_at = 0.0

    def get(self) -> Optional[str]:
        if self._token and self._clock() < self._expires_at:
            return self._token
        return None

    def put(self, token: str, expires_in: float) -> None:
        self._token = token
        self._expires_at = self._clock() + expires_in - TOKEN_REFRESH_MARGIN_SECONDS

    def clear(self) -> None:
        self._token = None
        self._expires_at = 0.0


def _parse_event_date(value: Any) -> Optional[date]:
    try:
        return datetime.strptime(str(value)[:10], '%Y-%m-%d').date()
    except ValueError:
        return None


def _fatalities(event: Dict[str, Any]) -> int:
    try:
        return int(event.get('fatalities') or 0)
    except (TypeError, ValueError):
        return 0


def calculate_trend(total_events: int, recent_events: int) -> str:
    """Compare the trailing 30-day count to the monthly average of the year."""
    if total_events == 0:
        return 'stable'

    monthly_average = total_events / 12
    ratio = recent_events / monthly_average

    if ratio > 1.3:
        return 'increasing'
    elif ratio < 0.7:
        return 'decreasing'
    else:
        return 'stable'


def filter_city_events(events: List[Dict[str, Any]], city: str) -> List[Dict[str, Any]]:
    city_lower = city.lower()
    return [
        e for e in events
        if city_lower in str(e.get('location') or '').lower() or
           city_lower in str(e.get('admin1') or '').lower() or
           city_lower in str(e.get('admin2') or '').lower()
    ]


def parse_acled(payload: Any, country: str, city: Optional[str] = None,
                today: Optional[date] = None) -> ConflictRecord:
    """
    Summarize an ACLED read payload.

    City-level data is used only when some events mention the city;
    otherwise the record covers the whole country.
    """
    if not isinstance(payload, dict):
        raise ParseError(SOURCE_ACLED, 'expected a JSON object')

    events = payload.get('data')
    if isinstance(events, dict):
        events = events.get('data')
    if events is None:
        events = []
    if not isinstance(events, list):
        raise ParseError(SOURCE_ACLED, "'data' is not a list")

    events = [e for e in events if isinstance(e, dict)]

    scope_location = None
    if city:
        city_events = filter_city_events(events, city)
        if city_events:
            events = city_events
            scope_location = city

    today = today or date.today()
    recent_cutoff = today - timedelta(days=RECENT_DAYS)

    event_types: Dict[str, int] = {}
    total_fatalities = 0
    recent = 0
    for event in events:
        event_type = str(event.get('event_type') or 'Unknown')
        event_types[event_type] = event_types.get(event_type, 0) + 1
        total_fatalities += _fatalities(event)
        event_date = _parse_event_date(event.get('event_date'))
        if event_date is not None and event_date >= recent_cutoff:
            recent += 1

    return ConflictRecord(
        country=country,
        location=scope_location,
        total_events=len(events),
        fatalities=total_fatalities,
        events_last_30_days=recent,
        event_types=event_types,
        last_updated=utc_now_iso(),
        trend=calculate_trend(len(events), recent),
    )


class ACLEDProvider:
    """Provider for ACLED conflict event data."""

    source = SOURCE_ACLED

    def __init__(self, username: str = '', password: str = '', timeout: int = 30,
                 session: Optional[requests.Session] = None,
                 token_cache: Optional[TokenCache] = None):
        self.username = username
        self.password = password
        self.timeout = timeout
        self.session = session or build_session()
        self.token_cache = token_cache or TokenCache()

    def is_configured(self) -> bool:
        """Check if ACLED credentials are configured."""
        return bool(self.username and self.password)

    def get_access_token(self) -> str:
        if not self.is_configured():
            raise ConfigurationError('ACLED_USERNAME and ACLED_PASSWORD must be configured')

        cached = self.token_cache.get()
        if cached:
            return cached

        response = self.session.post(
            ACLED_TOKEN_URL,
            data={
                'username': self.username,
                'password': self.password,
                'grant_type': 'password',
                'client_id': ACLED_CLIENT_ID,
            },
            timeout=self.timeout,
        )
        if not response.ok:
            raise UpstreamError(self.source, response.status_code, response.text[:500])

        try:
            token_json = response.json()
        except ValueError as e:
            raise ParseError(self.source, 'token response is not JSON') from e

        access_token = token_json.get('access_token') if isinstance(token_json, dict) else None
        try:
            expires_in = float(token_json.get('expires_in') or 0)
        except (AttributeError, TypeError, ValueError):
            expires_in = 0
        if not access_token or expires_in <= 0:
            raise ParseError(self.source, 'token response missing access_token or expires_in')

        self.token_cache.put(access_token, expires_in)
        logger.info("ACLED access token refreshed")
        return access_token

    def get_conflict(self, country: str, city: Optional[str] = None) -> ConflictRecord:
        """Fetch and summarize the trailing year of events. Raises on failure."""
        token = self.get_access_token()

        end_date = date.today()
        start_date = end_date - timedelta(days=WINDOW_DAYS)
        params = {
            '_format': 'json',
            'country': country,
            'event_date': f'{start_date.isoformat()}|{end_date.isoformat()}',
            'event_date_where': 'BETWEEN',
            'fields': EVENT_FIELDS,
            'limit': MAX_EVENTS,
        }

        response = self.session.get(
            ACLED_READ_URL,
            params=params,
            headers={'Authorization': f'Bearer {token}'},
            timeout=self.timeout,
        )
        if not response.ok:
            raise UpstreamError(self.source, response.status_code, response.text[:500])

        try:
            payload = response.json()
        except ValueError as e:
            raise ParseError(self.source, 'response is not JSON', response.text[:500]) from e

        return parse_acled(payload, country, city=city, today=end_date)

    def fetch(self, location: Location) -> Union[ConflictRecord, Unavailable]:
        try:
            return self.get_conflict(location.country, city=location.city)
        except ConfigurationError as e:
            logger.info(f"ACLED skipped: {e}")
            return Unavailable(source=self.source, reason='not configured')
        except requests.Timeout:
            logger.warning(f"ACLED timeout for {location.country}")
            return Unavailable(source=self.source, reason='timeout')
        except requests.RequestException as e:
            logger.error(f"ACLED request error: {e}")
            return Unavailable(source=self.source, reason=str(e))
        except (UpstreamError, ParseError, ValueError) as e:
            logger.warning(f"ACLED unavailable for {location.country}: {e}")
            return Unavailable(source=self.source, reason=str(e))
