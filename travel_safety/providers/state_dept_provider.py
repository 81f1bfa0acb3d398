"""
US State Department Travel Advisories Provider

Queries the single global advisory feed and extracts the entry for the
target country. No API key required.

Level extraction fallback chain:
1. explicit numeric level field (advisory_level / Level / level)
2. "Level N" parsed from the title, then from the summary
3. default to 1

The result is always clamped to [1, 4].
"""

import logging
import re
from typing import Any, Dict, List, Optional, Union

import requests

from travel_safety.errors import ParseError, UpstreamError
from travel_safety.models import AdvisoryRecord, Location, Unavailable
from .common import SOURCE_STATE_DEPT, build_session

logger = logging.getLogger(__name__)

STATE_DEPT_URL = "https://cadataapi.state.gov/api/TravelAdvisories"
STATE_DEPT_HOME = "https://travel.state.gov"

LEVEL_FIELDS = ('advisory_level', 'Level', 'level')
LEVEL_PATTERN = re.compile(r'Level\s*(\d)', re.IGNORECASE)
TAG_PATTERN = re.compile(r'<[^>]+>')


def _first(entry: Dict[str, Any], *names: str) -> str:
    for name in names:
        value = entry.get(name)
        if value:
            return str(value)
    return ''


def extract_level(entry: Dict[str, Any]) -> int:
    """Advisory level from an entry, clamped to [1, 4]."""
    for field in LEVEL_FIELDS:
        value = entry.get(field)
        if value is None or value == '':
            continue
        try:
            return max(1, min(4, int(value)))
        except (TypeError, ValueError):
            continue

    for text in (_first(entry, 'Title', 'title'), _first(entry, 'Summary', 'summary')):
        match = LEVEL_PATTERN.search(text)
        if match:
            return max(1, min(4, int(match.group(1))))

    return 1


def _entry_country(entry: Dict[str, Any]) -> str:
    title = _first(entry, 'Title', 'title', 'country')
    return title.split(' - ')[0].strip()


def parse_state_dept(payload: Any, country: str) -> AdvisoryRecord:
    """
    Select the advisory for `country` from the global feed.

    Raises ParseError when the payload is not a list of entries or the
    country is not present in it.
    """
    if isinstance(payload, dict):
        payload = payload.get('data') or payload.get('advisories')
    if not isinstance(payload, list):
        raise ParseError(SOURCE_STATE_DEPT, 'expected a list of advisories')

    wanted = country.strip().lower()
    for entry in payload:
        if not isinstance(entry, dict):
            continue
        if _entry_country(entry).lower() != wanted:
            continue

        summary = TAG_PATTERN.sub(' ', _first(entry, 'Summary', 'summary', 'advisory_text'))
        summary = re.sub(r'\s+', ' ', summary).strip()
        categories = entry.get('Category') or []
        country_code = categories[0] if isinstance(categories, list) and categories else ''

        return AdvisoryRecord(
            country=_entry_country(entry),
            country_code=str(country_code),
            level=extract_level(entry),
            advisory_text=summary[:1000],
            date_updated=_first(entry, 'Updated', 'Published', 'date_updated'),
            url=_first(entry, 'Link', 'link', 'url') or STATE_DEPT_HOME,
        )

    raise ParseError(SOURCE_STATE_DEPT, f"no advisory for '{country}'")


class StateDeptProvider:
    """Provider for US State Department travel advisories."""

    source = SOURCE_STATE_DEPT

    def __init__(self, timeout: int = 30, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or build_session()

    def get_advisories(self) -> List[Dict[str, Any]]:
        """Fetch the raw global advisory list."""
        response = self.session.get(STATE_DEPT_URL, timeout=self.timeout)
        if not response.ok:
            raise UpstreamError(self.source, response.status_code, response.text[:500])
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(self.source, 'response is not JSON', response.text[:500]) from e

    def get_advisory(self, country: str) -> AdvisoryRecord:
        return parse_state_dept(self.get_advisories(), country)

    def fetch(self, location: Location) -> Union[AdvisoryRecord, Unavailable]:
        try:
            return self.get_advisory(location.country)
        except requests.Timeout:
            logger.warning(f"State Dept timeout for {location.country}")
            return Unavailable(source=self.source, reason='timeout')
        except requests.RequestException as e:
            logger.error(f"State Dept request error: {e}")
            return Unavailable(source=self.source, reason=str(e))
        except (UpstreamError, ParseError, ValueError) as e:
            logger.warning(f"State Dept unavailable for {location.country}: {e}")
            return Unavailable(source=self.source, reason=str(e))
