"""
UK FCDO Foreign Travel Advice Provider

Per-country content API on gov.uk. No API key required.
The country display name is mapped to the gov.uk URL slug via a small
override table, then a generic lowercase-hyphenate transform.
"""

import logging
import re
from typing import Any, Dict, Optional, Union
from urllib.parse import quote

import requests

from travel_safety.errors import ParseError, UpstreamError
from travel_safety.models import Location, SecondaryAdvisoryRecord, Unavailable, utc_now_iso
from .common import SOURCE_UK, build_session

logger = logging.getLogger(__name__)

UK_CONTENT_URL = "https://www.gov.uk/api/content/foreign-travel-advice/{slug}"
UK_PUBLIC_URL = "https://www.gov.uk/foreign-travel-advice/{slug}"

SLUG_OVERRIDES = {
    'united states': 'usa',
    'usa': 'usa',
    'myanmar': 'burma',
    "cote d'ivoire": 'cote-d-ivoire',
    'ivory coast': 'cote-d-ivoire',
    'czechia': 'czech-republic',
    'saint lucia': 'st-lucia',
    'saint kitts and nevis': 'st-kitts-and-nevis',
    'saint vincent and the grenadines': 'st-vincent-and-the-grenadines',
    'gambia': 'the-gambia',
    'palestine': 'the-occupied-palestinian-territories',
    'curacao': 'curacao',
    'hong kong': 'hong-kong',
}


class MissingAdviceDetails(ParseError):
    """The content item exists but carries no travel advice details."""

    def __init__(self, slug: str):
        super().__init__(SOURCE_UK, 'UK advice missing details')
        self.slug = slug


def country_slug(name: str) -> str:
    """Map a country display name to its gov.uk slug."""
    normalized = (name or '').strip().lower()
    if normalized in SLUG_OVERRIDES:
        return SLUG_OVERRIDES[normalized]
    slug = re.sub(r'[.,]', '', normalized)
    return re.sub(r'\s+', '-', slug.strip())


def parse_uk_advice(payload: Any, slug: str) -> SecondaryAdvisoryRecord:
    if not isinstance(payload, dict):
        raise ParseError(SOURCE_UK, 'expected a content item object')

    details = payload.get('details')
    if not details:
        raise MissingAdviceDetails(slug)
    if not isinstance(details, dict):
        raise ParseError(SOURCE_UK, "'details' is not an object")

    alert_status = details.get('alert_status') or []
    if not isinstance(alert_status, list):
        alert_status = [str(alert_status)]

    return SecondaryAdvisoryRecord(
        country=payload.get('title') or slug,
        alert_status=[str(flag) for flag in alert_status],
        change_description=details.get('change_description') or '',
        last_updated=payload.get('public_updated_at') or utc_now_iso(),
        url=payload.get('web_url') or UK_PUBLIC_URL.format(slug=slug),
    )


class UKAdvisoryProvider:
    """Provider for UK foreign travel advice."""

    source = SOURCE_UK

    def __init__(self, timeout: int = 30, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or build_session()

    def get_advice(self, slug: str) -> SecondaryAdvisoryRecord:
        """Fetch advice by gov.uk slug. Raises UpstreamError / ParseError."""
        url = UK_CONTENT_URL.format(slug=quote(slug))
        response = self.session.get(url, timeout=self.timeout)
        if not response.ok:
            raise UpstreamError(self.source, response.status_code)
        try:
            payload: Dict[str, Any] = response.json()
        except ValueError as e:
            raise ParseError(self.source, 'response is not JSON', response.text[:500]) from e
        return parse_uk_advice(payload, slug)

    def fetch(self, location: Location) -> Union[SecondaryAdvisoryRecord, Unavailable]:
        slug = country_slug(location.country)
        try:
            return self.get_advice(slug)
        except requests.Timeout:
            logger.warning(f"UK FCDO timeout for {slug}")
            return Unavailable(source=self.source, reason='timeout')
        except requests.RequestException as e:
            logger.error(f"UK FCDO request error: {e}")
            return Unavailable(source=self.source, reason=str(e))
        except (UpstreamError, ParseError, ValueError) as e:
            logger.warning(f"UK FCDO unavailable for {slug}: {e}")
            return Unavailable(source=self.source, reason=str(e))
