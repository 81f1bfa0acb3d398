"""
Static fallback dataset.

Hand-written sample records for common destinations so an assessment can be
produced when every upstream is unreachable. Keyed by canonical country key.
Also holds the baseline safety scores used to seed community sentiment.
"""

from typing import Any, Dict, Optional

from travel_safety.models import AdvisoryRecord, ConflictRecord, Record, SentimentRecord
from travel_safety.providers.common import SOURCE_ACLED, SOURCE_GDELT, SOURCE_STATE_DEPT

STATE_DEPT_HOME = 'https://travel.state.gov'
SAMPLE_TIMESTAMP = '2024-12-15T00:00:00+00:00'

FALLBACK_DATA: Dict[str, Dict[str, Dict[str, Any]]] = {
    'japan': {
        'advisory': {'country': 'Japan', 'country_code': 'JP', 'level': 1,
                     'advisory_text': 'Exercise normal precautions.', 'date_updated': '2024-12-01'},
        'acled': {'total_events': 34, 'fatalities': 2, 'events_last_30_days': 3, 'trend': 'stable'},
        'gdelt': {'tone_score': 3.2, 'trend_7day': 'stable'},
    },
    'france': {
        'advisory': {'country': 'France', 'country_code': 'FR', 'level': 2,
                     'advisory_text': 'Exercise increased caution due to terrorism and civil unrest.',
                     'date_updated': '2024-11-20'},
        'acled': {'total_events': 423, 'fatalities': 12, 'events_last_30_days': 45, 'trend': 'stable'},
        'gdelt': {'tone_score': 0.8, 'trend_7day': 'stable'},
    },
    'mexico': {
        'advisory': {'country': 'Mexico', 'country_code': 'MX', 'level': 2,
                     'advisory_text': 'Exercise increased caution due to crime and kidnapping.',
                     'date_updated': '2024-12-10'},
        'acled': {'total_events': 2156, 'fatalities': 1834, 'events_last_30_days': 187, 'trend': 'increasing'},
        'gdelt': {'tone_score': -2.1, 'trend_7day': 'worsening'},
    },
    'colombia': {
        'advisory': {'country': 'Colombia', 'country_code': 'CO', 'level': 3,
                     'advisory_text': 'Reconsider travel due to crime, terrorism, and kidnapping.',
                     'date_updated': '2024-12-15'},
        'acled': {'total_events': 1247, 'fatalities': 892, 'events_last_30_days': 98, 'trend': 'stable'},
        'gdelt': {'tone_score': -2.8, 'trend_7day': 'stable'},
    },
    'thailand': {
        'advisory': {'country': 'Thailand', 'country_code': 'TH', 'level': 1,
                     'advisory_text': 'Exercise normal precautions.', 'date_updated': '2024-11-01'},
        'acled': {'total_events': 312, 'fatalities': 89, 'events_last_30_days': 28, 'trend': 'decreasing'},
        'gdelt': {'tone_score': 1.5, 'trend_7day': 'improving'},
    },
    'indonesia': {
        'advisory': {'country': 'Indonesia', 'country_code': 'ID', 'level': 2,
                     'advisory_text': 'Exercise increased caution due to terrorism.', 'date_updated': '2024-10-15'},
        'acled': {'total_events': 187, 'fatalities': 34, 'events_last_30_days': 15, 'trend': 'stable'},
        'gdelt': {'tone_score': 1.2, 'trend_7day': 'stable'},
    },
    'italy': {
        'advisory': {'country': 'Italy', 'country_code': 'IT', 'level': 2,
                     'advisory_text': 'Exercise increased caution due to terrorism.', 'date_updated': '2024-11-05'},
        'acled': {'total_events': 156, 'fatalities': 8, 'events_last_30_days': 12, 'trend': 'stable'},
        'gdelt': {'tone_score': 2.1, 'trend_7day': 'stable'},
    },
    'united kingdom': {
        'advisory': {'country': 'United Kingdom', 'country_code': 'GB', 'level': 2,
                     'advisory_text': 'Exercise increased caution due to terrorism.', 'date_updated': '2024-10-20'},
        'acled': {'total_events': 234, 'fatalities': 15, 'events_last_30_days': 23, 'trend': 'stable'},
        'gdelt': {'tone_score': 0.5, 'trend_7day': 'stable'},
    },
    'united arab emirates': {
        'advisory': {'country': 'United Arab Emirates', 'country_code': 'AE', 'level': 2,
                     'advisory_text': 'Exercise increased caution due to missile threats.',
                     'date_updated': '2024-09-15'},
        'acled': {'total_events': 45, 'fatalities': 3, 'events_last_30_days': 4, 'trend': 'stable'},
        'gdelt': {'tone_score': 1.8, 'trend_7day': 'stable'},
    },
    'spain': {
        'advisory': {'country': 'Spain', 'country_code': 'ES', 'level': 2,
                     'advisory_text': 'Exercise increased caution due to terrorism.', 'date_updated': '2024-11-10'},
        'acled': {'total_events': 123, 'fatalities': 5, 'events_last_30_days': 10, 'trend': 'stable'},
        'gdelt': {'tone_score': 2.4, 'trend_7day': 'improving'},
    },
}

# Approximate community safety scores (0-100) used to seed sentiment votes.
BASELINE_SAFETY_SCORES: Dict[str, int] = {
    # Safe cities
    'tokyo': 100, 'osaka': 100, 'kyoto': 100, 'paris': 80, 'london': 85,
    'dublin': 85, 'edinburgh': 85, 'barcelona': 78, 'madrid': 78, 'lisbon': 80,
    'porto': 80, 'amsterdam': 82, 'brussels': 80, 'berlin': 82, 'munich': 85,
    'prague': 82, 'vienna': 85, 'budapest': 80, 'warsaw': 80, 'krakow': 82,
    'copenhagen': 88, 'stockholm': 88, 'oslo': 90, 'helsinki': 90, 'reykjavik': 92,
    'zurich': 90, 'geneva': 90, 'rome': 75, 'florence': 78, 'venice': 80,
    'milan': 75, 'naples': 70, 'athens': 72, 'dubai': 85, 'abu dhabi': 88,
    'singapore': 95, 'hong kong': 80, 'sydney': 88, 'melbourne': 88,
    'auckland': 90, 'queenstown': 92, 'vancouver': 85, 'toronto': 82,
    'montreal': 82, 'bangkok': 72, 'phuket': 75, 'bali': 78, 'seoul': 88,
    # Caribbean
    'oranjestad': 85, 'bridgetown': 82, 'nassau': 70, 'willemstad': 78,
    'st george': 80, 'castries': 75, 'san juan': 65, 'havana': 60,
    'santo domingo': 55, 'punta cana': 65, 'port of spain': 50,
    # South and Central America
    'montevideo': 78, 'buenos aires': 70, 'mendoza': 75, 'santiago': 72,
    'san jose': 68, 'panama city': 65, 'asuncion': 58,
    # Moderate risk
    'mexico city': 55, 'cancun': 60, 'cabo': 65, 'guadalajara': 50,
    'monterrey': 45, 'tulum': 62, 'playa del carmen': 58, 'oaxaca': 60,
    'puerto vallarta': 62, 'medellin': 55, 'bogota': 52, 'cartagena': 60,
    'cali': 45, 'quito': 58, 'guayaquil': 52, 'lima': 55, 'cusco': 65,
    'la paz': 55, 'rio de janeiro': 45, 'sao paulo': 48, 'salvador': 42,
    # Higher risk
    'kingston': 35, 'montego bay': 40, 'guatemala city': 38, 'san salvador': 35,
    'tegucigalpa': 32, 'san pedro sula': 28, 'managua': 40, 'belize city': 45,
    # Very high risk
    'caracas': 18, 'maracaibo': 22, 'port-au-prince': 12,
}


def _build(source: str, entry: Dict[str, Dict[str, Any]],
           location_name: Optional[str]) -> Optional[Record]:
    country = entry['advisory']['country']
    if source == SOURCE_STATE_DEPT:
        return AdvisoryRecord(url=STATE_DEPT_HOME, **entry['advisory'])
    if source == SOURCE_ACLED:
        return ConflictRecord(country=country, last_updated=SAMPLE_TIMESTAMP, **entry['acled'])
    if source == SOURCE_GDELT:
        return SentimentRecord(
            location=location_name or country,
            country=country,
            last_updated=SAMPLE_TIMESTAMP,
            **entry['gdelt'],
        )
    return None


def lookup_fallback(source: str, key: str, location_name: Optional[str] = None) -> Optional[Record]:
    """
    Static record for `source` under a canonical key, or None.

    Only country keys carry entries; sources without sample data (the UK
    advisory) always miss.
    """
    entry = FALLBACK_DATA.get(key)
    if entry is None:
        return None
    return _build(source, entry, location_name)
