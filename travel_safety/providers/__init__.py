"""
Upstream Providers Package

One adapter per travel-safety feed:
- US State Department travel advisories (global list, no key)
- UK FCDO foreign travel advice (per-country, no key)
- ACLED conflict events (OAuth username/password)
- GDELT news tone (no key)

Each provider exposes a raising `get_*` method used by the REST proxies and
`fetch(location)` which always returns a typed record or `Unavailable`.
"""

from .common import (
    ADVISORY_SOURCES,
    ALL_SOURCES,
    SOURCE_ACLED,
    SOURCE_GDELT,
    SOURCE_STATE_DEPT,
    SOURCE_UK,
    build_session,
)
from .state_dept_provider import StateDeptProvider
from .uk_provider import UKAdvisoryProvider, country_slug
from .acled_provider import ACLEDProvider, TokenCache
from .gdelt_provider import GDELTProvider, sanitize_query

__all__ = [
    'SOURCE_STATE_DEPT',
    'SOURCE_UK',
    'SOURCE_ACLED',
    'SOURCE_GDELT',
    'ALL_SOURCES',
    'ADVISORY_SOURCES',
    'build_session',
    'StateDeptProvider',
    'UKAdvisoryProvider',
    'country_slug',
    'ACLEDProvider',
    'TokenCache',
    'GDELTProvider',
    'sanitize_query',
]
