"""Source identifiers and the shared HTTP session factory."""

import requests

from travel_safety.config import DEFAULT_USER_AGENT

SOURCE_STATE_DEPT = 'us_state_dept'
SOURCE_UK = 'uk_fcdo'
SOURCE_ACLED = 'acled'
SOURCE_GDELT = 'gdelt'

ALL_SOURCES = (SOURCE_STATE_DEPT, SOURCE_UK, SOURCE_ACLED, SOURCE_GDELT)
ADVISORY_SOURCES = (SOURCE_STATE_DEPT, SOURCE_UK)


def build_session(user_agent: str = DEFAULT_USER_AGENT) -> requests.Session:
    session = requests.Session()
    session.headers.update({
        'User-Agent': user_agent,
        'Accept': 'application/json',
    })
    return session
