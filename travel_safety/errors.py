"""
Error types shared across the travel safety services.

Adapter failures never escape `fetch()`; these exceptions are raised by the
lower-level `get_*` / `parse_*` functions and converted at the boundary.
"""

from typing import Optional


class TravelSafetyError(Exception):
    """Base class for all travel safety errors."""


class UpstreamError(TravelSafetyError):
    """Upstream feed answered with a non-success HTTP status."""

    def __init__(self, source: str, status: int, details: str = ''):
        self.source = source
        self.status = status
        self.details = details
        super().__init__(f'{source} upstream error: HTTP {status}')


class ParseError(TravelSafetyError):
    """Upstream payload could not be turned into a typed record."""

    def __init__(self, source: str, message: str, raw: Optional[str] = None):
        self.source = source
        self.message = message
        self.raw = raw
        super().__init__(f'{source}: {message}')


class ConfigurationError(TravelSafetyError):
    """Credentials or settings required by a source are missing."""


class LocationNotFound(TravelSafetyError):
    """The query matched nothing in the gazetteer."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"Location not found: '{query}'")


class SubscriptionError(TravelSafetyError):
    """Email subscription provider rejected the request."""
