"""Is It Safe? travel safety aggregation service."""

__version__ = '1.0.0'
