"""
Best-effort location inference from free chat text.

Used only by the MCP tool when the host calls it without any location
arguments but forwards the user's message in request metadata. Patterns
cover phrasings like "is it safe to travel to Egypt?", "is Lagos safe" and
"travel advisory for Peru". Anything else yields None.
"""

import logging
import re
from typing import Any, Iterable, Mapping, Optional

from travel_safety.models import Location
from travel_safety.resolver import LocationResolver

logger = logging.getLogger(__name__)

LOCATION_PATTERNS = [
    re.compile(r'(?:safe|dangerous|safety|risk|travel|visit|go)\s+(?:to|in|for|of)\s+'
               r'([A-Za-z\s,]+?)(?:\?|\.|,|right now|\s*$)', re.IGNORECASE),
    re.compile(r'(?:is|how)\s+([A-Za-z\s,]+?)\s+(?:safe|dangerous|risky)', re.IGNORECASE),
    re.compile(r'(?:travel\s+)?(?:advisory|warning)\s+(?:for|in)\s+'
               r'([A-Za-z\s,]+?)(?:\?|\.|,|\s*$)', re.IGNORECASE),
]

# Host metadata keys that may carry the user's message, in priority order
META_TEXT_KEYS = (
    'openai/subject',
    'openai/userPrompt',
    'openai/userText',
    'openai/lastUserMessage',
    'openai/inputText',
    'openai/requestText',
)

_LEADING_FILLER = re.compile(
    r'^(?:it\s+|safe\s+|the\s+|(?:to\s+)?(?:travel|visit|go)\s+(?:to|in)\s+)', re.IGNORECASE)


def text_from_meta(meta: Optional[Mapping[str, Any]], keys: Iterable[str] = META_TEXT_KEYS) -> str:
    """First non-blank string among the known metadata text keys."""
    if not meta:
        return ''
    for key in keys:
        value = meta.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return ''


def extract_location_phrase(text: Optional[str]) -> Optional[str]:
    """Return the raw place phrase captured by the first matching pattern."""
    if not text or not text.strip():
        return None
    for pattern in LOCATION_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        phrase = match.group(1).strip().strip(',').strip()
        # "safe to travel to Egypt" captures "travel to Egypt"
        stripped = _LEADING_FILLER.sub('', phrase).strip()
        while stripped != phrase:
            phrase = stripped
            stripped = _LEADING_FILLER.sub('', phrase).strip()
        if phrase:
            return phrase
    return None


def infer_location(text: Optional[str], resolver: Optional[LocationResolver] = None) -> Optional[Location]:
    """
    Guess a Location from free text.

    The captured phrase is resolved as a whole first, then by its
    comma-separated parts ("Medellin, Colombia" -> Medellin).
    """
    phrase = extract_location_phrase(text)
    if phrase is None:
        return None

    resolver = resolver or LocationResolver()
    candidates = [phrase] + [part.strip() for part in phrase.split(',') if part.strip()]
    for candidate in candidates:
        location = resolver.resolve(candidate)
        if location is not None:
            logger.info(f"Inferred location '{location.name}' from text")
            return location

    logger.debug(f"Inferred phrase '{phrase}' did not resolve")
    return None
