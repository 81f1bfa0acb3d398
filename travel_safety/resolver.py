"""
Location Resolver

Maps a free-form search string (city or country name, including aliases)
to a canonical gazetteer Location.

Resolution order:
1. trim + lowercase
2. alias substitution
3. exact city key
4. exact country key
5. first country (gazetteer order) whose key or display name contains the query

No fuzzy matching beyond the alias table and substring containment.
"""

import logging
import math
from typing import Dict, List, Optional

from travel_safety import gazetteer
from travel_safety.models import Location

logger = logging.getLogger(__name__)

DEFAULT_NEARBY_RADIUS_KM = 300.0
DEFAULT_NEARBY_LIMIT = 5


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate distance between two points using Haversine formula."""
    R = 6371.0088
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return R * c


def normalize_query(query: Optional[str]) -> str:
    return (query or '').strip().lower()


class LocationResolver:
    """Resolve free-form strings against a static gazetteer."""

    def __init__(self,
                 cities: Optional[Dict[str, gazetteer.CityEntry]] = None,
                 countries: Optional[Dict[str, gazetteer.CountryEntry]] = None,
                 aliases: Optional[Dict[str, str]] = None):
        self.cities = gazetteer.CITIES if cities is None else cities
        self.countries = gazetteer.COUNTRIES if countries is None else countries
        self.aliases = gazetteer.ALIASES if aliases is None else aliases

    def _city_location(self, key: str) -> Location:
        entry = self.cities[key]
        country = self.countries.get(entry.country)
        return Location(
            key=key,
            name=entry.name,
            country=country.name if country else entry.country.title(),
            country_code=country.code if country else None,
            city=entry.name,
            latitude=entry.lat,
            longitude=entry.lon,
        )

    def _country_location(self, key: str) -> Location:
        entry = self.countries[key]
        return Location(key=key, name=entry.name, country=entry.name, country_code=entry.code)

    def resolve(self, query: Optional[str]) -> Optional[Location]:
        """
        Resolve a query to a Location.

        Returns None when nothing in the gazetteer matches.
        """
        normalized = normalize_query(query)
        if not normalized:
            return None

        key = self.aliases.get(normalized, normalized)

        if key in self.cities:
            return self._city_location(key)

        if key in self.countries:
            return self._country_location(key)

        for country_key, entry in self.countries.items():
            if key in country_key or key in entry.name.lower():
                return self._country_location(country_key)

        logger.debug(f"No gazetteer match for '{query}'")
        return None

    def resolve_fields(self, location: Optional[str] = None, country: Optional[str] = None,
                       city: Optional[str] = None) -> Optional[Location]:
        """Resolve the most specific of the tool-call fields (city, location, country)."""
        for candidate in (city, location, country):
            if candidate and candidate.strip():
                resolved = self.resolve(candidate)
                if resolved is not None:
                    return resolved
        return None

    def nearby(self, location: Location, radius_km: float = DEFAULT_NEARBY_RADIUS_KM,
               limit: int = DEFAULT_NEARBY_LIMIT) -> List[str]:
        """
        List gazetteer cities within radius_km of the location, closest first.

        Country-level locations have no coordinates and return an empty list.
        """
        if not location.has_coordinates:
            return []

        candidates = []
        for key, entry in self.cities.items():
            if key == location.key:
                continue
            distance = haversine_km(location.latitude, location.longitude, entry.lat, entry.lon)
            if distance <= radius_km:
                candidates.append((distance, entry.name))

        candidates.sort(key=lambda item: item[0])
        return [name for _, name in candidates[:limit]]
