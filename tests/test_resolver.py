"""Tests for gazetteer location resolution."""

import pytest

from travel_safety.gazetteer import CityEntry, CountryEntry
from travel_safety.resolver import LocationResolver, haversine_km, normalize_query


@pytest.fixture
def resolver():
    return LocationResolver()


def test_alias_resolves_to_same_location_as_canonical(resolver):
    assert resolver.resolve('NYC') == resolver.resolve('new york')


def test_resolving_canonical_key_is_idempotent(resolver):
    first = resolver.resolve('  Tokyo ')
    again = resolver.resolve(first.key)
    assert first == again
    assert first.key == 'tokyo'
    assert first.country == 'Japan'
    assert first.country_code == 'JP'
    assert first.is_city


def test_country_resolution(resolver):
    location = resolver.resolve('Japan')
    assert location.key == 'japan'
    assert location.name == 'Japan'
    assert location.country == 'Japan'
    assert not location.is_city
    assert not location.has_coordinates


def test_country_alias(resolver):
    assert resolver.resolve('UK').key == 'united kingdom'


def test_substring_falls_back_to_first_country(resolver):
    assert resolver.resolve('kingdom').key == 'united kingdom'


@pytest.mark.parametrize('query', ['', '   ', None, 'atlantis'])
def test_unknown_or_empty_query_returns_none(resolver, query):
    assert resolver.resolve(query) is None


def test_substring_order_follows_gazetteer_order():
    countries = {
        'northland': CountryEntry('Northland', 'NL'),
        'southland': CountryEntry('Southland', 'SL'),
    }
    resolver = LocationResolver(cities={}, countries=countries, aliases={})
    assert resolver.resolve('land').key == 'northland'


def test_resolve_fields_prefers_city(resolver):
    location = resolver.resolve_fields(location='France', country='Japan', city='Kyoto')
    assert location.key == 'kyoto'


def test_resolve_fields_skips_unresolvable_values(resolver):
    location = resolver.resolve_fields(location='Japan', city='Gotham')
    assert location.key == 'japan'
    assert resolver.resolve_fields() is None


def test_nearby_lists_close_cities_without_self(resolver):
    osaka = resolver.resolve('osaka')
    nearby = resolver.nearby(osaka)
    assert 'Kyoto' in nearby
    assert 'Osaka' not in nearby
    assert 'Tokyo' not in nearby


def test_nearby_is_sorted_by_distance_and_limited():
    cities = {
        'a': CityEntry('A', 'testland', 0.0, 0.0),
        'b': CityEntry('B', 'testland', 0.0, 1.0),
        'c': CityEntry('C', 'testland', 0.0, 0.5),
        'd': CityEntry('D', 'testland', 0.0, 20.0),
    }
    resolver = LocationResolver(cities=cities, countries={'testland': CountryEntry('Testland', 'TL')}, aliases={})
    assert resolver.nearby(resolver.resolve('a'), radius_km=300, limit=5) == ['C', 'B']
    assert resolver.nearby(resolver.resolve('a'), radius_km=300, limit=1) == ['C']


def test_nearby_for_country_is_empty(resolver):
    assert resolver.nearby(resolver.resolve('japan')) == []


def test_haversine_known_distance():
    # Paris to London is roughly 344 km
    assert haversine_km(48.8566, 2.3522, 51.5074, -0.1278) == pytest.approx(344, abs=5)


def test_normalize_query():
    assert normalize_query('  New York ') == 'new york'
    assert normalize_query(None) == ''
