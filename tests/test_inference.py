import pytest

from travel_safety.inference import extract_location_phrase, infer_location, text_from_meta
from travel_safety.resolver import LocationResolver


@pytest.fixture
def resolver():
    return LocationResolver()


@pytest.mark.parametrize('text, phrase', [
    ('Is it safe to travel to Egypt?', 'Egypt'),
    ('is Lagos safe right now', 'Lagos'),
    ('Any travel advisory for Peru.', 'Peru'),
    ('I want to go to Medellin, Colombia', 'Medellin'),
])
def test_extract_location_phrase(text, phrase):
    assert extract_location_phrase(text) == phrase


@pytest.mark.parametrize('text', ['', '   ', None, "What's the weather like?"])
def test_extract_location_phrase_without_match(text):
    assert extract_location_phrase(text) is None


def test_infer_country(resolver):
    location = infer_location('Is it safe to travel to Egypt?', resolver)
    assert location.key == 'egypt'
    assert not location.is_city


def test_infer_city(resolver):
    location = infer_location('is Lagos safe right now', resolver)
    assert location.key == 'lagos'
    assert location.country == 'Nigeria'


def test_infer_unknown_place(resolver):
    assert infer_location('is it safe to go to Atlantis', resolver) is None


def test_text_from_meta_uses_first_non_blank_key():
    meta = {'openai/subject': '  ', 'openai/userText': 'is Paris safe', 'openai/inputText': 'other'}
    assert text_from_meta(meta) == 'is Paris safe'


def test_text_from_meta_ignores_non_strings():
    assert text_from_meta({'openai/subject': {'text': 'x'}}) == ''
    assert text_from_meta(None) == ''
