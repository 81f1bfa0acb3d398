"""Tests for the community sentiment vote store."""

import json
import random

import pytest

from travel_safety.models import SentimentCounts, VotePair
from travel_safety.sentiment_store import (
    SentimentStore,
    normalize_key,
    round_half_up,
    safe_percent,
    to_response,
)


@pytest.fixture
def store(tmp_path):
    return SentimentStore(tmp_path / 'sentiment.json', rng=random.Random(42))


def test_missing_file_is_seeded_for_every_baseline_location(store):
    table = store.load()
    assert 'tokyo' in table
    assert store.path.exists()
    assert table['tokyo'].real == VotePair()
    assert 500 <= table['tokyo'].seeded.safe + table['tokyo'].seeded.unsafe <= 1000


def test_seed_percent_stays_within_bounds(tmp_path):
    store = SentimentStore(tmp_path / 's.json', rng=random.Random(1), baseline={'hot': 100, 'cold': 0})
    for key in ('hot', 'cold'):
        pair = store.seed_pair(key)
        percent = pair.safe / (pair.safe + pair.unsafe) * 100
        assert 5 <= round(percent) <= 95


def test_seed_is_reproducible_with_same_rng(tmp_path):
    first = SentimentStore(tmp_path / 'a.json', rng=random.Random(3)).seed_pair('paris')
    second = SentimentStore(tmp_path / 'b.json', rng=random.Random(3)).seed_pair('paris')
    assert first == second


def test_unknown_location_has_zero_seed(store):
    assert store.seed_pair('nowhere-special') == VotePair()


def test_first_vote_on_tokyo(store):
    seeded = store.get('tokyo').seeded

    counts = store.vote('tokyo', 'safe')
    response = to_response(counts)

    assert response['realSafe'] == 1
    assert response['realUnsafe'] == 0
    assert response['safe'] == seeded.safe + 1
    assert response['unsafe'] == seeded.unsafe
    expected = round_half_up((seeded.safe + 1) / (seeded.safe + seeded.unsafe + 1) * 100)
    assert response['safePercent'] == expected


def test_votes_are_conserved_and_seed_is_stable(store):
    first_seen = store.get('lisbon').seeded

    for _ in range(3):
        store.vote('Lisbon', 'safe')
    for _ in range(2):
        store.vote(' LISBON ', 'unsafe')

    counts = store.get('lisbon')
    assert counts.seeded == first_seen
    assert counts.safe == first_seen.safe + 3
    assert counts.unsafe == first_seen.unsafe + 2


def test_vote_on_unseen_location_seeds_once(store):
    store.load()
    store.vote('Gotham', 'unsafe')
    store.vote('Gotham', 'unsafe')
    counts = store.get('gotham')
    assert counts.seeded == VotePair()
    assert counts.real == VotePair(safe=0, unsafe=2)


def test_invalid_vote_is_rejected(store):
    with pytest.raises(ValueError, match="Must be 'safe' or 'unsafe'"):
        store.vote('tokyo', 'maybe')


def test_save_and_reload_round_trip(store):
    store.vote('tokyo', 'safe')
    table = store.load()

    assert store.save(table)
    reloaded = store.load()

    assert {k: v.model_dump() for k, v in reloaded.items()} == {k: v.model_dump() for k, v in table.items()}


def test_legacy_flat_entries_are_migrated(tmp_path):
    path = tmp_path / 'sentiment.json'
    path.write_text(json.dumps({'tokyo': {'safe': 4, 'unsafe': 1}}), encoding='utf-8')
    store = SentimentStore(path, rng=random.Random(5), baseline={'tokyo': 100, 'paris': 80})

    table = store.load()

    assert table['tokyo'].real == VotePair(safe=4, unsafe=1)
    assert table['tokyo'].seeded.safe > 0
    assert 'paris' in table
    on_disk = json.loads(path.read_text(encoding='utf-8'))
    assert on_disk['tokyo']['real'] == {'safe': 4, 'unsafe': 1}


def test_corrupt_file_restores_from_backup(tmp_path):
    path = tmp_path / 'sentiment.json'
    store = SentimentStore(path, rng=random.Random(5), baseline={'tokyo': 100})
    store.load()
    store.vote('tokyo', 'safe')
    store.vote('tokyo', 'safe')  # second save copies the first vote's file to the backup

    path.write_text('{not json', encoding='utf-8')
    table = store.load()

    assert table['tokyo'].real.safe == 1


def test_corrupt_file_without_backup_yields_empty_table(tmp_path):
    path = tmp_path / 'sentiment.json'
    path.write_text('{not json', encoding='utf-8')
    store = SentimentStore(path, backup_path=tmp_path / 'missing.json')
    assert store.load() == {}


def test_safe_percent_defaults_to_fifty():
    assert safe_percent(0, 0) == 50
    assert safe_percent(1, 1) == 50
    assert safe_percent(2, 1) == 67


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2


def test_to_response_shape():
    counts = SentimentCounts(seeded=VotePair(safe=8, unsafe=2), real=VotePair(safe=1, unsafe=1))
    assert to_response(counts) == {
        'safe': 9,
        'unsafe': 3,
        'seededSafe': 8,
        'seededUnsafe': 2,
        'realSafe': 1,
        'realUnsafe': 1,
        'total': 12,
        'safePercent': 75,
    }


def test_normalize_key():
    assert normalize_key('  Mexico City ') == 'mexico city'
