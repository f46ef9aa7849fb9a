"""
Shared pytest fixtures for bracket layout tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket_layout.cache import CalculationCache
from bracket_layout.models import Match


def make_raw_match(match_id, round_number, match_number, bracket_slot=None, **extra):
    """Build a raw match record the way the match-listing API sends it."""
    record = {
        'id': match_id,
        'matchNumber': match_number,
        'roundNumber': round_number,
        'status': 'PENDING',
        'winningAlliance': None,
        'scheduledTime': '2026-05-01T10:00:00Z',
        'alliances': [
            {'color': 'RED', 'teamAlliances': [{'teamId': f'{match_id}-r', 'team': {'teamNumber': '254', 'name': 'Poofs'}}]},
            {'color': 'BLUE', 'teamAlliances': [{'teamId': f'{match_id}-b', 'team': {'teamNumber': '1678', 'name': 'Citrus'}}]},
        ],
    }
    if bracket_slot is not None:
        record['bracketSlot'] = bracket_slot
    record.update(extra)
    return record


def make_match(match_id, round_number, match_number, bracket_slot=0):
    return Match(id=match_id, match_number=match_number, round_number=round_number, bracket_slot=bracket_slot)


def make_bracket(first_round_matches):
    """Raw records for a full single-elimination bracket, e.g. 4 -> 2 -> 1."""
    records = []
    round_number = 1
    count = first_round_matches
    while count >= 1:
        for i in range(count):
            records.append(make_raw_match(f'r{round_number}m{i + 1}', round_number, i + 1, bracket_slot=i))
        count //= 2
        round_number += 1
    return records


@pytest.fixture
def cache():
    """A fresh calculation cache."""
    return CalculationCache()


@pytest.fixture
def three_matches():
    """Two semifinals and a final as Match objects."""
    return [
        make_match('m1', 1, 1),
        make_match('m2', 1, 2),
        make_match('m3', 2, 1),
    ]


@pytest.fixture
def eight_team_bracket():
    """Raw records for a quarterfinal/semifinal/final bracket."""
    return make_bracket(4)


@pytest.fixture
def client():
    """Flask test client with fresh per-view engines."""
    import app as app_module
    app_module.app.config['TESTING'] = True
    app_module.reset_engines()
    with app_module.app.test_client() as client:
        yield client
    app_module.reset_engines()
