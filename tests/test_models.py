"""
Unit tests for the data models (Match, Alliance, positions, sizes).
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket_layout.models import (
    Alliance,
    Match,
    MatchPosition,
    Size,
    as_size,
    parse_match_number,
    parse_round_number,
)


class TestParseMatchNumber:
    """Tests for numeric match-number coercion."""

    def test_int_passes_through(self):
        assert parse_match_number(7) == 7

    def test_numeric_string(self):
        assert parse_match_number('12') == 12
        assert parse_match_number(' 3 ') == 3

    def test_leading_digits_only(self):
        """Strings parse like parseInt: leading digits win."""
        assert parse_match_number('4b') == 4

    def test_non_numeric_is_zero(self):
        assert parse_match_number('TBD') == 0
        assert parse_match_number(None) == 0
        assert parse_match_number('') == 0


class TestParseRoundNumber:
    """Tests for round-number coercion."""

    def test_int_and_numeric_string(self):
        assert parse_round_number(3) == 3
        assert parse_round_number(' 2 ') == 2
        assert parse_round_number(2.0) == 2

    def test_unusable_values(self):
        assert parse_round_number(None) is None
        assert parse_round_number('two') is None
        assert parse_round_number(1.5) is None
        assert parse_round_number(True) is None
        assert parse_round_number([1]) is None


class TestMatch:
    """Tests for Match construction from raw records."""

    def test_from_dict_coerces_round_and_slot(self):
        match = Match.from_dict({'id': 'm1', 'matchNumber': 1, 'roundNumber': '2', 'bracketSlot': '3'})
        assert match.round_number == 2
        assert match.bracket_slot == 3

    def test_from_dict_unusable_round_is_none(self):
        assert Match.from_dict({'id': 'm1', 'roundNumber': 'final'}).round_number is None

    def test_from_dict_reads_camel_case(self):
        match = Match.from_dict({
            'id': 'm1',
            'matchNumber': 3,
            'roundNumber': 2,
            'bracketSlot': 1,
            'status': 'COMPLETED',
            'winningAlliance': 'RED',
            'alliances': [{'color': 'RED', 'teamAlliances': [{'teamId': 't1', 'team': {'name': 'Alpha'}}]}],
        })
        assert match.id == 'm1'
        assert match.match_number == 3
        assert match.round_number == 2
        assert match.bracket_slot == 1
        assert match.winning_alliance == 'RED'
        assert match.alliances[0].team_alliances[0].team.name == 'Alpha'

    def test_from_dict_defaults(self):
        match = Match.from_dict({'id': 'm1'})
        assert match.match_number == 'TBD'
        assert match.round_number is None
        assert match.bracket_slot == 0
        assert match.status == 'PENDING'
        assert match.alliances == []

    def test_from_dict_ignores_malformed_alliances(self):
        match = Match.from_dict({'id': 'm1', 'matchNumber': 1, 'alliances': [None, 'x', {'color': 'BLUE'}]})
        assert len(match.alliances) == 1
        assert match.alliances[0].color == 'BLUE'
        assert match.alliances[0].team_alliances == []

    def test_to_dict_round_trips_key_fields(self):
        match = Match(id='m1', match_number=1, round_number=1,
                      alliances=[Alliance(color='RED')])
        data = match.to_dict()
        assert data['id'] == 'm1'
        assert data['roundNumber'] == 1
        assert data['alliances'] == [{'color': 'RED', 'teamAlliances': []}]


class TestGeometry:
    """Tests for sizes and positions."""

    def test_as_size_from_mapping(self):
        assert as_size({'width': 800, 'height': 600}) == Size(800.0, 600.0)

    def test_as_size_from_pair(self):
        assert as_size((100, 50)) == Size(100.0, 50.0)

    def test_as_size_rejects_garbage(self):
        with pytest.raises(ValueError):
            as_size({'width': 'wide', 'height': 1})

    def test_position_edges(self):
        position = MatchPosition('m1', x=10, y=20, width=100, height=40, round_index=0, match_index=0)
        assert position.right == 110
        assert position.center_y == 40
        assert position.to_dict()['matchId'] == 'm1'
