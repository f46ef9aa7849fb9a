"""
Grouping of validated matches into ordered rounds.
"""
import math
from typing import Dict, List, NamedTuple, Optional

from bracket_layout.cache import CalculationCache, memoize
from bracket_layout.models import Match, parse_match_number, parse_round_number


class BracketStructure(NamedTuple):
    total_rounds: int
    max_matches_in_round: int
    round_sizes: List[int]
    bracket_shape: str
    is_valid_bracket: bool

    def to_dict(self) -> Dict:
        return {
            'totalRounds': self.total_rounds,
            'maxMatchesInRound': self.max_matches_in_round,
            'roundSizes': list(self.round_sizes),
            'bracketShape': self.bracket_shape,
            'isValidBracket': self.is_valid_bracket,
        }


def rounds_cache_key(matches: List[Match]) -> str:
    """Fingerprint insensitive to input order but sensitive to round/slot changes."""
    return '|'.join(sorted(
        f"{m.id}-{m.round_number}-{m.bracket_slot or 0}" for m in matches
    ))


def _within_round_key(match: Match):
    return parse_match_number(match.bracket_slot), parse_match_number(match.match_number), str(match.id)


def organize_matches_into_rounds(matches: List[Match],
                                 cache: Optional[CalculationCache] = None) -> List[List[Match]]:
    """
    Group matches by round number.

    Matches without a round number are left out. Within a round, matches are
    ordered by bracket slot, then match number (id breaks remaining ties), and
    rounds are returned in ascending round order.
    """
    if not matches:
        return []

    def compute():
        rounds_map = {}
        for match in matches:
            round_number = parse_round_number(match.round_number)
            if round_number is None:
                continue
            rounds_map.setdefault(round_number, []).append(match)

        rounds = []
        for round_number in sorted(rounds_map):
            rounds.append(sorted(rounds_map[round_number], key=_within_round_key))
        return rounds

    return memoize(cache, rounds_cache_key(matches), compute)


def is_single_elimination(round_sizes: List[int]) -> bool:
    """
    Each round holds half the matches of the previous one (rounded up), or one
    fewer than that when a bye removes a match.
    """
    if len(round_sizes) < 2:
        return False
    for previous, current in zip(round_sizes, round_sizes[1:]):
        expected = math.ceil(previous / 2)
        if current not in (expected, expected - 1):
            return False
    return True


def analyze_bracket_structure(rounds: List[List[Match]]) -> BracketStructure:
    if not rounds:
        return BracketStructure(
            total_rounds=0,
            max_matches_in_round=0,
            round_sizes=[],
            bracket_shape='empty',
            is_valid_bracket=False,
        )

    round_sizes = [len(round_matches) for round_matches in rounds]
    max_matches = max(round_sizes)
    shape = 'single-elimination' if is_single_elimination(round_sizes) else 'custom'

    return BracketStructure(
        total_rounds=len(rounds),
        max_matches_in_round=max_matches,
        round_sizes=round_sizes,
        bracket_shape=shape,
        is_valid_bracket=max_matches > 0,
    )
