"""
Absolute match rectangles for a bracket laid out in round columns.
"""
from typing import List, Optional

from bracket_layout.cache import CalculationCache, memoize
from bracket_layout.constants import (
    MATCH_CARD_HEIGHT,
    MATCH_CARD_WIDTH,
    MATCH_VERTICAL_GAP,
    ROUND_GAP,
)
from bracket_layout.models import BracketDimensions, Match, MatchPosition


def get_default_dimensions(container_width: float = 800, container_height: float = 600) -> BracketDimensions:
    return BracketDimensions(
        container_width=container_width,
        container_height=container_height,
        round_width=MATCH_CARD_WIDTH,
        round_gap=ROUND_GAP,
        match_height=MATCH_CARD_HEIGHT,
        match_vertical_gap=MATCH_VERTICAL_GAP,
    )


def get_max_matches_in_round(rounds: List[List[Match]]) -> int:
    if not rounds:
        return 0
    return max(len(round_matches) for round_matches in rounds)


def content_width(total_rounds: int, round_width: float = MATCH_CARD_WIDTH, round_gap: float = ROUND_GAP) -> float:
    if total_rounds <= 0:
        return 0
    return total_rounds * round_width + (total_rounds - 1) * round_gap


def content_height(match_count: int, match_height: float = MATCH_CARD_HEIGHT,
                   vertical_gap: float = MATCH_VERTICAL_GAP) -> float:
    if match_count <= 0:
        return 0
    return match_count * match_height + (match_count - 1) * vertical_gap


def calculate_bracket_dimensions(rounds: List[List[Match]]) -> BracketDimensions:
    """Unscaled size needed to draw every round; one card when there are none."""
    if not rounds:
        return get_default_dimensions(MATCH_CARD_WIDTH, MATCH_CARD_HEIGHT)

    return get_default_dimensions(
        content_width(len(rounds)),
        content_height(get_max_matches_in_round(rounds)),
    )


def positions_cache_key(rounds: List[List[Match]], dimensions: BracketDimensions) -> str:
    rounds_key = '|'.join(','.join(m.id for m in round_matches) for round_matches in rounds)
    dimensions_key = (f"{dimensions.round_width}-{dimensions.round_gap}-{dimensions.match_height}-"
                      f"{dimensions.match_vertical_gap}-{dimensions.container_height}")
    return f"positions-{rounds_key}-{dimensions_key}"


def calculate_match_positions(rounds: List[List[Match]], dimensions: BracketDimensions,
                              cache: Optional[CalculationCache] = None) -> List[MatchPosition]:
    """
    Position every match, each round centered vertically in the container.

    A round taller than the container gets a negative start; that overflow is
    left for the scaling step to deal with.
    """
    if not rounds:
        return []

    def compute():
        positions = []
        round_width = dimensions.round_width
        round_gap = dimensions.round_gap
        match_height = dimensions.match_height
        vertical_gap = dimensions.match_vertical_gap

        for round_index, round_matches in enumerate(rounds):
            if not round_matches:
                continue

            total_round_height = content_height(len(round_matches), match_height, vertical_gap)
            round_start_y = (dimensions.container_height - total_round_height) / 2
            x = round_index * (round_width + round_gap)

            for match_index, match in enumerate(round_matches):
                positions.append(MatchPosition(
                    match_id=match.id,
                    x=x,
                    y=round_start_y + match_index * (match_height + vertical_gap),
                    width=round_width,
                    height=match_height,
                    round_index=round_index,
                    match_index=match_index,
                ))
        return positions

    return memoize(cache, positions_cache_key(rounds, dimensions), compute)


def create_fallback_positions(rounds: List[List[Match]], dimensions: BracketDimensions) -> List[MatchPosition]:
    """Top-aligned grid used when the centered layout cannot be computed."""
    positions = []
    for round_index, round_matches in enumerate(rounds):
        for match_index, match in enumerate(round_matches):
            positions.append(MatchPosition(
                match_id=match.id,
                x=round_index * (dimensions.round_width + dimensions.round_gap),
                y=match_index * (dimensions.match_height + dimensions.match_vertical_gap),
                width=dimensions.round_width,
                height=dimensions.match_height,
                round_index=round_index,
                match_index=match_index,
            ))
    return positions
