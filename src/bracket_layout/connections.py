"""
SVG connector paths joining pairs of matches to the match they feed.

Connectors are fixed elbows: each source's right edge runs to a shared
vertical line halfway into the round gap, and the midpoint of that line runs
to the target's left edge. The bracket is binary, so match ``j`` of a round
is fed by matches ``2j`` and ``2j + 1`` of the previous round.
"""
from typing import Dict, List

from bracket_layout.constants import CONNECTION_LINE_COLOR, CONNECTION_LINE_WIDTH
from bracket_layout.models import Connection, Match, MatchPosition, SVGPathData


def _fmt(value: float) -> str:
    """Path coordinate without a trailing ``.0`` on integral values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def generate_connection_path(source1: MatchPosition, source2: MatchPosition,
                             target: MatchPosition, round_gap: float) -> SVGPathData:
    source1_right = source1.right
    source1_center_y = source1.center_y
    source2_right = source2.right
    source2_center_y = source2.center_y

    vertical_mid_y = (source1_center_y + source2_center_y) / 2
    horizontal_mid_x = source1_right + round_gap / 2

    commands = [
        f"M {_fmt(source1_right)} {_fmt(source1_center_y)}",
        f"L {_fmt(horizontal_mid_x)} {_fmt(source1_center_y)}",
        f"L {_fmt(horizontal_mid_x)} {_fmt(source2_center_y)}",
        f"L {_fmt(source2_right)} {_fmt(source2_center_y)}",
        f"M {_fmt(horizontal_mid_x)} {_fmt(vertical_mid_y)}",
        f"L {_fmt(target.x)} {_fmt(target.center_y)}",
    ]

    return SVGPathData(
        d=' '.join(commands),
        stroke=CONNECTION_LINE_COLOR,
        stroke_width=CONNECTION_LINE_WIDTH,
        fill='none',
    )


def _position_map(positions: List[MatchPosition]) -> Dict[str, MatchPosition]:
    return {position.match_id: position for position in positions}


def generate_bracket_connections(rounds: List[List[Match]], positions: List[MatchPosition],
                                 round_gap: float) -> List[Connection]:
    """
    Connectors between adjacent rounds.

    A connector is only produced when the target and both of its sources have
    positions, so byes and partially computed layouts are skipped.
    """
    connections = []
    if len(rounds) < 2:
        return connections

    position_map = _position_map(positions)

    for round_index in range(len(rounds) - 1):
        current_round = rounds[round_index]
        next_round = rounds[round_index + 1]

        for target_index, target_match in enumerate(next_round):
            target_position = position_map.get(target_match.id)
            if target_position is None:
                continue

            source_index = target_index * 2
            if source_index + 1 >= len(current_round):
                continue
            source1 = current_round[source_index]
            source2 = current_round[source_index + 1]

            source1_position = position_map.get(source1.id)
            source2_position = position_map.get(source2.id)
            if source1_position is None or source2_position is None:
                continue

            connections.append(Connection(
                from_matches=(source1.id, source2.id),
                to_match=target_match.id,
                path=generate_connection_path(source1_position, source2_position, target_position, round_gap),
                round_index=round_index,
            ))

    return connections


def validate_connection_alignment(connection: Connection, positions: List[MatchPosition]) -> bool:
    """Sources share a column and the target sits to their right, vertically between them."""
    position_map = _position_map(positions)
    source1 = position_map.get(connection.from_matches[0])
    source2 = position_map.get(connection.from_matches[1])
    target = position_map.get(connection.to_match)

    if source1 is None or source2 is None or target is None:
        return False

    if abs(source1.x - source2.x) > 1:
        return False
    if target.x <= source1.x:
        return False

    low = min(source1.center_y, source2.center_y)
    high = max(source1.center_y, source2.center_y)
    return low <= target.center_y <= high


def handle_bracket_edge_cases(rounds: List[List[Match]], positions: List[MatchPosition],
                              round_gap: float) -> List[Connection]:
    """No connectors for a single round or a lone match; standard wiring otherwise."""
    if len(rounds) <= 1 or len(positions) <= 1:
        return []
    return generate_bracket_connections(rounds, positions, round_gap)
