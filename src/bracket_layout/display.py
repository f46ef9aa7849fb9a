"""
Per-match display data: team names, winners, TBD flags and round labels.
"""
from typing import Dict, List, Optional

from bracket_layout.cache import CalculationCache, memoize
from bracket_layout.constants import (
    ROUND_LABEL_FINAL,
    ROUND_LABEL_PREFIX,
    ROUND_LABEL_QUARTERFINAL,
    ROUND_LABEL_SEMIFINAL,
)
from bracket_layout.models import TBD, Match, parse_match_number


def format_team_display_name(team_number: Optional[str] = None, team_name: Optional[str] = None) -> str:
    """Combine team number and name, e.g. ``"#254 Cheesy Poofs"``."""
    clean_number = str(team_number).strip() if team_number else ''
    clean_name = team_name.strip() if team_name else ''

    if clean_number and not clean_number.startswith('#'):
        clean_number = f"#{clean_number}"

    if clean_number and clean_name:
        return f"{clean_number} {clean_name}"
    return clean_number or clean_name or TBD


def extract_team_information(match: Match) -> Dict[str, List[str]]:
    """Display names per alliance color; colors without an alliance stay empty."""
    result = {'red': [], 'blue': []}

    for alliance in match.alliances:
        teams = []
        for team_alliance in alliance.team_alliances:
            team = team_alliance.team
            display_name = format_team_display_name(
                team.team_number if team else None,
                team.name if team else None,
            )
            if display_name == TBD and team_alliance.team_id:
                display_name = f"Team {team_alliance.team_id}"
            teams.append(display_name)

        if alliance.color == 'RED':
            result['red'] = teams or [TBD]
        elif alliance.color == 'BLUE':
            result['blue'] = teams or [TBD]

    return result


def detect_winner(match: Match) -> Dict[str, bool]:
    """Winner flags for a completed match, falling back to scores."""
    result = {'red': False, 'blue': False}

    if match.status != 'COMPLETED':
        return result

    if match.winning_alliance == 'RED':
        result['red'] = True
    elif match.winning_alliance == 'BLUE':
        result['blue'] = True
    elif match.winning_alliance == 'TIE':
        return result
    else:
        red_score = match.red_score or 0
        blue_score = match.blue_score or 0
        if red_score > blue_score:
            result['red'] = True
        elif blue_score > red_score:
            result['blue'] = True

    return result


def is_match_tbd(teams: List[str]) -> bool:
    return not teams or all(team == TBD or not team.strip() for team in teams)


def _max_round(matches: List[Match]) -> Optional[int]:
    round_numbers = [m.round_number for m in matches if m.round_number is not None]
    return max(round_numbers) if round_numbers else None


def is_final_match(match: Match, all_matches: List[Match]) -> bool:
    """True for the only match of the highest round."""
    if not match.round_number:
        return False

    max_round = _max_round(all_matches)
    if match.round_number != max_round:
        return False
    return sum(1 for m in all_matches if m.round_number == max_round) == 1


def generate_round_label(round_number: int, is_final: bool, all_matches: Optional[List[Match]] = None) -> str:
    if is_final:
        return ROUND_LABEL_FINAL

    max_round = _max_round(all_matches or [])
    if max_round is None:
        max_round = round_number

    rounds_from_final = max_round - round_number
    if rounds_from_final == 1:
        return ROUND_LABEL_SEMIFINAL
    if rounds_from_final == 2:
        return ROUND_LABEL_QUARTERFINAL
    return f"{ROUND_LABEL_PREFIX} {round_number}"


def get_match_status_info(match: Match) -> Dict:
    is_completed = match.status == 'COMPLETED'
    is_in_progress = match.status == 'IN_PROGRESS'

    status = 'Pending'
    if is_completed:
        status = 'Completed'
    elif is_in_progress:
        status = 'In Progress'

    return {
        'status': status,
        'is_completed': is_completed,
        'is_in_progress': is_in_progress,
        'is_pending': match.status == 'PENDING',
    }


def process_match_for_display(match: Match, all_matches: Optional[List[Match]] = None,
                              cache: Optional[CalculationCache] = None) -> Dict:
    """
    Everything the renderer needs to draw one match card.

    Memoized on the fields that change the output when a cache is given.
    """
    all_matches = all_matches or []
    cache_key = (f"display-{match.id}-{match.status}-{match.winning_alliance}-"
                 f"{match.round_number}-{len(all_matches)}-{_alliance_fingerprint(match)}")

    def compute():
        teams = extract_team_information(match)
        winners = detect_winner(match)
        is_final = is_final_match(match, all_matches)
        return {
            'matchId': match.id,
            'displayTeams': teams,
            'isWinner': winners,
            'isTBD': {
                'red': is_match_tbd(teams['red']),
                'blue': is_match_tbd(teams['blue']),
            },
            'roundLabel': generate_round_label(match.round_number or 0, is_final, all_matches),
            'isFinalMatch': is_final,
            'statusInfo': get_match_status_info(match),
        }

    return memoize(cache, cache_key, compute)


def _alliance_fingerprint(match: Match) -> str:
    parts = []
    for alliance in match.alliances:
        teams = ','.join(
            f"{ta.team_id or 'tbd'}-{ta.team.team_number if ta.team else ''}-{ta.team.name if ta.team else ''}"
            for ta in alliance.team_alliances
        )
        parts.append(f"{alliance.color}-{teams or 'empty'}")
    return '|'.join(parts) or 'no-alliances'


def sort_matches_for_display(matches: List[Match]) -> List[Match]:
    """Round number, then bracket slot, then match number."""
    return sorted(matches, key=lambda m: (
        m.round_number or 0,
        m.bracket_slot or 0,
        parse_match_number(m.match_number),
    ))
