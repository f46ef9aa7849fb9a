"""
Validation of raw match records and edge-case handling for bracket layout.

Nothing in here raises on bad input. Problems are reported as errors (the
record cannot be laid out) or warnings (informational only), and fallible
sections return a safe default instead of propagating.
"""
import logging
import sys
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

from bracket_layout.constants import (
    LARGE_TOURNAMENT_MATCHES,
    SMALL_CONTAINER_HEIGHT,
    SMALL_CONTAINER_WIDTH,
)
from bracket_layout.models import (
    ALLIANCE_COLORS,
    MATCH_STATUSES,
    TBD,
    WINNING_ALLIANCES,
    Alliance,
    Match,
    SafeMatchData,
    Team,
    TeamAlliance,
    ValidationResult,
    as_size,
    parse_match_number,
    parse_round_number,
)

logger = logging.getLogger(__name__)


class EdgeCaseResult(NamedTuple):
    rounds: List[List[Match]]
    is_valid: bool
    warnings: List[str]


def _as_record(candidate) -> Mapping:
    """Raw mapping view of a candidate; unknown shapes look like an empty record."""
    if isinstance(candidate, Match):
        return candidate.to_dict()
    if isinstance(candidate, Mapping):
        return candidate
    return {}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _generate_fallback_id() -> str:
    return f"fallback-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


def validate_match(candidate: Any) -> ValidationResult:
    """Validate a single raw match record for bracket display."""
    errors = []
    warnings = []

    if candidate is None:
        errors.append('Match is null or undefined')
        return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

    record = _as_record(candidate)

    if not record.get('id'):
        errors.append('Match missing required field: id')

    match_number = record.get('matchNumber')
    if not match_number and match_number != 0:
        warnings.append('Match missing matchNumber')

    status = record.get('status')
    if status and status not in MATCH_STATUSES:
        warnings.append(f'Invalid match status: {status}')

    alliances = record.get('alliances')
    if alliances is not None:
        if not isinstance(alliances, list):
            errors.append('Match alliances must be an array')
        else:
            for index, alliance in enumerate(alliances):
                if alliance is None:
                    warnings.append(f'Alliance {index} is null or undefined')
                    continue
                if not isinstance(alliance, Mapping):
                    alliance = {}
                color = alliance.get('color')
                if not color or color not in ALLIANCE_COLORS:
                    warnings.append(f'Alliance {index} has invalid color: {color}')
                if not isinstance(alliance.get('teamAlliances'), list):
                    warnings.append(f'Alliance {index} missing or invalid teamAlliances')

    round_number = record.get('roundNumber')
    if round_number is not None and parse_round_number(round_number) is None:
        warnings.append(f'Invalid roundNumber: {round_number}')

    winning_alliance = record.get('winningAlliance')
    if winning_alliance and winning_alliance not in WINNING_ALLIANCES:
        warnings.append(f'Invalid winningAlliance: {winning_alliance}')

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def validate_matches(matches: Any) -> ValidationResult:
    """Validate a list of raw match records, including id uniqueness."""
    errors = []
    warnings = []

    if not isinstance(matches, list):
        errors.append('Matches must be an array')
        return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

    if not matches:
        warnings.append('No matches provided')
        return ValidationResult(is_valid=True, errors=errors, warnings=warnings)

    seen_ids = set()
    duplicate_ids = []

    for index, candidate in enumerate(matches):
        validation = validate_match(candidate)
        errors.extend(f'Match {index}: {error}' for error in validation.errors)
        warnings.extend(f'Match {index}: {warning}' for warning in validation.warnings)

        match_id = _as_record(candidate).get('id') if candidate is not None else None
        if match_id:
            # Ids are compared in the string form Match.from_dict gives them
            match_id = str(match_id)
            if match_id in seen_ids:
                if match_id not in duplicate_ids:
                    duplicate_ids.append(match_id)
            else:
                seen_ids.add(match_id)

    if duplicate_ids:
        errors.append(f"Duplicate match IDs found: {', '.join(duplicate_ids)}")

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def create_safe_match_data(candidate: Any) -> SafeMatchData:
    """
    Always return usable match data.

    A valid candidate is passed through unchanged. An invalid one is replaced
    by a fallback Match that keeps whatever usable values the candidate had.
    """
    validation = validate_match(candidate)
    display_teams = extract_safe_team_information(candidate)

    if validation.is_valid:
        return SafeMatchData(match=candidate, display_teams=display_teams, is_valid=True)

    record = _as_record(candidate)
    alliances = record.get('alliances')
    fallback = Match(
        id=str(record.get('id') or _generate_fallback_id()),
        match_number=record.get('matchNumber') or TBD,
        round_number=parse_round_number(record.get('roundNumber')),
        bracket_slot=parse_match_number(record.get('bracketSlot')),
        status=record.get('status') or 'PENDING',
        winning_alliance=record.get('winningAlliance') or None,
        alliances=[Alliance.from_dict(a) for a in alliances if isinstance(a, Mapping)]
        if isinstance(alliances, list) else [],
        scheduled_time=record.get('scheduledTime') or _now_iso(),
        red_score=record.get('redScore') or 0,
        blue_score=record.get('blueScore') or 0,
        stage=record.get('stage'),
    )
    return SafeMatchData(
        match=fallback,
        display_teams=display_teams,
        is_valid=False,
        fallback_data=fallback,
    )


def _team_display_name(team_alliance: Mapping) -> str:
    team = team_alliance.get('team') or {}
    if team.get('name'):
        team_number = team.get('teamNumber') or ''
        return f"{team_number} {team['name']}" if team_number else team['name']
    if team.get('teamNumber'):
        return f"Team {team['teamNumber']}"
    if team_alliance.get('teamId'):
        return f"Team {team_alliance['teamId']}"
    return TBD


def extract_safe_team_information(match: Any) -> Dict[str, List[str]]:
    """Display names for the red and blue alliances; never raises."""
    default_teams = {'red': [TBD], 'blue': [TBD]}

    if match is None:
        return default_teams
    record = _as_record(match)
    alliances = record.get('alliances')
    if not isinstance(alliances, list):
        return default_teams

    teams = {'red': [], 'blue': []}
    try:
        for alliance in alliances:
            if not isinstance(alliance, Mapping) or not alliance.get('color'):
                continue
            color = alliance['color'].lower()
            if color not in teams:
                continue

            team_list = []
            team_alliances = alliance.get('teamAlliances')
            if isinstance(team_alliances, list):
                for team_alliance in team_alliances:
                    if team_alliance is None:
                        continue
                    if not isinstance(team_alliance, Mapping):
                        team_list.append(TBD)
                        continue
                    team_list.append(_team_display_name(team_alliance))

            teams[color] = team_list or [TBD]

        for color in teams:
            if not teams[color]:
                teams[color] = [TBD]
        return teams
    except (AttributeError, TypeError, KeyError) as e:
        logger.warning(f'Error extracting team information: {e}')
        return default_teams


def _bracket_sort_key(match: Match):
    round_number = match.round_number
    if round_number is None:
        round_number = sys.maxsize
    return round_number, parse_match_number(match.match_number)


def validate_and_fix_bracket_structure(matches: Any) -> List[Match]:
    """
    Drop matches that fail validation and sort the rest for display.

    Sort order is round number (matches without one last), then numeric
    match number. Survivors are returned as Match objects.
    """
    if not isinstance(matches, list) or not matches:
        return []

    try:
        valid_matches = []
        for candidate in matches:
            validation = validate_match(candidate)
            if not validation.is_valid:
                logger.warning(f'Filtering out invalid match: {validation.errors}')
                continue
            valid_matches.append(Match.from_dict(_as_record(candidate)))

        valid_matches.sort(key=_bracket_sort_key)
        return valid_matches
    except Exception as e:
        logger.error(f'Error validating bracket structure: {e}')
        return []


def handle_layout_edge_cases(rounds: List[List[Match]], container_dimensions) -> EdgeCaseResult:
    """Drop empty rounds and collect warnings about degenerate layouts."""
    warnings = []

    if not rounds:
        warnings.append('No rounds available for display')
        return EdgeCaseResult(rounds=[], is_valid=False, warnings=warnings)

    processed_rounds = [round_matches for round_matches in rounds if round_matches]
    if not processed_rounds:
        warnings.append('All rounds are empty')
        return EdgeCaseResult(rounds=[], is_valid=False, warnings=warnings)

    if len(processed_rounds) == 1 and len(processed_rounds[0]) == 1:
        warnings.append('Single match tournament detected')

    total_matches = sum(len(round_matches) for round_matches in processed_rounds)
    if total_matches > LARGE_TOURNAMENT_MATCHES:
        warnings.append(f'Large tournament detected ({total_matches} matches) - performance may be affected')

    container = as_size(container_dimensions)
    if container.width < SMALL_CONTAINER_WIDTH or container.height < SMALL_CONTAINER_HEIGHT:
        warnings.append('Container dimensions are very small - display may be compromised')

    return EdgeCaseResult(rounds=processed_rounds, is_valid=True, warnings=warnings)


def create_fallback_match(match_id: Optional[str] = None) -> Match:
    """A complete placeholder match with two TBD alliances."""
    def tbd_alliance(color):
        return Alliance(
            color=color,
            team_alliances=[TeamAlliance(team_id='tbd', team=Team(id='tbd', name=TBD))],
        )

    return Match(
        id=match_id or _generate_fallback_id(),
        match_number=TBD,
        round_number=None,
        status='PENDING',
        winning_alliance=None,
        alliances=[tbd_alliance('RED'), tbd_alliance('BLUE')],
        scheduled_time=_now_iso(),
        red_score=0,
        blue_score=0,
    )
