"""
Data model for bracket layout.

Raw match records arrive as untrusted mappings with camelCase keys (the wire
format of the tournament match-listing API). They are converted into
``Match`` objects once validated; geometry code only ever sees ``Match``.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple, Union


MATCH_STATUSES = ('PENDING', 'IN_PROGRESS', 'COMPLETED')
ALLIANCE_COLORS = ('RED', 'BLUE')
WINNING_ALLIANCES = ('RED', 'BLUE', 'TIE')

TBD = 'TBD'


def parse_match_number(value) -> int:
    """Numeric form of a match number; non-numeric values count as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        digits = value.strip()
        # parseInt semantics: leading sign and digits only
        end = 0
        if digits[:1] in ('-', '+'):
            end = 1
        while end < len(digits) and digits[end].isdigit():
            end += 1
        try:
            return int(digits[:end])
        except ValueError:
            return 0
    return 0


def parse_round_number(value) -> Optional[int]:
    """Integer round number, or None when the value is missing or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


@dataclass
class Team:
    id: Optional[str] = None
    team_number: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping) -> 'Team':
        return cls(
            id=data.get('id'),
            team_number=data.get('teamNumber'),
            name=data.get('name'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'teamNumber': self.team_number, 'name': self.name}


@dataclass
class TeamAlliance:
    team_id: Optional[str] = None
    team: Optional[Team] = None

    @classmethod
    def from_dict(cls, data: Mapping) -> 'TeamAlliance':
        team = data.get('team')
        return cls(
            team_id=data.get('teamId'),
            team=Team.from_dict(team) if isinstance(team, Mapping) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'teamId': self.team_id,
            'team': self.team.to_dict() if self.team else None,
        }


@dataclass
class Alliance:
    color: str
    team_alliances: List[TeamAlliance] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping) -> 'Alliance':
        team_alliances = data.get('teamAlliances')
        if not isinstance(team_alliances, list):
            team_alliances = []
        return cls(
            color=data.get('color'),
            team_alliances=[TeamAlliance.from_dict(ta) for ta in team_alliances
                            if isinstance(ta, Mapping)],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'color': self.color,
            'teamAlliances': [ta.to_dict() for ta in self.team_alliances],
        }


@dataclass
class Match:
    """A validated match. ``id`` is non-empty and unique within a layout pass."""
    id: str
    match_number: Union[int, str]
    round_number: Optional[int] = None
    bracket_slot: int = 0
    status: str = 'PENDING'
    winning_alliance: Optional[str] = None
    alliances: List[Alliance] = field(default_factory=list)
    scheduled_time: str = ''
    red_score: int = 0
    blue_score: int = 0
    stage: Optional[Any] = None

    @classmethod
    def from_dict(cls, data: Mapping) -> 'Match':
        """Build a Match from a raw record that already passed validation."""
        alliances = data.get('alliances')
        if not isinstance(alliances, list):
            alliances = []
        match_number = data.get('matchNumber')
        if match_number is None or match_number == '':
            match_number = TBD
        return cls(
            id=str(data['id']),
            match_number=match_number,
            round_number=parse_round_number(data.get('roundNumber')),
            bracket_slot=parse_match_number(data.get('bracketSlot')),
            status=data.get('status') or 'PENDING',
            winning_alliance=data.get('winningAlliance'),
            alliances=[Alliance.from_dict(a) for a in alliances if isinstance(a, Mapping)],
            scheduled_time=data.get('scheduledTime') or '',
            red_score=data.get('redScore') or 0,
            blue_score=data.get('blueScore') or 0,
            stage=data.get('stage'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'matchNumber': self.match_number,
            'roundNumber': self.round_number,
            'bracketSlot': self.bracket_slot,
            'status': self.status,
            'winningAlliance': self.winning_alliance,
            'alliances': [a.to_dict() for a in self.alliances],
            'scheduledTime': self.scheduled_time,
            'redScore': self.red_score,
            'blueScore': self.blue_score,
            'stage': self.stage,
        }


class Size(NamedTuple):
    width: float
    height: float


def as_size(value) -> Size:
    """Accept a Size, a ``(width, height)`` pair or a ``{width, height}`` mapping."""
    if isinstance(value, Size):
        return value
    if isinstance(value, Mapping):
        return Size(float(value.get('width', 0) or 0), float(value.get('height', 0) or 0))
    width, height = value
    return Size(float(width), float(height))


@dataclass(frozen=True)
class BracketDimensions:
    container_width: float
    container_height: float
    round_width: float
    round_gap: float
    match_height: float
    match_vertical_gap: float

    def to_dict(self) -> Dict[str, float]:
        return {
            'containerWidth': self.container_width,
            'containerHeight': self.container_height,
            'roundWidth': self.round_width,
            'roundGap': self.round_gap,
            'matchHeight': self.match_height,
            'matchVerticalGap': self.match_vertical_gap,
        }


@dataclass(frozen=True)
class ScaledDimensions:
    match_width: float
    match_height: float
    round_gap: float
    vertical_gap: float
    scale_factor: float

    def to_dict(self) -> Dict[str, float]:
        return {
            'matchWidth': self.match_width,
            'matchHeight': self.match_height,
            'roundGap': self.round_gap,
            'verticalGap': self.vertical_gap,
            'scaleFactor': self.scale_factor,
        }


@dataclass(frozen=True)
class MatchPosition:
    match_id: str
    x: float
    y: float
    width: float
    height: float
    round_index: int
    match_index: int

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            'matchId': self.match_id,
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'roundIndex': self.round_index,
            'matchIndex': self.match_index,
        }


@dataclass(frozen=True)
class SVGPathData:
    d: str
    stroke: str
    stroke_width: float
    fill: str

    def to_dict(self) -> Dict[str, Any]:
        return {'d': self.d, 'stroke': self.stroke, 'strokeWidth': self.stroke_width, 'fill': self.fill}


@dataclass(frozen=True)
class Connection:
    from_matches: Tuple[str, str]
    to_match: str
    path: SVGPathData
    round_index: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'fromMatches': list(self.from_matches),
            'toMatch': self.to_match,
            'path': self.path.to_dict(),
            'roundIndex': self.round_index,
        }


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'isValid': self.is_valid, 'errors': list(self.errors), 'warnings': list(self.warnings)}


@dataclass
class SafeMatchData:
    match: Any
    display_teams: Dict[str, List[str]]
    is_valid: bool
    fallback_data: Optional[Match] = None

