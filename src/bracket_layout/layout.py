"""
End-to-end bracket layout: raw matches in, renderable geometry out.

The pipeline never raises. It returns a ``LayoutResult`` whose ``ok`` flag
says whether anything can be drawn, with structural problems in ``errors``
and informational ones in ``warnings``.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from bracket_layout.cache import CalculationCache
from bracket_layout.connections import handle_bracket_edge_cases
from bracket_layout.constants import MIN_SCALE_FACTOR
from bracket_layout.display import process_match_for_display
from bracket_layout.models import (
    BracketDimensions,
    Connection,
    Match,
    MatchPosition,
    Size,
    ValidationResult,
    as_size,
)
from bracket_layout.positions import (
    calculate_bracket_dimensions,
    calculate_match_positions,
    create_fallback_positions,
    get_default_dimensions,
)
from bracket_layout.rounds import BracketStructure, analyze_bracket_structure, organize_matches_into_rounds
from bracket_layout.scaling import (
    OverflowPlan,
    ScalingResult,
    ScalingStrategy,
    calculate_responsive_scaling,
    get_optimal_scaling_strategy,
    handle_extreme_overflow,
)
from bracket_layout.settings import get_default_settings
from bracket_layout.validation import (
    handle_layout_edge_cases,
    validate_and_fix_bracket_structure,
    validate_matches,
)

logger = logging.getLogger(__name__)


@dataclass
class BracketLayout:
    rounds: List[List[Match]] = field(default_factory=list)
    positions: List[MatchPosition] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)
    dimensions: Optional[BracketDimensions] = None
    scaling: Optional[ScalingResult] = None
    strategy: Optional[ScalingStrategy] = None
    overflow_plan: Optional[OverflowPlan] = None
    structure: Optional[BracketStructure] = None
    matches: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rounds': [[m.id for m in round_matches] for round_matches in self.rounds],
            'positions': [p.to_dict() for p in self.positions],
            'connections': [c.to_dict() for c in self.connections],
            'dimensions': self.dimensions.to_dict() if self.dimensions else None,
            'scaling': self.scaling.to_dict() if self.scaling else None,
            'strategy': self.strategy.to_dict() if self.strategy else None,
            'overflowPlan': self.overflow_plan.to_dict() if self.overflow_plan else None,
            'structure': self.structure.to_dict() if self.structure else None,
            'matches': list(self.matches),
        }


@dataclass
class LayoutResult:
    ok: bool
    value: BracketLayout
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'ok': self.ok,
            'layout': self.value.to_dict(),
            'errors': list(self.errors),
            'warnings': list(self.warnings),
        }


def create_empty_layout(container: Size) -> BracketLayout:
    return BracketLayout(dimensions=get_default_dimensions(container.width, container.height))


def _drop_duplicate_ids(matches: List[Match]) -> List[Match]:
    """Keep the first match for each id."""
    seen = set()
    unique = []
    for match in matches:
        if match.id in seen:
            continue
        seen.add(match.id)
        unique.append(match)
    return unique


def _with_current_matches(rounds: List[List[Match]], matches: List[Match]) -> List[List[Match]]:
    """
    Swap this call's Match objects into a round grouping.

    Cached groupings are keyed on id, round and slot only, so they can hold
    Match objects from an earlier call with an older status or winner.
    """
    current = {match.id: match for match in matches}
    return [[current.get(match.id, match) for match in round_matches] for round_matches in rounds]


def _run_pipeline(matches: Any, container: Size, cache: Optional[CalculationCache],
                  min_scale: float) -> LayoutResult:
    validation = validate_matches(matches)
    errors = list(validation.errors)
    warnings = list(validation.warnings)
    if warnings:
        logger.debug(f'Bracket layout warnings: {warnings}')
    if errors:
        logger.warning(f'Bracket layout errors: {errors}')

    if not isinstance(matches, list):
        return LayoutResult(ok=False, value=create_empty_layout(container), errors=errors, warnings=warnings)

    cleaned = _drop_duplicate_ids(validate_and_fix_bracket_structure(matches))
    rounds = _with_current_matches(organize_matches_into_rounds(cleaned, cache), cleaned)

    edge_cases = handle_layout_edge_cases(rounds, container)
    warnings.extend(edge_cases.warnings)
    if not edge_cases.is_valid:
        return LayoutResult(ok=False, value=create_empty_layout(container), errors=errors, warnings=warnings)
    rounds = edge_cases.rounds

    structure = analyze_bracket_structure(rounds)
    content = calculate_bracket_dimensions(rounds)
    viewport = Size(container.width or content.container_width, container.height or content.container_height)

    scaling = calculate_responsive_scaling(
        viewport.width, viewport.height,
        structure.total_rounds, structure.max_matches_in_round,
        cache=cache, min_scale=min_scale,
    )
    scale = scaling.scale_factor
    # Positions are relative to the scaled content box; the scaling offsets place that box
    dimensions = replace(
        scaling.scaled_dimensions,
        container_width=content.container_width * scale,
        container_height=content.container_height * scale,
    )

    try:
        positions = calculate_match_positions(rounds, dimensions, cache)
    except (ArithmeticError, TypeError, ValueError) as e:
        logger.warning(f'Error calculating match positions, using fallback grid: {e}')
        warnings.append('Match positions could not be centered; using fallback layout')
        positions = create_fallback_positions(rounds, dimensions)

    connections = handle_bracket_edge_cases(rounds, positions, dimensions.round_gap)

    content_size = Size(content.container_width, content.container_height)
    strategy = get_optimal_scaling_strategy(viewport.width, viewport.height, *content_size)
    overflow_plan = None
    if scaling.overflow['horizontal'] or scaling.overflow['vertical']:
        overflow_plan = handle_extreme_overflow(content_size, viewport, scale)
        warnings.append(f'Bracket does not fit the viewport at scale {scale:.2f}; {overflow_plan.strategy}')

    all_matches = [m for round_matches in rounds for m in round_matches]
    layout = BracketLayout(
        rounds=rounds,
        positions=positions,
        connections=connections,
        dimensions=dimensions,
        scaling=scaling,
        strategy=strategy,
        overflow_plan=overflow_plan,
        structure=structure,
        matches=[process_match_for_display(m, all_matches) for m in all_matches],
    )
    return LayoutResult(ok=True, value=layout, errors=errors, warnings=warnings)


def compute_bracket_layout(matches: Any, container_dimensions, cache: Optional[CalculationCache] = None,
                           min_scale: float = MIN_SCALE_FACTOR) -> LayoutResult:
    """
    Lay out a bracket for a viewport.

    Invalid records are dropped (and reported in ``errors``) rather than
    aborting the layout; only degenerate input yields ``ok=False``.
    """
    try:
        container = as_size(container_dimensions)
    except (TypeError, ValueError):
        container = Size(0, 0)
        return LayoutResult(
            ok=False,
            value=create_empty_layout(container),
            errors=['Container dimensions must be a {width, height} pair'],
        )

    if container.width < 0 or container.height < 0:
        return LayoutResult(
            ok=False,
            value=create_empty_layout(container),
            errors=['Container dimensions must be positive'],
        )

    try:
        return _run_pipeline(matches, container, cache, min_scale)
    except Exception as e:
        logger.exception('Bracket layout error')
        return LayoutResult(
            ok=False,
            value=create_empty_layout(container),
            errors=[f'Unexpected error during layout calculation: {e}'],
        )


class BracketLayoutEngine:
    """
    Layout entry point for one bracket view.

    Owns its calculation cache, so separate views never see each other's
    memoized results. Call ``clear_cache`` when switching tournaments.
    """

    def __init__(self, settings: Optional[dict] = None):
        self.settings = settings or get_default_settings()
        self.cache = CalculationCache(self.settings['cache_capacity'])
        self.min_scale = self.settings['min_scale']

    def __repr__(self):
        return f"BracketLayoutEngine(cache={self.cache!r}, min_scale={self.min_scale})"

    def layout(self, matches: Any, container_dimensions=None) -> LayoutResult:
        if container_dimensions is None:
            container_dimensions = self.settings['default_container']
        return compute_bracket_layout(matches, container_dimensions, cache=self.cache, min_scale=self.min_scale)

    def validate(self, matches: Any) -> ValidationResult:
        return validate_matches(matches)

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_size(self) -> int:
        return self.cache.size()
