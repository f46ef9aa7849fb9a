"""
Responsive scaling of bracket content into a viewport.

The scale factor is decided by a fixed cascade:

1. content that fits the padded viewport is drawn at scale 1;
2. otherwise the more restrictive of the width and height ratios is taken;
3. a scale too small for readable team text is raised to the readable
   minimum, but only when the bracket still fits at that size;
4. the result is clamped to [MIN_SCALE_FACTOR, MAX_SCALE_FACTOR];
5. match cards smaller than the usable minimum force the scale up, even if
   the bracket no longer fits.

Content that overflows after the cascade is reported through the
``overflow`` flags; ``handle_extreme_overflow`` turns that into a scroll
strategy for the renderer.
"""
from typing import Dict, NamedTuple, Optional

from bracket_layout.cache import CalculationCache, memoize
from bracket_layout.constants import (
    MATCH_CARD_HEIGHT,
    MATCH_CARD_WIDTH,
    MATCH_VERTICAL_GAP,
    MAX_SCALE_FACTOR,
    MIN_AVAILABLE_SIZE,
    MIN_MATCH_HEIGHT,
    MIN_MATCH_WIDTH,
    MIN_READABLE_FONT_SIZE,
    MIN_SCALE_FACTOR,
    MOBILE_BREAKPOINT,
    ROUND_GAP,
    ROUND_LABEL_HEIGHT,
    TABLET_BREAKPOINT,
    TEAM_TEXT_FONT_SIZE,
    VIEWPORT_PADDING,
)
from bracket_layout.models import BracketDimensions, ScaledDimensions, Size, as_size
from bracket_layout.positions import content_height as bracket_content_height
from bracket_layout.positions import content_width as bracket_content_width


class ViewportFit(NamedTuple):
    scale_factor: float
    offset_x: float
    offset_y: float
    fits_without_scaling: bool
    overflow: Dict[str, bool]

    def to_dict(self) -> Dict:
        return {
            'scaleFactor': self.scale_factor,
            'offsetX': self.offset_x,
            'offsetY': self.offset_y,
            'fitsWithoutScaling': self.fits_without_scaling,
            'overflow': dict(self.overflow),
        }


class ScalingResult(NamedTuple):
    scale_factor: float
    offset_x: float
    offset_y: float
    fits_without_scaling: bool
    overflow: Dict[str, bool]
    scaled_dimensions: BracketDimensions

    def to_dict(self) -> Dict:
        return {
            'scaleFactor': self.scale_factor,
            'offsetX': self.offset_x,
            'offsetY': self.offset_y,
            'fitsWithoutScaling': self.fits_without_scaling,
            'overflow': dict(self.overflow),
            'scaledDimensions': self.scaled_dimensions.to_dict(),
        }


class Readability(NamedTuple):
    adjusted_scale: float
    is_readable: bool


class Usability(NamedTuple):
    adjusted_scale: float
    meets_minimum: bool


class OverflowPlan(NamedTuple):
    strategy: str
    scale_factor: float
    allow_overflow: Dict[str, bool]

    def to_dict(self) -> Dict:
        return {
            'strategy': self.strategy,
            'scaleFactor': self.scale_factor,
            'allowOverflow': dict(self.allow_overflow),
        }


class ScalingStrategy(NamedTuple):
    strategy: str
    scale_factor: float
    reasoning: str

    def to_dict(self) -> Dict:
        return {'strategy': self.strategy, 'scaleFactor': self.scale_factor, 'reasoning': self.reasoning}


NO_OVERFLOW = {'horizontal': False, 'vertical': False}


def available_area(container: Size) -> Size:
    """Space left for content after viewport padding and the round-label band."""
    return Size(
        max(MIN_AVAILABLE_SIZE, container.width - VIEWPORT_PADDING * 2),
        max(MIN_AVAILABLE_SIZE, container.height - VIEWPORT_PADDING * 2 - ROUND_LABEL_HEIGHT),
    )


def clamp_scale(scale: float, min_scale: float = MIN_SCALE_FACTOR) -> float:
    floor = min(max(min_scale, MIN_SCALE_FACTOR), MAX_SCALE_FACTOR)
    return max(floor, min(MAX_SCALE_FACTOR, scale))


def validate_readability(scale_factor: float, original_font_size: float = TEAM_TEXT_FONT_SIZE) -> Readability:
    is_readable = original_font_size * scale_factor >= MIN_READABLE_FONT_SIZE
    if is_readable:
        return Readability(adjusted_scale=scale_factor, is_readable=True)
    min_required_scale = MIN_READABLE_FONT_SIZE / original_font_size
    return Readability(adjusted_scale=max(scale_factor, min_required_scale), is_readable=False)


def enforce_minimum_usability(scaled_width: float, scaled_height: float, scale_factor: float) -> Usability:
    """Raise the scale until a match card is at least MIN_MATCH_WIDTH x MIN_MATCH_HEIGHT."""
    if scaled_width >= MIN_MATCH_WIDTH and scaled_height >= MIN_MATCH_HEIGHT:
        return Usability(adjusted_scale=scale_factor, meets_minimum=True)

    min_required_scale = max(MIN_MATCH_WIDTH / MATCH_CARD_WIDTH, MIN_MATCH_HEIGHT / MATCH_CARD_HEIGHT)
    return Usability(adjusted_scale=max(scale_factor, min_required_scale), meets_minimum=False)


def _fits(content: Size, available: Size, scale: float = 1.0) -> bool:
    return content.width * scale <= available.width and content.height * scale <= available.height


def _cascade_scale(content: Size, available: Size, min_scale: float) -> float:
    if _fits(content, available):
        return 1.0

    scale = min(available.width / content.width, available.height / content.height)

    readability = validate_readability(scale)
    if not readability.is_readable and _fits(content, available, readability.adjusted_scale):
        scale = readability.adjusted_scale

    scale = clamp_scale(scale, min_scale)

    usability = enforce_minimum_usability(MATCH_CARD_WIDTH * scale, MATCH_CARD_HEIGHT * scale, scale)
    return clamp_scale(usability.adjusted_scale, min_scale)


def ensure_viewport_fit(content_dimensions, container_dimensions,
                        min_scale: float = MIN_SCALE_FACTOR) -> ViewportFit:
    """
    Scale factor and centering offsets for content inside a container.

    Both arguments take ``{width, height}`` mappings, pairs or ``Size``.
    """
    content = as_size(content_dimensions)
    container = as_size(container_dimensions)

    if content.width <= 0 or content.height <= 0 or container.width <= 0 or container.height <= 0:
        return ViewportFit(1.0, 0.0, 0.0, True, dict(NO_OVERFLOW))

    available = available_area(container)
    fits_without_scaling = _fits(content, available)
    scale = _cascade_scale(content, available, min_scale)

    final_width = content.width * scale
    final_height = content.height * scale

    offset_x = max(VIEWPORT_PADDING, (container.width - final_width) / 2)
    offset_y = max(VIEWPORT_PADDING + ROUND_LABEL_HEIGHT,
                   (container.height - final_height - ROUND_LABEL_HEIGHT) / 2 + ROUND_LABEL_HEIGHT)

    return ViewportFit(
        scale_factor=scale,
        offset_x=offset_x,
        offset_y=offset_y,
        fits_without_scaling=fits_without_scaling,
        overflow={
            'horizontal': final_width > available.width,
            'vertical': final_height > available.height,
        },
    )


def get_scaled_dimensions(scale_factor: float) -> ScaledDimensions:
    return ScaledDimensions(
        match_width=MATCH_CARD_WIDTH * scale_factor,
        match_height=MATCH_CARD_HEIGHT * scale_factor,
        round_gap=ROUND_GAP * scale_factor,
        vertical_gap=MATCH_VERTICAL_GAP * scale_factor,
        scale_factor=scale_factor,
    )


def calculate_responsive_scaling(container_width: float, container_height: float,
                                 total_rounds: int, max_matches_in_round: int,
                                 cache: Optional[CalculationCache] = None,
                                 min_scale: float = MIN_SCALE_FACTOR) -> ScalingResult:
    """Scaling decision plus the scaled card and gap sizes for a bracket shape."""
    cache_key = f"scaling-{container_width}-{container_height}-{total_rounds}-{max_matches_in_round}-{min_scale}"

    def compute():
        container = Size(container_width, container_height)
        available = available_area(container)
        content = Size(bracket_content_width(total_rounds), bracket_content_height(max_matches_in_round))

        if total_rounds <= 0 or max_matches_in_round <= 0:
            fit = ViewportFit(1.0, 0.0, 0.0, True, dict(NO_OVERFLOW))
        else:
            fit = ensure_viewport_fit(content, container, min_scale)

        scale = fit.scale_factor
        scaled_dimensions = BracketDimensions(
            container_width=available.width,
            container_height=available.height,
            round_width=MATCH_CARD_WIDTH * scale,
            round_gap=ROUND_GAP * scale,
            match_height=MATCH_CARD_HEIGHT * scale,
            match_vertical_gap=MATCH_VERTICAL_GAP * scale,
        )
        return ScalingResult(*fit, scaled_dimensions=scaled_dimensions)

    return memoize(cache, cache_key, compute)


def handle_extreme_overflow(content_dimensions, container_dimensions,
                            min_scale: float = MIN_SCALE_FACTOR) -> OverflowPlan:
    """
    Scroll strategy for content that may not fit even at the minimum scale.

    Horizontal scrolling is preferred over vertical; the scale never drops
    below ``min_scale``.
    """
    content = as_size(content_dimensions)
    available = available_area(as_size(container_dimensions))

    horizontal = content.width * min_scale > available.width
    vertical = content.height * min_scale > available.height

    if not horizontal and not vertical:
        strategy = 'fit-anyway'
    elif horizontal and not vertical:
        strategy = 'allow-horizontal-scroll'
    elif vertical and not horizontal:
        strategy = 'allow-vertical-scroll'
    else:
        strategy = 'allow-both-scroll'

    return OverflowPlan(
        strategy=strategy,
        scale_factor=min_scale,
        allow_overflow={'horizontal': horizontal, 'vertical': vertical},
    )


def get_optimal_scaling_strategy(container_width: float, container_height: float,
                                 content_width: float, content_height: float) -> ScalingStrategy:
    """Advisory classification of the scaling situation by viewport breakpoint."""
    available = available_area(Size(container_width, container_height))

    if content_width <= 0 or content_height <= 0:
        return ScalingStrategy('no-scaling', 1.0, 'No content to scale')
    if content_width <= available.width and content_height <= available.height:
        return ScalingStrategy('no-scaling', 1.0, 'Content fits naturally within viewport')

    width_scale = available.width / content_width
    height_scale = available.height / content_height

    if container_width <= MOBILE_BREAKPOINT and width_scale < height_scale:
        return ScalingStrategy(
            'fit-width',
            max(width_scale, MIN_SCALE_FACTOR),
            'Mobile: prioritizing width fit for better touch interaction',
        )

    balanced_scale = max(min(width_scale, height_scale), MIN_SCALE_FACTOR)
    if container_width <= TABLET_BREAKPOINT:
        return ScalingStrategy('fit-both', balanced_scale, 'Tablet: balancing width and height constraints')

    return ScalingStrategy('fit-both', balanced_scale, 'Desktop: ensuring complete viewport fit without scrolling')
