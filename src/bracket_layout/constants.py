"""
Design-resolution geometry and scaling limits for the bracket diagram.

All sizes are pixels at a scale factor of 1.
"""

# Match card
MATCH_CARD_WIDTH = 213.33
MATCH_CARD_HEIGHT = 67.5

# Spacing
ROUND_GAP = 133.33
MATCH_VERTICAL_GAP = 67.5

# Typography
TEAM_TEXT_FONT_SIZE = 15
MAX_TEAM_TEXT_FONT_SIZE = 24

# Connector lines
CONNECTION_LINE_COLOR = '#94A3B8'
CONNECTION_LINE_WIDTH = 2

# Responsive scaling
MIN_SCALE_FACTOR = 0.3
MAX_SCALE_FACTOR = 2.0
MIN_READABLE_FONT_SIZE = 10
VIEWPORT_PADDING = 16
ROUND_LABEL_HEIGHT = 40
MIN_AVAILABLE_SIZE = 100  # floor for the usable area of a tiny viewport

# Breakpoints for scaling strategies
MOBILE_BREAKPOINT = 768
TABLET_BREAKPOINT = 1024

# Minimum card size that stays usable
MIN_MATCH_WIDTH = 120
MIN_MATCH_HEIGHT = 40

# Layout edge cases
LARGE_TOURNAMENT_MATCHES = 100
SMALL_CONTAINER_WIDTH = 200
SMALL_CONTAINER_HEIGHT = 100

# Round labels
ROUND_LABEL_FINAL = 'Final'
ROUND_LABEL_SEMIFINAL = 'Semifinals'
ROUND_LABEL_QUARTERFINAL = 'Quarterfinals'
ROUND_LABEL_PREFIX = 'Round'

DEFAULT_CACHE_CAPACITY = 100
