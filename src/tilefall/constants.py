GRID_SIZE = 5
TILE_SIZE = 64
BOTTOM_MARGIN = 80

# Default ordered palette; COLOR_RGB holds the display color for every known name.
DEFAULT_PALETTE = ("red", "green", "blue")
COLOR_RGB = {
    "red":     (200, 56, 56),
    "green":   (70, 170, 80),
    "blue":    (64, 96, 200),
    "yellow":  (214, 190, 64),
    "magenta": (170, 80, 160),
    "cyan":    (70, 170, 170),
    "orange":  (214, 130, 56),
}
EMPTY_RGB = (245, 245, 245)

# Board maximum footprint relative to window (percentage of window width/height).
BOARD_MAX_WIDTH_PCT = 0.60
BOARD_MAX_HEIGHT_PCT = 0.75
MIN_TILE_SIZE = 20
# Gap drawn between adjacent cells.
CELL_PADDING = 4

# Rotate buttons sit left/right of the board, vertically centred on it.
ROTATE_BUTTON_SIZE = 56
ROTATE_BUTTON_GAP = 24

# Animation durations (seconds).
FADE_DURATION = 0.2
FALL_DURATION = 0.25
ROTATE_DURATION = 0.3

# Seconds a busy cycle may wait on the presentation layer before it is force-released.
TRANSITION_TIMEOUT = 5.0
