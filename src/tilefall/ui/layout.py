from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from tilefall.constants import (
    BOARD_MAX_HEIGHT_PCT,
    BOARD_MAX_WIDTH_PCT,
    BOTTOM_MARGIN,
    MIN_TILE_SIZE,
    ROTATE_BUTTON_GAP,
    ROTATE_BUTTON_SIZE,
)
from tilefall.components.rotation import RotationDirection


@dataclass(frozen=True, slots=True)
class BoardGeometry:
    size: int
    tile_size: int
    left: float
    bottom: float

    @property
    def width(self) -> float:
        return self.tile_size * self.size

    @property
    def top(self) -> float:
        return self.bottom + self.width

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def center(self) -> Tuple[float, float]:
        return self.left + self.width / 2, self.bottom + self.width / 2


def compute_board_geometry(window_width: int, window_height: int, size: int) -> BoardGeometry:
    """Return the board placement used by both rendering and input hit-testing.

    The board is square, horizontally centred, and may not exceed the configured
    fraction of either window dimension.
    """
    max_board_w = window_width * BOARD_MAX_WIDTH_PCT
    max_board_h = (window_height - BOTTOM_MARGIN) * BOARD_MAX_HEIGHT_PCT
    tile_size = int(min(max_board_w, max_board_h) / size)
    if tile_size < MIN_TILE_SIZE:
        tile_size = MIN_TILE_SIZE
    left = (window_width - tile_size * size) / 2
    return BoardGeometry(size=size, tile_size=tile_size, left=left, bottom=BOTTOM_MARGIN)


def cell_center(geometry: BoardGeometry, row: int, col: int) -> Tuple[float, float]:
    # Row 0 is the visual top; arcade's y axis grows upward.
    x = geometry.left + col * geometry.tile_size + geometry.tile_size / 2
    y = geometry.bottom + (geometry.size - 1 - row) * geometry.tile_size + geometry.tile_size / 2
    return x, y


def cell_at_point(geometry: BoardGeometry, x: float, y: float) -> Optional[Tuple[int, int]]:
    if not (geometry.left <= x < geometry.right and geometry.bottom <= y < geometry.top):
        return None
    col = int((x - geometry.left) // geometry.tile_size)
    row = geometry.size - 1 - int((y - geometry.bottom) // geometry.tile_size)
    return row, col


def rotate_button_centers(geometry: BoardGeometry) -> Dict[RotationDirection, Tuple[float, float]]:
    _, cy = geometry.center
    offset = ROTATE_BUTTON_GAP + ROTATE_BUTTON_SIZE / 2
    return {
        RotationDirection.LEFT: (geometry.left - offset, cy),
        RotationDirection.RIGHT: (geometry.right + offset, cy),
    }


def rotate_button_at_point(geometry: BoardGeometry, x: float, y: float) -> Optional[RotationDirection]:
    half = ROTATE_BUTTON_SIZE / 2
    for direction, (cx, cy) in rotate_button_centers(geometry).items():
        if abs(x - cx) <= half and abs(y - cy) <= half:
            return direction
    return None
