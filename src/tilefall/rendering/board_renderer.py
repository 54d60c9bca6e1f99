from __future__ import annotations

import math
from typing import TYPE_CHECKING, List, Tuple

from tilefall.constants import CELL_PADDING
from tilefall.ui.layout import cell_center

if TYPE_CHECKING:
    from tilefall.components.palette import Palette
    from tilefall.rendering.context import RenderContext

Point = Tuple[float, float]


def ease_in_out(p: float) -> float:
    if p < 0.5:
        return 2 * p * p
    return -2 * p * p + 4 * p - 1


def rotate_point(x: float, y: float, cx: float, cy: float, degrees: float) -> Point:
    """Rotate (x, y) clockwise around (cx, cy); arcade's y axis points up."""
    theta = math.radians(degrees)
    dx = x - cx
    dy = y - cy
    return (
        cx + dx * math.cos(theta) + dy * math.sin(theta),
        cy - dx * math.sin(theta) + dy * math.cos(theta),
    )


class BoardRenderer:
    def __init__(self, padding: int = CELL_PADDING, use_easing: bool = True):
        self._padding = padding
        self.use_easing = use_easing
        self.last_draw_coords: dict[tuple[int, int], Point] = {}

    def render(self, arcade, ctx: RenderContext, palette: Palette, headless: bool) -> None:
        geometry = ctx.geometry
        grid = ctx.grid
        cx, cy = geometry.center
        angle = ctx.angle
        half = max(geometry.tile_size - self._padding, 4) / 2
        self.last_draw_coords = {}

        if not headless:
            arcade.draw_lbwh_rectangle_filled(
                geometry.left, geometry.bottom, geometry.width, geometry.width, (40, 40, 48)
            )

        for row, col in grid.positions():
            cell = grid.get(row, col)
            fade = ctx.fade_by_pos.get((row, col))
            if cell.is_empty and fade is None:
                continue
            draw_x, draw_y = cell_center(geometry, row, col)

            fall = ctx.fall_by_dst.get((row, col))
            if fall is not None:
                from_x, from_y = cell_center(geometry, *fall.src)
                p = ease_in_out(fall.linear) if self.use_easing else fall.linear
                draw_x = from_x + (draw_x - from_x) * p
                draw_y = from_y + (draw_y - from_y) * p

            if angle:
                draw_x, draw_y = rotate_point(draw_x, draw_y, cx, cy, angle)
            self.last_draw_coords[(row, col)] = (draw_x, draw_y)
            if headless:
                continue

            color_name = cell.color if cell.is_filled else fade.color
            r, g, b = palette.rgb_for(color_name)
            alpha = int(255 * fade.alpha) if fade is not None else 255
            arcade.draw_polygon_filled(self._corners(draw_x, draw_y, half, angle), (r, g, b, alpha))

    @staticmethod
    def _corners(x: float, y: float, half: float, angle: float) -> List[Point]:
        corners = [(x - half, y - half), (x + half, y - half), (x + half, y + half), (x - half, y + half)]
        if not angle:
            return corners
        return [rotate_point(px, py, x, y, angle) for px, py in corners]
