from __future__ import annotations

from typing import TYPE_CHECKING

from tilefall.constants import ROTATE_BUTTON_SIZE
from tilefall.components.rotation import RotationDirection
from tilefall.ui.layout import rotate_button_centers

if TYPE_CHECKING:
    from tilefall.rendering.context import RenderContext

TEXT_COLOR = (235, 235, 235)
BUTTON_COLOR = (90, 90, 110)
BUTTON_LOCKED_COLOR = (55, 55, 60)
_ARROWS = {RotationDirection.LEFT: "<", RotationDirection.RIGHT: ">"}


def format_elapsed(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


class HudRenderer:
    """Move counter, timer, rotate buttons and the title / completion banners."""

    def render_status(self, arcade, ctx: RenderContext, move_count: int, elapsed: float) -> None:
        geometry = ctx.geometry
        arcade.draw_text(
            f"Moves: {move_count}",
            geometry.left,
            geometry.top + 16,
            TEXT_COLOR,
            18,
            anchor_x="left",
        )
        arcade.draw_text(
            f"Time: {format_elapsed(elapsed)}",
            geometry.right,
            geometry.top + 16,
            TEXT_COLOR,
            18,
            anchor_x="right",
        )

    def render_buttons(self, arcade, ctx: RenderContext) -> None:
        half = ROTATE_BUTTON_SIZE / 2
        fill = BUTTON_LOCKED_COLOR if ctx.locked else BUTTON_COLOR
        for direction, (cx, cy) in rotate_button_centers(ctx.geometry).items():
            arcade.draw_lbwh_rectangle_filled(cx - half, cy - half, ROTATE_BUTTON_SIZE, ROTATE_BUTTON_SIZE, fill)
            arcade.draw_text(_ARROWS[direction], cx, cy, TEXT_COLOR, 24, anchor_x="center", anchor_y="center")

    def render_banner(self, arcade, ctx: RenderContext, title: str, subtitle: str) -> None:
        cx = ctx.window_width / 2
        cy = ctx.window_height / 2
        arcade.draw_lbwh_rectangle_filled(0, cy - 70, ctx.window_width, 140, (0, 0, 0, 190))
        arcade.draw_text(title, cx, cy + 18, TEXT_COLOR, 32, anchor_x="center", anchor_y="center")
        arcade.draw_text(subtitle, cx, cy - 28, TEXT_COLOR, 16, anchor_x="center", anchor_y="center")
