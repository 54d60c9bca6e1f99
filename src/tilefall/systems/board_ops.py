from __future__ import annotations

from dataclasses import dataclass
from typing import List

from esper import World

from tilefall.components.grid import EMPTY, Cell, Grid, Position
from tilefall.components.palette import Palette
from tilefall.components.rotation import RotationDirection


@dataclass(frozen=True, slots=True)
class FallRecord:
    source: Position
    target: Position
    color: str

    @property
    def distance(self) -> int:
        return self.target[0] - self.source[0]


@dataclass(slots=True)
class GravityResult:
    grid: Grid
    falls: List[FallRecord]

    @property
    def moved(self) -> List[FallRecord]:
        return [fall for fall in self.falls if fall.distance > 0]


def get_board_entity(world: World) -> int:
    for entity, _ in world.get_component(Grid):
        return entity
    raise RuntimeError("Grid not found")


def get_grid(world: World) -> Grid:
    for _, grid in world.get_component(Grid):
        return grid
    raise RuntimeError("Grid not found")


def set_grid(world: World, grid: Grid) -> None:
    world.add_component(get_board_entity(world), grid)


def get_palette(world: World) -> Palette:
    for _, palette in world.get_component(Palette):
        return palette
    raise RuntimeError("Palette not found")


def connected_region(grid: Grid, start_row: int, start_col: int) -> List[Position]:
    """Return the maximal 4-connected same-color region containing the start cell.

    Iterative flood fill over an explicit stack; each cell is examined at most
    once thanks to the visited matrix. An empty (or off-board) start yields [].
    Neighbors are pushed up, down, left, right so traversal order is stable.
    """
    if not grid.is_inside(start_row, start_col):
        return []
    color = grid.get(start_row, start_col).color
    if color is None:
        return []
    size = grid.dimension()
    visited = [[False] * size for _ in range(size)]
    region: List[Position] = []
    stack: List[Position] = [(start_row, start_col)]
    while stack:
        row, col = stack.pop()
        if not grid.is_inside(row, col):
            continue
        if visited[row][col]:
            continue
        visited[row][col] = True
        # Mismatched cells are marked visited but never join the region or expand.
        if grid.get(row, col).color != color:
            continue
        region.append((row, col))
        stack.append((row - 1, col))
        stack.append((row + 1, col))
        stack.append((row, col - 1))
        stack.append((row, col + 1))
    return region


def clear_positions(grid: Grid, positions: List[Position]) -> Grid:
    """Return a copy of grid with every given position emptied."""
    cleared = grid.copy()
    for row, col in positions:
        cleared.set(row, col, EMPTY)
    return cleared


def apply_gravity(grid: Grid) -> GravityResult:
    """Compact filled cells to the bottom of each column, keeping their order."""
    size = grid.dimension()
    result = Grid(size=size)
    falls: List[FallRecord] = []
    for col in range(size):
        target_row = size - 1
        for row in range(size - 1, -1, -1):
            cell = grid.get(row, col)
            if cell.is_empty:
                continue
            result.set(target_row, col, cell)
            falls.append(FallRecord(source=(row, col), target=(target_row, col), color=cell.color))
            target_row -= 1
    return GravityResult(grid=result, falls=falls)


def rotate_grid(grid: Grid, direction: RotationDirection) -> Grid:
    size = grid.dimension()
    last = size - 1
    if direction is RotationDirection.RIGHT:
        cells = [[grid.get(last - j, i) for j in range(size)] for i in range(size)]
    elif direction is RotationDirection.LEFT:
        cells = [[grid.get(j, last - i) for j in range(size)] for i in range(size)]
    else:
        raise ValueError(f"unknown rotation direction {direction!r}")
    return Grid(size=size, cells=cells)


def region_color(grid: Grid, region: List[Position]) -> str | None:
    if not region:
        return None
    row, col = region[0]
    cell: Cell = grid.get(row, col)
    return cell.color


def fall_payload(falls: List[FallRecord]) -> List[dict]:
    return [{'from': fall.source, 'to': fall.target, 'color': fall.color} for fall in falls]
