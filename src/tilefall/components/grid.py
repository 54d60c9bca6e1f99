from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

from tilefall.errors import BoundsError

Position = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class Cell:
    """Value state of one grid slot: empty (color None) or filled with a palette color."""

    color: Optional[str] = None

    @classmethod
    def empty(cls) -> "Cell":
        return EMPTY

    @classmethod
    def filled(cls, color: str) -> "Cell":
        if not color:
            raise ValueError("filled cell needs a color")
        return cls(color)

    @property
    def is_empty(self) -> bool:
        return self.color is None

    @property
    def is_filled(self) -> bool:
        return self.color is not None


EMPTY = Cell()


@dataclass(slots=True)
class Grid:
    """Square board of cells; row 0 is the visual top, row size-1 the bottom.

    Every position always holds a Cell; EMPTY is the explicit absence marker.
    """

    size: int
    cells: List[List[Cell]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError(f"grid size must be positive, got {self.size}")
        if not self.cells:
            self.cells = [[EMPTY] * self.size for _ in range(self.size)]
            return
        if len(self.cells) != self.size or any(len(row) != self.size for row in self.cells):
            raise ValueError(f"cells must form a {self.size}x{self.size} matrix")

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Optional[str]]]) -> "Grid":
        """Build a grid from nested color names; None marks an empty cell."""
        cells = [[Cell(color) if color else EMPTY for color in row] for row in rows]
        return cls(size=len(cells), cells=cells)

    @classmethod
    def random_fill(cls, size: int, palette: Sequence[str], rng: random.Random | None = None) -> "Grid":
        if not palette:
            raise ValueError("palette must contain at least one color")
        rng = rng or random.Random()
        cells = [[Cell.filled(rng.choice(palette)) for _ in range(size)] for _ in range(size)]
        return cls(size=size, cells=cells)

    def dimension(self) -> int:
        return self.size

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def get(self, row: int, col: int) -> Cell:
        if not self.is_inside(row, col):
            raise BoundsError(row, col, self.size)
        return self.cells[row][col]

    def set(self, row: int, col: int, cell: Cell) -> None:
        if not self.is_inside(row, col):
            raise BoundsError(row, col, self.size)
        self.cells[row][col] = cell

    def positions(self) -> Iterator[Position]:
        for row in range(self.size):
            for col in range(self.size):
                yield (row, col)

    def filled_count(self) -> int:
        return sum(1 for row in self.cells for cell in row if cell.is_filled)

    def is_cleared(self) -> bool:
        return all(cell.is_empty for row in self.cells for cell in row)

    def cell_counts(self) -> Counter:
        """Multiset of cell values, empty cells included."""
        return Counter(cell for row in self.cells for cell in row)

    def copy(self) -> "Grid":
        return Grid(size=self.size, cells=[list(row) for row in self.cells])

    def to_rows(self) -> List[List[Optional[str]]]:
        return [[cell.color for cell in row] for row in self.cells]

    def pretty(self) -> str:
        lines = []
        for row in self.cells:
            lines.append(" ".join(cell.color[0].upper() if cell.color else "." for cell in row))
        return "\n".join(lines)
