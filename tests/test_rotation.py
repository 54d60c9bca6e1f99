import random
from pathlib import Path

import pytest

import tilefall.components
from tilefall.components.grid import Grid
from tilefall.components.rotation import RotationDirection
from tilefall.systems.board_ops import rotate_grid

LEFT, RIGHT = RotationDirection.LEFT, RotationDirection.RIGHT


def _random_grid(rng, size):
    return Grid.from_rows([[rng.choice(['A', 'B', 'C', None]) for _ in range(size)] for _ in range(size)])


def test_rotate_right_is_clockwise():
    grid = Grid.from_rows([['1', '2'], ['3', '4']])
    assert rotate_grid(grid, RIGHT).to_rows() == [['3', '1'], ['4', '2']]


def test_rotate_left_is_counter_clockwise():
    grid = Grid.from_rows([['1', '2'], ['3', '4']])
    assert rotate_grid(grid, LEFT).to_rows() == [['2', '4'], ['1', '3']]


def test_rotation_formulas_hold_for_odd_sizes():
    grid = Grid.from_rows([[f"{r}{c}" for c in range(3)] for r in range(3)])
    right = rotate_grid(grid, RIGHT)
    left = rotate_grid(grid, LEFT)
    for i in range(3):
        for j in range(3):
            assert right.get(i, j) == grid.get(2 - j, i)
            assert left.get(i, j) == grid.get(j, 2 - i)


def test_right_then_left_is_identity():
    rng = random.Random(1)
    for _ in range(20):
        grid = _random_grid(rng, rng.choice([1, 3, 5, 7]))
        assert rotate_grid(rotate_grid(grid, RIGHT), LEFT) == grid
        assert rotate_grid(rotate_grid(grid, LEFT), RIGHT) == grid


def test_four_quarter_turns_are_identity():
    rng = random.Random(2)
    for _ in range(20):
        grid = _random_grid(rng, 5)
        rotated = grid
        for _ in range(4):
            rotated = rotate_grid(rotated, RIGHT)
        assert rotated == grid


def test_rotation_preserves_cell_multiset_and_dimension():
    rng = random.Random(3)
    grid = _random_grid(rng, 7)
    for direction in (LEFT, RIGHT):
        rotated = rotate_grid(grid, direction)
        assert rotated.dimension() == 7
        assert rotated.cell_counts() == grid.cell_counts()


def test_rotation_does_not_mutate_input():
    grid = Grid.from_rows([['A', None], ['B', 'C']])
    snapshot = grid.copy()
    rotate_grid(grid, RIGHT)
    assert grid == snapshot


def test_unknown_direction_is_rejected():
    with pytest.raises(ValueError):
        rotate_grid(Grid(size=2), "sideways")


def test_component_modules_do_not_depend_on_systems():
    components_dir = Path(tilefall.components.__file__).parent
    for module in sorted(components_dir.glob("*.py")):
        source = module.read_text()
        assert "tilefall.systems" not in source, module.name
