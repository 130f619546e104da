from __future__ import annotations

import numpy as np
import pytest

from tetris_engine.game import GameGrid, Piece, PreconditionError, TetrominoType, shapes_for


T_SPAWN = shapes_for(TetrominoType.T)[0]  # occupies (1,0), (0..2,1)
I_VERTICAL = shapes_for(TetrominoType.I)[1]  # occupies column 2, rows 0..3


@pytest.fixture
def empty() -> GameGrid:
    return GameGrid.empty(10, 20)


def test_empty_grid_dimensions(empty):
    assert (empty.width, empty.height) == (10, 20)
    assert empty.filled_cells() == 0


@pytest.mark.parametrize("width, height", [(0, 20), (10, 0), (-1, 5)])
def test_bad_dimensions_fail_fast(width, height):
    with pytest.raises(PreconditionError):
        GameGrid.empty(width, height)


def test_bad_cell_values_fail_fast():
    with pytest.raises(PreconditionError):
        GameGrid(np.full((4, 4), 9))
    with pytest.raises(PreconditionError):
        GameGrid(np.zeros(4))


@pytest.mark.parametrize("kind", list(TetrominoType))
def test_placement_rejected_past_any_wall(empty, kind):
    for shape in shapes_for(kind):
        h, w = shape.shape
        ys, xs = np.nonzero(shape)
        left, right, bottom = int(xs.min()), int(xs.max()), int(ys.max())
        assert not empty.is_valid_placement(shape, -left - 1, 5)
        assert not empty.is_valid_placement(shape, empty.width - right, 5)
        assert not empty.is_valid_placement(shape, 3, empty.height - bottom)
        # flush against each wall is fine
        assert empty.is_valid_placement(shape, -left, 5)
        assert empty.is_valid_placement(shape, empty.width - 1 - right, 5)
        assert empty.is_valid_placement(shape, 3, empty.height - 1 - bottom)


def test_cells_above_the_board_are_allowed(empty):
    assert empty.is_valid_placement(I_VERTICAL, 0, -3)
    assert empty.is_valid_placement(I_VERTICAL, 0, -10)
    # still bounded horizontally up there
    assert not empty.is_valid_placement(I_VERTICAL, -3, -3)


def test_placement_rejects_collision():
    grid = GameGrid.from_rows(["....X....."], height=20)
    assert not grid.is_valid_placement(T_SPAWN, 3, 18)
    assert grid.is_valid_placement(T_SPAWN, 3, 17)
    assert grid.is_valid_placement(T_SPAWN, 5, 18)


def test_place_shape_returns_copy(empty):
    placed = empty.place_shape(T_SPAWN, 0, 0, int(TetrominoType.T))
    assert empty.filled_cells() == 0
    assert placed.filled_cells() == 4
    assert placed.cell_at(1, 0) == TetrominoType.T
    assert placed.color_at(0, 1) == "#a000f0"
    assert placed.color_at(0, 0) is None


def test_place_shape_skips_cells_above_board(empty):
    placed = empty.place_shape(I_VERTICAL, 0, -2, int(TetrominoType.I))
    assert placed.filled_cells() == 2
    assert placed.cell_at(2, 0) == TetrominoType.I
    assert placed.cell_at(2, 1) == TetrominoType.I


def test_place_shape_rejects_bad_value(empty):
    with pytest.raises(PreconditionError):
        empty.place_shape(T_SPAWN, 0, 0, 0)


def test_cell_access_out_of_bounds(empty):
    with pytest.raises(PreconditionError):
        empty.cell_at(10, 0)
    with pytest.raises(PreconditionError):
        empty.color_at(0, -1)


def test_grid_is_immutable(empty):
    with pytest.raises(ValueError):
        empty.grid[0, 0] = 1


def test_from_rows_is_bottom_aligned():
    grid = GameGrid.from_rows(["XXXXXXXXX."], height=20)
    assert grid.height == 20
    assert grid.cell_at(0, 19) == TetrominoType.I
    assert grid.cell_at(9, 19) == 0
    assert grid.cell_at(0, 18) == 0
    assert GameGrid.from_rows(["T.", ".Z"]).cell_at(1, 1) == TetrominoType.Z


def test_from_rows_rejects_ragged_rows():
    with pytest.raises(PreconditionError):
        GameGrid.from_rows(["XX", "X"])


def test_clear_nothing_returns_same_grid():
    grid = GameGrid.from_rows(["XXXXXXXXX.", "X.X.X.X.X."], height=20)
    cleared, count = grid.clear_completed_rows()
    assert count == 0
    assert cleared is grid


def test_clear_removes_all_full_rows_at_once():
    grid = GameGrid.from_rows(
        [
            "T.........",
            "XXXXXXXXXX",
            "S.S.......",
            "XXXXXXXXXX",
            "XXXXXXXXXX",
        ],
        height=20,
    )
    cleared, count = grid.clear_completed_rows()
    assert count == 3
    assert cleared.height == 20
    # survivors keep their order and sink to the bottom
    assert cleared == GameGrid.from_rows(["T.........", "S.S......."], height=20)


def test_clear_is_idempotent():
    grid = GameGrid.from_rows(["XXXXXXXXXX", "XXXXX.XXXX", "XXXXXXXXXX"], height=20)
    once, count = grid.clear_completed_rows()
    assert count == 2
    twice, again = once.clear_completed_rows()
    assert again == 0
    assert twice == once


@pytest.mark.parametrize("full", [0, 1, 4, 20])
def test_clear_keeps_row_count(full):
    rows = ["XXXXXXXXXX"] * full + ["X........."] * (20 - full)
    cleared, count = GameGrid.from_rows(rows).clear_completed_rows()
    assert count == full
    assert cleared.height == 20
    assert cleared.filled_cells() == 20 - full


def test_clear_does_not_cascade():
    # rows only become full by falling; a single pass must leave them
    grid = GameGrid.from_rows(["XXXXXXXXX.", "XXXXXXXXXX"], height=20)
    cleared, count = grid.clear_completed_rows()
    assert count == 1
    assert cleared.completed_rows().size == 0


def test_ghost_y(empty):
    assert empty.ghost_y(T_SPAWN, 4, 0) == 18
    grid = GameGrid.from_rows(["....X.....", ".........."], height=20)
    assert grid.ghost_y(T_SPAWN, 3, 0) == 16


def test_board_features():
    grid = GameGrid.from_rows(["X.........", "..........", "X.X......."], height=20)
    assert grid.get_max_height() == 3
    assert grid.count_holes() == 1
    assert GameGrid.empty().get_max_height() == 0


def test_equality():
    assert GameGrid.empty() == GameGrid.empty()
    assert GameGrid.empty() != GameGrid.empty(10, 21)
    piece = Piece(TetrominoType.O, x=0, y=0)
    assert GameGrid.empty().place_shape(piece.shape, 0, 0, 2) != GameGrid.empty()
