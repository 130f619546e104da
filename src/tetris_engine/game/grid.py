from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .errors import PreconditionError
from .pieces import COLORS, Shape, TetrominoType


Coordinate = Tuple[int, int]


class GameGrid:
    """Immutable 2D board of settled blocks.

    The grid uses 0 for empty cells and the tetromino value (1..7) of the
    piece that filled a cell otherwise, which doubles as its colour tag.
    Rows are indexed top-down; y=0 is the top visible row. Every operation
    returns a new grid and leaves the receiver untouched.
    """

    def __init__(self, cells: np.ndarray) -> None:
        cells = np.asarray(cells)
        if cells.ndim != 2 or cells.shape[0] <= 0 or cells.shape[1] <= 0:
            raise PreconditionError(f"grid must be a non-empty 2D array, got shape {cells.shape}")
        if cells.min() < 0 or cells.max() > max(TetrominoType):
            raise PreconditionError("grid cells must be 0 or a tetromino value")
        self.grid = cells.astype(np.int8, copy=True)
        self.grid.setflags(write=False)
        self.height, self.width = self.grid.shape

    @classmethod
    def empty(cls, width: int = 10, height: int = 20) -> "GameGrid":
        if width <= 0 or height <= 0:
            raise PreconditionError(f"grid dimensions must be positive, got {width}x{height}")
        return cls(np.zeros((height, width), dtype=np.int8))

    @classmethod
    def from_rows(cls, rows: Sequence[str], height: Optional[int] = None) -> "GameGrid":
        """Build a grid from text rows, bottom-aligned.

        '.' is empty, a piece letter fills the cell with that kind and any
        other character fills it with the I value. When ``height`` exceeds
        the number of rows the missing rows on top are empty, so
        ``from_rows(["XXXXXXXXX."], height=20)`` fills the bottom row except
        the last column.
        """
        if not rows:
            raise PreconditionError("from_rows needs at least one row")
        width = len(rows[0])
        height = len(rows) if height is None else height
        if height < len(rows):
            raise PreconditionError(f"{len(rows)} rows do not fit in height {height}")
        values: List[List[int]] = [[0] * width for _ in range(height - len(rows))]
        for row in rows:
            if len(row) != width:
                raise PreconditionError(f"row {row!r} is not {width} wide")
            values.append([_char_value(c) for c in row])
        return cls(np.array(values, dtype=np.int8))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameGrid):
            return NotImplemented
        return np.array_equal(self.grid, other.grid)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"GameGrid({self.width}x{self.height}, filled={self.filled_cells()})"

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, x: int, y: int) -> int:
        if not self.is_inside(x, y):
            raise PreconditionError(f"cell ({x}, {y}) outside {self.width}x{self.height} grid")
        return int(self.grid[y, x])

    def color_at(self, x: int, y: int) -> Optional[str]:
        value = self.cell_at(x, y)
        return COLORS[TetrominoType(value)] if value else None

    def can_place(self, cells: Iterable[Coordinate]) -> bool:
        # Cells above the top row are allowed while a piece is entering.
        for x, y in cells:
            if x < 0 or x >= self.width or y >= self.height:
                return False
            if y >= 0 and self.grid[y, x] != 0:
                return False
        return True

    def is_valid_placement(self, shape: Shape, x: int, y: int) -> bool:
        return self.can_place(_shape_cells(shape, x, y))

    def place_shape(self, shape: Shape, x: int, y: int, value: int) -> "GameGrid":
        """Return a copy with the occupied cells of ``shape`` set to ``value``.

        Cells above the board or outside it are skipped; validate first.
        """
        if not 1 <= int(value) <= max(TetrominoType):
            raise PreconditionError(f"invalid cell value: {value!r}")
        grid = self.grid.copy()
        for cx, cy in _shape_cells(shape, x, y):
            if self.is_inside(cx, cy):
                grid[cy, cx] = value
        return GameGrid(grid)

    def completed_rows(self) -> np.ndarray:
        return np.where(np.all(self.grid != 0, axis=1))[0]

    def clear_completed_rows(self) -> Tuple["GameGrid", int]:
        full_rows = self.completed_rows()
        if full_rows.size == 0:
            return self, 0
        num = int(full_rows.size)
        # All full rows leave in one pass; empty rows refill the top
        kept = np.delete(self.grid, full_rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        cleared = GameGrid(np.vstack((new_rows, kept)))
        assert cleared.height == self.height
        return cleared, num

    def ghost_y(self, shape: Shape, x: int, y: int) -> int:
        while self.is_valid_placement(shape, x, y + 1):
            y += 1
        return y

    def filled_cells(self) -> int:
        return int(np.count_nonzero(self.grid))

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != 0, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        top_index = int(non_empty_rows[0])
        return self.height - top_index

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            column = self.grid[:, x]
            seen_block = False
            for cell in column:
                if cell != 0:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()


def _shape_cells(shape: Shape, x: int, y: int) -> List[Coordinate]:
    ys, xs = np.nonzero(shape)
    return [(x + int(dx), y + int(dy)) for dy, dx in zip(ys, xs)]


def _char_value(c: str) -> int:
    if c == ".":
        return 0
    if c in TetrominoType.__members__:
        return int(TetrominoType[c])
    return int(TetrominoType.I)
