from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .errors import PreconditionError


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


def _shape(rows: List[List[int]]) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


# Rotation states in clockwise order; index 0 is the spawn orientation.
SHAPES: Dict[TetrominoType, Tuple[Shape, ...]] = {
    TetrominoType.I: (
        _shape([[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]]),
        _shape([[0, 0, 1, 0], [0, 0, 1, 0], [0, 0, 1, 0], [0, 0, 1, 0]]),
    ),
    TetrominoType.O: (
        _shape([[1, 1], [1, 1]]),
    ),
    TetrominoType.T: (
        _shape([[0, 1, 0], [1, 1, 1], [0, 0, 0]]),
        _shape([[0, 1, 0], [0, 1, 1], [0, 1, 0]]),
        _shape([[0, 0, 0], [1, 1, 1], [0, 1, 0]]),
        _shape([[0, 1, 0], [1, 1, 0], [0, 1, 0]]),
    ),
    TetrominoType.S: (
        _shape([[0, 1, 1], [1, 1, 0], [0, 0, 0]]),
        _shape([[0, 1, 0], [0, 1, 1], [0, 0, 1]]),
    ),
    TetrominoType.Z: (
        _shape([[1, 1, 0], [0, 1, 1], [0, 0, 0]]),
        _shape([[0, 0, 1], [0, 1, 1], [0, 1, 0]]),
    ),
    TetrominoType.J: (
        _shape([[1, 0, 0], [1, 1, 1], [0, 0, 0]]),
        _shape([[0, 1, 1], [0, 1, 0], [0, 1, 0]]),
        _shape([[0, 0, 0], [1, 1, 1], [0, 0, 1]]),
        _shape([[0, 1, 0], [0, 1, 0], [1, 1, 0]]),
    ),
    TetrominoType.L: (
        _shape([[0, 0, 1], [1, 1, 1], [0, 0, 0]]),
        _shape([[0, 1, 0], [0, 1, 0], [0, 1, 1]]),
        _shape([[0, 0, 0], [1, 1, 1], [1, 0, 0]]),
        _shape([[1, 1, 0], [0, 1, 0], [0, 1, 0]]),
    ),
}

COLORS: Dict[TetrominoType, str] = {
    TetrominoType.I: "#00f0f0",  # cyan
    TetrominoType.O: "#f0f000",  # yellow
    TetrominoType.T: "#a000f0",  # purple
    TetrominoType.S: "#00f000",  # green
    TetrominoType.Z: "#f00000",  # red
    TetrominoType.J: "#0000f0",  # blue
    TetrominoType.L: "#f0a000",  # orange
}


def _kind(kind: int) -> TetrominoType:
    try:
        return TetrominoType(kind)
    except ValueError:
        raise PreconditionError(f"unknown tetromino kind: {kind!r}") from None


def shapes_for(kind: TetrominoType) -> Tuple[Shape, ...]:
    return SHAPES[_kind(kind)]


def color_for(kind: TetrominoType) -> str:
    return COLORS[_kind(kind)]


def next_rotation_index(kind: TetrominoType, index: int) -> int:
    return (index + 1) % len(shapes_for(kind))


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    value = color.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


@dataclass(frozen=True)
class Piece:
    """Active piece: a catalog kind, a rotation index and the top-left of its box."""

    kind: TetrominoType
    rotation: int = 0
    x: int = 0
    y: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", _kind(self.kind))
        count = len(SHAPES[self.kind])
        if not 0 <= self.rotation < count:
            raise PreconditionError(
                f"rotation {self.rotation} out of range for {self.kind.name} ({count} states)"
            )

    @classmethod
    def spawn(cls, kind: TetrominoType, board_width: int = 10, spawn_y: int = 0) -> "Piece":
        shape = shapes_for(kind)[0]
        _, w = shape.shape
        return cls(kind=kind, rotation=0, x=board_width // 2 - w // 2, y=spawn_y)

    @property
    def shape(self) -> Shape:
        return SHAPES[self.kind][self.rotation]

    @property
    def color(self) -> str:
        return COLORS[self.kind]

    @property
    def position(self) -> Tuple[int, int]:
        return self.x, self.y

    def rotated(self) -> "Piece":
        return Piece(self.kind, next_rotation_index(self.kind, self.rotation), self.x, self.y)

    def moved(self, dx: int, dy: int) -> "Piece":
        return Piece(self.kind, self.rotation, self.x + dx, self.y + dy)

    def at(self, x: int, y: int) -> "Piece":
        return Piece(self.kind, self.rotation, x, y)

    def cells(self) -> List[Tuple[int, int]]:
        s = self.shape
        h, w = s.shape
        cells: List[Tuple[int, int]] = []
        for dy in range(h):
            for dx in range(w):
                if s[dy, dx]:
                    cells.append((self.x + dx, self.y + dy))
        return cells


PieceSource = Callable[[], TetrominoType]


class UniformPieceSource:
    """Uniform random choice over the seven kinds."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = random.Random(seed)

    def __call__(self) -> TetrominoType:
        return self.rng.choice(list(TetrominoType))


class ScriptedPieceSource:
    """Replays a fixed sequence of kinds, cycling when exhausted."""

    def __init__(self, kinds: Iterable[TetrominoType]) -> None:
        self.kinds: Sequence[TetrominoType] = [_kind(k) for k in kinds]
        if not self.kinds:
            raise PreconditionError("scripted piece source needs at least one kind")
        self.index = 0

    def __call__(self) -> TetrominoType:
        kind = self.kinds[self.index % len(self.kinds)]
        self.index += 1
        return kind
