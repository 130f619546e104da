from __future__ import annotations

import numpy as np
import pytest

from tetris_engine.game import (
    Piece,
    PreconditionError,
    ScriptedPieceSource,
    TetrominoType,
    UniformPieceSource,
    color_for,
    next_rotation_index,
    shapes_for,
)


@pytest.mark.parametrize(
    "kind, states",
    [
        (TetrominoType.I, 2),
        (TetrominoType.O, 1),
        (TetrominoType.T, 4),
        (TetrominoType.S, 2),
        (TetrominoType.Z, 2),
        (TetrominoType.J, 4),
        (TetrominoType.L, 4),
    ],
)
def test_rotation_state_counts(kind, states):
    shapes = shapes_for(kind)
    assert len(shapes) == states
    # same bounding box in every orientation, four blocks each
    assert len({s.shape for s in shapes}) == 1
    assert all(int(s.sum()) == 4 for s in shapes)


def test_rotation_states_are_distinct():
    for kind in TetrominoType:
        shapes = shapes_for(kind)
        for i, a in enumerate(shapes):
            for b in shapes[i + 1 :]:
                assert not np.array_equal(a, b)


def test_next_rotation_index_wraps():
    assert next_rotation_index(TetrominoType.T, 3) == 0
    assert next_rotation_index(TetrominoType.I, 1) == 0
    assert next_rotation_index(TetrominoType.O, 0) == 0
    assert next_rotation_index(TetrominoType.J, 1) == 2


def test_shapes_are_read_only():
    with pytest.raises(ValueError):
        shapes_for(TetrominoType.T)[0][0, 0] = 1


def test_colors():
    assert color_for(TetrominoType.I) == "#00f0f0"
    assert color_for(TetrominoType.L) == "#f0a000"
    assert Piece.spawn(TetrominoType.T).color == "#a000f0"


def test_unknown_kind_is_a_precondition_error():
    with pytest.raises(PreconditionError):
        shapes_for(9)
    with pytest.raises(PreconditionError):
        Piece(kind=0)


def test_rotation_out_of_range_is_rejected():
    with pytest.raises(PreconditionError):
        Piece(TetrominoType.O, rotation=1)


@pytest.mark.parametrize(
    "kind, x",
    [
        (TetrominoType.I, 3),
        (TetrominoType.O, 4),
        (TetrominoType.T, 4),
        (TetrominoType.S, 4),
        (TetrominoType.L, 4),
    ],
)
def test_spawn_centres_with_left_bias(kind, x):
    piece = Piece.spawn(kind)
    assert piece.position == (x, 0)
    assert piece.rotation == 0


def test_spawn_on_narrower_board():
    assert Piece.spawn(TetrominoType.T, board_width=7).x == 2


def test_moved_and_rotated_return_new_pieces():
    piece = Piece.spawn(TetrominoType.T)
    moved = piece.moved(-2, 3)
    assert moved.position == (2, 3)
    assert piece.position == (4, 0)

    rotated = piece.rotated()
    assert rotated.rotation == 1
    assert rotated.position == piece.position
    assert piece.rotation == 0


def test_cells_are_absolute():
    piece = Piece(TetrominoType.O, x=3, y=-1)
    assert sorted(piece.cells()) == [(3, -1), (3, 0), (4, -1), (4, 0)]


def test_uniform_source_is_reproducible():
    a = UniformPieceSource(seed=7)
    b = UniformPieceSource(seed=7)
    assert [a() for _ in range(20)] == [b() for _ in range(20)]


def test_uniform_source_covers_every_kind():
    source = UniformPieceSource(seed=1)
    assert {source() for _ in range(500)} == set(TetrominoType)


def test_scripted_source_cycles():
    source = ScriptedPieceSource([TetrominoType.I, TetrominoType.Z])
    assert [source() for _ in range(5)] == [
        TetrominoType.I,
        TetrominoType.Z,
        TetrominoType.I,
        TetrominoType.Z,
        TetrominoType.I,
    ]


def test_scripted_source_needs_kinds():
    with pytest.raises(PreconditionError):
        ScriptedPieceSource([])
