from __future__ import annotations

from typing import Optional, Sequence

import pytest

from tetris_engine.game import GameGrid, GameState, Piece, ScriptedPieceSource, TetrominoType


def make_state(
    rows: Sequence[str] = (),
    current: Optional[Piece] = None,
    upcoming: Optional[Piece] = None,
    **counters,
) -> GameState:
    """A started game on a 10x20 board whose bottom rows are ``rows``."""
    grid = GameGrid.from_rows(list(rows), height=20) if rows else GameGrid.empty(10, 20)
    if upcoming is None:
        upcoming = Piece.spawn(TetrominoType.O)
    return GameState(grid=grid, current_piece=current, next_piece=upcoming, is_started=True, **counters)


@pytest.fixture
def o_source() -> ScriptedPieceSource:
    return ScriptedPieceSource([TetrominoType.O])
