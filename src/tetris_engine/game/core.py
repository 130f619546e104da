"""Pure state transitions of the falling-block engine.

Every function takes a :class:`GameState` and returns a :class:`GameState`.
A rejected intent (moving into a wall, rotating with no room, acting while
paused) returns the very same object it was given, so callers can detect a
no-op with ``new is old``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

import numpy as np

from .errors import PreconditionError
from .grid import GameGrid
from .pieces import Piece, PieceSource
from .rules import DEFAULT_RULES, ScoringRules


# Offsets tried in order when a rotation does not fit in place
WALL_KICKS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, -1), (2, 0), (-2, 0))


@dataclass(frozen=True)
class GameStats:
    score: int
    level: int
    lines: int


@dataclass(frozen=True)
class GameState:
    grid: GameGrid = field(default_factory=GameGrid.empty)
    current_piece: Optional[Piece] = None
    next_piece: Optional[Piece] = None
    score: int = 0
    level: int = 0
    lines: int = 0
    is_game_over: bool = False
    is_paused: bool = False
    is_started: bool = False

    def __post_init__(self) -> None:
        for name in ("score", "level", "lines"):
            if getattr(self, name) < 0:
                raise PreconditionError(f"{name} must be non-negative, got {getattr(self, name)}")

    @property
    def accepts_intents(self) -> bool:
        return self.current_piece is not None and not self.is_game_over and not self.is_paused

    def stats(self) -> GameStats:
        return GameStats(score=self.score, level=self.level, lines=self.lines)

    def render_grid(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        if self.current_piece is not None and not self.is_game_over:
            for x, y in self.current_piece.cells():
                if self.grid.is_inside(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -int(self.current_piece.kind)
        return state


def new_game_state(width: int = 10, height: int = 20) -> GameState:
    return GameState(grid=GameGrid.empty(width, height))


def start(state: GameState, source: PieceSource, spawn_y: int = 0) -> GameState:
    width, height = state.grid.width, state.grid.height
    current = Piece.spawn(source(), width, spawn_y)
    upcoming = Piece.spawn(source(), width, spawn_y)
    return GameState(
        grid=GameGrid.empty(width, height),
        current_piece=current,
        next_piece=upcoming,
        is_started=True,
    )


def reset(state: GameState, source: PieceSource, spawn_y: int = 0) -> GameState:
    return start(state, source, spawn_y)


def _fits(grid: GameGrid, piece: Piece) -> bool:
    return grid.is_valid_placement(piece.shape, piece.x, piece.y)


def move(state: GameState, dx: int, dy: int) -> GameState:
    if not state.accepts_intents:
        return state
    assert state.current_piece is not None
    candidate = state.current_piece.moved(dx, dy)
    if _fits(state.grid, candidate):
        return replace(state, current_piece=candidate)
    return state


def move_left(state: GameState) -> GameState:
    return move(state, -1, 0)


def move_right(state: GameState) -> GameState:
    return move(state, 1, 0)


def soft_drop(state: GameState) -> GameState:
    return move(state, 0, 1)


def rotate(state: GameState) -> GameState:
    if not state.accepts_intents:
        return state
    assert state.current_piece is not None
    rotated = state.current_piece.rotated()
    for dx, dy in ((0, 0),) + WALL_KICKS:
        candidate = rotated.moved(dx, dy)
        if _fits(state.grid, candidate):
            return replace(state, current_piece=candidate)
    return state


def hard_drop(state: GameState, rules: ScoringRules = DEFAULT_RULES) -> GameState:
    """Slide the piece to its landing row and award the drop bonus.

    The piece is not locked here; the next :func:`tick` finds it resting and
    locks it.
    """
    if not state.accepts_intents:
        return state
    piece = state.current_piece
    assert piece is not None
    landing_y = state.grid.ghost_y(piece.shape, piece.x, piece.y)
    distance = landing_y - piece.y
    if distance == 0:
        return state
    return replace(
        state,
        current_piece=piece.at(piece.x, landing_y),
        score=state.score + distance * rules.hard_drop_points_per_row,
    )


def lock(
    state: GameState,
    source: PieceSource,
    rules: ScoringRules = DEFAULT_RULES,
    spawn_y: int = 0,
) -> GameState:
    """Stamp the current piece, clear rows, score, and promote the next piece."""
    if not state.accepts_intents:
        return state
    piece = state.current_piece
    assert piece is not None
    stamped = state.grid.place_shape(piece.shape, piece.x, piece.y, int(piece.kind))
    grid, cleared = stamped.clear_completed_rows()
    lines = state.lines + cleared
    level = rules.level_for_lines(lines)
    # Line clears are paid at the level the piece was played on
    score = state.score + rules.score_for_lines(cleared, state.level)

    promoted = state.next_piece
    if promoted is None or not _fits(grid, promoted):
        return replace(
            state,
            grid=grid,
            current_piece=None,
            next_piece=None,
            score=score,
            level=level,
            lines=lines,
            is_game_over=True,
        )
    return replace(
        state,
        grid=grid,
        current_piece=promoted,
        next_piece=Piece.spawn(source(), grid.width, spawn_y),
        score=score,
        level=level,
        lines=lines,
    )


def tick(
    state: GameState,
    source: PieceSource,
    rules: ScoringRules = DEFAULT_RULES,
    spawn_y: int = 0,
) -> GameState:
    if not state.accepts_intents:
        return state
    fallen = move(state, 0, 1)
    if fallen is not state:
        return fallen
    return lock(state, source, rules, spawn_y)


def toggle_pause(state: GameState) -> GameState:
    # Pausing means nothing before the first piece or after the last one
    if state.is_game_over or not state.is_started:
        return state
    return replace(state, is_paused=not state.is_paused)


def ghost_piece(state: GameState) -> Optional[Piece]:
    piece = state.current_piece
    if piece is None:
        return None
    return piece.at(piece.x, state.grid.ghost_y(piece.shape, piece.x, piece.y))


def drop_interval_ms(state: GameState, rules: ScoringRules = DEFAULT_RULES) -> int:
    return rules.drop_interval_ms(state.level)
