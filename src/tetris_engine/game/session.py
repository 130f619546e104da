from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

import numpy as np

from . import core
from .clock import GravityClock
from .core import GameState
from .errors import PreconditionError
from .pieces import PieceSource, UniformPieceSource
from .rules import ScoringRules

logger = logging.getLogger(__name__)


class Action(IntEnum):
    NONE = 0
    LEFT = 1
    RIGHT = 2
    ROTATE = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    PAUSE = 6


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_y: int = 0


class TetrisGame:
    """Holds the current snapshot and serialises intents and gravity into it.

    Callers sharing one game across threads must guard it themselves.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        piece_source: Optional[PieceSource] = None,
        autostart: bool = True,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.piece_source: PieceSource = piece_source or UniformPieceSource(self.config.random_seed)
        self.clock = GravityClock()
        self.state = core.new_game_state(self.config.width, self.config.height)
        if autostart:
            self.start()

    def start(self) -> GameState:
        self.clock.reset()
        self.state = core.start(self.state, self.piece_source, self.config.spawn_y)
        logger.debug(
            "game started: current=%s next=%s",
            self.state.current_piece.kind.name if self.state.current_piece else None,
            self.state.next_piece.kind.name if self.state.next_piece else None,
        )
        return self.state

    def reset(self, seed: Optional[int] = None) -> GameState:
        if seed is not None:
            self.piece_source = UniformPieceSource(seed)
        return self.start()

    def step(self, action: Action) -> GameState:
        try:
            action = Action(action)
        except ValueError:
            raise PreconditionError(f"unknown action: {action!r}") from None

        state = self.state
        if action == Action.LEFT:
            new = core.move_left(state)
        elif action == Action.RIGHT:
            new = core.move_right(state)
        elif action == Action.ROTATE:
            new = core.rotate(state)
        elif action == Action.SOFT_DROP:
            new = core.soft_drop(state)
        elif action == Action.HARD_DROP:
            new = core.hard_drop(state, self.rules)
        elif action == Action.PAUSE:
            new = core.toggle_pause(state)
        else:
            new = state
        return self._commit(new)

    def move(self, dx: int, dy: int) -> GameState:
        return self._commit(core.move(self.state, dx, dy))

    def tick(self) -> GameState:
        return self._commit(core.tick(self.state, self.piece_source, self.rules, self.config.spawn_y))

    def update(self, elapsed_ms: int) -> GameState:
        """Advance the gravity clock and run every tick that came due."""
        for _ in range(self.clock.advance(self.state, elapsed_ms, self.rules)):
            self.tick()
        return self.state

    def _commit(self, new: GameState) -> GameState:
        prev = self.state
        if new is not prev:
            if new.current_piece is not None and new.next_piece is not prev.next_piece:
                logger.debug("locked %s, next %s", prev.current_piece.kind.name if prev.current_piece else None,
                             new.next_piece.kind.name if new.next_piece else None)
            if new.lines != prev.lines:
                logger.debug("cleared %d rows (total %d)", new.lines - prev.lines, new.lines)
            if new.level != prev.level:
                logger.debug("level %d -> %d, gravity every %d ms", prev.level, new.level,
                             self.rules.drop_interval_ms(new.level))
            if new.is_game_over and not prev.is_game_over:
                logger.info("game over: score=%d level=%d lines=%d", new.score, new.level, new.lines)
        self.state = new
        return new

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def level(self) -> int:
        return self.state.level

    @property
    def lines(self) -> int:
        return self.state.lines

    @property
    def game_over(self) -> bool:
        return self.state.is_game_over

    @property
    def paused(self) -> bool:
        return self.state.is_paused

    @property
    def drop_interval_ms(self) -> int:
        return core.drop_interval_ms(self.state, self.rules)

    def get_state(self) -> np.ndarray:
        return self.state.render_grid()
