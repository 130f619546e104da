from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_engine.game import Action, GameConfig, PieceSource, ScoringRules, TetrisGame, TetrominoType
from tetris_engine.game.pieces import COLORS, hex_to_rgb

logger = logging.getLogger(__name__)

# Pausing is a human affordance; agents never get it
AGENT_ACTIONS: Tuple[Action, ...] = tuple(a for a in Action if a != Action.PAUSE)

_EMPTY_RGB = (30, 30, 36)


class TetrisEnv(gym.Env):
    """One step applies an intent and then one gravity tick.

    Observation: ``board`` holds settled cells as tetromino values and the
    falling piece as negative values; ``next_piece`` is the upcoming kind
    (0 once the game is over). Reward is the engine score delta.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        rules: Optional[ScoringRules] = None,
        piece_source: Optional[PieceSource] = None,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        self.game = TetrisGame(config, rules=rules, piece_source=piece_source, autostart=False)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self._use_injected_source = piece_source is not None

        height, width = self.game.config.height, self.game.config.width
        top = int(max(TetrominoType))
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-top, high=top, shape=(height, width), dtype=np.int8),
                "next_piece": spaces.Discrete(top + 1),
            }
        )
        self.action_space = spaces.Discrete(len(AGENT_ACTIONS))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        state = self.game.state
        nxt = state.next_piece
        return {
            "board": state.render_grid().astype(np.int8),
            "next_piece": int(nxt.kind) if nxt is not None else 0,
        }

    def _get_info(self) -> Dict[str, Any]:
        state = self.game.state
        return {
            "score": state.score,
            "level": state.level,
            "lines": state.lines,
            "steps": self._steps,
            "drop_interval_ms": self.game.drop_interval_ms,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        # An injected source is kept as-is so scripted episodes stay reproducible
        self.game.reset(None if self._use_injected_source else seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        if not self.action_space.contains(int(action)):
            raise ValueError(f"invalid action {action!r} for {self.action_space}")
        before = self.game.score

        self.game.step(AGENT_ACTIONS[int(action)])
        self.game.tick()
        self._steps += 1

        terminated = bool(self.game.game_over)
        truncated = not terminated and self._steps >= self.max_episode_steps
        reward = float(self.game.score - before)
        if terminated:
            logger.debug("episode over after %d steps, score %d", self._steps, self.game.score)
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            # human rendering delegated to the pygame front-end; noop
            return None
        board = self.game.state.render_grid()
        cell = 12
        h, w = board.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                v = int(board[y, x])
                color = hex_to_rgb(COLORS[TetrominoType(abs(v))]) if v else _EMPTY_RGB
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass
