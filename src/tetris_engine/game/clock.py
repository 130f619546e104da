from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .errors import PreconditionError
from .rules import DEFAULT_RULES, ScoringRules

if TYPE_CHECKING:
    from .core import GameState


class GravityClock:
    """Turns elapsed wall time into a number of due gravity ticks.

    The clock is re-armed whenever the level changes and is suspended (its
    accumulated time discarded) while the game is paused, over or not yet
    started. It never calls the engine itself.
    """

    def __init__(self) -> None:
        self.interval_ms: Optional[int] = None
        self.armed_level: Optional[int] = None
        self.elapsed_ms = 0

    def reset(self) -> None:
        self.interval_ms = None
        self.armed_level = None
        self.elapsed_ms = 0

    def arm(self, level: int, rules: ScoringRules = DEFAULT_RULES) -> None:
        self.interval_ms = rules.drop_interval_ms(level)
        self.armed_level = level
        self.elapsed_ms = 0

    @staticmethod
    def is_running(state: "GameState") -> bool:
        return state.is_started and state.accepts_intents

    def advance(self, state: "GameState", elapsed_ms: int, rules: ScoringRules = DEFAULT_RULES) -> int:
        if elapsed_ms < 0:
            raise PreconditionError(f"elapsed time must be non-negative, got {elapsed_ms}")
        if not self.is_running(state):
            self.elapsed_ms = 0
            return 0
        if self.armed_level != state.level or self.interval_ms is None:
            self.arm(state.level, rules)
        assert self.interval_ms is not None
        self.elapsed_ms += int(elapsed_ms)
        due, self.elapsed_ms = divmod(self.elapsed_ms, self.interval_ms)
        return due
