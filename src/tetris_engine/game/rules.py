from __future__ import annotations

from dataclasses import dataclass

from .errors import PreconditionError


@dataclass(frozen=True)
class ScoringRules:
    # Indexed by rows cleared in a single lock (0..4)
    line_clear_scores: tuple[int, int, int, int, int] = (0, 40, 100, 300, 1200)
    hard_drop_points_per_row: int = 2
    lines_per_level: int = 10
    base_interval_ms: int = 1000
    interval_step_ms: int = 50
    min_interval_ms: int = 50

    def score_for_lines(self, lines: int, level: int) -> int:
        if not 0 <= lines < len(self.line_clear_scores):
            raise PreconditionError(f"cannot score {lines} cleared rows")
        if level < 0:
            raise PreconditionError(f"level must be non-negative, got {level}")
        return self.line_clear_scores[lines] * (level + 1)

    def level_for_lines(self, lines: int) -> int:
        if lines < 0:
            raise PreconditionError(f"line count must be non-negative, got {lines}")
        return lines // self.lines_per_level

    def drop_interval_ms(self, level: int) -> int:
        if level < 0:
            raise PreconditionError(f"level must be non-negative, got {level}")
        return max(self.min_interval_ms, self.base_interval_ms - level * self.interval_step_ms)


DEFAULT_RULES = ScoringRules()


def calculate_score(lines: int, level: int) -> int:
    return DEFAULT_RULES.score_for_lines(lines, level)


def calculate_level(lines: int) -> int:
    return DEFAULT_RULES.level_for_lines(lines)


def get_drop_speed(level: int) -> int:
    return DEFAULT_RULES.drop_interval_ms(level)
