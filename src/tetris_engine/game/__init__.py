"""Game module for the falling-block engine.

Exports the core game engine and supporting classes:
- GameGrid: Immutable board with placement checks and row clearing
- Piece: Active tetromino with rotation tables and spawn rules
- TetrominoType: Enum of the seven piece kinds
- ScoringRules: Score table, level curve and gravity speed
- GameState: Immutable snapshot; transitions live in ``core``
- GravityClock: Converts elapsed time into due gravity ticks
- TetrisGame: Stateful session dispatching Action intents
"""

from . import core
from .clock import GravityClock
from .core import GameState, GameStats
from .errors import PreconditionError
from .grid import GameGrid
from .pieces import (
    Piece,
    PieceSource,
    ScriptedPieceSource,
    TetrominoType,
    UniformPieceSource,
    color_for,
    next_rotation_index,
    shapes_for,
)
from .rules import ScoringRules, calculate_level, calculate_score, get_drop_speed
from .session import Action, GameConfig, TetrisGame

__all__ = [
    "core",
    "GravityClock",
    "GameState",
    "GameStats",
    "PreconditionError",
    "GameGrid",
    "Piece",
    "PieceSource",
    "ScriptedPieceSource",
    "TetrominoType",
    "UniformPieceSource",
    "color_for",
    "next_rotation_index",
    "shapes_for",
    "ScoringRules",
    "calculate_level",
    "calculate_score",
    "get_drop_speed",
    "Action",
    "GameConfig",
    "TetrisGame",
]
