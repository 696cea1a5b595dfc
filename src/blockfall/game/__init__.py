"""Game module for Blockfall.

Exports the core game engine and supporting classes:
- Board: Grid representation and row clearing
- Piece / PieceCatalog / TetrominoType: Pieces, shapes and random spawning
- collides: Placement check against walls, floor and locked cells
- ScoringRules: Line-clear scoring
- TickScheduler: Cancellable repeating tick source
- BlockfallGame: State machine driving descent, locking and game over
"""

from .grid import Board, EMPTY
from .pieces import Piece, PieceCatalog, TetrominoType, BASE_SHAPES, COLORS, rotate_shape
from .collision import collides
from .rules import ScoringRules
from .scheduler import RepeatingTask, TickScheduler
from .core import BlockfallGame, Command, GameConfig, GamePhase, GameSnapshot, GameState, LifecycleEvent

__all__ = [
    "Board",
    "EMPTY",
    "Piece",
    "PieceCatalog",
    "TetrominoType",
    "BASE_SHAPES",
    "COLORS",
    "rotate_shape",
    "collides",
    "ScoringRules",
    "RepeatingTask",
    "TickScheduler",
    "BlockfallGame",
    "Command",
    "GameConfig",
    "GamePhase",
    "GameSnapshot",
    "GameState",
    "LifecycleEvent",
]
