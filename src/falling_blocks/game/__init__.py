"""Game module for Falling Blocks.

Exports the core game engine and supporting classes:
- GameGrid: Grid representation, collision, merging and line clearing
- Piece: Tetromino piece with rotation transforms
- TetrominoType: Enum of available piece types
- ScoringRules: Points awarded per cleared row
- Key, KeyPress, Quit: Input events the engine understands
- FallingBlocksGame: Phase/tick state machine
"""

from .grid import CellState, GameGrid
from .pieces import Piece, TetrominoType, rotate_ccw, rotate_cw
from .rules import ScoringRules
from .events import InputEvent, Key, KeyPress, Quit
from .core import FallingBlocksGame, GameConfig, GameSnapshot, Phase

__all__ = [
    "CellState",
    "GameGrid",
    "Piece",
    "TetrominoType",
    "rotate_cw",
    "rotate_ccw",
    "ScoringRules",
    "InputEvent",
    "Key",
    "KeyPress",
    "Quit",
    "FallingBlocksGame",
    "GameConfig",
    "GameSnapshot",
    "Phase",
]
