"""Game module for Block Blast.

Exports the engine and supporting classes:
- Board: Square grid of color-tagged cells
- Shape, ShapeCatalog: Pre-oriented polyominoes and the tray sampler
- can_place, detect_full_lines, is_game_over: Placement and line rules
- ScoringRules, ClearEvent: Scoring configuration and clear outcomes
- BlockBlastGame: Session owner and the only state mutator
"""

from .board import Board
from .shapes import COLOR_HEX, SHAPE_TEMPLATES, Color, Shape, ShapeCatalog, ShapeTemplate, ShapeType
from .rules import ClearEvent, ScoringRules, can_place, detect_full_lines, is_game_over, valid_placements
from .core import BlockBlastGame, GameConfig, GameSession
from .scores import BestScoreStore, BestScoreTracker, MemoryBestScoreStore

__all__ = [
    "Board",
    "COLOR_HEX",
    "SHAPE_TEMPLATES",
    "Color",
    "Shape",
    "ShapeCatalog",
    "ShapeTemplate",
    "ShapeType",
    "ClearEvent",
    "ScoringRules",
    "can_place",
    "detect_full_lines",
    "is_game_over",
    "valid_placements",
    "BlockBlastGame",
    "GameConfig",
    "GameSession",
    "BestScoreStore",
    "BestScoreTracker",
    "MemoryBestScoreStore",
]
