"""Block Blast: an 8x8 block placement puzzle engine with a gymnasium front end."""

from .game import BlockBlastGame, ClearEvent, GameConfig

__version__ = "0.1.0"

__all__ = ["BlockBlastGame", "ClearEvent", "GameConfig", "__version__"]
