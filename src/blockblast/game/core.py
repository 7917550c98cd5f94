from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .board import Board
from .rules import ClearEvent, ScoringRules, can_place, detect_full_lines, is_game_over, valid_placements
from .shapes import Shape, ShapeCatalog


logger = logging.getLogger(__name__)

ClearListener = Callable[[ClearEvent], None]
GameOverListener = Callable[["GameSession"], None]


@dataclass
class GameConfig:
    """Configuration for the block blast engine"""
    grid_size: int = 8
    tray_size: int = 3
    placement_points: int = 1
    line_clear_points: int = 10
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.grid_size < 1:
            raise ValueError(f"grid_size must be >= 1, got {self.grid_size}")
        if self.tray_size < 1:
            raise ValueError(f"tray_size must be >= 1, got {self.tray_size}")


@dataclass
class GameSession:
    board: Board
    tray: List[Shape] = field(default_factory=list)
    score: int = 0
    is_over: bool = False
    shapes_placed: int = 0
    lines_cleared: int = 0

    def find_shape(self, shape_id: str) -> Optional[Shape]:
        for shape in self.tray:
            if shape.id == shape_id:
                return shape
        return None


class BlockBlastGame:
    """Owns the session and is its only mutator.

    Every state change goes through ``place_shape`` or ``reset``. A rejected
    placement leaves board, tray and score untouched.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        catalog: Optional[ShapeCatalog] = None,
        rules: Optional[ScoringRules] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.catalog = catalog or ShapeCatalog(seed=self.config.random_seed)
        self.rules = rules or ScoringRules.from_config(self.config)
        self.last_clear: Optional[ClearEvent] = None
        self._clear_listeners: List[ClearListener] = []
        self._game_over_listeners: List[GameOverListener] = []
        self.session = self._new_session()

    def _new_session(self) -> GameSession:
        session = GameSession(board=Board(self.config.grid_size), tray=self.catalog.sample(self.config.tray_size))
        # A starting tray may already have nothing that fits on a small board.
        session.is_over = is_game_over(session.board, session.tray)
        if session.is_over:
            logger.info("game over at start: no tray shape fits a %dx%d board", session.board.size, session.board.size)
        return session

    # Read-only views
    @property
    def board(self) -> Board:
        return self.session.board

    @property
    def tray(self) -> Tuple[Shape, ...]:
        return tuple(self.session.tray)

    @property
    def score(self) -> int:
        return self.session.score

    @property
    def is_over(self) -> bool:
        return self.session.is_over

    def add_clear_listener(self, listener: ClearListener) -> None:
        self._clear_listeners.append(listener)

    def add_game_over_listener(self, listener: GameOverListener) -> None:
        self._game_over_listeners.append(listener)

    def can_place(self, shape: Shape, row: int, col: int) -> bool:
        """Legality preview against the live board"""
        return can_place(self.session.board, shape, row, col)

    def check_game_over(self) -> bool:
        return is_game_over(self.session.board, self.session.tray)

    def place_shape(self, shape: Shape, row: int, col: int) -> bool:
        session = self.session
        if session.is_over:
            logger.debug("rejecting %s: session is over", shape.id)
            return False
        tray_shape = session.find_shape(shape.id)
        if tray_shape is None:
            logger.debug("rejecting %s: not in tray", shape.id)
            return False
        if not can_place(session.board, tray_shape, row, col):
            logger.debug("rejecting %s at (%d, %d): illegal placement", shape.id, row, col)
            return False

        board = session.board.clone()
        cells_placed = board.place(tray_shape, row, col)
        rows, cols = detect_full_lines(board)
        combo = len(rows) + len(cols)
        base, bonus = self.rules.score_for_placement(cells_placed, combo)
        event: Optional[ClearEvent] = None
        if combo > 0:
            event = ClearEvent(rows=rows, cols=cols, color=tray_shape.color, combo=combo, score=bonus)
            board.clear_cells(rows, cols)
            logger.debug("cleared rows=%s cols=%s combo=%d", rows, cols, combo)

        # Commit
        session.board = board
        session.score += base + bonus
        session.shapes_placed += 1
        session.lines_cleared += combo
        session.tray = [s for s in session.tray if s.id != tray_shape.id]
        if not session.tray:
            session.tray = self.catalog.sample(self.config.tray_size)
            logger.debug("tray refilled: %s", [s.id for s in session.tray])
        self.last_clear = event

        if is_game_over(session.board, session.tray):
            session.is_over = True
            logger.info("game over: score=%d shapes_placed=%d", session.score, session.shapes_placed)

        if event is not None:
            for listener in list(self._clear_listeners):
                listener(event)
        if session.is_over:
            for over_listener in list(self._game_over_listeners):
                over_listener(session)
        return True

    def get_valid_actions(self) -> List[Tuple[int, int, int]]:
        """List of (slot, row, col) legal placements for the current tray"""
        if self.session.is_over:
            return []
        actions: List[Tuple[int, int, int]] = []
        for slot, shape in enumerate(self.session.tray):
            for row, col in valid_placements(self.session.board, shape):
                actions.append((slot, row, col))
        return actions

    def get_state(self) -> Dict[str, Any]:
        session = self.session
        return {
            "grid": session.board.grid.copy(),
            "tray": [int(s.kind) for s in session.tray],
            "tray_ids": [s.id for s in session.tray],
            "score": session.score,
            "is_over": session.is_over,
            "filled_ratio": session.board.get_filled_ratio(),
        }

    def get_game_stats(self) -> Dict[str, Any]:
        session = self.session
        placed = session.shapes_placed
        return {
            "final_score": session.score,
            "shapes_placed": placed,
            "lines_cleared": session.lines_cleared,
            "final_fill_ratio": session.board.get_filled_ratio(),
            "avg_score_per_shape": session.score / max(1, placed),
            "avg_lines_per_shape": session.lines_cleared / max(1, placed),
        }

    def reset(self) -> None:
        self.session = self._new_session()
        self.last_clear = None
        logger.info("game reset")

