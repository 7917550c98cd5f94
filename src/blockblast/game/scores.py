from __future__ import annotations

import logging
from typing import Optional, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class BestScoreStore(Protocol):
    def load_best_score(self) -> int:
        ...

    def save_best_score(self, score: int) -> None:
        ...


class MemoryBestScoreStore:
    def __init__(self, initial: int = 0) -> None:
        self._best = int(initial)

    def load_best_score(self) -> int:
        return self._best

    def save_best_score(self, score: int) -> None:
        self._best = int(score)


class BestScoreTracker:
    """Keeps the best score seen so far and writes improvements to a store.

    The game engine only reports its running score; comparing against and
    persisting the best value is done here.
    """

    def __init__(self, store: BestScoreStore) -> None:
        self.store = store
        self._best: Optional[int] = None

    @property
    def best(self) -> int:
        if self._best is None:
            self._best = max(0, int(self.store.load_best_score()))
        return self._best

    def update(self, score: int) -> bool:
        """Persist ``score`` if it beats the current best; returns True when saved"""
        if score <= self.best:
            return False
        self._best = int(score)
        self.store.save_best_score(self._best)
        logger.debug("new best score %d", self._best)
        return True
