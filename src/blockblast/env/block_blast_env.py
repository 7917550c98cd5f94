from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from blockblast.game import BlockBlastGame, GameConfig, ShapeType


def _compute_action_mask(game: BlockBlastGame) -> np.ndarray:
    size = game.config.grid_size
    k = game.config.tray_size
    mask = np.zeros((k, size, size), dtype=np.bool_)
    for slot, row, col in game.get_valid_actions():
        if 0 <= slot < k:
            mask[slot, row, col] = True
    return mask


class BlockBlastEnv(gym.Env):
    """Place tray shapes on the board; reward is the engine's score delta.

    Action: (tray slot, row, col). Slots index the current tray, which
    shrinks as shapes are placed and refills once empty.
    """

    metadata = {"render_modes": []}

    def __init__(self, config: Optional[GameConfig] = None,
                 invalid_action_penalty: float = -1.0,
                 score_scale: float = 1.0,
                 max_steps: int = 10000) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.game = BlockBlastGame(self.config)
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.score_scale = float(score_scale)
        self.max_steps = int(max_steps)

        size = self.config.grid_size
        k = self.config.tray_size

        # Observation space: grid (0 empty, color otherwise) and tray kinds (-1 for empty slot)
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=7, shape=(size, size), dtype=np.int8),
                "pieces": spaces.Box(low=-1, high=len(ShapeType) - 1, shape=(k,), dtype=np.int8),
                "pieces_remaining": spaces.Discrete(k + 1),
            }
        )

        self.action_space = spaces.MultiDiscrete((k, size, size))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        k = self.config.tray_size
        pieces = np.full((k,), -1, dtype=np.int8)
        for i, shape in enumerate(self.game.session.tray[:k]):
            pieces[i] = int(shape.kind)
        return {
            "grid": self.game.board.grid.astype(np.int8),
            "pieces": pieces,
            "pieces_remaining": len(self.game.session.tray),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "score": self.game.score,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.catalog.reseed(seed)
        self.game.reset()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.game)

    def step(self, action: np.ndarray | Tuple[int, int, int]):
        slot, row, col = map(int, action)

        success = False
        before = self.game.score
        if 0 <= slot < len(self.game.session.tray):
            shape = self.game.session.tray[slot]
            success = self.game.place_shape(shape, row, col)
        delta = self.game.score - before

        if success:
            reward = self.score_scale * float(delta)
        else:
            reward = self.invalid_action_penalty

        self._steps += 1
        terminated = bool(self.game.is_over)
        truncated = not terminated and self._steps >= self.max_steps

        info = self._get_info()
        info["success"] = success
        info["score_delta"] = delta
        info["clear"] = self.game.last_clear if success else None
        return self._get_obs(), reward, terminated, truncated, info

    def close(self) -> None:
        pass
