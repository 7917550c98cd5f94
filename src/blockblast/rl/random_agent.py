from __future__ import annotations

import argparse
from typing import Dict, List, Optional

import gymnasium as gym
import numpy as np

import blockblast.env  # noqa: F401
from blockblast.game import BestScoreTracker, MemoryBestScoreStore
from blockblast.utils.logging import LEVELS, setup_logger


def play_random_game(env: gym.Env, rng: np.random.Generator, seed: Optional[int] = None) -> Dict[str, float]:
    """Play one episode choosing uniformly among legal actions"""
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    clears = 0
    steps = 0
    while True:
        valid = np.argwhere(info["action_mask"])
        if valid.shape[0] == 0:
            break
        action = valid[int(rng.integers(valid.shape[0]))]
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        steps += 1
        if info.get("clear") is not None:
            clears += 1
        if terminated or truncated:
            break
    return {"score": int(info["score"]), "reward": total_reward, "steps": steps, "clears": clears}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Block Blast with a random legal-move agent")
    p.add_argument("--games", type=int, default=10)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--max-steps", type=int, default=10000)
    p.add_argument("--log-level", choices=LEVELS, default="info")
    p.add_argument("--no-rich", action="store_true")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    log = setup_logger(use_rich=not args.no_rich, level=args.log_level)

    env = gym.make("BlockBlast-8x8-v0", max_steps=args.max_steps)
    rng = np.random.default_rng(args.seed)
    tracker = BestScoreTracker(MemoryBestScoreStore())
    scores: List[int] = []
    try:
        for game_idx in range(args.games):
            seed = None if args.seed is None else args.seed + game_idx
            result = play_random_game(env, rng, seed=seed)
            scores.append(int(result["score"]))
            improved = tracker.update(int(result["score"]))
            log.info(
                "game %d: score=%d steps=%d clears=%d%s",
                game_idx + 1,
                result["score"],
                result["steps"],
                result["clears"],
                " (new best)" if improved else "",
            )
    finally:
        env.close()

    if scores:
        print(f"Random agent over {len(scores)} games: mean={np.mean(scores):.1f} best={tracker.best}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
