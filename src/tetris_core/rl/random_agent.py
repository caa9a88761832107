from __future__ import annotations

import argparse
import random
import sys
from typing import Optional

import gymnasium as gym
import numpy as np
from loguru import logger

import tetris_core.env  # noqa: F401


def run_random(steps: int = 200, seed: Optional[int] = None) -> float:
    env = gym.make("Tetris-10x20-v0")
    rng = random.Random(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        # Prefer actions that change the piece
        valid = np.flatnonzero(info["action_mask"]).tolist()
        action = rng.choice(valid) if valid else int(env.action_space.sample())
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            logger.info(f"Episode {episodes} finished: score={info['score']} lines={info['lines_cleared_total']}")
            obs, info = env.reset()
    env.close()
    logger.info(f"Random agent total reward: {total_reward:.2f} over {steps} steps")
    return total_reward


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Tetris-10x20-v0 with uniformly random actions")
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", type=str, default="INFO",
                   help="Loguru level for stderr output (TRACE shows every lock)")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())
    logger.enable("tetris_core")
    run_random(args.steps, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
