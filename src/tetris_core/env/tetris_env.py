from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_core.game import Action, GameConfig, TetrisGame, TetrominoType, is_valid, rotate

# Agent action index -> engine action. START and TOGGLE_PAUSE stay with the env.
AGENT_ACTIONS: Tuple[Action, ...] = (
    Action.LEFT,
    Action.RIGHT,
    Action.ROTATE,
    Action.SOFT_DROP,
    Action.HARD_DROP,
    Action.NONE,
)


def _compute_action_mask(game: TetrisGame) -> np.ndarray:
    mask = np.zeros((len(AGENT_ACTIONS),), dtype=np.bool_)
    if not game.running:
        return mask
    piece = game.current_piece
    mask[AGENT_ACTIONS.index(Action.LEFT)] = is_valid(game.board, piece.moved(-1, 0))
    mask[AGENT_ACTIONS.index(Action.RIGHT)] = is_valid(game.board, piece.moved(1, 0))
    mask[AGENT_ACTIONS.index(Action.ROTATE)] = is_valid(game.board, rotate(piece))
    mask[AGENT_ACTIONS.index(Action.SOFT_DROP)] = True
    mask[AGENT_ACTIONS.index(Action.HARD_DROP)] = True
    mask[AGENT_ACTIONS.index(Action.NONE)] = True
    return mask


class TetrisEnv(gym.Env):
    """One engine action per step; gravity is left to the agent's SOFT_DROP.

    Reward is the engine score gained by the step, scaled by ``score_scale``,
    plus the optional step and terminal penalties.
    """

    metadata = {"render_modes": []}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        max_episode_steps: int = 10000,
        score_scale: float = 1.0,
        step_penalty: float = 0.0,
        terminal_penalty: float = 0.0,
    ) -> None:
        super().__init__()
        self.game = TetrisGame(config)
        self.max_episode_steps = int(max_episode_steps)
        self.score_scale = float(score_scale)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)

        h, w = self.game.config.height, self.game.config.width
        n_kinds = len(TetrominoType)

        # Observation: locked tokens (positive) with the falling piece overlaid (negative)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-n_kinds, high=n_kinds, shape=(h, w), dtype=np.int8),
                "next": spaces.Discrete(n_kinds + 1),
            }
        )
        self.action_space = spaces.Discrete(len(AGENT_ACTIONS))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        next_piece = self.game.next_piece
        return {
            "board": self.game.get_state().astype(np.int8),
            "next": int(next_piece.kind) if next_piece is not None else 0,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "score": self.game.score,
            "lines_cleared_total": self.game.lines_cleared_total,
            "max_height": self.game.board.get_max_height(),
            "holes": self.game.board.count_holes(),
            "steps": self._steps,
        }

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.game)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.rng.seed(seed)
        self.game.start()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        engine_action = AGENT_ACTIONS[int(action)]
        score_before = self.game.score
        self.game.step(engine_action)
        self._steps += 1

        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps

        reward = self.score_scale * float(self.game.score - score_before) + self.step_penalty
        if terminated:
            reward += self.terminal_penalty

        info = self._get_info()
        info["engine_action"] = engine_action
        return self._get_obs(), reward, terminated, truncated, info

    def close(self) -> None:
        pass
