from __future__ import annotations

import random
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import CellState, FallingBlocksGame, GameConfig, Phase


class Action(IntEnum):
    NONE = 0
    LEFT = 1
    RIGHT = 2
    ROTATE_CW = 3
    ROTATE_CCW = 4
    SOFT_DROP = 5


class FallingBlocksEnv(gym.Env):
    """
    Falling-block game driven one action per step with a synthetic clock.

    Each step applies the chosen action, advances the clock by `ms_per_step`
    and lets gravity act, so with the defaults (`ms_per_step` > gravity
    interval) the piece falls one row every step unless it locks first.

    Observation: the grid with the falling piece overlaid (0 empty, 1 falling, 2 locked).
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        ms_per_step: int = 501,
        max_episode_steps: int = 5000,
        lines_weight: float = 1.0,
        step_reward: float = 0.0,
        terminal_penalty: float = -1.0,
    ) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.game = FallingBlocksGame(self.config)
        self.render_mode = render_mode
        self.ms_per_step = int(ms_per_step)
        self.max_episode_steps = int(max_episode_steps)
        self.lines_weight = float(lines_weight)
        self.step_reward = float(step_reward)
        self.terminal_penalty = float(terminal_penalty)

        h, w = self.config.height, self.config.width
        self.observation_space = spaces.Box(
            low=0, high=int(CellState.LOCKED), shape=(h, w), dtype=np.int8
        )
        self.action_space = spaces.Discrete(len(Action))

        self._clock = 0
        self._steps = 0
        self._last_obs: Optional[np.ndarray] = None

    def _get_obs(self) -> np.ndarray:
        return self.game.get_state().astype(np.int8)

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines_cleared_total": self.game.lines_cleared_total,
            "pieces_locked": self.game.pieces_locked,
            "max_height": self.game.grid.get_max_height(),
            "holes": self.game.grid.count_holes(),
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        # Derive the piece stream from the env's seeded generator
        piece_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.game = FallingBlocksGame(self.config, rng=random.Random(piece_seed))
        self._clock = 0
        self._steps = 0
        self.game.start(self._clock)
        obs = self._get_obs()
        self._last_obs = obs
        return obs, self._get_info()

    def _apply(self, action: Action) -> int:
        if action == Action.LEFT:
            self.game.move(-1)
        elif action == Action.RIGHT:
            self.game.move(1)
        elif action == Action.ROTATE_CW:
            self.game.rotate(clockwise=True)
        elif action == Action.ROTATE_CCW:
            self.game.rotate(clockwise=False)
        elif action == Action.SOFT_DROP:
            return self.game.soft_drop()
        return 0

    def step(self, action: int):
        lines = self._apply(Action(int(action)))
        self._clock += self.ms_per_step
        lines += self.game.tick(self._clock)
        self._steps += 1

        reward = self.lines_weight * float(lines) + self.step_reward
        terminated = self.game.phase is Phase.GAME_OVER
        truncated = not terminated and self._steps >= self.max_episode_steps
        if terminated:
            reward += self.terminal_penalty

        obs = self._get_obs()
        info = self._get_info()
        info["lines_cleared"] = lines
        self._last_obs = obs
        return obs, float(reward), terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self._last_obs if self._last_obs is not None else self.game.grid.grid
            cell = 12
            h, w = grid.shape
            colors = {
                CellState.EMPTY: (0, 0, 0),
                CellState.ACTIVE: (255, 255, 255),
                CellState.LOCKED: (169, 169, 169),
            }
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = colors[CellState(int(grid[y, x]))]
            return img
        return None

    def close(self) -> None:
        pass
