from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from blockfall.game import BlockfallGame, Command, GameConfig, GamePhase
from blockfall.game.pieces import color_for_value


class BlockfallEnv(gym.Env):
    """Falling-block game as a gymnasium environment.

    Actions (5 total):
      0: Rotate
      1: Move Left
      2: Move Right
      3: Soft Drop
      4: Wait

    Every step applies the action, then lets one tick interval elapse so
    gravity always makes progress. The reward is the change in engine score.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    ACT_WAIT = 4

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 max_episode_steps: int = 5000, terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.game = BlockfallGame(self.config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self.terminal_penalty = float(terminal_penalty)

        rows, cols = self.config.rows, self.config.columns
        self.observation_space = spaces.Box(low=-7, high=7, shape=(rows, cols), dtype=np.int8)
        self.action_space = spaces.Discrete(len(Command) + 1)

        self._steps = 0

    def _get_obs(self) -> np.ndarray:
        return self.game.get_state().astype(np.int8)

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines_cleared_total": self.game.state.lines_cleared,
            "phase": self.game.phase.value,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.catalog.rng.seed(seed)
        self.game.restart()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        action = int(action)
        score_before = self.game.score

        if action != self.ACT_WAIT:
            self.game.handle_command(Command(action))
        self.game.advance(self.config.tick_interval_ms)
        self._steps += 1

        terminated = self.game.phase is GamePhase.GAME_OVER
        truncated = not terminated and self._steps >= self.max_episode_steps
        reward = float(self.game.score - score_before)
        if terminated:
            reward += self.terminal_penalty
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self.game.get_state()
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color_for_value(int(grid[y, x]))
            return img
        return None

    def close(self) -> None:
        pass
