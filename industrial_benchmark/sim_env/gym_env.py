"""Gym 环境适配器。

职责：
- 将 IndustrialBenchmarkDynamics 的纯数据 API 适配为 gymnasium 接口（observation/reward/terminated/truncated）
- 动作为三维增量 [DeltaVelocity, DeltaGain, DeltaShift]，取值 [-1, 1]
- 观测按 ObservableStateDescription.KEYS 的顺序排列
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple, Union

import gymnasium as gym
import numpy as np

from industrial_benchmark.sim_env.actions import ActionDelta
from industrial_benchmark.sim_env.dynamics import IndustrialBenchmarkDynamics
from industrial_benchmark.sim_env.state import ObservableStateDescription
from industrial_benchmark.utils.config_loader import BenchmarkConfig


class IndustrialBenchmarkEnv(gym.Env):
    metadata = {"render_modes": []}

    def __init__(
        self,
        config: Union[BenchmarkConfig, Mapping[str, Any], None] = None,
        *,
        episode_length: int = 1000,
    ) -> None:
        super().__init__()
        if config is None:
            config = BenchmarkConfig.default()
        elif not isinstance(config, BenchmarkConfig):
            config = BenchmarkConfig(config)
        if episode_length < 1:
            raise ValueError(f"episode_length must be >= 1, got {episode_length}")
        self._config = config
        self._episode_length = int(episode_length)
        self._steps = 0
        self._dynamics: Optional[IndustrialBenchmarkDynamics] = None

        self.action_space = gym.spaces.Box(low=-1.0, high=1.0, shape=(3,), dtype=np.float32)
        self.observation_space = gym.spaces.Box(
            low=-np.inf, high=np.inf, shape=(len(ObservableStateDescription.KEYS),), dtype=np.float64
        )

    @property
    def dynamics(self) -> IndustrialBenchmarkDynamics:
        if self._dynamics is None:
            raise RuntimeError("Environment must be reset before use")
        return self._dynamics

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        if seed is not None:
            self._config = self._config.with_overrides(SEED=int(seed))
        if self._dynamics is None or seed is not None:
            self._dynamics = IndustrialBenchmarkDynamics(self._config)
        else:
            self._dynamics.reset()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: np.ndarray) -> Tuple[np.ndarray, float, bool, bool, Dict[str, Any]]:
        clipped = np.clip(np.asarray(action, dtype=float).reshape(-1), -1.0, 1.0)
        reward = self.dynamics.step(ActionDelta.from_array(clipped))
        self._steps += 1
        truncated = self._steps >= self._episode_length
        return self._get_obs(), float(reward), False, truncated, self._get_info()

    def _get_obs(self) -> np.ndarray:
        return self.dynamics.get_state().to_array(ObservableStateDescription.KEYS)

    def _get_info(self) -> Dict[str, Any]:
        return {"markov_state": self.dynamics.get_markov_state().as_dict(), "step": self._steps}
