"""随机智能体：每步在 [-1, 1]^3 内均匀采样增量动作。"""

from __future__ import annotations

from typing import Optional

import numpy as np

from industrial_benchmark.agents.base_agent import AgentConfig, BaseAgent
from industrial_benchmark.sim_env.actions import ActionDelta
from industrial_benchmark.sim_env.state import ObservableState


class RandomAgent(BaseAgent):
    def __init__(self, config: Optional[AgentConfig] = None):
        super().__init__(config)
        self._rng = np.random.default_rng(self._config.seed)

    def get_action(self, state: ObservableState) -> ActionDelta:
        return ActionDelta.from_array(self._rng.uniform(-1.0, 1.0, size=3))

    def reset(self) -> None:
        self._rng = np.random.default_rng(self._config.seed)
