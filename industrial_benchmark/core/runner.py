"""统一步进管线：Agent -> Dynamics -> Observation -> Record。

用法：
- 在 main.py 中构造 Runner，并调用 run(steps) 获取逐步记录
"""

from __future__ import annotations

from typing import Any, Dict, List

from industrial_benchmark.agents.base_agent import BaseAgent
from industrial_benchmark.sim_env.dynamics import IndustrialBenchmarkDynamics
from industrial_benchmark.sim_env.state import ObservableState
from industrial_benchmark.utils.logger import get_logger


log = get_logger(__name__)


class Runner:
    def __init__(self, dynamics: IndustrialBenchmarkDynamics, agent: BaseAgent):
        self._dynamics = dynamics
        self._agent = agent
        self._step_idx = 0

    def reset(self) -> ObservableState:
        self._dynamics.reset()
        self._agent.reset()
        self._step_idx = 0
        return self._dynamics.get_state()

    def step(self) -> Dict[str, Any]:
        state = self._dynamics.get_state()
        action = self._agent.get_action(state)
        reward = self._dynamics.step(action)
        next_state = self._dynamics.get_state()
        self._agent.update(state, action, reward, next_state)
        self._step_idx += 1
        record: Dict[str, Any] = {"step": self._step_idx, "reward": reward}
        record.update(next_state.as_dict())
        return record

    def run(self, steps: int) -> List[Dict[str, Any]]:
        if steps < 0:
            raise ValueError(f"steps must be non-negative, got {steps}")
        records = [self.step() for _ in range(steps)]
        log.info("runner.done", steps=steps, agent=type(self._agent).__name__)
        return records
