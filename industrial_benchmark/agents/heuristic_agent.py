"""简单的启发式智能体，用于最小可运行样例。

目的：
- 在无 RL 框架的情况下打通 Runner -> Dynamics 的数据流与日志
- 策略：速度/增益趋向固定目标；偏移追踪使有效偏移为 0 的位置（随设定点变化）
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from industrial_benchmark.agents.base_agent import AgentConfig, BaseAgent
from industrial_benchmark.core.action_normalizer import GS_BOUND, GS_SCALE, GS_SET_POINT_DEPENDENCY
from industrial_benchmark.sim_env.actions import ActionAbsolute
from industrial_benchmark.sim_env.state import ObservableState, ObservableStateDescription as OSD
from industrial_benchmark.utils.logger import get_logger


log = get_logger(__name__)


@dataclass(frozen=True)
class HeuristicAgentConfig(AgentConfig):
    target_velocity: float = 100.0
    target_gain: float = 30.0


def neutral_shift(setpoint: float) -> float:
    """使有效偏移为 0 的 shift 值，裁剪到 [0, 100]。"""
    shift = (GS_BOUND + GS_SET_POINT_DEPENDENCY * setpoint) * 100.0 / GS_SCALE
    return min(100.0, max(0.0, shift))


class HeuristicAgent(BaseAgent):
    def __init__(self, config: Optional[HeuristicAgentConfig] = None):
        self._cfg: HeuristicAgentConfig = config or HeuristicAgentConfig()
        super().__init__(self._cfg)

    def get_action(self, state: ObservableState) -> ActionAbsolute:
        action = ActionAbsolute(
            velocity=self._cfg.target_velocity,
            gain=self._cfg.target_gain,
            shift=neutral_shift(state.get(OSD.SetPoint)),
        )
        log.debug("agent.act", shift=action.shift)
        return action
