"""智能体抽象基类：强调与仿真层解耦。

设计动机：
- BaseAgent 不依赖动力学实现细节，仅处理观测状态（ObservableState）并输出动作
- 具体智能体（随机/启发式/RL）实现相同接口，便于热插拔

统一接口：
- get_action(state): 由可观测状态生成动作（ActionDelta 或 ActionAbsolute）
- update(state, action, reward, next_state): 可选，用于在线学习
- reset(): 可选，在 episode 开始时复位内部状态
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from industrial_benchmark.core.action_normalizer import Action
from industrial_benchmark.sim_env.state import ObservableState
from industrial_benchmark.utils.logger import get_logger


log = get_logger(__name__)


@dataclass(frozen=True)
class AgentConfig:
    """智能体超参数（纯数据）。"""

    seed: Optional[int] = None


class BaseAgent(ABC):
    """智能体抽象基类：仅定义算法交互，不绑定任何仿真细节。"""

    def __init__(self, config: Optional[AgentConfig] = None):
        self._config = config or AgentConfig()
        log.info("agent.init", agent=type(self).__name__, seed=self._config.seed)

    @abstractmethod
    def get_action(self, state: ObservableState) -> Action:
        """根据可观测状态返回一个动作。"""
        raise NotImplementedError

    def update(self, state: ObservableState, action: Action, reward: float, next_state: ObservableState) -> None:
        """使用一次交互经验进行学习更新；无学习的智能体保持空实现。"""

    def reset(self) -> None:
        """可选：在 episode 开始时复位内部状态。"""
