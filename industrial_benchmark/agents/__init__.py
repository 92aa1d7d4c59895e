"""Agents layer.

只负责：
- 从可观测状态到动作的决策逻辑（随机/启发式/RL 等）

不负责：
- 动力学细节或 Gym 语义
"""

__all__ = [
    "base_agent",
    "heuristic_agent",
    "random_agent",
]
