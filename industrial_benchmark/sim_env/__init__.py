"""Simulation environment layer.

只负责：
- 工业基准的状态表示与逐步动力学
- 外部协作者：设定点驱动、失准（Goldstone）模型、奖励

不负责：
- 策略/智能体逻辑（放在 agents 层）
"""

__all__ = [
    "actions",
    "cost_buffer",
    "dynamics",
    "fatigue",
    "goldstone",
    "gym_env",
    "reward",
    "setpoint",
    "state",
]
