"""Pipeline layer.

- action_normalizer: 动作 -> 有界的速度/增益/偏移
- miscalibration_adapter: 核心状态与失准模型之间的薄适配
- runner/metrics: rollout 循环与轨迹指标
"""

__all__ = [
    "action_normalizer",
    "metrics",
    "miscalibration_adapter",
    "runner",
]
