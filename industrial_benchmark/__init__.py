"""Top-level package for the industrial benchmark.

该包聚焦于分层解耦：
- sim_env: 动力学与其协作者（状态、疲劳、成本卷积、失准模型、设定点驱动、奖励、Gym 适配）
- core: 步进管线中的动作归一化、失准适配，以及 rollout 与指标
- agents: 仅处理从可观测状态到动作的策略
- utils: 通用工具（日志、配置、信号统计、可视化）

注意：请通过 `main.py` 或调用方装配运行时依赖，避免在包初始化时做副作用操作。
"""

__version__ = "0.1.0"

__all__ = [
    "sim_env",
    "core",
    "agents",
    "utils",
]
