"""Utility layer.

提供与业务无关的通用工具：
- 日志封装（结构化日志）
- 配置加载
- 信号统计
- 可视化
"""

__all__ = [
    "config_loader",
    "logger",
    "signal_processing",
    "visualization",
]
