"""异常层级。

- ConfigurationError：构造/复位阶段的配置错误（缺少必需键、数值列表无法解析、边界不合法），致命
- RuntimeConfigError：步进过程中首次读取某个常量时才发现缺失；由编排器记录日志并继续本步
- UnknownKeyError：访问固定键集合之外的状态键，属于逻辑/配置不匹配
"""

from __future__ import annotations


class IndustrialBenchmarkError(Exception):
    """通用异常基类。用于汇总所有与基准仿真相关的错误。"""

    pass


class ConfigurationError(IndustrialBenchmarkError):
    """配置缺失或不合法（构造、reset 期间抛出，不做恢复）。"""

    pass


class RuntimeConfigError(ConfigurationError):
    """步进中惰性读取的常量缺失。"""

    pass


class UnknownKeyError(IndustrialBenchmarkError, KeyError):
    """状态或边界中不存在的键。"""

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown state key: {self.key!r}"
