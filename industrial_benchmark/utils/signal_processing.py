"""通用信号统计函数：对轨迹中的单个变量做聚合。

设计：
- 仅依赖 numpy；与业务无关
- 空输入返回 nan
"""

from __future__ import annotations

import numpy as np


def to_1d(array_like) -> np.ndarray:
    arr = np.asarray(array_like, dtype=float).reshape(-1)
    return arr


def last(x) -> float:
    a = to_1d(x)
    return float(a[-1]) if a.size else float("nan")


def mean(x) -> float:
    a = to_1d(x)
    return float(np.mean(a)) if a.size else float("nan")


def minimum(x) -> float:
    a = to_1d(x)
    return float(np.min(a)) if a.size else float("nan")


def maximum(x) -> float:
    a = to_1d(x)
    return float(np.max(a)) if a.size else float("nan")


def moving_average(x, window: int) -> np.ndarray:
    """简单滑动平均（valid 模式）；窗口大于序列长度时返回空数组。"""
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")
    a = to_1d(x)
    if a.size < window:
        return np.array([])
    kernel = np.ones(window) / window
    return np.convolve(a, kernel, mode="valid")
