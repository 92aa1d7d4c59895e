"""运行成本历史缓冲与卷积（定长 FIR 滤波）。

- 容量 = 权重向量长度；构造时以 0 填满，长度恒等于容量
- 首次写入时用第一个成本值覆盖整个缓冲，避免冷启动的零值瞬态
- 卷积按插入顺序（最旧 -> 最新）与权重逐项相乘累加
"""

from __future__ import annotations

import math
from collections import deque
from typing import Deque, List, Sequence, Tuple

from industrial_benchmark.errors import ConfigurationError


def instantaneous_cost(setpoint: float, gain: float, velocity: float, c_setpoint: float, c_gain: float, c_velocity: float) -> float:
    """瞬时运行成本：exp((Cp*p + Cg*g + Cv*v) / 100)。"""
    return math.exp((c_setpoint * setpoint + c_gain * gain + c_velocity * velocity) / 100.0)


class OperationalCostBuffer:
    def __init__(self, weights: Sequence[float]):
        if len(weights) == 0:
            raise ConfigurationError("Convolution weights must not be empty")
        self._weights: Tuple[float, ...] = tuple(float(w) for w in weights)
        self._buffer: Deque[float] = deque([0.0] * len(self._weights), maxlen=len(self._weights))
        self._bootstrapped = False

    @property
    def weights(self) -> Tuple[float, ...]:
        return self._weights

    @property
    def capacity(self) -> int:
        return len(self._weights)

    @property
    def bootstrapped(self) -> bool:
        return self._bootstrapped

    def __len__(self) -> int:
        return len(self._buffer)

    def push(self, cost: float) -> None:
        """写入一个新的瞬时成本；首次写入时复制填满。"""
        if not self._bootstrapped:
            self._buffer.extend([float(cost)] * self.capacity)
            self._bootstrapped = True
            return
        self._buffer.append(float(cost))

    def convolve(self) -> float:
        total = 0.0
        for weight, cost in zip(self._weights, self._buffer):
            total += weight * cost
        return total

    def lags(self) -> List[float]:
        """缓冲内容（最旧在前），与 OPERATIONALCOST_<i> 一一对应。"""
        return list(self._buffer)

    def restore(self, lags: Sequence[float]) -> None:
        """用快照中的滞后值覆盖缓冲内容，不改变初始化标志。"""
        if len(lags) != self.capacity:
            raise ValueError(f"Expected {self.capacity} lag values, got {len(lags)}")
        self._buffer.clear()
        self._buffer.extend(float(x) for x in lags)

    def clear(self) -> None:
        self._buffer.extend([0.0] * self.capacity)
        self._bootstrapped = False
