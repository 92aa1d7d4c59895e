"""动作数据类型与有效动作。

- ActionDelta：速度/增益/偏移的增量指令（通常在 [-1, 1] 内，乘以各自步长）
- ActionAbsolute：目标速度/增益/偏移，单步变化量受步长限制
- EffectiveAction：由 (velocity, gain, setpoint) 计算两个 [0,1] 标量，衡量执行器相对安全包络被推动的程度
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping, Sequence, Tuple

import numpy as np


class ActionDeltaDescription:
    """增量动作的字段名。"""

    DeltaVelocity = "DeltaVelocity"
    DeltaGain = "DeltaGain"
    DeltaShift = "DeltaShift"

    KEYS: Tuple[str, ...] = (DeltaVelocity, DeltaGain, DeltaShift)

    @classmethod
    def keys(cls) -> Tuple[str, ...]:
        return cls.KEYS


class ActionAbsoluteDescription:
    """绝对动作的字段名。"""

    Velocity = "Velocity"
    Gain = "Gain"
    Shift = "Shift"

    KEYS: Tuple[str, ...] = (Velocity, Gain, Shift)

    @classmethod
    def keys(cls) -> Tuple[str, ...]:
        return cls.KEYS


def _finite(name: str, value: float) -> float:
    v = float(value)
    if not math.isfinite(v):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return v


@dataclass(frozen=True)
class ActionDelta:
    """增量动作（纯数据）。"""

    delta_velocity: float = 0.0
    delta_gain: float = 0.0
    delta_shift: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "delta_velocity", _finite("delta_velocity", self.delta_velocity))
        object.__setattr__(self, "delta_gain", _finite("delta_gain", self.delta_gain))
        object.__setattr__(self, "delta_shift", _finite("delta_shift", self.delta_shift))

    @classmethod
    def from_mapping(cls, values: Mapping[str, float]) -> "ActionDelta":
        d = ActionDeltaDescription
        return cls(
            float(values.get(d.DeltaVelocity, 0.0)),
            float(values.get(d.DeltaGain, 0.0)),
            float(values.get(d.DeltaShift, 0.0)),
        )

    @classmethod
    def from_array(cls, values: Sequence[float]) -> "ActionDelta":
        arr = np.asarray(values, dtype=float).reshape(-1)
        if arr.size != 3:
            raise ValueError(f"ActionDelta expects 3 components, got {arr.size}")
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    def as_dict(self) -> dict:
        d = ActionDeltaDescription
        return {d.DeltaVelocity: self.delta_velocity, d.DeltaGain: self.delta_gain, d.DeltaShift: self.delta_shift}


@dataclass(frozen=True)
class ActionAbsolute:
    """绝对动作（目标值，纯数据）。"""

    velocity: float
    gain: float
    shift: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "velocity", _finite("velocity", self.velocity))
        object.__setattr__(self, "gain", _finite("gain", self.gain))
        object.__setattr__(self, "shift", _finite("shift", self.shift))

    @classmethod
    def from_mapping(cls, values: Mapping[str, float]) -> "ActionAbsolute":
        d = ActionAbsoluteDescription
        return cls(float(values[d.Velocity]), float(values[d.Gain]), float(values[d.Shift]))

    def as_dict(self) -> dict:
        d = ActionAbsoluteDescription
        return {d.Velocity: self.velocity, d.Gain: self.gain, d.Shift: self.shift}


class EffectiveAction:
    """有效动作：velocity_alpha 与 gain_beta，均裁剪到 [0, 1]。

    gain_beta 衡量增益相对设定点的大小；velocity_alpha 衡量速度在当前有效增益下的大小。
    两者都按控制量取值域 [0, 100] 做 min-max 归一化。
    """

    ACTION_MIN = 0.0
    ACTION_MAX = 100.0

    def __init__(self, velocity: float, gain: float, setpoint: float):
        self.velocity = float(velocity)
        self.gain = float(gain)
        self.setpoint = float(setpoint)
        self.gain_beta = self._clip(self._calc_beta_scaled(self.gain, self.setpoint))
        self.velocity_alpha = self._clip(self._calc_alpha_scaled(self.velocity, self.gain, self.setpoint))

    @staticmethod
    def _clip(x: float) -> float:
        return min(1.0, max(0.0, x))

    @staticmethod
    def _beta_unscaled(gain: float, setpoint: float) -> float:
        return (gain + 1.0) / (setpoint + 110.0)

    @staticmethod
    def _alpha_unscaled(beta: float, velocity: float) -> float:
        return (velocity + 101.0) / (beta + 1.0)

    def _calc_beta_scaled(self, gain: float, setpoint: float) -> float:
        # 增益最小且设定点最大时最"温和"，反之最激进
        lo = self._beta_unscaled(self.ACTION_MIN, self.ACTION_MAX)
        hi = self._beta_unscaled(self.ACTION_MAX, self.ACTION_MIN)
        return (self._beta_unscaled(gain, setpoint) - lo) / (hi - lo)

    def _calc_alpha_scaled(self, velocity: float, gain: float, setpoint: float) -> float:
        lo = self._alpha_unscaled(1.0, self.ACTION_MIN)
        hi = self._alpha_unscaled(0.0, self.ACTION_MAX)
        return (self._alpha_unscaled(self._calc_beta_scaled(gain, setpoint), velocity) - lo) / (hi - lo)

    def as_tuple(self) -> Tuple[float, float]:
        return self.velocity_alpha, self.gain_beta
