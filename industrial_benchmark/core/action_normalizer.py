"""动作归一化：把一次动作折算为速度/增益/偏移三个有界状态量，并派生隐藏的有效偏移。

功能：
- 增量动作：v' = clip(v + dv * step_v, min, max)，增益同理
- 绝对动作：先把 (target - v) 限制在 [-step_v, step_v]，再加到 v 上并按边界裁剪
- 偏移：步长由物理常量导出，裁剪到 [0, 100]
- 有效偏移：clip(gs_scale*shift/100 - GS_SET_POINT_DEPENDENCY*setpoint - GS_BOUND, ±GS_BOUND)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from industrial_benchmark.sim_env.actions import ActionAbsolute, ActionDelta
from industrial_benchmark.sim_env.state import DataVector, MarkovianStateDescription as MSD, StateBounds


GS_BOUND = 1.5
GS_SET_POINT_DEPENDENCY = 0.02
MAX_REQUIRED_STEP = math.sin(15.0 / 180.0 * math.pi)
GS_SCALE = 2.0 * GS_BOUND + 100.0 * GS_SET_POINT_DEPENDENCY
SHIFT_STEP = (MAX_REQUIRED_STEP / 0.9) * 100.0 / GS_SCALE
SHIFT_MIN = 0.0
SHIFT_MAX = 100.0

Action = Union[ActionDelta, ActionAbsolute]


def _clip(x: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, x))


def rate_limited(current: float, target: float, step: float) -> float:
    """绝对目标的单步变化量不超过 step。"""
    return current + _clip(target - current, -step, step)


def effective_shift(shift: float, setpoint: float) -> float:
    return _clip(GS_SCALE * shift / 100.0 - GS_SET_POINT_DEPENDENCY * setpoint - GS_BOUND, -GS_BOUND, GS_BOUND)


@dataclass(frozen=True)
class NormalizedAction:
    velocity: float
    gain: float
    shift: float
    effective_shift: float


class ActionNormalizer:
    def __init__(self, step_size_velocity: float, step_size_gain: float):
        self.step_size_velocity = float(step_size_velocity)
        self.step_size_gain = float(step_size_gain)
        self.step_size_shift = SHIFT_STEP

    def normalize(self, state: DataVector, bounds: StateBounds, action: Action) -> NormalizedAction:
        velocity = state.get(MSD.Velocity)
        gain = state.get(MSD.Gain)
        shift = state.get(MSD.Shift)
        setpoint = state.get(MSD.SetPoint)

        if isinstance(action, ActionAbsolute):
            new_velocity = rate_limited(velocity, action.velocity, self.step_size_velocity)
            new_gain = rate_limited(gain, action.gain, self.step_size_gain)
            new_shift = rate_limited(shift, action.shift, self.step_size_shift)
        elif isinstance(action, ActionDelta):
            new_velocity = velocity + action.delta_velocity * self.step_size_velocity
            new_gain = gain + action.delta_gain * self.step_size_gain
            new_shift = shift + action.delta_shift * self.step_size_shift
        else:
            raise TypeError(f"Unsupported action type: {type(action).__name__}")

        new_velocity = bounds.clip(MSD.Velocity, new_velocity)
        new_gain = bounds.clip(MSD.Gain, new_gain)
        new_shift = bounds.clip(MSD.Shift, _clip(new_shift, SHIFT_MIN, SHIFT_MAX))
        return NormalizedAction(new_velocity, new_gain, new_shift, effective_shift(new_shift, setpoint))

    def apply(self, state: DataVector, bounds: StateBounds, action: Action) -> NormalizedAction:
        """归一化并写回 Velocity/Gain/Shift/EffectiveShift。"""
        result = self.normalize(state, bounds, action)
        state.set(MSD.Velocity, result.velocity)
        state.set(MSD.Gain, result.gain)
        state.set(MSD.Shift, result.shift)
        state.set(MSD.EffectiveShift, result.effective_shift)
        return result
