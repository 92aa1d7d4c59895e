"""外部驱动：设定点（SetPoint）随机游走生成器。

外部驱动协议（ExternalDriver）：
- get_state()：返回驱动贡献的状态（键集合并入马尔可夫状态）
- set_seed(seed)：每步由编排器按固定顺序重新播种
- filter(state)：在动作生效前修改状态（如推进设定点）
- set_configuration(state)：快照恢复后，从状态同步驱动内部参数
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np

from industrial_benchmark.sim_env.state import DataVector, MarkovianStateDescription as MSD
from industrial_benchmark.utils.config_loader import BenchmarkConfig
from industrial_benchmark.utils.logger import get_logger


log = get_logger(__name__)


@runtime_checkable
class ExternalDriver(Protocol):
    def get_state(self) -> DataVector: ...
    def set_seed(self, seed: int) -> None: ...
    def filter(self, state: DataVector) -> None: ...
    def set_configuration(self, state: DataVector) -> None: ...


class SetPointDescription:
    SetPoint = MSD.SetPoint
    ChangeRatePerStep = "SetPointChangeRatePerStep"
    CurrentSteps = "SetPointCurrentSteps"
    LastSequenceSteps = "SetPointLastSequenceSteps"

    KEYS = (SetPoint, ChangeRatePerStep, CurrentSteps, LastSequenceSteps)


class SetPointGenerator:
    """分段线性随机游走：每段长度与变化率随机，触碰边界时以 0.5 概率反向。

    配置键：
    - SetPoint_MIN / SetPoint_MAX：设定点取值范围（默认 0 / 100）
    - SETPOINT_MAX_CHANGE_RATE：单步最大变化量（默认 1.0）
    - SETPOINT_MAX_SEQUENCE_LENGTH：单段最大步数（默认 100）
    - SETPOINT_STATIONARY：为真时设定点保持不变
    """

    ZERO_RATE_PROBABILITY = 0.1

    def __init__(self, config: BenchmarkConfig):
        self._min = config.get_float("SetPoint_MIN", 0.0)
        self._max = config.get_float("SetPoint_MAX", 100.0)
        self._max_rate = config.get_float("SETPOINT_MAX_CHANGE_RATE", 1.0)
        self._max_length = config.get_int("SETPOINT_MAX_SEQUENCE_LENGTH", 100)
        self._stationary = config.get_bool("SETPOINT_STATIONARY", False)
        if self._max_length < 2:
            raise ValueError(f"SETPOINT_MAX_SEQUENCE_LENGTH must be >= 2, got {self._max_length}")

        self._rng = np.random.default_rng()
        self._setpoint = config.get_float("SetPoint_INIT", 0.0)
        self._change_rate = 0.0
        self._current_steps = 0
        self._last_sequence_steps = 0

    @property
    def setpoint(self) -> float:
        return self._setpoint

    @property
    def stationary(self) -> bool:
        return self._stationary

    def get_state(self) -> DataVector:
        s = DataVector(SetPointDescription.KEYS)
        s.set(SetPointDescription.SetPoint, self._setpoint)
        s.set(SetPointDescription.ChangeRatePerStep, self._change_rate)
        s.set(SetPointDescription.CurrentSteps, self._current_steps)
        s.set(SetPointDescription.LastSequenceSteps, self._last_sequence_steps)
        return s

    def set_seed(self, seed: int) -> None:
        self._rng = np.random.default_rng(int(seed))

    def filter(self, state: DataVector) -> None:
        self._setpoint = state.get(SetPointDescription.SetPoint)
        if not self._stationary:
            self._step()
        self._write(state)

    def set_configuration(self, state: DataVector) -> None:
        self._setpoint = state.get(SetPointDescription.SetPoint)
        self._change_rate = state.get(SetPointDescription.ChangeRatePerStep)
        self._current_steps = int(state.get(SetPointDescription.CurrentSteps))
        self._last_sequence_steps = int(state.get(SetPointDescription.LastSequenceSteps))

    # 内部工具 ---------------------------------------------------------------
    def _new_sequence(self) -> None:
        self._last_sequence_steps = int(self._rng.integers(1, self._max_length))
        self._change_rate = float(self._rng.uniform(-self._max_rate, self._max_rate))
        if self._rng.uniform() < self.ZERO_RATE_PROBABILITY:
            self._change_rate = 0.0
        self._current_steps = 0
        log.debug("setpoint.new_sequence", length=self._last_sequence_steps, rate=self._change_rate)

    def _step(self) -> None:
        if self._current_steps >= self._last_sequence_steps:
            self._new_sequence()
        new_setpoint = self._setpoint + self._change_rate
        if new_setpoint > self._max or new_setpoint < self._min:
            if self._rng.uniform() > 0.5:
                self._change_rate = -self._change_rate
        self._setpoint = min(self._max, max(self._min, new_setpoint))
        self._current_steps += 1

    def _write(self, state: DataVector) -> None:
        state.set(SetPointDescription.SetPoint, self._setpoint)
        state.set(SetPointDescription.ChangeRatePerStep, self._change_rate)
        state.set(SetPointDescription.CurrentSteps, self._current_steps)
        state.set(SetPointDescription.LastSequenceSteps, self._last_sequence_steps)
