"""工业基准的步进编排器（Step Orchestrator）。

每步顺序（固定，保证可复现）：
1. 用持久化种子重新播种随机流；按列表顺序为每个外部驱动派生子种子并执行 filter（如推进设定点）
2. 动作归一化：速度/增益/偏移及有效偏移
3. 疲劳过程，随后计算瞬时运行成本
4. 成本历史卷积
5. 以有效偏移查询失准模型
6. 含噪能耗：hidden = conv - CRGS*(miscalibration - 1)；consumption = hidden - N(0,1)*(1 + 0.005*hidden)
7. 奖励计算
8. 抽取下一个种子并写入状态（RandomSeed）

状态机：构造/复位后处于 ready；step 期间短暂处于 stepping，结束后回到 ready。

快照：get_markov_state()/set_markov_state() 为完整内部状态的内存值对象；由于每步开头都会
重新播种，恢复时无需序列化随机数发生器的内部状态。
"""

from __future__ import annotations

import math
import time
from typing import Any, Iterable, List, Mapping, Optional, Union

import numpy as np

from industrial_benchmark.core.action_normalizer import MAX_REQUIRED_STEP, Action, ActionNormalizer
from industrial_benchmark.core.miscalibration_adapter import MisCalibrationAdapter
from industrial_benchmark.errors import ConfigurationError, RuntimeConfigError
from industrial_benchmark.sim_env.actions import ActionAbsolute, ActionDelta
from industrial_benchmark.sim_env.cost_buffer import OperationalCostBuffer, instantaneous_cost
from industrial_benchmark.sim_env.fatigue import FatigueProcess
from industrial_benchmark.sim_env.goldstone import GoldstoneEnvironment
from industrial_benchmark.sim_env.reward import RewardFunction
from industrial_benchmark.sim_env.setpoint import ExternalDriver, SetPointGenerator
from industrial_benchmark.sim_env.state import (
    DataVector,
    MarkovianState,
    MarkovianStateDescription as MSD,
    ObservableState,
    StateBounds,
)
from industrial_benchmark.utils.config_loader import BenchmarkConfig
from industrial_benchmark.utils.logger import get_logger


log = get_logger(__name__)

# 子种子与持久化种子的取值上界：保证以 float 存入状态时精确可逆
SEED_UPPER_BOUND = 2 ** 53

GS_NUMBER_STEPS = 24
GS_SAFE_ZONE = MAX_REQUIRED_STEP / 2.0

PHASE_READY = "ready"
PHASE_STEPPING = "stepping"


def _as_config(config: Union[BenchmarkConfig, Mapping[str, Any]]) -> BenchmarkConfig:
    if isinstance(config, BenchmarkConfig):
        return config
    return BenchmarkConfig(config)


class IndustrialBenchmarkDynamics:
    """工业基准动力学。

    参数:
    - config: BenchmarkConfig 或扁平映射；需包含 STEP_SIZE_GAIN、STEP_SIZE_VELOCITY、CRGS、ConvArray，
      以及步进中惰性读取的 DGain/DVelocity/DSetPoint/DBase/CostSetPoint/CostGain/CostVelocity
    - external_drivers: 外部驱动列表；为 None 时使用默认的 SetPointGenerator

    异常:
    - ConfigurationError: 缺失必需键、ConvArray 无法解析、边界不合法
    """

    def __init__(
        self,
        config: Union[BenchmarkConfig, Mapping[str, Any]],
        external_drivers: Optional[Iterable[ExternalDriver]] = None,
    ) -> None:
        self._config = _as_config(config)
        self._reward_core = RewardFunction(self._config)
        self._step_size_gain = self._config.get_float("STEP_SIZE_GAIN")
        self._step_size_velocity = self._config.get_float("STEP_SIZE_VELOCITY")
        self._normalizer = ActionNormalizer(self._step_size_velocity, self._step_size_gain)
        self._fatigue = FatigueProcess(self._config)

        if external_drivers is None:
            self._drivers: List[ExternalDriver] = [SetPointGenerator(self._config)]
        else:
            self._drivers = list(external_drivers)

        self._gs_environment = GoldstoneEnvironment(GS_NUMBER_STEPS, MAX_REQUIRED_STEP, GS_SAFE_ZONE)
        self._miscalibration = MisCalibrationAdapter(self._gs_environment)
        self._rng = np.random.default_rng()
        self._phase = PHASE_READY

        self.init()
        self.step(ActionDelta(0.0, 0.0, 0.0))

    # 初始化/复位 --------------------------------------------------------------
    def init(self) -> None:
        """从配置重建键集合、边界、初值、成本缓冲并重新播种外部驱动。"""
        self._crgs = self._config.get_float("CRGS")
        self._cost_buffer = OperationalCostBuffer(self._config.get_float_array("ConvArray"))

        extension_keys: List[str] = []
        for driver in self._drivers:
            extension_keys.extend(driver.get_state().keys())

        self._state = MarkovianState(self._cost_buffer.capacity, extension_keys)
        self._bounds = StateBounds(self._state)
        for key in self._state.keys():
            init = self._config.get_float(f"{key}_INIT", 0.0)
            upper = self._config.get_float(f"{key}_MAX", math.inf)
            lower = self._config.get_float(f"{key}_MIN", -math.inf)
            if not upper > lower:
                raise ConfigurationError(f"variable={key}: max={upper} must be > than min={lower}")
            if not lower <= init <= upper:
                raise ConfigurationError(f"variable={key}: init={init} must be between min={lower} and max={upper}")
            self._bounds.set(key, lower, upper)
            self._state.set(key, init)
        self._bounds.freeze()

        seed = self._config.get_int("SEED", None)
        if seed is None:
            seed = int(time.time() * 1000)
        if seed < 0:
            raise ConfigurationError(f"SEED must be non-negative, got {seed}")
        self._random_seed = seed

        self._gs_environment.reset()
        self._rng = np.random.default_rng(self._random_seed)
        for driver in self._drivers:
            driver.set_configuration(self._state)
            driver.set_seed(self._draw_seed())
            driver.filter(self._state)

        for key in self._state.keys():
            if math.isnan(self._state.get(key)):
                self._state.set(key, 0.0)

        log.info(
            "dynamics.init",
            seed=self._random_seed,
            history_length=self._cost_buffer.capacity,
            drivers=[type(d).__name__ for d in self._drivers],
            keys=len(self._state),
        )

    def reset(self) -> None:
        """等价于用相同配置重新构造引擎（含首个零动作步）。"""
        self.init()
        self.step(ActionDelta(0.0, 0.0, 0.0))
        log.info("dynamics.reset", seed=self._config.get_int("SEED", None))

    # 主循环 API ---------------------------------------------------------------
    def step(self, action: Action) -> float:
        """施加一次动作并返回总奖励。动作类型不合法时在改动任何状态之前抛出 TypeError。"""
        if not isinstance(action, (ActionDelta, ActionAbsolute)):
            raise TypeError(f"Unsupported action type: {type(action).__name__}")
        self._phase = PHASE_STEPPING
        try:
            self._rng = np.random.default_rng(self._random_seed)
            for driver in self._drivers:
                driver.set_seed(self._draw_seed())
                driver.filter(self._state)

            self._normalizer.apply(self._state, self._bounds, action)

            try:
                self._fatigue.update(self._state, self._rng)
                self._update_current_operational_cost()
            except RuntimeConfigError as e:
                log.error("dynamics.step.config_error", error=str(e))

            self._update_operational_cost_convolution()
            self._miscalibration.update(self._state)
            self._update_consumption()
            self._reward_core.calc_reward(self._state)

            self._random_seed = self._draw_seed()
            self._state.set(MSD.RandomSeed, float(self._random_seed))
        finally:
            self._phase = PHASE_READY

        reward = self._state.get(MSD.RewardTotal)
        log.debug("dynamics.step", reward=reward, seed=self._random_seed)
        return reward

    # 查询 ---------------------------------------------------------------------
    def get_state(self) -> ObservableState:
        return self._state.observable()

    def get_reward(self) -> float:
        return self._state.get(MSD.RewardTotal)

    def get_operational_costs_history_length(self) -> int:
        return len(self._cost_buffer)

    def get_bounds(self) -> StateBounds:
        return self._bounds

    @property
    def phase(self) -> str:
        return self._phase

    @property
    def config(self) -> BenchmarkConfig:
        return self._config

    @property
    def external_drivers(self) -> List[ExternalDriver]:
        return list(self._drivers)

    @property
    def miscalibration_environment(self) -> GoldstoneEnvironment:
        return self._gs_environment

    # 快照/恢复 ----------------------------------------------------------------
    def get_markov_state(self) -> MarkovianState:
        return self._state.clone()

    def set_markov_state(self, snapshot: Union[DataVector, Mapping[str, float]]) -> None:
        """恢复完整内部状态，并同步随机种子、失准模型、成本卷积、奖励与外部驱动。"""
        values = snapshot.as_dict() if isinstance(snapshot, DataVector) else dict(snapshot)
        self._state.update(values)

        self._random_seed = int(self._state.get(MSD.RandomSeed))
        self._miscalibration.restore(self._state)

        lags = [self._state.get(MSD.operational_cost_key(i)) for i in range(self._cost_buffer.capacity)]
        self._cost_buffer.restore(lags)
        self._state.set(MSD.OperationalCostsConv, self._cost_buffer.convolve())
        self._reward_core.calc_reward(self._state)

        for driver in self._drivers:
            driver.set_configuration(self._state)
        log.debug("dynamics.set_markov_state", seed=self._random_seed)

    # 内部工具 ---------------------------------------------------------------
    def _draw_seed(self) -> int:
        return int(self._rng.integers(0, SEED_UPPER_BOUND))

    def _const(self, key: str) -> float:
        return self._config.get_float(key, error=RuntimeConfigError)

    def _update_current_operational_cost(self) -> None:
        cost = instantaneous_cost(
            self._state.get(MSD.SetPoint),
            self._state.get(MSD.Gain),
            self._state.get(MSD.Velocity),
            self._const("CostSetPoint"),
            self._const("CostGain"),
            self._const("CostVelocity"),
        )
        self._state.set(MSD.CurrentOperationalCost, cost)
        self._cost_buffer.push(cost)

    def _update_operational_cost_convolution(self) -> None:
        for i, cost in enumerate(self._cost_buffer.lags()):
            self._state.set(MSD.operational_cost_key(i), cost)
        self._state.set(MSD.OperationalCostsConv, self._cost_buffer.convolve())

    def _update_consumption(self) -> None:
        miscalibration = self._state.get(MSD.MisCalibration)
        hidden = self._state.get(MSD.OperationalCostsConv) - self._crgs * (miscalibration - 1.0)
        consumption = hidden - self._rng.normal(0.0, 1.0) * (1.0 + 0.005 * hidden)
        self._state.set(MSD.Consumption, consumption)
