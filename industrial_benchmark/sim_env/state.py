"""状态容器：固定键集合的命名浮点向量。

本文件提供：
- MarkovianStateDescription / ObservableStateDescription：键名常量与键集合
- DataVector：核心保留字段 + 外部驱动扩展字段的记录，键集合在构造时确定且之后不变
- MarkovianState / ObservableState：完整内部状态与可观测投影
- StateBounds：与状态同形的 min/max 边界，构造后只读

约定：
- 访问固定集合之外的键一律抛出 UnknownKeyError
- clone() 为深拷贝，用于快照与对外暴露
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from industrial_benchmark.errors import UnknownKeyError


class MarkovianStateDescription:
    """马尔可夫状态中的核心键名。"""

    SetPoint = "SetPoint"
    Velocity = "Velocity"
    Gain = "Gain"
    Shift = "Shift"
    EffectiveShift = "EffectiveShift"
    Fatigue = "Fatigue"
    FatigueBase = "FatigueBase"
    FatigueLatent1 = "FatigueLatent1"  # 速度侧隐变量
    FatigueLatent2 = "FatigueLatent2"  # 增益侧隐变量
    EffectiveActionVelocityAlpha = "EffectiveActionVelocityAlpha"
    EffectiveActionGainBeta = "EffectiveActionGainBeta"
    MisCalibration = "MisCalibration"
    MisCalibrationDomain = "MisCalibrationDomain"
    MisCalibrationSystemResponse = "MisCalibrationSystemResponse"
    MisCalibrationPhiIdx = "MisCalibrationPhiIdx"
    Consumption = "Consumption"
    CurrentOperationalCost = "CurrentOperationalCost"
    OperationalCostsConv = "OperationalCostsConv"
    RandomSeed = "RandomSeed"
    RewardTotal = "RewardTotal"
    RewardFatigue = "RewardFatigue"
    RewardConsumption = "RewardConsumption"

    OPERATIONAL_COST_PREFIX = "OPERATIONALCOST_"

    CORE_KEYS: Tuple[str, ...] = (
        SetPoint,
        Velocity,
        Gain,
        Shift,
        EffectiveShift,
        Fatigue,
        FatigueBase,
        FatigueLatent1,
        FatigueLatent2,
        EffectiveActionVelocityAlpha,
        EffectiveActionGainBeta,
        MisCalibration,
        MisCalibrationDomain,
        MisCalibrationSystemResponse,
        MisCalibrationPhiIdx,
        Consumption,
        CurrentOperationalCost,
        OperationalCostsConv,
        RandomSeed,
        RewardTotal,
        RewardFatigue,
        RewardConsumption,
    )

    @classmethod
    def operational_cost_key(cls, lag: int) -> str:
        return f"{cls.OPERATIONAL_COST_PREFIX}{lag}"

    @classmethod
    def operational_cost_keys(cls, length: int) -> Tuple[str, ...]:
        return tuple(cls.operational_cost_key(i) for i in range(length))


class ObservableStateDescription:
    """对外可见的变量子集。"""

    SetPoint = MarkovianStateDescription.SetPoint
    Velocity = MarkovianStateDescription.Velocity
    Gain = MarkovianStateDescription.Gain
    Shift = MarkovianStateDescription.Shift
    Fatigue = MarkovianStateDescription.Fatigue
    Consumption = MarkovianStateDescription.Consumption
    RewardTotal = MarkovianStateDescription.RewardTotal

    KEYS: Tuple[str, ...] = (
        SetPoint,
        Velocity,
        Gain,
        Shift,
        Fatigue,
        Consumption,
        RewardTotal,
    )


class DataVector:
    """命名浮点向量：保留字段 + 扩展字段，键集合固定。

    - reserved：核心字段（含成本滞后键），顺序即 keys() 的前半部分
    - extensions：外部驱动贡献的键；与保留字段冲突或重复的键在构造时被丢弃
    """

    __slots__ = ("_reserved", "_extensions", "_values")

    def __init__(self, reserved: Sequence[str], extensions: Iterable[str] = ()):
        reserved_keys = tuple(dict.fromkeys(reserved))
        ext: List[str] = []
        for key in extensions:
            if key in reserved_keys or key in ext:
                continue
            ext.append(key)
        self._reserved: Tuple[str, ...] = reserved_keys
        self._extensions: Tuple[str, ...] = tuple(ext)
        self._values: Dict[str, float] = {k: 0.0 for k in self._reserved + self._extensions}

    # 键集合 -----------------------------------------------------------------
    def keys(self) -> Tuple[str, ...]:
        return self._reserved + self._extensions

    @property
    def extension_keys(self) -> Tuple[str, ...]:
        return self._extensions

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._values)

    # 读写 ---------------------------------------------------------------------
    def get(self, key: str) -> float:
        try:
            return self._values[key]
        except KeyError:
            raise UnknownKeyError(key) from None

    def set(self, key: str, value: float) -> None:
        if key not in self._values:
            raise UnknownKeyError(key)
        self._values[key] = float(value)

    def __getitem__(self, key: str) -> float:
        return self.get(key)

    def __setitem__(self, key: str, value: float) -> None:
        self.set(key, value)

    def update(self, values: Mapping[str, float]) -> None:
        """批量写入；存在未知键时整体拒绝，不做部分写入。"""
        for key in values:
            if key not in self._values:
                raise UnknownKeyError(key)
        self._values.update({key: float(value) for key, value in values.items()})

    # 拷贝/导出 -----------------------------------------------------------------
    def clone(self) -> "DataVector":
        other = self.__class__.__new__(self.__class__)
        other._reserved = self._reserved
        other._extensions = self._extensions
        other._values = dict(self._values)
        return other

    def as_dict(self) -> Dict[str, float]:
        return {k: self._values[k] for k in self.keys()}

    def to_array(self, keys: Optional[Sequence[str]] = None) -> np.ndarray:
        names = self.keys() if keys is None else keys
        return np.array([self.get(k) for k in names], dtype=float)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataVector):
            return NotImplemented
        return self.keys() == other.keys() and self._values == other._values

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={v:.6g}" for k, v in self.as_dict().items())
        return f"{self.__class__.__name__}({body})"


class ObservableState(DataVector):
    """可观测状态（防御性拷贝，修改不会影响引擎）。"""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(ObservableStateDescription.KEYS)


class MarkovianState(DataVector):
    """完整内部状态：核心键 + 成本滞后键 + 外部驱动键。"""

    __slots__ = ()

    def __init__(self, history_length: int, extensions: Iterable[str] = ()):
        reserved = MarkovianStateDescription.CORE_KEYS + MarkovianStateDescription.operational_cost_keys(history_length)
        super().__init__(reserved, extensions)

    def observable(self) -> ObservableState:
        """按 ObservableStateDescription 从完整状态中读取对应值。"""
        obs = ObservableState()
        for key in obs.keys():
            obs.set(key, self.get(key))
        return obs


class StateBounds:
    """与状态同形的上下界，构造完成后冻结。"""

    def __init__(self, template: DataVector):
        self._min = template.clone()
        self._max = template.clone()
        self._frozen = False

    def set(self, key: str, lower: float, upper: float) -> None:
        if self._frozen:
            raise TypeError("StateBounds are read-only after construction")
        self._min.set(key, lower)
        self._max.set(key, upper)

    def freeze(self) -> None:
        self._frozen = True

    def min(self, key: str) -> float:
        return self._min.get(key)

    def max(self, key: str) -> float:
        return self._max.get(key)

    def clip(self, key: str, value: float) -> float:
        return min(self._max.get(key), max(self._min.get(key), value))

    def contains(self, key: str, value: float) -> bool:
        return self._min.get(key) <= value <= self._max.get(key)

    def keys(self) -> Tuple[str, ...]:
        return self._min.keys()
