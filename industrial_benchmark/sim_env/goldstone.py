"""失准（miscalibration）子模型：带隐含相位状态的 Goldstone（"墨西哥帽"）惩罚景观。

结构：
- GoldstoneDynamics：无状态的转移规则，(domain, phi_idx, system_response, position) -> 新的 regime
- PenaltyLandscape：给定相位角与 domain，计算控制位置处的奖励（≤ 1，最优处为 1）
- GoldstoneEnvironment：持有隐含 regime 状态，对外只暴露 set_control_position/reward 与各字段的 getter/setter

隐含状态由本模型独占，核心引擎只能经由适配器读写。
"""

from __future__ import annotations

import math
from enum import IntEnum
from typing import Tuple

import numpy as np


class Domain(IntEnum):
    negative = -1
    initial = 0
    positive = 1


class SystemResponse(IntEnum):
    disadvantageous = -1
    advantageous = 1


def _sign(x: float) -> int:
    return int(np.sign(x))


class GoldstoneDynamics:
    """相位索引的转移规则。

    - 离开安全区时，若 domain 为 initial，则 domain 取位置符号
    - domain 改变时响应重置为 advantageous
    - 安全区内相位向 0 回落；到达 domain 的极值后保持不动；否则按 response*sign(position) 步进
    - |phi_idx| 达到最强惩罚索引后响应变为 disadvantageous，相位按对称性折回 [-K, K]
    - 在安全区内回到 phi_idx == 0 时整体复位
    """

    def __init__(self, number_steps: int, max_required_step: float, safe_zone: float):
        if number_steps < 1 or number_steps % 2 != 0:
            raise ValueError(f"number_steps must be a positive even integer, got {number_steps}")
        if safe_zone < 0:
            raise ValueError(f"safe_zone must be non-negative, got {safe_zone}")
        self.number_steps = int(number_steps)
        self.max_required_step = float(max_required_step)
        self.safe_zone = float(safe_zone)
        self.strongest_penalty_abs_idx = self.number_steps // 2

    def initial_state(self) -> Tuple[Domain, int, SystemResponse]:
        return Domain.initial, 0, SystemResponse.advantageous

    def state_transition(self, domain: Domain, phi_idx: int, system_response: SystemResponse, position: float) -> Tuple[Domain, int, SystemResponse]:
        old_domain = domain
        domain = self._compute_domain(old_domain, position)
        if domain != old_domain:
            system_response = SystemResponse.advantageous

        phi_idx += self._compute_angular_step(domain, phi_idx, system_response, position)
        system_response = self._updated_system_response(phi_idx, system_response)
        phi_idx = self._apply_symmetry(phi_idx)

        if phi_idx == 0 and abs(position) <= self.safe_zone:
            domain, phi_idx, system_response = self.initial_state()
        return domain, phi_idx, system_response

    def _compute_domain(self, domain: Domain, position: float) -> Domain:
        if abs(position) <= self.safe_zone or domain != Domain.initial:
            return domain
        return Domain(_sign(position))

    def _compute_angular_step(self, domain: Domain, phi_idx: int, system_response: SystemResponse, position: float) -> int:
        if abs(position) <= self.safe_zone:
            return -_sign(phi_idx)
        if phi_idx == -int(domain) * self.strongest_penalty_abs_idx:
            return 0
        return int(system_response) * _sign(position)

    def _updated_system_response(self, phi_idx: int, system_response: SystemResponse) -> SystemResponse:
        if abs(phi_idx) >= self.strongest_penalty_abs_idx:
            return SystemResponse.disadvantageous
        return system_response

    def _apply_symmetry(self, phi_idx: int) -> int:
        k = self.strongest_penalty_abs_idx
        if abs(phi_idx) < k:
            return phi_idx
        phi_idx = (phi_idx + 4 * k) % (4 * k)
        return 2 * k - phi_idx

    def angle(self, phi_idx: float) -> float:
        return float(phi_idx) * math.pi / (2.0 * self.strongest_penalty_abs_idx)


class PenaltyLandscape:
    """墨西哥帽势能 V(r) = r^4 - 2 r^2 的一条切线，reward = -V(r)，最大为 1。

    r = sqrt(((x - c) / w)^2 + cos(phi)^2)，w = 2 * max_required_step，
    c = -sign(domain) * 0.5 * w * sin(phi)。phi = 0 时最优点位于 x = 0；
    |phi| 增大时中心变为鞍点，两侧出现偏移的最优点。
    """

    def __init__(self, max_required_step: float):
        self.width = 2.0 * float(max_required_step)

    @staticmethod
    def potential(r: float) -> float:
        return r ** 4 - 2.0 * r ** 2

    def reward(self, position: float, phi: float, domain: Domain) -> float:
        sign = int(domain) if domain != Domain.initial else 1
        center = -sign * 0.5 * self.width * math.sin(phi)
        u = (position - center) / self.width
        r = math.sqrt(u * u + math.cos(phi) ** 2)
        return -self.potential(r)

    def optimum(self, phi: float, domain: Domain) -> float:
        """当前相位下的一个最优控制位置。"""
        sign = int(domain) if domain != Domain.initial else 1
        center = -sign * 0.5 * self.width * math.sin(phi)
        return center + self.width * abs(math.sin(phi))


class GoldstoneEnvironment:
    def __init__(self, number_steps: int, max_required_step: float, safe_zone: float):
        self._dynamics = GoldstoneDynamics(number_steps, max_required_step, safe_zone)
        self._landscape = PenaltyLandscape(max_required_step)
        self._domain, self._phi_idx, self._system_response = self._dynamics.initial_state()
        self._control_position = 0.0

    @property
    def dynamics(self) -> GoldstoneDynamics:
        return self._dynamics

    @property
    def control_position(self) -> float:
        return self._control_position

    def set_control_position(self, position: float) -> None:
        """设置控制位置并推进一次 regime 转移。"""
        self._control_position = float(position)
        self._domain, self._phi_idx, self._system_response = self._dynamics.state_transition(
            self._domain, self._phi_idx, self._system_response, self._control_position
        )

    def reward(self) -> float:
        phi = self._dynamics.angle(self._phi_idx)
        return self._landscape.reward(self._control_position, phi, self._domain)

    def optimal_position(self) -> float:
        return self._landscape.optimum(self._dynamics.angle(self._phi_idx), self._domain)

    def reset(self) -> None:
        self._domain, self._phi_idx, self._system_response = self._dynamics.initial_state()
        self._control_position = 0.0

    # 隐含 regime 的读写（供快照/恢复） -----------------------------------------
    def get_domain(self) -> float:
        return float(self._domain)

    def set_domain(self, value: float) -> None:
        self._domain = Domain(int(round(value)))

    def get_system_response(self) -> float:
        return float(self._system_response)

    def set_system_response(self, value: float) -> None:
        self._system_response = SystemResponse(int(round(value)))

    def get_phi_idx(self) -> float:
        return float(self._phi_idx)

    def set_phi_idx(self, value: float) -> None:
        self._phi_idx = int(round(value))
