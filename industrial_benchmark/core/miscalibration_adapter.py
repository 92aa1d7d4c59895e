"""失准适配器：在核心状态与 GoldstoneEnvironment 之间搬运数据。

说明：
- 步进时：以有效偏移设置控制位置，读回失准奖励与三个诊断字段写入状态
- 恢复时：先设置控制位置，再经由模型自身的 setter 覆盖 domain/response/phi_idx，使隐含 regime 与快照一致
"""

from __future__ import annotations

from industrial_benchmark.sim_env.goldstone import GoldstoneEnvironment
from industrial_benchmark.sim_env.state import DataVector, MarkovianStateDescription as MSD
from industrial_benchmark.utils.logger import get_logger


log = get_logger(__name__)


class MisCalibrationAdapter:
    def __init__(self, environment: GoldstoneEnvironment):
        self._env = environment

    @property
    def environment(self) -> GoldstoneEnvironment:
        return self._env

    def update(self, state: DataVector) -> float:
        self._env.set_control_position(state.get(MSD.EffectiveShift))
        miscalibration = self._env.reward()
        state.set(MSD.MisCalibration, miscalibration)
        state.set(MSD.MisCalibrationDomain, self._env.get_domain())
        state.set(MSD.MisCalibrationSystemResponse, self._env.get_system_response())
        state.set(MSD.MisCalibrationPhiIdx, self._env.get_phi_idx())
        return miscalibration

    def restore(self, state: DataVector) -> None:
        self._env.set_control_position(state.get(MSD.EffectiveShift))
        self._env.set_domain(state.get(MSD.MisCalibrationDomain))
        self._env.set_system_response(state.get(MSD.MisCalibrationSystemResponse))
        self._env.set_phi_idx(state.get(MSD.MisCalibrationPhiIdx))
        log.debug(
            "miscalibration.restore",
            domain=self._env.get_domain(),
            response=self._env.get_system_response(),
            phi_idx=self._env.get_phi_idx(),
        )
