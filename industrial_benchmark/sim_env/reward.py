"""奖励计算：reward = -(CRD * fatigue + CRE * consumption)。"""

from __future__ import annotations

from industrial_benchmark.sim_env.state import DataVector, MarkovianStateDescription as MSD
from industrial_benchmark.utils.config_loader import BenchmarkConfig


class RewardFunction:
    def __init__(self, config: BenchmarkConfig):
        self.crd = config.get_float("CRD", 3.0)
        self.cre = config.get_float("CRE", 1.0)

    def calc_reward(self, state: DataVector) -> None:
        fatigue = state.get(MSD.Fatigue)
        consumption = state.get(MSD.Consumption)
        state.set(MSD.RewardFatigue, -fatigue)
        state.set(MSD.RewardConsumption, -consumption)
        state.set(MSD.RewardTotal, -(self.crd * fatigue + self.cre * consumption))
