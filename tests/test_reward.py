import pytest

from industrial_benchmark.sim_env.reward import RewardFunction
from industrial_benchmark.sim_env.state import MarkovianState, MarkovianStateDescription as MSD
from industrial_benchmark.utils.config_loader import BenchmarkConfig


def test_reward_components() -> None:
    state = MarkovianState(1)
    state.update({MSD.Fatigue: 2.0, MSD.Consumption: 10.0})
    RewardFunction(BenchmarkConfig({"CRD": 3.0, "CRE": 1.0})).calc_reward(state)
    assert state.get(MSD.RewardFatigue) == -2.0
    assert state.get(MSD.RewardConsumption) == -10.0
    assert state.get(MSD.RewardTotal) == -16.0


def test_reward_defaults() -> None:
    reward = RewardFunction(BenchmarkConfig({}))
    assert (reward.crd, reward.cre) == (3.0, 1.0)


def test_reward_weights_from_config() -> None:
    state = MarkovianState(1)
    state.update({MSD.Fatigue: 1.5, MSD.Consumption: 4.0})
    RewardFunction(BenchmarkConfig({"CRD": "0.5", "CRE": "2"})).calc_reward(state)
    assert state.get(MSD.RewardTotal) == pytest.approx(-(0.75 + 8.0))
