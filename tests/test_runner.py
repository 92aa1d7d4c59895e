import math

import pytest

from industrial_benchmark.agents.base_agent import AgentConfig
from industrial_benchmark.agents.heuristic_agent import HeuristicAgent, HeuristicAgentConfig, neutral_shift
from industrial_benchmark.agents.random_agent import RandomAgent
from industrial_benchmark.core.action_normalizer import effective_shift
from industrial_benchmark.core.metrics import EpisodeMetrics, column
from industrial_benchmark.core.runner import Runner
from industrial_benchmark.sim_env.actions import ActionAbsolute
from industrial_benchmark.sim_env.dynamics import IndustrialBenchmarkDynamics
from industrial_benchmark.sim_env.state import ObservableStateDescription as OSD
from industrial_benchmark.utils import signal_processing as sp
from industrial_benchmark.utils.config_loader import load_benchmark_config


def make_runner(agent) -> Runner:
    return Runner(IndustrialBenchmarkDynamics(load_benchmark_config()), agent)


def test_run_produces_records() -> None:
    records = make_runner(RandomAgent(AgentConfig(seed=0))).run(12)
    assert len(records) == 12
    assert [r["step"] for r in records] == list(range(1, 13))
    for record in records:
        assert set(OSD.KEYS) <= set(record)
        assert record["reward"] == record[OSD.RewardTotal]


def test_run_is_reproducible_after_reset() -> None:
    runner = make_runner(RandomAgent(AgentConfig(seed=4)))
    first = runner.run(8)
    runner.reset()
    assert runner.run(8) == first


def test_negative_steps_rejected() -> None:
    with pytest.raises(ValueError):
        make_runner(RandomAgent()).run(-1)


def test_heuristic_agent_targets_neutral_shift() -> None:
    agent = HeuristicAgent(HeuristicAgentConfig(target_velocity=80.0, target_gain=20.0))
    runner = make_runner(agent)
    obs = runner.reset()
    action = agent.get_action(obs)
    assert isinstance(action, ActionAbsolute)
    assert (action.velocity, action.gain) == (80.0, 20.0)
    assert effective_shift(action.shift, obs.get(OSD.SetPoint)) == pytest.approx(0.0, abs=1e-9)
    assert neutral_shift(100.0) == pytest.approx(70.0)


def test_episode_metrics() -> None:
    records = make_runner(HeuristicAgent()).run(25)
    summary = EpisodeMetrics().evaluate(records)
    rewards = column(records, "reward")
    assert summary["steps"] == 25.0
    assert summary["reward_last"] == rewards[-1]
    assert summary["reward_min"] <= summary["reward_mean"] <= summary["reward_max"]
    assert summary["fatigue_mean"] >= 0.0
    assert math.isnan(EpisodeMetrics().evaluate([])["reward_mean"])


def test_moving_average() -> None:
    assert list(sp.moving_average([1.0, 2.0, 3.0, 4.0], 2)) == [1.5, 2.5, 3.5]
    assert sp.moving_average([1.0], 3).size == 0
    with pytest.raises(ValueError):
        sp.moving_average([1.0], 0)
