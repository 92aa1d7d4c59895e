import numpy as np
import pytest

from industrial_benchmark.sim_env.gym_env import IndustrialBenchmarkEnv
from industrial_benchmark.sim_env.state import ObservableStateDescription as OSD
from industrial_benchmark.utils.config_loader import load_benchmark_config


def make_env(episode_length: int = 5) -> IndustrialBenchmarkEnv:
    return IndustrialBenchmarkEnv(load_benchmark_config(), episode_length=episode_length)


def test_spaces_and_reset() -> None:
    env = make_env()
    obs, info = env.reset(seed=3)
    assert env.action_space.shape == (3,)
    assert obs.shape == (len(OSD.KEYS),)
    assert env.observation_space.contains(obs)
    assert info["step"] == 0
    assert "RandomSeed" in info["markov_state"]


def test_step_truncates_at_episode_length() -> None:
    env = make_env(episode_length=3)
    env.reset(seed=1)
    flags = []
    for _ in range(3):
        obs, reward, terminated, truncated, info = env.step(np.array([0.5, -0.5, 0.0], dtype=np.float32))
        assert isinstance(reward, float)
        assert reward == obs[OSD.KEYS.index(OSD.RewardTotal)]
        assert terminated is False
        flags.append(truncated)
    assert flags == [False, False, True]
    assert info["step"] == 3


def test_same_seed_reproduces_episode() -> None:
    actions = np.random.default_rng(0).uniform(-1.0, 1.0, size=(10, 3))

    def episode(seed):
        env = make_env(episode_length=10)
        obs, _ = env.reset(seed=seed)
        out = [obs]
        for action in actions:
            out.append(env.step(action)[0])
        return np.stack(out)

    assert np.array_equal(episode(7), episode(7))
    assert not np.array_equal(episode(7), episode(8))


def test_reset_without_seed_restarts_same_episode() -> None:
    env = make_env()
    first, _ = env.reset(seed=2)
    env.step(np.ones(3))
    second, _ = env.reset()
    assert np.array_equal(first, second)


def test_actions_are_clipped() -> None:
    env = make_env()
    env.reset(seed=0)
    before = env.dynamics.get_state().get(OSD.Velocity)
    env.step(np.array([5.0, 0.0, 0.0]))
    assert env.dynamics.get_state().get(OSD.Velocity) == before + 1.0


def test_dynamics_requires_reset() -> None:
    env = make_env()
    with pytest.raises(RuntimeError):
        env.dynamics.get_state()
    with pytest.raises(ValueError):
        IndustrialBenchmarkEnv(load_benchmark_config(), episode_length=0)
