import numpy as np
import pytest

from industrial_benchmark.errors import RuntimeConfigError
from industrial_benchmark.sim_env.fatigue import (
    FATIGUE_AMPLIFICATION_MAX,
    FatigueProcess,
    add_spike,
    base_noise,
    update_latent,
)
from industrial_benchmark.sim_env.state import MarkovianState, MarkovianStateDescription as MSD
from industrial_benchmark.utils.config_loader import BenchmarkConfig


def make_cfg(**overrides) -> BenchmarkConfig:
    values = {"DGain": 0.01, "DVelocity": 5.0, "DSetPoint": 100.0, "DBase": 30000.0}
    values.update(overrides)
    return BenchmarkConfig(values)


def test_base_noise_in_unit_interval() -> None:
    rng = np.random.default_rng(0)
    samples = [base_noise(rng) for _ in range(500)]
    assert min(samples) >= 0.0
    assert max(samples) < 1.0


def test_spike_without_effective_action_leaves_noise() -> None:
    rng = np.random.default_rng(1)
    assert add_spike(0.3, 0.0, rng) == 0.3


def test_spike_never_exceeds_one() -> None:
    rng = np.random.default_rng(2)
    for _ in range(200):
        assert add_spike(0.4, 1.0, rng) <= 1.0


def test_latent_amplification_and_cap() -> None:
    assert update_latent(1.3, 0.5, 0.2) == pytest.approx(1.43)
    assert update_latent(4.9, 0.5, 0.2) == FATIGUE_AMPLIFICATION_MAX
    assert update_latent(FATIGUE_AMPLIFICATION_MAX, 0.5, 0.2) == FATIGUE_AMPLIFICATION_MAX


def test_latent_smoothing_and_reset() -> None:
    assert update_latent(0.5, 0.5, 0.3) == pytest.approx(0.45 + 0.1)
    # 动作处于容差内时复位为有效动作值，即使已在放大区
    assert update_latent(0.5, 0.01, 0.3) == 0.01
    assert update_latent(3.0, 0.02, 0.3) == 0.02


def test_base_level_is_non_negative() -> None:
    process = FatigueProcess(make_cfg())
    assert process.base_level(0.0, 0.0) == pytest.approx(300.0)
    assert process.base_level(50.0, 50.0) == pytest.approx(30000.0 / 350.0 - 25.0)
    assert process.base_level(100.0, 100.0) == 0.0


def test_compute_is_deterministic_per_seed() -> None:
    process = FatigueProcess(make_cfg())
    a = process.compute(50.0, 50.0, 50.0, 0.0, 0.0, np.random.default_rng(7))
    b = process.compute(50.0, 50.0, 50.0, 0.0, 0.0, np.random.default_rng(7))
    assert a == b
    assert a.fatigue >= 0.0
    # dyn 位于 [0, 1]，疲劳介于基础疲劳的 1/3 与 1 倍之间
    assert a.fatigue_base / 3.0 <= a.fatigue <= a.fatigue_base


def test_saturated_latent_uses_bad_noise() -> None:
    process = FatigueProcess(make_cfg())
    result = process.compute(50.0, 50.0, 50.0, 0.0, FATIGUE_AMPLIFICATION_MAX, np.random.default_rng(3))
    assert result.latent_gain == FATIGUE_AMPLIFICATION_MAX
    assert result.fatigue_base / 3.0 < result.fatigue < result.fatigue_base


def test_update_writes_state() -> None:
    state = MarkovianState(1)
    state.update({MSD.Velocity: 40.0, MSD.Gain: 60.0, MSD.SetPoint: 30.0})
    result = FatigueProcess(make_cfg()).update(state, np.random.default_rng(5))
    assert state.get(MSD.Fatigue) == result.fatigue
    assert state.get(MSD.FatigueBase) == result.fatigue_base
    assert state.get(MSD.FatigueLatent1) == result.latent_velocity
    assert state.get(MSD.FatigueLatent2) == result.latent_gain
    assert state.get(MSD.EffectiveActionVelocityAlpha) == result.velocity_alpha
    assert state.get(MSD.EffectiveActionGainBeta) == result.gain_beta


def test_missing_constant_raises_runtime_error() -> None:
    process = FatigueProcess(make_cfg(DGain=None))
    with pytest.raises(RuntimeConfigError):
        process.compute(50.0, 50.0, 50.0, 0.0, 0.0, np.random.default_rng(0))
