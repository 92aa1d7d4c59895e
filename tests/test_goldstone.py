import math

import pytest

from industrial_benchmark.core.action_normalizer import MAX_REQUIRED_STEP
from industrial_benchmark.core.miscalibration_adapter import MisCalibrationAdapter
from industrial_benchmark.sim_env.goldstone import (
    Domain,
    GoldstoneDynamics,
    GoldstoneEnvironment,
    PenaltyLandscape,
    SystemResponse,
)
from industrial_benchmark.sim_env.state import MarkovianState, MarkovianStateDescription as MSD


def make_env() -> GoldstoneEnvironment:
    return GoldstoneEnvironment(24, MAX_REQUIRED_STEP, MAX_REQUIRED_STEP / 2.0)


def test_number_steps_must_be_even() -> None:
    with pytest.raises(ValueError):
        GoldstoneDynamics(23, MAX_REQUIRED_STEP, 0.1)
    with pytest.raises(ValueError):
        GoldstoneDynamics(0, MAX_REQUIRED_STEP, 0.1)


def test_safe_zone_keeps_initial_regime() -> None:
    env = make_env()
    for _ in range(5):
        env.set_control_position(0.0)
    assert env.get_domain() == Domain.initial
    assert env.get_phi_idx() == 0.0
    assert env.reward() == 1.0


def test_leaving_safe_zone_sets_domain_and_advances_phase() -> None:
    env = make_env()
    env.set_control_position(1.0)
    assert env.get_domain() == Domain.positive
    assert env.get_phi_idx() == 1.0
    assert env.get_system_response() == SystemResponse.advantageous


def test_strongest_penalty_flips_response() -> None:
    env = make_env()
    for _ in range(12):
        env.set_control_position(1.0)
    assert env.get_phi_idx() == 12.0
    assert env.get_system_response() == SystemResponse.disadvantageous
    env.set_control_position(1.0)
    assert env.get_phi_idx() == 11.0


def test_return_to_safe_zone_resets() -> None:
    env = make_env()
    for _ in range(4):
        env.set_control_position(-1.0)
    assert env.get_domain() == Domain.negative
    assert env.get_phi_idx() == -4.0
    for _ in range(4):
        env.set_control_position(0.0)
    assert env.get_domain() == Domain.initial
    assert env.get_phi_idx() == 0.0
    assert env.get_system_response() == SystemResponse.advantageous


def test_symmetry_folds_phase_index() -> None:
    dyn = GoldstoneDynamics(24, MAX_REQUIRED_STEP, 0.1)
    assert dyn._apply_symmetry(13) == 11
    assert dyn._apply_symmetry(-13) == -11
    assert dyn._apply_symmetry(12) == 12
    assert dyn.angle(12) == pytest.approx(math.pi / 2.0)


def test_landscape_reward_bounded_with_optimum() -> None:
    landscape = PenaltyLandscape(MAX_REQUIRED_STEP)
    assert landscape.reward(0.0, 0.0, Domain.initial) == 1.0
    for phi in (-1.2, -0.4, 0.3, 1.0):
        for domain in (Domain.negative, Domain.positive):
            for x in (-1.5, -0.5, 0.0, 0.5, 1.5):
                assert landscape.reward(x, phi, domain) <= 1.0 + 1e-12
            assert landscape.reward(landscape.optimum(phi, domain), phi, domain) == pytest.approx(1.0)


def test_setters_round_trip() -> None:
    env = make_env()
    env.set_domain(-1.0)
    env.set_system_response(-1.0)
    env.set_phi_idx(-7.0)
    assert env.get_domain() == -1.0
    assert env.get_system_response() == -1.0
    assert env.get_phi_idx() == -7.0
    env.reset()
    assert env.get_phi_idx() == 0.0
    assert env.control_position == 0.0


def test_adapter_writes_and_restores_regime() -> None:
    env = make_env()
    adapter = MisCalibrationAdapter(env)
    state = MarkovianState(1)
    state.set(MSD.EffectiveShift, 1.0)
    for _ in range(3):
        value = adapter.update(state)
    assert state.get(MSD.MisCalibration) == value
    assert state.get(MSD.MisCalibrationDomain) == 1.0
    assert state.get(MSD.MisCalibrationPhiIdx) == 3.0
    snapshot = state.clone()

    other = make_env()
    MisCalibrationAdapter(other).restore(snapshot)
    assert other.get_domain() == env.get_domain()
    assert other.get_phi_idx() == env.get_phi_idx()
    assert other.get_system_response() == env.get_system_response()
    assert other.reward() == env.reward()
