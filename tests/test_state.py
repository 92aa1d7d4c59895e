import numpy as np
import pytest

from industrial_benchmark.errors import UnknownKeyError
from industrial_benchmark.sim_env.state import (
    DataVector,
    MarkovianState,
    MarkovianStateDescription as MSD,
    ObservableStateDescription as OSD,
    StateBounds,
)


def test_markovian_state_keys_include_lags_and_extensions() -> None:
    state = MarkovianState(3, ["SetPointChangeRatePerStep", "SetPoint", "SetPointChangeRatePerStep"])
    keys = state.keys()
    assert keys[: len(MSD.CORE_KEYS)] == MSD.CORE_KEYS
    assert "OPERATIONALCOST_0" in state
    assert "OPERATIONALCOST_2" in state
    assert "OPERATIONALCOST_3" not in state
    # 与保留字段冲突或重复的扩展键被丢弃
    assert state.extension_keys == ("SetPointChangeRatePerStep",)
    assert len(state) == len(MSD.CORE_KEYS) + 3 + 1


def test_unknown_key_raises() -> None:
    state = MarkovianState(1)
    with pytest.raises(UnknownKeyError) as exc:
        state.get("NoSuchKey")
    assert exc.value.key == "NoSuchKey"
    with pytest.raises(KeyError):
        state.set("NoSuchKey", 1.0)
    with pytest.raises(UnknownKeyError):
        state["OPERATIONALCOST_5"] = 0.0


def test_clone_is_independent() -> None:
    state = MarkovianState(2)
    state.set(MSD.Velocity, 12.5)
    copy = state.clone()
    assert copy == state
    copy.set(MSD.Velocity, 99.0)
    assert state.get(MSD.Velocity) == 12.5
    assert copy != state
    assert isinstance(copy, MarkovianState)


def test_observable_projection() -> None:
    state = MarkovianState(1)
    for i, key in enumerate(OSD.KEYS):
        state.set(key, float(i + 1))
    obs = state.observable()
    assert obs.keys() == OSD.KEYS
    assert np.array_equal(obs.to_array(), np.arange(1, len(OSD.KEYS) + 1, dtype=float))
    obs.set(OSD.Velocity, -1.0)
    assert state.get(OSD.Velocity) == 2.0


def test_update_and_as_dict() -> None:
    vec = DataVector(("a", "b"), ("c",))
    vec.update({"a": 1, "c": 3})
    assert vec.as_dict() == {"a": 1.0, "b": 0.0, "c": 3.0}
    with pytest.raises(UnknownKeyError):
        vec.update({"d": 4})


def test_bounds_clip_and_freeze() -> None:
    state = MarkovianState(1)
    bounds = StateBounds(state)
    bounds.set(MSD.Velocity, 0.0, 100.0)
    bounds.freeze()
    assert bounds.clip(MSD.Velocity, 150.0) == 100.0
    assert bounds.clip(MSD.Velocity, -3.0) == 0.0
    assert bounds.contains(MSD.Velocity, 50.0)
    assert not bounds.contains(MSD.Velocity, 100.5)
    with pytest.raises(TypeError):
        bounds.set(MSD.Gain, 0.0, 1.0)
    with pytest.raises(UnknownKeyError):
        bounds.min("Unknown")


def test_update_with_unknown_key_writes_nothing() -> None:
    state = MarkovianState(1)
    state.set(MSD.Velocity, 50.0)
    before = state.clone()
    with pytest.raises(UnknownKeyError):
        state.update({MSD.Velocity: 7.0, MSD.Gain: 3.0, "NoSuchKey": 1.0})
    assert state == before
