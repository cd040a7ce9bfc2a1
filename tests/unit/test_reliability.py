from __future__ import annotations

import math

import pytest

from thermalcore.config import MATERIALS
from thermalcore.engine.interfaces import SimulationState
from thermalcore.models.reliability import step_reliability


@pytest.fixture
def state() -> SimulationState:
    return SimulationState()


def test_electromigration_at_stock(state):
    step_reliability(state, 1.0)

    # J = 1.2 · 0.1 + 0.1
    assert state.silicon_health == pytest.approx(100.0 - 1e-5 * 0.22 ** 2)


def test_health_decays_faster_when_hot(state):
    cool = SimulationState()
    hot = SimulationState(current_temp=95.0)

    step_reliability(cool, 1.0)
    step_reliability(hot, 1.0)

    assert 100.0 - hot.silicon_health > 100.0 - cool.silicon_health


def test_health_floors_at_zero(state):
    state.silicon_health = 1e-9
    state.current_temp = 500.0

    step_reliability(state, 0.1)

    assert state.silicon_health == 0.0


def test_health_never_increases_when_frozen(state):
    state.current_temp = -1e6

    step_reliability(state, 0.1)

    assert state.silicon_health <= 100.0


def test_mtbf_arrhenius_halving(state):
    step_reliability(state, 0.1)
    assert state.mtbf == pytest.approx(87600.0)

    state.current_temp = 35.0
    step_reliability(state, 0.1)
    assert state.mtbf == pytest.approx(43800.0)


def test_mtbf_voltage_acceleration(state):
    state.voltage = 2.4
    step_reliability(state, 0.1)
    assert state.mtbf == pytest.approx(87600.0 / 16.0)


def test_leakage_current(state):
    step_reliability(state, 0.1)
    assert state.leakage_current == pytest.approx(math.exp(1.8) * 0.5)


def test_thermal_resistance(state):
    step_reliability(state, 0.1)
    expected = (1.0 / 0.9) * 0.05 + 1.0 * 0.1 + (1.0 / 4.1) * 0.02
    assert state.thermal_resistance == pytest.approx(expected)


def test_stopped_fan_stays_finite(state):
    state.fan_speed = 0.0
    state.material = MATERIALS["COPPER"]
    step_reliability(state, 0.1)
    assert math.isfinite(state.thermal_resistance)


def test_dry_paste_gives_infinite_resistance(state):
    state.paste_quality = 0.0
    step_reliability(state, 0.1)
    assert state.thermal_resistance == math.inf


def test_runaway_temperature_does_not_raise(state):
    state.current_temp = 1e6

    step_reliability(state, 0.1)

    assert state.silicon_health == 0.0
    assert state.mtbf == 0.0
    assert state.leakage_current == math.inf
