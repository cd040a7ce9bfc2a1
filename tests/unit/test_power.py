from __future__ import annotations

import math

import pytest

from thermalcore.config import COOLING_TYPES
from thermalcore.engine.interfaces import SimulationState
from thermalcore.models.power import eval_power, is_superconducting, step_power


class StubRandom:
    """Random source returning a fixed fraction and recording uniform() ranges."""

    def __init__(self, value: float = 0.5):
        self.value = value
        self.uniform_calls: list[tuple[float, float]] = []

    def random(self) -> float:
        return self.value

    def uniform(self, a: float, b: float) -> float:
        self.uniform_calls.append((a, b))
        return a + (b - a) * self.value


# Default state: 25 °C, 1.2 V, 10% load, 5 GHz, 8 cores, SMT on
STOCK_STATIC_W = 15.0
STOCK_DYNAMIC_W = 120.0 * 0.1 * 1.0 * 1.44 * 1.0 * 1.2


@pytest.fixture
def state() -> SimulationState:
    return SimulationState()


@pytest.fixture
def rng() -> StubRandom:
    return StubRandom()


def test_stock_operating_point(state, rng):
    out = eval_power(state, rng)

    assert out.static_w == pytest.approx(STOCK_STATIC_W)
    assert out.dynamic_w == pytest.approx(STOCK_DYNAMIC_W)
    assert out.tunneling_w == 0.0
    assert out.heat_in_w == pytest.approx(STOCK_STATIC_W + STOCK_DYNAMIC_W)
    assert out.power_draw_w == pytest.approx(STOCK_STATIC_W + STOCK_DYNAMIC_W)


def test_static_power_grows_with_temperature(state, rng):
    cold = eval_power(state, rng).static_w
    state.current_temp = 85.0
    hot = eval_power(state, rng).static_w

    assert hot == pytest.approx(15.0 * math.exp(60.0 * 0.015))
    assert hot > cold


def test_static_leakage_stops_growing_at_150c(state, rng):
    state.current_temp = 150.0
    at_cap = eval_power(state, rng).static_w
    state.current_temp = 5000.0
    assert eval_power(state, rng).static_w == pytest.approx(at_cap)


def test_vacuum_energy_removes_static_power(state, rng):
    state.vacuum_energy = True
    assert eval_power(state, rng).static_w == 0.0


def test_dark_silicon_gates_static_power(state, rng):
    state.dark_silicon = True
    assert eval_power(state, rng).static_w == pytest.approx(9.0)


def test_recursive_smt_multiplier(state, rng):
    state.recursive_smt = True
    assert eval_power(state, rng).dynamic_w == pytest.approx(120.0 * 0.1 * 1.44 * 8.0)


def test_smt_disabled(state, rng):
    state.smt_enabled = False
    assert eval_power(state, rng).dynamic_w == pytest.approx(120.0 * 0.1 * 1.44)


def test_neural_prediction_efficiency(state, rng):
    state.neural_prediction = True
    assert eval_power(state, rng).dynamic_w == pytest.approx(STOCK_DYNAMIC_W * 0.85)


def test_quantum_tunneling(state, rng):
    state.quantum = True
    out = eval_power(state, rng)

    assert out.tunneling_w == pytest.approx(math.exp(3.0) * 2.0)
    assert out.heat_in_w == pytest.approx(STOCK_STATIC_W + STOCK_DYNAMIC_W + out.tunneling_w)


def test_cooler_parasitic_power_only_in_draw(state, rng):
    state.cooling_type = COOLING_TYPES["TEC"]
    out = eval_power(state, rng)

    assert out.power_draw_w == pytest.approx(out.heat_in_w + 200.0)


# ─────────────────────────────────────────────────────────────────────────────
# Heat and draw cascades
# ─────────────────────────────────────────────────────────────────────────────


def test_superconductor_zeroes_heat_below_threshold(state, rng):
    state.superconductor = True
    state.quantum = True
    state.current_temp = -190.0

    out = eval_power(state, rng)

    assert is_superconducting(state)
    assert out.heat_in_w == 0.0
    assert out.power_draw_w > 0.0


def test_superconductor_inactive_above_threshold(state, rng):
    state.superconductor = True
    state.current_temp = -170.0

    assert not is_superconducting(state)
    assert eval_power(state, rng).heat_in_w > 0.0


def test_singularity_heat_sink(state, rng):
    state.singularity = True
    assert eval_power(state, rng).heat_in_w == -1e6


def test_fusion_inverts_heat_and_adds_output(state, rng):
    state.fusion = True
    out = eval_power(state, rng)

    assert out.heat_in_w == pytest.approx((STOCK_STATIC_W + STOCK_DYNAMIC_W) * 0.7)
    assert out.power_draw_w == pytest.approx(STOCK_STATIC_W + STOCK_DYNAMIC_W + 500.0)


def test_fusion_overrides_singularity(state, rng):
    state.singularity = True
    state.fusion = True
    out = eval_power(state, rng)
    assert out.heat_in_w == pytest.approx((STOCK_STATIC_W + STOCK_DYNAMIC_W) * 0.7)


def test_reality_failure_scales_heat_then_draw(state):
    rng = StubRandom(0.75)
    state.reality_anchor = False

    out = eval_power(state, rng)

    assert rng.uniform_calls == [(-5.0, 5.0), (0.0, 2.0)]
    assert out.heat_in_w == pytest.approx((STOCK_STATIC_W + STOCK_DYNAMIC_W) * 2.5)
    assert out.power_draw_w == pytest.approx((STOCK_STATIC_W + STOCK_DYNAMIC_W) * 1.5)


def test_step_power_publishes_on_state(state, rng):
    out = step_power(state, rng)

    assert state.heat_in == out.heat_in_w
    assert state.power_draw == out.power_draw_w


def test_extreme_voltage_does_not_raise(state, rng):
    state.quantum = True
    state.voltage = 300.0

    out = eval_power(state, rng)

    assert out.tunneling_w == math.inf
    assert out.heat_in_w == math.inf
    assert out.power_draw_w == math.inf


def test_extreme_voltage_without_quantum(state, rng):
    state.voltage = 1e200

    out = eval_power(state, rng)

    assert out.dynamic_w == math.inf
