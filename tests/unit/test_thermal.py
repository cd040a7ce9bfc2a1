"""
Single-step checks for every cooling mode.

Each test sets up die / heatsink / coolant temperatures by hand, takes
one explicit Euler step of 0.1 s with 100 W into the die and compares
against the mode's update equations. Default inputs give a fan
efficiency of 0.9 (40% fan, no dust) and a paste conductance of 18 W/°C.
"""

from __future__ import annotations

import pytest

from thermalcore.config import COOLING_TYPES, MATERIALS, CoolingType
from thermalcore.engine.interfaces import SimulationState
from thermalcore.models.thermal import cooling_terms, step_thermal

DT = 0.1
HEAT_IN = 100.0


def make_state(cooling: str, **fields) -> SimulationState:
    return SimulationState(cooling_type=COOLING_TYPES[cooling], **fields)


def test_cooling_terms_defaults():
    state = make_state("AIR", current_temp=60.0, heatsink_temp=40.0)
    terms = cooling_terms(state)

    assert terms.fan_efficiency == pytest.approx(0.9)
    assert terms.paste_conductance == pytest.approx(18.0)
    assert terms.heat_to_block == pytest.approx(360.0)


def test_dust_reduces_fan_efficiency():
    state = make_state("AIR", dust_density=60.0)
    assert cooling_terms(state).fan_efficiency == pytest.approx(0.45)


# ─────────────────────────────────────────────────────────────────────────────
# AIR
# ─────────────────────────────────────────────────────────────────────────────


def test_air_step():
    state = make_state("AIR", current_temp=50.0)

    step_thermal(state, heat_in=HEAT_IN, dt_s=DT)

    # +1 °C from heat, then pulled 2.25% of the way to ambient
    expected = 51.0 - (51.0 - 25.0) * 0.0225
    assert state.current_temp == pytest.approx(expected)
    assert state.heatsink_temp == pytest.approx(expected * 0.8 + 25.0 * 0.2)


def test_air_no_heat_moves_toward_ambient():
    state = make_state("AIR", current_temp=40.0)

    temps = [state.current_temp]
    for _ in range(200):
        step_thermal(state, heat_in=0.0, dt_s=DT)
        temps.append(state.current_temp)

    assert all(b < a for a, b in zip(temps, temps[1:]))
    assert temps[-1] > 25.0


def test_air_conductive_sink_clamps_to_instant_equilibrium():
    """A huge conductivity must not overshoot ambient in one step."""
    state = make_state(
        "AIR",
        material=MATERIALS["NEUTRONIUM"],
        fan_speed=100.0,
        current_temp=90.0,
    )

    step_thermal(state, heat_in=HEAT_IN, dt_s=DT)

    assert state.current_temp == pytest.approx(25.0)
    assert state.heatsink_temp == pytest.approx(25.0)


# ─────────────────────────────────────────────────────────────────────────────
# Liquid loops and active coolers
# ─────────────────────────────────────────────────────────────────────────────


def test_aio_step():
    state = make_state("AIO", current_temp=60.0, heatsink_temp=40.0, coolant_temp=30.0)

    step_thermal(state, heat_in=HEAT_IN, dt_s=DT)

    # heat_to_block 360 W, heat_to_water 1500 W, radiator 81 W
    coolant = 30.0 + (1500.0 - 81.0) / (200.0 * 4.18) * DT
    coolant += (25.0 - coolant) * 0.05 * DT
    assert state.current_temp == pytest.approx(57.4)
    assert state.heatsink_temp == pytest.approx(37.72)
    assert state.coolant_temp == pytest.approx(coolant)


def test_tec_step():
    state = make_state("TEC", current_temp=40.0, heatsink_temp=30.0)

    step_thermal(state, heat_in=HEAT_IN, dt_s=DT)

    # 200 W TEC pumps 120 W; sink sheds 5 °C · 3.6 W/°C
    die = 40.0 + (HEAT_IN - 120.0) / 10.0 * DT
    die += (25.0 - die) * 0.1 * DT
    assert state.current_temp == pytest.approx(die)
    assert state.heatsink_temp == pytest.approx(30.0 + (120.0 + 200.0 - 18.0) / 50.0 * DT)


def test_tec_power_scales_with_voltage():
    low = make_state("TEC", current_temp=40.0, heatsink_temp=30.0, voltage=0.6)
    high = make_state("TEC", current_temp=40.0, heatsink_temp=30.0, voltage=1.2)

    step_thermal(low, heat_in=HEAT_IN, dt_s=DT)
    step_thermal(high, heat_in=HEAT_IN, dt_s=DT)

    assert high.current_temp < low.current_temp
    assert high.heatsink_temp > low.heatsink_temp


def test_phase_step():
    state = make_state("PHASE", current_temp=0.0, heatsink_temp=-20.0)

    step_thermal(state, heat_in=HEAT_IN, dt_s=DT)

    sink = -20.0 + (360.0 - 300.0) / 50.0 * DT
    sink -= (sink - 25.0) * 0.05 * DT
    assert state.current_temp == pytest.approx(-2.6)
    assert state.heatsink_temp == pytest.approx(sink)


def test_phase_compressor_capacity_is_capped():
    state = make_state("PHASE", current_temp=20.0, heatsink_temp=20.0)

    step_thermal(state, heat_in=0.0, dt_s=DT)

    # (20 + 50) · 10 = 700 W requested, 300 W available
    sink = 20.0 + (0.0 - 300.0) / 50.0 * DT
    sink -= (sink - 25.0) * 0.05 * DT
    assert state.heatsink_temp == pytest.approx(sink)


# ─────────────────────────────────────────────────────────────────────────────
# Cryogenic modes
# ─────────────────────────────────────────────────────────────────────────────


def test_ln2_step():
    state = make_state("LN2", current_temp=-100.0, heatsink_temp=-150.0)

    step_thermal(state, heat_in=HEAT_IN, dt_s=DT)

    assert state.current_temp == pytest.approx(-108.0)
    assert state.heatsink_temp == pytest.approx(-150.0 - 46.0 * 2.0 * DT + 900.0 / 200.0 * DT)


def test_ln2_pot_heads_for_boiling_point():
    state = make_state("LN2")
    for _ in range(300):
        step_thermal(state, heat_in=0.0, dt_s=DT)
    assert state.heatsink_temp == pytest.approx(-196.0, abs=0.5)


def test_lhe_step():
    state = make_state("LHE", current_temp=-200.0, heatsink_temp=-250.0)

    step_thermal(state, heat_in=HEAT_IN, dt_s=DT)

    assert state.current_temp == pytest.approx(-208.0)
    assert state.heatsink_temp == pytest.approx(-250.0 - 19.0 * 3.0 * DT + 900.0 / 100.0 * DT)


def test_bec_locks_heatsink_at_absolute_zero():
    state = make_state("BEC", current_temp=-200.0, heatsink_temp=-250.0)

    step_thermal(state, heat_in=HEAT_IN, dt_s=DT)

    assert state.heatsink_temp == -273.15
    assert state.current_temp == pytest.approx(-200.0 + (HEAT_IN - 900.0) / 10.0 * DT)


def test_temperatures_are_not_clamped():
    """A strong enough heat sink takes the die below absolute zero."""
    state = make_state("BEC", current_temp=-270.0, heatsink_temp=-273.15)

    step_thermal(state, heat_in=-1e6, dt_s=DT)

    assert state.current_temp < -273.15


def test_coolant_untouched_outside_aio():
    state = make_state("LN2", coolant_temp=12.0)
    step_thermal(state, heat_in=HEAT_IN, dt_s=DT)
    assert state.coolant_temp == 12.0


def test_unknown_cooling_kind_rejected():
    state = SimulationState(
        cooling_type=CoolingType(name="Plasma", kind="PLASMA", parasitic_power_w=0.0),
    )
    with pytest.raises(ValueError, match="unsupported cooling kind"):
        step_thermal(state, heat_in=HEAT_IN, dt_s=DT)
