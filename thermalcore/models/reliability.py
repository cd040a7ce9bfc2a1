from __future__ import annotations

from ..engine.interfaces import SimulationState
from .numeric import safe_div, safe_exp, safe_pow

BASE_MTBF_H = 87600.0           # ~10 years
EM_RATE = 1e-5


def step_reliability(state: SimulationState, dt_s: float) -> None:
    """
    Update long-run reliability metrics in place.

    - Electromigration (simplified Black's equation):
      health -= 1e-5·J²·exp((T-25)·0.05)·dt, J = V·load + 0.1, floored at 0
    - MTBF (Arrhenius): halves per 10 °C above 25 °C, scales with (V/1.2)^-4
    - Subthreshold leakage (mA): exp(1.5·V)·exp((T-25)·0.04)·0.5
    - Case-to-ambient resistance (K/W) from paste, material and fan terms;
      the +0.1 keeps a stopped fan finite
    """
    temp_c = state.current_temp
    load_factor = state.current_load / 100.0

    current_density = state.voltage * load_factor + 0.1
    thermal_activation = safe_exp((temp_c - 25.0) * 0.05)
    degradation = EM_RATE * current_density ** 2 * thermal_activation * dt_s
    # Health only ever falls; a NaN rate (inf * 0) is ignored
    if degradation > 0:
        state.silicon_health = max(0.0, state.silicon_health - degradation)

    temp_acceleration = safe_pow(2.0, (temp_c - 25.0) / 10.0)
    voltage_acceleration = (state.voltage / 1.2) ** 4
    state.mtbf = safe_div(BASE_MTBF_H, temp_acceleration * voltage_acceleration)

    state.leakage_current = safe_exp(state.voltage * 1.5) * safe_exp((temp_c - 25.0) * 0.04) * 0.5

    state.thermal_resistance = (
        safe_div(1.0, state.paste_quality) * 0.05
        + safe_div(1.0, state.material.conductivity) * 0.1
        + safe_div(1.0, state.fan_speed / 10.0 + 0.1) * 0.02
    )
