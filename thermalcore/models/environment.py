from __future__ import annotations

import math

from ..config import CoolingKind
from ..engine.interfaces import SimulationState
from .numeric import safe_div

# Magnus approximation coefficients
MAGNUS_A = 17.27
MAGNUS_B = 237.7

CONDENSATION_RISE_PER_S = 10.0
CONDENSATION_DECAY_PER_S = 5.0


def dew_point(ambient_c: float, humidity_pct: float) -> float:
    """
    Dew point (°C) from air temperature and relative humidity.

    Magnus form:
        α = a·T / (b + T) + ln(RH / 100)
        T_dew = b·α / (a - α)

    Bone-dry air (RH <= 0) takes the formula's limit, -b. At the poles
    (T = -b, or α = a) the divisions follow IEEE semantics, so the result
    is ±inf or NaN instead of an exception; a NaN dew point never flags
    condensation.
    """
    if humidity_pct <= 0:
        return -MAGNUS_B
    alpha = safe_div(MAGNUS_A * ambient_c, MAGNUS_B + ambient_c) + math.log(humidity_pct / 100.0)
    return safe_div(MAGNUS_B * alpha, MAGNUS_A - alpha)


def step_environment(state: SimulationState, dt_s: float) -> None:
    """
    Update dew point and condensation risk in place.

    The exposed surface is the cold plate for AIO loops and the die itself
    otherwise. Risk climbs while that surface sits below the dew point and
    drains otherwise, always within [0, 100].
    """
    state.dew_point = dew_point(state.ambient_temp, state.humidity)

    if state.cooling_type.kind is CoolingKind.AIO:
        surface_c = state.heatsink_temp
    else:
        surface_c = state.current_temp

    if surface_c < state.dew_point:
        state.condensation_risk = min(state.condensation_risk + dt_s * CONDENSATION_RISE_PER_S, 100.0)
    else:
        state.condensation_risk = max(state.condensation_risk - dt_s * CONDENSATION_DECAY_PER_S, 0.0)
