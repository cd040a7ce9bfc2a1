from __future__ import annotations

from dataclasses import dataclass

from ..config import WATER_SPECIFIC_HEAT, CoolingKind
from ..engine.interfaces import SimulationState

DIE_HEAT_CAPACITY = 10.0            # J/°C, lumped die mass
BLOCK_HEAT_CAPACITY = 50.0          # AIO cold plate
WATER_CONDUCTANCE = 150.0           # W/°C, block -> coolant
RADIATOR_GAIN = 18.0
COOLANT_MASS = 200.0
COOLANT_AMBIENT_LEAK = 0.05         # 1/s
TEC_POWER_W = 200.0
TEC_PUMP_EFFICIENCY = 0.6
TEC_INSULATION_LEAK = 0.1           # 1/s, ambient back into the die
LN2_BOIL_C = -196.0
PHASE_TARGET_C = -50.0
PHASE_COMPRESSOR_W = 300.0
PHASE_AMBIENT_LEAK = 0.05           # 1/s
LHE_BOIL_C = -269.0
ABSOLUTE_ZERO_C = -273.15


@dataclass(frozen=True, slots=True)
class CoolingTerms:
    """
    Quantities shared by every cooling mode, evaluated before integration.
    """
    fan_efficiency: float       # Airflow effectiveness after dust losses
    paste_conductance: float    # W/°C across the TIM
    heat_to_block: float        # W from die into block/heatsink/pot


def cooling_terms(state: SimulationState) -> CoolingTerms:
    dust_penalty = 1.0 - state.dust_density / 120.0
    fan_efficiency = (0.1 + (state.fan_speed / 100.0) ** 2 * 5.0) * dust_penalty
    paste_conductance = state.paste_quality * 20.0
    return CoolingTerms(
        fan_efficiency=fan_efficiency,
        paste_conductance=paste_conductance,
        heat_to_block=(state.current_temp - state.heatsink_temp) * paste_conductance,
    )


def _step_air(s: SimulationState, heat_in: float, dt_s: float, t: CoolingTerms) -> None:
    cooling_power = t.fan_efficiency * s.material.conductivity * 2.5
    # Very conductive sinks (Neutronium) would overshoot ambient in one Euler
    # step; a factor of 1.0 means instant equilibrium.
    stable_factor = min((cooling_power / 10.0) * dt_s, 1.0)

    s.current_temp += (heat_in / DIE_HEAT_CAPACITY) * dt_s
    s.current_temp -= (s.current_temp - s.ambient_temp) * stable_factor
    s.heatsink_temp = s.current_temp * 0.8 + s.ambient_temp * 0.2


def _step_aio(s: SimulationState, heat_in: float, dt_s: float, t: CoolingTerms) -> None:
    heat_to_water = (s.heatsink_temp - s.coolant_temp) * WATER_CONDUCTANCE
    rad_dissipation = (s.coolant_temp - s.ambient_temp) * (t.fan_efficiency * RADIATOR_GAIN)

    s.current_temp += ((heat_in - t.heat_to_block) / DIE_HEAT_CAPACITY) * dt_s
    s.heatsink_temp += ((t.heat_to_block - heat_to_water) / BLOCK_HEAT_CAPACITY) * dt_s
    s.coolant_temp += ((heat_to_water - rad_dissipation) / (COOLANT_MASS * WATER_SPECIFIC_HEAT)) * dt_s
    s.coolant_temp += (s.ambient_temp - s.coolant_temp) * COOLANT_AMBIENT_LEAK * dt_s


def _step_tec(s: SimulationState, heat_in: float, dt_s: float, t: CoolingTerms) -> None:
    tec_power = TEC_POWER_W * (s.voltage / 1.20)
    heat_pumped = tec_power * TEC_PUMP_EFFICIENCY
    cooling_power = t.fan_efficiency * s.material.conductivity * 4.0
    heat_dissipated = (s.heatsink_temp - s.ambient_temp) * cooling_power

    s.current_temp += ((heat_in - heat_pumped) / DIE_HEAT_CAPACITY) * dt_s
    s.heatsink_temp += ((heat_pumped + tec_power - heat_dissipated) / s.material.thermal_mass) * dt_s
    s.current_temp += (s.ambient_temp - s.current_temp) * TEC_INSULATION_LEAK * dt_s


def _step_ln2(s: SimulationState, heat_in: float, dt_s: float, t: CoolingTerms) -> None:
    # heatsink_temp is the pot; the reservoir is topped up continuously
    s.current_temp += ((heat_in - t.heat_to_block) / DIE_HEAT_CAPACITY) * dt_s
    s.heatsink_temp -= (s.heatsink_temp - LN2_BOIL_C) * 2.0 * dt_s
    s.heatsink_temp += (t.heat_to_block / 200.0) * dt_s


def _step_phase(s: SimulationState, heat_in: float, dt_s: float, t: CoolingTerms) -> None:
    removal = min(PHASE_COMPRESSOR_W, (s.heatsink_temp - PHASE_TARGET_C) * 10.0)

    s.current_temp += ((heat_in - t.heat_to_block) / DIE_HEAT_CAPACITY) * dt_s
    s.heatsink_temp += ((t.heat_to_block - removal) / s.material.thermal_mass) * dt_s
    s.heatsink_temp -= (s.heatsink_temp - s.ambient_temp) * PHASE_AMBIENT_LEAK * dt_s


def _step_lhe(s: SimulationState, heat_in: float, dt_s: float, t: CoolingTerms) -> None:
    s.current_temp += ((heat_in - t.heat_to_block) / DIE_HEAT_CAPACITY) * dt_s
    s.heatsink_temp -= (s.heatsink_temp - LHE_BOIL_C) * 3.0 * dt_s
    s.heatsink_temp += (t.heat_to_block / 100.0) * dt_s


def _step_bec(s: SimulationState, heat_in: float, dt_s: float, t: CoolingTerms) -> None:
    s.current_temp += ((heat_in - t.heat_to_block) / DIE_HEAT_CAPACITY) * dt_s
    # Quantum lock, no integration
    s.heatsink_temp = ABSOLUTE_ZERO_C


def step_thermal(state: SimulationState, *, heat_in: float, dt_s: float) -> CoolingTerms:
    """
    Step the active cooling mode forward by dt_s using explicit Euler.

    Each mode integrates its own subset of die / heatsink / coolant
    temperatures. AIR and TEC feed heat_in straight into the die (TEC
    subtracting the heat it pumps); every other mode first subtracts the
    die-to-block conduction term. Nothing is clamped.

    Args:
        state: Simulation state, updated in place
        heat_in: Heat delivered to the die this tick (W)
        dt_s: Time step in simulated seconds

    Returns:
        The shared cooling terms used for this step
    """
    terms = cooling_terms(state)

    match state.cooling_type.kind:
        case CoolingKind.AIR:
            _step_air(state, heat_in, dt_s, terms)
        case CoolingKind.AIO:
            _step_aio(state, heat_in, dt_s, terms)
        case CoolingKind.TEC:
            _step_tec(state, heat_in, dt_s, terms)
        case CoolingKind.LN2:
            _step_ln2(state, heat_in, dt_s, terms)
        case CoolingKind.PHASE:
            _step_phase(state, heat_in, dt_s, terms)
        case CoolingKind.LHE:
            _step_lhe(state, heat_in, dt_s, terms)
        case CoolingKind.BEC:
            _step_bec(state, heat_in, dt_s, terms)
        case other:
            raise ValueError(f"unsupported cooling kind: {other!r}")

    return terms
