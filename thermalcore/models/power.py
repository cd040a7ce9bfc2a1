from __future__ import annotations

from dataclasses import dataclass

from ..config import LIMITS
from ..engine.interfaces import RandomSource, SimulationState
from .modifiers import ModifierStage, StageContext, StageMode, apply_modifiers
from .numeric import safe_exp, safe_pow

STATIC_POWER_W = 15.0
DYNAMIC_POWER_W = 120.0
SUPERCONDUCTING_BELOW_C = -180.0
SINGULARITY_HEAT_W = -1e6
FUSION_OUTPUT_W = 5000.0


@dataclass(frozen=True, slots=True)
class PowerOutputs:
    """
    Outputs from the power model.
    """
    static_w: float             # Leakage-driven static power (W)
    dynamic_w: float            # Switching power (W)
    tunneling_w: float          # Quantum tunnelling leakage (W)
    heat_in_w: float            # Heat handed to the thermal integrator (W)
    power_draw_w: float         # Reported package + cooler draw (W)


def is_superconducting(state: SimulationState) -> bool:
    return state.superconductor and state.current_temp < SUPERCONDUCTING_BELOW_C


HEAT_STAGES: tuple[ModifierStage, ...] = (
    ModifierStage(
        name="superconductor",
        mode=StageMode.OVERRIDE,
        enabled=lambda ctx: is_superconducting(ctx.state),
        evaluate=lambda ctx: 0.0,
    ),
    # Idealised infinite heat sink
    ModifierStage(
        name="singularity",
        mode=StageMode.OVERRIDE,
        enabled=lambda ctx: ctx.state.singularity,
        evaluate=lambda ctx: SINGULARITY_HEAT_W,
    ),
    # Inverse thermodynamics: higher load cools instead of heats
    ModifierStage(
        name="fusion",
        mode=StageMode.OVERRIDE,
        enabled=lambda ctx: ctx.state.fusion,
        evaluate=lambda ctx: (
            (ctx.terms["static_w"] + ctx.terms["dynamic_w"])
            * (1.0 - ctx.state.current_load / 100.0 * 3.0)
        ),
    ),
    ModifierStage(
        name="reality_anchor_failure",
        mode=StageMode.SCALE,
        enabled=lambda ctx: not ctx.state.reality_anchor,
        evaluate=lambda ctx: ctx.rng.uniform(-5.0, 5.0),
    ),
)

DRAW_STAGES: tuple[ModifierStage, ...] = (
    ModifierStage(
        name="fusion",
        mode=StageMode.OFFSET,
        enabled=lambda ctx: ctx.state.fusion,
        evaluate=lambda ctx: FUSION_OUTPUT_W * (ctx.state.current_load / 100.0),
    ),
    ModifierStage(
        name="reality_anchor_failure",
        mode=StageMode.SCALE,
        enabled=lambda ctx: not ctx.state.reality_anchor,
        evaluate=lambda ctx: ctx.rng.uniform(0.0, 2.0),
    ),
)


def eval_power(state: SimulationState, rng: RandomSource) -> PowerOutputs:
    """
    Evaluate static, dynamic and tunnelling power at the current operating point.

    Physics:
    - Static:  15·exp((min(T,150) - 25)·0.015)·(V/1.2)·(cores/8)·dark_silicon
    - Dynamic: 120·load·(f/f_base)^3·V^2·(cores/8)·smt·neural
    - Tunnelling (quantum flag): exp(2.5·V)·2

    The heat cascade draws from rng before the power-draw cascade.

    Args:
        state: Current simulation state (read only)
        rng: Entropy source for the reality-anchor stages

    Returns:
        PowerOutputs with heat into the die and reported draw
    """
    voltage_scaling = state.voltage / 1.20
    clock_ratio = state.current_clock / LIMITS.base_clock_ghz
    load_factor = state.current_load / 100.0
    core_factor = state.core_count / 8.0

    if state.recursive_smt:
        smt_factor = 8.0
    elif state.smt_enabled:
        smt_factor = 1.2
    else:
        smt_factor = 1.0
    dark_silicon_efficiency = 0.6 if state.dark_silicon else 1.0
    efficiency_mod = 0.85 if state.neural_prediction else 1.0

    if state.vacuum_energy:
        static_w = 0.0
    else:
        leakage_factor = safe_exp((min(state.current_temp, 150.0) - 25.0) * 0.015)
        static_w = (
            STATIC_POWER_W * leakage_factor * voltage_scaling * core_factor
            * dark_silicon_efficiency
        )

    dynamic_w = (
        DYNAMIC_POWER_W * load_factor * safe_pow(clock_ratio, 3) * safe_pow(state.voltage, 2)
        * core_factor * smt_factor * efficiency_mod
    )

    tunneling_w = safe_exp(state.voltage * 2.5) * 2.0 if state.quantum else 0.0

    ctx = StageContext(
        state=state,
        rng=rng,
        terms={"static_w": static_w, "dynamic_w": dynamic_w},
    )
    heat_in = apply_modifiers(static_w + dynamic_w + tunneling_w, HEAT_STAGES, ctx).value

    draw = static_w + dynamic_w + state.cooling_type.parasitic_power_w + tunneling_w
    power_draw = apply_modifiers(draw, DRAW_STAGES, ctx).value

    return PowerOutputs(
        static_w=static_w,
        dynamic_w=dynamic_w,
        tunneling_w=tunneling_w,
        heat_in_w=heat_in,
        power_draw_w=power_draw,
    )


def step_power(state: SimulationState, rng: RandomSource) -> PowerOutputs:
    """Evaluate the power model and publish heat_in / power_draw on the state."""
    outputs = eval_power(state, rng)
    state.heat_in = outputs.heat_in_w
    state.power_draw = outputs.power_draw_w
    return outputs
