from __future__ import annotations

import math

from ..config import LIMITS
from ..engine.interfaces import RandomSource, SimulationState, ThermalStatus
from .modifiers import ModifierResult, ModifierStage, StageContext, StageMode, apply_modifiers

LOAD_TRACKING_RATE = 5.0        # 1/s
UNLOCKED_MAX_CLOCK_GHZ = 12.0
NOMINAL_VOLTAGE = 1.20
QUANTUM_BURST_SPAN_GHZ = 5.0    # burst ∈ [-2.5, 2.5)
CLOCK_SMOOTHING = 0.1


def _infinite_core(ctx: StageContext) -> float:
    # Instant load spikes
    if ctx.rng.random() < 0.1:
        ctx.state.current_load = 999.0
    return 5.0


def _sentience(ctx: StageContext) -> float:
    # The CPU picks its own voltage and clock; operator inputs are ignored
    s = ctx.state
    s.voltage = 1.0 + math.sin(ctx.now_ms / 500.0) * 0.5
    if ctx.rng.random() < 0.05:
        s.target_load = ctx.rng.random() * 100.0
    return 8.0 + math.sin(ctx.now_ms / 200.0) * 4.0


CLOCK_STAGES: tuple[ModifierStage, ...] = (
    ModifierStage(
        name="temporal_clock",
        mode=StageMode.SCALE,
        enabled=lambda ctx: ctx.state.temporal_clock,
        evaluate=lambda ctx: 20.0,
        status=ThermalStatus.TEMPORAL_DRIFT,
    ),
    ModifierStage(
        name="infinite_core",
        mode=StageMode.SCALE,
        enabled=lambda ctx: ctx.state.infinite_core,
        evaluate=_infinite_core,
        status=ThermalStatus.SINGULARITY,
    ),
    ModifierStage(
        name="sentience",
        mode=StageMode.OVERRIDE,
        enabled=lambda ctx: ctx.state.sentience,
        evaluate=_sentience,
        status=ThermalStatus.I_AM_ALIVE,
    ),
    ModifierStage(
        name="reality_anchor_failure",
        mode=StageMode.SCALE,
        enabled=lambda ctx: not ctx.state.reality_anchor,
        evaluate=lambda ctx: ctx.rng.random() * 5.0,
        status=ThermalStatus.REALITY_FAIL,
    ),
)


def max_clock(state: SimulationState) -> float:
    """Voltage-limited clock ceiling (GHz)."""
    ceiling = UNLOCKED_MAX_CLOCK_GHZ if state.unlock_voltage else LIMITS.base_clock_ghz
    return ceiling * (state.voltage / NOMINAL_VOLTAGE)


def resolve_target_clock(
    state: SimulationState,
    *,
    now_ms: float,
    rng: RandomSource,
) -> ModifierResult:
    """
    Resolve this tick's target clock through the override cascade.

    Stage order is temporal clock, infinite core, sentience, reality
    anchor failure. Each active stage may set a status; only the last one
    is visible.
    """
    burst = (rng.random() - 0.5) * QUANTUM_BURST_SPAN_GHZ if state.quantum else 0.0
    base = max(max_clock(state) * state.clock_ratio + burst, LIMITS.min_clock_ghz)

    ctx = StageContext(state=state, rng=rng, now_ms=now_ms)
    return apply_modifiers(base, CLOCK_STAGES, ctx)


def step_governor(
    state: SimulationState,
    *,
    dt_s: float,
    now_ms: float,
    rng: RandomSource,
) -> None:
    """
    Track load, resolve the target clock and smooth the core clock.

    Writes current_temp (entropy spikes), current_load, target_clock,
    current_clock and, when an override is active, thermal_status.
    """
    # Lattice entropy: random thermal spikes
    if state.entropy > 0:
        state.current_temp += rng.random() * state.entropy * 0.5 * dt_s

    state.current_load += (state.target_load - state.current_load) * LOAD_TRACKING_RATE * dt_s

    resolved = resolve_target_clock(state, now_ms=now_ms, rng=rng)
    if resolved.status is not None:
        state.thermal_status = resolved.status

    state.target_clock = resolved.value
    state.current_clock = (
        state.current_clock * (1.0 - CLOCK_SMOOTHING) + resolved.value * CLOCK_SMOOTHING
    )
