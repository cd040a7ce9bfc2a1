from __future__ import annotations

from dataclasses import dataclass

from ..config import LIMITS
from ..engine.interfaces import RandomSource, SimulationState, ThermalStatus

CRITICAL_TEMP_C = 110.0
OVERCLOCK_MARGIN_GHZ = 1.0
THROTTLE_SPAN_C = 30.0          # severity reaches 1 at 130 °C
THROTTLE_FLOOR = 0.9            # full severity leaves 10% of base clock
FPS_PER_GHZ = 28.8              # 5 GHz ≈ 144 fps
FPS_PENALTY_MAX = 59.8
FPS_STALL = 59.9
FPS_JITTER = 5.0


@dataclass(frozen=True, slots=True)
class ThrottleDecision:
    """
    Outcome of the throttle check for one tick.
    """
    severity: float             # [0, 1]; 0 when not above the throttle point
    clock_ceiling_ghz: float | None   # Applied clock cap, None if unclamped
    fps_penalty: float


def throttle_severity(temp_c: float) -> float:
    return min(1.0, (temp_c - LIMITS.throttle_point_c) / THROTTLE_SPAN_C)


def _default_status(state: SimulationState) -> ThermalStatus:
    if state.current_temp > CRITICAL_TEMP_C:
        return ThermalStatus.CRITICAL
    if state.target_clock > LIMITS.base_clock_ghz + OVERCLOCK_MARGIN_GHZ:
        return ThermalStatus.OVERCLOCKED
    return ThermalStatus.OPTIMAL


def _has_override(state: SimulationState) -> bool:
    return (
        state.sentience
        or state.temporal_clock
        or state.infinite_core
        or not state.reality_anchor
    )


def step_classifier(state: SimulationState, rng: RandomSource) -> ThrottleDecision:
    """
    Classify the operating status and apply the throttle / FPS policy.

    Policy:
    - Without an active override, status is CRITICAL above 110 °C,
      OVERCLOCKED when the target clock exceeds base + 1 GHz, else OPTIMAL.
    - Above the throttle point, severity = min(1, (T - 100) / 30).
      With safety engaged the clock is capped at base·(1 - 0.9·severity),
      status is THROTTLING and the simulated frame rate drops. With safety
      disabled the clock is left alone and status is CRITICAL_HEAT.
    - Back at or below the throttle point, THROTTLING reverts to OPTIMAL.
    - fps = max(0, clock·28.8 - penalty + jitter)

    Returns:
        ThrottleDecision describing what the throttle check did
    """
    if not _has_override(state):
        state.thermal_status = _default_status(state)

    severity = 0.0
    ceiling = None
    penalty = 0.0

    if state.current_temp > LIMITS.throttle_point_c:
        severity = throttle_severity(state.current_temp)
        if not state.disable_safety:
            ceiling = LIMITS.base_clock_ghz * (1.0 - severity * THROTTLE_FLOOR)
            state.target_clock = min(state.target_clock, ceiling)
            state.current_clock = min(state.current_clock, ceiling)
            state.thermal_status = ThermalStatus.THROTTLING

            stall = FPS_STALL if rng.random() < severity * 0.2 else 0.0
            penalty = severity * FPS_PENALTY_MAX + stall
        else:
            state.thermal_status = ThermalStatus.CRITICAL_HEAT
    elif state.thermal_status is ThermalStatus.THROTTLING:
        state.thermal_status = ThermalStatus.OPTIMAL

    raw_fps = state.current_clock * FPS_PER_GHZ - penalty
    state.fps = max(0.0, raw_fps + rng.uniform(0.0, FPS_JITTER))

    return ThrottleDecision(severity=severity, clock_ceiling_ghz=ceiling, fps_penalty=penalty)
