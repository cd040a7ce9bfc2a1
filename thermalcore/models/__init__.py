from __future__ import annotations

from dataclasses import dataclass

from thermalcore.engine.interfaces import RandomSource, SimulationState
from thermalcore.models.classifier import ThrottleDecision, step_classifier
from thermalcore.models.environment import dew_point, step_environment
from thermalcore.models.governor import resolve_target_clock, step_governor
from thermalcore.models.power import PowerOutputs, eval_power, step_power
from thermalcore.models.reliability import step_reliability
from thermalcore.models.thermal import CoolingTerms, step_thermal

__all__ = [
    "ModelOutputs",
    "PowerOutputs",
    "CoolingTerms",
    "ThrottleDecision",
    "dew_point",
    "eval_power",
    "resolve_target_clock",
    "step_environment",
    "step_governor",
    "step_power",
    "step_thermal",
    "step_reliability",
    "step_classifier",
    "step_models",
]


@dataclass(frozen=True, slots=True)
class ModelOutputs:
    """
    Intermediate results of one pass through the model chain.
    """
    power: PowerOutputs
    cooling: CoolingTerms
    throttle: ThrottleDecision


def step_models(
    state: SimulationState,
    *,
    dt_s: float,
    now_ms: float,
    rng: RandomSource,
) -> ModelOutputs:
    """
    Advance every sub-model by one tick, in place.

    Order is fixed: environment, governor, power, thermal, reliability,
    classifier. Each stage sees the values written by the stages before
    it in the same tick. History recording is left to the caller.

    Args:
        state: Shared simulation state, mutated in place
        dt_s: Time step in simulated seconds (already clamped)
        now_ms: Host wall clock in milliseconds (drives sentience)
        rng: The engine's only entropy source

    Returns:
        ModelOutputs with the power, cooling and throttle intermediates
    """
    # Step 1: Dew point and condensation
    step_environment(state, dt_s)

    # Step 2: Load tracking and clock resolution
    step_governor(state, dt_s=dt_s, now_ms=now_ms, rng=rng)

    # Step 3: Power draw and heat into the die
    power = step_power(state, rng)

    # Step 4: Cooling-mode integration
    cooling = step_thermal(state, heat_in=power.heat_in_w, dt_s=dt_s)

    # Step 5: Electromigration, MTBF, leakage, thermal resistance
    step_reliability(state, dt_s)

    # Step 6: Status label, throttling, simulated fps
    throttle = step_classifier(state, rng)

    return ModelOutputs(power=power, cooling=cooling, throttle=throttle)
