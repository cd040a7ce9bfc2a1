from __future__ import annotations

from thermalcore.scenarios.schedules import (
    SCENARIOS,
    Schedule,
    constant_inputs,
    cryo_cooldown,
    ramp_voltage,
    step_load,
    stress_test,
)

__all__ = [
    "SCENARIOS",
    "Schedule",
    "constant_inputs",
    "step_load",
    "ramp_voltage",
    "stress_test",
    "cryo_cooldown",
]
