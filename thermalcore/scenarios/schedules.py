from __future__ import annotations

from typing import Callable, Mapping

# Type alias for schedule functions: tick -> input writes applied before it
Schedule = Callable[[int], Mapping[str, object]]


def constant_inputs(**inputs: object) -> Schedule:
    """
    Apply the same input writes before every tick.

    Args:
        **inputs: Field/value pairs accepted by ThermalEngine.set_input

    Returns:
        Schedule function: tick -> input writes
    """
    def schedule(tick: int) -> Mapping[str, object]:
        return inputs
    return schedule


def step_load(
    load_low: float = 10.0,
    load_high: float = 100.0,
    step_at_tick: int = 60,
    **inputs: object,
) -> Schedule:
    """
    Step target load from low to high at a specific tick.

    Useful for looking at the thermal transient of a sudden workload.

    Args:
        load_low: Initial target load (%)
        load_high: Final target load (%)
        step_at_tick: Tick at which to step
        **inputs: Extra writes applied every tick

    Returns:
        Schedule function: tick -> input writes
    """
    def schedule(tick: int) -> Mapping[str, object]:
        load = load_low if tick < step_at_tick else load_high
        return {**inputs, "target_load": load}
    return schedule


def ramp_voltage(
    voltage_start: float = 1.0,
    voltage_end: float = 1.6,
    ramp_ticks: int = 300,
    **inputs: object,
) -> Schedule:
    """
    Linear voltage ramp over the given number of ticks.

    Args:
        voltage_start: Initial core voltage (V)
        voltage_end: Final core voltage (V)
        ramp_ticks: Number of ticks over which to ramp
        **inputs: Extra writes applied every tick

    Returns:
        Schedule function: tick -> input writes
    """
    def schedule(tick: int) -> Mapping[str, object]:
        if tick >= ramp_ticks:
            voltage = voltage_end
        else:
            # Linear interpolation
            t = tick / ramp_ticks
            voltage = voltage_start + t * (voltage_end - voltage_start)
        return {**inputs, "voltage": voltage}
    return schedule


def stress_test() -> Schedule:
    """
    Full load on a weak air cooler with an unlocked, overvolted core.

    Drives the die past the throttle point so the classifier engages.
    """
    return constant_inputs(
        cooling_type="AIR",
        material="ALUMINUM",
        fan_speed=20.0,
        target_load=100.0,
        voltage=1.45,
        unlock_voltage=True,
    )


def cryo_cooldown() -> Schedule:
    """
    Idle die on liquid nitrogen in humid air.

    The pot drops toward -196 °C and condensation risk builds up.
    """
    return constant_inputs(
        cooling_type="LN2",
        material="COPPER",
        target_load=5.0,
        humidity=80.0,
    )


SCENARIOS: dict[str, Callable[[], Schedule]] = {
    "idle": lambda: constant_inputs(target_load=0.0),
    "step": step_load,
    "voltage-ramp": ramp_voltage,
    "stress": stress_test,
    "cryo": cryo_cooldown,
}
