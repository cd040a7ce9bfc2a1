"""
Fixed-step simulation engine for thermalcore.

This module provides the ThermalEngine class, which owns the simulation
state and advances it once per host tick. It manages:
- Wall-clock to simulated timestep conversion (with time dilation)
- The sub-model chain (environment, governor, power, thermal,
  reliability, classifier)
- History sampling for telemetry consumers
- Operator input writes between ticks

The engine never ticks on its own and never runs concurrently with
itself: the host (a render loop, or the headless SessionRunner) calls
tick() with its clock and reads the state back for display.

Architecture:
```
    Host (render callback / SessionRunner)
        |
        | set_input(field, value)   between ticks
        | tick(now_ms)              once per frame
        v
    ThermalEngine
        |-- SimulationState (owned, mutated in place)
        |-- RandomSource (injected, the only entropy)
        |-- step_models()
        |   environment -> governor -> power -> thermal
        |   -> reliability -> classifier
        |-- HistoryRecorder
        v
    SimulationState (live) / snapshot() (detached copy)
```

Example usage:
    >>> import random
    >>> from thermalcore.engine.engine import ThermalEngine
    >>>
    >>> engine = ThermalEngine(rng=random.Random(42))
    >>> engine.set_input("cooling_type", "AIO")
    >>> engine.set_input("target_load", 80)
    >>> for frame in range(1, 61):
    ...     state = engine.tick(frame * 16.7)
    >>> print(f"{state.current_temp:.1f} C, {state.thermal_status.value}")
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import replace
from typing import Any, Optional

from ..config import LIMITS, CoolingType, Material, cooling_type, material
from ..models import ModelOutputs, step_models
from .history import HistoryRecorder
from .interfaces import (
    FEATURE_FLAGS,
    WRITABLE_FIELDS,
    RandomSource,
    SimulationState,
)

logger = logging.getLogger(__name__)


def compute_dt(elapsed_s: float, time_dilation: float) -> float:
    """
    Convert elapsed wall-clock seconds into the simulated timestep.

    dt = clamp(elapsed, 0, 0.1) · time_dilation, then capped at MAX_DT so
    explicit Euler stays stable. A negative result (clock going backwards,
    negative dilation) becomes 0.

    Raises:
        ValueError: If the resulting timestep is not finite.
    """
    real_s = min(max(elapsed_s, 0.0), LIMITS.max_dt_s)
    dt_s = real_s * time_dilation
    if not math.isfinite(dt_s):
        raise ValueError(
            f"non-finite timestep (elapsed={elapsed_s!r}, time_dilation={time_dilation!r})"
        )
    return min(max(dt_s, 0.0), LIMITS.max_dt_s)


class ThermalEngine:
    """
    Owner of one simulation session.

    Attributes:
        _state: The live simulation state.
        _rng: Injected random source.
        _recorder: History sampler feeding state.history.
        _last_tick_ms: Host clock at the previous tick.
    """

    def __init__(
        self,
        state: Optional[SimulationState] = None,
        *,
        rng: Optional[RandomSource] = None,
        seed: Optional[int] = None,
        start_ms: float = 0.0,
        history_capacity: int = LIMITS.history_capacity,
    ) -> None:
        """
        Create an engine.

        Args:
            state: Initial state (defaults to SimulationState()). The engine
                   takes ownership and mutates it in place.
            rng: Random source. When None, random.Random(seed) is used.
            seed: Seed for the default random source; ignored if rng is given.
            start_ms: Host clock value the first tick is measured from.
            history_capacity: Length of the telemetry ring buffer.
        """
        self._state = state if state is not None else SimulationState()
        self._rng: RandomSource = rng if rng is not None else random.Random(seed)
        self._recorder = HistoryRecorder(history_capacity)
        self._last_tick_ms = float(start_ms)
        self._last_outputs: Optional[ModelOutputs] = None
        self._simulated_s = 0.0

        if self._state.history.maxlen != history_capacity:
            buffer = self._recorder.new_buffer()
            buffer.extend(self._state.history)
            self._state.history = buffer

    @property
    def state(self) -> SimulationState:
        """The live state. Consumers must treat it as read-only."""
        return self._state

    @property
    def simulated_s(self) -> float:
        """Simulated seconds integrated since the engine was created."""
        return self._simulated_s

    @property
    def last_outputs(self) -> Optional[ModelOutputs]:
        """Model intermediates (power split, cooling terms, throttle) of the last tick."""
        return self._last_outputs

    def tick(self, now_ms: float) -> SimulationState:
        """
        Advance the simulation by the time elapsed since the previous tick.

        Args:
            now_ms: Host wall clock in milliseconds

        Returns:
            The live SimulationState after the update

        Raises:
            ValueError: If now_ms or the resulting timestep is not finite.
                        The state is left untouched in that case.
        """
        if not math.isfinite(now_ms):
            raise ValueError(f"now_ms must be finite, got {now_ms!r}")

        s = self._state
        elapsed_s = (now_ms - self._last_tick_ms) / 1000.0
        dt_s = compute_dt(elapsed_s, s.time_dilation)
        self._last_tick_ms = now_ms

        if dt_s < elapsed_s * s.time_dilation:
            logger.debug("timestep clamped: %.4fs -> %.4fs", elapsed_s * s.time_dilation, dt_s)

        previous_status = s.thermal_status
        self._last_outputs = step_models(s, dt_s=dt_s, now_ms=now_ms, rng=self._rng)
        self._recorder.record(s, dt_s)
        self._simulated_s += dt_s

        if s.thermal_status is not previous_status:
            logger.info(
                "thermal status %s -> %s at %.1f C",
                previous_status.value,
                s.thermal_status.value,
                s.current_temp,
            )

        return s

    def set_input(self, field: str, value: Any) -> None:
        """
        Write an operator input, configuration value or feature flag.

        The write lands directly on the state and takes effect at the next
        tick; the last write before a tick wins. Values are type-checked
        only. `material` and `cooling_type` also accept catalog names;
        integer fields (core_count) accept whole-valued floats only.

        Raises:
            ValueError: Unknown or derived field, wrong type, fractional value
                        for an integer field, or unknown material / cooling
                        type.
        """
        if field not in WRITABLE_FIELDS:
            raise ValueError(f"{field!r} is not an operator input, configuration value or flag")

        if field == "material":
            if isinstance(value, str):
                value = material(value)
            elif not isinstance(value, Material):
                raise ValueError(f"material must be a Material or name, got {type(value).__name__}")
        elif field == "cooling_type":
            if not isinstance(value, CoolingType):
                value = cooling_type(value)
        else:
            value = self._coerce(field, value)

        setattr(self._state, field, value)

    def _coerce(self, field: str, value: Any) -> Any:
        current = getattr(self._state, field)
        if isinstance(current, bool):
            if not isinstance(value, bool):
                raise ValueError(f"{field} expects a bool, got {type(value).__name__}")
            return value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{field} expects a number, got {type(value).__name__}")
        if isinstance(current, int):
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(f"{field} expects a whole number, got {value!r}")
            return int(value)
        return float(value)

    def reset(self) -> None:
        """
        Bring all thermal bodies back to ambient and clear the halt flags.
        """
        s = self._state
        s.current_temp = s.ambient_temp
        s.heatsink_temp = s.ambient_temp
        s.coolant_temp = s.ambient_temp
        s.is_halted = False
        s.halt_reason = ""
        logger.info("system reset to ambient %.1f C", s.ambient_temp)

    def snapshot(self) -> SimulationState:
        """Return a detached copy of the state, history included."""
        s = self._state
        history = self._recorder.new_buffer()
        history.extend(s.history)
        return replace(s, history=history)

    def active_flags(self) -> list[str]:
        """Names of the experimental flags that differ from their defaults."""
        defaults = SimulationState()
        return sorted(
            name for name in FEATURE_FLAGS
            if getattr(self._state, name) != getattr(defaults, name)
        )
