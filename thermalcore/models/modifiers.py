"""
Ordered modifier stages for the experimental feature flags.

Several quantities (the target clock, the heat fed to the thermal
integrator, the reported power draw) are pushed through a cascade of
flag-driven adjustments. The precedence of that cascade is part of the
model: an override discards everything before it, a scale or offset
builds on it. Declaring each adjustment as a named stage keeps the
precedence explicit instead of implicit in if-statement order.

Example:
    >>> import random
    >>> ctx = StageContext(state=SimulationState(), rng=random.Random(0))
    >>> stages = (
    ...     ModifierStage("double", StageMode.SCALE, lambda c: True, lambda c: 2.0),
    ...     ModifierStage("pin", StageMode.OVERRIDE, lambda c: True, lambda c: 7.0),
    ... )
    >>> apply_modifiers(3.0, stages, ctx).value
    7.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Mapping, Optional, Sequence

from ..engine.interfaces import RandomSource, SimulationState, ThermalStatus


class StageMode(str, Enum):
    """How a stage combines with the value produced by earlier stages."""

    OVERRIDE = "override"   # replace the running value
    SCALE = "scale"         # multiply the running value
    OFFSET = "offset"       # add to the running value


@dataclass(slots=True)
class StageContext:
    """
    What a stage may look at while evaluating.

    Stages may also write to `state` (e.g. sentience drives the voltage);
    such writes are visible to later stages and later sub-models.
    """
    state: SimulationState
    rng: RandomSource
    now_ms: float = 0.0
    value: float = 0.0
    terms: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ModifierStage:
    """
    One named step of a modifier cascade.

    `evaluate` returns the replacement value (OVERRIDE), the factor
    (SCALE) or the increment (OFFSET). `status`, when set, is the label
    this stage imposes on the processor while active.
    """
    name: str
    mode: StageMode
    enabled: Callable[[StageContext], bool]
    evaluate: Callable[[StageContext], float]
    status: Optional[ThermalStatus] = None


@dataclass(frozen=True, slots=True)
class ModifierResult:
    value: float
    status: Optional[ThermalStatus]      # Status of the last active stage with one
    applied: tuple[str, ...]             # Names of active stages, in order


def apply_modifiers(
    base: float,
    stages: Sequence[ModifierStage],
    ctx: StageContext,
) -> ModifierResult:
    """
    Run `base` through `stages` in declaration order.

    Every enabled stage is evaluated, so random draws made by a stage
    happen even when a later stage overrides its result.

    Args:
        base: Value before any modifier
        stages: Ordered cascade
        ctx: Evaluation context; ctx.value tracks the running value

    Returns:
        ModifierResult with the final value, the visible status and the
        names of the stages that fired
    """
    value = base
    status: Optional[ThermalStatus] = None
    applied: list[str] = []

    for stage in stages:
        ctx.value = value
        if not stage.enabled(ctx):
            continue

        result = stage.evaluate(ctx)
        if stage.mode is StageMode.OVERRIDE:
            value = result
        elif stage.mode is StageMode.SCALE:
            value *= result
        else:
            value += result

        if stage.status is not None:
            status = stage.status
        applied.append(stage.name)

    ctx.value = value
    return ModifierResult(value=value, status=status, applied=tuple(applied))
