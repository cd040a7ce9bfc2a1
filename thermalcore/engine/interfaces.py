from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from ..config import COOLING_TYPES, LIMITS, MATERIALS, CoolingType, Material


class ThermalStatus(str, Enum):
    """Operating-status label shown by telemetry consumers."""

    OPTIMAL = "OPTIMAL"
    OVERCLOCKED = "OVERCLOCKED"
    CRITICAL = "CRITICAL"
    THROTTLING = "THROTTLING"
    CRITICAL_HEAT = "CRITICAL_HEAT"
    TEMPORAL_DRIFT = "TEMPORAL_DRIFT"
    SINGULARITY = "SINGULARITY"
    I_AM_ALIVE = "I_AM_ALIVE"
    REALITY_FAIL = "REALITY_FAIL"


class RandomSource(Protocol):
    """
    The single entropy source of the engine.

    random.Random satisfies this protocol; tests may pass any object with
    the same two methods.
    """

    def random(self) -> float:
        """Return a float in [0, 1)."""
        ...

    def uniform(self, a: float, b: float) -> float:
        """Return a float between a and b."""
        ...


@dataclass(frozen=True, slots=True)
class HistorySample:
    """
    One point of the telemetry ring buffer.
    """
    temp: float             # Die temperature (°C)
    clock: float            # Core clock (GHz)
    health: float           # Silicon health (%)


def _new_history() -> deque[HistorySample]:
    return deque(maxlen=LIMITS.history_capacity)


@dataclass(slots=True)
class SimulationState:
    """
    Shared mutable record advanced in place by every sub-model.

    Only the engine writes derived fields. Operator inputs, configuration
    and feature flags are written between ticks through
    ThermalEngine.set_input. Temperatures, clock and power are unbounded
    on purpose; only condensation_risk and silicon_health are clamped.
    """
    # Operator inputs
    target_load: float = 10.0           # %
    fan_speed: float = 40.0             # %
    ambient_temp: float = 25.0          # °C
    humidity: float = 50.0              # %
    paste_quality: float = 0.9          # ratio
    voltage: float = 1.20               # V
    dust_density: float = 0.0           # %
    clock_ratio: float = 1.0            # multiplier
    core_count: int = 8
    smt_enabled: bool = True

    # Configuration
    material: Material = MATERIALS["ALUMINUM"]
    cooling_type: CoolingType = COOLING_TYPES["AIR"]

    # Feature flags
    superconductor: bool = False
    quantum: bool = False
    unlock_voltage: bool = False
    disable_safety: bool = False
    recursive_smt: bool = False
    dark_silicon: bool = False
    neural_prediction: bool = False
    singularity: bool = False
    vacuum_energy: bool = False
    temporal_clock: bool = False
    fusion: bool = False
    matter_shift: bool = False
    infinite_core: bool = False
    reality_anchor: bool = True
    sentience: bool = False
    entropy: float = 0.0                # 0-100
    time_dilation: float = 1.0          # > 0

    # Derived live state
    current_temp: float = 25.0
    heatsink_temp: float = 25.0
    coolant_temp: float = 25.0
    dew_point: float = 0.0
    condensation_risk: float = 0.0
    is_halted: bool = False
    halt_reason: str = ""
    silicon_health: float = 100.0
    leakage_current: float = 0.0        # mA
    thermal_resistance: float = 0.0     # K/W
    mtbf: float = 87600.0               # hours
    current_clock: float = LIMITS.base_clock_ghz
    target_clock: float = LIMITS.base_clock_ghz
    current_load: float = 10.0
    power_draw: float = 0.0             # W
    heat_in: float = 0.0                # W into the thermal integrator
    thermal_status: ThermalStatus = ThermalStatus.OPTIMAL
    fps: float = 60.0

    history: deque[HistorySample] = field(default_factory=_new_history)


OPERATOR_INPUTS = frozenset({
    "target_load", "fan_speed", "ambient_temp", "humidity", "paste_quality",
    "voltage", "dust_density", "clock_ratio", "core_count", "smt_enabled",
})

CONFIGURATION_FIELDS = frozenset({"material", "cooling_type"})

FEATURE_FLAGS = frozenset({
    "superconductor", "quantum", "unlock_voltage", "disable_safety",
    "recursive_smt", "dark_silicon", "neural_prediction", "singularity",
    "vacuum_energy", "temporal_clock", "fusion", "matter_shift",
    "infinite_core", "reality_anchor", "sentience", "entropy",
    "time_dilation",
})

WRITABLE_FIELDS = OPERATOR_INPUTS | CONFIGURATION_FIELDS | FEATURE_FLAGS


# Headless run records

@dataclass(frozen=True, slots=True)
class TelemetrySample:
    """
    Engine state sampled by the session runner.

    These samples are written to telemetry.json for offline analysis.
    """
    tick: int                   # Tick index
    time_s: float               # Accumulated simulated time (s)
    temp_c: float               # Die temperature (°C)
    heatsink_c: float           # Heatsink / pot temperature (°C)
    coolant_c: float            # Coolant temperature (°C)
    clock_ghz: float            # Core clock (GHz)
    load_pct: float             # Current load (%)
    power_w: float              # Reported power draw (W)
    fps: float                  # Simulated frame rate
    status: str                 # ThermalStatus value
    health_pct: float           # Silicon health (%)
    condensation_risk: float    # [0, 100]
    mtbf_h: float               # Mean time between failures (h)


@dataclass(frozen=True, slots=True)
class RunMetrics:
    total_ticks: int
    total_samples: int
    simulated_s: float
    start_time: str
    finish_time: str
    scenario_name: str
    final_status: str
    final_health_pct: float


@dataclass(frozen=True, slots=True)
class RunResult:
    """
    Complete results from a headless run.

    Attributes:
        metrics: Run-level metadata (timing, scenario name, counts).
        telemetry: Sampled engine state, one entry per sample_every ticks.
        history: The engine's history ring buffer at the end of the run.
    """
    metrics: RunMetrics
    telemetry: list[TelemetrySample]
    history: list[HistorySample]
