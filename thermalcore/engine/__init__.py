from __future__ import annotations

from thermalcore.engine.interfaces import (
    HistorySample,
    RandomSource,
    RunMetrics,
    RunResult,
    SimulationState,
    TelemetrySample,
    ThermalStatus,
)

__all__ = [
    "HistorySample",
    "RandomSource",
    "RunMetrics",
    "RunResult",
    "SimulationState",
    "TelemetrySample",
    "ThermalStatus",
]
