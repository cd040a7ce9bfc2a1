"""
Headless host for the thermal engine.

The interactive renderer drives the engine from its animation callback.
SessionRunner plays that role without a display: it advances a fake
wall clock by a fixed frame interval, applies scripted operator input
writes between ticks, and samples telemetry for the run artifacts.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Callable, Mapping, Optional

from ..config import SimConfig
from .engine import ThermalEngine
from .interfaces import RunMetrics, RunResult, SimulationState, TelemetrySample

logger = logging.getLogger(__name__)


def sample_state(tick: int, time_s: float, s: SimulationState) -> TelemetrySample:
    return TelemetrySample(
        tick=tick,
        time_s=time_s,
        temp_c=s.current_temp,
        heatsink_c=s.heatsink_temp,
        coolant_c=s.coolant_temp,
        clock_ghz=s.current_clock,
        load_pct=s.current_load,
        power_w=s.power_draw,
        fps=s.fps,
        status=s.thermal_status.value,
        health_pct=s.silicon_health,
        condensation_risk=s.condensation_risk,
        mtbf_h=s.mtbf,
    )


class SessionRunner:
    """
    Drives one ThermalEngine through a scripted session.

    Time is the runner's: tick i is issued at (i + 1) · frame_ms on a
    clock that starts at 0, so two runs with the same config, seed and
    schedule are identical.
    """

    def __init__(
        self,
        config: SimConfig,
        engine: Optional[ThermalEngine] = None,
        schedule: Optional[Callable[[int], Mapping[str, object]]] = None,
    ) -> None:
        """
        Args:
            config: Run configuration (ticks, frame interval, sampling, seed)
            engine: Engine to drive. When None, a default engine seeded
                    with config.seed is created.
            schedule: Optional input schedule returning the writes to apply
                      before each tick. Signature: `(tick: int) -> mapping`
        """
        self._cfg = config
        self._engine = engine if engine is not None else ThermalEngine(seed=config.seed)
        self._schedule = schedule

    @property
    def engine(self) -> ThermalEngine:
        return self._engine

    def run(self) -> RunResult:
        """
        Run the session.

        For each tick:
        1. Apply scheduled input writes (if any)
        2. Tick the engine at the next frame time
        3. Record a telemetry sample every `sample_every` ticks

        Returns:
            RunResult with metrics, telemetry and the final history
        """
        start_time = datetime.now(timezone.utc).isoformat()
        logger.info("run %s: %d ticks at %.2f ms", self._cfg.name, self._cfg.ticks, self._cfg.frame_ms)

        telemetry: list[TelemetrySample] = []
        start_s = self._engine.simulated_s

        for tick in range(self._cfg.ticks):
            if self._schedule is not None:
                for field, value in self._schedule(tick).items():
                    self._engine.set_input(field, value)

            now_ms = (tick + 1) * self._cfg.frame_ms
            state = self._engine.tick(now_ms)
            simulated_s = self._engine.simulated_s - start_s

            if tick % self._cfg.sample_every == 0:
                telemetry.append(sample_state(tick, simulated_s, state))

        final = self._engine.state
        simulated_s = self._engine.simulated_s - start_s
        finish_time = datetime.now(timezone.utc).isoformat()
        metrics = RunMetrics(
            total_ticks=self._cfg.ticks,
            total_samples=len(telemetry),
            simulated_s=simulated_s,
            start_time=start_time,
            finish_time=finish_time,
            scenario_name=self._cfg.name,
            final_status=final.thermal_status.value,
            final_health_pct=final.silicon_health,
        )

        # Validate that metrics are serializable (fail-fast check)
        _ = asdict(metrics)

        logger.info(
            "run %s finished: %.2f simulated s, status %s",
            self._cfg.name, simulated_s, metrics.final_status,
        )
        return RunResult(
            metrics=metrics,
            telemetry=telemetry,
            history=list(final.history),
        )

