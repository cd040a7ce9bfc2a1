from __future__ import annotations

from collections import deque

from ..config import LIMITS
from .interfaces import HistorySample, SimulationState

HISTORY_INTERVAL_S = 0.1


class HistoryRecorder:
    """
    Time-sampled ring buffer of temperature, clock and health.

    Simulated time is accumulated across ticks; once more than
    HISTORY_INTERVAL_S has passed a sample is appended and the accumulator
    restarts from zero. The deque's maxlen evicts the oldest sample, so
    the buffer never exceeds its capacity.
    """

    def __init__(self, capacity: int = LIMITS.history_capacity):
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self.capacity = capacity
        self._elapsed_s: float = 0.0

    def new_buffer(self) -> deque[HistorySample]:
        return deque(maxlen=self.capacity)

    def reset(self) -> None:
        """Restart the sampling interval."""
        self._elapsed_s = 0.0

    def record(self, state: SimulationState, dt_s: float) -> HistorySample | None:
        """
        Advance the sampling clock and append a sample when it is due.

        Args:
            state: Simulation state; state.history is appended to
            dt_s: Simulated time covered by this tick

        Returns:
            The appended sample, or None if no sample was due
        """
        self._elapsed_s += dt_s
        if self._elapsed_s <= HISTORY_INTERVAL_S:
            return None

        sample = HistorySample(
            temp=state.current_temp,
            clock=state.current_clock,
            health=state.silicon_health,
        )
        state.history.append(sample)
        self._elapsed_s = 0.0
        return sample
