from __future__ import annotations

import pytest

from thermalcore.engine.history import HistoryRecorder
from thermalcore.engine.interfaces import SimulationState


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        HistoryRecorder(0)


def test_sample_only_after_interval():
    recorder = HistoryRecorder(10)
    state = SimulationState()
    state.history = recorder.new_buffer()

    assert recorder.record(state, 0.05) is None
    sample = recorder.record(state, 0.06)

    assert sample is not None
    assert sample.temp == state.current_temp
    assert sample.clock == state.current_clock
    assert sample.health == state.silicon_health
    assert list(state.history) == [sample]


def test_interval_is_strictly_exceeded():
    recorder = HistoryRecorder(10)
    state = SimulationState()

    assert recorder.record(state, 0.1) is None
    assert len(state.history) == 0


def test_accumulator_restarts_after_sample():
    recorder = HistoryRecorder(10)
    state = SimulationState()

    recorder.record(state, 0.5)     # one sample, not five
    assert len(state.history) == 1
    assert recorder.record(state, 0.05) is None


def test_zero_dt_never_samples():
    recorder = HistoryRecorder(10)
    state = SimulationState()
    for _ in range(1000):
        recorder.record(state, 0.0)
    assert len(state.history) == 0


def test_oldest_sample_evicted_first():
    recorder = HistoryRecorder(3)
    state = SimulationState()
    state.history = recorder.new_buffer()

    for temp in (30.0, 31.0, 32.0, 33.0, 34.0):
        state.current_temp = temp
        recorder.record(state, 0.2)

    assert len(state.history) == 3
    assert [s.temp for s in state.history] == [32.0, 33.0, 34.0]


def test_reset_restarts_interval():
    recorder = HistoryRecorder(10)
    state = SimulationState()

    recorder.record(state, 0.09)
    recorder.reset()

    assert recorder.record(state, 0.05) is None
