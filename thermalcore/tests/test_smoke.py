from __future__ import annotations

import json
from pathlib import Path
from tempfile import TemporaryDirectory

from thermalcore.config import SimConfig
from thermalcore.engine.metrics import write_run_artifacts
from thermalcore.engine.runner import SessionRunner


def test_smoke_runner_and_artifacts() -> None:
    cfg = SimConfig.from_args(
        name="smoke",
        ticks=10,
        sample_every=4,
        seed=42,
        out_dir=None,
    )

    result = SessionRunner(cfg).run()

    # ticks=10 sampled every 4 -> ticks 0, 4, 8
    assert result.metrics.total_ticks == 10
    assert result.metrics.total_samples == 3
    assert [s.tick for s in result.telemetry] == [0, 4, 8]

    # 10 frames at 60 fps do not span a full history interval twice
    assert len(result.history) == 1

    with TemporaryDirectory() as td:
        out_dir = Path(td).joinpath("run")
        write_run_artifacts(
            out_path=out_dir,
            metrics=result.metrics,
            telemetry=result.telemetry,
            history=result.history,
        )

        p = out_dir.joinpath("metrics.json")
        assert p.exists()

        data = json.loads(p.read_text(encoding="utf-8"))
        assert "run" in data

        run = data["run"]
        assert set(run.keys()) >= {
            "total_ticks",
            "total_samples",
            "start_time",
            "finish_time",
            "scenario_name",
        }
        assert run["total_ticks"] == 10
        assert run["total_samples"] == 3
        assert run["scenario_name"] == "smoke"
