"""
Artifact writing for thermalcore headless runs.

Artifacts are the output of a headless session, enabling:
- Regression testing (compare outputs across runs)
- Offline analysis and plotting without re-running
- Integration with external tools (JSON/JSONL formats)

Artifact files produced:
- metrics.json: Run metadata
- telemetry.json: Sampled engine state
- history.jsonl: The engine's history ring buffer at the end of the run

Example artifact directory structure:
```
artifacts/runs/20240115_120000_stress/
├── metrics.json       # Run metadata
├── telemetry.json     # Sampled state
└── history.jsonl      # Temp / clock / health ring buffer
```

Non-finite floats (a singularity run reaching -inf, for instance) are
written as JSON's de-facto Infinity / NaN tokens, which json.loads reads
back.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

from .interfaces import HistorySample, RunMetrics, TelemetrySample


def write_run_artifacts(
    *,
    out_path: Path,
    metrics: RunMetrics,
    telemetry: list[TelemetrySample] | None = None,
    history: list[HistorySample] | None = None,
) -> None:
    """
    Write all run artifacts to disk.

    Creates the output directory (if needed) and writes each artifact for
    which data is provided. metrics.json is always written.

    Args:
        out_path: Output directory path, created with parents if missing.
        metrics: Run-level metrics.
        telemetry: Optional telemetry samples; writes telemetry.json when
                   non-empty.
        history: Optional history samples; writes history.jsonl when
                 non-empty.

    Example:
        >>> write_run_artifacts(
        ...     out_path=Path("artifacts/runs/my_run"),
        ...     metrics=result.metrics,
        ...     telemetry=result.telemetry,
        ...     history=result.history,
        ... )
    """
    out_path = Path(out_path)
    out_path.mkdir(parents=True, exist_ok=True)

    _write_metrics_json(out_path, metrics)

    if telemetry:
        _write_telemetry_json(out_path, telemetry)

    if history:
        _write_history_jsonl(out_path, history)


def _write_metrics_json(out_path: Path, metrics: RunMetrics) -> None:
    """
    Write metrics.json artifact.

    Schema:
    {
        "run": {
            "total_ticks": int,
            "total_samples": int,
            "simulated_s": float,
            "start_time": str (ISO 8601),
            "finish_time": str (ISO 8601),
            "scenario_name": str,
            "final_status": str,
            "final_health_pct": float
        }
    }
    """
    payload = {"run": asdict(metrics)}

    metrics_path = out_path / "metrics.json"
    metrics_path.write_text(
        json.dumps(payload, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )


def _write_telemetry_json(out_path: Path, telemetry: list[TelemetrySample]) -> None:
    """
    Write telemetry.json artifact.

    Schema:
    {
        "samples": [
            {
                "tick": int,
                "time_s": float,
                "temp_c": float,
                "heatsink_c": float,
                "coolant_c": float,
                "clock_ghz": float,
                "load_pct": float,
                "power_w": float,
                "fps": float,
                "status": str,
                "health_pct": float,
                "condensation_risk": float,
                "mtbf_h": float
            },
            ...
        ]
    }
    """
    payload = {"samples": [asdict(s) for s in telemetry]}
    telemetry_path = out_path / "telemetry.json"
    telemetry_path.write_text(
        json.dumps(payload, indent=2) + "\n",
        encoding="utf-8",
    )


def _write_history_jsonl(out_path: Path, history: list[HistorySample]) -> None:
    """
    Write history.jsonl artifact, oldest sample first.

    Each line schema:
    {"clock": float, "health": float, "temp": float}
    """
    history_path = out_path / "history.jsonl"
    with history_path.open("w", encoding="utf-8") as f:
        for sample in history:
            json.dump(asdict(sample), f, sort_keys=True)
            f.write("\n")
