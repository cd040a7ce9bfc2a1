"""
Plotting utilities for thermalcore run artifacts.

Figures can be generated directly from RunResult objects or from
artifact files on disk.

Requires matplotlib: pip install thermalcore[plot]
"""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from .interfaces import RunResult


def check_matplotlib_available() -> bool:
    """Check if matplotlib is available."""
    try:
        import matplotlib  # noqa: F401
        return True
    except ImportError:
        return False


def _require_matplotlib() -> None:
    if not check_matplotlib_available():
        raise RuntimeError(
            "matplotlib not installed. Install with: pip install thermalcore[plot]"
        )


def _draw(samples: Sequence[dict[str, Any]], title: str):
    """Build the 4-panel telemetry figure from plain sample dicts."""
    import matplotlib.pyplot as plt

    times = [s["time_s"] for s in samples]

    fig, axes = plt.subplots(4, 1, figsize=(10, 10), sharex=True)

    # Panel 1: Temperatures
    ax1 = axes[0]
    ax1.plot(times, [s["temp_c"] for s in samples], "r-", linewidth=1.5, label="Die")
    ax1.plot(times, [s["heatsink_c"] for s in samples], "b--", linewidth=1.2, label="Heatsink")
    ax1.plot(times, [s["coolant_c"] for s in samples], "c:", linewidth=1.2, label="Coolant")
    ax1.axhline(y=100.0, color="black", linestyle=":", linewidth=1.0, label="Throttle point")
    ax1.set_ylabel("Temperature (°C)")
    ax1.grid(True, alpha=0.3)
    ax1.legend(loc="upper left")

    # Panel 2: Clock and simulated fps
    ax2 = axes[1]
    color_clock = "tab:purple"
    color_fps = "tab:orange"
    ax2.plot(times, [s["clock_ghz"] for s in samples], color=color_clock,
             linewidth=1.5, label="Clock")
    ax2.set_ylabel("Clock (GHz)", color=color_clock)
    ax2.tick_params(axis="y", labelcolor=color_clock)

    ax2_twin = ax2.twinx()
    ax2_twin.plot(times, [s["fps"] for s in samples], color=color_fps,
                  linewidth=1.0, linestyle="--", label="FPS")
    ax2_twin.set_ylabel("Simulated FPS", color=color_fps)
    ax2_twin.tick_params(axis="y", labelcolor=color_fps)
    ax2.grid(True, alpha=0.3)

    lines1, labels1 = ax2.get_legend_handles_labels()
    lines2, labels2 = ax2_twin.get_legend_handles_labels()
    ax2.legend(lines1 + lines2, labels1 + labels2, loc="upper left")

    # Panel 3: Power and load
    ax3 = axes[2]
    ax3.plot(times, [s["power_w"] for s in samples], "g-", linewidth=1.5, label="Power")
    ax3.set_ylabel("Power (W)")
    ax3_twin = ax3.twinx()
    ax3_twin.plot(times, [s["load_pct"] for s in samples], "m--", linewidth=1.2, label="Load")
    ax3_twin.set_ylabel("Load (%)")
    ax3.grid(True, alpha=0.3)

    lines1, labels1 = ax3.get_legend_handles_labels()
    lines2, labels2 = ax3_twin.get_legend_handles_labels()
    ax3.legend(lines1 + lines2, labels1 + labels2, loc="upper left")

    # Panel 4: Reliability
    ax4 = axes[3]
    ax4.plot(times, [s["health_pct"] for s in samples], "k-", linewidth=1.5, label="Silicon health")
    ax4.set_ylabel("Health (%)")
    ax4.grid(True, alpha=0.3)
    ax4.legend(loc="lower left")
    ax4.set_xlabel("Simulated time (s)")

    fig.suptitle(title, fontsize=14, fontweight="bold")
    plt.tight_layout()
    return fig


def plot_run_results(
    result: "RunResult",
    output_path: Path | str | None = None,
    show: bool = False,
    title: str | None = None,
) -> None:
    """
    Generate a multi-panel plot of a headless run.

    Panels:
    1. Die, heatsink and coolant temperature (with the throttle point)
    2. Core clock and simulated fps
    3. Power draw and load
    4. Silicon health

    Args:
        result: RunResult from SessionRunner.run().
        output_path: Path to save the figure (PNG, PDF, etc.).
                     If None and show=False, saves to 'thermal_plot.png'.
        show: If True, display the plot interactively.
        title: Optional title for the figure.

    Raises:
        RuntimeError: If matplotlib is not installed.
        ValueError: If the result has no telemetry.
    """
    _require_matplotlib()
    import matplotlib.pyplot as plt

    if not result.telemetry:
        raise ValueError("No telemetry in result")

    if title is None:
        title = (
            f"thermalcore: {result.metrics.scenario_name} "
            f"({result.metrics.total_ticks} ticks)"
        )

    fig = _draw([asdict(s) for s in result.telemetry], title)

    if output_path:
        output_path = Path(output_path)
        plt.savefig(output_path, dpi=150, bbox_inches="tight")
        print(f"Plot saved to: {output_path}")
    elif not show:
        plt.savefig("thermal_plot.png", dpi=150, bbox_inches="tight")
        print("Plot saved to: thermal_plot.png")

    if show:
        plt.show()

    plt.close(fig)


def plot_from_artifacts(
    artifact_dir: Path | str,
    output_path: Path | str | None = None,
    show: bool = False,
) -> Path:
    """
    Generate a plot from artifact files on disk.

    Args:
        artifact_dir: Directory containing metrics.json and telemetry.json.
        output_path: Path to save the figure. If None, saves to artifact_dir/plot.png.
        show: If True, display the plot interactively.

    Returns:
        Path of the saved figure.

    Raises:
        RuntimeError: If matplotlib is not installed.
        FileNotFoundError: If required artifact files are missing.
    """
    _require_matplotlib()
    import matplotlib.pyplot as plt

    artifact_dir = Path(artifact_dir)

    metrics_path = artifact_dir / "metrics.json"
    if not metrics_path.exists():
        raise FileNotFoundError(f"metrics.json not found in {artifact_dir}")
    with metrics_path.open() as f:
        metrics_data = json.load(f)

    telemetry_path = artifact_dir / "telemetry.json"
    if not telemetry_path.exists():
        raise FileNotFoundError(f"telemetry.json not found in {artifact_dir}")
    with telemetry_path.open() as f:
        samples = json.load(f).get("samples", [])

    if not samples:
        raise ValueError("No samples in telemetry.json")

    run_info = metrics_data.get("run", {})
    scenario = run_info.get("scenario_name", "unknown")
    total_ticks = run_info.get("total_ticks", len(samples))
    fig = _draw(samples, f"thermalcore: {scenario} ({total_ticks} ticks)")

    if output_path is None:
        output_path = artifact_dir / "plot.png"
    else:
        output_path = Path(output_path)

    plt.savefig(output_path, dpi=150, bbox_inches="tight")
    print(f"Plot saved to: {output_path}")

    if show:
        plt.show()

    plt.close(fig)
    return output_path
