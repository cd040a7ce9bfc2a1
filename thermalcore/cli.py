"""
Command-line interface for thermalcore.

Runs the thermal engine headless for a fixed number of ticks, writes the
run artifacts and optionally plots them.

Usage:
    # Idle on the default air cooler
    thermalcore --name idle --ticks 600

    # Scripted scenario with a different cooler
    thermalcore --name stress --scenario stress --ticks 1200 --plot

    # Experimental flags
    thermalcore --name chaos --enable quantum --enable fusion --no-reality-anchor

Entry points:
    - thermalcore: Direct CLI command (from pyproject.toml)
    - python -m thermalcore: Module execution
"""

from __future__ import annotations

import argparse
import logging
import sys

from .config import COOLING_TYPES, MATERIALS, SimConfig
from .engine.engine import ThermalEngine
from .engine.interfaces import FEATURE_FLAGS
from .engine.metrics import write_run_artifacts
from .engine.runner import SessionRunner
from .scenarios import SCENARIOS

# Boolean flags that --enable can switch on
_TOGGLES = sorted(
    name for name in FEATURE_FLAGS
    if name not in ("entropy", "time_dilation", "reality_anchor")
)


def _build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser for the CLI.

    Returns:
        Configured ArgumentParser with all supported options.
    """
    p = argparse.ArgumentParser(
        prog="thermalcore",
        description="thermalcore: processor thermal / power / reliability simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  thermalcore --name smoke --ticks 60
      Run one simulated second at 60 fps

  thermalcore --name ln2 --cooling LN2 --material COPPER --load 100
      Full load on liquid nitrogen

  thermalcore --name stress --scenario stress --plot
      Push past the throttle point and plot the run
""",
    )

    # ─────────────────────────────────────────────────────────────────
    # Run parameters
    # ─────────────────────────────────────────────────────────────────
    p.add_argument(
        "--name",
        type=str,
        default="default",
        help="Scenario name for artifact directory (default: %(default)s)",
    )
    p.add_argument(
        "--ticks",
        type=int,
        default=600,
        help="Engine ticks to run (>= 0) (default: %(default)s)",
    )
    p.add_argument(
        "--frame-ms",
        type=float,
        default=1000.0 / 60.0,
        help="Host frame interval in ms (default: 60 fps)",
    )
    p.add_argument(
        "--sample-every",
        type=int,
        default=6,
        help="Record one telemetry sample every N ticks (default: %(default)s)",
    )
    p.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed (default: %(default)s)",
    )
    p.add_argument(
        "--out-dir",
        type=str,
        default=None,
        help="Output directory (default: artifacts/runs/<timestamp>_<name>)",
    )
    p.add_argument(
        "--scenario",
        choices=sorted(SCENARIOS),
        default=None,
        help="Scripted input schedule applied before every tick",
    )

    # ─────────────────────────────────────────────────────────────────
    # Initial operator inputs
    # ─────────────────────────────────────────────────────────────────
    p.add_argument("--cooling", choices=sorted(COOLING_TYPES), default="AIR",
                   help="Cooling type (default: %(default)s)")
    p.add_argument("--material", choices=sorted(MATERIALS), default="ALUMINUM",
                   help="Heatsink material (default: %(default)s)")
    p.add_argument("--load", type=float, default=10.0,
                   help="Target load %% (default: %(default)s)")
    p.add_argument("--voltage", type=float, default=1.20,
                   help="Core voltage in V (default: %(default)s)")
    p.add_argument("--fan", type=float, default=40.0,
                   help="Fan speed %% (default: %(default)s)")
    p.add_argument("--ambient", type=float, default=25.0,
                   help="Ambient temperature in C (default: %(default)s)")

    # ─────────────────────────────────────────────────────────────────
    # Experimental flags
    # ─────────────────────────────────────────────────────────────────
    p.add_argument(
        "--enable",
        action="append",
        choices=_TOGGLES,
        default=[],
        metavar="FLAG",
        help=f"Switch on an experimental flag (repeatable): {', '.join(_TOGGLES)}",
    )
    p.add_argument(
        "--no-reality-anchor",
        action="store_true",
        help="Drop the reality anchor (chaotic clock, heat and power)",
    )

    # ─────────────────────────────────────────────────────────────────
    # Output
    # ─────────────────────────────────────────────────────────────────
    p.add_argument(
        "--plot",
        action="store_true",
        help="Write plot.png next to the artifacts (requires matplotlib)",
    )
    p.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: %(default)s)",
    )

    return p


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point.

    Parses arguments, configures the engine, runs the session and writes
    artifacts to disk.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 for success, non-zero for errors
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = SimConfig.from_args(
            name=args.name,
            ticks=args.ticks,
            frame_ms=args.frame_ms,
            sample_every=args.sample_every,
            seed=args.seed,
            out_dir=args.out_dir,
        )
    except ValueError as e:
        parser.error(str(e))

    # ─────────────────────────────────────────────────────────────────
    # Configure the engine from the initial inputs
    # ─────────────────────────────────────────────────────────────────
    engine = ThermalEngine(seed=config.seed)
    engine.set_input("cooling_type", args.cooling)
    engine.set_input("material", args.material)
    engine.set_input("target_load", args.load)
    engine.set_input("voltage", args.voltage)
    engine.set_input("fan_speed", args.fan)
    engine.set_input("ambient_temp", args.ambient)
    for flag in args.enable:
        engine.set_input(flag, True)
    if args.no_reality_anchor:
        engine.set_input("reality_anchor", False)
    engine.reset()

    schedule = SCENARIOS[args.scenario]() if args.scenario else None

    runner = SessionRunner(config, engine=engine, schedule=schedule)
    result = runner.run()

    write_run_artifacts(
        out_path=config.out_dir,
        metrics=result.metrics,
        telemetry=result.telemetry,
        history=result.history,
    )
    metrics_file = config.out_dir / "metrics.json"

    if args.plot:
        from .engine.plotting import plot_run_results

        try:
            plot_run_results(result, output_path=config.out_dir / "plot.png")
        except (RuntimeError, ValueError) as e:
            print(f"Plot skipped: {e}", file=sys.stderr)

    # ─────────────────────────────────────────────────────────────────
    # Print summary to stdout
    # ─────────────────────────────────────────────────────────────────
    state = engine.state
    print(f"{result.metrics.scenario_name}: ", end="")
    print(f"ticks={result.metrics.total_ticks} ", end="")
    print(f"sim={result.metrics.simulated_s:.2f}s ", end="")
    print(f"temp={state.current_temp:.1f}C ", end="")
    print(f"clock={state.current_clock:.2f}GHz ", end="")
    print(f"status={result.metrics.final_status}", end="")
    flags = engine.active_flags()
    if flags:
        print(f" flags={','.join(flags)}", end="")
    print(f" -> {metrics_file}")

    return 0


# Allow module execution: python -m thermalcore.cli
if __name__ == "__main__":
    sys.exit(main())
