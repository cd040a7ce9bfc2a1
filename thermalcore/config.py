from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path


def _clean_path_name(path_name: str) -> str:
    # Remove unsafe characters from directory name
    cleaned = [c if (c.isalnum() or c in ("-", "_")) else "_" for c in path_name]
    return "".join(cleaned).strip("_")


@dataclass(frozen=True, slots=True)
class ProcessorLimits:
    """
    Fixed operating points of the simulated processor.
    """
    throttle_point_c: float = 100.0     # Throttling begins above this (°C)
    base_clock_ghz: float = 5.0         # Stock clock (GHz)
    min_clock_ghz: float = 0.8          # Clock floor (GHz)
    history_capacity: int = 100         # Telemetry ring buffer length
    max_dt_s: float = 0.1               # Largest Euler step (simulated s)


LIMITS = ProcessorLimits()

# Physics constants
WATER_SPECIFIC_HEAT = 4.18


@dataclass(frozen=True, slots=True)
class Material:
    """
    Heatsink material.
    """
    name: str
    thermal_mass: float         # Heat capacity of the sink (J/°C, lumped)
    conductivity: float         # Relative conductivity (aluminum = 1.0)


class CoolingKind(str, Enum):
    """Closed set of cooling subsystems; each owns its own thermal ODE."""

    AIR = "AIR"
    AIO = "AIO"
    TEC = "TEC"
    LN2 = "LN2"
    PHASE = "PHASE"
    LHE = "LHE"
    BEC = "BEC"


@dataclass(frozen=True, slots=True)
class CoolingType:
    """
    Cooling configuration: which ODE runs and how much power it costs.
    """
    name: str
    kind: CoolingKind
    parasitic_power_w: float    # Pump / compressor / TEC draw (W)


MATERIALS: dict[str, Material] = {
    "ALUMINUM": Material(name="Aluminum", thermal_mass=50.0, conductivity=1.0),
    "COPPER": Material(name="Copper", thermal_mass=150.0, conductivity=2.5),
    "SILVER": Material(name="Silver", thermal_mass=140.0, conductivity=3.0),
    "DIAMOND": Material(name="Diamond", thermal_mass=40.0, conductivity=15.0),
    "GRAPHENE": Material(name="Graphene", thermal_mass=20.0, conductivity=10.0),
    "AEROGEL": Material(name="Graphene Aerogel", thermal_mass=2.0, conductivity=0.1),
    "NEUTRONIUM": Material(name="Neutronium", thermal_mass=99999.0, conductivity=999.0),
}

COOLING_TYPES: dict[str, CoolingType] = {
    "AIR": CoolingType(name="Air Cooling", kind=CoolingKind.AIR, parasitic_power_w=0.0),
    "AIO": CoolingType(name="AIO Liquid", kind=CoolingKind.AIO, parasitic_power_w=5.0),
    "TEC": CoolingType(name="Active TEC", kind=CoolingKind.TEC, parasitic_power_w=200.0),
    "LN2": CoolingType(name="Liquid Nitro", kind=CoolingKind.LN2, parasitic_power_w=0.0),
    "PHASE": CoolingType(name="Phase Change", kind=CoolingKind.PHASE, parasitic_power_w=300.0),
    "LHE": CoolingType(name="Liquid Helium", kind=CoolingKind.LHE, parasitic_power_w=500.0),
    "BEC": CoolingType(name="Bose-Einstein", kind=CoolingKind.BEC, parasitic_power_w=5000.0),
}


def material(name: str) -> Material:
    """
    Look up a heatsink material by catalog key (case-insensitive).

    Raises:
        ValueError: If the material is not in MATERIALS.
    """
    try:
        return MATERIALS[name.upper()]
    except KeyError:
        raise ValueError(
            f"unknown material {name!r}; expected one of {sorted(MATERIALS)}"
        ) from None


def cooling_type(name: str | CoolingKind) -> CoolingType:
    """
    Look up a cooling configuration by kind (case-insensitive).

    Unknown identifiers are rejected here, at configuration time, so the
    thermal model never sees a kind it cannot integrate.

    Raises:
        ValueError: If the cooling type is not in COOLING_TYPES.
    """
    key = name.value if isinstance(name, CoolingKind) else str(name).upper()
    try:
        return COOLING_TYPES[key]
    except KeyError:
        raise ValueError(
            f"unknown cooling type {name!r}; expected one of {sorted(COOLING_TYPES)}"
        ) from None


# slots are used to enfore good interface hygiene, disables dynamic attribute creation.
@dataclass(frozen=True, slots=True)
class SimConfig:
    """
    SimConfig

    Definitions and configuration for a headless simulation run

    Params:
    - name (str) : scenario name
    - ticks (int) : total number of engine ticks to run
    - frame_ms (float) : wall-clock spacing between ticks (ms)
    - sample_every (int) : record one telemetry sample every N ticks
    - seed (int) : random seed for determinism
    - out_dir (str|None) : output directory for run artifacts
                           default: artifacts/runs/<timestamp>_<name>
    """
    name: str
    ticks: int
    frame_ms: float
    sample_every: int
    seed: int
    out_dir: Path

    @staticmethod
    def from_args(
        *,
        name: str,
        ticks: int,
        frame_ms: float = 1000.0 / 60.0,
        sample_every: int = 1,
        seed: int = 0,
        out_dir: str | None = None,
    ) -> "SimConfig":
        if not isinstance(name, str) or not name:
            raise ValueError("name must be a non-empty string")
        if ticks < 0:
            raise ValueError("ticks must be >= 0")
        if not frame_ms > 0:
            raise ValueError("frame_ms must be > 0")
        if sample_every <= 0:
            raise ValueError("sample_every must be > 0")

        if out_dir is not None:
            out_dir = Path(out_dir)
        else:
            # artifacts/runs/<UTC YYYYmmdd_HHMMSS>_<scenario>
            ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
            clean_name = _clean_path_name(name)

            # Check if name is empty after cleaning
            if not clean_name:
                clean_name = "scenario"
            out_dir = Path("artifacts").joinpath(f"runs/{ts}_{clean_name}")

        return SimConfig(
            name=name,
            ticks=int(ticks),
            frame_ms=float(frame_ms),
            sample_every=int(sample_every),
            seed=int(seed),
            out_dir=out_dir,
        )
