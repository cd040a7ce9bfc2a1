"""
thermalcore: fixed-step thermal, power and reliability simulator for a processor.

Features:
- Seven cooling modes (air, AIO, TEC, LN2, phase change, liquid helium, BEC)
- Load/clock governor with experimental override cascade
- Static + dynamic power model, electromigration and MTBF estimates
- Status classifier with throttling and simulated frame-rate penalty
- Deterministic simulation with an injected, seedable RNG
- Headless session runner with JSON/JSONL run artifacts
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
