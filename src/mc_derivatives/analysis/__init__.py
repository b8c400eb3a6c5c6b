"""
Parameter sensitivity analysis.

Provides:
- One-at-a-time price sweeps (spot, volatility, maturity, rate)
- +10% bump summary table
"""

from mc_derivatives.analysis.sensitivity import (
    SWEEPABLE_PARAMETERS,
    SensitivityResult,
    SweepParameter,
    SweepResult,
    format_sensitivity_table,
    get_default_sweeps,
    run_default_sweeps,
    run_parameter_sweep,
    summarize_sensitivity,
    sweep_config,
)

__all__ = [
    "SWEEPABLE_PARAMETERS",
    "SweepParameter",
    "SweepResult",
    "SensitivityResult",
    "get_default_sweeps",
    "run_parameter_sweep",
    "run_default_sweeps",
    "summarize_sensitivity",
    "format_sensitivity_table",
    "sweep_config",
]
