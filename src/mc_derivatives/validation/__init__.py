"""
Validation framework for pricing inputs and results.

Provides HALT/WARN/PASS gates:
- MarketParametersGate: finite, in-domain market inputs
- SimulationSizeGate: path/step counts, seed, workers
- DegenerateDiffusionGate: zero maturity or volatility
- BarrierLevelGate: knock-out level sanity
- StandardErrorGate: single-path degeneracy
- PriceBoundsGate: no-arbitrage checks on prices
"""

from mc_derivatives.validation.gates import (
    BarrierLevelGate,
    DegenerateDiffusionGate,
    GateResult,
    # Enums and Results
    GateStatus,
    # Specific Gates
    MarketParametersGate,
    PriceBoundsGate,
    SimulationSizeGate,
    StandardErrorGate,
    # Engine
    ValidationEngine,
    # Base Gate
    ValidationGate,
    ValidationReport,
    check_price_bounds,
    ensure_valid,
    # Convenience Functions
    validate_inputs,
)

__all__ = [
    # Enums and Results
    "GateStatus",
    "GateResult",
    "ValidationReport",
    # Base Gate
    "ValidationGate",
    # Specific Gates
    "MarketParametersGate",
    "SimulationSizeGate",
    "DegenerateDiffusionGate",
    "BarrierLevelGate",
    "StandardErrorGate",
    "PriceBoundsGate",
    # Engine
    "ValidationEngine",
    # Convenience Functions
    "validate_inputs",
    "ensure_valid",
    "check_price_bounds",
]
