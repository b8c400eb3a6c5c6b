"""
Monte Carlo simulation for option pricing.

Provides:
- GBM path generation with antithetic variates
- Monte Carlo pricing engine
- Convergence analysis tools
"""

from mc_derivatives.options.simulation.gbm import (
    MarketParameters,
    PathEnsemble,
    SimulationConfig,
    draw_antithetic_normals,
    generate_gbm_paths,
    simulate,
    validate_gbm_simulation,
)
from mc_derivatives.options.simulation.monte_carlo import (
    MonteCarloEngine,
    OptionPricingResult,
    PricingResult,
    compare_to_black_scholes,
    convergence_analysis,
    estimate_price,
    price_asian,
    price_barrier,
    price_european,
)

__all__ = [
    # GBM
    "MarketParameters",
    "SimulationConfig",
    "PathEnsemble",
    "draw_antithetic_normals",
    "generate_gbm_paths",
    "simulate",
    "validate_gbm_simulation",
    # Monte Carlo
    "PricingResult",
    "OptionPricingResult",
    "MonteCarloEngine",
    "estimate_price",
    "price_european",
    "price_asian",
    "price_barrier",
    "compare_to_black_scholes",
    "convergence_analysis",
]
