"""
mc-derivatives: Monte Carlo pricing of European, Asian and barrier options.

Quick Start
-----------
>>> from mc_derivatives import MarketParameters, SimulationConfig, price_european
>>> params = MarketParameters(spot=100.0, strike=100.0, time_to_expiry=1.0, rate=0.05, volatility=0.20)
>>> result = price_european(params, SimulationConfig(num_paths=100_000, seed=12345))

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Market Inputs and Simulation
# =============================================================================
from mc_derivatives.options.simulation.gbm import (
    MarketParameters,
    PathEnsemble,
    SimulationConfig,
    generate_gbm_paths,
    simulate,
)

# =============================================================================
# Monte Carlo Pricing
# =============================================================================
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
from mc_derivatives.options.payoffs import (
    AsianPayoff,
    DownAndOutBarrierPayoff,
    EuropeanPayoff,
    OptionFamily,
    OptionType,
)

# =============================================================================
# Greeks
# =============================================================================
from mc_derivatives.options.greeks import GreeksResult, OptionGreeks, compute_greeks
from mc_derivatives.config.settings import GreekBumps

# =============================================================================
# Analytical Oracle
# =============================================================================
from mc_derivatives.options.pricing import (
    black_scholes_call,
    black_scholes_greeks,
    black_scholes_put,
)

# =============================================================================
# Sensitivity Analysis
# =============================================================================
from mc_derivatives.analysis.sensitivity import (
    format_sensitivity_table,
    run_parameter_sweep,
    summarize_sensitivity,
)

# =============================================================================
# Configuration and Errors
# =============================================================================
from mc_derivatives.config.settings import SETTINGS
from mc_derivatives.errors import ConfigurationError, DomainWarning

__all__ = [
    "__version__",
    # Inputs and simulation
    "MarketParameters",
    "SimulationConfig",
    "PathEnsemble",
    "generate_gbm_paths",
    "simulate",
    # Pricing
    "MonteCarloEngine",
    "PricingResult",
    "OptionPricingResult",
    "estimate_price",
    "price_european",
    "price_asian",
    "price_barrier",
    "compare_to_black_scholes",
    "convergence_analysis",
    "EuropeanPayoff",
    "AsianPayoff",
    "DownAndOutBarrierPayoff",
    "OptionFamily",
    "OptionType",
    # Greeks
    "compute_greeks",
    "GreeksResult",
    "OptionGreeks",
    "GreekBumps",
    # Oracle
    "black_scholes_call",
    "black_scholes_put",
    "black_scholes_greeks",
    # Sensitivity
    "run_parameter_sweep",
    "summarize_sensitivity",
    "format_sensitivity_table",
    # Config and errors
    "SETTINGS",
    "ConfigurationError",
    "DomainWarning",
]
