"""
Centralized tolerance framework for Monte Carlo pricing.

Tolerance Tiers:
    Tier 1 (Analytical): Machine-precision achievable, deterministic results
    Tier 2 (Stochastic): CLT-derived, simulation-based estimates
    Tier 3 (Finite Difference): Greeks from bumped re-simulation

References:
    [T1] Higham (2002) "Accuracy and Stability of Numerical Algorithms"
    [T1] Glasserman (2003) Ch. 3-4 - Monte Carlo error bounds
"""

from typing import Final

import numpy as np

# =============================================================================
# Tier 1: Analytical Tolerances (Deterministic)
# =============================================================================

#: No-arbitrage bounds: option price in [0, S] or [0, K*exp(-rT)]
ANTI_PATTERN_TOLERANCE: Final[float] = 1e-10

#: Put-call parity: C - P = S*exp(-qT) - K*exp(-rT)
PUT_CALL_PARITY_TOLERANCE: Final[float] = 1e-8

#: Analytic Greeks identities (e.g. Δ_put = Δ_call - e^(-qT))
GREEKS_NUMERICAL_TOLERANCE: Final[float] = 1e-8


# =============================================================================
# Tier 2: Stochastic Tolerances (CLT-Derived)
# =============================================================================

#: Number of standard errors within which MC must match its oracle (99.7%)
MC_STANDARD_ERRORS: Final[float] = 3.0

#: z-score for reported 95% confidence intervals
CONFIDENCE_Z_95: Final[float] = 1.96


def mc_tolerance(n_paths: int, sigma: float = 0.20, confidence: float = MC_STANDARD_ERRORS) -> float:
    """
    Calculate CLT-derived Monte Carlo tolerance.

    [T1] Standard error of an MC estimate is σ/√N.

    Parameters
    ----------
    n_paths : int
        Number of Monte Carlo paths
    sigma : float
        Estimated volatility of payoff (default 0.20)
    confidence : float
        Number of standard deviations (default 3 for 99.7% CI)

    Returns
    -------
    float
        Relative tolerance for MC vs analytical comparison

    Examples
    --------
    >>> round(mc_tolerance(10_000), 4)
    0.006
    """
    return confidence * sigma / np.sqrt(n_paths)


#: Relative tolerance for 50,000 paths: 3 * 0.20 / sqrt(50000) ≈ 0.0027
MC_50K_TOLERANCE: Final[float] = 0.01


# =============================================================================
# Tier 3: Finite-Difference Greeks
# =============================================================================

#: Relative agreement between bumped-MC Greeks and analytic Greeks
#: (discretization bias plus sampling noise)
GREEKS_MC_RELATIVE_TOLERANCE: Final[float] = 0.05


# =============================================================================
# Tolerance Registry (For Dynamic Access)
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    "anti_pattern": ANTI_PATTERN_TOLERANCE,
    "put_call_parity": PUT_CALL_PARITY_TOLERANCE,
    "greeks_numerical": GREEKS_NUMERICAL_TOLERANCE,
    "mc_standard_errors": MC_STANDARD_ERRORS,
    "mc_50k": MC_50K_TOLERANCE,
    "greeks_mc_relative": GREEKS_MC_RELATIVE_TOLERANCE,
}


def get_tolerance(name: str) -> float:
    """
    Get tolerance by name from registry.

    Raises
    ------
    KeyError
        If tolerance name not found
    """
    if name not in TOLERANCE_REGISTRY:
        available = ", ".join(sorted(TOLERANCE_REGISTRY.keys()))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}")
    return TOLERANCE_REGISTRY[name]
