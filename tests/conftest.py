"""
Centralized pytest fixtures for mc-derivatives test suite.

This module provides shared fixtures used across all test categories:
- anti_patterns/
- unit/
- validation/
- properties/

Fixture Categories:
1. Market Parameters - Standard market conditions for option pricing
2. Simulation Configs - Small, fast configs and the reference config
3. Hull Examples - Textbook examples for validation
"""

from dataclasses import dataclass

import pytest

from mc_derivatives.options.simulation.gbm import MarketParameters, SimulationConfig


# =============================================================================
# TOLERANCE TIERS
# =============================================================================

@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tiered tolerance framework for different test types.

    Derived from precision requirements, not ad hoc.
    """

    # Anti-pattern tests: Very tight (fundamental violations)
    anti_pattern: float = 1e-10

    # Closed-form values quoted to 2-4 decimals
    textbook: float = 0.01

    # MC vs analytical: number of standard errors
    mc_standard_errors: float = 3.0


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tiered tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# MARKET PARAMETERS
# =============================================================================

@pytest.fixture
def standard_params() -> MarketParameters:
    """ATM one-year option, no dividend: S=K=100, T=1, r=5%, σ=20%."""
    return MarketParameters(
        spot=100.0,
        strike=100.0,
        time_to_expiry=1.0,
        rate=0.05,
        volatility=0.20,
    )


@pytest.fixture
def dividend_params() -> MarketParameters:
    """Standard parameters with a 2% dividend yield."""
    return MarketParameters(
        spot=100.0,
        strike=100.0,
        time_to_expiry=1.0,
        rate=0.05,
        volatility=0.20,
        dividend=0.02,
    )


# =============================================================================
# SIMULATION CONFIGS
# =============================================================================

@pytest.fixture
def small_config() -> SimulationConfig:
    """Fast config for mechanics tests."""
    return SimulationConfig(num_paths=2_000, num_steps=20, seed=12345)


@pytest.fixture
def medium_config() -> SimulationConfig:
    """Config for statistical assertions that must hold comfortably."""
    return SimulationConfig(num_paths=50_000, num_steps=50, seed=12345)


@pytest.fixture
def reference_config() -> SimulationConfig:
    """Reference run: 200,000 paths, daily steps, seed 12345."""
    return SimulationConfig(num_paths=200_000, num_steps=252, seed=12345)


# =============================================================================
# HULL TEXTBOOK EXAMPLES
# =============================================================================

@dataclass(frozen=True)
class HullExample:
    """A textbook example from Hull (2021) Options, Futures, and Other Derivatives."""

    name: str
    spot: float
    strike: float
    rate: float
    volatility: float
    time_to_expiry: float
    expected_call: float
    expected_put: float


# Hull (2021) Chapter 15, Example 15.6
HULL_EXAMPLE_15_6 = HullExample(
    name="Hull Example 15.6",
    spot=42.0,
    strike=40.0,
    rate=0.10,
    volatility=0.20,
    time_to_expiry=0.5,
    expected_call=4.76,
    expected_put=0.81,
)


@pytest.fixture
def hull_example_15_6() -> HullExample:
    """Hull Chapter 15 Example 15.6: European call on non-dividend stock."""
    return HULL_EXAMPLE_15_6
