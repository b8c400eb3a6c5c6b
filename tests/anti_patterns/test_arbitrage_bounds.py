"""
Anti-pattern test: No-arbitrage bounds for option pricing.

[T1] Options must satisfy no-arbitrage bounds.
HALT if any violation is detected.
"""

import numpy as np
import pytest

from mc_derivatives.options.payoffs import (
    AsianPayoff,
    DownAndOutBarrierPayoff,
    EuropeanPayoff,
    barrier_payoffs,
    european_payoffs,
)
from mc_derivatives.options.pricing.black_scholes import (
    black_scholes_call,
    black_scholes_put,
)
from mc_derivatives.options.simulation.gbm import generate_gbm_paths
from mc_derivatives.options.simulation.monte_carlo import (
    price_asian,
    price_barrier,
    price_european,
)
from mc_derivatives.validation.gates import check_price_bounds


class TestArbitrageBounds:
    """Test no-arbitrage bounds for option pricing."""

    @pytest.mark.anti_pattern
    @pytest.mark.parametrize("strike", [50.0, 100.0, 200.0])
    def test_black_scholes_bounds(self, strike) -> None:
        """
        [T1] max(S*e^(-qT) - K*e^(-rT), 0) <= C <= S
        [T1] max(K*e^(-rT) - S*e^(-qT), 0) <= P <= K*e^(-rT)
        """
        S, r, q, sigma, T = 100.0, 0.05, 0.02, 0.20, 1.0

        call_price = black_scholes_call(S, strike, T, r, sigma, q)
        put_price = black_scholes_put(S, strike, T, r, sigma, q)
        forward_diff = S * np.exp(-q * T) - strike * np.exp(-r * T)

        assert max(forward_diff, 0.0) - 1e-10 <= call_price <= S, (
            f"ARBITRAGE VIOLATION: call {call_price} outside bounds for K={strike}"
        )
        assert max(-forward_diff, 0.0) - 1e-10 <= put_price <= strike * np.exp(-r * T), (
            f"ARBITRAGE VIOLATION: put {put_price} outside bounds for K={strike}"
        )

    @pytest.mark.anti_pattern
    def test_mc_prices_within_bounds(self, standard_params, small_config) -> None:
        """[T1] 0 <= C <= S0, 0 <= P <= K for every family."""
        results = [
            price_european(standard_params, small_config),
            price_asian(standard_params, small_config),
            price_barrier(standard_params, small_config, barrier_level=90.0),
        ]

        for result in results:
            report = check_price_bounds(
                spot=standard_params.spot,
                strike=standard_params.strike,
                call_price=result.call_price,
                put_price=result.put_price,
            )
            assert report.passed, report.to_dict()

    @pytest.mark.anti_pattern
    def test_payoffs_non_negative(self, standard_params, small_config) -> None:
        """Discounted payoffs are never negative on any path."""
        ensemble = generate_gbm_paths(standard_params, small_config)

        for payoff in (EuropeanPayoff(), AsianPayoff(), DownAndOutBarrierPayoff(90.0)):
            result = payoff.evaluate(ensemble, standard_params)
            assert np.all(result.call_payoffs >= 0), repr(payoff)
            assert np.all(result.put_payoffs >= 0), repr(payoff)


class TestBarrierDominance:
    """[T1] A knock-out option is never worth more than its vanilla twin."""

    @pytest.mark.anti_pattern
    @pytest.mark.parametrize("barrier_level", [50.0, 80.0, 95.0, 99.9])
    def test_barrier_payoff_below_european_per_path(
        self, standard_params, small_config, barrier_level
    ) -> None:
        ensemble = generate_gbm_paths(standard_params, small_config)
        df = standard_params.discount_factor

        e_call, e_put = european_payoffs(ensemble.paths, standard_params.strike, df)
        b_call, b_put = barrier_payoffs(ensemble.paths, standard_params.strike, df, barrier_level)

        assert np.all(b_call <= e_call)
        assert np.all(b_put <= e_put)
