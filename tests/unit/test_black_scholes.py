"""
Tests for the Black-Scholes oracle.

[T1] C = S*e^(-qT)*N(d1) - K*e^(-rT)*N(d2)
[T1] P = K*e^(-rT)*N(-d2) - S*e^(-qT)*N(-d1)
"""

import numpy as np
import pytest

from mc_derivatives.errors import ConfigurationError
from mc_derivatives.options.payoffs import OptionType
from mc_derivatives.options.pricing.black_scholes import (
    black_scholes_call,
    black_scholes_greeks,
    black_scholes_price,
    black_scholes_put,
    put_call_parity_check,
)


class TestKnownAnswers:
    """Published values."""

    def test_atm_one_year(self):
        assert black_scholes_call(100, 100, 1.0, 0.05, 0.20) == pytest.approx(10.4506, abs=1e-4)
        assert black_scholes_put(100, 100, 1.0, 0.05, 0.20) == pytest.approx(5.5735, abs=1e-4)

    def test_hull_example(self, hull_example_15_6, tolerances):
        ex = hull_example_15_6
        call = black_scholes_call(ex.spot, ex.strike, ex.time_to_expiry, ex.rate, ex.volatility)
        put = black_scholes_put(ex.spot, ex.strike, ex.time_to_expiry, ex.rate, ex.volatility)

        assert call == pytest.approx(ex.expected_call, abs=tolerances.textbook)
        assert put == pytest.approx(ex.expected_put, abs=tolerances.textbook)

    def test_dispatch(self):
        assert black_scholes_price(100, 100, 1.0, 0.05, 0.2, OptionType.CALL) == black_scholes_call(
            100, 100, 1.0, 0.05, 0.2
        )
        assert black_scholes_price(100, 100, 1.0, 0.05, 0.2, OptionType.PUT, dividend=0.02) == (
            black_scholes_put(100, 100, 1.0, 0.05, 0.2, 0.02)
        )


class TestDegenerateCases:
    """T <= 0 and σ <= 0."""

    @pytest.mark.parametrize("time_to_expiry", [0.0, -1.0])
    def test_expired_is_intrinsic(self, time_to_expiry):
        assert black_scholes_call(110, 100, time_to_expiry, 0.05, 0.2) == 10.0
        assert black_scholes_put(110, 100, time_to_expiry, 0.05, 0.2) == 0.0
        assert black_scholes_put(90, 100, time_to_expiry, 0.05, 0.2) == 10.0

    @pytest.mark.parametrize("volatility", [0.0, -0.1])
    def test_zero_volatility_discounted_forward(self, volatility):
        call = black_scholes_call(100, 100, 1.0, 0.05, volatility)
        put = black_scholes_put(100, 100, 1.0, 0.05, volatility)

        assert call == pytest.approx(100 - 100 * np.exp(-0.05))
        assert put == 0.0

    def test_zero_volatility_with_dividend(self):
        put = black_scholes_put(100, 100, 1.0, 0.0, 0.0, dividend=0.05)
        assert put == pytest.approx(100 - 100 * np.exp(-0.05))

    @pytest.mark.parametrize("spot, strike", [(0.0, 100.0), (100.0, -1.0)])
    def test_invalid_inputs(self, spot, strike):
        with pytest.raises(ConfigurationError, match="CRITICAL"):
            black_scholes_call(spot, strike, 1.0, 0.05, 0.2)


class TestAnalyticGreeks:
    """Raw-unit Greeks."""

    def test_call_values(self):
        result = black_scholes_greeks(100, 100, 1.0, 0.05, 0.20, OptionType.CALL)

        assert result.price == pytest.approx(10.4506, abs=1e-4)
        assert result.delta == pytest.approx(0.6368, abs=1e-4)
        assert result.gamma == pytest.approx(0.018762, abs=1e-5)
        assert result.vega == pytest.approx(37.524, abs=1e-2)
        assert result.rho == pytest.approx(53.232, abs=1e-2)
        assert result.theta == pytest.approx(-6.414, abs=1e-2)

    def test_put_call_delta_relation(self):
        call = black_scholes_greeks(100, 95, 0.5, 0.03, 0.25, OptionType.CALL, dividend=0.01)
        put = black_scholes_greeks(100, 95, 0.5, 0.03, 0.25, OptionType.PUT, dividend=0.01)

        assert call.delta - put.delta == pytest.approx(np.exp(-0.01 * 0.5))
        assert call.gamma == pytest.approx(put.gamma)
        assert call.vega == pytest.approx(put.vega)

    def test_degenerate_inputs_raise(self):
        with pytest.raises(ConfigurationError):
            black_scholes_greeks(100, 100, 0.0, 0.05, 0.2, OptionType.CALL)
        with pytest.raises(ConfigurationError):
            black_scholes_greeks(100, 100, 1.0, 0.05, 0.0, OptionType.CALL)


class TestParityCheck:
    """Helper reports parity error."""

    def test_holds_for_bs_prices(self):
        call = black_scholes_call(100, 90, 2.0, 0.04, 0.3, 0.01)
        put = black_scholes_put(100, 90, 2.0, 0.04, 0.3, 0.01)

        holds, error = put_call_parity_check(call, put, 100, 90, 2.0, 0.04, 0.01)
        assert holds
        assert error < 1e-8

    def test_detects_violation(self):
        holds, error = put_call_parity_check(10.0, 10.0, 100, 100, 1.0, 0.05)
        assert not holds
        assert error == pytest.approx(100 - 100 * np.exp(-0.05))
