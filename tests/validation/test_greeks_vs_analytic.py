"""
Finite-difference MC Greeks vs analytic Black-Scholes Greeks.

[T1] With common random numbers, bumped-MC Greeks of a European option
converge to the closed-form Greeks. Gamma uses a second difference over a
kinked payoff and gets a wider band.
"""

import pytest

from mc_derivatives.config.tolerances import GREEKS_MC_RELATIVE_TOLERANCE
from mc_derivatives.options.greeks import compute_greeks
from mc_derivatives.options.payoffs import OptionType
from mc_derivatives.options.pricing.black_scholes import black_scholes_greeks
from mc_derivatives.options.simulation.gbm import MarketParameters, SimulationConfig


@pytest.fixture(scope="module")
def mc_greeks():
    params = MarketParameters(spot=100.0, strike=100.0, time_to_expiry=1.0, rate=0.05, volatility=0.20)
    config = SimulationConfig(num_paths=100_000, num_steps=10, seed=12345)
    return compute_greeks(params, config)


def _analytic(option_type):
    return black_scholes_greeks(100.0, 100.0, 1.0, 0.05, 0.20, option_type)


class TestGreeksMatchAnalytic:
    """Relative agreement per Greek and side."""

    @pytest.mark.validation
    @pytest.mark.slow
    @pytest.mark.parametrize("option_type", [OptionType.CALL, OptionType.PUT])
    @pytest.mark.parametrize("greek", ["delta", "vega", "rho"])
    def test_first_order(self, mc_greeks, option_type, greek):
        mc = getattr(mc_greeks.side(option_type), greek)
        expected = getattr(_analytic(option_type), greek)

        assert mc == pytest.approx(expected, rel=GREEKS_MC_RELATIVE_TOLERANCE), (
            f"{option_type.value} {greek}: MC {mc:.4f} vs analytic {expected:.4f}"
        )

    @pytest.mark.validation
    @pytest.mark.slow
    def test_call_theta(self, mc_greeks):
        expected = _analytic(OptionType.CALL).theta
        assert mc_greeks.call.theta == pytest.approx(expected, rel=0.10)

    @pytest.mark.validation
    @pytest.mark.slow
    def test_call_gamma(self, mc_greeks):
        expected = _analytic(OptionType.CALL).gamma
        assert mc_greeks.call.gamma == pytest.approx(expected, rel=0.20)

    @pytest.mark.validation
    @pytest.mark.slow
    def test_call_delta_in_unit_interval(self, mc_greeks):
        assert 0 < mc_greeks.call.delta < 1
        assert mc_greeks.call.vega > 0
        assert mc_greeks.put.vega > 0
