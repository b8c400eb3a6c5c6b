"""
Tests for finite-difference Greeks mechanics.

Accuracy against analytic Greeks lives in tests/validation.
"""

import math

import pytest

from mc_derivatives.config.settings import GreekBumps
from mc_derivatives.errors import ConfigurationError
from mc_derivatives.options.greeks import GreeksResult, OptionGreeks, compute_greeks
from mc_derivatives.options.payoffs import OptionFamily, OptionType
from mc_derivatives.options.simulation.gbm import SimulationConfig
from mc_derivatives.options.simulation.monte_carlo import price_asian, price_european


@pytest.fixture
def greeks_config() -> SimulationConfig:
    return SimulationConfig(num_paths=10_000, num_steps=10, seed=12345)


class TestComputeGreeks:
    """Bump-and-reprice orchestration."""

    def test_base_prices_match_engine(self, standard_params, greeks_config):
        greeks = compute_greeks(standard_params, greeks_config)
        base = price_european(standard_params, greeks_config)

        assert greeks.base_call_price == base.call_price
        assert greeks.base_put_price == base.put_price
        assert greeks.family == OptionFamily.EUROPEAN

    def test_default_bumps(self, standard_params, greeks_config):
        greeks = compute_greeks(standard_params, greeks_config)

        assert greeks.bumps == GreekBumps()
        assert greeks.bumps.spot_relative == 0.01
        assert greeks.bumps.time == pytest.approx(1 / 365)

    def test_signs(self, standard_params, greeks_config):
        greeks = compute_greeks(standard_params, greeks_config)

        assert 0 < greeks.call.delta < 1
        assert -1 < greeks.put.delta < 0
        assert greeks.call.gamma > 0
        assert greeks.call.vega > 0
        assert greeks.put.vega > 0
        assert greeks.call.rho > 0
        assert greeks.put.rho < 0
        assert greeks.call.theta < 0

    def test_deterministic(self, standard_params, greeks_config):
        a = compute_greeks(standard_params, greeks_config)
        b = compute_greeks(standard_params, greeks_config)
        assert a == b

    def test_inputs_unchanged(self, standard_params, greeks_config):
        compute_greeks(standard_params, greeks_config)

        assert standard_params.spot == 100.0
        assert standard_params.volatility == 0.20
        assert standard_params.rate == 0.05
        assert standard_params.time_to_expiry == 1.0

    def test_custom_bumps(self, standard_params, greeks_config):
        bumps = GreekBumps(spot_relative=0.02, volatility=0.02)
        greeks = compute_greeks(standard_params, greeks_config, bumps=bumps)

        assert greeks.bumps is bumps
        assert 0 < greeks.call.delta < 1


class TestGreeksEdgeCases:
    """Floored downward bumps against hand-repriced finite differences."""

    @pytest.mark.parametrize("time_to_expiry", [1.0, 0.002, 0.001, 0.0005])
    def test_theta_divides_by_nominal_step(self, standard_params, greeks_config, time_to_expiry):
        params = standard_params.with_overrides(time_to_expiry=time_to_expiry)
        bumps = GreekBumps()
        greeks = compute_greeks(params, greeks_config)

        base = price_european(params, greeks_config)
        shorter = price_european(
            params.with_overrides(time_to_expiry=max(time_to_expiry - bumps.time, bumps.time_floor)),
            greeks_config,
        )

        assert greeks.call.theta == -(base.call_price - shorter.call_price) / bumps.time
        assert greeks.put.theta == -(base.put_price - shorter.put_price) / bumps.time
        assert math.isfinite(greeks.call.theta)

    @pytest.mark.parametrize("volatility", [0.20, 0.005])
    def test_vega_divides_by_twice_the_bump(self, standard_params, greeks_config, volatility):
        params = standard_params.with_overrides(volatility=volatility)
        bumps = GreekBumps()
        greeks = compute_greeks(params, greeks_config)

        up = price_european(params.with_overrides(volatility=volatility + bumps.volatility), greeks_config)
        down = price_european(
            params.with_overrides(volatility=max(volatility - bumps.volatility, bumps.volatility_floor)),
            greeks_config,
        )

        assert greeks.call.vega == (up.call_price - down.call_price) / (2 * bumps.volatility)
        assert greeks.put.vega == (up.put_price - down.put_price) / (2 * bumps.volatility)

    @pytest.mark.parametrize("rate", [0.05, 0.00005, 0.0])
    def test_rho_divides_by_twice_the_bump(self, standard_params, greeks_config, rate):
        params = standard_params.with_overrides(rate=rate)
        bumps = GreekBumps()
        greeks = compute_greeks(params, greeks_config)

        up = price_european(params.with_overrides(rate=rate + bumps.rate), greeks_config)
        down = price_european(
            params.with_overrides(rate=max(rate - bumps.rate, bumps.rate_floor)), greeks_config
        )

        assert greeks.call.rho == (up.call_price - down.call_price) / (2 * bumps.rate)
        assert greeks.put.rho == (up.put_price - down.put_price) / (2 * bumps.rate)
        assert greeks.call.rho > 0


class TestPathDependentGreeks:
    """Same bump logic for Asian and barrier families."""

    def test_asian(self, standard_params, greeks_config):
        greeks = compute_greeks(standard_params, greeks_config, family=OptionFamily.ASIAN)

        assert greeks.family == OptionFamily.ASIAN
        assert greeks.base_call_price == price_asian(standard_params, greeks_config).call_price
        assert 0 < greeks.call.delta < 1
        assert greeks.call.vega > 0

    def test_barrier(self, standard_params, greeks_config):
        greeks = compute_greeks(
            standard_params, greeks_config, family=OptionFamily.BARRIER, barrier_level=90.0
        )

        assert greeks.family == OptionFamily.BARRIER
        assert greeks.call.delta > 0

    def test_barrier_without_level_raises(self, standard_params, greeks_config):
        with pytest.raises(ConfigurationError):
            compute_greeks(standard_params, greeks_config, family=OptionFamily.BARRIER)


class TestGreeksResult:
    """Accessors."""

    def test_to_dict_keys(self):
        call = OptionGreeks(delta=0.6, gamma=0.02, theta=-6.0, vega=37.0, rho=50.0)
        put = OptionGreeks(delta=-0.4, gamma=0.02, theta=-1.5, vega=37.0, rho=-45.0)
        result = GreeksResult(
            call=call,
            put=put,
            family=OptionFamily.EUROPEAN,
            bumps=GreekBumps(),
            base_call_price=10.0,
            base_put_price=5.0,
        )

        flat = result.to_dict()
        assert flat["call_delta"] == 0.6
        assert flat["put_rho"] == -45.0
        assert len(flat) == 10
        assert result.side(OptionType.PUT) is put
