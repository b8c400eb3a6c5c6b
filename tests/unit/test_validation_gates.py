"""
Tests for HALT/WARN/PASS validation gates.
"""

import warnings

import pytest

from mc_derivatives.errors import ConfigurationError, DomainWarning
from mc_derivatives.validation import (
    BarrierLevelGate,
    DegenerateDiffusionGate,
    GateStatus,
    MarketParametersGate,
    PriceBoundsGate,
    SimulationSizeGate,
    StandardErrorGate,
    ValidationEngine,
    check_price_bounds,
    ensure_valid,
    validate_inputs,
)


class TestMarketParametersGate:
    def test_pass(self):
        result = MarketParametersGate().check(spot=100.0, strike=90.0, time_to_expiry=0.0, rate=-0.01)
        assert result.status == GateStatus.PASS

    def test_collects_all_issues(self):
        result = MarketParametersGate().check(spot=-1.0, strike=0.0, volatility=float("nan"))

        assert result.status == GateStatus.HALT
        assert len(result.value) == 3

    def test_non_numeric(self):
        result = MarketParametersGate().check(spot="100")
        assert result.status == GateStatus.HALT
        assert "real number" in result.message


class TestSimulationSizeGate:
    @pytest.mark.parametrize(
        "context",
        [
            {"num_paths": 0},
            {"num_steps": -3},
            {"seed": -1},
            {"n_workers": 0},
            {"num_paths": 1.0},
            {"block_size": 0},
        ],
    )
    def test_halts(self, context):
        assert SimulationSizeGate().check(**context).status == GateStatus.HALT

    def test_pass(self):
        result = SimulationSizeGate().check(num_paths=1, num_steps=1, seed=0, n_workers=1)
        assert result.passed


class TestWarningGates:
    def test_degenerate_diffusion(self):
        gate = DegenerateDiffusionGate()

        assert gate.check(time_to_expiry=0.0, volatility=0.2).status == GateStatus.WARN
        assert gate.check(time_to_expiry=1.0, volatility=0.0).status == GateStatus.WARN
        assert gate.check(time_to_expiry=1.0, volatility=0.2).status == GateStatus.PASS

    def test_barrier_level(self):
        gate = BarrierLevelGate()

        assert gate.check(barrier_level=90.0, spot=100.0).status == GateStatus.PASS
        assert gate.check(barrier_level=100.0, spot=100.0).status == GateStatus.WARN
        assert gate.check(barrier_level=0.0, spot=100.0).status == GateStatus.HALT
        assert gate.check(barrier_level=None).status == GateStatus.PASS

    def test_standard_error(self):
        gate = StandardErrorGate()

        assert gate.check(num_paths=1).status == GateStatus.WARN
        assert gate.check(num_paths=2).status == GateStatus.PASS


class TestPriceBoundsGate:
    def test_within_bounds(self):
        report = check_price_bounds(spot=100.0, strike=100.0, call_price=10.0, put_price=5.0)
        assert report.passed

    @pytest.mark.parametrize(
        "call_price, put_price",
        [(-0.1, 5.0), (100.5, 5.0), (10.0, -0.1), (10.0, 101.0)],
    )
    def test_violations(self, call_price, put_price):
        report = check_price_bounds(spot=100.0, strike=100.0, call_price=call_price, put_price=put_price)
        assert report.overall_status == GateStatus.HALT

    def test_custom_tolerance(self):
        gate = PriceBoundsGate(tolerance=0.5)
        assert gate.check(spot=100.0, call_price=100.4).status == GateStatus.PASS


class TestValidationEngine:
    def test_report_aggregation(self):
        report = validate_inputs(spot=100.0, strike=100.0, barrier_level=120.0, num_paths=1)

        assert report.overall_status == GateStatus.WARN
        assert len(report.warned_gates) == 2
        assert report.to_dict()["n_warned"] == 2

    def test_validate_and_raise_halts(self):
        with pytest.raises(ConfigurationError, match="CRITICAL: Validation failed"):
            ValidationEngine().validate_and_raise(spot=-5.0)

    def test_ensure_valid_returns_warnings(self):
        with pytest.warns(DomainWarning):
            messages = ensure_valid(spot=100.0, time_to_expiry=0.0)

        assert len(messages) == 1
        assert "time_to_expiry" in messages[0]

    def test_clean_inputs_emit_nothing(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert ensure_valid(spot=100.0, strike=100.0, num_paths=10, num_steps=5) == ()
