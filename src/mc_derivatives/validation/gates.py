"""
Validation Gates - HALT/WARN/PASS framework for pricing inputs and outputs.

Gates check values passed as keyword context. A gate that does not find the
values it checks in the context passes. HALT means bad input and is raised
as ConfigurationError; WARN is issued as DomainWarning and attached to the
pricing result, computation proceeds.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from numbers import Integral
from typing import Any

from mc_derivatives.config.tolerances import ANTI_PATTERN_TOLERANCE
from mc_derivatives.errors import ConfigurationError, warn_domain

logger = logging.getLogger(__name__)


class GateStatus(Enum):
    """Status of a validation gate."""
    PASS = "pass"
    HALT = "halt"
    WARN = "warn"


@dataclass(frozen=True)
class GateResult:
    """
    Result of a validation gate check.

    Attributes
    ----------
    status : GateStatus
        PASS, HALT, or WARN
    gate_name : str
        Name of the gate that was checked
    message : str
        Explanation of the result
    value : Any, optional
        The value that was checked
    threshold : Any, optional
        The threshold that was applied
    """

    status: GateStatus
    gate_name: str
    message: str
    value: Any | None = None
    threshold: Any | None = None

    @property
    def passed(self) -> bool:
        """Check if gate passed (PASS or WARN)."""
        return self.status != GateStatus.HALT


@dataclass(frozen=True)
class ValidationReport:
    """
    Complete validation report from all gates.

    Attributes
    ----------
    results : tuple[GateResult, ...]
        Results from all gates
    """

    results: tuple[GateResult, ...]

    @property
    def overall_status(self) -> GateStatus:
        """Get worst status across all gates."""
        if any(r.status == GateStatus.HALT for r in self.results):
            return GateStatus.HALT
        elif any(r.status == GateStatus.WARN for r in self.results):
            return GateStatus.WARN
        return GateStatus.PASS

    @property
    def passed(self) -> bool:
        """Check if all gates passed (no HALTs)."""
        return self.overall_status != GateStatus.HALT

    @property
    def halted_gates(self) -> list[GateResult]:
        """Get all gates that halted."""
        return [r for r in self.results if r.status == GateStatus.HALT]

    @property
    def warned_gates(self) -> list[GateResult]:
        """Get all gates that warned."""
        return [r for r in self.results if r.status == GateStatus.WARN]

    @property
    def warnings(self) -> tuple[str, ...]:
        """Messages of all WARN gates."""
        return tuple(r.message for r in self.warned_gates)

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        return {
            "overall_status": self.overall_status.value,
            "passed": self.passed,
            "n_halted": len(self.halted_gates),
            "n_warned": len(self.warned_gates),
            "results": [
                {
                    "gate": r.gate_name,
                    "status": r.status.value,
                    "message": r.message,
                    "value": r.value,
                    "threshold": r.threshold,
                }
                for r in self.results
            ],
        }


# =============================================================================
# Gate Implementations
# =============================================================================

class ValidationGate:
    """
    Base class for validation gates.

    Subclasses implement check() on keyword context.
    """

    name: str = "base_gate"

    def check(self, **context: Any) -> GateResult:
        """
        Check the values in context.

        Returns
        -------
        GateResult
            Validation result
        """
        raise NotImplementedError

    def _pass(self, message: str) -> GateResult:
        return GateResult(status=GateStatus.PASS, gate_name=self.name, message=message)


class MarketParametersGate(ValidationGate):
    """
    Check market parameters are finite and inside their domain.

    [T1] S0 > 0, K > 0, T >= 0, σ >= 0; r and q may take any finite value.
    """

    name = "market_parameters"

    FIELDS = ("spot", "strike", "time_to_expiry", "rate", "volatility", "dividend")
    POSITIVE = ("spot", "strike")
    NON_NEGATIVE = ("time_to_expiry", "volatility")

    def check(self, **context: Any) -> GateResult:
        issues = []

        for name in self.FIELDS:
            if name not in context:
                continue
            value = context[name]
            try:
                finite = math.isfinite(value)
            except TypeError:
                issues.append(f"{name} must be a real number, got {value!r}")
                continue
            if not finite:
                issues.append(f"{name} must be finite, got {value}")
            elif name in self.POSITIVE and value <= 0:
                issues.append(f"{name} must be > 0, got {value}")
            elif name in self.NON_NEGATIVE and value < 0:
                issues.append(f"{name} must be >= 0, got {value}")

        if issues:
            return GateResult(
                status=GateStatus.HALT,
                gate_name=self.name,
                message="; ".join(issues),
                value=issues,
            )
        return self._pass("Market parameters valid")


class SimulationSizeGate(ValidationGate):
    """Check path count, step count, seed, worker count and block size are usable integers."""

    name = "simulation_size"

    MINIMUMS = {"num_paths": 1, "num_steps": 1, "seed": 0, "n_workers": 1, "block_size": 1}

    def check(self, **context: Any) -> GateResult:
        issues = []

        for name, minimum in self.MINIMUMS.items():
            if name not in context:
                continue
            value = context[name]
            if isinstance(value, bool) or not isinstance(value, Integral):
                issues.append(f"{name} must be an integer, got {value!r}")
            elif value < minimum:
                issues.append(f"{name} must be >= {minimum}, got {value}")

        if issues:
            return GateResult(
                status=GateStatus.HALT,
                gate_name=self.name,
                message="; ".join(issues),
                value=issues,
            )
        return self._pass("Simulation size valid")


class DegenerateDiffusionGate(ValidationGate):
    """
    Warn on zero maturity or zero volatility.

    Both are valid: T == 0 yields a constant ensemble, σ == 0 yields
    deterministic drift-only paths.
    """

    name = "degenerate_diffusion"

    def check(self, **context: Any) -> GateResult:
        time_to_expiry = context.get("time_to_expiry")
        volatility = context.get("volatility")

        if time_to_expiry is not None and time_to_expiry == 0:
            return GateResult(
                status=GateStatus.WARN,
                gate_name=self.name,
                message="time_to_expiry is 0: paths are constant at spot, payoffs are intrinsic",
                value=time_to_expiry,
                threshold=0.0,
            )
        if volatility is not None and volatility == 0:
            return GateResult(
                status=GateStatus.WARN,
                gate_name=self.name,
                message="volatility is 0: paths are deterministic, antithetic pairs are duplicates",
                value=volatility,
                threshold=0.0,
            )
        return self._pass("Diffusion is non-degenerate")


class BarrierLevelGate(ValidationGate):
    """
    Check a down-and-out barrier level.

    HALT if not finite or not > 0. WARN if at or above spot, since the
    option is knocked out at inception.
    """

    name = "barrier_level"

    def check(self, **context: Any) -> GateResult:
        barrier_level = context.get("barrier_level")
        if barrier_level is None:
            return self._pass("No barrier")

        try:
            finite = math.isfinite(barrier_level)
        except TypeError:
            finite = False
        if not finite or barrier_level <= 0:
            return GateResult(
                status=GateStatus.HALT,
                gate_name=self.name,
                message=f"barrier_level must be finite and > 0, got {barrier_level!r}",
                value=barrier_level,
            )

        spot = context.get("spot")
        if spot is not None and barrier_level >= spot:
            return GateResult(
                status=GateStatus.WARN,
                gate_name=self.name,
                message=(
                    f"Barrier level {barrier_level:.2f} >= spot {spot:.2f}: "
                    f"down-and-out option knocks out immediately"
                ),
                value=barrier_level,
                threshold=spot,
            )
        return self._pass("Barrier below spot")


class StandardErrorGate(ValidationGate):
    """Warn when a single path leaves the standard error undefined."""

    name = "standard_error"

    def check(self, **context: Any) -> GateResult:
        num_paths = context.get("num_paths")
        if num_paths is not None and num_paths == 1:
            return GateResult(
                status=GateStatus.WARN,
                gate_name=self.name,
                message="num_paths is 1: standard error is undefined (NaN)",
                value=num_paths,
                threshold=2,
            )
        return self._pass("Standard error defined")


class PriceBoundsGate(ValidationGate):
    """
    Check no-arbitrage bounds on option prices.

    [T1] 0 <= C <= S0, 0 <= P <= K

    Monte Carlo prices of discounted non-negative payoffs satisfy these
    bounds up to sampling noise; a violation indicates a bug.
    """

    name = "price_bounds"

    def __init__(self, tolerance: float = ANTI_PATTERN_TOLERANCE):
        self.tolerance = tolerance

    def check(self, **context: Any) -> GateResult:
        spot = context.get("spot")
        strike = context.get("strike")
        call_price = context.get("call_price")
        put_price = context.get("put_price")
        issues = []

        if call_price is not None:
            if call_price < -self.tolerance:
                issues.append(f"call price {call_price:.6f} < 0")
            if spot is not None and call_price > spot + self.tolerance:
                issues.append(f"call price {call_price:.6f} > spot {spot:.6f}")
        if put_price is not None:
            if put_price < -self.tolerance:
                issues.append(f"put price {put_price:.6f} < 0")
            if strike is not None and put_price > strike + self.tolerance:
                issues.append(f"put price {put_price:.6f} > strike {strike:.6f}")

        if issues:
            return GateResult(
                status=GateStatus.HALT,
                gate_name=self.name,
                message="; ".join(issues),
                value=issues,
            )
        return self._pass("Prices within no-arbitrage bounds")


# =============================================================================
# Validation Engine
# =============================================================================

class ValidationEngine:
    """
    Engine for running validation gates.

    Parameters
    ----------
    gates : list[ValidationGate], optional
        Gates to use. If None, uses all input gates.

    Examples
    --------
    >>> engine = ValidationEngine()
    >>> report = engine.validate(spot=100.0, strike=100.0, num_paths=0)
    >>> report.passed
    False
    """

    def __init__(
        self,
        gates: list[ValidationGate] | None = None,
    ):
        if gates is None:
            gates = self._default_gates()
        self.gates = gates

    def _default_gates(self) -> list[ValidationGate]:
        """Create default set of input gates."""
        return [
            MarketParametersGate(),
            SimulationSizeGate(),
            DegenerateDiffusionGate(),
            BarrierLevelGate(),
            StandardErrorGate(),
        ]

    def validate(self, **context: Any) -> ValidationReport:
        """Run all gates on the context."""
        return ValidationReport(results=tuple(gate.check(**context) for gate in self.gates))

    def validate_and_raise(self, **context: Any) -> ValidationReport:
        """
        Validate, raise on HALT, warn on WARN.

        Returns
        -------
        ValidationReport
            The report if no gate halted

        Raises
        ------
        ConfigurationError
            If any gate HALTs
        """
        report = self.validate(**context)

        if not report.passed:
            halt_messages = [g.message for g in report.halted_gates]
            raise ConfigurationError(
                "CRITICAL: Validation failed. HALTs:\n" +
                "\n".join(f"  - {m}" for m in halt_messages)
            )

        for message in report.warnings:
            warn_domain(message)

        return report


# =============================================================================
# Convenience Functions
# =============================================================================

def validate_inputs(**context: Any) -> ValidationReport:
    """
    Quick validation of pricing inputs without raising.

    Examples
    --------
    >>> report = validate_inputs(spot=100.0, barrier_level=120.0)
    >>> report.overall_status
    <GateStatus.WARN: 'warn'>
    """
    return ValidationEngine().validate(**context)


def ensure_valid(**context: Any) -> tuple[str, ...]:
    """
    Validate inputs, raise on HALT and return warning messages.

    Raises
    ------
    ConfigurationError
        If validation fails
    """
    return ValidationEngine().validate_and_raise(**context).warnings


def check_price_bounds(
    spot: float,
    strike: float,
    call_price: float,
    put_price: float,
) -> ValidationReport:
    """Check Monte Carlo or analytical prices against no-arbitrage bounds."""
    engine = ValidationEngine([PriceBoundsGate()])
    return engine.validate(spot=spot, strike=strike, call_price=call_price, put_price=put_price)
