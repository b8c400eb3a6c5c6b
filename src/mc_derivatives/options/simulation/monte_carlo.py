"""
Monte Carlo option pricing engine.

Implements Monte Carlo simulation for option pricing:
- European options (with analytical comparison)
- Arithmetic-average Asian options
- Down-and-out barrier options

[T1] MC converges to analytical price at rate 1/√N

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering"
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np

from mc_derivatives.config.tolerances import CONFIDENCE_Z_95, MC_STANDARD_ERRORS
from mc_derivatives.errors import ConfigurationError
from mc_derivatives.options.payoffs.base import BasePayoff, OptionFamily, OptionType
from mc_derivatives.options.payoffs.path_dependent import AsianPayoff, DownAndOutBarrierPayoff
from mc_derivatives.options.payoffs.vanilla import EuropeanPayoff
from mc_derivatives.options.pricing.black_scholes import black_scholes_call, black_scholes_put
from mc_derivatives.options.simulation.gbm import (
    MarketParameters,
    PathEnsemble,
    SimulationConfig,
    generate_gbm_paths,
)
from mc_derivatives.validation.gates import (
    BarrierLevelGate,
    StandardErrorGate,
    ValidationEngine,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricingResult:
    """
    Monte Carlo estimate for one option side.

    Attributes
    ----------
    price : float
        Mean of discounted payoffs
    standard_error : float
        Sample standard deviation (ddof=1) / √n. NaN when n == 1.
    n_paths : int
        Number of payoffs averaged
    """

    price: float
    standard_error: float
    n_paths: int

    @property
    def has_finite_error(self) -> bool:
        """False when the standard error is undefined (single path)."""
        return math.isfinite(self.standard_error)

    @property
    def confidence_interval(self) -> tuple[float, float]:
        """95% confidence interval."""
        half_width = CONFIDENCE_Z_95 * self.standard_error
        return self.price - half_width, self.price + half_width

    @property
    def relative_error(self) -> float:
        """Relative standard error (SE / price)."""
        if abs(self.price) < 1e-10:
            return float("inf")
        return self.standard_error / abs(self.price)


def estimate_price(payoffs: np.ndarray) -> PricingResult:
    """
    Reduce discounted payoffs to a price and its standard error.

    Parameters
    ----------
    payoffs : np.ndarray
        Discounted payoff per path

    Returns
    -------
    PricingResult
        Mean and standard error (NaN for a single payoff)

    Raises
    ------
    ConfigurationError
        If payoffs is empty

    Examples
    --------
    >>> estimate_price(np.zeros(100))
    PricingResult(price=0.0, standard_error=0.0, n_paths=100)
    """
    payoffs = np.asarray(payoffs, dtype=float)
    n = payoffs.size
    if n == 0:
        raise ConfigurationError("CRITICAL: cannot estimate price from empty payoff vector")

    price = float(payoffs.mean())
    if n == 1:
        return PricingResult(price=price, standard_error=float("nan"), n_paths=1)

    standard_error = float(payoffs.std(ddof=1) / np.sqrt(n))
    return PricingResult(price=price, standard_error=standard_error, n_paths=n)


@dataclass(frozen=True)
class OptionPricingResult:
    """
    Call and put estimates for one instrument family.

    Attributes
    ----------
    family : OptionFamily
        Instrument family priced
    call : PricingResult
        Call estimate
    put : PricingResult
        Put estimate
    ensemble : PathEnsemble, optional
        Simulated paths, kept only on request
    diagnostics : dict
        Side-channel statistics from the payoff evaluator
    warnings : tuple[str, ...]
        Domain warnings attached to this result
    """

    family: OptionFamily
    call: PricingResult
    put: PricingResult
    ensemble: Optional[PathEnsemble] = None
    diagnostics: dict[str, Any] = field(default_factory=dict)
    warnings: tuple[str, ...] = ()

    @property
    def call_price(self) -> float:
        return self.call.price

    @property
    def put_price(self) -> float:
        return self.put.price

    @property
    def call_std_error(self) -> float:
        return self.call.standard_error

    @property
    def put_std_error(self) -> float:
        return self.put.standard_error

    def side(self, option_type: OptionType) -> PricingResult:
        """Get the estimate for one side."""
        if option_type == OptionType.CALL:
            return self.call
        return self.put


class MonteCarloEngine:
    """
    Monte Carlo pricing engine.

    Each call simulates a fresh ensemble from the configured seed plus the
    family's seed offset, evaluates the family's payoff and estimates both
    sides. Nothing is cached between calls.

    Parameters
    ----------
    config : SimulationConfig, optional
        Path count, step count, seed and workers (defaults from settings)

    Examples
    --------
    >>> engine = MonteCarloEngine(SimulationConfig(num_paths=100000, seed=42))
    >>> params = MarketParameters(spot=100, strike=100, time_to_expiry=1.0, rate=0.05, volatility=0.20)
    >>> result = engine.price_european(params)
    >>> print(f"Price: {result.call_price:.4f} ± {result.call_std_error:.4f}")
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()

    def price_european(
        self,
        params: MarketParameters,
        keep_ensemble: bool = False,
    ) -> OptionPricingResult:
        """
        Price European call and put.

        [T1] Call payoff: max(S(T) - K, 0), discounted by exp(-rT)
        """
        return self.price_with_payoff(params, EuropeanPayoff(), keep_ensemble)

    def price_asian(
        self,
        params: MarketParameters,
        keep_ensemble: bool = False,
    ) -> OptionPricingResult:
        """
        Price arithmetic-average Asian call and put.

        [T1] Call payoff: max(mean(S_0..S_T) - K, 0)
        """
        return self.price_with_payoff(params, AsianPayoff(), keep_ensemble)

    def price_barrier(
        self,
        params: MarketParameters,
        barrier_level: float,
        keep_ensemble: bool = False,
    ) -> OptionPricingResult:
        """
        Price down-and-out barrier call and put.

        [T1] Payoff is zero if min(S_0..S_T) <= barrier_level

        Parameters
        ----------
        params : MarketParameters
            Market inputs
        barrier_level : float
            Knock-out level (> 0). Levels >= spot warn but still price.
        keep_ensemble : bool, default False
            Attach the simulated ensemble to the result
        """
        report = ValidationEngine([BarrierLevelGate()]).validate_and_raise(
            barrier_level=barrier_level,
            spot=params.spot,
        )
        result = self.price_with_payoff(params, DownAndOutBarrierPayoff(barrier_level), keep_ensemble)
        if report.warnings:
            return OptionPricingResult(
                family=result.family,
                call=result.call,
                put=result.put,
                ensemble=result.ensemble,
                diagnostics=result.diagnostics,
                warnings=report.warnings + result.warnings,
            )
        return result

    def price(
        self,
        family: OptionFamily,
        params: MarketParameters,
        barrier_level: Optional[float] = None,
        keep_ensemble: bool = False,
    ) -> OptionPricingResult:
        """
        Price any supported family.

        Raises
        ------
        ConfigurationError
            If family is BARRIER and no barrier_level is given
        """
        if family == OptionFamily.EUROPEAN:
            return self.price_european(params, keep_ensemble)
        if family == OptionFamily.ASIAN:
            return self.price_asian(params, keep_ensemble)
        if barrier_level is None:
            raise ConfigurationError("CRITICAL: barrier_level is required for barrier options")
        return self.price_barrier(params, barrier_level, keep_ensemble)

    def price_with_payoff(
        self,
        params: MarketParameters,
        payoff: BasePayoff,
        keep_ensemble: bool = False,
    ) -> OptionPricingResult:
        """
        Price call and put with a payoff evaluator.

        Parameters
        ----------
        params : MarketParameters
            Market inputs
        payoff : BasePayoff
            Evaluator; its family selects the seed offset
        keep_ensemble : bool, default False
            Attach the simulated ensemble to the result

        Returns
        -------
        OptionPricingResult
            Call and put estimates with diagnostics and warnings
        """
        ensemble = generate_gbm_paths(params, self.config, seed_offset=payoff.family.seed_offset)
        payoff_result = payoff.evaluate(ensemble, params)

        report = ValidationEngine([StandardErrorGate()]).validate_and_raise(
            num_paths=self.config.num_paths,
        )

        call = estimate_price(payoff_result.call_payoffs)
        put = estimate_price(payoff_result.put_payoffs)
        logger.info(
            f"{payoff.family.value.capitalize()}: call {call.price:.4f} (±{call.standard_error:.4f}), "
            f"put {put.price:.4f} (±{put.standard_error:.4f})"
        )

        return OptionPricingResult(
            family=payoff.family,
            call=call,
            put=put,
            ensemble=ensemble if keep_ensemble else None,
            diagnostics=payoff_result.diagnostics,
            warnings=ensemble.warnings + report.warnings,
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def price_european(
    params: MarketParameters,
    config: Optional[SimulationConfig] = None,
    keep_ensemble: bool = False,
) -> OptionPricingResult:
    """Price European call and put via MC."""
    return MonteCarloEngine(config).price_european(params, keep_ensemble)


def price_asian(
    params: MarketParameters,
    config: Optional[SimulationConfig] = None,
    keep_ensemble: bool = False,
) -> OptionPricingResult:
    """Price arithmetic Asian call and put via MC."""
    return MonteCarloEngine(config).price_asian(params, keep_ensemble)


def price_barrier(
    params: MarketParameters,
    config: Optional[SimulationConfig] = None,
    barrier_level: float = 90.0,
    keep_ensemble: bool = False,
) -> OptionPricingResult:
    """Price down-and-out call and put via MC."""
    return MonteCarloEngine(config).price_barrier(params, barrier_level, keep_ensemble)


def compare_to_black_scholes(
    params: MarketParameters,
    config: Optional[SimulationConfig] = None,
    n_standard_errors: float = MC_STANDARD_ERRORS,
) -> dict:
    """
    Compare MC European prices to the analytical oracle.

    Parameters
    ----------
    params : MarketParameters
        Market inputs
    config : SimulationConfig, optional
        Simulation sizing
    n_standard_errors : float, default 3.0
        Width of the acceptance band

    Returns
    -------
    dict
        Per side: MC price, BS price, absolute/relative error, SE and
        whether BS lies within n_standard_errors of the MC price
    """
    mc = price_european(params, config)
    oracle = {
        OptionType.CALL: black_scholes_call(
            params.spot, params.strike, params.time_to_expiry,
            params.rate, params.volatility, params.dividend,
        ),
        OptionType.PUT: black_scholes_put(
            params.spot, params.strike, params.time_to_expiry,
            params.rate, params.volatility, params.dividend,
        ),
    }

    comparison = {}
    for option_type, bs_price in oracle.items():
        estimate = mc.side(option_type)
        error = abs(estimate.price - bs_price)
        comparison[option_type.value] = {
            "mc_price": estimate.price,
            "bs_price": bs_price,
            "standard_error": estimate.standard_error,
            "absolute_error": error,
            "relative_error": error / bs_price if bs_price > 0 else float("inf"),
            "within_band": error <= n_standard_errors * estimate.standard_error,
        }
    return comparison


def convergence_analysis(
    params: MarketParameters,
    path_counts: tuple[int, ...] = (1000, 5000, 10000, 50000, 100000),
    num_steps: int = 1,
    seed: int = 42,
) -> dict:
    """
    Analyze European call convergence to the analytical price.

    [T1] MC error should converge at rate 1/√N.

    Returns
    -------
    dict
        Per path count results and the fitted log-log convergence rate
    """
    analytical_price = black_scholes_call(
        params.spot, params.strike, params.time_to_expiry,
        params.rate, params.volatility, params.dividend,
    )
    results = []

    for n in path_counts:
        config = SimulationConfig(num_paths=n, num_steps=num_steps, seed=seed)
        mc_result = price_european(params, config).call

        error = abs(mc_result.price - analytical_price)
        rel_error = error / analytical_price if analytical_price > 0 else float("inf")
        ci_lower, ci_upper = mc_result.confidence_interval

        results.append(
            {
                "n_paths": n,
                "mc_price": mc_result.price,
                "analytical_price": analytical_price,
                "absolute_error": error,
                "relative_error": rel_error,
                "standard_error": mc_result.standard_error,
                "within_ci": ci_lower <= analytical_price <= ci_upper,
            }
        )

    return {
        "results": results,
        "convergence_rate": _estimate_convergence_rate(results),
    }


def _estimate_convergence_rate(results: list[dict]) -> float:
    """
    Estimate convergence rate from standard errors.

    [T1] Theory predicts rate = -0.5 (error ~ 1/√N).
    """
    log_n = np.log([r["n_paths"] for r in results])
    log_error = np.log([r["standard_error"] + 1e-12 for r in results])

    slope, _ = np.polyfit(log_n, log_error, 1)
    return float(slope)
