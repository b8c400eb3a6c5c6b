"""
Path-dependent payoffs: arithmetic Asian and down-and-out barrier.

Both read the full path grid (rows are time steps, columns are paths).

[T1] Asian call: max(mean(S_0..S_T) - K, 0)
[T1] Down-and-out: European payoff if min(S_0..S_T) > B, else 0

See: Hull (2021) Ch. 26 - Exotic Options
"""

import logging

import numpy as np

from mc_derivatives.options.payoffs.base import (
    BasePayoff,
    OptionFamily,
    PayoffResult,
    vanilla_payoffs,
)
from mc_derivatives.validation.gates import BarrierLevelGate, ValidationEngine

logger = logging.getLogger(__name__)


def asian_payoffs(
    paths: np.ndarray,
    strike: float,
    discount_factor: float,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Discounted arithmetic-average payoffs.

    The average runs over every row including the initial price at t=0.

    Parameters
    ----------
    paths : np.ndarray
        Path grid, shape (n_steps + 1, n_paths)
    strike : float
        Strike price
    discount_factor : float
        exp(-rT)

    Returns
    -------
    tuple[np.ndarray, np.ndarray]
        (call_payoffs, put_payoffs)
    """
    average_prices = paths.mean(axis=0)
    call, put = vanilla_payoffs(average_prices, strike)
    return call * discount_factor, put * discount_factor


def barrier_payoffs(
    paths: np.ndarray,
    strike: float,
    discount_factor: float,
    barrier_level: float,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Discounted down-and-out payoffs.

    A path is knocked out iff its minimum (over all rows) is <= barrier_level.

    Returns
    -------
    tuple[np.ndarray, np.ndarray]
        (call_payoffs, put_payoffs)
    """
    alive = paths.min(axis=0) > barrier_level
    call, put = vanilla_payoffs(paths[-1], strike)
    return (
        np.where(alive, call, 0.0) * discount_factor,
        np.where(alive, put, 0.0) * discount_factor,
    )


class AsianPayoff(BasePayoff):
    """Arithmetic-average price Asian call/put."""

    family = OptionFamily.ASIAN

    def evaluate(self, ensemble, params) -> PayoffResult:
        average_prices = ensemble.path_averages
        call, put = asian_payoffs(ensemble.paths, params.strike, params.discount_factor)

        diagnostics = {
            "average_price_min": float(average_prices.min()),
            "average_price_max": float(average_prices.max()),
            "average_price_mean": float(average_prices.mean()),
        }
        logger.info(
            f"Asian: average price range ${diagnostics['average_price_min']:.2f}"
            f" - ${diagnostics['average_price_max']:.2f}"
            f" (mean ${diagnostics['average_price_mean']:.2f})"
        )

        return PayoffResult(
            family=self.family,
            call_payoffs=call,
            put_payoffs=put,
            diagnostics=diagnostics,
        )


class DownAndOutBarrierPayoff(BasePayoff):
    """
    Down-and-out barrier call/put with discrete monitoring on the time grid.

    Parameters
    ----------
    barrier_level : float
        Knock-out level. Must be finite and > 0. A level at or above spot
        is allowed but almost every path knocks out immediately.
    """

    family = OptionFamily.BARRIER

    def __init__(self, barrier_level: float):
        ValidationEngine([BarrierLevelGate()]).validate_and_raise(barrier_level=barrier_level)
        self.barrier_level = float(barrier_level)

    def evaluate(self, ensemble, params) -> PayoffResult:
        min_prices = ensemble.path_minimums
        call, put = barrier_payoffs(
            ensemble.paths, params.strike, params.discount_factor, self.barrier_level
        )

        n_paths = ensemble.n_paths
        survived = int(np.count_nonzero(min_prices > self.barrier_level))
        diagnostics = {
            "barrier_level": self.barrier_level,
            "knocked_out": n_paths - survived,
            "survived": survived,
            "survival_rate": survived / n_paths,
            "min_price_observed": float(min_prices.min()),
        }
        logger.info(
            f"Barrier ${self.barrier_level:.2f} (down-and-out): "
            f"{diagnostics['knocked_out']} knocked out, "
            f"{survived} surviving ({diagnostics['survival_rate']*100:.2f}%)"
        )

        return PayoffResult(
            family=self.family,
            call_payoffs=call,
            put_payoffs=put,
            diagnostics=diagnostics,
        )

    def __repr__(self) -> str:
        return f"DownAndOutBarrierPayoff(barrier_level={self.barrier_level})"
