"""
European (terminal value) payoffs.

[T1] Call payoff: max(S(T) - K, 0)
[T1] Put payoff: max(K - S(T), 0)
"""

import logging

import numpy as np

from mc_derivatives.options.payoffs.base import (
    BasePayoff,
    OptionFamily,
    PayoffResult,
    vanilla_payoffs,
)

logger = logging.getLogger(__name__)


def european_payoffs(
    paths: np.ndarray,
    strike: float,
    discount_factor: float,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Discounted European payoffs from the final row of a path grid.

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
        (call_payoffs, put_payoffs), each shape (n_paths,)
    """
    call, put = vanilla_payoffs(paths[-1], strike)
    return call * discount_factor, put * discount_factor


class EuropeanPayoff(BasePayoff):
    """
    European call/put on the terminal price.

    Examples
    --------
    >>> payoff = EuropeanPayoff()
    >>> result = payoff.evaluate(ensemble, params)
    >>> result.call_payoffs.mean()
    """

    family = OptionFamily.EUROPEAN

    def evaluate(self, ensemble, params) -> PayoffResult:
        final_prices = ensemble.terminal_values
        call, put = european_payoffs(ensemble.paths, params.strike, params.discount_factor)

        diagnostics = {
            "final_price_min": float(final_prices.min()),
            "final_price_max": float(final_prices.max()),
            "final_price_mean": float(final_prices.mean()),
        }
        logger.info(
            f"European: final price range ${diagnostics['final_price_min']:.2f}"
            f" - ${diagnostics['final_price_max']:.2f}"
        )

        return PayoffResult(
            family=self.family,
            call_payoffs=call,
            put_payoffs=put,
            diagnostics=diagnostics,
        )
