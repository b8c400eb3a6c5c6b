"""
Black-Scholes option pricing with Greeks.

Closed-form European prices, used as an independent oracle for the Monte
Carlo engine. Never consulted when pricing Asian or barrier options.

References
----------
[T1] Black, F., & Scholes, M. (1973). The pricing of options and corporate liabilities.
[T1] Hull, J. C. (2018). Options, Futures, and Other Derivatives (10th ed.).
"""

from dataclasses import dataclass

import numpy as np
from scipy import stats

from mc_derivatives.config.tolerances import PUT_CALL_PARITY_TOLERANCE
from mc_derivatives.errors import ConfigurationError
from mc_derivatives.options.payoffs.base import OptionType


@dataclass(frozen=True)
class BSResult:
    """
    Immutable Black-Scholes pricing result.

    Greeks are in raw units so they compare directly with the
    finite-difference engine.

    Attributes
    ----------
    price : float
        Option price
    delta : float
        Delta (dV/dS)
    gamma : float
        Gamma (d²V/dS²)
    vega : float
        Vega (dV/dσ) per 1.0 of volatility
    theta : float
        Theta (-dV/dT) per year
    rho : float
        Rho (dV/dr) per 1.0 of rate
    d1 : float
        d1 parameter
    d2 : float
        d2 parameter
    """

    price: float
    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float
    d1: float
    d2: float


def _calculate_d1_d2(
    spot: float,
    strike: float,
    time_to_expiry: float,
    rate: float,
    volatility: float,
    dividend: float,
) -> tuple[float, float]:
    """
    Calculate d1 and d2 parameters.

    [T1] d1 = (ln(S/K) + (r - q + σ²/2)T) / (σ√T)
    [T1] d2 = d1 - σ√T
    """
    vol_sqrt_t = volatility * np.sqrt(time_to_expiry)

    d1 = (
        np.log(spot / strike) + (rate - dividend + 0.5 * volatility**2) * time_to_expiry
    ) / vol_sqrt_t

    return d1, d1 - vol_sqrt_t


def _deterministic_forward_value(
    spot: float,
    strike: float,
    time_to_expiry: float,
    rate: float,
    dividend: float,
) -> float:
    """Discounted forward minus discounted strike: S*e^(-qT) - K*e^(-rT)."""
    return float(
        spot * np.exp(-dividend * time_to_expiry) - strike * np.exp(-rate * time_to_expiry)
    )


def black_scholes_call(
    spot: float,
    strike: float,
    time_to_expiry: float,
    rate: float,
    volatility: float,
    dividend: float = 0.0,
) -> float:
    """
    Price European call option using Black-Scholes.

    [T1] C = S*e^(-qT)*N(d1) - K*e^(-rT)*N(d2)

    Parameters
    ----------
    spot : float
        Current spot price
    strike : float
        Strike price
    time_to_expiry : float
        Time to expiry (years). T <= 0 returns intrinsic value.
    rate : float
        Risk-free rate (decimal)
    volatility : float
        Volatility (decimal). σ <= 0 returns the discounted
        deterministic payoff max(S*e^(-qT) - K*e^(-rT), 0).
    dividend : float, default 0.0
        Dividend yield (decimal)

    Returns
    -------
    float
        Call option price

    Examples
    --------
    >>> round(black_scholes_call(100, 100, 1.0, 0.05, 0.20), 2)
    10.45
    """
    _validate_inputs(spot, strike)

    if time_to_expiry <= 0:
        return max(spot - strike, 0.0)
    if volatility <= 0:
        return max(_deterministic_forward_value(spot, strike, time_to_expiry, rate, dividend), 0.0)

    d1, d2 = _calculate_d1_d2(spot, strike, time_to_expiry, rate, volatility, dividend)

    call_price = (
        spot * np.exp(-dividend * time_to_expiry) * stats.norm.cdf(d1)
        - strike * np.exp(-rate * time_to_expiry) * stats.norm.cdf(d2)
    )

    return float(call_price)


def black_scholes_put(
    spot: float,
    strike: float,
    time_to_expiry: float,
    rate: float,
    volatility: float,
    dividend: float = 0.0,
) -> float:
    """
    Price European put option using Black-Scholes.

    [T1] P = K*e^(-rT)*N(-d2) - S*e^(-qT)*N(-d1)

    Same parameters and degenerate-case handling as black_scholes_call.

    Examples
    --------
    >>> round(black_scholes_put(100, 100, 1.0, 0.05, 0.20), 2)
    5.57
    """
    _validate_inputs(spot, strike)

    if time_to_expiry <= 0:
        return max(strike - spot, 0.0)
    if volatility <= 0:
        return max(-_deterministic_forward_value(spot, strike, time_to_expiry, rate, dividend), 0.0)

    d1, d2 = _calculate_d1_d2(spot, strike, time_to_expiry, rate, volatility, dividend)

    put_price = (
        strike * np.exp(-rate * time_to_expiry) * stats.norm.cdf(-d2)
        - spot * np.exp(-dividend * time_to_expiry) * stats.norm.cdf(-d1)
    )

    return float(put_price)


def black_scholes_price(
    spot: float,
    strike: float,
    time_to_expiry: float,
    rate: float,
    volatility: float,
    option_type: OptionType,
    dividend: float = 0.0,
) -> float:
    """Price European option using Black-Scholes."""
    if option_type == OptionType.CALL:
        return black_scholes_call(spot, strike, time_to_expiry, rate, volatility, dividend)
    else:
        return black_scholes_put(spot, strike, time_to_expiry, rate, volatility, dividend)


def black_scholes_greeks(
    spot: float,
    strike: float,
    time_to_expiry: float,
    rate: float,
    volatility: float,
    option_type: OptionType,
    dividend: float = 0.0,
) -> BSResult:
    """
    Calculate Black-Scholes price and all Greeks.

    [T1] Delta (call) = e^(-qT) * N(d1)
    [T1] Delta (put) = -e^(-qT) * N(-d1)
    [T1] Gamma = e^(-qT) * n(d1) / (S * σ * √T)
    [T1] Vega = S * e^(-qT) * n(d1) * √T
    [T1] Theta (call) = -S*e^(-qT)*n(d1)*σ/(2√T) - r*K*e^(-rT)*N(d2) + q*S*e^(-qT)*N(d1)
    [T1] Rho (call) = K * T * e^(-rT) * N(d2)

    Parameters
    ----------
    spot, strike, time_to_expiry, rate, volatility : float
        As in black_scholes_call; here T and σ must be > 0
    option_type : OptionType
        Call or put
    dividend : float, default 0.0
        Dividend yield

    Returns
    -------
    BSResult
        Price and all Greeks, unscaled

    Raises
    ------
    ConfigurationError
        If T or σ is not > 0
    """
    _validate_inputs(spot, strike)
    if time_to_expiry <= 0 or volatility <= 0:
        raise ConfigurationError(
            f"CRITICAL: analytic Greeks need time_to_expiry > 0 and volatility > 0, "
            f"got T={time_to_expiry}, σ={volatility}"
        )

    d1, d2 = _calculate_d1_d2(spot, strike, time_to_expiry, rate, volatility, dividend)

    sqrt_t = np.sqrt(time_to_expiry)
    exp_div = np.exp(-dividend * time_to_expiry)
    exp_rate = np.exp(-rate * time_to_expiry)

    n_d1 = stats.norm.pdf(d1)
    N_d1 = stats.norm.cdf(d1)
    N_d2 = stats.norm.cdf(d2)
    N_neg_d1 = stats.norm.cdf(-d1)
    N_neg_d2 = stats.norm.cdf(-d2)

    # Same for call and put
    gamma = exp_div * n_d1 / (spot * volatility * sqrt_t)
    vega = spot * exp_div * n_d1 * sqrt_t
    time_decay = -spot * exp_div * n_d1 * volatility / (2 * sqrt_t)

    if option_type == OptionType.CALL:
        price = spot * exp_div * N_d1 - strike * exp_rate * N_d2
        delta = exp_div * N_d1
        theta = time_decay - rate * strike * exp_rate * N_d2 + dividend * spot * exp_div * N_d1
        rho = strike * time_to_expiry * exp_rate * N_d2
    else:
        price = strike * exp_rate * N_neg_d2 - spot * exp_div * N_neg_d1
        delta = -exp_div * N_neg_d1
        theta = time_decay + rate * strike * exp_rate * N_neg_d2 - dividend * spot * exp_div * N_neg_d1
        rho = -strike * time_to_expiry * exp_rate * N_neg_d2

    return BSResult(
        price=float(price),
        delta=float(delta),
        gamma=float(gamma),
        vega=float(vega),
        theta=float(theta),
        rho=float(rho),
        d1=float(d1),
        d2=float(d2),
    )


def put_call_parity_check(
    call_price: float,
    put_price: float,
    spot: float,
    strike: float,
    time_to_expiry: float,
    rate: float,
    dividend: float = 0.0,
    tolerance: float = PUT_CALL_PARITY_TOLERANCE,
) -> tuple[bool, float]:
    """
    Verify put-call parity holds.

    [T1] Put-Call Parity: C - P = S*e^(-qT) - K*e^(-rT)

    Returns
    -------
    tuple[bool, float]
        (parity_holds, error)
    """
    actual_diff = call_price - put_price
    expected_diff = _deterministic_forward_value(spot, strike, time_to_expiry, rate, dividend)

    error = abs(actual_diff - expected_diff)
    return error < tolerance, error


def _validate_inputs(spot: float, strike: float) -> None:
    """Validate Black-Scholes inputs."""
    if spot <= 0:
        raise ConfigurationError(f"CRITICAL: spot must be > 0, got {spot}")
    if strike <= 0:
        raise ConfigurationError(f"CRITICAL: strike must be > 0, got {strike}")
