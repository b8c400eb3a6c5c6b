"""
Analytical pricing oracle.

- black_scholes: European closed form and Greeks
"""

from mc_derivatives.options.pricing.black_scholes import (
    BSResult,
    black_scholes_call,
    black_scholes_greeks,
    black_scholes_price,
    black_scholes_put,
    put_call_parity_check,
)

__all__ = [
    "BSResult",
    "black_scholes_call",
    "black_scholes_put",
    "black_scholes_price",
    "black_scholes_greeks",
    "put_call_parity_check",
]
