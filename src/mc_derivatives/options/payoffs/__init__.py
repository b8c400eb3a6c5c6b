"""
Option payoff evaluators.

Provides:
- EuropeanPayoff: terminal value
- AsianPayoff: arithmetic average over the full path
- DownAndOutBarrierPayoff: knock-out on the path minimum
"""

from mc_derivatives.options.payoffs.base import (
    BasePayoff,
    OptionFamily,
    OptionType,
    PayoffResult,
    vanilla_payoffs,
)
from mc_derivatives.options.payoffs.path_dependent import (
    AsianPayoff,
    DownAndOutBarrierPayoff,
    asian_payoffs,
    barrier_payoffs,
)
from mc_derivatives.options.payoffs.vanilla import EuropeanPayoff, european_payoffs

__all__ = [
    # Base
    "BasePayoff",
    "OptionFamily",
    "OptionType",
    "PayoffResult",
    "vanilla_payoffs",
    # European
    "EuropeanPayoff",
    "european_payoffs",
    # Path-dependent
    "AsianPayoff",
    "DownAndOutBarrierPayoff",
    "asian_payoffs",
    "barrier_payoffs",
]
