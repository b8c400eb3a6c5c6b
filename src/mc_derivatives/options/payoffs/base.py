"""
Base classes for option payoffs.

Payoff evaluators are pure: they map a simulated path ensemble to one
discounted cash flow per path, for the call and the put at once.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

import numpy as np

from mc_derivatives.config.settings import SETTINGS

if TYPE_CHECKING:
    from mc_derivatives.options.simulation.gbm import MarketParameters, PathEnsemble


class OptionType(Enum):
    """Option type enumeration."""

    CALL = "call"
    PUT = "put"


class OptionFamily(Enum):
    """Instrument families priced by the engine."""

    EUROPEAN = "european"
    ASIAN = "asian"  # Arithmetic average price
    BARRIER = "barrier"  # Down-and-out

    @property
    def seed_offset(self) -> int:
        """Offset added to the base seed so families draw independent streams."""
        families = SETTINGS.families
        return {
            OptionFamily.EUROPEAN: families.european_seed_offset,
            OptionFamily.ASIAN: families.asian_seed_offset,
            OptionFamily.BARRIER: families.barrier_seed_offset,
        }[self]


@dataclass(frozen=True)
class PayoffResult:
    """
    Immutable payoff calculation result.

    Attributes
    ----------
    family : OptionFamily
        Instrument family that produced the payoffs
    call_payoffs : np.ndarray
        Discounted call cash flow per path, shape (n_paths,)
    put_payoffs : np.ndarray
        Discounted put cash flow per path, shape (n_paths,)
    diagnostics : dict
        Side-channel statistics (not part of the value contract)
    """

    family: OptionFamily
    call_payoffs: np.ndarray
    put_payoffs: np.ndarray
    diagnostics: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate payoff vectors."""
        if self.call_payoffs.shape != self.put_payoffs.shape:
            raise ValueError(
                f"CRITICAL: call and put payoffs must have same shape. "
                f"Got call={self.call_payoffs.shape}, put={self.put_payoffs.shape}"
            )

    @property
    def n_paths(self) -> int:
        """Number of simulated paths."""
        return len(self.call_payoffs)

    def payoffs(self, option_type: OptionType) -> np.ndarray:
        """Get the payoff vector for one side."""
        if option_type == OptionType.CALL:
            return self.call_payoffs
        return self.put_payoffs


class BasePayoff(ABC):
    """
    Abstract base class for path payoffs.

    All payoff implementations must:
    1. Implement evaluate() on a full path ensemble
    2. Return discounted, non-negative payoffs for both sides
    3. Never mutate the ensemble
    """

    family: OptionFamily

    @abstractmethod
    def evaluate(self, ensemble: "PathEnsemble", params: "MarketParameters") -> PayoffResult:
        """
        Calculate discounted payoffs for every path.

        Parameters
        ----------
        ensemble : PathEnsemble
            Simulated paths, rows are time steps, columns are paths
        params : MarketParameters
            Strike, rate and maturity used for payoff and discounting

        Returns
        -------
        PayoffResult
            Discounted call and put payoffs with diagnostics
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


def vanilla_payoffs(underlying: np.ndarray, strike: float) -> tuple[np.ndarray, np.ndarray]:
    """
    Undiscounted call and put payoffs on an underlying value per path.

    [T1] Call: max(X - K, 0), Put: max(K - X, 0)
    """
    call = np.maximum(underlying - strike, 0.0)
    put = np.maximum(strike - underlying, 0.0)
    return call, put
