"""
Error taxonomy for the simulation-and-valuation engine.

- ConfigurationError: bad input, fatal, raised immediately
- DomainWarning: unusual but valid input, computation proceeds

Numerical degeneracy (e.g. a single path) is not an exception: it surfaces
as a NaN standard error on the PricingResult.
"""

import logging
import warnings

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Invalid simulation configuration or market parameters."""


class DomainWarning(UserWarning):
    """Input is valid but outside the region where results are meaningful."""


def warn_domain(message: str, stacklevel: int = 3) -> str:
    """
    Issue a DomainWarning and log it.

    Parameters
    ----------
    message : str
        Warning text
    stacklevel : int, default 3
        Passed to warnings.warn so the warning points at the caller's caller

    Returns
    -------
    str
        The message, so callers can attach it to a result
    """
    logger.warning(message)
    warnings.warn(message, DomainWarning, stacklevel=stacklevel)
    return message
