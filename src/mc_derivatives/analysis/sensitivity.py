"""
Sensitivity analysis for European option prices.

Implements one-at-a-time (OAT) parameter sweeps and a +10% bump summary.

Design Principles:
- **OAT Methodology**: Vary one market input while holding others constant
- **Reduced sample**: Sweeps run on fewer paths than a single pricing call
- **Ranking**: Summary rows sorted by impact magnitude
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np
import pandas as pd

from mc_derivatives.config.settings import SETTINGS
from mc_derivatives.errors import ConfigurationError
from mc_derivatives.options.simulation.gbm import MarketParameters, SimulationConfig
from mc_derivatives.options.simulation.monte_carlo import price_european

logger = logging.getLogger(__name__)

SWEEPABLE_PARAMETERS = {
    "spot": "Stock Price",
    "volatility": "Volatility",
    "time_to_expiry": "Time to Maturity",
    "rate": "Interest Rate",
}


# =============================================================================
# Dataclasses
# =============================================================================


@dataclass(frozen=True)
class SweepParameter:
    """
    A market input and the grid of values to sweep it over.

    Attributes
    ----------
    name : str
        MarketParameters field ("spot", "volatility", "time_to_expiry", "rate")
    values : tuple[float, ...]
        Values to price at
    """

    name: str
    values: tuple[float, ...]

    def __post_init__(self) -> None:
        """Validate parameter name."""
        _check_parameter(self.name)

    @property
    def display_name(self) -> str:
        return SWEEPABLE_PARAMETERS[self.name]


@dataclass(frozen=True)
class SweepResult:
    """
    Call and put prices along one parameter sweep.

    Attributes
    ----------
    parameter : str
        Swept MarketParameters field
    values : np.ndarray
        Parameter values
    call_prices : np.ndarray
        MC call price at each value
    put_prices : np.ndarray
        MC put price at each value
    """

    parameter: str
    values: np.ndarray
    call_prices: np.ndarray
    put_prices: np.ndarray

    def to_frame(self) -> pd.DataFrame:
        """Tabulate as a DataFrame indexed by parameter value."""
        return pd.DataFrame(
            {
                "call_price": self.call_prices,
                "put_price": self.put_prices,
            },
            index=pd.Index(self.values, name=self.parameter),
        )


@dataclass(frozen=True)
class SensitivityResult:
    """
    Price response to a relative increase in one parameter.

    Attributes
    ----------
    parameter : str
        MarketParameters field
    display_name : str
        Human-readable name for reports
    base_value : float
        Unbumped parameter value
    bumped_value : float
        Parameter value after the increase
    base_call_price, base_put_price : float
        Prices at base_value
    bumped_call_price, bumped_put_price : float
        Prices at bumped_value
    call_change_pct, put_change_pct : float
        Percentage price change (0 if the base price is 0)
    """

    parameter: str
    display_name: str
    base_value: float
    bumped_value: float
    base_call_price: float
    base_put_price: float
    bumped_call_price: float
    bumped_put_price: float
    call_change_pct: float
    put_change_pct: float

    @property
    def impact(self) -> float:
        """Largest absolute percentage change across both sides."""
        return max(abs(self.call_change_pct), abs(self.put_change_pct))


def _check_parameter(name: str) -> None:
    if name not in SWEEPABLE_PARAMETERS:
        raise ConfigurationError(
            f"CRITICAL: cannot sweep '{name}'. "
            f"Expected one of {sorted(SWEEPABLE_PARAMETERS)}"
        )


def _pct_change(base: float, bumped: float) -> float:
    if base > 0:
        return (bumped - base) / base * 100.0
    return 0.0


# =============================================================================
# Sweeps
# =============================================================================


def sweep_config(config: SimulationConfig | None = None) -> SimulationConfig:
    """Copy of config with the reduced sweep path count."""
    return (config or SimulationConfig()).with_overrides(
        num_paths=SETTINGS.sensitivity.sweep_num_paths
    )


def get_default_sweeps(params: MarketParameters) -> list[SweepParameter]:
    """
    Default sweep grids.

    Spot 0.7-1.3 × S0 (15 points), volatility 0.10-0.40, maturity
    0.1-2.0 years, rate 0.01-0.10 (10 points each).
    """
    settings = SETTINGS.sensitivity
    spot_low, spot_high, spot_points = settings.spot_range

    grids = {
        "spot": np.linspace(spot_low * params.spot, spot_high * params.spot, spot_points),
        "volatility": np.linspace(*settings.volatility_range),
        "time_to_expiry": np.linspace(*settings.time_range),
        "rate": np.linspace(*settings.rate_range),
    }
    return [
        SweepParameter(name=name, values=tuple(float(v) for v in grid))
        for name, grid in grids.items()
    ]


def run_parameter_sweep(
    params: MarketParameters,
    config: SimulationConfig | None,
    parameter: str,
    values: Iterable[float],
) -> SweepResult:
    """
    Price European call and put at each value of one parameter.

    Parameters
    ----------
    params : MarketParameters
        Base inputs; all fields except `parameter` are held fixed
    config : SimulationConfig, optional
        Sizing for each point. None uses the reduced sweep config.
    parameter : str
        Field to vary
    values : Iterable[float]
        Grid of values

    Returns
    -------
    SweepResult
        Prices along the grid
    """
    _check_parameter(parameter)
    config = config or sweep_config()
    values = np.asarray(list(values), dtype=float)

    logger.info(f"Analyzing sensitivity to {SWEEPABLE_PARAMETERS[parameter].lower()} ({len(values)} points)")

    call_prices = np.empty(len(values))
    put_prices = np.empty(len(values))
    for i, value in enumerate(values):
        result = price_european(params.with_overrides(**{parameter: float(value)}), config)
        call_prices[i] = result.call_price
        put_prices[i] = result.put_price

    return SweepResult(
        parameter=parameter,
        values=values,
        call_prices=call_prices,
        put_prices=put_prices,
    )


def run_default_sweeps(
    params: MarketParameters,
    config: SimulationConfig | None = None,
) -> dict[str, SweepResult]:
    """Run every default sweep, keyed by parameter name."""
    config = config or sweep_config()
    return {
        sweep.name: run_parameter_sweep(params, config, sweep.name, sweep.values)
        for sweep in get_default_sweeps(params)
    }


# =============================================================================
# Summary
# =============================================================================


def summarize_sensitivity(
    params: MarketParameters,
    config: SimulationConfig | None = None,
    bump_fraction: float = SETTINGS.sensitivity.bump_fraction,
) -> list[SensitivityResult]:
    """
    Percentage price change for a relative increase in each parameter.

    Each parameter is repriced at value × (1 + bump_fraction) with the same
    config, so base and bumped runs share random draws.

    Returns
    -------
    list[SensitivityResult]
        Sorted by impact, most impactful first
    """
    config = config or sweep_config()
    base = price_european(params, config)

    results = []
    for name, display_name in SWEEPABLE_PARAMETERS.items():
        base_value = getattr(params, name)
        bumped_value = base_value * (1.0 + bump_fraction)
        bumped = price_european(params.with_overrides(**{name: bumped_value}), config)

        results.append(
            SensitivityResult(
                parameter=name,
                display_name=display_name,
                base_value=base_value,
                bumped_value=bumped_value,
                base_call_price=base.call_price,
                base_put_price=base.put_price,
                bumped_call_price=bumped.call_price,
                bumped_put_price=bumped.put_price,
                call_change_pct=_pct_change(base.call_price, bumped.call_price),
                put_change_pct=_pct_change(base.put_price, bumped.put_price),
            )
        )

    return sorted(results, key=lambda r: r.impact, reverse=True)


def format_sensitivity_table(
    results: list[SensitivityResult],
    bump_fraction: float = SETTINGS.sensitivity.bump_fraction,
) -> str:
    """
    Format sensitivity results as a Markdown table.

    Returns
    -------
    str
        Formatted Markdown table
    """
    bump_label = f"+{bump_fraction * 100:.0f}%"
    lines = [
        f"### Sensitivity Analysis ({bump_label} parameter increase)",
        "",
        "| Parameter              | Call Δ    | Put Δ     |",
        "|------------------------|-----------|-----------|",
    ]

    for result in results:
        label = f"{result.display_name} {bump_label}"
        lines.append(
            f"| {label:<22} | "
            f"{result.call_change_pct:>+8.2f}% | "
            f"{result.put_change_pct:>+8.2f}% |"
        )

    return "\n".join(lines)
