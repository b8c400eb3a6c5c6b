"""
Frozen configuration settings for Monte Carlo derivative pricing.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
"""

import os
from dataclasses import dataclass, field

# =============================================================================
# Simulation Configuration
# =============================================================================

def _resolve_n_workers() -> int:
    """
    Resolve default worker count with environment variable override.

    Priority:
    1. MC_DERIVATIVES_WORKERS environment variable (if set)
    2. Default: 1 (single-threaded)
    """
    env_workers = os.environ.get("MC_DERIVATIVES_WORKERS")
    if env_workers:
        return max(int(env_workers), 1)
    return 1


@dataclass(frozen=True)
class SimulationSettings:
    """
    Immutable Monte Carlo defaults. [T1: Academic standard]

    Attributes
    ----------
    num_paths : int
        Number of Monte Carlo paths
    num_steps : int
        Time steps per path (252 = daily over one year)
    seed : int
        Base random seed for reproducibility
    path_block_size : int
        Antithetic pairs per random sub-stream. Fixed so that results do
        not depend on the number of workers.
    n_workers : int
        Threads used for path generation. Override with
        MC_DERIVATIVES_WORKERS environment variable.
    """

    num_paths: int = 100_000
    num_steps: int = 252  # [T1] trading days per year
    seed: int = 12345
    path_block_size: int = 8_192
    n_workers: int = field(default_factory=_resolve_n_workers)


# =============================================================================
# Option Family Configuration
# =============================================================================

@dataclass(frozen=True)
class FamilySettings:
    """
    Per-family seed offsets and defaults.

    Distinct offsets give European, Asian and Barrier runs on the same base
    seed independent random streams.
    """

    european_seed_offset: int = 0
    asian_seed_offset: int = 100
    barrier_seed_offset: int = 200
    default_barrier_level: float = 90.0


# =============================================================================
# Greeks Configuration
# =============================================================================

@dataclass(frozen=True)
class GreekBumps:
    """
    Finite-difference bump sizes for Greeks.

    Attributes
    ----------
    spot_relative : float
        Spot bump as fraction of S0 (1%)
    volatility : float
        Absolute volatility bump (1 vol point)
    rate : float
        Absolute rate bump (1 basis point)
    time : float
        Maturity bump in years (one calendar day)
    volatility_floor : float
        Lower bound for the downward volatility bump
    time_floor : float
        Lower bound for the shortened maturity
    rate_floor : float
        Lower bound for the downward rate bump
    """

    spot_relative: float = 0.01
    volatility: float = 0.01
    rate: float = 0.0001
    time: float = 1.0 / 365.0
    volatility_floor: float = 0.001
    time_floor: float = 0.001
    rate_floor: float = 0.0


# =============================================================================
# Sensitivity Analysis Configuration
# =============================================================================

@dataclass(frozen=True)
class SensitivitySettings:
    """
    One-at-a-time sweep defaults.

    Attributes
    ----------
    sweep_num_paths : int
        Paths per sweep point (sweeps trade precision for speed)
    bump_fraction : float
        Relative parameter move for the summary table (+10%)
    """

    sweep_num_paths: int = 50_000
    bump_fraction: float = 0.10
    spot_range: tuple[float, float, int] = (0.7, 1.3, 15)  # multiples of S0
    volatility_range: tuple[float, float, int] = (0.10, 0.40, 10)
    time_range: tuple[float, float, int] = (0.1, 2.0, 10)
    rate_range: tuple[float, float, int] = (0.01, 0.10, 10)


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from mc_derivatives.config.settings import SETTINGS
    >>> SETTINGS.simulation.num_steps
    252
    """

    simulation: SimulationSettings = field(default_factory=SimulationSettings)
    families: FamilySettings = FamilySettings()
    greeks: GreekBumps = GreekBumps()
    sensitivity: SensitivitySettings = SensitivitySettings()


# Singleton instance - import this
SETTINGS = Settings()
