#!/usr/bin/env python3
"""
Monte Carlo Derivative Pricing Demo.

Prices European, arithmetic Asian and down-and-out barrier options on one
underlying, compares the European prices with Black-Scholes, computes
finite-difference Greeks and prints a +10% sensitivity summary.

Usage:
    python examples/01_price_all_instruments.py          # Full run (100k paths)
    python examples/01_price_all_instruments.py --ci     # CI mode (fewer paths)
"""

import argparse
import logging

from mc_derivatives import (
    SETTINGS,
    MarketParameters,
    SimulationConfig,
    compare_to_black_scholes,
    compute_greeks,
    format_sensitivity_table,
    price_asian,
    price_barrier,
    price_european,
    summarize_sensitivity,
)
from mc_derivatives.analysis.sensitivity import sweep_config

logger = logging.getLogger(__name__)


def print_header(title: str) -> None:
    print("\n" + "=" * 65)
    print(title)
    print("=" * 65)


def print_estimate(label: str, price: float, std_error: float) -> None:
    print(f"{label}:")
    print(f"  Monte Carlo Price: ${price:.4f} (±{std_error:.4f})")


def main() -> None:
    parser = argparse.ArgumentParser(description="Monte Carlo derivative pricing demo")
    parser.add_argument("--ci", action="store_true", help="Run with fewer paths")
    parser.add_argument("--workers", type=int, default=1, help="Path generation threads")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    params = MarketParameters(
        spot=100.0,
        strike=100.0,
        time_to_expiry=1.0,
        rate=0.05,
        volatility=0.20,
        dividend=0.0,
    )
    config = SimulationConfig(
        num_paths=10_000 if args.ci else SETTINGS.simulation.num_paths,
        num_steps=SETTINGS.simulation.num_steps,
        seed=SETTINGS.simulation.seed,
        n_workers=args.workers,
    )
    barrier_level = SETTINGS.families.default_barrier_level

    print_header("Monte Carlo Simulation for Derivative Pricing")
    print(f"  Spot ${params.spot:.2f}, Strike ${params.strike:.2f}, T = {params.time_to_expiry:.1f}y")
    print(f"  r = {params.rate:.2%}, σ = {params.volatility:.2%}, q = {params.dividend:.2%}")
    print(f"  {config.num_paths} paths, {config.num_steps} steps, seed {config.seed}")

    print_header("European Options Pricing")
    comparison = compare_to_black_scholes(params, config)
    for side, row in comparison.items():
        print_estimate(f"European {side.capitalize()} Option", row["mc_price"], row["standard_error"])
        print(f"  Black-Scholes Price: ${row['bs_price']:.4f}")
        print(f"  Absolute Error: ${row['absolute_error']:.4f}")
        print(f"  Relative Error: {row['relative_error']:.4%}")

    print_header("Asian Options Pricing")
    asian = price_asian(params, config)
    print_estimate("Asian Call Option (Arithmetic Average)", asian.call_price, asian.call_std_error)
    print_estimate("Asian Put Option (Arithmetic Average)", asian.put_price, asian.put_std_error)

    print_header("Barrier Options Pricing")
    barrier = price_barrier(params, config, barrier_level=barrier_level)
    print_estimate(f"Down-and-Out Call (Barrier = ${barrier_level:.2f})", barrier.call_price, barrier.call_std_error)
    print_estimate(f"Down-and-Out Put (Barrier = ${barrier_level:.2f})", barrier.put_price, barrier.put_std_error)
    print(f"  Survival rate: {barrier.diagnostics['survival_rate']:.2%}")

    print_header("Greeks Calculation (Finite Difference Method)")
    greeks = compute_greeks(params, config)
    for side, values in (("Call", greeks.call), ("Put", greeks.put)):
        print(f"European {side} Option Greeks:")
        print(f"  Delta: {values.delta:.4f}")
        print(f"  Gamma: {values.gamma:.4f}")
        print(f"  Theta: {values.theta:.4f}")
        print(f"  Vega: {values.vega:.4f}")
        print(f"  Rho: {values.rho:.4f}")

    print_header("Sensitivity Analysis")
    sensitivity_config = config.with_overrides(num_paths=10_000) if args.ci else sweep_config(config)
    print(format_sensitivity_table(summarize_sensitivity(params, sensitivity_config)))

    european = price_european(params, config)
    logger.info(
        f"Done: European call {european.call_price:.4f}, "
        f"Asian call {asian.call_price:.4f}, barrier call {barrier.call_price:.4f}"
    )


if __name__ == "__main__":
    main()
