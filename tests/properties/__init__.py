"""
Property-based testing using Hypothesis.

This package contains property tests that verify mathematical invariants
hold across randomly generated inputs.

Modules:
    test_option_properties: Black-Scholes invariants (bounds, parity, monotonicity)
    test_payoff_properties: payoff invariants (non-negativity, barrier dominance)
    test_greeks_properties: Greeks mathematical properties
    test_mc_properties: Monte Carlo bounds, convergence, antithetic pairing
"""
