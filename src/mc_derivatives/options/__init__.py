"""
Option pricing: path simulation, payoffs, Monte Carlo estimation, Greeks.

Subpackages
-----------
- simulation: GBM paths and the Monte Carlo engine
- payoffs: European, Asian and down-and-out barrier evaluators
- pricing: Black-Scholes oracle
- greeks: finite-difference sensitivities
"""
