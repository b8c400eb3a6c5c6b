"""Frozen settings and tolerance tiers."""
