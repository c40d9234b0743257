"""Synthetic data generators for demos and simulations."""
