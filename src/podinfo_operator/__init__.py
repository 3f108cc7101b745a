"""Convergence controller for MyAppResource custom resources."""

__version__ = "0.1.0"
