"""Prop evaluation and two-leg combination engine."""

__version__ = "0.1.0"
