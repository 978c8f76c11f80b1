"""LTE handover logic modules with an in-memory data repository."""

__version__ = "0.1.0"
__all__ = ["common", "dp_lm", "gradient_descent", "margin_lm", "ml_lm", "repository"]