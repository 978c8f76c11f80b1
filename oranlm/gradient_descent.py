"""Finite-difference gradient descent on a single scalar parameter."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class VanillaGradientDescent:
    """Tunes one parameter from observed objective values.

    ``m`` is the current parameter, ``mb`` the probe value (``m + dx``) that is
    actually tried, ``t`` the last objective value observed. An objective value
    of zero is treated as "nothing observed yet".
    """

    def __init__(self, m: float, dx: float, alpha: float) -> None:
        self.m = m
        self.dx = dx
        self.alpha = alpha
        self.mb = m
        self.t = 0.0

    def update_mb(self) -> None:
        """Move the probe value one step of ``dx`` above the parameter."""
        self.mb = self.m + self.dx

    def gradient(self, tt: float) -> float:
        """Finite-difference slope between the last and the new objective value."""
        g = (tt - self.t) / self.dx
        logger.debug("g: %s Tt: %s T: %s", g, tt, self.t)
        return g

    def update_m(self, tt: float) -> float:
        """Take one descent step using objective value ``tt``; return the parameter."""
        if self.t == 0:
            self.t = tt
            return self.m
        self.m = self.m - self.alpha * self.gradient(tt)
        self.t = tt
        return self.m