from __future__ import annotations

import dataclasses
from dataclasses import dataclass

import numpy as np

# Written by Eric J. Whitney, April 2023.

_DEFAULT_TOL = 100 * np.finfo(float).eps  # ≈ 2.2e-14


# ======================================================================

@dataclass(frozen=True)
class ConvergencePolicy:
    r"""
    Tolerances and iteration limit shared by all solvers.  A new policy
    is normally created once per solve call and never changed.

    Parameters
    ----------
    x_tol : float, default = 100ε
        Converged when the step size :math:`|x_{n+1} - x_n| < x_{tol} +
        x_{rtol} |x_{n+1}|`.
    f_tol : float, default = 100ε
        Converged when the residual :math:`|f(x_{n+1})| < f_{tol} +
        f_{rtol} |x_{n+1}|`.
    max_iter : int, default = 100
        Maximum number of iterations.
    x_rtol, f_rtol : float, default = 0.0
        Optional relative tolerances.

    Raises
    ------
    ValueError
        Negative tolerances or ``max_iter < 1``.

    Notes
    -----
    The default stopping rule is purely absolute.  For roots with very
    large or very small magnitude this is imprecise: a large root may
    never achieve the step size tolerance (and then stops only on the
    residual), and a tiny root is accepted with few correct digits.
    Setting `x_rtol` and / or `f_rtol` addresses this.
    """
    x_tol: float = _DEFAULT_TOL
    f_tol: float = _DEFAULT_TOL
    max_iter: int = 100
    x_rtol: float = 0.0
    f_rtol: float = 0.0

    def __post_init__(self):
        for name in ('x_tol', 'f_tol', 'x_rtol', 'f_rtol'):
            tol = getattr(self, name)
            if not tol >= 0:  # Also catches NaN.
                raise ValueError(f"{name} must be >= 0, got {tol}.")

        if int(self.max_iter) != self.max_iter or self.max_iter < 1:
            raise ValueError(f"max_iter must be an integer greater than "
                             f"0, got {self.max_iter}.")

    # -- Public Methods ------------------------------------------------

    def replace(self, **changes) -> ConvergencePolicy:
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def step_converged(self, x_new: float, x_old: float) -> bool:
        """``True`` if the step from `x_old` to `x_new` is small enough."""
        return (x_new == x_old or
                abs(x_new - x_old) < self.x_tol + self.x_rtol * abs(x_new))

    def residual_converged(self, x: float, fx: float) -> bool:
        """``True`` if `fx` = ``f(x)`` is close enough to zero."""
        return fx == 0 or abs(fx) < self.f_tol + self.f_rtol * abs(x)

    def converged(self, x_new: float, x_old: float, fx_new: float) -> bool:
        """
        Combined stopping rule.  Both checks are needed: near a multiple
        root the step can be small while the residual is not, and vice
        versa.
        """
        return (self.step_converged(x_new, x_old) or
                self.residual_converged(x_new, fx_new))


def resolve_policy(policy: ConvergencePolicy | None) -> ConvergencePolicy:
    return ConvergencePolicy() if policy is None else policy

# ----------------------------------------------------------------------
