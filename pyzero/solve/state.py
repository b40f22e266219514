"""
Working state of an iterative solver.  A new `IterateState` is created
by each solver call and discarded when it returns, so solvers keep no
module level state.
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import numpy as np

from pyzero.logger import pyzero_logger
from pyzero.solve.bracket import evaluate
from pyzero.solve.exception import SolverError, NonFiniteValueError
from pyzero.solve.result import Converged, Failed, FailureKind


# Written by Eric J. Whitney, April 2023.


# ======================================================================

@dataclass
class IterateState:
    """
    The two most recent iterates and their function values, together
    with iteration / evaluation counts.
    """
    x_prev: float = np.nan
    x_curr: float = np.nan
    f_prev: float = np.nan
    f_curr: float = np.nan
    step: int = 0
    fevals: int = 0
    history: list[float] = field(default_factory=list)

    def start(self, x: float, fx: float):
        """Record an initial point; the iteration count is unchanged."""
        self.x_prev, self.f_prev = self.x_curr, self.f_curr
        self.x_curr, self.f_curr = x, fx
        self.history.append(x)

    def advance(self, x: float, fx: float):
        """Record the result of one iteration."""
        self.start(x, fx)
        self.step += 1

    def evaluate(self, f: Callable[[float], float], x: float,
                 what: str = 'f') -> float:
        """
        Return ``f(x)``, counting the evaluation.

        Raises
        ------
        NonFiniteValueError
            If ``f(x)`` is `NaN` or infinite, or `f` raised an
            arithmetic exception.
        """
        self.fevals += 1
        fx = evaluate(f, x, what)
        if not np.isfinite(fx):
            raise NonFiniteValueError(f"{what}({x}) = {fx}.", x=x)
        return fx

    def converged(self, root: float, residual: float,
                  method: str) -> Converged:
        pyzero_logger.debug(f"{method}() converged to {root} after "
                            f"{self.step} iterations.")
        return Converged(root=float(root), iterations=self.step,
                         residual=float(abs(residual)), fevals=self.fevals,
                         history=tuple(float(x) for x in self.history))

    def failed(self, err: SolverError, method: str) -> Failed:
        reason = FailureKind.from_error(err)
        details = err.details or (err.args[0] if err.args else None)
        pyzero_logger.warning(f"{method}() failed: {reason.name} after "
                              f"{self.step} iterations ({details})")

        last = getattr(err, 'x', None)
        if last is None:
            last = self.x_curr
        return Failed(reason=reason, last_estimate=float(last),
                      iterations=self.step, fevals=self.fevals,
                      history=tuple(float(x) for x in self.history),
                      details=details)

# ----------------------------------------------------------------------
