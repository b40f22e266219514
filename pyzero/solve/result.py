"""
Results returned by the root finding solvers.

Every solver returns either :class:`Converged` or :class:`Failed`
instead of raising, so that a batch of problems can be processed
without exception handling.  Use :meth:`Converged.get_root` /
:meth:`Failed.get_root` where an exception on failure is preferred.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from pyzero.solve.exception import (
    SolverError, NotBracketingError, NonFiniteValueError,
    DerivativeTooSmallError, MaxIterationsExceededError)


# Written by Eric J. Whitney, April 2023.


# ======================================================================

class FailureKind(Enum):
    """
    Reason a solver stopped without finding a root.  The value of each
    member is the `flag` of the corresponding :class:`SolverError`.
    """
    NOT_BRACKETING = 1
    NON_FINITE_VALUE = 2
    DERIVATIVE_TOO_SMALL = 3
    MAX_ITERATIONS_EXCEEDED = 4

    @property
    def error(self) -> type[SolverError]:
        """Exception type matching this failure."""
        return _ERROR_TYPES[self]

    @classmethod
    def from_error(cls, err: SolverError) -> FailureKind:
        return cls(err.flag)


_ERROR_TYPES = {
    FailureKind.NOT_BRACKETING: NotBracketingError,
    FailureKind.NON_FINITE_VALUE: NonFiniteValueError,
    FailureKind.DERIVATIVE_TOO_SMALL: DerivativeTooSmallError,
    FailureKind.MAX_ITERATIONS_EXCEEDED: MaxIterationsExceededError,
}


# ----------------------------------------------------------------------

@dataclass(frozen=True)
class Converged:
    """
    A root was found.

    Attributes
    ----------
    root : float
        Best estimate of the root.
    iterations : int
        Number of iterations (steps) taken.
    residual : float
        ``|f(root)|``.
    fevals : int
        Number of function evaluations, including derivative
        evaluations where applicable.
    history : tuple[float, ...]
        Every iterate produced, starting with the initial point/s.
    """
    root: float
    iterations: int
    residual: float
    fevals: int = 0
    history: tuple[float, ...] = ()

    converged = True

    def get_root(self) -> float:
        return self.root


@dataclass(frozen=True)
class Failed:
    """
    No root was found.

    Attributes
    ----------
    reason : FailureKind
        The first disqualifying condition encountered.
    last_estimate : float
        Last point computed before stopping (`NaN` if no point was
        ever evaluated).
    iterations, fevals, history :
        As for :class:`Converged`.
    details : str
        Human readable description of the failure.
    """
    reason: FailureKind
    last_estimate: float
    iterations: int = 0
    fevals: int = 0
    history: tuple[float, ...] = ()
    details: str = None

    converged = False

    def get_root(self) -> float:
        """
        Raises
        ------
        SolverError
            Always, as the subclass corresponding to `reason`.
        """
        raise self.reason.error(
            "Failed to find a root:", details=self.details,
            x=self.last_estimate, iterations=self.iterations)


Result = Union[Converged, Failed]

# ----------------------------------------------------------------------
