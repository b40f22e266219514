"""
=====================================
Solvers (:mod:`pyzero.solve`)
=====================================

.. currentmodule:: pyzero.solve

Functions for finding zeros of real functions of one variable.  All
solvers return a :class:`Converged` or :class:`Failed` result rather
than raising when no root is found.

Functions
---------

.. autosummary::
    :toctree:

    bisect
    bracket_root
    find_zero
    newton
    secant
    solve_batch
    steffensen

Classes
-------

.. autosummary::
    :toctree:

    Bracket
    CentralDifference
    ConvergencePolicy
    Converged
    DerivativeOracle
    Failed
    FailureKind

Exceptions
----------

.. autosummary::
    :toctree:

    SolverError
    NotBracketingError
    NonFiniteValueError
    DerivativeTooSmallError
    MaxIterationsExceededError

"""

from .batch import solve_batch
from .bisection import bisect
from .bracket import Bracket, bracket_root
from .derivative import CentralDifference, DerivativeOracle
from .derivative_free import secant, steffensen
from .exception import (SolverError, NotBracketingError, NonFiniteValueError,
                        DerivativeTooSmallError, MaxIterationsExceededError)
from .hybrid import find_zero
from .newton import newton
from .policy import ConvergencePolicy
from .result import Converged, Failed, FailureKind, Result
