"""
Derivative-free root finding: the secant method and Steffensen's method.
Both only need function values, using a divided difference in place of
``f'(x)``.
"""
from __future__ import annotations

from collections.abc import Callable

import numpy as np

from pyzero.logger import progress_logger
from pyzero.solve.exception import (
    SolverError, NonFiniteValueError, MaxIterationsExceededError)
from pyzero.solve.policy import ConvergencePolicy, resolve_policy
from pyzero.solve.result import Result
from pyzero.solve.state import IterateState

# Written by Eric J. Whitney, April 2023.

_SECANT_OFFSET = np.cbrt(np.finfo(float).eps)  # ≈ 6e-6


# ======================================================================

def default_secant_x1(x0: float) -> float:
    r"""
    Second starting point for the secant method when only `x0` is
    known: :math:`x_1 = x_0 + h (1 + |x_0|)` with :math:`h =
    \epsilon^{1/3}`.
    """
    return x0 + _SECANT_OFFSET * (1.0 + abs(x0))


def secant_step(x0: float, f0: float, x1: float, f1: float) -> float:
    r"""
    Secant update :math:`x_1 - f_1 (x_1 - x_0) / (f_1 - f_0)`.

    Raises
    ------
    NonFiniteValueError
        If ``f1 == f0`` or the result is not finite.
    """
    if f1 == f0:
        raise NonFiniteValueError("Secant slope is zero (division by zero).",
                                  details=f"f({x0}) == f({x1}) == {f1}",
                                  x=x1)

    with np.errstate(divide='ignore', over='ignore', invalid='ignore'):
        x2 = x1 - np.float64(f1) * (x1 - x0) / (np.float64(f1) - f0)

    if not np.isfinite(x2):
        raise NonFiniteValueError(f"Secant step not finite from x = {x1}.",
                                  x=x1)
    return float(x2)


def steffensen_step(f: Callable[[float], float], x: float, fx: float,
                    state: IterateState) -> float:
    r"""
    Steffensen update :math:`x - f(x)^2 / (f(x + f(x)) - f(x))`.

    Raises
    ------
    NonFiniteValueError
        If the auxiliary value is not finite, the denominator is zero
        or the result is not finite.
    """
    f_aux = state.evaluate(f, x + fx)
    with np.errstate(divide='ignore', over='ignore', invalid='ignore'):
        denom = np.float64(f_aux) - fx
        x_new = x - np.float64(fx) * fx / denom

    if denom == 0 or not np.isfinite(x_new):
        raise NonFiniteValueError(
            f"Steffensen step undefined at x = {x}.",
            details=f"f(x) = {fx}, f(x + f(x)) = {f_aux}", x=x)
    return float(x_new)


# ----------------------------------------------------------------------

def secant(f: Callable[[float], float], x0: float, x1: float = None,
           policy: ConvergencePolicy = None, *,
           verbose: bool = False) -> Result:
    r"""
    Find a zero of `f` using the secant method:

    .. math:: x_{n+1} = x_n - f(x_n) \frac{x_n - x_{n-1}}{f(x_n) -
              f(x_{n-1})}

    This is the derivative-free analogue of Newton's method.
    Convergence near a simple root is superlinear (order ≈ 1.618) but
    not quadratic.  Stopping rules are the same as
    :func:`~pyzero.solve.newton`.

    Parameters
    ----------
    f : Callable[[float], float]
        Function to find the zero of.
    x0 : float
        First starting point.
    x1 : float, optional
        Second starting point.  If not given, it is placed a small
        distance from `x0` (see :func:`default_secant_x1`).
    policy : ConvergencePolicy, optional
        Tolerances and iteration limit.
    verbose : bool, default = False
        If True, log progress at ``INFO`` level (otherwise ``DEBUG``).

    Returns
    -------
    Result
        :class:`Converged`, or :class:`Failed` with reason
        ``NON_FINITE_VALUE`` (non-finite function value, or ``f(x_n) ==
        f(x_{n-1})``) or ``MAX_ITERATIONS_EXCEEDED``.

    Raises
    ------
    ValueError
        If ``x1 == x0``.

    Examples
    --------
    >>> from math import cos
    >>> res = secant(lambda x: cos(x) - x**3, 0.5, 1.0)
    >>> round(res.root, 6)
    0.865474
    """
    if x1 is None:
        x1 = default_secant_x1(x0)
    if x1 == x0:
        raise ValueError("x1 and x0 must be different.")

    policy = resolve_policy(policy)
    state = IterateState()
    try:
        return _secant(f, float(x0), float(x1), policy, state, verbose)
    except SolverError as err:
        return state.failed(err, 'secant')


def _secant(f, x0, x1, policy: ConvergencePolicy, state: IterateState,
            verbose: bool) -> Result:
    log = progress_logger(verbose)
    log("Secant Method:")

    state.start(x0, state.evaluate(f, x0))
    if policy.residual_converged(x0, state.f_curr):
        return state.converged(x0, state.f_curr, 'secant')

    state.start(x1, state.evaluate(f, x1))
    if policy.residual_converged(x1, state.f_curr):
        return state.converged(x1, state.f_curr, 'secant')

    while state.step < policy.max_iter:
        x_new = secant_step(state.x_prev, state.f_prev,
                            state.x_curr, state.f_curr)
        fx_new = state.evaluate(f, x_new)
        x_old = state.x_curr
        state.advance(x_new, fx_new)
        log(f"... Iteration {state.step}: x = {x_new}, f(x) = {fx_new}")

        if policy.converged(x_new, x_old, fx_new):
            return state.converged(x_new, fx_new, 'secant')

    raise MaxIterationsExceededError(
        f"Reached {policy.max_iter} iteration limit.", x=state.x_curr)


# ----------------------------------------------------------------------

def steffensen(f: Callable[[float], float], x0: float,
               policy: ConvergencePolicy = None, *,
               verbose: bool = False) -> Result:
    r"""
    Find a zero of `f` using Steffensen's method:

    .. math:: x_{n+1} = x_n - \frac{f(x_n)^2}{f(x_n + f(x_n)) - f(x_n)}

    This is Newton's method with ``f'(x)`` replaced by the divided
    difference over :math:`[x_n, x_n + f(x_n)]`.  Convergence is nearly
    quadratic close to a simple root, without needing a derivative.  It
    degrades badly when :math:`|f(x_n)|` is large as the auxiliary
    point is then far from :math:`x_n`.  Two function evaluations are
    made per iteration.

    Parameters
    ----------
    f : Callable[[float], float]
        Function to find the zero of.
    x0 : float
        Starting point.
    policy : ConvergencePolicy, optional
        Tolerances and iteration limit, as for
        :func:`~pyzero.solve.newton`.
    verbose : bool, default = False
        If True, log progress at ``INFO`` level (otherwise ``DEBUG``).

    Returns
    -------
    Result
        :class:`Converged`, or :class:`Failed` with reason
        ``NON_FINITE_VALUE`` or ``MAX_ITERATIONS_EXCEEDED``.
    """
    policy = resolve_policy(policy)
    state = IterateState()
    try:
        return _steffensen(f, float(x0), policy, state, verbose)
    except SolverError as err:
        return state.failed(err, 'steffensen')


def _steffensen(f, x0, policy: ConvergencePolicy, state: IterateState,
                verbose: bool) -> Result:
    log = progress_logger(verbose)
    log("Steffensen's Method:")

    x, fx = x0, state.evaluate(f, x0)
    state.start(x, fx)
    if policy.residual_converged(x, fx):
        return state.converged(x, fx, 'steffensen')

    while state.step < policy.max_iter:
        x_new = steffensen_step(f, x, fx, state)
        fx_new = state.evaluate(f, x_new)
        state.advance(x_new, fx_new)
        log(f"... Iteration {state.step}: x = {x_new}, f(x) = {fx_new}")

        if policy.converged(x_new, x, fx_new):
            return state.converged(x_new, fx_new, 'steffensen')

        x, fx = x_new, fx_new

    raise MaxIterationsExceededError(
        f"Reached {policy.max_iter} iteration limit.", x=x)

# ----------------------------------------------------------------------
