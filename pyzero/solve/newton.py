"""
Find a zero of a real function using the Newton-Raphson method.
"""

# Written by Eric J. Whitney, April 2023.

from __future__ import annotations

from collections.abc import Callable
from typing import Union

import numpy as np

from pyzero.logger import progress_logger
from pyzero.solve.derivative import DerivativeOracle, resolve_fprime
from pyzero.solve.exception import (
    SolverError, DerivativeTooSmallError, MaxIterationsExceededError)
from pyzero.solve.policy import ConvergencePolicy, resolve_policy
from pyzero.solve.result import Result
from pyzero.solve.state import IterateState


# ---------------------------------------------------------------------------

def newton(f: Callable[[float], float],
           fprime: Union[Callable[[float], float], DerivativeOracle],
           x0: float, policy: ConvergencePolicy = None, *,
           verbose: bool = False) -> Result:
    r"""
    Find a zero of `f` using the Newton-Raphson method, with update
    :math:`x_{n+1} = x_n - f(x_n) / f'(x_n)`.

    Convergence is locally quadratic near a simple root
    (:math:`|Δx_{n+1}| \approx C |Δx_n|^2`) but is not guaranteed
    globally.  The iteration can cycle or diverge when started too far
    from a root, or when ``f''`` is unbounded at the root (e.g.
    :math:`f(x) = \sqrt[3]{x}` where every step overshoots to ``-2x``).

    Parameters
    ----------
    f : Callable[[float], float]
        Function to find the zero of.
    fprime : Callable[[float], float] or DerivativeOracle
        Derivative of `f`, or an oracle providing it (see
        :mod:`pyzero.solve.derivative`).
    x0 : float
        Starting point.
    policy : ConvergencePolicy, optional
        Stops when :math:`|x_{n+1} - x_n| < x_{tol}` or
        :math:`|f(x_{n+1})| < f_{tol}`.  Both are needed as near a
        multiple root the step can be small with a large residual and
        vice versa.
    verbose : bool, default = False
        If True, log progress at ``INFO`` level (otherwise ``DEBUG``).

    Returns
    -------
    Result
        :class:`Converged`, or :class:`Failed` with reason:

        - ``NON_FINITE_VALUE``: `f` or `fprime` returned `NaN` / ``±inf``.
        - ``DERIVATIVE_TOO_SMALL``: ``f'(x)`` was zero or so small that
          the step was not finite.
        - ``MAX_ITERATIONS_EXCEEDED``: Stopping rule not satisfied after
          ``policy.max_iter`` iterations.

    Examples
    --------
    >>> res = newton(lambda x: x**3 - 2*x - 5, lambda x: 3*x**2 - 2, 2.0)
    >>> round(res.root, 12), res.iterations <= 8
    (2.094551481542, True)
    """
    policy = resolve_policy(policy)
    state = IterateState()
    try:
        fprime = resolve_fprime(f, fprime)
        return _newton(f, fprime, x0, policy, state, verbose)
    except SolverError as err:
        return state.failed(err, 'newton')


def _newton(f, fprime, x0, policy: ConvergencePolicy, state: IterateState,
            verbose: bool) -> Result:
    log = progress_logger(verbose)
    log("Newton-Raphson:")

    x = float(x0)
    fx = state.evaluate(f, x)
    state.start(x, fx)
    if policy.residual_converged(x, fx):
        return state.converged(x, fx, 'newton')

    while state.step < policy.max_iter:
        fder = state.evaluate(fprime, x, what="f'")

        with np.errstate(divide='ignore', over='ignore', invalid='ignore'):
            newton_step = np.float64(fx) / np.float64(fder)

        if not np.isfinite(newton_step):
            raise DerivativeTooSmallError(
                f"Derivative too small at x = {x}.",
                details=f"f'({x}) = {fder}", x=x)

        x_new = float(x - newton_step)
        fx_new = state.evaluate(f, x_new)
        state.advance(x_new, fx_new)
        log(f"... Iteration {state.step}: x = {x_new}, f(x) = {fx_new}")

        if policy.converged(x_new, x, fx_new):
            return state.converged(x_new, fx_new, 'newton')

        x, fx = x_new, fx_new

    raise MaxIterationsExceededError(
        f"Reached {policy.max_iter} iteration limit.", x=x)

# ---------------------------------------------------------------------------
