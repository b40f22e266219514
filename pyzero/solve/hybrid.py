"""
Adaptive hybrid root finding, combining the safety of bisection with
the speed of interpolation (secant / inverse quadratic) steps.
"""
from __future__ import annotations

from collections.abc import Callable
from numbers import Real
from typing import Union

import numpy as np

from pyzero.logger import progress_logger, pyzero_logger
from pyzero.solve.bracket import Bracket, evaluate
from pyzero.solve.derivative_free import (
    default_secant_x1, secant_step, steffensen_step)
from pyzero.solve.exception import (
    SolverError, NonFiniteValueError, NotBracketingError,
    MaxIterationsExceededError)
from pyzero.solve.policy import ConvergencePolicy, resolve_policy
from pyzero.solve.result import Result
from pyzero.solve.state import IterateState

# Written by Eric J. Whitney, April 2023.

_METHODS = ('secant', 'steffensen')


# ======================================================================

def find_zero(f: Callable[[float], float],
              start: Union[float, tuple[float, float]],
              policy: ConvergencePolicy = None, *,
              method: str = 'secant', verbose: bool = False) -> Result:
    r"""
    Find a zero of `f`, starting either from a single point or from a
    bracket.

    **Bracket start** ``start = (a, b)`` with ``f(a) * f(b) <= 0``: Each
    step tries inverse quadratic interpolation (using the last endpoint
    removed from the bracket as a third point) or a secant step through
    the endpoints.  The midpoint is used instead when the interpolated
    point does not lie strictly inside the bracket, or when the bracket
    did not halve over the previous two steps.  Infinite endpoints are
    allowed.  This cannot fail for a valid bracket: once
    ``policy.max_iter`` is reached only bisection steps are taken, and
    these reduce any bracket to adjacent floats within about 64 further
    steps.  Stops when the bracket is terminal, its width is less than
    :math:`x_{tol}`, or :math:`|f| < f_{tol}` at its best endpoint.

    **Point start** ``start = x0``: Fast steps are taken using `method`
    ('secant' or 'steffensen').  As soon as two iterates show a sign
    change they define a bracket.  From then on, any fast step which
    leaves the bracket, is not finite, gives a non-finite function
    value, or fails to halve the bracket over two steps is replaced by a
    bisection step.  Before a bracket is known, such a step is a failure.
    Stopping rules are the same as :func:`~pyzero.solve.newton`, with
    the addition that a bracket narrower than :math:`x_{tol}` also
    converges.

    Parameters
    ----------
    f : Callable[[float], float]
        Function to find the zero of.
    start : float or (float, float)
        Starting point or bracket.
    policy : ConvergencePolicy, optional
        Tolerances and iteration limit.
    method : {'secant', 'steffensen'}, default = 'secant'
        Fast step used for point starts.  Not used for bracket starts.
    verbose : bool, default = False
        If True, log progress at ``INFO`` level (otherwise ``DEBUG``).

    Returns
    -------
    Result
        :class:`Converged` or :class:`Failed`.  Bracket starts only fail
        with ``NOT_BRACKETING`` (invalid bracket) or
        ``NON_FINITE_VALUE`` (`NaN` inside the bracket).  Point starts
        may also fail with ``MAX_ITERATIONS_EXCEEDED``.

    Raises
    ------
    TypeError
        If `start` is not a number or a pair of numbers.
    ValueError
        Unknown `method`.

    Examples
    --------
    >>> from math import exp
    >>> res = find_zero(lambda x: exp(x) - 2, (0, 1))
    >>> round(res.root, 12)
    0.69314718056
    >>> round(find_zero(lambda x: exp(x) - 2, 3.0).root, 12)
    0.69314718056
    """
    if method not in _METHODS:
        raise ValueError(f"Unknown method '{method}', must be one of "
                         f"{_METHODS}.")

    policy = resolve_policy(policy)
    state = IterateState()

    if np.ndim(start) == 1 and len(start) == 2:
        bracket = float(start[0]), float(start[1])
    elif _is_real_scalar(start):
        bracket = None
    else:
        raise TypeError(f"start must be a number or a pair of numbers, "
                        f"got {start!r}.")

    try:
        if bracket is not None:
            return _find_zero_bracket(f, *bracket, policy, state, verbose)
        return _find_zero_point(f, float(start), policy, state, method,
                                verbose)
    except SolverError as err:
        return state.failed(err, 'find_zero')


# ----------------------------------------------------------------------

def _interpolate(br: Bracket, c: float | None,
                 fc: float | None) -> float | None:
    """
    Inverse quadratic interpolation through the bracket endpoints and
    `c`, or a secant step through the endpoints if that is not possible.
    Returns ``None`` if the result is not strictly inside the bracket.
    """
    a, fa, b, fb = br.a, br.fa, br.b, br.fb
    if c is None or not np.isfinite(fc) or fc == fa or fc == fb:
        return br.secant_point()

    with np.errstate(divide='ignore', over='ignore', invalid='ignore'):
        fa, fb, fc = np.float64(fa), np.float64(fb), np.float64(fc)
        s = (a * fb * fc / ((fa - fb) * (fa - fc)) +
             b * fa * fc / ((fb - fa) * (fb - fc)) +
             c * fa * fb / ((fc - fa) * (fc - fb)))

    if np.isfinite(s) and br.contains(s):
        return float(s)
    return br.secant_point()


def _is_real_scalar(x) -> bool:
    """Python real number, NumPy real scalar or 0-d real array."""
    if isinstance(x, Real):
        return True
    return (np.ndim(x) == 0 and
            np.issubdtype(np.asarray(x).dtype, np.number) and
            not np.iscomplexobj(x))


def _halved(widths: list[float]) -> bool:
    """``False`` if the bracket has not halved over the last two steps."""
    return len(widths) < 3 or widths[-1] <= 0.5 * widths[-3]


def _bracket_converged(br: Bracket, policy: ConvergencePolicy) -> bool:
    x, fx = br.best
    return (br.is_terminal or policy.residual_converged(x, fx) or
            br.width < policy.x_tol + policy.x_rtol * abs(x))


def _update_bracket(br: Bracket, x: float, fx: float
                    ) -> tuple[float, float]:
    """Add `x` to the bracket and return the endpoint it displaced."""
    a, fa, b, fb = br.a, br.fa, br.b, br.fb
    br.update(x, fx)
    if br.a != a:
        return a, fa
    return b, fb


# ----------------------------------------------------------------------

def _find_zero_bracket(f, a, b, policy: ConvergencePolicy,
                       state: IterateState, verbose: bool) -> Result:
    log = progress_logger(verbose)
    log("Bracketed Hybrid Root:")

    br = Bracket(f, a, b)
    state.fevals = br.fevals
    state.start(*br.best)

    c, fc = None, None
    widths = [br.width]
    while not _bracket_converged(br, policy):
        x_new = None
        if (state.step < policy.max_iter and np.isfinite(br.width) and
                _halved(widths)):
            x_new = _interpolate(br, c, fc)

        if x_new is None:
            x_new, how = br.midpoint(), 'bisection'
        else:
            how = 'interpolation'

        state.fevals += 1
        fx_new = evaluate(f, x_new)
        c, fc = _update_bracket(br, x_new, fx_new)
        widths.append(br.width)
        state.advance(x_new, fx_new)
        log(f"... Iteration {state.step} ({how}): x = [{br.a}, {br.b}], "
            f"f = [{br.fa}, {br.fb}]")

    return state.converged(*br.best, 'find_zero')


# ----------------------------------------------------------------------

def _try_bracket(f, points: list[tuple[float, float]]) -> Bracket | None:
    """Bracket between the newest point and any earlier one, if found."""
    x_new, f_new = points[0]
    for x, fx in points[1:]:
        try:
            return Bracket.from_values(f, x, fx, x_new, f_new)
        except NotBracketingError:
            continue
    return None


def _find_zero_point(f, x0, policy: ConvergencePolicy,
                     state: IterateState, method: str,
                     verbose: bool) -> Result:
    log = progress_logger(verbose)
    log(f"Point Hybrid Root ({method}):")

    state.start(x0, state.evaluate(f, x0))
    if policy.residual_converged(x0, state.f_curr):
        return state.converged(x0, state.f_curr, 'find_zero')

    br = None
    if method == 'secant':
        x1 = default_secant_x1(x0)
        state.start(x1, state.evaluate(f, x1))
        if policy.residual_converged(x1, state.f_curr):
            return state.converged(x1, state.f_curr, 'find_zero')
        br = _try_bracket(f, [(x1, state.f_curr), (x0, state.f_prev)])

    widths = [] if br is None else [br.width]
    while state.step < policy.max_iter:
        if br is not None and _bracket_converged(br, policy):
            return state.converged(*br.best, 'find_zero')

        # Try a fast step first.
        x_new = fx_new = None
        try:
            if method == 'secant':
                x_new = secant_step(state.x_prev, state.f_prev,
                                    state.x_curr, state.f_curr)
            else:
                x_new = steffensen_step(f, state.x_curr, state.f_curr,
                                        state)

            if br is not None and not (br.contains(x_new) and
                                       _halved(widths)):
                x_new = None
            else:
                fx_new = state.evaluate(f, x_new)

        except NonFiniteValueError:
            if br is None:
                raise  # No safe fallback.
            x_new = None

        # Substitute a bisection step if required.
        if x_new is None:
            pyzero_logger.debug(f"find_zero() bisecting [{br.a}, {br.b}] "
                                f"in place of fast step.")
            x_new = br.midpoint()
            state.fevals += 1
            fx_new = evaluate(f, x_new)
            how = 'bisection'
        else:
            how = method

        x_old, f_old = state.x_curr, state.f_curr
        x_older, f_older = state.x_prev, state.f_prev
        state.advance(x_new, fx_new)
        log(f"... Iteration {state.step} ({how}): x = {x_new}, "
            f"f(x) = {fx_new}")

        if br is not None:
            _update_bracket(br, x_new, fx_new)
            widths.append(br.width)
        elif np.isfinite(fx_new):
            pts = [(x_new, fx_new), (x_old, f_old)]
            if np.isfinite(f_older):
                pts.append((x_older, f_older))
            br = _try_bracket(f, pts)
            if br is not None:
                widths = [br.width]

        if np.isfinite(fx_new) and policy.converged(x_new, x_old, fx_new):
            return state.converged(x_new, fx_new, 'find_zero')

    if br is not None and _bracket_converged(br, policy):
        return state.converged(*br.best, 'find_zero')

    raise MaxIterationsExceededError(
        f"Reached {policy.max_iter} iteration limit.", x=state.x_curr)

# ----------------------------------------------------------------------
