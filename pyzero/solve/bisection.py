"""
Root finding by bisection.
"""
from __future__ import annotations

from collections.abc import Callable

from pyzero.logger import progress_logger
from pyzero.solve.bracket import Bracket
from pyzero.solve.exception import SolverError, MaxIterationsExceededError
from pyzero.solve.policy import ConvergencePolicy, resolve_policy
from pyzero.solve.result import Result
from pyzero.solve.state import IterateState


# Written by Eric J. Whitney, April 2023.


# ----------------------------------------------------------------------------


def bisect(f: Callable[[float], float], a: float, b: float,
           policy: ConvergencePolicy = None, *,
           verbose: bool = False) -> Result:
    # noinspection PyUnresolvedReferences
    r"""
    Approximate solution of :math:`f(x) = 0` on interval :math:`x \in [a,
    b]` by the bisection method.  For bisection to work :math:`f(x)` must
    change sign across the interval, i.e. ``f(a)`` and ``f(b)`` must
    have opposite sign (or one may be exactly zero).  The function need
    not be differentiable, only continuous.

    The interval is halved until `a` and `b` are adjacent floating point
    values or an exact zero is found.  This means the result is the
    tightest representable bracket of a sign change and not
    necessarily a point where ``f(x) == 0``.  The tolerances of `policy`
    are not used; any bracket is reduced in at most about 64 steps so
    ``policy.max_iter`` only applies if set very low.

    Examples
    --------
    >>> f = lambda x: x**2 - x - 1
    >>> res = bisect(f, 1, 2)
    >>> round(res.root, 12)
    1.61803398875
    >>> f = lambda x: (2*x - 1)*(x - 3)
    >>> bisect(f, 0.375, 0.625).iterations  # Only 1 it. (soln in centre).
    1

    Parameters
    ----------
    f : Callable[[float], float]
        Function which we are searching for root.
    a, b : float
        Each end of the search interval, in any order.  Either or both
        may be infinite.
    policy : ConvergencePolicy, optional
        Only `max_iter` is used.
    verbose : bool, default = False
        If True, log progress at ``INFO`` level (otherwise ``DEBUG``).

    Returns
    -------
    Result
        :class:`Converged` with the endpoint of the final bracket having
        the smallest ``|f|``, otherwise :class:`Failed` with reason
        ``NOT_BRACKETING`` (initial interval), ``NON_FINITE_VALUE``
        (`NaN` encountered) or ``MAX_ITERATIONS_EXCEEDED``.
    """
    policy = resolve_policy(policy)
    state = IterateState()
    try:
        return _bisect(f, a, b, policy, state, verbose)
    except SolverError as err:
        return state.failed(err, 'bisect')


def _bisect(f, a, b, policy: ConvergencePolicy, state: IterateState,
            verbose: bool) -> Result:
    log = progress_logger(verbose)
    log("Bisecting Root:")

    br = Bracket(f, a, b)
    state.fevals = br.fevals
    x, fx = br.best
    state.start(x, fx)

    while not br.is_terminal:
        if state.step >= policy.max_iter:
            raise MaxIterationsExceededError(
                f"Reached {policy.max_iter} iteration limit.",
                x=br.best[0])

        x_m, f_m = br.step()
        state.fevals += 1
        state.advance(x_m, f_m)
        log(f"... Iteration {state.step}: x = [{br.a}, {br.b}], "
            f"f = [{br.fa}, {br.fb}]")

    x, fx = br.best
    return state.converged(x, fx, 'bisect')

# ----------------------------------------------------------------------------
