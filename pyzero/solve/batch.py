"""
Solving many independent root finding problems at once.

Solver calls share no state, so a batch can be spread across threads
with no locking, **provided the function being solved is pure** (its
result depends only on its argument, and it has no side effects).  This
is not checked.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from pyzero.solve.policy import ConvergencePolicy
from pyzero.solve.result import Result

# Written by Eric J. Whitney, April 2023.


# ======================================================================

def solve_batch(solver: Callable[..., Result],
                f: Callable[[float], float], starts: Iterable[Any], *,
                policy: ConvergencePolicy = None, n_workers: int = 1,
                **kwargs) -> list[Result]:
    """
    Call ``solver(f, start, policy=policy, **kwargs)`` for each entry of
    `starts`, returning the results in the same order.

    Parameters
    ----------
    solver : Callable[..., Result]
        A solver taking the function and a single start argument, e.g.
        :func:`~pyzero.solve.find_zero`, :func:`~pyzero.solve.secant`
        or :func:`~pyzero.solve.steffensen`.  Use
        :func:`functools.partial` for solvers taking more arguments.
    f : Callable[[float], float]
        Function to find the zero/s of.  Must be pure if ``n_workers >
        1``.
    starts : Iterable
        Starting point (or bracket) for each problem.
    policy : ConvergencePolicy, optional
        Passed to every call.
    n_workers : int, default = 1
        Number of threads.  Values less than 2 run serially.
    kwargs :
        Additional keyword arguments passed to `solver`.

    Returns
    -------
    list[Result]
        One result per start.

    Examples
    --------
    >>> from pyzero.solve import find_zero
    >>> res = solve_batch(find_zero, lambda x: x ** 2 - 4, [(0, 5), -3.0])
    >>> [round(r.root, 12) for r in res]
    [2.0, -2.0]
    """
    starts = list(starts)

    def _solve(start):
        return solver(f, start, policy=policy, **kwargs)

    n_workers = int(n_workers)
    if n_workers < 2 or len(starts) < 2:
        return [_solve(start) for start in starts]

    with ThreadPoolExecutor(max_workers=n_workers) as ex:
        return list(ex.map(_solve, starts))

# ----------------------------------------------------------------------
