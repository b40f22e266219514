#!usr/bin/env python3

# Examples of finding zeros of functions of one variable.
# Written by Eric J. Whitney, April 2023.

import logging
from math import atan, inf, sin

from pyzero.solve import (bisect, find_zero, newton, secant, steffensen,
                          solve_batch, CentralDifference, ConvergencePolicy)

logging.basicConfig(level=logging.INFO, format="%(message)s")


def kepler(x, e=0.5, m=1.2):
    """Kepler's equation for eccentric anomaly."""
    return x - e * sin(x) - m


def report(name, res):
    if res.converged:
        print(f"{name:>12s}: x = {res.root:.16g} after {res.iterations} "
              f"iterations, {res.fevals} evaluations.")
    else:
        print(f"{name:>12s}: Failed ({res.reason.name}) at x = "
              f"{res.last_estimate:.6g}: {res.details}")


# ----------------------------------------------------------------------
# The same problem solved by each method.  Bisection is shown verbose.

report('bisect', bisect(kepler, 0, 3, verbose=True))
report('newton', newton(kepler, CentralDifference(), 1.0))
report('secant', secant(kepler, 1.0))
report('steffensen', steffensen(kepler, 1.0))
report('find_zero', find_zero(kepler, (0, 3)))
report('find_zero', find_zero(kepler, 1.0, method='steffensen'))

# ----------------------------------------------------------------------
# Infinite brackets are allowed for bisection and bracketed find_zero.

report('bisect', bisect(lambda x: atan(x) - 1.5, -inf, inf))

# ----------------------------------------------------------------------
# Failures are reported rather than raised.  Use get_root() to raise.

report('newton', newton(lambda x: x ** 2 + 1, lambda x: 2 * x, 0.0))
report('secant', secant(lambda x: x ** 2 + 1, 3.0,
                        policy=ConvergencePolicy(max_iter=10)))

# ----------------------------------------------------------------------
# Many problems at once.

res = solve_batch(find_zero, lambda x: x ** 3 - 2 * x - 5,
                  [(0, 3), 1.0, 2.0, 10.0], n_workers=4)
for r in res:
    report('batch', r)
