from functools import partial
from unittest import TestCase

from .scalar_tst_functions import (cubic, cubic_dx, CUBIC_ROOT, f, F_ROOT)


# ======================================================================

class TestSolveBatch(TestCase):
    def test_serial_and_threaded(self):
        from pyzero.solve import solve_batch, find_zero

        starts = [(1.0, 2.0), (-1.0, 0.0), 3.0, -3.0, (2.0, 3.0)]
        serial = solve_batch(find_zero, f, starts)
        threaded = solve_batch(find_zero, f, starts, n_workers=4)

        self.assertEqual(serial, threaded)
        self.assertAlmostEqual(serial[0].root, F_ROOT, places=13)
        self.assertAlmostEqual(serial[1].root, 1 - F_ROOT, places=13)
        self.assertFalse(serial[-1].converged)

    def test_other_solvers(self):
        from pyzero.solve import (solve_batch, newton, secant,
                                  ConvergencePolicy, FailureKind)

        res = solve_batch(partial(newton, cubic, cubic_dx),
                          None, [], n_workers=2)
        self.assertEqual(res, [])

        res = solve_batch(lambda func, x0, **kw: newton(func, cubic_dx, x0,
                                                        **kw),
                          cubic, [1.5, 2.0, 2.5], n_workers=3)
        for r in res:
            self.assertAlmostEqual(r.root, CUBIC_ROOT, places=14)

        # Policy and keyword arguments are passed on.
        res = solve_batch(secant, cubic, [2.0, 3.0],
                          policy=ConvergencePolicy(max_iter=1), x1=2.5)
        self.assertTrue(all(r.reason is FailureKind.MAX_ITERATIONS_EXCEEDED
                            for r in res))

# ----------------------------------------------------------------------
