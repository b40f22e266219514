from math import atan, exp, inf, log, nan
from unittest import TestCase

import numpy as np
from scipy.optimize import brentq

from .scalar_tst_functions import (f, F_ROOT, cubic, CUBIC_ROOT, cbrt,
                                   cos_cubic, COS_CUBIC_ROOT, secant_lines,
                                   SECANT_LINES_ROOT, cancellation)


# ======================================================================

class TestFindZeroBracket(TestCase):
    def test_bracket(self):
        from pyzero.solve import find_zero, bisect

        res = find_zero(f, (1.0, 2.0))
        self.assertTrue(res.converged)
        self.assertAlmostEqual(res.root, F_ROOT, places=13)

        # Interpolation needs far fewer evaluations than bisection.
        self.assertLess(res.fevals, bisect(f, 1.0, 2.0).fevals // 2)

        for func, a, b in [(cos_cubic, 0.0, 1.0), (cubic, 2.0, 3.0),
                           (lambda x: exp(x) - 10.0, -5.0, 5.0)]:
            x_ref = brentq(func, a, b, xtol=1e-15)
            res = find_zero(func, [a, b])
            self.assertTrue(res.converged)
            self.assertAlmostEqual(res.root, x_ref, places=13)
            self.assertLess(res.residual, 1e-13)

        # Absolute tolerances accept a root of high multiplicity with
        # few correct digits.
        res = find_zero(lambda x: x ** 9, (-1.0, 2.0))
        self.assertTrue(res.converged)
        self.assertLess(res.residual, 1e-13)
        self.assertLess(abs(res.root), 0.05)

    def test_unbounded(self):
        from pyzero.solve import find_zero

        res = find_zero(secant_lines, (-inf, inf))
        self.assertTrue(res.converged)
        self.assertAlmostEqual(res.root, SECANT_LINES_ROOT, places=12)

        res = find_zero(lambda x: x - 1e10, (0.0, inf))
        self.assertTrue(res.converged)
        self.assertEqual(res.root, 1e10)

        # Overflow towards the infinite end of the bracket.
        res = find_zero(lambda x: exp(x) - 2, (-inf, inf))
        self.assertTrue(res.converged)
        self.assertAlmostEqual(res.root, log(2), places=13)


    def test_always_converges(self):
        from pyzero.solve import find_zero, ConvergencePolicy

        # Pure bisection continues past the iteration limit.
        res = find_zero(f, (1.0, 2.0), ConvergencePolicy(max_iter=1))
        self.assertTrue(res.converged)
        self.assertAlmostEqual(res.root, F_ROOT, places=13)

        res = find_zero(cbrt, (-1.0, 3.0), ConvergencePolicy(max_iter=1))
        self.assertTrue(res.converged)
        self.assertLess(abs(res.root), 1e-13)

        # Zero tolerances: runs until the bracket cannot be reduced.
        res = find_zero(f, (1.0, 2.0), ConvergencePolicy(x_tol=0, f_tol=0))
        self.assertLessEqual(abs(res.root - F_ROOT), 4 * np.spacing(F_ROOT))

    def test_failures(self):
        from pyzero.solve import find_zero, FailureKind, NotBracketingError

        res = find_zero(f, (2.0, 3.0))
        self.assertIs(res.reason, FailureKind.NOT_BRACKETING)
        with self.assertRaises(NotBracketingError):
            res.get_root()

        def g(x):
            return nan if 1.2 < x < 1.8 else x - 1.5

        res = find_zero(g, (1.0, 2.0))
        self.assertIs(res.reason, FailureKind.NON_FINITE_VALUE)
        self.assertTrue(1.2 < res.last_estimate < 1.8)

    def test_cancellation(self):
        from pyzero.solve import find_zero

        res = find_zero(cancellation, (1e-8, 1.0))
        self.assertEqual((res.root, res.residual), (1e-8, 0.0))


# ----------------------------------------------------------------------

class TestFindZeroPoint(TestCase):
    def test_point(self):
        from pyzero.solve import find_zero

        res = find_zero(cubic, 2.0)
        self.assertTrue(res.converged)
        self.assertAlmostEqual(res.root, CUBIC_ROOT, places=14)

        res = find_zero(cos_cubic, 0.5)
        self.assertLess(abs(res.root - COS_CUBIC_ROOT), 1e-10)

        res = find_zero(cubic, 2.0, method='steffensen')
        self.assertAlmostEqual(res.root, CUBIC_ROOT, places=14)

        # Integer and NumPy scalar starts.
        self.assertAlmostEqual(find_zero(cubic, 2).root, CUBIC_ROOT,
                               places=14)
        self.assertAlmostEqual(find_zero(cubic, np.float64(2.0)).root,
                               CUBIC_ROOT, places=14)
        self.assertAlmostEqual(find_zero(cubic, np.array(2.0)).root,
                               CUBIC_ROOT, places=14)

    def test_bracket_fallback(self):
        from pyzero.solve import find_zero, newton

        # Newton fails for these, the bracket established by the first
        # sign change keeps the hybrid method safe.
        self.assertFalse(newton(atan, lambda x: 1 / (1 + x * x),
                                2.0).converged)
        res = find_zero(atan, 2.0)
        self.assertTrue(res.converged)
        self.assertLess(abs(res.root), 1e-13)

        res = find_zero(cbrt, 2.0)
        self.assertTrue(res.converged)
        self.assertLess(abs(res.root), 1e-13)

        res = find_zero(cbrt, 2.0, method='steffensen')
        self.assertTrue(res.converged)
        self.assertLess(abs(res.root), 1e-13)

    def test_steffensen_non_finite_fallback(self):
        from pyzero.solve import find_zero, steffensen, FailureKind

        # Undefined far from the root.  From x = 0.5 the first step
        # lands at x ≈ 4.81 giving a bracket, but the auxiliary point
        # x + f(x) of the next step is outside the domain.
        def g(x):
            return x ** 3 - 1 if x < 5 else nan

        res = steffensen(g, 0.5)
        self.assertIs(res.reason, FailureKind.NON_FINITE_VALUE)

        with self.assertLogs('pyzero', level='DEBUG') as cm:
            res = find_zero(g, 0.5, method='steffensen')
        self.assertTrue(res.converged)
        self.assertAlmostEqual(res.root, 1.0, places=12)
        self.assertTrue(any("in place of fast step" in line
                            for line in cm.output))

    def test_failures(self):
        from pyzero.solve import find_zero, ConvergencePolicy, FailureKind

        # No sign change seen and the secant step is undefined.
        res = find_zero(lambda x: 1.0, 0.0)
        self.assertIs(res.reason, FailureKind.NON_FINITE_VALUE)

        # No root.
        res = find_zero(lambda x: x * x + 1, 3.0)
        self.assertFalse(res.converged)
        self.assertIn(res.reason, (FailureKind.MAX_ITERATIONS_EXCEEDED,
                                   FailureKind.NON_FINITE_VALUE))

        res = find_zero(lambda x: nan, 1.0)
        self.assertIs(res.reason, FailureKind.NON_FINITE_VALUE)
        self.assertEqual(res.last_estimate, 1.0)

        # Overflow raised by the function at the start.
        res = find_zero(lambda x: exp(x) - 2, 1000.0)
        self.assertIs(res.reason, FailureKind.NON_FINITE_VALUE)
        self.assertEqual(res.last_estimate, 1000.0)

        res = find_zero(cos_cubic, 0.5, ConvergencePolicy(max_iter=2))
        self.assertIs(res.reason, FailureKind.MAX_ITERATIONS_EXCEEDED)

    def test_cancellation(self):
        from pyzero.solve import find_zero

        res = find_zero(cancellation, 1e-8)
        self.assertTrue(res.converged)
        self.assertEqual((res.root, res.residual, res.iterations),
                         (1e-8, 0.0, 0))

    def test_bad_arguments(self):
        from pyzero.solve import find_zero

        with self.assertRaises(TypeError):
            find_zero(f, "1.0")
        with self.assertRaises(TypeError):
            find_zero(f, (1.0, 2.0, 3.0))
        with self.assertRaises(TypeError):
            find_zero(f, np.array("abc"))
        with self.assertRaises(TypeError):
            find_zero(f, 1j)
        with self.assertRaises(ValueError):
            find_zero(f, 1.0, method='halley')

    def test_idempotent(self):
        from pyzero.solve import find_zero

        for start in [2.0, (1.0, 3.0)]:
            self.assertEqual(find_zero(cubic, start),
                             find_zero(cubic, start))
        self.assertEqual(find_zero(secant_lines, (-inf, inf)),
                         find_zero(secant_lines, (-inf, inf)))

# ----------------------------------------------------------------------
