from unittest import TestCase

import numpy as np


# ======================================================================

class TestConvergencePolicy(TestCase):
    def test_defaults(self):
        from pyzero.solve import ConvergencePolicy

        p = ConvergencePolicy()
        self.assertEqual(p.x_tol, 100 * np.finfo(float).eps)
        self.assertEqual(p.f_tol, p.x_tol)
        self.assertEqual(p.max_iter, 100)
        self.assertEqual((p.x_rtol, p.f_rtol), (0.0, 0.0))

        # Immutable.
        with self.assertRaises(AttributeError):
            p.max_iter = 5

        q = p.replace(max_iter=5)
        self.assertEqual((p.max_iter, q.max_iter), (100, 5))

    def test_validation(self):
        from pyzero.solve import ConvergencePolicy

        for kwargs in [dict(x_tol=-1.0), dict(f_tol=np.nan),
                       dict(x_rtol=-1e-3), dict(max_iter=0),
                       dict(max_iter=2.5)]:
            with self.assertRaises(ValueError):
                ConvergencePolicy(**kwargs)

        # Zero tolerances are allowed.
        ConvergencePolicy(x_tol=0.0, f_tol=0.0)

    def test_stopping_rule(self):
        from pyzero.solve import ConvergencePolicy

        p = ConvergencePolicy(x_tol=1e-6, f_tol=1e-8)
        self.assertTrue(p.step_converged(1.0, 1.0 + 1e-7))
        self.assertFalse(p.step_converged(1.0, 1.0 + 1e-5))
        self.assertTrue(p.residual_converged(1.0, -1e-9))
        self.assertFalse(p.residual_converged(1.0, 1e-7))

        # Either criterion is sufficient.
        self.assertTrue(p.converged(1.0, 2.0, 1e-9))
        self.assertTrue(p.converged(1.0, 1.0 + 1e-7, 1.0))
        self.assertFalse(p.converged(1.0, 2.0, 1.0))

        # With zero tolerances only exact results pass.
        p = ConvergencePolicy(x_tol=0.0, f_tol=0.0)
        self.assertTrue(p.residual_converged(1.0, 0.0))
        self.assertTrue(p.step_converged(1.0, 1.0))
        self.assertFalse(p.residual_converged(1.0, 1e-300))

    def test_relative(self):
        from pyzero.solve import ConvergencePolicy

        # Absolute default can't resolve steps of a large root.
        p = ConvergencePolicy()
        self.assertFalse(p.step_converged(1e10, 1e10 + 1e-5))

        p = ConvergencePolicy(x_rtol=1e-12)
        self.assertTrue(p.step_converged(1e10, 1e10 + 1e-5))


# ----------------------------------------------------------------------

class TestResult(TestCase):
    def test_converged(self):
        from pyzero.solve import Converged

        res = Converged(root=1.5, iterations=3, residual=1e-16)
        self.assertTrue(res.converged)
        self.assertEqual(res.get_root(), 1.5)
        self.assertEqual((res.fevals, res.history), (0, ()))

    def test_failed(self):
        from pyzero.solve import (Failed, FailureKind, SolverError,
                                  NotBracketingError, NonFiniteValueError,
                                  DerivativeTooSmallError,
                                  MaxIterationsExceededError)

        expected = {
            FailureKind.NOT_BRACKETING: NotBracketingError,
            FailureKind.NON_FINITE_VALUE: NonFiniteValueError,
            FailureKind.DERIVATIVE_TOO_SMALL: DerivativeTooSmallError,
            FailureKind.MAX_ITERATIONS_EXCEEDED: MaxIterationsExceededError}

        for reason, error in expected.items():
            res = Failed(reason=reason, last_estimate=2.5, iterations=7,
                         details="Something happened.")
            self.assertFalse(res.converged)
            self.assertIs(reason.error, error)

            with self.assertRaises(error) as cm:
                res.get_root()
            err = cm.exception
            self.assertIsInstance(err, SolverError)
            self.assertEqual(err.flag, reason.value)
            self.assertEqual((err.x, err.iterations), (2.5, 7))
            self.assertIs(FailureKind.from_error(err), reason)


class TestSolverError(TestCase):
    def test_solver_error(self):
        from pyzero.solve import SolverError, NonFiniteValueError

        err = SolverError("Failed:", flag=9, details="Reason.", x=1.25)
        self.assertIsInstance(err, RuntimeError)
        self.assertEqual((err.flag, err.details, err.x), (9, "Reason.",
                                                          1.25))
        text = str(err)
        self.assertTrue(text.startswith("Failed:"))
        self.assertIn("details -> Reason.", text)
        self.assertIn("x -> 1.25", text)

        # Subclasses default their flag.
        self.assertEqual(NonFiniteValueError("Bad.").flag, 2)
        self.assertIsNone(SolverError("Plain.").flag)

# ----------------------------------------------------------------------
