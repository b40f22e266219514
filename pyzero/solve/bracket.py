"""
Brackets: intervals known to contain a root because the function
changes sign between the endpoints.
"""
from __future__ import annotations

import sys
from collections.abc import Callable

import numpy as np

from pyzero.solve.exception import NotBracketingError, NonFiniteValueError


# Written by Eric J. Whitney, January 2023.

_FLOAT_MAX = sys.float_info.max
_MAGNITUDE_MASK = 0x7FFF_FFFF_FFFF_FFFF


# ======================================================================

def _ordinal(x: float) -> int:
    """
    Map a float to an integer such that the ordering of floats is
    preserved and adjacent floats map to adjacent integers (``±0.0``
    both map to 0).
    """
    i = int(np.float64(x).view(np.int64))
    return i if i >= 0 else -(i & _MAGNITUDE_MASK)


def _from_ordinal(k: int) -> float:
    """Inverse of :func:`_ordinal`."""
    if k >= 0:
        return float(np.int64(k).view(np.float64))
    return -float(np.int64(-k).view(np.float64))


def _clip_inf(x: float) -> float:
    return float(np.clip(x, -_FLOAT_MAX, _FLOAT_MAX))


def evaluate(f: Callable[[float], float], x: float, what: str = 'f'):
    """
    Return ``f(x)``.  Arithmetic exceptions raised by `f` (e.g.
    `OverflowError`, `ZeroDivisionError`) are treated in the same way as
    a non-finite function value.

    Raises
    ------
    NonFiniteValueError
        If `f` raised an `ArithmeticError`.
    """
    try:
        return f(x)
    except ArithmeticError as err:
        raise NonFiniteValueError(
            f"{what}({x}) raised {type(err).__name__}.", details=str(err),
            x=x) from err


# ----------------------------------------------------------------------

class Bracket:
    r"""
    An interval :math:`[a, b]` with :math:`f(a) f(b) \leq 0`, i.e. the
    function changes sign across the interval or is exactly zero at
    one end.  The endpoints are kept in ascending order.

    Each :meth:`step` replaces one endpoint by the midpoint, keeping the
    sign change.  The bracket is terminal when `a` and `b` are adjacent
    floating point values (no distinct midpoint exists) or when either
    function value is exactly zero.

    Parameters
    ----------
    f : Callable[[float], float]
        Function whose root is bracketed.
    a, b : float
        Endpoints, in any order.  Infinite endpoints are replaced by
        the largest finite float of the same sign, so unbounded
        brackets such as ``(-inf, inf)`` are accepted.  If `f` is not
        finite there (or overflows), that endpoint is moved inwards by
        halving in the ordered integer encoding of the floats until a
        finite value giving a sign change is found.

    Raises
    ------
    NotBracketingError
        If ``f(a)`` and ``f(b)`` have the same sign or either is not
        finite.

    Examples
    --------
    >>> br = Bracket(lambda x: x ** 2 - 2, 1.0, 2.0)
    >>> br.step()
    (1.5, 0.25)
    >>> br.a, br.b
    (1.0, 1.5)
    """

    def __init__(self, f: Callable[[float], float], a: float, b: float):
        self.fevals = 0
        a_unbounded, b_unbounded = np.isinf(a), np.isinf(b)
        a, b = _clip_inf(a), _clip_inf(b)
        fa, fb = self._value(f, a), self._value(f, b)

        pull_a = a_unbounded and not np.isfinite(fa)
        pull_b = b_unbounded and not np.isfinite(fb)
        if pull_a and pull_b:
            # Search outwards from the centre, right side first.
            c = _from_ordinal((_ordinal(a) + _ordinal(b)) // 2)
            fc = self._value(f, c)
            if np.isfinite(fc):
                b_new, fb_new = self._pull_in(f, c, fc, b, fb)
                if np.isfinite(fb_new):
                    a, fa, b, fb = c, fc, b_new, fb_new
                else:
                    a, fa = self._pull_in(f, c, fc, a, fa)
                    b, fb = c, fc

        elif pull_a and np.isfinite(fb):
            a, fa = self._pull_in(f, b, fb, a, fa)
        elif pull_b and np.isfinite(fa):
            b, fb = self._pull_in(f, a, fa, b, fb)

        self._init(f, a, fa, b, fb)

    @classmethod
    def from_values(cls, f: Callable[[float], float], a: float, fa: float,
                    b: float, fb: float) -> Bracket:
        """
        Construct from endpoints where the function values are already
        known.  Same checks as the normal constructor.
        """
        br = cls.__new__(cls)
        br._init(f, _clip_inf(a), fa, _clip_inf(b), fb)
        br.fevals = 0
        return br

    def _init(self, f, a, fa, b, fb):
        if a == b:
            raise NotBracketingError("Bracket endpoints must differ.",
                                     x=a)

        if not (np.isfinite(fa) and np.isfinite(fb)):
            raise NotBracketingError(
                "Function values at bracket endpoints must be finite.",
                details=f"f({a}) = {fa}, f({b}) = {fb}", x=a)

        # Compare signs rather than forming f(a) * f(b) which can
        # overflow or underflow.
        if np.sign(fa) * np.sign(fb) > 0:
            raise NotBracketingError(
                "f(a) and f(b) must have opposite sign.",
                details=f"f({a}) = {fa}, f({b}) = {fb}", x=a)

        if a > b:
            a, fa, b, fb = b, fb, a, fa

        self._f = f
        self.a, self.fa, self.b, self.fb = float(a), fa, float(b), fb

    def _value(self, f, x: float) -> float:
        """``f(x)``, or `NaN` if `f` raised an arithmetic exception."""
        self.fevals += 1
        try:
            return evaluate(f, x)
        except NonFiniteValueError:
            return np.nan

    def _pull_in(self, f, x_in: float, f_in: float, x_out: float,
                 f_out: float) -> tuple[float, float]:
        """
        Starting from `x_in` (finite value) and `x_out` (non-finite
        value), halve the gap in the ordinal encoding until a point is
        found with a finite value that gives a sign change with `f_in`.
        If there is none, the innermost non-finite point is returned.
        """
        k_in, k_out = _ordinal(x_in), _ordinal(x_out)
        while abs(k_out - k_in) > 1:
            k_mid = (k_in + k_out) // 2
            x = _from_ordinal(k_mid)
            fx = self._value(f, x)
            if not np.isfinite(fx):
                k_out, x_out, f_out = k_mid, x, fx
            elif np.sign(fx) * np.sign(f_in) <= 0:
                return x, fx
            else:
                k_in, f_in = k_mid, fx

        return x_out, f_out

    def __repr__(self):
        return (f"Bracket(a={self.a!r}, b={self.b!r}, fa={self.fa!r}, "
                f"fb={self.fb!r})")

    # -- Properties ----------------------------------------------------

    @property
    def best(self) -> tuple[float, float]:
        """Endpoint `x`, ``f(x)`` with the smallest ``|f(x)|``."""
        if abs(self.fa) <= abs(self.fb):
            return self.a, self.fa
        return self.b, self.fb

    @property
    def is_terminal(self) -> bool:
        """
        ``True`` if an endpoint is an exact root, or the endpoints are
        adjacent floats so that the bracket cannot be reduced further.
        """
        return (self.fa == 0 or self.fb == 0 or
                np.nextafter(self.a, np.inf) >= self.b)

    @property
    def width(self) -> float:
        """``b - a`` (may overflow to ``inf``)."""
        return self.b - self.a

    # -- Public Methods ------------------------------------------------

    def contains(self, x: float) -> bool:
        """``True`` if `x` lies strictly inside the bracket."""
        return self.a < x < self.b

    def midpoint(self) -> float:
        r"""
        Point used to halve the bracket.

        When both endpoints have the same sign and are within a factor
        of two, this is :math:`a + (b - a) / 2`.  Otherwise the halving
        is done in the ordered integer encoding of the floating point
        values, a strictly monotonic map onto a finite range.  This
        second form works for brackets straddling zero or spanning many
        orders of magnitude (e.g. ``[-1e308, 1e308]``) and reduces any
        bracket to adjacent floats within about 64 halvings.
        """
        a, b = self.a, self.b
        lo, hi = sorted((abs(a), abs(b)))
        if (a > 0) == (b > 0) and lo > 0 and hi <= 2 * lo:
            m = a + (b - a) / 2
            if a < m < b:
                return m

        return _from_ordinal((_ordinal(a) + _ordinal(b)) // 2)

    def secant_point(self) -> float | None:
        """
        Regula falsi point (secant through both endpoints), or ``None``
        if it is undefined or not strictly inside the bracket.
        """
        a, fa, b, fb = self.a, self.fa, self.b, self.fb
        if fa == fb:
            return None

        with np.errstate(over='ignore', invalid='ignore'):
            s = a - fa * (b - a) / (fb - fa)

        if np.isfinite(s) and self.contains(s):
            return float(s)
        return None

    def step(self) -> tuple[float, float]:
        """
        Halve the bracket by evaluating the function at the
        :meth:`midpoint`.  Should only be called when not
        :attr:`is_terminal`.

        Returns
        -------
        m, fm : float, float
            Midpoint and function value.

        Raises
        ------
        NonFiniteValueError
            If ``f(m)`` is `NaN` or `f` raised an arithmetic exception.
        """
        m = self.midpoint()
        self.fevals += 1
        fm = evaluate(self._f, m)
        self.update(m, fm)
        return m, fm

    def update(self, x: float, fx: float):
        """
        Narrow the bracket using an interior point `x` with known value
        `fx`, replacing the endpoint having the same sign.  If ``fx ==
        0`` the bracket collapses onto `x`.  Infinite values of `fx`
        still carry a valid sign and are accepted.

        Raises
        ------
        ValueError
            If `x` is not strictly inside the bracket.
        NonFiniteValueError
            If `fx` is `NaN`.
        """
        if not self.contains(x):
            raise ValueError(f"x = {x} not inside bracket [{self.a}, "
                             f"{self.b}].")

        if np.isnan(fx):
            raise NonFiniteValueError("Function returned NaN inside "
                                      "bracket.", x=x)

        if fx == 0:
            self.a = self.b = x
            self.fa = self.fb = fx
        elif np.sign(fx) == np.sign(self.fa):
            self.a, self.fa = x, fx
        else:
            self.b, self.fb = x, fx


# ----------------------------------------------------------------------

def bracket_root(f: Callable[[float], float], x1: float, x2: float, *,
                 x_limits: tuple[float, float] = (-np.inf, np.inf),
                 grow_factor: float = 0.5,
                 Δx_max: float = np.inf,
                 max_steps: int = 50) -> Bracket:
    """
    Given an initial guessed range `x1` to `x2`, the range is expanded
    geometrically until a root of the function `f(x)` is bracketed or
    until the stopping criteria are met.

    Parameters
    ----------
    f : Callable[[float], float]
        Scalar function.
    x1, x2 : float
        Starting points for bracket, with `x1` < `x2`.
    x_limits : tuple[float, float], default = (-∞, +∞)
        Stops if the next step will exceed this value.
    grow_factor : float, default = 0.5
        Size factor that determines the amount `x1` or `x2` are moved in
        each step to expand the range (`Δx`), with
        ``Δx = grow_factor * (x2 - x1)`` (unless `Δx_max` is reached).
    Δx_max : float, default = ∞
        Maximum magnitude of movement permitted for `x1` or `x2` when
        expanding the range.
    max_steps : int, default = 50
        Stops once this number of steps has been completed.

    Returns
    -------
    Bracket
        Bracket of the root, with ``fevals`` giving the total number of
        function evaluations.

    Raises
    ------
    ValueError
        Illegal starting conditions.
    NotBracketingError
        Failure to find a bracket, including the following attributes:

        - `x1`, `x2`: Most recent range.
        - `f1`, `f2`: Function values corresponding to `x1`, `x2`.
        - `details`: 'Reached max_steps.', 'Reached x_limit.' or
          'Non-finite function value.'
        - `steps`: Number of steps taken.

    Notes
    -----
    The side with the smaller ``|f|`` is grown at each step.  Basic
    stepping can easily fail for functions that have extrema near the
    area of interest.  Quoting [1]_: `'The procedure “go downhill until
    your function changes sign,” can be foiled by a function that has a
    simple extremum.  Nevertheless, if you are prepared to deal with a
    “failure” outcome, this procedure is often a good first start;
    success is usual if your function has opposite signs in the limit
    x → ±∞.'`

    References
    ----------
    .. [1] Press, W. H.; Flannery, B. P.; Teukolsky, S. A.; and
       Vetterling, W. T. *Numerical Recipes: The Art of Scientific
       Computing*, 3rd ed. Cambridge, England: Cambridge University
       Press, pp. 447, 2007. Section 9.1: "Bracketing and Bisection".

    Examples
    --------
    Equation :math:`y = x^2 -3x + 2` has roots at `x` = 1 and `x` = 2.

    >>> br = bracket_root(lambda x: x ** 2 - 3 * x + 2, -2, -1)
    >>> br.a, br.b
    (-2.0, 1.375)
    """
    if x1 >= x2:
        raise ValueError("Requires x1 < x2.")

    if Δx_max <= 0:
        raise ValueError("Requires Δx_max > 0.")

    def _value(x):
        try:
            return evaluate(f, x)
        except NonFiniteValueError:
            return np.nan  # Ends the search below.

    f1, f2 = _value(x1), _value(x2)
    steps, fevals = 0, 2

    def _fail(details: str):
        return NotBracketingError("bracket_root() failed to converge:",
                                  details=details, x1=x1, x2=x2, f1=f1,
                                  f2=f2, steps=steps)

    while np.sign(f1) == np.sign(f2):  # False if f1 or f2 == 0.
        if steps >= max_steps:
            raise _fail("Reached max_steps.")

        # Check if we had stopped at the boundary on the last step.
        if (x1 <= x_limits[0]) or (x2 >= x_limits[1]):
            raise _fail("Reached x_limit.")

        # Advance one step; clip to limits if necessary.
        Δx = min(grow_factor * (x2 - x1), Δx_max)
        if np.abs(f1) < np.abs(f2):
            x1 = max(x1 - Δx, x_limits[0])  # <- Grow left
            f1 = _value(x1)
        else:
            x2 = min(x2 + Δx, x_limits[1])  # Grow right ->
            f2 = _value(x2)

        steps += 1
        fevals += 1

    if not (np.isfinite(f1) and np.isfinite(f2)):
        raise _fail("Non-finite function value.")

    br = Bracket.from_values(f, x1, f1, x2, f2)
    br.fevals = fevals
    return br

# ----------------------------------------------------------------------
