"""
Derivatives for the Newton-Raphson solver.

Newton's method may be given ``f'(x)`` directly as a callable, or a
*derivative oracle*: any object with a ``derivative(f)`` method that
returns ``f'`` as a callable.  This allows an automatic differentiation
package (or anything else) to be plugged in without PyZero depending on
it.  :class:`CentralDifference` is a simple oracle using finite
differences.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, Union, runtime_checkable

import numpy as np

# Written by Eric J. Whitney, April 2023.

_ScalarFunc = Callable[[float], float]


# ======================================================================

@runtime_checkable
class DerivativeOracle(Protocol):
    """Anything able to produce ``f'`` from ``f``."""

    def derivative(self, f: _ScalarFunc) -> _ScalarFunc:
        ...


# ----------------------------------------------------------------------

class CentralDifference:
    r"""
    Derivative oracle using a second-order central difference:

    .. math:: f'(x) \approx \frac{f(x + h) - f(x - h)}{2h}

    Parameters
    ----------
    h : float, optional
        Absolute step size.  If not given, the step is scaled to `x` as
        :math:`h = \epsilon^{1/3} \max(1, |x|)` which balances truncation
        and rounding error.

    Examples
    --------
    >>> fp = CentralDifference().derivative(lambda x: x ** 3)
    >>> round(fp(2.0), 6)
    12.0
    """

    def __init__(self, h: float = None):
        if h is not None and not h > 0:
            raise ValueError(f"Step size h must be > 0, got {h}.")
        self.h = h

    def derivative(self, f: _ScalarFunc) -> _ScalarFunc:
        def fprime(x: float) -> float:
            h = self.h
            if h is None:
                h = np.cbrt(np.finfo(float).eps) * max(1.0, abs(x))

            # Make h exactly representable relative to x.
            h = (x + h) - x
            return (f(x + h) - f(x - h)) / (2 * h)

        return fprime


# ----------------------------------------------------------------------

def resolve_fprime(f: _ScalarFunc,
                   fprime: Union[_ScalarFunc, DerivativeOracle]
                   ) -> _ScalarFunc:
    """
    Return ``f'`` as a callable, given either the callable itself or a
    :class:`DerivativeOracle`.

    Raises
    ------
    TypeError
        If `fprime` is neither.
    """
    if isinstance(fprime, DerivativeOracle):
        return fprime.derivative(f)
    if callable(fprime):
        return fprime
    raise TypeError(f"fprime must be callable or provide derivative(f), "
                    f"got {type(fprime).__name__}.")

# ----------------------------------------------------------------------
