"""
Exceptions raised by the root finding solvers.  Each subclass of
:class:`SolverError` corresponds to one
:class:`~pyzero.solve.result.FailureKind`.
"""
# Written by Eric J. Whitney, April 2023.


# ======================================================================

class SolverError(RuntimeError):
    """
    This exception is raised when a solver fails to converge or find a
    solution.  Additional information (optional) is included to allow
    the reason for the failure to be determined.

    Notes
    -----
    `SolverError` may also have additional attributes not listed here
    depending on the specific solver being used.  The most common are:

    - `x`: Last estimate of the root.
    - `iterations`: Number of iterations completed.
    """

    def __init__(self, *args, flag: int = None, details: str = None,
                 **kwargs):
        """
        Parameters
        ----------
        args :
            Passed to `RuntimeError`.
        flag : int, default = None
            Numeric status code giving some information about the
            result.  Where the subclass corresponds to a
            :class:`~pyzero.solve.result.FailureKind` this defaults to
            that value.
        details : str, default = None
            Additional text can be included relating to the specific
            type of failure.
        kwargs :
            Additional attributes can be added to the object using
            keyword arguments.
        """
        super().__init__(*args)
        if flag is None:
            flag = getattr(self, 'default_flag', None)
        self.flag, self.details = flag, details
        for k, v in kwargs.items():
            setattr(self, k, v)

    def __str__(self):
        """Add additional details below the main failure notice."""
        error_str = super().__str__()
        for k, v in self.__dict__.items():
            if v is not None:
                error_str += f"\n{k} -> {v}"
        return error_str


# ----------------------------------------------------------------------

class NotBracketingError(SolverError, ValueError):
    """
    The endpoints given do not straddle a sign change of the function,
    or a function value at an endpoint is not finite.
    """
    default_flag = 1


class NonFiniteValueError(SolverError):
    """
    A `NaN` or infinite function / derivative value was encountered, or
    a step could not be computed (e.g. division by zero in the secant
    method).
    """
    default_flag = 2


class DerivativeTooSmallError(SolverError):
    """The Newton step was undefined because ``f'(x)`` vanished."""
    default_flag = 3


class MaxIterationsExceededError(SolverError):
    """No convergence criterion was met within the iteration limit."""
    default_flag = 4

# ----------------------------------------------------------------------
