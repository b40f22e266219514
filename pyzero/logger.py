"""Contains the name for the logger of PyZero modules.

``pyzero`` uses the `Logging <https://docs.python.org/3/library/logging.html>`__
standard library.  Messages are grouped into the following levels:

* ``DEBUG``: Solver iterations and fallback steps.
* ``INFO``: Solver iterations when a solver is called with
  ``verbose=True``.
* ``WARNING``: A solver failed to find a root.

No handlers are installed by the library, so calling applications
configure the format and level of displayed messages, e.g.::

    >>> import logging
    >>> logging.basicConfig(
    ...     level=logging.INFO,
    ...     format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    ... )
"""
import logging

logger_name = "pyzero"
pyzero_logger = logging.getLogger(logger_name)


def progress_logger(verbose: bool):
    """Return the logging call used for iteration progress."""
    return pyzero_logger.info if verbose else pyzero_logger.debug
