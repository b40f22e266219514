"""
.. This module acts as the top-level API documentation.

.. module: pyzero

PyZero finds zeros of real functions of one variable.

.. autosummary::
    :toctree: generated/

    solve

"""

__version__ = "0.1.0"

import sys

# Written by Eric J. Whitney, November 2019.

# ======================================================================

assert sys.version_info >= (3, 10)
