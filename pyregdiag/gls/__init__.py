"""
Generalized least squares for serially correlated errors.

Public API:
    gls(X, y, correlation='ar1', method='REML', ...) -> GLSSolution
"""

from pyregdiag.gls.solvers import gls
from pyregdiag.gls.solution import GLSSolution
from pyregdiag.gls._common import GLSParams

__all__ = [
    "gls",
    "GLSSolution",
    "GLSParams",
]
