"""
pyregdiag: regression diagnostics and remedies for Python.

Fit a linear model, diagnose what is wrong with its errors and refit with
the remedy, with results that match R's lm, nlme::gls, MASS::rlm and
quantreg::rq on the classic textbook datasets.

Submodules:
    regression: OLS / WLS, influence measures, lack-of-fit and nested F tests
    gls: Generalized least squares with AR(1) correlated errors
    robust: M-estimation, least trimmed squares, quantile / LAD regression
    diagnostics: ACF, Durbin-Watson, Breusch-Pagan, Box tests, outlier test
    plotting: matplotlib diagnostic figures
    datasets: Bundled example datasets
"""

__version__ = "0.1.0"

from pyregdiag import datasets
from pyregdiag import regression
from pyregdiag import gls
from pyregdiag import robust
from pyregdiag import diagnostics

__all__ = [
    "__version__",
    "datasets",
    "regression",
    "gls",
    "robust",
    "diagnostics",
]
