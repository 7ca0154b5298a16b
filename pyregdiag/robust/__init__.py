"""
Robust and resistant regression.

Public API:
    rlm(X, y, psi='huber', ...) -> RobustSolution       M-estimation
    lts(X, y, quantile=None, ...) -> LTSSolution        least trimmed squares
    quantreg(X, y, tau=0.5, ...) -> QuantileSolution    quantile regression
    lad(X, y, ...) -> QuantileSolution                  L1 regression
"""

from pyregdiag.robust.solvers import rlm, lts, quantreg, lad
from pyregdiag.robust.solution import RobustSolution, LTSSolution, QuantileSolution
from pyregdiag.robust.psi import Psi, HuberPsi, HampelPsi, BisquarePsi, resolve_psi
from pyregdiag.robust._common import RobustParams, LTSParams, QuantileParams

__all__ = [
    "rlm",
    "lts",
    "quantreg",
    "lad",
    "RobustSolution",
    "LTSSolution",
    "QuantileSolution",
    "Psi",
    "HuberPsi",
    "HampelPsi",
    "BisquarePsi",
    "resolve_psi",
    "RobustParams",
    "LTSParams",
    "QuantileParams",
]
