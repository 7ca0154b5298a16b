"""
Solver dispatch for robust regression.

Public API:
    rlm(X, y, psi='huber', ...) -> RobustSolution
    lts(X, y, quantile=None, ...) -> LTSSolution
    quantreg(X, y, tau=0.5, ...) -> QuantileSolution
    lad(X, y, ...) -> QuantileSolution
"""

from typing import Any, Sequence
import warnings

import numpy as np

from pyregdiag.core.result import Result
from pyregdiag.core.exceptions import ValidationError
from pyregdiag.core.validation import check_in_range
from pyregdiag.core.compute.timing import Timer
from pyregdiag.core.compute.linalg.qr import qr_decompose
from pyregdiag.regression.design import Design, as_design
from pyregdiag.robust.psi import Psi, resolve_psi
from pyregdiag.robust.backends.cpu_irls import CPUIRLSBackend
from pyregdiag.robust._lts import lts_impl
from pyregdiag.robust._quantreg import solve_quantile_lp, iid_standard_errors
from pyregdiag.robust._common import QuantileParams
from pyregdiag.robust.solution import RobustSolution, LTSSolution, QuantileSolution

VALID_SCALE_EST = ('MAD', 'Huber')
VALID_QUANTREG_SE = ('iid', None)


def _robust_design(X: Any, y: Any, names: Sequence[str] | None, caller: str) -> Design:
    design = as_design(X, y, names=names)
    if design.weights is not None:
        raise ValidationError(f"{caller}: prior weights are not supported")
    if design.n <= design.p:
        raise ValidationError(
            f"{caller}: need more observations than coefficients, "
            f"got n={design.n}, p={design.p}"
        )
    return design


def rlm(
    X: Any,
    y: Any = None,
    *,
    psi: str | Psi = 'huber',
    k: float | None = None,
    tuning: dict[str, float] | None = None,
    max_iter: int = 20,
    tol: float = 1e-4,
    scale_est: str = 'MAD',
    names: Sequence[str] | None = None,
    strict: bool = False,
) -> RobustSolution:
    """
    Robust linear regression by M-estimation (MASS::rlm).

    Args:
        X: Design matrix (n x p) or a Design
        y: Response (n,). Required when X is an array.
        psi: 'huber', 'hampel', 'bisquare' or a Psi instance
        k: Shorthand for the single tuning constant of Huber (k) or
            bisquare (c)
        tuning: Explicit constructor constants, e.g. {'a': 2, 'b': 4, 'c': 8}
        max_iter: Maximum IRLS iterations
        tol: Convergence tolerance on the relative change of residuals
        scale_est: 'MAD' (re-estimated each step) or 'Huber' (proposal 2)
        names: Coefficient names
        strict: Raise ConvergenceError instead of warning on non-convergence

    Returns:
        RobustSolution

    Raises:
        ValidationError: On invalid inputs
        ConvergenceError: If strict and IRLS does not converge

    Example:
        >>> ds = load_dataset('stackloss')
        >>> design = Design.from_datasource(ds, y='stack_loss')
        >>> result = rlm(design, psi='bisquare')
        >>> result.weights
    """
    if scale_est not in VALID_SCALE_EST:
        raise ValidationError(f"scale_est must be one of {VALID_SCALE_EST}, got {scale_est!r}")
    if max_iter < 1:
        raise ValidationError(f"max_iter must be >= 1, got {max_iter}")
    if tol <= 0:
        raise ValidationError(f"tol must be positive, got {tol}")

    constants = dict(tuning or {})
    if k is not None:
        if isinstance(psi, Psi):
            raise ValidationError("k cannot be combined with a Psi instance")
        name = str(psi).lower()
        if name == 'huber':
            constants['k'] = k
        elif name == 'bisquare':
            constants['c'] = k
        else:
            raise ValidationError(f"k applies to huber or bisquare; use tuning= for {psi!r}")
    psi_impl = resolve_psi(psi, **constants)

    design = _robust_design(X, y, names, 'rlm')
    result = CPUIRLSBackend().solve(
        design,
        psi_impl,
        scale_est=scale_est,
        tol=tol,
        max_iter=max_iter,
        strict=strict,
    )
    return RobustSolution(_result=result, _design=design)


def lts(
    X: Any,
    y: Any = None,
    *,
    quantile: int | None = None,
    n_samples: int = 500,
    seed: int | None = None,
    max_csteps: int = 100,
    names: Sequence[str] | None = None,
) -> LTSSolution:
    """
    Least trimmed squares regression.

    Args:
        X: Design matrix (n x p) or a Design
        y: Response (n,). Required when X is an array.
        quantile: Coverage h, p < h <= n. Default floor((n + p + 1) / 2),
            the maximal breakdown choice.
        n_samples: Number of random elemental starts. When C(n, p) is at
            most n_samples every subset is tried.
        seed: Seed for the random starts
        max_csteps: Maximum concentration steps for the refined starts
        names: Coefficient names

    Returns:
        LTSSolution

    Raises:
        ValidationError: On invalid inputs
        SingularMatrixError: If no elemental subset has full rank
    """
    design = _robust_design(X, y, names, 'lts')
    n, p = design.n, design.p

    h = (n + p + 1) // 2 if quantile is None else int(quantile)
    if not p < h <= n:
        raise ValidationError(f"quantile must satisfy {p} < quantile <= {n}, got {h}")
    if n_samples < 1:
        raise ValidationError(f"n_samples must be >= 1, got {n_samples}")
    if max_csteps < 1:
        raise ValidationError(f"max_csteps must be >= 1, got {max_csteps}")

    timer = Timer()
    timer.start()
    with timer.section('search'):
        params = lts_impl(
            design.X,
            design.y,
            h=h,
            n_samples=n_samples,
            rng=np.random.default_rng(seed),
            max_csteps=max_csteps,
        )
    timer.stop()

    result = Result(
        params=params,
        info={'method': 'fast_lts', 'seed': seed, 'exhaustive': params.exhaustive},
        timing=timer.result(),
        backend_name='cpu',
    )
    return LTSSolution(_result=result, _design=design)


def quantreg(
    X: Any,
    y: Any = None,
    *,
    tau: float = 0.5,
    se: str | None = 'iid',
    alpha: float = 0.05,
    names: Sequence[str] | None = None,
) -> QuantileSolution:
    """
    Linear quantile regression (quantreg::rq).

    Args:
        X: Design matrix (n x p) or a Design
        y: Response (n,). Required when X is an array.
        tau: Quantile in (0, 1). 0.5 is LAD regression.
        se: 'iid' for sparsity-based standard errors, None to skip them
        alpha: Level used in the Hall-Sheather bandwidth
        names: Coefficient names

    Returns:
        QuantileSolution

    Raises:
        ValidationError: On invalid inputs
        NumericalError: If the linear programme cannot be solved
    """
    check_in_range(float(tau), 'tau', low=0.0, high=1.0)
    check_in_range(float(alpha), 'alpha', low=0.0, high=1.0)
    if se not in VALID_QUANTREG_SE:
        raise ValidationError(f"se must be one of {VALID_QUANTREG_SE}, got {se!r}")

    design = _robust_design(X, y, names, 'quantreg')
    X_arr, y_arr = design.X, design.y
    warnings_list: list[str] = []

    timer = Timer()
    timer.start()
    with timer.section('linprog'):
        coefficients, objective = solve_quantile_lp(X_arr, y_arr, float(tau))
    fitted = X_arr @ coefficients
    resid = y_arr - fitted
    rank = qr_decompose(X_arr).rank
    if rank < design.p:
        msg = f"design is rank deficient (rank {rank} < {design.p}); solution may be nonunique"
        warnings.warn(msg, RuntimeWarning, stacklevel=2)
        warnings_list.append(msg)

    standard_errors = None
    bandwidth = None
    sparsity = None
    if se == 'iid':
        with timer.section('standard_errors'):
            standard_errors, bandwidth, sparsity = iid_standard_errors(
                X_arr, resid, float(tau), float(alpha)
            )
    timer.stop()

    params = QuantileParams(
        coefficients=coefficients,
        standard_errors=standard_errors,
        residuals=resid,
        fitted_values=fitted,
        tau=float(tau),
        objective=objective,
        se_method=se,
        bandwidth=bandwidth,
        sparsity=sparsity,
        rank=rank,
        df_residual=design.n - rank,
    )
    result = Result(
        params=params,
        info={'method': 'highs', 'se': se},
        timing=timer.result(),
        backend_name='cpu',
        warnings=tuple(warnings_list),
    )
    return QuantileSolution(_result=result, _design=design)


def lad(
    X: Any,
    y: Any = None,
    *,
    se: str | None = 'iid',
    alpha: float = 0.05,
    names: Sequence[str] | None = None,
) -> QuantileSolution:
    """Least absolute deviations regression: quantreg with tau = 0.5."""
    return quantreg(X, y, tau=0.5, se=se, alpha=alpha, names=names)
