"""
Robust regression solution types.

RobustSolution (M-estimation), LTSSolution and QuantileSolution share the
accessor style of LinearSolution so the diagnostic plots accept any of
them.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyregdiag.core.result import Result
from pyregdiag.core.formatting import format_coef_table
from pyregdiag.regression.design import Design
from pyregdiag.robust._common import RobustParams, LTSParams, QuantileParams
from pyregdiag.robust._lts import OUTLIER_CUTOFF


@dataclass
class RobustSolution:
    """
    User-facing M-estimation results.

    Inference uses normal-theory t values as MASS's summary.rlm does;
    p_values use t with n - p df.
    """
    _result: Result[RobustParams]
    _design: Design

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def names(self) -> tuple[str, ...]:
        return self._design.names

    @property
    def design(self) -> Design:
        return self._design

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        return self._result.params.standard_errors

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        with np.errstate(divide='ignore', invalid='ignore'):
            t = self.coefficients / self.standard_errors
        return np.where(np.isfinite(t), t, np.nan)

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        return 2.0 * sp_stats.t.sf(np.abs(self.t_statistics), self.df_residual)

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def weights(self) -> NDArray[np.floating[Any]]:
        """Final IRLS weights; small weights flag downweighted observations."""
        return self._result.params.weights

    @property
    def scale(self) -> float:
        """Robust residual scale estimate."""
        return self._result.params.scale

    @property
    def psi(self) -> str:
        return self._result.params.psi_name

    @property
    def tuning(self) -> dict[str, float]:
        return self._result.params.tuning

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def n_obs(self) -> int:
        return self._design.n

    @property
    def n_iter(self) -> int:
        return self._result.params.n_iter

    @property
    def converged(self) -> bool:
        return self._result.params.converged

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """MASS-style summary.rlm output."""
        tuning = ", ".join(f"{k} = {v:g}" for k, v in self.tuning.items())
        lines = [
            f"Robust linear model: {self._design.response_name} ~ {' + '.join(self.names)}",
            f"M-estimation, psi = {self.psi} ({tuning})",
            "=" * 72,
            "Coefficients:",
        ]
        lines.extend(format_coef_table(
            self.names,
            self.coefficients,
            self.standard_errors,
            self.t_statistics,
            None,
        ))
        lines.append("")
        lines.append(
            f"Residual standard error: {self.scale:.4g} on {self.df_residual} degrees of freedom"
        )
        status = "converged" if self.converged else "did NOT converge"
        lines.append(f"IRLS {status} in {self.n_iter} iterations")
        low = np.argsort(self.weights)[:min(5, self.n_obs)]
        lines.append(
            "Lowest weights: "
            + ", ".join(f"#{i + 1}: {self.weights[i]:.3f}" for i in low)
        )
        for w in self.warnings:
            lines.append(f"Note: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"RobustSolution(n={self.n_obs}, p={self._design.p}, psi={self.psi!r}, "
            f"scale={self.scale:.4g}, converged={self.converged})"
        )


@dataclass
class LTSSolution:
    """User-facing least trimmed squares results."""
    _result: Result[LTSParams]
    _design: Design

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def names(self) -> tuple[str, ...]:
        return self._design.names

    @property
    def design(self) -> Design:
        return self._design

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def quantile(self) -> int:
        """Coverage h: number of squared residuals in the criterion."""
        return self._result.params.quantile

    @property
    def best_subset(self) -> NDArray[np.intp]:
        """Indices of the h observations of the optimal fit."""
        return self._result.params.best_subset

    @property
    def criterion(self) -> float:
        """Sum of the h smallest squared residuals."""
        return self._result.params.criterion

    @property
    def raw_scale(self) -> float:
        return self._result.params.raw_scale

    @property
    def scale(self) -> float:
        """Reweighted scale from the non-outlying residuals."""
        return self._result.params.scale

    @property
    def outliers(self) -> NDArray[np.bool_]:
        """True where |residual / raw_scale| exceeds 2.5."""
        if self.raw_scale == 0:
            return self.residuals != 0
        return np.abs(self.residuals / self.raw_scale) > OUTLIER_CUTOFF

    @property
    def n_obs(self) -> int:
        return self._design.n

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        p = self._result.params
        search = "exhaustive" if p.exhaustive else "random"
        lines = [
            f"Least trimmed squares: {self._design.response_name} ~ {' + '.join(self.names)}",
            f"Coverage h = {self.quantile} of n = {self.n_obs}; "
            f"{p.n_samples} {search} elemental starts",
            "=" * 72,
            "Coefficients:",
        ]
        lines.extend(format_coef_table(self.names, self.coefficients, None, None, None))
        lines.append("")
        lines.append(f"Scale estimates: raw {self.raw_scale:.4g}, reweighted {self.scale:.4g}")
        flagged = np.flatnonzero(self.outliers) + 1
        lines.append(
            "Outlying observations: "
            + (", ".join(str(i) for i in flagged) if len(flagged) else "none")
        )
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LTSSolution(n={self.n_obs}, h={self.quantile}, "
            f"scale={self.scale:.4g}, n_outliers={int(self.outliers.sum())})"
        )


@dataclass
class QuantileSolution:
    """User-facing quantile regression results."""
    _result: Result[QuantileParams]
    _design: Design

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def names(self) -> tuple[str, ...]:
        return self._design.names

    @property
    def design(self) -> Design:
        return self._design

    @property
    def tau(self) -> float:
        return self._result.params.tau

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.standard_errors

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]] | None:
        se = self.standard_errors
        if se is None:
            return None
        with np.errstate(divide='ignore', invalid='ignore'):
            return self.coefficients / se

    @property
    def p_values(self) -> NDArray[np.floating[Any]] | None:
        t = self.t_statistics
        if t is None:
            return None
        return 2.0 * sp_stats.t.sf(np.abs(t), self.df_residual)

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def objective(self) -> float:
        """Minimised sum of check-function losses."""
        return self._result.params.objective

    @property
    def sparsity(self) -> float | None:
        return self._result.params.sparsity

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def n_obs(self) -> int:
        return self._design.n

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        label = "LAD (median) regression" if self.tau == 0.5 else "Quantile regression"
        lines = [
            f"{label}: {self._design.response_name} ~ {' + '.join(self.names)}",
            f"tau: {self.tau:g}",
            "=" * 72,
            "Coefficients:",
        ]
        lines.extend(format_coef_table(
            self.names,
            self.coefficients,
            self.standard_errors,
            self.t_statistics,
            self.p_values,
        ))
        lines.append("")
        lines.append(f"Objective (sum of check losses): {self.objective:.6g}")
        if self._result.params.se_method is not None:
            lines.append(
                f"Standard errors: {self._result.params.se_method}, "
                f"bandwidth {self._result.params.bandwidth:.4g}"
            )
        for w in self.warnings:
            lines.append(f"Note: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"QuantileSolution(n={self.n_obs}, tau={self.tau:g}, objective={self.objective:.6g})"
