"""
GLS solution type.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyregdiag.core.result import Result
from pyregdiag.core.formatting import format_coef_table
from pyregdiag.core.validation import check_in_range
from pyregdiag.regression.design import Design
from pyregdiag.gls._common import GLSParams


@dataclass
class GLSSolution:
    """
    User-facing results for GLS with AR(1) errors.

    Inference on the coefficients uses t with n - p degrees of freedom,
    as nlme's summary.gls does.
    """
    _result: Result[GLSParams]
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
    def sigma(self) -> float:
        """Residual standard error (innovation scale of the whitened errors)."""
        return self._result.params.sigma

    @property
    def phi(self) -> float:
        """Lag-one autocorrelation of the errors."""
        return self._result.params.phi

    @property
    def phi_estimated(self) -> bool:
        return self._result.params.phi_estimated

    def phi_interval(self, level: float = 0.95) -> tuple[float, float]:
        """
        Approximate confidence interval for phi.

        Wald interval for atanh(phi) from the curvature of the profile
        log-likelihood, mapped back through tanh. NaN bounds when phi was
        fixed or the curvature is not negative.
        """
        check_in_range(level, 'level', low=0.0, high=1.0)
        se_z = self._result.params.phi_se_z
        if np.isnan(se_z):
            return float('nan'), float('nan')
        q = sp_stats.norm.ppf(0.5 + level / 2.0)
        z = np.arctanh(self.phi)
        return float(np.tanh(z - q * se_z)), float(np.tanh(z + q * se_z))

    @property
    def method(self) -> str:
        return self._result.params.method

    @property
    def correlation(self) -> str | None:
        return self._result.params.correlation

    @property
    def converged(self) -> bool:
        return self._result.params.converged

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
    def residuals(self) -> NDArray[np.floating[Any]]:
        """Response residuals y - X b (still autocorrelated)."""
        return self._result.params.residuals

    @property
    def pearson_residuals(self) -> NDArray[np.floating[Any]]:
        """Residuals divided by sigma (and by the prior-weight SD factor), as nlme prints."""
        r = self.residuals / self.sigma
        if self._design.weights is not None:
            r = r * np.sqrt(self._design.weights)
        return r

    @property
    def normalized_residuals(self) -> NDArray[np.floating[Any]]:
        """Whitened residuals divided by sigma; approximately iid N(0, 1) if the model holds."""
        return self._result.params.normalized_residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def vcov(self) -> NDArray[np.floating[Any]]:
        return self.sigma ** 2 * self._result.params.cov_unscaled

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        with np.errstate(invalid='ignore'):
            return np.sqrt(np.diag(self.vcov))

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        with np.errstate(divide='ignore', invalid='ignore'):
            t = self.coefficients / self.standard_errors
        return np.where(np.isfinite(t), t, np.nan)

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        return 2.0 * sp_stats.t.sf(np.abs(self.t_statistics), self.df_residual)

    def conf_int(self, level: float = 0.95) -> NDArray[np.floating[Any]]:
        check_in_range(level, 'level', low=0.0, high=1.0)
        q = sp_stats.t.ppf(0.5 + level / 2.0, self.df_residual)
        half = q * self.standard_errors
        return np.column_stack([self.coefficients - half, self.coefficients + half])

    @property
    def log_likelihood(self) -> float:
        return self._result.params.log_likelihood

    @property
    def n_parameters(self) -> int:
        """Coefficients + sigma + phi (if estimated)."""
        return self.rank + 1 + (1 if self.phi_estimated else 0)

    @property
    def aic(self) -> float:
        return -2.0 * self.log_likelihood + 2.0 * self.n_parameters

    @property
    def bic(self) -> float:
        n_eff = self.n_obs - self.rank if self.method == 'REML' else self.n_obs
        return -2.0 * self.log_likelihood + np.log(n_eff) * self.n_parameters

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
        """nlme-style summary.gls output."""
        fit_by = "REML" if self.method == 'REML' else "maximum likelihood"
        lines = [
            f"Generalized least squares fit by {fit_by}",
            f"  Model: {self._design.response_name} ~ {' + '.join(self.names)}",
            "=" * 72,
            f"{'AIC':>12} {'BIC':>12} {'logLik':>12}",
            f"{self.aic:12.5g} {self.bic:12.5g} {self.log_likelihood:12.5g}",
            "",
        ]
        if self.correlation == 'ar1':
            lines.append("Correlation Structure: AR(1)")
            lo, hi = self.phi_interval()
            fixed = "" if self.phi_estimated else " (fixed)"
            lines.append(f"  Parameter estimate(s): Phi = {self.phi:.6g}{fixed}")
            if not np.isnan(lo):
                lines.append(f"  approx. 95% interval: ({lo:.4g}, {hi:.4g})")
            lines.append("")
        lines.append("Coefficients:")
        lines.extend(format_coef_table(
            self.names,
            self.coefficients,
            self.standard_errors,
            self.t_statistics,
            self.p_values,
            stat_name='t-value',
            p_name='p-value',
        ))
        q = np.percentile(self.pearson_residuals, [0, 25, 50, 75, 100])
        lines.append("")
        lines.append("Standardized residuals:")
        lines.append(f"{'Min':>10} {'Q1':>10} {'Med':>10} {'Q3':>10} {'Max':>10}")
        lines.append(" ".join(f"{v:10.4g}" for v in q))
        lines.append("")
        lines.append(
            f"Residual standard error: {self.sigma:.5g}\n"
            f"Degrees of freedom: {self.n_obs} total; {self.df_residual} residual"
        )
        for w in self.warnings:
            lines.append(f"Note: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"GLSSolution(n={self.n_obs}, p={self._design.p}, method={self.method!r}, "
            f"phi={self.phi:.4f}, sigma={self.sigma:.4g})"
        )
