"""
Regression solution types.

LinearSolution is the user-facing wrapper for OLS / WLS fits; it exposes
the coefficient table, goodness of fit, likelihood criteria and the case
influence measures used by the diagnostic plots. LackOfFitSolution and
CompareSolution carry the F-test tables.
"""

from dataclasses import dataclass, field
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyregdiag.core.result import Result
from pyregdiag.core.validation import check_in_range
from pyregdiag.core.formatting import (
    format_coef_table,
    format_pvalue,
    significance_stars,
    SIGNIF_LEGEND,
)
from pyregdiag.regression.design import Design
from pyregdiag.regression._common import (
    LinearParams,
    LackOfFitParams,
    AnovaTableRow,
    CompareRow,
)


@dataclass
class LinearSolution:
    """
    User-facing OLS / WLS results.

    Residual-based quantities (rss, sigma, influence measures) are on the
    weighted scale, as in R's summary.lm for weighted fits.
    """
    _result: Result[LinearParams]
    _design: Design

    _cache: dict[str, Any] = field(default_factory=dict, repr=False)

    # --- Estimates ---

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
    def weights(self) -> NDArray[np.floating[Any]] | None:
        return self._design.weights

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        """Response residuals y - fitted."""
        return self._result.params.residuals

    @property
    def weighted_residuals(self) -> NDArray[np.floating[Any]]:
        """sqrt(w) * residuals (equal to residuals for OLS)."""
        return self._result.params.weighted_residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def n_obs(self) -> int:
        return self._design.n

    # --- Goodness of fit ---

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def tss(self) -> float:
        """Total sum of squares about the (weighted) mean, or about 0 without intercept."""
        return self._result.params.mss + self._result.params.rss

    @property
    def r_squared(self) -> float:
        mss = self._result.params.mss
        if self.tss == 0:
            return 1.0 if self.rss == 0 else 0.0
        return mss / self.tss

    @property
    def adjusted_r_squared(self) -> float:
        df_int = 1 if self._design.has_intercept else 0
        df = self.df_residual
        if df <= 0:
            return float('nan')
        return 1.0 - (1.0 - self.r_squared) * (self.n_obs - df_int) / df

    @property
    def residual_std_error(self) -> float:
        df = self.df_residual
        if df <= 0:
            return float('nan')
        return float(np.sqrt(self.rss / df))

    @property
    def sigma(self) -> float:
        return self.residual_std_error

    @property
    def f_statistic(self) -> tuple[float, int, int]:
        """Overall F statistic against the intercept-only (or null) model: (F, df1, df2)."""
        df_int = 1 if self._design.has_intercept else 0
        df1 = self.rank - df_int
        df2 = self.df_residual
        if df1 <= 0 or df2 <= 0:
            return float('nan'), df1, df2
        f_val = (self._result.params.mss / df1) / (self.rss / df2)
        return float(f_val), df1, df2

    @property
    def f_p_value(self) -> float:
        f_val, df1, df2 = self.f_statistic
        if np.isnan(f_val):
            return float('nan')
        return float(sp_stats.f.sf(f_val, df1, df2))

    # --- Inference ---

    @property
    def vcov(self) -> NDArray[np.floating[Any]]:
        """sigma^2 (X'WX)^-1, NaN rows/columns for aliased coefficients."""
        return self.residual_std_error ** 2 * self._result.params.cov_unscaled

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        if 'se' not in self._cache:
            with np.errstate(invalid='ignore'):
                self._cache['se'] = np.sqrt(np.diag(self.vcov))
        return self._cache['se']

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        with np.errstate(divide='ignore', invalid='ignore'):
            t = self.coefficients / self.standard_errors
        return np.where(np.isfinite(t), t, np.nan)

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        df = self.df_residual
        if df <= 0:
            return np.full(len(self.coefficients), np.nan)
        return 2.0 * sp_stats.t.sf(np.abs(self.t_statistics), df)

    def conf_int(self, level: float = 0.95) -> NDArray[np.floating[Any]]:
        """Confidence intervals for the coefficients, shape (p, 2)."""
        check_in_range(level, 'level', low=0.0, high=1.0)
        q = sp_stats.t.ppf(0.5 + level / 2.0, self.df_residual)
        half = q * self.standard_errors
        return np.column_stack([self.coefficients - half, self.coefficients + half])

    # --- Likelihood ---

    @property
    def log_likelihood(self) -> float:
        """Gaussian log-likelihood, R's logLik.lm (weights included)."""
        n = self.n_obs
        w = self.weights if self.weights is not None else np.ones(n)
        return float(0.5 * (
            np.sum(np.log(w))
            - n * (np.log(2 * np.pi) + 1.0 - np.log(n) + np.log(self.rss))
        ))

    @property
    def aic(self) -> float:
        return -2.0 * self.log_likelihood + 2.0 * (self.rank + 1)

    @property
    def bic(self) -> float:
        return -2.0 * self.log_likelihood + np.log(self.n_obs) * (self.rank + 1)

    # --- Influence ---

    @property
    def hat_values(self) -> NDArray[np.floating[Any]]:
        """Leverages, diagonal of the (weighted) hat matrix."""
        return self._result.params.hat_values

    @property
    def standardized_residuals(self) -> NDArray[np.floating[Any]]:
        """Internally studentized residuals (R's rstandard)."""
        h = self.hat_values
        with np.errstate(divide='ignore', invalid='ignore'):
            r = self.weighted_residuals / (self.residual_std_error * np.sqrt(1.0 - h))
        return np.where(h < 1.0 - 1e-10, r, np.nan)

    @property
    def studentized_residuals(self) -> NDArray[np.floating[Any]]:
        """Externally studentized (leave-one-out) residuals (R's rstudent)."""
        h = self.hat_values
        e = self.weighted_residuals
        df = self.df_residual
        with np.errstate(divide='ignore', invalid='ignore'):
            s_i = np.sqrt((self.rss - e ** 2 / (1.0 - h)) / (df - 1))
            r = e / (s_i * np.sqrt(1.0 - h))
        return np.where((h < 1.0 - 1e-10) & np.isfinite(r), r, np.nan)

    @property
    def cooks_distance(self) -> NDArray[np.floating[Any]]:
        h = self.hat_values
        with np.errstate(divide='ignore', invalid='ignore'):
            d = self.standardized_residuals ** 2 * h / ((1.0 - h) * self.rank)
        return d

    # --- Metadata ---

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
        """R-style summary.lm output."""
        title = "Weighted Least Squares" if self.weights is not None else "Ordinary Least Squares"
        q = np.percentile(self.weighted_residuals, [0, 25, 50, 75, 100])
        lines = [
            f"{title}: {self._design.response_name} ~ {' + '.join(self.names)}",
            "=" * 72,
            "Residuals:" if self.weights is None else "Weighted Residuals:",
            f"{'Min':>10} {'1Q':>10} {'Median':>10} {'3Q':>10} {'Max':>10}",
            " ".join(f"{v:10.4g}" for v in q),
            "",
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
        lines.append(
            f"Residual standard error: {self.residual_std_error:.4g} "
            f"on {self.df_residual} degrees of freedom"
        )
        f_val, df1, df2 = self.f_statistic
        lines.append(
            f"Multiple R-squared: {self.r_squared:.4f}, "
            f"Adjusted R-squared: {self.adjusted_r_squared:.4f}"
        )
        if not np.isnan(f_val):
            lines.append(
                f"F-statistic: {f_val:.4g} on {df1} and {df2} DF, "
                f"p-value: {format_pvalue(self.f_p_value)}"
            )
        for w in self.warnings:
            lines.append(f"Note: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LinearSolution(n={self.n_obs}, p={self._design.p}, "
            f"rank={self.rank}, r_squared={self.r_squared:.4f})"
        )


def _format_table(rows: tuple[AnovaTableRow, ...], width: int = 16) -> list[str]:
    lines = [
        f"{'':<{width}} {'Df':>5} {'Sum Sq':>12} {'Mean Sq':>12} {'F value':>10} {'Pr(>F)':>12}",
    ]
    for row in rows:
        line = (
            f"{row.term:<{width}} {row.df:>5} {row.sum_sq:>12.5g} {row.mean_sq:>12.5g}"
        )
        if row.f_value is not None:
            line += (
                f" {row.f_value:>10.4g} {format_pvalue(row.p_value):>12} "
                f"{significance_stars(row.p_value)}"
            )
        lines.append(line.rstrip())
    return lines


@dataclass
class LackOfFitSolution:
    """
    Pure-error lack-of-fit test.

    The residual sum of squares of the fitted model is split into the
    variation within groups of replicated X rows (pure error) and the
    remainder (lack of fit).
    """
    _result: Result[LackOfFitParams]

    @property
    def table(self) -> tuple[AnovaTableRow, ...]:
        return self._result.params.table

    @property
    def f_value(self) -> float:
        return self.table[0].f_value

    @property
    def p_value(self) -> float:
        return self.table[0].p_value

    @property
    def df_lack_of_fit(self) -> int:
        return self.table[0].df

    @property
    def df_pure_error(self) -> int:
        return self.table[1].df

    @property
    def ss_lack_of_fit(self) -> float:
        return self.table[0].sum_sq

    @property
    def ss_pure_error(self) -> float:
        return self.table[1].sum_sq

    @property
    def pure_error_sigma(self) -> float:
        """Model-free estimate of sigma from the replicates."""
        return float(np.sqrt(self.table[1].mean_sq))

    @property
    def n_groups(self) -> int:
        return self._result.params.n_groups

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    def summary(self) -> str:
        lines = [
            "Lack-of-fit test (pure error)",
            "=" * 72,
            f"Observations: {self._result.params.n_obs}, "
            f"distinct design points: {self.n_groups}",
            "",
        ]
        lines.extend(_format_table(self.table))
        lines.append("---")
        lines.append(SIGNIF_LEGEND)
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"LackOfFitSolution(F={self.f_value:.4g}, p_value={self.p_value:.4g})"


@dataclass
class CompareSolution:
    """Nested-model F test, laid out like R's anova(reduced, full)."""
    _rows: tuple[CompareRow, ...]

    @property
    def rows(self) -> tuple[CompareRow, ...]:
        return self._rows

    @property
    def f_value(self) -> float:
        return self._rows[1].f_value

    @property
    def p_value(self) -> float:
        return self._rows[1].p_value

    def summary(self) -> str:
        lines = [
            "Analysis of Variance Table (nested models)",
            "",
            f"{'':<8} {'Res.Df':>7} {'RSS':>12} {'Df':>4} {'Sum of Sq':>12} {'F':>10} {'Pr(>F)':>12}",
        ]
        for i, row in enumerate(self._rows, start=1):
            line = f"{'Model ' + str(i):<8} {row.res_df:>7} {row.rss:>12.5g}"
            if row.df is not None:
                line += (
                    f" {row.df:>4} {row.sum_sq:>12.5g} {row.f_value:>10.4g} "
                    f"{format_pvalue(row.p_value):>12} {significance_stars(row.p_value)}"
                )
            lines.append(line.rstrip())
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"CompareSolution(F={self.f_value:.4g}, p_value={self.p_value:.4g})"
