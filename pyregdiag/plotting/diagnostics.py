"""
Diagnostic figures for fitted regressions.

The four panels of R's plot.lm (residuals vs fitted, normal Q-Q,
scale-location, residuals vs leverage) plus ACF stems, robust weights and
overlaid fitted lines for simple regression. Every function returns the
matplotlib Figure; pass ``ax`` to draw into an existing axes.
"""

from __future__ import annotations

from typing import Any, Mapping

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyregdiag.core.exceptions import ValidationError
from pyregdiag.core.validation import check_array, check_1d, check_consistent_length
from pyregdiag.diagnostics import acf as compute_acf
from pyregdiag.diagnostics.solution import ACFSolution
from pyregdiag.plotting.style import (
    STYLE,
    FIT_COLORS,
    FIT_LINESTYLES,
    clean_axis,
    fig_size,
    set_labels,
)

# Number of most extreme observations labelled in residual plots
N_LABELLED = 3
COOK_LEVELS = (0.5, 1.0)


def _axes(ax: Axes | None, kind: str = "single") -> tuple[Figure, Axes]:
    if ax is not None:
        return ax.figure, ax
    fig, new_ax = plt.subplots(figsize=fig_size(kind))
    return fig, new_ax


def _require(model: Any, *attrs: str, caller: str) -> None:
    missing = [a for a in attrs if not hasattr(model, a)]
    if missing:
        raise ValidationError(
            f"{caller}: {type(model).__name__} has no {', '.join(missing)}"
        )


def _standardized(model: Any) -> NDArray:
    """Residuals on a unit scale, the best the model type offers."""
    if hasattr(model, 'standardized_residuals'):
        return np.asarray(model.standardized_residuals)
    if hasattr(model, 'normalized_residuals'):
        return np.asarray(model.normalized_residuals)
    resid = np.asarray(model.residuals)
    scale = getattr(model, 'scale', None)
    if scale:
        return resid / scale
    return resid / np.std(resid, ddof=1)


def _label_extremes(ax: Axes, x: NDArray, y: NDArray, score: NDArray) -> None:
    finite = np.where(np.isfinite(score), score, -np.inf)
    for i in np.argsort(finite)[::-1][:min(N_LABELLED, len(score))]:
        ax.annotate(
            str(i + 1),
            (x[i], y[i]),
            xytext=(4, 2),
            textcoords="offset points",
            fontsize=STYLE.ANNOTATION_FONTSIZE,
        )


def _ppoints(n: int) -> NDArray:
    a = 3.0 / 8.0 if n <= 10 else 0.5
    return (np.arange(1, n + 1) - a) / (n + 1 - 2 * a)


def plot_residuals_vs_fitted(model: Any, *, ax: Axes | None = None) -> Figure:
    """Residuals against fitted values with a zero reference line."""
    _require(model, 'fitted_values', 'residuals', caller='plot_residuals_vs_fitted')
    fig, ax = _axes(ax)
    fitted = np.asarray(model.fitted_values)
    resid = np.asarray(model.residuals)
    ax.scatter(fitted, resid, s=STYLE.MARKERSIZE, color=STYLE.POINT_COLOR)
    ax.axhline(0.0, color=STYLE.GUIDE_COLOR, linestyle="--", linewidth=STYLE.LINEWIDTH_THIN)
    _label_extremes(ax, fitted, resid, np.abs(resid))
    set_labels(ax, x="Fitted values", y="Residuals", title="Residuals vs Fitted")
    clean_axis(ax)
    return fig


def plot_qq(model: Any, *, ax: Axes | None = None) -> Figure:
    """
    Normal Q-Q plot of standardized residuals.

    Accepts a fitted model or a residual vector. The reference line passes
    through the first and third quartiles, as R's qqline.
    """
    if hasattr(model, 'residuals'):
        values = _standardized(model)
        ylabel = "Standardized residuals"
    else:
        values = check_array(model, 'residuals')
        check_1d(values, 'residuals')
        ylabel = "Sample quantiles"
    finite = values[np.isfinite(values)]
    n = len(finite)
    if n < 3:
        raise ValidationError(f"plot_qq: need at least 3 finite residuals, got {n}")

    fig, ax = _axes(ax)
    theoretical = sp_stats.norm.ppf(_ppoints(n))
    sample = np.sort(finite)
    ax.scatter(theoretical, sample, s=STYLE.MARKERSIZE, color=STYLE.POINT_COLOR)

    q_y = np.quantile(finite, [0.25, 0.75])
    q_x = sp_stats.norm.ppf([0.25, 0.75])
    slope = (q_y[1] - q_y[0]) / (q_x[1] - q_x[0])
    intercept = q_y[0] - slope * q_x[0]
    grid = np.array([theoretical[0], theoretical[-1]])
    ax.plot(grid, intercept + slope * grid, color=STYLE.GUIDE_COLOR,
            linestyle="--", linewidth=STYLE.LINEWIDTH_THIN)
    set_labels(ax, x="Theoretical quantiles", y=ylabel, title="Normal Q-Q")
    clean_axis(ax)
    return fig


def plot_scale_location(model: Any, *, ax: Axes | None = None) -> Figure:
    """sqrt(|standardized residuals|) against fitted values."""
    _require(model, 'fitted_values', 'residuals', caller='plot_scale_location')
    fig, ax = _axes(ax)
    fitted = np.asarray(model.fitted_values)
    root = np.sqrt(np.abs(_standardized(model)))
    ax.scatter(fitted, root, s=STYLE.MARKERSIZE, color=STYLE.POINT_COLOR)
    _label_extremes(ax, fitted, root, root)
    set_labels(
        ax,
        x="Fitted values",
        y=r"$\sqrt{|\mathrm{Standardized\ residuals}|}$",
        title="Scale-Location",
    )
    clean_axis(ax)
    return fig


def plot_leverage(model: Any, *, ax: Axes | None = None) -> Figure:
    """
    Standardized residuals against leverage with Cook's distance contours.

    Contours at D = 0.5 and 1 follow r = +/- sqrt(D p (1 - h) / h).
    """
    _require(model, 'hat_values', 'standardized_residuals', 'cooks_distance',
             caller='plot_leverage')
    fig, ax = _axes(ax)
    h = np.asarray(model.hat_values)
    r = np.asarray(model.standardized_residuals)
    ax.scatter(h, r, s=STYLE.MARKERSIZE, color=STYLE.POINT_COLOR)
    ax.axhline(0.0, color=STYLE.GUIDE_COLOR, linestyle=":", linewidth=STYLE.LINEWIDTH_THIN)

    p = model.rank
    h_max = float(np.nanmax(h)) if np.any(np.isfinite(h)) else 1.0
    grid = np.linspace(max(h_max, 1e-3) * 0.01, min(h_max * 1.05, 0.999), 100)
    for level in COOK_LEVELS:
        bound = np.sqrt(level * p * (1.0 - grid) / grid)
        ax.plot(grid, bound, color=STYLE.HIGHLIGHT_COLOR, linestyle="--",
                linewidth=STYLE.LINEWIDTH_THIN)
        ax.plot(grid, -bound, color=STYLE.HIGHLIGHT_COLOR, linestyle="--",
                linewidth=STYLE.LINEWIDTH_THIN)
    ylim = np.nanmax(np.abs(r[np.isfinite(r)])) * 1.2 if np.any(np.isfinite(r)) else 1.0
    ax.set_ylim(-ylim, ylim)
    _label_extremes(ax, h, r, np.asarray(model.cooks_distance))
    set_labels(ax, x="Leverage", y="Standardized residuals", title="Residuals vs Leverage")
    clean_axis(ax)
    return fig


def plot_diagnostics(model: Any) -> Figure:
    """
    The 2x2 panel of R's plot(lm).

    Models without leverage (GLS, robust fits) get the ACF of their
    residuals in the fourth panel.
    """
    fig, axes = plt.subplots(2, 2, figsize=fig_size("grid_2x2"))
    plot_residuals_vs_fitted(model, ax=axes[0, 0])
    plot_qq(model, ax=axes[0, 1])
    plot_scale_location(model, ax=axes[1, 0])
    if hasattr(model, 'hat_values'):
        plot_leverage(model, ax=axes[1, 1])
    else:
        plot_acf(model, ax=axes[1, 1])
    fig.tight_layout()
    return fig


def plot_acf(
    x: Any,
    *,
    nlags: int | None = None,
    ax: Axes | None = None,
) -> Figure:
    """
    ACF stem plot with the approximate 95% white-noise band.

    Accepts an ACFSolution, a fitted model (its residuals) or a series.
    """
    result = x if isinstance(x, ACFSolution) else compute_acf(x, nlags=nlags)
    fig, ax = _axes(ax)
    ax.vlines(result.lags, 0.0, result.acf, color=STYLE.POINT_COLOR,
              linewidth=STYLE.LINEWIDTH)
    ax.axhline(0.0, color=STYLE.POINT_COLOR, linewidth=STYLE.LINEWIDTH_THIN)
    for sign in (1.0, -1.0):
        ax.axhline(sign * result.bound, color=STYLE.BAND_COLOR, linestyle="--",
                   linewidth=STYLE.LINEWIDTH_THIN)
    set_labels(ax, x="Lag", y="ACF", title=f"Series {result.data_name}")
    clean_axis(ax, grid_axis="y")
    return fig


def plot_robust_weights(model: Any, *, ax: Axes | None = None) -> Figure:
    """Final IRLS weights by observation; downweighted points are labelled."""
    _require(model, 'weights', caller='plot_robust_weights')
    w = model.weights
    if w is None:
        raise ValidationError("plot_robust_weights: model has no weights")
    w = np.asarray(w)
    fig, ax = _axes(ax)
    idx = np.arange(1, len(w) + 1)
    ax.vlines(idx, 0.0, w, color=STYLE.GUIDE_COLOR, linewidth=STYLE.LINEWIDTH_THIN)
    low = w < 1.0
    ax.scatter(idx[~low], w[~low], s=STYLE.MARKERSIZE, color=STYLE.POINT_COLOR)
    ax.scatter(idx[low], w[low], s=STYLE.MARKERSIZE, color=STYLE.HIGHLIGHT_COLOR)
    _label_extremes(ax, idx, w, 1.0 - w)
    ax.set_ylim(-0.05, 1.1)
    title = f"Robust weights ({model.psi})" if hasattr(model, 'psi') else "Weights"
    set_labels(ax, x="Observation", y="Weight", title=title)
    clean_axis(ax, grid_axis="y")
    return fig


def _line_through(model: Any, grid: NDArray) -> NDArray:
    """Predictions on ``grid`` for a model with intercept plus one predictor."""
    design = model.design
    X = design.X
    ones = np.all(X == 1.0, axis=0)
    others = np.flatnonzero(~ones)
    if X.shape[1] > 2 or len(others) != 1:
        raise ValidationError(
            f"plot_fits: needs a simple regression (one predictor), got names {design.names}"
        )
    beta = np.asarray(model.coefficients)
    out = beta[others[0]] * grid
    if np.any(ones):
        out = out + beta[np.flatnonzero(ones)[0]]
    return out


def plot_fits(
    x: Any,
    y: Any,
    fits: Mapping[str, Any],
    *,
    x_name: str = "x",
    y_name: str = "y",
    ax: Axes | None = None,
) -> Figure:
    """
    Scatter of (x, y) with one fitted line per model.

    Args:
        x, y: Data vectors
        fits: Label -> fitted model with a single predictor (plus intercept)
        x_name, y_name: Axis labels
    """
    x_arr = check_array(x, 'x')
    y_arr = check_array(y, 'y')
    check_1d(x_arr, 'x')
    check_1d(y_arr, 'y')
    check_consistent_length(x_arr, y_arr, names=('x', 'y'))
    if not fits:
        raise ValidationError("plot_fits: no fits given")

    fig, ax = _axes(ax)
    ax.scatter(x_arr, y_arr, s=STYLE.MARKERSIZE, color=STYLE.POINT_COLOR, zorder=3)
    grid = np.linspace(float(x_arr.min()), float(x_arr.max()), 100)
    for i, (label, model) in enumerate(fits.items()):
        ax.plot(
            grid,
            _line_through(model, grid),
            color=FIT_COLORS[i % len(FIT_COLORS)],
            linestyle=FIT_LINESTYLES[i % len(FIT_LINESTYLES)],
            linewidth=STYLE.LINEWIDTH,
            label=label,
        )
    ax.legend(frameon=False, fontsize=STYLE.ANNOTATION_FONTSIZE)
    set_labels(ax, x=x_name, y=y_name)
    clean_axis(ax)
    return fig
