"""
Plotting utilities for regression diagnostics.

All functions return matplotlib Figures; nothing is shown or saved unless
save_figure() is called.
"""

from pyregdiag.plotting.diagnostics import (
    plot_residuals_vs_fitted,
    plot_qq,
    plot_scale_location,
    plot_leverage,
    plot_diagnostics,
    plot_acf,
    plot_robust_weights,
    plot_fits,
)
from pyregdiag.plotting.style import STYLE, StyleConfig, save_figure

__all__ = [
    "plot_residuals_vs_fitted",
    "plot_qq",
    "plot_scale_location",
    "plot_leverage",
    "plot_diagnostics",
    "plot_acf",
    "plot_robust_weights",
    "plot_fits",
    "STYLE",
    "StyleConfig",
    "save_figure",
]
