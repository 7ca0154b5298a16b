"""
Text formatting shared by the summary() methods.

Output imitates R's printCoefmat / print.htest closely enough that the
course handouts can be compared line by line.
"""

from typing import Any, Sequence

import numpy as np
from numpy.typing import NDArray

SIGNIF_LEGEND = "Signif. codes:  0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 ' ' 1"


def format_pvalue(p: float | None) -> str:
    """Format p-value like R does."""
    if p is None or np.isnan(p):
        return "NA"
    if p < 2.2e-16:
        return "< 2.2e-16"
    if p < 0.001:
        return f"{p:.4e}"
    return f"{p:.4g}"


def significance_stars(p: float | None) -> str:
    if p is None or np.isnan(p):
        return ""
    if p < 0.001:
        return "***"
    if p < 0.01:
        return "**"
    if p < 0.05:
        return "*"
    if p < 0.1:
        return "."
    return ""


def format_coef_table(
    names: Sequence[str],
    estimates: NDArray[np.floating[Any]],
    std_errors: NDArray[np.floating[Any]] | None,
    statistics: NDArray[np.floating[Any]] | None,
    p_values: NDArray[np.floating[Any]] | None,
    *,
    stat_name: str = 't value',
    p_name: str = 'Pr(>|t|)',
) -> list[str]:
    """
    Coefficient table lines: name, estimate, SE, statistic, p-value, stars.

    Aliased coefficients (NaN estimate) print as "(aliased)". Columns that
    are None are left out.
    """
    width = max([len(nm) for nm in names] + [12])
    header = f"{'':<{width}} {'Estimate':>12}"
    if std_errors is not None:
        header += f" {'Std. Error':>12}"
    if statistics is not None:
        header += f" {stat_name:>10}"
    if p_values is not None:
        header += f" {p_name:>12}"
    lines = [header]

    for i, name in enumerate(names):
        est = estimates[i]
        if np.isnan(est):
            lines.append(f"{name:<{width}} {'(aliased)':>12}")
            continue
        line = f"{name:<{width}} {est:12.6g}"
        if std_errors is not None:
            line += f" {_num(std_errors[i], 12, '.6g')}"
        if statistics is not None:
            line += f" {_num(statistics[i], 10, '.4g')}"
        if p_values is not None:
            pv = p_values[i]
            line += f" {format_pvalue(pv):>12} {significance_stars(pv)}"
        lines.append(line.rstrip())

    if p_values is not None:
        lines.append("---")
        lines.append(SIGNIF_LEGEND)
    return lines


def _num(x: float, width: int, spec: str) -> str:
    if x is None or np.isnan(x):
        return f"{'NA':>{width}}"
    return f"{x:{width}{spec}}"
