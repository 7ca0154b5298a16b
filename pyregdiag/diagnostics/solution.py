"""
Diagnostic solution types.

TestSolution wraps Result[TestParams] and prints like R's print.htest.
ACFSolution wraps Result[ACFParams] and prints like R's print.acf.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pyregdiag.core.result import Result
from pyregdiag.core.formatting import format_pvalue
from pyregdiag.diagnostics._common import TestParams, ACFParams


@dataclass
class TestSolution:
    """
    User-facing diagnostic test results.

    All htest fields used by the residual tests are available as
    properties; summary() gives R's print.htest layout.
    """
    __test__ = False

    _result: Result[TestParams]

    @property
    def statistic(self) -> float:
        """Test statistic value."""
        return self._result.params.statistic

    @property
    def statistic_name(self) -> str:
        return self._result.params.statistic_name

    @property
    def parameter(self) -> dict[str, float] | None:
        """Distribution parameters (e.g. {'df': 3})."""
        return self._result.params.parameter

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def method(self) -> str:
        return self._result.params.method

    @property
    def data_name(self) -> str:
        return self._result.params.data_name

    @property
    def extras(self) -> dict[str, Any] | None:
        """Test-specific additional outputs."""
        return self._result.params.extras

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
        """
        Format as R's print.htest output, e.g.

            studentized Breusch-Pagan test

        data:  model
        BP = 3.2149, df = 1, p-value = 0.07297
        """
        p = self._result.params
        lines = [f"\t{p.method}", "", f"data:  {p.data_name}"]
        parts = [f"{p.statistic_name} = {p.statistic:.5g}"]
        if p.parameter is not None:
            for name, val in p.parameter.items():
                parts.append(f"{name} = {val:.5g}")
        parts.append(f"p-value = {format_pvalue(p.p_value)}")
        lines.append(", ".join(parts))
        if p.extras and "observation" in p.extras:
            lines.append(
                f"largest |rstudent| at observation {p.extras['observation']}, "
                f"unadjusted p-value = {format_pvalue(p.extras['unadjusted_p_value'])}"
            )
        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"TestSolution(method={self.method!r}, "
            f"statistic={self.statistic:.5g}, p_value={self.p_value:.4g})"
        )


@dataclass
class ACFSolution:
    """Sample autocorrelation function with its white-noise band."""
    _result: Result[ACFParams]

    @property
    def lags(self) -> NDArray[np.intp]:
        return self._result.params.lags

    @property
    def acf(self) -> NDArray[np.floating[Any]]:
        """Autocorrelations for lags 0..nlags; acf[0] is 1."""
        return self._result.params.acf

    @property
    def nlags(self) -> int:
        return len(self._result.params.lags) - 1

    @property
    def n_obs(self) -> int:
        return self._result.params.n_obs

    @property
    def bound(self) -> float:
        """Approximate 95% bound 1.96 / sqrt(n) for white noise."""
        return self._result.params.bound

    @property
    def significant_lags(self) -> NDArray[np.intp]:
        """Lags >= 1 whose autocorrelation lies outside +/- bound."""
        mask = np.abs(self.acf) > self.bound
        mask[0] = False
        return self.lags[mask]

    @property
    def data_name(self) -> str:
        return self._result.params.data_name

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    def summary(self) -> str:
        lines = [
            f"Autocorrelations of series '{self.data_name}', by lag",
            "",
        ]
        width = 7
        for start in range(0, len(self.lags), 10):
            chunk = slice(start, start + 10)
            lines.append(" ".join(f"{k:>{width}d}" for k in self.lags[chunk]))
            lines.append(" ".join(f"{r:>{width}.3f}" for r in self.acf[chunk]))
        lines.append("")
        lines.append(f"Approximate 95% bound: +/-{self.bound:.4f} (n = {self.n_obs})")
        sig = self.significant_lags
        lines.append(
            "Lags outside the bound: " + (", ".join(str(k) for k in sig) if len(sig) else "none")
        )
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"ACFSolution(n={self.n_obs}, nlags={self.nlags}, bound={self.bound:.4f})"
