"""
Regression Design.

Design wraps a DataSource (or raw arrays) and extracts the design matrix X,
the response y, optional prior weights and the coefficient names. It knows
it is building a regression; the DataSource doesn't.

The same Design feeds every model family: OLS/WLS, GLS and the robust fits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
import numpy as np
from numpy.typing import NDArray

from pyregdiag.core.datasource import DataSource
from pyregdiag.core.exceptions import ValidationError
from pyregdiag.core.validation import (
    check_array,
    check_finite,
    check_2d,
    check_1d,
    check_consistent_length,
    check_min_samples,
    check_weights,
)

INTERCEPT_NAME = '(Intercept)'


@dataclass(frozen=True)
class Design:
    """
    Regression design specification. Immutable after construction.

    Construction:
        Design.from_datasource(ds, x=['speed'], y='dist')          # adds intercept
        Design.from_datasource(ds, y='stack_loss')                 # X = all other columns
        Design.from_datasource(ds, x=['speed'], y='dist', weights='w')
        Design.from_arrays(X, y)                                   # X used as given
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _weights: NDArray[np.floating[Any]] | None
    _names: tuple[str, ...]
    _n: int
    _p: int
    _response_name: str = 'y'
    _source: DataSource | None = None

    @classmethod
    def from_datasource(
        cls,
        source: DataSource,
        *,
        y: str,
        x: str | Sequence[str] | None = None,
        weights: str | NDArray | None = None,
        intercept: bool = True,
    ) -> Design:
        """
        Build Design from named columns.

        Args:
            source: The DataSource
            y: Response column
            x: Predictor column(s). If None, all columns except y (and the
               weights column) in their original order.
            weights: Column name or array of prior weights
            intercept: Prepend a column of ones named '(Intercept)'

        Returns:
            Design ready for fitting
        """
        y_arr = source[y]

        if isinstance(weights, str):
            w_arr = source[weights]
            excluded = {y, weights}
        else:
            w_arr = weights
            excluded = {y}

        if x is None:
            x_cols = [c for c in source.columns if c not in excluded]
        elif isinstance(x, str):
            x_cols = [x]
        else:
            x_cols = list(x)

        if not x_cols and not intercept:
            raise ValidationError("No predictor columns available")

        columns = [np.asarray(source[c], dtype=np.float64) for c in x_cols]
        names = list(x_cols)
        if intercept:
            columns.insert(0, np.ones(source.n_observations, dtype=np.float64))
            names.insert(0, INTERCEPT_NAME)

        X_arr = np.column_stack(columns)
        return cls._build(
            X_arr,
            np.asarray(y_arr, dtype=np.float64),
            weights=w_arr,
            names=names,
            response_name=y,
            source=source,
        )

    @classmethod
    def from_arrays(
        cls,
        X: Any,
        y: Any,
        *,
        weights: Any = None,
        names: Sequence[str] | None = None,
    ) -> Design:
        """Build Design directly from array-likes. X is used as given."""
        X_arr = check_array(X, 'X')
        y_arr = check_array(y, 'y')
        return cls._build(X_arr, y_arr, weights=weights, names=names, source=None)

    @classmethod
    def _build(
        cls,
        X: NDArray,
        y: NDArray,
        *,
        weights: Any,
        names: Sequence[str] | None,
        response_name: str = 'y',
        source: DataSource | None,
    ) -> Design:
        """Internal builder with validation."""
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        if y.ndim == 2 and y.shape[1] == 1:
            y = y.ravel()

        check_2d(X, 'X')
        check_1d(y, 'y')
        check_finite(X, 'X')
        check_finite(y, 'y')
        check_consistent_length(X, y, names=('X', 'y'))

        n, p = X.shape
        check_min_samples(X, p, 'X')

        w_arr = None
        if weights is not None:
            w_arr = check_array(weights, 'weights')
            check_1d(w_arr, 'weights')
            check_consistent_length(w_arr, y, names=('weights', 'y'))
            check_weights(w_arr)

        if names is None:
            names = [_default_name(X[:, j], j) for j in range(p)]
        names = tuple(str(nm) for nm in names)
        if len(names) != p:
            raise ValidationError(
                f"names: expected {p} names, got {len(names)}"
            )

        return cls(
            _X=X,
            _y=y,
            _weights=w_arr,
            _names=names,
            _n=n,
            _p=p,
            _response_name=response_name,
            _source=source,
        )

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x p)."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def weights(self) -> NDArray[np.floating[Any]] | None:
        """Prior weights (n,), or None for an unweighted fit."""
        return self._weights

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    @property
    def response_name(self) -> str:
        return self._response_name

    @property
    def n(self) -> int:
        return self._n

    @property
    def p(self) -> int:
        return self._p

    @property
    def source(self) -> DataSource | None:
        return self._source

    @property
    def has_intercept(self) -> bool:
        """True if some column of X is identically one."""
        return bool(np.any(np.all(self._X == 1.0, axis=0)))

    def with_weights(self, weights: NDArray[np.floating[Any]] | None) -> Design:
        """Copy of this design with different prior weights."""
        return Design._build(
            self._X,
            self._y,
            weights=weights,
            names=self._names,
            response_name=self._response_name,
            source=self._source,
        )


def _default_name(column: NDArray, j: int) -> str:
    if np.all(column == 1.0):
        return INTERCEPT_NAME
    return f"x{j}"


def as_design(
    X: Any,
    y: Any = None,
    *,
    weights: Any = None,
    names: Sequence[str] | None = None,
) -> Design:
    """
    Normalise the (X, y) / Design calling convention shared by every fit.

    Raises:
        ValueError: If X is not a Design and y is missing
        ValidationError: If a Design is passed together with arrays
    """
    if isinstance(X, Design):
        if y is not None or names is not None:
            raise ValidationError("y/names must not be given together with a Design")
        if weights is not None:
            return X.with_weights(weights)
        return X
    if y is None:
        raise ValueError("y required when X is not a Design")
    return Design.from_arrays(X, y, weights=weights, names=names)
