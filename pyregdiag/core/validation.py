"""
Input validation utilities.

Validators fail fast and loud: they raise immediately with the parameter
name and the offending values instead of silently correcting input.
Validation happens once, at the public boundary; backends trust their
Design objects.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pyregdiag.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Rejects inputs that convert to object or other non-numeric dtypes
    (mixed types, strings, dates).

    Raises:
        ValidationError: If input cannot be converted to a numeric array
    """
    if hasattr(array, 'to_numpy'):
        array = array.to_numpy()
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    return result.astype(np.float64, copy=False)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array contains no NaN or Inf values."""
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """Verify array has exactly ``ndim`` dimensions."""
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    check_ndim(array, 2, name)


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_min_samples(array: NDArray[np.floating[Any]], min_samples: int, name: str) -> None:
    """Verify array has at least ``min_samples`` rows."""
    n = array.shape[0]
    if n < min_samples:
        raise ValidationError(
            f"{name}: requires at least {min_samples} samples, got {n}"
        )


def check_weights(weights: NDArray[np.floating[Any]], name: str = 'weights') -> None:
    """
    Verify regression weights are finite and strictly positive.

    Zero weights would silently drop observations from the fit; callers
    should subset the data instead.
    """
    check_finite(weights, name)
    n_bad = int(np.sum(weights <= 0))
    if n_bad:
        raise ValidationError(
            f"{name}: must be strictly positive, got {n_bad} value(s) <= 0 "
            f"(min={float(np.min(weights)):g})"
        )


def check_in_range(
    value: float,
    name: str,
    *,
    low: float,
    high: float,
    inclusive: bool = False,
) -> None:
    """Verify a scalar lies in (low, high), or [low, high] if inclusive."""
    ok = low <= value <= high if inclusive else low < value < high
    if not ok:
        bounds = f"[{low:g}, {high:g}]" if inclusive else f"({low:g}, {high:g})"
        raise ValidationError(f"{name}: must be in {bounds}, got {value!r}")
