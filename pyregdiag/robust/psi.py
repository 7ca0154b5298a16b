"""
Psi functions for M-estimation.

Each Psi defines, for standardized residuals u = r / s:
- weight(u) = psi(u) / u    (IRLS weights)
- psi(u)
- deriv(u)  = psi'(u)       (for the asymptotic covariance)

Tuning constants default to the values in MASS (psi.huber, psi.hampel,
psi.bisquare), which give 95% efficiency at the normal for Huber and
bisquare.

References:
    Huber, P. J. (1981). Robust Statistics.
    Hampel, F. R., et al. (1986). Robust Statistics: The Approach Based on
        Influence Functions.
    Venables, W. N. & Ripley, B. D. (2002). Modern Applied Statistics with
        S, 4th ed., section 6.5.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import numpy as np
from numpy.typing import NDArray

from pyregdiag.core.exceptions import ValidationError


class Psi(ABC):
    """Abstract psi function."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def weight(self, u: NDArray) -> NDArray:
        """psi(u) / u, the IRLS weight."""
        ...

    @abstractmethod
    def deriv(self, u: NDArray) -> NDArray:
        """psi'(u)."""
        ...

    def psi(self, u: NDArray) -> NDArray:
        return u * self.weight(u)

    @property
    @abstractmethod
    def tuning(self) -> dict[str, float]:
        ...

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v:g}" for k, v in self.tuning.items())
        return f"{self.__class__.__name__}({args})"


class HuberPsi(Psi):
    """Huber: psi(u) = u for |u| <= k, k sign(u) beyond. Monotone."""

    def __init__(self, k: float = 1.345):
        if k <= 0:
            raise ValidationError(f"Huber k must be positive, got {k}")
        self.k = float(k)

    @property
    def name(self) -> str:
        return 'huber'

    @property
    def tuning(self) -> dict[str, float]:
        return {'k': self.k}

    def weight(self, u: NDArray) -> NDArray:
        with np.errstate(divide='ignore'):
            return np.minimum(1.0, self.k / np.abs(u))

    def deriv(self, u: NDArray) -> NDArray:
        return (np.abs(u) <= self.k).astype(np.float64)


class HampelPsi(Psi):
    """
    Hampel three-part redescending psi.

    Linear up to a, constant to b, descending linearly to zero at c.
    """

    def __init__(self, a: float = 2.0, b: float = 4.0, c: float = 8.0):
        if not 0 < a <= b < c:
            raise ValidationError(f"Hampel constants need 0 < a <= b < c, got {a}, {b}, {c}")
        self.a = float(a)
        self.b = float(b)
        self.c = float(c)

    @property
    def name(self) -> str:
        return 'hampel'

    @property
    def tuning(self) -> dict[str, float]:
        return {'a': self.a, 'b': self.b, 'c': self.c}

    def weight(self, u: NDArray) -> NDArray:
        a, b, c = self.a, self.b, self.c
        U = np.minimum(np.abs(u) + 1e-50, c)
        out = np.where(U <= a, U, np.where(U <= b, a, a * (c - U) / (c - b)))
        return out / U

    def deriv(self, u: NDArray) -> NDArray:
        a, b, c = self.a, self.b, self.c
        x = np.abs(u)
        return np.where(
            x <= a, 1.0,
            np.where(x <= b, 0.0, np.where(x <= c, -a / (c - b), 0.0)),
        )


class BisquarePsi(Psi):
    """Tukey bisquare (biweight): psi(u) = u (1 - (u/c)^2)^2 for |u| <= c, 0 beyond."""

    def __init__(self, c: float = 4.685):
        if c <= 0:
            raise ValidationError(f"bisquare c must be positive, got {c}")
        self.c = float(c)

    @property
    def name(self) -> str:
        return 'bisquare'

    @property
    def tuning(self) -> dict[str, float]:
        return {'c': self.c}

    def weight(self, u: NDArray) -> NDArray:
        return (1.0 - np.minimum(1.0, np.abs(u / self.c)) ** 2) ** 2

    def deriv(self, u: NDArray) -> NDArray:
        t = (u / self.c) ** 2
        return np.where(t < 1.0, (1.0 - t) * (1.0 - 5.0 * t), 0.0)


_PSI_REGISTRY = {
    'huber': HuberPsi,
    'hampel': HampelPsi,
    'bisquare': BisquarePsi,
}


def resolve_psi(psi: str | Psi, **tuning: float) -> Psi:
    """
    Resolve a psi specification to a Psi instance.

    Args:
        psi: 'huber', 'hampel', 'bisquare', or a Psi instance
        **tuning: Constants passed to the constructor (k, a/b/c, c)

    Raises:
        ValidationError: On an unknown name, or tuning given with an instance
    """
    if isinstance(psi, Psi):
        if tuning:
            raise ValidationError("tuning constants cannot be combined with a Psi instance")
        return psi
    try:
        cls = _PSI_REGISTRY[str(psi).lower()]
    except KeyError:
        raise ValidationError(
            f"Unknown psi {psi!r}. Available: {sorted(_PSI_REGISTRY)}"
        ) from None
    return cls(**tuning)
