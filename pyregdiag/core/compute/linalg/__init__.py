"""
Linear algebra kernels.

All functions use NumPy/SciPy (LAPACK) and return plain arrays or a
structured result dataclass.
"""

from pyregdiag.core.compute.linalg.qr import (
    QRResult,
    qr_decompose,
    qr_solve,
    unscaled_covariance,
    fitted_from_coefficients,
)

__all__ = [
    "QRResult",
    "qr_decompose",
    "qr_solve",
    "unscaled_covariance",
    "fitted_from_coefficients",
]
