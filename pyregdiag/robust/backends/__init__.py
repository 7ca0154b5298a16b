"""
Robust regression backends.

Available backends:
    CPUIRLSBackend: M-estimation by iteratively reweighted least squares
"""

from pyregdiag.robust.backends.cpu_irls import CPUIRLSBackend

__all__ = [
    "CPUIRLSBackend",
]
