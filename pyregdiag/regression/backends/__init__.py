"""
Regression backends.

Available backends:
    CPUQRBackend: CPU reference implementation using rank-revealing QR
"""

from pyregdiag.regression.backends.cpu import CPUQRBackend

__all__ = [
    "CPUQRBackend",
]
