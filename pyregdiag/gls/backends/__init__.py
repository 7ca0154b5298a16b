"""
GLS backends.

Available backends:
    CPUGLSBackend: profile likelihood in phi + whitened QR
"""

from pyregdiag.gls.backends.cpu import CPUGLSBackend

__all__ = [
    "CPUGLSBackend",
]
