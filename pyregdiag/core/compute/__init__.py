"""
Shared numeric infrastructure.

Model-specific backends live in {domain}/backends/. This package holds the
pieces they share.

Submodules:
    timing: Execution timing utilities
    tolerances: Rank and comparison tolerances
    linalg: Pivoted QR least-squares kernels
"""

from pyregdiag.core.compute.timing import Timer, timed

__all__ = [
    "Timer",
    "timed",
]
