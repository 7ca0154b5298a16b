"""
Generic result container for all pyregdiag fits and tests.

Every backend returns a Result[P] where P is the domain-specific parameter
payload (LinearParams, GLSParams, RobustParams, ...). The user-facing
*Solution classes wrap it.

Design decisions:
    - Generic over parameter payload P
    - info dict for flexible metadata (method, convergence, iterations)
    - timing is optional
    - Immutable (frozen=True)
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope.

    Attributes:
        params: Domain-specific parameters (coefficients, estimates, etc.)
        info: Structured metadata (method, converged, iterations)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=RobustParams(...),
        ...     info={'method': 'irls', 'converged': True, 'iterations': 9},
        ...     timing={'total_seconds': 0.004},
        ...     backend_name='cpu_irls'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
