"""
Core numerical routines for substitution models.

- **Matrix exponential**: reference P(t) = exp(Qt) via scipy
- **Eigendecomposition**: general and reversible (symmetrized) variants
- **Rate matrices**: assembly of Q from relative rates and frequencies

These are expert-level functions; the model classes in
:mod:`morphmodels.models` wrap them.
"""

from morphmodels.core.matrix import (
    check_detailed_balance,
    create_rate_matrix,
    eigen_decompose,
    eigen_decompose_rev,
    is_stochastic,
    matrix_exponential,
)

__all__ = [
    "check_detailed_balance",
    "create_rate_matrix",
    "eigen_decompose",
    "eigen_decompose_rev",
    "is_stochastic",
    "matrix_exponential",
]
