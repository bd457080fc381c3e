"""
Structured relative-rate layouts for ordered (ordinal) characters.

Relative rates are stored flat, with the diagonal left out: row ``i``
occupies indices ``i*(n-1) .. i*(n-1) + n-2`` and lists columns
``0 .. n-1`` with column ``i`` skipped. For n = 3 the layout is::

    index:  0      1      2      3      4      5
    pair:   0->1   0->2   1->0   1->2   2->0   2->1
"""

from enum import Enum
from typing import Optional

import numpy as np

from .base import validate_state_count


def _rate_buffer(n: int, out: Optional[np.ndarray]) -> np.ndarray:
    size = n * (n - 1)
    if out is None:
        return np.zeros(size)
    if out.size != size:
        raise ValueError(f"relative rate buffer must hold {size} values, got {out.size}")
    out.fill(0.0)
    return out


def flat_index(i: int, j: int, n: int) -> int:
    """Position of the i->j rate in the flat off-diagonal layout."""
    if i == j:
        raise ValueError("diagonal entries are not stored")
    return i * (n - 1) + (j if j < i else j - 1)


def ordinal_relative_rates(n_states: int, out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Relative rates for an ordered character.

    States form a path: state i can only change to i-1 or i+1. For five
    states the square form is::

        [ 0 1 0 0 0 ]
        [ 1 0 1 0 0 ]
        [ 0 1 0 1 0 ]
        [ 0 0 1 0 1 ]
        [ 0 0 0 1 0 ]

    Parameters
    ----------
    n_states : int
        Number of character states (>= 2)
    out : np.ndarray, optional
        Buffer of n*(n-1) values to fill in place

    Returns
    -------
    np.ndarray, shape (n*(n-1),)
        Flat relative rates
    """
    n = validate_state_count(n_states)
    rates = _rate_buffer(n, out)

    # Lowest state: single neighbour above
    rates[0] = 1.0
    # Interior states: i-1 sits at n*i-1 and i+1 at n*i
    for i in range(1, n - 1):
        rates[n * i - 1] = 1.0
        rates[n * i] = 1.0
    # Highest state: single neighbour below
    rates[n * (n - 1) - 1] = 1.0

    return rates


def nested_ordinal_relative_rates(n_states: int, out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Relative rates for a nested ordered character.

    State 0 (e.g. "absent") is a hub linked in both directions to every
    other state, while states 1..n-1 are ordered among themselves and only
    change to their immediate neighbours. For five states::

        [ 0 1 1 1 1 ]
        [ 1 0 1 0 0 ]
        [ 1 1 0 1 0 ]
        [ 1 0 1 0 1 ]
        [ 1 0 0 1 0 ]

    Parameters
    ----------
    n_states : int
        Number of character states (>= 2)
    out : np.ndarray, optional
        Buffer of n*(n-1) values to fill in place

    Returns
    -------
    np.ndarray, shape (n*(n-1),)
        Flat relative rates
    """
    n = validate_state_count(n_states)
    rates = _rate_buffer(n, out)

    for j in range(1, n):
        rates[flat_index(0, j, n)] = 1.0
        rates[flat_index(j, 0, n)] = 1.0

    for i in range(1, n - 1):
        rates[flat_index(i, i + 1, n)] = 1.0
        rates[flat_index(i + 1, i, n)] = 1.0

    return rates


def relative_rates_to_matrix(rates: np.ndarray, n_states: int) -> np.ndarray:
    """Expand flat relative rates into a square matrix with zero diagonal."""
    n = validate_state_count(n_states)
    rates = np.asarray(rates, dtype=float)
    if rates.size != n * (n - 1):
        raise ValueError(f"expected {n * (n - 1)} relative rates, got {rates.size}")

    matrix = np.zeros((n, n))
    matrix[~np.eye(n, dtype=bool)] = rates
    return matrix


def matrix_to_relative_rates(matrix: np.ndarray) -> np.ndarray:
    """Flatten the off-diagonal entries of a square matrix, row by row."""
    matrix = np.asarray(matrix, dtype=float)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"expected a square matrix, got shape {matrix.shape}")
    n = matrix.shape[0]
    return matrix[~np.eye(n, dtype=bool)].copy()


class RelativeRateScheme(str, Enum):
    """Relative rate layout composed into a general substitution model."""
    ORDINAL = "ordinal"
    NESTED_ORDINAL = "nested-ordinal"

    def build(self, n_states: int, out: Optional[np.ndarray] = None) -> np.ndarray:
        if self is RelativeRateScheme.ORDINAL:
            return ordinal_relative_rates(n_states, out)
        return nested_ordinal_relative_rates(n_states, out)
