"""
Matrix operations for substitution models.

Rate matrix assembly, eigendecomposition and the reference matrix
exponential used to cross-check closed-form transition probabilities.
"""

from typing import Tuple

import numpy as np
from scipy.linalg import expm


def matrix_exponential(Q: np.ndarray, t: float) -> np.ndarray:
    """
    Compute P(t) = exp(Q*t) with scipy's Padé scaling-and-squaring expm.

    Parameters
    ----------
    Q : ndarray, shape (n, n)
        Instantaneous rate matrix
    t : float
        Elapsed time (already multiplied by any rate multiplier)

    Returns
    -------
    P : ndarray, shape (n, n)
        Transition probability matrix
    """
    return expm(Q * t)


def eigen_decompose(Q: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Eigendecompose a rate matrix as Q = U @ diag(eigenvalues) @ V.

    Works for any diagonalizable Q; no reversibility is assumed.

    Parameters
    ----------
    Q : ndarray, shape (n, n)
        Rate matrix

    Returns
    -------
    eigenvalues : ndarray, shape (n,)
    U : ndarray, shape (n, n)
        Right eigenvectors (columns)
    V : ndarray, shape (n, n)
        Inverse of U

    Notes
    -----
    Transition probabilities follow as
    ``P(t) = U @ diag(exp(eigenvalues * t)) @ V``.
    """
    eigenvalues, U = np.linalg.eig(Q)
    V = np.linalg.inv(U)
    return eigenvalues, U, V


def eigen_decompose_rev(Q: np.ndarray, pi: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Eigendecompose a reversible rate matrix through its symmetric form.

    With D = diag(pi), the matrix D^(1/2) Q D^(-1/2) is symmetric when Q
    satisfies detailed balance, so ``numpy.linalg.eigh`` applies and the
    eigenvalues come out real and in ascending order.

    Parameters
    ----------
    Q : ndarray, shape (n, n)
        Rate matrix satisfying pi_i Q[i,j] = pi_j Q[j,i]
    pi : ndarray, shape (n,)
        Stationary distribution, strictly positive

    Returns
    -------
    eigenvalues : ndarray, shape (n,)
    U : ndarray, shape (n, n)
    V : ndarray, shape (n, n)
        Q = U @ diag(eigenvalues) @ V
    """
    sqrt_pi = np.sqrt(pi)
    Q_sym = Q * sqrt_pi[:, np.newaxis] / sqrt_pi[np.newaxis, :]
    eigenvalues, eigenvectors = np.linalg.eigh(Q_sym)

    U = eigenvectors / sqrt_pi[:, np.newaxis]
    V = eigenvectors.T * sqrt_pi[np.newaxis, :]
    return eigenvalues, U, V


def create_rate_matrix(
    rates: np.ndarray, pi: np.ndarray, normalize: bool = True
) -> np.ndarray:
    """
    Build Q from a square relative-rate matrix and stationary frequencies.

    Q[i,j] = rates[i,j] * pi[j] for i != j and each diagonal entry is minus
    the sum of its row. With ``normalize`` the matrix is scaled so that the
    expected number of substitutions per unit time, -sum(pi_i Q[i,i]), is 1.

    Parameters
    ----------
    rates : ndarray, shape (n, n)
        Relative rates; the diagonal is ignored
    pi : ndarray, shape (n,)
        Stationary frequencies
    normalize : bool, default=True
        Scale to one expected substitution per unit time

    Returns
    -------
    Q : ndarray, shape (n, n)
    """
    Q = np.asarray(rates, dtype=float) * pi[np.newaxis, :]
    np.fill_diagonal(Q, 0.0)
    np.fill_diagonal(Q, -Q.sum(axis=1))

    if normalize:
        expected_rate = -np.dot(pi, Q.diagonal())
        if expected_rate > 0:
            Q /= expected_rate

    return Q


def check_detailed_balance(Q: np.ndarray, pi: np.ndarray, rtol: float = 1e-10) -> bool:
    """True if pi_i Q[i,j] == pi_j Q[j,i] for every pair of states."""
    flux = pi[:, np.newaxis] * Q
    return bool(np.allclose(flux, flux.T, rtol=rtol, atol=1e-14))


def is_stochastic(P: np.ndarray, atol: float = 1e-10) -> bool:
    """True if P has non-negative entries and rows summing to one."""
    return bool(np.all(P >= -atol) and np.allclose(P.sum(axis=1), 1.0, atol=atol))
