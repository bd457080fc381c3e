"""
Shared interface for discrete-character substitution models.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .errors import InvalidStateCount


class DataKind(str, Enum):
    """Encoding of the character data a model may be asked to handle."""
    STANDARD = "standard"
    BINARY = "binary"
    NUCLEOTIDE = "nucleotide"
    AMINO_ACID = "aminoacid"
    CODON = "codon"


# Fixed state counts for encodings that imply one
STATE_COUNTS = {
    DataKind.BINARY: 2,
    DataKind.NUCLEOTIDE: 4,
    DataKind.AMINO_ACID: 20,
    DataKind.CODON: 61,
}


def as_data_kind(value) -> Optional[DataKind]:
    """Coerce a DataKind or its string value; unknown values give None."""
    if isinstance(value, DataKind):
        return value
    try:
        return DataKind(str(value).lower())
    except ValueError:
        return None


def validate_state_count(n_states) -> int:
    """
    Check that ``n_states`` is an integer of at least 2.

    Returns
    -------
    int
        The state count as a plain int

    Raises
    ------
    InvalidStateCount
        If ``n_states`` is not an integer or is smaller than 2
    """
    if isinstance(n_states, bool) or not isinstance(n_states, (int, np.integer)):
        raise InvalidStateCount(n_states)
    if n_states <= 1:
        raise InvalidStateCount(n_states)
    return int(n_states)


def write_into(out: Optional[np.ndarray], matrix: np.ndarray) -> np.ndarray:
    """
    Copy a square result matrix into a caller-owned buffer.

    Parameters
    ----------
    out : np.ndarray or None
        Destination buffer, either flat (n*n) or square (n, n). If None,
        ``matrix`` is returned as is.
    matrix : np.ndarray, shape (n, n)
        Freshly computed matrix

    Returns
    -------
    np.ndarray
        ``out`` (filled in place) or ``matrix``
    """
    if out is None:
        return matrix
    if out.size != matrix.size:
        raise ValueError(
            f"output buffer must hold {matrix.size} values, got {out.size}"
        )
    out[...] = matrix.reshape(out.shape)
    return out


class SubstitutionModel(ABC):
    """
    Continuous-time Markov chain over ``n_states`` discrete character states.

    Models are driven by a single caller at a time: transition probabilities
    are computed on request into a fresh array (or a caller-supplied buffer),
    and derived quantities are refreshed lazily after the surrounding engine
    sends an invalidation message (``on_restore`` or
    ``on_frequency_parameter_changed``).
    """

    n_states: int

    @abstractmethod
    def get_frequencies(self) -> np.ndarray:
        """Current stationary frequencies, shape (n_states,)."""

    @abstractmethod
    def get_rate_matrix(self) -> np.ndarray:
        """Instantaneous rate matrix Q, shape (n_states, n_states)."""

    @abstractmethod
    def get_transition_probabilities(
        self,
        start_time: float,
        end_time: float,
        rate: float,
        out: Optional[np.ndarray] = None,
    ) -> np.ndarray:
        """
        Transition probability matrix for a branch.

        Parameters
        ----------
        start_time : float
            Time at the parent end of the branch
        end_time : float
            Time at the child end; elapsed time is ``start_time - end_time``
        rate : float
            Rate multiplier applied to the elapsed time
        out : np.ndarray, optional
            Buffer of n_states**2 values (flat or square) to fill in place

        Returns
        -------
        np.ndarray
            P(t), shape (n_states, n_states), or ``out`` when given
        """

    def get_eigen_decomposition(self) -> Optional[Tuple[np.ndarray, np.ndarray, np.ndarray]]:
        """Eigensystem used for P(t), or None for closed-form models."""
        return None

    @abstractmethod
    def can_handle(self, data_kind) -> bool:
        """Whether this model can be applied to data of the given kind."""

    @abstractmethod
    def on_restore(self) -> None:
        """Rollback of upstream state; cached quantities must be refreshed."""

    @abstractmethod
    def on_frequency_parameter_changed(self) -> bool:
        """
        The frequency source changed.

        Returns
        -------
        bool
            True if dependent quantities need recomputation
        """

    def get_state_count(self) -> int:
        return self.n_states
