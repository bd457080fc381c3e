"""
General n-state substitution models with structured relative rates.

The relative rates come from a :class:`RelativeRateScheme` chosen at
construction; transition probabilities are computed from an eigensystem
of the rate matrix supplied by an injected function.
"""

from typing import Callable, Optional, Tuple

import numpy as np

from ..core.matrix import (
    check_detailed_balance,
    create_rate_matrix,
    eigen_decompose,
    eigen_decompose_rev,
)
from .base import DataKind, SubstitutionModel, as_data_kind, validate_state_count, write_into
from .frequencies import FrequencySource, FrequencyState
from .rates import RelativeRateScheme, relative_rates_to_matrix

EigenSystem = Tuple[np.ndarray, np.ndarray, np.ndarray]


class GeneralSubstitutionModel(SubstitutionModel):
    """
    Substitution model on n states with fixed relative rates.

    Q[i,j] = r_ij * pi_j for i != j, rows summing to zero, scaled to one
    expected substitution per unit time. The relative rates r are built
    once from ``scheme`` and never change afterwards.

    Parameters
    ----------
    n_states : int
        Number of character states (>= 2)
    frequencies : array-like or callable
        Stationary frequencies of length ``n_states``
    scheme : RelativeRateScheme or str
        Relative rate layout (``"ordinal"`` or ``"nested-ordinal"``)
    eigen_system : callable, optional
        Function Q -> (eigenvalues, U, V) with Q = U @ diag(eigenvalues) @ V.
        By default the symmetrized decomposition is used when every
        frequency is positive, and a general one otherwise.

    Examples
    --------
    >>> model = GeneralSubstitutionModel(5, [0.2] * 5, "ordinal")
    >>> P = model.get_transition_probabilities(1.0, 0.0, 1.0)
    >>> P.shape
    (5, 5)
    """

    def __init__(
        self,
        n_states: int,
        frequencies: FrequencySource,
        scheme,
        eigen_system: Optional[Callable[[np.ndarray], EigenSystem]] = None,
    ):
        self.n_states = validate_state_count(n_states)
        if frequencies is None:
            raise ValueError(f"{type(self).__name__} requires stationary frequencies")

        self.scheme = RelativeRateScheme(scheme)
        self.frequency_state = FrequencyState(self.n_states, frequencies)
        self.eigen_system = eigen_system if eigen_system is not None else self._default_eigen_system

        self._relative_rates = self.scheme.build(self.n_states)
        self._relative_rates.setflags(write=False)

        self._rate_matrix = None
        self._eigen = None
        self._needs_update = True

    def _default_eigen_system(self, Q: np.ndarray) -> EigenSystem:
        pi = self.frequency_state.values
        if np.all(pi > 0) and check_detailed_balance(Q, pi):
            return eigen_decompose_rev(Q, pi)
        return eigen_decompose(Q)

    def get_relative_rates(self) -> np.ndarray:
        """Flat relative rates, shape (n*(n-1),), read-only."""
        return self._relative_rates

    def get_frequencies(self) -> np.ndarray:
        return self.frequency_state.values

    def _update(self) -> None:
        self.frequency_state.refresh_if_dirty()
        if not self._needs_update:
            return

        rates = relative_rates_to_matrix(self._relative_rates, self.n_states)
        self._rate_matrix = create_rate_matrix(rates, self.frequency_state.values)
        self._eigen = self.eigen_system(self._rate_matrix)
        self._needs_update = False

    def get_rate_matrix(self) -> np.ndarray:
        self._update()
        return self._rate_matrix.copy()

    def get_eigen_decomposition(self) -> EigenSystem:
        self._update()
        return self._eigen

    def get_transition_probabilities(
        self,
        start_time: float,
        end_time: float,
        rate: float,
        out: Optional[np.ndarray] = None,
    ) -> np.ndarray:
        self._update()
        eigenvalues, U, V = self._eigen

        distance = (start_time - end_time) * rate
        matrix = ((U * np.exp(eigenvalues * distance)) @ V).real.copy()
        # Round-off can leave tiny negative probabilities
        np.maximum(matrix, 0.0, out=matrix)

        return write_into(out, matrix)

    def can_handle(self, data_kind) -> bool:
        kind = as_data_kind(data_kind)
        if kind is DataKind.BINARY:
            return self.n_states == 2
        return kind is DataKind.STANDARD

    def on_restore(self) -> None:
        self.frequency_state.mark_dirty()
        self._needs_update = True

    def on_frequency_parameter_changed(self) -> bool:
        self.frequency_state.mark_dirty()
        self._needs_update = True
        return True

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(n_states={self.n_states}, "
            f"scheme={self.scheme.value!r})"
        )



def ordinal_model(n_states: int, frequencies: FrequencySource, eigen_system=None) -> GeneralSubstitutionModel:
    """Ordered character: changes only between adjacent states."""
    return GeneralSubstitutionModel(n_states, frequencies, RelativeRateScheme.ORDINAL, eigen_system)


def nested_ordinal_model(n_states: int, frequencies: FrequencySource, eigen_system=None) -> GeneralSubstitutionModel:
    """Nested ordered character: hub state 0 plus an ordered chain 1..n-1."""
    return GeneralSubstitutionModel(
        n_states, frequencies, RelativeRateScheme.NESTED_ORDINAL, eigen_system
    )
