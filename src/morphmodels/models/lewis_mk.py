"""
Lewis Mk model for discrete morphological characters.

Equal rates between all states, with either equal stationary frequencies
(the Mk model proper) or a supplied stationary distribution. Both cases
have a closed-form matrix exponential, so no eigensystem is computed.

References:
    Lewis, P. O. (2001). A likelihood approach to estimating phylogeny from
    discrete morphological character data. Systematic Biology 50(6):913-925.
"""

from typing import Optional

import numpy as np

from .base import (
    DataKind,
    STATE_COUNTS,
    SubstitutionModel,
    as_data_kind,
    validate_state_count,
    write_into,
)
from .frequencies import FrequencySource, FrequencyState


class LewisMKModel(SubstitutionModel):
    """
    Lewis Mk substitution model: equal rates, equal or supplied frequencies.

    With uniform frequencies the generator has off-diagonal rates 1/(n-1)
    and diagonal -1, so one unit of time is one expected substitution.
    With supplied frequencies pi, Q[i,j] = pi_j / (1 - sum(pi**2)) for i != j,
    which keeps the same normalization.

    Parameters
    ----------
    n_states : int, optional
        Number of character states (>= 2)
    frequencies : array-like or callable, optional
        Stationary frequencies. If None, uniform frequencies are used.
    data_kind : DataKind or str, optional
        Alternative to ``n_states`` for encodings with a fixed state count
        (e.g. ``"binary"``). Exactly one of ``n_states`` and ``data_kind``
        must be given.

    Examples
    --------
    >>> model = LewisMKModel(n_states=4)
    >>> P = model.get_transition_probabilities(1.0, 0.0, 1.0)
    >>> np.allclose(P.sum(axis=1), 1.0)
    True
    """

    citation = (
        "Lewis, P. O. (2001). A likelihood approach to estimating phylogeny "
        "from discrete morphological character data. Systematic Biology, "
        "50(6), 913-925. DOI: 10.1080/106351501753462876"
    )

    SUPPORTED_KINDS = (DataKind.STANDARD, DataKind.BINARY)

    def __init__(
        self,
        n_states: Optional[int] = None,
        frequencies: Optional[FrequencySource] = None,
        data_kind=None,
    ):
        if (n_states is None) == (data_kind is None):
            raise ValueError("exactly one of n_states and data_kind must be given")

        if n_states is None:
            kind = as_data_kind(data_kind)
            if kind not in self.SUPPORTED_KINDS:
                raise ValueError(f"Lewis Mk cannot handle data kind {data_kind!r}")
            if kind not in STATE_COUNTS:
                raise ValueError(
                    f"data kind {data_kind!r} has no fixed state count; pass n_states"
                )
            n_states = STATE_COUNTS[kind]

        self.n_states = validate_state_count(n_states)
        self.frequency_state = FrequencyState(self.n_states, frequencies)

    @property
    def has_frequencies(self) -> bool:
        return self.frequency_state.has_frequencies

    def get_frequencies(self) -> np.ndarray:
        return self.frequency_state.values

    def get_transition_probabilities(
        self,
        start_time: float,
        end_time: float,
        rate: float,
        out: Optional[np.ndarray] = None,
    ) -> np.ndarray:
        """
        Closed-form P(t) for elapsed time ``start_time - end_time``.

        Every row sums to one for any real elapsed time, and zero elapsed
        time gives the identity matrix. Underflow or overflow of the
        exponential is left to floating point.
        """
        state = self.frequency_state
        state.refresh_if_dirty()

        n = self.n_states
        t = start_time - end_time

        if state.has_frequencies:
            distance = t * rate
            if distance == 0:
                e1 = 1.0
            else:
                # A point-mass distribution has total_sub_rate 0, so e1 is exp(-inf)
                with np.errstate(divide="ignore"):
                    e1 = np.exp(-distance / state.total_sub_rate)
            e2 = 1.0 - e1
            matrix = np.tile(state.values * e2, (n, 1))
            matrix[np.diag_indices(n)] += e1
        else:
            delta = (n / (n - 1.0)) * t
            decay = np.exp(-delta * rate)
            p_stay = (1.0 + (n - 1) * decay) / n
            p_move = (1.0 - decay) / n
            matrix = np.full((n, n), p_move)
            np.fill_diagonal(matrix, p_stay)

        return write_into(out, matrix)

    def get_rate_matrix(self) -> np.ndarray:
        """
        Instantaneous rate matrix Q, shape (n, n).

        Rows sum to zero.
        """
        state = self.frequency_state
        state.refresh_if_dirty()

        n = self.n_states
        if state.has_frequencies:
            with np.errstate(divide="ignore", invalid="ignore"):
                Q = np.tile(state.values / state.total_sub_rate, (n, 1))
            np.fill_diagonal(Q, 0.0)
            np.fill_diagonal(Q, -Q.sum(axis=1))
        else:
            Q = np.full((n, n), 1.0 / (n - 1))
            np.fill_diagonal(Q, -1.0)
        return Q

    def can_handle(self, data_kind) -> bool:
        return as_data_kind(data_kind) in self.SUPPORTED_KINDS

    def on_restore(self) -> None:
        self.frequency_state.mark_dirty()

    def on_frequency_parameter_changed(self) -> bool:
        # Uniform frequencies have nothing upstream that can go stale
        if not self.frequency_state.has_frequencies:
            return False
        self.frequency_state.mark_dirty()
        return True

    def __repr__(self) -> str:
        mode = "supplied" if self.has_frequencies else "uniform"
        return f"LewisMKModel(n_states={self.n_states}, frequencies={mode})"
