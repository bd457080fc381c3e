"""
Stationary frequencies with lazy refresh.
"""

import warnings
from typing import Callable, Optional, Sequence, Union

import numpy as np

from .base import validate_state_count
from .errors import FrequencyLengthMismatch

FrequencySource = Union[Sequence[float], np.ndarray, Callable[[], Sequence[float]]]


class FrequencyState:
    """
    Stationary frequency vector owned by a substitution model.

    Two modes are possible. With no source the frequencies are uniform
    (1/n for every state) and ``has_frequencies`` is False. With a source the
    values are copied from it, ``has_frequencies`` is True and the scalar
    ``total_sub_rate = 1 - sum(f_i**2)`` is cached for the closed-form
    Lewis Mk solution.

    The source is re-read only when the state has been marked dirty and
    ``refresh_if_dirty`` is called, so in-place edits to the source become
    visible after the next invalidation.

    Parameters
    ----------
    n_states : int
        Number of character states (>= 2)
    source : array-like or callable, optional
        Supplied frequencies, or a zero-argument callable returning them

    Examples
    --------
    >>> state = FrequencyState(4)
    >>> state.values
    array([0.25, 0.25, 0.25, 0.25])
    >>> state = FrequencyState(4, [0.1, 0.2, 0.3, 0.4])
    >>> float(round(state.total_sub_rate, 2))
    0.7
    """

    SUM_TOLERANCE = 1e-6

    def __init__(self, n_states: int, source: Optional[FrequencySource] = None):
        self.n_states = validate_state_count(n_states)
        self.source = source
        self.values = np.empty(self.n_states)
        self.has_frequencies = False
        self.total_sub_rate = np.float64(1.0)
        self.needs_refresh = False
        self.initialize()

    def _read_source(self) -> np.ndarray:
        raw = self.source() if callable(self.source) else self.source
        freqs = np.asarray(raw, dtype=float).ravel()

        if len(freqs) != self.n_states:
            raise FrequencyLengthMismatch(len(freqs), self.n_states)
        if np.any(freqs < 0):
            raise ValueError(f"frequencies must be non-negative, got {freqs}")
        if abs(freqs.sum() - 1.0) > self.SUM_TOLERANCE:
            warnings.warn(
                f"stationary frequencies sum to {freqs.sum():.6g}, not 1",
                UserWarning,
            )
        return freqs

    def initialize(self) -> None:
        """(Re)compute frequencies from the source and clear the dirty flag."""
        if self.source is not None:
            freqs = self._read_source()
            self.values[:] = freqs
            self.total_sub_rate = np.float64(1.0) - np.dot(freqs, freqs)
            self.has_frequencies = True
        else:
            self.values.fill(1.0 / self.n_states)
            self.has_frequencies = False
        self.needs_refresh = False

    def refresh_if_dirty(self) -> bool:
        """
        Recompute frequencies if the state was invalidated.

        Returns
        -------
        bool
            True if a recomputation happened
        """
        if not self.needs_refresh:
            return False
        self.initialize()
        return True

    def mark_dirty(self) -> None:
        """Defer recomputation to the next ``refresh_if_dirty`` call."""
        self.needs_refresh = True
