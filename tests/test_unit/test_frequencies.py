"""
Unit tests for stationary frequency state.
"""

import numpy as np
import pytest

from morphmodels.models.errors import FrequencyLengthMismatch, InvalidStateCount
from morphmodels.models.frequencies import FrequencyState


class TestFrequencyState:
    """Test FrequencyState initialization and refresh."""

    def test_uniform(self):
        state = FrequencyState(5)

        np.testing.assert_allclose(state.values, 0.2)
        assert not state.has_frequencies
        assert not state.needs_refresh

    def test_supplied(self):
        state = FrequencyState(4, [0.1, 0.2, 0.3, 0.4])

        np.testing.assert_allclose(state.values, [0.1, 0.2, 0.3, 0.4])
        assert state.has_frequencies
        np.testing.assert_allclose(state.total_sub_rate, 0.7, rtol=1e-12)

    def test_values_are_copied(self):
        source = np.array([0.5, 0.5])
        state = FrequencyState(2, source)

        assert state.values is not source
        source[0] = 0.9
        assert state.values[0] == 0.5

    def test_length_mismatch(self):
        with pytest.raises(FrequencyLengthMismatch) as excinfo:
            FrequencyState(3, [0.5, 0.5])

        assert excinfo.value.n_frequencies == 2
        assert excinfo.value.n_states == 3

    def test_invalid_state_count(self):
        with pytest.raises(InvalidStateCount):
            FrequencyState(1)

    def test_negative_frequency_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            FrequencyState(3, [0.6, 0.6, -0.2])

    def test_unnormalized_frequencies_warn(self):
        with pytest.warns(UserWarning, match="sum to"):
            state = FrequencyState(3, [0.5, 0.5, 0.5])

        # Values are kept as given
        np.testing.assert_allclose(state.values, 0.5)

    def test_refresh_only_when_dirty(self):
        calls = []

        def source():
            calls.append(1)
            return [0.3, 0.7]

        state = FrequencyState(2, source)
        assert len(calls) == 1

        assert state.refresh_if_dirty() is False
        assert len(calls) == 1

        state.mark_dirty()
        state.mark_dirty()
        assert state.needs_refresh
        assert len(calls) == 1

        assert state.refresh_if_dirty() is True
        assert len(calls) == 2
        assert not state.needs_refresh

    def test_refresh_picks_up_new_values(self):
        source = np.array([0.25, 0.75])
        state = FrequencyState(2, source)

        source[:] = [0.5, 0.5]
        state.mark_dirty()
        state.refresh_if_dirty()

        np.testing.assert_allclose(state.values, [0.5, 0.5])
        np.testing.assert_allclose(state.total_sub_rate, 0.5)
