"""
Tests for high-level API (create_model and transition_matrix).
"""

import numpy as np
import pytest

from morphmodels import (
    GeneralSubstitutionModel,
    InvalidStateCount,
    LewisMKModel,
    RelativeRateScheme,
    create_model,
    transition_matrix,
)


class TestCreateModel:
    """Test create_model() function."""

    def test_lewis_mk(self):
        model = create_model("lewis-mk", 4)

        assert isinstance(model, LewisMKModel)
        assert not model.has_frequencies

    @pytest.mark.parametrize("name", ["Lewis_MK", "LEWIS-MK", "mk", " lewis-mk "])
    def test_model_name_case_insensitive(self, name):
        assert isinstance(create_model(name, 3), LewisMKModel)

    def test_ordinal_defaults_to_uniform_frequencies(self):
        model = create_model("ordinal", 5)

        assert isinstance(model, GeneralSubstitutionModel)
        assert model.scheme is RelativeRateScheme.ORDINAL
        np.testing.assert_allclose(model.get_frequencies(), 0.2)

    def test_nested_ordinal_with_frequencies(self, five_state_freqs):
        model = create_model("nested_ordinal", 5, five_state_freqs)

        assert model.scheme is RelativeRateScheme.NESTED_ORDINAL
        np.testing.assert_allclose(model.get_frequencies(), five_state_freqs)

    def test_invalid_model_name(self):
        with pytest.raises(ValueError, match="Unknown model"):
            create_model("gtr", 4)

    def test_invalid_state_count(self):
        with pytest.raises(InvalidStateCount):
            create_model("ordinal", 1)


class TestTransitionMatrix:
    """Test transition_matrix() convenience wrapper."""

    def test_matches_model(self, skewed_freqs):
        P = transition_matrix("lewis-mk", 4, 0.5, rate=2.0, frequencies=skewed_freqs)
        model = LewisMKModel(n_states=4, frequencies=skewed_freqs)

        np.testing.assert_allclose(P, model.get_transition_probabilities(0.5, 0.0, 2.0))

    @pytest.mark.parametrize("name", ["lewis-mk", "ordinal", "nested-ordinal"])
    def test_rows_sum_to_one(self, name):
        P = transition_matrix(name, 6, 0.8)

        assert P.shape == (6, 6)
        np.testing.assert_allclose(P.sum(axis=1), 1.0, atol=1e-10)
        assert np.all(P >= 0)

    @pytest.mark.parametrize("name", ["lewis-mk", "ordinal", "nested-ordinal"])
    def test_zero_branch_length(self, name):
        np.testing.assert_allclose(transition_matrix(name, 4, 0.0), np.eye(4), atol=1e-10)
