"""
Unit tests for general substitution models with ordinal rate layouts.
"""

import numpy as np
import pytest

from morphmodels.core.matrix import (
    check_detailed_balance,
    eigen_decompose_rev,
    matrix_exponential,
)
from morphmodels.models import (
    DataKind,
    GeneralSubstitutionModel,
    RelativeRateScheme,
    nested_ordinal_model,
    ordinal_model,
)
from morphmodels.models.errors import FrequencyLengthMismatch, InvalidStateCount


EQUAL_FIVE = [0.2, 0.2, 0.2, 0.2, 0.2]


class TestConstruction:
    """Test validation and wiring."""

    def test_requires_frequencies(self):
        with pytest.raises(ValueError, match="requires stationary frequencies"):
            GeneralSubstitutionModel(4, None, "ordinal")

    def test_frequency_length_mismatch(self):
        with pytest.raises(FrequencyLengthMismatch):
            ordinal_model(5, [0.25, 0.25, 0.25, 0.25])

    def test_invalid_state_count(self):
        with pytest.raises(InvalidStateCount):
            nested_ordinal_model(1, [1.0])

    def test_scheme_from_string(self):
        model = GeneralSubstitutionModel(4, [0.25] * 4, "nested-ordinal")
        assert model.scheme is RelativeRateScheme.NESTED_ORDINAL

    def test_unknown_scheme(self):
        with pytest.raises(ValueError):
            GeneralSubstitutionModel(4, [0.25] * 4, "free")

    def test_relative_rates_are_read_only(self):
        model = ordinal_model(5, EQUAL_FIVE)
        rates = model.get_relative_rates()

        with pytest.raises(ValueError):
            rates[1] = 3.0


class TestOrdinalModel:
    """Test the ordinal model end to end."""

    def test_rate_matrix_is_tridiagonal(self):
        model = ordinal_model(5, EQUAL_FIVE)

        P = model.get_transition_probabilities(1.0, 0.0, 1.0)
        for i in range(5):
            assert abs(P[i].sum() - 1.0) < 1e-10, f"Row {i} should sum to 1.0"

        rates = model.get_relative_rates()
        assert abs(rates[0] - 1.0) < 1e-10
        assert abs(rates[19] - 1.0) < 1e-10

        Q = model.get_rate_matrix()
        assert Q[0, 2] == 0.0
        assert Q[4, 0] == 0.0
        assert Q[2, 1] > 0 and Q[2, 3] > 0

    def test_rate_matrix_properties(self, five_state_freqs):
        model = ordinal_model(5, five_state_freqs)
        Q = model.get_rate_matrix()
        pi = model.get_frequencies()

        np.testing.assert_allclose(Q.sum(axis=1), 0.0, atol=1e-12)
        np.testing.assert_allclose(-np.dot(pi, Q.diagonal()), 1.0, rtol=1e-12)
        assert check_detailed_balance(Q, pi)

    @pytest.mark.parametrize("t", [0.01, 0.5, 2.0])
    @pytest.mark.parametrize("rate", [0.5, 1.0, 3.0])
    def test_matches_matrix_exponential(self, t, rate, five_state_freqs):
        model = ordinal_model(5, five_state_freqs)
        Q = model.get_rate_matrix()

        P = model.get_transition_probabilities(t, 0.0, rate)

        np.testing.assert_allclose(P, matrix_exponential(Q, t * rate), atol=1e-10)

    def test_identity_at_zero_time(self, five_state_freqs):
        model = ordinal_model(5, five_state_freqs)
        P = model.get_transition_probabilities(2.0, 2.0, 1.0)

        np.testing.assert_allclose(P, np.eye(5), atol=1e-10)

    def test_converges_to_stationary_distribution(self, five_state_freqs):
        model = ordinal_model(5, five_state_freqs)
        P = model.get_transition_probabilities(200.0, 0.0, 1.0)

        for row in P:
            np.testing.assert_allclose(row, five_state_freqs, atol=1e-8)

    def test_short_branch_favours_neighbours(self):
        model = ordinal_model(5, EQUAL_FIVE)
        P = model.get_transition_probabilities(0.05, 0.0, 1.0)

        assert P[0, 1] > P[0, 2] > P[0, 3] > P[0, 4]

    def test_writes_into_buffer(self):
        model = ordinal_model(5, EQUAL_FIVE)
        buffer = np.zeros(25)

        result = model.get_transition_probabilities(1.0, 0.0, 1.0, buffer)

        assert result is buffer
        for i in range(5):
            assert abs(buffer[i * 5:(i + 1) * 5].sum() - 1.0) < 1e-10


class TestNestedOrdinalModel:
    """Test the nested ordinal model end to end."""

    def test_nested_ordinal_rate_matrix(self):
        model = nested_ordinal_model(5, EQUAL_FIVE)

        P = model.get_transition_probabilities(1.0, 0.0, 1.0)
        for i in range(5):
            assert abs(P[i].sum() - 1.0) < 1e-10, f"Row {i} should sum to 1.0"

        rates = model.get_relative_rates()
        for i in range(4):
            assert abs(rates[i] - 1.0) < 1e-10, f"Rate from state 0 to state {i + 1} should be 1.0"

    def test_hub_reaches_every_state(self, five_state_freqs):
        model = nested_ordinal_model(5, five_state_freqs)
        Q = model.get_rate_matrix()

        assert np.all(Q[0, 1:] > 0)
        assert np.all(Q[1:, 0] > 0)
        assert Q[1, 3] == 0.0
        assert check_detailed_balance(Q, model.get_frequencies())

    def test_matches_matrix_exponential(self, five_state_freqs):
        model = nested_ordinal_model(5, five_state_freqs)
        Q = model.get_rate_matrix()

        P = model.get_transition_probabilities(1.3, 0.3, 0.7)

        np.testing.assert_allclose(P, matrix_exponential(Q, 0.7), atol=1e-10)
        assert np.all(P >= 0)


class TestEigenSystemInjection:
    """Test the injected eigendecomposition capability and lazy updates."""

    def test_custom_eigen_system_is_used_lazily(self, five_state_freqs):
        calls = []

        def eigen_system(Q):
            calls.append(Q)
            return eigen_decompose_rev(Q, five_state_freqs)

        model = ordinal_model(5, five_state_freqs, eigen_system=eigen_system)
        assert len(calls) == 0

        P1 = model.get_transition_probabilities(1.0, 0.0, 1.0)
        P2 = model.get_transition_probabilities(0.5, 0.0, 1.0)
        assert len(calls) == 1

        reference = ordinal_model(5, five_state_freqs)
        np.testing.assert_allclose(P1, reference.get_transition_probabilities(1.0, 0.0, 1.0), atol=1e-10)
        np.testing.assert_allclose(P2, reference.get_transition_probabilities(0.5, 0.0, 1.0), atol=1e-10)

        model.on_restore()
        model.get_transition_probabilities(1.0, 0.0, 1.0)
        assert len(calls) == 2

    def test_eigen_decomposition_reconstructs_rate_matrix(self, five_state_freqs):
        model = nested_ordinal_model(5, five_state_freqs)
        eigenvalues, U, V = model.get_eigen_decomposition()

        Q = (U * eigenvalues) @ V
        np.testing.assert_allclose(np.real(Q), model.get_rate_matrix(), atol=1e-10)

    def test_frequency_change_always_needs_recalculation(self):
        source = np.array(EQUAL_FIVE)
        model = ordinal_model(5, source)
        model.get_rate_matrix()

        source[:] = [0.1, 0.2, 0.3, 0.25, 0.15]
        assert model.on_frequency_parameter_changed() is True

        np.testing.assert_allclose(model.get_rate_matrix().sum(axis=1), 0.0, atol=1e-12)
        np.testing.assert_allclose(model.get_frequencies(), source)
        P = model.get_transition_probabilities(200.0, 0.0, 1.0)
        np.testing.assert_allclose(P[2], source, atol=1e-8)


class TestCapabilities:
    """Test data kind capability checks."""

    def test_standard_data(self):
        assert ordinal_model(5, EQUAL_FIVE).can_handle(DataKind.STANDARD)

    def test_binary_only_with_two_states(self):
        assert ordinal_model(2, [0.5, 0.5]).can_handle("binary")
        assert not ordinal_model(5, EQUAL_FIVE).can_handle(DataKind.BINARY)

    def test_other_data(self):
        assert not ordinal_model(4, [0.25] * 4).can_handle(DataKind.NUCLEOTIDE)
