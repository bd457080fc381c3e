"""
morphmodels: substitution models for discrete morphological characters.

Continuous-time Markov chain models that give transition probabilities
along a branch of a phylogenetic tree for characters with a small number
of discrete states.

Quick Start
-----------
Lewis Mk with equal frequencies:

>>> from morphmodels import LewisMKModel
>>> model = LewisMKModel(n_states=4)
>>> P = model.get_transition_probabilities(1.0, 0.0, 1.0)

Ordered characters:

>>> from morphmodels import create_model
>>> model = create_model("ordinal", 5)
>>> Q = model.get_rate_matrix()

Examples
--------
>>> # Supplied stationary frequencies
>>> model = LewisMKModel(n_states=4, frequencies=[0.1, 0.2, 0.3, 0.4])
>>> model.get_frequencies()
array([0.1, 0.2, 0.3, 0.4])
"""

__version__ = "0.1.0"

# High-level API
from .api import create_model, transition_matrix

# Models
from .models import (
    DataKind,
    SubstitutionModel,
    FrequencyState,
    LewisMKModel,
    GeneralSubstitutionModel,
    RelativeRateScheme,
    ordinal_model,
    nested_ordinal_model,
    ordinal_relative_rates,
    nested_ordinal_relative_rates,
)

# Errors
from .models.errors import FrequencyLengthMismatch, InvalidStateCount

__all__ = [
    # Simple API
    "create_model",
    "transition_matrix",

    # Models
    "SubstitutionModel",
    "LewisMKModel",
    "GeneralSubstitutionModel",
    "ordinal_model",
    "nested_ordinal_model",

    # Building blocks
    "DataKind",
    "FrequencyState",
    "RelativeRateScheme",
    "ordinal_relative_rates",
    "nested_ordinal_relative_rates",

    # Errors
    "InvalidStateCount",
    "FrequencyLengthMismatch",

    # Version
    "__version__",
]
