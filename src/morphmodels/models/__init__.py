"""
Substitution models for discrete morphological characters.

- **Lewis Mk**: equal rates with uniform or supplied frequencies, closed form
- **Ordinal**: changes only between adjacent ordered states
- **Nested ordinal**: a hub state linked to an ordered chain of states

Each model computes instantaneous rate matrices and transition probability
matrices for a branch, given elapsed time and a rate multiplier.
"""

from morphmodels.models.base import DataKind, SubstitutionModel
from morphmodels.models.errors import FrequencyLengthMismatch, InvalidStateCount
from morphmodels.models.frequencies import FrequencyState
from morphmodels.models.general import (
    GeneralSubstitutionModel,
    nested_ordinal_model,
    ordinal_model,
)
from morphmodels.models.lewis_mk import LewisMKModel
from morphmodels.models.rates import (
    RelativeRateScheme,
    nested_ordinal_relative_rates,
    ordinal_relative_rates,
)

__all__ = [
    "DataKind",
    "SubstitutionModel",
    "FrequencyLengthMismatch",
    "InvalidStateCount",
    "FrequencyState",
    "GeneralSubstitutionModel",
    "LewisMKModel",
    "RelativeRateScheme",
    "nested_ordinal_model",
    "nested_ordinal_relative_rates",
    "ordinal_model",
    "ordinal_relative_rates",
]
