"""
High-level API for building morphological substitution models.

This module maps model names to constructors so that scripts and the
command line can build a model from a name, a state count and optional
frequencies.
"""

from typing import Callable, Dict, Optional, Sequence

import numpy as np

from .models.base import SubstitutionModel, validate_state_count
from .models.general import nested_ordinal_model, ordinal_model
from .models.lewis_mk import LewisMKModel


def _lewis_mk(n_states: int, frequencies: Optional[Sequence[float]]) -> SubstitutionModel:
    return LewisMKModel(n_states=n_states, frequencies=frequencies)


def _ordinal(n_states: int, frequencies: Optional[Sequence[float]]) -> SubstitutionModel:
    if frequencies is None:
        frequencies = np.full(n_states, 1.0 / n_states)
    return ordinal_model(n_states, frequencies)


def _nested_ordinal(n_states: int, frequencies: Optional[Sequence[float]]) -> SubstitutionModel:
    if frequencies is None:
        frequencies = np.full(n_states, 1.0 / n_states)
    return nested_ordinal_model(n_states, frequencies)


MODELS: Dict[str, Callable[[int, Optional[Sequence[float]]], SubstitutionModel]] = {
    "lewis-mk": _lewis_mk,
    "ordinal": _ordinal,
    "nested-ordinal": _nested_ordinal,
}


def normalize_model_name(model: str) -> str:
    """
    Canonical model name: lower case with '-' separators.

    Raises
    ------
    ValueError
        If the model name is not recognized
    """
    name = model.strip().lower().replace("_", "-")
    if name == "mk":
        name = "lewis-mk"
    if name not in MODELS:
        raise ValueError(
            f"Unknown model '{model}'. Valid models: {', '.join(MODELS)}"
        )
    return name


def create_model(
    model: str,
    n_states: int,
    frequencies: Optional[Sequence[float]] = None,
) -> SubstitutionModel:
    """
    Build a substitution model by name.

    Parameters
    ----------
    model : str
        One of "lewis-mk" (alias "mk"), "ordinal" or "nested-ordinal";
        case-insensitive, '_' and '-' are interchangeable
    n_states : int
        Number of character states (>= 2)
    frequencies : sequence of float, optional
        Stationary frequencies. Lewis Mk uses uniform frequencies in closed
        form when omitted; the ordinal models use an explicit uniform vector.

    Returns
    -------
    SubstitutionModel

    Examples
    --------
    >>> model = create_model("ordinal", 5)
    >>> float(model.get_relative_rates()[0])
    1.0
    """
    name = normalize_model_name(model)
    n_states = validate_state_count(n_states)
    return MODELS[name](n_states, frequencies)


def transition_matrix(
    model: str,
    n_states: int,
    branch_length: float,
    rate: float = 1.0,
    frequencies: Optional[Sequence[float]] = None,
) -> np.ndarray:
    """
    Transition probability matrix for a single branch.

    Parameters
    ----------
    model : str
        Model name, see :func:`create_model`
    n_states : int
        Number of character states
    branch_length : float
        Elapsed time along the branch
    rate : float, default=1.0
        Rate multiplier
    frequencies : sequence of float, optional
        Stationary frequencies

    Returns
    -------
    np.ndarray, shape (n_states, n_states)
    """
    substitution_model = create_model(model, n_states, frequencies)
    return substitution_model.get_transition_probabilities(branch_length, 0.0, rate)
