"""
Exceptions raised while constructing or refreshing substitution models.

Both errors subclass ValueError, so code that already guards model
construction with ``except ValueError`` keeps working.
"""


class InvalidStateCount(ValueError):
    """Number of character states is not an integer of at least 2."""

    def __init__(self, n_states):
        self.n_states = n_states
        super().__init__(
            f"The number of states should be at least 2 but is {n_states}. "
            "This may be due to a site in the alignment having only 1 state, "
            "which can be fixed by removing the site from the alignment."
        )


class FrequencyLengthMismatch(ValueError):
    """Stationary frequency vector length differs from the number of states."""

    def __init__(self, n_frequencies: int, n_states: int):
        self.n_frequencies = n_frequencies
        self.n_states = n_states
        super().__init__(
            f"number of stationary frequencies ({n_frequencies}) does not "
            f"match number of states ({n_states})"
        )
