"""
Pytest configuration and shared fixtures.
"""

import numpy as np
import pytest
from typer.testing import CliRunner


@pytest.fixture
def cli_runner():
    """CLI test runner for Typer apps."""
    return CliRunner()


@pytest.fixture
def skewed_freqs():
    """Non-uniform stationary frequencies for four states."""
    return np.array([0.1, 0.2, 0.3, 0.4])


@pytest.fixture
def five_state_freqs():
    """Non-uniform stationary frequencies for five states."""
    return np.array([0.1, 0.2, 0.3, 0.25, 0.15])
