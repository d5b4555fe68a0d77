"""Pytest configuration and fixtures for desirability tests."""
import sys
from pathlib import Path

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import matplotlib

matplotlib.use("Agg")

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(42)


@pytest.fixture
def gene_stats():
    """Small per-gene statistics table (five genes)."""
    return {
        "mean_expression": np.array([9.0, 5.0, 8.0, 10.0, 7.0]),
        "expression_sd": np.array([0.5, 0.6, 0.05, 0.8, 0.3]),
        "p_value": np.array([1e-5, 1e-4, 0.001, 0.5, np.nan]),
        "mean_control": np.array([8.0, 5.0, 8.0, 10.0, 7.0]),
        "mean_treatment": np.array([10.0, 3.0, 8.5, 10.1, 8.0]),
    }


@pytest.fixture
def project_root():
    """Get the project root directory."""
    return Path(__file__).parent.parent
