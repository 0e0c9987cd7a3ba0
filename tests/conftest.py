"""
Pytest configuration and common fixtures for scoregc tests.
"""
import tempfile
from pathlib import Path

import matplotlib
import pytest

matplotlib.use("Agg")

from scoregc.models import FactorAttributes, ScoreRecord  # noqa: E402


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def scenario_records():
    """Three factors, the second one without a Z-score."""
    return [
        ScoreRecord(id="T1", zscore=2.0),
        ScoreRecord(id="T2", zscore=None),
        ScoreRecord(id="T3", zscore=-1.0),
    ]


@pytest.fixture
def scenario_attributes():
    """Attributes for the scored factors of ``scenario_records``."""
    return {
        "T1": FactorAttributes(id="T1", name="TF1", gc_content=0.6),
        "T3": FactorAttributes(id="T3", name="TF3", gc_content=0.4),
    }
