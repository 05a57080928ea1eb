"""
Pytest configuration and fixtures for vrac-pipeline tests

This module provides shared fixtures for unit, integration, and E2E tests.
Export builders live in export_builders.py.
"""
from pathlib import Path

import pytest
from export_builders import FIXED_NOW

from src.core.models import SourceMapping


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that run the pipeline against temporary export trees"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests through the command-line interface"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# FIXTURES
# =======================

@pytest.fixture
def vrac_root(tmp_path) -> Path:
    """Empty VRAC export tree"""
    root = tmp_path / "VRAC"
    root.mkdir()
    return root


@pytest.fixture
def output_path(tmp_path) -> Path:
    """Artifact destination inside a not-yet-existing directory"""
    return tmp_path / "data" / "vrac" / "processed.json"


@pytest.fixture
def tanda_2024_hint() -> SourceMapping:
    """Mapping row for the Tanda 2024 top-20 export"""
    return SourceMapping(
        file="ETAT_2080QTE6.csv",
        subdir="TANDA/2080",
        dialect="rank_limited",
        pharmacy_id="tanda",
        period_label="Aug–Dec 2024",
        year=2024,
    )


@pytest.fixture
def fixed_clock():
    """Deterministic run timestamp"""
    return lambda: FIXED_NOW


@pytest.fixture
def repo_root() -> Path:
    return Path(__file__).resolve().parent.parent
