"""Pytest configuration to make the ``src`` layout importable without installing.

This ensures ``import drop_series_plotter`` works when tests are run from the
repository root or other locations.
"""

import os
import sys

import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")

if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)


@pytest.fixture(autouse=True)
def _isolated_log(tmp_path):
    """Keep diagnostics out of the home directory during tests."""
    from drop_series_plotter.utils.log import configure_log_path

    path = configure_log_path(tmp_path / "test.log")
    yield path
    configure_log_path(None)
