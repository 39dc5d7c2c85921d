"""
Shared pytest configuration and fixtures for all tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path to enable importing project modules
# This allows tests to import from 'core', 'querykit', 'utils' without installation
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests - isolated function-level tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interactions")
    config.addinivalue_line("markers", "smoke: Smoke tests - basic functionality checks")
    config.addinivalue_line("markers", "edge_case: Edge case tests - boundary conditions")
    config.addinivalue_line("markers", "regression: Regression tests - previously fixed bugs")


@pytest.fixture
def render_config(monkeypatch):
    """
    Reset rendering settings on the shared config object for one test.
    Returns the RenderConfig so tests can flip individual flags.
    """
    from core.config import config

    monkeypatch.setattr(config.render, "strict_escaping", False)
    monkeypatch.setattr(config.render, "log_statements", False)
    monkeypatch.setattr(config.render, "log_max_length", 500)
    return config.render
