"""Pytest configuration and shared fixtures."""

import pytest

# The attospan testing plugin is registered via a ``pytest11`` entry
# point (pyproject.toml) for external consumers.  In our own test
# suite we disable it (``-p no:attospan``) and load it explicitly here
# instead, so that coverage tracing sees the attospan import chain.
pytest_plugins = ["attospan.testing._plugin"]


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
