"""Root pytest configuration for all tests.

Registers the custom markers used across the suite so that runs with
``--strict-markers`` accept them.
"""

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register project markers.

    slow: tests that build large fields (deselect with ``-m "not slow"``)
    """
    config.addinivalue_line(
        "markers", "slow: builds large fields; deselect with -m 'not slow'"
    )
