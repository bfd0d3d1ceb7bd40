"""
Pytest configuration and fixtures for all tests.
"""

import os
import sys

import pytest

# Modules live at the repository root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture(autouse=True)
def clean_digest_env(monkeypatch):
    """Keep a developer's .env or shell settings out of option defaults."""
    for name in list(os.environ):
        if name.startswith("DIGEST_"):
            monkeypatch.delenv(name, raising=False)
    yield
