"""
Shared test configuration.

Clears APIARY_* environment variables so a developer's .env cannot change
app behaviour under test.
"""

import os

import pytest


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("APIARY_"):
            monkeypatch.delenv(key, raising=False)
    yield
