"""Shared test fixtures for the BizLaunch360 test suite."""

from __future__ import annotations

import os
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest


def pytest_configure(config):
    """Set test environment variables BEFORE collection starts.

    Secrets are resolved per call, but the handlers still need something to
    resolve; no test talks to a real service.
    """
    os.environ.setdefault("LLM_GATEWAY_API_KEY", "test-gateway-key-123")
    os.environ.setdefault("OPENAI_API_KEY", "test-openai-key-456")
    os.environ.setdefault("RESEND_API_KEY", "test-resend-key-789")
    os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
    os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
    os.environ.pop("AWS_EXECUTION_ENV", None)


@pytest.fixture
def db_client():
    """A mock database client whose auth lookup returns user ``user-1``."""
    client = MagicMock()
    client.auth.get_user.return_value = SimpleNamespace(user=SimpleNamespace(id="user-1"))
    return client


@pytest.fixture
def db_result():
    """Factory fixture for query results as returned by ``execute()``."""

    def _make(*rows: dict):
        return SimpleNamespace(data=list(rows))

    return _make
