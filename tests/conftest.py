"""
Shared pytest fixtures.

Every test runs in its own temporary directory with a fresh configuration
manager and no TALENTMATCH_* variables, so local .env or config files never
leak into results.
"""

import os
from unittest.mock import MagicMock

import pytest
import requests

from talentmatch.config import ConfigManager, get_config_manager
from talentmatch.embeddings import CharacterHashEncoder
from talentmatch.store import InMemoryStore


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Fresh configuration rooted in a temporary directory."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("TALENTMATCH_"):
            monkeypatch.delenv(key)

    manager = ConfigManager(str(tmp_path))
    monkeypatch.setattr(get_config_manager, "_instance", manager, raising=False)
    yield manager


@pytest.fixture
def encoder():
    return CharacterHashEncoder(dimension=64, scale=100.0)


@pytest.fixture
def store():
    return InMemoryStore()


def make_response(status_code=200, payload=None, json_error=False):
    """Build a fake requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def mock_session():
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def response_factory():
    return make_response
