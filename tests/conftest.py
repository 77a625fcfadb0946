"""Pytest configuration.

Settings are read from the environment at import time, so test defaults are
set here before anything from the app is imported.
"""

import os
import tempfile

os.environ.setdefault("OPENAI_API_KEY", "sk-test-key")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(tempfile.gettempdir(), 'lastnext24_test.db')}"
os.environ.setdefault("CORS_ORIGINS", "*")

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from main import app
from app.data.organization import default_snapshot
from app.services.cache import response_cache
from app.services.storage_backends import InMemoryStore
from app.utils.hierarchy import HierarchyManager
from app.utils.session import get_openai_client_factory, get_report_store


def make_completion(content):
    """Shape of a chat completion as far as the services read it"""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def snapshot():
    return default_snapshot()


@pytest.fixture
def hierarchy(snapshot):
    return HierarchyManager(snapshot)


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def openai_client():
    """Stand-in for AsyncOpenAI with chat and audio endpoints mocked"""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=make_completion("Mocked model answer"))
    client.audio.transcriptions.create = AsyncMock(return_value="Mocked transcription")
    return client


@pytest.fixture(autouse=True)
def clear_response_cache():
    response_cache.clear()
    yield
    response_cache.clear()


@pytest.fixture(scope="session")
def app_client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def client(app_client, memory_store, openai_client):
    """API client with in-memory report storage and a mocked OpenAI client"""
    app.dependency_overrides[get_report_store] = lambda: memory_store
    app.dependency_overrides[get_openai_client_factory] = lambda: (lambda: openai_client)
    yield app_client
    app.dependency_overrides.clear()
