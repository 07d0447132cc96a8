"""Shared test fixtures and configuration for backend tests.

All tests run against the in-memory messaging client, so no Telegram
credentials or network access are needed.
"""
import pytest
from fastapi.testclient import TestClient

from filestream.ingest.service import IngestionPipeline
from filestream.links.presentation import LinkBuilder
from filestream.main import app
from filestream.messaging.memory import InMemoryMessagingClient
from filestream.registry.service import FileRegistry, set_registry
from filestream.retrieval.router import configure
from filestream.retrieval.service import RetrievalPipeline

STORAGE_CHAT = "storage"
USER_CHAT = 4242
BASE_URL = "http://testserver"


@pytest.fixture
def messaging():
    return InMemoryMessagingClient()


@pytest.fixture
def registry():
    return FileRegistry()


@pytest.fixture
def links():
    return LinkBuilder(BASE_URL)


@pytest.fixture
def ingestion(messaging, registry, links):
    return IngestionPipeline(messaging, registry, links, STORAGE_CHAT)


@pytest.fixture
def retrieval(messaging, registry):
    return RetrievalPipeline(messaging, registry, STORAGE_CHAT)


@pytest.fixture
def api_client(retrieval, links, registry):
    """TestClient wired to the fixture registry and pipelines.

    The lifespan is not run (no ``with`` block), so nothing connects to
    Telegram; the globals are installed and cleared here instead.
    """
    configure(retrieval, links)
    set_registry(registry)
    yield TestClient(app)
    configure(None, None)
    set_registry(None)
