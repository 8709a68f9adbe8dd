"""Pytest configuration and shared fixtures for vector handler tests."""

import hashlib
import os
from typing import List, Optional

import pytest

from vector_handler.embeddings import EmbeddingGenerator
from vector_handler.errors import InvalidInputError
from vector_handler.handler import VectorHandler, set_default_handler
from vector_handler.observability import get_event_recorder
from vector_handler.store import InMemoryEmbeddingStore


class FakeEmbeddingGenerator(EmbeddingGenerator):
    """Deterministic generator: equal inputs always map to equal vectors."""

    provider = "fake"

    def __init__(self, dimensions: int = 8) -> None:
        self.dimensions = dimensions
        self.calls: List[tuple] = []

    def generate(self, text: Optional[str] = None, image: Optional[str] = None) -> List[float]:
        self.calls.append((text, image))
        if text is None and image is None:
            raise InvalidInputError("nothing to embed")
        digest = hashlib.sha256(f"{text}|{image}".encode("utf-8")).digest()
        return [(byte - 127.5) / 127.5 for byte in digest[: self.dimensions]]


# Pytest configuration
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires API keys or a database)",
    )


@pytest.fixture(autouse=True)
def clean_event_observers():
    """Keep observers registered by one test from leaking into the next."""
    get_event_recorder().clear_observers()
    yield
    get_event_recorder().clear_observers()
    set_default_handler(None)


@pytest.fixture
def fake_generator():
    """Provide a deterministic embedding generator."""
    return FakeEmbeddingGenerator()


@pytest.fixture
def memory_store():
    """Provide an empty in-memory embedding store."""
    return InMemoryEmbeddingStore()


@pytest.fixture
def handler(fake_generator, memory_store):
    """Provide a handler wired to the fake generator and in-memory store."""
    return VectorHandler(fake_generator, memory_store)


@pytest.fixture
def handler_env(monkeypatch):
    """Clear configuration variables so tests control the environment."""
    for name in (
        "CLUSTER_ARN",
        "SECRET_ARN",
        "DATABASE_NAME",
        "TABLE_NAME",
        "DATABASE_URL",
        "STORE_BACKEND",
        "EMBEDDING_DIMENSIONS",
        "MODEL",
        "MODEL_PROVIDER",
        "OPENAI_MODEL",
        "OPENAI_API_KEY",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def database_url():
    """Return the PostgreSQL URL for integration tests, or skip."""
    url = os.getenv("VECTOR_HANDLER_TEST_DATABASE_URL")
    if not url:
        pytest.skip("VECTOR_HANDLER_TEST_DATABASE_URL not set - skipping integration test")
    return url
