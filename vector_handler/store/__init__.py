"""
Embedding store backends.

- ``PgVectorStore``: SQLAlchemy + pgvector with bound vector parameters.
- ``RdsDataStore``: Aurora Data API through boto3.
- ``InMemoryEmbeddingStore``: process-local store for development and tests.

Use `create_embedding_store` to pick the backend from configuration.
"""

from typing import Optional

from vector_handler.configuration import BACKEND_MEMORY, BACKEND_PGVECTOR, DatabaseSettings
from vector_handler.store.base import EmbeddingStore, validate_table_name
from vector_handler.store.memory import InMemoryEmbeddingStore, json_contains
from vector_handler.store.pgvector import PgVectorStore
from vector_handler.store.rds_data import RdsDataStore


def create_embedding_store(
    settings: DatabaseSettings,
    region_name: Optional[str] = None,
) -> EmbeddingStore:
    """
    Build the store backend described by the settings.

    Args:
        settings: Database settings
        region_name: AWS region for the Data API backend

    Raises:
        ConfigurationError: If the selected backend is missing identifiers
    """
    backend = settings.resolved_backend
    if backend == BACKEND_MEMORY:
        return InMemoryEmbeddingStore()
    if backend == BACKEND_PGVECTOR:
        return PgVectorStore.from_settings(settings)
    return RdsDataStore.from_settings(settings, region_name=region_name)


__all__ = [
    "EmbeddingStore",
    "InMemoryEmbeddingStore",
    "PgVectorStore",
    "RdsDataStore",
    "create_embedding_store",
    "json_contains",
    "validate_table_name",
]
