"""
Vector Handler: ingest, retrieve and remove embeddings with JSON metadata.

Main Components:
- VectorHandler: Embed-then-store pipelines for the three operations
- EmbeddingGenerator: Bedrock (multimodal) and OpenAI (text) providers
- EmbeddingStore: pgvector, Aurora Data API and in-memory backends
- HandlerConfig: Configuration read once from the environment or a config file

Example:
    >>> from vector_handler import retrieve
    >>>
    >>> retrieve({"text": "hello", "metadata": {"tag": "greeting"}, "count": 1})
    {'results': [{'id': '1', 'metadata': {'tag': 'greeting'}, 'score': 1.0}]}
"""

from vector_handler.configuration import HandlerConfig, load_config_from_file
from vector_handler.embeddings import (
    BedrockEmbeddingGenerator,
    EmbeddingGenerator,
    OpenAIEmbeddingGenerator,
    create_embedding_generator,
)
from vector_handler.errors import (
    ConfigurationError,
    InvalidInputError,
    ProviderError,
    StoreError,
    VectorHandlerError,
)
from vector_handler.handler import (
    VectorHandler,
    get_default_handler,
    ingest,
    remove,
    reset_default_handler,
    retrieve,
    set_default_handler,
)
from vector_handler.store import (
    EmbeddingStore,
    InMemoryEmbeddingStore,
    PgVectorStore,
    RdsDataStore,
    create_embedding_store,
)
from vector_handler.types import SimilarityResult

__version__ = "0.1.0"

__all__ = [
    "BedrockEmbeddingGenerator",
    "ConfigurationError",
    "EmbeddingGenerator",
    "EmbeddingStore",
    "HandlerConfig",
    "InMemoryEmbeddingStore",
    "InvalidInputError",
    "OpenAIEmbeddingGenerator",
    "PgVectorStore",
    "ProviderError",
    "RdsDataStore",
    "SimilarityResult",
    "StoreError",
    "VectorHandler",
    "VectorHandlerError",
    "create_embedding_generator",
    "create_embedding_store",
    "get_default_handler",
    "ingest",
    "load_config_from_file",
    "remove",
    "reset_default_handler",
    "retrieve",
    "set_default_handler",
]
