"""
EmbeddingStore: Abstract base class for embedding store implementations.

This module provides the abstract base class that all store backends follow,
so the orchestration layer never depends on a particular database driver.
"""

from abc import ABC, abstractmethod
import re
from typing import Any, Dict, List, Optional

from vector_handler.errors import ConfigurationError
from vector_handler.observability import get_event_recorder
from vector_handler.types import DEFAULT_COUNT, DEFAULT_THRESHOLD, Embedding, SimilarityResult

STORE_RECORDER = get_event_recorder("store")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


def validate_table_name(table_name: Optional[str]) -> str:
    """Return the table name if it is a plain (optionally schema-qualified) identifier."""
    if not table_name or not _IDENTIFIER.match(table_name):
        raise ConfigurationError(f"Invalid or missing table name: {table_name!r}")
    return table_name


class EmbeddingStore(ABC):
    """
    Abstract base class for embedding store implementations.

    Metadata crosses this interface as canonical JSON text. On `query` and
    `remove` it is a containment filter: a record matches when its stored
    metadata is a superset of the filter.

    Example:
        >>> from vector_handler.store import InMemoryEmbeddingStore
        >>>
        >>> store = InMemoryEmbeddingStore()
        >>> store.insert('{"tag": "greeting"}', [0.1, 0.2, 0.3])
        >>> results = store.query('{"tag": "greeting"}', [0.1, 0.2, 0.3], count=1)
        >>> store.remove('{"tag": "greeting"}')
        >>> store.close()
    """

    #: Short backend name used in events and log lines.
    backend: str = ""

    @abstractmethod
    def insert(self, metadata: str, embedding: Embedding) -> None:
        """
        Append one record.

        Args:
            metadata: Metadata document as JSON text
            embedding: Embedding vector
        """

    @abstractmethod
    def query(
        self,
        metadata: str,
        embedding: Embedding,
        threshold: float = DEFAULT_THRESHOLD,
        count: int = DEFAULT_COUNT,
    ) -> List[SimilarityResult]:
        """
        Find the records closest to ``embedding`` whose metadata contains the filter.

        Args:
            metadata: Containment filter as JSON text
            embedding: Query vector
            threshold: Minimum similarity; rows need cosine distance below ``1 - threshold``
            count: Maximum number of results

        Returns:
            Results ordered by ascending distance, scored ``1 - distance``
        """

    @abstractmethod
    def remove(self, metadata: str) -> None:
        """
        Delete every record whose metadata contains the filter.

        Args:
            metadata: Containment filter as JSON text
        """

    @abstractmethod
    def close(self) -> None:
        """Release connections held by the store."""

    def _emit_event(self, name: str, payload: Optional[Dict[str, Any]] = None) -> None:
        base_payload: Dict[str, Any] = {"backend": self.backend}
        if payload:
            base_payload.update(payload)
        STORE_RECORDER.record(name, base_payload)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
