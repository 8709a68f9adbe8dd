"""
InMemoryEmbeddingStore: process-local implementation of EmbeddingStore.

Mirrors the PostgreSQL semantics of the other backends: cosine distance as
computed by pgvector's ``<=>`` operator and ``jsonb @>`` containment.
"""

from __future__ import annotations

import json
import math
from itertools import count as counter
from threading import RLock
from typing import Any, Dict, List, Tuple

import numpy as np

from vector_handler.errors import StoreError
from vector_handler.store.base import EmbeddingStore
from vector_handler.types import DEFAULT_COUNT, DEFAULT_THRESHOLD, Embedding, SimilarityResult


def json_contains(stored: Any, fragment: Any) -> bool:
    """Return True when ``stored @> fragment`` would hold for jsonb values."""
    if isinstance(stored, list) and not isinstance(fragment, (dict, list)):
        # Only a top-level array may contain a bare scalar.
        return any(
            not isinstance(candidate, (dict, list)) and _scalar_equal(candidate, fragment)
            for candidate in stored
        )
    return _contains(stored, fragment)


def _contains(stored: Any, fragment: Any) -> bool:
    if isinstance(fragment, dict):
        if not isinstance(stored, dict):
            return False
        return all(
            key in stored and _contains(stored[key], value)
            for key, value in fragment.items()
        )
    if isinstance(fragment, list):
        if not isinstance(stored, list):
            return False
        return all(
            any(_contains(candidate, item) for candidate in stored)
            for item in fragment
        )
    if isinstance(stored, (dict, list)):
        return False
    return _scalar_equal(stored, fragment)


def _scalar_equal(left: Any, right: Any) -> bool:
    # jsonb keeps booleans distinct from numbers.
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    return left == right


def cosine_distance(left: np.ndarray, right: np.ndarray) -> float:
    """Cosine distance in [0, 2]; NaN when either vector has zero norm."""
    norm = float(np.linalg.norm(left) * np.linalg.norm(right))
    if norm == 0.0:
        return math.nan
    return 1.0 - float(np.dot(left, right)) / norm


class InMemoryEmbeddingStore(EmbeddingStore):
    """Keeps records in a list guarded by a lock. Identifiers are sequential."""

    backend = "memory"

    def __init__(self) -> None:
        self._records: List[Tuple[str, np.ndarray, Any]] = []
        self._ids = counter(1)
        self._lock = RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def insert(self, metadata: str, embedding: Embedding) -> None:
        record = (str(next(self._ids)), np.asarray(embedding, dtype=float), json.loads(metadata))
        with self._lock:
            self._records.append(record)
        self._emit_event("insert.complete", {"dimensions": len(embedding)})

    def query(
        self,
        metadata: str,
        embedding: Embedding,
        threshold: float = DEFAULT_THRESHOLD,
        count: int = DEFAULT_COUNT,
    ) -> List[SimilarityResult]:
        fragment = json.loads(metadata)
        query_vector = np.asarray(embedding, dtype=float)
        limit = 1 - threshold
        with self._lock:
            records = list(self._records)

        scored: List[Tuple[float, str, Any]] = []
        for record_id, vector, stored in records:
            if not json_contains(stored, fragment):
                continue
            if vector.shape != query_vector.shape:
                self._emit_event("query.error", {"error": "dimension mismatch"})
                raise StoreError(
                    f"different vector dimensions {vector.shape[0]} and {query_vector.shape[0]}"
                )
            distance = cosine_distance(vector, query_vector)
            # NaN never compares below the limit, as in PostgreSQL.
            if distance < limit:
                scored.append((distance, record_id, stored))

        scored.sort(key=lambda item: item[0])
        results = [
            SimilarityResult(id=record_id, metadata=stored, score=1 - distance)
            for distance, record_id, stored in scored[: max(count, 0)]
        ]
        self._emit_event("query.complete", {"result_count": len(results)})
        return results

    def remove(self, metadata: str) -> None:
        fragment = json.loads(metadata)
        with self._lock:
            before = len(self._records)
            self._records = [
                record for record in self._records if not json_contains(record[2], fragment)
            ]
            deleted = before - len(self._records)
        self._emit_event("remove.complete", {"deleted": deleted})

    def close(self) -> None:
        with self._lock:
            self._records.clear()

    def snapshot(self) -> List[Dict[str, Any]]:
        """Return stored records as plain dictionaries."""
        with self._lock:
            return [
                {"id": record_id, "embedding": vector.tolist(), "metadata": stored}
                for record_id, vector, stored in self._records
            ]
