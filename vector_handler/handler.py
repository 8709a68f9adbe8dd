"""
Ingest, retrieve and remove operations over an embedding store.

`VectorHandler` composes an `EmbeddingGenerator` and an `EmbeddingStore`.
The module-level `ingest`, `retrieve` and `remove` functions accept mapping
payloads (for example a Lambda event) and run them against a process-wide
handler built from environment configuration on first use.

Example::

    from vector_handler import VectorHandler
    from vector_handler.configuration import HandlerConfig

    handler = VectorHandler.from_config(HandlerConfig.from_env())
    handler.ingest({"tag": "greeting"}, text="hello")
    handler.retrieve({"tag": "greeting"}, text="hello", count=1)
"""

from __future__ import annotations

import json
import logging
from threading import Lock
from typing import Any, Dict, List, Mapping, Optional

from vector_handler.configuration import HandlerConfig
from vector_handler.embeddings import EmbeddingGenerator, create_embedding_generator
from vector_handler.observability import get_event_recorder
from vector_handler.store import EmbeddingStore, create_embedding_store
from vector_handler.types import (
    DEFAULT_COUNT,
    DEFAULT_THRESHOLD,
    IngestEvent,
    RemoveEvent,
    RetrieveEvent,
)

LOGGER = logging.getLogger(__name__)
RECORDER = get_event_recorder("handler")


def serialize_metadata(metadata: Any) -> str:
    """Serialize metadata to its canonical JSON text form."""
    return json.dumps(metadata, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class VectorHandler:
    """Runs the embed-then-store pipelines for the three public operations."""

    def __init__(self, generator: EmbeddingGenerator, store: EmbeddingStore) -> None:
        self.generator = generator
        self.store = store

    @classmethod
    def from_config(cls, config: HandlerConfig) -> "VectorHandler":
        """Build the generator and store selected by ``config``."""
        generator = create_embedding_generator(config.embedding)
        store = create_embedding_store(config.database, region_name=config.embedding.aws_region)
        LOGGER.info(
            "Vector handler ready: provider=%s backend=%s table=%s",
            generator.provider,
            store.backend,
            config.database.table_name,
        )
        return cls(generator, store)

    def ingest(
        self,
        metadata: Any,
        text: Optional[str] = None,
        image: Optional[str] = None,
    ) -> None:
        embedding = self.generator.generate(text=text, image=image)
        self.store.insert(serialize_metadata(metadata), embedding)
        RECORDER.record("ingest.complete", {"dimensions": len(embedding)})

    def retrieve(
        self,
        metadata: Any,
        text: Optional[str] = None,
        image: Optional[str] = None,
        threshold: float = DEFAULT_THRESHOLD,
        count: int = DEFAULT_COUNT,
    ) -> Dict[str, List[Dict[str, Any]]]:
        """
        Return the stored records most similar to the input.

        Returns:
            ``{"results": [{"id", "metadata", "score"}, ...]}`` ordered from
            most to least similar
        """
        embedding = self.generator.generate(text=text, image=image)
        results = self.store.query(serialize_metadata(metadata), embedding, threshold, count)
        RECORDER.record(
            "retrieve.complete",
            {"threshold": threshold, "count": count, "result_count": len(results)},
        )
        return {"results": [result.to_dict() for result in results]}

    def remove(self, metadata: Any) -> None:
        # Deletion is filter-only; no embedding is generated.
        self.store.remove(serialize_metadata(metadata))
        RECORDER.record("remove.complete", {})

    def close(self) -> None:
        self.store.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


_DEFAULT_HANDLER: Optional[VectorHandler] = None
_DEFAULT_HANDLER_LOCK = Lock()


def get_default_handler() -> VectorHandler:
    """Return the process-wide handler, building it from the environment once."""
    global _DEFAULT_HANDLER
    with _DEFAULT_HANDLER_LOCK:
        if _DEFAULT_HANDLER is None:
            _DEFAULT_HANDLER = VectorHandler.from_config(HandlerConfig.from_env())
        return _DEFAULT_HANDLER


def set_default_handler(handler: Optional[VectorHandler]) -> None:
    """Replace the process-wide handler."""
    global _DEFAULT_HANDLER
    with _DEFAULT_HANDLER_LOCK:
        _DEFAULT_HANDLER = handler


def reset_default_handler() -> None:
    """Close and forget the process-wide handler."""
    global _DEFAULT_HANDLER
    with _DEFAULT_HANDLER_LOCK:
        if _DEFAULT_HANDLER is not None:
            _DEFAULT_HANDLER.close()
        _DEFAULT_HANDLER = None


def ingest(event: Mapping[str, Any]) -> None:
    request = IngestEvent.from_dict(event)
    get_default_handler().ingest(request.metadata, text=request.text, image=request.image)


def retrieve(event: Mapping[str, Any]) -> Dict[str, List[Dict[str, Any]]]:
    request = RetrieveEvent.from_dict(event)
    return get_default_handler().retrieve(
        request.metadata,
        text=request.text,
        image=request.image,
        threshold=request.threshold,
        count=request.count,
    )


def remove(event: Mapping[str, Any]) -> None:
    request = RemoveEvent.from_dict(event)
    get_default_handler().remove(request.metadata)
