"""
EmbeddingGenerator: Abstract base class for embedding providers.

Every provider turns optional text and/or image input into a vector of
floats. The orchestration layer only ever talks to this interface, so new
providers can be added without touching it.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from vector_handler.errors import ProviderError
from vector_handler.observability import get_event_recorder
from vector_handler.types import Embedding

EMBEDDINGS_RECORDER = get_event_recorder("embeddings")


class EmbeddingGenerator(ABC):
    """
    Abstract base class for embedding providers.

    Example:
        >>> from vector_handler.embeddings import BedrockEmbeddingGenerator
        >>>
        >>> generator = BedrockEmbeddingGenerator(model="amazon.titan-embed-image-v1")
        >>> vector = generator.generate(text="hello")
    """

    #: Short provider name used in events and log lines.
    provider: str = ""

    @abstractmethod
    def generate(self, text: Optional[str] = None, image: Optional[str] = None) -> Embedding:
        """
        Compute an embedding for the given input.

        Args:
            text: Optional text to embed
            image: Optional base64-encoded image to embed

        Returns:
            Embedding vector exactly as returned by the provider

        Raises:
            ProviderError: If the input is unusable for this provider or the
                provider call fails
        """

    def _emit_event(self, name: str, payload: Optional[Dict[str, Any]] = None) -> None:
        base_payload: Dict[str, Any] = {"provider": self.provider}
        if payload:
            base_payload.update(payload)
        EMBEDDINGS_RECORDER.record(name, base_payload)

    def _usable_embedding(self, embedding: Any, model: str) -> Embedding:
        """Return ``embedding`` if it is a non-empty list, else raise ``ProviderError``."""
        if not isinstance(embedding, list) or not embedding:
            self._emit_event("generate.error", {"model": model, "error": "no usable embedding"})
            raise ProviderError(
                f"{self.provider} response for {model} has no usable embedding: {embedding!r}"
            )
        return embedding
