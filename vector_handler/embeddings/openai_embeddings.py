"""Text-only embeddings through the OpenAI API."""

from __future__ import annotations

import logging
from typing import Any, Optional

import openai

from vector_handler.configuration import DEFAULT_OPENAI_MODEL, EmbeddingSettings
from vector_handler.embeddings.base import EmbeddingGenerator
from vector_handler.errors import ConfigurationError, InvalidInputError, ProviderError
from vector_handler.types import Embedding

LOGGER = logging.getLogger(__name__)


class OpenAIEmbeddingGenerator(EmbeddingGenerator):
    """
    Embedding generator backed by an OpenAI text-embedding model.

    Only text can be embedded. Image-only input is rejected with
    ``ProviderError``; an image sent together with text is ignored.
    """

    provider = "openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_OPENAI_MODEL,
        *,
        client: Any = None,
    ) -> None:
        """
        Initialize the generator.

        Args:
            api_key: OpenAI API key
            model: OpenAI embedding model name (default: "text-embedding-ada-002")
            client: Optional pre-built ``openai.OpenAI`` client

        Raises:
            ConfigurationError: If neither an API key nor a client is provided
        """
        self.model = model
        if client is None:
            if not api_key:
                raise ConfigurationError(
                    "OpenAI API key required when MODEL_PROVIDER is 'openai'. "
                    "Set OPENAI_API_KEY."
                )
            client = openai.OpenAI(api_key=api_key)
        self._client = client

    @classmethod
    def from_settings(cls, settings: EmbeddingSettings) -> "OpenAIEmbeddingGenerator":
        return cls(api_key=settings.openai_api_key, model=settings.openai_model)

    def generate(self, text: Optional[str] = None, image: Optional[str] = None) -> Embedding:
        if text is None:
            raise InvalidInputError(
                "OpenAI embeddings are text-only; image input without text is not supported"
            )
        if image is not None:
            LOGGER.warning("Ignoring image input: %s only embeds text", self.model)

        self._emit_event("generate.start", {"model": self.model, "has_text": True})
        try:
            response = self._client.embeddings.create(
                model=self.model,
                input=text,
                encoding_format="float",
            )
            embedding = response.data[0].embedding
        except openai.OpenAIError as exc:
            self._emit_event("generate.error", {"model": self.model, "error": str(exc)})
            raise ProviderError(f"OpenAI embeddings request failed: {exc}") from exc
        except (AttributeError, IndexError) as exc:
            self._emit_event("generate.error", {"model": self.model, "error": str(exc)})
            raise ProviderError(
                f"OpenAI response for {self.model} has no embedding data"
            ) from exc

        embedding = self._usable_embedding(embedding, self.model)
        self._emit_event(
            "generate.complete",
            {"model": self.model, "dimensions": len(embedding)},
        )
        return embedding
