"""Hosted multimodal embeddings through the AWS Bedrock runtime."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoRegionError

from vector_handler.configuration import DEFAULT_BEDROCK_MODEL, EmbeddingSettings
from vector_handler.embeddings.base import EmbeddingGenerator
from vector_handler.errors import ConfigurationError, InvalidInputError, ProviderError
from vector_handler.types import Embedding

LOGGER = logging.getLogger(__name__)


class BedrockEmbeddingGenerator(EmbeddingGenerator):
    """
    Embedding generator backed by a Bedrock multimodal embedding model.

    The request body is ``{"inputText": ..., "inputImage": ...}`` with absent
    inputs left out, and the vector is read from the ``embedding`` field of
    the JSON response.
    """

    provider = "bedrock"

    def __init__(
        self,
        model: str = DEFAULT_BEDROCK_MODEL,
        *,
        region_name: Optional[str] = None,
        client: Any = None,
    ) -> None:
        """
        Initialize the generator.

        Args:
            model: Bedrock model identifier
            region_name: Optional AWS region (defaults to the ambient AWS config)
            client: Optional pre-built ``bedrock-runtime`` client

        Raises:
            ConfigurationError: If no model is given or no AWS region can be resolved
        """
        if not model:
            raise ConfigurationError("A Bedrock model identifier is required (set MODEL)")
        self.model = model
        if client is None:
            try:
                client = boto3.client("bedrock-runtime", region_name=region_name)
            except NoRegionError as exc:
                raise ConfigurationError(
                    "No AWS region configured for Bedrock. Set AWS_REGION."
                ) from exc
        self._client = client

    @classmethod
    def from_settings(cls, settings: EmbeddingSettings) -> "BedrockEmbeddingGenerator":
        return cls(model=settings.model, region_name=settings.aws_region)

    def generate(self, text: Optional[str] = None, image: Optional[str] = None) -> Embedding:
        if text is None and image is None:
            raise InvalidInputError("Bedrock embeddings need text, an image, or both")

        body: Dict[str, Any] = {}
        if text is not None:
            body["inputText"] = text
        if image is not None:
            body["inputImage"] = image

        self._emit_event(
            "generate.start",
            {"model": self.model, "has_text": text is not None, "has_image": image is not None},
        )
        try:
            response = self._client.invoke_model(
                body=json.dumps(body),
                modelId=self.model,
                contentType="application/json",
                accept="*/*",
            )
            payload = json.loads(response["body"].read())
            embedding = payload["embedding"]
        except (BotoCoreError, ClientError) as exc:
            self._emit_event("generate.error", {"model": self.model, "error": str(exc)})
            raise ProviderError(f"Bedrock invoke_model failed: {exc}") from exc
        except (KeyError, TypeError, ValueError) as exc:
            self._emit_event("generate.error", {"model": self.model, "error": str(exc)})
            raise ProviderError(
                f"Bedrock response for {self.model} has no usable embedding"
            ) from exc

        embedding = self._usable_embedding(embedding, self.model)
        LOGGER.debug("Bedrock model %s returned %d dimensions", self.model, len(embedding))
        self._emit_event(
            "generate.complete",
            {"model": self.model, "dimensions": len(embedding)},
        )
        return embedding
