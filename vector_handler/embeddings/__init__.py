"""
Embedding generators for the supported providers.

The provider is a static configuration choice: `create_embedding_generator`
picks the implementation once, and callers only use the
`EmbeddingGenerator` interface afterwards.
"""

from vector_handler.configuration import PROVIDER_OPENAI, EmbeddingSettings
from vector_handler.embeddings.base import EmbeddingGenerator
from vector_handler.embeddings.bedrock import BedrockEmbeddingGenerator
from vector_handler.embeddings.openai_embeddings import OpenAIEmbeddingGenerator


def create_embedding_generator(settings: EmbeddingSettings) -> EmbeddingGenerator:
    """
    Build the embedding generator selected by the settings.

    Args:
        settings: Embedding provider settings

    Returns:
        `OpenAIEmbeddingGenerator` when the provider is ``"openai"``,
        `BedrockEmbeddingGenerator` otherwise

    Raises:
        ConfigurationError: If the selected provider is missing credentials
    """
    if settings.provider == PROVIDER_OPENAI:
        return OpenAIEmbeddingGenerator.from_settings(settings)
    return BedrockEmbeddingGenerator.from_settings(settings)


__all__ = [
    "BedrockEmbeddingGenerator",
    "EmbeddingGenerator",
    "OpenAIEmbeddingGenerator",
    "create_embedding_generator",
]
