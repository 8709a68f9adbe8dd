"""Exception hierarchy for vector handler operations."""


class VectorHandlerError(Exception):
    """Base error for vector handler failures."""


class ProviderError(VectorHandlerError):
    """Raised when the embedding provider call fails or rejects its input."""


class StoreError(VectorHandlerError):
    """Raised when the embedding store cannot complete a statement."""


class ConfigurationError(VectorHandlerError, RuntimeError):
    """Raised when required configuration is missing or invalid."""


class InvalidInputError(ProviderError):
    """Raised when the input cannot be embedded by the configured provider."""
