"""
Configuration primitives for the vector handler.

`HandlerConfig` is the single structure that the embedding generator, the
embedding store and the orchestration layer are built from. It is read once
per process, either from the environment::

    from vector_handler.configuration import HandlerConfig

    config = HandlerConfig.from_env()
    print(config.database.backend)

or from a user supplied ``config.py`` file::

    from vector_handler.configuration import load_config_from_file

    config = load_config_from_file("/path/to/config.py")

The file must define a variable named ``VECTOR_HANDLER_CONFIG`` that is an
instance of :class:`HandlerConfig`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, MutableMapping

from vector_handler.errors import ConfigurationError


CONFIG_SYMBOL_NAME = "VECTOR_HANDLER_CONFIG"

PROVIDER_BEDROCK = "bedrock"
PROVIDER_OPENAI = "openai"

BACKEND_PGVECTOR = "pgvector"
BACKEND_RDS_DATA = "rds-data"
BACKEND_MEMORY = "memory"
STORE_BACKENDS = (BACKEND_PGVECTOR, BACKEND_RDS_DATA, BACKEND_MEMORY)

DEFAULT_BEDROCK_MODEL = "amazon.titan-embed-image-v1"
DEFAULT_OPENAI_MODEL = "text-embedding-ada-002"
DEFAULT_TABLE_NAME = "embeddings"


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(slots=True)
class DatabaseSettings:
    """Where embeddings are persisted."""

    table_name: str = DEFAULT_TABLE_NAME
    backend: str | None = None
    database_url: str | None = None
    cluster_arn: str | None = None
    secret_arn: str | None = None
    database_name: str | None = None
    embedding_dimensions: int | None = None

    def __post_init__(self) -> None:
        if self.backend is not None and self.backend not in STORE_BACKENDS:
            raise ConfigurationError(
                f"Unknown store backend {self.backend!r}; "
                f"expected one of {', '.join(STORE_BACKENDS)}"
            )

    @property
    def resolved_backend(self) -> str:
        """Return the explicit backend, or infer one from the settings present."""
        if self.backend:
            return self.backend
        if self.database_url:
            return BACKEND_PGVECTOR
        return BACKEND_RDS_DATA


@dataclass(slots=True)
class EmbeddingSettings:
    """Which embedding provider to call and how to reach it."""

    provider: str = PROVIDER_BEDROCK
    model: str = DEFAULT_BEDROCK_MODEL
    openai_model: str = DEFAULT_OPENAI_MODEL
    openai_api_key: str | None = field(default=None, repr=False)
    aws_region: str | None = None

    def __post_init__(self) -> None:
        # Anything other than "openai" selects the hosted multimodal provider.
        self.provider = (self.provider or PROVIDER_BEDROCK).strip().lower()
        if self.provider != PROVIDER_OPENAI:
            self.provider = PROVIDER_BEDROCK


@dataclass(slots=True)
class ObservabilitySettings:
    """Logging and event configuration."""

    log_level: str = "INFO"
    enable_events: bool = True


@dataclass(slots=True)
class HandlerConfig:
    """
    Root configuration for the vector handler.

    Attributes:
        database: Store backend and connection identifiers.
        embedding: Embedding provider selection and credentials.
        observability: Logging and event configuration.
    """

    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    embedding: EmbeddingSettings = field(default_factory=EmbeddingSettings)
    observability: ObservabilitySettings = field(default_factory=ObservabilitySettings)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "HandlerConfig":
        """
        Build a configuration from environment variables.

        Recognised variables: ``CLUSTER_ARN``, ``SECRET_ARN``,
        ``DATABASE_NAME``, ``TABLE_NAME``, ``DATABASE_URL``,
        ``STORE_BACKEND``, ``EMBEDDING_DIMENSIONS``, ``MODEL``,
        ``MODEL_PROVIDER``, ``OPENAI_MODEL``, ``OPENAI_API_KEY``,
        ``AWS_REGION`` and ``LOG_LEVEL``.

        Missing identifiers are not an error here; they are reported when the
        generator or store that needs them is constructed.
        """
        env = os.environ if environ is None else environ

        def read(name: str) -> str | None:
            return _blank_to_none(env.get(name))

        dimensions = read("EMBEDDING_DIMENSIONS")
        try:
            embedding_dimensions = int(dimensions) if dimensions else None
        except ValueError as exc:
            raise ConfigurationError(
                f"EMBEDDING_DIMENSIONS must be an integer, got {dimensions!r}"
            ) from exc

        database = DatabaseSettings(
            table_name=read("TABLE_NAME") or DEFAULT_TABLE_NAME,
            backend=read("STORE_BACKEND"),
            database_url=read("DATABASE_URL"),
            cluster_arn=read("CLUSTER_ARN"),
            secret_arn=read("SECRET_ARN"),
            database_name=read("DATABASE_NAME"),
            embedding_dimensions=embedding_dimensions,
        )
        embedding = EmbeddingSettings(
            provider=read("MODEL_PROVIDER") or PROVIDER_BEDROCK,
            model=read("MODEL") or DEFAULT_BEDROCK_MODEL,
            openai_model=read("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
            openai_api_key=read("OPENAI_API_KEY"),
            aws_region=read("AWS_REGION") or read("AWS_DEFAULT_REGION"),
        )
        observability = ObservabilitySettings(
            log_level=(read("LOG_LEVEL") or "INFO").upper(),
        )
        return cls(
            database=database,
            embedding=embedding,
            observability=observability,
        )


def load_config_from_file(path: Path | str) -> HandlerConfig:
    """
    Execute a user provided config module and return ``HandlerConfig``.

    The target file must define a global named ``VECTOR_HANDLER_CONFIG`` that
    is an instance of :class:`HandlerConfig`.
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    namespace: MutableMapping[str, Any] = {}
    code = path.read_text()
    compiled = compile(code, str(path), "exec")
    exec(compiled, namespace, namespace)  # noqa: S102 (exec used for config loading)

    if CONFIG_SYMBOL_NAME not in namespace:
        raise ConfigurationError(
            f"Configuration file {path} must define `{CONFIG_SYMBOL_NAME}`"
        )

    config_obj = namespace[CONFIG_SYMBOL_NAME]
    if not isinstance(config_obj, HandlerConfig):
        raise ConfigurationError(
            f"{CONFIG_SYMBOL_NAME} in {path} must be a HandlerConfig, "
            f"got {type(config_obj)!r}"
        )

    return config_obj


__all__ = [
    "BACKEND_MEMORY",
    "BACKEND_PGVECTOR",
    "BACKEND_RDS_DATA",
    "CONFIG_SYMBOL_NAME",
    "ConfigurationError",
    "DatabaseSettings",
    "EmbeddingSettings",
    "HandlerConfig",
    "ObservabilitySettings",
    "PROVIDER_BEDROCK",
    "PROVIDER_OPENAI",
    "load_config_from_file",
]
