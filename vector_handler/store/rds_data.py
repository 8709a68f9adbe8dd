"""
RdsDataStore: Aurora Data API implementation of EmbeddingStore.

The Data API binds the metadata as a ``JSON`` typed parameter but cannot
bind vectors, so the embedding is written into the statement as a numeric
``ARRAY[...]`` literal. Every component goes through ``float`` first and the
table name is checked as an identifier at construction.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoRegionError

from vector_handler.configuration import DEFAULT_TABLE_NAME, DatabaseSettings
from vector_handler.errors import ConfigurationError, StoreError
from vector_handler.store.base import EmbeddingStore, validate_table_name
from vector_handler.types import DEFAULT_COUNT, DEFAULT_THRESHOLD, Embedding, SimilarityResult

LOGGER = logging.getLogger(__name__)


def vector_literal(embedding: Embedding) -> str:
    """Render an embedding as a PostgreSQL ``ARRAY[...]`` literal."""
    return "ARRAY[" + ",".join(repr(float(value)) for value in embedding) + "]"


def _field_value(field: Mapping[str, Any]) -> Any:
    """Unwrap a Data API field such as ``{"stringValue": "..."}``."""
    if field.get("isNull"):
        return None
    for key in ("stringValue", "longValue", "doubleValue", "booleanValue"):
        if key in field:
            return field[key]
    raise StoreError(f"Unsupported Data API field: {sorted(field)}")


class RdsDataStore(EmbeddingStore):
    """
    Data API implementation of EmbeddingStore.

    Example:
        >>> store = RdsDataStore(
        ...     cluster_arn="arn:aws:rds:...:cluster:vectors",
        ...     secret_arn="arn:aws:secretsmanager:...:secret:vectors",
        ...     database_name="vectors",
        ...     table_name="embeddings",
        ... )
        >>> store.remove('{"source": "stale"}')
    """

    backend = "rds-data"

    def __init__(
        self,
        cluster_arn: Optional[str] = None,
        secret_arn: Optional[str] = None,
        database_name: Optional[str] = None,
        table_name: str = DEFAULT_TABLE_NAME,
        *,
        region_name: Optional[str] = None,
        client: Any = None,
    ) -> None:
        """
        Initialize RdsDataStore.

        Args:
            cluster_arn: ARN of the Aurora cluster
            secret_arn: ARN of the Secrets Manager secret holding DB credentials
            database_name: Database on the cluster
            table_name: Table holding the embeddings
            region_name: Optional AWS region (defaults to the ambient AWS config)
            client: Optional pre-built ``rds-data`` client

        Raises:
            ConfigurationError: If an identifier is missing or the table name is invalid
        """
        missing = [
            name
            for name, value in (
                ("CLUSTER_ARN", cluster_arn),
                ("SECRET_ARN", secret_arn),
                ("DATABASE_NAME", database_name),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Missing configuration for the rds-data store backend: {', '.join(missing)}"
            )
        self.cluster_arn = cluster_arn
        self.secret_arn = secret_arn
        self.database_name = database_name
        self.table_name = validate_table_name(table_name)
        if client is None:
            try:
                client = boto3.client("rds-data", region_name=region_name)
            except NoRegionError as exc:
                raise ConfigurationError(
                    "No AWS region configured for the Data API. Set AWS_REGION."
                ) from exc
        self._client = client
        self._emit_event("init.complete", {"table": self.table_name})

    @classmethod
    def from_settings(
        cls,
        settings: DatabaseSettings,
        region_name: Optional[str] = None,
    ) -> "RdsDataStore":
        return cls(
            cluster_arn=settings.cluster_arn,
            secret_arn=settings.secret_arn,
            database_name=settings.database_name,
            table_name=settings.table_name,
            region_name=region_name,
        )

    def _execute(self, operation: str, sql: str, metadata: str) -> Dict[str, Any]:
        self._emit_event(f"{operation}.start", {"table": self.table_name})
        try:
            response = self._client.execute_statement(
                resourceArn=self.cluster_arn,
                secretArn=self.secret_arn,
                database=self.database_name,
                sql=sql,
                parameters=[
                    {
                        "name": "metadata",
                        "value": {"stringValue": metadata},
                        "typeHint": "JSON",
                    }
                ],
            )
        except (BotoCoreError, ClientError) as exc:
            self._emit_event(f"{operation}.error", {"error": str(exc)})
            raise StoreError(f"Data API {operation} on {self.table_name} failed: {exc}") from exc
        return response

    def insert(self, metadata: str, embedding: Embedding) -> None:
        sql = (
            f"INSERT INTO {self.table_name} (embedding, metadata) "
            f"VALUES ({vector_literal(embedding)}, :metadata)"
        )
        self._execute("insert", sql, metadata)
        self._emit_event("insert.complete", {"table": self.table_name})

    def query(
        self,
        metadata: str,
        embedding: Embedding,
        threshold: float = DEFAULT_THRESHOLD,
        count: int = DEFAULT_COUNT,
    ) -> List[SimilarityResult]:
        distance = f"embedding <=> ({vector_literal(embedding)})::vector"
        sql = (
            f"SELECT id, metadata, {distance} AS score FROM {self.table_name} "
            f"WHERE {distance} < {float(1 - threshold)!r} "
            f"AND metadata @> :metadata "
            f"ORDER BY {distance} "
            f"LIMIT {int(count)}"
        )
        response = self._execute("query", sql, metadata)

        results = []
        for record in response.get("records") or []:
            row_id, row_metadata, row_distance = (_field_value(field) for field in record[:3])
            results.append(
                SimilarityResult(
                    id=str(row_id),
                    metadata=json.loads(row_metadata) if row_metadata is not None else None,
                    score=1 - float(row_distance),
                )
            )
        self._emit_event("query.complete", {"result_count": len(results)})
        return results

    def remove(self, metadata: str) -> None:
        sql = f"DELETE FROM {self.table_name} WHERE metadata @> :metadata"
        response = self._execute("remove", sql, metadata)
        deleted = response.get("numberOfRecordsUpdated", 0)
        LOGGER.debug("Removed %s rows from %s", deleted, self.table_name)
        self._emit_event("remove.complete", {"deleted": deleted})

    def close(self) -> None:
        self._emit_event("close.complete", {})
