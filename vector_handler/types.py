"""Shared dataclasses and type definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


Embedding = List[float]

DEFAULT_THRESHOLD = 0.0
DEFAULT_COUNT = 10


@dataclass(slots=True)
class IngestEvent:
    """Payload for storing one embedding with its metadata."""

    metadata: Any
    text: Optional[str] = None
    image: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "IngestEvent":
        return cls(
            metadata=payload["metadata"],
            text=payload.get("text"),
            image=payload.get("image"),
        )


@dataclass(slots=True)
class RetrieveEvent:
    """Payload for a filtered nearest-neighbour query."""

    metadata: Any
    text: Optional[str] = None
    image: Optional[str] = None
    threshold: float = DEFAULT_THRESHOLD
    count: int = DEFAULT_COUNT

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "RetrieveEvent":
        threshold = payload.get("threshold")
        count = payload.get("count")
        return cls(
            metadata=payload["metadata"],
            text=payload.get("text"),
            image=payload.get("image"),
            threshold=DEFAULT_THRESHOLD if threshold is None else float(threshold),
            count=DEFAULT_COUNT if count is None else int(count),
        )


@dataclass(slots=True)
class RemoveEvent:
    """Payload for deleting every record whose metadata contains the filter."""

    metadata: Any

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "RemoveEvent":
        return cls(metadata=payload["metadata"])


@dataclass(slots=True, frozen=True)
class SimilarityResult:
    """A stored record matched by a query, scored by cosine similarity."""

    id: str
    metadata: Any = field(default_factory=dict)
    score: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "metadata": self.metadata, "score": self.score}
