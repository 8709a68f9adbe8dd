"""Pydantic models for API request/response schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from vector_handler.types import DEFAULT_COUNT, DEFAULT_THRESHOLD


class ErrorResponse(BaseModel):
    """Standard error response."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Check timestamp")


class IngestRequest(BaseModel):
    """Request to embed an input and store it with metadata."""

    metadata: Any = Field(..., description="JSON metadata stored with the embedding")
    text: Optional[str] = Field(None, description="Text to embed")
    image: Optional[str] = Field(None, description="Base64-encoded image to embed")


class RetrieveRequest(BaseModel):
    """Request for the stored records nearest to an input."""

    metadata: Any = Field(..., description="Containment filter on stored metadata")
    text: Optional[str] = Field(None, description="Text to embed")
    image: Optional[str] = Field(None, description="Base64-encoded image to embed")
    threshold: float = Field(DEFAULT_THRESHOLD, ge=-1.0, le=1.0, description="Minimum similarity score")
    count: int = Field(DEFAULT_COUNT, ge=1, description="Maximum number of results")


class RemoveRequest(BaseModel):
    """Request to delete every record matching a metadata filter."""

    metadata: Any = Field(..., description="Containment filter on stored metadata")


class SimilarityResultModel(BaseModel):
    """One matched record."""

    id: str = Field(..., description="Store-assigned record identifier")
    metadata: Any = Field(None, description="Stored metadata")
    score: float = Field(..., description="Cosine similarity, higher is more similar")


class RetrieveResponse(BaseModel):
    """Matched records ordered from most to least similar."""

    results: List[SimilarityResultModel] = Field(default_factory=list)
