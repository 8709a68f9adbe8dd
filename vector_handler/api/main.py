"""FastAPI application exposing ingest, retrieve and remove over HTTP."""

import logging
from datetime import datetime

from fastapi import Depends, FastAPI, Response, status
from fastapi.responses import JSONResponse

from vector_handler.api.models import (
    ErrorResponse,
    HealthResponse,
    IngestRequest,
    RemoveRequest,
    RetrieveRequest,
    RetrieveResponse,
)
from vector_handler.errors import (
    ConfigurationError,
    InvalidInputError,
    ProviderError,
    StoreError,
)
from vector_handler.handler import VectorHandler, get_default_handler

LOGGER = logging.getLogger(__name__)

app = FastAPI(
    title="Vector Handler API",
    description="Store and query embeddings with JSON metadata filters",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)


def get_handler() -> VectorHandler:
    """Dependency returning the process-wide handler."""
    return get_default_handler()


# ============================================================================
# Exception Handlers
# ============================================================================


def _error_response(status_code: int, code: str, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            code=code,
            message=str(exc),
            details={"cause": repr(exc.__cause__)} if exc.__cause__ else None,
        ).model_dump(),
    )


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request, exc):
    """The input was rejected before any provider call."""
    return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "INVALID_INPUT", exc)


@app.exception_handler(ProviderError)
async def provider_error_handler(request, exc):
    """The embedding provider failed or rejected the input."""
    LOGGER.warning("Provider error on %s: %s", request.url.path, exc)
    return _error_response(status.HTTP_502_BAD_GATEWAY, "PROVIDER_ERROR", exc)


@app.exception_handler(StoreError)
async def store_error_handler(request, exc):
    """The embedding store failed."""
    LOGGER.warning("Store error on %s: %s", request.url.path, exc)
    return _error_response(status.HTTP_502_BAD_GATEWAY, "STORE_ERROR", exc)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request, exc):
    """Required configuration is missing."""
    LOGGER.error("Configuration error on %s: %s", request.url.path, exc)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "CONFIGURATION_ERROR", exc
    )


# ============================================================================
# Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    return HealthResponse(status="healthy", timestamp=datetime.utcnow())


@app.post("/ingest", status_code=status.HTTP_204_NO_CONTENT, tags=["Embeddings"])
def ingest(request: IngestRequest, handler: VectorHandler = Depends(get_handler)):
    """Embed the input and store it with its metadata."""
    handler.ingest(request.metadata, text=request.text, image=request.image)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/retrieve", response_model=RetrieveResponse, tags=["Embeddings"])
def retrieve(request: RetrieveRequest, handler: VectorHandler = Depends(get_handler)):
    """Return stored records similar to the input whose metadata contains the filter."""
    return handler.retrieve(
        request.metadata,
        text=request.text,
        image=request.image,
        threshold=request.threshold,
        count=request.count,
    )


@app.post("/remove", status_code=status.HTTP_204_NO_CONTENT, tags=["Embeddings"])
def remove(request: RemoveRequest, handler: VectorHandler = Depends(get_handler)):
    """Delete every stored record whose metadata contains the filter."""
    handler.remove(request.metadata)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# Main Entry Point
# ============================================================================


def main():
    """Run the API server."""
    import uvicorn
    from dotenv import load_dotenv

    from vector_handler.configuration import HandlerConfig
    from vector_handler.observability import configure_logging

    load_dotenv()
    config = HandlerConfig.from_env()
    configure_logging(config.observability.log_level, enable_events=config.observability.enable_events)
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
