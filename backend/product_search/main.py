"""Product Search Backend - Main FastAPI Application

Semantic product search with optional LLM reranking.

This module creates and configures the main FastAPI application, including:
- The semantic search router
- Middleware (request ID correlation, CORS)
- Exception handlers mapping search errors to HTTP status codes
- Health and metrics endpoints
"""

import os
import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

from .config import get_settings
from .domain.ai.ports import EmbeddingError
from .domain.search.errors import (
    BackfillAlreadyRunningError,
    EmbeddingsDisabledError,
    InvalidBatchSizeError,
    InvalidLimitError,
    InvalidPriceRangeError,
    InvalidQueryError,
    OperationCancelledError,
)

# Observability
from .observability.logging_config import configure_logging
from .observability.middleware import RequestIDMiddleware
from .observability.router import router as observability_router

# API v1 Routers
from .api.v1.search.router import router as search_router

settings = get_settings()

# Configure logging
configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Product Search API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Semantic search enabled: {bool(settings.OPENAI_API_KEY) and settings.EMBEDDINGS_ENABLED}")

    yield

    logger.info("Product Search API shutting down...")


# Create FastAPI application
app = FastAPI(
    title="Product Search API",
    description="Semantic product search with embedding similarity and LLM reranking",
    version="0.1.0",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
    openapi_url="/openapi.json" if settings.ENVIRONMENT != "production" else None,
    lifespan=lifespan,
)


# =============================================================================
# MIDDLEWARE CONFIGURATION
# =============================================================================

# Request ID Middleware (must be first for proper correlation)
app.add_middleware(RequestIDMiddleware)

ALLOWED_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:8080"
).split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message},
    )


@app.exception_handler(EmbeddingsDisabledError)
async def embeddings_disabled_handler(request: Request, exc: EmbeddingsDisabledError) -> JSONResponse:
    """Feature off: not retryable until the provider is configured."""
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "semantic_search_unavailable", str(exc))


@app.exception_handler(InvalidLimitError)
@app.exception_handler(InvalidPriceRangeError)
@app.exception_handler(InvalidQueryError)
@app.exception_handler(InvalidBatchSizeError)
async def invalid_input_handler(request: Request, exc: ValueError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, "invalid_request", str(exc))


@app.exception_handler(EmbeddingError)
async def embedding_provider_handler(request: Request, exc: EmbeddingError) -> JSONResponse:
    """Provider fault: the caller may retry."""
    logger.warning(
        f"Embedding provider error on {request.method} {request.url.path}: {exc}"
    )
    return _error(status.HTTP_502_BAD_GATEWAY, "embedding_provider_error", "The embedding provider failed. Please retry.")


@app.exception_handler(BackfillAlreadyRunningError)
async def backfill_running_handler(request: Request, exc: BackfillAlreadyRunningError) -> JSONResponse:
    return _error(status.HTTP_409_CONFLICT, "backfill_already_running", str(exc))


@app.exception_handler(OperationCancelledError)
async def cancelled_handler(request: Request, exc: OperationCancelledError) -> JSONResponse:
    return _error(status.HTTP_409_CONFLICT, "operation_cancelled", str(exc))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors.

    Returns a structured error response with field-level details.
    """
    logger.warning(
        f"Validation error on {request.method} {request.url.path}",
        extra={"errors": exc.errors()}
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request,
    exc: SQLAlchemyError
) -> JSONResponse:
    """Handle database errors.

    Logs the full error but returns a generic message to prevent
    information leakage.
    """
    logger.error(
        f"Database error on {request.method} {request.url.path}",
        exc_info=exc
    )
    return _error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "database_error",
        "A database error occurred. Please try again later.",
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle uncaught exceptions.

    Full details are logged but not exposed to the client.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}",
        exc_info=exc
    )
    return _error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred. Please try again later.",
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

# Observability (health, metrics)
app.include_router(observability_router)

# Semantic Search
app.include_router(search_router, prefix="/api/v1")


# =============================================================================
# ROOT ENDPOINTS
# =============================================================================

@app.get("/", include_in_schema=False)
async def root() -> dict[str, Any]:
    """Root endpoint - API information."""
    return {
        "name": "Product Search API",
        "version": "0.1.0",
        "status": "running",
        "docs": "/docs" if settings.ENVIRONMENT != "production" else None,
    }


def create_app() -> FastAPI:
    """Application factory for creating test instances."""
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "product_search.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
