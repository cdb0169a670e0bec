"""Observability API endpoints.

Provides Prometheus metrics and a health check.
"""

import time

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_db
from ..domain.ai import EmbeddingCapability
from .logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Observability"])


@router.get("/metrics", include_in_schema=False)
def metrics():
    """Expose Prometheus metrics in text exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/health", summary="Health check endpoint")
def health_check(db: Session = Depends(get_db)):
    """Check database connectivity and report whether semantic search is enabled.

    Returns 503 when the database is unreachable. A disabled embedding
    provider is reported but does not fail the check.
    """
    capability = EmbeddingCapability.from_settings(get_settings())

    start = time.time()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "database": str(e), "embeddings_enabled": capability.enabled},
        )

    return {
        "status": "healthy",
        "database_latency_ms": round((time.time() - start) * 1000, 2),
        "embeddings_enabled": capability.enabled,
    }
