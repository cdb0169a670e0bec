"""Product Embedding Worker - Backfill embeddings for the catalog.

Celery task wrapping EmbeddingBackfillJob. A Redis lock keeps the backfill
single-flight across worker processes; the job itself guards against a second
run inside the same process.
"""

import logging
from typing import Any, Dict, Optional

from celery import shared_task
from redis import Redis
from redis.exceptions import LockError

from ..config import get_settings
from ..database import get_db_session
from ..dependencies import build_backfill_job
from ..domain.search.errors import (
    BackfillAlreadyRunningError,
    EmbeddingsDisabledError,
)

logger = logging.getLogger(__name__)

BACKFILL_LOCK_KEY = "product_search:embedding_backfill:{catalog}"


def get_redis_client() -> Redis:
    return Redis.from_url(get_settings().REDIS_URL)


@shared_task(name="product_search.backfill_embeddings", bind=True)
def backfill_product_embeddings(
    self,
    batch_size: Optional[int] = None,
    missing_only: bool = False,
    catalog: str = "default",
) -> Dict[str, Any]:
    """Generate embeddings for every product that lacks one.

    Idempotent: products that already have embeddings are skipped, so the task
    can be re-enqueued freely.

    Args:
        batch_size: Page size (defaults to BACKFILL_BATCH_SIZE)
        missing_only: Sweep products_without_embeddings instead of paging the catalog
        catalog: Single-flight key

    Returns:
        Dict with keys:
            - status: 'completed', 'already_running' or 'disabled'
            - report: BackfillReport counters (when completed)

    Notes:
        - Per-product provider failures are counted, not raised
        - InvalidBatchSizeError and database errors propagate (task fails)
    """
    settings = get_settings()
    if batch_size is None:
        batch_size = settings.BACKFILL_BATCH_SIZE

    lock = get_redis_client().lock(
        BACKFILL_LOCK_KEY.format(catalog=catalog),
        timeout=settings.BACKFILL_LOCK_TIMEOUT_SECONDS,
        blocking=False,
    )
    if not lock.acquire():
        logger.info("Embedding backfill already running for catalog %s", catalog)
        return {"status": "already_running", "catalog": catalog}

    try:
        with get_db_session() as db:
            job = build_backfill_job(db, settings)
            job.catalog = catalog

            if missing_only:
                report = job.run_missing_only(batch_size)
            else:
                report = job.run(batch_size)

        result = {"status": "completed", "catalog": catalog, "report": report.to_dict()}
        logger.info("Embedding backfill task completed", extra={"batch_size": batch_size})
        return result

    except EmbeddingsDisabledError as e:
        logger.warning("Embedding backfill skipped: %s", e)
        return {"status": "disabled", "catalog": catalog}

    except BackfillAlreadyRunningError:
        return {"status": "already_running", "catalog": catalog}

    finally:
        try:
            lock.release()
        except LockError:
            logger.warning("Backfill lock for catalog %s expired before release", catalog)
