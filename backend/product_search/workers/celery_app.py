"""Celery application for background embedding jobs.

Start a worker with:
    celery -A product_search.workers.celery_app worker --loglevel=INFO
"""

from celery import Celery

from ..config import get_settings

settings = get_settings()

celery_app = Celery(
    "product_search",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["product_search.workers.embed_product_worker"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    # One backfill at a time per worker process; the job is long and rate-limited
    worker_prefetch_multiplier=1,
    task_acks_late=True,
)
