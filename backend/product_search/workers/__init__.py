"""Background workers for embedding jobs.

Tasks:
- backfill_product_embeddings: page through the catalog and embed products
  that have no vector yet
"""

from .celery_app import celery_app
from .embed_product_worker import backfill_product_embeddings

__all__ = [
    "celery_app",
    "backfill_product_embeddings",
]
