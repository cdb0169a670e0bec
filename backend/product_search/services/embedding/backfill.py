"""Embedding Backfill - generate embeddings for every product that lacks one.

Pages through the catalog in primary-key order, embeds products without a
vector and persists each page with a single batch write. Calls are spaced by a
fixed delay to stay under provider rate limits.
"""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from ...domain.ai.ports import EmbeddingError, EmbeddingProviderPort
from ...domain.search.errors import (
    BackfillAlreadyRunningError,
    EmbeddingsDisabledError,
    InvalidBatchSizeError,
    OperationCancelledError,
)
from ...domain.search.models import BackfillReport, CatalogProduct, ProductFilters
from ...domain.search.ports import ProductRepositoryPort
from ...observability.metrics import backfill_products_total
from .text_generator import (
    DEFAULT_MAX_INPUT_CHARS,
    generate_product_embedding_text,
    truncate_text_for_embedding,
)

logger = logging.getLogger(__name__)

DEFAULT_CATALOG = "default"
DEFAULT_DELAY_MS = 100

# Catalog keys with a backfill in flight in this process
_running_catalogs: set[str] = set()
_running_lock = threading.Lock()


@contextmanager
def single_flight(catalog: str) -> Iterator[None]:
    """Hold the in-process backfill slot for ``catalog``.

    Raises:
        BackfillAlreadyRunningError: Another backfill holds the slot
    """
    with _running_lock:
        if catalog in _running_catalogs:
            raise BackfillAlreadyRunningError(catalog)
        _running_catalogs.add(catalog)
    try:
        yield
    finally:
        with _running_lock:
            _running_catalogs.discard(catalog)


def validate_batch_size(batch_size: int) -> int:
    if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
        raise InvalidBatchSizeError(batch_size)
    return batch_size


class EmbeddingBackfillJob:
    """Batch embedding job over the product repository.

    Example Usage:
        job = EmbeddingBackfillJob(repository, embedding_provider)
        report = job.run(batch_size=50)
        # report.embedded, report.failed, ...

    Re-running is safe: products that already carry an embedding are skipped
    without a provider call.
    """

    def __init__(
        self,
        repository: ProductRepositoryPort,
        embedding_provider: EmbeddingProviderPort,
        delay_ms: int = DEFAULT_DELAY_MS,
        catalog: str = DEFAULT_CATALOG,
        filters: Optional[ProductFilters] = None,
        max_input_chars: int = DEFAULT_MAX_INPUT_CHARS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize backfill job.

        Args:
            repository: Product store
            embedding_provider: Embedding client
            delay_ms: Pause after every provider call (success or failure)
            catalog: Single-flight key
            filters: Optional filters restricting the scan
            max_input_chars: Canonical text is truncated to this length
            sleep: Sleep function used when no cancel event is given
        """
        self.repository = repository
        self.embedding_provider = embedding_provider
        self.delay_seconds = max(0, delay_ms) / 1000.0
        self.catalog = catalog
        self.filters = filters
        self.max_input_chars = max_input_chars
        self._sleep = sleep

    def run(self, batch_size: int, cancel_event: Optional[threading.Event] = None) -> BackfillReport:
        """Embed every product without an embedding, page by page.

        Args:
            batch_size: Page size for reads and batch writes
            cancel_event: Optional event; when set, the current page is
                flushed and OperationCancelledError is raised

        Returns:
            BackfillReport with counters for the run

        Raises:
            EmbeddingsDisabledError: Provider not configured
            InvalidBatchSizeError: batch_size <= 0
            BackfillAlreadyRunningError: Another run holds this catalog
            OperationCancelledError: cancel_event was set
        """
        self._check_enabled()
        validate_batch_size(batch_size)

        with single_flight(self.catalog):
            report = BackfillReport()
            logger.info(
                "Embedding backfill started",
                extra={"batch_size": batch_size},
            )

            page = 1
            while True:
                products, _ = self.repository.list_products(self.filters, page, batch_size)
                if not products:
                    break

                report.pages += 1
                self._process_batch(products, report, cancel_event)

                logger.info(
                    "Embedding backfill page done",
                    extra={"page": page, "batch_size": batch_size},
                )

                if len(products) < batch_size:
                    break
                page += 1

            self._log_report(report)
            return report

    def run_missing_only(
        self,
        batch_size: int,
        cancel_event: Optional[threading.Event] = None,
    ) -> BackfillReport:
        """Sweep only products that have no embedding yet.

        Pulls ``products_without_embeddings(batch_size)`` until it comes back
        empty. Stops early when a whole batch produced no stored embedding, so
        permanently failing products cannot keep the loop alive.
        """
        self._check_enabled()
        validate_batch_size(batch_size)

        with single_flight(self.catalog):
            report = BackfillReport()
            logger.info(
                "Missing-embedding sweep started",
                extra={"batch_size": batch_size},
            )

            while True:
                products = self.repository.products_without_embeddings(batch_size)
                if not products:
                    break

                report.pages += 1
                stored = self._process_batch(products, report, cancel_event)
                if stored == 0:
                    logger.warning(
                        "Missing-embedding sweep made no progress, stopping",
                        extra={"page": report.pages, "batch_size": batch_size},
                    )
                    break

            self._log_report(report)
            return report

    def _check_enabled(self) -> None:
        if not self.embedding_provider.capability.enabled:
            raise EmbeddingsDisabledError()

    def _process_batch(
        self,
        products: list[CatalogProduct],
        report: BackfillReport,
        cancel_event: Optional[threading.Event],
    ) -> int:
        """Embed one batch and persist it. Returns the number of vectors stored."""
        pending: dict[int, list[float]] = {}

        for product in products:
            if cancel_event is not None and cancel_event.is_set():
                self._cancel(pending, report)

            report.scanned += 1
            if product.has_embedding:
                report.skipped += 1
                backfill_products_total.labels(status="skipped").inc()
                continue

            text = truncate_text_for_embedding(
                generate_product_embedding_text(product),
                self.max_input_chars,
            )

            report.provider_calls += 1
            try:
                result = self.embedding_provider.embed_text(text)
                pending[product.id] = result.embedding
            except EmbeddingError as e:
                report.failed += 1
                backfill_products_total.labels(status="failed").inc()
                logger.warning(
                    "Failed to embed product %s: %s",
                    product.pid,
                    e,
                    extra={"product_id": product.id, "pid": product.pid},
                )

            if self._pause(cancel_event):
                self._cancel(pending, report)

        return self._flush(pending, report)

    def _pause(self, cancel_event: Optional[threading.Event]) -> bool:
        """Wait the inter-call delay. Returns True if cancellation was requested."""
        if cancel_event is not None:
            return cancel_event.wait(self.delay_seconds)
        if self.delay_seconds > 0:
            self._sleep(self.delay_seconds)
        return False

    def _flush(self, pending: dict[int, list[float]], report: BackfillReport) -> int:
        if not pending:
            return 0

        try:
            self.repository.batch_update_embeddings(pending)
        except Exception as e:
            report.write_failures += len(pending)
            backfill_products_total.labels(status="write_failed").inc(len(pending))
            logger.error(
                "Failed to store %d embeddings: %s",
                len(pending),
                e,
                exc_info=True,
            )
            return 0

        report.embedded += len(pending)
        backfill_products_total.labels(status="embedded").inc(len(pending))
        return len(pending)

    def _cancel(self, pending: dict[int, list[float]], report: BackfillReport) -> None:
        self._flush(pending, report)
        pending.clear()
        self._log_report(report)
        raise OperationCancelledError(
            f"embedding backfill for catalog '{self.catalog}' cancelled"
        )

    @staticmethod
    def _log_report(report: BackfillReport) -> None:
        logger.info(
            "Embedding backfill finished: %d embedded, %d skipped, %d failed, %d write failures",
            report.embedded,
            report.skipped,
            report.failed,
            report.write_failures,
        )
