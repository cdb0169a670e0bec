"""Unit tests for EmbeddingBackfillJob."""

import threading

import pytest

from product_search.domain.search.errors import (
    BackfillAlreadyRunningError,
    EmbeddingsDisabledError,
    InvalidBatchSizeError,
    OperationCancelledError,
)
from product_search.services.embedding import EmbeddingBackfillJob
from product_search.services.embedding.backfill import single_flight

from tests.stubs import InMemoryProductRepository, StubEmbeddingProvider


class RecordingSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def sleep():
    return RecordingSleep()


def _job(repository, provider, sleep, **kwargs):
    return EmbeddingBackfillJob(repository, provider, sleep=sleep, **kwargs)


class TestBackfillRun:
    def test_embeds_products_without_embeddings(self, make_product, stub_embeddings, sleep):
        repository = InMemoryProductRepository([
            make_product(1),
            make_product(2, embedding=[0.5, 0.5]),
            make_product(3),
        ])

        report = _job(repository, stub_embeddings, sleep).run(batch_size=10)

        assert report.embedded == 2
        assert report.skipped == 1
        assert report.scanned == 3
        assert report.provider_calls == 2
        assert all(p.has_embedding for p in repository.products)
        assert repository.get_product_by_pid("PID0002").embedding == [0.5, 0.5]

    def test_one_batch_write_per_page(self, make_product, stub_embeddings, sleep):
        repository = InMemoryProductRepository([make_product(i) for i in range(1, 6)])

        report = _job(repository, stub_embeddings, sleep).run(batch_size=2)

        assert report.pages == 3
        assert [sorted(w) for w in repository.batch_writes] == [[1, 2], [3, 4], [5]]

    def test_stops_on_empty_page_when_catalog_divides_evenly(self, make_product, stub_embeddings, sleep):
        repository = InMemoryProductRepository([make_product(i) for i in range(1, 5)])

        report = _job(repository, stub_embeddings, sleep).run(batch_size=2)

        assert report.pages == 2
        assert report.embedded == 4

    def test_second_run_makes_no_provider_calls(self, make_product, stub_embeddings, sleep):
        repository = InMemoryProductRepository([make_product(i) for i in range(1, 4)])
        job = _job(repository, stub_embeddings, sleep)

        job.run(batch_size=2)
        calls_after_first = len(stub_embeddings.calls)
        second = job.run(batch_size=2)

        assert calls_after_first == 3
        assert len(stub_embeddings.calls) == calls_after_first
        assert second.provider_calls == 0
        assert second.skipped == 3

    def test_delay_after_every_provider_call(self, make_product, sleep):
        provider = StubEmbeddingProvider(fail_on=("Product 2",))
        repository = InMemoryProductRepository([
            make_product(1),
            make_product(2),
            make_product(3, embedding=[1.0, 0.0]),
        ])

        _job(repository, provider, sleep, delay_ms=100).run(batch_size=10)

        # success and failure both wait; the skipped product does not
        assert sleep.calls == [0.1, 0.1]

    def test_canonical_text_sent_to_provider(self, make_product, stub_embeddings, sleep):
        repository = InMemoryProductRepository([make_product(1, title="Linen Shirt")])

        _job(repository, stub_embeddings, sleep).run(batch_size=5)

        assert stub_embeddings.calls[0].startswith("Title: Linen Shirt\nBrand: Acme\n")

    def test_per_item_failure_is_counted_and_skipped(self, make_product, sleep):
        provider = StubEmbeddingProvider(fail_on=("Product 2",))
        repository = InMemoryProductRepository([make_product(i) for i in range(1, 4)])

        report = _job(repository, provider, sleep).run(batch_size=10)

        assert report.failed == 1
        assert report.embedded == 2
        assert repository.batch_writes == [{1: [1.0, 0.0], 3: [1.0, 0.0]}]
        assert not repository.get_product_by_pid("PID0002").has_embedding

    def test_write_failure_is_counted_and_job_continues(self, make_product, stub_embeddings, sleep):
        repository = InMemoryProductRepository([make_product(i) for i in range(1, 4)])
        repository.fail_writes = True

        report = _job(repository, stub_embeddings, sleep).run(batch_size=2)

        assert report.pages == 2
        assert report.write_failures == 3
        assert report.embedded == 0

    def test_filters_restrict_scan(self, make_product, stub_embeddings, sleep):
        from product_search.domain.search.models import ProductFilters

        repository = InMemoryProductRepository([
            make_product(1, category="Clothing"),
            make_product(2, category="Footwear"),
        ])

        report = _job(
            repository, stub_embeddings, sleep, filters=ProductFilters(category="Footwear")
        ).run(batch_size=5)

        assert report.embedded == 1
        assert repository.get_product_by_pid("PID0002").has_embedding


class TestBackfillGuards:
    def test_invalid_batch_size(self, make_product, stub_embeddings, sleep):
        job = _job(InMemoryProductRepository([make_product(1)]), stub_embeddings, sleep)

        for batch_size in (0, -5):
            with pytest.raises(InvalidBatchSizeError):
                job.run(batch_size)
        assert stub_embeddings.calls == []

    def test_disabled(self, make_product, disabled_embeddings, sleep):
        job = _job(InMemoryProductRepository([make_product(1)]), disabled_embeddings, sleep)

        with pytest.raises(EmbeddingsDisabledError):
            job.run(10)

    def test_single_flight(self, make_product, stub_embeddings, sleep):
        job = _job(InMemoryProductRepository([make_product(1)]), stub_embeddings, sleep)

        with single_flight("default"):
            with pytest.raises(BackfillAlreadyRunningError):
                job.run(10)
            with pytest.raises(BackfillAlreadyRunningError):
                job.run_missing_only(10)

        assert stub_embeddings.calls == []
        # slot released: the job runs now
        assert job.run(10).embedded == 1

    def test_other_catalog_not_blocked(self, make_product, stub_embeddings, sleep):
        job = _job(
            InMemoryProductRepository([make_product(1)]), stub_embeddings, sleep, catalog="eu"
        )

        with single_flight("default"):
            assert job.run(10).embedded == 1

    def test_slot_released_after_error(self, make_product, stub_embeddings, sleep):
        repository = InMemoryProductRepository([make_product(1)])
        job = _job(repository, stub_embeddings, sleep)

        def broken(*args):
            raise RuntimeError("database gone")

        repository.list_products = broken
        with pytest.raises(RuntimeError):
            job.run(10)

        with single_flight("default"):
            pass


class TestBackfillCancellation:
    def test_cancel_flushes_page_then_raises(self, make_product):
        cancel = threading.Event()

        class CancellingProvider(StubEmbeddingProvider):
            def embed_text(self, text):
                result = super().embed_text(text)
                cancel.set()
                return result

        provider = CancellingProvider()
        repository = InMemoryProductRepository([make_product(i) for i in range(1, 4)])
        job = EmbeddingBackfillJob(repository, provider, delay_ms=0)

        with pytest.raises(OperationCancelledError):
            job.run(batch_size=10, cancel_event=cancel)

        assert len(provider.calls) == 1
        assert repository.batch_writes == [{1: [1.0, 0.0]}]

    def test_already_cancelled_makes_no_calls(self, make_product, stub_embeddings):
        cancel = threading.Event()
        cancel.set()
        repository = InMemoryProductRepository([make_product(1)])

        with pytest.raises(OperationCancelledError):
            EmbeddingBackfillJob(repository, stub_embeddings).run(5, cancel_event=cancel)

        assert stub_embeddings.calls == []
        assert repository.batch_writes == []


class TestRunMissingOnly:
    def test_sweeps_until_nothing_missing(self, make_product, stub_embeddings, sleep):
        repository = InMemoryProductRepository(
            [make_product(i) for i in range(1, 6)] + [make_product(6, embedding=[0.0, 1.0])]
        )

        report = _job(repository, stub_embeddings, sleep).run_missing_only(batch_size=2)

        assert report.embedded == 5
        assert report.pages == 3
        assert len(stub_embeddings.calls) == 5
        assert repository.products_without_embeddings(10) == []

    def test_stops_when_batch_makes_no_progress(self, make_product, sleep):
        provider = StubEmbeddingProvider(fail_on=("Product",))
        repository = InMemoryProductRepository([make_product(1), make_product(2)])

        report = _job(repository, provider, sleep).run_missing_only(batch_size=5)

        assert report.pages == 1
        assert report.failed == 2
        assert len(provider.calls) == 2
