"""Unit tests for the backfill Celery task (Redis and database mocked)."""

from unittest.mock import MagicMock, patch

import pytest

from product_search.domain.search.errors import EmbeddingsDisabledError, InvalidBatchSizeError
from product_search.domain.search.models import BackfillReport
from product_search.workers.embed_product_worker import backfill_product_embeddings

MODULE = "product_search.workers.embed_product_worker"


@pytest.fixture
def redis_lock():
    lock = MagicMock()
    lock.acquire.return_value = True
    redis = MagicMock()
    redis.lock.return_value = lock
    with patch(f"{MODULE}.get_redis_client", return_value=redis):
        yield lock


@pytest.fixture
def session():
    db = MagicMock()
    with patch("product_search.database.SessionLocal", return_value=db):
        yield db


@pytest.fixture
def job():
    job = MagicMock()
    job.run.return_value = BackfillReport(pages=1, scanned=3, embedded=2, skipped=1, provider_calls=2)
    job.run_missing_only.return_value = BackfillReport(pages=1, scanned=1, embedded=1, provider_calls=1)
    with patch(f"{MODULE}.build_backfill_job", return_value=job):
        yield job


class TestBackfillTask:
    def test_runs_job_and_returns_report(self, redis_lock, session, job):
        result = backfill_product_embeddings(batch_size=20)

        assert result["status"] == "completed"
        assert result["report"]["embedded"] == 2
        job.run.assert_called_once_with(20)
        session.close.assert_called_once()
        redis_lock.release.assert_called_once()

    def test_missing_only(self, redis_lock, session, job):
        result = backfill_product_embeddings(batch_size=20, missing_only=True)

        assert result["report"]["embedded"] == 1
        job.run_missing_only.assert_called_once_with(20)
        job.run.assert_not_called()

    def test_default_batch_size_from_settings(self, redis_lock, session, job):
        backfill_product_embeddings()

        job.run.assert_called_once_with(50)

    def test_zero_batch_size_is_not_replaced_by_default(self, redis_lock, session, job):
        job.run.side_effect = InvalidBatchSizeError(0)

        with pytest.raises(InvalidBatchSizeError):
            backfill_product_embeddings(batch_size=0)

        job.run.assert_called_once_with(0)
        session.rollback.assert_called_once()
        session.close.assert_called_once()
        redis_lock.release.assert_called_once()

    def test_lock_held_elsewhere(self, redis_lock, session, job):
        redis_lock.acquire.return_value = False

        result = backfill_product_embeddings(batch_size=20)

        assert result["status"] == "already_running"
        job.run.assert_not_called()
        redis_lock.release.assert_not_called()

    def test_disabled_provider(self, redis_lock, session, job):
        job.run.side_effect = EmbeddingsDisabledError()

        result = backfill_product_embeddings(batch_size=20)

        assert result["status"] == "disabled"
        redis_lock.release.assert_called_once()
