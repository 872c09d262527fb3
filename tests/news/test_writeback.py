"""Tests for the detached write-back queue."""

from unittest.mock import MagicMock, patch

import pytest

from newsdesk.news.writeback import WriteBackQueue


class TestWriteBackQueue:
    """WriteBackQueue submit/drain/close."""

    @pytest.mark.asyncio
    async def test_submitted_batches_are_upserted(self, memory_store, make_article):
        queue = WriteBackQueue(memory_store)

        queue.submit([make_article("One"), make_article("Two")])
        queue.submit([make_article("Three")])
        await queue.close()

        assert len(memory_store) == 3
        assert queue.written == 3
        assert queue.failed_batches == 0

    @pytest.mark.asyncio
    async def test_empty_batch_starts_nothing(self, memory_store):
        queue = WriteBackQueue(memory_store)

        queue.submit([])

        assert queue.pending == 0
        assert queue._worker is None

    @pytest.mark.asyncio
    async def test_store_failure_is_logged_not_raised(self, make_article):
        store = MagicMock()
        store.upsert_many.side_effect = OSError("disk full")
        queue = WriteBackQueue(store)

        with patch("newsdesk.news.writeback.logger") as mock_logger:
            queue.submit([make_article("One")])
            await queue.drain()

        assert queue.failed_batches == 1
        assert "WRITEBACK_FAILED" in mock_logger.error.call_args[0][0]

        # worker keeps running after a failed batch
        store.upsert_many.side_effect = None
        store.upsert_many.return_value = 1
        queue.submit([make_article("Two")])
        await queue.close()
        assert queue.written == 1

    @pytest.mark.asyncio
    async def test_close_without_submissions(self, memory_store):
        queue = WriteBackQueue(memory_store)
        await queue.close()
        assert queue.pending == 0
