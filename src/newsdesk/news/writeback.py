"""Detached persistence of freshly fetched articles.

The request path hands batches to ``WriteBackQueue.submit`` and returns
immediately. A single background task drains the queue and upserts each
batch through the store (in a worker thread, store calls are blocking).
Write failures are logged on the ``news.writeback`` logger and never reach
the caller.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Iterable, Optional

from newsdesk.news.models import Article
from newsdesk.storage.base import ArticleStore

logger = logging.getLogger("news.writeback")


class WriteBackQueue:
    """Background upsert worker.

    Usage:
        queue = WriteBackQueue(store)
        queue.submit(articles)      # returns immediately
        ...
        await queue.close()         # drain and stop at shutdown
    """

    def __init__(self, store: ArticleStore):
        self.store = store
        self._queue: Optional[asyncio.Queue[list[Article]]] = None
        self._worker: Optional[asyncio.Task] = None
        self.written = 0
        self.failed_batches = 0

    @property
    def pending(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    def _ensure_worker(self) -> asyncio.Queue[list[Article]]:
        if self._worker is None or self._worker.done():
            # A finished worker means its event loop is gone; the queue is bound to it.
            self._queue = asyncio.Queue()
            self._worker = asyncio.get_running_loop().create_task(
                self._run(self._queue), name="newsdesk-writeback",
            )
        return self._queue

    def submit(self, articles: Iterable[Article]) -> None:
        """Schedule ``articles`` for upsert. Must be called from a running loop."""
        batch = list(articles)
        if not batch:
            return
        self._ensure_worker().put_nowait(batch)
        logger.debug(f"WRITEBACK_QUEUED | {len(batch)} articles | pending:{self.pending}")

    async def _run(self, queue: asyncio.Queue[list[Article]]) -> None:
        while True:
            batch = await queue.get()
            start_time = time.time()
            try:
                created = await asyncio.to_thread(self.store.upsert_many, batch)
            except Exception as e:
                self.failed_batches += 1
                logger.error(
                    f"WRITEBACK_FAILED | {len(batch)} articles | {type(e).__name__}: {e}"
                )
            else:
                self.written += len(batch)
                duration_ms = int((time.time() - start_time) * 1000)
                logger.info(
                    f"WRITEBACK_OK | upserted:{len(batch)} | new:{created} | {duration_ms}ms"
                )
            finally:
                queue.task_done()

    async def drain(self) -> None:
        """Wait until every submitted batch has been written (or failed)."""
        if self._queue is not None:
            await self._queue.join()

    async def close(self) -> None:
        """Drain pending batches and stop the worker."""
        await self.drain()
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None
        self._queue = None
