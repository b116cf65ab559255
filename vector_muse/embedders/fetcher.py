"""
Concurrent batch fetching of embeddings.

Every text is one independent request. A batch is returned only when all
requests succeed; the first failure cancels the rest. A newer fetch on the
same fetcher and event loop supersedes an older one still in flight. Fetches
running on other loops (other threads) are never touched.
"""

import asyncio
import logging
import threading
import time
from typing import Callable, Optional, Sequence

from vector_muse.core.batch import EmbeddingBatch
from vector_muse.core.errors import EmptyInput, FetchSuperseded
from .base import BaseEmbedder

logger = logging.getLogger(__name__)


class BatchFetcher:
    """Fans out embedding requests and keeps only the latest batch per event loop."""

    def __init__(self, embedder: BaseEmbedder):
        self.embedder = embedder
        self._pending: dict[asyncio.AbstractEventLoop, asyncio.Task] = {}
        self._lock = threading.Lock()

    @property
    def has_pending(self) -> bool:
        with self._lock:
            return any(not task.done() for task in self._pending.values())

    def _swap_pending(self, loop: asyncio.AbstractEventLoop, task: asyncio.Task) -> Optional[asyncio.Task]:
        with self._lock:
            previous = self._pending.get(loop)
            self._pending[loop] = task
        return previous

    def _release_pending(self, loop: asyncio.AbstractEventLoop, task: asyncio.Task) -> bool:
        """Drop task from the slot if it still owns it; False when a newer fetch took over."""
        with self._lock:
            if self._pending.get(loop) is task:
                del self._pending[loop]
                return True
            return False

    async def fetch(
        self,
        texts: Sequence[str],
        labels: Optional[Sequence[str]] = None,
        progress_callback: Optional[Callable[[str], None]] = None
    ) -> EmbeddingBatch:
        """
        Embed all texts concurrently.

        Args:
            texts: Texts to embed, in display order
            labels: Optional labels (default: the texts themselves)
            progress_callback: Optional progress reporter, called per finished text

        Returns:
            EmbeddingBatch in input order

        Raises:
            EmptyInput: If texts is empty
            ProviderError: If any request fails (no partial batch)
            FetchSuperseded: If a newer fetch replaced this one
        """
        if not texts:
            raise EmptyInput("Nothing to embed")
        labels = list(labels) if labels is not None else list(texts)
        if len(labels) != len(texts):
            raise ValueError(f"{len(labels)} labels for {len(texts)} texts")

        loop = asyncio.get_running_loop()
        task = asyncio.ensure_future(self._gather(list(texts), progress_callback))
        previous = self._swap_pending(loop, task)
        if previous is not None and not previous.done():
            logger.info("Cancelling stale embedding batch")
            previous.cancel()

        try:
            vectors = await task
        except asyncio.CancelledError:
            if task.cancelled() and not self._release_pending(loop, task):
                raise FetchSuperseded("A newer batch replaced this one") from None
            raise
        finally:
            self._release_pending(loop, task)

        return EmbeddingBatch.from_pairs(list(zip(labels, vectors)))

    async def _gather(self, texts: list[str], progress_callback: Optional[Callable[[str], None]]) -> list:
        started = time.perf_counter()
        done = 0

        async def embed_one(text: str):
            nonlocal done
            vector = await self.embedder.aembed_single(text)
            done += 1
            if progress_callback:
                progress_callback(f"Embedded {done}/{len(texts)}")
            return vector

        tasks = [asyncio.ensure_future(embed_one(t)) for t in texts]
        try:
            vectors = await asyncio.gather(*tasks)
        except BaseException:
            for t in tasks:
                t.cancel()
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(f"Fetched {len(texts)} embeddings from {self.embedder.name} in {elapsed_ms:.0f}ms")
        return vectors

    def fetch_sync(
        self,
        texts: Sequence[str],
        labels: Optional[Sequence[str]] = None,
        progress_callback: Optional[Callable[[str], None]] = None
    ) -> EmbeddingBatch:
        """Run fetch() on a fresh event loop (for Streamlit callbacks and scripts)."""
        return asyncio.run(self.fetch(texts, labels, progress_callback))
