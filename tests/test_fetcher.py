import asyncio
import threading
import time

import numpy as np
import pytest

from vector_muse.core.errors import EmptyInput, FetchSuperseded, ProviderError
from vector_muse.embedders.base import BaseEmbedder
from vector_muse.embedders.fetcher import BatchFetcher


class FakeEmbedder(BaseEmbedder):
    """Deterministic embedder: vector derived from the text, optional delays and failures."""

    base_delay = 0.0

    def __init__(self, delays=None, failures=None, rate_limited=0):
        self.delays = delays or {}
        self.failures = failures or {}
        self.rate_limited = rate_limited
        self.calls = []
        self.cancelled = []

    @property
    def name(self) -> str:
        return "fake"

    @property
    def dimension(self) -> int:
        return 3

    async def aembed_single(self, text: str) -> np.ndarray:
        return await self._with_retry(lambda: self._request(text))

    async def _request(self, text: str) -> np.ndarray:
        self.calls.append(text)
        try:
            await asyncio.sleep(self.delays.get(text, 0))
        except asyncio.CancelledError:
            self.cancelled.append(text)
            raise
        if self.rate_limited:
            self.rate_limited -= 1
            raise ProviderError(429, "slow down")
        if text in self.failures:
            raise ProviderError(self.failures[text], f"failed on {text}")
        return np.array([len(text), ord(text[0]), 1.0])


def test_batch_keeps_input_order():
    embedder = FakeEmbedder(delays={"a": 0.03, "bb": 0.0, "ccc": 0.01})
    batch = BatchFetcher(embedder).fetch_sync(["a", "bb", "ccc"])

    assert batch.labels == ("a", "bb", "ccc")
    assert batch.vectors[:, 0].tolist() == [1.0, 2.0, 3.0]


def test_custom_labels():
    batch = BatchFetcher(FakeEmbedder()).fetch_sync(["the sea", "a sky"], labels=["1: sea", "2: sky"])
    assert batch.labels == ("1: sea", "2: sky")
    with pytest.raises(ValueError):
        BatchFetcher(FakeEmbedder()).fetch_sync(["x"], labels=["1", "2"])


def test_empty_batch_is_rejected():
    with pytest.raises(EmptyInput):
        BatchFetcher(FakeEmbedder()).fetch_sync([])


def test_one_failure_aborts_the_batch_and_cancels_siblings():
    embedder = FakeEmbedder(delays={"slow": 1.0}, failures={"bad": 500})
    fetcher = BatchFetcher(embedder)

    with pytest.raises(ProviderError) as info:
        fetcher.fetch_sync(["slow", "bad"])

    assert info.value.status == 500
    assert embedder.cancelled == ["slow"]
    assert not fetcher.has_pending


def test_newer_fetch_supersedes_older():
    embedder = FakeEmbedder(delays={"old": 1.0})
    fetcher = BatchFetcher(embedder)

    async def scenario():
        stale = asyncio.ensure_future(fetcher.fetch(["old"]))
        await asyncio.sleep(0.01)
        assert fetcher.has_pending

        fresh = await fetcher.fetch(["new"])
        with pytest.raises(FetchSuperseded):
            await stale
        return fresh

    fresh = asyncio.run(scenario())
    assert fresh.labels == ("new",)
    assert embedder.cancelled == ["old"]
    assert not fetcher.has_pending


def test_fetches_from_other_threads_do_not_supersede_each_other():
    embedder = FakeEmbedder(delays={"old": 0.5})
    fetcher = BatchFetcher(embedder)
    results = {}

    def fetch_old():
        try:
            results["old"] = fetcher.fetch_sync(["old"]).labels
        except FetchSuperseded as e:
            results["old"] = e

    worker = threading.Thread(target=fetch_old)
    worker.start()
    time.sleep(0.1)
    results["new"] = fetcher.fetch_sync(["new"]).labels
    worker.join()

    assert results == {"old": ("old",), "new": ("new",)}
    assert embedder.cancelled == []
    assert not fetcher.has_pending


def test_progress_is_reported_per_text():
    messages = []
    BatchFetcher(FakeEmbedder()).fetch_sync(["a", "b", "c"], progress_callback=messages.append)
    assert len(messages) == 3
    assert messages[-1] == "Embedded 3/3"


def test_rate_limits_are_retried():
    embedder = FakeEmbedder(rate_limited=2)
    vector = embedder.embed_single("sun")
    assert vector.tolist() == [3.0, ord("s"), 1.0]
    assert embedder.calls == ["sun", "sun", "sun"]


def test_other_errors_are_not_retried():
    embedder = FakeEmbedder(failures={"bad": 400})
    with pytest.raises(ProviderError):
        embedder.embed_single("bad")
    assert embedder.calls == ["bad"]


def test_sync_embed_stacks_vectors():
    embedder = FakeEmbedder()
    assert embedder.embed(["a", "bb"]).shape == (2, 3)
    assert embedder.embed([]).shape == (0, 3)
