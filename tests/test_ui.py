import asyncio
import warnings
from types import SimpleNamespace

import numpy as np
import pytest

from vector_muse.core.batch import EmbeddingBatch
from vector_muse.core.errors import ProviderError
from vector_muse.embedders.fetcher import BatchFetcher
from vector_muse.ui import actions, state
from vector_muse.ui.state import AppState
import config


class FakeSessionState(dict):
    """dict with attribute access, like st.session_state."""

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name, value):
        self[name] = value


@pytest.fixture
def session(monkeypatch):
    fake_st = SimpleNamespace(session_state=FakeSessionState())
    monkeypatch.setattr(state, "st", fake_st)
    AppState.init()
    return fake_st


@pytest.fixture
def built(monkeypatch):
    calls = []

    def fake_get_embedder(name, api_key=None):
        calls.append((name, api_key))
        return SimpleNamespace(name=name, api_key=api_key)

    monkeypatch.setattr(state, "get_embedder", fake_get_embedder)
    return calls


def words(n: int, dim: int = 8) -> EmbeddingBatch:
    vectors = np.random.default_rng(n).normal(size=(n, dim))
    return EmbeddingBatch.from_pairs([(f"w{i}", v) for i, v in enumerate(vectors)])


def test_fetcher_is_reused_within_a_session(session, built):
    first = AppState.get_fetcher("huggingface")
    second = AppState.get_fetcher("huggingface")

    assert isinstance(first, BatchFetcher)
    assert first is second
    assert built == [("huggingface", None)]


def test_fetcher_is_rebuilt_when_the_key_changes(session, built):
    before = AppState.get_fetcher("openai")
    AppState.set_api_key("openai", "sk-test")
    after = AppState.get_fetcher("openai")

    assert after is not before
    assert after.embedder.api_key == "sk-test"
    assert built == [("openai", None), ("openai", "sk-test")]


def test_sessions_never_share_a_fetcher(session, built):
    first = AppState.get_fetcher("huggingface")

    session.session_state = FakeSessionState()
    AppState.init()
    second = AppState.get_fetcher("huggingface")

    assert first is not second


def test_unconfigured_provider_is_retried_next_run(session, monkeypatch):
    def missing_key(name, api_key=None):
        raise ProviderError(401, "No API key")

    monkeypatch.setattr(state, "get_embedder", missing_key)
    with pytest.raises(ProviderError):
        AppState.get_fetcher("openai")
    assert session.session_state.fetcher is None

    monkeypatch.setattr(state, "get_embedder", lambda name, api_key=None: SimpleNamespace(name=name))
    assert AppState.get_fetcher("openai").embedder.name == "openai"


def test_large_batches_are_projected_in_a_worker_thread(monkeypatch):
    offloaded = []
    to_thread = asyncio.to_thread

    async def recording_to_thread(func, *args):
        offloaded.append(len(args[0]))
        return await to_thread(func, *args)

    monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)

    small = actions.project_batch(words(config.MAX_SYNC_BATCH))
    assert offloaded == []
    assert small.coords.shape == (config.MAX_SYNC_BATCH, 3)

    large = actions.project_batch(words(config.MAX_SYNC_BATCH + 10))
    assert offloaded == [config.MAX_SYNC_BATCH + 10]
    assert large.coords.shape == (config.MAX_SYNC_BATCH + 10, 3)


def test_project_batch_reports_rank_deficiency_without_warning():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        projection = actions.project_batch(words(2))

    assert projection.rank_deficient
    assert projection.coords[:, 1:].tolist() == [[0.0, 0.0], [0.0, 0.0]]
