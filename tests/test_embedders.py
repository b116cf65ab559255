import json
from types import SimpleNamespace

import httpx
import numpy as np
import openai
import pytest

import config
from vector_muse.core.errors import ProviderError
from vector_muse.embedders import HuggingFaceEmbedder, OpenAIEmbedder, get_embedder, list_embedders


# -----------------------------------------------------------------------------
# Hugging Face
# -----------------------------------------------------------------------------

def hf_embedder(handler, api_key="hf_test"):
    embedder = HuggingFaceEmbedder(api_key=api_key, transport=httpx.MockTransport(handler))
    embedder.base_delay = 0.0
    return embedder


def test_hf_posts_inputs_with_bearer_token():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=[0.1, 0.2, 0.3])

    vector = hf_embedder(handler).embed_single("ocean")

    assert vector.tolist() == [0.1, 0.2, 0.3]
    assert seen["url"] == config.HF_INFERENCE_URL.format(model=config.HF_MODEL)
    assert seen["auth"] == "Bearer hf_test"
    assert seen["body"] == {"inputs": "ocean"}


def test_hf_without_token_sends_no_auth(monkeypatch):
    monkeypatch.delenv("HF_API_KEY", raising=False)
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[[1.0, 2.0]])

    assert hf_embedder(handler, api_key=None).embed_single("x").tolist() == [1.0, 2.0]
    assert seen["auth"] is None


def test_hf_mean_pools_token_vectors():
    def handler(request):
        return httpx.Response(200, json=[[[1.0, 2.0], [3.0, 4.0]]])

    assert hf_embedder(handler).embed_single("two tokens").tolist() == [2.0, 3.0]


def test_hf_error_carries_status_and_message():
    def handler(request):
        return httpx.Response(503, json={"error": "Model is loading"})

    with pytest.raises(ProviderError) as info:
        hf_embedder(handler).embed_single("x")
    assert info.value.status == 503
    assert info.value.message == "Model is loading"
    assert str(info.value) == "[503] Model is loading"


def test_hf_network_failure_has_no_status():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderError) as info:
        hf_embedder(handler).embed_single("x")
    assert info.value.status is None


def test_hf_rate_limit_gives_up_after_retries():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(429, text="busy")

    with pytest.raises(ProviderError) as info:
        hf_embedder(handler).embed_single("x")
    assert info.value.status == 429
    assert info.value.message == "API error: 429"
    assert len(calls) == HuggingFaceEmbedder.max_retries


def test_hf_normalizes_on_request():
    def handler(request):
        return httpx.Response(200, json=[3.0, 4.0])

    embedder = HuggingFaceEmbedder(api_key="t", normalize_output=True, transport=httpx.MockTransport(handler))
    np.testing.assert_allclose(embedder.embed_single("x"), [0.6, 0.8])


# -----------------------------------------------------------------------------
# OpenAI
# -----------------------------------------------------------------------------

class StubEmbeddings:
    def __init__(self, vector=None, error=None):
        self.vector = vector
        self.error = error
        self.calls = []

    async def create(self, model, input):
        self.calls.append((model, input))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=[SimpleNamespace(embedding=self.vector)])


class StubClient:
    def __init__(self, embeddings):
        self.embeddings = embeddings

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


def openai_request():
    return httpx.Request("POST", "https://api.openai.com/v1/embeddings")


def test_openai_requires_a_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ProviderError) as info:
        OpenAIEmbedder()
    assert info.value.status == 401


def test_openai_embeds_one_text_per_request():
    stub = StubEmbeddings(vector=[0.5, -0.5])
    embedder = OpenAIEmbedder(client_factory=lambda: StubClient(stub))

    vectors = embedder.embed(["sun", "moon"])

    assert vectors.tolist() == [[0.5, -0.5], [0.5, -0.5]]
    assert sorted(text for _, text in stub.calls) == ["moon", "sun"]
    assert all(model == config.OPENAI_MODEL for model, _ in stub.calls)


def test_openai_status_errors_map_to_provider_error():
    error = openai.BadRequestError(
        "bad input",
        response=httpx.Response(400, request=openai_request()),
        body=None,
    )
    embedder = OpenAIEmbedder(client_factory=lambda: StubClient(StubEmbeddings(error=error)))

    with pytest.raises(ProviderError) as info:
        embedder.embed_single("x")
    assert info.value.status == 400
    assert info.value.message == "bad input"


def test_openai_connection_errors_have_no_status():
    error = openai.APIConnectionError(request=openai_request())
    embedder = OpenAIEmbedder(client_factory=lambda: StubClient(StubEmbeddings(error=error)))

    with pytest.raises(ProviderError) as info:
        embedder.embed_single("x")
    assert info.value.status is None


def test_registry_builds_both_providers():
    assert set(list_embedders()) >= {"openai", "huggingface"}
    embedder = get_embedder("openai", client_factory=lambda: StubClient(StubEmbeddings(vector=[1.0])))
    assert embedder.name == f"openai_{config.OPENAI_MODEL}"
    assert get_embedder("huggingface", api_key="t").dimension == config.HF_EMBEDDING_DIM
    with pytest.raises(ValueError):
        get_embedder("word2vec")
