"""
Hugging Face Inference API backend.
Feature extraction with sentence-transformers/all-MiniLM-L6-v2 (384 dims).
"""

import os
from typing import Optional

import httpx
import numpy as np
from dotenv import load_dotenv

from vector_muse.core.errors import ProviderError
from .base import BaseEmbedder, register_embedder
import config


load_dotenv()


@register_embedder("huggingface")
class HuggingFaceEmbedder(BaseEmbedder):
    """
    Hugging Face hosted inference embedding backend.

    The endpoint returns either a pooled sentence vector or one vector per
    token; token vectors are mean-pooled.
    """

    def __init__(
        self,
        model: str = config.HF_MODEL,
        api_key: Optional[str] = None,
        normalize_output: bool = False,
        timeout: float = config.PROVIDER_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Hugging Face embedder.

        Args:
            model: Model id on the Hub
            api_key: Optional token (defaults to HF_API_KEY env var)
            normalize_output: L2-normalize returned vectors
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.model = model
        self.api_key = api_key or os.getenv("HF_API_KEY", "")
        self.normalize_output = normalize_output
        self.timeout = timeout
        self._transport = transport
        self.url = config.HF_INFERENCE_URL.format(model=model)

    @property
    def name(self) -> str:
        return f"huggingface_{self.model.split('/')[-1]}"

    @property
    def dimension(self) -> int:
        return config.HF_EMBEDDING_DIM

    async def aembed_single(self, text: str) -> np.ndarray:
        vector = await self._with_retry(lambda: self._request(self.clean_text(text)))
        return self.normalize(vector) if self.normalize_output else vector

    async def _request(self, text: str) -> np.ndarray:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, headers=headers, json={"inputs": text})
        except httpx.HTTPError as e:
            raise ProviderError(None, f"Could not reach Hugging Face: {e}") from e

        if response.status_code != 200:
            raise ProviderError(response.status_code, self._error_message(response))

        return self._pool(response.json())

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return f"API error: {response.status_code}"
        if isinstance(payload, dict) and "error" in payload:
            return str(payload["error"])
        return f"API error: {response.status_code}"

    @staticmethod
    def _pool(payload) -> np.ndarray:
        """Reduce the response to one vector."""
        arr = np.asarray(payload, dtype=np.float64)
        # [[...]] wraps a single input; [[[...]]] adds a token axis
        while arr.ndim > 2:
            arr = arr[0]
        if arr.ndim == 2:
            arr = arr.mean(axis=0) if arr.shape[0] > 1 else arr[0]
        if arr.ndim != 1 or arr.size == 0:
            raise ProviderError(None, f"Unexpected embedding payload shape {arr.shape}")
        return arr
