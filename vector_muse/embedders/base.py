"""
Base class for embedding backends.
Defines the interface all embedders must implement.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, TypeVar

import numpy as np

from vector_muse.core.errors import ProviderError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RATE_LIMIT_STATUS = 429


class BaseEmbedder(ABC):
    """
    Abstract base class for text embedding backends.

    All embedders must:
    - Embed one text per request, asynchronously, raising ProviderError on failure
    - Report their embedding dimension
    - Provide a unique name for display and logging
    """

    max_retries: int = 3
    base_delay: float = 2.0

    @abstractmethod
    async def aembed_single(self, text: str) -> np.ndarray:
        """
        Embed a single text.

        Args:
            text: Text to embed

        Returns:
            np.ndarray of shape (dimension,)

        Raises:
            ProviderError: If the provider call fails
        """
        pass

    @property
    @abstractmethod
    def dimension(self) -> int:
        """
        Return the dimensionality of the embeddings.

        Returns:
            Integer dimension of embedding vectors
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Unique name for this embedder.

        Returns:
            String identifier for the embedder
        """
        pass

    def embed(self, texts: list[str]) -> np.ndarray:
        """
        Embed texts from synchronous code, one concurrent request per text.

        Returns:
            np.ndarray of shape (len(texts), dimension)
        """
        if not texts:
            return np.array([]).reshape(0, self.dimension)

        async def _gather() -> list[np.ndarray]:
            return await asyncio.gather(*(self.aembed_single(t) for t in texts))

        return np.vstack(asyncio.run(_gather()))

    def embed_single(self, text: str) -> np.ndarray:
        """Embed one text from synchronous code."""
        return asyncio.run(self.aembed_single(text))

    async def _with_retry(self, call: Callable[[], Awaitable[T]]) -> T:
        """
        Run a provider call, retrying only on rate limits.

        The delay doubles on each attempt starting from base_delay.
        """
        for attempt in range(self.max_retries):
            try:
                return await call()
            except ProviderError as e:
                if e.status == RATE_LIMIT_STATUS and attempt < self.max_retries - 1:
                    delay = self.base_delay * (2 ** attempt)
                    logger.warning(f"{self.name} rate limited. Waiting {delay}s before retry...")
                    await asyncio.sleep(delay)
                    continue
                raise

        raise ProviderError(RATE_LIMIT_STATUS, f"Still rate limited after {self.max_retries} attempts")

    @staticmethod
    def normalize(vectors: np.ndarray) -> np.ndarray:
        """
        L2-normalize vectors for cosine similarity.

        Args:
            vectors: Array of shape (n, dim) or (dim,)

        Returns:
            Normalized array of same shape
        """
        norms = np.linalg.norm(vectors, axis=-1, keepdims=True)
        # Avoid division by zero
        norms = np.where(norms == 0, 1, norms)
        return vectors / norms

    @staticmethod
    def clean_text(text: str, max_chars: int = 20000) -> str:
        """
        Clean and truncate text for embedding.

        Args:
            text: Raw text
            max_chars: Maximum characters (conservative limit for 8191 token models)

        Returns:
            Cleaned text
        """
        if not text:
            return " "  # Empty strings cause API errors

        text = str(text).strip()
        if len(text) > max_chars:
            text = text[:max_chars]

        return text or " "


# Registry for available embedders
_EMBEDDER_REGISTRY: dict[str, type[BaseEmbedder]] = {}


def register_embedder(name: str):
    """
    Decorator to register an embedder class.

    Usage:
        @register_embedder("openai")
        class OpenAIEmbedder(BaseEmbedder):
            ...
    """
    def decorator(cls: type[BaseEmbedder]):
        _EMBEDDER_REGISTRY[name] = cls
        return cls
    return decorator


def get_embedder(name: str, **kwargs) -> BaseEmbedder:
    """
    Get an embedder instance by name.

    Args:
        name: Registered embedder name
        **kwargs: Arguments passed to embedder constructor

    Returns:
        Embedder instance

    Raises:
        ValueError: If embedder name not found
    """
    if name not in _EMBEDDER_REGISTRY:
        available = list(_EMBEDDER_REGISTRY.keys())
        raise ValueError(f"Unknown embedder '{name}'. Available: {available}")

    return _EMBEDDER_REGISTRY[name](**kwargs)


def list_embedders() -> list[str]:
    """Return list of registered embedder names."""
    return list(_EMBEDDER_REGISTRY.keys())
