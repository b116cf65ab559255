"""
OpenAI embedding backend.
Uses the embeddings endpoint through the async OpenAI client.
"""

import os
from typing import Callable, Optional

import numpy as np
import openai
from openai import AsyncOpenAI
from dotenv import load_dotenv

from vector_muse.core.errors import ProviderError
from .base import BaseEmbedder, register_embedder
import config


# Load environment variables
load_dotenv()


@register_embedder("openai")
class OpenAIEmbedder(BaseEmbedder):
    """
    OpenAI embedding backend.

    Features:
    - One request per text so a batch fans out concurrently
    - Rate limit handling with retries
    - Provider failures surfaced as ProviderError with the HTTP status
    """

    def __init__(
        self,
        model: str = config.OPENAI_MODEL,
        api_key: Optional[str] = None,
        normalize_output: bool = False,
        client_factory: Optional[Callable[[], AsyncOpenAI]] = None,
    ):
        """
        Initialize the OpenAI embedder.

        Args:
            model: OpenAI model name (default: text-embedding-ada-002)
            api_key: Optional API key (defaults to OPENAI_API_KEY env var)
            normalize_output: L2-normalize returned vectors
            client_factory: Builds the async client (tests inject a stub)

        Raises:
            ProviderError: If no API key is available
        """
        self.model = model
        self.normalize_output = normalize_output

        # Get API key from env if not provided
        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not api_key and client_factory is None:
            raise ProviderError(
                401,
                "OpenAI API key not found. "
                "Set OPENAI_API_KEY in .env file or enter it in the sidebar."
            )

        self._client_factory = client_factory or (lambda: AsyncOpenAI(api_key=api_key))
        self._dimension = config.OPENAI_EMBEDDING_DIM

    @property
    def name(self) -> str:
        return f"openai_{self.model}"

    @property
    def dimension(self) -> int:
        return self._dimension

    async def aembed_single(self, text: str) -> np.ndarray:
        vector = await self._with_retry(lambda: self._request(self.clean_text(text)))
        return self.normalize(vector) if self.normalize_output else vector

    async def _request(self, text: str) -> np.ndarray:
        """One embeddings call; translates client exceptions to ProviderError."""
        # A fresh client per call keeps it bound to the running event loop
        try:
            async with self._client_factory() as client:
                response = await client.embeddings.create(model=self.model, input=text)
        except openai.APIStatusError as e:
            raise ProviderError(e.status_code, e.message) from e
        except openai.APIConnectionError as e:
            raise ProviderError(None, f"Could not reach OpenAI: {e}") from e
        except openai.OpenAIError as e:
            raise ProviderError(None, str(e)) from e

        return np.asarray(response.data[0].embedding, dtype=np.float64)
