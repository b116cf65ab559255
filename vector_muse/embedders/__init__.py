"""
Embedding backends for Vector-Muse.
"""

from .base import BaseEmbedder, get_embedder, list_embedders
from .openai_embedder import OpenAIEmbedder
from .huggingface_embedder import HuggingFaceEmbedder
from .fetcher import BatchFetcher

__all__ = [
    "BaseEmbedder",
    "get_embedder",
    "list_embedders",
    "OpenAIEmbedder",
    "HuggingFaceEmbedder",
    "BatchFetcher",
]
