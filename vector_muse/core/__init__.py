"""
Core components for Vector-Muse.
"""

from .batch import EmbeddingBatch
from .projector import PCAProjector, Projection, project
from .eigen import Eigendecomposer, EigenResult
from .analogy import AnalogyQuery, resolve, rank_similar
from .perceptual import RGB, AudioParams, map_colors, to_audio_params, to_color

__all__ = [
    "EmbeddingBatch",
    "PCAProjector",
    "Projection",
    "project",
    "Eigendecomposer",
    "EigenResult",
    "AnalogyQuery",
    "resolve",
    "rank_similar",
    "RGB",
    "AudioParams",
    "map_colors",
    "to_audio_params",
    "to_color",
]
