"""
PCA projection for dimensionality reduction.
Handles fitting and transforming embeddings to 3D space.
"""

import asyncio
import logging
import time
import warnings
from dataclasses import dataclass
from typing import Optional

import numpy as np

from vector_muse.core.eigen import Eigendecomposer, EigenResult
from vector_muse.core.errors import RankDeficientProjection
from vector_muse.core.vector_math import MatrixLike, as_matrix
import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Projection:
    """Result of projecting a batch."""
    coords: np.ndarray                      # (n, k) one ProjectedPoint per row
    explained_variance: np.ndarray          # (k,) eigenvalues, empty for pass-through
    rank_deficient: bool = False
    passthrough: bool = False

    @property
    def n_points(self) -> int:
        return self.coords.shape[0]


class PCAProjector:
    """
    PCA-based dimensionality reduction for embedding visualization.

    Features:
    - Fits principal axes on a small batch (tens of vectors)
    - Projects new vectors onto the fitted axes
    - Deterministic: identical input gives bit-identical coordinates
    """

    def __init__(
        self,
        n_components: int = config.PCA_N_COMPONENTS,
        tolerance: float = config.EIGEN_TOLERANCE
    ):
        """
        Initialize PCA projector.

        Args:
            n_components: Output dimensions (default: 3)
            tolerance: Eigenvalue cutoff below which a component is unusable
        """
        self.n_components = n_components
        self._decomposer = Eigendecomposer(tolerance=tolerance)

        self._mean: Optional[np.ndarray] = None
        self._eigen: Optional[EigenResult] = None
        self._passthrough = False
        self._fitted = False

    def fit(self, embeddings: MatrixLike) -> Projection:
        """
        Fit principal axes on embeddings and return projected coordinates.

        Args:
            embeddings: Array of shape (n, embedding_dim)

        Returns:
            Projection with coords of shape (n, n_components), or the input
            unchanged when it is already at most n_components wide
        """
        matrix = as_matrix(embeddings)
        n, d = matrix.shape

        if d <= self.n_components:
            self._mean = None
            self._eigen = None
            self._passthrough = True
            self._fitted = True
            return Projection(
                coords=matrix.copy(),
                explained_variance=np.zeros(0),
                passthrough=True,
            )

        started = time.perf_counter()

        self._mean = matrix.mean(axis=0)
        centered = matrix - self._mean
        self._eigen = self._decomposer.decompose(centered, self.n_components)
        self._passthrough = False
        self._fitted = True

        coords = centered @ self._eigen.components.T

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(f"PCA on {n}x{d} batch took {elapsed_ms:.1f}ms")

        if self._eigen.rank_deficient:
            message = (
                f"Projection has {self._eigen.n_usable} usable axes out of "
                f"{self.n_components}; missing axes are fixed at 0"
            )
            logger.warning(message)
            warnings.warn(message, RankDeficientProjection, stacklevel=2)

        return Projection(
            coords=coords,
            explained_variance=self._eigen.eigenvalues.copy(),
            rank_deficient=self._eigen.rank_deficient,
        )

    def transform(self, embeddings: MatrixLike) -> np.ndarray:
        """
        Project new embeddings onto the fitted axes.

        Args:
            embeddings: Array of shape (n, embedding_dim)

        Returns:
            Array of shape (n, n_components)

        Raises:
            RuntimeError: If the projector hasn't been fitted
        """
        if not self._fitted:
            raise RuntimeError("PCA projector not fitted. Call fit() first.")

        matrix = as_matrix(embeddings)
        if self._passthrough:
            return matrix.copy()

        return (matrix - self._mean) @ self._eigen.components.T

    def transform_single(self, embedding: np.ndarray) -> np.ndarray:
        """Project a single embedding; returns shape (n_components,)."""
        return self.transform(np.asarray(embedding).reshape(1, -1))[0]

    @property
    def components(self) -> Optional[np.ndarray]:
        """Fitted principal axes as rows, or None for pass-through."""
        return None if self._eigen is None else self._eigen.components

    @property
    def is_fitted(self) -> bool:
        """Check if the projector has been fitted."""
        return self._fitted


def project(embeddings: MatrixLike, target_dims: int = config.PCA_N_COMPONENTS) -> Projection:
    """Fit a fresh projector and return the projection of the batch."""
    return PCAProjector(n_components=target_dims).fit(embeddings)


async def aproject(embeddings: MatrixLike, target_dims: int = config.PCA_N_COMPONENTS) -> Projection:
    """
    Project from async code without stalling the event loop on large batches.

    Batches up to MAX_SYNC_BATCH are projected inline; larger ones run in a
    worker thread.
    """
    matrix = as_matrix(embeddings)
    if matrix.shape[0] <= config.MAX_SYNC_BATCH:
        return project(matrix, target_dims)

    logger.info(f"Projecting {matrix.shape[0]} vectors in a worker thread")
    return await asyncio.to_thread(project, matrix, target_dims)
