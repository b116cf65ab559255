"""
Symmetric eigendecomposition for PCA over small batches of wide vectors.

With n samples of dimension D the covariance is D x D but has rank at most
n - 1. When D > n we decompose the n x n Gram matrix instead and lift its
eigenvectors back into feature space, which keeps a 1536-wide batch of a few
dozen words well inside an interactive refresh.
"""

import logging
from dataclasses import dataclass

import numpy as np

from vector_muse.core.vector_math import MatrixLike, as_matrix, covariance, gram
import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EigenResult:
    """Principal components ranked by eigenvalue."""
    eigenvalues: np.ndarray    # (k,) descending, zero for padded components
    components: np.ndarray     # (k, D) unit rows, zero rows for padded components
    n_usable: int              # Components with a non-zero eigenvalue
    rank_deficient: bool       # True when n_usable < requested components


def _fix_signs(vectors: np.ndarray) -> np.ndarray:
    """Flip each column so its largest-magnitude entry is positive."""
    if vectors.size == 0:
        return vectors
    pivots = np.argmax(np.abs(vectors), axis=0)
    signs = np.sign(vectors[pivots, np.arange(vectors.shape[1])])
    signs[signs == 0] = 1.0
    return vectors * signs


def decompose_symmetric(matrix: MatrixLike) -> tuple[np.ndarray, np.ndarray]:
    """
    Eigendecompose a real symmetric matrix.

    Args:
        matrix: Square symmetric matrix of shape (m, m)

    Returns:
        Tuple of eigenvalues (m,) ordered by descending magnitude and the
        matching unit eigenvectors as columns (m, m). Ties keep ascending
        order of the solver's output.
    """
    sym = as_matrix(matrix)
    if sym.shape[0] != sym.shape[1]:
        raise ValueError(f"Expected a square matrix, got shape {sym.shape}")

    values, vectors = np.linalg.eigh(sym)
    order = np.lexsort((np.arange(len(values)), -np.abs(values)))
    return values[order], _fix_signs(vectors[:, order])


class Eigendecomposer:
    """
    Computes principal axes of a centered batch.

    Picks the Gram path when the batch is wider than it is tall, and pads with
    zero components when the data spans fewer dimensions than requested.
    """

    def __init__(self, tolerance: float = config.EIGEN_TOLERANCE):
        self.tolerance = tolerance

    def decompose(self, centered: MatrixLike, n_components: int = config.PCA_N_COMPONENTS) -> EigenResult:
        """
        Principal components of the covariance of a centered batch.

        Args:
            centered: Matrix of shape (n, D) with zero column means
            n_components: Number of components to return

        Returns:
            EigenResult with exactly n_components rows
        """
        x = as_matrix(centered)
        n, d = x.shape

        if n < 2:
            # A single centered point is the origin: no direction carries variance
            values = np.zeros(0)
            vectors = np.zeros((d, 0))
        elif d > n:
            values, vectors = self._decompose_via_gram(x)
        else:
            values, vectors = decompose_symmetric(covariance(x))

        top = float(np.abs(values).max()) if values.size else 0.0
        threshold = self.tolerance * max(top, 1.0)
        usable = [i for i, v in enumerate(values) if v > threshold][:n_components]

        eigenvalues = np.zeros(n_components)
        components = np.zeros((n_components, d))
        for slot, i in enumerate(usable):
            eigenvalues[slot] = values[i]
            components[slot] = vectors[:, i]

        rank_deficient = len(usable) < n_components
        if rank_deficient:
            logger.debug(
                f"Only {len(usable)} of {n_components} components usable "
                f"(n={n}, D={d})"
            )

        return EigenResult(
            eigenvalues=eigenvalues,
            components=components,
            n_usable=len(usable),
            rank_deficient=rank_deficient,
        )

    def _decompose_via_gram(self, x: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Eigenpairs of X^T X / (n-1) recovered from X X^T / (n-1)."""
        n = x.shape[0]
        values, u = decompose_symmetric(gram(x))

        lifted = np.zeros((x.shape[1], len(values)))
        for i, value in enumerate(values):
            if value <= 0:
                continue
            lifted[:, i] = (x.T @ u[:, i]) / np.sqrt((n - 1) * value)

        return values, _fix_signs(lifted)
