"""
Linear-algebra primitives over embedding vectors.
All functions are pure and return new arrays.
"""

from typing import Sequence, Union

import numpy as np

from vector_muse.core.errors import DimensionMismatch, EmptyInput, InsufficientSamples

ArrayLike = Union[np.ndarray, Sequence[float]]
MatrixLike = Union[np.ndarray, Sequence[Sequence[float]]]


def as_vector(v: ArrayLike) -> np.ndarray:
    """Convert to a 1-D float64 array."""
    arr = np.asarray(v, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"Expected a 1-D vector, got shape {arr.shape}")
    return arr


def as_matrix(vectors: MatrixLike) -> np.ndarray:
    """
    Stack vectors into an (n, D) float64 matrix.

    Raises:
        EmptyInput: If there are no vectors
        DimensionMismatch: If the vectors differ in length
    """
    if isinstance(vectors, np.ndarray):
        if vectors.ndim != 2:
            raise ValueError(f"Expected a 2-D matrix, got shape {vectors.shape}")
        if vectors.shape[0] == 0:
            raise EmptyInput("Batch is empty")
        return vectors.astype(np.float64, copy=False)

    rows = [as_vector(v) for v in vectors]
    if not rows:
        raise EmptyInput("Batch is empty")

    expected = len(rows[0])
    for row in rows[1:]:
        if len(row) != expected:
            raise DimensionMismatch(expected, len(row))
    return np.vstack(rows)


def _check_same_length(a: np.ndarray, b: np.ndarray) -> None:
    if a.shape != b.shape:
        raise DimensionMismatch(len(a), len(b))


def add(a: ArrayLike, b: ArrayLike) -> np.ndarray:
    a, b = as_vector(a), as_vector(b)
    _check_same_length(a, b)
    return a + b


def sub(a: ArrayLike, b: ArrayLike) -> np.ndarray:
    a, b = as_vector(a), as_vector(b)
    _check_same_length(a, b)
    return a - b


def scale(v: ArrayLike, k: float) -> np.ndarray:
    return as_vector(v) * float(k)


def mean(vectors: MatrixLike) -> np.ndarray:
    """Element-wise mean across all vectors in a batch."""
    return as_matrix(vectors).mean(axis=0)


def center(vectors: MatrixLike) -> np.ndarray:
    """Subtract the batch mean from every vector."""
    matrix = as_matrix(vectors)
    return matrix - matrix.mean(axis=0)


def covariance(centered: MatrixLike) -> np.ndarray:
    """
    Sample covariance of an already-centered batch.

    Args:
        centered: Matrix of shape (n, D) with zero column means

    Returns:
        Matrix of shape (D, D) equal to X^T X / (n - 1)
    """
    x = as_matrix(centered)
    n = x.shape[0]
    if n < 2:
        raise InsufficientSamples(n)
    return (x.T @ x) / (n - 1)


def gram(centered: MatrixLike) -> np.ndarray:
    """
    Gram companion of the covariance: X X^T / (n - 1), shape (n, n).

    Shares its non-zero eigenvalues with covariance(centered), which makes it
    the cheap matrix to decompose when D is much larger than n.
    """
    x = as_matrix(centered)
    n = x.shape[0]
    if n < 2:
        raise InsufficientSamples(n)
    return (x @ x.T) / (n - 1)


def norm(v: ArrayLike) -> float:
    return float(np.linalg.norm(as_vector(v)))


def cosine_similarity(a: ArrayLike, b: ArrayLike) -> float:
    """Cosine similarity; 0.0 when either vector has zero norm."""
    a, b = as_vector(a), as_vector(b)
    _check_same_length(a, b)
    denom = np.linalg.norm(a) * np.linalg.norm(b)
    if denom == 0:
        return 0.0
    return float(np.dot(a, b) / denom)


def normalize01(value: float, lo: float, hi: float) -> float:
    """Map value into [0, 1] against (lo, hi); 0.5 for a degenerate range."""
    if hi == lo:
        return 0.5
    return (value - lo) / (hi - lo)


def blend(a: ArrayLike, b: ArrayLike, ratio: float) -> np.ndarray:
    """Linear blend a*(1 - ratio) + b*ratio."""
    return add(scale(a, 1.0 - ratio), scale(b, ratio))
