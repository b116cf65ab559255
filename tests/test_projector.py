import asyncio
import time
import warnings

import numpy as np
import pytest

from vector_muse.core import eigen
from vector_muse.core.batch import EmbeddingBatch
from vector_muse.core.eigen import Eigendecomposer, decompose_symmetric
from vector_muse.core.errors import DimensionMismatch, EmptyInput, RankDeficientProjection
from vector_muse.core.perceptual import RGB, map_colors
from vector_muse.core.projector import PCAProjector, aproject, project


def hand_batch() -> np.ndarray:
    """Two orthogonal varying columns plus four constant ones."""
    e1 = np.array([3.0, -3.0, 3.0, -3.0])
    e2 = np.array([1.0, 1.0, -1.0, -1.0])
    constants = [5.0, -2.0, 0.5, 7.0]
    columns = [e1 + 1.0, e2 + 2.0] + [np.full(4, c) for c in constants]
    return np.column_stack(columns)


def test_hand_computed_projection():
    projection = project(hand_batch(), target_dims=2)

    expected = np.array([[3, 1], [-3, 1], [3, -1], [-3, -1]], dtype=float)
    np.testing.assert_allclose(projection.coords, expected, atol=1e-6)
    np.testing.assert_allclose(projection.explained_variance, [12.0, 4.0 / 3.0], atol=1e-9)
    assert not projection.rank_deficient


def test_hand_batch_to_3d_is_rank_deficient():
    with pytest.warns(RankDeficientProjection):
        projection = project(hand_batch(), target_dims=3)

    assert projection.rank_deficient
    assert projection.coords.shape == (4, 3)
    np.testing.assert_allclose(projection.coords[:, 2], 0.0, atol=1e-12)


def test_projection_is_deterministic():
    rng = np.random.default_rng(42)
    x = rng.normal(size=(12, 40))
    assert np.array_equal(project(x).coords, project(x).coords)


def test_passthrough_when_already_small():
    x = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 7.0]])
    projection = project(x, target_dims=3)
    assert projection.passthrough
    assert np.array_equal(projection.coords, x)
    assert projection.coords is not x

    x3 = np.arange(9, dtype=float).reshape(3, 3)
    assert np.array_equal(project(x3, target_dims=3).coords, x3)


def test_zero_variance_batch_projects_to_origin_with_mid_colors():
    x = np.tile([0.2, -1.0, 3.0, 4.0, 5.0], (3, 1))
    with pytest.warns(RankDeficientProjection):
        projection = project(x)

    assert np.array_equal(projection.coords, np.zeros((3, 3)))
    assert map_colors(projection.coords) == [RGB(127, 127, 127)] * 3


def test_single_point_is_origin():
    with pytest.warns(RankDeficientProjection):
        projection = project([[1.0, 2.0, 3.0, 4.0]])
    assert projection.coords.shape == (1, 3)
    assert np.array_equal(projection.coords, np.zeros((1, 3)))
    assert projection.rank_deficient


def test_empty_and_ragged_batches_fail():
    with pytest.raises(EmptyInput):
        project([])
    with pytest.raises(DimensionMismatch):
        project([[1, 2, 3, 4], [1, 2, 3]])


def test_variance_is_descending_and_axes_orthonormal():
    rng = np.random.default_rng(3)
    x = rng.normal(size=(20, 8)) * np.array([10, 5, 3, 1, 1, 1, 1, 1])

    projector = PCAProjector(n_components=3)
    projection = projector.fit(x)

    variance = projection.explained_variance
    assert variance[0] >= variance[1] >= variance[2] > 0
    components = projector.components
    np.testing.assert_allclose(components @ components.T, np.eye(3), atol=1e-10)


def test_gram_path_matches_svd():
    rng = np.random.default_rng(11)
    x = rng.normal(size=(6, 50))

    coords = project(x).coords

    centered = x - x.mean(axis=0)
    u, s, _ = np.linalg.svd(centered, full_matrices=False)
    reference = u[:, :3] * s[:3]
    np.testing.assert_allclose(np.abs(coords), np.abs(reference), atol=1e-8)


def test_sign_convention_largest_entry_positive():
    rng = np.random.default_rng(5)
    x = rng.normal(size=(10, 6))
    projector = PCAProjector()
    projector.fit(x)
    for row in projector.components:
        assert row[np.argmax(np.abs(row))] > 0


def test_transform_matches_fit():
    rng = np.random.default_rng(9)
    x = rng.normal(size=(8, 30))
    projector = PCAProjector()
    projection = projector.fit(x)

    np.testing.assert_allclose(projector.transform(x), projection.coords, atol=1e-10)
    np.testing.assert_allclose(projector.transform_single(x[2]), projection.coords[2], atol=1e-10)


def test_transform_before_fit_raises():
    with pytest.raises(RuntimeError):
        PCAProjector().transform([[1.0, 2.0, 3.0, 4.0]])


def test_aproject_matches_project_inline_and_threaded():
    rng = np.random.default_rng(1)
    small = rng.normal(size=(5, 10))
    large = rng.normal(size=(60, 10))

    assert np.array_equal(asyncio.run(aproject(small)).coords, project(small).coords)
    assert np.array_equal(asyncio.run(aproject(large)).coords, project(large).coords)


def test_wide_batch_takes_the_gram_path(monkeypatch):
    def no_covariance(_):
        raise AssertionError("D x D covariance built for a wide batch")

    taken = []
    gram_path = Eigendecomposer._decompose_via_gram

    def recording_gram_path(self, x):
        taken.append(x.shape)
        return gram_path(self, x)

    monkeypatch.setattr(eigen, "covariance", no_covariance)
    monkeypatch.setattr(Eigendecomposer, "_decompose_via_gram", recording_gram_path)

    x = np.random.default_rng(2).normal(size=(10, 300))
    result = Eigendecomposer().decompose(x - x.mean(axis=0), 3)

    assert taken == [(10, 300)]
    assert result.n_usable == 3


def test_fifty_by_1536_projects_within_interactive_budget():
    batch = np.random.default_rng(3).normal(size=(50, 1536))

    started = time.perf_counter()
    projection = project(batch)
    elapsed = time.perf_counter() - started

    assert projection.coords.shape == (50, 3)
    assert not projection.rank_deficient
    assert elapsed < 0.2


def test_decompose_symmetric_orders_by_magnitude():
    values, vectors = decompose_symmetric(np.diag([1.0, 5.0, 3.0]))
    assert values.tolist() == [5.0, 3.0, 1.0]
    np.testing.assert_allclose(vectors[:, 0], [0.0, 1.0, 0.0], atol=1e-12)


def test_eigendecomposer_pads_missing_components():
    centered = np.array([[1.0, 0.0, 0.0], [-1.0, 0.0, 0.0]])
    result = Eigendecomposer().decompose(centered, n_components=3)
    assert result.n_usable == 1
    assert result.rank_deficient
    assert result.components.shape == (3, 3)
    assert np.array_equal(result.components[1:], np.zeros((2, 3)))


def test_batch_preserves_order_and_is_read_only():
    vectors = np.array([[1.0, 2.0], [3.0, 4.0]])
    batch = EmbeddingBatch.from_pairs([("b", vectors[0]), ("a", vectors[1])])

    assert batch.labels == ("b", "a")
    assert batch.dimension == 2
    assert batch.vector("a").tolist() == [3.0, 4.0]
    with pytest.raises(ValueError):
        batch.vectors[0, 0] = 9.0
    with pytest.raises(KeyError):
        batch.vector("missing")


def test_batch_rejects_mixed_dimensions():
    with pytest.raises(DimensionMismatch):
        EmbeddingBatch.from_pairs([("a", [1.0, 2.0]), ("b", [1.0])])
    with pytest.raises(EmptyInput):
        EmbeddingBatch.from_pairs([])


def test_full_rank_projection_emits_no_warning():
    rng = np.random.default_rng(2)
    with warnings.catch_warnings():
        warnings.simplefilter("error", RankDeficientProjection)
        project(rng.normal(size=(10, 20)))
