import numpy as np
import pytest

from vector_muse.core.errors import DimensionMismatch, EmptyInput, InsufficientSamples
from vector_muse.core.vector_math import (
    add,
    as_matrix,
    blend,
    center,
    cosine_similarity,
    covariance,
    gram,
    mean,
    normalize01,
    scale,
    sub,
)


def test_add_sub_scale():
    assert add([1, 2], [3, 4]).tolist() == [4, 6]
    assert sub([1, 2], [3, 4]).tolist() == [-2, -2]
    assert scale([1, -2], -0.5).tolist() == [-0.5, 1.0]


def test_length_mismatch_fails_fast():
    with pytest.raises(DimensionMismatch):
        add([1, 2, 3], [1, 2])
    with pytest.raises(DimensionMismatch):
        cosine_similarity([1, 0], [1, 0, 0])


def test_mismatch_is_a_value_error():
    with pytest.raises(ValueError):
        sub([1.0], [1.0, 2.0])


def test_as_matrix_rejects_ragged_and_empty():
    with pytest.raises(DimensionMismatch):
        as_matrix([[1, 2, 3], [1, 2]])
    with pytest.raises(EmptyInput):
        as_matrix([])


def test_mean_and_center():
    x = [[1, 2], [3, 6]]
    assert mean(x).tolist() == [2, 4]
    centered = center(x)
    assert centered.tolist() == [[-1, -2], [1, 2]]
    assert np.allclose(centered.mean(axis=0), 0)


def test_covariance_of_identical_rows_is_zero():
    centered = center([[1.0, 2.0, 3.0]] * 4)
    assert np.array_equal(covariance(centered), np.zeros((3, 3)))


def test_covariance_needs_two_samples():
    with pytest.raises(InsufficientSamples):
        covariance([[0.0, 0.0]])
    with pytest.raises(InsufficientSamples):
        gram([[0.0, 0.0]])


def test_covariance_and_gram_share_nonzero_spectrum():
    rng = np.random.default_rng(7)
    centered = center(rng.normal(size=(4, 9)))
    cov_values = np.sort(np.linalg.eigvalsh(covariance(centered)))[-3:]
    gram_values = np.sort(np.linalg.eigvalsh(gram(centered)))[-3:]
    np.testing.assert_allclose(cov_values, gram_values, atol=1e-10)


def test_cosine_similarity_bounds():
    v = [0.3, -1.2, 4.0]
    assert cosine_similarity(v, v) == pytest.approx(1.0)
    assert cosine_similarity(v, [-x for x in v]) == pytest.approx(-1.0)
    assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)


def test_cosine_similarity_zero_vector():
    assert cosine_similarity([0, 0, 0], [1, 2, 3]) == 0.0


def test_normalize01():
    assert normalize01(5, 0, 10) == 0.5
    assert normalize01(0, 0, 10) == 0.0
    assert normalize01(3, 3, 3) == 0.5


def test_blend_endpoints_and_midpoint():
    a, b = [1.0, 0.0], [0.0, 1.0]
    assert blend(a, b, 0.0).tolist() == a
    assert blend(a, b, 1.0).tolist() == b
    assert blend(a, b, 0.5).tolist() == [0.5, 0.5]
