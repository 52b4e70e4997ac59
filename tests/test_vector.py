import numpy as np
import pytest

from core.vector import cosine_similarity
from util.errors import DimensionMismatch


@pytest.mark.parametrize("v", [[1.0, 2.0, 3.0], [0.5, -0.25], [1e-3, 4.0, -7.5, 2.0]])
def test_self_similarity_is_one(v):
    assert cosine_similarity(v, v) == pytest.approx(1.0)


def test_opposite_vectors_are_minus_one():
    v = np.array([0.3, -1.2, 4.0])
    assert cosine_similarity(v, -v) == pytest.approx(-1.0)


def test_orthogonal_vectors_are_zero():
    assert cosine_similarity([1, 0], [0, 5]) == pytest.approx(0.0)


def test_zero_vector_has_no_signal():
    assert cosine_similarity([0, 0], [1, 2]) == 0
    assert cosine_similarity([1, 2], [0, 0]) == 0


def test_symmetry():
    a, b = [1.0, 2.0, 3.0], [-2.0, 0.5, 1.0]
    assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))


def test_scale_invariance():
    assert cosine_similarity([1, 1], [10, 10]) == pytest.approx(1.0)


def test_length_mismatch_fails_loud():
    with pytest.raises(DimensionMismatch):
        cosine_similarity([1, 2], [1, 2, 3])


@pytest.mark.parametrize(
    "v",
    [[1e-170, 0.0], [1e-300, 3e-300], [1e200, 1e200], [-1e300, 5e299, 1.0]],
    ids=["tiny", "subnormal-range", "huge", "mixed"],
)
def test_extreme_magnitudes_stay_exact(v):
    assert cosine_similarity(v, v) == pytest.approx(1.0)
    assert cosine_similarity(v, [-x for x in v]) == pytest.approx(-1.0)


def test_tiny_against_huge():
    assert cosine_similarity([1e-170, 0.0], [1e200, 0.0]) == pytest.approx(1.0)
    assert cosine_similarity([1e-170, 0.0], [0.0, 1e200]) == pytest.approx(0.0)
