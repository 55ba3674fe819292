from __future__ import annotations

import numpy as np
import pytest

from src.facesync.facesync.core.exceptions import DegenerateInputError, ValidationError
from src.facesync.facesync.matching.normalizer import LandmarkNormalizer


def _random_face(seed: int, points: int = 68) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.uniform(0, 640, size=points * 2)


def test_normalized_cloud_is_centered_with_unit_mean_radius():
    out = LandmarkNormalizer().normalize(_random_face(1))
    points = out.reshape(-1, 2)

    assert np.allclose(points.mean(axis=0), 0.0, atol=1e-12)
    assert np.linalg.norm(points, axis=1).mean() == pytest.approx(1.0)


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_normalize_is_idempotent(seed):
    normalizer = LandmarkNormalizer()
    once = normalizer.normalize(_random_face(seed))
    twice = normalizer.normalize(once)

    assert np.allclose(once, twice, atol=1e-12)


def test_position_and_size_do_not_matter():
    normalizer = LandmarkNormalizer()
    face = _random_face(4)
    moved = face * 2.5 + 40.0

    assert np.allclose(normalizer.normalize(face), normalizer.normalize(moved))


def test_rotation_is_not_corrected():
    normalizer = LandmarkNormalizer()
    face = _random_face(5)
    x, y = face[0::2], face[1::2]
    rotated = np.empty_like(face)
    rotated[0::2], rotated[1::2] = -y, x

    assert not np.allclose(normalizer.normalize(face), normalizer.normalize(rotated))


def test_three_dimensional_points():
    out = LandmarkNormalizer(point_dim=3).normalize([0, 0, 0, 2, 0, 0, 0, 2, 0, 0, 0, 2])

    assert out.shape == (12,)
    assert np.linalg.norm(out.reshape(-1, 3), axis=1).mean() == pytest.approx(1.0)


def test_coincident_points_are_degenerate():
    with pytest.raises(DegenerateInputError):
        LandmarkNormalizer().normalize([3.0, 4.0] * 10)


@pytest.mark.parametrize(
    "vector",
    [
        [],
        [1.0, 2.0, 3.0],
        [1.0, float("nan"), 2.0, 3.0],
        [1.0, float("inf"), 2.0, 3.0],
    ],
)
def test_invalid_vectors_are_rejected(vector):
    with pytest.raises(ValidationError):
        LandmarkNormalizer().normalize(vector)


def test_point_dim_must_be_positive():
    with pytest.raises(ValueError):
        LandmarkNormalizer(point_dim=0)
