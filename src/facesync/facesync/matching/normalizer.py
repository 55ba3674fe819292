from __future__ import annotations

from typing import Sequence

import numpy as np

from ..core.constants import DEFAULT_LANDMARK_POINT_DIM, DEGENERATE_EPSILON
from ..core.exceptions import DegenerateInputError, ValidationError


class LandmarkNormalizer:
    """Map a flattened landmark vector to a position/scale invariant form.

    The point cloud is translated so its centroid sits at the origin, then
    scaled so the mean distance of the points from the centroid is 1.
    Orientation is left as captured: a tilted head yields a different vector.
    """

    def __init__(self, point_dim: int = DEFAULT_LANDMARK_POINT_DIM):
        if int(point_dim) <= 0:
            raise ValueError("point_dim must be positive")
        self._point_dim = int(point_dim)

    @property
    def point_dim(self) -> int:
        return self._point_dim

    def normalize(self, vector: Sequence[float]) -> np.ndarray:
        arr = np.asarray(vector, dtype=np.float64).ravel()
        if arr.size == 0:
            raise ValidationError("Dữ liệu landmark trống")
        if not np.all(np.isfinite(arr)):
            raise ValidationError("Dữ liệu landmark chứa giá trị không hợp lệ")
        if arr.size % self._point_dim:
            raise ValidationError(
                f"Số giá trị landmark ({arr.size}) không chia hết cho số chiều mỗi điểm ({self._point_dim})"
            )

        points = arr.reshape(-1, self._point_dim)
        centered = points - points.mean(axis=0)
        scale = float(np.linalg.norm(centered, axis=1).mean())
        if scale <= DEGENERATE_EPSILON:
            raise DegenerateInputError("Các điểm landmark trùng nhau, không thể chuẩn hoá")

        return (centered / scale).ravel()
