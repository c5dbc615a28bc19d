from __future__ import annotations

import math

from pygame.math import Vector3


def _safe_normalize(vector: Vector3) -> Vector3:
    return _safe_normalize_xyz(vector.x, vector.y, vector.z)


def _safe_normalize_xyz(x: float, y: float, z: float) -> Vector3:
    magnitude_sq = x * x + y * y + z * z
    if magnitude_sq <= 0.0:
        return Vector3()
    inv = 1.0 / math.sqrt(magnitude_sq)
    return Vector3(x * inv, y * inv, z * inv)


def _clamp_length(vector: Vector3, max_length: float) -> Vector3:
    magnitude_sq = vector.length_squared()
    if magnitude_sq <= max_length * max_length:
        return Vector3(vector)
    if magnitude_sq == 0.0:
        return Vector3()
    scale = max_length / math.sqrt(magnitude_sq)
    return Vector3(vector.x * scale, vector.y * scale, vector.z * scale)


def _sign(value: float) -> float:
    if value > 0.0:
        return 1.0
    if value < 0.0:
        return -1.0
    return 0.0
