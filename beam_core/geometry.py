"""2-D geometry kernel: normals, reflection and ray/segment intersection.

All helpers are pure. Degenerate input (zero-length segment or direction,
parallel ray) yields ``None`` instead of raising.

Example:
    >>> import numpy as np
    >>> from beam_core.geometry import ray_segment_intersection
    >>> hit = ray_segment_intersection(np.array([0.0, 0.0]), np.array([1.0, 0.0]), np.array([5.0, -1.0]), np.array([5.0, 1.0]))
    >>> np.allclose(hit, np.array([5.0, 0.0]))
    True
"""

from __future__ import annotations

from typing import Optional

import numpy as np
from numpy.typing import NDArray

Vector = NDArray[np.float64]

PARALLEL_EPS = 1e-6


def as_point(p) -> Vector:
    return np.asarray(p, dtype=float).reshape(2)


def cross2(a: Vector, b: Vector) -> float:
    """z component of the 3-D cross product of two planar vectors."""

    return float(a[0] * b[1] - a[1] * b[0])


def normalize(v: Vector) -> Optional[Vector]:
    vv = as_point(v)
    n = float(np.hypot(vv[0], vv[1]))
    if n == 0.0 or not np.isfinite(n):
        return None
    return vv / n


def line_normal(start: Vector, end: Vector) -> Optional[Vector]:
    """Unit normal ``(dy, -dx) / len`` of the segment ``start -> end``."""

    d = as_point(end) - as_point(start)
    length = float(np.hypot(d[0], d[1]))
    if length == 0.0:
        return None
    return np.array([d[1], -d[0]]) / length


def reflect(incoming: Vector, normal: Vector) -> Optional[Vector]:
    """Specular reflection ``v - 2 (v.n) n``, renormalized."""

    v = as_point(incoming)
    n = normalize(normal)
    if n is None:
        return None
    r = v - 2.0 * float(np.dot(v, n)) * n
    return normalize(r)


def ray_segment_intersection(
    origin: Vector,
    direction: Vector,
    seg_start: Vector,
    seg_end: Vector,
    eps: float = PARALLEL_EPS,
) -> Optional[Vector]:
    """Return the hit point of a ray and a finite segment or None.

    Ray equation: x = origin + t1 direction, t1 >= 0.
    Segment: x = seg_start + t2 (seg_end - seg_start), 0 <= t2 <= 1.
    """

    o = as_point(origin)
    d = as_point(direction)
    a = as_point(seg_start)
    v1 = o - a
    v2 = as_point(seg_end) - a
    v3 = np.array([-d[1], d[0]])
    denom = float(np.dot(v2, v3))
    if abs(denom) < eps:
        return None
    t1 = cross2(v2, v1) / denom
    t2 = float(np.dot(v1, v3)) / denom
    if t1 >= 0.0 and 0.0 <= t2 <= 1.0:
        return o + d * t1
    return None


def distance_point_to_segment(point: Vector, seg_start: Vector, seg_end: Vector) -> Optional[float]:
    """Perpendicular distance from ``point`` to the line through the segment.

    The projection parameter is not clamped to [0, 1], so points past either
    endpoint are measured against the extended line.
    """

    p = as_point(point)
    a = as_point(seg_start)
    d = as_point(seg_end) - a
    len_sq = float(np.dot(d, d))
    if len_sq == 0.0:
        return None
    t = float(np.dot(p - a, d)) / len_sq
    closest = a + t * d
    return float(np.linalg.norm(p - closest))
