"""
Bounding Boxes - axis-aligned bounds of world polygons.

Used by the collision broad phase, by the circular bound for handle
placement, and by the scene summary / debug plot.
"""

import numpy as np
from numba import njit
from typing import Iterable, Optional, Tuple
import math


Bounds = Tuple[float, float, float, float]


@njit(cache=True, fastmath=True)
def get_bounds(vertices: np.ndarray) -> Tuple[float, float, float, float]:
    """
    Get axis-aligned bounding box for vertices.

    Returns:
        (min_x, min_y, max_x, max_y)
    """
    min_x = vertices[0, 0]
    max_x = vertices[0, 0]
    min_y = vertices[0, 1]
    max_y = vertices[0, 1]

    for i in range(1, len(vertices)):
        x = vertices[i, 0]
        y = vertices[i, 1]

        if x < min_x:
            min_x = x
        elif x > max_x:
            max_x = x

        if y < min_y:
            min_y = y
        elif y > max_y:
            max_y = y

    return min_x, min_y, max_x, max_y


@njit(cache=True, fastmath=True)
def max_vertex_distance(vertices: np.ndarray) -> float:
    """Largest distance from the local origin to any vertex."""
    best = 0.0
    for i in range(len(vertices)):
        d = math.sqrt(vertices[i, 0] * vertices[i, 0] + vertices[i, 1] * vertices[i, 1])
        if d > best:
            best = d
    return best


def compute_scene_bounds(polygons: Iterable[np.ndarray]) -> Optional[Bounds]:
    """
    Union of the bounds of several polygons.

    Args:
        polygons: Iterable of (N, 2) world-space arrays

    Returns:
        (min_x, min_y, max_x, max_y), or None when no polygon was given
    """
    result = None
    for verts in polygons:
        b = get_bounds(verts)
        if result is None:
            result = b
        else:
            result = (
                min(result[0], b[0]),
                min(result[1], b[1]),
                max(result[2], b[2]),
                max(result[3], b[3]),
            )
    return result


def warmup():
    """Warm up JIT compilation."""
    verts = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]], dtype=np.float64)
    _ = get_bounds(verts)
    _ = max_vertex_distance(verts)
