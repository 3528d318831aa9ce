"""
Collision Detection - polygon intersection tests and MTV resolution.

This module provides:
1. AABB pre-check - Ultra-fast bounding box filter (broad phase)
2. Edge crossing + centroid containment - narrow phase, exact for convex
   polygons and conservative for near-convex ones
3. SAT minimum translation vector - positional penetration removal
4. Shapely-based overlap - exact interior test used for diagnostics

All kernels take (N, 2) float64 world-space arrays.
"""

import numpy as np
from numba import njit
from shapely.geometry import Polygon
from shapely.validation import make_valid
from typing import Optional, Tuple
import math

from config import CONFIG
from core.polygon import Shape


EPSILON = CONFIG.geometry.epsilon
AXIS_FLOOR = CONFIG.geometry.axis_floor


# =============================================================================
# AXIS-ALIGNED BOUNDING BOX (AABB) CHECKS
# =============================================================================

@njit(cache=True, fastmath=True)
def bounds_overlap(
    b1_min_x: float, b1_min_y: float, b1_max_x: float, b1_max_y: float,
    b2_min_x: float, b2_min_y: float, b2_max_x: float, b2_max_y: float
) -> bool:
    """
    Check if two AABBs overlap.

    Returns True if overlapping (touching counts), False if separated.
    """
    return not (
        b1_max_x < b2_min_x or b2_max_x < b1_min_x or
        b1_max_y < b2_min_y or b2_max_y < b1_min_y
    )


def bounds_overlap_tuple(b1: Tuple[float, float, float, float],
                         b2: Tuple[float, float, float, float]) -> bool:
    """Check if two (min_x, min_y, max_x, max_y) tuples overlap."""
    return bounds_overlap(b1[0], b1[1], b1[2], b1[3], b2[0], b2[1], b2[2], b2[3])


# =============================================================================
# PRIMITIVE PREDICATES
# =============================================================================

@njit(cache=True)
def polygon_centroid(vertices: np.ndarray) -> Tuple[float, float]:
    """Vertex average of a polygon."""
    n = len(vertices)
    cx = 0.0
    cy = 0.0
    for i in range(n):
        cx += vertices[i, 0]
        cy += vertices[i, 1]
    return cx / n, cy / n


@njit(cache=True)
def point_in_polygon(px: float, py: float, polygon: np.ndarray) -> bool:
    """
    Ray-casting point-in-polygon test (even-odd rule).

    Polygons with fewer than three vertices contain nothing.
    """
    n = len(polygon)
    if n < 3:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        xi = polygon[i, 0]
        yi = polygon[i, 1]
        xj = polygon[j, 0]
        yj = polygon[j, 1]

        if (yi > py) != (yj > py):
            x_cross = (xj - xi) * (py - yi) / (yj - yi) + xi
            if px < x_cross:
                inside = not inside
        j = i

    return inside


@njit(cache=True)
def _collinear_overlap(
    p1x: float, p1y: float, p2x: float, p2y: float,
    p3x: float, p3y: float, p4x: float, p4y: float
) -> bool:
    """1D overlap of two collinear segments along their shared axis."""
    rx = p2x - p1x
    ry = p2y - p1y
    length = math.sqrt(rx * rx + ry * ry)

    if length < EPSILON:
        # First segment is a point: test it against the second one
        sx = p4x - p3x
        sy = p4y - p3y
        s_len = math.sqrt(sx * sx + sy * sy)
        if s_len < EPSILON:
            return math.sqrt((p3x - p1x) ** 2 + (p3y - p1y) ** 2) <= EPSILON
        ux = sx / s_len
        uy = sy / s_len
        off_x = p1x - p3x
        off_y = p1y - p3y
        if abs(off_x * uy - off_y * ux) > EPSILON:
            return False
        t = off_x * ux + off_y * uy
        return t >= -EPSILON and t <= s_len + EPSILON

    ux = rx / length
    uy = ry / length
    a = (p3x - p1x) * ux + (p3y - p1y) * uy
    b = (p4x - p1x) * ux + (p4y - p1y) * uy
    lo = min(a, b)
    hi = max(a, b)
    return hi >= -EPSILON and lo <= length + EPSILON


@njit(cache=True)
def lines_intersect(
    p1x: float, p1y: float, p2x: float, p2y: float,
    p3x: float, p3y: float, p4x: float, p4y: float
) -> bool:
    """
    Segment intersection test for p1-p2 against p3-p4.

    General case uses the parametric form p1 + t*r = p3 + u*s and accepts
    t, u in [-eps, 1 + eps]. Collinear segments are projected onto their
    shared axis and tested for 1D overlap; parallel non-collinear segments
    never intersect.
    """
    rx = p2x - p1x
    ry = p2y - p1y
    sx = p4x - p3x
    sy = p4y - p3y
    qx = p3x - p1x
    qy = p3y - p1y

    rxs = rx * sy - ry * sx
    qpxr = qx * ry - qy * rx

    if abs(rxs) < EPSILON:
        if abs(qpxr) < EPSILON:
            return _collinear_overlap(p1x, p1y, p2x, p2y, p3x, p3y, p4x, p4y)
        return False

    t = (qx * sy - qy * sx) / rxs
    u = qpxr / rxs

    return t >= -EPSILON and t <= 1.0 + EPSILON and u >= -EPSILON and u <= 1.0 + EPSILON


# =============================================================================
# NARROW PHASE
# =============================================================================

@njit(cache=True)
def check_polygon_collision(poly1: np.ndarray, poly2: np.ndarray) -> bool:
    """
    Check if two polygons overlap.

    Any crossing edge pair means collision. Without crossings, one polygon
    may still sit fully inside the other, so the centroid of each is tested
    against the other.
    """
    n1 = len(poly1)
    n2 = len(poly2)

    for i in range(n1):
        i2 = (i + 1) % n1
        for j in range(n2):
            j2 = (j + 1) % n2
            if lines_intersect(
                poly1[i, 0], poly1[i, 1], poly1[i2, 0], poly1[i2, 1],
                poly2[j, 0], poly2[j, 1], poly2[j2, 0], poly2[j2, 1]
            ):
                return True

    cx, cy = polygon_centroid(poly2)
    if point_in_polygon(cx, cy, poly1):
        return True

    cx, cy = polygon_centroid(poly1)
    if point_in_polygon(cx, cy, poly2):
        return True

    return False


# =============================================================================
# SEPARATING AXIS THEOREM (SAT) - minimum translation vector
# =============================================================================

@njit(cache=True, fastmath=True)
def project_polygon(vertices: np.ndarray, axis_x: float, axis_y: float) -> Tuple[float, float]:
    """
    Project polygon onto axis, return (min, max) projection.
    """
    min_proj = math.inf
    max_proj = -math.inf

    for i in range(len(vertices)):
        proj = vertices[i, 0] * axis_x + vertices[i, 1] * axis_y
        if proj < min_proj:
            min_proj = proj
        if proj > max_proj:
            max_proj = proj

    return min_proj, max_proj


@njit(cache=True)
def _scan_axes(
    source: np.ndarray,
    poly1: np.ndarray,
    poly2: np.ndarray,
    best_overlap: float,
    best_x: float,
    best_y: float
) -> Tuple[bool, float, float, float]:
    """Test every edge normal of `source`; keep the smallest overlap."""
    n = len(source)
    for i in range(n):
        edge_x = source[(i + 1) % n, 0] - source[i, 0]
        edge_y = source[(i + 1) % n, 1] - source[i, 1]

        # Perpendicular (normal) - potential separating axis
        axis_x = -edge_y
        axis_y = edge_x
        length = math.sqrt(axis_x * axis_x + axis_y * axis_y)
        if length <= AXIS_FLOOR:
            continue
        axis_x /= length
        axis_y /= length

        min1, max1 = project_polygon(poly1, axis_x, axis_y)
        min2, max2 = project_polygon(poly2, axis_x, axis_y)
        overlap = min(max1, max2) - max(min1, min2)

        if overlap <= EPSILON:
            return False, best_overlap, best_x, best_y

        if overlap < best_overlap:
            best_overlap = overlap
            best_x = axis_x
            best_y = axis_y

    return True, best_overlap, best_x, best_y


@njit(cache=True)
def find_mtv(poly1: np.ndarray, poly2: np.ndarray) -> Tuple[float, float, bool]:
    """
    Minimum translation vector separating poly1 from poly2.

    The vector is NOT oriented; see orient_mtv.

    Returns:
        (mtv_x, mtv_y, found) - found is False when some axis shows no
        overlap beyond EPSILON (nothing to resolve)
    """
    ok, overlap, ax, ay = _scan_axes(poly1, poly1, poly2, math.inf, 0.0, 0.0)
    if not ok:
        return 0.0, 0.0, False
    ok, overlap, ax, ay = _scan_axes(poly2, poly1, poly2, overlap, ax, ay)
    if not ok or overlap == math.inf:
        return 0.0, 0.0, False
    return ax * overlap, ay * overlap, True


@njit(cache=True)
def orient_mtv(mtv_x: float, mtv_y: float, poly1: np.ndarray, poly2: np.ndarray) -> Tuple[float, float]:
    """Flip the MTV so it points from poly2's centroid toward poly1's."""
    c1x, c1y = polygon_centroid(poly1)
    c2x, c2y = polygon_centroid(poly2)
    if mtv_x * (c1x - c2x) + mtv_y * (c1y - c2y) < 0.0:
        return -mtv_x, -mtv_y
    return mtv_x, mtv_y


# =============================================================================
# SHAPELY-BASED OVERLAP (exact, used for diagnostics)
# =============================================================================

def _to_shapely(verts: np.ndarray):
    poly = Polygon(verts)
    if not poly.is_valid:
        poly = make_valid(poly)
    return poly


def shapely_overlap(verts1: np.ndarray, verts2: np.ndarray) -> bool:
    """
    Check if two polygons overlap using Shapely.

    Returns True if interiors intersect (not just touching).
    """
    p1 = _to_shapely(verts1)
    p2 = _to_shapely(verts2)
    return p1.intersects(p2) and not p1.touches(p2)


def overlap_area(verts1: np.ndarray, verts2: np.ndarray) -> float:
    """Area of the intersection of two polygons."""
    return _to_shapely(verts1).intersection(_to_shapely(verts2)).area


# =============================================================================
# SHAPE-LEVEL API
# =============================================================================

def check_collision(a: Shape, b: Shape) -> bool:
    """
    Full collision test between two shapes.

    Pairs with collisions disabled on either side never collide; disjoint
    bounding boxes are rejected before the polygon test.
    """
    if not a.collisions_enabled or not b.collisions_enabled:
        return False
    if not bounds_overlap_tuple(a.bounds, b.bounds):
        return False
    return check_polygon_collision(a.world_polygon, b.world_polygon)


def compute_mtv(a: Shape, b: Shape) -> Optional[Tuple[float, float]]:
    """Oriented MTV that pushes `a` out of `b`, or None if nothing to resolve."""
    poly1 = a.world_polygon
    poly2 = b.world_polygon
    mtv_x, mtv_y, found = find_mtv(poly1, poly2)
    if not found:
        return None
    return orient_mtv(mtv_x, mtv_y, poly1, poly2)


def resolve_collision(a: Shape, b: Shape) -> Optional[Tuple[float, float]]:
    """
    Translate `a` by the MTV against `b`.

    Only `a` moves; this is a positional correction, not an impulse.

    Returns:
        The applied translation, or None when no overlap was found
    """
    mtv = compute_mtv(a, b)
    if mtv is not None:
        a.move(mtv[0], mtv[1])
    return mtv


# =============================================================================
# WARMUP
# =============================================================================

def warmup():
    """Warm up JIT compilation."""
    verts = np.array([
        [0.0, 0.0],
        [1.0, 0.0],
        [1.0, 1.0],
        [0.0, 1.0]
    ], dtype=np.float64)
    shifted = verts + np.array([0.5, 0.0])

    _ = bounds_overlap(0, 0, 1, 1, 0.5, 0.5, 1.5, 1.5)
    _ = point_in_polygon(0.5, 0.5, verts)
    _ = lines_intersect(0.0, 0.0, 1.0, 1.0, 0.0, 1.0, 1.0, 0.0)
    _ = check_polygon_collision(verts, shifted)
    mtv_x, mtv_y, _ = find_mtv(verts, shifted)
    _ = orient_mtv(mtv_x, mtv_y, verts, shifted)
