"""
Polygon Model - shape vertex rings, sizing and regular-polygon generation.

A Shape owns a local-space vertex ring plus the transform that places it in
the world (position, rotation in degrees, uniform scale). While a shape is
in "regular" mode its ring is always regenerated from (sides, width,
height); the first hand edit of the ring switches it to custom mode, after
which the ring is never regenerated until reset_vertices() is called.
"""

import numpy as np
from numba import njit
from typing import Optional, Sequence, Tuple
import math

from config import CONFIG, EditorConfig, clamp
from core.bounding_box import get_bounds, max_vertex_distance
from core.transform import (
    local_to_world_vertices,
    local_to_world_point,
    world_to_local_point,
    world_to_local_vector,
)


Point = Tuple[float, float]


# =============================================================================
# RING GENERATION
# =============================================================================

@njit(cache=True, fastmath=True)
def generate_regular_polygon(sides: int, width: float, height: float) -> np.ndarray:
    """
    Place `sides` vertices evenly around the origin.

    Squares start at -pi/4 so they come out axis-aligned; every other
    polygon starts at -pi/2 so the first vertex points up (y-down screen).

    Args:
        sides: Number of vertices
        width: X extent (radius along x)
        height: Y extent (radius along y)

    Returns:
        (sides, 2) array of local vertices
    """
    base_angle = -math.pi / 4.0 if sides == 4 else -math.pi / 2.0
    ring = np.empty((sides, 2), dtype=np.float64)

    for i in range(sides):
        angle = 2.0 * math.pi * i / sides + base_angle
        ring[i, 0] = math.cos(angle) * width
        ring[i, 1] = math.sin(angle) * height

    return ring


@njit(cache=True, fastmath=True)
def polygon_area(vertices: np.ndarray) -> float:
    """Compute polygon area using shoelace formula."""
    n = len(vertices)
    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += vertices[i, 0] * vertices[j, 1]
        area -= vertices[j, 0] * vertices[i, 1]
    return abs(area) / 2.0


# =============================================================================
# SHAPE
# =============================================================================

class Shape:
    """
    Editable polygon with position, rotation, scale and a vertex ring.

    Attributes:
        name: Display name
        color: RGB tuple
        visible: Hidden shapes are skipped by hit-testing and settling
        collisions_enabled: Per-shape collision participation

    Properties:
        id: Immutable identity
        position, rotation, scale: World transform (scale clamped)
        width, height, sides: Regular-ring parameters (clamped)
        vertices: Copy of the local ring (N, 2)
        world_polygon: World-space ring (cached)
        bounds: World AABB (min_x, min_y, max_x, max_y), cached
    """

    __slots__ = [
        '_id', 'name', 'color', 'visible', 'collisions_enabled',
        '_x', '_y', '_rotation', '_scale',
        '_width', '_height', '_sides',
        '_vertices', '_custom',
        '_world', '_bounds', '_dirty', '_config',
    ]

    def __init__(
        self,
        shape_id: int,
        x: float = 0.0,
        y: float = 0.0,
        width: Optional[float] = None,
        height: Optional[float] = None,
        sides: Optional[int] = None,
        config: Optional[EditorConfig] = None
    ):
        self._config = config or CONFIG
        defaults = self._config.defaults
        limits = self._config.limits

        self._id = int(shape_id)
        self.name = defaults.name
        self.color = defaults.color
        self.visible = True
        self.collisions_enabled = True

        self._x = float(x)
        self._y = float(y)
        self._rotation = 0.0
        self._scale = 1.0

        self._width = clamp(float(defaults.width if width is None else width),
                            limits.min_extent, limits.max_extent)
        self._height = clamp(float(defaults.height if height is None else height),
                             limits.min_extent, limits.max_extent)
        self._sides = int(clamp(int(defaults.sides if sides is None else sides),
                                limits.min_sides, limits.max_sides))

        self._custom = False
        self._vertices = generate_regular_polygon(self._sides, self._width, self._height)

        self._world = None
        self._bounds = None
        self._dirty = True

    # -------------------------------------------------------------------------
    # Identity and transform
    # -------------------------------------------------------------------------

    @property
    def id(self) -> int:
        return self._id

    @property
    def config(self) -> EditorConfig:
        return self._config

    @property
    def position(self) -> Point:
        return (self._x, self._y)

    def set_position(self, x: float, y: float):
        """Set world position of the local origin."""
        self._x = float(x)
        self._y = float(y)
        self._dirty = True

    def move(self, dx: float, dy: float):
        """Move shape by delta."""
        self._x += dx
        self._y += dy
        self._dirty = True

    @property
    def rotation(self) -> float:
        """Rotation in degrees about the local origin."""
        return self._rotation

    @rotation.setter
    def rotation(self, value: float):
        self._rotation = float(value)
        self._dirty = True

    @property
    def scale(self) -> float:
        return self._scale

    @scale.setter
    def scale(self, value: float):
        limits = self._config.limits
        self._scale = clamp(float(value), limits.min_scale, limits.max_scale)
        self._dirty = True

    # -------------------------------------------------------------------------
    # Regular-ring parameters
    # -------------------------------------------------------------------------

    @property
    def width(self) -> float:
        return self._width

    @width.setter
    def width(self, value: float):
        limits = self._config.limits
        self._width = clamp(float(value), limits.min_extent, limits.max_extent)
        self._regenerate()

    @property
    def height(self) -> float:
        return self._height

    @height.setter
    def height(self, value: float):
        limits = self._config.limits
        self._height = clamp(float(value), limits.min_extent, limits.max_extent)
        self._regenerate()

    @property
    def sides(self) -> int:
        return self._sides

    @sides.setter
    def sides(self, value: int):
        limits = self._config.limits
        self._sides = int(clamp(int(value), limits.min_sides, limits.max_sides))
        self._regenerate()

    @property
    def use_custom_vertices(self) -> bool:
        return self._custom

    def _regenerate(self):
        if not self._custom:
            self._vertices = generate_regular_polygon(self._sides, self._width, self._height)
            self._dirty = True

    # -------------------------------------------------------------------------
    # Vertex ring
    # -------------------------------------------------------------------------

    @property
    def vertices(self) -> np.ndarray:
        """Copy of the local vertex ring (N, 2)."""
        return self._vertices.copy()

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    def vertex(self, index: int) -> Optional[Point]:
        """Local vertex at index, or None when out of range."""
        if 0 <= index < len(self._vertices):
            return (float(self._vertices[index, 0]), float(self._vertices[index, 1]))
        return None

    def _set_ring(self, ring: np.ndarray):
        limits = self._config.limits
        self._vertices = ring
        self._sides = int(clamp(len(ring), limits.min_sides, limits.max_sides))
        self._custom = True
        self._dirty = True

    def set_vertices(self, ring: Sequence[Point]) -> bool:
        """Replace the whole ring; rejected unless its size is within limits."""
        arr = np.ascontiguousarray(ring, dtype=np.float64).reshape(-1, 2)
        limits = self._config.limits
        if not limits.min_vertices <= len(arr) <= limits.max_vertices:
            return False
        self._set_ring(arr)
        return True

    def add_vertex(self, x: float, y: float) -> bool:
        """Append a vertex at the end of the ring."""
        return self.insert_vertex(len(self._vertices), x, y)

    def insert_vertex(self, index: int, x: float, y: float) -> bool:
        """Insert a vertex before `index` (index == count appends)."""
        if not 0 <= index <= len(self._vertices):
            return False
        if len(self._vertices) >= self._config.limits.max_vertices:
            return False
        ring = np.insert(self._vertices, index, [float(x), float(y)], axis=0)
        self._set_ring(np.ascontiguousarray(ring))
        return True

    def remove_vertex(self, index: int) -> bool:
        """Remove a vertex; the ring never drops below the minimum size."""
        if not 0 <= index < len(self._vertices):
            return False
        if len(self._vertices) <= self._config.limits.min_vertices:
            return False
        ring = np.delete(self._vertices, index, axis=0)
        self._set_ring(np.ascontiguousarray(ring))
        return True

    def set_vertex(self, index: int, x: float, y: float) -> bool:
        """Move one local vertex."""
        if not 0 <= index < len(self._vertices):
            return False
        ring = self._vertices.copy()
        ring[index, 0] = x
        ring[index, 1] = y
        self._set_ring(ring)
        return True

    def reset_vertices(self):
        """Leave custom mode and regenerate the regular ring."""
        self._custom = False
        self._regenerate()
        self._dirty = True

    def edge_endpoints(self, edge_index: int) -> Tuple[int, int]:
        """Vertex indices of an edge (index taken modulo the ring size)."""
        n = len(self._vertices)
        v1 = edge_index % n
        return v1, (v1 + 1) % n

    def edge_length(self, edge_index: int) -> Optional[float]:
        """Local-space length of an edge, or None for an invalid index."""
        if not 0 <= edge_index < len(self._vertices):
            return None
        v1, v2 = self.edge_endpoints(edge_index)
        dx = self._vertices[v2, 0] - self._vertices[v1, 0]
        dy = self._vertices[v2, 1] - self._vertices[v1, 1]
        return math.hypot(dx, dy)

    def adjust_for_edge_length(self, edge_index: int, new_length: float) -> bool:
        """
        Rescale the second endpoint of an edge along the edge direction.

        Args:
            edge_index: Edge index in [0, vertex_count)
            new_length: Desired local-space length

        Returns:
            False when the index is invalid or the edge is too short to
            have a direction
        """
        if not 0 <= edge_index < len(self._vertices):
            return False
        v1, v2 = self.edge_endpoints(edge_index)
        ex = self._vertices[v2, 0] - self._vertices[v1, 0]
        ey = self._vertices[v2, 1] - self._vertices[v1, 1]
        current = math.hypot(ex, ey)

        if current < self._config.geometry.edge_length_floor:
            return False

        factor = new_length / current
        ring = self._vertices.copy()
        ring[v2, 0] = ring[v1, 0] + ex * factor
        ring[v2, 1] = ring[v1, 1] + ey * factor
        self._set_ring(ring)
        return True

    # -------------------------------------------------------------------------
    # World geometry
    # -------------------------------------------------------------------------

    @property
    def world_polygon(self) -> np.ndarray:
        """World-space ring (N, 2). Cached; do not modify."""
        if self._dirty:
            self._update()
        return self._world

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """World bounding box (min_x, min_y, max_x, max_y). Cached."""
        if self._dirty:
            self._update()
        return self._bounds

    def _update(self):
        """Recompute world ring and bounds."""
        self._world = local_to_world_vertices(
            self._vertices, self._scale, self._rotation, self._x, self._y
        )
        self._bounds = get_bounds(self._world)
        self._dirty = False

    @property
    def centroid(self) -> Point:
        """Vertex average of the world ring."""
        c = self.world_polygon.mean(axis=0)
        return (float(c[0]), float(c[1]))

    @property
    def area(self) -> float:
        """World-space area."""
        return polygon_area(self._vertices) * self._scale * self._scale

    def vertex_world_position(self, index: int) -> Optional[Point]:
        if not 0 <= index < len(self._vertices):
            return None
        return self.local_to_world(self._vertices[index, 0], self._vertices[index, 1])

    def local_to_world(self, x: float, y: float) -> Point:
        return local_to_world_point(float(x), float(y), self._scale, self._rotation,
                                    self._x, self._y)

    def world_to_local(self, x: float, y: float) -> Point:
        return world_to_local_point(float(x), float(y), self._scale, self._rotation,
                                    self._x, self._y)

    def world_vector_to_local(self, dx: float, dy: float) -> Point:
        """Local image of a world displacement (rotation and scale only)."""
        return world_to_local_vector(float(dx), float(dy), self._scale, self._rotation)

    def bounding_radius(self) -> float:
        """Conservative circular bound around the local origin, in world units."""
        return max_vertex_distance(self._vertices) * self._scale

    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        return (f"Shape(id={self._id}, name={self.name!r}, pos=({self._x:.2f}, {self._y:.2f}), "
                f"rot={self._rotation:.2f}°, scale={self._scale:.2f}, "
                f"vertices={len(self._vertices)}{', custom' if self._custom else ''})")


def warmup():
    """Warm up JIT compilation by calling all functions once."""
    ring = generate_regular_polygon(5, 50.0, 80.0)
    _ = polygon_area(ring)
