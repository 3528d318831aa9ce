"""
Spatial Transform - local, world and screen coordinate conversion.

Three coordinate spaces are used throughout the editor:
- local:  shape-relative, as stored in a shape's vertex ring
- world:  shared scene space (shape scale, rotation and position applied)
- screen: world space after viewport zoom and pan, i.e. pixels

The viewport never rotates; it only pans and zooms. Shape rotation is in
degrees and follows the y-down screen convention (positive = clockwise on
screen).
"""

import numpy as np
from numba import njit
from typing import Optional, Tuple
import math

from config import CONFIG, EditorConfig, clamp


EPSILON = CONFIG.geometry.epsilon


# =============================================================================
# NUMBA-ACCELERATED TRANSFORMATIONS
# =============================================================================

@njit(cache=True)
def local_to_world_vertices(
    vertices: np.ndarray,
    scale: float,
    rotation_deg: float,
    x: float,
    y: float
) -> np.ndarray:
    """
    Map a local vertex ring into world space.

    Scale first, then rotate about the local origin (skipped for
    |rotation| < EPSILON), then translate by the shape position.
    """
    n = len(vertices)
    world = np.empty((n, 2), dtype=np.float64)

    rotate = abs(rotation_deg) >= EPSILON
    angle = rotation_deg * math.pi / 180.0
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)

    for i in range(n):
        lx = vertices[i, 0] * scale
        ly = vertices[i, 1] * scale
        if rotate:
            rx = lx * cos_a - ly * sin_a
            ry = lx * sin_a + ly * cos_a
            lx = rx
            ly = ry
        world[i, 0] = lx + x
        world[i, 1] = ly + y

    return world


@njit(cache=True)
def local_to_world_point(
    lx: float, ly: float,
    scale: float, rotation_deg: float,
    x: float, y: float
) -> Tuple[float, float]:
    """Map a single local point into world space."""
    px = lx * scale
    py = ly * scale
    if abs(rotation_deg) >= EPSILON:
        angle = rotation_deg * math.pi / 180.0
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        rx = px * cos_a - py * sin_a
        ry = px * sin_a + py * cos_a
        px = rx
        py = ry
    return px + x, py + y


@njit(cache=True)
def world_to_local_point(
    wx: float, wy: float,
    scale: float, rotation_deg: float,
    x: float, y: float
) -> Tuple[float, float]:
    """Inverse of local_to_world_point."""
    px = wx - x
    py = wy - y
    if abs(rotation_deg) >= EPSILON:
        angle = -rotation_deg * math.pi / 180.0
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        rx = px * cos_a - py * sin_a
        ry = px * sin_a + py * cos_a
        px = rx
        py = ry
    return px / scale, py / scale


@njit(cache=True)
def world_to_local_vector(
    dx: float, dy: float,
    scale: float, rotation_deg: float
) -> Tuple[float, float]:
    """Map a world displacement into local space (no translation)."""
    return world_to_local_point(dx, dy, scale, rotation_deg, 0.0, 0.0)


@njit(cache=True, fastmath=True)
def world_to_screen_vertices(
    vertices: np.ndarray,
    zoom: float,
    offset_x: float,
    offset_y: float
) -> np.ndarray:
    """Map world vertices to screen pixels (scale, then translate)."""
    n = len(vertices)
    screen = np.empty((n, 2), dtype=np.float64)

    for i in range(n):
        screen[i, 0] = vertices[i, 0] * zoom + offset_x
        screen[i, 1] = vertices[i, 1] * zoom + offset_y

    return screen


# =============================================================================
# VIEWPORT
# =============================================================================

class Viewport:
    """
    Pan offset and zoom shared by every shape.

    screen = world * zoom + offset

    The offset is stored in screen pixels. The viewport dimensions are only
    needed to center the origin.

    Attributes:
        offset_x: Horizontal pan in pixels
        offset_y: Vertical pan in pixels
        width: Viewport width in pixels
        height: Viewport height in pixels

    Properties:
        zoom: Global zoom, clamped to [min_zoom, max_zoom]
    """

    __slots__ = ['offset_x', 'offset_y', 'width', 'height', '_zoom', '_config']

    def __init__(
        self,
        width: Optional[float] = None,
        height: Optional[float] = None,
        config: Optional[EditorConfig] = None
    ):
        self._config = config or CONFIG
        vp = self._config.viewport
        self.width = vp.default_width if width is None else float(width)
        self.height = vp.default_height if height is None else float(height)
        self._zoom = 1.0
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.center_on_origin()

    @property
    def zoom(self) -> float:
        """Global zoom factor."""
        return self._zoom

    @zoom.setter
    def zoom(self, value: float):
        vp = self._config.viewport
        self._zoom = clamp(float(value), vp.min_zoom, vp.max_zoom)

    @property
    def offset(self) -> Tuple[float, float]:
        return (self.offset_x, self.offset_y)

    def set_offset(self, x: float, y: float):
        """Set pan offset in pixels."""
        self.offset_x = float(x)
        self.offset_y = float(y)

    def world_to_screen(self, x: float, y: float) -> Tuple[float, float]:
        return (x * self._zoom + self.offset_x, y * self._zoom + self.offset_y)

    def screen_to_world(self, x: float, y: float) -> Tuple[float, float]:
        return ((x - self.offset_x) / self._zoom, (y - self.offset_y) / self._zoom)

    def world_to_screen_array(self, vertices: np.ndarray) -> np.ndarray:
        """Map an (N, 2) world array to screen pixels."""
        return world_to_screen_vertices(vertices, self._zoom, self.offset_x, self.offset_y)

    def pan(self, dx: float, dy: float):
        """Shift the view by a screen-space delta."""
        self.offset_x += dx
        self.offset_y += dy

    def zoom_at(self, sx: float, sy: float, factor: float):
        """
        Multiply zoom by factor, keeping the world point under (sx, sy) fixed.

        Args:
            sx: Cursor x in pixels
            sy: Cursor y in pixels
            factor: Zoom multiplier (> 1 zooms in)
        """
        world_before = self.screen_to_world(sx, sy)
        self.zoom = self._zoom * factor
        world_after = self.screen_to_world(sx, sy)

        self.offset_x += (world_after[0] - world_before[0]) * self._zoom
        self.offset_y += (world_after[1] - world_before[1]) * self._zoom

    def center_on_origin(self):
        """Put world origin at the viewport center."""
        self.offset_x = self.width / 2.0
        self.offset_y = self.height / 2.0

    def reset(self):
        """Zoom 1.0, origin centered."""
        self._zoom = 1.0
        self.center_on_origin()

    def resize(self, width: float, height: float):
        """Record new viewport dimensions and recenter when both are positive."""
        self.width = float(width)
        self.height = float(height)
        if self.width > 0 and self.height > 0:
            self.center_on_origin()

    def __repr__(self) -> str:
        return (f"Viewport(offset=({self.offset_x:.2f}, {self.offset_y:.2f}), "
                f"zoom={self._zoom:.3f}, size={self.width:.0f}x{self.height:.0f})")


# =============================================================================
# WARM-UP JIT COMPILATION
# =============================================================================

def warmup():
    """Warm up JIT compilation by calling all functions once."""
    verts = np.array([[0.0, -1.0], [1.0, 1.0], [-1.0, 1.0]], dtype=np.float64)

    _ = local_to_world_vertices(verts, 1.0, 30.0, 1.0, 1.0)
    _ = local_to_world_point(1.0, 0.0, 1.0, 30.0, 0.0, 0.0)
    _ = world_to_local_point(1.0, 0.0, 1.0, 30.0, 0.0, 0.0)
    _ = world_to_local_vector(1.0, 0.0, 1.0, 30.0)
    _ = world_to_screen_vertices(verts, 1.0, 0.0, 0.0)
