"""
Hit-testing - what lies under the cursor.

All tests work in screen space so pick radii are in pixels regardless of
zoom. Transform handles sit at fixed pixel offsets from the shape's screen
center along its rotated local axes:

    rotate ring   radius R = max(w, h) + ring_margin
    scale         ( w + margin, 0)
    width         (-w - margin, 0)
    height        ( 0, h + margin)
    move along x  ( R + margin, 0)
    move along y  ( 0, -R - margin)

where w and h are the shape extents times shape scale times zoom.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence
import math

from config import CONFIG, InteractionConfig
from core.collision import point_in_polygon
from core.polygon import Shape, Point
from core.transform import Viewport


class Handle(Enum):
    """Transform handles, in hit-test priority order."""
    ROTATE = "rotate"
    SCALE = "scale"
    WIDTH = "width"
    HEIGHT = "height"
    MOVE_X = "move_x"
    MOVE_Y = "move_y"


@dataclass(frozen=True)
class VertexHit:
    """Vertex under the cursor: index and its screen position."""
    index: int
    point: Point


@dataclass(frozen=True)
class EdgeHit:
    """
    Edge under the cursor.

    Attributes:
        index: Edge index (edge i joins vertex i and i + 1)
        point: Closest point on the edge, in screen space
        midpoint: Edge midpoint in local space
    """
    index: int
    point: Point
    midpoint: Point


@dataclass(frozen=True)
class TransformHandles:
    """Screen positions of a shape's transform handles."""
    center: Point
    ring_radius: float
    scale: Point
    width: Point
    height: Point
    move_x: Point
    move_y: Point

    def position(self, handle: Handle) -> Optional[Point]:
        """Screen position of a point handle (the ring has none)."""
        return {
            Handle.SCALE: self.scale,
            Handle.WIDTH: self.width,
            Handle.HEIGHT: self.height,
            Handle.MOVE_X: self.move_x,
            Handle.MOVE_Y: self.move_y,
        }.get(handle)


def _distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def find_closest_vertex(
    shape: Shape,
    viewport: Viewport,
    sx: float,
    sy: float,
    radius: float
) -> Optional[VertexHit]:
    """Nearest vertex strictly within `radius` pixels of the cursor."""
    screen = viewport.world_to_screen_array(shape.world_polygon)
    best = radius * radius
    hit = None

    for i in range(len(screen)):
        dx = sx - screen[i, 0]
        dy = sy - screen[i, 1]
        d2 = dx * dx + dy * dy
        if d2 < best:
            best = d2
            hit = VertexHit(i, (float(screen[i, 0]), float(screen[i, 1])))

    return hit


def find_closest_edge(
    shape: Shape,
    viewport: Viewport,
    sx: float,
    sy: float,
    radius: float
) -> Optional[EdgeHit]:
    """Nearest edge (distance to its clamped projection) within `radius` pixels."""
    screen = viewport.world_to_screen_array(shape.world_polygon)
    n = len(screen)
    best = radius * radius
    hit = None

    for i in range(n):
        j = (i + 1) % n
        x1, y1 = screen[i, 0], screen[i, 1]
        ex = screen[j, 0] - x1
        ey = screen[j, 1] - y1
        length2 = ex * ex + ey * ey
        if length2 == 0:
            continue

        t = ((sx - x1) * ex + (sy - y1) * ey) / length2
        t = max(0.0, min(1.0, t))
        px = x1 + t * ex
        py = y1 + t * ey

        d2 = (sx - px) ** 2 + (sy - py) ** 2
        if d2 < best:
            best = d2
            a = shape.vertex(i)
            b = shape.vertex(j)
            hit = EdgeHit(i, (float(px), float(py)),
                          ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0))

    return hit


def find_shape_at_point(
    shapes: Sequence[Shape],
    viewport: Viewport,
    sx: float,
    sy: float
) -> Optional[int]:
    """
    Topmost visible shape whose screen polygon contains the cursor.

    Args:
        shapes: Shapes in paint order (last = topmost)

    Returns:
        Shape id or None
    """
    for shape in reversed(shapes):
        if not shape.visible:
            continue
        screen = viewport.world_to_screen_array(shape.world_polygon)
        if point_in_polygon(float(sx), float(sy), screen):
            return shape.id
    return None


def compute_handles(
    shape: Shape,
    viewport: Viewport,
    config: Optional[InteractionConfig] = None
) -> TransformHandles:
    """Screen layout of the transform handles for a shape."""
    cfg = config or CONFIG.interaction
    center = viewport.world_to_screen(*shape.position)

    w = shape.width * shape.scale * viewport.zoom
    h = shape.height * shape.scale * viewport.zoom
    ring = max(w, h) + cfg.ring_margin
    margin = cfg.handle_margin

    angle = math.radians(shape.rotation)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)

    def place(lx: float, ly: float) -> Point:
        return (center[0] + lx * cos_a - ly * sin_a,
                center[1] + lx * sin_a + ly * cos_a)

    return TransformHandles(
        center=center,
        ring_radius=ring,
        scale=place(w + margin, 0.0),
        width=place(-w - margin, 0.0),
        height=place(0.0, h + margin),
        move_x=place(ring + margin, 0.0),
        move_y=place(0.0, -ring - margin),
    )


def hit_transform_handle(
    handles: TransformHandles,
    sx: float,
    sy: float,
    config: Optional[InteractionConfig] = None
) -> Optional[Handle]:
    """Which handle (if any) is under the cursor, in priority order."""
    cfg = config or CONFIG.interaction
    cursor = (sx, sy)

    distance = _distance(cursor, handles.center)
    if abs(distance - handles.ring_radius) <= cfg.ring_thickness * 2:
        return Handle.ROTATE

    for handle in (Handle.SCALE, Handle.WIDTH, Handle.HEIGHT, Handle.MOVE_X, Handle.MOVE_Y):
        if _distance(cursor, handles.position(handle)) < cfg.handle_radius:
            return handle

    return None


def screen_angle(center: Point, point: Point) -> float:
    """Angle in degrees of `point` around `center`."""
    return math.degrees(math.atan2(point[1] - center[1], point[0] - center[0]))


def screen_distance(a: Point, b: Point) -> float:
    return _distance(a, b)
