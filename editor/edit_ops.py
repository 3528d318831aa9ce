"""
Edit Operations - vertex and edge manipulation on a single shape.

Thin rules layered over the Shape ring primitives: midpoint insertion into
an edge, guarded removal, drag displacement of vertices and edges, and the
two edge-length adjustments (second-endpoint and symmetric).

Every operation returns True when the ring changed.
"""

import logging
import math
from typing import Optional, Sequence

from core.polygon import Shape, Point

logger = logging.getLogger(__name__)


def insert_vertex(shape: Shape, x: float, y: float, after_edge: Optional[int] = None) -> bool:
    """
    Add a vertex to the ring.

    Args:
        shape: Shape to edit
        x, y: Local position, used when no edge is given
        after_edge: When set, the midpoint of this edge is inserted between
            its two endpoints and (x, y) is ignored

    Returns:
        False when the ring is already at its maximum size or the edge
        index is out of range
    """
    if after_edge is None:
        return shape.add_vertex(x, y)

    count = shape.vertex_count
    if not 0 <= after_edge < count:
        return False

    v1, v2 = shape.edge_endpoints(after_edge)
    p1 = shape.vertex(v1)
    p2 = shape.vertex(v2)
    mid_x = (p1[0] + p2[0]) / 2.0
    mid_y = (p1[1] + p2[1]) / 2.0

    # Closing edge (last -> 0) gets the new vertex appended at the end
    index = v2 if v2 != 0 else count
    return shape.insert_vertex(index, mid_x, mid_y)


def remove_vertex(shape: Shape, index: int) -> bool:
    """Remove a vertex unless the ring is already at its minimum size."""
    min_vertices = shape.config.limits.min_vertices
    if shape.vertex_count <= min_vertices:
        logger.debug("Shape %d: refusing to drop below %d vertices",
                     shape.id, min_vertices)
        return False
    return shape.remove_vertex(index)


def move_vertex_to_world(shape: Shape, index: int, wx: float, wy: float) -> bool:
    """Place a vertex at the local image of a world point."""
    lx, ly = shape.world_to_local(wx, wy)
    return shape.set_vertex(index, lx, ly)


def translate_edge(
    shape: Shape,
    edge_index: int,
    start_endpoints: Sequence[Point],
    local_dx: float,
    local_dy: float
) -> bool:
    """
    Move both endpoints of an edge to their start positions plus a delta.

    Args:
        shape: Shape to edit
        edge_index: Edge whose endpoints move
        start_endpoints: Endpoint positions captured when the drag began
        local_dx, local_dy: Cumulative displacement in local space
    """
    if not 0 <= edge_index < shape.vertex_count:
        return False

    v1, v2 = shape.edge_endpoints(edge_index)
    ring = shape.vertices
    ring[v1, 0] = start_endpoints[0][0] + local_dx
    ring[v1, 1] = start_endpoints[0][1] + local_dy
    ring[v2, 0] = start_endpoints[1][0] + local_dx
    ring[v2, 1] = start_endpoints[1][1] + local_dy
    return shape.set_vertices(ring)


def adjust_for_edge_length(shape: Shape, edge_index: int, new_length: float) -> bool:
    """Rescale the second endpoint so the edge has `new_length`."""
    return shape.adjust_for_edge_length(edge_index, new_length)


def stretch_edge(shape: Shape, edge_index: int, new_length: float) -> bool:
    """
    Resize an edge symmetrically about its midpoint.

    Both endpoints move along the edge direction. Edges shorter than the
    stretch floor have no usable direction and are left alone.
    """
    if not 0 <= edge_index < shape.vertex_count:
        return False

    v1, v2 = shape.edge_endpoints(edge_index)
    p1 = shape.vertex(v1)
    p2 = shape.vertex(v2)

    ex = p2[0] - p1[0]
    ey = p2[1] - p1[1]
    current = math.hypot(ex, ey)
    if current < shape.config.geometry.stretch_floor:
        return False

    mid_x = (p1[0] + p2[0]) / 2.0
    mid_y = (p1[1] + p2[1]) / 2.0
    dir_x = ex / current
    dir_y = ey / current
    half = new_length / 2.0

    ring = shape.vertices
    ring[v1, 0] = mid_x - dir_x * half
    ring[v1, 1] = mid_y - dir_y * half
    ring[v2, 0] = mid_x + dir_x * half
    ring[v2, 1] = mid_y + dir_y * half
    return shape.set_vertices(ring)


def edge_midpoint(shape: Shape, edge_index: int) -> Optional[Point]:
    """Local midpoint of an edge, or None for an invalid index."""
    if not 0 <= edge_index < shape.vertex_count:
        return None
    v1, v2 = shape.edge_endpoints(edge_index)
    p1 = shape.vertex(v1)
    p2 = shape.vertex(v2)
    return ((p1[0] + p2[0]) / 2.0, (p1[1] + p2[1]) / 2.0)
