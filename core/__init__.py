"""
Core module - Geometry, coordinate transforms and collision detection.
"""

from .transform import (
    Viewport,
    local_to_world_vertices,
    local_to_world_point,
    world_to_local_point,
    world_to_screen_vertices,
)

from .polygon import (
    Shape,
    generate_regular_polygon,
    polygon_area,
)

from .bounding_box import (
    get_bounds,
    compute_scene_bounds,
)

from .collision import (
    bounds_overlap,
    lines_intersect,
    point_in_polygon,
    check_polygon_collision,
    find_mtv,
    check_collision,
    compute_mtv,
    resolve_collision,
    shapely_overlap,
    overlap_area,
)

__all__ = [
    'Viewport',
    'local_to_world_vertices',
    'local_to_world_point',
    'world_to_local_point',
    'world_to_screen_vertices',
    'Shape',
    'generate_regular_polygon',
    'polygon_area',
    'get_bounds',
    'compute_scene_bounds',
    'bounds_overlap',
    'lines_intersect',
    'point_in_polygon',
    'check_polygon_collision',
    'find_mtv',
    'check_collision',
    'compute_mtv',
    'resolve_collision',
    'shapely_overlap',
    'overlap_area',
]
