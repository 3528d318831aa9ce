"""
Polygon Editor - the surface the UI adapter talks to.

PolygonEditor bundles the World, the Viewport and the interaction
controller behind a flat, id-based API. It takes and returns only
primitive data (floats, ints, tuples, numpy arrays, enums from this
package) and never raises for bad references:

- getters return None for an unknown shape id or index
- setters and edit calls return False when nothing was applied
- geometry-changing setters settle collisions before returning
"""

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from config import CONFIG, EditorConfig
from core.polygon import Shape, Point
from core.transform import Viewport
from editor import edit_ops
from editor.hit_test import (
    EdgeHit,
    VertexHit,
    find_closest_edge,
    find_closest_vertex,
    find_shape_at_point,
)
from editor.interaction import (
    DragMode,
    InteractionController,
    PointerButton,
    Target,
    TransformMode,
    UIMode,
)
from editor.world import NO_SELECTION, SettleResult, World

logger = logging.getLogger(__name__)


Color = Tuple[int, int, int]


class PolygonEditor:
    """
    Facade over shapes, selection, viewport and pointer interaction.

    Args:
        width: Viewport width in pixels
        height: Viewport height in pixels
        config: Optional configuration (defaults to CONFIG)
    """

    def __init__(
        self,
        width: Optional[float] = None,
        height: Optional[float] = None,
        config: Optional[EditorConfig] = None
    ):
        self.config = config or CONFIG
        self.world = World(self.config)
        self.viewport = Viewport(width, height, self.config)
        self.interaction = InteractionController(self.world, self.viewport, self.config)

    # =========================================================================
    # Shape CRUD
    # =========================================================================

    def add_shape(self, x: float, y: float, sides: int, width: float, height: float) -> int:
        """Create a regular polygon, select it and return its id."""
        return self.world.add_shape(x, y, sides, width, height)

    def remove_shape(self, shape_id: int) -> bool:
        return self.world.remove_shape(shape_id)

    def clear(self):
        """Remove all shapes; the id counter keeps running."""
        self.world.clear()
        logger.debug("Cleared all shapes")

    @property
    def shape_count(self) -> int:
        return len(self.world)

    def shape_ids(self) -> List[int]:
        return self.world.shape_ids()

    def shape_id_at_index(self, index: int) -> Optional[int]:
        return self.world.id_at_index(index)

    # =========================================================================
    # Collisions
    # =========================================================================

    @property
    def collisions_enabled(self) -> bool:
        return self.world.collisions_enabled

    @collisions_enabled.setter
    def collisions_enabled(self, enabled: bool):
        self.world.collisions_enabled = bool(enabled)

    def settle(self, shape_id: int) -> SettleResult:
        """Run collision settling for one shape."""
        return self.world.settle(shape_id)

    def find_overlaps(self, min_area: float = 1e-6) -> List[Tuple[int, int, float]]:
        return self.world.find_overlaps(min_area)

    # =========================================================================
    # Per-shape properties
    # =========================================================================

    def _edit(self, shape_id: int, apply, settle: bool = True) -> bool:
        shape = self.world.get(shape_id)
        if shape is None:
            return False
        if apply(shape) is False:
            return False
        self.world.validate_sub_selection()
        if settle:
            self.world.settle(shape_id)
        return True

    def _read(self, shape_id: int, getter):
        shape = self.world.get(shape_id)
        return None if shape is None else getter(shape)

    def get_position(self, shape_id: int) -> Optional[Point]:
        return self._read(shape_id, lambda s: s.position)

    def set_position(self, shape_id: int, x: float, y: float) -> bool:
        return self._edit(shape_id, lambda s: s.set_position(x, y))

    def get_rotation(self, shape_id: int) -> Optional[float]:
        return self._read(shape_id, lambda s: s.rotation)

    def set_rotation(self, shape_id: int, degrees: float) -> bool:
        def apply(s: Shape):
            s.rotation = degrees
        return self._edit(shape_id, apply)

    def get_scale(self, shape_id: int) -> Optional[float]:
        return self._read(shape_id, lambda s: s.scale)

    def set_scale(self, shape_id: int, scale: float) -> bool:
        def apply(s: Shape):
            s.scale = scale
        return self._edit(shape_id, apply)

    def get_width(self, shape_id: int) -> Optional[float]:
        return self._read(shape_id, lambda s: s.width)

    def set_width(self, shape_id: int, width: float) -> bool:
        def apply(s: Shape):
            s.width = width
        return self._edit(shape_id, apply)

    def get_height(self, shape_id: int) -> Optional[float]:
        return self._read(shape_id, lambda s: s.height)

    def set_height(self, shape_id: int, height: float) -> bool:
        def apply(s: Shape):
            s.height = height
        return self._edit(shape_id, apply)

    def get_sides(self, shape_id: int) -> Optional[int]:
        return self._read(shape_id, lambda s: s.sides)

    def set_sides(self, shape_id: int, sides: int) -> bool:
        def apply(s: Shape):
            s.sides = sides
        return self._edit(shape_id, apply)

    def get_name(self, shape_id: int) -> Optional[str]:
        return self._read(shape_id, lambda s: s.name)

    def set_name(self, shape_id: int, name: str) -> bool:
        def apply(s: Shape):
            s.name = str(name)
        return self._edit(shape_id, apply, settle=False)

    def get_color(self, shape_id: int) -> Optional[Color]:
        return self._read(shape_id, lambda s: s.color)

    def set_color(self, shape_id: int, color: Color) -> bool:
        def apply(s: Shape):
            s.color = tuple(int(c) for c in color)
        return self._edit(shape_id, apply, settle=False)

    def get_collisions_enabled(self, shape_id: int) -> Optional[bool]:
        return self._read(shape_id, lambda s: s.collisions_enabled)

    def set_collisions_enabled(self, shape_id: int, enabled: bool) -> bool:
        def apply(s: Shape):
            s.collisions_enabled = bool(enabled)
        return self._edit(shape_id, apply, settle=False)

    def get_visible(self, shape_id: int) -> Optional[bool]:
        return self._read(shape_id, lambda s: s.visible)

    def set_visible(self, shape_id: int, visible: bool) -> bool:
        def apply(s: Shape):
            s.visible = bool(visible)
        return self._edit(shape_id, apply, settle=False)

    def uses_custom_vertices(self, shape_id: int) -> Optional[bool]:
        return self._read(shape_id, lambda s: s.use_custom_vertices)

    # =========================================================================
    # Vertex / edge editing
    # =========================================================================

    def vertex_count(self, shape_id: int) -> Optional[int]:
        return self._read(shape_id, lambda s: s.vertex_count)

    def get_vertex(self, shape_id: int, index: int) -> Optional[Point]:
        """Local position of a vertex."""
        return self._read(shape_id, lambda s: s.vertex(index))

    def add_vertex(self, shape_id: int, x: float, y: float) -> bool:
        """
        Add a vertex to a shape.

        When the shape is selected and one of its edges is selected, the
        midpoint of that edge is inserted; otherwise (x, y) is appended.
        """
        after_edge = None
        if shape_id == self.world.selected_shape_id and self.world.selected_edge != NO_SELECTION:
            after_edge = self.world.selected_edge
        return self._edit(shape_id, lambda s: edit_ops.insert_vertex(s, x, y, after_edge))

    def remove_vertex(self, shape_id: int, index: int) -> bool:
        return self._edit(shape_id, lambda s: edit_ops.remove_vertex(s, index))

    def set_vertex(self, shape_id: int, index: int, x: float, y: float) -> bool:
        return self._edit(shape_id, lambda s: s.set_vertex(index, x, y))

    def reset_vertices(self, shape_id: int) -> bool:
        return self._edit(shape_id, lambda s: s.reset_vertices())

    def edge_length(self, shape_id: int, edge_index: int) -> Optional[float]:
        return self._read(shape_id, lambda s: s.edge_length(edge_index))

    def set_edge_length(self, shape_id: int, edge_index: int, length: float) -> bool:
        """Resize an edge symmetrically about its midpoint, then settle."""
        return self._edit(shape_id, lambda s: edit_ops.stretch_edge(s, edge_index, length))

    def adjust_for_edge_length(self, shape_id: int, edge_index: int, length: float) -> bool:
        """Resize an edge by moving its second endpoint, then settle."""
        return self._edit(shape_id, lambda s: edit_ops.adjust_for_edge_length(s, edge_index, length))

    # =========================================================================
    # Coordinates
    # =========================================================================

    def screen_to_world(self, x: float, y: float) -> Point:
        return self.viewport.screen_to_world(x, y)

    def world_to_screen(self, x: float, y: float) -> Point:
        return self.viewport.world_to_screen(x, y)

    def local_to_world(self, shape_id: int, x: float, y: float) -> Optional[Point]:
        return self._read(shape_id, lambda s: s.local_to_world(x, y))

    def world_to_local(self, shape_id: int, x: float, y: float) -> Optional[Point]:
        return self._read(shape_id, lambda s: s.world_to_local(x, y))

    def screen_to_local(self, shape_id: int, x: float, y: float) -> Optional[Point]:
        wx, wy = self.viewport.screen_to_world(x, y)
        return self.world_to_local(shape_id, wx, wy)

    def vertex_world(self, shape_id: int, index: int) -> Optional[Point]:
        return self._read(shape_id, lambda s: s.vertex_world_position(index))

    def vertex_screen(self, shape_id: int, index: int) -> Optional[Point]:
        world = self.vertex_world(shape_id, index)
        return None if world is None else self.viewport.world_to_screen(*world)

    # =========================================================================
    # Selection
    # =========================================================================

    @property
    def selected_shape_id(self) -> int:
        return self.world.selected_shape_id

    @selected_shape_id.setter
    def selected_shape_id(self, shape_id: int):
        self.world.select_shape(shape_id)

    @property
    def selected_vertex_index(self) -> int:
        return self.world.selected_vertex

    @selected_vertex_index.setter
    def selected_vertex_index(self, index: int):
        self.world.select_vertex(index)

    @property
    def selected_edge_index(self) -> int:
        return self.world.selected_edge

    @selected_edge_index.setter
    def selected_edge_index(self, index: int):
        self.world.select_edge(index)

    @property
    def ui_mode(self) -> UIMode:
        return self.interaction.ui_mode

    @ui_mode.setter
    def ui_mode(self, mode: UIMode):
        self.interaction.set_ui_mode(mode)

    # =========================================================================
    # Viewport
    # =========================================================================

    @property
    def offset(self) -> Point:
        return self.viewport.offset

    def set_offset(self, x: float, y: float):
        self.viewport.set_offset(x, y)

    @property
    def zoom(self) -> float:
        return self.viewport.zoom

    @zoom.setter
    def zoom(self, value: float):
        self.viewport.zoom = value

    def center_on_origin(self):
        self.viewport.center_on_origin()

    def reset_view(self):
        self.viewport.reset()

    def resize(self, width: float, height: float):
        """Adapter reports new viewport dimensions."""
        self.viewport.resize(width, height)

    # =========================================================================
    # Hit-testing
    # =========================================================================

    def shape_at(self, sx: float, sy: float) -> Optional[int]:
        """Topmost visible shape under a screen point."""
        return find_shape_at_point(list(self.world), self.viewport, sx, sy)

    def nearest_vertex(self, sx: float, sy: float, radius: Optional[float] = None,
                       shape_id: Optional[int] = None) -> Optional[VertexHit]:
        """Nearest vertex of a shape (default: the selected one) within radius pixels."""
        shape = self.world.get(self.selected_shape_id if shape_id is None else shape_id)
        if shape is None:
            return None
        r = self.config.interaction.search_radius if radius is None else radius
        return find_closest_vertex(shape, self.viewport, sx, sy, r)

    def nearest_edge(self, sx: float, sy: float, radius: Optional[float] = None,
                     shape_id: Optional[int] = None) -> Optional[EdgeHit]:
        """Nearest edge of a shape (default: the selected one) within radius pixels."""
        shape = self.world.get(self.selected_shape_id if shape_id is None else shape_id)
        if shape is None:
            return None
        r = self.config.interaction.search_radius if radius is None else radius
        return find_closest_edge(shape, self.viewport, sx, sy, r)

    # =========================================================================
    # Pointer events
    # =========================================================================

    def press(self, sx: float, sy: float, button: PointerButton = PointerButton.LEFT) -> bool:
        return self.interaction.press(sx, sy, button)

    def move(self, sx: float, sy: float) -> bool:
        return self.interaction.move(sx, sy)

    def release(self, sx: Optional[float] = None, sy: Optional[float] = None,
                button: PointerButton = PointerButton.LEFT) -> bool:
        return self.interaction.release(sx, sy, button)

    def wheel(self, sx: float, sy: float, delta: float) -> bool:
        return self.interaction.wheel(sx, sy, delta)

    def hover(self, sx: float, sy: float) -> Optional[Target]:
        return self.interaction.hover(sx, sy)

    @property
    def drag_mode(self) -> DragMode:
        return self.interaction.drag_mode

    @property
    def transform_mode(self) -> TransformMode:
        return self.interaction.transform_mode

    @property
    def is_dragging(self) -> bool:
        return self.interaction.is_dragging

    # =========================================================================
    # Render snapshot
    # =========================================================================

    def world_polygons(self) -> Dict[int, np.ndarray]:
        """World rings of visible shapes, in paint order."""
        return self.world.world_polygons()

    def screen_polygons(self) -> Dict[int, np.ndarray]:
        """Screen rings of visible shapes, in paint order."""
        return {sid: self.viewport.world_to_screen_array(poly)
                for sid, poly in self.world.world_polygons().items()}
