"""
World - ordered shape collection, selection state and collision settling.

Shapes are kept in paint order (last = topmost). Everything outside this
module addresses shapes by id; the World is their only owner.

Selection rules:
- selecting a different shape clears vertex and edge selection
- vertex and edge selection are mutually exclusive
- indices are validated against the live shape; invalid requests are ignored
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from config import CONFIG, EditorConfig, default_shape_name
from core.collision import check_collision, overlap_area, resolve_collision
from core.polygon import Shape

logger = logging.getLogger(__name__)


NO_SELECTION = -1


@dataclass
class SettleResult:
    """
    Outcome of settling one shape against the rest of the world.

    Attributes:
        passes: Detection/resolution passes run
        resolved: Number of MTV corrections applied
        converged: False when the pass cap was hit while still resolving
    """
    passes: int = 0
    resolved: int = 0
    converged: bool = True


class World:
    """
    Shape arena plus selection.

    Attributes:
        collisions_enabled: Global switch for settling
    """

    def __init__(self, config: Optional[EditorConfig] = None):
        self.config = config or CONFIG
        self.collisions_enabled = True
        self._shapes: List[Shape] = []
        self._next_id = 0
        self._selected_shape_id = NO_SELECTION
        self._selected_vertex = NO_SELECTION
        self._selected_edge = NO_SELECTION

    # -------------------------------------------------------------------------
    # Collection
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._shapes)

    def __iter__(self) -> Iterator[Shape]:
        return iter(list(self._shapes))

    def __contains__(self, shape_id: int) -> bool:
        return self.index_of(shape_id) is not None

    def index_of(self, shape_id: int) -> Optional[int]:
        """Paint-order index of a shape, or None."""
        for i, shape in enumerate(self._shapes):
            if shape.id == shape_id:
                return i
        return None

    def get(self, shape_id: int) -> Optional[Shape]:
        """Look up a shape by id."""
        i = self.index_of(shape_id)
        return None if i is None else self._shapes[i]

    def shape_ids(self) -> List[int]:
        return [shape.id for shape in self._shapes]

    def id_at_index(self, index: int) -> Optional[int]:
        if 0 <= index < len(self._shapes):
            return self._shapes[index].id
        return None

    def add_shape(
        self,
        x: float,
        y: float,
        sides: int,
        width: float,
        height: float,
        select: bool = True
    ) -> int:
        """
        Create a regular polygon and append it on top.

        Returns:
            The new shape id
        """
        shape = Shape(self._next_id, x, y, width, height, sides, self.config)
        self._next_id += 1
        shape.name = default_shape_name(shape.sides, shape.width, shape.height)
        shape.color = self.config.defaults.color
        self._shapes.append(shape)

        logger.debug("Added %r", shape)
        if select:
            self.select_shape(shape.id)
        return shape.id

    def remove_shape(self, shape_id: int) -> bool:
        """
        Remove a shape.

        If it was selected, selection moves to the shape now at the same
        index (or the new last shape), or clears when the world is empty.
        """
        i = self.index_of(shape_id)
        if i is None:
            return False

        was_selected = self._selected_shape_id == shape_id
        del self._shapes[i]
        logger.debug("Removed shape %d", shape_id)

        if was_selected:
            if self._shapes:
                self.select_shape(self._shapes[min(i, len(self._shapes) - 1)].id)
            else:
                self.select_shape(NO_SELECTION)
        return True

    def clear(self):
        """Remove every shape. Ids already handed out are never reused."""
        self._shapes.clear()
        self._selected_shape_id = NO_SELECTION
        self._selected_vertex = NO_SELECTION
        self._selected_edge = NO_SELECTION

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    @property
    def selected_shape_id(self) -> int:
        return self._selected_shape_id

    @property
    def selected_vertex(self) -> int:
        return self._selected_vertex

    @property
    def selected_edge(self) -> int:
        return self._selected_edge

    @property
    def selected_shape(self) -> Optional[Shape]:
        return self.get(self._selected_shape_id)

    def select_shape(self, shape_id: int) -> bool:
        """Select a shape by id (NO_SELECTION clears). Unknown ids are ignored."""
        if shape_id != NO_SELECTION and shape_id not in self:
            return False
        if shape_id != self._selected_shape_id:
            self._selected_shape_id = shape_id
            self._selected_vertex = NO_SELECTION
            self._selected_edge = NO_SELECTION
        return True

    def select_vertex(self, index: int) -> bool:
        """Select a vertex of the selected shape; clears edge selection."""
        shape = self.selected_shape
        if shape is None or not NO_SELECTION <= index < shape.vertex_count:
            return False
        self._selected_vertex = index
        if index != NO_SELECTION:
            self._selected_edge = NO_SELECTION
        return True

    def select_edge(self, index: int) -> bool:
        """Select an edge of the selected shape; clears vertex selection."""
        shape = self.selected_shape
        if shape is None or not NO_SELECTION <= index < shape.vertex_count:
            return False
        self._selected_edge = index
        if index != NO_SELECTION:
            self._selected_vertex = NO_SELECTION
        return True

    def clear_sub_selection(self):
        self._selected_vertex = NO_SELECTION
        self._selected_edge = NO_SELECTION

    def validate_sub_selection(self):
        """Drop vertex/edge indices that no longer exist after a ring edit."""
        shape = self.selected_shape
        count = shape.vertex_count if shape is not None else 0
        if self._selected_vertex >= count:
            self._selected_vertex = NO_SELECTION
        if self._selected_edge >= count:
            self._selected_edge = NO_SELECTION

    # -------------------------------------------------------------------------
    # Collision settling
    # -------------------------------------------------------------------------

    def settle(self, shape_id: int) -> SettleResult:
        """
        Push a shape out of every other visible, collision-enabled shape.

        Runs detection+resolution passes over the rest of the world until a
        pass resolves nothing or the pass cap is reached. Only the given
        shape moves. With three or more mutually overlapping shapes a small
        residual overlap may remain after the last pass.
        """
        result = SettleResult()
        shape = self.get(shape_id)
        if shape is None or not self.collisions_enabled or not shape.collisions_enabled:
            return result

        max_iterations = self.config.settling.max_iterations
        for _ in range(max_iterations):
            result.passes += 1
            any_collision = False

            for i in range(len(self._shapes)):
                other = self._shapes[i]
                if other.id == shape_id:
                    continue
                if not other.visible or not other.collisions_enabled:
                    continue

                if check_collision(shape, other):
                    if resolve_collision(shape, other) is not None:
                        result.resolved += 1
                        any_collision = True

            if not any_collision:
                return result

        result.converged = False
        logger.debug("Shape %d did not settle within %d passes (%d corrections)",
                     shape_id, max_iterations, result.resolved)
        return result

    def find_overlaps(self, min_area: float = 1e-6) -> List[Tuple[int, int, float]]:
        """
        Exact interior overlaps between visible, collision-enabled shapes.

        Returns:
            List of (id_a, id_b, overlap_area) for pairs above min_area
        """
        active = [s for s in self._shapes if s.visible and s.collisions_enabled]
        overlaps = []
        for i in range(len(active)):
            for j in range(i + 1, len(active)):
                area = overlap_area(active[i].world_polygon, active[j].world_polygon)
                if area > min_area:
                    overlaps.append((active[i].id, active[j].id, area))
        return overlaps

    def world_polygons(self) -> Dict[int, np.ndarray]:
        """Copies of the world rings of visible shapes, in paint order."""
        return {s.id: s.world_polygon.copy() for s in self._shapes if s.visible}
