"""
Interaction State Machine - turns pointer events into edits.

The controller holds exactly one state value at a time. Each state is a
small frozen dataclass carrying only what its mode needs, so e.g. a rotate
drag never has a stale vertex index lying around:

    Idle
    PanningViewport(last)
    MovingShape(shape_id, mode, start_cursor, start_position)
    RotatingShape(shape_id, reference)
    ScalingShape(shape_id, reference)
    AdjustingExtent(shape_id, mode, reference)
    DraggingVertex(shape_id, index)
    DraggingEdge(shape_id, index, start_cursor, endpoints)

Move-type drags recompute the position from the drag-start position plus
the cumulative cursor delta. Rotate, scale and extent drags are
incremental: after each applied step the reference cursor is re-based.
Every mutation is followed by collision settling of the edited shape.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple, Union
import math

from config import CONFIG, EditorConfig
from core.polygon import Shape, Point
from core.transform import Viewport
from editor import edit_ops
from editor.hit_test import (
    Handle,
    compute_handles,
    find_closest_edge,
    find_closest_vertex,
    find_shape_at_point,
    hit_transform_handle,
    screen_angle,
    screen_distance,
)
from editor.world import NO_SELECTION, SettleResult, World

logger = logging.getLogger(__name__)


# =============================================================================
# MODES
# =============================================================================

class DragMode(Enum):
    IDLE = "idle"
    PANNING_VIEWPORT = "panning_viewport"
    DRAGGING_SHAPE = "dragging_shape"
    DRAGGING_VERTEX = "dragging_vertex"
    DRAGGING_EDGE = "dragging_edge"


class TransformMode(Enum):
    NONE = "none"
    MOVE = "move"
    ROTATE = "rotate"
    SCALE = "scale"
    ADJUST_WIDTH = "adjust_width"
    ADJUST_HEIGHT = "adjust_height"
    MOVE_ALONG_LOCAL_X = "move_along_local_x"
    MOVE_ALONG_LOCAL_Y = "move_along_local_y"


class UIMode(Enum):
    """Which kind of target a left press goes for."""
    TRANSFORM = "transform"
    VERTEX_EDIT = "vertex_edit"


class PointerButton(Enum):
    LEFT = "left"
    RIGHT = "right"
    MIDDLE = "middle"


class TargetKind(Enum):
    EMPTY = "empty"
    VERTEX = "vertex"
    EDGE = "edge"
    HANDLE = "handle"
    SHAPE = "shape"


@dataclass(frozen=True)
class Target:
    """What a left press at a cursor position would grab."""
    kind: TargetKind
    shape_id: int = NO_SELECTION
    index: int = NO_SELECTION
    handle: Optional[Handle] = None
    point: Optional[Point] = None


_HANDLE_MODES = {
    Handle.ROTATE: TransformMode.ROTATE,
    Handle.SCALE: TransformMode.SCALE,
    Handle.WIDTH: TransformMode.ADJUST_WIDTH,
    Handle.HEIGHT: TransformMode.ADJUST_HEIGHT,
    Handle.MOVE_X: TransformMode.MOVE_ALONG_LOCAL_X,
    Handle.MOVE_Y: TransformMode.MOVE_ALONG_LOCAL_Y,
}


# =============================================================================
# STATES
# =============================================================================

@dataclass(frozen=True)
class Idle:
    drag_mode = DragMode.IDLE
    transform_mode = TransformMode.NONE


@dataclass(frozen=True)
class PanningViewport:
    last: Point
    drag_mode = DragMode.PANNING_VIEWPORT
    transform_mode = TransformMode.NONE


@dataclass(frozen=True)
class MovingShape:
    """MOVE, MOVE_ALONG_LOCAL_X or MOVE_ALONG_LOCAL_Y."""
    shape_id: int
    mode: TransformMode
    start_cursor: Point
    start_position: Point
    drag_mode = DragMode.DRAGGING_SHAPE

    @property
    def transform_mode(self) -> TransformMode:
        return self.mode


@dataclass(frozen=True)
class RotatingShape:
    shape_id: int
    reference: Point
    drag_mode = DragMode.DRAGGING_SHAPE
    transform_mode = TransformMode.ROTATE


@dataclass(frozen=True)
class ScalingShape:
    shape_id: int
    reference: Point
    drag_mode = DragMode.DRAGGING_SHAPE
    transform_mode = TransformMode.SCALE


@dataclass(frozen=True)
class AdjustingExtent:
    """ADJUST_WIDTH or ADJUST_HEIGHT."""
    shape_id: int
    mode: TransformMode
    reference: Point
    drag_mode = DragMode.DRAGGING_SHAPE

    @property
    def transform_mode(self) -> TransformMode:
        return self.mode


@dataclass(frozen=True)
class DraggingVertex:
    shape_id: int
    index: int
    drag_mode = DragMode.DRAGGING_VERTEX
    transform_mode = TransformMode.NONE


@dataclass(frozen=True)
class DraggingEdge:
    shape_id: int
    index: int
    start_cursor: Point
    endpoints: Tuple[Point, Point]
    drag_mode = DragMode.DRAGGING_EDGE
    transform_mode = TransformMode.NONE


InteractionState = Union[
    Idle, PanningViewport, MovingShape, RotatingShape,
    ScalingShape, AdjustingExtent, DraggingVertex, DraggingEdge,
]

IDLE = Idle()


def _normalize_degrees(angle: float) -> float:
    """Wrap an angle difference into (-180, 180]."""
    angle = math.fmod(angle, 360.0)
    if angle > 180.0:
        angle -= 360.0
    elif angle <= -180.0:
        angle += 360.0
    return angle


# =============================================================================
# CONTROLLER
# =============================================================================

class InteractionController:
    """
    Pointer-event state machine over a World and a Viewport.

    Attributes:
        state: Current interaction state
        ui_mode: TRANSFORM (handles) or VERTEX_EDIT (vertices/edges)
        last_settle: Result of the most recent collision settling
    """

    def __init__(self, world: World, viewport: Viewport, config: Optional[EditorConfig] = None):
        self.world = world
        self.viewport = viewport
        self.config = config or CONFIG
        self.state: InteractionState = IDLE
        self.ui_mode = UIMode.TRANSFORM
        self.last_settle: Optional[SettleResult] = None

    @property
    def drag_mode(self) -> DragMode:
        return self.state.drag_mode

    @property
    def transform_mode(self) -> TransformMode:
        return self.state.transform_mode

    @property
    def is_dragging(self) -> bool:
        return self.state.drag_mode is not DragMode.IDLE

    def set_ui_mode(self, mode: UIMode):
        """Switch UI mode; vertex/edge sub-selection does not carry over."""
        if mode is not self.ui_mode:
            self.ui_mode = mode
            self.world.clear_sub_selection()

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def classify(self, sx: float, sy: float) -> Target:
        """Resolve what a left press at (sx, sy) would grab, without side effects."""
        cfg = self.config.interaction
        selected = self.world.selected_shape

        if selected is not None:
            if self.ui_mode is UIMode.VERTEX_EDIT:
                vertex = find_closest_vertex(selected, self.viewport, sx, sy, cfg.search_radius)
                if vertex is not None:
                    return Target(TargetKind.VERTEX, selected.id, vertex.index, point=vertex.point)
                edge = find_closest_edge(selected, self.viewport, sx, sy, cfg.search_radius)
                if edge is not None:
                    return Target(TargetKind.EDGE, selected.id, edge.index, point=edge.point)
            else:
                handles = compute_handles(selected, self.viewport, cfg)
                handle = hit_transform_handle(handles, sx, sy, cfg)
                if handle is not None:
                    return Target(TargetKind.HANDLE, selected.id, handle=handle,
                                  point=handles.position(handle))

        shape_id = find_shape_at_point(list(self.world), self.viewport, sx, sy)
        if shape_id is not None:
            return Target(TargetKind.SHAPE, shape_id, point=(sx, sy))
        return Target(TargetKind.EMPTY)

    def hover(self, sx: float, sy: float) -> Optional[Target]:
        """Target under an idle cursor (None while a drag is active)."""
        if self.is_dragging:
            return None
        return self.classify(sx, sy)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def press(self, sx: float, sy: float, button: PointerButton = PointerButton.LEFT) -> bool:
        """
        Start a drag.

        Returns:
            True when the press began a drag or changed the view
        """
        cursor = (float(sx), float(sy))

        if button is PointerButton.RIGHT:
            self.state = PanningViewport(cursor)
            return True

        if button is PointerButton.MIDDLE:
            self.state = IDLE
            self.viewport.reset()
            return True

        target = self.classify(sx, sy)

        if target.kind is TargetKind.VERTEX:
            self.world.select_vertex(target.index)
            self.state = DraggingVertex(target.shape_id, target.index)

        elif target.kind is TargetKind.EDGE:
            shape = self.world.get(target.shape_id)
            v1, v2 = shape.edge_endpoints(target.index)
            self.world.select_edge(target.index)
            self.state = DraggingEdge(target.shape_id, target.index, cursor,
                                      (shape.vertex(v1), shape.vertex(v2)))

        elif target.kind is TargetKind.HANDLE:
            self.state = self._handle_state(target, cursor)

        elif target.kind is TargetKind.SHAPE:
            shape = self.world.get(target.shape_id)
            self.world.select_shape(target.shape_id)
            self.state = MovingShape(target.shape_id, TransformMode.MOVE, cursor, shape.position)

        else:
            self.world.select_shape(NO_SELECTION)
            self.state = IDLE
            return False

        logger.debug("Press at (%.1f, %.1f) -> %s", sx, sy, self.state)
        return True

    def _handle_state(self, target: Target, cursor: Point) -> InteractionState:
        mode = _HANDLE_MODES[target.handle]
        shape = self.world.get(target.shape_id)

        if mode is TransformMode.ROTATE:
            return RotatingShape(target.shape_id, cursor)
        if mode is TransformMode.SCALE:
            return ScalingShape(target.shape_id, cursor)
        if mode in (TransformMode.ADJUST_WIDTH, TransformMode.ADJUST_HEIGHT):
            return AdjustingExtent(target.shape_id, mode, cursor)
        return MovingShape(target.shape_id, mode, cursor, shape.position)

    def move(self, sx: float, sy: float) -> bool:
        """
        Continue the active drag.

        Returns:
            True when the view or a shape changed
        """
        cursor = (float(sx), float(sy))
        state = self.state

        if isinstance(state, PanningViewport):
            self.viewport.pan(cursor[0] - state.last[0], cursor[1] - state.last[1])
            self.state = PanningViewport(cursor)
            return True

        if isinstance(state, Idle):
            return False

        shape = self.world.get(state.shape_id)
        if shape is None:
            # Shape vanished mid-drag
            self.state = IDLE
            return False

        if isinstance(state, MovingShape):
            changed = self._move_shape(shape, state, cursor)
        elif isinstance(state, RotatingShape):
            changed = self._rotate_shape(shape, state, cursor)
        elif isinstance(state, ScalingShape):
            changed = self._scale_shape(shape, state, cursor)
        elif isinstance(state, AdjustingExtent):
            changed = self._adjust_extent(shape, state, cursor)
        elif isinstance(state, DraggingVertex):
            wx, wy = self.viewport.screen_to_world(*cursor)
            changed = edit_ops.move_vertex_to_world(shape, state.index, wx, wy)
        else:
            changed = self._drag_edge(shape, state, cursor)

        if changed:
            self.last_settle = self.world.settle(shape.id)
        return changed

    def release(
        self,
        sx: Optional[float] = None,
        sy: Optional[float] = None,
        button: PointerButton = PointerButton.LEFT
    ) -> bool:
        """
        End any drag and return to Idle.

        Returns:
            True when a drag was active
        """
        was_dragging = self.is_dragging
        self.state = IDLE
        return was_dragging

    def wheel(self, sx: float, sy: float, delta: float) -> bool:
        """Zoom one step around the cursor; positive delta zooms in."""
        if delta == 0:
            return False
        factor = self.config.viewport.wheel_zoom_factor
        self.viewport.zoom_at(sx, sy, factor if delta > 0 else 1.0 / factor)
        return True

    # -------------------------------------------------------------------------
    # Per-mode steps
    # -------------------------------------------------------------------------

    def _world_delta(self, start: Point, cursor: Point) -> Point:
        x0, y0 = self.viewport.screen_to_world(*start)
        x1, y1 = self.viewport.screen_to_world(*cursor)
        return (x1 - x0, y1 - y0)

    def _move_shape(self, shape: Shape, state: MovingShape, cursor: Point) -> bool:
        dx, dy = self._world_delta(state.start_cursor, cursor)
        x0, y0 = state.start_position

        if state.mode is TransformMode.MOVE:
            shape.set_position(x0 + dx, y0 + dy)
            return True

        angle = math.radians(shape.rotation)
        if state.mode is TransformMode.MOVE_ALONG_LOCAL_X:
            ax, ay = math.cos(angle), math.sin(angle)
        else:
            ax, ay = -math.sin(angle), math.cos(angle)

        projection = dx * ax + dy * ay
        shape.set_position(x0 + ax * projection, y0 + ay * projection)
        return True

    def _rotate_shape(self, shape: Shape, state: RotatingShape, cursor: Point) -> bool:
        center = self.viewport.world_to_screen(*shape.position)
        delta = _normalize_degrees(screen_angle(center, cursor) - screen_angle(center, state.reference))

        if abs(delta) <= self.config.interaction.rotate_threshold:
            return False
        shape.rotation = shape.rotation + delta
        self.state = replace(state, reference=cursor)
        return True

    def _scale_shape(self, shape: Shape, state: ScalingShape, cursor: Point) -> bool:
        center = self.viewport.world_to_screen(*shape.position)
        start = screen_distance(center, state.reference)
        if start <= 0:
            return False

        factor = screen_distance(center, cursor) / start
        if abs(factor - 1.0) <= self.config.interaction.scale_threshold:
            return False
        shape.scale = shape.scale * factor
        self.state = replace(state, reference=cursor)
        return True

    def _adjust_extent(self, shape: Shape, state: AdjustingExtent, cursor: Point) -> bool:
        start = shape.world_to_local(*self.viewport.screen_to_world(*state.reference))
        current = shape.world_to_local(*self.viewport.screen_to_world(*cursor))
        threshold = self.config.interaction.extent_threshold

        if state.mode is TransformMode.ADJUST_WIDTH:
            # Width handle sits on the local -x side; outward grows
            delta = start[0] - current[0]
            if abs(delta) <= threshold:
                return False
            shape.width = shape.width + delta * 2.0
        else:
            delta = current[1] - start[1]
            if abs(delta) <= threshold:
                return False
            shape.height = shape.height + delta * 2.0

        self.state = replace(state, reference=cursor)
        return True

    def _drag_edge(self, shape: Shape, state: DraggingEdge, cursor: Point) -> bool:
        dx, dy = self._world_delta(state.start_cursor, cursor)
        ldx, ldy = shape.world_vector_to_local(dx, dy)
        return edit_ops.translate_edge(shape, state.index, state.endpoints, ldx, ldy)
