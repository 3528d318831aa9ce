"""
Editor module - shape collection, edit operations and pointer interaction.
"""

from .world import World, SettleResult, NO_SELECTION
from .hit_test import Handle, VertexHit, EdgeHit, TransformHandles
from .interaction import (
    InteractionController,
    DragMode,
    TransformMode,
    UIMode,
    PointerButton,
    Target,
    TargetKind,
)
from .canvas import PolygonEditor

__all__ = [
    'World',
    'SettleResult',
    'NO_SELECTION',
    'Handle',
    'VertexHit',
    'EdgeHit',
    'TransformHandles',
    'InteractionController',
    'DragMode',
    'TransformMode',
    'UIMode',
    'PointerButton',
    'Target',
    'TargetKind',
    'PolygonEditor',
]
