"""
Polygon Editor - Global Configuration
All limits, tolerances and interaction settings in one place.
"""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass
class ShapeLimits:
    """Hard limits enforced by the shape setters."""
    min_sides: int = 3
    max_sides: int = 20

    # Vertex ring size
    min_vertices: int = 3
    max_vertices: int = 20

    # Uniform scale
    min_scale: float = 0.1
    max_scale: float = 3.0

    # Width/height extents
    min_extent: float = 10.0
    max_extent: float = 10000.0


@dataclass
class ShapeDefaults:
    """Values given to freshly created shapes."""
    sides: int = 3
    width: float = 50.0
    height: float = 80.0
    color: Tuple[int, int, int] = (0, 120, 255)
    name: str = "Shape"


@dataclass
class GeometryTolerances:
    """Numeric floors used by the geometry kernels."""
    epsilon: float = 5e-5            # intersection / rotation tolerance
    edge_length_floor: float = 1e-12  # adjust_for_edge_length no-op below this
    stretch_floor: float = 1e-6       # symmetric edge stretch no-op below this
    axis_floor: float = 1e-6          # SAT axes shorter than this are skipped


@dataclass
class SettlingConfig:
    """Collision settling after a shape moves."""
    max_iterations: int = 5


@dataclass
class ViewportConfig:
    """Pan/zoom behaviour."""
    min_zoom: float = 0.1
    max_zoom: float = 100.0
    wheel_zoom_factor: float = 1.1

    # Used until the adapter reports real dimensions
    default_width: float = 800.0
    default_height: float = 600.0


@dataclass
class InteractionConfig:
    """Handle geometry and drag thresholds (screen pixels unless noted)."""
    search_radius: float = 20.0      # vertex/edge pick radius
    handle_radius: float = 10.0      # transform handle pick radius
    ring_margin: float = 40.0        # rotate ring distance beyond the shape
    ring_thickness: float = 3.0
    handle_margin: float = 20.0      # scale/extent/move handle distance

    # Minimum change before a drag step is applied
    rotate_threshold: float = 0.5    # degrees
    scale_threshold: float = 0.01    # ratio
    extent_threshold: float = 0.01   # local units


@dataclass
class EditorConfig:
    """Master configuration combining all sub-configs."""
    limits: ShapeLimits = field(default_factory=ShapeLimits)
    defaults: ShapeDefaults = field(default_factory=ShapeDefaults)
    geometry: GeometryTolerances = field(default_factory=GeometryTolerances)
    settling: SettlingConfig = field(default_factory=SettlingConfig)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    interaction: InteractionConfig = field(default_factory=InteractionConfig)


# Global configuration instance
CONFIG = EditorConfig()


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(value, high))


def default_shape_name(sides: int, width: float, height: float) -> str:
    """Pick a display name for a new regular polygon."""
    if sides == 4:
        return "Square" if width == height else CONFIG.defaults.name
    if sides == 3:
        return "Triangle"
    if sides == 5:
        return "Pentagon"
    if sides == 6:
        return "Hexagon"
    return f"{sides}-gon"
