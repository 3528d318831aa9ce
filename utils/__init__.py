"""
Utilities module - Visualization helpers.
"""

from .visualization import plot_scene, save_scene

__all__ = [
    'plot_scene',
    'save_scene',
]
