"""
Visualization - debug snapshots of an editor scene.

Draws the world rings of every visible shape with matplotlib so a scene can
be inspected offline (the interactive renderer lives outside this package).
Shapes taking part in an exact overlap are drawn red.
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Polygon as MplPolygon
from matplotlib.collections import PatchCollection
from typing import Tuple

from core.bounding_box import compute_scene_bounds


def _world_of(scene):
    """Accept either a PolygonEditor or a World."""
    return getattr(scene, 'world', scene)


def plot_scene(
    scene,
    ax=None,
    title: str = None,
    highlight_collisions: bool = True,
    show_vertices: bool = True,
    show_selection: bool = True,
    figsize: Tuple[int, int] = (10, 10)
):
    """
    Plot every visible shape of an editor scene in world coordinates.

    Args:
        scene: PolygonEditor or World
        ax: Matplotlib axes (creates new if None)
        title: Plot title
        highlight_collisions: Color overlapping shapes red
        show_vertices: Mark ring vertices
        show_selection: Outline the selected shape
        figsize: Figure size if creating new figure

    Returns:
        ax: Matplotlib axes
    """
    world = _world_of(scene)
    shapes = [s for s in world if s.visible]

    overlapping = set()
    if highlight_collisions:
        for id_a, id_b, _ in world.find_overlaps():
            overlapping.add(id_a)
            overlapping.add(id_b)

    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=figsize)

    patches = []
    colors = []
    for shape in shapes:
        patches.append(MplPolygon(shape.world_polygon, closed=True))
        if shape.id in overlapping:
            colors.append('red')
        else:
            colors.append(tuple(c / 255.0 for c in shape.color))

    if patches:
        collection = PatchCollection(
            patches,
            facecolors=colors,
            edgecolors='black',
            linewidths=0.8,
            alpha=0.6
        )
        ax.add_collection(collection)

    for shape in shapes:
        poly = shape.world_polygon
        if show_vertices:
            ax.scatter(poly[:, 0], poly[:, 1], s=8, color='black', zorder=3)
        cx, cy = shape.position
        ax.annotate(shape.name, (cx, cy), ha='center', va='center', fontsize=8)

    selected = world.selected_shape
    if show_selection and selected is not None and selected.visible:
        ring = np.vstack([selected.world_polygon, selected.world_polygon[:1]])
        ax.plot(ring[:, 0], ring[:, 1], color='orange', linewidth=2)

    bounds = compute_scene_bounds([s.world_polygon for s in shapes])
    if bounds is not None:
        min_x, min_y, max_x, max_y = bounds
        padding = 0.05 * max(max_x - min_x, max_y - min_y, 1.0)
        ax.set_xlim(min_x - padding, max_x + padding)
        ax.set_ylim(min_y - padding, max_y + padding)

    # Screen convention: y grows downwards
    if not ax.yaxis_inverted():
        ax.invert_yaxis()
    ax.set_aspect('equal')
    ax.grid(True, alpha=0.3)

    if title is None:
        title = f"{len(shapes)} shapes"
    if overlapping:
        title += f" | ⚠️ {len(overlapping)} overlapping"

    ax.set_title(title)
    ax.set_xlabel('x')
    ax.set_ylabel('y')

    return ax


def save_scene(scene, save_path: str, show: bool = False, **kwargs):
    """
    Plot a scene and save it to file.

    Args:
        scene: PolygonEditor or World
        save_path: Output image path
        show: Also open an interactive window
        **kwargs: Passed to plot_scene
    """
    fig, ax = plt.subplots(1, 1, figsize=kwargs.pop('figsize', (10, 10)))
    plot_scene(scene, ax=ax, **kwargs)

    plt.tight_layout()
    fig.savefig(save_path, dpi=150, bbox_inches='tight')
    print(f"Saved figure to {save_path}")

    if show:
        plt.show()
    plt.close(fig)
