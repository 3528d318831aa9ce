"""Pytest fixtures for polygon editor tests."""

import matplotlib

matplotlib.use("Agg")

import pytest

from config import EditorConfig
from core.polygon import Shape
from core.transform import Viewport
from editor.canvas import PolygonEditor
from editor.world import World


@pytest.fixture
def config() -> EditorConfig:
    """Fresh default configuration."""
    return EditorConfig()


@pytest.fixture
def viewport() -> Viewport:
    """800x600 viewport with the origin centered at (400, 300)."""
    return Viewport(800, 600)


@pytest.fixture
def world() -> World:
    """Empty world."""
    return World()


@pytest.fixture
def editor() -> PolygonEditor:
    """Empty 800x600 editor."""
    return PolygonEditor(800, 600)


@pytest.fixture
def square() -> Shape:
    """Axis-aligned 50x50 square at the origin."""
    return Shape(0, 0.0, 0.0, 50.0, 50.0, 4)


@pytest.fixture
def make_square():
    """Factory for axis-aligned squares."""

    def _make(shape_id=0, x=0.0, y=0.0, size=50.0) -> Shape:
        return Shape(shape_id, x, y, size, size, 4)

    return _make
