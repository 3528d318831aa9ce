"""Tests for core.polygon: ring generation and the Shape model."""

import math

import numpy as np
import pytest

from core.polygon import Shape, generate_regular_polygon, polygon_area

HALF_SIDE = 50.0 * math.sqrt(2.0) / 2.0


class TestRegularPolygon:
    """Tests for generate_regular_polygon."""

    @pytest.mark.parametrize("sides", list(range(3, 21)))
    def test_vertex_count_matches_sides(self, sides):
        """A regular ring has exactly `sides` vertices."""
        ring = generate_regular_polygon(sides, 50.0, 80.0)
        assert ring.shape == (sides, 2)

    def test_triangle_points_up(self):
        """Non-square polygons start at -pi/2 (top vertex in y-down space)."""
        ring = generate_regular_polygon(3, 50.0, 80.0)
        assert ring[0, 0] == pytest.approx(0.0, abs=1e-9)
        assert ring[0, 1] == pytest.approx(-80.0)
        assert ring[1, 0] == pytest.approx(math.cos(math.pi / 6) * 50.0)
        assert ring[1, 1] == pytest.approx(40.0)

    def test_square_is_axis_aligned(self):
        """Squares start at -pi/4 so their edges follow the axes."""
        ring = generate_regular_polygon(4, 50.0, 50.0)
        assert ring[0] == pytest.approx([HALF_SIDE, -HALF_SIDE])
        assert ring[1] == pytest.approx([HALF_SIDE, HALF_SIDE])
        assert ring[2] == pytest.approx([-HALF_SIDE, HALF_SIDE])
        assert ring[3] == pytest.approx([-HALF_SIDE, -HALF_SIDE])

    def test_area_of_square(self):
        """Shoelace area of the square ring."""
        ring = generate_regular_polygon(4, 50.0, 50.0)
        assert polygon_area(ring) == pytest.approx(5000.0)


class TestShapeDefaults:
    """Tests for Shape construction and clamped properties."""

    def test_defaults(self):
        """A bare Shape is a 50x80 triangle at the origin."""
        shape = Shape(7)
        assert shape.id == 7
        assert shape.sides == 3
        assert shape.width == 50.0
        assert shape.height == 80.0
        assert shape.vertex_count == 3
        assert shape.position == (0.0, 0.0)
        assert shape.rotation == 0.0
        assert shape.scale == 1.0
        assert not shape.use_custom_vertices
        assert shape.visible
        assert shape.collisions_enabled

    def test_constructor_clamps(self):
        """Out-of-range construction values are clamped."""
        shape = Shape(0, width=1.0, height=50000.0, sides=40)
        assert shape.width == 10.0
        assert shape.height == 10000.0
        assert shape.sides == 20
        assert shape.vertex_count == 20

    def test_scale_clamped(self, square):
        """Scale stays within [0.1, 3.0]."""
        square.scale = 10.0
        assert square.scale == 3.0
        square.scale = 0.01
        assert square.scale == 0.1

    def test_sides_clamped(self, square):
        """Sides stay within [3, 20]."""
        square.sides = 1
        assert square.sides == 3
        assert square.vertex_count == 3
        square.sides = 25
        assert square.sides == 20

    def test_width_regenerates_regular_ring(self):
        """Changing width rebuilds the ring while in regular mode."""
        shape = Shape(0, width=50.0, height=80.0, sides=3)
        shape.width = 100.0
        assert shape.vertex(1) == pytest.approx((math.cos(math.pi / 6) * 100.0, 40.0))

    def test_vertices_returns_copy(self, square):
        """Mutating the returned array does not touch the shape."""
        ring = square.vertices
        ring[0, 0] = 999.0
        assert square.vertex(0)[0] == pytest.approx(HALF_SIDE)


class TestVertexRing:
    """Tests for ring editing and custom-vertex mode."""

    def test_remove_on_triangle_rejected(self):
        """A ring never drops below three vertices."""
        shape = Shape(0, sides=3)
        assert not shape.remove_vertex(0)
        assert shape.vertex_count == 3
        assert not shape.use_custom_vertices

    def test_remove_on_square_enters_custom_mode(self, square):
        """Removing from four vertices succeeds and switches to custom mode."""
        assert square.remove_vertex(0)
        assert square.vertex_count == 3
        assert square.use_custom_vertices
        assert square.sides == 3

    def test_custom_ring_survives_resize(self, square):
        """Width changes no longer regenerate a custom ring."""
        square.set_vertex(0, 10.0, 10.0)
        square.width = 200.0
        assert square.vertex(0) == (10.0, 10.0)
        assert square.width == 200.0

    def test_insert_rejected_at_maximum(self):
        """A 20-vertex ring refuses further insertion."""
        shape = Shape(0, sides=20)
        assert not shape.insert_vertex(0, 1.0, 1.0)
        assert not shape.add_vertex(1.0, 1.0)
        assert shape.vertex_count == 20

    def test_insert_at_index(self, square):
        """insert_vertex places the point before `index`."""
        assert square.insert_vertex(1, 5.0, 6.0)
        assert square.vertex_count == 5
        assert square.vertex(1) == (5.0, 6.0)

    def test_out_of_range_indices(self, square):
        """Invalid indices are rejected rather than raising."""
        assert square.vertex(4) is None
        assert square.vertex(-1) is None
        assert not square.set_vertex(9, 0.0, 0.0)
        assert not square.remove_vertex(9)
        assert not square.insert_vertex(9, 0.0, 0.0)
        assert square.vertex_world_position(4) is None

    def test_set_vertices_size_check(self, square):
        """Rings outside [3, 20] vertices are rejected."""
        assert not square.set_vertices([(0.0, 0.0), (1.0, 0.0)])
        assert square.set_vertices([(0.0, 0.0), (10.0, 0.0), (0.0, 10.0)])
        assert square.vertex_count == 3

    def test_reset_vertices(self, square):
        """reset_vertices leaves custom mode and regenerates from sides."""
        square.set_vertex(0, 1.0, 1.0)
        square.reset_vertices()
        assert not square.use_custom_vertices
        assert square.vertex_count == square.sides
        assert square.vertex(0) == pytest.approx((HALF_SIDE, -HALF_SIDE))

    def test_edge_endpoints_wrap(self, square):
        """Edge i joins vertex i and i + 1, wrapping at the end."""
        assert square.edge_endpoints(0) == (0, 1)
        assert square.edge_endpoints(3) == (3, 0)
        assert square.edge_endpoints(5) == (1, 2)

    def test_edge_length(self, square):
        """Square edges are 50 * sqrt(2) long."""
        assert square.edge_length(0) == pytest.approx(2 * HALF_SIDE)

    def test_adjust_for_edge_length_moves_second_endpoint(self, square):
        """The first endpoint stays put; the second moves along the edge."""
        first = square.vertex(0)
        assert square.adjust_for_edge_length(0, 100.0)
        assert square.vertex(0) == first
        assert square.edge_length(0) == pytest.approx(100.0)
        assert square.vertex(1)[0] == pytest.approx(HALF_SIDE)
        assert square.use_custom_vertices

    def test_adjust_for_degenerate_edge_is_noop(self, square):
        """A zero-length edge has no direction to scale along."""
        square.set_vertex(1, *square.vertex(0))
        ring = square.vertices
        assert not square.adjust_for_edge_length(0, 10.0)
        np.testing.assert_array_equal(square.vertices, ring)


class TestWorldGeometry:
    """Tests for world placement and coordinate mapping."""

    def test_world_polygon_translated(self, make_square):
        """Without rotation or scale the ring is just translated."""
        shape = make_square(x=10.0, y=20.0)
        expected = shape.vertices + np.array([10.0, 20.0])
        np.testing.assert_allclose(shape.world_polygon, expected)

    def test_world_polygon_updates_after_move(self, square):
        """The cached ring is rebuilt after a transform change."""
        before = square.world_polygon.copy()
        square.move(5.0, -5.0)
        np.testing.assert_allclose(square.world_polygon, before + np.array([5.0, -5.0]))

    def test_bounds(self, square):
        """AABB of the axis-aligned square."""
        min_x, min_y, max_x, max_y = square.bounds
        assert (min_x, min_y) == pytest.approx((-HALF_SIDE, -HALF_SIDE))
        assert (max_x, max_y) == pytest.approx((HALF_SIDE, HALF_SIDE))

    def test_rotation_is_clockwise_on_screen(self, make_square):
        """A 90 degree rotation maps local +x onto world +y."""
        shape = make_square(x=100.0, y=50.0)
        shape.rotation = 90.0
        assert shape.local_to_world(10.0, 0.0) == pytest.approx((100.0, 60.0))

    def test_scale_applied_before_translation(self, make_square):
        """Local points are scaled about the local origin."""
        shape = make_square(x=100.0, y=0.0)
        shape.scale = 2.0
        assert shape.local_to_world(10.0, 5.0) == pytest.approx((120.0, 10.0))

    def test_local_world_round_trip(self, make_square):
        """world_to_local inverts local_to_world."""
        shape = make_square(x=-30.0, y=12.5)
        shape.rotation = 37.0
        shape.scale = 1.7
        wx, wy = shape.local_to_world(13.0, -4.0)
        assert shape.world_to_local(wx, wy) == pytest.approx((13.0, -4.0), abs=1e-6)

    def test_world_vector_ignores_position(self, make_square):
        """Displacements are unaffected by the shape position."""
        shape = make_square(x=500.0, y=500.0)
        shape.rotation = 90.0
        assert shape.world_vector_to_local(0.0, 10.0) == pytest.approx((10.0, 0.0), abs=1e-9)

    def test_area_scales_quadratically(self, square):
        """World area follows scale squared."""
        square.scale = 2.0
        assert square.area == pytest.approx(20000.0)

    def test_bounding_radius(self, square):
        """Square vertices sit 50 units from the local origin."""
        assert square.bounding_radius() == pytest.approx(50.0)
