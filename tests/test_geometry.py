"""Geometry analyzer: measures, validation and key derivation."""

import pytest

from cipherdash.analyzers.geometry import (
    VALID_MULTIPLY_KEYS,
    PolygonAnalyzer,
    as_point,
    distance,
    is_convex,
    polygon_area,
    polygon_multiply_key,
    polygon_shift_key,
    side_lengths,
    side_variance,
    validate_polygon,
)
from cipherdash.core.models import Point, ValidationReason

from conftest import regular_polygon


def pts(*pairs):
    return [Point(x=x, y=y) for x, y in pairs]


# ── Primitive measures ────────────────────────────────────────────────────────
def test_distance_is_euclidean():
    assert distance(Point(x=0, y=0), Point(x=3, y=4)) == 5.0


def test_square_area_is_exact():
    square = pts((0, 0), (10, 0), (10, 10), (0, 10))
    assert polygon_area(square) == 100.0


def test_area_ignores_winding_direction():
    square = pts((0, 0), (10, 0), (10, 10), (0, 10))
    assert polygon_area(list(reversed(square))) == 100.0


def test_degenerate_input_returns_plain_values():
    two = pts((0, 0), (50, 0))
    assert polygon_area(two) == 0.0
    assert is_convex(two) is False
    assert side_variance([]) == 0.0
    assert side_lengths([]) == []


def test_side_lengths_are_cyclic(kite):
    lengths = side_lengths(kite)
    assert lengths[0] == pytest.approx(100.0)
    assert lengths[1] == pytest.approx(113.137, abs=1e-3)
    assert lengths[3] == pytest.approx(100.0)


@pytest.mark.parametrize("n", range(3, 13))
def test_regular_polygons_are_convex_with_zero_variance(n):
    polygon = regular_polygon(n)
    assert side_variance(polygon) == pytest.approx(0.0, abs=1e-9)
    assert is_convex(polygon) is True


def test_concave_dart_is_not_convex(dart):
    assert is_convex(dart) is False


def test_collinear_vertices_do_not_break_convexity():
    with_midpoint = pts((0, 0), (50, 0), (100, 0), (100, 100), (0, 100))
    assert is_convex(with_midpoint) is True


# ── Validation ────────────────────────────────────────────────────────────────
def test_too_few_vertices():
    check = validate_polygon(pts((0, 0), (50, 0)))
    assert not check.valid
    assert check.error == "Need at least 3 vertices"
    assert check.reason is ValidationReason.TOO_FEW_VERTICES
    assert check.sides == 0


def test_empty_vertex_list_is_rejected():
    assert validate_polygon([]).reason is ValidationReason.TOO_FEW_VERTICES
    assert validate_polygon(None).reason is ValidationReason.TOO_FEW_VERTICES


def test_too_many_vertices():
    check = validate_polygon(regular_polygon(13, radius=300))
    assert check.error == "Too many vertices (max 12)"
    assert check.reason is ValidationReason.TOO_MANY_VERTICES


def test_near_duplicate_vertices_are_too_close():
    check = validate_polygon(pts((0, 0), (100, 0), (100, 5), (0, 100)))
    assert not check.valid
    assert check.error == "Vertices too close together"
    assert check.reason is ValidationReason.VERTICES_TOO_CLOSE


def test_ten_unit_square_fails_on_distance_before_area():
    check = validate_polygon(pts((0, 0), (10, 0), (10, 10), (0, 10)))
    assert check.reason is ValidationReason.VERTICES_TOO_CLOSE


def test_area_boundary_is_inclusive():
    triangle = pts((0, 0), (40, 0), (20, 5))
    assert polygon_area(triangle) == 100.0
    check = validate_polygon(triangle)
    assert check.valid
    assert check.sides == 3
    assert check.error == ""


def test_small_polygon_is_rejected():
    check = validate_polygon(pts((0, 0), (40, 0), (20, 4)))
    assert check.error == "Polygon too small"
    assert check.reason is ValidationReason.TOO_SMALL


def test_thresholds_are_configurable():
    triangle = pts((0, 0), (40, 0), (20, 5))
    assert not validate_polygon(triangle, min_area=150).valid
    assert not validate_polygon(triangle, max_vertices=2).valid


# ── Key derivation ────────────────────────────────────────────────────────────
def test_shift_key_wraps_to_three():
    assert polygon_shift_key(5) == 5
    assert polygon_shift_key(26) == 3
    assert polygon_shift_key(27) == 1


def test_multiply_key_is_always_coprime():
    for tenths in range(0, 200):
        assert polygon_multiply_key(tenths / 10) in VALID_MULTIPLY_KEYS


def test_multiply_key_from_variance(kite):
    assert polygon_multiply_key(0.0) == 1
    assert polygon_multiply_key(side_variance(kite)) == 3


# ── Coercion / analyzer ───────────────────────────────────────────────────────
def test_as_point_accepts_pairs_and_mappings():
    assert as_point((1, 2)) == Point(x=1, y=2)
    assert as_point({"x": 1, "y": 2}) == Point(x=1, y=2)


def test_analyzer_describes_regular_square():
    analysis = PolygonAnalyzer().analyze(pts((0, 0), (100, 0), (100, 100), (0, 100)))
    assert analysis.vertices == 4
    assert analysis.convex is True
    assert analysis.area == 10000.0
    assert analysis.average_side == 100.0
    assert analysis.shift_key == 4
    assert analysis.multiply_key == 1
    assert analysis.notes == [
        "Convex: adds a secondary diffusion transform.",
        "Regular shape: strong diffusion properties.",
        "4-gon shifts by 4 positions.",
    ]


def test_analyzer_flags_irregular_concave_shape(dart):
    analysis = PolygonAnalyzer().analyze(dart)
    assert analysis.multiply_key is None
    assert "Concave: no secondary transform." in analysis.notes
    assert "High irregularity: unpredictable but may reduce entropy." in analysis.notes


def test_analyzer_validate_uses_bound_thresholds():
    analyzer = PolygonAnalyzer(min_area=20000)
    assert analyzer.validate([(0, 0), (100, 0), (100, 100), (0, 100)]).reason is ValidationReason.TOO_SMALL
