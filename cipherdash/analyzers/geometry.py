"""
Geometry Analyzer
==================

Pure functions over an ordered vertex list, used to validate a
hand-drawn polygon and to derive the key material of a polygon cipher
node.

Conventions:
    - The vertex list is cyclic: the edge after the last vertex closes
      back to the first.
    - Degenerate input (fewer than 3 vertices) never raises. Area and
      variance fall back to 0.0 and convexity to ``False``, because the
      scorer and the polygon node rely on receiving plain values.
    - Self-intersection is not detected. Validation only rejects
      near-duplicate vertices through the minimum pairwise distance.

References:
    - Braden, B. (1986). The Surveyor's Area Formula. The College
      Mathematics Journal, 17(4), 326-337.
    - O'Rourke, J. (1998). Computational Geometry in C, 2nd ed.
      Cambridge University Press. Section 1.3 (convexity by turn sign).
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Sequence

from dashcore.math_utils import population_std
from cipherdash.core.models import (
    GeometryAnalysis,
    Point,
    PolygonValidation,
    ValidationReason,
)

# Multipliers coprime to 26; the affine map x -> k*x mod 26 is a bijection
# exactly for these k.
VALID_MULTIPLY_KEYS: tuple[int, ...] = (1, 3, 5, 7, 9, 11, 15, 17, 19, 21, 23, 25)


# ===================================================================== #
#  Coercion
# ===================================================================== #


def as_point(raw: Any) -> Point:
    """Coerce a ``Point``, ``(x, y)`` pair or ``{"x":..,"y":..}`` mapping."""
    if isinstance(raw, Point):
        return raw
    if isinstance(raw, dict):
        return Point(x=raw["x"], y=raw["y"])
    if hasattr(raw, "x") and hasattr(raw, "y"):
        return Point(x=raw.x, y=raw.y)
    x, y = raw
    return Point(x=x, y=y)


def as_points(raw: Iterable[Any]) -> tuple[Point, ...]:
    """Coerce every element of *raw* with :func:`as_point`."""
    return tuple(as_point(p) for p in raw)


# ===================================================================== #
#  Primitive measures
# ===================================================================== #


def distance(p1: Point, p2: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def polygon_area(vertices: Sequence[Point]) -> float:
    """Unsigned polygon area by the shoelace formula.

    .. math::

        A = \\frac{1}{2} \\left| \\sum_{i} x_i y_{i+1} - x_{i+1} y_i \\right|

    Returns 0.0 for fewer than 3 vertices.
    """
    n = len(vertices)
    if n < 3:
        return 0.0

    twice_area = 0.0
    for i in range(n):
        j = (i + 1) % n
        twice_area += vertices[i].x * vertices[j].y
        twice_area -= vertices[j].x * vertices[i].y
    return abs(twice_area / 2.0)


def is_convex(vertices: Sequence[Point]) -> bool:
    """Cross-product convexity test.

    For every cyclic triple ``(p1, p2, p3)`` the z-component of
    ``(p2 - p1) x (p3 - p2)`` is computed. The polygon is convex iff all
    non-zero crosses share one sign; collinear triples are ignored.
    Fewer than 3 vertices is never convex.
    """
    n = len(vertices)
    if n < 3:
        return False

    sign: bool | None = None
    for i in range(n):
        p1 = vertices[i]
        p2 = vertices[(i + 1) % n]
        p3 = vertices[(i + 2) % n]
        cross = (p2.x - p1.x) * (p3.y - p2.y) - (p2.y - p1.y) * (p3.x - p2.x)

        if cross != 0:
            if sign is None:
                sign = cross > 0
            elif (cross > 0) != sign:
                return False
    return True


def side_lengths(vertices: Sequence[Point]) -> list[float]:
    """Length of each cyclic edge, in vertex order."""
    n = len(vertices)
    return [distance(vertices[i], vertices[(i + 1) % n]) for i in range(n)]


def side_variance(vertices: Sequence[Point]) -> float:
    """Irregularity measure: population std-dev of the side lengths.

    0.0 for a perfectly regular polygon and for empty input. Despite the
    name this is a standard deviation, not a variance.
    """
    return population_std(side_lengths(vertices))


# ===================================================================== #
#  Validation
# ===================================================================== #


def validate_polygon(
    vertices: Sequence[Point] | None,
    *,
    min_vertices: int = 3,
    max_vertices: int = 12,
    min_distance: float = 15.0,
    min_area: float = 100.0,
) -> PolygonValidation:
    """Check whether a vertex list may be frozen into a polygon node.

    Ordered checks, first failure wins:

    1. fewer than *min_vertices* vertices;
    2. more than *max_vertices* vertices;
    3. any pair of vertices closer than *min_distance* (all pairs);
    4. shoelace area below *min_area*.

    Failures are returned, never raised.
    """
    vertices = vertices or ()
    count = len(vertices)

    if count < min_vertices:
        return PolygonValidation(
            valid=False,
            error=f"Need at least {min_vertices} vertices",
            reason=ValidationReason.TOO_FEW_VERTICES,
        )

    if count > max_vertices:
        return PolygonValidation(
            valid=False,
            error=f"Too many vertices (max {max_vertices})",
            reason=ValidationReason.TOO_MANY_VERTICES,
        )

    for i in range(count):
        for j in range(i + 1, count):
            if distance(vertices[i], vertices[j]) < min_distance:
                return PolygonValidation(
                    valid=False,
                    error="Vertices too close together",
                    reason=ValidationReason.VERTICES_TOO_CLOSE,
                )

    if polygon_area(vertices) < min_area:
        return PolygonValidation(
            valid=False,
            error="Polygon too small",
            reason=ValidationReason.TOO_SMALL,
        )

    return PolygonValidation(valid=True, error="", sides=count)


# ===================================================================== #
#  Key derivation
# ===================================================================== #


def polygon_shift_key(num_sides: int) -> int:
    """Stage-one shift of a polygon node: sides mod 26, or 3 when that is 0."""
    return num_sides % 26 or 3


def polygon_multiply_key(variance: float) -> int:
    """Stage-two multiplier chosen by the polygon's side irregularity."""
    return VALID_MULTIPLY_KEYS[math.floor(variance * 2) % len(VALID_MULTIPLY_KEYS)]


# ===================================================================== #
#  Analyzer
# ===================================================================== #


class PolygonAnalyzer:
    """Validates and describes hand-drawn polygons.

    Binds the validation thresholds once (usually from
    :class:`dashcore.config.GeometryConfig`) and produces
    :class:`GeometryAnalysis` introspection models.

    Usage::

        analyzer = PolygonAnalyzer()
        check = analyzer.validate(vertices)
        if check.valid:
            info = analyzer.analyze(vertices)
    """

    # Variance bands used for the plain-text shape notes
    HIGH_IRREGULARITY: float = 5.0
    REGULAR_SHAPE: float = 1.0

    def __init__(
        self,
        min_vertices: int = 3,
        max_vertices: int = 12,
        min_distance: float = 15.0,
        min_area: float = 100.0,
    ) -> None:
        self.min_vertices = min_vertices
        self.max_vertices = max_vertices
        self.min_distance = min_distance
        self.min_area = min_area

    def validate(self, vertices: Iterable[Any]) -> PolygonValidation:
        """Run :func:`validate_polygon` with this analyzer's thresholds."""
        return validate_polygon(
            as_points(vertices),
            min_vertices=self.min_vertices,
            max_vertices=self.max_vertices,
            min_distance=self.min_distance,
            min_area=self.min_area,
        )

    def analyze(self, vertices: Iterable[Any]) -> GeometryAnalysis:
        """Compute the full geometry introspection for *vertices*.

        Works on any vertex list, valid or not; degenerate input simply
        yields zeros.
        """
        points = as_points(vertices)
        lengths = side_lengths(points)
        convex = is_convex(points)
        variance = side_variance(points)
        shift_key = polygon_shift_key(len(points))
        multiply_key = polygon_multiply_key(variance) if convex else None

        return GeometryAnalysis(
            vertices=len(points),
            convex=convex,
            variance=variance,
            area=polygon_area(points),
            side_lengths=lengths,
            average_side=sum(lengths) / len(lengths) if lengths else 0.0,
            shift_key=shift_key,
            multiply_key=multiply_key,
            notes=self._shape_notes(len(points), convex, variance, shift_key),
        )

    def _shape_notes(
        self, sides: int, convex: bool, variance: float, shift_key: int
    ) -> list[str]:
        notes: list[str] = []
        if convex:
            notes.append("Convex: adds a secondary diffusion transform.")
        else:
            notes.append("Concave: no secondary transform.")

        if variance > self.HIGH_IRREGULARITY:
            notes.append("High irregularity: unpredictable but may reduce entropy.")
        elif variance < self.REGULAR_SHAPE:
            notes.append("Regular shape: strong diffusion properties.")

        notes.append(f"{sides}-gon shifts by {shift_key} positions.")
        return notes
