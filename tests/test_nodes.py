"""Cipher nodes: letter transforms, key normalisation and polygon keys."""

import dataclasses
import math
import string

import pytest

from cipherdash.analyzers.geometry import VALID_MULTIPLY_KEYS
from cipherdash.core.models import NodeKind, ValidationReason
from cipherdash.core.nodes import (
    InvalidPolygonError,
    MultiplyNode,
    PolygonNode,
    ReverseNode,
    ShiftNode,
    UnknownNodeTypeError,
    create_node,
    normalize_multiply_key,
)

from conftest import regular_polygon

ALPHABET = string.ascii_uppercase


# ── Shift ─────────────────────────────────────────────────────────────────────
def test_shift_by_three():
    assert ShiftNode(3).apply("HELLO") == "KHOOR"


def test_shift_uppercases_letters_and_keeps_the_rest():
    assert ShiftNode(3).apply("hello, world!") == "KHOOR, ZRUOG!"


def test_shift_accepts_negative_and_large_keys():
    assert ShiftNode(-1).apply("A") == "Z"
    assert ShiftNode(29).apply("A") == "D"


def test_shift_additive_inverse():
    assert ShiftNode(23).apply(ShiftNode(3).apply("A")) == "A"


def test_shift_leaves_non_ascii_letters_alone():
    assert ShiftNode(1).apply("ÉA") == "ÉB"


def test_shift_set_key():
    node = ShiftNode()
    node.set_key(1)
    assert node.apply("A") == "B"
    assert node.describe() == "Shift by 1"


# ── Reverse ───────────────────────────────────────────────────────────────────
@pytest.mark.parametrize("text", ["", "A", "HELLO", "Hello, World!", "AB CD"])
def test_reverse_twice_is_identity(text):
    node = ReverseNode()
    assert node.apply(node.apply(text)) == text


def test_reverse_moves_punctuation_too():
    assert ReverseNode().apply("AB, C") == "C ,BA"


# ── Multiply ──────────────────────────────────────────────────────────────────
def test_multiply_by_five():
    assert MultiplyNode(5).apply("HELLO") == "JUDDS"


def test_multiply_is_a_bijection():
    for key in VALID_MULTIPLY_KEYS:
        assert sorted(MultiplyNode(key).apply(ALPHABET)) == list(ALPHABET)


def test_non_coprime_key_is_corrected():
    node = MultiplyNode(13)
    assert node.key != 13
    assert node.key in VALID_MULTIPLY_KEYS
    assert node.key == 3


def test_coprime_residue_is_kept():
    assert MultiplyNode(27).key == 1
    assert MultiplyNode(-1).key == 25


def test_set_key_normalises():
    node = MultiplyNode()
    node.set_key(26)
    assert node.key == 5
    assert math.gcd(node.key, 26) == 1


def test_normalize_multiply_key_always_coprime():
    for key in range(-60, 60):
        assert math.gcd(normalize_multiply_key(key), 26) == 1


# ── Polygon ───────────────────────────────────────────────────────────────────
def test_convex_polygon_applies_both_stages(kite):
    node = PolygonNode(kite)
    assert node.num_sides == 4
    assert node.convex is True
    assert node.key == 4
    assert node.multiply_key == 3
    assert node.apply("HELLO") == "HYTTC"


def test_concave_polygon_skips_multiply_stage(dart):
    node = PolygonNode(dart)
    assert node.convex is False
    assert node.multiply_key is None
    assert node.apply("HELLO") == ShiftNode(4).apply("HELLO") == "LIPPS"


def test_convex_and_concave_twins_diverge(kite, dart):
    convex, concave = PolygonNode(kite), PolygonNode(dart)
    assert convex.side_variance == pytest.approx(concave.side_variance)
    assert convex.side_variance > 0
    assert convex.multiply_key != 1
    assert convex.apply("ATTACKATDAWN") != concave.apply("ATTACKATDAWN")


def test_polygon_with_twenty_six_sides_shifts_by_three():
    node = PolygonNode(regular_polygon(26, radius=500))
    assert node.key == 3


def test_polygon_fields_are_frozen(kite):
    node = PolygonNode(kite)
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.key = 7
    assert isinstance(node.vertices, tuple)


def test_polygon_describe():
    node = PolygonNode(regular_polygon(5))
    assert node.describe() == "Polygon Cipher (5-gon, Convex, variance: 0.0)"
    assert str(node) == node.describe()


def test_polygon_describe_concave(dart):
    assert PolygonNode(dart).describe() == "Polygon Cipher (4-gon, Concave, variance: 6.6)"


def test_from_vertices_rejects_invalid_shapes():
    with pytest.raises(InvalidPolygonError) as info:
        PolygonNode.from_vertices([(0, 0), (10, 0), (10, 10), (0, 10)])
    assert info.value.validation.reason is ValidationReason.VERTICES_TOO_CLOSE
    assert str(info.value) == "Vertices too close together"


def test_from_vertices_can_skip_validation():
    node = PolygonNode.from_vertices([(0, 0), (10, 0), (10, 10), (0, 10)], validate=False)
    assert node.area == 100.0


def test_analyze_geometry_matches_node(kite):
    node = PolygonNode(kite)
    analysis = node.analyze_geometry()
    assert analysis.vertices == node.num_sides
    assert analysis.multiply_key == node.multiply_key
    assert analysis.area == pytest.approx(node.area)


# ── Factory ───────────────────────────────────────────────────────────────────
def test_create_node_defaults():
    assert create_node("shift").key == 3
    assert create_node(NodeKind.MULTIPLY).key == 5
    assert isinstance(create_node("REVERSE"), ReverseNode)


def test_create_node_with_key():
    assert create_node("shift", 7).key == 7
    assert create_node("multiply", 13).key == 3


def test_create_polygon_node(kite):
    node = create_node("polygon", vertices=kite)
    assert node.kind is NodeKind.POLYGON


def test_create_unknown_node():
    with pytest.raises(UnknownNodeTypeError):
        create_node("rot13")


def test_node_kinds():
    assert ShiftNode().kind is NodeKind.SHIFT
    assert ReverseNode().kind is NodeKind.REVERSE
    assert MultiplyNode().kind is NodeKind.MULTIPLY
