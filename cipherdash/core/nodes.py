"""
Cipher Nodes
=============

The closed set of text transformations a pipeline is built from:

    ========  =========================================  ===============
    Kind      Transformation on letter index x            Key space
    ========  =========================================  ===============
    Shift     x -> (x + k) mod 26                         26
    Reverse   whole string reversed                       2
    Multiply  x -> (k * x) mod 26, gcd(k, 26) = 1         12
    Polygon   shift by sides, then multiply if convex     2 (default)
    ========  =========================================  ===============

Only the ASCII letters are transformed (and emitted uppercase); every
other character passes through untouched. Reverse is the exception: it
reorders all characters, punctuation and spaces included.

References:
    - Sinkov, A. (1966). Elementary Cryptanalysis: A Mathematical
      Approach, ch. 2 (additive and multiplicative ciphers).
"""

from __future__ import annotations

import string
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterable, Optional

from dashcore.logger import DashLogger
from cipherdash.analyzers.geometry import (
    VALID_MULTIPLY_KEYS,
    PolygonAnalyzer,
    as_points,
    is_convex,
    polygon_area,
    polygon_multiply_key,
    polygon_shift_key,
    side_lengths,
    side_variance,
    validate_polygon,
)
from cipherdash.core.models import (
    GeometryAnalysis,
    NodeKind,
    Point,
    PolygonValidation,
)

logger = DashLogger("cipherdash.nodes", log_level="WARNING")

ALPHABET_SIZE: int = 26

DEFAULT_SHIFT_KEY: int = 3
DEFAULT_MULTIPLY_KEY: int = 5


class InvalidPolygonError(ValueError):
    """Raised by :meth:`PolygonNode.from_vertices` for a rejected shape.

    The failed :class:`PolygonValidation` is kept on ``validation``.
    """

    def __init__(self, validation: PolygonValidation) -> None:
        super().__init__(validation.error)
        self.validation = validation


class UnknownNodeTypeError(ValueError):
    """Raised by :func:`create_node` for a tag outside :class:`NodeKind`."""


# ===================================================================== #
#  Letter-level helpers
# ===================================================================== #


def _map_letters(text: str, transform) -> str:
    """Apply *transform* to the 0-25 index of every ASCII letter.

    Letters are case-folded before the lookup and re-emitted uppercase.
    """
    out: list[str] = []
    for ch in text:
        if ch in string.ascii_letters:
            index = ord(ch.upper()) - ord("A")
            out.append(chr(transform(index) % ALPHABET_SIZE + ord("A")))
        else:
            out.append(ch)
    return "".join(out)


def shift_text(text: str, key: int) -> str:
    """Caesar shift; *key* may be any integer."""
    offset = key % ALPHABET_SIZE
    return _map_letters(text, lambda x: x + offset)


def multiply_text(text: str, key: int) -> str:
    """Multiplicative cipher ``x -> key * x mod 26``."""
    return _map_letters(text, lambda x: key * x)


def normalize_multiply_key(key: int) -> int:
    """Map any integer onto a multiplier coprime to 26.

    A key whose residue mod 26 is already coprime becomes that residue.
    Any other key is replaced by the deterministic fallback
    ``VALID_MULTIPLY_KEYS[key mod 12]``; the substitution is logged, not
    raised. Callers wanting strict keys must check coprimality first.
    """
    residue = key % ALPHABET_SIZE
    if residue in VALID_MULTIPLY_KEYS:
        return residue

    fallback = VALID_MULTIPLY_KEYS[key % len(VALID_MULTIPLY_KEYS)]
    logger.warning(
        "Multiply key %d is not coprime to 26; using %d instead.",
        key,
        fallback,
        requested=key,
        effective=fallback,
    )
    return fallback


# ===================================================================== #
#  Node variants
# ===================================================================== #


class CipherNode(ABC):
    """Base of the closed node hierarchy.

    Subclasses set ``kind`` and implement :meth:`apply` (a pure function
    of the input text) and :meth:`describe` (display only, never parsed
    back into a node).
    """

    __slots__ = ()

    kind: ClassVar[NodeKind]
    name: ClassVar[str]

    @abstractmethod
    def apply(self, text: str) -> str:
        """Transform *text*; non-letters pass through."""

    @abstractmethod
    def describe(self) -> str:
        """Human-readable summary of the node's configuration."""

    def __str__(self) -> str:
        return self.describe()


@dataclass(slots=True)
class ShiftNode(CipherNode):
    """Caesar shift by ``key``, normalised mod 26 when applied."""

    kind: ClassVar[NodeKind] = NodeKind.SHIFT
    name: ClassVar[str] = "Shift"

    key: int = DEFAULT_SHIFT_KEY

    def set_key(self, key: int) -> None:
        self.key = key

    def apply(self, text: str) -> str:
        return shift_text(text, self.key)

    def describe(self) -> str:
        return f"{self.name} by {self.key}"


@dataclass(slots=True)
class ReverseNode(CipherNode):
    """Reverses the full character sequence."""

    kind: ClassVar[NodeKind] = NodeKind.REVERSE
    name: ClassVar[str] = "Reverse"

    def apply(self, text: str) -> str:
        return text[::-1]

    def describe(self) -> str:
        return self.name


@dataclass(slots=True)
class MultiplyNode(CipherNode):
    """Multiplicative cipher; the stored key is always coprime to 26.

    Non-coprime keys are corrected through
    :func:`normalize_multiply_key` both at construction and in
    :meth:`set_key`.
    """

    kind: ClassVar[NodeKind] = NodeKind.MULTIPLY
    name: ClassVar[str] = "Multiply"

    key: int = DEFAULT_MULTIPLY_KEY

    def __post_init__(self) -> None:
        self.key = normalize_multiply_key(self.key)

    def set_key(self, key: int) -> None:
        self.key = normalize_multiply_key(key)

    def apply(self, text: str) -> str:
        return multiply_text(text, self.key)

    def describe(self) -> str:
        return f"{self.name} by {self.key}"


@dataclass(frozen=True, slots=True)
class PolygonNode(CipherNode):
    """Two-stage cipher keyed by the geometry of a drawn polygon.

    Stage one shifts by ``key`` (sides mod 26, or 3). Stage two, for
    convex shapes only, multiplies by ``multiply_key``, picked from the
    coprime set by the side-length irregularity. Every derived field is
    computed once here; a redrawn shape is a new node.
    """

    kind: ClassVar[NodeKind] = NodeKind.POLYGON
    name: ClassVar[str] = "Polygon Cipher"

    vertices: tuple[Point, ...]
    num_sides: int = field(init=False)
    convex: bool = field(init=False)
    side_lengths: tuple[float, ...] = field(init=False)
    side_variance: float = field(init=False)
    area: float = field(init=False)
    key: int = field(init=False)
    multiply_key: Optional[int] = field(init=False)

    def __post_init__(self) -> None:
        points = as_points(self.vertices)
        variance = side_variance(points)
        convex = is_convex(points)

        object.__setattr__(self, "vertices", points)
        object.__setattr__(self, "num_sides", len(points))
        object.__setattr__(self, "convex", convex)
        object.__setattr__(self, "side_lengths", tuple(side_lengths(points)))
        object.__setattr__(self, "side_variance", variance)
        object.__setattr__(self, "area", polygon_area(points))
        object.__setattr__(self, "key", polygon_shift_key(len(points)))
        object.__setattr__(
            self, "multiply_key", polygon_multiply_key(variance) if convex else None
        )

    @classmethod
    def from_vertices(
        cls,
        vertices: Iterable[Any],
        *,
        validate: bool = True,
        analyzer: PolygonAnalyzer | None = None,
    ) -> PolygonNode:
        """Build a node, optionally rejecting shapes that fail validation.

        Raises:
            InvalidPolygonError: If *validate* is set and the vertex list
                fails :func:`validate_polygon`.
        """
        points = as_points(vertices)
        if validate:
            check = analyzer.validate(points) if analyzer else validate_polygon(points)
            if not check.valid:
                raise InvalidPolygonError(check)
        return cls(points)

    def apply(self, text: str) -> str:
        result = shift_text(text, self.key)
        if self.multiply_key is not None:
            result = multiply_text(result, self.multiply_key)
        return result

    def describe(self) -> str:
        shape = "Convex" if self.convex else "Concave"
        return f"{self.name} ({self.num_sides}-gon, {shape}, variance: {self.side_variance:.1f})"

    def analyze_geometry(self) -> GeometryAnalysis:
        """Introspection model of the frozen shape."""
        return PolygonAnalyzer().analyze(self.vertices)


# ===================================================================== #
#  Factory
# ===================================================================== #


def create_node(kind: NodeKind | str, key: Optional[int] = None, **kwargs: Any) -> CipherNode:
    """Build a node from its tag.

    Shift defaults to key 3 and Multiply to key 5 when *key* is ``None``.
    Polygon nodes need ``vertices=`` and are validated.

    Raises:
        UnknownNodeTypeError: If *kind* is not a :class:`NodeKind`.
        InvalidPolygonError: If polygon vertices fail validation.
    """
    try:
        tag = NodeKind(kind.lower() if isinstance(kind, str) else kind)
    except ValueError as exc:
        raise UnknownNodeTypeError(f"Unknown node type: {kind}") from exc

    if tag is NodeKind.SHIFT:
        return ShiftNode(DEFAULT_SHIFT_KEY if key is None else key)
    if tag is NodeKind.REVERSE:
        return ReverseNode()
    if tag is NodeKind.MULTIPLY:
        return MultiplyNode(DEFAULT_MULTIPLY_KEY if key is None else key)
    return PolygonNode.from_vertices(kwargs.get("vertices", ()), analyzer=kwargs.get("analyzer"))
