"""
Node Specification Parser
==========================

Turns the textual node and vertex notations used on the command line
into cipher nodes and point lists.

Supported formats:
    - Shift:    ``shift`` or ``shift:KEY``       e.g. ``shift:-3``
    - Reverse:  ``reverse``
    - Multiply: ``multiply`` or ``multiply:KEY`` e.g. ``multiply:7``
    - Polygon:  ``polygon:X,Y;X,Y;X,Y[;...]``    e.g. ``polygon:0,0;40,0;20,30``

Vertex lists are ``X,Y`` tokens separated by ``;`` or whitespace
(``"0, 0; 40, 0"`` and ``"0,0 40,0"`` are both accepted);
coordinates may be integers or decimals. Kind names are
case-insensitive.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from cipherdash.analyzers.geometry import PolygonAnalyzer
from cipherdash.core.models import NodeKind, Point
from cipherdash.core.nodes import CipherNode, UnknownNodeTypeError, create_node


class NodeSpecError(ValueError):
    """Raised for a node or vertex specification that cannot be parsed."""


# ===================================================================== #
#  Patterns
# ===================================================================== #

_NUMBER = r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)"

_VERTEX_PATTERN = re.compile(rf"^\s*({_NUMBER})\s*,\s*({_NUMBER})\s*$")
# ";" always separates; whitespace only when it does not touch a comma
_VERTEX_SEPARATOR = re.compile(r"\s*;\s*|(?<![,\s])\s+(?![,\s])")
_KEY_PATTERN = re.compile(r"^[-+]?\d+$")


# ===================================================================== #
#  Vertices
# ===================================================================== #


def parse_vertex(token: str) -> Point:
    """Parse a single ``X,Y`` token.

    Raises:
        NodeSpecError: If *token* is not two comma-separated numbers.
    """
    match = _VERTEX_PATTERN.match(token)
    if not match:
        raise NodeSpecError(f"Invalid vertex '{token}': expected X,Y")
    return Point(x=float(match.group(1)), y=float(match.group(2)))


def parse_vertices(text: str | Iterable[str]) -> list[Point]:
    """Parse a vertex list.

    *text* is either one string (``"0,0; 40,0; 20,30"``) or an iterable
    of strings, each holding one or more tokens.

    Raises:
        NodeSpecError: On an empty list or a malformed token.
    """
    chunks = [text] if isinstance(text, str) else list(text)
    tokens = [
        token
        for chunk in chunks
        for token in _VERTEX_SEPARATOR.split(chunk.strip())
        if token
    ]
    if not tokens:
        raise NodeSpecError("No vertices given")
    return [parse_vertex(token) for token in tokens]


# ===================================================================== #
#  Nodes
# ===================================================================== #


def parse_node_spec(spec: str, analyzer: Optional[PolygonAnalyzer] = None) -> CipherNode:
    """Build a :class:`CipherNode` from its textual specification.

    Args:
        spec: ``kind[:argument]`` as described in the module docstring.
        analyzer: Validation thresholds for polygon nodes; the defaults
            are used when omitted.

    Raises:
        NodeSpecError: For an unknown kind, a malformed key or vertex
            list, or an argument on ``reverse``.
        InvalidPolygonError: If a polygon's vertices fail validation.
    """
    kind_text, _, argument = spec.strip().partition(":")
    kind_text = kind_text.strip().lower()
    argument = argument.strip()

    try:
        kind = NodeKind(kind_text)
    except ValueError:
        choices = ", ".join(k.value for k in NodeKind)
        raise NodeSpecError(f"Unknown node type '{kind_text}' (expected one of: {choices})") from None

    if kind is NodeKind.REVERSE:
        if argument:
            raise NodeSpecError("'reverse' takes no argument")
        return create_node(kind)

    if kind is NodeKind.POLYGON:
        if not argument:
            raise NodeSpecError("'polygon' needs a vertex list, e.g. polygon:0,0;40,0;20,30")
        return create_node(kind, vertices=parse_vertices(argument), analyzer=analyzer)

    if not argument:
        return create_node(kind)
    if not _KEY_PATTERN.match(argument):
        raise NodeSpecError(f"Invalid key '{argument}' for '{kind.value}': expected an integer")
    try:
        return create_node(kind, int(argument))
    except UnknownNodeTypeError as exc:
        raise NodeSpecError(str(exc)) from exc


def parse_node_specs(
    specs: Iterable[str], analyzer: Optional[PolygonAnalyzer] = None
) -> list[CipherNode]:
    """Parse every spec in *specs*, preserving order."""
    return [parse_node_spec(spec, analyzer) for spec in specs]
