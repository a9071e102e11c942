"""
CipherDash Parsers
===================

Input parsing utilities for the CipherDash toolkit: textual node
specifications and vertex lists.
"""

from cipherdash.parsers.node_parser import (
    NodeSpecError,
    parse_node_spec,
    parse_node_specs,
    parse_vertex,
    parse_vertices,
)

__all__ = [
    "NodeSpecError",
    "parse_node_spec",
    "parse_node_specs",
    "parse_vertex",
    "parse_vertices",
]
