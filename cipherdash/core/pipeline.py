"""
Cipher Pipeline
================

An ordered, mutable chain of cipher nodes. Insertion order is
application order and the chain is never reordered or simplified:
``[Shift 3, Reverse]`` and ``[Reverse, Shift 3]`` are different
ciphers even where their outputs happen to coincide.

The pipeline only exposes counts; per-level budgets on nodes or
vertices are the caller's policy.
"""

from __future__ import annotations

from typing import Iterator

from dashcore.logger import DashLogger
from cipherdash.core.models import NodeKind
from cipherdash.core.nodes import CipherNode, PolygonNode

logger = DashLogger("cipherdash.pipeline", log_level="WARNING")


class PipelineIndexError(IndexError):
    """Raised when removing a node at an index outside the pipeline."""


class CipherPipeline:
    """Left-to-right composition of :class:`CipherNode` objects.

    Usage::

        pipeline = CipherPipeline()
        pipeline.add_node(ShiftNode(3))
        pipeline.add_node(ReverseNode())
        pipeline.encrypt("HELLO")      # 'ROOHK'
        pipeline.describe()            # ['1. Shift by 3', '2. Reverse']
    """

    def __init__(self, nodes: list[CipherNode] | None = None) -> None:
        self._nodes: list[CipherNode] = []
        for node in nodes or []:
            self.add_node(node)

    # ------------------------------------------------------------------ #
    #  Mutation
    # ------------------------------------------------------------------ #

    def add_node(self, node: CipherNode) -> None:
        """Append *node*; it is applied after every node already present."""
        if not isinstance(node, CipherNode):
            raise TypeError(f"Expected a CipherNode, got {type(node).__name__}")
        self._nodes.append(node)
        logger.debug("Added node %d: %s", len(self._nodes), node.describe())

    def remove_node(self, index: int) -> CipherNode:
        """Remove and return the node at *index* (0-based).

        Raises:
            PipelineIndexError: If *index* is not in ``[0, length())``.
                Negative indices are rejected rather than counted from
                the end.
        """
        if not 0 <= index < len(self._nodes):
            raise PipelineIndexError(
                f"Node index {index} out of range for pipeline of length {len(self._nodes)}"
            )
        node = self._nodes.pop(index)
        logger.debug("Removed node %d: %s", index + 1, node.describe())
        return node

    def clear(self) -> None:
        """Drop every node."""
        self._nodes = []

    # ------------------------------------------------------------------ #
    #  Transformation
    # ------------------------------------------------------------------ #

    def encrypt(self, text: str) -> str:
        """Apply every node in insertion order; identity when empty."""
        result = text
        for node in self._nodes:
            result = node.apply(result)
        return result

    # ------------------------------------------------------------------ #
    #  Introspection
    # ------------------------------------------------------------------ #

    @property
    def nodes(self) -> tuple[CipherNode, ...]:
        """Read-only snapshot of the nodes, in application order."""
        return tuple(self._nodes)

    def describe(self) -> list[str]:
        """One ``"N. description"`` line per node, 1-indexed."""
        return [f"{i}. {node.describe()}" for i, node in enumerate(self._nodes, start=1)]

    def length(self) -> int:
        return len(self._nodes)

    def is_empty(self) -> bool:
        return not self._nodes

    def polygon_count(self) -> int:
        """Number of polygon nodes."""
        return sum(1 for node in self._nodes if node.kind is NodeKind.POLYGON)

    def vertex_count(self) -> int:
        """Total vertices frozen into the polygon nodes."""
        return sum(
            node.num_sides for node in self._nodes if isinstance(node, PolygonNode)
        )

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[CipherNode]:
        return iter(tuple(self._nodes))

    def __getitem__(self, index: int) -> CipherNode:
        return self._nodes[index]

    def __repr__(self) -> str:
        inner = ", ".join(node.describe() for node in self._nodes)
        return f"CipherPipeline([{inner}])"
