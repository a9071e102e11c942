"""
CipherDash Core Data Models
============================

Pydantic models for the geometry analyzer, the strength scorer and the
attack simulator. They are the plain-data results handed across the
core boundary: the console renderer, the report generators and any
other caller only ever see these models, never the live pipeline.

All models are serialisable to JSON via ``model_dump()``.

References:
    - Shannon, C. E. (1948). A Mathematical Theory of Communication.
      Bell System Technical Journal, 27(3), 379-423.
    - Sinkov, A. (1966). Elementary Cryptanalysis: A Mathematical
      Approach. Mathematical Association of America.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ===================================================================== #
#  Enumerations
# ===================================================================== #


class NodeKind(str, enum.Enum):
    """Tag of the closed set of cipher node variants."""

    SHIFT = "shift"
    REVERSE = "reverse"
    MULTIPLY = "multiply"
    POLYGON = "polygon"


class ValidationReason(str, enum.Enum):
    """Machine-checkable reason a vertex list was rejected."""

    TOO_FEW_VERTICES = "too_few_vertices"
    TOO_MANY_VERTICES = "too_many_vertices"
    VERTICES_TOO_CLOSE = "vertices_too_close"
    TOO_SMALL = "too_small"


# ===================================================================== #
#  Geometry Models
# ===================================================================== #


class Point(BaseModel):
    """Screen-space coordinate. Immutable; equality is positional."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class PolygonValidation(BaseModel):
    """Outcome of :func:`cipherdash.analyzers.geometry.validate_polygon`.

    Attributes:
        valid: Whether the vertex list may become a polygon node.
        error: Human-readable reason, empty when valid.
        sides: Vertex count when valid, 0 otherwise.
        reason: Machine-checkable rejection reason, ``None`` when valid.
    """

    valid: bool
    error: str = ""
    sides: int = 0
    reason: Optional[ValidationReason] = None


class GeometryAnalysis(BaseModel):
    """Geometric introspection of a vertex list.

    Attributes:
        vertices: Number of vertices.
        convex: Result of the cross-product convexity test.
        variance: Population standard deviation of the side lengths.
        area: Unsigned shoelace area.
        side_lengths: Cyclic edge lengths in vertex order.
        average_side: Mean side length (0.0 without sides).
        shift_key: Stage-one shift a polygon node would apply.
        multiply_key: Stage-two multiplier, ``None`` for concave shapes.
        notes: Plain-text remarks on how the shape affects the cipher.
    """

    vertices: int = 0
    convex: bool = False
    variance: float = 0.0
    area: float = 0.0
    side_lengths: list[float] = Field(default_factory=list)
    average_side: float = 0.0
    shift_key: int = 3
    multiply_key: Optional[int] = None
    notes: list[str] = Field(default_factory=list)


# ===================================================================== #
#  Scoring Models
# ===================================================================== #


class ScoreBreakdown(BaseModel):
    """Additive strength score and the contribution of every term.

    ``final`` is ``base + entropy + diffusion + key_space + penalties``
    clamped to ``[0, 100]``; ``penalties`` is zero or negative.

    Attributes:
        base: Starting credibility score.
        entropy: Bonus for the entropy gained by the transformation.
        diffusion: Bonus for the share of characters changed.
        key_space: Bonus for the pipeline's key space, in bits.
        penalties: Sum of all triggered penalties.
        final: Clamped total.
        reasons: One line per triggered penalty, in evaluation order.
    """

    base: float = 0.0
    entropy: float = 0.0
    diffusion: float = 0.0
    key_space: float = 0.0
    penalties: float = 0.0
    final: float = 0.0
    reasons: list[str] = Field(default_factory=list)


# ===================================================================== #
#  Attack Models
# ===================================================================== #


class AttackResult(BaseModel):
    """Outcome of one simulated attack.

    Attributes:
        name: Attack name ("Frequency Analysis", ...).
        penalty: Points the attack takes off; 0 when it fails.
        description: One-line human-readable explanation.
        details: Attack-specific figures (combinations, timings...).
    """

    name: str
    penalty: int = 0
    description: str = ""
    details: dict[str, Any] = Field(default_factory=dict)


class AttackReport(BaseModel):
    """Combined result of every simulated attack.

    Attributes:
        attacks: Individual attack results, in execution order.
        total_penalty: Sum of the attack penalties, capped.
        summary: One-line overview including the threat level.
        show_animation: ``True`` iff ``total_penalty > 0``; a signal for
            presentation layers, never read by the core.
    """

    attacks: list[AttackResult] = Field(default_factory=list)
    total_penalty: int = 0
    summary: str = ""
    show_animation: bool = False


# ===================================================================== #
#  Engine Models
# ===================================================================== #


class EvaluationReport(BaseModel):
    """Everything the engine learned about one plaintext + pipeline."""

    plaintext: str
    ciphertext: str
    pipeline: list[str] = Field(default_factory=list)
    breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)
    attacks: AttackReport = Field(default_factory=AttackReport)
    patterns: list[str] = Field(default_factory=list)
    threshold: float = 60.0
    dynamic_threshold: float = 15.0
    passed: bool = False
    feedback: str = ""
