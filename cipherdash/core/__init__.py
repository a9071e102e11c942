"""
CipherDash Core Module
=======================

Data models, cipher nodes, the pipeline and the engine facade of the
CipherDash toolkit. Only the models are re-exported here; import the
nodes, the pipeline and the engine from their own modules.
"""

from cipherdash.core.models import (
    AttackReport,
    AttackResult,
    EvaluationReport,
    GeometryAnalysis,
    NodeKind,
    Point,
    PolygonValidation,
    ScoreBreakdown,
    ValidationReason,
)

__all__ = [
    "AttackReport",
    "AttackResult",
    "EvaluationReport",
    "GeometryAnalysis",
    "NodeKind",
    "Point",
    "PolygonValidation",
    "ScoreBreakdown",
    "ValidationReason",
]
