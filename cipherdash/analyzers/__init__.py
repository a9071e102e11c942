"""
CipherDash Analyzers
=====================

Geometry analysis, strength scoring and attack simulation for the
CipherDash toolkit. Each analyzer is independent and only reads the
pipeline it is handed.
"""

from cipherdash.analyzers.geometry import PolygonAnalyzer
from cipherdash.analyzers.scoring import StrengthScorer
from cipherdash.analyzers.attacks import AttackSimulator

__all__ = [
    "PolygonAnalyzer",
    "StrengthScorer",
    "AttackSimulator",
]
