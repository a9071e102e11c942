"""Engine facade: pipeline building, assessment and finding reports."""

import math

import pytest

from dashcore.config import DashConfig, GeometryConfig, GlobalConfig
from dashcore.models import RiskLevel, Severity
from cipherdash.core.engine import CipherDashEngine
from cipherdash.core.nodes import InvalidPolygonError, ReverseNode, ShiftNode
from cipherdash.core.pipeline import CipherPipeline
from cipherdash.parsers import NodeSpecError

KITE_SPEC = "polygon:0,0;60,80;140,0;60,-80"


@pytest.fixture
def engine(quiet_config):
    return CipherDashEngine(quiet_config)


def titles(result):
    return [f.title for f in result.findings]


# ── Pipelines ─────────────────────────────────────────────────────────────────
def test_build_pipeline_mixes_specs_and_nodes(engine):
    pipeline = engine.build_pipeline(["shift:3", ReverseNode()])
    assert pipeline.describe() == ["1. Shift by 3", "2. Reverse"]
    assert engine.encrypt("HELLO", pipeline) == "ROOHK"


def test_encrypt_from_specs(engine):
    assert engine.encrypt("HELLO", [KITE_SPEC]) == "HYTTC"


def test_build_pipeline_rejects_bad_spec(engine):
    with pytest.raises(NodeSpecError):
        engine.build_pipeline(["bogus"])


def test_configured_vertex_ceiling_applies():
    config = DashConfig(
        global_settings=GlobalConfig(log_level="WARNING"),
        geometry=GeometryConfig(max_vertices=3),
    )
    with pytest.raises(InvalidPolygonError):
        CipherDashEngine(config).build_pipeline([KITE_SPEC])


# ── Assess ────────────────────────────────────────────────────────────────────
def test_assess_simple_shift(engine):
    report = engine.assess("HELLO", ["shift:3"])
    assert report.ciphertext == "KHOOR"
    assert report.breakdown.final == pytest.approx(72.0 + math.log2(26))
    assert report.passed is True
    assert report.threshold == 60.0
    assert report.dynamic_threshold == 15.0
    assert report.patterns == []


def test_assess_custom_threshold(engine):
    report = engine.assess("HELLO", CipherPipeline([ShiftNode(3)]), threshold=80)
    assert report.passed is False


# ── Evaluate ──────────────────────────────────────────────────────────────────
def test_evaluate_reports_score_and_successful_attacks(engine):
    result = engine.evaluate("HELLO", ["shift:3"])
    assert titles(result) == [
        "Cipher Strength Score",
        "Attack Succeeded: Frequency Analysis",
        "Attack Succeeded: Brute Force Estimation",
    ]
    assert result.findings[2].severity is Severity.HIGH
    assert result.findings[1].severity is Severity.MEDIUM
    assert result.risk.score == pytest.approx(100 - 72.0 - math.log2(26))
    assert result.summary.startswith("Score 76.7/100 (PASS at 60).")
    assert result.end_time is not None
    assert result.metadata["ciphertext"] == "KHOOR"


def test_evaluate_empty_pipeline_is_critical(engine):
    result = engine.evaluate("HELLO", [])
    penalties = [f for f in result.findings if f.title == "Scoring Penalty"]
    assert len(penalties) == 3
    assert [f.severity for f in penalties] == [Severity.MEDIUM, Severity.LOW, Severity.HIGH]
    assert result.risk.score == 100.0
    assert result.risk.level is RiskLevel.CRITICAL
    assert result.metadata["ciphertext"] == "HELLO"
    assert "FAIL" in result.summary


def test_evaluate_reports_pattern_weakness(engine):
    result = engine.evaluate("ABAB", [])
    assert "Pattern Weakness" in titles(result)


def test_evaluate_empty_plaintext(engine):
    result = engine.evaluate("", ["shift:3"])
    assert result.target == "<empty>"
    assert result.metadata["breakdown"]["diffusion"] == 0.0


def test_evaluate_invalid_spec_becomes_finding(engine):
    result = engine.evaluate("HELLO", ["bogus"])
    assert titles(result) == ["Invalid Pipeline"]
    assert result.findings[0].severity is Severity.HIGH
    assert result.summary.startswith("Error: invalid pipeline")
    assert result.risk is None


def test_evaluate_invalid_polygon_becomes_finding(engine):
    result = engine.evaluate("HELLO", ["polygon:0,0;10,0;10,10;0,10"])
    assert titles(result) == ["Invalid Pipeline"]
    assert "Vertices too close together" in result.findings[0].description


# ── Polygon analysis ──────────────────────────────────────────────────────────
def test_analyze_polygon_accepts_kite(engine):
    result = engine.analyze_polygon("0,0; 60,80; 140,0; 60,-80")
    assert titles(result) == ["Polygon Accepted", "Irregular Shape"]
    assert result.metadata["analysis"]["multiply_key"] == 3
    assert result.metadata["validation"]["valid"] is True
    assert result.summary.startswith("Valid 4-gon (convex")


def test_analyze_polygon_accepts_point_lists(engine):
    result = engine.analyze_polygon([(0, 0), (100, 0), (100, 100), (0, 100)])
    assert titles(result) == ["Polygon Accepted"]
    assert result.target == "<vertex list>"


def test_analyze_polygon_rejects_small_square(engine):
    result = engine.analyze_polygon("0,0;10,0;10,10;0,10")
    assert titles(result) == ["Invalid Polygon"]
    assert result.findings[0].description == "Vertices too close together"
    assert result.findings[0].severity is Severity.MEDIUM


def test_analyze_polygon_bad_vertex_text(engine):
    result = engine.analyze_polygon("0,0;abc")
    assert titles(result) == ["Invalid Vertex List"]
    assert result.findings[0].severity is Severity.HIGH
