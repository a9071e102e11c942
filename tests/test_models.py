"""Shared result models and the report generator."""

import json

from dashcore.config import get_config
from dashcore.models import Finding, Risk, RiskLevel, ScanResult, Severity
from cipherdash.output import CipherDashReportGenerator


def make_result():
    result = ScanResult(tool_name="cipherdash", target="HELLO <b>")
    result.add_finding(Finding(severity=Severity.LOW, title="Pattern Weakness", description="AB"))
    result.add_finding(Finding(
        severity=Severity.HIGH,
        title="Attack Succeeded: Brute Force Estimation",
        description="Brute force would take ~0ms",
        evidence={"combinations": 1},
    ))
    result.risk = Risk(score=42.0)
    return result


def test_risk_level_is_derived():
    assert Risk(score=95).level is RiskLevel.CRITICAL
    assert Risk(score=42).level is RiskLevel.MEDIUM
    assert Risk(score=5).level is RiskLevel.NEGLIGIBLE


def test_evidence_dicts_become_json():
    finding = make_result().findings[1]
    assert json.loads(finding.evidence) == {"combinations": 1}


def test_severity_helpers():
    result = make_result()
    assert result.highest_severity is Severity.HIGH
    assert result.severity_counts["LOW"] == 1
    assert ScanResult(tool_name="x", target="y").highest_severity is None


def test_finalize_default_summary():
    result = make_result().finalize()
    assert result.end_time is not None
    assert result.duration_seconds >= 0
    assert result.summary.startswith("Analysis complete. Findings: 2")


def test_json_report(tmp_path):
    reporter = CipherDashReportGenerator(version="1.0.0")
    path = reporter.generate_json(make_result().finalize("done"), tmp_path / "out" / "r.json")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["summary"]["total_findings"] == 2
    assert data["summary"]["risk"]["level"] == "MEDIUM"
    assert data["summary"]["description"] == "done"


def test_html_report_escapes_target():
    html = CipherDashReportGenerator(version="1.0.0").render_html(make_result().finalize())
    assert "HELLO &lt;b&gt;" in html
    assert "severity-high" in html


def test_get_config_caches(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[geometry]\nmax_vertices = 5\n")
    loaded = get_config(path)
    assert loaded.geometry.max_vertices == 5
    assert get_config() is loaded
