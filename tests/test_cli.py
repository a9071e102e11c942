"""Command-line interface."""

import json

import pytest
from click.testing import CliRunner

from cipherdash import __version__
from cipherdash.cli import cli


@pytest.fixture
def run(quiet_config_file):
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(cli, ["-q", "-c", quiet_config_file, *args], obj={})

    return invoke


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_encrypt_json(run):
    result = run("-o", "json", "encrypt", "HELLO", "-n", "shift:3", "-n", "reverse")
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["ciphertext"] == "ROOHK"
    assert payload["pipeline"] == ["1. Shift by 3", "2. Reverse"]


def test_encrypt_bad_spec_is_a_usage_error(run):
    result = run("encrypt", "HELLO", "-n", "rot13")
    assert result.exit_code == 2
    assert "Unknown node type" in result.output


def test_encrypt_console(quiet_config_file):
    result = CliRunner().invoke(
        cli, ["-c", quiet_config_file, "encrypt", "HELLO", "-n", "shift:3"], obj={}
    )
    assert result.exit_code == 0, result.output
    assert "KHOOR" in result.output


def test_evaluate_json(run):
    result = run("-o", "json", "evaluate", "HELLO", "-n", "shift:3")
    assert result.exit_code == 0, result.output
    report = json.loads(result.stdout)
    assert report["metadata"]["breakdown"]["final"] == pytest.approx(76.7, abs=0.01)
    assert report["summary"]["total_findings"] == 3
    assert report["report_metadata"]["tool"] == "cipherdash"


def test_evaluate_threshold_range(run):
    result = run("evaluate", "HELLO", "-n", "shift:3", "-t", "150")
    assert result.exit_code == 2


def test_evaluate_html_to_file(run, tmp_path):
    target = tmp_path / "report.html"
    result = run("-o", "html", "-f", str(target), "evaluate", "HELLO", "-n", "shift:3")
    assert result.exit_code == 0, result.output
    assert "CipherDash" in target.read_text(encoding="utf-8")


def test_evaluate_html_defaults_to_output_dir(run, tmp_path):
    result = run("-o", "html", "evaluate", "HELLO", "-n", "shift:3")
    assert result.exit_code == 0, result.output
    assert (tmp_path / "cipherdash_evaluation.html").exists()


def test_polygon_json(run):
    result = run("-o", "json", "polygon", "0,0", "60,80", "140,0", "60,-80")
    assert result.exit_code == 0, result.output
    report = json.loads(result.stdout)
    assert report["metadata"]["analysis"]["multiply_key"] == 3


def test_polygon_bad_vertex(run):
    result = run("polygon", "abc")
    assert result.exit_code == 2
    assert "Invalid vertex" in result.output


def test_patterns_json(run):
    result = run("-o", "json", "patterns", "ABAB")
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["patterns"] == [
        "Repeating letter pairs detected (digram weakness): AB"
    ]


# ── Untrusted text in console output ──────────────────────────────────────────
@pytest.mark.parametrize("quiet", [True, False])
def test_patterns_console_with_bracketed_text(quiet_config_file, quiet):
    args = ["-q"] if quiet else []
    result = CliRunner().invoke(cli, [*args, "-c", quiet_config_file, "patterns", "AB[/]AB"], obj={})
    assert result.exit_code == 0, result.output
    if not quiet:
        assert "AB[/]AB" in result.output


@pytest.mark.parametrize("quiet", [True, False])
def test_evaluate_console_with_bracketed_text(quiet_config_file, quiet):
    args = ["-q"] if quiet else []
    result = CliRunner().invoke(
        cli, [*args, "-c", quiet_config_file, "evaluate", "[/]XY[/]XY", "-n", "shift:3"], obj={}
    )
    assert result.exit_code == 0, result.output
    if not quiet:
        assert "[/]AB[/]AB" in result.output


# ── Config-driven behaviour ───────────────────────────────────────────────────
def test_report_format_sets_default_output(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[global]\nlog_level = "WARNING"\nreport_format = "json"\n')
    result = CliRunner().invoke(cli, ["-q", "-c", str(path), "encrypt", "HELLO"], obj={})
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["ciphertext"] == "HELLO"


def test_unknown_report_format_is_a_usage_error(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[global]\nreport_format = "pdf"\n')
    result = CliRunner().invoke(cli, ["-q", "-c", str(path), "encrypt", "HELLO"], obj={})
    assert result.exit_code == 2
    assert "report_format" in result.output


def test_non_positive_test_rate_is_a_usage_error(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[attacks]\ntest_rate = 0\n")
    result = CliRunner().invoke(cli, ["-q", "-c", str(path), "evaluate", "HELLO"], obj={})
    assert result.exit_code == 2
    assert "test_rate" in result.output
