"""
CipherDash Report Generator
============================

Generates HTML and JSON reports from CipherDash results. The HTML
report uses inline CSS for portability and includes the score meter,
severity-coloured findings and the raw evaluation data.

The JSON report provides machine-readable structured output suitable
for grading scripts and other tools.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from html import escape
from pathlib import Path
from typing import Any, Optional

from dashcore.models import ScanResult


# ===================================================================== #
#  HTML Template
# ===================================================================== #

_HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>CipherDash Report - {title}</title>
    <style>
        :root {{
            --bg-primary: #0d1117;
            --bg-secondary: #161b22;
            --bg-tertiary: #21262d;
            --text-primary: #c9d1d9;
            --text-secondary: #8b949e;
            --accent-cyan: #58a6ff;
            --accent-green: #3fb950;
            --accent-yellow: #d29922;
            --accent-red: #f85149;
            --accent-purple: #bc8cff;
            --border: #30363d;
        }}
        * {{ margin: 0; padding: 0; box-sizing: border-box; }}
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Helvetica, Arial, sans-serif;
            background: var(--bg-primary);
            color: var(--text-primary);
            line-height: 1.6;
            padding: 2rem;
        }}
        .container {{ max-width: 1000px; margin: 0 auto; }}
        .header {{
            text-align: center;
            padding: 2rem;
            border: 1px solid var(--accent-cyan);
            border-radius: 8px;
            margin-bottom: 2rem;
            background: var(--bg-secondary);
        }}
        .header h1 {{ color: var(--accent-cyan); font-size: 2rem; }}
        .header .subtitle {{ color: var(--text-secondary); font-size: 0.9rem; }}
        .section {{
            background: var(--bg-secondary);
            border: 1px solid var(--border);
            border-radius: 8px;
            padding: 1.5rem;
            margin-bottom: 1.5rem;
        }}
        .section h2 {{
            color: var(--accent-purple);
            font-size: 1.4rem;
            margin-bottom: 1rem;
            border-bottom: 1px solid var(--border);
        }}
        table {{ width: 100%; border-collapse: collapse; margin: 1rem 0; }}
        th, td {{ padding: 0.6rem 1rem; text-align: left; border: 1px solid var(--border); }}
        th {{ background: var(--bg-tertiary); color: var(--accent-cyan); }}
        .meter {{
            height: 24px;
            background: var(--bg-tertiary);
            border-radius: 12px;
            overflow: hidden;
            border: 1px solid var(--border);
        }}
        .meter-fill {{ height: 100%; background: {meter_colour}; }}
        .badge {{ display: inline-block; padding: 0.2rem 0.6rem; border-radius: 4px; font-weight: 700; font-size: 0.8rem; }}
        .severity-info {{ border-left-color: var(--accent-green); color: var(--accent-green); }}
        .severity-low {{ border-left-color: var(--accent-cyan); color: var(--accent-cyan); }}
        .severity-medium {{ border-left-color: var(--accent-yellow); color: var(--accent-yellow); }}
        .severity-high {{ border-left-color: #ff7b72; color: #ff7b72; }}
        .severity-critical {{ border-left-color: var(--accent-red); color: var(--accent-red); }}
        .finding {{
            padding: 1rem;
            margin: 0.5rem 0;
            border-left: 4px solid var(--border);
            background: var(--bg-tertiary);
        }}
        .finding h3 {{ font-size: 1rem; color: var(--text-primary); }}
        .finding p {{ color: var(--text-secondary); font-size: 0.9rem; }}
        pre {{ background: var(--bg-tertiary); padding: 1rem; overflow-x: auto; font-size: 0.85rem; }}
        .footer {{ text-align: center; color: var(--text-secondary); font-size: 0.8rem; margin-top: 2rem; }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>CipherDash</h1>
            <div class="subtitle">
                Cipher Strength Report | {target}<br>
                Generated: {timestamp}
            </div>
        </div>

        <div class="section">
            <h2>Summary</h2>
            <p>{summary}</p>
            {meter_html}
            <table>
                <tr><th>Tool</th><td>{tool}</td><th>Target</th><td>{target}</td></tr>
                <tr><th>Duration</th><td>{duration:.3f}s</td><th>Findings</th><td>{finding_count}</td></tr>
            </table>
        </div>

        <div class="section">
            <h2>Findings</h2>
            {findings_html}
        </div>

        {raw_data_section}

        <div class="footer">
            CipherDash v{version} | Report generated {timestamp}
        </div>
    </div>
</body>
</html>
"""


class CipherDashReportGenerator:
    """Generates HTML and JSON reports from CipherDash results.

    Usage::

        generator = CipherDashReportGenerator()
        generator.generate_html(scan_result, Path("report.html"))
        generator.generate_json(scan_result, Path("report.json"))
    """

    def __init__(self, version: str = "1.0.0") -> None:
        self.version = version

    # ------------------------------------------------------------------ #
    #  JSON
    # ------------------------------------------------------------------ #

    def build_report_data(self, result: ScanResult) -> dict[str, Any]:
        """Assemble the JSON-ready report dictionary."""
        return {
            "report_metadata": {
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "tool": result.tool_name,
                "target": result.target,
                "version": self.version,
            },
            "summary": {
                "total_findings": result.finding_count,
                "severity_counts": result.severity_counts,
                "duration_seconds": result.duration_seconds,
                "risk": result.risk.model_dump(mode="json") if result.risk else None,
                "description": result.summary,
            },
            "findings": [f.model_dump(mode="json") for f in result.findings],
            "metadata": result.metadata,
        }

    def render_json(self, result: ScanResult) -> str:
        return json.dumps(self.build_report_data(result), indent=2, ensure_ascii=False, default=str)

    def generate_json(self, result: ScanResult, output_path: Path) -> Path:
        """Write the JSON report for *result* to *output_path*."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.render_json(result), encoding="utf-8")
        return output_path

    # ------------------------------------------------------------------ #
    #  HTML
    # ------------------------------------------------------------------ #

    def render_html(self, result: ScanResult, title: Optional[str] = None) -> str:
        """Render a self-contained HTML page for *result*."""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        score = self._final_score(result)

        return _HTML_TEMPLATE.format(
            title=escape(title or f"Analysis of {result.target}"),
            target=escape(result.target),
            timestamp=timestamp,
            summary=escape(result.summary),
            meter_html=self._build_meter_html(score),
            meter_colour=self._meter_colour(score),
            tool=escape(result.tool_name),
            duration=result.duration_seconds or 0.0,
            finding_count=result.finding_count,
            findings_html=self._build_findings_html(result),
            raw_data_section=self._build_raw_data_section(result),
            version=escape(self.version),
        )

    def generate_html(
        self,
        result: ScanResult,
        output_path: Path,
        title: Optional[str] = None,
    ) -> Path:
        """Write the HTML report for *result* to *output_path*."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.render_html(result, title), encoding="utf-8")
        return output_path

    # ------------------------------------------------------------------ #
    #  Private HTML Builders
    # ------------------------------------------------------------------ #

    @staticmethod
    def _final_score(result: ScanResult) -> Optional[float]:
        breakdown = result.metadata.get("breakdown")
        if isinstance(breakdown, dict):
            return breakdown.get("final")
        return None

    @staticmethod
    def _meter_colour(score: Optional[float]) -> str:
        if score is None or score < 40:
            return "var(--accent-red)"
        if score < 60:
            return "var(--accent-yellow)"
        return "var(--accent-green)"

    @staticmethod
    def _build_meter_html(score: Optional[float]) -> str:
        if score is None:
            return ""
        width = max(0.0, min(100.0, score))
        return (
            f"<p><strong>Score:</strong> {score:.1f}/100</p>"
            f'<div class="meter"><div class="meter-fill" style="width: {width:.1f}%"></div></div>'
        )

    @staticmethod
    def _build_findings_html(result: ScanResult) -> str:
        if not result.findings:
            return '<p style="color: var(--text-secondary);">No findings.</p>'

        parts: list[str] = []
        for finding in result.findings:
            css = finding.severity.css_class
            parts.append(
                f'<div class="finding {css}">'
                f'<h3><span class="badge {css}">{finding.severity.value}</span> '
                f"{escape(finding.title)}</h3>"
                f"<p>{escape(finding.description)}</p>"
            )
            if finding.recommendation:
                parts.append(
                    f"<p><strong>Recommendation:</strong> {escape(finding.recommendation)}</p>"
                )
            parts.append("</div>")
        return "\n".join(parts)

    @staticmethod
    def _build_raw_data_section(result: ScanResult) -> str:
        if not result.metadata:
            return ""
        json_str = json.dumps(result.metadata, indent=2, ensure_ascii=False, default=str)
        return (
            '<div class="section">'
            "<h2>Raw Analysis Data</h2>"
            f"<pre>{escape(json_str)}</pre>"
            "</div>"
        )
