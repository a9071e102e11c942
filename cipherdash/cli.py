"""
CipherDash CLI
===============

Click-based command-line interface for CipherDash. Provides subcommands
to encrypt text through a pipeline of cipher nodes, score a pipeline
and simulate attacks against it, inspect a hand-drawn polygon, and scan
text for structural patterns.

Usage::

    python -m cipherdash encrypt HELLO -n shift:3 -n reverse
    python -m cipherdash evaluate ATTACKATDAWN -n multiply:7 -n "polygon:0,0;60,80;140,0;60,-80"
    python -m cipherdash polygon "0,0" "40,0" "20,30"
    python -m cipherdash patterns ABCXYZ

Node specifications are ``shift[:KEY]``, ``reverse``, ``multiply[:KEY]``
or ``polygon:X,Y;X,Y;X,Y[;...]``. Put ``--`` before vertex lists that
start with a negative coordinate.

References:
    - Click Documentation. https://click.palletsprojects.com/
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import click

from dashcore.config import DashConfig
from dashcore.console import DashConsole
from dashcore.models import ScanResult

from cipherdash import __version__
from cipherdash.core.engine import CipherDashEngine
from cipherdash.core.models import EvaluationReport, GeometryAnalysis, PolygonValidation
from cipherdash.core.pipeline import CipherPipeline
from cipherdash.output.console import CipherDashConsoleOutput
from cipherdash.output.report import CipherDashReportGenerator
from cipherdash.parsers.node_parser import NodeSpecError, parse_vertices

OUTPUT_FORMATS = ("console", "json", "html")


# ===================================================================== #
#  CLI Group
# ===================================================================== #

@click.group()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to CipherDash configuration file (TOML).",
)
@click.option(
    "--output", "-o",
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help="Output format (default: global.report_format from the config).",
)
@click.option(
    "--output-file", "-f",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file path (for JSON/HTML output).",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Suppress banner and console output.",
)
@click.version_option(__version__, prog_name="cipherdash")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[str],
    output: Optional[str],
    output_file: Optional[str],
    quiet: bool,
) -> None:
    """CipherDash -- geometric cipher construction and cryptanalysis playground.

    Chain cipher nodes, derive keys from hand-drawn polygons, score the
    result and see how quickly simple attacks would break it.
    """
    ctx.ensure_object(dict)

    try:
        dash_config = DashConfig.load(config) if config else DashConfig()
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="'--config'") from exc

    output = output or dash_config.global_settings.report_format
    if output not in OUTPUT_FORMATS:
        raise click.BadParameter(
            f"report_format must be one of {', '.join(OUTPUT_FORMATS)}, got {output!r}",
            param_hint="'--config'",
        )

    ctx.obj["config"] = dash_config
    ctx.obj["output_format"] = output
    ctx.obj["output_file"] = output_file
    ctx.obj["quiet"] = quiet

    console = DashConsole(quiet=quiet)
    ctx.obj["console"] = console
    ctx.obj["engine"] = CipherDashEngine(dash_config)
    ctx.obj["display"] = CipherDashConsoleOutput(console)
    ctx.obj["reporter"] = CipherDashReportGenerator(version=__version__)

    if not quiet:
        console.banner(version=__version__)


def _build_pipeline(ctx: click.Context, specs: tuple[str, ...]) -> CipherPipeline:
    """Build the pipeline for ``--node`` options, reporting bad specs to click."""
    engine: CipherDashEngine = ctx.obj["engine"]
    try:
        return engine.build_pipeline(specs)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="'--node'") from exc


def _handle_output(ctx: click.Context, result: ScanResult, default_name: str) -> None:
    """Write *result* as JSON or HTML according to the global options."""
    output_format = ctx.obj["output_format"]
    output_file = ctx.obj["output_file"]
    reporter: CipherDashReportGenerator = ctx.obj["reporter"]
    console: DashConsole = ctx.obj["console"]

    if output_format == "json":
        if output_file:
            path = reporter.generate_json(result, Path(output_file))
            console.success(f"JSON report saved to: {path}")
        else:
            click.echo(reporter.render_json(result))
    elif output_format == "html":
        if output_file:
            path = Path(output_file)
        else:
            config: DashConfig = ctx.obj["config"]
            path = Path(config.global_settings.output_dir) / f"{default_name}.html"
        path = reporter.generate_html(result, path)
        console.success(f"HTML report saved to: {path}")


def _emit_plain(ctx: click.Context, payload: dict) -> None:
    """Emit a small JSON payload for commands without a findings report."""
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    output_file = ctx.obj["output_file"]
    if output_file:
        path = Path(output_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        ctx.obj["console"].success(f"Output saved to: {path}")
    else:
        click.echo(text)


_node_option = click.option(
    "--node", "-n", "nodes",
    multiple=True,
    metavar="SPEC",
    help="Cipher node spec, repeatable and applied in order "
         "(shift[:KEY], reverse, multiply[:KEY], polygon:X,Y;X,Y;...).",
)


# ===================================================================== #
#  Subcommands
# ===================================================================== #

@cli.command()
@click.argument("text")
@_node_option
@click.pass_context
def encrypt(ctx: click.Context, text: str, nodes: tuple[str, ...]) -> None:
    """Encrypt TEXT through the given cipher nodes.

    Only ASCII letters are transformed (and emitted uppercase); other
    characters pass through. JSON and HTML output both emit the plain
    JSON result.
    """
    pipeline = _build_pipeline(ctx, nodes)
    engine: CipherDashEngine = ctx.obj["engine"]
    ciphertext = engine.encrypt(text, pipeline)

    if ctx.obj["output_format"] == "console":
        display: CipherDashConsoleOutput = ctx.obj["display"]
        display.display_encryption(text, ciphertext, pipeline.describe())
    else:
        _emit_plain(ctx, {
            "plaintext": text,
            "ciphertext": ciphertext,
            "pipeline": pipeline.describe(),
        })


@cli.command()
@click.argument("text")
@_node_option
@click.option(
    "--threshold", "-t",
    type=click.FloatRange(0, 100),
    default=None,
    help="Pass mark (default: scoring.pass_threshold from the config).",
)
@click.pass_context
def evaluate(
    ctx: click.Context,
    text: str,
    nodes: tuple[str, ...],
    threshold: Optional[float],
) -> None:
    """Score a cipher on TEXT and simulate attacks against it."""
    pipeline = _build_pipeline(ctx, nodes)
    engine: CipherDashEngine = ctx.obj["engine"]
    result = engine.evaluate(text, pipeline, threshold)

    if ctx.obj["output_format"] == "console":
        display: CipherDashConsoleOutput = ctx.obj["display"]
        if result.metadata:
            display.display_evaluation(EvaluationReport(**result.metadata))
        ctx.obj["console"].findings_table(result.findings)
    else:
        _handle_output(ctx, result, "cipherdash_evaluation")


@cli.command()
@click.argument("vertices", nargs=-1, required=True)
@click.pass_context
def polygon(ctx: click.Context, vertices: tuple[str, ...]) -> None:
    """Validate a polygon and show the key it derives.

    VERTICES are X,Y pairs, given as separate arguments or in one
    argument separated by ';'.
    """
    try:
        points = parse_vertices(vertices)
    except NodeSpecError as exc:
        raise click.BadParameter(str(exc), param_hint="'VERTICES'") from exc

    engine: CipherDashEngine = ctx.obj["engine"]
    result = engine.analyze_polygon(points)

    if ctx.obj["output_format"] == "console":
        display: CipherDashConsoleOutput = ctx.obj["display"]
        meta = result.metadata
        if meta:
            display.display_geometry(
                PolygonValidation(**meta["validation"]),
                GeometryAnalysis(**meta["analysis"]),
            )
        ctx.obj["console"].findings_table(result.findings)
    else:
        _handle_output(ctx, result, "cipherdash_polygon")


@cli.command()
@click.argument("text")
@click.pass_context
def patterns(ctx: click.Context, text: str) -> None:
    """Scan TEXT for repeated digrams and ascending sequences."""
    engine: CipherDashEngine = ctx.obj["engine"]
    warnings = engine.attack_simulator.detect_patterns(text)

    if ctx.obj["output_format"] == "console":
        display: CipherDashConsoleOutput = ctx.obj["display"]
        display.display_patterns(text, warnings)
    else:
        _emit_plain(ctx, {"text": text, "patterns": warnings})


# ===================================================================== #
#  Entry Point
# ===================================================================== #

def main() -> None:
    """Main entry point for the CipherDash CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
