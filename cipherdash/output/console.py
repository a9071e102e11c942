"""
CipherDash Console Output
==========================

Rich-based console output formatters for CipherDash results: pipeline
listings, the strength meter with its score breakdown, attack results,
pattern warnings and polygon geometry.

Uses the shared DashConsole infrastructure for consistent styling.

References:
    - Rich Library Documentation. https://rich.readthedocs.io/
"""

from __future__ import annotations

from typing import Optional, Sequence

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from dashcore.console import DashConsole
from cipherdash.core.models import (
    AttackReport,
    EvaluationReport,
    GeometryAnalysis,
    PolygonValidation,
    ScoreBreakdown,
)


# ===================================================================== #
#  Colour Maps
# ===================================================================== #

_PENALTY_COLOURS: tuple[tuple[int, str], ...] = (
    (30, "bold red"),
    (15, "bold yellow"),
    (1, "yellow"),
    (0, "green"),
)


def _penalty_colour(penalty: float) -> str:
    for floor, colour in _PENALTY_COLOURS:
        if penalty >= floor:
            return colour
    return "green"


class CipherDashConsoleOutput:
    """Console output formatters for CipherDash results.

    Usage::

        console = DashConsole()
        output = CipherDashConsoleOutput(console)
        output.display_evaluation(report)
        output.display_geometry(validation, analysis)
    """

    def __init__(self, console: Optional[DashConsole] = None) -> None:
        self.console = console or DashConsole()
        self._rich = self.console.rich

    # ------------------------------------------------------------------ #
    #  Pipeline / encryption
    # ------------------------------------------------------------------ #

    def display_pipeline(self, steps: Sequence[str]) -> None:
        """List the pipeline's ``describe()`` lines."""
        if not steps:
            self.console.warning("Empty pipeline: text passes through unchanged.")
            return
        body = Text("\n".join(steps))
        self._rich.print(Panel(body, title="Pipeline", border_style="cyan"))

    def display_encryption(self, plaintext: str, ciphertext: str, steps: Sequence[str]) -> None:
        self.console.section("Encryption")
        self.display_pipeline(steps)

        text = Text()
        text.append("Plaintext:  ", style="bold")
        text.append(f"{plaintext}\n")
        text.append("Ciphertext: ", style="bold")
        text.append(ciphertext, style="bright_green")
        self._rich.print(Panel(text, title="Signal", border_style="cyan"))

    # ------------------------------------------------------------------ #
    #  Evaluation
    # ------------------------------------------------------------------ #

    def display_evaluation(self, report: EvaluationReport) -> None:
        """Display a full evaluation: meter, breakdown, attacks, patterns."""
        self.display_encryption(report.plaintext, report.ciphertext, report.pipeline)

        self.console.section("Strength Score")
        self._rich.print(self._strength_meter(report))
        self.display_breakdown(report.breakdown)
        self.display_attacks(report.attacks)

        if report.patterns:
            self._rich.print()
            self._rich.print("[bold]Patterns Detected:[/bold]")
            for pattern in report.patterns:
                self._rich.print(f"  [yellow]⚠[/yellow] {escape(pattern)}")

        self._rich.print()
        if report.passed:
            self.console.success(report.feedback)
        else:
            self.console.error(report.feedback)

    def _strength_meter(self, report: EvaluationReport) -> Panel:
        meter_width = 40
        score = report.breakdown.final
        filled = max(0, min(meter_width, int(score / 100 * meter_width)))
        mark = max(0, min(meter_width - 1, int(report.threshold / 100 * meter_width)))

        meter = Text()
        meter.append("Score: ", style="bold")
        meter.append(f"{score:.1f}/100  ")
        meter.append("[", style="dim")
        for i in range(meter_width):
            if i == mark:
                meter.append("|", style="bold white")
            elif i < filled:
                if i < meter_width * 0.40:
                    meter.append("█", style="red")
                elif i < meter_width * 0.60:
                    meter.append("█", style="yellow")
                elif i < meter_width * 0.80:
                    meter.append("█", style="green")
                else:
                    meter.append("█", style="bright_green")
            else:
                meter.append("░", style="dim")
        meter.append("]", style="dim")

        verdict, colour = ("PASS", "bold green") if report.passed else ("FAIL", "bold red")
        meter.append(f"  {verdict}", style=colour)
        meter.append(
            f"\nPass mark: {report.threshold:g}   Shape threshold: {report.dynamic_threshold:.1f}",
            style="dim",
        )
        return Panel(meter, title="Strength Meter", border_style="cyan")

    def display_breakdown(self, breakdown: ScoreBreakdown) -> None:
        tbl = Table(
            title="Score Breakdown",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=True,
        )
        tbl.add_column("Term", style="bold")
        tbl.add_column("Points", justify="right")

        tbl.add_row("Base", f"{breakdown.base:.1f}")
        tbl.add_row("Entropy", f"+{breakdown.entropy:.1f}")
        tbl.add_row("Diffusion", f"+{breakdown.diffusion:.1f}")
        tbl.add_row("Key Space", f"+{breakdown.key_space:.1f}")
        tbl.add_row("Penalties", f"[red]{breakdown.penalties:.1f}[/red]")
        tbl.add_row("Final", f"[bold]{breakdown.final:.1f}[/bold]")
        self._rich.print(tbl)

        for reason in breakdown.reasons:
            self._rich.print(f"  [red]−[/red] {reason}")

    def display_attacks(self, report: AttackReport) -> None:
        tbl = Table(
            title="Attack Simulation",
            caption=report.summary,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=True,
        )
        tbl.add_column("Attack", style="bold")
        tbl.add_column("Penalty", justify="right")
        tbl.add_column("Result")

        for attack in report.attacks:
            colour = _penalty_colour(attack.penalty)
            tbl.add_row(
                attack.name,
                f"[{colour}]-{attack.penalty}[/{colour}]",
                attack.description,
            )
        self._rich.print(tbl)

        components = next(
            (a.details.get("components") for a in report.attacks if "components" in a.details),
            None,
        )
        if components:
            self._rich.print(f"  [dim]Key space: {' x '.join(components)}[/dim]")

    # ------------------------------------------------------------------ #
    #  Geometry
    # ------------------------------------------------------------------ #

    def display_geometry(self, validation: PolygonValidation, analysis: GeometryAnalysis) -> None:
        """Display a polygon's validation verdict and key material."""
        self.console.section("Polygon Analysis")

        if validation.valid:
            self.console.success(f"Valid {validation.sides}-gon")
        else:
            self.console.error(validation.error)

        tbl = Table(
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=True,
        )
        tbl.add_column("Property", style="bold")
        tbl.add_column("Value")

        tbl.add_row("Vertices", str(analysis.vertices))
        tbl.add_row("Convex", "Yes" if analysis.convex else "No")
        tbl.add_row("Area", f"{analysis.area:.1f}")
        tbl.add_row("Side Lengths", ", ".join(f"{s:.1f}" for s in analysis.side_lengths))
        tbl.add_row("Average Side", f"{analysis.average_side:.1f}")
        tbl.add_row("Side Variance", f"{analysis.variance:.2f}")
        tbl.add_row("Shift Key", str(analysis.shift_key))
        tbl.add_row(
            "Multiply Key",
            str(analysis.multiply_key) if analysis.multiply_key is not None else "-",
        )
        self._rich.print(tbl)

        if analysis.notes:
            self._rich.print()
            self._rich.print("[bold]Security Notes:[/bold]")
            for note in analysis.notes:
                self._rich.print(f"  [bright_cyan]•[/bright_cyan] {note}")

    def display_patterns(self, ciphertext: str, patterns: Sequence[str]) -> None:
        self.console.section("Pattern Detection")
        self._rich.print(f"[bold]Text:[/bold] {escape(ciphertext)}")
        if not patterns:
            self.console.success("No structural patterns detected.")
            return
        for pattern in patterns:
            self.console.warning(pattern)
