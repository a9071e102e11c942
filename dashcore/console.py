"""
CipherDash Console Interface
=============================

Rich-powered console abstraction providing the presentation layer for
the CipherDash command-line tool: banner, section headers,
severity-coloured messages, tables and the findings table.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Sequence

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

_DASH_THEME = Theme(
    {
        "dash.banner": "bold bright_cyan",
        "dash.section": "bold bright_magenta",
        "dash.success": "bold green",
        "dash.warning": "bold yellow",
        "dash.error": "bold red",
        "dash.info": "bold bright_blue",
        "dash.dim": "dim white",
        "dash.critical": "bold white on red",
        "dash.high": "bold red",
        "dash.medium": "bold yellow",
        "dash.low": "bold bright_cyan",
        "dash.informational": "bold bright_blue",
    }
)

_BANNER_ART = r"""
[bright_cyan]  ___ _      _               ___          _
 / __(_)_ __| |_  ___ _ _  |   \ __ _ __| |_
| (__| | '_ \ ' \/ -_) '_| | |) / _` (_-< ' \
 \___|_| .__/_||_\___|_|   |___/\__,_/__/_||_|
       |_|[/bright_cyan]"""

_TAGLINE = "Geometric cipher construction & cryptanalysis playground"

_SEVERITY_STYLES: dict[str, str] = {
    "CRITICAL": "dash.critical",
    "HIGH": "dash.high",
    "MEDIUM": "dash.medium",
    "LOW": "dash.low",
    "INFO": "dash.informational",
}


class DashConsole:
    """Unified console interface for CipherDash output.

    Usage::

        con = DashConsole()
        con.banner()
        con.section("Strength Score")
        con.success("Signal transmitted")
    """

    def __init__(self, *, quiet: bool = False) -> None:
        """Initialise the console; *quiet* suppresses all output."""
        self._console = Console(
            theme=_DASH_THEME,
            quiet=quiet,
            highlight=False,
        )

    @property
    def rich(self) -> Console:
        """Direct access to the underlying Rich Console instance."""
        return self._console

    # ------------------------------------------------------------------ #
    #  Banner / sections
    # ------------------------------------------------------------------ #

    def banner(self, version: str = "1.0.0") -> None:
        """Display the CipherDash banner with version and timestamp."""
        now = _dt.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        subtitle = (
            f"[dash.info]{_TAGLINE}[/dash.info]\n"
            f"[dash.dim]Version: {version}  |  {now}[/dash.dim]"
        )
        panel = Panel(
            Align.center(Text.from_markup(_BANNER_ART + "\n\n" + subtitle)),
            border_style="bright_cyan",
            padding=(1, 2),
        )
        self._console.print(panel)

    def section(self, title: str) -> None:
        """Print a prominent section header."""
        self._console.rule(f"  {title}  ", style="dash.section", characters="─")
        self._console.print()

    # ------------------------------------------------------------------ #
    #  Message helpers (severity-coloured)
    # ------------------------------------------------------------------ #

    def success(self, message: str) -> None:
        self._console.print(f"[dash.success][✔] SUCCESS:[/dash.success] {escape(message)}")

    def warning(self, message: str) -> None:
        self._console.print(f"[dash.warning][⚠] WARNING:[/dash.warning] {escape(message)}")

    def error(self, message: str) -> None:
        self._console.print(f"[dash.error][✘] ERROR:[/dash.error] {escape(message)}")

    def info(self, message: str) -> None:
        self._console.print(f"[dash.info][ℹ] INFO:[/dash.info] {escape(message)}")

    # ------------------------------------------------------------------ #
    #  Tables
    # ------------------------------------------------------------------ #

    def findings_table(self, findings: Sequence[Any]) -> None:
        """Render a findings table with automatic severity colouring.

        Expects objects with ``severity``, ``title`` and ``description``
        attributes (e.g. :class:`dashcore.models.Finding`).
        """
        if not findings:
            self.info("No findings.")
            return

        tbl = Table(
            title="Findings",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=True,
            padding=(0, 1),
        )
        tbl.add_column("#", style="dim", width=4, justify="right")
        tbl.add_column("Severity", width=10)
        tbl.add_column("Title")
        tbl.add_column("Description", ratio=2)

        for idx, finding in enumerate(findings, start=1):
            sev = getattr(finding, "severity", "INFO")
            sev_name = sev.value if hasattr(sev, "value") else str(sev).upper()
            sev_style = _SEVERITY_STYLES.get(sev_name)
            sev_cell = f"[{sev_style}]{sev_name}[/{sev_style}]" if sev_style else sev_name
            tbl.add_row(
                str(idx),
                sev_cell,
                Text(str(getattr(finding, "title", ""))),
                Text(str(getattr(finding, "description", ""))),
            )

        self._console.print(tbl)
