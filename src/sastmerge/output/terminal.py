"""Rich terminal reporter — severity pills, findings table, warnings."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from sastmerge.findings.models import ScanResult

_SEVERITY_STYLE = {
    "critical": "bold white on red",
    "high": "bold white on dark_orange",
    "medium": "bold black on yellow",
    "low": "bold black on bright_cyan",
    "info": "bold black on white",
}


def _severity_pill(severity: str) -> Text:
    return Text(f" {severity.upper()} ", style=_SEVERITY_STYLE.get(severity, ""))


def render(
    result: ScanResult,
    *,
    show_summary: bool = True,
    console: Optional[Console] = None,
) -> None:
    """Print scan results to the terminal using Rich."""
    console = console or Console(stderr=True)

    if result.findings:
        console.print()
        table = Table(
            title="sastmerge findings",
            show_lines=True,
            title_style="bold",
            border_style="dim",
        )
        table.add_column("Severity", justify="center", width=12)
        table.add_column("Rule", style="cyan")
        table.add_column("Tool", style="blue")
        table.add_column("File", style="magenta")
        table.add_column("Line", justify="right", style="green")
        table.add_column("Message", min_width=20)
        table.add_column("Author", style="dim")

        for finding in result.findings:
            author = finding.provenance.author if finding.provenance else "-"
            table.add_row(
                _severity_pill(finding.severity),
                finding.rule_id,
                finding.detected_by,
                finding.file,
                str(finding.line) if finding.line > 0 else "-",
                finding.message,
                author,
            )
        console.print(table)
    else:
        console.print()
        console.print("[bold green]No vulnerabilities found.[/bold green]")

    if result.errors:
        console.print()
        console.print(f"[bold yellow]{len(result.errors)} warning(s):[/bold yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]![/yellow] {escape(warning)}", highlight=False)

    if show_summary:
        _print_summary(console, result)


def _print_summary(console: Console, result: ScanResult) -> None:
    console.print()
    console.print(f"[dim]Custom rules:[/dim]  {result.rules_loaded}")
    console.print(f"[dim]Tools run:[/dim]     {', '.join(result.tools_run) or '-'}")
    console.print(f"[dim]Findings:[/dim]      {result.total_findings}")
    console.print(f"[dim]Warnings:[/dim]      {len(result.errors)}")
    console.print(f"[dim]Duration:[/dim]      {result.scan_duration_ms:.0f}ms")
