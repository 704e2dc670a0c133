"""sastmerge CLI — Typer application with scan, validate-rules, blame, tools, and init."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from sastmerge import __version__

app = typer.Typer(
    name="sastmerge",
    help="Merge static-analysis findings and custom rules into one report.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, show_time=debug)],
        force=True,
    )


def _parse_tool_outputs(values: List[str]) -> Dict[str, Path]:
    """Parse repeated ``TOOL=FILE`` options, exit 2 on bad input."""
    from sastmerge.tools import available_tools

    outputs: Dict[str, Path] = {}
    for value in values:
        name, sep, path = value.partition("=")
        if not sep or not name or not path:
            console.print(f"[bold red]Invalid --tool-output:[/bold red] {value} (expected TOOL=FILE)")
            raise typer.Exit(code=2)
        if name not in available_tools():
            console.print(
                f"[bold red]Unknown tool:[/bold red] {name} "
                f"(available: {', '.join(available_tools())})"
            )
            raise typer.Exit(code=2)
        outputs[name] = Path(path)
    return outputs


# ── scan ──────────────────────────────────────────────────────────────────────


@app.command()
def scan(
    path: Path = typer.Argument(Path("."), help="Project directory to analyze"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .sastmerge.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write JSON report to file"),
    rules: List[str] = typer.Option([], "--rules", "-r", help="Custom rules file or directory (repeatable)"),
    tool_output: List[str] = typer.Option(
        [], "--tool-output", "-t", help="Captured tool output as TOOL=FILE (repeatable)",
    ),
    commit_author: bool = typer.Option(False, "--commit-author", help="Attach commit authors to findings"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
) -> None:
    """Run custom rules and normalize captured tool output for PATH."""
    from sastmerge.config.loader import ConfigError, load_config
    from sastmerge.output import json_report, terminal
    from sastmerge.scanner.engine import analyze
    from sastmerge.tools import CapturedOutputRunner, get_tool

    _setup_logging(debug)
    project_root = path.resolve()
    if not project_root.is_dir():
        console.print(f"[bold red]Error:[/bold red] not a directory: {path}")
        raise typer.Exit(code=2)

    # --- Load config ---
    try:
        cfg = load_config(project_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    # --- CLI overrides ---
    if format:
        if format not in ("terminal", "json"):
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    cfg.custom_rules.paths.extend(rules)
    if commit_author:
        cfg.provenance.enabled = True

    captured = _parse_tool_outputs(tool_output)
    runner = CapturedOutputRunner(
        {cfg.tool(name).image or get_tool(name).image: p for name, p in captured.items()}
    )

    result = analyze(project_root, cfg, runner=runner, tools=list(captured))

    # --- Output ---
    report_text: Optional[str] = None
    if cfg.output.format == "json":
        report_text = json_report.render(result)
        print(report_text)
    else:
        terminal.render(result, show_summary=cfg.output.show_summary, console=console)

    if output:
        Path(output).write_text(report_text or json_report.render(result), encoding="utf-8")
        console.print(f"[dim]Report written to {output}[/dim]")

    raise typer.Exit(code=1 if result.findings else 0)


# ── validate-rules ────────────────────────────────────────────────────────────


@app.command("validate-rules")
def validate_rules(
    paths: List[Path] = typer.Argument(..., help="Custom rules files or directories"),
) -> None:
    """Validate custom rule files without scanning."""
    from sastmerge.rules.ids import RuleIdRegistry
    from sastmerge.rules.registry import load_custom_rules

    _setup_logging(False)
    logging.getLogger("sastmerge").setLevel(logging.ERROR)

    rules, errors = load_custom_rules(paths, RuleIdRegistry())
    for rule in rules:
        console.print(f"[green]✓[/green] {escape(str(rule))}")
    for error in errors:
        console.print(f"[red]✗[/red] {escape(str(error))}")

    console.print()
    console.print(f"[dim]{len(rules)} valid, {len(errors)} invalid[/dim]")
    if errors:
        raise typer.Exit(code=1)


# ── blame ─────────────────────────────────────────────────────────────────────


@app.command()
def blame(
    file: str = typer.Argument(..., help="File path, relative to the repository"),
    line: str = typer.Argument(..., help="Line number, range N-M, or 0 for the first commit"),
    repo: Path = typer.Option(Path("."), "--repo", help="Repository root"),
) -> None:
    """Show the commit that last touched LINE of FILE."""
    from sastmerge.git.provenance import ProvenanceEnricher

    author = ProvenanceEnricher(repo).resolve(line, file)
    print(f"commit  {author.commit_hash}")
    print(f"author  {author.author} <{author.email}>")
    print(f"date    {author.date}")
    print(f"message {author.message}")
    if not author.resolved:
        raise typer.Exit(code=1)


# ── tools ─────────────────────────────────────────────────────────────────────


@app.command()
def tools() -> None:
    """List the tools whose output can be normalized."""
    from sastmerge.tools import available_tools, get_tool

    for name in available_tools():
        tool = get_tool(name)
        print(f"{name:<10} {tool.image:<36} {tool.description}")


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    path: Path = typer.Argument(Path("."), help="Project directory"),
) -> None:
    """Generate a starter .sastmerge.toml in the project directory."""
    from sastmerge.config.defaults import DEFAULT_TOML
    from sastmerge.config.loader import CONFIG_FILENAME

    config_path = path / CONFIG_FILENAME
    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"sastmerge {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """sastmerge — one report from many static-analysis tools."""
