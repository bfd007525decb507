"""mcpaudit CLI — Typer application with scan and init commands."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from mcpaudit import __version__

app = typer.Typer(
    name="mcpaudit",
    help="Heuristic security review of MCP server capabilities.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

EXIT_GATE_FAILED = 1
EXIT_INPUT_ERROR = 2
EXIT_EXPORT_FAILED = 3

JSON_REPORT_NAME = "mcp-security.json"
SARIF_REPORT_NAME = "mcp-security.sarif"
CSV_REPORT_NAME = "mcp-security.csv"
MARKDOWN_REPORT_NAME = "mcp-security.md"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _fail(label: str, exc: Exception) -> typer.Exit:
    console.print(f"[bold red]{label}:[/bold red] {exc}")
    return typer.Exit(code=EXIT_INPUT_ERROR)


# ── scan ──────────────────────────────────────────────────────────────────────


@app.command()
def scan(
    metadata: Path = typer.Argument(..., help="Capability metadata JSON produced by the discovery tool"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Directory for reports (default: next to METADATA)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .mcpaudit.toml"),
    sarif_out: bool = typer.Option(False, "--sarif", help="Also write a SARIF report"),
    csv_out: bool = typer.Option(False, "--csv", help="Also write a CSV report"),
    markdown_out: bool = typer.Option(False, "--markdown", "-m", help="Also write a Markdown report"),
    all_formats: bool = typer.Option(False, "--all-formats", help="Write every report format"),
    min_severity: Optional[str] = typer.Option(None, "--min-severity", help="Drop findings below: low | medium | high | critical"),
    exclude_category: Optional[List[str]] = typer.Option(None, "--exclude-category", help="Category to drop (repeatable)"),
    critical_threshold: Optional[int] = typer.Option(None, "--critical-threshold", min=0, help="Fail when critical findings exceed this"),
    high_threshold: Optional[int] = typer.Option(None, "--high-threshold", min=0, help="Fail when high findings exceed this"),
    enhanced: bool = typer.Option(False, "--enhanced", "-e", help="Enable secrets-exposure and audit-logging rules"),
    timestamp: bool = typer.Option(False, "--timestamp", help="Stamp reports with the generation time"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Print the summary only"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Analyze capability metadata and write security reports."""
    from mcpaudit.analyzer.engine import analyze
    from mcpaudit.config.loader import ConfigError, load_config
    from mcpaudit.config.schema import parse_category, parse_severity
    from mcpaudit.findings.gate import evaluate_gate
    from mcpaudit.metadata.loader import MetadataError, load_metadata
    from mcpaudit.output import csv_report, json_report, markdown, sarif, terminal
    from mcpaudit.rules.registry import build_registry

    _configure_logging(verbose)

    # --- Load config ---
    base_dir = Path.cwd()
    try:
        cfg = load_config(base_dir, config)
    except ConfigError as exc:
        raise _fail("Config error", exc) from exc

    # --- CLI overrides ---
    try:
        if min_severity:
            cfg.scan.minimum_severity = parse_severity(min_severity)
        if exclude_category:
            cfg.scan.exclude_categories.extend(parse_category(c) for c in exclude_category)
    except ValueError as exc:
        raise _fail("Invalid option", exc) from exc
    if critical_threshold is not None:
        cfg.thresholds.critical = critical_threshold
    if high_threshold is not None:
        cfg.thresholds.high = high_threshold
    if enhanced:
        cfg.scan.enhanced = True

    # --- Build rules ---
    try:
        registry = build_registry(cfg, base_dir)
    except ConfigError as exc:
        raise _fail("Config error", exc) from exc

    # --- Load metadata ---
    try:
        discovery = load_metadata(metadata)
    except MetadataError as exc:
        raise _fail("Metadata error", exc) from exc

    if verbose:
        console.print(f"[dim]Rules loaded: {len(registry.active_rules(enhanced=cfg.scan.enhanced))}[/dim]")
        console.print(f"[dim]Capabilities: {discovery.total_capabilities}[/dim]")

    # --- Analyze + gate ---
    result = analyze(discovery, cfg, registry)
    gate = evaluate_gate(result.summary, cfg.thresholds.critical, cfg.thresholds.high)

    # --- Reports ---
    generated_at = datetime.now(timezone.utc) if timestamp else None
    formats = set(cfg.output.formats)
    if sarif_out:
        formats.add("sarif")
    if csv_out:
        formats.add("csv")
    if markdown_out:
        formats.add("markdown")
    if all_formats:
        formats.update(("sarif", "csv", "markdown"))

    exports: List[tuple[str, Callable[[], str]]] = [
        (JSON_REPORT_NAME, lambda: json_report.render(discovery, result, generated_at=generated_at)),
    ]
    if "sarif" in formats:
        exports.append((SARIF_REPORT_NAME, lambda: sarif.render(result)))
    if "csv" in formats:
        exports.append((CSV_REPORT_NAME, lambda: csv_report.render(result)))
    if "markdown" in formats:
        exports.append(
            (MARKDOWN_REPORT_NAME, lambda: markdown.render(discovery, result, generated_at=generated_at))
        )

    target_dir = output_dir or metadata.resolve().parent
    failed_exports = 0
    for filename, produce in exports:
        if not _write_report(target_dir / filename, produce, verbose=verbose):
            failed_exports += 1

    terminal.render(discovery, result, gate, console=console, show_findings=not quiet)

    # --- Exit code ---
    if not gate.passed:
        raise typer.Exit(code=EXIT_GATE_FAILED)
    if failed_exports:
        raise typer.Exit(code=EXIT_EXPORT_FAILED)
    raise typer.Exit(code=0)


def _write_report(path: Path, produce: Callable[[], str], *, verbose: bool = False) -> bool:
    """Write one artifact; report failures without stopping the others."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(produce(), encoding="utf-8")
    except OSError as exc:
        console.print(f"[bold red]Could not write {path.name}:[/bold red] {exc}")
        return False
    if verbose:
        console.print(f"[dim]Report written to {path}[/dim]")
    else:
        console.print(f"📄 {path}")
    return True


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config"),
) -> None:
    """Generate a starter .mcpaudit.toml in the current directory."""
    from mcpaudit.config.defaults import DEFAULT_TOML
    from mcpaudit.config.loader import CONFIG_FILENAME

    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists() and not force:
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"mcpaudit {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """mcpaudit — Heuristic security review of MCP server capabilities."""
