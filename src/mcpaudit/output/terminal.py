"""Rich terminal reporter — colour, icons, severity pills."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from mcpaudit.findings.aggregator import sort_findings
from mcpaudit.findings.gate import GateResult
from mcpaudit.findings.models import AnalysisResult
from mcpaudit.metadata.models import DiscoveryResult

_SEVERITY_STYLE = {
    "critical": "bold white on red",
    "high": "bold white on dark_orange",
    "medium": "bold black on yellow",
    "low": "bold black on bright_cyan",
}

_SEVERITY_ICON = {
    "critical": "🔴",
    "high": "🟠",
    "medium": "🟡",
    "low": "🔵",
}


def _severity_pill(severity: str) -> Text:
    style = _SEVERITY_STYLE.get(severity, "")
    icon = _SEVERITY_ICON.get(severity, "")
    return Text(f" {icon} {severity.upper()} ", style=style)


def render(
    discovery: DiscoveryResult,
    result: AnalysisResult,
    gate: GateResult,
    *,
    console: Optional[Console] = None,
    show_findings: bool = True,
) -> None:
    """Print analysis results to the terminal using Rich."""
    console = console or Console(stderr=True)

    if not result.findings:
        console.print()
        console.print("[bold green]✅ No security findings.[/bold green]")
    elif show_findings:
        console.print()
        table = Table(
            title="mcpaudit Findings",
            show_lines=True,
            title_style="bold",
            border_style="dim",
        )
        table.add_column("Severity", justify="center", width=14)
        table.add_column("Category", style="cyan")
        table.add_column("Title", min_width=20)
        table.add_column("Location", style="magenta")

        for finding in sort_findings(result.findings):
            table.add_row(
                _severity_pill(finding.severity),
                finding.category,
                finding.title,
                finding.location,
            )
        console.print(table)

    _print_summary(console, discovery, result)

    console.print()
    if gate.passed:
        console.print("[bold green]✅ PASSED — findings within configured thresholds.[/bold green]")
    else:
        console.print("[bold red]❌ FAILED — severity thresholds exceeded:[/bold red]")
        for reason in gate.reasons:
            console.print(f"   [red]• {reason}[/red]")


def _print_summary(console: Console, discovery: DiscoveryResult, result: AnalysisResult) -> None:
    s = result.summary
    console.print()
    console.print(f"[dim]Classes:[/dim]       {discovery.total_groups}")
    console.print(f"[dim]Capabilities:[/dim]  {discovery.total_capabilities}")
    console.print(f"[dim]Findings:[/dim]      {s.total}")
    console.print(f"[dim]  Critical:[/dim]    {s.critical}")
    console.print(f"[dim]  High:[/dim]        {s.high}")
    console.print(f"[dim]  Medium:[/dim]      {s.medium}")
    console.print(f"[dim]  Low:[/dim]         {s.low}")
    console.print(f"[dim]Suppressed:[/dim]    {len(result.suppressed)}")
    console.print(f"[dim]Filtered:[/dim]      {result.filtered_out}")
