"""Rich output formatting helpers for the ProgressGate CLI.

Provides consistent, severity-colored terminal output for corpus reports,
prerequisite results, action verdicts and graph statistics.

Severity Color Mapping:
    ERROR = bold red, WARNING = yellow
"""

from __future__ import annotations

import json
from typing import Any

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from progressgate.core.analyzer import CorpusReport, Severity
from progressgate.core.graph import GraphStats
from progressgate.core.resolver import PrerequisiteResult
from progressgate.core.validation import ActionValidationResult, DependencyInfo

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
}

console = Console()


def severity_style(severity: Severity) -> str:
    """Return the Rich style string for a given severity level."""
    return _SEVERITY_STYLES.get(severity, "white")


def echo_json(payload: Any) -> None:
    """Print a payload as indented JSON."""
    click.echo(json.dumps(payload, indent=2))


def report_error(message: str, output_format: str) -> None:
    """Print a load error in the selected format."""
    if output_format == "json":
        echo_json({"error": message})
    else:
        click.echo(f"Error: {message}")


def _verdict(ok: bool, yes: str, no: str) -> Text:
    return Text(yes, style="bold green") if ok else Text(no, style="bold red")


def print_corpus_report(report: CorpusReport, entity_count: int) -> None:
    """Print a findings table and summary for a corpus report.

    Args:
        report: The corpus validation report.
        entity_count: Number of entities validated.
    """
    if report.findings:
        table = Table(title="Corpus Findings", show_header=True, header_style="bold")
        table.add_column("Severity", justify="center")
        table.add_column("Kind", style="dim")
        table.add_column("Entity", style="bold")
        table.add_column("Message")
        for finding in report.findings:
            table.add_row(
                Text(finding.severity.name, style=severity_style(finding.severity)),
                finding.kind.value,
                finding.entity_id,
                finding.message,
            )
        console.print(table)
    else:
        console.print("[dim]No findings.[/dim]")

    parts = [f"[bold]{entity_count}[/bold] entities validated"]
    if report.errors:
        parts.append(f"[red]{len(report.errors)} errors[/red]")
    if report.warnings:
        parts.append(f"[yellow]{len(report.warnings)} warnings[/yellow]")
    console.print(" | ".join(parts))
    console.print(_verdict(report.valid, "VALID", "INVALID"))


def print_prerequisite_result(entity_id: str, result: PrerequisiteResult) -> None:
    """Print the prerequisite verdict for one entity."""
    header = Text.assemble(
        ("Entity: ", "bold"), (entity_id, ""),
        ("  Status: ", "bold"), _verdict(result.satisfied, "SATISFIED", "BLOCKED"),
    )
    console.print(Panel(header, title="Prerequisite Check"))
    if result.satisfied:
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("Missing", style="bold")
    table.add_column("Reason")
    for token, reason in zip(result.missing_tokens, result.reasons):
        table.add_row(token, reason)
    console.print(table)


def print_action_result(action_id: str, result: ActionValidationResult) -> None:
    """Print the verdict and categorised errors for one action attempt."""
    header = Text.assemble(
        ("Action: ", "bold"), (action_id, ""),
        ("  Status: ", "bold"), _verdict(result.can_perform, "ALLOWED", "DENIED"),
    )
    console.print(Panel(header, title="Action Validation"))
    if result.issues:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Category", style="dim")
        table.add_column("Error")
        for issue in result.issues:
            table.add_row(issue.category.value, issue.message)
        console.print(table)
    for warning in result.warnings:
        console.print(f"[yellow]warning:[/yellow] {warning}")


def print_graph_stats(stats: GraphStats) -> None:
    """Print dependency graph statistics."""
    table = Table(title="Dependency Graph", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Entities", str(stats.total_nodes))
    table.add_row("Dependencies", str(stats.total_dependencies))
    table.add_row("Max depth", "-" if stats.max_depth is None else str(stats.max_depth))
    table.add_row("Roots", str(stats.items_without_prereqs))
    cycle_style = "bold red" if stats.cycles else ""
    table.add_row("Cycles", Text(str(stats.cycles), style=cycle_style))
    table.add_row("Without depth", str(stats.items_without_depth))
    console.print(table)


def print_dependency_info(info: DependencyInfo) -> None:
    """Print one entity's dependency chain, dependents and cycles."""
    depth = "none (cycle)" if info.depth is None else str(info.depth)
    console.print(Panel(
        Text.assemble(("Entity: ", "bold"), (info.entity_id, ""), ("  Depth: ", "bold"), depth),
        title="Dependency Info",
    ))
    console.print(f"[bold]Requires:[/bold] {', '.join(info.dependencies) or '-'}")
    console.print(f"[bold]Required by:[/bold] {', '.join(info.dependents) or '-'}")
    for cycle in info.cycles:
        console.print(f"[bold red]Cycle:[/bold red] {' -> '.join(cycle.path)}")
