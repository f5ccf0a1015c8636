"""Rendering of a ValidationResult as a severity-grouped report."""

from rich.markup import escape

from marketplace import cli_logger
from marketplace.validation import Finding, ValidationResult

WIDTH = 50

_SECTIONS = (
    ("errors", "red", "✗", "Errors"),
    ("warnings", "yellow", "⚠", "Warnings"),
    ("info", "blue", "ℹ", "Info"),
)


def render_report(result: ValidationResult) -> list[str]:
    """Render the result as rich-markup lines.

    Sections appear in a fixed order (errors, warnings, info) and empty
    sections are omitted. Finding text is escaped so that regex fragments
    and paths are never read as markup.
    """
    lines = ["", "[bold]Validation Results[/bold]", "=" * WIDTH]

    for attr, color, symbol, title in _SECTIONS:
        findings: list[Finding] = getattr(result, attr)
        if not findings:
            continue
        lines.append("")
        lines.append(f"[bold {color}]{title} ({len(findings)}):[/bold {color}]")
        for finding in findings:
            lines.append(f"[{color}]  {symbol} {escape(finding.message)}[/{color}]")
            if finding.file and attr != "info":
                lines.append(f"[dim]    File: {escape(finding.file)}[/dim]")

    lines.append("")
    lines.append("=" * WIDTH)
    if result.aborted:
        lines.append("[bold red]✗ Validation ABORTED[/bold red]")
    elif result.is_valid:
        lines.append("[bold green]✓ Validation PASSED[/bold green]")
    else:
        lines.append("[bold red]✗ Validation FAILED[/bold red]")
    return lines


def print_report(result: ValidationResult) -> None:
    """Print the rendered report to the console."""
    for line in render_report(result):
        cli_logger.info(line)
