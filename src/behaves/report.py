"""Failure reporting.

Renders conformance failures for humans (rich table with recovery hints)
or for machines (JSON list of error dicts).
"""

from __future__ import annotations

import json
import sys
from collections.abc import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from behaves.errors import BehavesError, ConformanceError, NoDeclarationError


def format_failures_json(errors: Sequence[BehavesError]) -> str:
    """Format failures as a JSON array of error dicts."""
    records = []
    for error in errors:
        record = error.to_dict()
        if error.cause:
            record["cause"] = str(error.cause)
        records.append(record)
    return json.dumps(records, indent=2)


def _row(error: BehavesError) -> tuple[str, str, str, str, str]:
    if isinstance(error, ConformanceError):
        missing = ", ".join(error.unimplemented)
        wrong = ", ".join(error.wrong_scope) or "-"
        return (
            error.context["conformer"],
            error.context["provider"],
            error.scope.value,
            missing,
            wrong,
        )
    if isinstance(error, NoDeclarationError):
        return ("-", error.context["provider"], error.context["scope"], "no behaviors declared", "-")
    return ("-", "-", "-", error.message, "-")


def failures_table(errors: Sequence[BehavesError]) -> Table:
    table = Table(title="Conformance failures", title_style="bold red", show_lines=False)
    table.add_column("Conformer", style="bold")
    table.add_column("Behaves like")
    table.add_column("Scope")
    table.add_column("Unimplemented", style="red")
    table.add_column("Wrong scope", style="yellow")
    for error in errors:
        table.add_row(*_row(error))
    return table


def render_failures(errors: Sequence[BehavesError], console: Console | None = None) -> None:
    """Print failures as a table followed by deduplicated recovery hints."""
    console = console or Console(stderr=True)
    if not errors:
        console.print("[green]✓ All conformance checks passed[/green]")
        return

    console.print(failures_table(errors))

    hints: list[str] = []
    for error in errors:
        for hint in error.recovery_hints:
            if hint not in hints:
                hints.append(hint)

    if hints:
        console.print("\n[bold]What you can do:[/]")
        for i, hint in enumerate(hints, 1):
            console.print(Text(f"  {i}. {hint}"))


def emit_failures(errors: Sequence[BehavesError], report_format: str = "text") -> None:
    """Write failures to stderr in the configured format."""
    if report_format == "json":
        print(format_failures_json(errors), file=sys.stderr)
        return
    render_failures(errors, Console(stderr=True))
