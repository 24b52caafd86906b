"""behaves CLI.

\b
Examples:
    behaves check myapp.animals myapp.dogs
    behaves check myapp.animals --json
    behaves show myapp.animals:Animal
"""

from __future__ import annotations

import importlib
import json
import sys

import click
from rich.console import Console
from rich.table import Table

from behaves import __version__
from behaves.behaviors import get_behaviors
from behaves.errors import BehavesError, ErrorCode
from behaves.logging import configure_logging
from behaves.report import format_failures_json, render_failures
from behaves.types import SCOPE_ORDER

console = Console()


def _import(module: str) -> object:
    try:
        return importlib.import_module(module)
    except ImportError as e:
        raise BehavesError(
            code=ErrorCode.MODULE_IMPORT_FAILED,
            context={"module": module, "detail": str(e)},
            cause=e,
        ) from e


def _resolve(target: str) -> type:
    module_name, _, attr = target.partition(":")
    if not attr:
        raise click.BadParameter(f"expected MODULE:CLASS, got {target!r}", param_hint="TARGET")
    module = _import(module_name)
    try:
        return getattr(module, attr)
    except AttributeError as e:
        raise click.BadParameter(f"{module_name} has no attribute {attr!r}", param_hint="TARGET") from e


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(__version__, prog_name="behaves")
def main(debug: bool) -> None:
    """Verify that classes behave like the providers they claim to."""
    configure_logging(debug=debug)


@main.command("check")
@click.argument("modules", nargs=-1, required=True)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.option("--path", "-p", "paths", multiple=True, type=click.Path(exists=True, file_okay=False),
              default=(".",), show_default=True, help="Directory to import modules from")
def check_cmd(modules: tuple[str, ...], json_output: bool, paths: tuple[str, ...]) -> None:
    """Import MODULES and run every conformance check they queued.

    Exits with status 1 if any check fails.
    """
    for path in reversed(paths):
        if path not in sys.path:
            sys.path.insert(0, path)
    importlib.invalidate_caches()

    behaviors = get_behaviors()
    errors: list[BehavesError] = []

    for module in modules:
        try:
            _import(module)
        except BehavesError as e:
            # Inline conformance blocks raise while their module is imported.
            errors.append(e)

    checked = len(behaviors.pending)
    errors.extend(behaviors.finalize(raise_errors=False))

    if json_output:
        payload = {
            "modules": list(modules),
            "checked": checked,
            "passed": not errors,
            "failures": json.loads(format_failures_json(errors)),
        }
        click.echo(json.dumps(payload, indent=2))
    else:
        console.print(f"[dim]Checked {checked} deferred conformance request(s) in {len(modules)} module(s)[/dim]")
        render_failures(errors, console)

    if errors:
        sys.exit(1)


@main.command("show")
@click.argument("target")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
def show_cmd(target: str, json_output: bool) -> None:
    """Show the behaviors declared by TARGET (MODULE:CLASS)."""
    registry = get_behaviors().registry

    try:
        provider = _resolve(target)
        requirements = {scope: registry.requirements_for(provider, scope) for scope in SCOPE_ORDER}
    except BehavesError as e:
        render_failures([e], Console(stderr=True))
        sys.exit(1)

    has_defaults = registry.defaults_for(provider) is not None

    if json_output:
        payload = {scope.value: list(names) for scope, names in requirements.items()}
        payload["defaults"] = has_defaults
        click.echo(json.dumps(payload, indent=2))
        return

    table = Table(title=f"{provider.__name__} behaviors")
    table.add_column("Scope", style="bold")
    table.add_column("Required")
    for scope, names in requirements.items():
        table.add_row(scope.value, ", ".join(names) or "[dim]none[/dim]")
    console.print(table)
    console.print(f"Default behaviors: {'[green]yes[/green]' if has_defaults else '[dim]no[/dim]'}")


if __name__ == "__main__":
    main()
