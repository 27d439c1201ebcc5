"""CLI application for depalign."""

import asyncio
import json
import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from core.errors import DepalignError
from core.mismatch import Mismatches
from core.reconcile import Reconciler, always_confirm, prompt_confirm

console = Console()


def setup_logging(verbose: bool) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def format_table_output(mismatches: Mismatches) -> Table:
    """Format mismatches as a table."""
    table = Table(title="Mismatched dependencies")
    table.add_column("Package")
    table.add_column("Section")
    table.add_column("Project", style="red")
    table.add_column("Required", style="green")

    for name, record in sorted(mismatches.items()):
        table.add_row(name, record.type, record.project, record.required)

    return table


def format_json_output(mismatches: Mismatches) -> str:
    """Format JSON output."""
    return json.dumps(
        {"mismatches": {name: record.to_dict() for name, record in mismatches.items()}},
        indent=2,
    )


app = typer.Typer(
    name="depalign",
    help="depalign - Keep a generated project's dependencies aligned with the CLI",
    add_completion=False,
)

ProjectOption = typer.Option(".", "--project", "-p", envvar="DEPALIGN_PROJECT", help="Project directory holding package.json")
ToolManifestOption = typer.Option(None, "--tool-manifest", envvar="DEPALIGN_TOOL_MANIFEST", help="Manifest of the CLI")
TemplateManifestOption = typer.Option(None, "--template-manifest", envvar="DEPALIGN_TEMPLATE_MANIFEST", help="Manifest of new projects")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Show progress logs")


@app.command()
def check(
    project: str = ProjectOption,
    tool_manifest: str | None = ToolManifestOption,
    template_manifest: str | None = TemplateManifestOption,
    format_type: str = typer.Option("table", "--format", help="Output format: table or json"),
    verbose: bool = VerboseOption,
) -> None:
    """Report mismatched dependency versions without changing anything."""
    setup_logging(verbose)

    try:
        reconciler = Reconciler(
            project_dir=project,
            tool_manifest=tool_manifest,
            template_manifest=template_manifest,
        )
        mismatches = reconciler.check()

        if format_type == "json":
            typer.echo(format_json_output(mismatches))
        elif mismatches:
            console.print(format_table_output(mismatches))
        else:
            console.print("Project dependencies match the CLI")

        if mismatches:
            raise typer.Exit(2)  # Mismatches found

    except typer.Exit:
        raise
    except DepalignError as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)


@app.command()
def fix(
    project: str = ProjectOption,
    tool_manifest: str | None = ToolManifestOption,
    template_manifest: str | None = TemplateManifestOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Update without asking"),
    install_command: str | None = typer.Option(
        None, "--install-command", envvar="DEPALIGN_INSTALL_COMMAND", help="Command used to reinstall dependencies"
    ),
    verbose: bool = VerboseOption,
) -> None:
    """Update package.json to the required versions and reinstall."""
    setup_logging(verbose)

    try:
        reconciler = Reconciler(
            project_dir=project,
            tool_manifest=tool_manifest,
            template_manifest=template_manifest,
            confirm=always_confirm if yes else prompt_confirm,
            install_command=install_command,
        )
        result = asyncio.run(reconciler.reconcile())
        result.raise_for_failure()

        if result.outcome == "up_to_date":
            console.print("Project dependencies match the CLI")
        elif result.outcome == "declined":
            console.print("Skipped dependency update")
        else:
            console.print(f"Updated {len(result.mismatches)} dependencies in {reconciler.project_manifest}")

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
