"""
minidt.cli - Command Line Interface
===================================

This module provides the command-line interface for minidt using Typer.

Architecture
------------
::

    app (main entry point)
    ├── init     - Create the config file and project folders
    └── compile  - Render a Jinja SQL model to plain SQL

Library functions raise :class:`~minidt.errors.MinidtError`; the commands
here catch it, print the message and exit with status 1.

Usage Examples
--------------
Initialize a project in the current directory:
    $ minidt init

Compile a model (output goes to compiled/orders.sql):
    $ minidt compile models/orders.sql.jinja

Compile as a table to an explicit location:
    $ minidt compile models/orders.sql.jinja out.sql --output-type table

See Also
--------
- config.py: Config discovery and project initialization
- compiler.py: Template compilation pipeline
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import questionary
import typer
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from minidt import __version__
from minidt.compiler import compile_template
from minidt.config import init_project, is_project_initialized
from minidt.errors import AlreadyInitializedError, MinidtError
from minidt.models import Config, OutputType


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="minidt",
    help="Compile Jinja-templated SQL models into plain SQL.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Console for rich output
console = Console()

OUTPUT_TYPE_HELP = "Output type, exposed to templates as output_type: " + "; ".join(
    f"{ot.value} = {ot.description.lower()}" for ot in OutputType
)


# =============================================================================
# Version Callback
# =============================================================================

def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(Panel(
            f"[bold green]minidt[/] version [cyan]{__version__}[/]\n\n"
            f"[dim]Jinja to SQL compiler[/]",
            border_style="green",
        ))
        raise typer.Exit()


# =============================================================================
# Interactive Prompts
# =============================================================================

def prompt_config() -> Config:
    """
    Interactively prompt for the values of a new config file.

    Each prompt defaults to the standard folder layout, so pressing enter
    throughout yields ``Config()``.

    Returns
    -------
    Config
        The configuration to write.
    """
    defaults = Config()
    questions = [
        ("macros_folder", "Macros folder:"),
        ("templates_folder", "Templates (models) folder:"),
        ("outputs_folder", "Compiled output folder:"),
        ("root_template", "Root template file name:"),
    ]

    answers: dict[str, str] = {}
    for key, message in questions:
        result = questionary.text(message, default=getattr(defaults, key)).ask()
        if result is None:
            raise typer.Abort()
        answers[key] = result

    try:
        return Config(**answers)
    except ValueError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)


# =============================================================================
# Main Application Callback
# =============================================================================

@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    [bold]minidt[/] - a tiny SQL templating toolkit.

    [bold]Quick Start:[/]

        minidt init
        minidt compile models/orders.sql.jinja
    """


# =============================================================================
# Init Command
# =============================================================================

@app.command()
def init(
    config_file: Annotated[
        Path | None,
        typer.Argument(
            help="Path to the config file [default: .miniDT.toml]",
            dir_okay=False,
        ),
    ] = None,
    interactive: Annotated[
        bool,
        typer.Option(
            "--interactive",
            "-i",
            help="Prompt for folder names instead of using the defaults",
        ),
    ] = False,
) -> None:
    """
    Initialize a new project.

    Writes a config file and creates the macros, models and compiled
    folders next to it. Refuses to run inside an existing project.

    [bold]Examples:[/]

        minidt init
        minidt init --interactive
        minidt init warehouse.toml
    """
    if config_file is None:
        existing = is_project_initialized()
        if existing is not None:
            rprint(f"[bold yellow]Warning:[/] {AlreadyInitializedError(existing)}")
            raise typer.Exit(1)

    config = prompt_config() if interactive else None

    try:
        result = init_project(config_file, config=config, verbose=True)
    except AlreadyInitializedError as e:
        rprint(f"[bold yellow]Warning:[/] {e}")
        raise typer.Exit(1)
    except MinidtError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    console.print()
    table = Table(title="Project Configuration", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in result.config.to_toml_dict().items():
        table.add_row(key, value)

    console.print(table)
    console.print()
    console.print(Panel(
        f"[bold green]Initialized a new project[/]\n\n"
        f"Config: {result.config_path}",
        title="[bold]Success[/]",
        border_style="green",
    ))


# =============================================================================
# Compile Command
# =============================================================================

@app.command("compile")
def compile_(
    file: Annotated[
        Path,
        typer.Argument(
            help="Path to the SQL template (or a folder with a root template) to compile",
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Argument(
            help='Path to store the output file [default: outputs folder, with "jinja" removed from the name]',
        ),
    ] = None,
    output_type: Annotated[
        OutputType,
        typer.Option(
            "--output-type",
            "-t",
            help=OUTPUT_TYPE_HELP,
            case_sensitive=False,
        ),
    ] = OutputType.VIEW,
) -> None:
    """
    Compile SQL to remove Jinja.

    [bold]Examples:[/]

        minidt compile models/orders.sql.jinja
        minidt compile models/marts
        minidt compile models/orders.sql.jinja build/orders.sql -t table
    """
    try:
        result = compile_template(file, output, output_type=output_type, verbose=True)
    except MinidtError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Compiled SQL saved to[/] {result.output_path}")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    app()
