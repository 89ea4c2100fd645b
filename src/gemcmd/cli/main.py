# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.10
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/cli/main.py

"""
CLI dispatcher: parses arguments and routes each command to its handler.

Handlers live in gemcmd.cli.commands and do the console work; this module
only loads the store, calls the handler and turns store errors into a
red message plus exit code 1.
"""

# Standard library imports
from pathlib import Path
from typing import Any, Callable, Optional

# Third-party imports
import typer
from rich.console import Console

# Local gemcmd imports
from gemcmd import __version__
from gemcmd.cli.commands import actions as action_commands
from gemcmd.cli.commands import info as info_commands
from gemcmd.cli.utils import handle_operation_error, load_config_with_console, load_store_with_console
from gemcmd.core.merge import ConflictPolicy
from gemcmd.core.store import CommandStore
from gemcmd.system.exceptions import CommandStoreError
from gemcmd.system.logging_setup import setup_logging

# Initialize Typer app
app = typer.Typer(
    help="""gemcmd - Manage Gemini CLI custom commands

[bold blue]Browse:[/bold blue] list, show, open
[bold green]Edit:[/bold green] add, edit, rename, delete
[bold magenta]Safety:[/bold magenta] backup, restore, export, import
[bold red]Validation:[/bold red] validate-config
""",
    rich_markup_mode="rich",
    no_args_is_help=True
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"gemcmd version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging")
) -> None:
    """gemcmd - Manage the custom slash commands of the Gemini CLI."""
    setup_logging(debug=debug)


def _run(operation: str, handler: Callable[[], Any]) -> Any:
    try:
        return handler()
    except CommandStoreError as e:
        handle_operation_error(console, operation, e)


# =============================================================================
# INFO COMMANDS - Read-only
# =============================================================================

@app.command(name="list")
def list_command(
    names: bool = typer.Option(False, "--names", help="Print command names only"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show prompt bodies"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output")
) -> Any:
    """[bold blue]Browse[/bold blue]: List all commands with their descriptions."""
    store = load_store_with_console(console, verbose=verbose)
    return _run("listing commands", lambda: info_commands.list_commands(
        console, store, names_only=names, verbose=verbose, quiet=quiet
    ))


@app.command()
def show(name: str = typer.Argument(..., help="Command name, e.g. git/commit")) -> Any:
    """[bold blue]Browse[/bold blue]: Show one command's description and prompt."""
    store = load_store_with_console(console)
    return _run("reading command", lambda: info_commands.show(console, store, name))


@app.command(name="validate-config")
def validate_config(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show the configuration summary")
) -> Any:
    """[bold red]Validation[/bold red]: Check the gemcmd configuration."""
    config = load_config_with_console(console, verbose=verbose)
    result = info_commands.validate_config(console, config, verbose=verbose)
    if not result['valid']:
        raise typer.Exit(1)
    return result


# =============================================================================
# ACTION COMMANDS - State-changing
# =============================================================================

@app.command()
def add(
    name: str = typer.Argument(..., help="Command name, e.g. git/commit"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="One-line description"),
    prompt: Optional[str] = typer.Option(None, "--prompt", "-p", help="Prompt body"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing command"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output")
) -> Any:
    """[bold green]Edit[/bold green]: Add a new command."""
    store = load_store_with_console(console)
    return _run("adding command", lambda: action_commands.add(
        console, store, name, description=description, prompt=prompt, force=force, quiet=quiet
    ))


@app.command()
def edit(
    name: str = typer.Argument(..., help="Command name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    prompt: Optional[str] = typer.Option(None, "--prompt", "-p", help="New prompt body"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output")
) -> Any:
    """[bold green]Edit[/bold green]: Change an existing command."""
    store = load_store_with_console(console)
    return _run("editing command", lambda: action_commands.edit(
        console, store, name, description=description, prompt=prompt, quiet=quiet
    ))


@app.command()
def delete(
    name: str = typer.Argument(..., help="Command name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output")
) -> Any:
    """[bold green]Edit[/bold green]: Delete a command and any directories it leaves empty."""
    store = load_store_with_console(console)
    return _run("deleting command", lambda: action_commands.delete(console, store, name, yes=yes, quiet=quiet))


@app.command()
def rename(
    old_name: str = typer.Argument(..., help="Current command name"),
    new_name: str = typer.Argument(..., help="New command name"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing target"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output")
) -> Any:
    """[bold green]Edit[/bold green]: Rename or move a command."""
    store = load_store_with_console(console)
    return _run("renaming command", lambda: action_commands.rename(
        console, store, old_name, new_name, force=force, quiet=quiet
    ))


@app.command()
def backup(quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output")) -> Any:
    """[bold magenta]Safety[/bold magenta]: Snapshot all commands, replacing the previous backup."""
    store = load_store_with_console(console)
    return _run("creating backup", lambda: action_commands.backup(console, store, quiet=quiet))


@app.command()
def restore(
    name: Optional[str] = typer.Argument(None, help="Single command to restore"),
    restore_all: bool = typer.Option(False, "--all", help="Merge every command from the backup"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    on_conflict: Optional[ConflictPolicy] = typer.Option(
        None, "--on-conflict", case_sensitive=False,
        help="What to do when the command exists (overwrite or skip)"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output")
) -> Any:
    """[bold magenta]Safety[/bold magenta]: Restore commands from the backup."""
    config = load_config_with_console(console)
    store = CommandStore.from_config(config)
    return _run("restoring commands", lambda: action_commands.restore(
        console, store, name=name, restore_all=restore_all, yes=yes,
        on_conflict=on_conflict, config_default=config.default_conflict_policy, quiet=quiet
    ))


@app.command()
def export(
    file: Optional[str] = typer.Argument(None, help="Export file name (.json is appended if missing)"),
    directory: Path = typer.Option(Path("."), "--dir", help="Directory to write the export file to"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output")
) -> Any:
    """[bold magenta]Safety[/bold magenta]: Export all commands to a JSON file."""
    config = load_config_with_console(console)
    store = CommandStore.from_config(config)
    file_name = file or config.export_name
    return _run("exporting commands", lambda: action_commands.export(
        console, store, file_name, directory=directory, quiet=quiet
    ))


@app.command(name="import")
def import_command(
    file: Optional[Path] = typer.Argument(None, help="Export file to import"),
    directory: Path = typer.Option(Path("."), "--dir", help="Directory to pick an export file from"),
    on_conflict: Optional[ConflictPolicy] = typer.Option(
        None, "--on-conflict", case_sensitive=False,
        help="What to do when a command exists (overwrite, skip or rename)"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output")
) -> Any:
    """[bold magenta]Safety[/bold magenta]: Import commands from a JSON export file."""
    config = load_config_with_console(console)
    store = CommandStore.from_config(config)
    return _run("importing commands", lambda: action_commands.import_(
        console, store, file=file, directory=directory, on_conflict=on_conflict,
        config_default=config.default_conflict_policy, quiet=quiet
    ))


@app.command(name="open")
def open_command(quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output")) -> Any:
    """[bold blue]Browse[/bold blue]: Open the commands directory in the file manager."""
    store = load_store_with_console(console)
    return _run("opening commands directory", lambda: action_commands.open_folder(console, store, quiet=quiet))


def cli_main() -> None:
    """Entry point for the gemcmd console script."""
    app()


if __name__ == "__main__":
    cli_main()
