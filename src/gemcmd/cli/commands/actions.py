# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.07
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/cli/commands/actions.py

"""
Action command handlers - state-changing commands.

Handles: add, edit, delete, rename, backup, restore, export, import, open
"""

from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape

from gemcmd.cli.utils import (
    build_conflict_resolver, ensure_store_exists, prompt_non_empty
)
from gemcmd.core.backup import SnapshotStatus
from gemcmd.core.interchange import find_import_candidates, read_import_file
from gemcmd.core.merge import ConflictPolicy
from gemcmd.core.store import CommandStore
from gemcmd.system.display import (
    display_import_result, display_item_outcome, display_merge_result
)


def add(
    console: Console,
    store: CommandStore,
    name: str,
    description: Optional[str] = None,
    prompt: Optional[str] = None,
    force: bool = False,
    quiet: bool = False
) -> dict[str, Any]:
    """Create a command, asking for anything not given on the command line.

    Args:
        console: Rich console for output
        store: Target command store
        name: Command name, e.g. ``git/commit``
        description: One-line description; prompted for when missing
        prompt: Prompt body; prompted for when missing
        force: Overwrite an existing command without asking
        quiet: Suppress output

    Returns:
        Add result for JSON output
    """
    description = prompt_non_empty("Description", description)
    prompt = prompt_non_empty("Prompt", prompt)

    overwrite = force
    if not overwrite and store.contains(name):
        overwrite = typer.confirm(
            f"Command '{name}' already exists. Do you want to overwrite it?", default=False
        )
        if not overwrite:
            if not quiet:
                console.print("[yellow]Add command cancelled.[/yellow]")
            return {'operation': 'add', 'name': name, 'written': False}

    path = store.add(name, description, prompt, overwrite=overwrite)
    if not quiet:
        console.print(f"[green]✓[/green] Command '{escape(name)}' saved to {escape(str(path))}")
    return {'operation': 'add', 'name': name, 'path': str(path), 'written': True}


def edit(
    console: Console,
    store: CommandStore,
    name: str,
    description: Optional[str] = None,
    prompt: Optional[str] = None,
    quiet: bool = False
) -> dict[str, Any]:
    """Rewrite an existing command; unchanged fields default to their current values."""
    record = store.get(name)

    if description is None:
        description = typer.prompt("Description", default=record.description)
    if prompt is None:
        prompt = typer.prompt("Prompt", default=record.prompt)

    path = store.add(name, description, prompt, overwrite=True)
    if not quiet:
        console.print(f"[green]✓[/green] Command '{escape(name)}' updated")
    return {'operation': 'edit', 'name': name, 'path': str(path)}


def delete(console: Console, store: CommandStore, name: str, yes: bool = False, quiet: bool = False) -> dict[str, Any]:
    ensure_store_exists(console, store, "No commands to delete.")

    if not yes and not typer.confirm(f"Are you sure you want to delete {name}?", default=False):
        if not quiet:
            console.print("[yellow]Delete cancelled.[/yellow]")
        return {'operation': 'delete', 'name': name, 'deleted': False}

    result = store.delete(name)
    if not quiet:
        console.print(f"[green]✓[/green] Command '{escape(name)}' deleted")
        for directory in result.removed_dirs:
            console.print(f"[dim]Removed empty directory {escape(str(directory))}[/dim]")
    return {
        'operation': 'delete',
        'name': name,
        'deleted': True,
        'removed_dirs': [str(d) for d in result.removed_dirs]
    }


def rename(
    console: Console,
    store: CommandStore,
    old_name: str,
    new_name: str,
    force: bool = False,
    quiet: bool = False
) -> dict[str, Any]:
    path = store.rename(old_name, new_name, overwrite=force)
    if not quiet:
        console.print(f"[green]✓[/green] Renamed '{escape(old_name)}' to '{escape(new_name)}'")
    return {'operation': 'rename', 'old_name': old_name, 'new_name': new_name, 'path': str(path)}


def backup(console: Console, store: CommandStore, quiet: bool = False) -> dict[str, Any]:
    """Snapshot the commands directory, replacing any previous backup."""
    result = store.backup()

    if not quiet:
        if result.status is SnapshotStatus.NOTHING_TO_BACK_UP:
            console.print("[yellow]No commands directory to backup.[/yellow]")
        else:
            if result.status is SnapshotStatus.REPLACED:
                console.print("[dim]Replaced existing backup.[/dim]")
            console.print(f"[green]✓[/green] Successfully created backup at: {escape(str(result.backup_dir))}")

    return {'operation': 'backup', 'status': result.status.value, 'backup_dir': str(result.backup_dir)}


def restore(
    console: Console,
    store: CommandStore,
    name: Optional[str] = None,
    restore_all: bool = False,
    yes: bool = False,
    on_conflict: Optional[ConflictPolicy] = None,
    config_default: Optional[ConflictPolicy] = None,
    quiet: bool = False
) -> dict[str, Any]:
    """Merge the backup snapshot back into the commands directory.

    With --all every backed-up file is copied over the live tree. Otherwise a
    single command is restored, asking how to handle an existing one.
    """
    if not store.has_backup():
        if not quiet:
            console.print("[yellow]No backup found to restore from.[/yellow]")
        return {'operation': 'restore', 'restored': 0}

    if restore_all:
        if not yes and not typer.confirm(
            "Are you sure you want to merge ALL commands from backup? "
            "This will add new commands and overwrite existing ones.",
            default=False
        ):
            if not quiet:
                console.print("[yellow]Restore cancelled.[/yellow]")
            return {'operation': 'restore', 'restored': 0}

        result = store.restore_all()
        if not quiet:
            display_merge_result(console, result)
        return {
            'operation': 'restore',
            'restored': result.copied,
            'errors': [str(e) for e in result.errors]
        }

    if name is None:
        names = sorted(store.backup_names())
        if not names:
            if not quiet:
                console.print("[yellow]No commands found in backup to restore.[/yellow]")
            return {'operation': 'restore', 'restored': 0}
        console.print("Commands in backup:")
        for backup_name in names:
            console.print(f"  {escape(backup_name)}", highlight=False)
        name = typer.prompt("Which command would you like to restore from backup?")

    if on_conflict is ConflictPolicy.RENAME:
        raise typer.BadParameter("restore only supports overwrite or skip", param_hint="--on-conflict")
    # Restoring one command only ever overwrites or skips
    if config_default is ConflictPolicy.RENAME:
        config_default = None
    resolver = build_conflict_resolver(on_conflict, config_default, allow_rename=False)

    outcome = store.restore_one(name, resolver)
    if not quiet:
        display_item_outcome(console, outcome)
    return {
        'operation': 'restore',
        'name': name,
        'status': outcome.status.value,
        'restored': 1 if outcome.written else 0
    }


def export(
    console: Console,
    store: CommandStore,
    file_name: str,
    directory: Path = Path("."),
    quiet: bool = False
) -> dict[str, Any]:
    """Write all commands to a JSON file in directory."""
    ensure_store_exists(console, store, "No commands directory found to export.")

    result = store.export_json(Path(directory) / file_name)

    if not quiet:
        for error in result.errors:
            console.print(f"[red]✗[/red] {escape(str(error))}")
        if result.path is None:
            console.print("[yellow]No commands found to export.[/yellow]")
        else:
            console.print(
                f"[green]✓[/green] Successfully exported {result.count} commands to {escape(str(result.path))}"
            )

    return {
        'operation': 'export',
        'path': str(result.path) if result.path else None,
        'count': result.count,
        'errors': [str(e) for e in result.errors]
    }


def _choose_import_file(console: Console, directory: Path) -> Optional[Path]:
    candidates = find_import_candidates(directory)

    if not candidates:
        console.print("[yellow]No JSON files found.[/yellow]")
    else:
        console.print("Select the JSON file to import:")
        for i, candidate in enumerate(candidates, 1):
            console.print(f"  {i}. {escape(candidate.name)}", highlight=False)

    answer = typer.prompt(
        "File number, or a path to the JSON file (leave blank to cancel)",
        default="",
        show_default=False
    ).strip()
    if not answer:
        return None
    if answer.isdigit() and 1 <= int(answer) <= len(candidates):
        return candidates[int(answer) - 1]
    return Path(answer).expanduser()


def import_(
    console: Console,
    store: CommandStore,
    file: Optional[Path] = None,
    directory: Path = Path("."),
    on_conflict: Optional[ConflictPolicy] = None,
    config_default: Optional[ConflictPolicy] = None,
    quiet: bool = False
) -> dict[str, Any]:
    """Import commands from a JSON export file.

    Args:
        console: Rich console for output
        store: Target command store
        file: Export file; when missing, one is chosen from directory
        directory: Where to look for export files
        on_conflict: Batch answer for every existing command; prompts when None
        config_default: Configured policy used when on_conflict is None
        quiet: Suppress output

    Returns:
        Import result for JSON output
    """
    if file is None:
        file = _choose_import_file(console, Path(directory))
        if file is None:
            if not quiet:
                console.print("[yellow]Import cancelled.[/yellow]")
            return {'operation': 'import', 'imported': 0}

    records = read_import_file(file)
    if not records:
        if not quiet:
            console.print("[yellow]No commands found in the JSON file to import.[/yellow]")
        return {'operation': 'import', 'file': str(file), 'imported': 0}

    resolver = build_conflict_resolver(on_conflict, config_default, allow_rename=True)
    result = store.import_records(records, resolver)

    if not quiet:
        display_import_result(console, result)
    return {
        'operation': 'import',
        'file': str(file),
        'imported': result.imported_count,
        'outcomes': {o.name: o.status.value for o in result.outcomes}
    }


def open_folder(console: Console, store: CommandStore, quiet: bool = False) -> dict[str, Any]:
    """Open the commands directory in the platform file manager."""
    ensure_store_exists(console, store, "Commands directory does not exist yet. Add a command first to create it.")

    status = typer.launch(str(store.root))
    if status != 0:
        console.print(f"[red]✗[/red] Error opening directory: {escape(str(store.root))}")
        console.print("[yellow]You may need to open it manually.[/yellow]")
        raise typer.Exit(1)

    if not quiet:
        console.print(f"[green]✓[/green] Opened the commands directory at: {escape(str(store.root))}")
    return {'operation': 'open', 'path': str(store.root)}
