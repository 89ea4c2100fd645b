# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.01
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/cli/utils.py

"""
CLI utility functions shared by the gemcmd commands.

This module provides standardized functions for:
- Configuration loading and store construction
- Interactive answers the core asks for as parameters (conflict policy,
  non-empty text)
- Error handling with typer exits

All functions handle console output and typer exits consistently.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from gemcmd.config.manager import StoreConfig, load_store_config
from gemcmd.core.merge import ConflictPolicy, ConflictResolution, ConflictResolver, always
from gemcmd.core.store import CommandStore
from gemcmd.system.exceptions import ConfigError


def load_config_with_console(console: Console, verbose: bool = False) -> StoreConfig:
    """
    Load gemcmd configuration with proper error handling and console output.

    Raises:
        typer.Exit: If configuration loading fails
    """
    if verbose:
        console.print("[dim]Loading configuration...[/dim]")

    try:
        return load_store_config()
    except ConfigError as e:
        console.print(f"[red]✗[/red] Configuration error: {escape(str(e))}")
        raise typer.Exit(1)


def load_store_with_console(console: Console, verbose: bool = False) -> CommandStore:
    """Load configuration and build the CommandStore it describes."""
    config = load_config_with_console(console, verbose=verbose)
    store = CommandStore.from_config(config)
    if verbose:
        console.print(f"[dim]Commands directory: {store.root}[/dim]")
    return store


def ensure_store_exists(console: Console, store: CommandStore, message: str = "No commands directory found.") -> None:
    """
    Check that the commands directory exists.

    Raises:
        typer.Exit: If it does not
    """
    if not store.exists():
        console.print(f"[yellow]{message}[/yellow]")
        raise typer.Exit(0)


def prompt_non_empty(label: str, value: Optional[str] = None) -> str:
    """Return value, or keep prompting until the user types something non-blank."""
    while not value or not value.strip():
        if value is not None:
            typer.echo(f"{label} cannot be empty.")
        value = typer.prompt(label, default="", show_default=False)
    return value


def prompt_conflict_resolution(name: str, allow_rename: bool = True) -> ConflictResolution:
    """Ask what to do about an existing command."""
    choices = [ConflictPolicy.OVERWRITE, ConflictPolicy.SKIP]
    if allow_rename:
        choices.append(ConflictPolicy.RENAME)
    labels = "/".join(choice.value for choice in choices)

    while True:
        answer = typer.prompt(
            f"Command '{name}' already exists. What would you like to do? [{labels}]",
            default=ConflictPolicy.SKIP.value,
            show_default=True
        ).strip().lower()
        try:
            policy = ConflictPolicy(answer)
        except ValueError:
            typer.echo(f"Please answer one of: {labels}")
            continue
        if policy not in choices:
            typer.echo(f"Please answer one of: {labels}")
            continue
        break

    if policy is ConflictPolicy.RENAME:
        new_name = typer.prompt(f"Enter new name for '{name}'", default=f"{name}_imported")
        return ConflictResolution(policy, new_name)
    return ConflictResolution(policy)


def build_conflict_resolver(
    on_conflict: Optional[ConflictPolicy],
    config_default: Optional[ConflictPolicy] = None,
    allow_rename: bool = True
) -> ConflictResolver:
    """Pick a batch policy from the flag or config, falling back to prompting."""
    policy = on_conflict or config_default
    if policy is ConflictPolicy.RENAME:
        return lambda name: prompt_conflict_resolution(name, allow_rename=allow_rename)
    if policy is not None:
        return always(policy)
    return lambda name: prompt_conflict_resolution(name, allow_rename=allow_rename)


def handle_operation_error(console: Console, operation: str, error: Exception) -> None:
    """Handle operation errors with consistent formatting."""
    console.print(f"[red]✗[/red] Error {operation}: {escape(str(error))}")
    raise typer.Exit(1)
