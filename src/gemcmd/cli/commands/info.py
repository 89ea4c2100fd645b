# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.07
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/cli/commands/info.py

"""
Info command handlers - read-only information commands.

Handles: list, show, validate-config
"""

from typing import Any

from rich.console import Console

from gemcmd.config.manager import StoreConfig, validate_config as check_config
from gemcmd.core.store import CommandStore
from gemcmd.system.display import (
    display_command, display_command_list, display_command_names,
    display_config_summary, display_config_validation_results
)


def list_commands(
    console: Console,
    store: CommandStore,
    names_only: bool = False,
    verbose: bool = False,
    quiet: bool = False
) -> dict[str, Any]:
    """List every command in the store.

    Args:
        console: Rich console for output
        store: The command store to read
        names_only: Print bare names, one per line, without parsing records
        verbose: Include prompt bodies
        quiet: Minimize output

    Returns:
        Listing result for JSON output
    """
    if not store.exists():
        if not quiet:
            console.print("[yellow]No commands directory found.[/yellow]")
        return {'operation': 'list', 'commands': [], 'errors': []}

    if names_only:
        names = store.list_names()
        if not quiet:
            display_command_names(console, names)
        return {'operation': 'list', 'commands': sorted(names), 'errors': []}

    listing = store.list_records()
    display_command_list(console, listing, verbose=verbose, quiet=quiet)
    return {
        'operation': 'list',
        'commands': sorted(listing.names()),
        'errors': [str(e) for e in listing.errors]
    }


def show(console: Console, store: CommandStore, name: str) -> dict[str, Any]:
    record = store.get(name)
    display_command(console, record)
    return {'operation': 'show', 'command': record.to_export_dict()}


def validate_config(console: Console, config: StoreConfig, verbose: bool = False) -> dict[str, Any]:
    """Check the loaded configuration and report problems."""
    errors = check_config(config)
    display_config_validation_results(console, errors)
    if verbose:
        console.print()
        display_config_summary(console, config)
    return {'operation': 'validate-config', 'valid': not errors, 'errors': errors}
