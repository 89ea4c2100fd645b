# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.17
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/system/display.py

# Third-party imports
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

# Local imports
from gemcmd.config.manager import StoreConfig
from gemcmd.core.enumerator import RecordListing
from gemcmd.core.interchange import ImportResult
from gemcmd.core.merge import ItemOutcome, ItemStatus, MergeResult
from gemcmd.data.records import CommandRecord


_STATUS_STYLES = {
    ItemStatus.IMPORTED: ("green", "Imported new command"),
    ItemStatus.OVERWRITTEN: ("green", "Overwrote command"),
    ItemStatus.RENAMED: ("green", "Imported command as"),
    ItemStatus.SKIPPED: ("yellow", "Skipped command"),
    ItemStatus.REJECTED: ("red", "Rejected command"),
    ItemStatus.FAILED: ("red", "Failed to import command"),
}


def display_command_list(console: Console, listing: RecordListing, verbose: bool = False, quiet: bool = False) -> None:
    """Display every command with its description (and prompt when verbose).

    Args:
        console: Rich console for output
        listing: Parsed records plus per-file errors
        verbose: Include prompt bodies if True
        quiet: Minimize output if True
    """
    if quiet:
        return

    if listing.count == 0 and not listing.errors:
        console.print("[yellow]No commands found.[/yellow]")
        return

    table = Table(title="Available commands")
    table.add_column("Command", style="yellow")
    table.add_column("Description", style="cyan")
    if verbose:
        table.add_column("Prompt", style="magenta")

    for record in sorted(listing.records, key=lambda r: r.name):
        row = [escape(record.name), escape(record.description)]
        if verbose:
            row.append(escape(record.prompt))
        table.add_row(*row)

    console.print(table)

    for error in listing.errors:
        console.print(f"[red]✗[/red] {escape(str(error))}")

    if verbose:
        console.print(f"\n[dim]Found {listing.count} commands[/dim]")


def display_command_names(console: Console, names: list[str]) -> None:
    if not names:
        console.print("[yellow]No commands found.[/yellow]")
        return
    for name in sorted(names):
        console.print(escape(name), highlight=False)


def display_command(console: Console, record: CommandRecord) -> None:
    """Show one command in a panel."""
    body = f"[cyan]{escape(record.description)}[/cyan]"
    if record.prompt:
        body += f"\n\n{escape(record.prompt)}"
    console.print(Panel(body, title=f"[yellow]{escape(record.name)}[/yellow]", title_align="left"))


def display_merge_result(console: Console, result: MergeResult) -> None:
    if result.ok:
        console.print(f"[green]✓[/green] Successfully merged all commands from backup ({result.copied} files).")
        return

    console.print(f"[yellow]Merged {result.copied} files from backup with {len(result.errors)} error(s):[/yellow]")
    for i, error in enumerate(result.errors, 1):
        console.print(f"[red]{i}.[/red] {escape(str(error))}")


def display_item_outcome(console: Console, outcome: ItemOutcome) -> None:
    style, label = _STATUS_STYLES.get(outcome.status, ("white", outcome.status.value))
    target = outcome.target_name if outcome.status is ItemStatus.RENAMED else outcome.name
    line = f"  [{style}]{label}: {escape(str(target))}[/{style}]"
    if outcome.error is not None:
        line += f" [dim]({escape(str(outcome.error))})[/dim]"
    console.print(line)


def display_import_result(console: Console, result: ImportResult) -> None:
    for outcome in result.outcomes:
        display_item_outcome(console, outcome)

    console.print(f"[green]Successfully imported {result.imported_count} commands.[/green]")
    rejected = result.count(ItemStatus.REJECTED) + result.count(ItemStatus.FAILED)
    if rejected:
        console.print(f"[red]{rejected} command(s) were not imported.[/red]")


def display_config_validation_results(console: Console, errors: list[str]) -> None:
    """Display configuration validation results."""
    console.print("[bold]gemcmd Configuration Validation[/bold]")
    console.print()

    if not errors:
        console.print("[green]✓[/green] All configuration checks passed")
        return

    console.print("[red]✗[/red] Configuration validation failed")
    console.print()
    for i, error in enumerate(errors, 1):
        console.print(f"[red]{i}.[/red] {escape(error)}")
    console.print(f"\n[red]Found {len(errors)} configuration error(s).[/red]")


def display_config_summary(console: Console, config: StoreConfig) -> None:
    """Display configuration summary table."""
    table = Table(title="Configuration Summary")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Commands directory", str(config.commands_dir))
    table.add_row("Backup directory", str(config.backup_dir))
    table.add_row("Export file name", config.export_name)
    table.add_row("Local log", str(config.local_log) if config.local_log else "-")
    policy = config.default_conflict_policy.value if config.default_conflict_policy else "ask"
    table.add_row("Conflict policy", policy)

    console.print(table)


# done.
