# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.17
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/core/mutations.py

"""
Single-command operations: add, read, delete, rename.

Every name is confined to the namespace root before any I/O. Errors are
raised to the caller; nothing here prompts or prints. Add writes the file in
place without a temp-and-rename step.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import loguru

from gemcmd.data.paths import canonical, resolve_command_path
from gemcmd.data.records import CommandRecord, encode_record, read_record
from gemcmd.system.exceptions import (
    ConflictError, NotFoundError, PathEscapeError, InvalidCommandNameError, StoreIOError
)

logger = loguru.logger


@dataclass
class DeleteResult:
    """What a delete removed: the file and any directories left empty."""
    name: str
    path: Path
    removed_dirs: list[Path] = field(default_factory=list)


def add_command(
    root: Path,
    name: str,
    description: str,
    prompt: str = "",
    overwrite: bool = False
) -> Path:
    """Write a command under root, creating intermediate directories.

    Args:
        root: Namespace root
        name: '/'-separated command name
        description: Short description, always written
        prompt: Prompt body, omitted from the file when empty
        overwrite: Replace an existing command instead of raising ConflictError

    Returns:
        Path of the written file

    Raises:
        PathEscapeError: If name resolves outside root
        ConflictError: If the command exists and overwrite is False
        StoreIOError: If directories or the file cannot be written
    """
    path = resolve_command_path(root, name)

    if path.exists() and not overwrite:
        raise ConflictError(name, path)

    content = encode_record(CommandRecord(name=name, description=description, prompt=prompt))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    except OSError as e:
        raise StoreIOError(f"Error writing command file {path}: {e}", path) from e

    logger.debug(f"Wrote command {name} -> {path}")
    return path


def get_command(root: Path, name: str) -> CommandRecord:
    """Read one command.

    Raises:
        PathEscapeError: If name resolves outside root
        NotFoundError: If no such command exists
        ParseError: If the file is malformed
        StoreIOError: If the file cannot be read
    """
    path = resolve_command_path(root, name)
    if not path.is_file():
        raise NotFoundError(f"Command '{name}' not found", path)
    try:
        return read_record(path, name=name)
    except OSError as e:
        raise StoreIOError(f"Error reading command file {path}: {e}", path) from e


def prune_empty_dirs(start: Path, root: Path) -> list[Path]:
    """Remove start and its ancestors while they are empty, stopping at root.

    root itself is never removed, even when it ends up empty.
    """
    removed = []
    root_canonical = canonical(root)
    current = Path(start)

    while True:
        current_canonical = canonical(current)
        if current_canonical == root_canonical or not current_canonical.is_relative_to(root_canonical):
            break
        try:
            with os.scandir(current) as entries:
                if any(entries):
                    break
            current.rmdir()
        except OSError as e:
            logger.warning(f"Stopped pruning at {current}: {e}")
            break
        logger.debug(f"Removed empty directory {current}")
        removed.append(current)
        current = current.parent

    return removed


def delete_command(root: Path, name: str) -> DeleteResult:
    """Delete a command and cascade-remove the directories it leaves empty.

    Raises:
        NotFoundError: If the name does not resolve inside root or the file is absent
        StoreIOError: If the file cannot be removed
    """
    try:
        path = resolve_command_path(root, name)
    except (PathEscapeError, InvalidCommandNameError) as e:
        raise NotFoundError(f"Command '{name}' not found: {e}") from e

    if not path.is_file():
        raise NotFoundError(f"Command '{name}' not found", path)

    try:
        path.unlink()
    except OSError as e:
        raise StoreIOError(f"Error deleting command {name}: {e}", path) from e

    removed_dirs = prune_empty_dirs(path.parent, root)
    logger.debug(f"Deleted command {name} ({len(removed_dirs)} empty directories removed)")
    return DeleteResult(name=name, path=path, removed_dirs=removed_dirs)


def rename_command(root: Path, old_name: str, new_name: str, overwrite: bool = False) -> Path:
    """Move a command to a new name: write under the new name, then delete the old.

    Both names are confined independently; the new one is often user- or
    payload-supplied.

    Raises:
        PathEscapeError: If either name resolves outside root
        NotFoundError: If old_name does not exist
        ConflictError: If new_name exists and overwrite is False
        StoreIOError: On read/write/remove failures
    """
    old_path = resolve_command_path(root, old_name)
    new_path = resolve_command_path(root, new_name)

    if not old_path.is_file():
        raise NotFoundError(f"Command '{old_name}' not found", old_path)

    if canonical(old_path) == canonical(new_path):
        return new_path

    if new_path.exists() and not overwrite:
        raise ConflictError(new_name, new_path)

    try:
        content = old_path.read_bytes()
        new_path.parent.mkdir(parents=True, exist_ok=True)
        new_path.write_bytes(content)
    except OSError as e:
        raise StoreIOError(f"Error renaming {old_name} to {new_name}: {e}", new_path) from e

    delete_command(root, old_name)
    logger.debug(f"Renamed command {old_name} -> {new_name}")
    return new_path
