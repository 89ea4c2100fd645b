# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.13
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/core/enumerator.py

"""
Recursive listing of the commands stored under a namespace root.

The walk is depth-first in whatever order the filesystem hands entries back;
callers must not depend on ordering. Unreadable directories and files are
logged and contribute nothing; the rest of the tree is still listed.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

import loguru

from gemcmd.data.names import NAME_SEPARATOR, COMMAND_SUFFIX, is_command_file
from gemcmd.data.records import CommandRecord, read_record
from gemcmd.system.exceptions import CommandStoreError, ParseError, StoreIOError

logger = loguru.logger


@dataclass
class CommandFile:
    """A command file found during the walk."""
    name: str
    path: Path


@dataclass
class RecordListing:
    """Parsed records plus the per-file errors that were skipped."""
    records: list[CommandRecord] = field(default_factory=list)
    errors: list[CommandStoreError] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.records)

    def names(self) -> list[str]:
        return [record.name for record in self.records]


def _walk_command_files(directory: Path, prefix: str = "") -> Iterator[CommandFile]:
    """Yield every command file below directory, recursing into subdirectories."""
    try:
        with os.scandir(directory) as entries:
            children = list(entries)
    except OSError as e:
        logger.error(f"Cannot read directory {directory}: {e}")
        return

    for entry in children:
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as e:
            logger.error(f"Cannot stat {entry.path}: {e}")
            continue

        if is_dir:
            yield from _walk_command_files(Path(entry.path), f"{prefix}{entry.name}{NAME_SEPARATOR}")
        elif is_command_file(entry.name):
            leaf = entry.name[:-len(COMMAND_SUFFIX)]
            yield CommandFile(name=f"{prefix}{leaf}", path=Path(entry.path))
        # anything else is not a command


def iter_command_files(root: Path) -> Iterator[CommandFile]:
    """Lazily walk root. An absent or non-directory root yields nothing."""
    root = Path(root)
    if not root.is_dir():
        logger.debug(f"No commands directory at {root}")
        return iter(())
    return _walk_command_files(root)


def iter_command_names(root: Path) -> Iterator[str]:
    for command_file in iter_command_files(root):
        yield command_file.name


def list_command_names(root: Path) -> list[str]:
    return list(iter_command_names(root))


def list_command_records(root: Path) -> RecordListing:
    """Read and parse every command under root.

    Files that fail to read or parse are logged and collected in
    ``errors``; their siblings are still processed.
    """
    listing = RecordListing()
    for command_file in iter_command_files(root):
        try:
            record = read_record(command_file.path, name=command_file.name)
        except ParseError as e:
            logger.error(str(e))
            listing.errors.append(e)
            continue
        except OSError as e:
            logger.error(f"Cannot read {command_file.path}: {e}")
            listing.errors.append(StoreIOError(f"Cannot read {command_file.path}: {e}", command_file.path))
            continue
        listing.records.append(record)

    logger.debug(f"Listed {listing.count} commands under {root} ({len(listing.errors)} errors)")
    return listing
