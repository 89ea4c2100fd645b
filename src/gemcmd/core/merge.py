# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.15
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/core/merge.py

"""
Recursive merge of one command tree into another.

merge_all() is the best-effort bulk copy used by "restore all": existing
files are overwritten, new ones created, and a failure at one node only costs
that node. merge_one() restores a single command and hands conflicts to a
caller-supplied resolver instead of prompting.

Every destination path is checked against the canonical destination root
before anything is written, so a crafted backup tree (or a symlink planted in
the live tree) cannot redirect writes elsewhere.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import loguru

from gemcmd.data.paths import ensure_within, resolve_command_path
from gemcmd.system.exceptions import (
    CommandStoreError, ConflictError, NotFoundError, PathEscapeError, StoreIOError
)

logger = loguru.logger


class ConflictPolicy(str, Enum):
    """What to do when an imported or restored command already exists."""
    OVERWRITE = "overwrite"
    SKIP = "skip"
    RENAME = "rename"


class ItemStatus(str, Enum):
    """Lifecycle of one import/restore item. Everything but PENDING is terminal."""
    PENDING = "pending"
    IMPORTED = "imported"
    OVERWRITTEN = "overwritten"
    SKIPPED = "skipped"
    RENAMED = "renamed"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass
class ConflictResolution:
    """A caller's answer to a conflict. new_name is required for RENAME."""
    policy: ConflictPolicy
    new_name: Optional[str] = None


ConflictResolver = Callable[[str], ConflictResolution]


def always(policy: ConflictPolicy) -> ConflictResolver:
    """Resolver that answers every conflict the same way (batch mode)."""
    if policy is ConflictPolicy.RENAME:
        raise ValueError("RENAME needs a new name per conflict; supply a resolver instead")
    return lambda name: ConflictResolution(policy)


@dataclass
class ItemOutcome:
    name: str
    status: ItemStatus = ItemStatus.PENDING
    path: Optional[Path] = None
    target_name: Optional[str] = None
    error: Optional[CommandStoreError] = None

    @property
    def written(self) -> bool:
        return self.status in (ItemStatus.IMPORTED, ItemStatus.OVERWRITTEN, ItemStatus.RENAMED)


@dataclass
class MergeResult:
    """Aggregate of a bulk merge: files copied plus per-entry errors."""
    copied: int = 0
    directories_created: int = 0
    errors: list[CommandStoreError] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return sum(1 for e in self.errors if isinstance(e, PathEscapeError))

    @property
    def ok(self) -> bool:
        return not self.errors


def _merge_directory(source: Path, destination: Path, destination_root: Path, result: MergeResult) -> None:
    try:
        with os.scandir(source) as entries:
            children = list(entries)
    except OSError as e:
        logger.error(f"Cannot read {source}: {e}")
        result.errors.append(StoreIOError(f"Cannot read {source}: {e}", source))
        return

    for entry in children:
        source_path = Path(entry.path)
        destination_path = destination / entry.name

        try:
            ensure_within(destination_root, destination_path)
        except PathEscapeError as e:
            logger.error(f"Skipping {source_path}: destination {destination_path} is outside {destination_root}")
            result.errors.append(e)
            continue

        try:
            if entry.is_symlink():
                logger.warning(f"Skipping symlink {source_path}")
                continue

            if entry.is_dir():
                if not destination_path.is_dir():
                    destination_path.mkdir(parents=True, exist_ok=True)
                    result.directories_created += 1
                _merge_directory(source_path, destination_path, destination_root, result)
            else:
                shutil.copyfile(source_path, destination_path)
                result.copied += 1
                logger.debug(f"Merged {source_path} -> {destination_path}")
        except OSError as e:
            logger.error(f"Error merging {source_path}: {e}")
            result.errors.append(StoreIOError(f"Error merging {source_path}: {e}", destination_path))


def merge_all(source: Path, destination: Path) -> MergeResult:
    """Copy every file under source into destination, overwriting existing ones.

    Raises:
        NotFoundError: If source does not exist
        StoreIOError: If the destination root cannot be created

    Per-entry escapes and I/O failures are logged and collected in the
    returned MergeResult; the walk continues.
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_dir():
        raise NotFoundError(f"No backup found at {source}", source)

    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StoreIOError(f"Cannot create {destination}: {e}", destination) from e

    result = MergeResult()
    _merge_directory(source, destination, destination, result)
    logger.debug(f"Merged {result.copied} files from {source} into {destination} ({len(result.errors)} errors)")
    return result


def _copy_command(source_path: Path, destination_path: Path) -> None:
    try:
        destination_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source_path, destination_path)
    except OSError as e:
        raise StoreIOError(f"Error copying {source_path} to {destination_path}: {e}", destination_path) from e


def merge_one(
    source: Path,
    destination: Path,
    name: str,
    resolve_conflict: Optional[ConflictResolver] = None
) -> ItemOutcome:
    """Restore a single command from source into destination.

    Args:
        source: Root the command is copied from (e.g. the backup snapshot)
        destination: Live namespace root
        name: Command name, confined against both roots
        resolve_conflict: Called with the name only when the destination
            already exists

    Raises:
        PathEscapeError: If name (or a rename target) leaves either root
        NotFoundError: If the command is not in source
        ConflictError: If the destination exists and no resolver was given
        StoreIOError: If the copy fails
    """
    source_path = resolve_command_path(source, name)
    destination_path = resolve_command_path(destination, name)

    if not source_path.is_file():
        raise NotFoundError(f"Command '{name}' not found in {source}", source_path)

    if not destination_path.exists():
        _copy_command(source_path, destination_path)
        logger.debug(f"Restored command {name}")
        return ItemOutcome(name, ItemStatus.IMPORTED, destination_path, name)

    if resolve_conflict is None:
        raise ConflictError(name, destination_path)

    resolution = resolve_conflict(name)

    if resolution.policy is ConflictPolicy.SKIP:
        logger.debug(f"Skipped restoring command {name}")
        return ItemOutcome(name, ItemStatus.SKIPPED, destination_path, name)

    if resolution.policy is ConflictPolicy.OVERWRITE:
        _copy_command(source_path, destination_path)
        logger.debug(f"Restored and overwrote command {name}")
        return ItemOutcome(name, ItemStatus.OVERWRITTEN, destination_path, name)

    if not resolution.new_name:
        raise ValueError(f"Rename of '{name}' requested without a new name")
    renamed_path = resolve_command_path(destination, resolution.new_name)
    _copy_command(source_path, renamed_path)
    logger.debug(f"Restored command {name} as {resolution.new_name}")
    return ItemOutcome(name, ItemStatus.RENAMED, renamed_path, resolution.new_name)
