# Author: PB & Claude
# Maintainer: PB
# Original date: 2025-06-13
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/core/backup.py

"""
Single-slot snapshot of the commands directory.

The new snapshot is staged in ``commands_backup_tmp`` and swapped in with
directory renames, so ``commands_backup`` is always either the previous
complete snapshot or the new complete one:

1. copy root -> tmp
2. rename existing backup -> old
3. rename tmp -> backup
4. remove old

If anything fails the tmp copy is removed and the previous snapshot is put
back where it was.
"""

import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final, Optional

import loguru

from gemcmd.system.exceptions import StoreIOError

logger = loguru.logger

BACKUP_DIR_NAME: Final = "commands_backup"
TMP_SUFFIX: Final = "_tmp"
OLD_SUFFIX: Final = "_old"


class SnapshotStatus(str, Enum):
    CREATED = "created"
    REPLACED = "replaced"
    NOTHING_TO_BACK_UP = "nothing_to_back_up"


@dataclass
class SnapshotResult:
    status: SnapshotStatus
    backup_dir: Path
    source: Path

    @property
    def created(self) -> bool:
        return self.status in (SnapshotStatus.CREATED, SnapshotStatus.REPLACED)


def backup_dir_for(root: Path) -> Path:
    """Default snapshot location: a sibling of the commands directory."""
    return Path(root).parent / BACKUP_DIR_NAME


def staging_dir_for(backup_dir: Path) -> Path:
    return backup_dir.with_name(backup_dir.name + TMP_SUFFIX)


def _discard(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def snapshot_commands(root: Path, backup_dir: Optional[Path] = None) -> SnapshotResult:
    """Create or replace the backup snapshot of root.

    Returns:
        SnapshotResult; status NOTHING_TO_BACK_UP when root does not exist

    Raises:
        StoreIOError: If copying or swapping fails; the previous snapshot
            is left intact and no temporary directory remains
    """
    root = Path(root)
    backup_dir = Path(backup_dir) if backup_dir is not None else backup_dir_for(root)

    if not root.exists():
        logger.debug(f"No commands directory to back up at {root}")
        return SnapshotResult(SnapshotStatus.NOTHING_TO_BACK_UP, backup_dir, root)

    tmp_dir = staging_dir_for(backup_dir)
    old_dir = backup_dir.with_name(backup_dir.name + OLD_SUFFIX)
    had_backup = backup_dir.exists()
    moved_aside = False

    try:
        # Leftovers from an interrupted run
        for stale in (tmp_dir, old_dir):
            if stale.exists() or stale.is_symlink():
                logger.warning(f"Removing stale backup staging directory {stale}")
                _discard(stale)

        # Step 1: stage the full copy
        shutil.copytree(root, tmp_dir, symlinks=True)
        logger.debug(f"Staged backup copy at {tmp_dir}")

        # Step 2: move the previous snapshot out of the way
        if had_backup:
            backup_dir.rename(old_dir)
            moved_aside = True

        # Step 3: atomic swap-in
        tmp_dir.rename(backup_dir)

    except OSError as e:
        logger.error(f"Error creating backup at {backup_dir}: {e}")
        if tmp_dir.exists():
            try:
                shutil.rmtree(tmp_dir)
            except OSError as cleanup_error:
                logger.error(f"Failed to remove staging directory {tmp_dir}: {cleanup_error}")
        if moved_aside and not backup_dir.exists():
            try:
                old_dir.rename(backup_dir)
            except OSError as restore_error:
                logger.critical(f"Previous backup left at {old_dir}: {restore_error}")
        failed_path = getattr(e, "filename", None) or tmp_dir
        raise StoreIOError(f"Error creating backup: {e}", failed_path) from e

    # Step 4: the new snapshot is in place; the old one can go
    if moved_aside:
        try:
            shutil.rmtree(old_dir)
        except OSError as e:
            logger.warning(f"Could not remove previous backup at {old_dir}: {e}")

    status = SnapshotStatus.REPLACED if had_backup else SnapshotStatus.CREATED
    logger.debug(f"Backup {status.value} at {backup_dir}")
    return SnapshotResult(status, backup_dir, root)
