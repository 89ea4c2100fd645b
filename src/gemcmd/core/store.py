# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.13
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/core/store.py

"""
CommandStore: one namespace root plus its backup slot.

Each store carries its own root instead of reading a process-wide constant,
so several independent stores (one per test, say) can coexist.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from gemcmd.config.manager import StoreConfig
from gemcmd.core import backup as backup_engine
from gemcmd.core import enumerator, interchange, merge, mutations
from gemcmd.data.paths import resolve_command_path
from gemcmd.data.records import CommandRecord


class CommandStore:
    """Facade over the command-store operations for a single root."""

    def __init__(self, root: Path, backup_dir: Optional[Path] = None) -> None:
        self.root = Path(root)
        self.backup_dir = Path(backup_dir) if backup_dir is not None else backup_engine.backup_dir_for(self.root)

    @classmethod
    def from_config(cls, config: StoreConfig) -> "CommandStore":
        return cls(config.commands_dir, config.backup_dir)

    def __repr__(self) -> str:
        return f"CommandStore(root={str(self.root)!r}, backup_dir={str(self.backup_dir)!r})"

    # ---- Lookup ----

    def exists(self) -> bool:
        return self.root.is_dir()

    def resolve(self, name: str) -> Path:
        return resolve_command_path(self.root, name)

    def contains(self, name: str) -> bool:
        return self.resolve(name).is_file()

    def list_names(self) -> list[str]:
        return enumerator.list_command_names(self.root)

    def list_records(self) -> enumerator.RecordListing:
        return enumerator.list_command_records(self.root)

    def get(self, name: str) -> CommandRecord:
        return mutations.get_command(self.root, name)

    # ---- Mutation ----

    def add(self, name: str, description: str, prompt: str = "", overwrite: bool = False) -> Path:
        return mutations.add_command(self.root, name, description, prompt, overwrite=overwrite)

    def delete(self, name: str) -> mutations.DeleteResult:
        return mutations.delete_command(self.root, name)

    def rename(self, old_name: str, new_name: str, overwrite: bool = False) -> Path:
        return mutations.rename_command(self.root, old_name, new_name, overwrite=overwrite)

    # ---- Backup / restore ----

    def has_backup(self) -> bool:
        return self.backup_dir.is_dir()

    def backup(self) -> backup_engine.SnapshotResult:
        return backup_engine.snapshot_commands(self.root, self.backup_dir)

    def backup_names(self) -> list[str]:
        return enumerator.list_command_names(self.backup_dir)

    def restore_all(self) -> merge.MergeResult:
        return merge.merge_all(self.backup_dir, self.root)

    def restore_one(self, name: str, resolve_conflict: Optional[merge.ConflictResolver] = None) -> merge.ItemOutcome:
        return merge.merge_one(self.backup_dir, self.root, name, resolve_conflict)

    # ---- JSON interchange ----

    def export_json(self, target: Path) -> interchange.ExportResult:
        return interchange.export_commands(self.root, target)

    def import_records(
        self,
        records: list[CommandRecord],
        resolve_conflict: Optional[merge.ConflictResolver] = None
    ) -> interchange.ImportResult:
        return interchange.import_commands(self.root, records, resolve_conflict)

    def import_json(self, path: Path, resolve_conflict: Optional[merge.ConflictResolver] = None) -> interchange.ImportResult:
        records = interchange.read_import_file(path)
        return self.import_records(records, resolve_conflict)
