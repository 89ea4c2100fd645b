# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.07
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/core/interchange.py

"""
JSON export and import of the whole command store.

The interchange format is one JSON array of ``{name, description, prompt}``
objects. An import payload that is not exactly that shape is rejected as a
whole before anything is written. Names inside a valid payload are still
untrusted: each one is confined to the namespace root on its own, and an
escaping item is rejected without affecting its siblings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Optional

import loguru
import orjson
from pydantic import ValidationError

from gemcmd.core.enumerator import list_command_records
from gemcmd.core.merge import (
    ConflictPolicy, ConflictResolver, ItemOutcome, ItemStatus
)
from gemcmd.data.paths import resolve_command_path
from gemcmd.data.records import CommandRecord, encode_record
from gemcmd.system.exceptions import (
    CommandStoreError, ConflictError, InvalidPayloadError, NotFoundError,
    PathEscapeError, InvalidCommandNameError, StoreIOError
)

logger = loguru.logger

JSON_SUFFIX: Final = ".json"
IGNORED_IMPORT_FILES: Final = frozenset({"package.json", "package-lock.json"})


@dataclass
class ExportResult:
    path: Optional[Path]
    count: int
    errors: list[CommandStoreError] = field(default_factory=list)


@dataclass
class ImportResult:
    outcomes: list[ItemOutcome] = field(default_factory=list)

    def count(self, status: ItemStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)

    @property
    def imported_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.written)

    @property
    def errors(self) -> list[CommandStoreError]:
        return [outcome.error for outcome in self.outcomes if outcome.error is not None]


# ---- Export ----

def dump_records(records: list[CommandRecord]) -> bytes:
    return orjson.dumps([record.to_export_dict() for record in records], option=orjson.OPT_INDENT_2)


def export_commands(root: Path, target: Path) -> ExportResult:
    """Write every parseable command under root to a JSON file.

    A missing ``.json`` suffix is appended. Nothing is written when there are
    no commands to export.

    Raises:
        StoreIOError: If the export file cannot be written
    """
    target = Path(target)
    if not target.name.endswith(JSON_SUFFIX):
        target = target.with_name(target.name + JSON_SUFFIX)

    listing = list_command_records(root)
    if listing.count == 0:
        logger.debug(f"No commands under {root} to export")
        return ExportResult(None, 0, listing.errors)

    try:
        target.write_bytes(dump_records(listing.records))
    except OSError as e:
        raise StoreIOError(f"Error exporting commands to JSON: {e}", target) from e

    logger.debug(f"Exported {listing.count} commands to {target}")
    return ExportResult(target, listing.count, listing.errors)


# ---- Import ----

def load_import_payload(data: bytes | str) -> list[CommandRecord]:
    """Decode an import payload.

    Raises:
        InvalidPayloadError: Bad JSON, a non-list value, or an item that is not
            an object with a string name
    """
    try:
        payload = orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise InvalidPayloadError(f"Error parsing JSON: {e}") from e

    if not isinstance(payload, list):
        raise InvalidPayloadError("JSON does not contain an array of commands")

    records = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise InvalidPayloadError(f"Item {index} is not an object")
        if not isinstance(item.get("name"), str):
            raise InvalidPayloadError(f"Item {index} has no string 'name'")
        try:
            records.append(CommandRecord.model_validate(item))
        except ValidationError as e:
            raise InvalidPayloadError(f"Item {index} ({item['name']!r}) is invalid: {e}") from e
    return records


def read_import_file(path: Path) -> list[CommandRecord]:
    """Read and decode an export file.

    Raises:
        NotFoundError: If the file does not exist
        StoreIOError: If it cannot be read
        InvalidPayloadError: If its content is not a command array
    """
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(f"File not found at {path}", path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise StoreIOError(f"Error reading {path}: {e}", path) from e
    return load_import_payload(data)


def find_import_candidates(directory: Path) -> list[Path]:
    """JSON files in directory that could be exports, sorted by name.

    Raises:
        NotFoundError: If directory is not a directory
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise NotFoundError(f"Directory not found at {directory}", directory)
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.name.endswith(JSON_SUFFIX) and p.name not in IGNORED_IMPORT_FILES
    )


def _write_record(path: Path, record: CommandRecord) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(encode_record(record))
    except OSError as e:
        raise StoreIOError(f"Error writing command file {path}: {e}", path) from e


def import_record(root: Path, record: CommandRecord, resolve_conflict: Optional[ConflictResolver] = None) -> ItemOutcome:
    """Import one record under root.

    Raises:
        PathEscapeError: If the record name or a rename target leaves root
        InvalidCommandNameError: If a name is empty or malformed
        ConflictError: If the command exists and no resolver was given
        StoreIOError: If the file cannot be written
    """
    path = resolve_command_path(root, record.name)

    if not path.exists():
        _write_record(path, record)
        logger.debug(f"Imported new command: {record.name}")
        return ItemOutcome(record.name, ItemStatus.IMPORTED, path, record.name)

    if resolve_conflict is None:
        raise ConflictError(record.name, path)

    resolution = resolve_conflict(record.name)

    if resolution.policy is ConflictPolicy.SKIP:
        logger.debug(f"Skipped command: {record.name}")
        return ItemOutcome(record.name, ItemStatus.SKIPPED, path, record.name)

    if resolution.policy is ConflictPolicy.OVERWRITE:
        _write_record(path, record)
        logger.debug(f"Overwrote command: {record.name}")
        return ItemOutcome(record.name, ItemStatus.OVERWRITTEN, path, record.name)

    if not resolution.new_name:
        raise ValueError(f"Rename of '{record.name}' requested without a new name")
    new_path = resolve_command_path(root, resolution.new_name)
    _write_record(new_path, record)
    logger.debug(f"Imported command {record.name} as: {resolution.new_name}")
    return ItemOutcome(record.name, ItemStatus.RENAMED, new_path, resolution.new_name)


def import_commands(
    root: Path,
    records: list[CommandRecord],
    resolve_conflict: Optional[ConflictResolver] = None
) -> ImportResult:
    """Import records one by one; a rejected or failed item never stops the rest.

    Conflicts with no resolver are reported as FAILED items carrying a
    ConflictError.
    """
    result = ImportResult()
    for record in records:
        try:
            outcome = import_record(root, record, resolve_conflict)
        except (PathEscapeError, InvalidCommandNameError) as e:
            logger.error(f"Rejected command {record.name!r}: {e}")
            outcome = ItemOutcome(record.name, ItemStatus.REJECTED, error=e)
        except (ConflictError, StoreIOError) as e:
            logger.error(f"Failed to import command {record.name!r}: {e}")
            outcome = ItemOutcome(record.name, ItemStatus.FAILED, error=e)
        result.outcomes.append(outcome)

    logger.debug(f"Imported {result.imported_count} of {len(records)} commands into {root}")
    return result
