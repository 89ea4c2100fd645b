# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.13
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_store.py

import pytest

from gemcmd.core.backup import SnapshotStatus
from gemcmd.core.merge import ConflictPolicy, ItemStatus, always
from gemcmd.core.store import CommandStore
from gemcmd.system.exceptions import PathEscapeError


def test_independent_stores_do_not_share_state(tmp_path):
    first = CommandStore(tmp_path / "one" / "commands")
    second = CommandStore(tmp_path / "two" / "commands")

    first.add("hello", "from one")

    assert first.list_names() == ["hello"]
    assert second.list_names() == []
    assert first.backup_dir != second.backup_dir


def test_lifecycle(store):
    assert not store.has_backup()
    store.add("git/commit", "commits code", "do a commit")
    assert store.contains("git/commit")

    assert store.backup().status is SnapshotStatus.CREATED
    assert store.backup_names() == ["git/commit"]

    store.delete("git/commit")
    assert not store.contains("git/commit")

    result = store.restore_all()
    assert result.copied == 1
    assert store.get("git/commit").prompt == "do a commit"

    store.rename("git/commit", "commit")
    assert store.list_names() == ["commit"]


def test_restore_one(store):
    store.add("hello", "original")
    store.backup()
    store.add("hello", "changed", overwrite=True)

    outcome = store.restore_one("hello", always(ConflictPolicy.OVERWRITE))

    assert outcome.status is ItemStatus.OVERWRITTEN
    assert store.get("hello").description == "original"


def test_export_and_import_json(store, tmp_path):
    store.add("a/b", "d", "p")
    exported = store.export_json(tmp_path / "dump")

    other = CommandStore(tmp_path / "other" / "commands")
    result = other.import_json(exported.path)

    assert result.imported_count == 1
    assert other.get("a/b") == store.get("a/b")


def test_resolve_confines(store):
    assert store.resolve("x/y") == store.root / "x" / "y.toml"
    with pytest.raises(PathEscapeError):
        store.resolve("../outside")


def test_missing_root(tmp_path):
    store = CommandStore(tmp_path / "nothing")
    assert not store.exists()
    assert store.list_names() == []
    assert store.list_records().records == []
    assert store.backup().status is SnapshotStatus.NOTHING_TO_BACK_UP
