# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.07
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_interchange.py

import orjson
import pytest

from gemcmd.core.enumerator import list_command_names
from gemcmd.core.interchange import (
    export_commands, find_import_candidates, import_commands, load_import_payload,
    read_import_file
)
from gemcmd.core.merge import ConflictPolicy, ConflictResolution, ItemStatus, always
from gemcmd.core.mutations import get_command
from gemcmd.data.records import CommandRecord
from gemcmd.system.exceptions import (
    ConflictError, InvalidCommandNameError, InvalidPayloadError, NotFoundError,
    PathEscapeError
)


class TestExport:
    def test_writes_json_array(self, populated_root, tmp_path):
        result = export_commands(populated_root, tmp_path / "out.json")

        assert result.path == tmp_path / "out.json"
        assert result.count == 3
        payload = orjson.loads(result.path.read_bytes())
        by_name = {item["name"]: item for item in payload}
        assert by_name["git/commit"] == {
            "name": "git/commit", "description": "commits code", "prompt": "Write a commit message."
        }

    def test_appends_json_suffix(self, populated_root, tmp_path):
        result = export_commands(populated_root, tmp_path / "mine")
        assert result.path == tmp_path / "mine.json"
        assert result.path.is_file()

    def test_empty_store_writes_nothing(self, commands_root, tmp_path):
        result = export_commands(commands_root, tmp_path / "out.json")
        assert result.path is None
        assert result.count == 0
        assert not (tmp_path / "out.json").exists()

    def test_malformed_file_reported_not_exported(self, populated_root, tmp_path):
        (populated_root / "broken.toml").write_text("description = ")
        result = export_commands(populated_root, tmp_path / "out.json")
        assert result.count == 3
        assert len(result.errors) == 1


class TestLoadPayload:
    def test_valid_payload(self):
        records = load_import_payload(b'[{"name": "a/b", "description": "d", "prompt": "p"}, {"name": "c"}]')
        assert records == [
            CommandRecord(name="a/b", description="d", prompt="p"),
            CommandRecord(name="c", description="", prompt=""),
        ]

    def test_null_fields_are_empty(self):
        records = load_import_payload('[{"name": "x", "description": null, "prompt": null}]')
        assert records[0].description == ""

    @pytest.mark.parametrize("data", [
        b"not json",
        b'{"name": "x"}',
        b'"a string"',
        b"[1, 2]",
        b'[{"description": "no name"}]',
        b'[{"name": 5}]',
        b'[{"name": "x", "prompt": ["not", "a", "string"]}]',
    ])
    def test_malformed_payload_rejected_whole(self, data):
        with pytest.raises(InvalidPayloadError):
            load_import_payload(data)

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError):
            read_import_file(tmp_path / "nope.json")


def test_find_import_candidates(tmp_path):
    for name in ("b.json", "a.json", "package.json", "package-lock.json", "notes.txt"):
        (tmp_path / name).write_text("[]")
    (tmp_path / "dir.json").mkdir()

    assert [p.name for p in find_import_candidates(tmp_path)] == ["a.json", "b.json"]


def test_find_import_candidates_missing_directory(tmp_path):
    with pytest.raises(NotFoundError):
        find_import_candidates(tmp_path / "missing")


class TestImport:
    def test_imports_new_commands(self, commands_root):
        records = [
            CommandRecord(name="git/commit", description="d", prompt="line 1\n\nline 3"),
            CommandRecord(name="hello", description="h"),
        ]

        result = import_commands(commands_root, records)

        assert result.imported_count == 2
        assert result.count(ItemStatus.IMPORTED) == 2
        assert get_command(commands_root, "git/commit").prompt == "line 1\n\nline 3"

    def test_escaping_item_rejected_siblings_imported(self, tmp_path, commands_root):
        records = load_import_payload(orjson.dumps([
            {"name": "../../evil", "description": "x", "prompt": "y"},
            {"name": "good", "description": "fine"},
        ]))

        result = import_commands(commands_root, records)

        statuses = {o.name: o.status for o in result.outcomes}
        assert statuses == {"../../evil": ItemStatus.REJECTED, "good": ItemStatus.IMPORTED}
        assert isinstance(result.outcomes[0].error, PathEscapeError)
        assert list(tmp_path.rglob("evil*")) == []
        assert list_command_names(commands_root) == ["good"]

    def test_only_escaping_item_writes_zero_files(self, tmp_path, commands_root):
        records = load_import_payload(b'[{"name": "../../evil", "description": "x", "prompt": "y"}]')
        result = import_commands(commands_root, records)

        assert result.imported_count == 0
        assert result.outcomes[0].status is ItemStatus.REJECTED
        assert [p for p in tmp_path.rglob("*") if p.is_file()] == []

    def test_empty_name_rejected(self, commands_root):
        result = import_commands(commands_root, [CommandRecord(name="")])
        assert result.outcomes[0].status is ItemStatus.REJECTED

    def test_nul_in_name_rejected_siblings_imported(self, commands_root):
        records = load_import_payload(
            b'[{"name": "first", "description": "1"},'
            b' {"name": "bad\\u0000", "description": "2"},'
            b' {"name": "later", "description": "3"}]'
        )

        result = import_commands(commands_root, records)

        assert [o.status for o in result.outcomes] == [
            ItemStatus.IMPORTED, ItemStatus.REJECTED, ItemStatus.IMPORTED
        ]
        assert isinstance(result.outcomes[1].error, InvalidCommandNameError)
        assert sorted(list_command_names(commands_root)) == ["first", "later"]

    def test_dotdot_segment_rejected(self, commands_root):
        result = import_commands(commands_root, [CommandRecord(name="a/../b", description="d")])
        assert result.outcomes[0].status is ItemStatus.REJECTED
        assert list(commands_root.iterdir()) == []

    def test_conflict_without_resolver_fails_item(self, populated_root):
        result = import_commands(populated_root, [
            CommandRecord(name="hello", description="new"),
            CommandRecord(name="brand_new", description="n"),
        ])

        assert result.outcomes[0].status is ItemStatus.FAILED
        assert isinstance(result.outcomes[0].error, ConflictError)
        assert result.outcomes[1].status is ItemStatus.IMPORTED
        assert get_command(populated_root, "hello").description == "says hello"

    def test_overwrite_policy(self, populated_root):
        result = import_commands(
            populated_root, [CommandRecord(name="hello", description="new")], always(ConflictPolicy.OVERWRITE)
        )
        assert result.outcomes[0].status is ItemStatus.OVERWRITTEN
        assert get_command(populated_root, "hello").description == "new"

    def test_skip_policy(self, populated_root):
        result = import_commands(
            populated_root, [CommandRecord(name="hello", description="new")], always(ConflictPolicy.SKIP)
        )
        assert result.outcomes[0].status is ItemStatus.SKIPPED
        assert result.imported_count == 0
        assert get_command(populated_root, "hello").description == "says hello"

    def test_rename_policy(self, populated_root):
        resolver = lambda name: ConflictResolution(ConflictPolicy.RENAME, f"{name}_imported")
        result = import_commands(populated_root, [CommandRecord(name="git/commit", description="other")], resolver)

        outcome = result.outcomes[0]
        assert outcome.status is ItemStatus.RENAMED
        assert outcome.target_name == "git/commit_imported"
        assert get_command(populated_root, "git/commit_imported").description == "other"
        assert get_command(populated_root, "git/commit").description == "commits code"

    def test_rename_target_escape_rejected(self, tmp_path, populated_root):
        resolver = lambda name: ConflictResolution(ConflictPolicy.RENAME, "../../escaped")
        result = import_commands(populated_root, [CommandRecord(name="hello", description="x")], resolver)
        assert result.outcomes[0].status is ItemStatus.REJECTED
        assert not list(tmp_path.rglob("escaped*"))


def test_export_then_import_into_fresh_store(populated_root, tmp_path):
    exported = export_commands(populated_root, tmp_path / "export.json")
    fresh = tmp_path / "fresh" / "commands"

    result = import_commands(fresh, read_import_file(exported.path))

    assert result.imported_count == 3
    for name in ("hello", "git/commit", "git/review/pr"):
        assert get_command(fresh, name) == get_command(populated_root, name)
