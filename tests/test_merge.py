# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.15
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_merge.py

import pytest

from gemcmd.core.backup import snapshot_commands
from gemcmd.core.enumerator import list_command_names
from gemcmd.core.merge import (
    ConflictPolicy, ConflictResolution, ItemStatus, always, merge_all, merge_one
)
from gemcmd.core.mutations import get_command
from gemcmd.system.exceptions import (
    ConflictError, NotFoundError, PathEscapeError
)


@pytest.fixture
def backed_up_root(populated_root):
    """populated_root with a snapshot next to it; returns (root, backup_dir)."""
    return populated_root, snapshot_commands(populated_root).backup_dir


class TestMergeAll:
    def test_restores_deleted_and_overwrites_changed(self, backed_up_root, make_command):
        root, backup_dir = backed_up_root
        (root / "hello.toml").unlink()
        make_command(root, "git/commit", "edited since backup")
        make_command(root, "local/only", "not in backup")

        result = merge_all(backup_dir, root)

        assert result.ok
        assert result.copied == 3
        assert set(list_command_names(root)) == {"hello", "git/commit", "git/review/pr", "local/only"}
        assert get_command(root, "git/commit").description == "commits code"

    def test_creates_missing_destination(self, backed_up_root, tmp_path):
        _, backup_dir = backed_up_root
        fresh = tmp_path / "fresh" / "commands"

        result = merge_all(backup_dir, fresh)

        assert result.directories_created == 2
        assert set(list_command_names(fresh)) == {"hello", "git/commit", "git/review/pr"}

    def test_missing_source(self, tmp_path, commands_root):
        with pytest.raises(NotFoundError):
            merge_all(tmp_path / "no_backup", commands_root)

    def test_symlinked_destination_directory_skipped(self, tmp_path, backed_up_root):
        root, backup_dir = backed_up_root
        outside = tmp_path / "outside"
        outside.mkdir()
        (root / "git" / "commit.toml").unlink()
        (root / "git" / "review" / "pr.toml").unlink()
        (root / "git" / "review").rmdir()
        (root / "git").rmdir()
        (root / "git").symlink_to(outside, target_is_directory=True)

        result = merge_all(backup_dir, root)

        assert list(outside.iterdir()) == []
        assert result.skipped == 1
        assert isinstance(result.errors[0], PathEscapeError)
        assert (root / "hello.toml").is_file()
        assert not result.ok

    def test_source_symlinks_not_followed(self, tmp_path, backed_up_root):
        root, backup_dir = backed_up_root
        secret = tmp_path / "secret.toml"
        secret.write_text('description = "private"\n')
        (backup_dir / "planted.toml").symlink_to(secret)

        result = merge_all(backup_dir, root)

        assert not (root / "planted.toml").exists()
        assert result.ok


class TestMergeOne:
    def test_restores_missing_command(self, backed_up_root):
        root, backup_dir = backed_up_root
        (root / "git" / "review" / "pr.toml").unlink()

        outcome = merge_one(backup_dir, root, "git/review/pr")

        assert outcome.status is ItemStatus.IMPORTED
        assert outcome.written
        assert (root / "git" / "review" / "pr.toml").is_file()

    def test_conflict_without_resolver_raises(self, backed_up_root):
        root, backup_dir = backed_up_root
        with pytest.raises(ConflictError):
            merge_one(backup_dir, root, "hello")

    def test_overwrite(self, backed_up_root, make_command):
        root, backup_dir = backed_up_root
        make_command(root, "hello", "changed")

        outcome = merge_one(backup_dir, root, "hello", always(ConflictPolicy.OVERWRITE))

        assert outcome.status is ItemStatus.OVERWRITTEN
        assert get_command(root, "hello").description == "says hello"

    def test_skip(self, backed_up_root, make_command):
        root, backup_dir = backed_up_root
        make_command(root, "hello", "changed")

        outcome = merge_one(backup_dir, root, "hello", always(ConflictPolicy.SKIP))

        assert outcome.status is ItemStatus.SKIPPED
        assert not outcome.written
        assert get_command(root, "hello").description == "changed"

    def test_rename(self, backed_up_root):
        root, backup_dir = backed_up_root
        asked = []

        def resolver(name):
            asked.append(name)
            return ConflictResolution(ConflictPolicy.RENAME, "hello_restored")

        outcome = merge_one(backup_dir, root, "hello", resolver)

        assert asked == ["hello"]
        assert outcome.status is ItemStatus.RENAMED
        assert outcome.target_name == "hello_restored"
        assert get_command(root, "hello_restored").description == "says hello"

    def test_rename_target_escape_rejected(self, tmp_path, backed_up_root):
        root, backup_dir = backed_up_root
        resolver = lambda name: ConflictResolution(ConflictPolicy.RENAME, "../../escaped")
        with pytest.raises(PathEscapeError):
            merge_one(backup_dir, root, "hello", resolver)
        assert not (tmp_path / "escaped.toml").exists()

    def test_not_in_backup(self, backed_up_root):
        root, backup_dir = backed_up_root
        with pytest.raises(NotFoundError):
            merge_one(backup_dir, root, "ghost")

    def test_escaping_name(self, backed_up_root):
        root, backup_dir = backed_up_root
        with pytest.raises(PathEscapeError):
            merge_one(backup_dir, root, "../commands/hello")


def test_always_refuses_rename():
    with pytest.raises(ValueError):
        always(ConflictPolicy.RENAME)
