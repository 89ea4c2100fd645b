# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.02
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/conftest.py

"""
Shared test fixtures for the gemcmd test suite.
"""

from pathlib import Path

import pytest

from gemcmd.core.store import CommandStore
from gemcmd.data.records import CommandRecord, encode_record


@pytest.fixture(autouse=True)
def isolated_user_env(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.gemini and ~/.config/gemcmd."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("GEMCMD_CONFIG_HOME", raising=False)
    monkeypatch.delenv("GEMCMD_COMMANDS_DIR", raising=False)
    return home


@pytest.fixture
def gemini_dir(tmp_path) -> Path:
    path = tmp_path / ".gemini"
    path.mkdir()
    return path


@pytest.fixture
def commands_root(gemini_dir) -> Path:
    """An existing, empty commands directory."""
    root = gemini_dir / "commands"
    root.mkdir()
    return root


@pytest.fixture
def store(commands_root) -> CommandStore:
    return CommandStore(commands_root)


def write_command(root: Path, name: str, description: str = "", prompt: str = "") -> Path:
    """Write a command file directly, bypassing the store."""
    path = Path(root).joinpath(*name.split("/")).with_suffix(".toml")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_record(CommandRecord(name=name, description=description, prompt=prompt)))
    return path


@pytest.fixture
def populated_root(commands_root) -> Path:
    """Commands directory with a flat command and two nested ones."""
    write_command(commands_root, "hello", "says hello", "Say hello to {{args}}.")
    write_command(commands_root, "git/commit", "commits code", "Write a commit message.")
    write_command(commands_root, "git/review/pr", "reviews a PR", "Review the diff.")
    return commands_root


@pytest.fixture
def make_command():
    return write_command
