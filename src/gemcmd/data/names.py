# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.09
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/data/names.py

"""
Command names <-> relative file locations.

A command name like ``git/commit`` maps to ``git/commit.toml`` under the
namespace root: every segment but the last is a directory, the last one is
the file stem.
"""

from pathlib import Path
from typing import Final

from gemcmd.system.exceptions import InvalidCommandNameError

COMMAND_SUFFIX: Final = ".toml"
NAME_SEPARATOR: Final = "/"


def split_command_name(name: str) -> tuple[tuple[str, ...], str]:
    """Split a command name into (directory segments, leaf).

    Raises:
        InvalidCommandNameError: If the name or its leaf is empty, or the name
            contains a NUL character
    """
    if not name:
        raise InvalidCommandNameError(name)
    if "\x00" in name:
        raise InvalidCommandNameError(name, "command name must not contain a NUL character")

    parts = name.split(NAME_SEPARATOR)
    leaf = parts.pop()
    if not leaf:
        raise InvalidCommandNameError(name, "command name must not end with '/'")
    return tuple(parts), leaf


def command_file_name(leaf: str) -> str:
    return f"{leaf}{COMMAND_SUFFIX}"


def relative_command_path(name: str) -> Path:
    """Relative on-disk location of a command, before any confinement check."""
    dirs, leaf = split_command_name(name)
    return Path(*dirs, command_file_name(leaf))


def command_name_from_path(root: Path, file_path: Path) -> str:
    """Recover the original '/'-joined command name from a file under root."""
    relative = Path(file_path).relative_to(root)
    posix = relative.as_posix()
    if posix.endswith(COMMAND_SUFFIX):
        posix = posix[:-len(COMMAND_SUFFIX)]
    return posix


def is_command_file(file_name: str) -> bool:
    return file_name.endswith(COMMAND_SUFFIX)
