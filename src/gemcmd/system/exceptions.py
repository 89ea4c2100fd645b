# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.08
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/system/exceptions.py

"""
Command-store exception classes.

Single-item operations (add, delete, rename, merge_one) raise these directly;
batch operations (enumeration, merge_all, import) collect them per item and
keep going.
"""

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class CommandStoreError(Exception):
    """Base exception for all command-store errors."""
    pass


class ConfigError(CommandStoreError):
    """Raised when the user configuration cannot be loaded or validated."""
    pass


# === NAME AND PATH ERRORS ===

class InvalidCommandNameError(CommandStoreError):
    """Raised when a command name is empty or has an empty leaf segment."""

    def __init__(self, name: str, reason: str = "command name cannot be empty"):
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid command name {name!r}: {reason}")


class PathEscapeError(CommandStoreError):
    """Raised when a name resolves outside its namespace root.

    Always terminal for the item: the caller aborts, nothing is sanitized.
    """

    def __init__(self, name: str, root: PathLike):
        self.name = name
        self.root = Path(root)
        super().__init__(
            f"Command path {name!r} must stay inside the commands directory: {self.root}"
        )


# === STORE STATE ERRORS ===

class NotFoundError(CommandStoreError):
    """Raised when an expected command file or directory is absent."""

    def __init__(self, message: str, path: Optional[PathLike] = None):
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class ConflictError(CommandStoreError):
    """Raised when the destination already exists and no policy was given."""

    def __init__(self, name: str, path: PathLike):
        self.name = name
        self.path = Path(path)
        super().__init__(f"Command '{name}' already exists")


# === CONTENT ERRORS ===

class ParseError(CommandStoreError):
    """Malformed record content in a single command file."""

    def __init__(self, path: Optional[PathLike], message: str):
        self.path = Path(path) if path is not None else None
        self.message = message
        where = str(self.path) if self.path is not None else "<record>"
        super().__init__(f"Error parsing {where}: {message}")


class InvalidPayloadError(CommandStoreError):
    """Bulk-import input is not a list of command objects. Terminal for the import."""
    pass


# === FILESYSTEM ERRORS ===

class StoreIOError(CommandStoreError):
    """Underlying read/write/copy/remove failure, reported with the offending path."""

    def __init__(self, message: str, path: Optional[PathLike] = None):
        self.path = Path(path) if path is not None else None
        super().__init__(message)
